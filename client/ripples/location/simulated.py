"""Random-walk geolocation source for development and load simulation."""

from __future__ import annotations

import asyncio
import math
import random
import time
from dataclasses import dataclass

import structlog

from ripples.core.models import PositionFix
from ripples.location.channel import LatestFixChannel

log = structlog.get_logger()


@dataclass
class Walker:
    lat: float
    lon: float
    bearing: float
    speed_mps: float

    def step(self, dt_seconds: float, rng: random.Random) -> None:
        """Move along the current bearing, with random turns."""
        self.bearing = (self.bearing + rng.uniform(-30, 30)) % 360

        # Walking pace, 0.5-2.5 m/s
        self.speed_mps = max(0.5, min(2.5, self.speed_mps + rng.uniform(-0.3, 0.3)))

        distance_m = self.speed_mps * dt_seconds
        bearing_rad = math.radians(self.bearing)

        # Approximate: 1 degree latitude ~ 111,000 m
        dlat = (distance_m * math.cos(bearing_rad)) / 111_000
        dlon = (distance_m * math.sin(bearing_rad)) / (111_000 * math.cos(math.radians(self.lat)))

        self.lat += dlat
        self.lon += dlon


class SimulatedLocationSource:
    """Publishes a random-walk fix into a channel every ``interval_seconds``."""

    def __init__(
        self,
        channel: LatestFixChannel,
        center: tuple[float, float],
        interval_seconds: float = 1.0,
        radius_m: float = 200.0,
        seed: int | None = None,
    ) -> None:
        self._channel = channel
        self._interval = interval_seconds
        self._rng = random.Random(seed)

        angle = self._rng.uniform(0, 2 * math.pi)
        dist_km = self._rng.uniform(0, radius_m / 1000)
        lat = center[0] + (dist_km / 111.0) * math.cos(angle)
        lon = center[1] + (dist_km / (111.0 * math.cos(math.radians(center[0])))) * math.sin(angle)
        self.walker = Walker(
            lat=lat,
            lon=lon,
            bearing=self._rng.uniform(0, 360),
            speed_mps=self._rng.uniform(0.8, 1.8),
        )

    def next_fix(self) -> PositionFix:
        self.walker.step(self._interval, self._rng)
        return PositionFix(
            latitude=self.walker.lat,
            longitude=self.walker.lon,
            timestamp=time.time(),
            accuracy_m=round(self._rng.uniform(3, 15), 1),
        )

    async def run(self) -> None:
        """Publish fixes until the channel is closed."""
        log.info("simulated_source_started", lat=round(self.walker.lat, 5),
                 lon=round(self.walker.lon, 5), interval=self._interval)
        while not self._channel.closed:
            self._channel.publish(self.next_fix())
            await asyncio.sleep(self._interval)
