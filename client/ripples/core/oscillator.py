"""Free-running scale oscillator used to pulse ripple overlays.

The scale climbs by ``step`` each tick until it reaches the upper bound,
then falls back to the lower bound, and so on. Values are clamped to the
bounds, so a step that does not divide the range evenly still never leaves
[lower_bound, upper_bound].
"""

from __future__ import annotations

import asyncio
import enum
from dataclasses import dataclass

import structlog

log = structlog.get_logger()


class Direction(enum.Enum):
    ASCENDING = "ascending"
    DESCENDING = "descending"


@dataclass(frozen=True)
class OscillatorState:
    scale: float
    direction: Direction


class Oscillator:
    def __init__(
        self,
        lower_bound: float = 0.5,
        upper_bound: float = 2.0,
        step: float = 0.02,
        tick_seconds: float = 0.025,
    ) -> None:
        if lower_bound >= upper_bound:
            raise ValueError(f"lower_bound {lower_bound} must be below upper_bound {upper_bound}")
        if step <= 0:
            raise ValueError(f"step must be positive, got {step}")
        if tick_seconds <= 0:
            raise ValueError(f"tick_seconds must be positive, got {tick_seconds}")
        self.lower_bound = lower_bound
        self.upper_bound = upper_bound
        self.step = step
        self.tick_seconds = tick_seconds
        self._state = OscillatorState(scale=lower_bound, direction=Direction.ASCENDING)

    @property
    def state(self) -> OscillatorState:
        return self._state

    @property
    def scale(self) -> float:
        return self._state.scale

    def tick(self) -> OscillatorState:
        """Advance one step, reversing direction at either bound."""
        scale, direction = self._state.scale, self._state.direction
        if direction is Direction.ASCENDING:
            scale = scale + self.step
            if scale >= self.upper_bound:
                scale = self.upper_bound
                direction = Direction.DESCENDING
        else:
            scale = scale - self.step
            if scale <= self.lower_bound:
                scale = self.lower_bound
                direction = Direction.ASCENDING
        self._state = OscillatorState(scale=scale, direction=direction)
        return self._state

    def advance(self, ticks: int) -> OscillatorState:
        for _ in range(ticks):
            self.tick()
        return self._state

    async def run(self) -> None:
        """Tick forever on a fixed period. Runs as a background task."""
        log.info("oscillator_started", lower=self.lower_bound,
                 upper=self.upper_bound, tick_seconds=self.tick_seconds)
        while True:
            await asyncio.sleep(self.tick_seconds)
            self.tick()
