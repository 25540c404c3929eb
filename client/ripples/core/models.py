"""Ripples client — core data models.

These are plain frozen dataclasses with no framework dependencies.
JSON payloads are converted to/from these at the transport boundary.
"""

from __future__ import annotations

import math
import time
from dataclasses import dataclass, field


@dataclass(frozen=True)
class PositionFix:
    latitude: float
    longitude: float
    timestamp: float = field(default_factory=time.time)
    accuracy_m: float = 0.0


@dataclass(frozen=True)
class LocationReport:
    user_id: str
    longitude: float
    latitude: float
    party_mode: bool = False

    @classmethod
    def from_fix(cls, fix: PositionFix, user_id: str, party_mode: bool) -> LocationReport:
        return cls(
            user_id=user_id,
            longitude=fix.longitude,
            latitude=fix.latitude,
            party_mode=party_mode,
        )

    def to_json(self) -> dict:
        return {
            "userID": self.user_id,
            "location": {
                "longitude": self.longitude,
                "latitude": self.latitude,
            },
            "partyMode": self.party_mode,
        }


@dataclass(frozen=True)
class RippleSummary:
    id: str
    origin_longitude: float
    origin_latitude: float
    member_count: int

    @property
    def radius_m(self) -> float:
        """Display radius in metres, growing logarithmically with membership."""
        return 10 * math.log(max(self.member_count, 1)) + 50

    def to_json(self) -> dict:
        return {
            "id": self.id,
            "origin": {
                "longitude": self.origin_longitude,
                "latitude": self.origin_latitude,
            },
            "member_count": self.member_count,
            "radius_m": round(self.radius_m, 1),
        }


@dataclass(frozen=True)
class ServerResponse:
    nearby_ripples: tuple[RippleSummary, ...] = ()
    message: str | None = None
    joined_ripple_id: str | None = None

    @property
    def signals_nearby(self) -> bool:
        return self.message is not None and "nearby" in self.message.casefold()


@dataclass(frozen=True)
class RippleState:
    nearby_ripples: tuple[RippleSummary, ...] = ()
    current_ripple_id: str | None = None
    show_joined_transient: bool = False
    last_error: str | None = None
    updated_at: float = 0.0

    def to_json(self) -> dict:
        return {
            "nearby_ripples": [r.to_json() for r in self.nearby_ripples],
            "current_ripple_id": self.current_ripple_id,
            "show_joined_transient": self.show_joined_transient,
            "last_error": self.last_error,
        }
