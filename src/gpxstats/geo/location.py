# gpxstats/geo/location.py
"""
Tolerance-based position identity.

Two fixes closer together than the configured granularity are treated as the
same place. Every identity decision in gpxstats (ingestion merges, name
lookups, visit counts) goes through a LocationMatcher.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from gpxstats.geo.position import Position, distance_between


@dataclass(frozen=True)
class LocationMatcher:
    """
    Same-location predicate with a fixed granularity (metres).

    same_location(p1, p2) is true when the horizontal distance is strictly
    below the granularity. A granularity of 0 only merges coincident positions.
    """

    granularity: float

    def __post_init__(self) -> None:
        if not math.isfinite(self.granularity) or self.granularity < 0:
            raise ValueError(f"granularity must be a finite value >= 0 metres, got {self.granularity}")

    def same_location(self, p1: Position, p2: Position) -> bool:
        d = distance_between(p1, p2)
        if self.granularity == 0:
            return d == 0.0
        return d < self.granularity

    __call__ = same_location
