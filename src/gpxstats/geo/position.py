# gpxstats/geo/position.py
"""
Geodesy primitives for gpxstats

A Position is a plain coordinate value. Equality is structural (same numbers);
"same place" decisions live in gpxstats.geo.location and never use ==.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from haversine import haversine, Unit


@dataclass(frozen=True)
class Position:
    latitude: float
    longitude: float
    elevation: float = 0.0

    def __str__(self) -> str:
        return (
            f"lat {self.latitude:.6f}, lon {self.longitude:.6f}, "
            f"ele {self.elevation:.1f}m"
        )


def distance_between(p1: Position, p2: Position) -> float:
    """Great-circle horizontal distance in metres (elevation ignored)."""
    return haversine(
        (p1.latitude, p1.longitude),
        (p2.latitude, p2.longitude),
        unit=Unit.METERS,
    )


def distance_3d(p1: Position, p2: Position) -> float:
    """
    Straight-line segment length in metres.

    Hypotenuse of the horizontal great-circle distance and the elevation delta.
    """
    return math.hypot(distance_between(p1, p2), p2.elevation - p1.elevation)


def gradient(p1: Position, p2: Position) -> float:
    """Signed slope of the segment p1 -> p2, in degrees (positive = uphill)."""
    return math.degrees(
        math.atan2(p2.elevation - p1.elevation, distance_between(p1, p2))
    )
