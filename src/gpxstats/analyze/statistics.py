# gpxstats/analyze/statistics.py
"""
Derived statistics over a frozen RetainedSequence.

All functions are pure and read-only. Each raises EmptySequenceError when the
sequence holds no positions. Time-based functions expect a timed (track)
sequence; on an untimed sequence they raise EmptySequenceError as well, since
there is no timeline to read.
"""

from __future__ import annotations

from gpxstats.analyze.ingest import RetainedSequence
from gpxstats.errors import EmptySequenceError, TimelineError
from gpxstats.geo.location import LocationMatcher
from gpxstats.geo.position import distance_3d, distance_between, gradient


def _require_positions(seq: RetainedSequence, what: str) -> None:
    if not seq.positions:
        raise EmptySequenceError(f"Cannot get the {what} of an empty sequence")


def _require_timeline(seq: RetainedSequence, what: str) -> None:
    if not seq.departed:
        raise EmptySequenceError(f"Cannot get the {what} without a timeline")


def _segments(seq: RetainedSequence):
    return zip(seq.positions, seq.positions[1:])


# ---------------------------
# Length
# ---------------------------
def total_length(seq: RetainedSequence) -> float:
    _require_positions(seq, "total length")
    return seq.cumulative_length


def net_length(seq: RetainedSequence, matcher: LocationMatcher) -> float:
    _require_positions(seq, "net length")
    first, last = seq.positions[0], seq.positions[-1]
    if matcher.same_location(first, last):
        return 0.0
    return distance_between(first, last)


# ---------------------------
# Elevation
# ---------------------------
def total_height_gain(seq: RetainedSequence) -> float:
    """Sum of the climbs only; descents are ignored, not subtracted."""
    _require_positions(seq, "total height gain")
    return sum(
        max(p1.elevation - p0.elevation, 0.0) for p0, p1 in _segments(seq)
    )


def net_height_gain(seq: RetainedSequence) -> float:
    _require_positions(seq, "net height gain")
    return max(seq.positions[-1].elevation - seq.positions[0].elevation, 0.0)


# ---------------------------
# Extrema
# ---------------------------
def min_latitude(seq: RetainedSequence) -> float:
    _require_positions(seq, "minimum latitude")
    return min(p.latitude for p in seq.positions)


def max_latitude(seq: RetainedSequence) -> float:
    _require_positions(seq, "maximum latitude")
    return max(p.latitude for p in seq.positions)


def min_longitude(seq: RetainedSequence) -> float:
    _require_positions(seq, "minimum longitude")
    return min(p.longitude for p in seq.positions)


def max_longitude(seq: RetainedSequence) -> float:
    _require_positions(seq, "maximum longitude")
    return max(p.longitude for p in seq.positions)


def min_elevation(seq: RetainedSequence) -> float:
    _require_positions(seq, "minimum elevation")
    return min(p.elevation for p in seq.positions)


def max_elevation(seq: RetainedSequence) -> float:
    _require_positions(seq, "maximum elevation")
    return max(p.elevation for p in seq.positions)


# ---------------------------
# Gradients (degrees)
# ---------------------------
def _gradients(seq: RetainedSequence) -> list[float]:
    return [gradient(p0, p1) for p0, p1 in _segments(seq)]


def max_gradient(seq: RetainedSequence) -> float:
    """Largest signed segment gradient; negative when every segment descends."""
    _require_positions(seq, "maximum gradient")
    return max(_gradients(seq), default=0.0)


def min_gradient(seq: RetainedSequence) -> float:
    _require_positions(seq, "minimum gradient")
    return min(_gradients(seq), default=0.0)


def steepest_gradient(seq: RetainedSequence) -> float:
    _require_positions(seq, "steepest gradient")
    return max((abs(g) for g in _gradients(seq)), default=0.0)


# ---------------------------
# Time (seconds)
# ---------------------------
def total_time(seq: RetainedSequence) -> int:
    _require_positions(seq, "total time")
    _require_timeline(seq, "total time")
    return seq.departed[-1]


def resting_time(seq: RetainedSequence) -> int:
    _require_positions(seq, "resting time")
    _require_timeline(seq, "resting time")
    return sum(d - a for a, d in zip(seq.arrived, seq.departed))


def travelling_time(seq: RetainedSequence) -> int:
    # Equal to sum(_travel_times(seq)) because arrived[0] == 0.
    return total_time(seq) - resting_time(seq)


def _travel_times(seq: RetainedSequence) -> list[int]:
    return [a - d for d, a in zip(seq.departed, seq.arrived[1:])]


# ---------------------------
# Speeds (metres / second)
# ---------------------------
def _max_rate(seq: RetainedSequence, what: str, measure) -> float:
    _require_positions(seq, what)
    _require_timeline(seq, what)

    best = 0.0
    for i, ((p0, p1), dt) in enumerate(zip(_segments(seq), _travel_times(seq)), start=1):
        if dt == 0:
            raise TimelineError(
                f"Cannot get the {what}: no travel time between positions {i - 1} and {i}"
            )
        best = max(best, measure(p0, p1) / dt)
    return best


def max_speed(seq: RetainedSequence) -> float:
    return _max_rate(seq, "maximum speed", distance_3d)


def max_rate_of_ascent(seq: RetainedSequence) -> float:
    return _max_rate(
        seq, "maximum rate of ascent", lambda p0, p1: p1.elevation - p0.elevation
    )


def max_rate_of_descent(seq: RetainedSequence) -> float:
    return _max_rate(
        seq, "maximum rate of descent", lambda p0, p1: p0.elevation - p1.elevation
    )


def average_speed(seq: RetainedSequence, include_rests: bool = True) -> float:
    divisor = total_time(seq) if include_rests else travelling_time(seq)
    if divisor == 0:
        return 0.0
    return total_length(seq) / divisor
