# gpxstats/analyze/lookup.py
"""
Name and position lookups over a RetainedSequence.

Position matching uses the same LocationMatcher that drove ingestion, so a
query position only has to be within granularity of a retained one.
"""

from __future__ import annotations

from typing import Union

from gpxstats.analyze.ingest import RetainedSequence
from gpxstats.errors import NotFoundError
from gpxstats.geo.location import LocationMatcher
from gpxstats.geo.position import Position


def find_position(seq: RetainedSequence, name: str) -> Position:
    """First retained position whose name is exactly `name`."""
    for pos, pos_name in zip(seq.positions, seq.names):
        if pos_name == name:
            return pos
    raise NotFoundError(f"No position named {name!r} found.")


def find_name_of(seq: RetainedSequence, position: Position, matcher: LocationMatcher) -> str:
    for pos, pos_name in zip(seq.positions, seq.names):
        if matcher.same_location(pos, position):
            return pos_name
    raise NotFoundError(f"Position not found: {position}")


def times_visited(
    seq: RetainedSequence,
    target: Union[str, Position],
    matcher: LocationMatcher,
) -> int:
    """
    Count retained positions at the same location as `target`.

    A name is resolved with find_position first; an unknown name counts 0.
    """
    if isinstance(target, str):
        try:
            target = find_position(seq, target)
        except NotFoundError:
            return 0
    return sum(1 for pos in seq.positions if matcher.same_location(pos, target))
