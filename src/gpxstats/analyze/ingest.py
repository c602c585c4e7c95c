# gpxstats/analyze/ingest.py
"""
Incremental ingestion and merge of raw fixes.

One forward pass turns an ordered list of RawFix records into a frozen
RetainedSequence. Each fix is compared with the last *retained* position:

- same location  -> discarded; for tracks the last entry's departure time moves
                    forward (this is how resting time accrues)
- new location   -> retained; path length grows by the 3-D segment distance

Slow drift across many near-duplicate fixes therefore collapses onto one
waypoint instead of creeping forward one marginal comparison at a time.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from gpxstats.errors import DocumentError
from gpxstats.formats.gpx import RawFix
from gpxstats.geo.location import LocationMatcher
from gpxstats.geo.position import Position, distance_3d

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetainedSequence:
    positions: tuple[Position, ...]
    names: tuple[str, ...]
    cumulative_length: float
    arrived: tuple[int, ...] = ()
    departed: tuple[int, ...] = ()

    @property
    def timed(self) -> bool:
        return bool(self.arrived)

    def __len__(self) -> int:
        return len(self.positions)


def recompute_length(positions: Iterable[Position]) -> float:
    """Sum of consecutive 3-D segment distances, computed from scratch."""
    pts = list(positions)
    return sum(distance_3d(p0, p1) for p0, p1 in zip(pts, pts[1:]))


# ---------------------------------------------------------------------------
# Report
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class FixDecision:
    position: Position
    retained: bool
    elapsed: Optional[int] = None


@dataclass(frozen=True)
class IngestReport:
    """Per-fix merge decisions, in input order."""

    decisions: tuple[FixDecision, ...] = ()

    @property
    def retained_count(self) -> int:
        return sum(1 for d in self.decisions if d.retained)

    @property
    def discarded_count(self) -> int:
        return sum(1 for d in self.decisions if not d.retained)

    def lines(self) -> list[str]:
        out = []
        for d in self.decisions:
            verb = "added" if d.retained else "ignored"
            line = f"Position {verb}: {d.position}"
            if d.elapsed is not None:
                line += f" at time: {d.elapsed}"
            out.append(line)
        out.append(
            f"{self.retained_count} positions added, {self.discarded_count} ignored."
        )
        return out


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------
class SequenceBuilder:
    """
    Growable retained sequence plus running path length.

    retain() and extend_last() are the only mutators; freeze() hands out the
    immutable result.
    """

    def __init__(self, *, timed: bool = False):
        self._timed = timed
        self._positions: list[Position] = []
        self._names: list[str] = []
        self._arrived: list[int] = []
        self._departed: list[int] = []
        self._length = 0.0

    @property
    def last(self) -> Optional[Position]:
        return self._positions[-1] if self._positions else None

    def retain(self, position: Position, name: str = "", elapsed: Optional[int] = None) -> None:
        if self._positions:
            self._length += distance_3d(self._positions[-1], position)
        self._positions.append(position)
        self._names.append(name)
        if self._timed:
            self._arrived.append(elapsed)
            self._departed.append(elapsed)

    def extend_last(self, elapsed: int) -> None:
        """Record that the traveller was still at the last position at `elapsed`."""
        self._departed[-1] = elapsed

    def freeze(self) -> RetainedSequence:
        return RetainedSequence(
            positions=tuple(self._positions),
            names=tuple(self._names),
            cumulative_length=self._length,
            arrived=tuple(self._arrived),
            departed=tuple(self._departed),
        )


def _position_of(fix: RawFix) -> Position:
    if fix.elevation is None:
        return Position(fix.latitude, fix.longitude)
    return Position(fix.latitude, fix.longitude, fix.elevation)


# ---------------------------------------------------------------------------
# Forward passes
# ---------------------------------------------------------------------------
def ingest_route(
    fixes: Iterable[RawFix], matcher: LocationMatcher
) -> tuple[RetainedSequence, IngestReport]:
    """Merge untimed fixes into a retained sequence."""
    builder = SequenceBuilder()
    decisions: list[FixDecision] = []

    for fix in fixes:
        pos = _position_of(fix)
        last = builder.last
        if last is not None and matcher.same_location(last, pos):
            logger.debug("Position ignored: %s", pos)
            decisions.append(FixDecision(pos, retained=False))
            continue
        builder.retain(pos, fix.name or "")
        logger.debug("Position added: %s", pos)
        decisions.append(FixDecision(pos, retained=True))

    return builder.freeze(), IngestReport(tuple(decisions))


def ingest_track(
    fixes: Iterable[RawFix], matcher: LocationMatcher
) -> tuple[RetainedSequence, IngestReport]:
    """
    Merge timestamped fixes into a retained sequence with arrival/departure times.

    Elapsed time is measured from the first fix. Raises DocumentError for a fix
    without a time, or one earlier than the fix before it.
    """
    builder = SequenceBuilder(timed=True)
    decisions: list[FixDecision] = []
    epoch: Optional[int] = None
    previous: Optional[int] = None

    for fix in fixes:
        if fix.time is None:
            raise DocumentError("No 'time' element.")
        if previous is not None and fix.time < previous:
            raise DocumentError(
                f"Time {fix.time} is earlier than the preceding fix ({previous})."
            )
        previous = fix.time
        if epoch is None:
            epoch = fix.time
        elapsed = fix.time - epoch

        pos = _position_of(fix)
        last = builder.last
        if last is not None and matcher.same_location(last, pos):
            # Still at the same place: we haven't departed yet.
            builder.extend_last(elapsed)
            logger.debug("Position ignored: %s at %ss", pos, elapsed)
            decisions.append(FixDecision(pos, retained=False, elapsed=elapsed))
            continue
        builder.retain(pos, fix.name or "", elapsed)
        logger.debug("Position added: %s at %ss", pos, elapsed)
        decisions.append(FixDecision(pos, retained=True, elapsed=elapsed))

    return builder.freeze(), IngestReport(tuple(decisions))
