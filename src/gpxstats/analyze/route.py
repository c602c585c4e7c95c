# gpxstats/analyze/route.py
"""
Route model for gpxstats

A Route is built once from an ordered list of raw fixes (or a GPX <rte>
document) and is immutable afterwards. Granularity is fixed at construction;
there is deliberately no way to change it and re-derive the retained model.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Iterator, Optional, Union
from xml.etree import ElementTree as ET

from gpxstats.analyze import lookup, statistics
from gpxstats.analyze.ingest import IngestReport, RetainedSequence, ingest_route
from gpxstats.errors import FrozenModelError, PositionIndexError
from gpxstats.formats.gpx import GpxPath, RawFix, extract_route, parse_gpx, read_gpx
from gpxstats.geo.location import LocationMatcher
from gpxstats.geo.position import Position

logger = logging.getLogger(__name__)


class Route:
    """Retained positions of a GPS route with derived statistics and lookups."""

    kind = "Route"

    # Overridden by Track
    _ingest = staticmethod(ingest_route)
    _extract = staticmethod(extract_route)

    def __init__(
        self,
        fixes: Iterable[RawFix],
        granularity: float,
        name: str = "",
        *,
        source: Optional[str] = None,
    ):
        """
        Ingest `fixes` in order, merging consecutive fixes closer than
        `granularity` metres to the last retained position.

        Raises:
          DocumentError for structurally invalid fixes (e.g. a track fix
          without a time). No partially built object is returned.
        """
        matcher = LocationMatcher(granularity)
        seq, report = type(self)._ingest(fixes, matcher)

        object.__setattr__(self, "_matcher", matcher)
        object.__setattr__(self, "_seq", seq)
        object.__setattr__(self, "_report", report)
        object.__setattr__(self, "_route_name", name or "")
        object.__setattr__(self, "_source", source)

        logger.info(
            "%s %r: %d positions retained, %d ignored (granularity %.2fm)",
            self.kind,
            self.name,
            report.retained_count,
            report.discarded_count,
            granularity,
        )

    def __setattr__(self, attr, value):
        raise FrozenModelError(
            f"{self.kind} is immutable; cannot set {attr!r} after construction"
        )

    def __delattr__(self, attr):
        raise FrozenModelError(
            f"{self.kind} is immutable; cannot delete {attr!r}"
        )

    # ---------------------------
    # Alternate constructors
    # ---------------------------
    @classmethod
    def from_document(cls, root: ET.Element, granularity: float, *, source: Optional[str] = None):
        path: GpxPath = cls._extract(root)
        return cls(path.fixes, granularity, path.name, source=source)

    @classmethod
    def from_string(cls, text: str, granularity: float):
        return cls.from_document(parse_gpx(text), granularity)

    @classmethod
    def from_file(cls, path: Union[str, Path], granularity: float):
        path = Path(path)
        return cls.from_document(read_gpx(path), granularity, source=str(path))

    # ---------------------------
    # Model access
    # ---------------------------
    @property
    def name(self) -> str:
        return self._route_name or f"Unnamed {self.kind}"

    @property
    def granularity(self) -> float:
        return self._matcher.granularity

    @property
    def matcher(self) -> LocationMatcher:
        return self._matcher

    @property
    def sequence(self) -> RetainedSequence:
        return self._seq

    @property
    def ingest_report(self) -> IngestReport:
        return self._report

    def num_positions(self) -> int:
        return len(self._seq.positions)

    def __len__(self) -> int:
        return self.num_positions()

    def __iter__(self) -> Iterator[Position]:
        return iter(self._seq.positions)

    def __getitem__(self, idx: int) -> Position:
        try:
            return self._seq.positions[idx]
        except IndexError:
            raise PositionIndexError(
                f"Position index {idx} out of range ({self.num_positions()} positions)"
            ) from None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, positions={self.num_positions()})"

    # ---------------------------
    # Statistics
    # ---------------------------
    def total_length(self) -> float:
        return statistics.total_length(self._seq)

    def net_length(self) -> float:
        return statistics.net_length(self._seq, self._matcher)

    def total_height_gain(self) -> float:
        return statistics.total_height_gain(self._seq)

    def net_height_gain(self) -> float:
        return statistics.net_height_gain(self._seq)

    def min_latitude(self) -> float:
        return statistics.min_latitude(self._seq)

    def max_latitude(self) -> float:
        return statistics.max_latitude(self._seq)

    def min_longitude(self) -> float:
        return statistics.min_longitude(self._seq)

    def max_longitude(self) -> float:
        return statistics.max_longitude(self._seq)

    def min_elevation(self) -> float:
        return statistics.min_elevation(self._seq)

    def max_elevation(self) -> float:
        return statistics.max_elevation(self._seq)

    def max_gradient(self) -> float:
        return statistics.max_gradient(self._seq)

    def min_gradient(self) -> float:
        return statistics.min_gradient(self._seq)

    def steepest_gradient(self) -> float:
        return statistics.steepest_gradient(self._seq)

    # ---------------------------
    # Lookups
    # ---------------------------
    def find_position(self, name: str) -> Position:
        return lookup.find_position(self._seq, name)

    def find_name_of(self, position: Position) -> str:
        return lookup.find_name_of(self._seq, position, self._matcher)

    def times_visited(self, target: Union[str, Position]) -> int:
        return lookup.times_visited(self._seq, target, self._matcher)

    # ---------------------------
    # Report
    # ---------------------------
    def build_report(self) -> str:
        """Human-readable log of how the retained model was built."""
        lines = []
        if self._source is not None:
            lines.append(f"Source file '{self._source}' opened okay.")
        if self._route_name:
            lines.append(f"{self.kind} name is: {self._route_name}")
        lines.extend(self._report.lines())
        return "\n".join(lines) + "\n"


def summarize_route(route: Route) -> dict:
    """Headline numbers for reports; an empty route only reports its counts."""
    report = route.ingest_report
    stats = {
        "name": route.name,
        "points": report.retained_count,
        "discarded": report.discarded_count,
    }
    if not len(route):
        return stats

    stats.update({
        "distance_m": route.total_length(),
        "net_distance_m": route.net_length(),
        "height_gain_m": route.total_height_gain(),
        "steepest_gradient_deg": route.steepest_gradient(),
    })
    return stats


def analyze_route(gpx_path: Path, granularity: float) -> dict:
    return summarize_route(Route.from_file(gpx_path, granularity))
