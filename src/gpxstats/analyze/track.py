# gpxstats/analyze/track.py
"""
Track analysis for gpxstats

A Track is a Route whose fixes carry timestamps. Merged fixes extend the
departure time of the last retained position, so time spent at one spot is
counted as resting time rather than travel.
"""

from __future__ import annotations

from pathlib import Path

from gpxstats.analyze import statistics
from gpxstats.analyze.ingest import ingest_track
from gpxstats.analyze.route import Route, summarize_route
from gpxstats.formats.gpx import extract_track
from gpxstats.geo.position import distance_3d


class Track(Route):
    """Timestamped route: arrival/departure times per retained position."""

    kind = "Track"

    _ingest = staticmethod(ingest_track)
    _extract = staticmethod(extract_track)

    @property
    def arrived(self) -> tuple[int, ...]:
        return self._seq.arrived

    @property
    def departed(self) -> tuple[int, ...]:
        return self._seq.departed

    def total_time(self) -> int:
        return statistics.total_time(self._seq)

    def resting_time(self) -> int:
        return statistics.resting_time(self._seq)

    def travelling_time(self) -> int:
        return statistics.travelling_time(self._seq)

    def max_speed(self) -> float:
        return statistics.max_speed(self._seq)

    def average_speed(self, include_rests: bool = True) -> float:
        return statistics.average_speed(self._seq, include_rests)

    def max_rate_of_ascent(self) -> float:
        return statistics.max_rate_of_ascent(self._seq)

    def max_rate_of_descent(self) -> float:
        return statistics.max_rate_of_descent(self._seq)


def compute_step_metrics(track: Track):
    """Return per-segment travel time (s), distance (m), speed (m/s)."""
    dts = []
    ds = []
    vs = []

    pts = track.sequence.positions
    for i in range(1, len(pts)):
        dt_s = track.arrived[i] - track.departed[i - 1]
        if dt_s <= 0:
            continue

        d_m = distance_3d(pts[i - 1], pts[i])
        dts.append(dt_s)
        ds.append(d_m)
        vs.append(d_m / dt_s)

    return dts, ds, vs


def summarize_track(track: Track, *, include_rests: bool = True) -> dict:
    stats = summarize_route(track)
    if not len(track):
        return stats

    _, _, vs = compute_step_metrics(track)
    stats.update({
        "duration_s": track.total_time(),
        "resting_s": track.resting_time(),
        "travelling_s": track.travelling_time(),
        "avg_speed_mps": track.average_speed(include_rests),
        "max_speed_mps": max(vs, default=0.0),
    })
    return stats


def analyze_track(gpx_path: Path, granularity: float, *, include_rests: bool = True) -> dict:
    return summarize_track(
        Track.from_file(gpx_path, granularity), include_rests=include_rests
    )
