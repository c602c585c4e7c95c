# gpxstats/formats/gpx.py
"""
GPX helpers for gpxstats

This module is intentionally format-focused:
- GPX namespace handling (GPX 1.0, 1.1 and un-namespaced documents)
- safely reading ElementTree documents from files or strings
- extracting raw fixes (<rtept>/<trkpt>) and names in document order

Key design principle:
  Keep merge decisions and statistics out of here. This module only turns a
  document into an ordered list of RawFix records, and raises DocumentError
  when a required element or attribute is missing.
"""

from __future__ import annotations

import datetime as _dt
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional
from xml.etree import ElementTree as ET

from gpxstats.errors import DocumentError, SourceError


@dataclass(frozen=True)
class RawFix:
    """One recorded sample, before any merge decision."""

    latitude: float
    longitude: float
    elevation: Optional[float] = None
    name: Optional[str] = None
    time: Optional[int] = None  # seconds


@dataclass(frozen=True)
class GpxPath:
    """Name and ordered fixes of one <rte> or <trk> element."""

    name: str
    fixes: list[RawFix]


# ---------------------------------------------------------------------------
# Namespace-agnostic element access
# ---------------------------------------------------------------------------
def local_name(tag: str) -> str:
    """
    Strip the namespace from an ElementTree tag.

    ElementTree represents namespaced tags internally as
      "{namespace-uri}tag"
    """
    return tag.rsplit("}", 1)[-1]


def _children(parent: ET.Element, tag: str) -> Iterator[ET.Element]:
    for child in parent:
        if local_name(child.tag) == tag:
            yield child


def _child(parent: ET.Element, tag: str) -> Optional[ET.Element]:
    return next(_children(parent, tag), None)


def _child_text(parent: ET.Element, tag: str) -> Optional[str]:
    child = _child(parent, tag)
    if child is None:
        return None
    return (child.text or "").strip()


def _require_child(parent: ET.Element, tag: str) -> ET.Element:
    child = _child(parent, tag)
    if child is None:
        raise DocumentError(f"No '{tag}' element.")
    return child


# ---------------------------------------------------------------------------
# Value parsing
# ---------------------------------------------------------------------------
def _parse_gpx_time(text: str) -> Optional[_dt.datetime]:
    """
    Parse an ISO-8601 timestamp commonly found in GPX <time> nodes.

    Expected examples:
      - "2026-01-02T21:14:44Z"
      - "2026-01-02T21:14:44.123Z"
      - "2026-01-02T21:14:44+00:00"
    """
    if not text:
        return None
    s = text.strip()
    if not s:
        return None

    # ElementTree GPX times commonly use Z for UTC.
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"

    try:
        dt = _dt.datetime.fromisoformat(s)
    except ValueError:
        return None

    # Ensure tz-aware; if naive, assume UTC (conservative for GPX sources)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=_dt.timezone.utc)

    return dt.astimezone(_dt.timezone.utc)


def parse_time_seconds(text: str) -> int:
    """
    Convert a <time> value to whole seconds.

    Plain integers are taken as-is; ISO-8601 timestamps become UTC epoch seconds.
    """
    s = (text or "").strip()
    if s.isdigit():
        return int(s)
    dt = _parse_gpx_time(s)
    if dt is None:
        raise DocumentError(f"Invalid 'time' value: {text!r}")
    return int(dt.timestamp())


def _parse_float(text: str, what: str) -> float:
    try:
        return float(text)
    except (TypeError, ValueError):
        raise DocumentError(f"Invalid '{what}' value: {text!r}") from None


# ---------------------------------------------------------------------------
# Reading documents
# ---------------------------------------------------------------------------
def read_gpx(path: Path) -> ET.Element:
    """
    Read a GPX file and return its root element.

    Raises:
      SourceError if the file cannot be opened or is not well-formed XML.
    """
    try:
        return ET.parse(path).getroot()
    except OSError as e:
        raise SourceError(f"Error opening source file '{path}'.") from e
    except ET.ParseError as e:
        raise SourceError(f"Source file '{path}' is not valid XML ({e}).") from e


def parse_gpx(text: str) -> ET.Element:
    """Parse GPX text already held in memory and return its root element."""
    try:
        return ET.fromstring(text)
    except ET.ParseError as e:
        raise SourceError(f"GPX text is not valid XML ({e}).") from e


def _gpx_root(root: ET.Element) -> ET.Element:
    if local_name(root.tag) != "gpx":
        raise DocumentError("No 'gpx' element.")
    return root


# ---------------------------------------------------------------------------
# Fix extraction
# ---------------------------------------------------------------------------
def read_point(pt: ET.Element, *, timed: bool = False) -> RawFix:
    """
    Build a RawFix from a <rtept> or <trkpt> element.

    lat/lon attributes are mandatory; <ele> and <name> are optional. <time> is
    only read (and then required) when `timed` is set; route points never
    carry a time, whatever the document contains.
    """
    if "lat" not in pt.attrib:
        raise DocumentError("No 'lat' attribute.")
    if "lon" not in pt.attrib:
        raise DocumentError("No 'lon' attribute.")

    lat = _parse_float(pt.get("lat"), "lat")
    lon = _parse_float(pt.get("lon"), "lon")

    ele_text = _child_text(pt, "ele")
    ele = _parse_float(ele_text, "ele") if ele_text else None

    time = None
    if timed:
        time_text = _child_text(pt, "time")
        if time_text is None:
            raise DocumentError("No 'time' element.")
        time = parse_time_seconds(time_text)

    return RawFix(
        latitude=lat,
        longitude=lon,
        elevation=ele,
        name=_child_text(pt, "name"),
        time=time,
    )


def extract_route(root: ET.Element) -> GpxPath:
    """Return the name and <rtept> fixes of the first <rte> element."""
    rte = _require_child(_gpx_root(root), "rte")
    fixes = [read_point(pt) for pt in _children(rte, "rtept")]
    return GpxPath(name=_child_text(rte, "name") or "", fixes=fixes)


def extract_track(root: ET.Element) -> GpxPath:
    """
    Return the name and <trkpt> fixes of the first <trk> element.

    All <trkseg> elements are concatenated in document order; segment names
    are ignored. Every track point must carry a <time>.
    """
    trk = _require_child(_gpx_root(root), "trk")
    _require_child(trk, "trkseg")
    fixes = [
        read_point(pt, timed=True)
        for seg in _children(trk, "trkseg")
        for pt in _children(seg, "trkpt")
    ]
    return GpxPath(name=_child_text(trk, "name") or "", fixes=fixes)
