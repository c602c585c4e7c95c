import pytest

from gpxstats.errors import DocumentError, SourceError
from gpxstats.formats.gpx import (
    RawFix,
    extract_route,
    extract_track,
    parse_gpx,
    parse_time_seconds,
    read_gpx,
)


def test_extract_route_reads_points_in_order(three_point_route_path):
    path = extract_route(read_gpx(three_point_route_path))

    assert path.name == "Three Points"
    assert [f.name for f in path.fixes] == ["A", "B", "C"]
    assert path.fixes[0] == RawFix(51.0, -1.0, elevation=None, name="A", time=None)


def test_extract_track_concatenates_segments_and_ignores_segment_names(sample_track_path):
    path = extract_track(read_gpx(sample_track_path))

    assert path.name == "Morning Walk"
    assert len(path.fixes) == 6
    assert "first half" not in [f.name for f in path.fixes]
    assert path.fixes[0].elevation == 10.0
    assert path.fixes[1].time - path.fixes[0].time == 30


@pytest.mark.parametrize(
    "text, expected",
    [
        ("0", 0),
        (" 120 ", 120),
        ("1970-01-01T00:01:00Z", 60),
        ("1970-01-01T01:00:00+01:00", 0),
        ("1970-01-01T00:00:10.900Z", 10),
    ],
)
def test_parse_time_seconds(text, expected):
    assert parse_time_seconds(text) == expected


def test_parse_time_seconds_rejects_garbage():
    with pytest.raises(DocumentError):
        parse_time_seconds("yesterday")


@pytest.mark.parametrize(
    "doc, message",
    [
        ("<notgpx/>", "No 'gpx' element."),
        ("<gpx><trk/></gpx>", "No 'rte' element."),
        ("<gpx><rte><rtept lon='1'/></rte></gpx>", "No 'lat' attribute."),
        ("<gpx><rte><rtept lat='1'/></rte></gpx>", "No 'lon' attribute."),
    ],
)
def test_route_structural_errors(doc, message):
    with pytest.raises(DocumentError, match=message):
        extract_route(parse_gpx(doc))


def test_track_point_without_time_is_fatal():
    doc = "<gpx><trk><trkseg><trkpt lat='0' lon='0'/></trkseg></trk></gpx>"
    with pytest.raises(DocumentError, match="No 'time' element."):
        extract_track(parse_gpx(doc))


def test_track_without_segment_is_fatal():
    with pytest.raises(DocumentError, match="No 'trkseg' element."):
        extract_track(parse_gpx("<gpx><trk><name>x</name></trk></gpx>"))


def test_invalid_number_is_document_error():
    with pytest.raises(DocumentError):
        extract_route(parse_gpx("<gpx><rte><rtept lat='north' lon='0'/></rte></gpx>"))


def test_missing_file_is_source_error(tmp_path):
    with pytest.raises(SourceError, match="Error opening source file"):
        read_gpx(tmp_path / "missing.gpx")


def test_malformed_xml_is_source_error(tmp_path):
    bad = tmp_path / "bad.gpx"
    bad.write_text("<gpx><rte>", encoding="utf-8")
    with pytest.raises(SourceError):
        read_gpx(bad)
    with pytest.raises(SourceError):
        parse_gpx("<gpx><rte>")


def test_route_points_ignore_time_elements():
    doc = """<gpx><rte>
      <rtept lat="0" lon="0"><time>x</time></rtept>
      <rtept lat="0" lon="1"><time>60</time></rtept>
    </rte></gpx>"""
    path = extract_route(parse_gpx(doc))

    assert [f.time for f in path.fixes] == [None, None]
