from pathlib import Path
import pytest

from gpxstats.formats.gpx import RawFix


@pytest.fixture
def data_dir() -> Path:
    return Path(__file__).parent / "data"


@pytest.fixture
def sample_track_path(data_dir) -> Path:
    return data_dir / "sample_track.gpx"


@pytest.fixture
def three_point_route_path(data_dir) -> Path:
    return data_dir / "three_point_route.gpx"


@pytest.fixture
def rest_scenario_fixes() -> list[RawFix]:
    """Equator fixes: a ~1 m wobble (merged at 5 m), then ~1.1 km east."""
    return [
        RawFix(0.0, 0.0, time=0),
        RawFix(0.0, 0.00001, time=10),
        RawFix(0.0, 0.01, time=20),
    ]
