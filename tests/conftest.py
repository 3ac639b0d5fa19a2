import logging
import sys
from pathlib import Path

import pytest

# Add src to path so the tests run from a plain checkout as well
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers installed by setup_logging so they never outlive a test."""
    yield
    logging.getLogger("gocadtsurf").handlers.clear()


def tsurf(*lines: str) -> str:
    """Join record lines into a TSurf text."""
    return "\n".join(lines) + "\n"


@pytest.fixture
def scenario_a() -> str:
    """Three vertices, one triangle, no properties."""
    return tsurf(
        "VRTX 1 0 0 0",
        "VRTX 2 1 0 0",
        "VRTX 3 0 1 0",
        "TRGL 1 2 3",
        "END",
    )


@pytest.fixture
def scenario_b() -> str:
    """One scalar property declared before the vertices."""
    return tsurf(
        "PROPERTIES depth",
        "VRTX 1 0 0 0 10",
        "VRTX 2 1 0 0 20",
        "VRTX 3 0 1 0 30",
        "TRGL 1 2 3",
    )


@pytest.fixture
def full_surface() -> str:
    """A realistic file: header, metadata blocks, PVRTX, ATOM, two triangles."""
    return tsurf(
        "GOCAD TSurf 1",
        "HEADER {",
        "name:horizon_top",
        "}",
        "GOCAD_ORIGINAL_COORDINATE_SYSTEM",
        "NAME Default",
        "ZPOSITIVE Elevation",
        "END_ORIGINAL_COORDINATE_SYSTEM",
        "PROPERTIES depth dip",
        "NO_DATA_VALUES -9999 -9999",
        "PROPERTY_CLASSES depth dip",
        "ESIZES 1 1",
        "PROPERTY_CLASS_HEADER depth {",
        "kind: Depth",
        "unit: m",
        "*low_clip: 0",
        "}",
        "PROPERTY_CLASS_HEADER dip {",
        "kind: Angle",
        "unit: deg",
        "}",
        "TFACE",
        "PVRTX 10 0 0 0 100 5",
        "PVRTX 11 1 0 0 -9999 6",
        "PVRTX 12 0 1 0 120 -9999",
        "ATOM 13 11",
        "PVRTX 14 1 1 0 140 8",
        "TRGL 10 11 12",
        "TRGL 13 14 12",
        "BSTONE 10",
        "BORDER 15 10 11",
        "END",
    )
