"""
Shared test fixtures for the savepattern test suite.

Local fixtures in individual test files override these (pytest convention).
"""

import pytest

from savepattern.gallery import GalleryStore
from savepattern.pattern import PatternKind, PatternSpec, Stroke
from savepattern.raster import RasterImage
from savepattern.storage import MemoryKeyValueStore


# ---------------------------------------------------------------------------
# Colors
# ---------------------------------------------------------------------------

PRIMARY = (255, 255, 255, 255)    # White ground
SECONDARY = (0, 0, 255, 255)      # Blue pattern
BLACK = (0, 0, 0, 255)
RED = (255, 0, 0, 255)


# ---------------------------------------------------------------------------
# Pattern factories
# ---------------------------------------------------------------------------

def make_spec(kind=PatternKind.STRIPES, primary=PRIMARY, secondary=SECONDARY) -> PatternSpec:
    """
    Create a PatternSpec with test colors.

    Plain function (not a fixture) for inline use with overrides.
    Importable as:

        from conftest import make_spec
    """
    return PatternSpec(primary_color=primary, secondary_color=secondary, kind=kind)


def solid_image(color) -> RasterImage:
    """Canvas-sized image of one color."""
    return RasterImage.filled(color)


@pytest.fixture
def stripes_spec():
    return make_spec(PatternKind.STRIPES)


@pytest.fixture
def dots_spec():
    return make_spec(PatternKind.POLKA_DOTS)


@pytest.fixture
def checker_spec():
    return make_spec(PatternKind.CHECKERBOARD)


@pytest.fixture
def diagonal_stroke():
    return Stroke.from_points([(10, 10), (100, 100), (190, 20)])


# ---------------------------------------------------------------------------
# Stores
# ---------------------------------------------------------------------------

@pytest.fixture
def kv_store():
    """Empty in-memory key/value store."""
    return MemoryKeyValueStore()


@pytest.fixture
def gallery_store(kv_store):
    """GalleryStore over an in-memory backend."""
    return GalleryStore(kv_store)


@pytest.fixture
def state_dir(tmp_path):
    """A temporary directory that mimics ~/.savepattern/."""
    d = tmp_path / "savepattern_state"
    d.mkdir()
    return d
