"""Pytest configuration - fast-by-default TDD setup.

Slow tests (real OCR model loading) are skipped unless --slow is passed.
Run the full suite:   pytest --slow
Run fast tests only:  pytest          (default)
"""
import numpy as np
import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--slow",
        action="store_true",
        default=False,
        help="Run slow tests that load ML models (EasyOCR)",
    )


def pytest_collection_modifyitems(config, items):
    if config.getoption("--slow"):
        return  # run everything
    skip_slow = pytest.mark.skip(reason="slow test skipped, pass --slow to include")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


class StubRecognizer:
    """Recognizer returning a fixed text and recording every raster it saw."""

    def __init__(self, text: str = "123"):
        self.text = text
        self.rasters: list[np.ndarray] = []

    def read_text(self, raster: np.ndarray) -> str:
        self.rasters.append(raster)
        return self.text


def draw_rings(
    image: np.ndarray,
    xs: list[int],
    y: int,
    size: int = 20,
    thickness: int = 4,
) -> np.ndarray:
    """Draw dark square rings (digit-like glyphs) with their top-left corners at (x, y)."""
    for x in xs:
        image[y:y + size, x:x + size] = 0
        image[y + thickness:y + size - thickness, x + thickness:x + size - thickness] = 255
    return image


def make_ring_image(width: int = 200, height: int = 100) -> np.ndarray:
    """White RGB image with three evenly spaced dark rings in a row."""
    image = np.full((height, width, 3), 255, dtype=np.uint8)
    return draw_rings(image, [40, 64, 88], 40)


def stroke_rows_by_third(raster: np.ndarray) -> list[float]:
    """Mean row of the stroke pixels in the left, middle and right thirds of a raster."""
    rows = []
    for part in np.array_split(raster, 3, axis=1):
        ys, _ = np.nonzero(part)
        rows.append(float(ys.mean()))
    return rows


@pytest.fixture
def stub_recognizer():
    return StubRecognizer("123")


@pytest.fixture
def ring_image():
    return make_ring_image()
