"""
==============================================================================
Pytest Configuration and Fixtures
==============================================================================

Provides settings, scan service, client and synthetic page fixtures.

Synthetic pages carry an ITF barcode rendered with numpy so the real
ZBar decoder can be exercised without sample images.

==============================================================================
"""

import os
import tempfile

# Settings are read once per process; point the cache somewhere disposable
os.environ.setdefault("CACHE_DIRECTORY", tempfile.mkdtemp(prefix="docscan-cache-"))

from pathlib import Path
from typing import Callable, Generator, Optional

import cv2
import numpy as np
import pytest
from fastapi.testclient import TestClient

from docscan.api.v1.scans import get_scan_service
from docscan.config import Settings
from docscan.main import app
from docscan.scanner import compute_roi
from docscan.services import ScanGate, ScanService


# ============================================================================
# ITF RENDERING
# ============================================================================

# N = narrow, W = wide, per digit
ITF_PATTERNS = {
    "0": "NNWWN",
    "1": "WNNNW",
    "2": "NWNNW",
    "3": "WWNNN",
    "4": "NNWNW",
    "5": "WNWNN",
    "6": "NWWNN",
    "7": "NNNWW",
    "8": "WNNWN",
    "9": "NWNWN",
}

NARROW = 3
WIDE = 9
QUIET = 10 * NARROW
BAR_HEIGHT = 120

PAGE_WIDTH = 2000
PAGE_HEIGHT = 2600


def render_itf(digits: str) -> np.ndarray:
    """Render an ITF symbol (with quiet zones) as a grayscale strip."""
    assert len(digits) % 2 == 0

    widths = {"N": NARROW, "W": WIDE}
    elements = [(True, NARROW), (False, NARROW), (True, NARROW), (False, NARROW)]

    for first, second in zip(digits[0::2], digits[1::2]):
        for bar, space in zip(ITF_PATTERNS[first], ITF_PATTERNS[second]):
            elements.append((True, widths[bar]))
            elements.append((False, widths[space]))

    elements += [(True, WIDE), (False, NARROW), (True, NARROW)]

    columns = [np.full(QUIET, 255, np.uint8)]
    for is_bar, width in elements:
        columns.append(np.full(width, 0 if is_bar else 255, np.uint8))
    columns.append(np.full(QUIET, 255, np.uint8))

    row = np.concatenate(columns)
    return np.tile(row, (BAR_HEIGHT, 1))


def make_page(
    value: Optional[str] = None,
    width: int = PAGE_WIDTH,
    height: int = PAGE_HEIGHT,
    corner: str = "top-right",
) -> np.ndarray:
    """
    White BGR page, optionally with a barcode.

    "top-right" centers the barcode in the default ROI; "bottom-left"
    places it where no rotation of the ROI reaches on its own.
    """
    page = np.full((height, width, 3), 255, np.uint8)
    if value is None:
        return page

    strip = render_itf(value)
    strip_h, strip_w = strip.shape

    if corner == "top-right":
        roi = compute_roi(width, height)
        x = roi.x + (roi.width - strip_w) // 2
        y = roi.y + (roi.height - strip_h) // 2
    else:
        x = width // 20
        y = height - height // 20 - strip_h

    page[y:y + strip_h, x:x + strip_w] = strip[:, :, None]
    return page


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings with a per-test cache directory."""
    return Settings(cache_directory=str(tmp_path / "cache"))


@pytest.fixture
def gate() -> ScanGate:
    return ScanGate()


@pytest.fixture
def service(settings: Settings, gate: ScanGate) -> ScanService:
    return ScanService(settings=settings, gate=gate)


@pytest.fixture
def client(service: ScanService) -> Generator[TestClient, None, None]:
    """Create test client with the scan service override."""
    app.dependency_overrides[get_scan_service] = lambda: service

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def page_factory() -> Callable[..., np.ndarray]:
    return make_page


@pytest.fixture
def write_page(tmp_path: Path) -> Callable[[np.ndarray, str], str]:
    """Write a page as lossless PNG and return its path."""
    pages_dir = tmp_path / "pages"
    pages_dir.mkdir()

    def _write(image: np.ndarray, name: str) -> str:
        path = pages_dir / name
        assert cv2.imwrite(str(path), image)
        return str(path)

    return _write
