"""
==============================================================================
Rotation Recovery Tests
==============================================================================

Tests for the rotation ladder, with a scripted decoder and with ZBar.

==============================================================================
"""

from typing import List, Optional, Tuple

import numpy as np
import pytest

from docscan.scanner import (
    ROTATION_LADDER,
    BarcodeDecoder,
    RegionOfInterest,
    RoiCalculator,
    RotationRecovery,
    rotate,
)


class ScriptedDecoder(BarcodeDecoder):
    """Decoder answering from a script and recording what it saw."""

    def __init__(self, answers: List[Optional[str]]):
        super().__init__()
        self._answers = list(answers)
        self.seen: List[Tuple[np.ndarray, RegionOfInterest]] = []

    def decode(self, image, roi):
        self.seen.append((image, roi))
        return self._answers.pop(0) if self._answers else None


def marked_page(height: int = 4, width: int = 6) -> np.ndarray:
    return np.arange(height * width, dtype=np.uint8).reshape(height, width)


class TestLadder:
    """Tests for ladder order and short-circuiting."""

    def test_ladder_order(self):
        """Test the fixed order of attempted angles."""
        assert ROTATION_LADDER == (0, 90, -90, 180)

    def test_first_rung_wins(self):
        """Test a decode at 0 commits the input unrotated."""
        page = marked_page()
        decoder = ScriptedDecoder(["42"])

        outcome = RotationRecovery(decoder).recover(page)

        assert outcome.success
        assert outcome.barcode == "42"
        assert outcome.angle == 0
        assert outcome.image is page
        assert len(decoder.seen) == 1

    def test_stops_at_first_success(self):
        """Test later rungs are not attempted after a success."""
        decoder = ScriptedDecoder([None, None, "7"])

        outcome = RotationRecovery(decoder).recover(marked_page())

        assert outcome.angle == -90
        assert [a.angle for a in outcome.attempts] == [0, 90, -90]
        assert len(decoder.seen) == 3

    def test_rotations_are_not_cumulative(self):
        """Test every candidate is rotated from the input page."""
        page = marked_page()
        decoder = ScriptedDecoder([None, None, None, "9"])

        outcome = RotationRecovery(decoder).recover(page)

        for (candidate, _), angle in zip(decoder.seen, ROTATION_LADDER):
            assert np.array_equal(candidate, rotate(page, angle))
        assert outcome.angle == 180
        assert np.array_equal(outcome.image, rotate(page, 180))

    def test_roi_follows_candidate_size(self):
        """Test the region is computed for each candidate's dimensions."""
        decoder = ScriptedDecoder([])
        calculator = RoiCalculator()

        RotationRecovery(decoder, calculator).recover(marked_page(100, 200))

        for candidate, roi in decoder.seen:
            height, width = candidate.shape[:2]
            assert roi == calculator.compute(width, height)

    def test_landscape_fallback(self):
        """Test an undecodable landscape page is committed at +90."""
        page = marked_page(4, 6)

        outcome = RotationRecovery(ScriptedDecoder([])).recover(page)

        assert not outcome.success
        assert outcome.barcode is None
        assert outcome.angle == 90
        assert np.array_equal(outcome.image, rotate(page, 90))
        assert len(outcome.attempts) == 4

    @pytest.mark.parametrize("shape", [(6, 4), (5, 5)])
    def test_portrait_fallback(self, shape):
        """Test an undecodable portrait or square page stays unrotated."""
        page = marked_page(*shape)

        outcome = RotationRecovery(ScriptedDecoder([])).recover(page)

        assert outcome.angle == 0
        assert outcome.image is page


class TestRecoveryWithZbar:
    """Tests for recovery on rendered pages."""

    @pytest.mark.parametrize("scan_rotation,expected_angle", [
        (0, 0),
        (-90, 90),
        (90, -90),
        (180, 180),
    ])
    def test_recovers_rotated_page(self, page_factory, scan_rotation, expected_angle):
        """Test a page scanned in any quarter turn is recovered."""
        upright = page_factory("1234567890")
        scanned = rotate(upright, scan_rotation)

        outcome = RotationRecovery().recover(scanned)

        assert outcome.barcode == "1234567890"
        assert outcome.angle == expected_angle
        assert np.array_equal(outcome.image, upright)

    def test_blank_landscape_page(self, page_factory):
        """Test a blank landscape page is committed as portrait."""
        page = page_factory(width=2600, height=2000)

        outcome = RotationRecovery().recover(page)

        assert outcome.barcode is None
        assert outcome.image.shape[:2] == (2600, 2000)

    def test_blank_portrait_page(self, page_factory):
        """Test a blank portrait page is committed unrotated."""
        page = page_factory()

        outcome = RotationRecovery().recover(page)

        assert outcome.barcode is None
        assert outcome.image is page
