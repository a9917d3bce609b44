"""
==============================================================================
Rotation Recovery Module
==============================================================================

Finds the barcode of a page scanned in any of four quarter-turn rotations.

Rotation Ladder:
---------------
Candidates are tried in a fixed order, each one a rotation of the
normalized page (never of the previous candidate):

    0  →  +90  →  -90  →  180

The first candidate that decodes becomes the committed image and the
ladder stops. When nothing decodes, a landscape page (width > height)
is committed rotated +90 so it reads as portrait; any other page is
committed unrotated.

==============================================================================
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np

from docscan.scanner.decoder import BarcodeDecoder
from docscan.scanner.orientation import rotate
from docscan.scanner.roi import RegionOfInterest, RoiCalculator


# Module logger
logger = logging.getLogger(__name__)


ROTATION_LADDER: Tuple[int, ...] = (0, 90, -90, 180)

LANDSCAPE_FALLBACK_ANGLE = 90


@dataclass(frozen=True)
class DecodeAttempt:
    """One rung of the ladder: angle, searched region and its result."""

    angle: int
    roi: RegionOfInterest
    value: Optional[str]


@dataclass
class RecoveryOutcome:
    """
    Result of recovering one page.

    Attributes:
        image: The committed image
        barcode: Decoded value, None when the ladder was exhausted
        angle: Rotation of the committed image relative to the input
        attempts: Decode attempts in the order they ran
    """

    image: np.ndarray
    barcode: Optional[str]
    angle: int
    attempts: List[DecodeAttempt] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.barcode is not None


class RotationRecovery:
    """
    Rotation-recovery controller.

    Example:
        >>> recovery = RotationRecovery(BarcodeDecoder(), RoiCalculator())
        >>> outcome = recovery.recover(page)
        >>> outcome.barcode, outcome.angle
        ('12345678', 90)
    """

    def __init__(
        self,
        decoder: Optional[BarcodeDecoder] = None,
        roi_calculator: Optional[RoiCalculator] = None,
        ladder: Tuple[int, ...] = ROTATION_LADDER,
    ) -> None:
        self._decoder = decoder or BarcodeDecoder()
        self._roi_calculator = roi_calculator or RoiCalculator()
        self._ladder = ladder

    def attempt(self, image: np.ndarray, angle: int) -> Tuple[np.ndarray, DecodeAttempt]:
        """Rotate, compute the ROI for the rotated size and decode."""
        candidate = rotate(image, angle)
        height, width = candidate.shape[:2]
        roi = self._roi_calculator.compute(width, height)
        value = self._decoder.decode(candidate, roi)

        return candidate, DecodeAttempt(angle=angle, roi=roi, value=value)

    def recover(self, image: np.ndarray) -> RecoveryOutcome:
        """
        Run the rotation ladder over a normalized page.

        Args:
            image: Page in its upright pixel layout

        Returns:
            RecoveryOutcome with the committed image
        """
        attempts: List[DecodeAttempt] = []

        for angle in self._ladder:
            candidate, attempt = self.attempt(image, angle)
            attempts.append(attempt)

            if attempt.value is not None:
                logger.debug(f"Barcode found at {angle}° after {len(attempts)} attempt(s)")
                return RecoveryOutcome(candidate, attempt.value, angle, attempts)

            # Only the committed candidate outlives its attempt
            del candidate

        height, width = image.shape[:2]

        if width > height:
            logger.debug("No barcode found, committing landscape page as portrait")
            committed = rotate(image, LANDSCAPE_FALLBACK_ANGLE)
            return RecoveryOutcome(committed, None, LANDSCAPE_FALLBACK_ANGLE, attempts)

        logger.debug("No barcode found, committing page unrotated")
        return RecoveryOutcome(image, None, 0, attempts)
