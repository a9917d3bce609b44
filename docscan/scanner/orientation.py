"""
==============================================================================
Orientation Module
==============================================================================

Axis-aligned rotation of page images.

- Orientation: EXIF orientation values the pipeline acts on
- read_orientation: EXIF orientation from encoded image bytes
- normalize: brings a decoded page into its upright pixel layout
- rotate: quarter-turn rotation primitive (positive = clockwise)

==============================================================================
"""

from __future__ import annotations

import enum
import io
import logging
from typing import Optional

import cv2
import numpy as np
from PIL import Image


# Module logger
logger = logging.getLogger(__name__)


# EXIF "Orientation" tag
EXIF_ORIENTATION_TAG = 0x0112


class Orientation(enum.Enum):
    """
    Orientation stored in a page's EXIF metadata.

    Values are the EXIF tag values. Mirrored EXIF orientations
    (2, 4, 5, 7) are not represented and read as NORMAL.
    """

    NORMAL = 1
    ROTATE_180 = 3
    ROTATE_90 = 6
    ROTATE_270 = 8

    @classmethod
    def from_exif(cls, value: Optional[int]) -> Orientation:
        """Map a raw EXIF value, falling back to NORMAL."""
        try:
            return cls(value)
        except ValueError:
            return cls.NORMAL


_ROTATE_CODES = {
    90: cv2.ROTATE_90_CLOCKWISE,
    -90: cv2.ROTATE_90_COUNTERCLOCKWISE,
    270: cv2.ROTATE_90_COUNTERCLOCKWISE,
    180: cv2.ROTATE_180,
    -180: cv2.ROTATE_180,
}

_ORIENTATION_ANGLES = {
    Orientation.NORMAL: 0,
    Orientation.ROTATE_90: 90,
    Orientation.ROTATE_180: 180,
    Orientation.ROTATE_270: -90,
}


def rotate(image: np.ndarray, angle: int) -> np.ndarray:
    """
    Return a copy of the image rotated by a multiple of 90 degrees.

    Args:
        image: OpenCV image (numpy array)
        angle: 0, 90, -90, 180 or 270; positive is clockwise

    Returns:
        The rotated image. Angle 0 returns the input itself.

    Raises:
        ValueError: For angles that are not quarter turns
    """
    if angle == 0:
        return image

    code = _ROTATE_CODES.get(angle)
    if code is None:
        raise ValueError(f"Unsupported rotation angle: {angle}")

    return cv2.rotate(image, code)


def read_orientation(data: bytes) -> Orientation:
    """
    Read the EXIF orientation from encoded image bytes.

    Unreadable or missing metadata is treated as NORMAL.
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            value = img.getexif().get(EXIF_ORIENTATION_TAG)
    except Exception as e:
        logger.debug(f"Orientation metadata unreadable: {e}")
        return Orientation.NORMAL

    return Orientation.from_exif(value)


def normalize(image: np.ndarray, orientation: Optional[Orientation]) -> np.ndarray:
    """Apply the rotation the orientation calls for."""
    if orientation is None:
        return image
    return rotate(image, _ORIENTATION_ANGLES[orientation])
