"""
==============================================================================
Region Of Interest Module
==============================================================================

Computes the top-right page region where the barcode is printed.

The region is sized from three percentages: crop width, crop height and
the corner margin. All bounds are clamped to the image extent.

==============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


DEFAULT_WIDTH_PERCENT = 20
DEFAULT_HEIGHT_PERCENT = 16
DEFAULT_MARGIN_PERCENT = 2


def _clamp(value: int, lower: int, upper: int) -> int:
    return max(lower, min(value, upper))


@dataclass(frozen=True)
class RegionOfInterest:
    """Axis-aligned rectangle in pixel coordinates."""

    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def as_slices(self) -> Tuple[slice, slice]:
        """Row and column slices for indexing a numpy image."""
        return slice(self.y, self.bottom), slice(self.x, self.right)


def compute_roi(
    width: int,
    height: int,
    width_percent: int = DEFAULT_WIDTH_PERCENT,
    height_percent: int = DEFAULT_HEIGHT_PERCENT,
    margin_percent: int = DEFAULT_MARGIN_PERCENT,
) -> RegionOfInterest:
    """
    Compute the barcode region anchored to the top-right corner.

    Args:
        width: Image width in pixels
        height: Image height in pixels
        width_percent: Crop width as a percentage of the width
        height_percent: Crop height as a percentage of the height
        margin_percent: Corner margin, applied to both axes

    Returns:
        RegionOfInterest inside [0, width] x [0, height]
    """
    if width <= 0 or height <= 0:
        return RegionOfInterest(0, 0, 0, 0)

    crop_width = width * width_percent // 100
    crop_height = height * height_percent // 100
    margin_x = width * margin_percent // 100
    margin_y = height * margin_percent // 100

    x = _clamp(width - crop_width - margin_x, 0, width)
    y = _clamp(margin_y, 0, height)
    right = _clamp(width - margin_x, x, width)
    bottom = _clamp(crop_height + margin_y, y, height)

    return RegionOfInterest(x, y, right - x, bottom - y)


class RoiCalculator:
    """
    ROI calculator bound to one set of percentages.

    Example:
        >>> calculator = RoiCalculator(25, 20, 3)
        >>> calculator.compute(1000, 2000)
        RegionOfInterest(x=720, y=60, width=250, height=400)
    """

    def __init__(
        self,
        width_percent: int = DEFAULT_WIDTH_PERCENT,
        height_percent: int = DEFAULT_HEIGHT_PERCENT,
        margin_percent: int = DEFAULT_MARGIN_PERCENT,
    ) -> None:
        self.width_percent = width_percent
        self.height_percent = height_percent
        self.margin_percent = margin_percent

    @classmethod
    def from_settings(cls, settings) -> RoiCalculator:
        return cls(
            settings.roi_width_percent,
            settings.roi_height_percent,
            settings.roi_margin_percent,
        )

    def compute(self, width: int, height: int) -> RegionOfInterest:
        return compute_roi(
            width,
            height,
            self.width_percent,
            self.height_percent,
            self.margin_percent,
        )
