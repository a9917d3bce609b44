"""
==============================================================================
Barcode Decoder Module
==============================================================================

ITF (Interleaved 2 of 5) barcode decoding inside a region of interest.

Behavior:
---------
- The image is cropped to the region before detection
- Only the ITF symbology is requested from ZBar
- The first ITF result wins; there is no ranking between candidates
- Failures of any kind read as "not found" and are never raised

==============================================================================
"""

from __future__ import annotations

import logging
from typing import Optional

import cv2
import numpy as np
from pyzbar.pyzbar import ZBarSymbol, decode

from docscan.scanner.roi import RegionOfInterest


# Module logger
logger = logging.getLogger(__name__)


class BarcodeDecoder:
    """
    Single-symbology barcode decoder backed by ZBar.

    Attributes:
        symbol: ZBar symbology to detect (ITF by default)

    Example:
        >>> decoder = BarcodeDecoder()
        >>> value = decoder.decode(page, roi)
    """

    def __init__(self, symbol: ZBarSymbol = ZBarSymbol.I25) -> None:
        self._symbol = symbol

    @property
    def symbol(self) -> ZBarSymbol:
        return self._symbol

    @staticmethod
    def crop(image: np.ndarray, roi: RegionOfInterest) -> Optional[np.ndarray]:
        """
        Crop an image to the region.

        Returns:
            The cropped view, or None when the crop has no pixels
        """
        if image is None or image.size == 0 or roi.is_empty:
            return None

        rows, cols = roi.as_slices()
        cropped = image[rows, cols]

        if cropped.size == 0:
            return None

        return cropped

    def decode(self, image: np.ndarray, roi: RegionOfInterest) -> Optional[str]:
        """
        Decode the first barcode of the configured symbology inside the ROI.

        Args:
            image: OpenCV image (numpy array)
            roi: Region to search

        Returns:
            Decoded payload, or None if nothing was found
        """
        cropped = self.crop(image, roi)
        if cropped is None:
            return None

        try:
            if cropped.ndim == 3:
                cropped = cv2.cvtColor(cropped, cv2.COLOR_BGR2GRAY)

            barcodes = decode(np.ascontiguousarray(cropped), symbols=[self._symbol])
        except Exception as e:
            logger.warning(f"Decode error: {e}")
            return None

        for barcode in barcodes:
            if barcode.type != self._symbol.name:
                continue

            try:
                return barcode.data.decode("utf-8")
            except UnicodeDecodeError as e:
                logger.warning(f"Barcode payload is not UTF-8: {e}")
                return None

        return None
