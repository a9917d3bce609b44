"""
==============================================================================
Page Loader Module
==============================================================================

Resolves page handles to upright page images.

Supported Handles:
-----------------
- Plain file paths:      /var/scans/page-1.jpg
- File URIs:             file:///var/scans/page-1.jpg
- Base64 data URIs:      data:image/jpeg;base64,/9j/4AAQ...

Pixels are decoded with OpenCV ignoring EXIF orientation, then the EXIF
orientation is read separately and applied, so the rotation is applied
exactly once.

==============================================================================
"""

from __future__ import annotations

import base64
import binascii
import logging
from pathlib import Path
from typing import Optional
from urllib.parse import unquote, urlparse

import cv2
import numpy as np

from docscan.scanner.orientation import normalize, read_orientation


# Module logger
logger = logging.getLogger(__name__)


DATA_URI_PREFIX = "data:"
FILE_URI_PREFIX = "file://"


class PageLoader:
    """
    Loader for captured page images.

    A page whose source cannot be read yields None so the caller can
    drop it and keep going.

    Example:
        >>> loader = PageLoader()
        >>> image = loader.load("file:///tmp/page-1.jpg")
    """

    @staticmethod
    def read_bytes(handle: str) -> Optional[bytes]:
        """
        Read the encoded bytes behind a page handle.

        Args:
            handle: Path, file URI or base64 data URI

        Returns:
            Raw bytes, or None when the source is unreadable
        """
        handle = (handle or "").strip()
        if not handle:
            return None

        if handle.startswith(DATA_URI_PREFIX):
            _, _, payload = handle.partition(",")
            try:
                return base64.b64decode(payload, validate=True)
            except (binascii.Error, ValueError) as e:
                logger.warning(f"Invalid data URI payload: {e}")
                return None

        if handle.startswith(FILE_URI_PREFIX):
            path = Path(unquote(urlparse(handle).path))
        else:
            path = Path(handle)

        try:
            return path.read_bytes()
        except (OSError, ValueError) as e:
            logger.warning(f"Page source unreadable: {path} ({e})")
            return None

    @staticmethod
    def decode_pixels(data: bytes) -> Optional[np.ndarray]:
        """Decode image bytes into a BGR array without applying EXIF."""
        if not data:
            return None

        buffer = np.frombuffer(data, np.uint8)
        image = cv2.imdecode(buffer, cv2.IMREAD_COLOR | cv2.IMREAD_IGNORE_ORIENTATION)

        if image is None or image.size == 0:
            return None

        return image

    def load(self, handle: str) -> Optional[np.ndarray]:
        """
        Load a page and bring it into its upright layout.

        Returns:
            Normalized image, or None if the page has no readable source
        """
        data = self.read_bytes(handle)
        if data is None:
            return None

        image = self.decode_pixels(data)
        if image is None:
            logger.warning(f"Could not decode page image: {handle[:80]}")
            return None

        orientation = read_orientation(data)
        logger.debug(f"Page orientation: {orientation.name}")

        return normalize(image, orientation)
