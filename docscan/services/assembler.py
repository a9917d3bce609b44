"""
==============================================================================
Result Assembler Module
==============================================================================

Persists committed page images and builds the ordered scan response.

Page References:
---------------
- imageFilePath: JPEG written to the cache directory, referenced by its
  file URI. File name format:

      scan_{YYYYmmdd-HHMMSS-ffffff}_{page_index}.jpg

- base64: JPEG payload encoded as base64

If writing or encoding fails, the page keeps its original source handle
as reference and the invocation carries on.

==============================================================================
"""

from __future__ import annotations

import base64
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional

import cv2
import numpy as np

from docscan.config import RESPONSE_TYPE_BASE64
from docscan.schemas import PageResult, ScanOptions, ScanResponse


# Module logger
logger = logging.getLogger(__name__)


@dataclass
class PageOutcome:
    """Committed image and decoded value of one readable page."""
    index: int
    source_uri: str
    image: np.ndarray
    barcode: Optional[str] = None


class ResultAssembler:
    """
    Builder of per-page results for one invocation.

    Attributes:
        _cache_dir: Directory for committed page images
        _options: Response type and JPEG quality
        _stamp: Timestamp shared by all files of the invocation

    Example:
        >>> assembler = ResultAssembler(Path("storage/cache"), options)
        >>> response = assembler.assemble(outcomes)
    """

    def __init__(self, cache_dir: Path, options: ScanOptions) -> None:
        self._cache_dir = cache_dir
        self._options = options
        self._stamp = datetime.now().strftime("%Y%m%d-%H%M%S-%f")

    def file_name(self, index: int) -> str:
        return f"scan_{self._stamp}_{index}.jpg"

    def encode(self, image: np.ndarray) -> bytes:
        """
        Encode an image as JPEG at the configured quality.

        Raises:
            ValueError: If OpenCV cannot encode the image
        """
        ok, buffer = cv2.imencode(
            ".jpg", image, [cv2.IMWRITE_JPEG_QUALITY, self._options.quality]
        )
        if not ok:
            raise ValueError("JPEG encoding failed")
        return buffer.tobytes()

    def write(self, image: np.ndarray, index: int) -> str:
        """Write the image to the cache directory and return its file URI."""
        self._cache_dir.mkdir(parents=True, exist_ok=True)
        path = (self._cache_dir / self.file_name(index)).resolve()
        path.write_bytes(self.encode(image))
        return path.as_uri()

    def reference(self, outcome: PageOutcome) -> str:
        """
        Produce the stable reference of a committed image.

        Falls back to the page's source handle if persisting fails.
        """
        try:
            if self._options.response_type == RESPONSE_TYPE_BASE64:
                return base64.b64encode(self.encode(outcome.image)).decode("ascii")
            return self.write(outcome.image, outcome.index)
        except (OSError, ValueError, cv2.error) as e:
            logger.warning(
                f"⚠️ Could not persist page {outcome.index}, "
                f"keeping source reference: {e}"
            )
            return outcome.source_uri

    def persist(self, outcome: PageOutcome) -> PageResult:
        """Persist one page and build its result."""
        return PageResult.create(self.reference(outcome), outcome.barcode)

    def assemble(self, outcomes: Iterable[PageOutcome]) -> ScanResponse:
        """
        Build the response from outcomes in page order.

        The iterable is consumed one page at a time.
        """
        results: List[PageResult] = []

        for outcome in outcomes:
            results.append(self.persist(outcome))

        return ScanResponse.completed(results)
