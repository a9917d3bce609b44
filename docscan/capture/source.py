"""
==============================================================================
Capture Source Module
==============================================================================

Capture collaborators feeding page handles into the scan pipeline.

This module implements:
- CaptureResult: Ordered page handles or a cancellation
- CaptureSource: Base class for capture collaborators
- SubmittedPagesSource: Pages submitted by the caller
- InboxCaptureSource: Pages dropped into an inbox directory

==============================================================================
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional


# Module logger
logger = logging.getLogger(__name__)


SUPPORTED_EXT = {".jpg", ".jpeg", ".png", ".bmp", ".tif", ".tiff", ".webp"}


@dataclass
class CaptureResult:
    """Outcome of one capture: ordered handles, or a user cancellation."""

    pages: List[str] = field(default_factory=list)
    cancelled: bool = False

    @classmethod
    def cancel(cls) -> CaptureResult:
        return cls(pages=[], cancelled=True)


def limit_pages(pages: List[str], max_pages: Optional[int]) -> List[str]:
    """Keep the first max_pages handles; None keeps everything."""
    if max_pages is None:
        return pages
    return pages[:max_pages]


class CaptureSource:
    """
    Base class for capture collaborators.

    Subclasses report availability and produce a CaptureResult.
    """

    name = "capture"

    def is_available(self) -> bool:
        """Check if the capture surface can be used."""
        return True

    async def capture(self, max_pages: Optional[int] = None) -> CaptureResult:
        """Produce the ordered page handles of one capture."""
        raise NotImplementedError


class SubmittedPagesSource(CaptureSource):
    """
    Capture source for pages submitted with the scan request.

    Handles are trimmed and blank handles are dropped.
    """

    name = "submitted"

    def __init__(self, pages: Iterable[str], cancelled: bool = False) -> None:
        self._pages = [page.strip() for page in pages if page and page.strip()]
        self._cancelled = cancelled

    async def capture(self, max_pages: Optional[int] = None) -> CaptureResult:
        if self._cancelled:
            logger.info("🚫 Capture cancelled by the user")
            return CaptureResult.cancel()

        return CaptureResult(pages=limit_pages(self._pages, max_pages))


class InboxCaptureSource(CaptureSource):
    """
    Capture source reading page images from an inbox directory.

    Pages are taken in file name order; hidden files are skipped.

    Example:
        >>> source = InboxCaptureSource(Path("storage/inbox"))
        >>> result = await source.capture(max_pages=5)
    """

    name = "inbox"

    def __init__(self, directory: Optional[Path]) -> None:
        self._directory = directory

    @property
    def directory(self) -> Optional[Path]:
        return self._directory

    def is_available(self) -> bool:
        return self._directory is not None and self._directory.is_dir()

    def discover(self) -> List[str]:
        """Return absolute paths of supported images in the inbox."""
        found: List[str] = []

        for path in sorted(self._directory.iterdir()):
            if path.name.startswith("."):
                continue
            if path.is_file() and path.suffix.lower() in SUPPORTED_EXT:
                found.append(str(path.resolve()))

        return found

    async def capture(self, max_pages: Optional[int] = None) -> CaptureResult:
        pages = limit_pages(self.discover(), max_pages)
        logger.info(f"📥 Inbox capture: {len(pages)} page(s) from {self._directory}")
        return CaptureResult(pages=pages)
