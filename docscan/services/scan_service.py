"""
==============================================================================
Scan Service Module
==============================================================================

Runs one scan invocation from capture to assembled response.

Workflow:
---------
1. Check that a capture source is available
2. Take the single-slot scan gate
3. Capture pages (or return "cancelled" when the user cancelled)
4. In one worker thread, page by page in capture order:
   load + normalize → rotation recovery → persist
5. Release the gate once the worker is done and return the response

Outcomes flow lazily into the result assembler so only one page's image
buffers are alive at any moment.

==============================================================================
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Iterator, List, Optional

from docscan.capture import CaptureSource
from docscan.config import Settings, get_settings
from docscan.core import exceptions
from docscan.scanner import (
    BarcodeDecoder,
    PageLoader,
    RoiCalculator,
    RotationRecovery,
)
from docscan.schemas import ScanOptions, ScanResponse
from docscan.services.assembler import PageOutcome, ResultAssembler
from docscan.services.scan_gate import ScanGate, get_scan_gate


# Module logger
logger = logging.getLogger(__name__)


class ScanService:
    """
    Service for scan invocations.

    Attributes:
        _settings: Application settings
        _gate: Process-wide admission gate
        _loader: Page loader
        _recovery: Rotation-recovery controller

    Example:
        >>> service = ScanService()
        >>> response = await service.scan(SubmittedPagesSource(pages), options)
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        gate: Optional[ScanGate] = None,
        loader: Optional[PageLoader] = None,
        recovery: Optional[RotationRecovery] = None,
    ) -> None:
        """
        Initialize scan service.

        Args:
            settings: Application settings (global settings if None)
            gate: Admission gate (process-wide gate if None)
            loader: Page loader
            recovery: Rotation-recovery controller built from settings if None
        """
        self._settings = settings or get_settings()
        self._gate = gate or get_scan_gate()
        self._loader = loader or PageLoader()
        self._recovery = recovery or RotationRecovery(
            BarcodeDecoder(),
            RoiCalculator.from_settings(self._settings),
        )

    @property
    def gate(self) -> ScanGate:
        return self._gate

    @property
    def settings(self) -> Settings:
        return self._settings

    def default_options(self) -> ScanOptions:
        return ScanOptions(
            response_type=self._settings.default_response_type,
            quality=self._settings.jpeg_quality,
        )

    # =========================================================================
    # PAGE PIPELINE
    # =========================================================================

    def process_page(self, index: int, handle: str) -> Optional[PageOutcome]:
        """
        Load one page and recover its barcode.

        Returns:
            PageOutcome, or None when the page source is unreadable
        """
        image = self._loader.load(handle)
        if image is None:
            logger.warning(f"⚠️ Page {index} dropped: source unreadable")
            return None

        outcome = self._recovery.recover(image)

        if outcome.success:
            logger.info(f"✅ Page {index}: barcode {outcome.barcode} at {outcome.angle}°")
        else:
            logger.info(f"❔ Page {index}: no barcode after {len(outcome.attempts)} attempts")

        return PageOutcome(
            index=index,
            source_uri=handle,
            image=outcome.image,
            barcode=outcome.barcode,
        )

    def iter_outcomes(self, pages: List[str]) -> Iterator[PageOutcome]:
        """Yield outcomes of readable pages lazily, in capture order."""
        for index, handle in enumerate(pages):
            outcome = self.process_page(index, handle)
            if outcome is not None:
                yield outcome

    def run_pages(self, assembler: ResultAssembler, pages: List[str]) -> ScanResponse:
        """Process and persist every page; runs in a worker thread."""
        return assembler.assemble(self.iter_outcomes(pages))

    # =========================================================================
    # INVOCATION
    # =========================================================================

    async def scan(
        self,
        source: Optional[CaptureSource],
        options: Optional[ScanOptions] = None
    ) -> ScanResponse:
        """
        Run one scan invocation.

        Args:
            source: Capture collaborator
            options: Invocation options (configured defaults if None)

        Returns:
            ScanResponse with page results in capture order

        Raises:
            AppException: NO_CAPTURE_SURFACE or SCAN_IN_PROGRESS
        """
        if source is None or not source.is_available():
            raise exceptions.capture_unavailable(getattr(source, "name", None))

        options = options or self.default_options()

        with self._gate.admit() as ticket:
            capture = await source.capture(options.max_pages)

            if capture.cancelled:
                logger.info(f"🚫 Scan {ticket.id} cancelled")
                return ScanResponse.cancelled()

            logger.info(f"📄 Scan {ticket.id}: {len(capture.pages)} page(s)")

            assembler = ResultAssembler(self._cache_path(), options)
            worker = asyncio.ensure_future(
                asyncio.to_thread(self.run_pages, assembler, capture.pages)
            )

            try:
                response = await asyncio.shield(worker)
            except asyncio.CancelledError:
                # The gate stays taken until the worker thread is done
                logger.warning(f"⚠️ Scan {ticket.id} cancelled, waiting for page worker")
                await asyncio.wait({worker})
                raise

            results = response.scanned_images
            found = sum(1 for r in results if r.success)
            logger.info(f"📊 Scan {ticket.id} done: {found}/{len(results)} barcode(s)")

            return response

    def _cache_path(self) -> Path:
        return self._settings.cache_path
