"""
==============================================================================
Scan Endpoints
==============================================================================

Scan invocations and admission gate status.

==============================================================================
"""

import logging

from fastapi import APIRouter, Depends

from docscan.capture import CaptureSource, InboxCaptureSource, SubmittedPagesSource
from docscan.core import AppException, exceptions
from docscan.schemas import ScanRequest, ScanResponse, ScanStatusResponse
from docscan.services import ScanService


# Module logger
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/scans", tags=["Scans"])


def get_scan_service() -> ScanService:
    """Dependency providing the scan service."""
    return ScanService()


class ScanController:
    """Controller for scan operations."""

    def __init__(self, service: ScanService):
        self._service = service
        self._settings = service.settings

    def resolve_source(self, request: ScanRequest) -> CaptureSource:
        """Submitted pages or a cancellation win; otherwise the inbox."""
        if request.pages is not None or request.cancelled:
            return SubmittedPagesSource(request.pages or [], cancelled=request.cancelled)
        return InboxCaptureSource(self._settings.capture_path)

    async def scan(self, request: ScanRequest) -> ScanResponse:
        source = self.resolve_source(request)
        options = request.to_options(
            self._settings.default_response_type,
            self._settings.jpeg_quality,
        )
        try:
            return await self._service.scan(source, options)
        except AppException:
            raise
        except Exception as e:
            logger.exception(f"❌ Scan failed: {e}")
            raise exceptions.internal_error("Scan failed")

    def status(self) -> ScanStatusResponse:
        ticket = self._service.gate.pending
        if ticket is None:
            return ScanStatusResponse(in_progress=False)
        return ScanStatusResponse(in_progress=True, started_at=ticket.started_at.isoformat())


@router.post("", response_model=ScanResponse)
async def create_scan(
    request: ScanRequest,
    service: ScanService = Depends(get_scan_service)
):
    """
    Run a scan invocation.

    Returns per-page image references and barcodes in capture order.
    """
    controller = ScanController(service)
    response = await controller.scan(request)
    logger.debug(f"Scan finished with status {response.status}")
    return response


@router.get("/status", response_model=ScanStatusResponse)
async def scan_status(service: ScanService = Depends(get_scan_service)):
    """Report whether a scan is in progress."""
    controller = ScanController(service)
    return controller.status()
