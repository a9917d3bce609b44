"""
==============================================================================
Health Check Endpoints
==============================================================================

System health status endpoints for monitoring and orchestration.

==============================================================================
"""

import os

from fastapi import APIRouter

from docscan.capture import InboxCaptureSource
from docscan.config import get_settings
from docscan.services import get_scan_gate


router = APIRouter(prefix="/health", tags=["Health"])


class HealthController:
    """Controller for health check operations."""

    def __init__(self):
        self._settings = get_settings()

    def check_cache(self) -> str:
        """Check the cache directory is writable."""
        try:
            path = self._settings.cache_path
            return "healthy" if os.access(path, os.W_OK) else "unhealthy"
        except OSError:
            return "unhealthy"

    def check_inbox(self) -> str:
        """Check inbox capture availability."""
        if self._settings.capture_path is None:
            return "not_configured"
        source = InboxCaptureSource(self._settings.capture_path)
        return "healthy" if source.is_available() else "unavailable"

    def get_health(self) -> dict:
        """Get full health status."""
        cache_status = self.check_cache()

        overall = "healthy" if cache_status == "healthy" else "degraded"

        return {
            "status": overall,
            "components": {
                "api": "healthy",
                "cache": cache_status,
                "inbox": self.check_inbox()
            },
            "details": {
                "scan_in_progress": get_scan_gate().is_busy,
                "roi_percent": {
                    "width": self._settings.roi_width_percent,
                    "height": self._settings.roi_height_percent,
                    "margin": self._settings.roi_margin_percent
                }
            }
        }


@router.get("")
async def health_check():
    """
    Health check endpoint.

    Returns system status including API, cache and inbox.
    """
    controller = HealthController()
    return controller.get_health()


@router.get("/ready")
async def readiness_check():
    """Readiness probe for container orchestration."""
    return {"ready": True}


@router.get("/live")
async def liveness_check():
    """Liveness probe for container orchestration."""
    return {"alive": True}
