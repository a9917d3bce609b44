"""
==============================================================================
Schemas Package - Pydantic Models
==============================================================================

Request and response schemas using Pydantic for validation.

==============================================================================
"""

from .scan import (
    STATUS_CANCELLED,
    STATUS_SUCCESS,
    PageResult,
    ResponseType,
    ScanOptions,
    ScanRequest,
    ScanResponse,
    ScanStatusResponse,
)

__all__ = [
    "STATUS_CANCELLED",
    "STATUS_SUCCESS",
    "PageResult",
    "ResponseType",
    "ScanOptions",
    "ScanRequest",
    "ScanResponse",
    "ScanStatusResponse",
]
