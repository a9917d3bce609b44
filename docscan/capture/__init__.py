"""
==============================================================================
Capture Package
==============================================================================

Capture collaborators that feed page handles into the scan pipeline.

Classes:
--------
- CaptureSource: Base class
- SubmittedPagesSource: Pages carried by the scan request
- InboxCaptureSource: Pages read from an inbox directory

==============================================================================
"""

from .source import (
    CaptureResult,
    CaptureSource,
    InboxCaptureSource,
    SubmittedPagesSource,
)

__all__ = [
    "CaptureResult",
    "CaptureSource",
    "InboxCaptureSource",
    "SubmittedPagesSource",
]
