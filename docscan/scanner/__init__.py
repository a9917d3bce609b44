"""
==============================================================================
Scanner Package - Barcode Detection
==============================================================================

Page-level barcode detection with OpenCV and pyzbar.

Classes:
--------
- PageLoader: Resolves page handles to upright images
- RoiCalculator: Top-right barcode region
- BarcodeDecoder: ITF decoding inside a region
- RotationRecovery: Rotation ladder over a page

==============================================================================
"""

from .decoder import BarcodeDecoder
from .loader import PageLoader
from .orientation import Orientation, normalize, read_orientation, rotate
from .recovery import (
    ROTATION_LADDER,
    DecodeAttempt,
    RecoveryOutcome,
    RotationRecovery,
)
from .roi import RegionOfInterest, RoiCalculator, compute_roi

__all__ = [
    "BarcodeDecoder",
    "PageLoader",
    "Orientation",
    "normalize",
    "read_orientation",
    "rotate",
    "ROTATION_LADDER",
    "DecodeAttempt",
    "RecoveryOutcome",
    "RotationRecovery",
    "RegionOfInterest",
    "RoiCalculator",
    "compute_roi",
]
