"""
==============================================================================
Services Package - Business Logic Layer
==============================================================================

Service classes implementing the scan workflow.

This package provides:
- ScanService: One scan invocation from capture to response
- ResultAssembler: Persisted page references and ordered results
- ScanGate: Single-slot admission gate

Architecture Pattern: Service Layer
----------------------------------

    ┌─────────────────┐
    │   API Router    │
    └────────┬────────┘
             │
    ┌────────▼────────┐
    │   ScanService   │  ← Gate, capture, page loop
    └────────┬────────┘
             │
    ┌────────▼────────┐
    │     Scanner     │  ← Orientation, ROI, decode, rotation ladder
    └─────────────────┘

==============================================================================
"""

from .assembler import PageOutcome, ResultAssembler
from .scan_gate import ScanGate, ScanTicket, get_scan_gate
from .scan_service import ScanService

__all__ = [
    "PageOutcome",
    "ResultAssembler",
    "ScanGate",
    "ScanTicket",
    "get_scan_gate",
    "ScanService",
]
