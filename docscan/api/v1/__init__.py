"""
==============================================================================
API v1 Endpoints
==============================================================================

Version 1 of the REST API.

Routers:
--------
- health: Health check endpoints
- scans: Scan invocations

==============================================================================
"""

from . import health, scans

__all__ = ["health", "scans"]
