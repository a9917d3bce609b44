"""
==============================================================================
Configuration Package
==============================================================================

Centralized configuration management using Pydantic Settings.

Usage:
------
    from docscan.config import get_settings, Settings

    settings = get_settings()
    print(settings.roi_width_percent)

==============================================================================
"""

from .settings import (
    RESPONSE_TYPE_BASE64,
    RESPONSE_TYPE_FILE_PATH,
    Settings,
    get_settings,
)

__all__ = [
    "RESPONSE_TYPE_BASE64",
    "RESPONSE_TYPE_FILE_PATH",
    "Settings",
    "get_settings",
]
