"""
==============================================================================
Application Settings Module
==============================================================================

Production-grade configuration management using Pydantic Settings.

This module implements the Singleton pattern to ensure a single global
configuration instance throughout the application lifecycle.

Features:
---------
- Environment variable loading with type validation
- .env file support for local development
- Barcode region (ROI) percentages as operator configuration
- Thread-safe singleton implementation

Configuration Priority (highest to lowest):
------------------------------------------
1. Environment variables
2. .env file
3. Default values

ROI Constant Sets:
-----------------
Two constant sets are in use for the barcode region of interest:
20/16/2 and 25/20/3 (width/height/margin percent). Neither is derived;
the operator picks one through ROI_WIDTH_PERCENT, ROI_HEIGHT_PERCENT
and ROI_MARGIN_PERCENT.

==============================================================================
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Module logger
logger = logging.getLogger(__name__)


RESPONSE_TYPE_FILE_PATH = "imageFilePath"
RESPONSE_TYPE_BASE64 = "base64"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        app_name: Display name for the application
        app_env: Environment mode (development/staging/production)
        debug: Enable debug mode for verbose logging
        host: Server bind address
        port: Server port number
        roi_width_percent: Width of the barcode region, percent of page width
        roi_height_percent: Height of the barcode region, percent of page height
        roi_margin_percent: Distance of the region from the top-right corner
        jpeg_quality: Quality of committed page images written to the cache
        cache_directory: Directory for committed page images
        capture_directory: Inbox directory used when no pages are submitted
        default_response_type: imageFilePath or base64
        cors_origins: Allowed CORS origins (JSON array string)

    Example:
        >>> settings = Settings()
        >>> print(settings.roi_width_percent)
        20
    """

    # =========================================================================
    # PYDANTIC SETTINGS CONFIGURATION
    # =========================================================================
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_default=True,
    )

    # =========================================================================
    # APPLICATION SETTINGS
    # =========================================================================
    app_name: str = Field(
        default="Document Scan Barcode Service",
        description="Display name for the application"
    )

    app_env: str = Field(
        default="development",
        description="Environment mode: development, staging, production"
    )

    debug: bool = Field(
        default=False,
        description="Enable debug mode for verbose logging"
    )

    # =========================================================================
    # SERVER SETTINGS
    # =========================================================================
    host: str = Field(
        default="0.0.0.0",
        description="Server bind address"
    )

    port: int = Field(
        default=8000,
        ge=1,
        le=65535,
        description="Server port number"
    )

    # =========================================================================
    # BARCODE REGION SETTINGS
    # =========================================================================
    roi_width_percent: int = Field(
        default=20,
        ge=1,
        le=100,
        description="Barcode region width as a percentage of the page width"
    )

    roi_height_percent: int = Field(
        default=16,
        ge=1,
        le=100,
        description="Barcode region height as a percentage of the page height"
    )

    roi_margin_percent: int = Field(
        default=2,
        ge=0,
        le=50,
        description="Margin between the barcode region and the top-right corner"
    )

    # =========================================================================
    # OUTPUT SETTINGS
    # =========================================================================
    jpeg_quality: int = Field(
        default=90,
        ge=0,
        le=100,
        description="JPEG quality of committed page images"
    )

    cache_directory: str = Field(
        default="storage/cache/document-scanner",
        description="Directory for committed page images"
    )

    capture_directory: Optional[str] = Field(
        default=None,
        description="Inbox directory scanned when a request carries no pages"
    )

    default_response_type: str = Field(
        default=RESPONSE_TYPE_FILE_PATH,
        description="Page reference format: imageFilePath or base64"
    )

    # =========================================================================
    # CORS SETTINGS
    # =========================================================================
    cors_origins: str = Field(
        default='["*"]',
        description="Allowed CORS origins as JSON array string"
    )

    # =========================================================================
    # VALIDATORS
    # =========================================================================
    @field_validator("app_env")
    @classmethod
    def validate_app_env(cls, value: str) -> str:
        """
        Validate and normalize application environment.

        Args:
            value: Raw environment value

        Returns:
            Lowercase normalized environment name
        """
        valid_envs = {"development", "staging", "production"}
        normalized = value.lower().strip()

        if normalized not in valid_envs:
            logger.warning(
                f"Unknown environment '{value}', defaulting to 'development'"
            )
            return "development"

        return normalized

    @field_validator("default_response_type")
    @classmethod
    def validate_response_type(cls, value: str) -> str:
        """
        Validate the default page reference format.

        Raises:
            ValueError: If the format is not supported
        """
        supported = {RESPONSE_TYPE_FILE_PATH, RESPONSE_TYPE_BASE64}

        if value not in supported:
            raise ValueError(
                f"Unsupported response type: {value}. "
                f"Supported: {', '.join(sorted(supported))}"
            )

        return value

    @field_validator("capture_directory")
    @classmethod
    def blank_capture_directory(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            return None
        return value

    @model_validator(mode="after")
    def validate_roi_fits(self):
        if self.roi_width_percent + self.roi_margin_percent > 100:
            raise ValueError("ROI width and margin exceed the page width")
        if self.roi_height_percent + self.roi_margin_percent > 100:
            raise ValueError("ROI height and margin exceed the page height")
        return self

    # =========================================================================
    # COMPUTED PROPERTIES
    # =========================================================================
    @property
    def cache_path(self) -> Path:
        """
        Get cache directory as Path object.

        Creates the directory if it doesn't exist.
        """
        path = Path(self.cache_directory)
        path.mkdir(parents=True, exist_ok=True)
        return path

    @property
    def capture_path(self) -> Optional[Path]:
        """Get the inbox directory, or None when not configured."""
        if self.capture_directory is None:
            return None
        return Path(self.capture_directory)

    @property
    def cors_origins_list(self) -> List[str]:
        """
        Parse CORS origins from JSON string to list.

        Returns:
            List of allowed origin strings
        """
        try:
            origins = json.loads(self.cors_origins)
            if isinstance(origins, list):
                return origins
            return ["*"]
        except json.JSONDecodeError:
            logger.warning(
                f"Invalid CORS origins JSON: {self.cors_origins}, "
                "defaulting to ['*']"
            )
            return ["*"]

    # =========================================================================
    # UTILITY METHODS
    # =========================================================================
    def ensure_directories(self) -> None:
        """Create the cache directory."""
        self.cache_path.mkdir(parents=True, exist_ok=True)
        logger.debug("Required directories created/verified")

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"Settings(app_name={self.app_name!r}, "
            f"app_env={self.app_env!r}, "
            f"roi={self.roi_width_percent}/{self.roi_height_percent}/"
            f"{self.roi_margin_percent}, "
            f"debug={self.debug})"
        )


# =============================================================================
# SINGLETON INSTANCE MANAGEMENT
# =============================================================================

@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get the global Settings instance (singleton pattern).

    Uses lru_cache to ensure only one Settings instance is created
    throughout the application lifecycle.

    Returns:
        Global Settings instance
    """
    settings = Settings()

    settings.ensure_directories()

    if settings.debug:
        logger.info(f"Configuration loaded: {settings}")

    return settings
