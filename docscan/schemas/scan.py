"""
==============================================================================
Scan Schemas Module
==============================================================================

Request and response schemas for scan invocations.

Field names on the wire follow the host application's camelCase
(maxPages, responseType, croppedImageQuality, scannedImages); Python code
uses snake_case through aliases.

==============================================================================
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


ResponseType = Literal["imageFilePath", "base64"]

STATUS_SUCCESS = "success"
STATUS_CANCELLED = "cancelled"


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================

class ScanOptions(BaseModel):
    """Per-invocation pipeline options."""
    max_pages: Optional[int] = Field(default=None, ge=1)
    response_type: ResponseType = Field(default="imageFilePath")
    quality: int = Field(default=90, ge=0, le=100)


class ScanRequest(BaseModel):
    """
    Scan invocation.

    Without pages, the configured inbox directory is the capture source.
    """
    model_config = ConfigDict(populate_by_name=True)

    pages: Optional[List[str]] = Field(default=None)
    cancelled: bool = Field(default=False)
    max_pages: Optional[int] = Field(default=None, ge=1, alias="maxPages")
    response_type: Optional[ResponseType] = Field(default=None, alias="responseType")
    cropped_image_quality: Optional[int] = Field(
        default=None, ge=0, le=100, alias="croppedImageQuality"
    )

    @field_validator("pages")
    @classmethod
    def strip_pages(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        if v is None:
            return None
        return [page.strip() for page in v]

    def to_options(self, default_response_type: str, default_quality: int) -> ScanOptions:
        """Merge request options over configured defaults."""
        return ScanOptions(
            max_pages=self.max_pages,
            response_type=self.response_type or default_response_type,
            quality=(
                self.cropped_image_quality
                if self.cropped_image_quality is not None
                else default_quality
            ),
        )


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class PageResult(BaseModel):
    """Final image reference and barcode of one page."""
    uri: str
    barcode: Optional[str] = None
    success: bool = False

    @model_validator(mode="after")
    def validate_success(self):
        if self.success != (self.barcode is not None):
            raise ValueError("success must be true exactly when a barcode is present")
        return self

    @classmethod
    def create(cls, uri: str, barcode: Optional[str]) -> "PageResult":
        return cls(uri=uri, barcode=barcode, success=barcode is not None)


class ScanResponse(BaseModel):
    """Ordered page results of one invocation."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    status: Literal["success", "cancelled"]
    scanned_images: List[PageResult] = Field(default_factory=list, alias="scannedImages")

    @classmethod
    def completed(cls, results: List[PageResult]) -> "ScanResponse":
        return cls(status=STATUS_SUCCESS, scanned_images=list(results))

    @classmethod
    def cancelled(cls) -> "ScanResponse":
        return cls(status=STATUS_CANCELLED, scanned_images=[])


class ScanStatusResponse(BaseModel):
    """Admission gate state."""
    in_progress: bool
    started_at: Optional[str] = None
