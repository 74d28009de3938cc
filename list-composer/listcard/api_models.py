"""
List card API models for FastAPI endpoints.
"""

import base64
import binascii

from pydantic import BaseModel, Field
from typing import Optional, List

from .models import DesignSettings, ListContent


class RenderRequest(BaseModel):
    """Request for rendering a list card."""
    content: ListContent
    settings: DesignSettings = Field(default_factory=DesignSettings)
    format: Optional[str] = None  # instagram-post, twitter, etc.; defaults to settings.export_format
    quality: Optional[float] = None  # 0.0-1.0, defaults to service config
    image_format: str = "JPEG"  # JPEG, PNG, WEBP
    background_image_base64: Optional[str] = None  # Uploaded background
    target: Optional[str] = None  # Preview id; a newer render for the same id supersedes this one

    def design_settings(self) -> DesignSettings:
        """Settings with the uploaded background decoded, if any."""
        if not self.background_image_base64:
            return self.settings
        try:
            data = base64.b64decode(self.background_image_base64, validate=True)
        except (binascii.Error, ValueError):
            # Undecodable uploads fall through to the next background source
            data = b""
        return self.settings.model_copy(update={"background_image_data": data or None})


class OptionsResponse(BaseModel):
    """Response with available list card options."""
    formats: List[dict]
    backgrounds: List[dict]
    templates: List[dict]


class SaveResponse(BaseModel):
    """Response from saving a card to the photo library."""
    status: str
    location: Optional[str] = None
    size_bytes: Optional[int] = None
    dimensions: Optional[str] = None
    error: Optional[str] = None
