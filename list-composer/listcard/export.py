"""
Export helpers: compression, saving and sharing finished cards.

- compress_image: pixel buffer -> encoded bytes, quality 0.0-1.0
- save_to_library: one-shot write into a photo library collaborator,
  reported as a SaveResult with an explicit error kind
- share: records where the user shared a card (telemetry only)
"""

import io
import asyncio
import logging
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from PIL import Image

from .generator import RasterImage

logger = logging.getLogger(__name__)

DEFAULT_QUALITY = 0.8

MEDIA_TYPES = {
    "JPEG": "image/jpeg",
    "PNG": "image/png",
    "WEBP": "image/webp",
}


def compress_image(
    image: Union[RasterImage, Image.Image],
    quality: float = DEFAULT_QUALITY,
    image_format: str = "JPEG",
) -> bytes:
    """
    Encode a rendered card.

    Args:
        image: Rendered card
        quality: 0.0 (smallest) to 1.0 (best); clamped
        image_format: JPEG, PNG or WEBP

    Returns:
        Encoded image bytes
    """
    if isinstance(image, RasterImage):
        image = image.image

    image_format = image_format.upper()
    if image_format == "JPG":
        image_format = "JPEG"
    if image_format not in MEDIA_TYPES:
        raise ValueError(f"Unsupported image format: {image_format}")

    quality = min(max(float(quality), 0.0), 1.0)

    # JPEG has no alpha channel
    if image_format == "JPEG" and image.mode == "RGBA":
        rgb_image = Image.new("RGB", image.size, (255, 255, 255))
        rgb_image.paste(image, mask=image.split()[3])
        image = rgb_image

    buffer = io.BytesIO()
    if image_format == "PNG":
        image.save(buffer, format=image_format)
    else:
        image.save(buffer, format=image_format, quality=max(1, int(round(quality * 100))))
    return buffer.getvalue()


class SaveErrorKind(Enum):
    PERMISSION_DENIED = "permission_denied"
    WRITE_FAILED = "write_failed"


@dataclass
class SaveResult:
    """Outcome of saving a card to the photo library."""
    location: Optional[str] = None
    error: Optional[SaveErrorKind] = None
    detail: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class PhotoLibrary(ABC):
    """Destination for saved cards. Access is one-shot and not reentrant."""

    @abstractmethod
    def request_authorization(self) -> bool:
        """Return True when writes are permitted."""

    @abstractmethod
    def write(self, data: bytes) -> str:
        """Store encoded image bytes, returning where they went."""


class DirectoryPhotoLibrary(PhotoLibrary):
    """Photo library backed by a local directory."""

    def __init__(self, root: Union[str, Path], allow_writes: bool = True, extension: str = "jpg"):
        self.root = Path(root)
        self.allow_writes = allow_writes
        self.extension = extension

    def request_authorization(self) -> bool:
        return self.allow_writes

    def write(self, data: bytes) -> str:
        self.root.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S")
        path = self.root / f"card_{stamp}_{uuid.uuid4().hex[:8]}.{self.extension}"
        path.write_bytes(data)
        return str(path)


async def save_to_library(library: PhotoLibrary, data: bytes) -> SaveResult:
    """
    Save encoded card bytes to a photo library.

    Permission is checked first; a denied request never attempts the write.
    Both the check and the write run off the event loop.
    """
    authorized = await asyncio.to_thread(library.request_authorization)
    if not authorized:
        logger.error("Photo library access denied")
        return SaveResult(error=SaveErrorKind.PERMISSION_DENIED, detail="Photo library access denied")

    try:
        location = await asyncio.to_thread(library.write, data)
    except OSError as e:
        logger.error(f"Saving to photo library failed: {e}")
        return SaveResult(error=SaveErrorKind.WRITE_FAILED, detail=str(e))

    logger.info(f"Saved card ({len(data)} bytes) to {location}")
    return SaveResult(location=location)


@dataclass(frozen=True)
class ShareReceipt:
    """Record of a share; the platform is informational only."""
    platform: str
    size_bytes: int
    shared_at: datetime


def share(data: bytes, platform: str) -> ShareReceipt:
    """Record that encoded card bytes were shared to ``platform``."""
    receipt = ShareReceipt(
        platform=platform,
        size_bytes=len(data),
        shared_at=datetime.now(timezone.utc),
    )
    logger.info(f"Card shared to {platform} ({receipt.size_bytes} bytes)")
    return receipt
