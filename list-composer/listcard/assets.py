"""
AssetLibrary - bundled images for backgrounds and stickers.

Assets are looked up by name, first in an in-memory registry, then as
image files inside the assets directory (``<name>.png``, ``.jpg``, ...).
"""

import io
import logging
import threading
from pathlib import Path
from typing import Dict, Optional, Union

from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

ASSET_EXTENSIONS = (".png", ".webp", ".jpg", ".jpeg")


def decode_image(data: bytes) -> Optional[Image.Image]:
    """Decode raw image bytes, returning None when they are not an image."""
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        logger.warning(f"Could not decode image data ({len(data)} bytes): {e}")
        return None
    return image


class AssetLibrary:
    """
    Resolves named image assets.

    Loaded images are cached; callers always receive a copy so drawing
    never mutates the cached original.
    """

    def __init__(self, assets_dir: Optional[Union[str, Path]] = None):
        """
        Args:
            assets_dir: Directory holding bundled asset files. May be None.
        """
        self.assets_dir = Path(assets_dir) if assets_dir else None
        self._registry: Dict[str, Image.Image] = {}
        self._lock = threading.Lock()

    def register(self, name: str, image: Image.Image) -> None:
        """Register an in-memory asset under a name."""
        with self._lock:
            self._registry[name] = image.convert("RGBA")

    def _find_file(self, name: str) -> Optional[Path]:
        if not self.assets_dir:
            return None
        # Names are flat identifiers, never paths
        if Path(name).name != name:
            logger.warning(f"Rejected asset name with path components: {name!r}")
            return None
        for ext in ("",) + ASSET_EXTENSIONS:
            candidate = self.assets_dir / f"{name}{ext}"
            if candidate.is_file():
                return candidate
        return None

    def load(self, name: Optional[str]) -> Optional[Image.Image]:
        """
        Load an asset by name.

        Returns:
            RGBA copy of the asset, or None when the name is unknown
        """
        if not name:
            return None

        with self._lock:
            cached = self._registry.get(name)
        if cached is not None:
            return cached.copy()

        path = self._find_file(name)
        if path is None:
            return None

        image = decode_image(path.read_bytes())
        if image is None:
            return None

        image = image.convert("RGBA")
        with self._lock:
            self._registry[name] = image
        logger.info(f"Loaded asset '{name}' from {path}")
        return image.copy()

    def has(self, name: str) -> bool:
        with self._lock:
            if name in self._registry:
                return True
        return self._find_file(name) is not None
