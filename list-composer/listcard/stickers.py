"""
StickerCompositor - decorative overlays on top of the card.

Stickers are drawn in list order (later stickers on top). Each sticker
is a square of BASE_STICKER_SIZE * scale logical units centered on its
position and rotated about that position.
"""

import math
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from PIL import Image

from .models import StickerItem
from .assets import AssetLibrary
from .presets import OVERSAMPLING

logger = logging.getLogger(__name__)

BASE_STICKER_SIZE = 100


@dataclass(frozen=True)
class StickerFrame:
    """Axis-aligned box in logical units."""
    left: float
    top: float
    right: float
    bottom: float

    @property
    def center(self) -> Tuple[float, float]:
        return ((self.left + self.right) / 2, (self.top + self.bottom) / 2)

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top


def sticker_frame(sticker: StickerItem, base_size: float = BASE_STICKER_SIZE) -> StickerFrame:
    """Unrotated square frame of a sticker."""
    side = base_size * sticker.scale
    x, y = sticker.position
    return StickerFrame(x - side / 2, y - side / 2, x + side / 2, y + side / 2)


def rotated_bounds(sticker: StickerItem, base_size: float = BASE_STICKER_SIZE) -> StickerFrame:
    """Bounding box of a sticker after rotation about its own position."""
    frame = sticker_frame(sticker, base_size)
    if sticker.rotation == 0:
        return frame
    cx, cy = sticker.position
    cos_a = math.cos(sticker.rotation)
    sin_a = math.sin(sticker.rotation)
    corners = [
        (frame.left, frame.top), (frame.right, frame.top),
        (frame.right, frame.bottom), (frame.left, frame.bottom),
    ]
    xs, ys = [], []
    for px, py in corners:
        dx, dy = px - cx, py - cy
        xs.append(cx + dx * cos_a - dy * sin_a)
        ys.append(cy + dx * sin_a + dy * cos_a)
    return StickerFrame(min(xs), min(ys), max(xs), max(ys))


@dataclass
class PlacedSticker:
    """Where a sticker ended up on the canvas (pixels)."""
    sticker: StickerItem
    box: Tuple[int, int, int, int]


class StickerCompositor:
    """Draws stickers from the asset library onto a canvas."""

    def __init__(self, assets: Optional[AssetLibrary] = None, scale: float = OVERSAMPLING,
                 base_size: float = BASE_STICKER_SIZE):
        self.assets = assets or AssetLibrary()
        self.scale = scale
        self.base_size = base_size

    def render_sticker(self, sticker: StickerItem) -> Optional[Image.Image]:
        """Sized and rotated sticker image, or None when it can't be drawn."""
        image = self.assets.load(sticker.asset_name)
        if image is None:
            logger.debug(f"Sticker asset '{sticker.asset_name}' not found, skipping")
            return None

        side = int(round(self.base_size * sticker.scale * self.scale))
        if side < 1:
            logger.debug(f"Sticker '{sticker.asset_name}' has no visible size, skipping")
            return None

        image = image.resize((side, side), Image.Resampling.LANCZOS)
        if sticker.rotation:
            # PIL rotates counter-clockwise; positive radians turn
            # clockwise on the y-down canvas
            image = image.rotate(
                -math.degrees(sticker.rotation),
                resample=Image.Resampling.BICUBIC,
                expand=True,
                fillcolor=(0, 0, 0, 0),
            )
        return image

    def is_visible(self, sticker: StickerItem, canvas_size: Tuple[int, int]) -> bool:
        """True when the sticker has finite geometry and overlaps the canvas."""
        values = (sticker.x, sticker.y, sticker.scale, sticker.rotation)
        if not all(math.isfinite(v) for v in values):
            return False
        bounds = rotated_bounds(sticker, self.base_size)
        width = canvas_size[0] / self.scale
        height = canvas_size[1] / self.scale
        return (bounds.right > 0 and bounds.bottom > 0
                and bounds.left < width and bounds.top < height)

    def _transform_layer(self, sticker: StickerItem, side: float,
                         canvas_size: Tuple[int, int]) -> Optional[Image.Image]:
        """
        Map the asset straight onto a canvas-sized layer.

        Used for stickers larger than the canvas, so nothing bigger than
        the canvas is ever allocated.
        """
        image = self.assets.load(sticker.asset_name)
        if image is None:
            logger.debug(f"Sticker asset '{sticker.asset_name}' not found, skipping")
            return None

        cx = sticker.x * self.scale
        cy = sticker.y * self.scale
        cos_a = math.cos(sticker.rotation)
        sin_a = math.sin(sticker.rotation)
        kx = image.width / side
        ky = image.height / side

        # Inverse of: scale to side, rotate about the center, move to (cx, cy)
        a, b = cos_a * kx, sin_a * kx
        d, e = -sin_a * ky, cos_a * ky
        c = image.width / 2 - a * cx - b * cy
        f = image.height / 2 - d * cx - e * cy
        return image.transform(
            canvas_size,
            Image.Transform.AFFINE,
            (a, b, c, d, e, f),
            resample=Image.Resampling.BICUBIC,
            fillcolor=(0, 0, 0, 0),
        )

    def draw(self, canvas: Image.Image, stickers: Sequence[StickerItem]) -> List[PlacedSticker]:
        """
        Draw stickers onto ``canvas`` in place.

        Stickers with non-finite geometry or entirely off the canvas are
        skipped.

        Returns:
            One PlacedSticker per sticker actually drawn
        """
        placed = []
        max_side = math.hypot(*canvas.size)
        for sticker in stickers:
            if not self.is_visible(sticker, canvas.size):
                logger.debug(f"Sticker '{sticker.asset_name}' is off the canvas, skipping")
                continue

            side = self.base_size * sticker.scale * self.scale
            if side > max_side:
                layer = self._transform_layer(sticker, side, canvas.size)
                if layer is None:
                    continue
                canvas.alpha_composite(layer)
                bounds = rotated_bounds(sticker, self.base_size)
                box = (
                    max(int(math.floor(bounds.left * self.scale)), 0),
                    max(int(math.floor(bounds.top * self.scale)), 0),
                    min(int(math.ceil(bounds.right * self.scale)), canvas.width),
                    min(int(math.ceil(bounds.bottom * self.scale)), canvas.height),
                )
                placed.append(PlacedSticker(sticker=sticker, box=box))
                continue

            image = self.render_sticker(sticker)
            if image is None:
                continue

            cx = sticker.x * self.scale
            cy = sticker.y * self.scale
            left = int(round(cx - image.width / 2))
            top = int(round(cy - image.height / 2))

            layer = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
            layer.paste(image, (left, top))
            canvas.alpha_composite(layer)
            placed.append(PlacedSticker(
                sticker=sticker,
                box=(left, top, left + image.width, top + image.height),
            ))
        return placed
