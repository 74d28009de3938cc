"""
BorderCompositor - rounded-rectangle frame around the card.

The stroke is centered on a rectangle inset by half the border width,
so it never leaves the canvas. The corner radius is clamped to half the
smaller inset side.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional, Tuple

from PIL import Image, ImageDraw

from .models import DesignSettings
from .colors import ColorParser, paint_mask
from .presets import OVERSAMPLING

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BorderGeometry:
    """Border path in logical units."""
    x: float
    y: float
    width: float
    height: float
    stroke: float
    radius: float

    @property
    def outer_radius(self) -> float:
        return self.radius + self.stroke / 2


def effective_corner_radius(width: float, height: float, border_width: float,
                            corner_radius: float) -> float:
    """
    Corner radius actually used for a border.

    Examples:
        >>> effective_corner_radius(1080, 1080, 8, 1000)
        536.0
    """
    if not math.isfinite(corner_radius):
        corner_radius = 0.0
    inset_width = width - border_width
    inset_height = height - border_width
    max_radius = max(min(inset_width, inset_height) / 2, 0.0)
    return float(min(max(corner_radius, 0.0), max_radius))


def border_geometry(logical_size: Tuple[float, float], border_width: float,
                    corner_radius: float) -> Optional[BorderGeometry]:
    """Border path for a canvas, or None when no border is drawn."""
    if not math.isfinite(border_width) or border_width <= 0:
        return None
    width, height = logical_size
    inset = border_width / 2
    return BorderGeometry(
        x=inset,
        y=inset,
        width=width - border_width,
        height=height - border_width,
        stroke=border_width,
        radius=effective_corner_radius(width, height, border_width, corner_radius),
    )


class BorderCompositor:
    """Strokes the design's border onto a canvas."""

    def __init__(self, colors: Optional[ColorParser] = None, scale: float = OVERSAMPLING):
        self.colors = colors or ColorParser()
        self.scale = scale

    def draw(self, canvas: Image.Image, settings: DesignSettings) -> Optional[BorderGeometry]:
        """
        Draw the border onto ``canvas`` in place.

        Returns:
            Geometry used (logical units), or None when border_width <= 0
        """
        logical = (canvas.width / self.scale, canvas.height / self.scale)
        geometry = border_geometry(logical, settings.border_width, settings.corner_radius)
        if geometry is None:
            return None

        logger.debug(
            f"Drawing border: width={geometry.stroke}, color={settings.border_color}, "
            f"radius={geometry.radius}"
        )

        # Pillow strokes inward from the bounding box, so draw the outer
        # edge of the centered stroke with the outer radius.
        limit = max(canvas.size)
        stroke = max(1, int(round(min(geometry.stroke * self.scale, limit))))
        radius = int(round(min(geometry.outer_radius * self.scale, limit)))
        mask = Image.new("L", canvas.size, 0)
        ImageDraw.Draw(mask).rounded_rectangle(
            [(0, 0), (canvas.width - 1, canvas.height - 1)],
            radius=radius,
            outline=255,
            width=stroke,
        )
        paint_mask(canvas, mask, self.colors.parse(settings.border_color))
        return geometry
