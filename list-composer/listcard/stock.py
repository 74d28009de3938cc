"""
ProceduralBackgroundGenerator - code-generated stock backgrounds.

Every stock background is drawn with Pillow at STOCK_SIZE and later
scaled onto the card (aspect-fill). Supported families:
- Solid:    single color fill
- Gradient: two-stop diagonal gradient (also the "nature" set)
- Pattern:  dot grid, vertical line grid
- Texture:  paper noise, fabric crosshatch
- Abstract: sine waves over a gradient, scattered circles/squares

Paper noise and scattered shapes draw from a random source. Pass a seed
(or an explicit random.Random) to make them reproducible.
"""

import math
import random
import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple

import numpy as np
from PIL import Image, ImageDraw

from .colors import RGBA, parse_hex

logger = logging.getLogger(__name__)

STOCK_SIZE = (1080, 1080)

# Number of steps in the gradient lookup table
_GRADIENT_STEPS = 4096

# Platform palette used by the stock set
_BLUE = "#0000FF"
_CYAN = "#00FFFF"
_ORANGE = "#FF8000"
_RED = "#FF0000"
_PURPLE = "#800080"
_MAGENTA = "#FF00FF"
_GREEN = "#00FF00"
_WHITE = "#FFFFFF"
_BLACK = "#000000"
_SYSTEM_TEAL = "#30B0C7"
_SYSTEM_BLUE = "#007AFF"
_SYSTEM_GREEN = "#34C759"
_SYSTEM_PURPLE = "#AF52DE"
_SYSTEM_INDIGO = "#5856D6"
_SYSTEM_GRAY = "#8E8E93"
_SYSTEM_GRAY4 = "#D1D1D6"
_SYSTEM_GRAY5 = "#E5E5EA"
_SYSTEM_GRAY6 = "#F2F2F7"
_PAPER = (250, 247, 242)
_FABRIC = (242, 240, 235)


class StockCategory(Enum):
    """Stock background groups shown in the picker."""
    GRADIENT = "Gradients"
    SOLID = "Solid Colors"
    PATTERN = "Patterns"
    TEXTURE = "Textures"
    NATURE = "Nature"
    ABSTRACT = "Abstract"


@dataclass(frozen=True)
class StockBackground:
    """A named stock background and how to paint it."""
    name: str
    display_name: str
    category: StockCategory
    painter: str
    colors: Tuple[str, ...] = ()


STOCK_BACKGROUNDS: List[StockBackground] = [
    StockBackground("gradient-blue", "Blue Gradient", StockCategory.GRADIENT, "gradient", (_BLUE, _CYAN)),
    StockBackground("gradient-sunset", "Sunset Gradient", StockCategory.GRADIENT, "gradient", (_ORANGE, _RED)),
    StockBackground("gradient-purple", "Purple Gradient", StockCategory.GRADIENT, "gradient", (_PURPLE, _MAGENTA)),
    StockBackground("gradient-green", "Green Gradient", StockCategory.GRADIENT, "gradient", (_GREEN, _SYSTEM_TEAL)),
    StockBackground("solid-white", "White", StockCategory.SOLID, "solid", (_WHITE,)),
    StockBackground("solid-black", "Black", StockCategory.SOLID, "solid", (_BLACK,)),
    StockBackground("solid-gray", "Gray", StockCategory.SOLID, "solid", (_SYSTEM_GRAY,)),
    StockBackground("pattern-dots", "Dots Pattern", StockCategory.PATTERN, "dots"),
    StockBackground("pattern-lines", "Lines Pattern", StockCategory.PATTERN, "lines"),
    StockBackground("texture-paper", "Paper Texture", StockCategory.TEXTURE, "paper"),
    StockBackground("texture-fabric", "Fabric Texture", StockCategory.TEXTURE, "fabric"),
    StockBackground("nature-sky", "Sky", StockCategory.NATURE, "gradient", (_SYSTEM_BLUE, _WHITE)),
    StockBackground("nature-ocean", "Ocean", StockCategory.NATURE, "gradient", (_SYSTEM_TEAL, _SYSTEM_BLUE)),
    StockBackground("nature-forest", "Forest", StockCategory.NATURE, "gradient", (_SYSTEM_GREEN, _SYSTEM_TEAL)),
    StockBackground("abstract-waves", "Waves", StockCategory.ABSTRACT, "waves", (_SYSTEM_PURPLE, _MAGENTA)),
    StockBackground("abstract-shapes", "Shapes", StockCategory.ABSTRACT, "shapes"),
]

# Painters that consume the random source
RANDOM_PAINTERS = {"paper", "shapes"}


def diagonal_gradient(size: Tuple[int, int], colors: Sequence[RGBA]) -> Image.Image:
    """
    Linear gradient from the top-left to the bottom-right corner.

    Stops are evenly spaced. Each pixel is projected onto the diagonal,
    so both corners get exactly the first and last color.
    """
    width, height = size
    stops = np.linspace(0.0, 1.0, len(colors))
    ramp = np.linspace(0.0, 1.0, _GRADIENT_STEPS)
    lut = np.stack(
        [np.interp(ramp, stops, [c[i] for c in colors]) for i in range(4)],
        axis=-1,
    )
    lut = np.rint(lut).astype(np.uint8)

    xs = np.arange(width, dtype=np.float32) * width
    ys = np.arange(height, dtype=np.float32) * height
    denom = float(max((width - 1) * width + (height - 1) * height, 1))
    t = (ys[:, None] + xs[None, :]) / denom
    index = np.rint(np.clip(t, 0.0, 1.0) * (_GRADIENT_STEPS - 1)).astype(np.int32)
    return Image.fromarray(np.ascontiguousarray(lut[index]))


def get_stock_entry(name: str) -> Optional[StockBackground]:
    """Match a background name against the stock catalog (substring match)."""
    if not name:
        return None
    for entry in STOCK_BACKGROUNDS:
        if entry.name in name:
            return entry
    return None


class ProceduralBackgroundGenerator:
    """
    Paints stock backgrounds by name.

    The random source is injected: pass ``seed`` for a fresh seeded
    generator per call, or ``rng`` to share one explicit generator.
    """

    def __init__(self, rng: Optional[random.Random] = None, seed: Optional[int] = None,
                 size: Tuple[int, int] = STOCK_SIZE):
        self.seed = seed
        self.size = size
        self._rng = rng or random.Random()

    def _random(self) -> random.Random:
        if self.seed is not None:
            return random.Random(self.seed)
        return self._rng

    def generate(self, name: str) -> Optional[Image.Image]:
        """
        Generate a stock background.

        Args:
            name: Stock background name (e.g., "gradient-blue")

        Returns:
            RGBA image at self.size, or None for names outside the catalog
        """
        entry = get_stock_entry(name)
        if entry is None:
            logger.warning(f"No stock background matches '{name}'")
            return None

        painter = getattr(self, f"_paint_{entry.painter}")
        colors = [parse_hex(c) for c in entry.colors]
        image = painter(colors)
        return image.convert("RGBA")

    def is_deterministic(self, name: str) -> bool:
        """True when a name renders identically without a seed."""
        entry = get_stock_entry(name)
        return entry is None or entry.painter not in RANDOM_PAINTERS or self.seed is not None

    def _paint_solid(self, colors: List[RGBA]) -> Image.Image:
        return Image.new("RGBA", self.size, tuple(colors[0]))

    def _paint_gradient(self, colors: List[RGBA]) -> Image.Image:
        return diagonal_gradient(self.size, colors)

    def _paint_dots(self, colors: List[RGBA]) -> Image.Image:
        width, height = self.size
        image = Image.new("RGB", self.size, parse_hex(_SYSTEM_GRAY6).rgb)
        draw = ImageDraw.Draw(image)
        dot, spacing = 20, 40
        for x in range(0, width, spacing):
            for y in range(0, height, spacing):
                draw.ellipse([(x, y), (x + dot, y + dot)], fill=parse_hex(_SYSTEM_GRAY4).rgb)
        return image

    def _paint_lines(self, colors: List[RGBA]) -> Image.Image:
        width, height = self.size
        image = Image.new("RGB", self.size, parse_hex(_SYSTEM_GRAY6).rgb)
        draw = ImageDraw.Draw(image)
        for x in range(0, width, 30):
            draw.line([(x, 0), (x, height)], fill=parse_hex(_SYSTEM_GRAY4).rgb, width=2)
        return image

    def _paint_paper(self, colors: List[RGBA]) -> Image.Image:
        width, height = self.size
        rng = self._random()
        image = Image.new("RGB", self.size, _PAPER)
        draw = ImageDraw.Draw(image)
        speck = parse_hex(_SYSTEM_GRAY5).rgb
        for _ in range(1000):
            x = rng.uniform(0, width)
            y = rng.uniform(0, height)
            d = rng.uniform(1, 3)
            draw.ellipse([(x, y), (x + d, y + d)], fill=speck)
        return image

    def _paint_fabric(self, colors: List[RGBA]) -> Image.Image:
        width, height = self.size
        image = Image.new("RGB", self.size, _FABRIC)
        draw = ImageDraw.Draw(image)
        thread = parse_hex(_SYSTEM_GRAY4).rgb
        for y in range(0, height, 20):
            draw.line([(0, y), (width, y)], fill=thread, width=1)
        for x in range(0, width, 20):
            draw.line([(x, 0), (x, height)], fill=thread, width=1)
        return image

    def _paint_waves(self, colors: List[RGBA]) -> Image.Image:
        width, height = self.size
        image = diagonal_gradient(self.size, colors).convert("RGB")
        draw = ImageDraw.Draw(image, "RGBA")
        wave_height, wave_length = 60, 120
        for y in range(0, height, wave_height * 2):
            points = [
                (x, y + math.sin(x / wave_length * 2 * math.pi) * wave_height)
                for x in range(0, width, wave_length // 4)
            ]
            draw.line([(0, y)] + points, fill=(255, 255, 255, 77), width=3)
        return image

    def _paint_shapes(self, colors: List[RGBA]) -> Image.Image:
        width, height = self.size
        rng = self._random()
        image = Image.new("RGB", self.size, parse_hex(_SYSTEM_INDIGO).rgb)
        draw = ImageDraw.Draw(image, "RGBA")
        fill = (255, 255, 255, 51)
        for _ in range(20):
            x = rng.uniform(0, width)
            y = rng.uniform(0, height)
            side = rng.uniform(30, 80)
            if rng.random() < 0.5:
                draw.ellipse([(x, y), (x + side, y + side)], fill=fill)
            else:
                draw.rectangle([(x, y), (x + side, y + side)], fill=fill)
        return image


def get_background_options() -> List[dict]:
    """Get stock backgrounds for user selection."""
    return [
        {
            "id": entry.name,
            "name": entry.display_name,
            "category": entry.category.value,
        }
        for entry in STOCK_BACKGROUNDS
    ]
