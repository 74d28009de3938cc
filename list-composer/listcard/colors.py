"""
Hex color parsing for design settings.

Accepted shapes (after stripping every non-alphanumeric character):
- RGB (12-bit):  "F0A"       -> each nibble * 17
- RGB (24-bit):  "FF00AA"
- ARGB (32-bit): "80FF00AA"  -> first byte is alpha

Anything else parses to opaque black. Parsing never raises.
"""

import re
from functools import lru_cache
from typing import NamedTuple

from PIL import Image


class RGBA(NamedTuple):
    r: int
    g: int
    b: int
    a: int = 255

    @property
    def rgb(self) -> tuple:
        return (self.r, self.g, self.b)


BLACK = RGBA(0, 0, 0, 255)

_NON_ALNUM = re.compile(r'[^0-9A-Za-z]')


@lru_cache(maxsize=256)
def parse_hex(value: str) -> RGBA:
    """
    Parse a hex color string.

    Examples:
        >>> parse_hex("#FFF")
        RGBA(r=255, g=255, b=255, a=255)
        >>> parse_hex("#80FF0000")
        RGBA(r=255, g=0, b=0, a=128)
    """
    digits = _NON_ALNUM.sub('', value or '')
    try:
        number = int(digits, 16)
    except ValueError:
        return BLACK

    if len(digits) == 3:
        return RGBA((number >> 8) * 17, (number >> 4 & 0xF) * 17, (number & 0xF) * 17)
    if len(digits) == 6:
        return RGBA(number >> 16, number >> 8 & 0xFF, number & 0xFF)
    if len(digits) == 8:
        return RGBA(number >> 16 & 0xFF, number >> 8 & 0xFF, number & 0xFF, number >> 24)
    return BLACK


class ColorParser:
    """Injectable wrapper around parse_hex (shared bounded cache)."""

    def parse(self, value: str) -> RGBA:
        return parse_hex(value)


def paint_mask(canvas, mask, color: RGBA) -> None:
    """
    Composite a solid ``color`` onto an RGBA ``canvas`` through an "L" mask.

    The mask is scaled by the color's own alpha, so translucent colors
    blend over whatever is already on the canvas.
    """
    alpha = mask if color.a == 255 else mask.point(lambda v: v * color.a // 255)
    layer = Image.new("RGBA", canvas.size, (color.r, color.g, color.b, 0))
    layer.putalpha(alpha)
    canvas.alpha_composite(layer)
