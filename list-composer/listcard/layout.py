"""
TextLayoutEngine - title and numbered item rows.

Handles:
1. Font family selection from the design's font name
2. Word wrapping inside the content width
3. Fixed vertical rhythm: margin, title slot, one slot per item
4. Drawing text in the design's text color

All layout constants are logical units; they are multiplied by the
canvas scale factor. Text running past the bottom edge is not clipped
or reflowed; the layout reports it through ``overflows``.
"""

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from PIL import Image, ImageDraw, ImageFont

from .models import DesignSettings, ListContent
from .colors import ColorParser, paint_mask
from .presets import OVERSAMPLING

logger = logging.getLogger(__name__)


MARGIN = 80
TITLE_HEIGHT = 160
ITEM_HEIGHT = 120
SPACING = 40
TITLE_FONT_SIZE = 84
ITEM_FONT_SIZE = 64


class FontFamily(Enum):
    DEFAULT = "default"
    SERIF = "serif"
    ROUNDED = "rounded"


FONT_CANDIDATES = {
    (FontFamily.DEFAULT, False): [
        "Inter-Regular.ttf",
        "DejaVuSans.ttf",
        "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
        "/System/Library/Fonts/Helvetica.ttc",
        "C:\\Windows\\Fonts\\arial.ttf",
    ],
    (FontFamily.DEFAULT, True): [
        "Inter-Bold.ttf",
        "DejaVuSans-Bold.ttf",
        "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
        "/System/Library/Fonts/Helvetica.ttc",
        "C:\\Windows\\Fonts\\arialbd.ttf",
    ],
    (FontFamily.SERIF, False): [
        "DejaVuSerif.ttf",
        "/usr/share/fonts/truetype/dejavu/DejaVuSerif.ttf",
        "/System/Library/Fonts/Supplemental/Georgia.ttf",
        "C:\\Windows\\Fonts\\georgia.ttf",
    ],
    (FontFamily.SERIF, True): [
        "DejaVuSerif-Bold.ttf",
        "/usr/share/fonts/truetype/dejavu/DejaVuSerif-Bold.ttf",
        "/System/Library/Fonts/Supplemental/Georgia Bold.ttf",
        "C:\\Windows\\Fonts\\georgiab.ttf",
    ],
    (FontFamily.ROUNDED, False): [
        "Nunito-Regular.ttf",
        "VarelaRound-Regular.ttf",
        "/System/Library/Fonts/SFNSRounded.ttf",
    ],
    (FontFamily.ROUNDED, True): [
        "Nunito-Bold.ttf",
        "VarelaRound-Regular.ttf",
        "/System/Library/Fonts/SFNSRounded.ttf",
    ],
}


def font_style(font_name: str) -> Tuple[FontFamily, bool]:
    """
    Map a logical font name to a family and an item-weight flag.

    Examples:
        "system-serif"       -> (SERIF, False)
        "system-handwritten" -> (ROUNDED, False)
        "system-bold"        -> (DEFAULT, True)
    """
    name = (font_name or "").lower()
    bold = "bold" in name
    if "serif" in name:
        return FontFamily.SERIF, bold
    if "handwritten" in name:
        return FontFamily.ROUNDED, bold
    return FontFamily.DEFAULT, bold


class FontResolver:
    """Loads and caches fonts by (family, bold, size)."""

    def __init__(self, fonts_dir: Optional[Union[str, Path]] = None):
        self.fonts_dir = Path(fonts_dir) if fonts_dir else None
        self._cache: Dict[tuple, ImageFont.ImageFont] = {}
        self._lock = threading.Lock()

    def _paths(self, family: FontFamily, bold: bool) -> List[str]:
        names = list(FONT_CANDIDATES[(family, bold)])
        if family != FontFamily.DEFAULT:
            names += FONT_CANDIDATES[(FontFamily.DEFAULT, bold)]
        if self.fonts_dir:
            local = [str(self.fonts_dir / Path(n).name) for n in names]
            names = local + names
        return names

    def get(self, family: FontFamily, bold: bool, size: int):
        key = (family, bold, size)
        with self._lock:
            font = self._cache.get(key)
        if font is not None:
            return font

        font = None
        for path in self._paths(family, bold):
            try:
                font = ImageFont.truetype(path, size)
                break
            except OSError:
                continue
        if font is None:
            logger.warning(f"No font file for {family.value} bold={bold}, using Pillow default")
            font = ImageFont.load_default(size=size)

        with self._lock:
            self._cache[key] = font
        return font


def line_height(font) -> int:
    """Height of one text line for ``font``."""
    try:
        ascent, descent = font.getmetrics()
        return ascent + descent
    except AttributeError:
        left, top, right, bottom = font.getbbox("Ag")
        return bottom - top


def wrap_text(text: str, font, max_width: float) -> List[str]:
    """
    Word-wrap ``text`` so every line fits ``max_width`` pixels.

    Words wider than a full line are broken by characters.
    """
    words = text.split()
    lines = []
    current = ""
    for word in words:
        candidate = f"{current} {word}".strip()
        if font.getlength(candidate) <= max_width:
            current = candidate
            continue
        if current:
            lines.append(current)
        if font.getlength(word) <= max_width:
            current = word
            continue
        partial = ""
        for ch in word:
            if partial and font.getlength(partial + ch) > max_width:
                lines.append(partial)
                partial = ch
            else:
                partial += ch
        current = partial
    if current:
        lines.append(current)
    return lines


@dataclass
class TextBlock:
    """A laid-out title or item row."""
    text: str
    lines: List[str]
    x: int
    y: int
    width: int
    height: int
    font_size: int
    bold: bool
    index: Optional[int] = None   # None for the title

    @property
    def bottom(self) -> int:
        return self.y + self.height


@dataclass
class TextLayout:
    """Complete text layout for one canvas."""
    canvas_width: int
    canvas_height: int
    family: FontFamily
    blocks: List[TextBlock] = field(default_factory=list)

    @property
    def bottom(self) -> int:
        return max((b.bottom for b in self.blocks), default=0)

    @property
    def overflows(self) -> bool:
        return self.bottom > self.canvas_height


class TextLayoutEngine:
    """
    Lays out and draws list text.

    Features:
    - Title in large bold type, items in smaller regular type
    - Items prefixed with their rank ("1. ", "2. ", ...)
    - Left aligned, word wrapped rows
    """

    def __init__(
        self,
        fonts: Optional[FontResolver] = None,
        colors: Optional[ColorParser] = None,
        scale: float = OVERSAMPLING,
    ):
        self.fonts = fonts or FontResolver()
        self.colors = colors or ColorParser()
        self.scale = scale

    def _px(self, value: float) -> int:
        return int(round(value * self.scale))

    def _block(self, text, x, y, width, slot, family, bold, size, index=None) -> TextBlock:
        font = self.fonts.get(family, bold, size)
        lines = wrap_text(text, font, width) if text else []
        height = max(slot, len(lines) * line_height(font))
        return TextBlock(
            text=text, lines=lines, x=x, y=y, width=width, height=height,
            font_size=size, bold=bold, index=index,
        )

    def layout(self, content: ListContent, settings: DesignSettings,
               canvas_size: Tuple[int, int]) -> TextLayout:
        """
        Calculate text layout.

        Args:
            content: List title and items
            settings: Design settings (font name)
            canvas_size: Pixel size of the canvas

        Returns:
            TextLayout with one block per drawn row
        """
        width, height = canvas_size
        family, bold_items = font_style(settings.font_name)
        margin = self._px(MARGIN)
        spacing = self._px(SPACING)
        content_width = width - 2 * margin

        result = TextLayout(canvas_width=width, canvas_height=height, family=family)
        y = margin

        if content.show_title:
            block = self._block(
                content.title, margin, y, content_width, self._px(TITLE_HEIGHT),
                family, True, self._px(TITLE_FONT_SIZE),
            )
            result.blocks.append(block)
            y = block.bottom + spacing

        for index, item in enumerate(content.items):
            block = self._block(
                f"{index + 1}. {item}", margin, y, content_width, self._px(ITEM_HEIGHT),
                family, bold_items, self._px(ITEM_FONT_SIZE), index=index,
            )
            result.blocks.append(block)
            y = block.bottom + spacing

        if result.overflows:
            logger.warning(
                f"Text runs past the canvas bottom ({result.bottom}px > {height}px), not clipped"
            )
        return result

    def draw(self, canvas: Image.Image, content: ListContent, settings: DesignSettings) -> TextLayout:
        """Draw list text onto ``canvas`` in place."""
        layout = self.layout(content, settings, canvas.size)
        mask = Image.new("L", canvas.size, 0)
        draw = ImageDraw.Draw(mask)
        for block in layout.blocks:
            font = self.fonts.get(layout.family, block.bold, block.font_size)
            step = line_height(font)
            for i, line in enumerate(block.lines):
                draw.text((block.x, block.y + i * step), line, font=font, fill=255)

        paint_mask(canvas, mask, self.colors.parse(settings.text_color))
        return layout
