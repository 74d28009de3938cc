"""
Export format presets for list cards.

Supports the social targets a card can be shared to:
- Instagram Post / Story
- TikTok
- Twitter/X
- General social (square)

Cards are drawn at OVERSAMPLING x the logical size for high-density output.
"""

import logging
from enum import Enum
from typing import Tuple, Optional
from dataclasses import dataclass

logger = logging.getLogger(__name__)

OVERSAMPLING = 2.0


class ExportFormat(Enum):
    """Named export targets."""

    INSTAGRAM_POST = "instagram-post"     # 1:1
    INSTAGRAM_STORY = "instagram-story"   # 9:16 vertical
    TIKTOK = "tiktok"                     # 9:16 vertical
    TWITTER = "twitter"                   # 16:9
    GENERAL_SOCIAL = "general-social"     # 1:1

    @property
    def spec(self) -> "FormatSpec":
        return FORMAT_DIMENSIONS[self]

    @property
    def display_name(self) -> str:
        return self.spec.description

    @property
    def logical_size(self) -> Tuple[int, int]:
        return self.spec.size

    @property
    def aspect_ratio(self) -> float:
        width, height = self.spec.size
        return width / height

    def canvas_size(self, scale: float = OVERSAMPLING) -> Tuple[int, int]:
        """Pixel size of the oversampled canvas."""
        width, height = self.spec.size
        return (int(round(width * scale)), int(round(height * scale)))


@dataclass(frozen=True)
class FormatSpec:
    """Logical dimensions of an export format."""
    width: int
    height: int
    aspect_ratio: str
    description: str

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)


FORMAT_DIMENSIONS = {
    ExportFormat.INSTAGRAM_POST: FormatSpec(
        width=1080, height=1080,
        aspect_ratio="1:1",
        description="Instagram Post"
    ),
    ExportFormat.INSTAGRAM_STORY: FormatSpec(
        width=1080, height=1920,
        aspect_ratio="9:16",
        description="Instagram Story"
    ),
    ExportFormat.TIKTOK: FormatSpec(
        width=1080, height=1920,
        aspect_ratio="9:16",
        description="TikTok"
    ),
    ExportFormat.TWITTER: FormatSpec(
        width=1200, height=675,
        aspect_ratio="16:9",
        description="Twitter/X"
    ),
    ExportFormat.GENERAL_SOCIAL: FormatSpec(
        width=1080, height=1080,
        aspect_ratio="1:1",
        description="General Social"
    ),
}

DEFAULT_FORMAT = ExportFormat.INSTAGRAM_POST


def get_format(name: Optional[str] = None) -> ExportFormat:
    """
    Resolve an export format by name.

    Args:
        name: Format name (e.g., "instagram-post", "Instagram Story", "tiktok")

    Returns:
        Matching ExportFormat, or the default format for unknown names

    Examples:
        >>> get_format("instagram_story")
        <ExportFormat.INSTAGRAM_STORY: 'instagram-story'>
        >>> get_format("fax")
        <ExportFormat.INSTAGRAM_POST: 'instagram-post'>
    """
    if isinstance(name, ExportFormat):
        return name

    if name:
        normalized = name.strip().lower().replace("_", "-").replace(" ", "-")
        for fmt in ExportFormat:
            if fmt.value == normalized:
                return fmt
        logger.warning(f"Unknown export format '{name}', using {DEFAULT_FORMAT.value}")

    return DEFAULT_FORMAT


def get_canvas_size(name: Optional[str] = None, scale: float = OVERSAMPLING) -> Tuple[int, int]:
    """Oversampled pixel size for a format name."""
    return get_format(name).canvas_size(scale)


def get_format_options() -> list:
    """Get list of export formats for user selection."""
    return [
        {
            "id": fmt.value,
            "name": spec.description,
            "dimensions": f"{spec.width}x{spec.height}",
            "canvas": "x".join(str(v) for v in fmt.canvas_size()),
            "aspect_ratio": spec.aspect_ratio
        }
        for fmt, spec in FORMAT_DIMENSIONS.items()
    ]
