"""
BackgroundCompositor - base layer of a list card.

Background sources, in precedence order:
- Uploaded: raw image bytes supplied by the user
- Asset:    named background (bundled asset, then procedural stock)
- Gradient: diagonal gradient from the design's gradient colors
- Solid:    the design's background color

The first source that resolves is drawn. A source that fails to resolve
(undecodable upload, unknown asset) silently falls through to the next.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional, Tuple

from PIL import Image, ImageOps

from .models import DesignSettings
from .assets import AssetLibrary, decode_image
from .colors import ColorParser
from .stock import ProceduralBackgroundGenerator, diagonal_gradient

logger = logging.getLogger(__name__)


class BackgroundKind(Enum):
    """Available background source kinds."""
    UPLOADED = "uploaded"   # User-provided image bytes
    ASSET = "asset"         # Bundled or stock background by name
    GRADIENT = "gradient"   # Code-generated diagonal gradient
    SOLID = "solid"         # Single color


@dataclass(frozen=True)
class BackgroundSource:
    """One candidate background, tagged by kind."""
    kind: BackgroundKind
    data: Optional[bytes] = None
    name: Optional[str] = None
    colors: Tuple[str, ...] = ()

    @property
    def is_image(self) -> bool:
        return self.kind in (BackgroundKind.UPLOADED, BackgroundKind.ASSET)


@dataclass
class BackgroundResult:
    """Outcome of drawing the base layer."""
    source: BackgroundSource
    gradient_overlay: bool = False
    skipped: List[BackgroundSource] = field(default_factory=list)


def gradient_colors(settings: DesignSettings) -> Optional[Tuple[str, ...]]:
    """Gradient colors when the gradient layer is active, else None."""
    if settings.use_gradient and len(settings.gradient_colors) >= 2:
        return tuple(settings.gradient_colors)
    return None


def background_candidates(settings: DesignSettings) -> Iterator[BackgroundSource]:
    """
    Enumerate background sources in precedence order.

    The solid color is always the last candidate, so there is always
    something to draw.
    """
    if settings.background_image_data:
        yield BackgroundSource(BackgroundKind.UPLOADED, data=settings.background_image_data)
    if settings.background_image_name:
        yield BackgroundSource(BackgroundKind.ASSET, name=settings.background_image_name)
    colors = gradient_colors(settings)
    if colors:
        yield BackgroundSource(BackgroundKind.GRADIENT, colors=colors)
    yield BackgroundSource(BackgroundKind.SOLID, colors=(settings.background_color,))


def aspect_fill(image: Image.Image, size: Tuple[int, int]) -> Image.Image:
    """Scale to cover ``size`` and center-crop the overflow."""
    return ImageOps.fit(
        image.convert("RGBA"), size,
        method=Image.Resampling.LANCZOS,
        centering=(0.5, 0.5),
    )


class BackgroundCompositor:
    """Resolves and draws the base layer onto a canvas."""

    def __init__(
        self,
        assets: Optional[AssetLibrary] = None,
        generator: Optional[ProceduralBackgroundGenerator] = None,
        colors: Optional[ColorParser] = None,
    ):
        self.assets = assets or AssetLibrary()
        self.generator = generator or ProceduralBackgroundGenerator()
        self.colors = colors or ColorParser()

    def resolve_image(self, source: BackgroundSource) -> Optional[Image.Image]:
        """Load the image behind an image-kind source, or None."""
        if source.kind == BackgroundKind.UPLOADED:
            return decode_image(source.data)
        if source.kind == BackgroundKind.ASSET:
            image = self.assets.load(source.name)
            if image is None:
                image = self.generator.generate(source.name)
            return image
        return None

    def create_gradient(self, size: Tuple[int, int], colors: Tuple[str, ...]) -> Image.Image:
        return diagonal_gradient(size, [self.colors.parse(c) for c in colors])

    def draw(self, canvas: Image.Image, settings: DesignSettings) -> BackgroundResult:
        """
        Draw the background onto ``canvas`` in place.

        Args:
            canvas: RGBA canvas, already filled white
            settings: Design settings to read

        Returns:
            BackgroundResult describing which source was drawn
        """
        size = canvas.size
        skipped = []

        for source in background_candidates(settings):
            if source.is_image:
                image = self.resolve_image(source)
                if image is None:
                    logger.warning(f"Background {source.kind.value} unavailable, falling back")
                    skipped.append(source)
                    continue
                canvas.alpha_composite(aspect_fill(image, size))
                result = BackgroundResult(source=source, skipped=skipped)

                # Image and gradient flags are independent: an active
                # gradient is still drawn over the image.
                colors = gradient_colors(settings)
                if colors:
                    canvas.alpha_composite(self.create_gradient(size, colors))
                    result.gradient_overlay = True
                return result

            if source.kind == BackgroundKind.GRADIENT:
                canvas.alpha_composite(self.create_gradient(size, source.colors))
            else:
                fill = Image.new("RGBA", size, tuple(self.colors.parse(source.colors[0])))
                canvas.alpha_composite(fill)
            return BackgroundResult(source=source, skipped=skipped)

        raise RuntimeError("background candidates exhausted")  # pragma: no cover
