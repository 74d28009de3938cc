"""
RenderPipeline - main orchestrator for list card rendering.

Combines:
- BackgroundCompositor: uploaded image, named asset, gradient or solid
- TextLayoutEngine: title and numbered items
- BorderCompositor: rounded-rectangle frame
- StickerCompositor: decorative overlays

Every call allocates its own canvas, so renders can run in parallel on
worker threads without sharing drawing state.
"""

import asyncio
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from PIL import Image

from .models import DesignSettings, ListContent
from .assets import AssetLibrary
from .background import BackgroundCompositor
from .border import BorderCompositor
from .colors import ColorParser
from .layout import FontResolver, TextLayoutEngine
from .presets import OVERSAMPLING, ExportFormat, get_format
from .stickers import StickerCompositor
from .stock import ProceduralBackgroundGenerator

logger = logging.getLogger(__name__)

BASE_FILL = (255, 255, 255, 255)


class CanvasError(ValueError):
    """Canvas could not be allocated for the requested size."""


@dataclass(frozen=True)
class RasterImage:
    """Finished card, owned by the caller."""
    image: Image.Image
    export_format: ExportFormat

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    @property
    def size(self) -> Tuple[int, int]:
        return self.image.size

    @property
    def mode(self) -> str:
        return self.image.mode

    def tobytes(self) -> bytes:
        """Raw pixel buffer (RGBA, row-major)."""
        return self.image.tobytes()


def create_canvas(size: Tuple[int, int]) -> Image.Image:
    """Allocate an opaque white RGBA canvas."""
    width, height = size
    if width <= 0 or height <= 0:
        raise CanvasError(f"Invalid canvas size {width}x{height}")
    try:
        return Image.new("RGBA", (width, height), BASE_FILL)
    except MemoryError as e:
        raise CanvasError(f"Could not allocate {width}x{height} canvas") from e


class RenderPipeline:
    """
    Renders list cards.

    Workflow:
    1. Resolve canvas size from the export format
    2. Draw background (base layer, optional gradient overlay)
    3. Draw title and items
    4. Draw border
    5. Draw stickers
    """

    def __init__(
        self,
        assets: Optional[AssetLibrary] = None,
        stock: Optional[ProceduralBackgroundGenerator] = None,
        fonts: Optional[FontResolver] = None,
        colors: Optional[ColorParser] = None,
        scale: float = OVERSAMPLING,
        max_workers: int = 2,
    ):
        """Initialize pipeline with all components."""
        self.colors = colors or ColorParser()
        self.assets = assets or AssetLibrary()
        self.stock = stock or ProceduralBackgroundGenerator()
        self.scale = scale
        self.background = BackgroundCompositor(self.assets, self.stock, self.colors)
        self.text = TextLayoutEngine(fonts or FontResolver(), self.colors, scale)
        self.border = BorderCompositor(self.colors, scale)
        self.stickers = StickerCompositor(self.assets, scale)
        self.max_workers = max_workers
        self._executor: Optional[ThreadPoolExecutor] = None
        self._executor_lock = threading.Lock()

    def render(
        self,
        content: ListContent,
        settings: DesignSettings,
        export_format: Union[ExportFormat, str, None] = None,
    ) -> RasterImage:
        """
        Render a list card.

        Args:
            content: Title and items
            settings: Design settings
            export_format: Target format; defaults to settings.export_format

        Returns:
            RasterImage at the format's oversampled size

        Raises:
            CanvasError: the canvas could not be allocated
        """
        fmt = get_format(export_format or settings.export_format)
        size = fmt.canvas_size(self.scale)
        logger.info(f"Rendering '{content.title}' ({len(content.items)} items) as {fmt.value} {size[0]}x{size[1]}")

        canvas = create_canvas(size)
        bg = self.background.draw(canvas, settings)
        layout = self.text.draw(canvas, content, settings)
        border = self.border.draw(canvas, settings)
        placed = self.stickers.draw(canvas, settings.stickers)

        logger.info(
            f"Rendered {fmt.value}: background={bg.source.kind.value}, "
            f"text_blocks={len(layout.blocks)}, border={border is not None}, "
            f"stickers={len(placed)}/{len(settings.stickers)}"
        )
        return RasterImage(image=canvas, export_format=fmt)

    @property
    def executor(self) -> ThreadPoolExecutor:
        with self._executor_lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self.max_workers, thread_name_prefix="listcard-render"
                )
            return self._executor

    def submit(self, content: ListContent, settings: DesignSettings,
               export_format: Union[ExportFormat, str, None] = None) -> "Future[RasterImage]":
        """Render on a worker thread, returning a Future."""
        return self.executor.submit(self.render, content, settings, export_format)

    async def render_async(self, content: ListContent, settings: DesignSettings,
                           export_format: Union[ExportFormat, str, None] = None) -> RasterImage:
        """Render on a worker thread without blocking the event loop."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            self.executor, self.render, content, settings, export_format
        )

    def shutdown(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
