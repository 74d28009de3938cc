# List Card Module
# Ranked list -> shareable image: background, text, border, stickers

from .models import ListContent, DesignSettings, StickerItem
from .generator import RenderPipeline, RasterImage, CanvasError
from .presets import ExportFormat, get_format, get_format_options
from .colors import ColorParser, parse_hex
from .assets import AssetLibrary
from .stock import ProceduralBackgroundGenerator, get_background_options
from .background import BackgroundCompositor, BackgroundKind
from .layout import TextLayoutEngine, FontResolver
from .border import BorderCompositor, effective_corner_radius
from .stickers import StickerCompositor
from .scheduler import RenderCoordinator
from .export import compress_image, save_to_library, share, SaveErrorKind
from .templates import ListTemplate, get_template, get_template_options

__all__ = [
    "ListContent",
    "DesignSettings",
    "StickerItem",
    "RenderPipeline",
    "RasterImage",
    "CanvasError",
    "ExportFormat",
    "get_format",
    "get_format_options",
    "ColorParser",
    "parse_hex",
    "AssetLibrary",
    "ProceduralBackgroundGenerator",
    "get_background_options",
    "BackgroundCompositor",
    "BackgroundKind",
    "TextLayoutEngine",
    "FontResolver",
    "BorderCompositor",
    "effective_corner_radius",
    "StickerCompositor",
    "RenderCoordinator",
    "compress_image",
    "save_to_library",
    "share",
    "SaveErrorKind",
    "ListTemplate",
    "get_template",
    "get_template_options",
]
