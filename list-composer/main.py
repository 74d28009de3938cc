from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from pydantic import ConfigDict
from pydantic_settings import BaseSettings
from contextlib import asynccontextmanager
from typing import Optional
import logging
import traceback

from listcard import (
    RenderPipeline, RenderCoordinator, CanvasError, AssetLibrary, FontResolver,
    ProceduralBackgroundGenerator, compress_image, save_to_library, SaveErrorKind,
    get_format_options, get_background_options, get_template_options, get_template,
)
from listcard.api_models import RenderRequest, OptionsResponse, SaveResponse
from listcard.export import DirectoryPhotoLibrary, MEDIA_TYPES
from listcard.generator import RasterImage


class Settings(BaseSettings):
    assets_dir: Optional[str] = None  # Bundled backgrounds and stickers
    fonts_dir: Optional[str] = None  # Extra TrueType fonts, searched first
    background_seed: Optional[int] = None  # Fixed seed for random stock backgrounds
    render_workers: int = 2
    jpeg_quality: float = 0.8
    library_dir: str = "exports"
    allow_library_writes: bool = True
    log_level: str = "INFO"

    model_config = ConfigDict(env_file=".env", env_prefix="LISTCARD_", extra="ignore")


settings = Settings()

# Logging setup
logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Shut the render worker pool down with the app."""
    yield
    pipeline.shutdown()


app = FastAPI(title="List Composer", version="1.0.0", lifespan=lifespan)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, restrict this
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Initialize services
pipeline = RenderPipeline(
    assets=AssetLibrary(settings.assets_dir),
    stock=ProceduralBackgroundGenerator(seed=settings.background_seed),
    fonts=FontResolver(settings.fonts_dir),
    max_workers=settings.render_workers,
)
coordinator = RenderCoordinator()  # Last-request-wins per preview target
library = DirectoryPhotoLibrary(settings.library_dir, allow_writes=settings.allow_library_writes)


@app.get("/health")
async def health_check():
    return {"status": "healthy", "service": "list-composer"}


@app.get("/")
async def root():
    return {
        "service": "List Composer",
        "version": "1.0.0",
        "description": "Renders ranked lists into shareable social media cards",
        "endpoints": ["/options", "/templates/{name}", "/render", "/render/save", "/health"],
        "config": {
            "render_workers": settings.render_workers,
            "jpeg_quality": settings.jpeg_quality,
        }
    }


@app.get("/options", response_model=OptionsResponse)
async def get_options():
    """
    Get available options for list cards.

    Returns export formats, stock backgrounds and templates.
    """
    return OptionsResponse(
        formats=get_format_options(),
        backgrounds=get_background_options(),
        templates=get_template_options(),
    )


@app.get("/templates/{name}")
async def get_template_settings(name: str):
    """Get the default design settings of a template."""
    template = get_template(name)
    if template is None:
        raise HTTPException(status_code=404, detail=f"Unknown template: {name}")
    design = template.defaults.to_design_settings(template)
    return design.model_dump(mode="json", exclude={"background_image_data"})


async def _render(request: RenderRequest) -> RasterImage:
    design = request.design_settings()
    export_format = request.format or design.export_format
    if request.target:
        raster = await coordinator.render(
            request.target, pipeline, request.content, design, export_format
        )
        if raster is None:
            raise HTTPException(
                status_code=409,
                detail=f"Render superseded by a newer request for {request.target}",
            )
        return raster
    return await pipeline.render_async(request.content, design, export_format)


def _encode(request: RenderRequest, raster: RasterImage) -> bytes:
    quality = settings.jpeg_quality if request.quality is None else request.quality
    try:
        return compress_image(raster, quality=quality, image_format=request.image_format)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.post("/render")
async def render_card(request: RenderRequest):
    """
    Render a list card.

    Workflow:
    1. Resolve export format (request > settings.export_format)
    2. Render on the worker pool
    3. Compress to the requested image format

    Returns:
        Encoded image bytes
    """
    try:
        logger.info(
            f"Rendering card '{request.content.title}' with {len(request.content.items)} items, "
            f"format={request.format or request.settings.export_format}"
        )
        raster = await _render(request)
        data = _encode(request, raster)
        media_type = MEDIA_TYPES.get(request.image_format.upper(), "image/jpeg")
        logger.info(f"Card rendered: {raster.width}x{raster.height}, {len(data)} bytes")
        return Response(
            content=data,
            media_type=media_type,
            headers={"X-Card-Dimensions": f"{raster.width}x{raster.height}"},
        )
    except HTTPException:
        raise
    except CanvasError as e:
        logger.error(f"Canvas error: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        tb = traceback.format_exc()
        logger.error(f"Render error: {e}")
        logger.error(f"Traceback:\n{tb}")
        raise HTTPException(status_code=500, detail=f"Render failed: {e}")


@app.post("/render/save", response_model=SaveResponse)
async def render_and_save(request: RenderRequest):
    """
    Render a list card and save it to the photo library.

    Raises:
        403 when library access is denied, 500 when the write fails
    """
    try:
        raster = await _render(request)
        data = _encode(request, raster)
    except HTTPException:
        raise
    except CanvasError as e:
        logger.error(f"Canvas error: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        tb = traceback.format_exc()
        logger.error(f"Render error: {e}")
        logger.error(f"Traceback:\n{tb}")
        raise HTTPException(status_code=500, detail=f"Render failed: {e}")

    result = await save_to_library(library, data)
    if result.error is SaveErrorKind.PERMISSION_DENIED:
        raise HTTPException(status_code=403, detail=result.detail)
    if result.error is SaveErrorKind.WRITE_FAILED:
        raise HTTPException(status_code=500, detail=f"Save failed: {result.detail}")

    return SaveResponse(
        status="saved",
        location=result.location,
        size_bytes=len(data),
        dimensions=f"{raster.width}x{raster.height}",
    )
