import io
import struct
import zlib

import pytest
from PIL import Image

from listcard.models import DesignSettings
from listcard.assets import AssetLibrary
from listcard.background import (
    BackgroundCompositor, BackgroundKind, aspect_fill, background_candidates, gradient_colors,
)
from listcard.stock import ProceduralBackgroundGenerator

SIZE = (80, 60)


def png_bytes(color, size=(40, 40)):
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def assets():
    library = AssetLibrary()
    library.register("red-wall", Image.new("RGB", (30, 30), (255, 0, 0)))
    return library


@pytest.fixture
def compositor(assets):
    return BackgroundCompositor(assets, ProceduralBackgroundGenerator(seed=1, size=(64, 64)))


@pytest.fixture
def canvas():
    return Image.new("RGBA", SIZE, (255, 255, 255, 255))


def test_candidates_in_precedence_order():
    settings = DesignSettings(
        background_image_data=b"bytes",
        background_image_name="red-wall",
        use_gradient=True,
    )
    kinds = [c.kind for c in background_candidates(settings)]
    assert kinds == [
        BackgroundKind.UPLOADED, BackgroundKind.ASSET, BackgroundKind.GRADIENT, BackgroundKind.SOLID,
    ]


def test_default_settings_only_offer_solid():
    candidates = list(background_candidates(DesignSettings()))
    assert [c.kind for c in candidates] == [BackgroundKind.SOLID]
    assert candidates[0].colors == ("#FFFFFF",)


def test_gradient_needs_two_colors():
    assert gradient_colors(DesignSettings(use_gradient=True, gradient_colors=["#FF0000"])) is None
    assert gradient_colors(DesignSettings(use_gradient=False)) is None
    assert gradient_colors(DesignSettings(use_gradient=True)) == ("#FF6B6B", "#4ECDC4")


def test_solid_background(compositor, canvas):
    result = compositor.draw(canvas, DesignSettings(background_color="#00FF00"))
    assert result.source.kind == BackgroundKind.SOLID
    assert canvas.getpixel((40, 30)) == (0, 255, 0, 255)


def test_uploaded_image_wins(compositor, canvas):
    settings = DesignSettings(
        background_image_data=png_bytes((0, 0, 255)),
        background_image_name="red-wall",
    )
    result = compositor.draw(canvas, settings)
    assert result.source.kind == BackgroundKind.UPLOADED
    assert canvas.getpixel((40, 30)) == (0, 0, 255, 255)


def test_undecodable_upload_falls_through(compositor, canvas):
    settings = DesignSettings(background_image_data=b"not an image", background_color="#00FF00")
    result = compositor.draw(canvas, settings)
    assert result.source.kind == BackgroundKind.SOLID
    assert [s.kind for s in result.skipped] == [BackgroundKind.UPLOADED]
    assert canvas.getpixel((0, 0)) == (0, 255, 0, 255)


def test_named_asset_from_library(compositor, canvas):
    result = compositor.draw(canvas, DesignSettings(background_image_name="red-wall"))
    assert result.source.kind == BackgroundKind.ASSET
    assert canvas.getpixel((79, 59)) == (255, 0, 0, 255)


def test_named_asset_from_stock(compositor, canvas):
    result = compositor.draw(canvas, DesignSettings(background_image_name="solid-black"))
    assert result.source.kind == BackgroundKind.ASSET
    assert canvas.getpixel((40, 30)) == (0, 0, 0, 255)


def test_unknown_asset_falls_back_to_gradient(compositor, canvas):
    settings = DesignSettings(
        background_image_name="missing",
        use_gradient=True,
        gradient_colors=["#FF0000", "#0000FF"],
    )
    result = compositor.draw(canvas, settings)
    assert result.source.kind == BackgroundKind.GRADIENT
    assert canvas.getpixel((0, 0)) == (255, 0, 0, 255)
    assert canvas.getpixel((79, 59)) == (0, 0, 255, 255)


def test_single_color_gradient_is_skipped(compositor, canvas):
    settings = DesignSettings(use_gradient=True, gradient_colors=["#FF0000"], background_color="#123456")
    result = compositor.draw(canvas, settings)
    assert result.source.kind == BackgroundKind.SOLID
    assert canvas.getpixel((40, 30)) == (0x12, 0x34, 0x56, 255)


def test_gradient_drawn_over_image(compositor, canvas):
    settings = DesignSettings(
        background_image_name="red-wall",
        use_gradient=True,
        gradient_colors=["#0000FF", "#0000FF"],
    )
    result = compositor.draw(canvas, settings)
    assert result.source.kind == BackgroundKind.ASSET
    assert result.gradient_overlay
    assert canvas.getpixel((40, 30)) == (0, 0, 255, 255)


def test_translucent_solid_blends_over_white(compositor, canvas):
    compositor.draw(canvas, DesignSettings(background_color="#00000000"))
    assert canvas.getpixel((40, 30)) == (255, 255, 255, 255)


def test_aspect_fill_center_crops():
    image = Image.new("RGB", (200, 100), (255, 0, 0))
    image.paste((0, 0, 255), (100, 0, 200, 100))

    filled = aspect_fill(image, (100, 100))

    assert filled.size == (100, 100)
    assert filled.getpixel((10, 50)) == (255, 0, 0, 255)
    assert filled.getpixel((90, 50)) == (0, 0, 255, 255)


def oversized_png_bytes(width=20000, height=20000):
    """Tiny PNG whose header claims a huge image."""
    data = bytearray(png_bytes((255, 0, 0), size=(1, 1)))
    data[16:24] = struct.pack(">II", width, height)
    data[29:33] = struct.pack(">I", zlib.crc32(bytes(data[12:29])) & 0xFFFFFFFF)
    return bytes(data)


def test_decompression_bomb_upload_falls_through(compositor, canvas):
    settings = DesignSettings(background_image_data=oversized_png_bytes(), background_color="#00FF00")
    result = compositor.draw(canvas, settings)
    assert result.source.kind == BackgroundKind.SOLID
    assert [s.kind for s in result.skipped] == [BackgroundKind.UPLOADED]
    assert canvas.getpixel((40, 30)) == (0, 255, 0, 255)
