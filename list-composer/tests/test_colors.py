import pytest
from PIL import Image

from listcard.colors import RGBA, BLACK, ColorParser, parse_hex, paint_mask


def test_parse_short_hex():
    assert parse_hex("#FFF") == RGBA(255, 255, 255, 255)
    assert parse_hex("F0A") == RGBA(255, 0, 170, 255)


def test_parse_rgb_hex():
    assert parse_hex("#FF0000") == RGBA(255, 0, 0, 255)
    assert parse_hex("4ecdc4") == RGBA(0x4E, 0xCD, 0xC4, 255)


def test_parse_argb_hex():
    assert parse_hex("#80FF0000") == RGBA(255, 0, 0, 128)


def test_parse_strips_non_alphanumerics():
    assert parse_hex("  #FF-00-00 ") == RGBA(255, 0, 0, 255)


@pytest.mark.parametrize("value", ["zz", "", "#12345", "#GGGGGG", "#1234567890"])
def test_malformed_hex_is_opaque_black(value):
    assert parse_hex(value) == BLACK


def test_color_parser_caches_results():
    parser = ColorParser()
    first = parser.parse("#123456")
    assert parser.parse("#123456") is first
    assert first.rgb == (0x12, 0x34, 0x56)


def test_paint_mask_respects_color_alpha():
    canvas = Image.new("RGBA", (4, 4), (255, 255, 255, 255))
    mask = Image.new("L", (4, 4), 0)
    mask.putpixel((1, 1), 255)

    paint_mask(canvas, mask, RGBA(0, 0, 0, 128))

    assert canvas.getpixel((0, 0)) == (255, 255, 255, 255)
    r, g, b, a = canvas.getpixel((1, 1))
    assert a == 255
    assert 120 <= r <= 135


def test_parse_cache_is_bounded():
    parser = ColorParser()
    for i in range(5000):
        parser.parse(f"#{i:06X}")
    info = parse_hex.cache_info()
    assert info.maxsize == 256
    assert info.currsize <= 256
    assert parser.parse("#001387") == RGBA(0x00, 0x13, 0x87, 255)
