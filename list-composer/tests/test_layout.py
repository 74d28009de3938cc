import pytest
from PIL import Image, ImageFont

from listcard.models import DesignSettings, ListContent
from listcard.layout import (
    ITEM_HEIGHT, MARGIN, SPACING, TITLE_HEIGHT,
    FontFamily, FontResolver, TextLayoutEngine, font_style, wrap_text,
)


@pytest.fixture
def engine():
    return TextLayoutEngine(FontResolver(), scale=1.0)


@pytest.mark.parametrize("name,expected", [
    ("system", (FontFamily.DEFAULT, False)),
    ("system-bold", (FontFamily.DEFAULT, True)),
    ("system-serif", (FontFamily.SERIF, False)),
    ("system-handwritten", (FontFamily.ROUNDED, False)),
    ("", (FontFamily.DEFAULT, False)),
])
def test_font_style(name, expected):
    assert font_style(name) == expected


def test_font_resolver_caches():
    fonts = FontResolver()
    assert fonts.get(FontFamily.DEFAULT, True, 40) is fonts.get(FontFamily.DEFAULT, True, 40)


def test_font_resolver_skips_missing_fonts_dir(tmp_path):
    fonts = FontResolver(tmp_path / "nothing-here")
    assert fonts.get(FontFamily.SERIF, False, 30) is not None


def test_wrap_text_fits_width():
    font = ImageFont.load_default(size=32)
    text = "the quick brown fox jumps over the lazy dog " * 4
    lines = wrap_text(text, font, 300)
    assert len(lines) > 1
    assert all(font.getlength(line) <= 300 for line in lines)
    assert " ".join(lines) == " ".join(text.split())


def test_wrap_text_breaks_long_words():
    font = ImageFont.load_default(size=32)
    lines = wrap_text("x" * 200, font, 150)
    assert len(lines) > 1
    assert all(font.getlength(line) <= 150 for line in lines)
    assert "".join(lines) == "x" * 200


def test_layout_title_and_items(engine):
    content = ListContent(title="Best Films", items=("Alien", "Heat", "Ran"))
    layout = engine.layout(content, DesignSettings(), (1080, 1080))

    assert len(layout.blocks) == 4
    title, *items = layout.blocks
    assert title.index is None and title.bold
    assert title.x == MARGIN and title.y == MARGIN
    assert title.height == TITLE_HEIGHT
    assert [b.text for b in items] == ["1. Alien", "2. Heat", "3. Ran"]
    assert items[0].y == MARGIN + TITLE_HEIGHT + SPACING
    assert items[1].y == items[0].y + ITEM_HEIGHT + SPACING
    assert not any(b.bold for b in items)
    assert not layout.overflows


def test_layout_without_title(engine):
    content = ListContent(title="Hidden", items=("One",), show_title=False)
    layout = engine.layout(content, DesignSettings(), (1080, 1080))
    assert [b.text for b in layout.blocks] == ["1. One"]
    assert layout.blocks[0].y == MARGIN


def test_bold_font_name_bolds_items(engine):
    content = ListContent(title="T", items=("a",))
    layout = engine.layout(content, DesignSettings(font_name="system-bold"), (1080, 1080))
    assert layout.blocks[1].bold


def test_wrapped_rows_do_not_overlap(engine):
    long_item = "an extremely long list entry that will certainly need more than one line " * 3
    content = ListContent(title="Wrapped", items=(long_item, "short"))
    layout = engine.layout(content, DesignSettings(), (1080, 1080))

    first, second = layout.blocks[1], layout.blocks[2]
    assert len(first.lines) > 1
    assert first.height > ITEM_HEIGHT
    assert second.y >= first.bottom


def test_overflow_is_reported_not_clipped(engine):
    content = ListContent(title="Tall", items=tuple(f"item {i}" for i in range(5)))
    layout = engine.layout(content, DesignSettings(), (1200, 675))
    assert layout.overflows
    assert len(layout.blocks) == 6


def test_layout_scales_with_oversampling():
    engine = TextLayoutEngine(FontResolver(), scale=2.0)
    layout = engine.layout(ListContent(title="T", items=("a",)), DesignSettings(), (2160, 2160))
    assert layout.blocks[0].x == MARGIN * 2
    assert layout.blocks[0].font_size == 168


def test_draw_uses_text_color(engine):
    canvas = Image.new("RGBA", (1080, 1080), (255, 255, 255, 255))
    content = ListContent(title="MMMMMM", items=())
    engine.draw(canvas, content, DesignSettings(text_color="#FF0000"))

    region = canvas.crop((MARGIN, MARGIN, 1080 - MARGIN, MARGIN + TITLE_HEIGHT))
    colors = {c for _, c in region.getcolors(maxcolors=1 << 20)}
    assert (255, 0, 0, 255) in colors
    assert all(g == b and g <= r for r, g, b, a in colors)
