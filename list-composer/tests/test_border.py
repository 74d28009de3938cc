import pytest
from PIL import Image

from listcard.models import DesignSettings
from listcard.border import BorderCompositor, border_geometry, effective_corner_radius


def test_corner_radius_clamped_to_half_inset_side():
    assert effective_corner_radius(1080, 1080, 8, 1000) == 536.0


@pytest.mark.parametrize("radius", [-10, 0, 16, 100, 539, 540, 10_000])
@pytest.mark.parametrize("size,border", [((1080, 1080), 8), ((1200, 675), 3), ((1080, 1920), 1)])
def test_corner_radius_always_within_bounds(size, border, radius):
    width, height = size
    result = effective_corner_radius(width, height, border, radius)
    assert 0 <= result <= min(width - border, height - border) / 2
    if 0 <= radius <= min(width - border, height - border) / 2:
        assert result == radius


def test_no_border_when_width_not_positive():
    assert border_geometry((1080, 1080), 0, 16) is None
    assert border_geometry((1080, 1080), -4, 16) is None


def test_geometry_is_inset_by_half_width():
    geometry = border_geometry((1080, 1080), 8, 16)
    assert (geometry.x, geometry.y) == (4, 4)
    assert (geometry.width, geometry.height) == (1072, 1072)
    assert geometry.outer_radius == 20


def test_border_drawn_inside_canvas():
    canvas = Image.new("RGBA", (200, 100), (255, 255, 255, 255))
    compositor = BorderCompositor(scale=1.0)

    geometry = compositor.draw(canvas, DesignSettings(border_width=6, border_color="#FF0000", corner_radius=10))

    assert geometry is not None
    assert canvas.getpixel((0, 50)) == (255, 0, 0, 255)
    assert canvas.getpixel((199, 50)) == (255, 0, 0, 255)
    assert canvas.getpixel((100, 2)) == (255, 0, 0, 255)
    assert canvas.getpixel((100, 50)) == (255, 255, 255, 255)
    # rounded corner leaves the extreme corner untouched
    assert canvas.getpixel((0, 0)) == (255, 255, 255, 255)


def test_border_scales_with_oversampling():
    canvas = Image.new("RGBA", (400, 200), (255, 255, 255, 255))
    BorderCompositor(scale=2.0).draw(canvas, DesignSettings(border_width=4, border_color="#0000FF"))
    assert canvas.getpixel((7, 100)) == (0, 0, 255, 255)
    assert canvas.getpixel((9, 100)) == (255, 255, 255, 255)


def test_no_border_leaves_canvas_alone():
    canvas = Image.new("RGBA", (50, 50), (255, 255, 255, 255))
    assert BorderCompositor(scale=1.0).draw(canvas, DesignSettings()) is None
    assert canvas.getcolors() == [(2500, (255, 255, 255, 255))]


@pytest.mark.parametrize("border_width", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_border_width_draws_nothing(border_width):
    assert border_geometry((1080, 1080), border_width, 16) is None
    canvas = Image.new("RGBA", (50, 50), (255, 255, 255, 255))
    assert BorderCompositor(scale=1.0).draw(canvas, DesignSettings(border_width=border_width)) is None


@pytest.mark.parametrize("radius", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_corner_radius_is_square(radius):
    assert effective_corner_radius(1080, 1080, 8, radius) == 0.0
    canvas = Image.new("RGBA", (60, 40), (255, 255, 255, 255))
    settings = DesignSettings(border_width=4, border_color="#FF0000", corner_radius=radius)
    assert BorderCompositor(scale=1.0).draw(canvas, settings).radius == 0.0
    assert canvas.getpixel((0, 20)) == (255, 0, 0, 255)


def test_enormous_border_width_fills_canvas():
    canvas = Image.new("RGBA", (60, 40), (255, 255, 255, 255))
    geometry = BorderCompositor(scale=2.0).draw(canvas, DesignSettings(border_width=1e308, border_color="#0000FF"))
    assert geometry is not None
    assert canvas.getpixel((30, 2)) == (0, 0, 255, 255)
