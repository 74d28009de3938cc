import pytest

from listcard.templates import (
    TEMPLATE_SETTINGS, ListTemplate, get_template, get_template_options, template_settings,
)


def test_ten_templates():
    assert len(ListTemplate) == 10
    assert set(TEMPLATE_SETTINGS) == set(ListTemplate)
    assert len(get_template_options()) == 10


def test_template_maps_to_design_settings():
    settings = ListTemplate.POP.defaults.to_design_settings(ListTemplate.POP)

    assert settings.template_type == "pop"
    assert settings.background_color == "#FF6B6B"
    assert settings.text_color == "#FFFFFF"
    assert settings.border_color == "#FFE66D"
    assert settings.gradient_colors == ["#FFFFFF", "#FFE66D"]
    assert settings.use_gradient is False
    assert settings.font_name == "system-bold"
    assert settings.font_size == 28
    assert settings.border_width == 3
    assert settings.corner_radius == 16


@pytest.mark.parametrize("template", list(ListTemplate))
def test_every_template_builds_settings(template):
    settings = template.defaults.to_design_settings(template)
    assert settings.template_type == template.value
    assert settings.stickers == []


def test_get_template():
    assert get_template("Polaroid") is ListTemplate.POLAROID
    assert get_template(" neon ") is ListTemplate.NEON
    assert get_template("baroque") is None


def test_template_settings_overrides():
    settings = template_settings("vintage", export_format="twitter", border_width=0)
    assert settings.template_type == "vintage"
    assert settings.export_format == "twitter"
    assert settings.border_width == 0
    assert template_settings("baroque") is None
