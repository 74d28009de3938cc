"""
Template presets - named starting points for a card design.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from .models import DesignSettings

logger = logging.getLogger(__name__)


class ListTemplate(Enum):
    MODERN = "modern"
    MINIMALIST = "minimalist"
    POP = "pop"
    VINTAGE = "vintage"
    NEON = "neon"
    HANDWRITTEN = "handwritten"
    PROFESSIONAL = "professional"
    POLAROID = "polaroid"
    COMIC = "comic"
    GRADIENT = "gradient"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @property
    def defaults(self) -> "TemplateSettings":
        return TEMPLATE_SETTINGS[self]


@dataclass(frozen=True)
class TemplateSettings:
    """Default look of a template."""
    background_color: str
    primary_color: str
    secondary_color: str
    font_name: str
    font_size: float
    corner_radius: float = 16.0
    has_shadow: bool = False
    border_width: float = 0.0

    def to_design_settings(self, template: Optional[ListTemplate] = None, **overrides) -> DesignSettings:
        """
        Build design settings from this template.

        Primary color drives the text, secondary the border; both seed the
        gradient colors, but the gradient stays off until requested.
        """
        values = {
            "background_color": self.background_color,
            "use_gradient": False,
            "gradient_colors": [self.primary_color, self.secondary_color],
            "font_name": self.font_name,
            "font_size": self.font_size,
            "text_color": self.primary_color,
            "border_width": self.border_width,
            "border_color": self.secondary_color,
            "corner_radius": self.corner_radius,
        }
        if template is not None:
            values["template_type"] = template.value
        values.update(overrides)
        return DesignSettings(**values)


TEMPLATE_SETTINGS: Dict[ListTemplate, TemplateSettings] = {
    ListTemplate.MODERN: TemplateSettings(
        "#FFFFFF", "#2C3E50", "#34495E", "system", 24, has_shadow=True,
    ),
    ListTemplate.MINIMALIST: TemplateSettings(
        "#F8F9FA", "#212529", "#6C757D", "system", 20,
    ),
    ListTemplate.POP: TemplateSettings(
        "#FF6B6B", "#FFFFFF", "#FFE66D", "system-bold", 28, has_shadow=True, border_width=3,
    ),
    ListTemplate.VINTAGE: TemplateSettings(
        "#F4F1DE", "#3D405B", "#81B29A", "system-serif", 22, border_width=2,
    ),
    ListTemplate.NEON: TemplateSettings(
        "#0F0F0F", "#00FFF0", "#FF00FF", "system-bold", 26, has_shadow=True, border_width=1,
    ),
    ListTemplate.HANDWRITTEN: TemplateSettings(
        "#FFFEF7", "#2F4F4F", "#8B4513", "system-handwritten", 24,
    ),
    ListTemplate.PROFESSIONAL: TemplateSettings(
        "#FFFFFF", "#1F2937", "#4B5563", "system", 22, has_shadow=True, border_width=1,
    ),
    ListTemplate.POLAROID: TemplateSettings(
        "#FFFFFF", "#2C3E50", "#7F8C8D", "system", 20, has_shadow=True, border_width=8,
    ),
    ListTemplate.COMIC: TemplateSettings(
        "#FFEB3B", "#E91E63", "#9C27B0", "system-bold", 24, has_shadow=True, border_width=4,
    ),
    ListTemplate.GRADIENT: TemplateSettings(
        "#667eea", "#FFFFFF", "#f093fb", "system", 24, has_shadow=True,
    ),
}


def get_template(name: str) -> Optional[ListTemplate]:
    """Look up a template by name (case-insensitive)."""
    try:
        return ListTemplate(name.strip().lower())
    except ValueError:
        logger.warning(f"Unknown template '{name}'")
        return None


def template_settings(name: str, **overrides) -> Optional[DesignSettings]:
    """Design settings for a named template, or None when unknown."""
    template = get_template(name)
    if template is None:
        return None
    return template.defaults.to_design_settings(template, **overrides)


def get_template_options() -> List[dict]:
    """Get template list for the API."""
    return [
        {
            "id": template.value,
            "name": template.display_name,
            "background_color": settings.background_color,
            "primary_color": settings.primary_color,
            "secondary_color": settings.secondary_color,
            "font_name": settings.font_name,
            "border_width": settings.border_width,
        }
        for template, settings in TEMPLATE_SETTINGS.items()
    ]
