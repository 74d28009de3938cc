from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Tuple
from uuid import UUID, uuid4


class ListContent(BaseModel):
    """Title and ranked items of a list (read-only input to a render)"""
    model_config = ConfigDict(frozen=True)

    title: str = ""
    items: Tuple[str, ...] = ()  # 0..5, enforced by the caller
    show_title: bool = True


class StickerItem(BaseModel):
    """Decorative overlay placed on the card"""
    id: UUID = Field(default_factory=uuid4)
    asset_name: str
    x: float = 0.0          # Canvas-logical coordinates
    y: float = 0.0
    scale: float = 1.0
    rotation: float = 0.0   # Radians

    @property
    def position(self) -> Tuple[float, float]:
        return (self.x, self.y)


class DesignSettings(BaseModel):
    """Visual configuration for a list card"""
    template_type: str = "modern"
    background_color: str = "#FFFFFF"
    background_image_name: Optional[str] = None    # Bundled or stock asset
    background_image_data: Optional[bytes] = None  # Uploaded image bytes
    use_gradient: bool = False
    gradient_colors: List[str] = Field(default_factory=lambda: ["#FF6B6B", "#4ECDC4"])
    font_name: str = "system"
    font_size: float = 24.0
    text_color: str = "#000000"
    stickers: List[StickerItem] = Field(default_factory=list)
    export_format: str = "instagram-post"
    border_width: float = 0.0
    border_color: str = "#000000"
    corner_radius: float = 16.0
