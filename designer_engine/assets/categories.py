"""Asset categories and their fixed layout metadata."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class AssetCategory(str, Enum):
    AVATAR_FRAME = "AVATAR_FRAME"
    ENTRANCE_SHOW = "ENTRANCE_SHOW"
    MEDAL = "MEDAL"
    WALLPAPER = "WALLPAPER"

    @classmethod
    def parse(cls, value: str) -> "AssetCategory":
        normalized = str(value or "").strip().upper().replace("-", "_")
        return cls(normalized)


@dataclass(frozen=True)
class CategorySpec:
    category: AssetCategory
    label: str
    caption: str
    aspect_ratio: str
    width: int
    height: int
    headline: str
    rules_heading: str
    constraints: tuple[str, ...]
    finish: str

    @property
    def size(self) -> str:
        return f"{self.width}x{self.height}"

    @property
    def download_name(self) -> str:
        return f"design-{self.category.value}.png"


CATEGORY_SPECS: dict[AssetCategory, CategorySpec] = {
    AssetCategory.AVATAR_FRAME: CategorySpec(
        category=AssetCategory.AVATAR_FRAME,
        label="Avatar Frame",
        caption="Empty center / circular layout",
        aspect_ratio="1:1",
        width=512,
        height=512,
        headline="Design a premium avatar frame (512x512).",
        rules_heading="[Layout rules]",
        constraints=(
            "The center must be a perfect, solid-black circle.",
            "All decoration, texture and lighting effects must be placed strictly outside the central black circle.",
            "Nothing may be rendered inside the black circle.",
            "The decoration should wrap around the circle with a three-dimensional feel.",
        ),
        finish="Finish: ultra-high image quality, pure white background, commercial-grade UI rendering.",
    ),
    AssetCategory.ENTRANCE_SHOW: CategorySpec(
        category=AssetCategory.ENTRANCE_SHOW,
        label="Entrance Show",
        caption="Banner layout / decoration around anchors",
        aspect_ratio="16:9",
        width=1280,
        height=720,
        headline="Design an entrance show banner component (16:9 aspect ratio).",
        rules_heading="[Layout rules]",
        constraints=(
            "Left side: a solid-black circular frame that holds the avatar.",
            "Center and main area: a rectangular green region that serves as the chat bubble background.",
            "Every design element (light streaks, ornaments, effects) must be arranged around the black circular frame and the green rectangle.",
            "Nothing may be rendered inside the black circular frame.",
            "No real text, letters or digits may appear anywhere.",
        ),
        finish="Finish: highly dynamic, 3D texture, top-tier game or social app UI quality.",
    ),
    AssetCategory.MEDAL: CategorySpec(
        category=AssetCategory.MEDAL,
        label="Honor Medal",
        caption="Symmetric hexagon / 3D material",
        aspect_ratio="1:1",
        width=480,
        height=480,
        headline="Design a symmetric hexagonal achievement medal (480x480).",
        rules_heading="[Hard requirements]",
        constraints=(
            "The outer silhouette must be a strictly symmetric hexagon.",
            "Very strong 3D depth and material rendering (heavy metal, glowing crystal, embossed relief).",
            "Thick textures and a clear structure that stay recognizable at a small scale.",
            "No text or digits may appear.",
        ),
        finish="Finish: a distinctive emblem at the center, crisp lighting, as real as a physical object.",
    ),
    AssetCategory.WALLPAPER: CategorySpec(
        category=AssetCategory.WALLPAPER,
        label="Wallpaper",
        caption="No text / cinematic wallpaper",
        aspect_ratio="9:16",
        width=720,
        height=1280,
        headline="Design a mobile wallpaper poster (720x1280).",
        rules_heading="[Design principles]",
        constraints=(
            "Extend the reference style into a grander, imaginative scene.",
            "Bold, detail-rich composition with rich layering and color gradation.",
            "No text or digits may appear.",
            "Create an immersive mood or an abstract world.",
        ),
        finish="Finish: cinematic color grading, 4K-level detail.",
    ),
}


def category_spec(category: AssetCategory | str) -> CategorySpec:
    if not isinstance(category, AssetCategory):
        category = AssetCategory.parse(category)
    return CATEGORY_SPECS[category]


def all_categories() -> tuple[AssetCategory, ...]:
    return tuple(AssetCategory)
