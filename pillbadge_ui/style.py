from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Literal


BadgeAlignment = Literal["left", "center", "right", "justified", "natural"]
FontSlant = Literal["regular", "italic", "oblique"]
ColorHandle = object

BADGE_ALIGNMENTS: tuple[BadgeAlignment, ...] = ("left", "center", "right", "justified", "natural")
FONT_SLANTS: tuple[FontSlant, ...] = ("regular", "italic", "oblique")


@dataclass(frozen=True)
class FontSpec:
    """Font handle passed through to the drawing surface.

    The badge core never inspects it; only surfaces measure and draw with it.
    If `file_path` is set, surfaces should prefer file-backed font loading.
    """

    family: str = "System"
    size_px: float = 16.0
    weight: int = 700
    slant: FontSlant = "regular"
    file_path: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.family, str):
            raise ValueError("FontSpec `family` must be a string")
        if not self.family.strip() and self.file_path is None:
            raise ValueError("FontSpec requires `family` when `file_path` is not set")
        if self.file_path is not None and not str(self.file_path).strip():
            raise ValueError("FontSpec `file_path` must be non-empty when provided")
        if isinstance(self.size_px, bool) or not isinstance(self.size_px, (int, float)) or self.size_px <= 0:
            raise ValueError("FontSpec `size_px` must be > 0")
        if isinstance(self.weight, bool) or not isinstance(self.weight, int) or not 1 <= self.weight <= 1000:
            raise ValueError("FontSpec `weight` must be an integer in [1, 1000]")
        if self.slant not in FONT_SLANTS:
            raise ValueError(f"FontSpec `slant` must be one of: {', '.join(FONT_SLANTS)}")

    @property
    def normalized_file_path(self) -> Path | None:
        if self.file_path is None:
            return None
        return Path(self.file_path)


@dataclass(frozen=True)
class BadgeStyle:
    """Per-draw badge configuration. Colors are opaque handles owned by the surface."""

    pad: int = 2
    font: FontSpec = field(default_factory=FontSpec)
    text_format: str = "d"
    fill_color: ColorHandle = "#FF0000FF"
    stroke_color: ColorHandle = "#00000000"
    shadow_color: ColorHandle = "#00000080"
    text_color: ColorHandle = "#FFFFFFFF"
    stroke_width: float = 0.0
    shadow_enabled: bool = False
    shadow_offset: tuple[float, float] = (0.0, 3.0)
    shine_enabled: bool = False
    alignment: BadgeAlignment = "right"
    adjust_offset: tuple[float, float] = (0.0, 0.0)
    hide_when_zero: bool = True

    def __post_init__(self) -> None:
        if self.pad < 0:
            raise ValueError("BadgeStyle `pad` must be >= 0")
        if self.stroke_width < 0:
            raise ValueError("BadgeStyle `stroke_width` must be >= 0")
        if self.alignment not in BADGE_ALIGNMENTS:
            raise ValueError(f"unknown badge alignment: {self.alignment}")

    def with_overrides(self, **changes: object) -> "BadgeStyle":
        return replace(self, **changes)

    def affects_measurement(self, other: "BadgeStyle") -> bool:
        """True when switching to `other` can change the badge size."""

        return (
            self.pad != other.pad
            or self.font != other.font
            or self.text_format != other.text_format
        )


FLAT_STYLE = BadgeStyle()

GLOSSY_STYLE = BadgeStyle(
    stroke_color="#FFFFFFFF",
    stroke_width=2.0,
    shadow_enabled=True,
    shine_enabled=True,
)

STYLE_PRESETS: dict[str, BadgeStyle] = {
    "flat": FLAT_STYLE,
    "glossy": GLOSSY_STYLE,
}
