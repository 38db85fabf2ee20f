"""Numeric capsule badges: geometry, layout and layered draw plans."""

from .config import load_badge_style, resolve_preset, validate_badge_style
from .draw_plan import DrawCommand, DrawPlan, execute_draw_plan
from .geometry import CapsulePath, Point, Rect, Size, compute_capsule_path, path_bounding_box, shine_region
from .renderer import BadgeLayout, BadgeRenderer, format_badge_value, placement_offset
from .style import FLAT_STYLE, GLOSSY_STYLE, STYLE_PRESETS, BadgeAlignment, BadgeStyle, FontSpec
from .surface import DrawingSurface, SurfaceGradient, SurfacePath, TextMeasurer, scoped_gradient, scoped_path
from .view import BadgeState, BadgeView

__all__ = [
    "BadgeAlignment",
    "BadgeLayout",
    "BadgeRenderer",
    "BadgeState",
    "BadgeStyle",
    "BadgeView",
    "CapsulePath",
    "DrawCommand",
    "DrawPlan",
    "DrawingSurface",
    "FLAT_STYLE",
    "FontSpec",
    "GLOSSY_STYLE",
    "Point",
    "Rect",
    "STYLE_PRESETS",
    "Size",
    "SurfaceGradient",
    "SurfacePath",
    "TextMeasurer",
    "compute_capsule_path",
    "execute_draw_plan",
    "format_badge_value",
    "load_badge_style",
    "path_bounding_box",
    "placement_offset",
    "resolve_preset",
    "scoped_gradient",
    "scoped_path",
    "shine_region",
    "validate_badge_style",
]
