"""Reference numpy/Pillow raster surface for pillbadge draw plans."""

from .canvas import RGBA, composite, composite_rgba, new_canvas, parse_color
from .frame import composite_into_frame, save_png, surface_to_tensor
from .path import RasterPath
from .surface import GraphicsState, LinearGradient, RasterSurface
from .text import load_font, render_text_mask, text_size

__all__ = [
    "GraphicsState",
    "LinearGradient",
    "RGBA",
    "RasterPath",
    "RasterSurface",
    "composite",
    "composite_into_frame",
    "composite_rgba",
    "load_font",
    "new_canvas",
    "parse_color",
    "render_text_mask",
    "save_png",
    "surface_to_tensor",
    "text_size",
]
