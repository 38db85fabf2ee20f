from __future__ import annotations

import re

import numpy as np


RGBA = tuple[int, int, int, int]

_HEX_COLOR = re.compile(r"^#([0-9a-fA-F]{6})([0-9a-fA-F]{2})?$")


def new_canvas(width: int, height: int, color: RGBA = (0, 0, 0, 0)) -> np.ndarray:
    canvas = np.zeros((height, width, 4), dtype=np.uint8)
    canvas[:, :, 0] = color[0]
    canvas[:, :, 1] = color[1]
    canvas[:, :, 2] = color[2]
    canvas[:, :, 3] = color[3]
    return canvas


def parse_color(color: object) -> RGBA:
    """Resolve a color handle: `#RRGGBB[AA]`, RGBA ints in [0, 255] or RGBA floats in [0, 1]."""

    if isinstance(color, str):
        match = _HEX_COLOR.match(color.strip())
        if match is None:
            raise ValueError(f"invalid hex color: {color!r}")
        rgb = match.group(1)
        alpha = match.group(2) or "FF"
        return (int(rgb[0:2], 16), int(rgb[2:4], 16), int(rgb[4:6], 16), int(alpha, 16))
    if isinstance(color, (tuple, list)) and len(color) == 4:
        if all(isinstance(c, int) and not isinstance(c, bool) for c in color):
            if any(c < 0 or c > 255 for c in color):
                raise ValueError(f"RGBA channels must be in [0, 255]: {color!r}")
            return (color[0], color[1], color[2], color[3])
        if all(isinstance(c, (int, float)) and not isinstance(c, bool) for c in color):
            if any(c < 0.0 or c > 1.0 for c in color):
                raise ValueError(f"float RGBA channels must be in [0, 1]: {color!r}")
            r, g, b, a = (int(round(float(c) * 255.0)) for c in color)
            return (r, g, b, a)
    raise ValueError(f"unsupported color handle: {color!r}")


def composite(dst: np.ndarray, coverage: np.ndarray, color: RGBA) -> None:
    """Source-over blend a uniform color through a float coverage mask."""

    if color[3] <= 0 or not np.any(coverage > 0):
        return
    rgb = np.broadcast_to(np.asarray(color[:3], dtype=np.float32), coverage.shape + (3,))
    composite_rgba(dst, rgb, coverage * (color[3] / 255.0))


def composite_rgba(dst: np.ndarray, src_rgb: np.ndarray, src_alpha: np.ndarray) -> None:
    """Source-over blend per-pixel straight-alpha color into `dst` in place."""

    if not np.any(src_alpha > 0):
        return
    dst_rgb = dst[:, :, :3].astype(np.float32)
    dst_alpha = dst[:, :, 3].astype(np.float32) / 255.0
    out_alpha = src_alpha + dst_alpha * (1.0 - src_alpha)
    out_rgb_num = src_rgb * src_alpha[:, :, None] + dst_rgb * dst_alpha[:, :, None] * (1.0 - src_alpha[:, :, None])
    safe_alpha = np.where(out_alpha > 1e-6, out_alpha, 1.0)
    out_rgb = out_rgb_num / safe_alpha[:, :, None]

    dst[:, :, :3] = np.clip(np.rint(out_rgb), 0, 255).astype(np.uint8)
    dst[:, :, 3] = np.clip(np.rint(out_alpha * 255.0), 0, 255).astype(np.uint8)


def shift_mask(mask: np.ndarray, dx: int, dy: int) -> np.ndarray:
    """Translate a coverage mask by whole pixels, filling uncovered area with zero."""

    h, w = mask.shape
    out = np.zeros_like(mask)
    if abs(dx) >= w or abs(dy) >= h:
        return out
    src_y0, dst_y0 = max(0, -dy), max(0, dy)
    src_x0, dst_x0 = max(0, -dx), max(0, dx)
    span_h = h - abs(dy)
    span_w = w - abs(dx)
    out[dst_y0 : dst_y0 + span_h, dst_x0 : dst_x0 + span_w] = mask[src_y0 : src_y0 + span_h, src_x0 : src_x0 + span_w]
    return out
