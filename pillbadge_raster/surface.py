from __future__ import annotations

from dataclasses import dataclass, replace
import logging
from typing import Callable

import numpy as np
from PIL import Image, ImageDraw, ImageFilter

from pillbadge_ui.geometry import Point, Size
from pillbadge_ui.style import ColorHandle, FontSpec
from pillbadge_ui.surface import DrawingSurface, GradientStop, PathDrawingMode

from .canvas import RGBA, composite, composite_rgba, new_canvas, parse_color, shift_mask
from .path import RasterPath, Subpath
from .text import render_text_mask, text_size


LOGGER = logging.getLogger(__name__)

SUPERSAMPLE = 4


@dataclass
class LinearGradient:
    """Gradient resource handed out by `RasterSurface.new_linear_gradient`."""

    stops: tuple[GradientStop, ...]
    on_release: Callable[["LinearGradient"], None] | None = None
    released: bool = False

    def release(self) -> None:
        if self.released:
            return
        self.released = True
        if self.on_release is not None:
            self.on_release(self)


@dataclass(frozen=True)
class GraphicsState:
    tx: float = 0.0
    ty: float = 0.0
    line_width: float = 1.0
    fill_color: RGBA = (0, 0, 0, 255)
    stroke_color: RGBA = (0, 0, 0, 255)
    clip: np.ndarray | None = None
    shadow: tuple[tuple[float, float], float, RGBA] | None = None


class RasterSurface(DrawingSurface):
    """numpy RGBA drawing surface with Pillow-rasterized paths and text.

    Coordinates are y-down with the origin at the top-left pixel corner.
    Paths are anti-aliased by supersampling.
    """

    def __init__(self, width: int, height: int, background: RGBA = (0, 0, 0, 0)) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("surface width/height must be > 0")
        self.width = width
        self.height = height
        self.pixels = new_canvas(width, height, background)
        self._state = GraphicsState()
        self._stack: list[GraphicsState] = []
        self._current: list[Subpath] = []
        self._live_paths: set[int] = set()
        self._live_gradients: set[int] = set()
        LOGGER.debug("raster surface %dx%d", width, height)

    @property
    def state(self) -> GraphicsState:
        return self._state

    @property
    def state_depth(self) -> int:
        return len(self._stack)

    @property
    def live_path_count(self) -> int:
        return len(self._live_paths)

    @property
    def live_gradient_count(self) -> int:
        return len(self._live_gradients)

    def measure_text(self, text: str, font: FontSpec) -> Size:
        return text_size(text, font)

    def draw_text(self, text: str, font: FontSpec, position: Point) -> None:
        if not text:
            return
        mask = render_text_mask(text, font).astype(np.float32) / 255.0
        x = int(round(position.x + self._state.tx))
        y = int(round(position.y + self._state.ty))
        coverage = np.zeros((self.height, self.width), dtype=np.float32)
        h, w = mask.shape
        x0, y0 = max(0, x), max(0, y)
        x1, y1 = min(self.width, x + w), min(self.height, y + h)
        if x1 <= x0 or y1 <= y0:
            return
        coverage[y0:y1, x0:x1] = mask[y0 - y : y1 - y, x0 - x : x1 - x]
        composite(self.pixels, self._clipped(coverage), self._state.fill_color)

    def new_path(self) -> RasterPath:
        path = RasterPath(on_release=self._forget_path)
        self._live_paths.add(id(path))
        return path

    def save_state(self) -> None:
        self._stack.append(self._state)

    def restore_state(self) -> None:
        if not self._stack:
            raise RuntimeError("restore_state without matching save_state")
        self._state = self._stack.pop()

    def set_line_width(self, width: float) -> None:
        self._state = replace(self._state, line_width=float(width))

    def set_stroke_color(self, color: ColorHandle) -> None:
        self._state = replace(self._state, stroke_color=parse_color(color))

    def set_fill_color(self, color: ColorHandle) -> None:
        self._state = replace(self._state, fill_color=parse_color(color))

    def translate(self, dx: float, dy: float) -> None:
        self._state = replace(self._state, tx=self._state.tx + dx, ty=self._state.ty + dy)

    def begin_path(self) -> None:
        self._current = []

    def close_path(self) -> None:
        if self._current:
            self._current[-1].closed = True

    def add_path(self, path: RasterPath) -> None:
        tx, ty = self._state.tx, self._state.ty
        for sub in path.subpaths:
            self._current.append(Subpath(points=[(x + tx, y + ty) for x, y in sub.points], closed=sub.closed))

    def draw_path(self, mode: PathDrawingMode) -> None:
        fill = self._fill_coverage() if mode in ("fill", "fill_stroke") else None
        stroke = self._stroke_coverage() if mode in ("stroke", "fill_stroke") else None
        if self._state.shadow is not None:
            self._draw_shadow(self._state.shadow, fill, stroke)
        if fill is not None:
            composite(self.pixels, self._clipped(fill), self._state.fill_color)
        if stroke is not None:
            composite(self.pixels, self._clipped(stroke), self._state.stroke_color)
        self._current = []

    def clip(self) -> None:
        mask = self._fill_coverage()
        self._state = replace(self._state, clip=self._clipped(mask))
        self._current = []

    def set_shadow(self, offset: tuple[float, float], blur: float, color: ColorHandle) -> None:
        self._state = replace(self._state, shadow=((float(offset[0]), float(offset[1])), float(blur), parse_color(color)))

    def new_linear_gradient(self, stops: tuple[GradientStop, ...]) -> LinearGradient:
        if len(stops) < 2:
            raise ValueError("linear gradient requires at least two stops")
        gradient = LinearGradient(stops=tuple(sorted(stops, key=lambda s: s[0])), on_release=self._forget_gradient)
        self._live_gradients.add(id(gradient))
        return gradient

    def draw_linear_gradient(
        self,
        gradient: LinearGradient,
        start: Point,
        end: Point,
        *,
        draws_before_start: bool = False,
        draws_after_end: bool = False,
    ) -> None:
        if gradient.released:
            raise RuntimeError("gradient used after release")
        sx, sy = start.x + self._state.tx, start.y + self._state.ty
        ex, ey = end.x + self._state.tx, end.y + self._state.ty
        vx, vy = ex - sx, ey - sy
        length_sq = vx * vx + vy * vy
        if length_sq <= 0:
            return
        ys, xs = np.mgrid[0 : self.height, 0 : self.width].astype(np.float32)
        t = ((xs + 0.5 - sx) * vx + (ys + 0.5 - sy) * vy) / length_sq

        offsets = np.asarray([s[0] for s in gradient.stops], dtype=np.float32)
        colors = np.asarray([s[1] for s in gradient.stops], dtype=np.float32)
        tc = np.clip(t, offsets[0], offsets[-1])
        channels = np.stack([np.interp(tc, offsets, colors[:, i]) for i in range(4)], axis=-1)

        visible = np.ones_like(t)
        if not draws_before_start:
            visible = np.where(t < offsets[0], 0.0, visible)
        if not draws_after_end:
            visible = np.where(t > offsets[-1], 0.0, visible)
        alpha = self._clipped((channels[:, :, 3] * visible).astype(np.float32))
        composite_rgba(self.pixels, channels[:, :, :3] * 255.0, alpha)

    def _forget_path(self, path: RasterPath) -> None:
        self._live_paths.discard(id(path))

    def _forget_gradient(self, gradient: LinearGradient) -> None:
        self._live_gradients.discard(id(gradient))

    def _clipped(self, coverage: np.ndarray) -> np.ndarray:
        if self._state.clip is None:
            return coverage
        return coverage * self._state.clip

    def _fill_coverage(self) -> np.ndarray:
        image = Image.new("L", (self.width * SUPERSAMPLE, self.height * SUPERSAMPLE), 0)
        draw = ImageDraw.Draw(image)
        for sub in self._current:
            if len(sub.points) >= 3:
                draw.polygon(_scaled(sub.points), fill=255)
        return _downsample(image, self.width, self.height)

    def _stroke_coverage(self) -> np.ndarray | None:
        width_px = int(round(self._state.line_width * SUPERSAMPLE))
        if width_px <= 0:
            return None
        image = Image.new("L", (self.width * SUPERSAMPLE, self.height * SUPERSAMPLE), 0)
        draw = ImageDraw.Draw(image)
        for sub in self._current:
            points = _scaled(sub.points)
            if sub.closed and points:
                points = points + [points[0], points[1] if len(points) > 1 else points[0]]
            if len(points) >= 2:
                draw.line(points, fill=255, width=width_px, joint="curve")
        return _downsample(image, self.width, self.height)

    def _draw_shadow(
        self,
        shadow_spec: tuple[tuple[float, float], float, RGBA],
        fill: np.ndarray | None,
        stroke: np.ndarray | None,
    ) -> None:
        (dx, dy), blur, color = shadow_spec
        masks = [m for m in (fill, stroke) if m is not None]
        if not masks:
            return
        shape = np.maximum.reduce(masks) if len(masks) > 1 else masks[0]
        shadow = shift_mask(shape, int(round(dx)), int(round(dy)))
        if blur > 0:
            image = Image.fromarray(np.clip(shadow * 255.0, 0, 255).astype(np.uint8))
            image = image.filter(ImageFilter.GaussianBlur(radius=blur / 2.0))
            shadow = np.asarray(image, dtype=np.float32) / 255.0
        composite(self.pixels, self._clipped(shadow), color)


def _scaled(points: list[tuple[float, float]]) -> list[tuple[float, float]]:
    return [(x * SUPERSAMPLE, y * SUPERSAMPLE) for x, y in points]


def _downsample(image: Image.Image, width: int, height: int) -> np.ndarray:
    small = image.resize((width, height), resample=Image.Resampling.BOX)
    return np.asarray(small, dtype=np.float32) / 255.0
