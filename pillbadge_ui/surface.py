from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Literal, Protocol

from .geometry import ArcTo, ClosePath, CurveTo, LineTo, MoveTo, PathSegment, Point, Rect, Size
from .style import ColorHandle, FontSpec


PathDrawingMode = Literal["fill", "stroke", "fill_stroke"]
GradientStop = tuple[float, tuple[float, float, float, float]]


class TextMeasurer(Protocol):
    def measure_text(self, text: str, font: FontSpec) -> Size:
        ...


class SurfacePath(Protocol):
    """Backend path resource. Must be released by its creator after use."""

    def move_to(self, x: float, y: float) -> None:
        ...

    def add_arc(
        self,
        cx: float,
        cy: float,
        radius: float,
        start_angle: float,
        end_angle: float,
        clockwise: bool,
    ) -> None:
        ...

    def line_to(self, x: float, y: float) -> None:
        ...

    def curve_to(self, c1x: float, c1y: float, c2x: float, c2y: float, x: float, y: float) -> None:
        ...

    def close(self) -> None:
        ...

    def bounding_box(self) -> Rect:
        ...

    def release(self) -> None:
        ...


class SurfaceGradient(Protocol):
    """Backend gradient resource. Must be released by its creator after use."""

    def release(self) -> None:
        ...


class DrawingSurface(TextMeasurer, Protocol):
    """Immediate-mode 2D context that badge draw plans are replayed onto.

    Coordinates are y-down. Graphics state (translation, colors, line width,
    clip, shadow) is saved and restored as a stack.
    """

    def draw_text(self, text: str, font: FontSpec, position: Point) -> None:
        ...

    def new_path(self) -> SurfacePath:
        ...

    def save_state(self) -> None:
        ...

    def restore_state(self) -> None:
        ...

    def set_line_width(self, width: float) -> None:
        ...

    def set_stroke_color(self, color: ColorHandle) -> None:
        ...

    def set_fill_color(self, color: ColorHandle) -> None:
        ...

    def translate(self, dx: float, dy: float) -> None:
        ...

    def begin_path(self) -> None:
        ...

    def close_path(self) -> None:
        ...

    def add_path(self, path: SurfacePath) -> None:
        ...

    def draw_path(self, mode: PathDrawingMode) -> None:
        ...

    def clip(self) -> None:
        ...

    def set_shadow(self, offset: tuple[float, float], blur: float, color: ColorHandle) -> None:
        ...

    def new_linear_gradient(self, stops: tuple[GradientStop, ...]) -> SurfaceGradient:
        ...

    def draw_linear_gradient(
        self,
        gradient: SurfaceGradient,
        start: Point,
        end: Point,
        *,
        draws_before_start: bool = False,
        draws_after_end: bool = False,
    ) -> None:
        ...


def populate_path(path: SurfacePath, segments: tuple[PathSegment, ...]) -> None:
    for seg in segments:
        if isinstance(seg, MoveTo):
            path.move_to(seg.x, seg.y)
        elif isinstance(seg, LineTo):
            path.line_to(seg.x, seg.y)
        elif isinstance(seg, ArcTo):
            path.add_arc(seg.cx, seg.cy, seg.radius, seg.start_angle, seg.end_angle, seg.clockwise)
        elif isinstance(seg, CurveTo):
            path.curve_to(seg.c1x, seg.c1y, seg.c2x, seg.c2y, seg.x, seg.y)
        elif isinstance(seg, ClosePath):
            path.close()
        else:
            raise TypeError(f"Unsupported path segment: {type(seg)!r}")


@contextmanager
def scoped_path(surface: DrawingSurface, segments: tuple[PathSegment, ...]) -> Iterator[SurfacePath]:
    """Acquire a surface path built from `segments`; it is released on every exit."""

    path = surface.new_path()
    try:
        populate_path(path, segments)
        yield path
    finally:
        path.release()


@contextmanager
def scoped_gradient(surface: DrawingSurface, stops: tuple[GradientStop, ...]) -> Iterator[SurfaceGradient]:
    """Acquire a surface gradient for `stops`; it is released on every exit."""

    gradient = surface.new_linear_gradient(stops)
    try:
        yield gradient
    finally:
        gradient.release()
