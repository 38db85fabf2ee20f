from __future__ import annotations

from dataclasses import dataclass, field
import math
from typing import Callable

from pillbadge_ui.geometry import (
    ArcTo,
    ClosePath,
    CurveTo,
    LineTo,
    MoveTo,
    PathSegment,
    Rect,
    cubic_point,
    path_bounding_box,
)


ARC_STEP_PX = 0.5
CURVE_STEPS = 24


@dataclass
class Subpath:
    points: list[tuple[float, float]] = field(default_factory=list)
    closed: bool = False


@dataclass
class RasterPath:
    """Flattening path resource handed out by `RasterSurface.new_path`.

    Arcs and cubic curves are flattened to polylines when added; the source
    segments are kept for exact bounding boxes.
    """

    on_release: Callable[["RasterPath"], None] | None = None
    segments: list[PathSegment] = field(default_factory=list)
    subpaths: list[Subpath] = field(default_factory=list)
    released: bool = False

    def move_to(self, x: float, y: float) -> None:
        self._check_live()
        self.segments.append(MoveTo(x, y))
        self.subpaths.append(Subpath(points=[(x, y)]))

    def line_to(self, x: float, y: float) -> None:
        self._check_live()
        self.segments.append(LineTo(x, y))
        self._open_subpath((x, y)).points.append((x, y))

    def add_arc(
        self,
        cx: float,
        cy: float,
        radius: float,
        start_angle: float,
        end_angle: float,
        clockwise: bool,
    ) -> None:
        self._check_live()
        arc = ArcTo(cx, cy, radius, start_angle, end_angle, clockwise)
        self.segments.append(arc)
        start, end = arc.sweep()
        first = arc.point_at(start)
        sub = self._open_subpath(first)
        sub.points.append(first)
        steps = max(8, int(math.ceil(abs(end - start) * radius / ARC_STEP_PX)))
        for i in range(1, steps + 1):
            sub.points.append(arc.point_at(start + (end - start) * i / steps))

    def curve_to(self, c1x: float, c1y: float, c2x: float, c2y: float, x: float, y: float) -> None:
        self._check_live()
        seg = CurveTo(c1x, c1y, c2x, c2y, x, y)
        self.segments.append(seg)
        sub = self._open_subpath((c1x, c1y))
        p0 = sub.points[-1]
        for i in range(1, CURVE_STEPS + 1):
            sub.points.append(cubic_point(p0, (c1x, c1y), (c2x, c2y), (x, y), i / CURVE_STEPS))

    def close(self) -> None:
        self._check_live()
        self.segments.append(ClosePath())
        if self.subpaths:
            self.subpaths[-1].closed = True

    def bounding_box(self) -> Rect:
        self._check_live()
        return path_bounding_box(tuple(self.segments))

    def release(self) -> None:
        if self.released:
            return
        self.released = True
        if self.on_release is not None:
            self.on_release(self)

    def _open_subpath(self, fallback_start: tuple[float, float]) -> Subpath:
        if not self.subpaths or self.subpaths[-1].closed:
            start = self.subpaths[-1].points[0] if self.subpaths else fallback_start
            self.subpaths.append(Subpath(points=[start]))
        return self.subpaths[-1]

    def _check_live(self) -> None:
        if self.released:
            raise RuntimeError("path used after release")
