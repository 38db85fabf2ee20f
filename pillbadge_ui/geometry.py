from __future__ import annotations

from dataclasses import dataclass
import math
from typing import TypeAlias


HALF_PI = math.pi / 2.0


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def offset(self, dx: float, dy: float) -> "Point":
        return Point(self.x + dx, self.y + dy)


@dataclass(frozen=True)
class Size:
    width: float
    height: float

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError("Size width/height must be >= 0")

    def ceil(self) -> "Size":
        return Size(float(math.ceil(self.width)), float(math.ceil(self.height)))

    def inflate(self, amount: float) -> "Size":
        return Size(self.width + amount, self.height + amount)


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError("Rect width/height must be >= 0")

    @property
    def size(self) -> Size:
        return Size(self.width, self.height)

    @property
    def origin(self) -> Point:
        return Point(self.x, self.y)

    def contains(self, x: float, y: float) -> bool:
        return self.x <= x <= self.x + self.width and self.y <= y <= self.y + self.height

    @classmethod
    def from_points(cls, points: list[tuple[float, float]]) -> "Rect":
        if not points:
            return cls(0.0, 0.0, 0.0, 0.0)
        xs = [p[0] for p in points]
        ys = [p[1] for p in points]
        return cls(min(xs), min(ys), max(xs) - min(xs), max(ys) - min(ys))


@dataclass(frozen=True)
class MoveTo:
    x: float
    y: float


@dataclass(frozen=True)
class LineTo:
    x: float
    y: float


@dataclass(frozen=True)
class ArcTo:
    """Circular arc; a straight line joins the current point to the arc start."""

    cx: float
    cy: float
    radius: float
    start_angle: float
    end_angle: float
    clockwise: bool

    def point_at(self, angle: float) -> tuple[float, float]:
        return (self.cx + self.radius * math.cos(angle), self.cy + self.radius * math.sin(angle))

    def sweep(self) -> tuple[float, float]:
        return arc_sweep(self.start_angle, self.end_angle, self.clockwise)


@dataclass(frozen=True)
class CurveTo:
    c1x: float
    c1y: float
    c2x: float
    c2y: float
    x: float
    y: float


@dataclass(frozen=True)
class ClosePath:
    pass


PathSegment: TypeAlias = MoveTo | LineTo | ArcTo | CurveTo | ClosePath


def arc_sweep(start_angle: float, end_angle: float, clockwise: bool) -> tuple[float, float]:
    """Normalize an arc so that `end` is reached from `start` in the winding direction.

    Points sit at `center + r * (cos a, sin a)` on a y-down surface. Clockwise
    arcs run with a decreasing angle, counter-clockwise ones with an increasing
    angle. A sweep never exceeds one full turn.
    """

    if clockwise:
        while end_angle > start_angle:
            end_angle -= 2.0 * math.pi
        while start_angle - end_angle > 2.0 * math.pi:
            end_angle += 2.0 * math.pi
    else:
        while end_angle < start_angle:
            end_angle += 2.0 * math.pi
        while end_angle - start_angle > 2.0 * math.pi:
            end_angle -= 2.0 * math.pi
    return (start_angle, end_angle)


def _arc_extreme_points(arc: ArcTo) -> list[tuple[float, float]]:
    start, end = arc.sweep()
    lo, hi = min(start, end), max(start, end)
    points = [arc.point_at(start), arc.point_at(end)]
    k = math.ceil(lo / HALF_PI)
    while k * HALF_PI <= hi:
        points.append(arc.point_at(k * HALF_PI))
        k += 1
    return points


def _cubic_extreme_points(p0: tuple[float, float], seg: CurveTo) -> list[tuple[float, float]]:
    p1 = (seg.c1x, seg.c1y)
    p2 = (seg.c2x, seg.c2y)
    p3 = (seg.x, seg.y)
    ts = [0.0, 1.0]
    for axis in (0, 1):
        a = -p0[axis] + 3 * p1[axis] - 3 * p2[axis] + p3[axis]
        b = 2 * (p0[axis] - 2 * p1[axis] + p2[axis])
        c = p1[axis] - p0[axis]
        if abs(a) < 1e-12:
            if abs(b) > 1e-12:
                ts.append(-c / b)
            continue
        disc = b * b - 4 * a * c
        if disc < 0:
            continue
        root = math.sqrt(disc)
        ts.extend(((-b + root) / (2 * a), (-b - root) / (2 * a)))
    return [cubic_point(p0, p1, p2, p3, t) for t in ts if 0.0 <= t <= 1.0]


def cubic_point(
    p0: tuple[float, float],
    p1: tuple[float, float],
    p2: tuple[float, float],
    p3: tuple[float, float],
    t: float,
) -> tuple[float, float]:
    mt = 1.0 - t
    a = mt * mt * mt
    b = 3 * mt * mt * t
    c = 3 * mt * t * t
    d = t * t * t
    return (
        a * p0[0] + b * p1[0] + c * p2[0] + d * p3[0],
        a * p0[1] + b * p1[1] + c * p2[1] + d * p3[1],
    )


def path_bounding_box(segments: tuple[PathSegment, ...]) -> Rect:
    """Tight bounding box of a path; control points of curves are excluded."""

    points: list[tuple[float, float]] = []
    current: tuple[float, float] | None = None
    subpath_start: tuple[float, float] | None = None
    for seg in segments:
        if isinstance(seg, MoveTo):
            current = (seg.x, seg.y)
            subpath_start = current
            points.append(current)
        elif isinstance(seg, LineTo):
            current = (seg.x, seg.y)
            points.append(current)
        elif isinstance(seg, ArcTo):
            points.extend(_arc_extreme_points(seg))
            current = seg.point_at(seg.sweep()[1])
            if subpath_start is None:
                subpath_start = seg.point_at(seg.start_angle)
        elif isinstance(seg, CurveTo):
            start = current if current is not None else (seg.c1x, seg.c1y)
            points.extend(_cubic_extreme_points(start, seg))
            current = (seg.x, seg.y)
        elif isinstance(seg, ClosePath):
            current = subpath_start
    return Rect.from_points(points)


@dataclass(frozen=True)
class CapsulePath:
    """Stadium outline: two semicircles of `arc_radius` joined by straight edges."""

    arc_radius: float
    badge_width: float
    segments: tuple[PathSegment, ...]

    @property
    def height(self) -> float:
        return 2.0 * self.arc_radius

    def bounding_box(self) -> Rect:
        return path_bounding_box(self.segments)


def compute_capsule_path(text_size: Size, pad: int) -> tuple[CapsulePath, Size]:
    """Build the minimal capsule around text of `text_size` plus `pad`.

    Returns the path and its bounding size with each dimension rounded up to
    the next integer.
    """

    if pad < 0:
        raise ValueError("pad must be >= 0")
    arc_radius = float(math.ceil((text_size.height + pad) / 2.0))
    width_adjustment = text_size.width - (text_size.height / 2.0)
    badge_width = 2.0 * arc_radius + max(0.0, width_adjustment)

    segments: tuple[PathSegment, ...] = (
        MoveTo(arc_radius, 0.0),
        ArcTo(arc_radius, arc_radius, arc_radius, 3.0 * HALF_PI, HALF_PI, True),
        LineTo(badge_width - arc_radius, 2.0 * arc_radius),
        ArcTo(badge_width - arc_radius, arc_radius, arc_radius, HALF_PI, 3.0 * HALF_PI, True),
        LineTo(arc_radius, 0.0),
    )
    path = CapsulePath(arc_radius=arc_radius, badge_width=badge_width, segments=segments)
    return path, path.bounding_box().size.ceil()


def shine_region(badge_size: Size) -> tuple[PathSegment, ...]:
    """Curved highlight covering the top of the badge, bulging down to 65% of its height."""

    width = badge_size.width
    start_y = badge_size.height * 0.25
    stop_y = start_y + badge_size.height * 0.4
    return (
        MoveTo(0.0, 0.0),
        LineTo(0.0, start_y),
        CurveTo(0.0, stop_y, width, stop_y, width, start_y),
        LineTo(width, 0.0),
    )
