from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import TypeAlias

from .geometry import PathSegment, Point, Size
from .style import ColorHandle, FontSpec
from .surface import DrawingSurface, GradientStop, PathDrawingMode, scoped_gradient, scoped_path


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class SaveState:
    pass


@dataclass(frozen=True)
class RestoreState:
    pass


@dataclass(frozen=True)
class SetLineWidth:
    width: float


@dataclass(frozen=True)
class SetStrokeColor:
    color: ColorHandle


@dataclass(frozen=True)
class SetFillColor:
    color: ColorHandle


@dataclass(frozen=True)
class Translate:
    dx: float
    dy: float


@dataclass(frozen=True)
class SetShadow:
    offset: tuple[float, float]
    blur: float
    color: ColorHandle


@dataclass(frozen=True)
class BeginPath:
    pass


@dataclass(frozen=True)
class AddPath:
    segments: tuple[PathSegment, ...]


@dataclass(frozen=True)
class ClosePath:
    pass


@dataclass(frozen=True)
class DrawPath:
    mode: PathDrawingMode = "fill_stroke"


@dataclass(frozen=True)
class Clip:
    pass


@dataclass(frozen=True)
class DrawLinearGradient:
    stops: tuple[GradientStop, ...]
    start: Point
    end: Point
    draws_before_start: bool = False
    draws_after_end: bool = False


@dataclass(frozen=True)
class DrawText:
    text: str
    font: FontSpec
    position: Point


DrawCommand: TypeAlias = (
    SaveState
    | RestoreState
    | SetLineWidth
    | SetStrokeColor
    | SetFillColor
    | Translate
    | SetShadow
    | BeginPath
    | AddPath
    | ClosePath
    | DrawPath
    | Clip
    | DrawLinearGradient
    | DrawText
)


@dataclass(frozen=True)
class DrawPlan:
    """Ordered drawing commands for one badge frame.

    `offset` is the translation applied before the badge layers, `badge_size`
    the stroke-inflated footprint and `text_size` the measured label size.
    """

    text: str
    offset: Point
    badge_size: Size
    text_size: Size
    commands: tuple[DrawCommand, ...]

    def count(self, command_type: type) -> int:
        return sum(1 for cmd in self.commands if isinstance(cmd, command_type))


def execute_draw_plan(plan: DrawPlan, surface: DrawingSurface) -> None:
    """Replay `plan` onto `surface`. Surface errors propagate to the caller."""

    LOGGER.debug("replaying badge plan text=%r commands=%d", plan.text, len(plan.commands))
    for cmd in plan.commands:
        _apply_command(cmd, surface)


def _apply_command(cmd: DrawCommand, surface: DrawingSurface) -> None:
    if isinstance(cmd, SaveState):
        surface.save_state()
    elif isinstance(cmd, RestoreState):
        surface.restore_state()
    elif isinstance(cmd, SetLineWidth):
        surface.set_line_width(cmd.width)
    elif isinstance(cmd, SetStrokeColor):
        surface.set_stroke_color(cmd.color)
    elif isinstance(cmd, SetFillColor):
        surface.set_fill_color(cmd.color)
    elif isinstance(cmd, Translate):
        surface.translate(cmd.dx, cmd.dy)
    elif isinstance(cmd, SetShadow):
        surface.set_shadow(cmd.offset, cmd.blur, cmd.color)
    elif isinstance(cmd, BeginPath):
        surface.begin_path()
    elif isinstance(cmd, AddPath):
        with scoped_path(surface, cmd.segments) as path:
            surface.add_path(path)
    elif isinstance(cmd, ClosePath):
        surface.close_path()
    elif isinstance(cmd, DrawPath):
        surface.draw_path(cmd.mode)
    elif isinstance(cmd, Clip):
        surface.clip()
    elif isinstance(cmd, DrawLinearGradient):
        with scoped_gradient(surface, cmd.stops) as gradient:
            surface.draw_linear_gradient(
                gradient,
                cmd.start,
                cmd.end,
                draws_before_start=cmd.draws_before_start,
                draws_after_end=cmd.draws_after_end,
            )
    elif isinstance(cmd, DrawText):
        surface.draw_text(cmd.text, cmd.font, cmd.position)
    else:
        raise TypeError(f"Unsupported draw command: {type(cmd)!r}")
