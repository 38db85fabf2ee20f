from __future__ import annotations

from dataclasses import dataclass
import logging
import math

from .draw_plan import (
    AddPath,
    BeginPath,
    Clip,
    ClosePath,
    DrawCommand,
    DrawLinearGradient,
    DrawPath,
    DrawPlan,
    DrawText,
    RestoreState,
    SaveState,
    SetFillColor,
    SetLineWidth,
    SetShadow,
    SetStrokeColor,
    Translate,
    execute_draw_plan,
)
from .geometry import CapsulePath, PathSegment, Point, Rect, Size, compute_capsule_path, shine_region
from .style import BadgeAlignment, BadgeStyle
from .surface import DrawingSurface, GradientStop, TextMeasurer


LOGGER = logging.getLogger(__name__)

SHADOW_BLUR = 4.0
SHINE_GRADIENT: tuple[GradientStop, ...] = (
    (0.0, (1.0, 1.0, 1.0, 0.8)),
    (1.0, (1.0, 1.0, 1.0, 0.0)),
)


def format_badge_value(value: int, text_format: str) -> str:
    """Apply `text_format` to the badge value. Malformed formats raise ValueError."""

    return format(value, text_format)


def placement_offset(container: Size, badge: Size, alignment: BadgeAlignment) -> Point:
    """Top-left of the badge footprint inside `container`.

    Vertical placement always rounds after halving the free space, for every
    alignment. Python's `round` ties to even.
    """

    dy = float(round((container.height - badge.height) / 2))
    if alignment == "left":
        return Point(0.0, dy)
    if alignment == "right":
        return Point(container.width - badge.width, dy)
    return Point(float(round((container.width - badge.width) / 2)), dy)


@dataclass(frozen=True)
class BadgeLayout:
    text: str
    text_size: Size
    capsule: CapsulePath
    bounding_size: Size


@dataclass
class BadgeRenderer:
    """Measures badges and composes their layered draw plans.

    `measurer` supplies text metrics; it is usually the surface that will
    later execute the plan.
    """

    measurer: TextMeasurer

    def layout(self, value: int, style: BadgeStyle) -> BadgeLayout:
        text = format_badge_value(value, style.text_format)
        text_size = self.measurer.measure_text(text, style.font)
        capsule, bounding_size = compute_capsule_path(text_size, style.pad)
        return BadgeLayout(text=text, text_size=text_size, capsule=capsule, bounding_size=bounding_size)

    def measure(self, value: int, style: BadgeStyle) -> Size:
        return self.layout(value, style).bounding_size

    def build_draw_plan(self, container: Rect, value: int, style: BadgeStyle) -> DrawPlan:
        layout = self.layout(value, style)
        # stroke straddles the path centerline; only placement sees the outer half
        badge_size = layout.bounding_size.inflate(float(math.ceil(style.stroke_width / 2)))
        ctm = placement_offset(container.size, badge_size, style.alignment)
        if container.width < badge_size.width or container.height < badge_size.height:
            LOGGER.debug(
                "badge %r (%gx%g) overflows container (%gx%g)",
                layout.text,
                badge_size.width,
                badge_size.height,
                container.width,
                container.height,
            )

        capsule = layout.capsule.segments
        commands: list[DrawCommand] = [
            SaveState(),
            SetLineWidth(style.stroke_width),
            SetStrokeColor(style.stroke_color),
            SetFillColor(style.fill_color),
            Translate(ctm.x, ctm.y),
        ]
        if style.shadow_enabled:
            commands.extend(
                (
                    SaveState(),
                    SetShadow(style.shadow_offset, SHADOW_BLUR, style.shadow_color),
                    BeginPath(),
                    AddPath(capsule),
                    ClosePath(),
                    DrawPath("fill_stroke"),
                    RestoreState(),
                )
            )
        commands.extend((BeginPath(), AddPath(capsule), ClosePath(), DrawPath("fill_stroke")))
        if style.shine_enabled:
            commands.extend(_shine_pass(capsule, badge_size))
        commands.append(RestoreState())

        text_pos = ctm.offset(
            (badge_size.width - layout.text_size.width) / 2 + style.adjust_offset[0],
            (badge_size.height - layout.text_size.height) / 2 + style.adjust_offset[1],
        )
        commands.extend(
            (
                SaveState(),
                SetFillColor(style.text_color),
                DrawText(layout.text, style.font, text_pos),
                RestoreState(),
            )
        )
        LOGGER.debug(
            "badge plan text=%r size=%gx%g offset=(%g, %g) commands=%d",
            layout.text,
            badge_size.width,
            badge_size.height,
            ctm.x,
            ctm.y,
            len(commands),
        )
        return DrawPlan(
            text=layout.text,
            offset=ctm,
            badge_size=badge_size,
            text_size=layout.text_size,
            commands=tuple(commands),
        )

    def draw(self, surface: DrawingSurface, container: Rect, value: int, style: BadgeStyle) -> DrawPlan:
        plan = self.build_draw_plan(container, value, style)
        execute_draw_plan(plan, surface)
        return plan


def _shine_pass(capsule: tuple[PathSegment, ...], badge_size: Size) -> tuple[DrawCommand, ...]:
    stop_y = badge_size.height * 0.25 + badge_size.height * 0.4
    mid_x = badge_size.width / 2.0
    return (
        BeginPath(),
        AddPath(capsule),
        ClosePath(),
        Clip(),
        SaveState(),
        BeginPath(),
        AddPath(shine_region(badge_size)),
        ClosePath(),
        Clip(),
        DrawLinearGradient(
            stops=SHINE_GRADIENT,
            start=Point(mid_x, 0.0),
            end=Point(mid_x, stop_y),
            draws_before_start=True,
        ),
        RestoreState(),
    )
