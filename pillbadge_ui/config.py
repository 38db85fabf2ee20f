from __future__ import annotations

from dataclasses import fields, replace
import logging
from pathlib import Path
import re
import tomllib
from typing import Any, Mapping

from .style import BADGE_ALIGNMENTS, FLAT_STYLE, FONT_SLANTS, STYLE_PRESETS, BadgeStyle, FontSpec

LOGGER = logging.getLogger(__name__)
_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}([0-9a-fA-F]{2})?$")
_COLOR_KEYS = ("fill_color", "stroke_color", "shadow_color", "text_color")
_PAIR_KEYS = ("shadow_offset", "adjust_offset")
_BOOL_KEYS = ("shadow_enabled", "shine_enabled", "hide_when_zero")
_FONT_KEYS = ("family", "size_px", "weight", "slant", "file_path")


def resolve_preset(name: str) -> BadgeStyle:
    try:
        return STYLE_PRESETS[name]
    except KeyError:
        raise ValueError(f"Unknown badge preset: {name}") from None


def validate_badge_style(
    overrides: Mapping[str, Any] | None = None,
    *,
    base: BadgeStyle = FLAT_STYLE,
) -> BadgeStyle:
    """Validate and merge user overrides onto `base`.

    Colors given through config must be hex strings (#RRGGBB or #RRGGBBAA).
    A `font` override may be a FontSpec or a mapping of FontSpec fields.
    """

    raw: dict[str, Any] = {f.name: getattr(base, f.name) for f in fields(base)}
    if overrides:
        for key, value in overrides.items():
            if key not in raw:
                raise ValueError(f"Unknown badge style key: {key}")
            raw[key] = value

    for key in _COLOR_KEYS:
        if overrides and key in overrides:
            if not isinstance(raw[key], str) or not _HEX_COLOR.match(raw[key]):
                raise ValueError(f"Style key `{key}` must be a hex color (#RRGGBB or #RRGGBBAA)")

    pad = raw["pad"]
    if isinstance(pad, bool) or not isinstance(pad, int) or pad < 0:
        raise ValueError("Style key `pad` must be a non-negative integer")

    stroke_width = raw["stroke_width"]
    if isinstance(stroke_width, bool) or not isinstance(stroke_width, (int, float)) or stroke_width < 0:
        raise ValueError("Style key `stroke_width` must be a non-negative number")

    for key in _BOOL_KEYS:
        if not isinstance(raw[key], bool):
            raise ValueError(f"Style key `{key}` must be a boolean")

    alignment = raw["alignment"]
    if not isinstance(alignment, str) or alignment.lower() not in BADGE_ALIGNMENTS:
        raise ValueError(f"Style key `alignment` must be one of: {', '.join(BADGE_ALIGNMENTS)}")

    pairs = {key: _coerce_pair(key, raw[key]) for key in _PAIR_KEYS}

    text_format = raw["text_format"]
    if not isinstance(text_format, str):
        raise ValueError("Style key `text_format` must be a string")
    try:
        format(0, text_format)
    except (ValueError, TypeError) as exc:
        raise ValueError(f"Style key `text_format` cannot format an integer: {exc}") from exc

    style = base.with_overrides(
        pad=pad,
        font=_coerce_font(raw["font"], base.font),
        text_format=text_format,
        fill_color=raw["fill_color"],
        stroke_color=raw["stroke_color"],
        shadow_color=raw["shadow_color"],
        text_color=raw["text_color"],
        stroke_width=float(stroke_width),
        shadow_enabled=raw["shadow_enabled"],
        shadow_offset=pairs["shadow_offset"],
        shine_enabled=raw["shine_enabled"],
        alignment=alignment.lower(),
        adjust_offset=pairs["adjust_offset"],
        hide_when_zero=raw["hide_when_zero"],
    )
    return style


def load_badge_style(path: Path) -> BadgeStyle:
    """Load a badge style from TOML.

    Layout::

        [badge]
        preset = "glossy"      # optional, "flat" by default
        pad = 3
        fill_color = "#1E88E5"

        [badge.font]
        family = "DejaVu Sans"
        size_px = 14
    """

    if not path.exists():
        raise FileNotFoundError(f"badge style not found: {path}")
    with path.open("rb") as f:
        raw = tomllib.load(f)
    table = raw.get("badge")
    if not isinstance(table, dict):
        raise ValueError(f"badge style file missing [badge] table: {path}")
    overrides = dict(table)
    preset = overrides.pop("preset", "flat")
    if not isinstance(preset, str):
        raise ValueError("Style key `preset` must be a string")
    style = validate_badge_style(overrides, base=resolve_preset(preset))
    LOGGER.debug("loaded badge style from %s (preset=%s)", path, preset)
    return style


def _coerce_pair(key: str, value: Any) -> tuple[float, float]:
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise ValueError(f"Style key `{key}` must be a pair of numbers")
    out: list[float] = []
    for item in value:
        if isinstance(item, bool) or not isinstance(item, (int, float)):
            raise ValueError(f"Style key `{key}` must be a pair of numbers")
        out.append(float(item))
    return (out[0], out[1])


def _coerce_font(value: Any, base_font: FontSpec) -> FontSpec:
    if isinstance(value, FontSpec):
        return value
    if not isinstance(value, Mapping):
        raise ValueError("Style key `font` must be a table of font fields")
    unknown = set(value) - set(_FONT_KEYS)
    if unknown:
        raise ValueError(f"Unknown font key: {sorted(unknown)[0]}")
    changes: dict[str, Any] = {}
    for key, item in value.items():
        if key in ("family", "file_path"):
            if not isinstance(item, str) or not item.strip():
                raise ValueError(f"Style key `font.{key}` must be a non-empty string")
            changes[key] = item
        elif key == "size_px":
            if isinstance(item, bool) or not isinstance(item, (int, float)) or item <= 0:
                raise ValueError("Style key `font.size_px` must be a positive number")
            changes[key] = float(item)
        elif key == "weight":
            if isinstance(item, bool) or not isinstance(item, int) or not 1 <= item <= 1000:
                raise ValueError("Style key `font.weight` must be an integer in [1, 1000]")
            changes[key] = item
        elif key == "slant":
            if not isinstance(item, str) or item.lower() not in FONT_SLANTS:
                raise ValueError(f"Style key `font.slant` must be one of: {', '.join(FONT_SLANTS)}")
            changes[key] = item.lower()
    return replace(base_font, **changes)
