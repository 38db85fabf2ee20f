from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from pillbadge_raster import RasterSurface, save_png
from pillbadge_ui import BadgeRenderer, BadgeState, BadgeStyle, Rect, Size, load_badge_style, resolve_preset


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="pillbadge")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"], default="WARNING")
    sub = parser.add_subparsers(dest="command", required=True)

    measure = sub.add_parser("measure", help="Print the badge size for a value as JSON.")
    measure.add_argument("value", type=int)
    _add_style_arguments(measure)

    render = sub.add_parser("render", help="Render a badge into a PNG container.")
    render.add_argument("value", type=int)
    render.add_argument("--out", type=Path, required=True)
    render.add_argument(
        "--width",
        type=int,
        default=None,
        help="Container width. Default: badge width plus stroke and shadow room.",
    )
    render.add_argument(
        "--height",
        type=int,
        default=None,
        help="Container height. Default: badge height plus stroke and shadow room.",
    )
    _add_style_arguments(render)
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")
    style = _resolve_style(args.style, args.preset)

    if args.command == "measure":
        # text metrics only; a 1x1 surface is enough to host the font backend
        renderer = BadgeRenderer(measurer=RasterSurface(1, 1))
        size = renderer.measure(args.value, style)
        print(
            json.dumps(
                {
                    "value": args.value,
                    "text": renderer.layout(args.value, style).text,
                    "width": size.width,
                    "height": size.height,
                    "hidden": BadgeState(value=args.value, style=style).hidden,
                },
                sort_keys=True,
            )
        )
        return 0

    if args.command == "render":
        renderer = BadgeRenderer(measurer=RasterSurface(1, 1))
        width, height = _resolve_container(renderer.measure(args.value, style), style, args.width, args.height)
        surface = RasterSurface(width, height)
        if BadgeState(value=args.value, style=style).hidden:
            print(f"badge hidden for value={args.value}; writing empty frame")
        else:
            renderer.draw(surface, Rect(0.0, 0.0, float(width), float(height)), args.value, style)
        save_png(surface, args.out)
        print(f"wrote {args.out} ({width}x{height})")
        return 0

    raise RuntimeError(f"unsupported command: {args.command}")


def _add_style_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--style", type=Path, default=None, help="TOML file with a [badge] table.")
    parser.add_argument("--preset", choices=["flat", "glossy"], default=None)


def _resolve_style(style_path: Path | None, preset: str | None) -> BadgeStyle:
    if style_path is not None and preset is not None:
        raise ValueError("--preset cannot be combined with --style; set `preset` in the TOML instead")
    if style_path is not None:
        return load_badge_style(style_path)
    return resolve_preset(preset or "flat")


def _resolve_container(badge: Size, style: BadgeStyle, width: int | None, height: int | None) -> tuple[int, int]:
    if width is not None and width <= 0:
        raise ValueError("width must be > 0")
    if height is not None and height <= 0:
        raise ValueError("height must be > 0")
    room = int(style.stroke_width) + 1
    if style.shadow_enabled:
        room += int(max(abs(style.shadow_offset[0]), abs(style.shadow_offset[1]))) + 4
    default_w = int(badge.width) + 2 * room
    default_h = int(badge.height) + 2 * room
    return (width if width is not None else default_w, height if height is not None else default_h)


if __name__ == "__main__":
    raise SystemExit(main())
