from __future__ import annotations

from functools import lru_cache
import logging
from pathlib import Path

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from pillbadge_ui.geometry import Size
from pillbadge_ui.style import FontSpec


LOGGER = logging.getLogger(__name__)

SANS_FONT_FALLBACK_PATTERNS = (
    "helvetica",
    "arial",
    "dejavusans",
    "dejavu sans",
    "liberationsans",
    "liberation sans",
    "notosans",
    "noto sans",
)
BOLD_MARKERS = ("bold", "heavy", "black", "semibold")
FONT_DIRS = (
    Path.home() / "Library" / "Fonts",
    Path("/Library/Fonts"),
    Path("/System/Library/Fonts"),
    Path("/System/Library/Fonts/Supplemental"),
    Path("/usr/share/fonts"),
    Path("/usr/local/share/fonts"),
)

PillowFont = ImageFont.FreeTypeFont | ImageFont.ImageFont


def text_size(text: str, font: FontSpec) -> Size:
    """Advance width and line height (ascent + descent) of `text`."""

    loaded = load_font(font)
    ascent, descent = _line_metrics(loaded)
    width = float(loaded.getlength(text)) if text else 0.0
    return Size(width, float(ascent + descent))


def render_text_mask(text: str, font: FontSpec) -> np.ndarray:
    """Coverage mask (uint8) of `text` laid out from the top-left of its line box."""

    loaded = load_font(font)
    size = text_size(text, font)
    width = max(1, int(np.ceil(size.width)) + 1)
    height = max(1, int(np.ceil(size.height)))
    image = Image.new("L", (width, height), 0)
    if text:
        ImageDraw.Draw(image).text((0, 0), text, fill=255, font=loaded)
    return np.asarray(image, dtype=np.uint8)


def load_font(font: FontSpec) -> PillowFont:
    return _load_font(
        font.family,
        max(1, int(round(font.size_px))),
        font.weight >= 600,
        font.file_path,
    )


@lru_cache(maxsize=64)
def _load_font(family: str, size: int, bold: bool, file_path: str | None) -> PillowFont:
    font_path = Path(file_path) if file_path else _resolve_font_path(family, bold=bold)
    if font_path is not None:
        try:
            return ImageFont.truetype(str(font_path), size=size)
        except OSError:
            LOGGER.warning("unable to load font file %s; falling back to default font", font_path)
    return ImageFont.load_default(size=size)


def _line_metrics(font: PillowFont) -> tuple[int, int]:
    if isinstance(font, ImageFont.FreeTypeFont):
        return font.getmetrics()
    _, top, _, bottom = font.getbbox("Ag")
    return (int(bottom - top), 0)


def _resolve_font_path(family: str, *, bold: bool) -> Path | None:
    wanted = family.strip().lower()
    patterns = ((wanted,) if wanted and wanted != "system" else ()) + SANS_FONT_FALLBACK_PATTERNS

    candidates: list[Path] = []
    for base in FONT_DIRS:
        if not base.exists():
            continue
        for ext in ("*.ttf", "*.otf", "*.ttc"):
            candidates.extend(sorted(base.rglob(ext)))

    for pattern in patterns:
        p = pattern.replace(" ", "")
        matches = [path for path in candidates if p in path.stem.lower().replace(" ", "").replace("-", "")]
        if not matches:
            continue
        for path in matches:
            if _is_bold(path) == bold:
                return path
        return matches[0]
    return None


def _is_bold(path: Path) -> bool:
    stem = path.stem.lower()
    return any(marker in stem for marker in BOLD_MARKERS)
