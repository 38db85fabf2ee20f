from __future__ import annotations

import logging
from pathlib import Path

from PIL import Image
import torch

from .surface import RasterSurface


LOGGER = logging.getLogger(__name__)


def surface_to_tensor(surface: RasterSurface) -> torch.Tensor:
    """Snapshot the surface as an RGBA255 `(H, W, 4)` uint8 frame tensor."""

    return torch.from_numpy(surface.pixels.copy())


def composite_into_frame(frame: torch.Tensor, surface: RasterSurface, x: int, y: int) -> torch.Tensor:
    """Source-over the surface onto a copy of an RGBA255 frame at `(x, y)`.

    Parts of the surface outside the frame are dropped.
    """

    if frame.ndim != 3 or frame.shape[2] != 4:
        raise ValueError(f"frame has invalid shape: {tuple(frame.shape)} expected (H, W, 4)")
    out = frame.clone()
    fh, fw = int(out.shape[0]), int(out.shape[1])
    x0, y0 = max(0, x), max(0, y)
    x1, y1 = min(fw, x + surface.width), min(fh, y + surface.height)
    if x1 <= x0 or y1 <= y0:
        return out
    src = surface_to_tensor(surface)[y0 - y : y1 - y, x0 - x : x1 - x].to(torch.float32)
    dst = out[y0:y1, x0:x1].to(torch.float32)
    src_a = src[:, :, 3:4] / 255.0
    dst_a = dst[:, :, 3:4] / 255.0
    out_a = src_a + dst_a * (1.0 - src_a)
    rgb_num = src[:, :, :3] * src_a + dst[:, :, :3] * dst_a * (1.0 - src_a)
    rgb = rgb_num / torch.where(out_a > 1e-6, out_a, torch.ones_like(out_a))
    blended = torch.cat((rgb, out_a * 255.0), dim=-1)
    out[y0:y1, x0:x1] = torch.clamp(torch.round(blended), 0, 255).to(torch.uint8)
    return out


def save_png(surface: RasterSurface, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.fromarray(surface.pixels).save(path, format="PNG")
    LOGGER.debug("wrote badge frame %dx%d to %s", surface.width, surface.height, path)
    return path
