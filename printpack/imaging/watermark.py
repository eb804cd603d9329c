# printpack/imaging/watermark.py
# Text watermarks sized against the print resolution.
# - Five fixed anchors or a rotated tile pattern ("repeat")
# - Drop shadow in the opposite luminance keeps text readable on any art
# - Opacity is baked into the RGBA fills; rotation only touches the sprite

from __future__ import annotations

import math
import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterator, Optional, Tuple

from PIL import Image, ImageColor, ImageDraw, ImageFilter, ImageFont

from printpack.models.enums import WatermarkPosition
from printpack.models.settings import WatermarkSpec
from printpack.imaging.dpi_presets import REFERENCE_DPI
from printpack.imaging.errors import ConfigurationError, SurfaceAcquisitionError

log = logging.getLogger("printpack.watermark")

REFERENCE_WIDTH = 4 * REFERENCE_DPI
MIN_SCALE = 0.3
COVERAGE_FACTOR = 1.4

FONT_CANDIDATES = (
    "DejaVuSans.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "arial.ttf",
    "Arial.ttf",
    "/Library/Fonts/Arial.ttf",
    "C:/Windows/Fonts/arial.ttf",
)

RGB = Tuple[int, int, int]


def scale_factor(width: int) -> float:
    return max(MIN_SCALE, width / REFERENCE_WIDTH)


def parse_color(color: str) -> RGB:
    try:
        return ImageColor.getrgb(color)[:3]
    except ValueError as e:
        raise ConfigurationError(f"Unrecognised watermark color: {color!r}") from e


def shadow_color(rgb: RGB) -> RGB:
    return (0, 0, 0) if rgb == (255, 255, 255) else (255, 255, 255)


@lru_cache(maxsize=32)
def load_font(size: int, font_path: Optional[str] = None) -> ImageFont.FreeTypeFont:
    candidates = (font_path,) + FONT_CANDIDATES if font_path else FONT_CANDIDATES
    for candidate in candidates:
        try:
            return ImageFont.truetype(candidate, size)
        except OSError:
            continue
    log.debug("No system font found, using Pillow's bundled font at %dpx", size)
    return ImageFont.load_default(size=size)


def anchor_point(position: WatermarkPosition, width: int, height: int,
                 text_w: float, text_h: float, margin_x: float, margin_y: float) -> Tuple[float, float]:
    """Baseline-left point for a single watermark."""
    if position is WatermarkPosition.TOP_RIGHT:
        return (width - text_w - margin_x, margin_y + text_h)
    if position is WatermarkPosition.BOTTOM_LEFT:
        return (margin_x, height - margin_y)
    if position is WatermarkPosition.BOTTOM_RIGHT:
        return (width - text_w - margin_x, height - margin_y)
    if position is WatermarkPosition.CENTER:
        return ((width - text_w) / 2, (height + text_h) / 2)
    return (margin_x, margin_y + text_h)


@dataclass(frozen=True)
class TileGrid:
    cols: int
    rows: int
    start_x: float
    start_y: float
    spacing_x: float
    spacing_y: float

    def positions(self) -> Iterator[Tuple[float, float]]:
        for row in range(self.rows):
            for col in range(self.cols):
                yield (self.start_x + col * self.spacing_x, self.start_y + row * self.spacing_y)


def repeat_grid(width: int, height: int, text_w: float, text_h: float,
                margin_x: float, margin_y: float) -> TileGrid:
    """Tile layout in the rotated frame, origin at the canvas center.
    The grid spans 1.4x the canvas diagonal so every rotation is covered."""
    spacing_x = max(1.0, text_w + margin_x)
    spacing_y = max(1.0, text_h + margin_y)
    coverage = math.hypot(width, height) * COVERAGE_FACTOR
    return TileGrid(
        cols=math.ceil(coverage / spacing_x) + 2,
        rows=math.ceil(coverage / spacing_y) + 2,
        start_x=-coverage / 2,
        start_y=-coverage / 2 + text_h,
        spacing_x=spacing_x,
        spacing_y=spacing_y,
    )


def _text_sprite(text: str, font: ImageFont.FreeTypeFont, fill: RGB, shade: RGB, alpha: int,
                 blur: float, offset: float) -> Tuple[Image.Image, Tuple[float, float]]:
    """Render text over its blurred shadow on a transparent sprite.
    Returns the sprite and the baseline-left origin inside it."""
    l, t, r, b = font.getbbox(text, anchor="ls")
    pad = int(math.ceil(offset + blur * 1.5)) + 2
    size = (int(r - l) + 2 * pad, int(b - t) + 2 * pad)
    ox, oy = pad - l, pad - t

    shadow = Image.new("RGBA", size, shade + (0,))
    ImageDraw.Draw(shadow).text((ox + offset, oy + offset), text, font=font, fill=shade + (alpha,), anchor="ls")
    shadow = shadow.filter(ImageFilter.GaussianBlur(blur / 2))

    glyphs = Image.new("RGBA", size, fill + (0,))
    ImageDraw.Draw(glyphs).text((ox, oy), text, font=font, fill=fill + (alpha,), anchor="ls")
    return Image.alpha_composite(shadow, glyphs), (ox, oy)


def _rotate_sprite(sprite: Image.Image, origin: Tuple[float, float],
                   degrees: float) -> Tuple[Image.Image, Tuple[float, float]]:
    # positive degrees turn clockwise on screen, y pointing down
    rotated = sprite.rotate(-degrees, resample=Image.Resampling.BICUBIC, expand=True)
    theta = math.radians(degrees)
    dx, dy = origin[0] - sprite.width / 2, origin[1] - sprite.height / 2
    return rotated, (
        rotated.width / 2 + dx * math.cos(theta) - dy * math.sin(theta),
        rotated.height / 2 + dx * math.sin(theta) + dy * math.cos(theta),
    )


def _composite_clipped(base: Image.Image, sprite: Image.Image, x: int, y: int) -> None:
    if x >= base.width or y >= base.height or x + sprite.width <= 0 or y + sprite.height <= 0:
        return
    src_x, src_y = max(0, -x), max(0, -y)
    base.alpha_composite(sprite, dest=(max(0, x), max(0, y)), source=(src_x, src_y))


def apply_watermark(image: Image.Image, spec: WatermarkSpec) -> Image.Image:
    if not spec.is_active:
        return image

    width, height = image.size
    scale = scale_factor(width)
    font_px = max(1, int(round(spec.font_size * scale)))
    margin_x, margin_y = spec.margin_x * scale, spec.margin_y * scale

    font = load_font(font_px, spec.font_path)
    text_w = font.getlength(spec.text)
    text_h = font_px

    fill = parse_color(spec.color)
    alpha = int(round(spec.opacity * 255))
    blur = max(2.0, scale * 2)
    offset = max(1.0, scale)

    try:
        sprite, origin = _text_sprite(spec.text, font, fill, shadow_color(fill), alpha, blur, offset)
        out = image.convert("RGBA")

        if spec.position is WatermarkPosition.REPEAT:
            grid = repeat_grid(width, height, text_w, text_h, margin_x, margin_y)
            sprite, origin = _rotate_sprite(sprite, origin, spec.rotation)
            theta = math.radians(spec.rotation)
            cos_t, sin_t = math.cos(theta), math.sin(theta)
            cx, cy = width / 2, height / 2
            for x, y in grid.positions():
                px = cx + x * cos_t - y * sin_t
                py = cy + x * sin_t + y * cos_t
                _composite_clipped(out, sprite, int(round(px - origin[0])), int(round(py - origin[1])))
            log.debug("Tiled watermark: %dx%d grid at %.1f°", grid.cols, grid.rows, spec.rotation)
        else:
            x, y = anchor_point(spec.position, width, height, text_w, text_h, margin_x, margin_y)
            _composite_clipped(out, sprite, int(round(x - origin[0])), int(round(y - origin[1])))
    except MemoryError as e:
        raise SurfaceAcquisitionError(f"Could not allocate watermark layer for {width}x{height}: {e}") from e

    return out if image.mode == "RGBA" else out.convert(image.mode)


def render_preview(image: Image.Image, spec: WatermarkSpec, max_size: int = 400) -> Image.Image:
    scale = min(max_size / image.width, max_size / image.height, 1)
    size = (max(1, round(image.width * scale)), max(1, round(image.height * scale)))
    preview = image.resize(size, resample=Image.Resampling.LANCZOS)
    return apply_watermark(preview, spec)
