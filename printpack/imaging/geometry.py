# printpack/imaging/geometry.py
# Center-crop to an aspect ratio and resample to exact print pixels.
# - Raster limits are injected (CanvasLimits) rather than hard-coded
# - Large downscales go through a Lanczos intermediate pass
# - Every stage returns a new image; inputs are never touched

from __future__ import annotations

import math
import logging
import warnings
from typing import Tuple

from PIL import Image

from printpack.models.settings import CanvasLimits
from printpack.imaging.errors import ConfigurationError, SurfaceAcquisitionError, ResourceLimitWarning

RESAMPLE = Image.Resampling.LANCZOS

log = logging.getLogger("printpack.geometry")


def crop_box(width: float, height: float, target_ratio: float) -> Tuple[float, float, float, float]:
    """Return the centered (x, y, w, h) region of a width x height raster
    whose aspect equals target_ratio. Values may be fractional."""
    if target_ratio <= 0:
        raise ConfigurationError(f"Target ratio must be positive, got {target_ratio}")
    if width <= 0 or height <= 0:
        raise ConfigurationError(f"Source dimensions must be positive, got {width}x{height}")

    source_ratio = width / height
    if source_ratio > target_ratio:
        # wider than the target: trim the sides
        crop_h = height
        crop_w = crop_h * target_ratio
        return ((width - crop_w) / 2, 0.0, crop_w, crop_h)
    crop_w = width
    crop_h = crop_w / target_ratio
    return (0.0, (height - crop_h) / 2, crop_w, crop_h)


def crop_to_ratio(image: Image.Image, target_ratio: float) -> Image.Image:
    sw, sh = image.size
    x, y, w, h = crop_box(sw, sh, target_ratio)

    cw = min(sw, max(1, int(round(w))))
    ch = min(sh, max(1, int(round(h))))
    left = min(int(round(x)), sw - cw)
    top = min(int(round(y)), sh - ch)

    try:
        return image.crop((left, top, left + cw, top + ch))
    except (MemoryError, ValueError, OSError) as e:
        raise SurfaceAcquisitionError(f"Could not crop {sw}x{sh} to ratio {target_ratio:.4f}: {e}") from e


def clamp_to_limits(width: int, height: int, limits: CanvasLimits = CanvasLimits()) -> Tuple[int, int, bool]:
    """Shrink (width, height) uniformly until it fits limits.
    Returns the new size and whether any reduction happened."""
    w, h = float(width), float(height)
    clamped = False

    area = w * h
    if area > limits.max_area:
        scale = math.sqrt(limits.max_area / area)
        w, h = math.floor(w * scale), math.floor(h * scale)
        clamped = True

    if w > limits.max_dimension or h > limits.max_dimension:
        scale = min(limits.max_dimension / w, limits.max_dimension / h)
        w, h = math.floor(w * scale), math.floor(h * scale)
        clamped = True

    return max(1, math.floor(w)), max(1, math.floor(h)), clamped


def intermediate_scale(sw: int, sh: int, tw: int, th: int) -> float:
    # Tunable: halve at most once, otherwise land at twice the final size.
    return max(0.5, min(tw / sw, th / sh) * 2)


def _resample(image: Image.Image, size: Tuple[int, int]) -> Image.Image:
    try:
        return image.resize(size, resample=RESAMPLE)
    except (MemoryError, ValueError, OSError) as e:
        raise SurfaceAcquisitionError(f"Could not allocate {size[0]}x{size[1]} raster: {e}") from e


def resize_to_exact_size(
    image: Image.Image,
    target_width: int,
    target_height: int,
    limits: CanvasLimits = CanvasLimits(),
) -> Image.Image:
    tw, th, clamped = clamp_to_limits(target_width, target_height, limits)
    if clamped:
        msg = (f"Requested {target_width}x{target_height} exceeds raster limits; "
               f"output reduced to {tw}x{th}")
        log.warning(msg)
        warnings.warn(msg, ResourceLimitWarning, stacklevel=2)

    sw, sh = image.size
    if sw > tw * 2 or sh > th * 2:
        scale = intermediate_scale(sw, sh, tw, th)
        iw, ih = int(round(sw * scale)), int(round(sh * scale))
        if iw > 0 and ih > 0:
            log.debug("Two-pass resample %dx%d -> %dx%d -> %dx%d", sw, sh, iw, ih, tw, th)
            return _resample(_resample(image, (iw, ih)), (tw, th))

    return _resample(image, (tw, th))
