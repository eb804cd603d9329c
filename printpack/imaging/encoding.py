from __future__ import annotations

import io
import logging
from typing import Optional

from PIL import Image

from printpack.imaging.errors import EncodingError

log = logging.getLogger("printpack.encoding")

def pillow_quality(quality: float) -> int:
    """Map a 0.1-1.0 quality onto Pillow's 1-100 JPEG scale."""
    return max(1, min(100, int(round(quality * 100))))

def _save_primary(image: Image.Image, quality: float, dpi: Optional[int]) -> bytes:
    buf = io.BytesIO()
    kwargs = {"quality": pillow_quality(quality), "subsampling": 0, "optimize": False}
    if dpi:
        kwargs["dpi"] = (dpi, dpi)
    image.save(buf, format="JPEG", **kwargs)
    return buf.getvalue()

def _save_fallback(image: Image.Image, quality: float, dpi: Optional[int]) -> bytes:
    buf = io.BytesIO()
    kwargs = {"quality": pillow_quality(quality)}
    if dpi:
        kwargs["dpi"] = (dpi, dpi)
    image.convert("RGB").save(buf, format="JPEG", **kwargs)
    return buf.getvalue()

def encode_jpeg(image: Image.Image, quality: float, dpi: Optional[int] = None) -> bytes:
    try:
        data = _save_primary(image, quality, dpi)
        if data:
            return data
        log.warning("Primary JPEG encoder returned no data for %dx%d image", *image.size)
    except (OSError, ValueError, KeyError) as e:
        log.warning("Primary JPEG encoder failed (%s), trying fallback", e)

    try:
        data = _save_fallback(image, quality, dpi)
    except (OSError, ValueError, KeyError) as e:
        raise EncodingError(f"Could not encode {image.width}x{image.height} image as JPEG: {e}") from e
    if not data:
        raise EncodingError(f"JPEG fallback produced no data for {image.width}x{image.height} image")
    return data

def encode_preview(image: Image.Image, max_dimension: int = 512, quality: float = 0.7) -> bytes:
    """Small JPEG of image for documents and thumbnails."""
    scale = min(max_dimension / image.width, max_dimension / image.height, 1)
    if scale < 1:
        size = (max(1, round(image.width * scale)), max(1, round(image.height * scale)))
        image = image.resize(size, resample=Image.Resampling.LANCZOS)
    return encode_jpeg(image, quality)
