# printpack/imaging/batch.py
# Produces the full print set for one source image:
#   every ratio in the catalog x every size under it x {watermarked, final}
# Items are processed strictly in catalog order. A failing item is logged and
# skipped; it never aborts the batch and never yields half a pair.

from __future__ import annotations

import time
import logging
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Tuple

from PIL import Image, ImageOps, UnidentifiedImageError

from printpack.models.enums import Variant
from printpack.models.settings import CanvasLimits, ProcessingSettings, WatermarkSpec
from printpack.models.specs import CropRatioSpec, DerivedImage, Progress, SizeSpec
from printpack.imaging.catalog import CROP_RATIOS, total_sizes
from printpack.imaging.dpi_presets import resolve_dpi
from printpack.imaging.encoding import encode_jpeg
from printpack.imaging.geometry import crop_to_ratio, resize_to_exact_size
from printpack.imaging.sizes import target_pixels
from printpack.imaging.watermark import apply_watermark
from printpack.utils.logging_utils import log_section

log = logging.getLogger("printpack.batch")

Encoder = Callable[[Image.Image, float, Optional[int]], bytes]
ProgressCallback = Callable[[Progress], None]


def load_source(path: str | Path) -> Image.Image:
    """Decode an image file into an RGB raster, honouring EXIF orientation."""
    src = Path(path)
    if not src.exists() or not src.is_file():
        raise FileNotFoundError(f"Input image not found: {src}")
    try:
        with Image.open(src) as im:
            im = ImageOps.exif_transpose(im)
            return prepare_source(im)
    except UnidentifiedImageError as e:
        raise ValueError(f"Not a readable image: {src}") from e


def prepare_source(image: Image.Image) -> Image.Image:
    if image.mode == "RGB":
        return image.copy()
    if image.mode in ("RGBA", "LA") or (image.mode == "P" and "transparency" in image.info):
        # JPEG has no alpha: flatten onto white like a print would
        rgba = image.convert("RGBA")
        flat = Image.new("RGB", rgba.size, (255, 255, 255))
        flat.paste(rgba, mask=rgba.getchannel("A"))
        return flat
    return image.convert("RGB")


def _emit_progress(cb: Optional[ProgressCallback], progress: Progress) -> None:
    if cb is None:
        return
    try:
        cb(progress)
    except Exception as e:
        log.warning("Progress callback failed at %d/%d: %s", progress.current, progress.total, e)


def task_label(ratio: CropRatioSpec, size: SizeSpec) -> str:
    return f"{ratio.name} - {size.name} ({size.label})"


def derive_item(
    cropped: Image.Image,
    ratio: CropRatioSpec,
    size: SizeSpec,
    watermark: WatermarkSpec,
    settings: ProcessingSettings,
    limits: CanvasLimits = CanvasLimits(),
    encoder: Encoder = encode_jpeg,
) -> Tuple[DerivedImage, DerivedImage]:
    """Resize one ratio crop to one print size and encode both variants."""
    dpi, source = resolve_dpi(settings, ratio.name, size.name)
    tw, th = target_pixels(size, dpi)
    log.info("%s: target %dx%d px @ %d DPI (%s)", task_label(ratio, size), tw, th, dpi, source.value)

    resized = resize_to_exact_size(cropped, tw, th, limits)
    final_data = encoder(resized, settings.jpeg_quality, dpi)
    marked = apply_watermark(resized, watermark)
    marked_data = encoder(marked, settings.jpeg_quality, dpi)

    common = dict(
        ratio_name=ratio.name,
        size_name=size.name,
        pixel_width=resized.width,
        pixel_height=resized.height,
        applied_dpi=dpi,
        dpi_source=source,
    )
    return (
        DerivedImage(variant=Variant.WATERMARKED, data=marked_data, **common),
        DerivedImage(variant=Variant.FINAL, data=final_data, **common),
    )


def generate_batch(
    source: Image.Image,
    watermark: WatermarkSpec,
    settings: ProcessingSettings,
    *,
    catalog: Iterable[CropRatioSpec] = CROP_RATIOS,
    limits: CanvasLimits = CanvasLimits(),
    encoder: Encoder = encode_jpeg,
    progress_cb: Optional[ProgressCallback] = None,
    should_cancel: Optional[Callable[[], bool]] = None,
    pause: float = 0.0,
) -> List[DerivedImage]:
    catalog = tuple(catalog)
    total = total_sizes(catalog)
    images: List[DerivedImage] = []
    index = 0
    failed = 0
    cancelled = False

    log.info("Source %dx%d, %d sizes across %d ratios", source.width, source.height, total, len(catalog))
    _emit_progress(progress_cb, Progress(0, total, "Starting image processing..."))

    for ratio in catalog:
        if cancelled:
            break
        with log_section(f"RATIO {ratio.name} ({ratio.ratio:.4f})", log):
            try:
                cropped = crop_to_ratio(source, ratio.ratio)
            except Exception:
                log.exception("Could not crop to %s; skipping its %d sizes", ratio.name, len(ratio.sizes))
                cropped = None

            for size in ratio.sizes:
                if should_cancel is not None and should_cancel():
                    log.warning("Batch cancelled after %d of %d items", index, total)
                    cancelled = True
                    break
                index += 1

                if cropped is not None:
                    try:
                        images.extend(derive_item(cropped, ratio, size, watermark, settings, limits, encoder))
                    except Exception:
                        log.exception("Skipping %s / %s", ratio.name, size.name)
                        failed += 1
                else:
                    failed += 1

                _emit_progress(progress_cb, Progress(index, total, task_label(ratio, size)))
                if pause > 0:
                    time.sleep(pause)

    log.info("Batch finished: %d images, %d failed items", len(images), failed)
    _emit_progress(progress_cb, Progress(total, total, "Processing complete!", True))
    return images
