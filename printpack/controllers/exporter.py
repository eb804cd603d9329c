from __future__ import annotations
import re
import logging
import unicodedata
from pathlib import Path
from typing import Iterable, Tuple
from printpack.models.enums import Variant
from printpack.models.settings import ExportSettings
from printpack.models.specs import DerivedImage
from printpack.imaging.exif import ExifFields, embed_exif

log = logging.getLogger("printpack.export")

SUBDIRS = {Variant.WATERMARKED: "watermarked", Variant.FINAL: "final"}
SUFFIXES = {Variant.WATERMARKED: "wm", Variant.FINAL: "final"}

def sanitize_segment(value: str) -> str:
    value = unicodedata.normalize("NFKD", value.replace("×", "x"))
    value = "".join(c for c in value if not unicodedata.combining(c))
    return re.sub(r"[^a-zA-Z0-9]+", "", value).lower()

def build_file_base(shop_name: str, art_title: str, ratio_name: str, size_name: str) -> str:
    segments = []
    if shop_name:
        segments.append(re.sub(r"\s+", "", shop_name))
    segments.append(sanitize_segment(art_title) or "untitled")
    for seg in (sanitize_segment(ratio_name), sanitize_segment(size_name)):
        if seg:
            segments.append(seg)
    return "_".join(segments)

def output_path(img: DerivedImage, settings: ExportSettings) -> Path:
    base = build_file_base(settings.shop_name, settings.art_title, img.ratio_name, img.size_name)
    return settings.output_dir / SUBDIRS[img.variant] / f"{base}_{SUFFIXES[img.variant]}.jpg"

def exif_fields(img: DerivedImage, settings: ExportSettings) -> ExifFields:
    return ExifFields(
        dpi=img.applied_dpi,
        pixel_width=img.pixel_width,
        pixel_height=img.pixel_height,
        variant=img.variant,
        shop_name=settings.shop_name,
        art_title=settings.art_title,
        license_text=settings.license_text,
    )

def save_images(images: Iterable[DerivedImage], settings: ExportSettings) -> Tuple[int, int]:
    """Write every image under output_dir. Returns (saved, failed)."""
    saved = failed = 0
    for img in images:
        out = output_path(img, settings)
        data = embed_exif(img.data, exif_fields(img, settings)) if settings.embed_exif else img.data
        try:
            out.parent.mkdir(parents=True, exist_ok=True)
            out.write_bytes(data)
            saved += 1
        except OSError as e:
            log.error("Failed to save %s: %s", out.name, e)
            failed += 1
    if failed:
        log.warning("Saved %d images, %d failed. Location: %s", saved, failed, settings.output_dir)
    else:
        log.info("Successfully saved %d images to %s", saved, settings.output_dir)
    return saved, failed
