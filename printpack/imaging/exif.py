from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import Optional

import piexif
import piexif.helper

from printpack.models.enums import Variant

log = logging.getLogger("printpack.exif")

DEFAULT_LICENSE_TEXT = "Personal Use Only / non-commercial"
SOFTWARE_LABEL = "PrintPack Digital Art Packager"

JPEG_MAGIC = b"\xff\xd8"


@dataclass(frozen=True)
class ExifFields:
    dpi: Optional[int] = None
    pixel_width: Optional[int] = None
    pixel_height: Optional[int] = None
    variant: Optional[Variant] = None
    shop_name: str = ""
    art_title: str = ""
    license_text: str = DEFAULT_LICENSE_TEXT


def build_exif(fields: ExifFields) -> bytes:
    shop = fields.shop_name.strip()
    title = fields.art_title.strip()
    license_label = f"License: {fields.license_text}"

    zeroth = {piexif.ImageIFD.Software: SOFTWARE_LABEL}
    exif = {piexif.ExifIFD.UserComment: piexif.helper.UserComment.dump(license_label, encoding="unicode")}

    if shop:
        zeroth[piexif.ImageIFD.Artist] = shop
    zeroth[piexif.ImageIFD.Copyright] = " - ".join(([f"© {shop}"] if shop else []) + [license_label])

    description = [title] if title else []
    if fields.variant is Variant.WATERMARKED:
        description.append("Watermarked export")
    elif fields.variant is Variant.FINAL:
        description.append("Final export")
    description.append(license_label)
    zeroth[piexif.ImageIFD.ImageDescription] = " | ".join(description)

    if fields.dpi and fields.dpi > 0:
        dpi = max(1, int(round(fields.dpi)))
        zeroth[piexif.ImageIFD.XResolution] = (dpi, 1)
        zeroth[piexif.ImageIFD.YResolution] = (dpi, 1)
        zeroth[piexif.ImageIFD.ResolutionUnit] = 2  # inches
    if fields.pixel_width and fields.pixel_width > 0:
        zeroth[piexif.ImageIFD.ImageWidth] = int(fields.pixel_width)
        exif[piexif.ExifIFD.PixelXDimension] = int(fields.pixel_width)
    if fields.pixel_height and fields.pixel_height > 0:
        zeroth[piexif.ImageIFD.ImageLength] = int(fields.pixel_height)
        exif[piexif.ExifIFD.PixelYDimension] = int(fields.pixel_height)

    return piexif.dump({"0th": zeroth, "Exif": exif, "GPS": {}, "Interop": {}, "1st": {}, "thumbnail": None})


def embed_exif(data: bytes, fields: ExifFields) -> bytes:
    """Return JPEG data with descriptive EXIF inserted.
    Anything that is not a JPEG, or that cannot be tagged, comes back unchanged."""
    if not data.startswith(JPEG_MAGIC):
        return data
    try:
        out = io.BytesIO()
        piexif.insert(build_exif(fields), data, out)
        return out.getvalue()
    except (ValueError, KeyError, UnicodeEncodeError, piexif.InvalidImageDataError) as e:
        log.error("Failed to embed EXIF metadata: %s", e)
        return data
