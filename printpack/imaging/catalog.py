from __future__ import annotations
from typing import Tuple
from printpack.models.enums import Unit
from printpack.models.specs import CropRatioSpec, SizeSpec

CROP_RATIOS: Tuple[CropRatioSpec, ...] = (
    CropRatioSpec("2:3 Portrait", 2 / 3, (
        SizeSpec("4x6 in", 4, 6),
        SizeSpec("12x18 in", 12, 18),
        SizeSpec("20x30 in", 20, 30),
        SizeSpec("24x36 in", 24, 36),
    )),
    CropRatioSpec("3:4 Portrait", 3 / 4, (
        SizeSpec("9x12 in", 9, 12),
        SizeSpec("18x24 in", 18, 24),
    )),
    CropRatioSpec("4:5 Portrait", 4 / 5, (
        SizeSpec("8x10 in", 8, 10),
        SizeSpec("16x20 in", 16, 20),
    )),
    CropRatioSpec("11x14 Standard", 11 / 14, (
        SizeSpec("11x14 in", 11, 14),
    )),
    CropRatioSpec("A-Series International", 210 / 297, (
        SizeSpec("A4", 210, 297, Unit.MM),
        SizeSpec("A3", 297, 420, Unit.MM),
    )),
    CropRatioSpec("Special Fine Art", 13 / 19, (
        SizeSpec("13x19 in (Super B)", 13, 19),
    )),
)

def total_sizes(catalog=CROP_RATIOS) -> int:
    return sum(len(r.sizes) for r in catalog)
