from __future__ import annotations
from typing import Tuple
from printpack.models.enums import Unit
from printpack.models.specs import SizeSpec
from printpack.imaging.errors import ConfigurationError

MM_PER_INCH = 25.4

def to_inches(value: float, unit: Unit | str) -> float:
    unit = Unit(unit)
    if unit is Unit.INCH:
        return value
    return value / MM_PER_INCH

def to_pixels(value: float, unit: Unit | str, dpi: float) -> int:
    if dpi <= 0:
        raise ConfigurationError(f"DPI must be positive, got {dpi}")
    try:
        unit = Unit(unit)
    except ValueError as e:
        raise ConfigurationError(f"Unsupported unit: {unit!r}") from e
    # round() on floats matches the print-size tables (A4 @ 600 -> 4961)
    return int(round(to_inches(value, unit) * dpi))

def target_pixels(size: SizeSpec, dpi: float) -> Tuple[int, int]:
    w = to_pixels(size.width, size.unit, dpi)
    h = to_pixels(size.height, size.unit, dpi)
    return (w, h)
