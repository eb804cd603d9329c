from __future__ import annotations
from typing import TYPE_CHECKING, Dict, Tuple, List
from printpack.models.enums import DpiSource

if TYPE_CHECKING:
    from printpack.models.settings import ProcessingSettings

DEFAULT_DPI = 600
MIN_DPI, MAX_DPI = 72, 2400

# Width of a 4in print at the default DPI; watermark sizes are authored against it.
REFERENCE_DPI = 600

DPI_CHOICES: List[Tuple[int, str]] = [
    (150, "Good at distance (fast, smaller files)"),
    (300, "Pro print standard"),
    (600, "Fine art default"),
    (1200, "Ultra fine detail; huge files"),
]

def size_key(ratio_name: str, size_name: str) -> str:
    return f"{ratio_name}|{size_name}"

def dpi_in_range(dpi: float) -> bool:
    return MIN_DPI <= dpi <= MAX_DPI

def resolve_dpi(settings: "ProcessingSettings", ratio_name: str, size_name: str) -> Tuple[int, DpiSource]:
    overrides: Dict[str, int] = settings.dpi_overrides
    key = size_key(ratio_name, size_name)
    if key in overrides:
        return overrides[key], DpiSource.OVERRIDE
    return settings.default_dpi, DpiSource.DEFAULT
