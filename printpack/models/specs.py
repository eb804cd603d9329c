from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple
from .enums import Unit, Variant, DpiSource
from printpack.imaging.errors import ConfigurationError

@dataclass(frozen=True)
class SizeSpec:
    name: str
    width: float
    height: float
    unit: Unit = Unit.INCH

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ConfigurationError(f"Size '{self.name}' must have positive dimensions")

    @property
    def label(self) -> str:
        return f"{self.width:g}×{self.height:g} {self.unit.value}"

@dataclass(frozen=True)
class CropRatioSpec:
    name: str
    ratio: float
    sizes: Tuple[SizeSpec, ...] = ()

    def __post_init__(self):
        if self.ratio <= 0:
            raise ConfigurationError(f"Ratio '{self.name}' must be positive, got {self.ratio}")

@dataclass(frozen=True)
class DerivedImage:
    ratio_name: str
    size_name: str
    variant: Variant
    pixel_width: int
    pixel_height: int
    applied_dpi: int
    dpi_source: DpiSource
    data: bytes
    mime_type: str = "image/jpeg"

    @property
    def is_watermarked(self) -> bool:
        return self.variant is Variant.WATERMARKED

@dataclass(frozen=True)
class Progress:
    current: int
    total: int
    current_task: str
    is_complete: bool = False
