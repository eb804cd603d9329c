from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Mapping
from PIL import ImageColor
from .enums import WatermarkPosition
from printpack.imaging.dpi_presets import DEFAULT_DPI, MIN_DPI, MAX_DPI, dpi_in_range
from printpack.imaging.errors import ConfigurationError

@dataclass(frozen=True)
class ProcessingSettings:
    jpeg_quality: float = 0.9
    default_dpi: int = DEFAULT_DPI
    # keyed by "<ratio name>|<size name>"
    dpi_overrides: Mapping[str, int] = field(default_factory=dict)

    def __post_init__(self):
        if not 0.1 <= self.jpeg_quality <= 1.0:
            raise ConfigurationError(f"JPEG quality must be within 0.1-1.0, got {self.jpeg_quality}")
        if not dpi_in_range(self.default_dpi):
            raise ConfigurationError(f"Default DPI must be within {MIN_DPI}-{MAX_DPI}, got {self.default_dpi}")
        for key, dpi in self.dpi_overrides.items():
            if not dpi_in_range(dpi):
                raise ConfigurationError(f"DPI override for '{key}' must be within {MIN_DPI}-{MAX_DPI}, got {dpi}")

    def with_override(self, key: str, dpi: int) -> "ProcessingSettings":
        overrides: Dict[str, int] = dict(self.dpi_overrides)
        overrides[key] = dpi
        return ProcessingSettings(self.jpeg_quality, self.default_dpi, overrides)

@dataclass(frozen=True)
class WatermarkSpec:
    text: str = "© Your Name"
    opacity: float = 0.5
    font_size: float = 48          # pixels at the 600 DPI / 4in reference width
    color: str = "#ffffff"
    position: WatermarkPosition = WatermarkPosition.BOTTOM_RIGHT
    rotation: float = -45          # degrees, repeat mode only
    margin_x: float = 20
    margin_y: float = 20
    enabled: bool = True
    font_path: str | None = None

    def __post_init__(self):
        if not 0.0 <= self.opacity <= 1.0:
            raise ConfigurationError(f"Watermark opacity must be within 0-1, got {self.opacity}")
        if self.font_size <= 0:
            raise ConfigurationError(f"Watermark font size must be positive, got {self.font_size}")
        if self.margin_x < 0 or self.margin_y < 0:
            raise ConfigurationError("Watermark margins must not be negative")
        try:
            ImageColor.getrgb(self.color)
        except ValueError as e:
            raise ConfigurationError(f"Unrecognised watermark color: {self.color!r}") from e

    @property
    def is_active(self) -> bool:
        return self.enabled and bool(self.text.strip())

@dataclass(frozen=True)
class ExportSettings:
    output_dir: Path
    shop_name: str = ""
    art_title: str = ""
    license_text: str = "Personal Use Only / non-commercial"
    embed_exif: bool = True

@dataclass(frozen=True)
class CanvasLimits:
    """Largest raster the resize engine will allocate."""
    max_area: int = 16384 * 16384
    max_dimension: int = 16384

    def __post_init__(self):
        if self.max_area <= 0 or self.max_dimension <= 0:
            raise ConfigurationError("Canvas limits must be positive")
