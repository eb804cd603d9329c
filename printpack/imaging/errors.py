from __future__ import annotations


class PrintPackError(Exception):
    """Base class for every error raised by the derivation pipeline."""


class ConfigurationError(PrintPackError, ValueError):
    """Invalid ratio, size, DPI or setting value."""


class RenderError(PrintPackError, RuntimeError):
    """A crop, resize or watermark stage could not produce an image."""


class SurfaceAcquisitionError(RenderError):
    """No raster could be allocated for a stage (too large, out of memory)."""


class EncodingError(PrintPackError, RuntimeError):
    """Both the primary and the fallback JPEG encoders failed."""


class ResourceLimitWarning(UserWarning):
    """Requested pixel dimensions exceeded the raster limits and were reduced."""
