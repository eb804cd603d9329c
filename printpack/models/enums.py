from enum import Enum

class Unit(Enum):
    INCH = "in"
    MM = "mm"

class WatermarkPosition(Enum):
    TOP_LEFT = "top-left"
    TOP_RIGHT = "top-right"
    BOTTOM_LEFT = "bottom-left"
    BOTTOM_RIGHT = "bottom-right"
    CENTER = "center"
    REPEAT = "repeat"   # rotated tile pattern across the whole image

class Variant(Enum):
    WATERMARKED = "watermarked"
    FINAL = "final"

class DpiSource(Enum):
    DEFAULT = "default"
    OVERRIDE = "override"
