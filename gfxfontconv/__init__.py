"""Convert outline and Windows bitmap (FON) fonts to Adafruit GFX headers."""

from .crop import CropMargins, autocrop
from .emit import emit_font, write_font
from .errors import (
    BadSegmentMagicError,
    BadStubMagicError,
    FontConvertError,
    FormatError,
    NoFontResourceError,
    NotABitmapFontError,
    RangeError,
    ResourceError,
    TruncatedError,
)
from .fon import FontResource, decode_fon, read_fon
from .font import CellMetrics, FontModel, Glyph, build_legacy_font, build_outline_font
from .raster import RawRaster

__version__ = "1.0.0"

__all__ = [
    "BadSegmentMagicError",
    "BadStubMagicError",
    "CellMetrics",
    "CropMargins",
    "FontConvertError",
    "FontModel",
    "FontResource",
    "FormatError",
    "Glyph",
    "NoFontResourceError",
    "NotABitmapFontError",
    "RangeError",
    "RawRaster",
    "ResourceError",
    "TruncatedError",
    "autocrop",
    "build_legacy_font",
    "build_outline_font",
    "decode_fon",
    "emit_font",
    "read_fon",
    "write_font",
]
