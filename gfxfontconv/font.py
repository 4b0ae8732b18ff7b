"""
Glyph assembly: turn per-character rasters into a GFX font model.

The model follows the Adafruit GFX font format
(https://glenviewsoftware.com/projects/products/adafonteditor/adafruit-gfx-font-format/):

  GFXglyph  uint16 bitmapOffset, uint8 width, uint8 height, uint8 xAdvance,
            int8 xOffset, int8 yOffset
  GFXfont   uint8_t *bitmap, GFXglyph *glyph, uint8 first, uint8 last, uint8 yAdvance

Glyph bitmaps are concatenated into one blob; each glyph's pixels are packed
row after row without padding, MSB first.
"""

from __future__ import annotations

import re
from collections import namedtuple
from dataclasses import dataclass, field

from .config import FIRST_CHAR, LAST_CHAR_8BIT, LINE_ADVANCE_FACTOR, check_range
from .crop import CropMargins, autocrop
from .errors import RangeError
from .raster import RawRaster

# yOffset of a glyph without ink; not a real offset.
BLANK_Y_OFFSET = 1

MAX_BITMAP_OFFSET = 0xFFFF
MAX_U8 = 0xFF
MIN_I8, MAX_I8 = -128, 127

Glyph = namedtuple(
    "Glyph", ["code", "bitmap_offset", "width", "height", "x_advance", "x_offset", "y_offset"]
)
CellMetrics = namedtuple("CellMetrics", ["width", "height"])


def sanitize_name(name: str) -> str:
    return re.sub(r"[^0-9A-Za-z]", "_", name)


@dataclass
class FontModel:
    name: str
    first: int
    last: int
    line_advance: int
    glyphs: list = field(default_factory=list)
    bitmaps: list = field(default_factory=list)

    @property
    def bitmap_size(self) -> int:
        return sum(len(b) for b in self.bitmaps)

    @property
    def bitmap(self) -> bytes:
        return b"".join(self.bitmaps)

    def _add(self, glyph: Glyph, data: bytes) -> Glyph:
        self.glyphs.append(glyph)
        self.bitmaps.append(data)
        return glyph

    def append(self, code: int, cropped: RawRaster, margins: CropMargins, cell: CellMetrics,
               origin_x: int = 0) -> Glyph:
        """Append the glyph for ``code`` from an autocropped raster and its margins.

        ``origin_x`` is the pen position inside the cell; ink left of it gets a
        negative x offset and the advance is measured from it.
        """
        offset = self.bitmap_size
        advance = cell.width - origin_x
        if margins.is_blank:
            glyph = Glyph(code, offset, 0, 0, advance, 0, BLANK_Y_OFFSET)
            return self._add(glyph, b"")

        glyph = Glyph(
            code=code,
            bitmap_offset=offset,
            width=cropped.width,
            height=cropped.height,
            x_advance=advance,
            x_offset=margins.left - origin_x,
            y_offset=-(margins.bottom + cropped.height),
        )
        return self._add(glyph, cropped.to_bitstream())

    def append_cell(self, code: int, raster: RawRaster) -> Glyph:
        """Append the full, uncropped cell of ``code``."""
        glyph = Glyph(
            code=code,
            bitmap_offset=self.bitmap_size,
            width=raster.width,
            height=raster.height,
            x_advance=raster.width,
            x_offset=0,
            y_offset=-raster.height,
        )
        return self._add(glyph, raster.to_bitstream())

    def check_limits(self) -> None:
        """Raise RangeError if any value does not fit the GFX structures."""
        if self.line_advance > MAX_U8:
            raise RangeError(f"Line advance {self.line_advance} exceeds {MAX_U8}.")
        for glyph in self.glyphs:
            where = f"Glyph 0x{glyph.code:02x}"
            if glyph.bitmap_offset > MAX_BITMAP_OFFSET:
                raise RangeError(f"{where}: bitmap offset {glyph.bitmap_offset} exceeds {MAX_BITMAP_OFFSET}.")
            for label in ("width", "height", "x_advance"):
                value = getattr(glyph, label)
                if not 0 <= value <= MAX_U8:
                    raise RangeError(f"{where}: {label} {value} outside 0..{MAX_U8}.")
            for label in ("x_offset", "y_offset"):
                value = getattr(glyph, label)
                if not MIN_I8 <= value <= MAX_I8:
                    raise RangeError(f"{where}: {label} {value} outside {MIN_I8}..{MAX_I8}.")


def legacy_font_name(face_name: str, width: int, height: int) -> str:
    return sanitize_name(f"{face_name}_{width}x{height}")


def build_legacy_font(resource, first: int = FIRST_CHAR, last: int = LAST_CHAR_8BIT,
                      preserve_cell_box: bool = False) -> FontModel:
    """Convert a decoded FON resource to a FontModel.

    With ``preserve_cell_box`` every glyph keeps its whole cell; otherwise
    each cell is autocropped.
    """
    check_range(first, last)
    if first < resource.first_char or last > resource.last_available:
        raise RangeError(
            f"Font '{resource.face_name}' covers 0x{resource.first_char:02x}-"
            f"0x{resource.last_available:02x}, requested 0x{first:02x}-0x{last:02x}."
        )

    model = FontModel(
        name=legacy_font_name(resource.face_name, resource.max_width, resource.cell_height),
        first=first,
        last=last,
        line_advance=resource.cell_height,
    )
    for code in range(first, last + 1):
        raster = resource.glyph(code)
        if preserve_cell_box:
            model.append_cell(code, raster)
            continue
        margins, cropped = autocrop(raster)
        model.append(code, cropped, margins, CellMetrics(resource.advance(code), resource.cell_height))
    return model


def outline_font_name(family: str, point_size: float, first: int, last: int) -> str:
    bits = "8b" if last - first > 127 else "7b"
    return sanitize_name(f"{family}{int(point_size)}pt{bits}")


def line_advance(rasterizer, factor: float = LINE_ADVANCE_FACTOR) -> int:
    """Line advance from the height of 'W', at most one pixel more than it."""
    height = rasterizer.measure("W")[1]
    return int(min(height * factor, height + 1))


def build_outline_font(rasterizer, first: int = FIRST_CHAR, last: int = LAST_CHAR_8BIT,
                       name: str | None = None,
                       line_advance_factor: float = LINE_ADVANCE_FACTOR) -> FontModel:
    """Render, crop and assemble every character of ``first..last``."""
    check_range(first, last)
    model = FontModel(
        name=sanitize_name(name) if name else outline_font_name(
            rasterizer.family_name, rasterizer.point_size, first, last),
        first=first,
        last=last,
        line_advance=line_advance(rasterizer, line_advance_factor),
    )
    for code in range(first, last + 1):
        char = chr(code)
        cell = rasterizer.render(char)
        margins, cropped = autocrop(cell)
        model.append(code, cropped, margins, CellMetrics(cell.width, cell.height), rasterizer.origin(char))
    return model
