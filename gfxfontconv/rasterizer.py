"""
Outline font rasterizing with FreeType.

Each character is rendered monochrome into its own cell:

  height  ascender - descender of the sized face (one text line)
  width   the advance width, widened when ink extends past either side
  origin  pen on the baseline, ascender pixels below the top; at x = 0
          unless the glyph has a negative left bearing, then moved right
          by that bearing (see origin())

The cell is returned uncropped; crop.autocrop() finds the ink afterwards.
Characters missing from the face are rendered as a space.

Dependencies:
  pip install freetype-py Pillow
"""

from __future__ import annotations

import math
from typing import Protocol

import freetype
from PIL import ImageFont

from .config import DPI
from .errors import ResourceError
from .raster import RasterCanvas, RawRaster

# Horizontal shear used for synthetic italics (tan of ~12 degrees).
ITALIC_SHEAR = 0.2

STYLE_FILE_SUFFIXES = {
    frozenset(): ["", "-Regular", "Regular", "-Roman"],
    frozenset({"bold"}): ["-Bold", "bd", "b", "Bold"],
    frozenset({"italic"}): ["-Italic", "-Oblique", "i", "Italic"],
    frozenset({"bold", "italic"}): ["-BoldItalic", "-BoldOblique", "bi", "z", "BoldItalic"],
}


class Rasterizer(Protocol):
    """What the outline font builder needs from a renderer."""

    family_name: str
    point_size: float

    def measure(self, char: str) -> tuple[int, int]:
        ...

    def render(self, char: str) -> RawRaster:
        ...

    def origin(self, char: str) -> int:
        ...


def norm_floor(val: int) -> int:
    return int(math.floor(val / (1 << 6)))


def norm_ceil(val: int) -> int:
    return int(math.ceil(val / (1 << 6)))


class FreeTypeRasterizer:
    """Rasterizer backed by a FreeType face loaded from ``font_path``."""

    def __init__(self, font_path, point_size: float, style: frozenset = frozenset(), dpi: int = DPI):
        try:
            self.face = freetype.Face(str(font_path))
        except (freetype.FT_Exception, OSError) as err:
            raise ResourceError(f"Cannot load font {font_path}: {err}") from err
        self.point_size = point_size
        self.style = style
        self.face.set_char_size(int(point_size * 64), 0, dpi, dpi)

        family = self.face.family_name
        self.family_name = family.decode("latin-1") if isinstance(family, bytes) else str(family)

        self.ascender = norm_ceil(self.face.size.ascender)
        self.descender = norm_floor(self.face.size.descender)
        self.line_height = self.ascender - self.descender

        self._synthetic_bold = "bold" in style and not self.face.style_flags & freetype.FT_STYLE_FLAG_BOLD
        if "italic" in style and not self.face.style_flags & freetype.FT_STYLE_FLAG_ITALIC:
            matrix = freetype.FT_Matrix(0x10000, int(ITALIC_SHEAR * 0x10000), 0, 0x10000)
            self.face.set_transform(matrix, freetype.FT_Vector(0, 0))

    def _load(self, char: str) -> bool:
        if self.face.get_char_index(ord(char)) == 0:
            return False
        self.face.load_char(char, freetype.FT_LOAD_RENDER | freetype.FT_LOAD_TARGET_MONO)
        return True

    def _pen_x(self) -> int:
        # Ink left of the pen (negative bearing) would otherwise fall outside the cell.
        return max(0, -self.face.glyph.bitmap_left)

    def _cell_width(self) -> int:
        glyph = self.face.glyph
        width = norm_floor(glyph.advance.x)
        ink_right = glyph.bitmap_left + glyph.bitmap.width
        if self._synthetic_bold and glyph.bitmap.width:
            ink_right += 1
        return self._pen_x() + max(width, ink_right)

    def measure(self, char: str) -> tuple[int, int]:
        """Cell size of ``char``; (0, 0) when the face has no glyph for it."""
        if not self._load(char):
            return 0, 0
        width = self._cell_width()
        if width == 0:
            return 0, 0
        return width, self.line_height

    def render(self, char: str) -> RawRaster:
        width, height = self.measure(char)
        if width == 0 or height == 0:
            # Anything that cannot be rendered becomes a space.
            char = " "
            width, height = self.measure(char)
            if width == 0:
                return RawRaster.blank(0, self.line_height)

        glyph = self.face.glyph
        bitmap = glyph.bitmap
        ink = RawRaster.from_buffer(bitmap.buffer, bitmap.width, bitmap.rows, bitmap.pitch)

        canvas = RasterCanvas(width, height)
        canvas.blit(ink, self._pen_x() + glyph.bitmap_left, self.ascender - glyph.bitmap_top)
        if self._synthetic_bold:
            canvas.embolden()
        if "underline" in self.style:
            thickness = max(1, norm_ceil(self.face.underline_thickness * self.face.size.y_scale // 0x10000))
            position = norm_ceil(-self.face.underline_position * self.face.size.y_scale // 0x10000)
            canvas.hline(min(self.ascender + position, height - thickness), thickness)
        if "strikeout" in self.style:
            canvas.hline(self.ascender - self.ascender // 3)
        return canvas.freeze()

    def origin(self, char: str) -> int:
        """Pen x position inside the cell that render() returns for ``char``."""
        if self.measure(char)[0] == 0 and self.measure(" ")[0] == 0:
            return 0
        return self._pen_x()


def find_installed_font(family: str, style: frozenset = frozenset()) -> str:
    """Resolve an installed font family to a file path using Pillow's font search."""
    base = family.replace(" ", "")
    suffixes = STYLE_FILE_SUFFIXES.get(style & {"bold", "italic"}, [""])
    candidates = []
    for name in (base, family):
        for suffix in suffixes:
            for ext in (".ttf", ".otf", ".TTF"):
                candidates.append(f"{name}{suffix}{ext}")
    for candidate in candidates:
        try:
            return ImageFont.truetype(candidate, 10).path
        except OSError:
            continue
    raise ResourceError(f"Installed font family '{family}' not found.")
