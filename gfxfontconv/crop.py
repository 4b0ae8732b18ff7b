"""
Autocrop: remove blank margins from a packed monochrome raster.

The margins are found by scanning whole columns (left and right edges) and
whole rows (top and bottom edges) for the first ink pixel. The surviving
pixels are then moved to the top-left corner by shifting each row left by
the left margin, so the result is again a byte-aligned RawRaster.
"""

from __future__ import annotations

from collections import namedtuple

from .config import BACKGROUND
from .raster import RawRaster, stride_for


class CropMargins(namedtuple("CropMargins", ["top", "bottom", "left", "right"])):
    """Rows/columns removed from each edge of a raster.

    A raster without any ink yields the blank sentinel
    ``top=height, bottom=-1, left=width, right=-1``.
    """

    __slots__ = ()

    @classmethod
    def blank(cls, width: int, height: int) -> "CropMargins":
        return cls(top=height, bottom=-1, left=width, right=-1)

    @property
    def is_blank(self) -> bool:
        return self.right == -1


def _column_has_ink(raster: RawRaster, x: int) -> bool:
    return any(raster.pixel(x, y) for y in range(raster.height))


def _row_has_ink(raster: RawRaster, y: int) -> bool:
    return any(raster.pixel(x, y) for x in range(raster.width))


def _first_ink(indices, has_ink, default: int) -> int:
    for count, index in enumerate(indices):
        if has_ink(index):
            return count
    return default


def shift_row_left(row: bytes, count: int) -> bytes:
    """Shift a packed row left by ``count`` bits.

    Bits leaving the top of a byte enter the low bit of the byte before it;
    bits shifted out of the first byte are dropped and zeros come in at the end.
    """
    if count == 0 or not row:
        return bytes(row)
    width = len(row) * 8
    value = (int.from_bytes(row, "big") << count) & ((1 << width) - 1)
    return value.to_bytes(len(row), "big")


def autocrop(raster: RawRaster, background: int = BACKGROUND) -> tuple[CropMargins, RawRaster]:
    """Crop all blank edges of ``raster``.

    Returns the margins and a tightly packed raster in which ink is always 1.
    A raster with no ink returns ``CropMargins.blank(...)`` and an empty raster.
    """
    if background:
        raster = raster.inverted()

    width, height = raster.width, raster.height
    if raster.is_blank():
        return CropMargins.blank(width, height), RawRaster.empty()

    left = _first_ink(range(width), lambda x: _column_has_ink(raster, x), width)

    top = _first_ink(range(height), lambda y: _row_has_ink(raster, y), height)
    right = _first_ink(range(width - 1, -1, -1), lambda x: _column_has_ink(raster, x), width)
    bottom = _first_ink(range(height - 1, -1, -1), lambda y: _row_has_ink(raster, y), height)

    new_width = width - left - right
    new_height = height - top - bottom
    new_stride = stride_for(new_width)
    tail_mask = (0xFF << (8 - new_width % 8)) & 0xFF if new_width % 8 else 0xFF

    data = bytearray()
    for y in range(top, top + new_height):
        row = bytearray(shift_row_left(raster.row(y), left)[:new_stride])
        row[-1] &= tail_mask
        data += row

    margins = CropMargins(top=top, bottom=bottom, left=left, right=right)
    return margins, RawRaster(new_width, new_height, bytes(data))
