"""
Packed monochrome rasters.

A RawRaster stores ``height`` rows of ``width`` pixels, one bit per pixel,
MSB first. Every row starts on a byte boundary, so a row takes
``stride = ceil(width / 8)`` bytes and unused low bits of the last byte are
padding. This is the same layout as a PBM (P4) payload and as a FreeType
mono bitmap with ``pitch == stride``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence


def stride_for(width: int) -> int:
    return (width + 7) // 8


@dataclass(frozen=True)
class RawRaster:
    width: int
    height: int
    data: bytes

    def __post_init__(self):
        if self.width < 0 or self.height < 0:
            raise ValueError(f"negative raster size {self.width}x{self.height}")
        object.__setattr__(self, "data", bytes(self.data))
        expected = stride_for(self.width) * self.height
        if len(self.data) != expected:
            raise ValueError(
                f"raster {self.width}x{self.height} needs {expected} bytes, got {len(self.data)}"
            )

    @classmethod
    def empty(cls) -> "RawRaster":
        return cls(0, 0, b"")

    @classmethod
    def blank(cls, width: int, height: int) -> "RawRaster":
        return cls(width, height, bytes(stride_for(width) * height))

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[int]]) -> "RawRaster":
        """Build a raster from rows of 0/1 values (or strings of '.'/'#')."""
        height = len(rows)
        width = len(rows[0]) if height else 0
        stride = stride_for(width)
        data = bytearray(stride * height)
        for y, row in enumerate(rows):
            if len(row) != width:
                raise ValueError(f"row {y} has {len(row)} pixels, expected {width}")
            for x, value in enumerate(row):
                if value in (1, "#", "1", True):
                    data[y * stride + x // 8] |= 0x80 >> (x % 8)
        return cls(width, height, bytes(data))

    @classmethod
    def from_buffer(cls, buffer: Iterable[int], width: int, height: int, pitch: int) -> "RawRaster":
        """Repack a mono buffer whose rows are ``pitch`` bytes apart."""
        buf = bytes(buffer)
        stride = stride_for(width)
        data = bytearray()
        for y in range(height):
            row = bytearray(buf[y * pitch : y * pitch + stride])
            if row and width % 8:
                row[-1] &= (0xFF << (8 - width % 8)) & 0xFF
            data += row
        return cls(width, height, bytes(data))

    @property
    def stride(self) -> int:
        return stride_for(self.width)

    def row(self, y: int) -> bytes:
        stride = self.stride
        return self.data[y * stride : (y + 1) * stride]

    def pixel(self, x: int, y: int) -> int:
        byte = self.data[y * self.stride + x // 8]
        return (byte >> (7 - x % 8)) & 1

    def is_blank(self) -> bool:
        """True when no pixel is set; bits in the row padding are ignored."""
        return not any(self.pixel(x, y) for y in range(self.height) for x in range(self.width))

    def inverted(self) -> "RawRaster":
        """Swap ink and background; padding bits stay clear."""
        data = bytearray(b ^ 0xFF for b in self.data)
        if self.width % 8:
            mask = (0xFF << (8 - self.width % 8)) & 0xFF
            stride = self.stride
            for y in range(self.height):
                data[y * stride + stride - 1] &= mask
        return RawRaster(self.width, self.height, bytes(data))

    def to_bitstream(self) -> bytes:
        """Pack all pixels row after row without row padding (GFX bitmap layout)."""
        packed = []
        px = 0
        count = 0
        for y in range(self.height):
            for x in range(self.width):
                px = (px << 1) | self.pixel(x, y)
                count += 1
                if count % 8 == 0:
                    packed.append(px)
                    px = 0
        if count % 8 != 0:
            px = px << (8 - count % 8)
            packed.append(px)
        return bytes(packed)

    def to_text(self, ink: str = "#", background: str = ".") -> str:
        lines = []
        for y in range(self.height):
            lines.append("".join(ink if self.pixel(x, y) else background for x in range(self.width)))
        return "\n".join(lines)


class RasterCanvas:
    """Mutable pixel grid used by rasterizers to compose a cell before freezing it."""

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        self.stride = stride_for(width)
        self.data = bytearray(self.stride * height)

    def set(self, x: int, y: int) -> None:
        if 0 <= x < self.width and 0 <= y < self.height:
            self.data[y * self.stride + x // 8] |= 0x80 >> (x % 8)

    def get(self, x: int, y: int) -> int:
        return (self.data[y * self.stride + x // 8] >> (7 - x % 8)) & 1

    def blit(self, raster: RawRaster, left: int, top: int) -> None:
        """OR ``raster`` into the canvas; pixels outside the canvas are clipped."""
        for y in range(raster.height):
            for x in range(raster.width):
                if raster.pixel(x, y):
                    self.set(left + x, top + y)

    def hline(self, y: int, thickness: int = 1) -> None:
        for row in range(y, y + max(1, thickness)):
            for x in range(self.width):
                self.set(x, row)

    def embolden(self) -> None:
        """Smear every ink pixel one column to the right."""
        for y in range(self.height):
            for x in range(self.width - 1, 0, -1):
                if self.get(x - 1, y):
                    self.set(x, y)

    def freeze(self) -> RawRaster:
        return RawRaster(self.width, self.height, bytes(self.data))
