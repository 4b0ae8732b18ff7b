"""
Windows bitmap font (.FON) reader.

A .FON file is a 16-bit NE executable without code. The fonts live in its
resource table:

  MZ header     2 bytes  "MZ", 29 reserved words, uint32 offset of NE header
  NE header     2 bytes  "NE", 34 reserved bytes,
                uint16 resource table offset, uint16 resident-name table offset
                (both relative to the NE header)
  Resources     uint16 alignment shift, then type entries until type == 0:
                  uint16 type, uint16 count, uint32 reserved,
                  count * {uint16 offset, length, flags, id, handle, usage}
                item offsets and lengths are shifted left by the alignment shift
  RT_FONT       0x8008, one FNT resource (font directory entry + bitmaps) per item

FNT bitmaps are stored column by column: for every glyph, one strip of
``height`` bytes per 8-pixel column, left to right. They are transposed
here into the row-major layout of RawRaster.

Usage:
  fonts = read_fon("VGAOEM.FON")
"""

from __future__ import annotations

import struct
from collections import namedtuple
from dataclasses import dataclass, field
from typing import BinaryIO

from .errors import (
    BadSegmentMagicError,
    BadStubMagicError,
    NoFontResourceError,
    NotABitmapFontError,
    RangeError,
    ResourceError,
    TruncatedError,
)
from .raster import RawRaster, stride_for

MZ_MAGIC = b"MZ"
NE_MAGIC = b"NE"
MZ_RESERVED_WORDS = 29
NE_RESERVED_BYTES = 34

RT_FONTDIR = 0x8007
RT_FONT = 0x8008

DF_VER2 = 0x200
DF_VER3 = 0x300

# Font directory entry (FNT header), 118 bytes, little-endian.
FNT_HEADER_FMT = "<HI60sHHHHHHHBBBHBHHBHHBBBBHIIIIB"
assert struct.calcsize(FNT_HEADER_FMT) == 118, "FNT header size mismatch"
FNT_HEADER_FIELDS = [
    "version", "size", "copyright", "type", "points", "vert_res", "horiz_res",
    "ascent", "internal_leading", "external_leading", "italic", "underline",
    "strike_out", "weight", "charset", "pix_width", "pix_height",
    "pitch_and_family", "avg_width", "max_width", "first_char", "last_char",
    "default_char", "break_char", "width_bytes", "device", "face",
    "bits_pointer", "bits_offset", "reserved",
]
# Extra fields of a version 3.0 header: flags, A/B/C space, colour pointer, reserved[16].
FNT_V3_EXTRA_FMT = "<IHHHI16s"
assert struct.calcsize(FNT_V3_EXTRA_FMT) == 30, "FNT 3.0 header extension size mismatch"

RES_TYPE_FMT = "<HHI"
RES_ITEM_FMT = "<HHHHHH"

MAX_STRING = 256

MzHeader = namedtuple("MzHeader", ["magic", "ne_offset"])
NeHeader = namedtuple("NeHeader", ["magic", "resource_table", "resident_names"])
ResourceItem = namedtuple("ResourceItem", ["type", "offset", "length"])
FontDirEntry = namedtuple("FontDirEntry", FNT_HEADER_FIELDS)


@dataclass
class FontResource:
    """One FNT resource decoded from a .FON container."""

    face_name: str
    header: FontDirEntry
    glyphs: list = field(default_factory=list)
    widths: list = field(default_factory=list)

    @property
    def copyright(self) -> str:
        return self.header.copyright

    @property
    def version(self) -> int:
        return self.header.version

    @property
    def cell_width(self) -> int:
        return self.header.pix_width

    @property
    def cell_height(self) -> int:
        return self.header.pix_height

    @property
    def max_width(self) -> int:
        return self.header.pix_width or self.header.max_width

    @property
    def first_char(self) -> int:
        return self.header.first_char

    @property
    def last_char(self) -> int:
        return self.header.last_char

    @property
    def byte_width(self) -> int:
        return stride_for(self.max_width)

    @property
    def is_proportional(self) -> bool:
        return self.header.pix_width == 0

    @property
    def glyph_count(self) -> int:
        return len(self.glyphs)

    @property
    def last_available(self) -> int:
        return self.first_char + self.glyph_count - 1

    def _index(self, code: int) -> int:
        index = code - self.first_char
        if not 0 <= index < self.glyph_count:
            raise RangeError(
                f"Character 0x{code:02x} is not in font '{self.face_name}' "
                f"(0x{self.first_char:02x}-0x{self.last_available:02x})."
            )
        return index

    def glyph(self, code: int) -> RawRaster:
        return self.glyphs[self._index(code)]

    def advance(self, code: int) -> int:
        return self.widths[self._index(code)]


class _Reader:
    """Little-endian struct reader over a seekable binary stream."""

    def __init__(self, stream: BinaryIO):
        self.stream = stream

    def tell(self) -> int:
        return self.stream.tell()

    def seek(self, offset: int) -> None:
        self.stream.seek(offset)

    def skip(self, count: int) -> None:
        self.read(count)

    def read(self, count: int) -> bytes:
        offset = self.stream.tell()
        data = self.stream.read(count)
        if len(data) != count:
            raise TruncatedError(offset, count, len(data))
        return data

    def unpack(self, fmt: str) -> tuple:
        return struct.unpack(fmt, self.read(struct.calcsize(fmt)))

    def u16(self) -> int:
        return self.unpack("<H")[0]

    def u32(self) -> int:
        return self.unpack("<I")[0]

    def string_at(self, offset: int) -> str:
        """Read a NUL-terminated string at ``offset`` without moving the cursor."""
        saved = self.tell()
        self.seek(offset)
        raw = bytearray()
        while len(raw) < MAX_STRING:
            chunk = self.stream.read(1)
            if not chunk or chunk == b"\0":
                break
            raw += chunk
        self.seek(saved)
        return raw.decode("latin-1")


def _cstring(raw: bytes) -> str:
    return raw.split(b"\0", 1)[0].decode("latin-1")


def read_mz_header(reader: _Reader) -> MzHeader:
    magic = reader.read(2)
    if magic != MZ_MAGIC:
        raise BadStubMagicError(magic)
    reader.skip(MZ_RESERVED_WORDS * 2)
    return MzHeader(magic, reader.u32())


def read_ne_header(reader: _Reader) -> NeHeader:
    magic = reader.read(2)
    if magic != NE_MAGIC:
        raise BadSegmentMagicError(magic)
    reader.skip(NE_RESERVED_BYTES)
    resource_table, resident_names = reader.unpack("<HH")
    return NeHeader(magic, resource_table, resident_names)


def read_resource_table(reader: _Reader) -> list[ResourceItem]:
    """Walk the resource table at the cursor and return every resource item."""
    shift = reader.u16()
    items = []
    while True:
        res_type = reader.u16()
        if res_type == 0:
            break
        count, _reserved = reader.unpack("<HI")
        for _ in range(count):
            offset, length, _flags, _id, _handle, _usage = reader.unpack(RES_ITEM_FMT)
            items.append(ResourceItem(res_type, offset << shift, length << shift))
    return items


def transpose_glyph(strips: bytes, height: int, stride: int) -> bytes:
    """Turn ``stride`` column strips of ``height`` bytes into row-major rows."""
    rows = bytearray(height * stride)
    for col in range(stride):
        for row in range(height):
            rows[row * stride + col] = strips[col * height + row]
    return bytes(rows)


def decode_glyph(reader: _Reader, width: int, height: int) -> RawRaster:
    stride = stride_for(width)
    rows = transpose_glyph(reader.read(stride * height), height, stride)
    # Clear padding bits so the raster only holds real pixels.
    return RawRaster.from_buffer(rows, width, height, stride)


def read_font_dir_entry(reader: _Reader) -> FontDirEntry:
    values = list(reader.unpack(FNT_HEADER_FMT))
    values[2] = _cstring(values[2])
    return FontDirEntry(*values)


def read_font_resource(reader: _Reader, base: int) -> FontResource:
    """Decode the FNT resource starting at ``base``."""
    reader.seek(base)
    header = read_font_dir_entry(reader)
    if header.type & 1:
        raise NotABitmapFontError(header.type)
    if header.version >= DF_VER3:
        reader.unpack(FNT_V3_EXTRA_FMT)

    face_name = reader.string_at(base + header.face)
    # The format keeps one slot past the last character.
    glyph_count = header.last_char - header.first_char + 2
    height = header.pix_height
    font = FontResource(face_name=face_name, header=header)

    if header.pix_width:
        reader.seek(base + header.bits_offset)
        for _ in range(glyph_count):
            font.glyphs.append(decode_glyph(reader, header.pix_width, height))
            font.widths.append(header.pix_width)
        return font

    entry_fmt = "<HI" if header.version >= DF_VER3 else "<HH"
    char_table = [reader.unpack(entry_fmt) for _ in range(glyph_count)]
    for width, offset in char_table:
        reader.seek(base + offset)
        font.glyphs.append(decode_glyph(reader, width, height))
        font.widths.append(width)
    return font


def decode_fon(stream: BinaryIO) -> list[FontResource]:
    """Decode every bitmap font resource of a .FON container."""
    reader = _Reader(stream)
    mz = read_mz_header(reader)
    reader.seek(mz.ne_offset)
    ne = read_ne_header(reader)
    reader.seek(mz.ne_offset + ne.resource_table)

    fonts = [
        read_font_resource(reader, item.offset)
        for item in read_resource_table(reader)
        if item.type == RT_FONT
    ]
    if not fonts:
        raise NoFontResourceError()
    return fonts


def read_fon(path) -> list[FontResource]:
    try:
        with open(path, "rb") as f:
            return decode_fon(f)
    except OSError as err:
        raise ResourceError(f"Cannot read font file {path}: {err}") from err
