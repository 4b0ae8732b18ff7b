import io
import struct

import pytest

from gfxfontconv.fon import FNT_HEADER_FMT, RT_FONT

NE_OFFSET = 64
NE_HEADER_SIZE = 40


def make_fnt(strips, width, height, first, last, face="Test", font_type=0, version=0x200,
             max_width=None, char_table=None):
    """Build an FNT resource: header, face name, then the column-strip bitmaps.

    ``char_table`` (proportional fonts) is a list of (width, offset-into-strips).
    """
    header_size = struct.calcsize(FNT_HEADER_FMT)
    entry_fmt = "<HI" if version >= 0x300 else "<HH"
    extra = 30 if version >= 0x300 else 0
    table = b""
    face_offset = header_size + extra
    if char_table is not None:
        face_offset += struct.calcsize(entry_fmt) * len(char_table)
    name = face.encode("latin-1") + b"\0"
    bits_offset = face_offset + len(name)
    if char_table is not None:
        table = b"".join(struct.pack(entry_fmt, w, bits_offset + off) for w, off in char_table)

    header = struct.pack(
        FNT_HEADER_FMT,
        version, 0, b"(c) test", font_type, 10, 96, 96, height - 1, 0, 0,
        0, 0, 0, 400, 255, width, height, 0, width, max_width or width,
        first, last, first, 0x20, (width + 7) // 8, 0, face_offset, 0, bits_offset, 0,
    )
    return header + bytes(extra) + table + name + bytes(strips)


def make_fon(resources, shift=0, extra_types=()):
    """Wrap FNT resources in an MZ/NE container with one RT_FONT type entry."""
    mz = b"MZ" + bytes(58) + struct.pack("<I", NE_OFFSET)
    ne = b"NE" + bytes(34) + struct.pack("<HH", NE_HEADER_SIZE, 0)

    table_size = 2 + 2
    for res_type, count in extra_types:
        table_size += 8 + 12 * count
    table_size += 8 + 12 * len(resources)
    data_start = NE_OFFSET + NE_HEADER_SIZE + table_size
    align = 1 << shift
    data_start = (data_start + align - 1) // align * align

    table = struct.pack("<H", shift)
    for res_type, count in extra_types:
        table += struct.pack("<HHI", res_type, count, 0)
        table += struct.pack("<HHHHHH", 0, 0, 0, 0, 0, 0) * count

    table += struct.pack("<HHI", RT_FONT, len(resources), 0)
    body = b""
    for res in resources:
        offset = data_start + len(body)
        table += struct.pack("<HHHHHH", offset >> shift, len(res) >> shift, 0, 0x8001, 0, 0)
        body += res + bytes(-len(res) % align)
    table += struct.pack("<H", 0)

    head = mz + ne + table
    return head + bytes(data_start - len(head)) + body


@pytest.fixture
def single_pixel_fon():
    # 8x1 cell, 'A' only (plus the trailing slot), ink at column 3.
    return make_fon([make_fnt(bytes([0x10, 0x00]), 8, 1, 0x41, 0x41)])


@pytest.fixture
def fon_stream(single_pixel_fon):
    return io.BytesIO(single_pixel_fon)
