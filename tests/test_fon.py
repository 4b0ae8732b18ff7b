import io

import pytest

from conftest import make_fnt, make_fon
from gfxfontconv.errors import (
    BadSegmentMagicError,
    BadStubMagicError,
    FormatError,
    NoFontResourceError,
    NotABitmapFontError,
    RangeError,
    ResourceError,
    TruncatedError,
)
from gfxfontconv.fon import RT_FONTDIR, decode_fon, read_fon, transpose_glyph


def test_transpose_with_one_strip_keeps_order():
    stream = bytes([0xAA, 0x55, 0x0F, 0xF0])
    assert transpose_glyph(stream[0:2], 2, 1) == bytes([0xAA, 0x55])
    assert transpose_glyph(stream[2:4], 2, 1) == bytes([0x0F, 0xF0])


def test_transpose_swaps_rows_and_columns():
    # strip 0 = rows of byte column 0, strip 1 = rows of byte column 1
    strips = bytes([0x11, 0x12, 0x21, 0x22])
    assert transpose_glyph(strips, 2, 2) == bytes([0x11, 0x21, 0x12, 0x22])


def test_decode_two_glyph_stream():
    fon = make_fon([make_fnt(bytes([0xAA, 0x55, 0x0F, 0xF0]), 8, 2, 0x30, 0x30)])
    [font] = decode_fon(io.BytesIO(fon))
    assert font.glyph_count == 2
    assert font.glyph(0x30).data == bytes([0xAA, 0x55])
    assert font.glyph(0x31).data == bytes([0x0F, 0xF0])


def test_decode_wide_glyphs_are_row_major():
    # 12x2 cell: two strips per glyph, one glyph plus the trailing slot
    strips = bytes([0xFF, 0x80, 0xF0, 0x10]) + bytes(4)
    fon = make_fon([make_fnt(strips, 12, 2, 0x41, 0x41)])
    [font] = decode_fon(io.BytesIO(fon))
    glyph = font.glyph(0x41)
    assert font.byte_width == 2
    assert glyph.data == bytes([0xFF, 0xF0, 0x80, 0x10])
    assert glyph.to_text() == "############\n#..........#"


def test_font_metadata(fon_stream):
    [font] = decode_fon(fon_stream)
    assert font.face_name == "Test"
    assert font.copyright == "(c) test"
    assert (font.cell_width, font.cell_height) == (8, 1)
    assert (font.first_char, font.last_char, font.last_available) == (0x41, 0x41, 0x42)
    assert font.glyph(0x41).to_text() == "...#...."


def test_glyph_lookup_outside_font_raises(fon_stream):
    [font] = decode_fon(fon_stream)
    with pytest.raises(RangeError):
        font.glyph(0x40)
    with pytest.raises(RangeError):
        font.glyph(0x43)


def test_alignment_shift_and_multiple_fonts():
    small = make_fnt(bytes([0x80, 0x00]), 8, 1, 0x41, 0x41, face="Small")
    big = make_fnt(bytes([0x01, 0x00, 0x00, 0x00]), 8, 2, 0x41, 0x41, face="Big")
    fon = make_fon([small, big], shift=4, extra_types=[(RT_FONTDIR, 1), (0x800E, 2)])
    fonts = decode_fon(io.BytesIO(fon))
    assert [f.face_name for f in fonts] == ["Small", "Big"]
    assert fonts[1].glyph(0x41).to_text() == ".......#\n........"


def test_proportional_font_reads_char_table():
    strips = bytes([0xC0, 0xC0]) + bytes([0xFF, 0x81, 0xC0, 0x40])
    table = [(2, 0), (10, 2)]
    fnt = make_fnt(strips, 0, 2, 0x61, 0x61, max_width=10, char_table=table)
    [font] = decode_fon(io.BytesIO(make_fon([fnt])))
    assert font.is_proportional
    assert font.max_width == 10
    assert font.advance(0x61) == 2
    assert font.advance(0x62) == 10
    assert font.glyph(0x61).to_text() == "##\n##"
    assert font.glyph(0x62).to_text() == "##########\n#......#.#"


def test_version3_header_is_skipped():
    table = [(8, 0), (8, 1)]
    fnt = make_fnt(bytes([0x3C, 0x00]), 0, 1, 0x41, 0x41, version=0x300, max_width=8, char_table=table)
    [font] = decode_fon(io.BytesIO(make_fon([fnt])))
    assert font.glyph(0x41).data == b"\x3c"


def test_bad_stub_magic():
    fon = bytearray(make_fon([make_fnt(bytes(2), 8, 1, 0x41, 0x41)]))
    fon[0:2] = b"ZM"
    with pytest.raises(BadStubMagicError):
        decode_fon(io.BytesIO(bytes(fon)))


def test_bad_segment_magic():
    fon = bytearray(make_fon([make_fnt(bytes(2), 8, 1, 0x41, 0x41)]))
    fon[64:66] = b"PE"
    with pytest.raises(BadSegmentMagicError):
        decode_fon(io.BytesIO(bytes(fon)))


def test_no_font_resource():
    fon = make_fon([], extra_types=[(RT_FONTDIR, 1)])
    with pytest.raises(NoFontResourceError):
        decode_fon(io.BytesIO(fon))


def test_vector_font_is_rejected():
    fon = make_fon([make_fnt(bytes(2), 8, 1, 0x41, 0x41, font_type=1)])
    with pytest.raises(NotABitmapFontError):
        decode_fon(io.BytesIO(fon))


def test_truncated_file():
    fon = make_fon([make_fnt(bytes(2), 8, 1, 0x41, 0x41)])
    with pytest.raises(TruncatedError):
        decode_fon(io.BytesIO(fon[:-1]))
    with pytest.raises(FormatError):
        decode_fon(io.BytesIO(b"MZ"))


def test_read_fon_from_disk(tmp_path, single_pixel_fon):
    path = tmp_path / "test.fon"
    path.write_bytes(single_pixel_fon)
    [font] = read_fon(path)
    assert font.face_name == "Test"


def test_read_fon_missing_file(tmp_path):
    with pytest.raises(ResourceError):
        read_fon(tmp_path / "missing.fon")
