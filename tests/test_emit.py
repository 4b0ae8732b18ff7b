import pytest

from gfxfontconv.emit import emit_bitmaps, emit_descriptor, emit_font, emit_glyphs, write_font
from gfxfontconv.errors import RangeError
from gfxfontconv.font import FontModel, Glyph


def make_model(bitmaps, glyphs, first=0x41, last=0x42, line_advance=12):
    return FontModel("Test", first, last, line_advance, list(glyphs), list(bitmaps))


ELEVEN = bytes(range(11))


def test_eleven_bytes_split_ten_and_one():
    model = make_model(
        [ELEVEN, b"\xff"],
        [Glyph(0x41, 0, 8, 11, 9, 0, -11), Glyph(0x42, 11, 8, 1, 9, 0, -1)],
    )
    assert emit_bitmaps(model) == (
        "const uint8_t TestBitmaps[] PROGMEM = {\n"
        "  // 'A' Code 41\n"
        "  0x00, 0x01, 0x02, 0x03, 0x04, 0x05, 0x06, 0x07, 0x08, 0x09,\n"
        "  0x0a,\n"
        "  // 'B' Code 42\n"
        "  0xff };\n"
    )


def test_blank_glyph_only_writes_comment():
    model = make_model(
        [b"", b"\x18\x3c"],
        [Glyph(0x20, 0, 0, 0, 4, 0, 1), Glyph(0x21, 0, 8, 2, 9, 0, -2)],
        first=0x20, last=0x21,
    )
    assert emit_bitmaps(model) == (
        "const uint8_t TestBitmaps[] PROGMEM = {\n"
        "  // ' ' Code 20\n"
        "  // '!' Code 21\n"
        "  0x18, 0x3c };\n"
    )


def test_trailing_blank_glyph_after_bytes():
    model = make_model(
        [b"\x01", b""],
        [Glyph(0x41, 0, 1, 1, 2, 0, -1), Glyph(0x42, 1, 0, 0, 2, 0, 1)],
    )
    text = emit_bitmaps(model)
    assert text == (
        "const uint8_t TestBitmaps[] PROGMEM = {\n"
        "  // 'A' Code 41\n"
        "  0x01\n"
        "  // ' ' Code 42\n"
        " };\n"
    )
    assert "0x01," not in text


def test_blank_glyph_between_bytes_keeps_separator():
    model = make_model(
        [b"\x01", b"", b"\x02"],
        [Glyph(0x41, 0, 1, 1, 2, 0, -1), Glyph(0x42, 1, 0, 0, 2, 0, 1), Glyph(0x43, 1, 1, 1, 2, 0, -1)],
        last=0x43,
    )
    assert emit_bitmaps(model) == (
        "const uint8_t TestBitmaps[] PROGMEM = {\n"
        "  // 'A' Code 41\n"
        "  0x01,\n"
        "  // ' ' Code 42\n"
        "  // 'C' Code 43\n"
        "  0x02 };\n"
    )


def test_exactly_ten_bytes_stay_on_one_line():
    model = make_model([bytes(10)], [Glyph(0x41, 0, 8, 10, 8, 0, -10)], last=0x41)
    lines = emit_bitmaps(model).splitlines()
    assert lines[2] == "  " + ", ".join(["0x00"] * 10) + " };"
    assert len(lines) == 3


def test_glyph_table_rows():
    model = make_model(
        [ELEVEN, b"\xff"],
        [Glyph(0x41, 0, 8, 11, 9, 0, -11), Glyph(0x42, 11, 8, 1, 9, -1, 1)],
    )
    assert emit_glyphs(model) == (
        "\n"
        "const GFXglyph TestGlyphs[] PROGMEM = {\n"
        "  {      0,   8,  11,   9,    0,  -11 },      // 0x41 'A'\n"
        "  {     11,   8,   1,   9,   -1,    1 } };    // 0x42 'B'\n"
    )


def test_descriptor():
    model = make_model([], [], first=0x20, last=0x7E, line_advance=12)
    assert emit_descriptor(model) == (
        "\n"
        "const GFXfont Test PROGMEM = {\n"
        "  (uint8_t  *)TestBitmaps,\n"
        "  (GFXglyph *)TestGlyphs,\n"
        "  0x20, 0x7e, 12 };\n"
    )


def test_output_is_stable():
    model = make_model(
        [ELEVEN, b"\xff"],
        [Glyph(0x41, 0, 8, 11, 9, 0, -11), Glyph(0x42, 11, 8, 1, 9, 0, -1)],
    )
    text = emit_font(model)
    assert text == emit_font(model)
    assert text.index("TestBitmaps[]") < text.index("TestGlyphs[]") < text.index("GFXfont Test ")


def test_write_font(tmp_path):
    model = make_model([b"\x80"], [Glyph(0x41, 0, 1, 1, 8, 3, -1)], last=0x41)
    path = write_font(model, tmp_path)
    assert path == tmp_path / "Test.h"
    assert path.read_text(encoding="utf-8") == emit_font(model)
    assert [p.name for p in tmp_path.iterdir()] == ["Test.h"]


def test_write_font_checks_limits_before_writing(tmp_path):
    model = make_model([b""], [Glyph(0x41, 0, 0, 0, 400, 0, 1)], last=0x41)
    with pytest.raises(RangeError):
        write_font(model, tmp_path)
    assert list(tmp_path.iterdir()) == []
