"""
Write a FontModel as an Adafruit GFX C header.

The output contains three declarations, in this order:

  const uint8_t  <Name>Bitmaps[] PROGMEM   glyph bitmaps, 10 bytes per line,
                                           each glyph preceded by a comment
  const GFXglyph <Name>Glyphs[]  PROGMEM   one row per character
  const GFXfont  <Name>          PROGMEM   the font descriptor

The text depends only on the model, so converting the same font twice gives
identical files.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

BYTES_PER_LINE = 10


def _bitmap_lines(data: bytes) -> list[str]:
    lines = []
    for i in range(0, len(data), BYTES_PER_LINE):
        chunk = data[i : i + BYTES_PER_LINE]
        lines.append(" " + "".join(f" 0x{b:02x}," for b in chunk))
    # The last byte of a glyph carries no comma; the caller adds the separator.
    lines[-1] = lines[-1][:-1]
    return lines


def emit_bitmaps(model) -> str:
    out = [f"const uint8_t {model.name}Bitmaps[] PROGMEM = {{\n"]
    last_data = max((i for i, data in enumerate(model.bitmaps) if data), default=-1)
    open_line = False
    for i, (glyph, data) in enumerate(zip(model.glyphs, model.bitmaps)):
        code = glyph.code
        if not data:
            if open_line:
                out.append("\n")
                open_line = False
            out.append(f"  // ' ' Code {code:02x}\n")
            continue
        out.append(f"  // '{chr(code)}' Code {code:02x}\n")
        out.append("\n".join(_bitmap_lines(data)))
        # Only the last byte of the whole blob goes without a comma.
        if i == last_data:
            open_line = True
        else:
            out.append(",\n")
    out.append(" };\n")
    return "".join(out)


def emit_glyphs(model) -> str:
    out = ["\n", f"const GFXglyph {model.name}Glyphs[] PROGMEM = {{\n"]
    last_index = len(model.glyphs) - 1
    for i, g in enumerate(model.glyphs):
        out.append(
            f"  {{ {g.bitmap_offset:6d},{g.width:4d},{g.height:4d},"
            f"{g.x_advance:4d},{g.x_offset:5d},{g.y_offset:5d} }}"
        )
        out.append(" }; " if i == last_index else ",   ")
        out.append(f"   // 0x{g.code:02x} '{chr(g.code)}'\n")
    return "".join(out)


def emit_descriptor(model) -> str:
    return (
        "\n"
        f"const GFXfont {model.name} PROGMEM = {{\n"
        f"  (uint8_t  *){model.name}Bitmaps,\n"
        f"  (GFXglyph *){model.name}Glyphs,\n"
        f"  0x{model.first:02x}, 0x{model.last:02x}, {model.line_advance} }};\n"
    )


def emit_font(model) -> str:
    """Return the complete header text for ``model``."""
    return emit_bitmaps(model) + emit_glyphs(model) + emit_descriptor(model)


def header_path(model, directory) -> Path:
    return Path(directory) / f"{model.name}.h"


def write_font(model, directory) -> Path:
    """Write ``<Name>.h`` into ``directory``; an existing file is only replaced once the text is complete."""
    model.check_limits()
    code = emit_font(model)
    target = header_path(model, directory)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{model.name}.", suffix=".tmp", dir=target.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            f.write(code)
        os.replace(tmp_name, target)
    except BaseException:
        os.unlink(tmp_name)
        raise
    return target
