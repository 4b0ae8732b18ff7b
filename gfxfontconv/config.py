"""
Conversion settings shared by the converters and the command line.
"""

from __future__ import annotations

from dataclasses import dataclass

from .errors import RangeError

# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------
DPI = 96
DEFAULT_POINT_SIZE = 7.0
# Line advance = min(height * factor, height + 1), height of a rendered 'W'.
LINE_ADVANCE_FACTOR = 1.0

# Pixel value of the background of a rendered cell before cropping.
BACKGROUND = 0

# ---------------------------------------------------------------------------
# Character ranges (inclusive)
# ---------------------------------------------------------------------------
FIRST_CHAR = 0x20
LAST_CHAR_7BIT = 0x7F
LAST_CHAR_8BIT = 0xFF
MAX_CHAR = 0xFF

# Characters written as PNG previews by --test.
TEST_CHARACTERS = " AWyÄÖÜäöüß!."

STYLES = ("Regular", "Bold", "Italic", "Underline", "Strikeout")


@dataclass(frozen=True)
class ConvertOptions:
    """Per-run settings for a conversion."""

    first: int = FIRST_CHAR
    last: int = LAST_CHAR_8BIT
    point_size: float = DEFAULT_POINT_SIZE
    style: frozenset = frozenset()
    dpi: int = DPI
    line_advance_factor: float = LINE_ADVANCE_FACTOR
    # FON only: keep each glyph's full cell instead of cropping it.
    preserve_cell_box: bool = False


def last_char_for_range(bits: int) -> int:
    if bits == 7:
        return LAST_CHAR_7BIT
    if bits == 8:
        return LAST_CHAR_8BIT
    raise RangeError(f"Unknown character range '{bits}', expected 7 or 8.")


def check_range(first: int, last: int) -> None:
    if not 0 <= first <= last <= MAX_CHAR:
        raise RangeError(f"Invalid character range 0x{first:02x}-0x{last:02x}.")


def parse_style(names: str | None) -> frozenset:
    """Parse 'Bold+Italic' into {'bold', 'italic'}; Regular adds nothing."""
    style = set()
    if not names:
        return frozenset()
    for name in names.split("+"):
        name = name.strip()
        match = [s for s in STYLES if s.lower() == name.lower()]
        if not match:
            raise ValueError(f"Unknown style '{name}', expected one of {', '.join(STYLES)}.")
        if match[0] != "Regular":
            style.add(match[0].lower())
    return frozenset(style)
