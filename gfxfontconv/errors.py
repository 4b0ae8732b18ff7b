"""Exceptions raised while converting a font."""


class FontConvertError(Exception):
    """Base class for every conversion failure."""


class FormatError(FontConvertError):
    """The source file is not a usable bitmap font container."""


class BadStubMagicError(FormatError):
    def __init__(self, magic: bytes):
        super().__init__(f"Invalid FON file format. MZ magic mismatch (found {magic!r}).")


class BadSegmentMagicError(FormatError):
    def __init__(self, magic: bytes):
        super().__init__(f"Invalid FON file format. NE magic mismatch (found {magic!r}).")


class NoFontResourceError(FormatError):
    def __init__(self):
        super().__init__("No FNT resources found.")


class NotABitmapFontError(FormatError):
    def __init__(self, font_type: int):
        super().__init__(f"Not a bitmap font (dfType=0x{font_type:04x}).")


class TruncatedError(FormatError):
    def __init__(self, offset: int, wanted: int, got: int):
        super().__init__(f"Unexpected end of file at offset {offset}: wanted {wanted} bytes, got {got}.")


class ResourceError(FontConvertError):
    """The font source could not be opened, found or read."""


class RangeError(FontConvertError):
    """A character range or glyph metric falls outside what can be converted."""
