"""Save rendered glyph rasters as PNG files for checking rasterizer quality."""

from __future__ import annotations

from pathlib import Path

from PIL import Image

from .crop import autocrop
from .raster import RawRaster


def raster_to_image(raster: RawRaster, scale: int = 1) -> Image.Image:
    width, height = max(raster.width, 1), max(raster.height, 1)

    pixels = bytearray(b"\xff" * (width * height))
    for y in range(raster.height):
        for x in range(raster.width):
            # Ink is drawn black on white.
            if raster.pixel(x, y):
                pixels[y * width + x] = 0

    image = Image.frombytes("L", (width, height), bytes(pixels))
    if scale > 1:
        image = image.resize((width * scale, height * scale), Image.Resampling.NEAREST)
    return image


def preview_name(char: str) -> str:
    return f"glyph_{ord(char):02x}.png"


def write_previews(rasterizer, chars: str, output_dir, scale: int = 4) -> list[Path]:
    """Render, crop and save each character; print its size and crop margins."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    written = []
    for char in chars:
        margins, cropped = autocrop(rasterizer.render(char))
        print(
            f"{char} {cropped.width}, {cropped.height}, Left {margins.left}, Right {margins.right}, "
            f"Top {margins.top}, Bottom {margins.bottom}"
        )
        out = output_dir / preview_name(char)
        raster_to_image(cropped, scale).save(out, format="PNG", optimize=True)
        written.append(out)
    return written
