from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, Tuple

from PIL import Image

# ===== SUPPORTED FORMATS =====
PNG_MAGIC = b"\x89PNG\r\n\x1a\n"
JPEG_MAGIC = b"\xff\xd8\xff"
SIXTEEN_BIT_MODES = ("I", "I;16", "I;16B", "I;16L", "I;16N")


class UnsupportedFormatError(ValueError):
    """Input is not a PNG or JPEG (by extension or content)."""


class DecodeError(ValueError):
    """Input could not be decoded into an RGB pixel buffer."""


class PixelSource:
    """
    Decoded 8-bit RGB image: row-major, 3 bytes per pixel, no row padding.
    """

    def __init__(self, width: int, height: int, data: bytes):
        if width < 1 or height < 1:
            raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
        if len(data) != width * height * 3:
            raise ValueError("Pixel data length mismatch after RGB conversion")
        self.width = width
        self.height = height
        self.data = bytes(data)

    def __repr__(self):
        return f"PixelSource(width={self.width}, height={self.height})"

    @classmethod
    def from_pixels(cls, width: int, height: int, pixels: Iterable[Tuple[int, int, int]]) -> "PixelSource":
        """Build from a row-major list of (r, g, b) tuples, like Image.getdata()."""
        buf = bytearray()
        for r, g, b in pixels:
            buf += bytes((r, g, b))
        return cls(width, height, bytes(buf))

    def pixel(self, x: int, y: int) -> Tuple[int, int, int]:
        i = (y * self.width + x) * 3
        d = self.data
        return d[i], d[i + 1], d[i + 2]


def _to_rgb(im: Image.Image) -> Image.Image:
    """
    Normalize any decoded mode to 8-bit RGB:
    palette/gray/1-bit are expanded, alpha is dropped (not composited),
    16-bit samples keep their high byte.
    """
    if im.mode in SIXTEEN_BIT_MODES:
        im = im.convert("I").point(lambda v: v * (1 / 256)).convert("L")
    return im.convert("RGB")


class _PillowDecoder:
    name = ""
    formats: Tuple[str, ...] = ()
    extensions: Tuple[str, ...] = ()

    def __repr__(self):
        return f"{type(self).__name__}()"

    def decode(self, path: str | Path) -> PixelSource:
        p = Path(path)
        if not p.exists():
            raise FileNotFoundError(str(p))
        try:
            with Image.open(p) as im:
                if im.format not in self.formats:
                    raise DecodeError(f"{p.name} is not a {self.name} image (found {im.format})")
                rgb = _to_rgb(im)
                w, h = rgb.size
                return PixelSource(w, h, rgb.tobytes())
        except (OSError, SyntaxError, Image.DecompressionBombError) as e:
            raise DecodeError(f"Failed to open/read image: {p.name}") from e


class PngDecoder(_PillowDecoder):
    name = "PNG"
    formats = ("PNG",)
    extensions = (".png",)


class JpegDecoder(_PillowDecoder):
    name = "JPEG"
    formats = ("JPEG", "MPO")
    extensions = (".jpg", ".jpeg")


DECODERS = (PngDecoder(), JpegDecoder())

DECODER_LOOKUP: Dict[str, _PillowDecoder] = {
    ext: dec for dec in DECODERS for ext in dec.extensions
}


def decoder_for(path: str | Path) -> _PillowDecoder:
    """Pick a decoder by (case-insensitive) extension, before touching the file."""
    ext = Path(path).suffix.lower()
    dec = DECODER_LOOKUP.get(ext)
    if dec is None:
        raise UnsupportedFormatError(
            f"Unsupported image format {ext or '(none)'!r} (PNG and JPEG only)"
        )
    return dec


def sniff_decoder(path: str | Path) -> _PillowDecoder:
    """Pick a decoder from the file's magic bytes, ignoring its name."""
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(str(p))
    try:
        with open(p, "rb") as f:
            head = f.read(len(PNG_MAGIC))
    except OSError as e:
        raise DecodeError(f"Failed to open/read image: {p.name}") from e
    if head.startswith(PNG_MAGIC):
        return DECODER_LOOKUP[".png"]
    if head.startswith(JPEG_MAGIC):
        return DECODER_LOOKUP[".jpg"]
    raise UnsupportedFormatError(f"{p.name} is neither PNG nor JPEG data")


def load_image(path: str | Path, sniff: bool = False) -> PixelSource:
    """
    Decode `path` into a PixelSource.
    By default the decoder is chosen from the extension; sniff=True reads the
    file signature instead.
    """
    dec = sniff_decoder(path) if sniff else decoder_for(path)
    return dec.decode(path)
