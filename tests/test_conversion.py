from pathlib import Path
import pytest

# Fail fast if Pillow isn't present (no skipping).
try:
    from PIL import Image  # type: ignore
except Exception as e:
    raise ImportError("Pillow is required for these tests. pip install pillow") from e

from image_spectrogram.conversion import (
    DecodeError,
    JpegDecoder,
    PixelSource,
    PngDecoder,
    UnsupportedFormatError,
    decoder_for,
    load_image,
    sniff_decoder,
)


def _save_png(path: Path, pixels, w: int, h: int, mode: str = "RGB"):
    im = Image.new(mode, (w, h))
    im.putdata(pixels)
    im.save(path, "PNG")


def test_load_png_exact_pixels(tmp_path: Path):
    p = tmp_path / "tiny.png"
    pixels = [(255, 0, 0), (0, 255, 0), (0, 0, 255), (128, 128, 128)]
    _save_png(p, pixels, 2, 2)

    src = load_image(p)
    assert (src.width, src.height) == (2, 2)
    assert src.pixel(0, 0) == (255, 0, 0)
    assert src.pixel(1, 0) == (0, 255, 0)
    assert src.pixel(0, 1) == (0, 0, 255)
    assert src.pixel(1, 1) == (128, 128, 128)  # PNG is lossless → exact match


def test_alpha_is_stripped_not_composited(tmp_path: Path):
    p = tmp_path / "rgba.png"
    _save_png(p, [(200, 100, 50, 0), (1, 2, 3, 255)], 2, 1, mode="RGBA")
    src = load_image(p)
    assert len(src.data) == 2 * 1 * 3
    assert src.pixel(0, 0) == (200, 100, 50)
    assert src.pixel(1, 0) == (1, 2, 3)


def test_grayscale_and_palette_expand_to_rgb(tmp_path: Path):
    gray = tmp_path / "gray.png"
    _save_png(gray, [0, 77, 255], 3, 1, mode="L")
    src = load_image(gray)
    assert [src.pixel(x, 0) for x in range(3)] == [(0, 0, 0), (77, 77, 77), (255, 255, 255)]

    pal = tmp_path / "pal.png"
    im = Image.new("P", (2, 1))
    im.putpalette([10, 20, 30, 250, 0, 0] + [0] * (256 * 3 - 6))
    im.putdata([0, 1])
    im.save(pal, "PNG")
    src = load_image(pal)
    assert src.pixel(0, 0) == (10, 20, 30)
    assert src.pixel(1, 0) == (250, 0, 0)


def test_sixteen_bit_gray_keeps_high_byte(tmp_path: Path):
    p = tmp_path / "gray16.png"
    im = Image.new("I", (2, 1))
    im.putdata([0x1234, 0xFF00])
    im.save(p, "PNG")
    src = load_image(p)
    assert src.pixel(0, 0)[0] in (0x12, 0x13)
    assert src.pixel(1, 0) == (255, 255, 255)


def test_load_jpeg(tmp_path: Path):
    p = tmp_path / "photo.JPEG"
    Image.new("RGB", (4, 3), (255, 255, 255)).save(p, "JPEG", quality=95)
    src = load_image(p)
    assert (src.width, src.height) == (4, 3)
    r, g, b = src.pixel(3, 2)
    assert min(r, g, b) >= 250


def test_decoder_for_extension():
    assert isinstance(decoder_for("a.png"), PngDecoder)
    assert isinstance(decoder_for("a.PNG"), PngDecoder)
    assert isinstance(decoder_for("a.jpg"), JpegDecoder)
    assert isinstance(decoder_for("dir/a.Jpeg"), JpegDecoder)


@pytest.mark.parametrize("name", ["a.gif", "a.bmp", "noext", "a.png.txt"])
def test_unsupported_extension_raises_before_reading(name):
    # file does not exist: the extension check must come first
    with pytest.raises(UnsupportedFormatError):
        load_image(name)


def test_missing_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_image(tmp_path / "nope.png")


def test_bad_file(tmp_path: Path):
    p = tmp_path / "bad.jpg"
    p.write_bytes(b"not an image")
    with pytest.raises(DecodeError):
        load_image(p)


def test_format_mismatch_is_decode_error(tmp_path: Path):
    p = tmp_path / "really_a_png.jpg"
    _save_png(p, [(1, 2, 3)], 1, 1)
    with pytest.raises(DecodeError):
        load_image(p)


def test_sniff_ignores_extension(tmp_path: Path):
    p = tmp_path / "really_a_png.jpg"
    _save_png(p, [(1, 2, 3)], 1, 1)
    assert isinstance(sniff_decoder(p), PngDecoder)
    assert load_image(p, sniff=True).pixel(0, 0) == (1, 2, 3)

    q = tmp_path / "text.png"
    q.write_bytes(b"hello world")
    with pytest.raises(UnsupportedFormatError):
        load_image(q, sniff=True)


def test_pixel_source_validates_buffer():
    with pytest.raises(ValueError):
        PixelSource(2, 2, b"\x00" * 11)
    with pytest.raises(ValueError):
        PixelSource(0, 1, b"")
    src = PixelSource.from_pixels(1, 2, [(1, 2, 3), (4, 5, 6)])
    assert src.pixel(0, 1) == (4, 5, 6)


def test_sniff_unreadable_path_is_decode_error(tmp_path: Path):
    d = tmp_path / "folder.png"
    d.mkdir()
    with pytest.raises(DecodeError):
        load_image(d, sniff=True)
