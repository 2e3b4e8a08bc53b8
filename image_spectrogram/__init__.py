"""Turn images into sound: each column becomes a burst of sine tones."""

from image_spectrogram.composer import image_to_wav, write_spectrogram
from image_spectrogram.conversion import PixelSource, load_image

__all__ = ["image_to_wav", "write_spectrogram", "PixelSource", "load_image"]
