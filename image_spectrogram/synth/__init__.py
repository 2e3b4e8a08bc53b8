from image_spectrogram.synth.oscillators import (
    SAMPLE_RATE,
    COLUMN_DURATION,
    additive_sine_block,
    block_length,
    clip16,
    silence_block,
)

__all__ = [
    "SAMPLE_RATE",
    "COLUMN_DURATION",
    "additive_sine_block",
    "block_length",
    "clip16",
    "silence_block",
]
