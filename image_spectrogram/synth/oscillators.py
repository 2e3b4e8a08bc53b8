# oscillators.py
"""
Additive sine synthesis for one image column.

A column's tones are summed into a fixed-length block of PCM16 samples:
  value(t) = mean_i( sin(2*pi*f_i*t) * 10 / 10^a_i )
Silence (no tones) is an all-zero block.
"""

import math
from typing import Iterable, List

# ===== EDIT HERE (fixed audio format) =====
SAMPLE_RATE = 44100
COLUMN_DURATION = 0.2   # seconds of audio per image column
TONE_GAIN = 10.0        # per-tone peak before attenuation
FULL_SCALE = 32767.0
INT16_MIN = -32768
INT16_MAX = 32767


def block_length(duration: float = COLUMN_DURATION,
                 sample_rate: int = SAMPLE_RATE) -> int:
    return int(duration * sample_rate)


def clip16(x: int) -> int:
    return INT16_MIN if x < INT16_MIN else INT16_MAX if x > INT16_MAX else x


def silence_block() -> List[int]:
    return [0] * block_length()


# ===== OSCILLATOR BANK =====
def additive_sine_block(tones: Iterable) -> List[int]:
    """
    Render one column's tones into exactly block_length() samples.

    `tones` is any sequence of (frequency, attenuation) pairs (Tone objects unpack
    the same way). Loud or dense columns that overshoot full scale are clamped to
    the int16 range instead of wrapping around.
    """
    partials = [(2 * math.pi * freq, TONE_GAIN / 10.0 ** att) for freq, att in tones]
    n = len(partials)
    if n == 0:
        return silence_block()

    samples = []
    for pos in range(block_length()):
        t = pos / SAMPLE_RATE
        value = 0.0
        for omega, amp in partials:
            value += math.sin(omega * t) * amp
        value /= n
        samples.append(clip16(int(value * FULL_SCALE)))
    return samples
