# tones.py
"""
Column tone extraction.

Each image column is scanned top to bottom. Every pixel that carries
"signal" (strong red, or green and blue together) becomes one Tone:
  - row position   -> frequency (top row is highest pitch)
  - brightness     -> attenuation (brighter is louder)
"""

from __future__ import annotations

import math
from typing import List

# ===== EDIT HERE (tone mapping constants) =====
MAX_FREQUENCY_HZ = 22000.0   # row 0 lands just below this
MAX_ATTENUATION = 4.25       # black pixel; white pixel -> 0.0
BRIGHTNESS_SCALE = 768.0     # 256 * 3 channels
SIGNAL_THRESHOLD = 10        # channel values at or below this count as dark


class Tone:
    def __init__(self, frequency: float, attenuation: float):
        self.frequency = frequency
        self.attenuation = attenuation

    def __repr__(self):
        return f"Tone(frequency={self.frequency}, attenuation={self.attenuation})"

    def __eq__(self, other):
        if not isinstance(other, Tone):
            return NotImplemented
        return (
            math.isclose(self.frequency, other.frequency) and math.isclose(self.attenuation, other.attenuation)
        )

    def __iter__(self):
        # allows `freq, att = tone`
        yield self.frequency
        yield self.attenuation


def is_signal(r: int, g: int, b: int) -> bool:
    return r > SIGNAL_THRESHOLD or (g > SIGNAL_THRESHOLD and b > SIGNAL_THRESHOLD)


def attenuation_for(r: int, g: int, b: int) -> float:
    """Map total brightness 0..765 onto 4.25..0 (brighter -> lower attenuation)."""
    return MAX_ATTENUATION - MAX_ATTENUATION * (r + g + b) / BRIGHTNESS_SCALE


def frequency_for_row(y: int, height: int) -> float:
    """
    Linear pitch ramp. The +1 offsets keep both ends away from 0 Hz and 22 kHz:
      y=0         -> floor(22000 * height / (height + 1))
      y=height-1  -> floor(22000 / (height + 1))
    """
    return float(math.floor(MAX_FREQUENCY_HZ - ((y + 1) / (height + 1)) * MAX_FREQUENCY_HZ))


def extract_column_tones(source, x: int) -> List[Tone]:
    """
    Build the tone set for column `x` of a PixelSource, in row order.
    A column without any qualifying pixel returns an empty list (silence).
    """
    if not (0 <= x < source.width):
        raise IndexError(f"column {x} out of range for width {source.width}")

    tones: List[Tone] = []
    height = source.height
    for y in range(height):
        r, g, b = source.pixel(x, y)
        if not is_signal(r, g, b):
            continue
        tones.append(Tone(frequency_for_row(y, height), attenuation_for(r, g, b)))
    return tones
