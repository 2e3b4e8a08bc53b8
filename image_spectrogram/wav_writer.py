# wav_writer.py
"""
Streaming mono PCM16 WAV writer.

The RIFF size fields sit in front of the data they describe, so the header is
written twice:
  open()        -> 44-byte header with data_size = 0 (placeholder)
  write_block() -> raw int16 LE samples appended, one column at a time
  finalize()    -> seek back and patch chunk_size (offset 4) and data_size (offset 40)

Used as a context manager the writer finalizes on success and deletes the
partial file if anything raises.
"""

from __future__ import annotations

import struct
import sys
from array import array
from pathlib import Path
from typing import Iterable, NamedTuple

from image_spectrogram.synth.oscillators import SAMPLE_RATE

# ===== WAV FORMAT (fixed) =====
NUM_CHANNELS = 1
BITS_PER_SAMPLE = 16
BYTES_PER_SAMPLE = BITS_PER_SAMPLE // 8
HEADER_SIZE = 44
PCM_FORMAT = 1
FMT_CHUNK_SIZE = 16
CHUNK_SIZE_OFFSET = 4
DATA_SIZE_OFFSET = 40

_HEADER = struct.Struct("<4sI4s4sIHHIIHH4sI")


class WavHeader(NamedTuple):
    chunk_size: int
    audio_format: int
    num_channels: int
    sample_rate: int
    byte_rate: int
    block_align: int
    bits_per_sample: int
    data_size: int


def build_header(data_size: int) -> bytes:
    byte_rate = SAMPLE_RATE * NUM_CHANNELS * BYTES_PER_SAMPLE
    block_align = NUM_CHANNELS * BYTES_PER_SAMPLE
    return _HEADER.pack(
        b"RIFF", 36 + data_size, b"WAVE",
        b"fmt ", FMT_CHUNK_SIZE, PCM_FORMAT, NUM_CHANNELS, SAMPLE_RATE,
        byte_rate, block_align, BITS_PER_SAMPLE,
        b"data", data_size,
    )


def read_wav_header(path: str | Path) -> WavHeader:
    """Parse the 44-byte header written by WavStreamWriter."""
    with open(path, "rb") as f:
        raw = f.read(HEADER_SIZE)
    if len(raw) < HEADER_SIZE:
        raise ValueError(f"File too short for a WAV header: {Path(path).name}")
    (riff, chunk_size, wave_tag, fmt_tag, fmt_size, audio_format, channels, rate,
     byte_rate, block_align, bits, data_tag, data_size) = _HEADER.unpack(raw)
    if riff != b"RIFF" or wave_tag != b"WAVE" or fmt_tag != b"fmt " or data_tag != b"data":
        raise ValueError(f"Not a canonical RIFF/WAVE PCM file: {Path(path).name}")
    if fmt_size != FMT_CHUNK_SIZE:
        raise ValueError(f"Unexpected fmt chunk size {fmt_size}")
    return WavHeader(chunk_size, audio_format, channels, rate, byte_rate, block_align, bits, data_size)


def _pcm16_bytes(samples: Iterable[int]) -> bytes:
    out = array("h", samples)
    if sys.byteorder == "big":
        out.byteswap()  # WAV is little-endian
    return out.tobytes()


class WavStreamWriter:
    def __init__(self, path: str | Path):
        self.path = Path(path)
        self.total_samples = 0
        self._f = None

    def __repr__(self):
        return f"WavStreamWriter(path={str(self.path)!r}, total_samples={self.total_samples})"

    @property
    def closed(self) -> bool:
        return self._f is None

    def open(self) -> "WavStreamWriter":
        if self._f is not None:
            raise ValueError(f"{self.path.name} is already open")
        # parent directory is not created: a missing directory is an output error
        self._f = open(self.path, "wb")
        self.total_samples = 0
        try:
            self._f.write(build_header(0))  # placeholder, patched in finalize()
        except OSError:
            self.abort()
            raise
        return self

    def write_block(self, samples) -> None:
        if self._f is None:
            raise ValueError("write to a WAV stream that is not open")
        self._f.write(_pcm16_bytes(samples))
        self.total_samples += len(samples)

    def finalize(self) -> Path:
        if self._f is None:
            raise ValueError("finalize on a WAV stream that is not open")
        data_size = self.total_samples * NUM_CHANNELS * BYTES_PER_SAMPLE
        f = self._f
        try:
            f.seek(CHUNK_SIZE_OFFSET)
            f.write(struct.pack("<I", 36 + data_size))
            f.seek(DATA_SIZE_OFFSET)
            f.write(struct.pack("<I", data_size))
            f.close()
        except OSError:
            self.abort()
            raise
        self._f = None
        return self.path

    def abort(self) -> None:
        """Close and remove the partial output file. No-op once finalized."""
        f, self._f = self._f, None
        if f is None:
            return
        f.close()
        self.path.unlink(missing_ok=True)

    def __enter__(self) -> "WavStreamWriter":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.finalize()
        else:
            self.abort()
