"""
Image -> WAV driver.

Flow:
  load_image -> for each column left to right:
      extract_column_tones -> additive_sine_block -> WavStreamWriter.write_block
  -> finalize (backpatch RIFF sizes)

Columns are independent, so rendering can fan out over a thread pool, but
blocks are always written in column order: the data chunk is append-only and
column order is time order.
"""

from __future__ import annotations

import sys
from collections import deque
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Iterator, List, Optional

from image_spectrogram.conversion import PixelSource, load_image
from image_spectrogram.synth import additive_sine_block, block_length
from image_spectrogram.tones import extract_column_tones
from image_spectrogram.wav_writer import HEADER_SIZE, BYTES_PER_SAMPLE, WavStreamWriter

Samples = List[int]
ProgressFn = Callable[[int, int], None]

# ===== EDIT HERE (driver defaults) =====
OUTPUT_SUFFIX = ".wav"
IN_FLIGHT_PER_WORKER = 4   # bounded look-ahead when rendering on a pool


def default_output_path(image_path: str | Path) -> Path:
    # appended, not swapped: photo.png -> photo.png.wav
    return Path(str(image_path) + OUTPUT_SUFFIX)


def expected_wav_size(width: int) -> int:
    return HEADER_SIZE + width * block_length() * BYTES_PER_SAMPLE


def render_column(source: PixelSource, x: int) -> Samples:
    return additive_sine_block(extract_column_tones(source, x))


def iter_column_blocks(source: PixelSource, workers: int = 1) -> Iterator[Samples]:
    """
    Yield one PCM block per column, strictly in column order.

    With workers > 1 at most workers * IN_FLIGHT_PER_WORKER columns are pending
    at once, so memory stays bounded for very wide images.
    """
    if workers <= 1:
        for x in range(source.width):
            yield render_column(source, x)
        return

    window = workers * IN_FLIGHT_PER_WORKER
    pool = ThreadPoolExecutor(max_workers=workers)
    try:
        pending = deque()
        next_x = 0
        while next_x < source.width or pending:
            while next_x < source.width and len(pending) < window:
                pending.append(pool.submit(render_column, source, next_x))
                next_x += 1
            yield pending.popleft().result()
    finally:
        # a consumer that stops early must not wait on queued columns
        pool.shutdown(wait=False, cancel_futures=True)


def print_progress(done: int, total: int) -> None:
    if done >= total:
        print("\r100%", file=sys.stderr)
    else:
        print(f"\r{int(100.0 * done / total):3d}%", end="", file=sys.stderr, flush=True)


def write_spectrogram(
    source: PixelSource,
    output_path: str | Path,
    *,
    workers: int = 1,
    progress: Optional[ProgressFn] = None,
) -> Path:
    """
    Stream every column of `source` into a WAV file at `output_path`.
    On any error the partial file is removed and the error propagates.
    """
    total = source.width
    with WavStreamWriter(output_path) as writer:
        for x, block in enumerate(iter_column_blocks(source, workers)):
            if progress is not None:
                progress(x, total)
            writer.write_block(block)
        if progress is not None:
            progress(total, total)
    return writer.path


def image_to_wav(
    image_path: str | Path,
    output_path: Optional[str | Path] = None,
    *,
    workers: int = 1,
    progress: Optional[ProgressFn] = None,
    sniff: bool = False,
) -> Path:
    """
    Convert one image to a spectrogram WAV.

    The image is fully decoded before the output file is created, so an
    unsupported or corrupt input never leaves an output file behind.
    """
    if output_path is None:
        output_path = default_output_path(image_path)
    source = load_image(image_path, sniff=sniff)
    return write_spectrogram(source, output_path, workers=workers, progress=progress)
