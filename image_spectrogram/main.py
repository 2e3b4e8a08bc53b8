# main.py
"""
Command-line entry point.

  image-spectrogram input.png [output.wav] [--workers N] [--sniff] [--quiet]

Flow:
  conversion.load_image -> composer.write_spectrogram -> print output path
"""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from image_spectrogram.composer import default_output_path, print_progress, write_spectrogram
from image_spectrogram.conversion import load_image


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="image-spectrogram",
        description="Convert a PNG or JPEG image into a spectrogram-like WAV file.",
    )
    parser.add_argument("input_image", help="Input PNG/JPEG path")
    parser.add_argument("output_wav", nargs="?", default=None,
                        help="Output WAV path (default: <input_image>.wav)")
    parser.add_argument("--workers", type=int, default=1,
                        help="Threads used to render columns (default: 1)")
    parser.add_argument("--sniff", action="store_true",
                        help="Detect PNG/JPEG from file content instead of extension")
    parser.add_argument("--quiet", action="store_true", help="Do not print progress")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.workers < 1:
        print("workers must be >= 1", file=sys.stderr)
        return 1

    # decode fully before the output file is created
    try:
        source = load_image(args.input_image, sniff=args.sniff)
    except FileNotFoundError as e:
        print(f"Failed to read image: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        # UnsupportedFormatError / DecodeError
        print(str(e), file=sys.stderr)
        return 1

    out_path = args.output_wav or default_output_path(args.input_image)
    try:
        out_path = write_spectrogram(
            source,
            out_path,
            workers=args.workers,
            progress=None if args.quiet else print_progress,
        )
    except OSError as e:
        print(f"Failed to write {out_path}: {e}", file=sys.stderr)
        return 1

    print(f"WAV file written: {out_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
