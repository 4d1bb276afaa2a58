#!/usr/bin/env python3
"""
Command-line front end:

    photo-variants source.jpg \\
        --variant large:1200x1200 \\
        --variant small:800x800 \\
        --variant thumb:400x400:crop \\
        --quality 70

Prints one JSON object per generated variant, largest first.
"""

import argparse
import sys
from pathlib import Path

from pydantic import ValidationError

from photo_variants.config import QUALITY, logger
from photo_variants.errors import ImageProcessingError
from photo_variants.processor import ImageProcessor
from photo_variants.schemas import ImageInfo


def parse_variant(value: str) -> ImageInfo:
    """``KIND:WIDTHxHEIGHT[:crop]`` → :class:`ImageInfo`."""
    parts = value.split(":")
    if len(parts) not in (2, 3) or (len(parts) == 3 and parts[2] != "crop"):
        raise argparse.ArgumentTypeError(f"expected KIND:WIDTHxHEIGHT[:crop], got {value!r}")
    kind, size = parts[0], parts[1]
    try:
        width, height = (int(n) for n in size.lower().split("x"))
        return ImageInfo(kind=kind, width=width, height=height, crop=len(parts) == 3)
    except (ValueError, ValidationError) as e:
        raise argparse.ArgumentTypeError(f"invalid variant {value!r}: {e}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="photo-variants",
        description="Resize a photo into named JPEG variants.",
    )
    parser.add_argument("source", type=Path, help="Source image file")
    parser.add_argument("--variant", "-v", dest="variants", type=parse_variant, action="append",
                        required=True, help="KIND:WIDTHxHEIGHT[:crop], may be repeated")
    parser.add_argument("--quality", "-q", type=int, default=QUALITY, help="JPEG quality (1-100)")
    parser.add_argument("--tmp-dir", type=Path, default=None, help="Root for work directories")
    return parser


def main(argv: list[str] | None = None) -> int:
    args      = build_parser().parse_args(argv)
    processor = ImageProcessor(tmp_dir=args.tmp_dir)

    try:
        with args.source.open("rb") as fh:
            results = processor.execute(fh, args.variants, args.quality)
    except (OSError, ImageProcessingError, ValueError) as e:
        logger.error("Failed to build variants for %s: %s", args.source, e)
        return 1

    for result in results:
        print(result.model_dump_json())
    return 0


if __name__ == "__main__":
    sys.exit(main())
