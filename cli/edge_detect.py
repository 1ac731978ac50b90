#!/usr/bin/env python3
"""
Sobel edge detection from the command line.

    sobel-edges [-h] [-o OUT] file

Reads any image Pillow can decode, writes the edge map as a JPEG.
"""
from __future__ import annotations
import argparse
import logging
import os
import sys

from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from pipeline.edge_pipeline import DEFAULT_OUTPUT_PATH, detect_edges_in_file

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s'


class _ArgumentParser(argparse.ArgumentParser):
    """Usage errors exit with 1, after printing the full help."""

    def error(self, message):
        print(f"Error: {message}\n", file=sys.stderr)
        self.print_help(sys.stderr)
        sys.exit(1)


def build_parser() -> argparse.ArgumentParser:
    ap = _ArgumentParser(prog="sobel-edges",
                         description="Grayscale + Sobel edge detection, written as JPEG.")
    ap.add_argument("file", nargs="*", help="input image (JPEG, PNG, ...)")
    ap.add_argument("-o", "--out", default=DEFAULT_OUTPUT_PATH,
                    help="Set output path (default: %(default)s)")
    return ap


def main(argv: list[str] | None = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)

    if len(args.file) != 1:
        print("Error: Provide one input file\n", file=sys.stderr)
        ap.print_help(sys.stderr)
        return 1

    # --- Centralized Logging Configuration ---
    level_name = os.getenv("SOBEL_LOG_LEVEL", "INFO").strip().upper()
    level = logging.getLevelName(level_name)
    logging.basicConfig(
        level=level if isinstance(level, int) else logging.INFO,
        format=LOG_FORMAT,
        datefmt='%H:%M:%S'
    )
    if not isinstance(level, int):
        logger.warning(f"Unknown SOBEL_LOG_LEVEL {level_name!r}, using INFO")

    try:
        detect_edges_in_file(args.file[0], args.out)
    except (OSError, ValueError) as err:
        logger.debug("Edge detection failed", exc_info=True)
        print(f"Error: {err}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
