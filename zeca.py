#!/usr/bin/env python3
"""
Unified CLI for the 8-vs-0 digit recognizer.

Usage:
    zeca classify <path>              # Classify an image or a directory of images
    zeca classify <path> --artifact-dir out/
                                      # ...and save every preprocessing stage
    zeca samples <dir>                # List sample photos with thumbnail sizes
    zeca samples <dir> --classify     # Classify every sample photo
    zeca preprocess <image> -o c.png  # Write the 32x32 canvas of an image
"""

import argparse
import logging
import sys

from logging_utils import configure_logging, add_logging_args
from cli.classify import add_classify_subparser
from cli.samples import add_samples_subparser
from cli.preprocess import add_preprocess_subparser

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="zeca",
        description="ZECA - recognize a handwritten 8 or 0 in a photo",
    )
    add_logging_args(parser)
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    add_classify_subparser(subparsers)
    add_samples_subparser(subparsers)
    add_preprocess_subparser(subparsers)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level, args.verbose, args.quiet)

    cmd = getattr(args, "_cmd", None)
    if args.command is None or cmd is None:
        parser.print_help()
        return 1
    return cmd(args)


if __name__ == "__main__":
    sys.exit(main())
