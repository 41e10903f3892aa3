"""Preprocess command: write the canvas the classifier would see."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from preprocessing import InvalidImageError, run_pipeline
from preprocessing.steps import save_image
from sources import load_image

from .options import add_preprocess_args, preprocess_config_from_args

logger = logging.getLogger(__name__)


def add_preprocess_subparser(subparsers: argparse._SubParsersAction) -> None:
    preprocess_parser = subparsers.add_parser(
        "preprocess",
        help="Write the black and white canvas of an image",
    )
    preprocess_parser.add_argument(
        "image",
        help="Image file",
    )
    preprocess_parser.add_argument(
        "--output", "-o",
        type=Path,
        required=True,
        help="Where to write the canvas (PNG)",
    )
    add_preprocess_args(preprocess_parser)
    preprocess_parser.set_defaults(_cmd=cmd_preprocess)


def cmd_preprocess(args: argparse.Namespace) -> int:
    try:
        preprocess_config = preprocess_config_from_args(args)
        result = run_pipeline(
            load_image(args.image),
            preprocess_config,
            artifact_dir=args.artifact_dir,
        )
    except (InvalidImageError, ValueError) as exc:
        logger.error("%s", exc)
        return 1

    try:
        save_image(result.processed, args.output)
    except OSError as exc:
        logger.error("%s", exc)
        return 1

    offset = result.center_offset
    print(f"Canvas:    {args.output}")
    print(f"Scale:     {result.scale_factor:.4f}")
    print(f"Threshold: {result.threshold}")
    print(f"Offset:    {f'dx={offset.dx} dy={offset.dy}' if offset else 'not centered'}")
    return 0
