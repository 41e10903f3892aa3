"""Sample gallery CLI commands."""

from __future__ import annotations

import argparse
import logging

import config
from classifier import load_classifier
from recognize import NO_RESULT, RecognitionContext, classify_samples
from sources import list_samples

from .options import add_model_args, add_preprocess_args, preprocess_config_from_args

logger = logging.getLogger(__name__)


def add_samples_subparser(subparsers: argparse._SubParsersAction) -> None:
    samples_parser = subparsers.add_parser(
        "samples",
        help="List (and optionally classify) the sample photos of a directory",
    )
    samples_parser.add_argument(
        "directory",
        help=f"Directory holding {config.SAMPLE_EXTENSION} sample photos",
    )
    samples_parser.add_argument(
        "--limit", "-n",
        type=int,
        default=config.MAX_SAMPLES,
        help=f"Maximum number of samples (default: {config.MAX_SAMPLES})",
    )
    samples_parser.add_argument(
        "--classify",
        action="store_true",
        help="Classify every sample",
    )
    add_model_args(samples_parser)
    add_preprocess_args(samples_parser)
    samples_parser.set_defaults(_cmd=cmd_samples)


def _thumbnail_size(entry) -> str:
    height, width = entry.thumbnail.shape[:2]
    return f"{width}x{height}"


def cmd_samples(args: argparse.Namespace) -> int:
    if not args.classify:
        try:
            entries = list_samples(args.directory, limit=args.limit)
        except ValueError as exc:
            logger.error("%s", exc)
            return 1
        for entry in entries:
            print(f"{entry.label}   thumbnail {_thumbnail_size(entry)}")
        return 0

    try:
        preprocess_config = preprocess_config_from_args(args)
    except ValueError as exc:
        logger.error("%s", exc)
        return 1

    with load_classifier(args.model, args.backend) as classifier:
        context = RecognitionContext(
            classifier=classifier,
            preprocess_config=preprocess_config,
            artifact_dir=args.artifact_dir,
        )
        try:
            classified = classify_samples(args.directory, context, limit=args.limit)
        except ValueError as exc:
            logger.error("%s", exc)
            return 1

    for entry, result in classified:
        text = result.classification.format() if result.classification else NO_RESULT
        print(f"{entry.label}   thumbnail {_thumbnail_size(entry)}   {text}")
    return 0
