"""Classify command CLI parsing and control flow."""

from __future__ import annotations

import argparse
import logging

from classifier import load_classifier
from recognize import RecognitionContext, run_recognition

from .options import add_model_args, add_preprocess_args, preprocess_config_from_args

logger = logging.getLogger(__name__)


def add_classify_subparser(subparsers: argparse._SubParsersAction) -> None:
    classify_parser = subparsers.add_parser(
        "classify",
        help="Classify an image file or every image in a directory",
    )
    classify_parser.add_argument(
        "source",
        help="Image file or directory",
    )
    classify_parser.add_argument(
        "--limit", "-n",
        type=int,
        default=None,
        help="Maximum number of images to process (default: all)",
    )
    classify_parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Hide the progress bar",
    )
    add_model_args(classify_parser)
    add_preprocess_args(classify_parser)
    classify_parser.set_defaults(_cmd=cmd_classify)


def cmd_classify(args: argparse.Namespace) -> int:
    try:
        preprocess_config = preprocess_config_from_args(args)
    except ValueError as exc:
        logger.error("%s", exc)
        return 1

    with load_classifier(args.model, args.backend) as classifier:
        if not classifier.available:
            logger.warning("Classifier unavailable: images are preprocessed but not classified")
        context = RecognitionContext(
            classifier=classifier,
            preprocess_config=preprocess_config,
            artifact_dir=args.artifact_dir,
        )
        try:
            results, stats = run_recognition(
                args.source,
                context,
                limit=args.limit,
                progress=not args.no_progress,
            )
        except ValueError as exc:
            logger.error("%s", exc)
            return 1

    for result in results:
        print(result.summary())

    logger.info("Images found:      %s", stats["images_found"])
    logger.info("Images classified: %s", stats["images_classified"])
    logger.info("Images failed:     %s", stats["images_failed"])
    logger.info("Without result:    %s", stats["no_result"])
    logger.info("Eights / zeros:    %s / %s", stats["eights"], stats["zeros"])
    return 0
