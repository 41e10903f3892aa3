"""Options shared by the recognition commands."""

from __future__ import annotations

import argparse
from pathlib import Path

import config
from classifier import ORACLE_CHOICES
from preprocessing import PreprocessConfig


def add_model_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--model",
        type=Path,
        default=None,
        help=f"Model file (default: {config.MODEL_PATH.name} in {config.MODELS_DIR})",
    )
    parser.add_argument(
        "--backend",
        choices=ORACLE_CHOICES,
        default=config.ORACLE_BACKEND,
        help=f"Model runtime (default: {config.ORACLE_BACKEND})",
    )


def add_preprocess_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--scan-order",
        choices=config.PIXEL_SCAN_ORDERS,
        default=config.PIXEL_SCAN_ORDER,
        help=f"Pixel order of the model input (default: {config.PIXEL_SCAN_ORDER})",
    )
    parser.add_argument(
        "--no-center",
        action="store_true",
        help="Skip recentering the digit on the canvas",
    )
    parser.add_argument(
        "--no-antialiasing",
        action="store_true",
        help="Use nearest-neighbour instead of smooth scaling",
    )
    parser.add_argument(
        "--artifact-dir",
        type=Path,
        default=None,
        help="Save every intermediate stage as PNG under this directory",
    )


def preprocess_config_from_args(args: argparse.Namespace) -> PreprocessConfig:
    """Build and validate a PreprocessConfig from parsed arguments."""
    preprocess_config = PreprocessConfig(
        antialiasing=not args.no_antialiasing,
        center_enabled=not args.no_center,
        scan_order=args.scan_order,
    )
    preprocess_config.validate()
    return preprocess_config
