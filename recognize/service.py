"""Recognition service entrypoints for reuse across the CLI and other hosts."""

from __future__ import annotations

import logging
from pathlib import Path

from tqdm import tqdm

import config
from preprocessing import InvalidImageError
from sources import SampleEntry, list_samples, scan_local_images

from .pipeline import RecognitionContext, RecognitionResult, classify_image, classify_source

logger = logging.getLogger(__name__)


def _empty_stats() -> dict:
    return {
        "images_found": 0,
        "images_classified": 0,
        "images_failed": 0,
        "no_result": 0,
        "eights": 0,
        "zeros": 0,
    }


def _count(stats: dict, result: RecognitionResult) -> None:
    classification = result.classification
    if classification is None:
        stats["no_result"] += 1
        return
    stats["images_classified"] += 1
    if classification.symbol == config.POSITIVE_SYMBOL:
        stats["eights"] += 1
    else:
        stats["zeros"] += 1


def run_recognition(
    source: str | Path,
    context: RecognitionContext,
    limit: int | None = None,
    progress: bool = True,
) -> tuple[list[RecognitionResult], dict]:
    """Classify an image file or every image in a directory.

    Images that cannot be decoded are logged and counted as failed.

    Returns:
        Tuple of (results in file order, stats dict).

    Raises:
        ValueError: If source is not an image file or directory.
    """
    image_files = scan_local_images(source)
    stats = _empty_stats()
    stats["images_found"] = len(image_files)
    logger.info("Found %s images in %s", len(image_files), source)

    if limit is not None:
        image_files = image_files[:limit]
        logger.info("Processing limited to %s images", limit)

    results: list[RecognitionResult] = []
    for path in tqdm(image_files, desc="Classifying", disable=not progress):
        try:
            result = classify_source(path, context)
        except InvalidImageError as exc:
            logger.warning("Skipping %s: %s", path.name, exc)
            stats["images_failed"] += 1
            continue
        _count(stats, result)
        results.append(result)

    return results, stats


def classify_samples(
    directory: str | Path,
    context: RecognitionContext,
    limit: int | None = config.MAX_SAMPLES,
) -> list[tuple[SampleEntry, RecognitionResult]]:
    """Classify every sample of the gallery in display order."""
    return [
        (entry, classify_image(entry.image, context, label=entry.label))
        for entry in list_samples(directory, limit=limit)
    ]
