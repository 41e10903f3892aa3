"""
Sample gallery: bundled example photos with thumbnails.

Each entry carries the full image to classify and a small thumbnail to show
next to its label, as plain data rather than callbacks.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import numpy as np

import config
from preprocessing import InvalidImageError, scale_to_max_length

from .images import load_image
from .local import scan_local_images

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SampleEntry:
    """One sample photo.

    Attributes:
        label: Display name (file name).
        thumbnail: Image scaled so its longer side is THUMBNAIL_MAX_LENGTH.
        image: Full upright RGB image, the one that gets classified.
        path: File the sample was loaded from.
    """

    label: str
    thumbnail: np.ndarray
    image: np.ndarray
    path: Path


def make_thumbnail(image: np.ndarray, max_length: int = config.THUMBNAIL_MAX_LENGTH) -> np.ndarray:
    """Scale an image down so its longer side is max_length (smooth resampling)."""
    thumbnail, _ = scale_to_max_length(image, max_length, antialiasing=True)
    return thumbnail


def list_samples(
    directory: str | Path,
    limit: int | None = config.MAX_SAMPLES,
    extension: str = config.SAMPLE_EXTENSION,
) -> list[SampleEntry]:
    """Load the sample photos of a directory in file name order.

    Unreadable files are logged and skipped.

    Raises:
        ValueError: If directory is not a directory.
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise ValueError(f"{directory} is not a directory")

    entries: list[SampleEntry] = []
    for path in scan_local_images(directory, extensions={extension.lower()}):
        if limit is not None and len(entries) >= limit:
            break
        try:
            image = load_image(path)
        except InvalidImageError as exc:
            logger.warning("Skipping sample %s: %s", path.name, exc)
            continue
        entries.append(
            SampleEntry(label=path.name, thumbnail=make_thumbnail(image), image=image, path=path)
        )

    logger.info("Loaded %d samples from %s", len(entries), directory)
    return entries
