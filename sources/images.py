"""
Image decoding with EXIF orientation correction.

Camera photos are often stored sideways with an EXIF orientation tag telling
viewers how to turn them. The tag is applied here so the preprocessing
pipeline always sees the digit upright.
"""

from __future__ import annotations

import io
import logging
from pathlib import Path

import numpy as np
from PIL import ExifTags, Image

from preprocessing import InvalidImageError, rotate_clockwise

logger = logging.getLogger(__name__)

# EXIF orientation value -> clockwise rotation in degrees
EXIF_ROTATIONS = {
    3: 180,
    6: 90,
    8: 270,
}

ImageSource = str | Path | bytes


def get_exif_rotation(image: Image.Image) -> int:
    """Return the clockwise rotation (0, 90, 180 or 270) stored in EXIF.

    Missing or unreadable metadata means no rotation.
    """
    try:
        orientation = image.getexif().get(ExifTags.Base.Orientation)
    except (OSError, ValueError, SyntaxError) as exc:
        logger.warning("Cannot read EXIF orientation: %s", exc)
        return 0
    return EXIF_ROTATIONS.get(orientation, 0)


def _describe(source: ImageSource) -> str:
    if isinstance(source, bytes):
        return f"<{len(source)} bytes>"
    return str(source)


def decode_image(source: ImageSource) -> tuple[np.ndarray, int]:
    """Decode an image file or bytes into an RGB array, without rotating it.

    Returns:
        Tuple of (RGB uint8 array of shape (H, W, 3), EXIF rotation in degrees).

    Raises:
        InvalidImageError: If the source cannot be opened or decoded.
    """
    if not isinstance(source, (str, Path, bytes)):
        raise TypeError(f"Expected path or bytes, got {type(source).__name__}")

    try:
        handle = io.BytesIO(source) if isinstance(source, bytes) else Path(source)
        with Image.open(handle) as image:
            image.load()
            rotation = get_exif_rotation(image)
            if image.mode != "RGB":
                image = image.convert("RGB")
            pixels = np.array(image)
    except OSError as exc:
        raise InvalidImageError(f"Cannot decode image {_describe(source)}: {exc}") from exc

    if pixels.size == 0:
        raise InvalidImageError(f"Image {_describe(source)} has no pixels")
    return pixels, rotation


def load_image(source: ImageSource) -> np.ndarray:
    """Decode an image and turn it upright according to its EXIF orientation.

    Args:
        source: Path to an image file or the raw encoded bytes.

    Returns:
        Upright RGB image as (H, W, 3) uint8 array.

    Raises:
        InvalidImageError: If the source cannot be opened or decoded.
    """
    pixels, rotation = decode_image(source)
    if rotation:
        logger.debug("Rotating %s by %d degrees", _describe(source), rotation)
        pixels = rotate_clockwise(pixels, rotation)
    return pixels
