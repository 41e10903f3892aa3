"""
Global mean thresholding.

The threshold is computed once over the whole image and then applied to
every pixel, so a stroke is black or white depending only on how it compares
with the average brightness of the photo.
"""

import numpy as np

from config import BLACK, WHITE

from .errors import InvalidImageError
from .normalization import round_half_up, validate_image


def _require_grayscale(img: np.ndarray, operation: str) -> None:
    validate_image(img)
    if img.ndim != 2:
        raise InvalidImageError(
            f"{operation} requires grayscale input (2D array), "
            f"got {img.ndim}D array with shape {img.shape}"
        )


def find_threshold(gray: np.ndarray) -> int:
    """Return the mean intensity of a grayscale image, rounded half up.

    Args:
        gray: Monochrome image as 2D array.

    Returns:
        Threshold in [0, 255].

    Raises:
        InvalidImageError: If gray is not a non-empty 2D array.
    """
    _require_grayscale(gray, "find_threshold")
    total = int(gray.sum(dtype=np.int64))
    return round_half_up(total / gray.size)


def apply_threshold(gray: np.ndarray, threshold: int) -> np.ndarray:
    """Map pixels darker than threshold to black and all others to white.

    Pure function: returns a new array without modifying the input.

    Args:
        gray: Monochrome image as 2D array.
        threshold: Value in [0, 255]; pixels equal to it become white.

    Returns:
        Binary image (only BLACK and WHITE values), same shape, uint8.
    """
    _require_grayscale(gray, "apply_threshold")
    if not 0 <= threshold <= 255:
        raise ValueError(f"threshold must be in [0, 255], got {threshold}")
    return np.where(gray < threshold, BLACK, WHITE).astype(np.uint8)


def binarize(gray: np.ndarray) -> tuple[np.ndarray, int]:
    """Threshold an image at its own mean intensity.

    Returns:
        Tuple of (binary image, threshold used).
    """
    threshold = find_threshold(gray)
    return apply_threshold(gray, threshold), threshold
