"""
Pixel-level normalization: validation, desaturation, proportional scaling
and rotation.

None of these functions modify their input; each returns a new array.
"""

import math

import cv2
import numpy as np

from config import GRAYSCALE_WEIGHTS

from .errors import InvalidImageError


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up (0.5 -> 1, 2.5 -> 3).

    Python's round() rounds halves to even; thresholds and centers are
    defined with halves rounding up.
    """
    return int(math.floor(value + 0.5))


def validate_image(img: np.ndarray) -> None:
    """Check that img is a non-empty 2D or 3D numpy array.

    Raises:
        TypeError: If img is not a numpy array.
        InvalidImageError: If img has invalid dimensions or is empty.
    """
    if not isinstance(img, np.ndarray):
        raise TypeError(f"Expected numpy.ndarray, got {type(img).__name__}")

    if img.ndim < 2 or img.ndim > 3:
        raise InvalidImageError(
            f"Image must be 2D or 3D array, got {img.ndim}D array with shape {img.shape}"
        )

    if img.size == 0:
        raise InvalidImageError("Image array is empty")


def to_grayscale(img: np.ndarray) -> np.ndarray:
    """Desaturate an image to monochrome.

    The input array is left untouched.

    Applies a zero-saturation color matrix, so red, green and blue all end
    up with the same value; the result is stored as a single 2D channel.

    Args:
        img: Input image. Can be:
             - RGB (3 channels): Will be desaturated
             - RGBA (4 channels): Alpha channel is dropped, then desaturated
             - Grayscale (1 channel or 2D): Returns a uint8 copy

    Returns:
        Monochrome image as 2D uint8 array.

    Raises:
        TypeError: If img is not a numpy array.
        InvalidImageError: If input is not a valid image array.

    Examples:
        >>> rgb = np.full((4, 6, 3), (255, 0, 0), dtype=np.uint8)
        >>> gray = to_grayscale(rgb)
        >>> int(gray[0, 0])
        54
        >>> gray.shape
        (4, 6)
    """
    validate_image(img)

    if img.ndim == 2:
        result = img.copy()
    else:
        channels = img.shape[2]
        if channels == 1:
            result = img[:, :, 0].copy()
        elif channels in (3, 4):
            rgb = img[:, :, :3].astype(np.float64)
            luma = rgb @ np.asarray(GRAYSCALE_WEIGHTS, dtype=np.float64)
            result = np.floor(luma + 0.5)
        else:
            raise InvalidImageError(
                f"Unsupported number of channels: {channels}. "
                "Expected 1, 3 (RGB), or 4 (RGBA)."
            )

    if result.dtype != np.uint8:
        result = np.clip(result, 0, 255).astype(np.uint8)

    return result


def scale_to_max_length(
    img: np.ndarray,
    max_length: int,
    antialiasing: bool = True,
) -> tuple[np.ndarray, float]:
    """Resize image so its longer side equals max_length, preserving aspect ratio.

    The input array is left untouched.

    A 600x200 image with max_length=100 becomes 100x33 (200 / 6 = 33.33,
    truncated); a 200x600 image becomes 33x100.

    Args:
        img: Input image (2D grayscale or 3D color).
        max_length: Desired size of the longer side in pixels.
        antialiasing: If True the result is smooth (INTER_AREA when
                      shrinking, INTER_LINEAR when enlarging). If False the
                      result is pixelated (INTER_NEAREST).

    Returns:
        Tuple of:
        - Resized image with same dtype as input
        - Scale factor (original longer side / max_length)

    Raises:
        TypeError: If img is not a numpy array or max_length is not an int.
        ValueError: If max_length is not positive.
        InvalidImageError: If the image is invalid.

    Examples:
        >>> img = np.zeros((600, 200), dtype=np.uint8)
        >>> resized, scale = scale_to_max_length(img, 32)
        >>> resized.shape
        (32, 10)
        >>> scale
        18.75
    """
    validate_image(img)

    if not isinstance(max_length, int) or isinstance(max_length, bool):
        raise TypeError(f"max_length must be int, got {type(max_length).__name__}")

    if max_length <= 0:
        raise ValueError(f"max_length must be positive, got {max_length}")

    original_height, original_width = img.shape[:2]
    longer = max(original_width, original_height)
    scale_factor = longer / max_length

    # The longer side maps exactly; the shorter one is truncated, not rounded
    if original_width >= original_height:
        new_width = max_length
        new_height = max(1, int(original_height / scale_factor))
    else:
        new_height = max_length
        new_width = max(1, int(original_width / scale_factor))

    if (new_width, new_height) == (original_width, original_height):
        return img.copy(), 1.0

    if not antialiasing:
        interpolation = cv2.INTER_NEAREST
    elif scale_factor < 1.0:
        # INTER_AREA degrades to nearest neighbour when enlarging
        interpolation = cv2.INTER_LINEAR
    else:
        interpolation = cv2.INTER_AREA

    resized = cv2.resize(img, (new_width, new_height), interpolation=interpolation)
    return resized, scale_factor


def rotate_clockwise(img: np.ndarray, degrees: int) -> np.ndarray:
    """Rotate an image clockwise by 0, 90, 180 or 270 degrees.

    Raises:
        ValueError: If degrees is not a multiple of 90 in [0, 270].
    """
    validate_image(img)
    rotations = {
        0: None,
        90: cv2.ROTATE_90_CLOCKWISE,
        180: cv2.ROTATE_180,
        270: cv2.ROTATE_90_COUNTERCLOCKWISE,
    }
    if degrees not in rotations:
        raise ValueError(f"degrees must be one of 0, 90, 180, 270, got {degrees}")
    if rotations[degrees] is None:
        return img.copy()
    return cv2.rotate(img, rotations[degrees])
