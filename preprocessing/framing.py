"""
Framing and centering of the digit on the fixed-size canvas.

The framer pastes the scaled image in the middle of a white canvas. The
centerer then moves the ink so that its horizontal center of mass and the
vertical midpoint of its bounding box land on the canvas center.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from config import WHITE

from .errors import EmptyForegroundError
from .normalization import round_half_up, validate_image

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CenterOffset:
    """Pixel displacement applied by the centerer."""

    dx: int
    dy: int


def add_frame(img: np.ndarray, final_width: int, final_height: int) -> np.ndarray:
    """Paste an image in the middle of a white canvas of the given size.

    Pure function: returns a new array without modifying the input.

    The paste offset is ((final_width - w) // 2, (final_height - h) // 2),
    the pixel a no-filter blit at the half-pixel offset lands on. No
    interpolation is applied.

    Args:
        img: Image no larger than the frame (2D or 3D).
        final_width: Width of the canvas.
        final_height: Height of the canvas.

    Returns:
        Canvas of shape (final_height, final_width[, channels]).

    Raises:
        ValueError: If the image does not fit in the frame.
    """
    validate_image(img)
    height, width = img.shape[:2]
    if width > final_width or height > final_height:
        raise ValueError(
            f"Image of {width}x{height} does not fit in a "
            f"{final_width}x{final_height} frame"
        )

    canvas = np.full((final_height, final_width) + img.shape[2:], WHITE, dtype=np.uint8)
    left = (final_width - width) // 2
    top = (final_height - height) // 2
    canvas[top:top + height, left:left + width] = img
    return canvas


def _red_channel(img: np.ndarray) -> np.ndarray:
    if img.ndim == 2:
        return img
    red = img[:, :, 0]
    if img.shape[2] >= 3:
        mismatched = (red != img[:, :, 1]) | (red != img[:, :, 2])
        count = int(np.count_nonzero(mismatched))
        if count:
            y, x = np.argwhere(mismatched)[0]
            logger.warning(
                "Not monochrome image: %d pixels differ across channels, "
                "first at (%d, %d) with %s; using the red channel",
                count, x, y, tuple(int(c) for c in img[y, x, :3]),
            )
    return red


def find_center_offset(img: np.ndarray) -> CenterOffset:
    """Compute the displacement that centers the ink of a binarized canvas.

    Pixels darker than the mean red value are ink. Each ink pixel weighs
    255 - intensity. The x center is the weighted center of mass; the y
    center is the midpoint of the topmost and bottommost ink rows.

    Args:
        img: Binarized canvas (2D, or 3D with equal color channels).

    Returns:
        CenterOffset (dx, dy) that moves the ink center to (W // 2, H // 2).

    Raises:
        EmptyForegroundError: If no pixel is darker than the mean.
    """
    validate_image(img)
    height, width = img.shape[:2]
    red = _red_channel(img).astype(np.int64)

    mean_color_value = float(red.mean())
    ys, xs = np.nonzero(red < mean_color_value)
    black_pixels_count = len(xs)
    if black_pixels_count == 0:
        raise EmptyForegroundError(
            f"No foreground pixels darker than mean {mean_color_value:.2f}"
        )

    mass = 255 - red[ys, xs]
    total_mass_x = int((mass * xs).sum())
    total_black_pixels_mass = int(mass.sum())

    mean_black_pixel_mass = total_black_pixels_mass / black_pixels_count
    center_weight_x = round_half_up(total_mass_x / mean_black_pixel_mass / black_pixels_count)

    top = int(ys.min())
    bottom = int(ys.max())
    center_form_y = round_half_up(top + (bottom - top) / 2)

    return CenterOffset(dx=width // 2 - center_weight_x, dy=height // 2 - center_form_y)


def _overlap(size: int, shift: int) -> tuple[slice, slice]:
    """Destination and source slices for moving a 1D span by shift."""
    dst_start = max(0, shift)
    dst_end = min(size, size + shift)
    if dst_end <= dst_start:
        return slice(0, 0), slice(0, 0)
    return slice(dst_start, dst_end), slice(dst_start - shift, dst_end - shift)


def shift_image(img: np.ndarray, dx: int, dy: int) -> np.ndarray:
    """Move every pixel by (dx, dy); uncovered pixels become white.

    Pure function: returns a new array without modifying the input.
    Pixels moved past the border are dropped (no wraparound).
    """
    validate_image(img)
    height, width = img.shape[:2]
    moved = np.full_like(img, WHITE)
    dst_x, src_x = _overlap(width, dx)
    dst_y, src_y = _overlap(height, dy)
    moved[dst_y, dst_x] = img[src_y, src_x]
    return moved


def center_image(img: np.ndarray) -> tuple[np.ndarray, CenterOffset | None]:
    """Center the ink of a binarized canvas.

    A canvas without ink is returned unchanged (as a copy) together with a
    None offset.

    Returns:
        Tuple of (centered canvas, offset applied or None).
    """
    try:
        offset = find_center_offset(img)
    except EmptyForegroundError as exc:
        logger.info("Skipping centering: %s", exc)
        return img.copy(), None

    logger.debug("Centering offset dx=%d dy=%d", offset.dx, offset.dy)
    return shift_image(img, offset.dx, offset.dy), offset
