"""Flattening of the canvas into the classifier input vector."""

import numpy as np

from config import PIXEL_SCAN_ORDERS

from .normalization import validate_image


def extract_pixels(canvas: np.ndarray, order: str = "row_major") -> np.ndarray:
    """Flatten a monochrome canvas into width * height values in [0, 255].

    The value of each pixel is its lowest color byte: the blue channel of a
    color canvas, or the value itself for a 2D canvas.

    Args:
        canvas: Monochrome canvas (2D, or 3D RGB/RGBA).
        order: "row_major" puts canvas[y, x] at index y * width + x.
               "column_major" puts it at index x * width + y.

    Returns:
        1D uint8 array of length width * height.

    Raises:
        ValueError: If order is unknown, or column_major is requested for a
                    non-square canvas (the index would overflow).
    """
    validate_image(canvas)
    if order not in PIXEL_SCAN_ORDERS:
        raise ValueError(f"Unknown scan order: {order}. Expected one of {PIXEL_SCAN_ORDERS}")

    values = canvas if canvas.ndim == 2 else canvas[:, :, min(2, canvas.shape[2] - 1)]
    values = values.astype(np.uint8)

    if order == "row_major":
        return values.reshape(-1).copy()

    height, width = values.shape
    if height != width:
        raise ValueError(
            f"column_major order requires a square canvas, got {width}x{height}"
        )
    return values.T.reshape(-1).copy()


def normalize_pixels(values: np.ndarray) -> np.ndarray:
    """Divide byte values by 255 into float32 values in [0, 1]."""
    return np.asarray(values, dtype=np.float32) / np.float32(255.0)
