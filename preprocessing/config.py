"""
Canvas settings and the result type of the preprocessing pipeline.

The defaults come from config.py and reproduce the 32x32 canvas the trained
model expects; any other canvas size needs a different model.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

import numpy as np

from config import (
    ANTIALIASING,
    CANVAS_HEIGHT,
    CANVAS_WIDTH,
    CENTER_ENABLED,
    PIXEL_SCAN_ORDER,
    PIXEL_SCAN_ORDERS,
)

from .framing import CenterOffset
from .vectorize import extract_pixels, normalize_pixels


@dataclass(frozen=True)
class PreprocessConfig:
    """Parameters of the canvas pipeline.

    Attributes:
        canvas_width: Width of the final canvas.
        canvas_height: Height of the final canvas. The photo is scaled so its
                       longer side equals canvas_width, so canvas_height must
                       be at least canvas_width.
        antialiasing: Smooth resampling when scaling the photo down.
        center_enabled: Whether to recenter the ink on the canvas.
        scan_order: Pixel order of the model input ("row_major" or
                    "column_major").
    """

    canvas_width: int = CANVAS_WIDTH
    canvas_height: int = CANVAS_HEIGHT
    antialiasing: bool = ANTIALIASING
    center_enabled: bool = CENTER_ENABLED
    scan_order: str = PIXEL_SCAN_ORDER

    @property
    def input_length(self) -> int:
        """Number of values in the model input vector."""
        return self.canvas_width * self.canvas_height

    def validate(self) -> None:
        """Reject settings the pipeline cannot honor.

        Raises:
            ValueError: On the first invalid setting.
        """
        for name in ("canvas_width", "canvas_height"):
            value = getattr(self, name)
            if not isinstance(value, int) or value <= 0:
                raise ValueError(f"{name} must be a positive int, got {value}")

        if self.canvas_height < self.canvas_width:
            raise ValueError(
                f"canvas_height={self.canvas_height} is smaller than "
                f"canvas_width={self.canvas_width}; the scaled image would not fit"
            )

        if self.scan_order not in PIXEL_SCAN_ORDERS:
            raise ValueError(
                f"scan_order must be one of {PIXEL_SCAN_ORDERS}, got {self.scan_order!r}"
            )

        if self.scan_order == "column_major" and self.canvas_width != self.canvas_height:
            raise ValueError("column_major scan_order requires a square canvas")


@dataclass
class PreprocessResult:
    """A photo turned into the canvas, plus what each stage measured.

    Attributes:
        original: Original input image, preserved for reference only.
        processed: Final binarized, framed and centered canvas (2D uint8).
        scale_factor: Ratio of the original longer side to canvas_width.
        threshold: Binarization threshold computed for this image.
        center_offset: Displacement applied by the centerer, or None when
                       centering was disabled or skipped for lack of ink.
        config: Settings the canvas was built with.
        artifact_paths: Step key -> saved PNG, when an artifact directory was given.
        metadata: Per-step status and metrics.
    """

    original: np.ndarray
    processed: np.ndarray
    scale_factor: float
    threshold: Optional[int]
    center_offset: Optional[CenterOffset]
    config: PreprocessConfig
    artifact_paths: dict[str, str] = field(default_factory=dict)
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def centered(self) -> bool:
        return self.center_offset is not None

    def pixel_values(self) -> np.ndarray:
        """The canvas flattened in the configured scan order (uint8)."""
        return extract_pixels(self.processed, self.config.scan_order)

    def to_model_input(self) -> np.ndarray:
        """The normalized float32 vector fed to the classifier."""
        return normalize_pixels(self.pixel_values())
