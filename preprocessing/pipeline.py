"""
The standard canvas pipeline.

    Grayscale -> Scale (longer side = canvas width) -> Binarize
    -> Frame (canvas size) -> Center

run_pipeline() is the entry point used by recognition; build_pipeline()
exposes the same stages as a Pipeline for callers that want the
intermediate images.
"""

from __future__ import annotations

from pathlib import Path

import numpy as np

from .config import PreprocessConfig, PreprocessResult
from .normalization import validate_image
from .steps import (
    BinarizeStep,
    CenterStep,
    FrameStep,
    GrayscaleStep,
    Pipeline,
    PreprocessStep,
    ScaleStep,
)


def build_pipeline(config: PreprocessConfig) -> Pipeline:
    """Stages for config, in order; CenterStep only when centering is enabled."""
    stages: list[PreprocessStep] = [
        GrayscaleStep(),
        ScaleStep(max_length=config.canvas_width, antialiasing=config.antialiasing),
        BinarizeStep(),
        FrameStep(width=config.canvas_width, height=config.canvas_height),
    ]
    if config.center_enabled:
        stages.append(CenterStep())
    return Pipeline(steps=stages)


def run_pipeline(
    img: np.ndarray,
    config: PreprocessConfig | None = None,
    artifact_dir: str | Path | None = None,
) -> PreprocessResult:
    """Turn a photo into a black and white canvas with the digit centered.

    The input array is never modified.

    Args:
        img: RGB/RGBA (H, W, C) or grayscale (H, W) uint8 image.
        config: Canvas settings; PreprocessConfig() when omitted.
        artifact_dir: If set, every stage is saved there as a PNG.

    Returns:
        PreprocessResult with the canvas, scale factor, threshold and offset.

    Raises:
        TypeError: If img is not a numpy array.
        InvalidImageError: If img is empty or has the wrong rank.
        ValueError: If config is invalid.

    Examples:
        >>> img = np.full((600, 200, 3), 255, dtype=np.uint8)
        >>> img[295:305, 95:105] = 0
        >>> canvas = run_pipeline(img)
        >>> canvas.processed.shape, canvas.scale_factor
        ((32, 32), 18.75)
    """
    config = config or PreprocessConfig()
    config.validate()
    validate_image(img)

    stages = build_pipeline(config).run(img, artifact_dir=artifact_dir)

    return PreprocessResult(
        original=stages.original,
        processed=stages.final,
        scale_factor=stages.scale_factor,
        threshold=stages.threshold,
        center_offset=stages.center_offset,
        config=config,
        artifact_paths=stages.artifact_paths,
        metadata=stages.step_metadata,
    )
