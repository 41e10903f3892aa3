"""
Image preprocessing module for 8-vs-0 digit recognition.

This module provides pure, deterministic functions that turn a photo into the
fixed-size black and white canvas the classifier was trained on. All
functions follow the pattern: input -> output with no mutation of the
original arrays.

Key components:
- config: PreprocessConfig dataclass for parameterizing all steps
- pipeline: run_pipeline() function that applies preprocessing steps in order
- steps: Class-based preprocessing steps with common PreprocessStep interface
- normalization: grayscale, proportional scaling, rotation
- binarization: global mean threshold
- framing: white frame and ink centering
- vectorize: flattening and [0, 1] normalization of the canvas

Two APIs are available:
1. Function-based: run_pipeline(img, config) -> PreprocessResult
2. Class-based: Pipeline(steps=[...]).run(img) -> PipelineStepResults
"""

from .config import PreprocessConfig, PreprocessResult
from .errors import EmptyForegroundError, InvalidImageError
from .pipeline import run_pipeline, build_pipeline
from .normalization import to_grayscale, scale_to_max_length, rotate_clockwise
from .binarization import find_threshold, apply_threshold, binarize
from .framing import CenterOffset, add_frame, find_center_offset, shift_image, center_image
from .vectorize import extract_pixels, normalize_pixels
from .steps import (
    PreprocessStep,
    GrayscaleStep,
    ScaleStep,
    BinarizeStep,
    FrameStep,
    CenterStep,
    Pipeline,
    PipelineStepResults,
    StepResult,
)

__all__ = [
    # Config and results
    "PreprocessConfig",
    "PreprocessResult",
    "CenterOffset",
    # Errors
    "InvalidImageError",
    "EmptyForegroundError",
    # Function API
    "run_pipeline",
    "build_pipeline",
    "to_grayscale",
    "scale_to_max_length",
    "rotate_clockwise",
    "find_threshold",
    "apply_threshold",
    "binarize",
    "add_frame",
    "find_center_offset",
    "shift_image",
    "center_image",
    "extract_pixels",
    "normalize_pixels",
    # Class-based API
    "PreprocessStep",
    "GrayscaleStep",
    "ScaleStep",
    "BinarizeStep",
    "FrameStep",
    "CenterStep",
    "Pipeline",
    "PipelineStepResults",
    "StepResult",
]
