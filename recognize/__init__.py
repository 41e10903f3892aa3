"""Recognition package: photo in, classified digit out."""

from .pipeline import (
    NO_RESULT,
    RecognitionContext,
    RecognitionResult,
    classify_image,
    classify_source,
)
from .service import classify_samples, run_recognition

__all__ = [
    "NO_RESULT",
    "RecognitionContext",
    "RecognitionResult",
    "classify_image",
    "classify_source",
    "classify_samples",
    "run_recognition",
]
