"""Per-image recognition: preprocess a photo and classify its canvas."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import numpy as np

from classifier import Classification, DigitClassifier
from preprocessing import PreprocessConfig, PreprocessResult, run_pipeline
from sources import load_image
from sources.images import ImageSource

logger = logging.getLogger(__name__)

NO_RESULT = "Digit: -"


@dataclass
class RecognitionContext:
    """Everything a recognition call needs, passed explicitly.

    Attributes:
        classifier: Classifier that owns the loaded model.
        preprocess_config: Canvas and pipeline settings.
        artifact_dir: If set, intermediate images of each photo are saved
                      under artifact_dir/<photo name>/.
    """

    classifier: DigitClassifier
    preprocess_config: PreprocessConfig = field(default_factory=PreprocessConfig)
    artifact_dir: Path | None = None

    def artifact_dir_for(self, label: str) -> Path | None:
        if self.artifact_dir is None:
            return None
        return Path(self.artifact_dir) / Path(label).stem


@dataclass
class RecognitionResult:
    """Outcome of recognizing one photo.

    Attributes:
        label: Name of the photo (file name or caller-provided label).
        preprocess: Canvas and preprocessing metadata.
        classification: The recognized digit, or None when no model is available.
    """

    label: str
    preprocess: PreprocessResult
    classification: Classification | None

    @property
    def recognized(self) -> bool:
        return self.classification is not None

    def summary(self) -> str:
        """One line for display, e.g. "photo.png   Digit: 8   Confidence: 0.80"."""
        text = self.classification.format() if self.classification else NO_RESULT
        return f"{self.label}   {text}"


def classify_image(
    image: np.ndarray,
    context: RecognitionContext,
    label: str = "image",
) -> RecognitionResult:
    """Preprocess an upright image and classify the resulting canvas."""
    preprocess = run_pipeline(
        image,
        context.preprocess_config,
        artifact_dir=context.artifact_dir_for(label),
    )
    classification = context.classifier.classify(preprocess.to_model_input())
    if classification is None:
        logger.info("%s: classifier unavailable, no result", label)
    return RecognitionResult(label=label, preprocess=preprocess, classification=classification)


def classify_source(
    source: ImageSource,
    context: RecognitionContext,
    label: str | None = None,
) -> RecognitionResult:
    """Load an image file or bytes, turn it upright and classify it.

    Raises:
        InvalidImageError: If the image cannot be decoded.
    """
    if label is None:
        label = "image" if isinstance(source, bytes) else Path(source).name
    return classify_image(load_image(source), context, label=label)
