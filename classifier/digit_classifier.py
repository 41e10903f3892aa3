"""Scoped wrapper around the model oracle.

A DigitClassifier owns one oracle for its whole life. Use it as a context
manager so the model is released on every exit path:

    with load_classifier() as classifier:
        classification = classifier.classify(vector)

If the model cannot be loaded the classifier stays usable: the error is
logged and kept in ``load_error``, and classify() returns None.
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np

import config
from .oracle import ClassifierOracle, ModelLoadError, get_oracle_by_name
from .scoring import score_probability
from .types import Classification

logger = logging.getLogger(__name__)


class DigitClassifier:
    """Classifies normalized canvases as "8" or "0"."""

    def __init__(self, oracle: ClassifierOracle):
        self.oracle = oracle
        self.load_error: ModelLoadError | None = None
        self._closed = False
        try:
            oracle.load()
        except ModelLoadError as exc:
            logger.error("Cannot load model: %s", exc)
            self.load_error = exc

    @property
    def available(self) -> bool:
        """True when a model is loaded and the classifier is not closed."""
        return self.load_error is None and not self._closed

    def classify(self, vector: np.ndarray) -> Classification | None:
        """Classify a normalized canvas vector.

        Returns:
            The Classification, or None when no model could be loaded or
            the model failed on this vector (invoke error, wrong input size,
            NaN or out-of-range output). Failures are logged.

        Raises:
            RuntimeError: If the classifier was closed.
        """
        if self._closed:
            raise RuntimeError("Classifier is closed")
        if self.load_error is not None:
            return None

        # The model is binary: the single output is the probability of an eight
        try:
            probability = self.oracle.predict(vector)
            classification = score_probability(probability)
        except (RuntimeError, ValueError) as exc:
            logger.error("Classification failed: %s", exc)
            return None
        logger.debug(
            "p=%.4f -> %s (confidence %.4f)",
            probability, classification.symbol, classification.confidence,
        )
        return classification

    def close(self) -> None:
        """Release the model. Closing twice raises RuntimeError."""
        if self._closed:
            raise RuntimeError("Classifier was already closed")
        self._closed = True
        if self.load_error is None:
            self.oracle.close()

    def __enter__(self) -> DigitClassifier:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def load_classifier(
    model_path: str | Path | None = None,
    backend: str | None = None,
) -> DigitClassifier:
    """Create a DigitClassifier for the configured (or given) backend and model."""
    oracle = get_oracle_by_name(backend or config.ORACLE_BACKEND, model_path)
    return DigitClassifier(oracle)
