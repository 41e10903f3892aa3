"""
Decision rule and confidence of the binary classifier.

The model outputs one number: the probability that the digit is an eight.
Above the decision boundary the digit is an eight, otherwise a zero. The
confidence is a piecewise-linear map of the distance to the boundary:

    p = 1.0 -> "8", 1.0        p = 0.75 -> "8", 0.5
    p = 0.5 -> "0", 0.0        p = 0.0  -> "0", 1.0
"""

import math

import config

from .types import Classification


def calculate_confidence(probability: float) -> float:
    """Map a probability to a confidence between 0 and 1 inclusive."""
    if probability > config.DECISION_BOUNDARY:
        return 1 - 2 * (1 - probability)
    return 1 - 2 * probability


def score_probability(probability: float) -> Classification:
    """Turn the raw model output into a Classification.

    Raises:
        ValueError: If probability is NaN or outside [0, 1].
    """
    probability = float(probability)
    if math.isnan(probability) or not 0.0 <= probability <= 1.0:
        raise ValueError(f"probability must be in [0, 1], got {probability}")

    if probability > config.DECISION_BOUNDARY:
        symbol = config.POSITIVE_SYMBOL
    else:
        symbol = config.NEGATIVE_SYMBOL

    return Classification(
        symbol=symbol,
        confidence=calculate_confidence(probability),
        probability=probability,
    )
