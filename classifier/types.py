"""Data types shared by the classifier components."""

from __future__ import annotations

from dataclasses import dataclass

import config


@dataclass(frozen=True)
class Classification:
    """A recognized digit and how confident we are about it.

    Attributes:
        symbol: The recognized digit, "8" or "0".
        confidence: Confidence between 0 and 1 inclusive.
        probability: Raw model output, the probability of an eight.
    """

    symbol: str
    confidence: float
    probability: float

    @property
    def is_positive(self) -> bool:
        return self.symbol == config.POSITIVE_SYMBOL

    def format(self, decimals: int = config.CONFIDENCE_DECIMALS) -> str:
        """Render as shown to the user, e.g. "Digit: 8   Confidence: 0.80"."""
        return f"Digit: {self.symbol}   Confidence: {self.confidence:.{decimals}f}"

    def to_dict(self) -> dict:
        return {
            "symbol": self.symbol,
            "confidence": self.confidence,
            "probability": self.probability,
        }


@dataclass(frozen=True)
class ModelInfo:
    """Metadata about the loaded model."""

    name: str
    backend: str
    input_length: int
