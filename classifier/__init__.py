"""
Binary 8-vs-0 classifier.

Key components:
- types: Classification and ModelInfo
- scoring: decision rule and confidence mapping
- oracle: model backends (TensorFlow Lite, ONNX Runtime) with a load/close lifecycle
- digit_classifier: DigitClassifier, the scoped wrapper used by callers
"""

from .types import Classification, ModelInfo
from .scoring import calculate_confidence, score_probability
from .oracle import (
    ClassifierOracle,
    ModelLoadError,
    TFLiteOracle,
    OnnxOracle,
    ORACLE_CHOICES,
    get_oracle,
    get_oracle_by_name,
)
from .digit_classifier import DigitClassifier, load_classifier

__all__ = [
    "Classification",
    "ModelInfo",
    "calculate_confidence",
    "score_probability",
    "ClassifierOracle",
    "ModelLoadError",
    "TFLiteOracle",
    "OnnxOracle",
    "ORACLE_CHOICES",
    "get_oracle",
    "get_oracle_by_name",
    "DigitClassifier",
    "load_classifier",
]
