"""Model backends that turn the normalized canvas into a probability.

The model is an opaque oracle: given the 1024 normalized pixel values it
returns one number in [0, 1], the probability that the digit is an eight.
Each backend owns one loaded model and must be released exactly once.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

import numpy as np

import config
from .types import ModelInfo

logger = logging.getLogger(__name__)


class ModelLoadError(RuntimeError):
    """The model artifact is missing, corrupt, or its runtime is unavailable."""


class ClassifierOracle(Protocol):
    """Interface for model backends."""

    def load(self) -> None:
        """Load the model. Raises ModelLoadError on failure."""

    def predict(self, vector: np.ndarray) -> float:
        """Return the probability that the digit is an eight."""

    def close(self) -> None:
        """Release the model. Closing twice raises RuntimeError."""

    def model_info(self) -> ModelInfo:
        """Return model metadata (name, backend, input length)."""


def _check_vector(vector: np.ndarray, input_length: int) -> np.ndarray:
    vector = np.asarray(vector, dtype=np.float32).reshape(-1)
    if vector.size != input_length:
        raise ValueError(
            f"Model input must have {input_length} values, got {vector.size}"
        )
    return vector


def _concrete_shape(shape, input_length: int) -> tuple[int, ...]:
    """Replace dynamic dimensions (None, -1, names) with 1 for a single sample."""
    dims = tuple(d if isinstance(d, (int, np.integer)) and d > 0 else 1 for d in shape)
    if int(np.prod(dims)) != input_length:
        raise ModelLoadError(
            f"Model input shape {tuple(shape)} does not hold {input_length} values"
        )
    return tuple(int(d) for d in dims)


@dataclass
class _ScopedOracle:
    """Load-once / close-once lifecycle shared by the backends."""

    model_path: Path = config.MODEL_PATH
    input_length: int = config.MODEL_INPUT_LENGTH
    _loaded: bool = field(default=False, init=False, repr=False)
    _closed: bool = field(default=False, init=False, repr=False)

    backend_name = ""

    @property
    def is_loaded(self) -> bool:
        return self._loaded and not self._closed

    def load(self) -> None:
        if self._closed:
            raise RuntimeError(f"{self.backend_name} oracle is closed")
        if self._loaded:
            return
        path = Path(self.model_path)
        if not path.is_file():
            raise ModelLoadError(f"Model file not found: {path}")
        self._open(path)
        self._loaded = True
        logger.info("Loaded %s model %s", self.backend_name, path.name)

    def predict(self, vector: np.ndarray) -> float:
        if not self.is_loaded:
            raise RuntimeError(f"{self.backend_name} oracle is not loaded")
        return self._run(_check_vector(vector, self.input_length))

    def close(self) -> None:
        if self._closed:
            raise RuntimeError(f"{self.backend_name} oracle was already closed")
        self._release()
        self._closed = True
        logger.debug("Closed %s oracle", self.backend_name)

    def model_info(self) -> ModelInfo:
        return ModelInfo(
            name=Path(self.model_path).name,
            backend=self.backend_name,
            input_length=self.input_length,
        )

    def _open(self, path: Path) -> None:
        raise NotImplementedError

    def _run(self, vector: np.ndarray) -> float:
        raise NotImplementedError

    def _release(self) -> None:
        raise NotImplementedError


@dataclass
class TFLiteOracle(_ScopedOracle):
    """TensorFlow Lite interpreter backend (the format of the trained model)."""

    num_threads: int | None = None
    _interpreter: object = field(default=None, init=False, repr=False)

    backend_name = "tflite"

    def _open(self, path: Path) -> None:
        try:
            import tensorflow as tf
        except ImportError as exc:
            raise ModelLoadError(
                "The tflite backend needs TensorFlow (pip install '.[tflite]')"
            ) from exc
        try:
            interpreter = tf.lite.Interpreter(
                model_path=str(path), num_threads=self.num_threads
            )
            interpreter.allocate_tensors()
        except (ValueError, RuntimeError) as exc:
            raise ModelLoadError(f"Cannot load tflite model {path}: {exc}") from exc
        self._input = interpreter.get_input_details()[0]
        self._output = interpreter.get_output_details()[0]
        self._input_shape = _concrete_shape(self._input["shape"], self.input_length)
        self._interpreter = interpreter

    def _run(self, vector: np.ndarray) -> float:
        batch = vector.reshape(self._input_shape).astype(self._input["dtype"])
        self._interpreter.set_tensor(self._input["index"], batch)
        self._interpreter.invoke()
        output = self._interpreter.get_tensor(self._output["index"])
        return float(np.asarray(output).reshape(-1)[0])

    def _release(self) -> None:
        self._interpreter = None


@dataclass
class OnnxOracle(_ScopedOracle):
    """ONNX Runtime backend for models exported to ONNX."""

    providers: tuple[str, ...] = ("CPUExecutionProvider",)
    _session: object = field(default=None, init=False, repr=False)

    backend_name = "onnx"

    def _open(self, path: Path) -> None:
        try:
            import onnxruntime as ort
        except ImportError as exc:
            raise ModelLoadError(
                "The onnx backend needs onnxruntime (pip install '.[onnx]')"
            ) from exc
        try:
            session = ort.InferenceSession(str(path), providers=list(self.providers))
        except Exception as exc:
            # onnxruntime reports corrupt models through its own exception types
            raise ModelLoadError(f"Cannot load onnx model {path}: {exc}") from exc
        model_input = session.get_inputs()[0]
        self._input_name = model_input.name
        self._output_name = session.get_outputs()[0].name
        self._input_shape = _concrete_shape(model_input.shape, self.input_length)
        self._session = session

    def _run(self, vector: np.ndarray) -> float:
        batch = vector.reshape(self._input_shape)
        output = self._session.run([self._output_name], {self._input_name: batch})[0]
        return float(np.asarray(output).reshape(-1)[0])

    def _release(self) -> None:
        self._session = None


# --- Registry ----------------------------------------------------------------

_ORACLES: dict[str, type] = {
    "tflite": TFLiteOracle,
    "onnx": OnnxOracle,
}

ORACLE_CHOICES = tuple(_ORACLES)


def get_oracle(model_path: str | Path | None = None) -> ClassifierOracle:
    """Instantiate the configured oracle backend (not loaded yet)."""
    return get_oracle_by_name(config.ORACLE_BACKEND, model_path)


def get_oracle_by_name(name: str, model_path: str | Path | None = None) -> ClassifierOracle:
    """Instantiate an oracle backend by name (not loaded yet)."""
    cls = _ORACLES.get(name)
    if cls is None:
        raise ValueError(f"Unknown oracle backend: {name}")
    if model_path is None:
        return cls()
    return cls(model_path=Path(model_path))
