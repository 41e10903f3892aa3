"""Shared fixtures and the --slow switch.

Tests marked `slow` load a real model runtime (TensorFlow, ONNX Runtime) and
only run with `pytest --slow`. Everything else uses StubOracle, which
answers every canvas with a fixed probability.
"""
import numpy as np
import pytest

from classifier import DigitClassifier, ModelInfo, ModelLoadError


def pytest_addoption(parser):
    parser.addoption(
        "--slow",
        action="store_true",
        default=False,
        help="Run slow tests that load model runtimes (TensorFlow, ONNX Runtime)",
    )


def pytest_collection_modifyitems(config, items):
    if config.getoption("--slow"):
        return
    skip_slow = pytest.mark.skip(reason="needs a model runtime, run with --slow")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


class StubOracle:
    """Oracle returning a fixed probability and recording its lifecycle."""

    def __init__(
        self,
        probability: float = 0.9,
        fail_load: bool = False,
        fail_on_calls: tuple[int, ...] = (),
    ):
        self.probability = probability
        self.fail_load = fail_load
        self.fail_on_calls = fail_on_calls
        self.load_calls = 0
        self.close_calls = 0
        self.inputs: list[np.ndarray] = []

    def load(self) -> None:
        self.load_calls += 1
        if self.fail_load:
            raise ModelLoadError("stub model is corrupt")

    def predict(self, vector: np.ndarray) -> float:
        self.inputs.append(np.asarray(vector).copy())
        if len(self.inputs) in self.fail_on_calls:
            raise RuntimeError("interpreter invoke failed")
        return self.probability

    def close(self) -> None:
        if self.close_calls:
            raise RuntimeError("stub oracle was already closed")
        self.close_calls += 1

    def model_info(self) -> ModelInfo:
        return ModelInfo(name="stub", backend="stub", input_length=1024)


@pytest.fixture
def stub_oracle():
    """Factory for StubOracle instances."""
    return StubOracle


@pytest.fixture
def make_classifier():
    """Factory building a DigitClassifier around a StubOracle."""
    def _make(
        probability: float = 0.9,
        fail_load: bool = False,
        fail_on_calls: tuple[int, ...] = (),
    ) -> DigitClassifier:
        return DigitClassifier(
            StubOracle(probability, fail_load=fail_load, fail_on_calls=fail_on_calls)
        )
    return _make


@pytest.fixture
def square_photo():
    """200x600 white RGB photo with a 10x10 black square centered at (100, 300)."""
    img = np.full((600, 200, 3), 255, dtype=np.uint8)
    img[295:305, 95:105] = 0
    return img
