"""
Composable preprocessing stages.

Every stage implements PreprocessStep: apply() maps an image to a new image
and get_metadata() reports what the last call measured (scale factor,
threshold, center offset). A Pipeline chains stages and keeps every
intermediate image, which is what the artifact directory is built from.

Usage:
    from preprocessing.steps import (
        BinarizeStep, CenterStep, FrameStep, GrayscaleStep, Pipeline, ScaleStep,
    )

    pipeline = Pipeline(steps=[
        GrayscaleStep(),
        ScaleStep(max_length=32),
        BinarizeStep(),
        FrameStep(width=32, height=32),
        CenterStep(),
    ])
    result = pipeline.run(image, artifact_dir="out/photo")
    canvas = result.final
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import cv2
import numpy as np

from .binarization import apply_threshold, find_threshold
from .errors import EmptyForegroundError
from .framing import CenterOffset, add_frame, find_center_offset, shift_image
from .normalization import scale_to_max_length, to_grayscale

logger = logging.getLogger(__name__)


def step_key(name: str) -> str:
    """Short key of a step name: "scale(32)" -> "scale"."""
    return name.split("(", 1)[0]


class PreprocessStep(ABC):
    """One stage of the canvas pipeline.

    apply() never mutates its input. Stages that measure something keep it
    from the last call and expose it through get_metadata(); the special
    keys "step_status" and "step_metrics" end up in the per-step summary.
    """

    @abstractmethod
    def apply(self, img: np.ndarray) -> np.ndarray:
        """Return the transformed image as a new array."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Name used in logs, intermediate lookup and artifact file names."""

    def get_metadata(self) -> dict[str, Any]:
        return {}


@dataclass(frozen=True)
class GrayscaleStep(PreprocessStep):
    """Desaturate to a single monochrome channel."""

    def apply(self, img: np.ndarray) -> np.ndarray:
        return to_grayscale(img)

    @property
    def name(self) -> str:
        return "grayscale"


@dataclass
class ScaleStep(PreprocessStep):
    """Bring the longer side of the image to max_length.

    Reports the scale factor (original longer side / max_length).
    """

    max_length: int
    antialiasing: bool = True
    _scale_factor: float = field(default=1.0, init=False, repr=False)

    def apply(self, img: np.ndarray) -> np.ndarray:
        scaled, self._scale_factor = scale_to_max_length(
            img, self.max_length, self.antialiasing
        )
        return scaled

    @property
    def name(self) -> str:
        return f"scale({self.max_length})"

    def get_metadata(self) -> dict[str, Any]:
        return {"scale_factor": self._scale_factor}


@dataclass
class BinarizeStep(PreprocessStep):
    """Black where darker than the image mean, white elsewhere.

    Needs a grayscale image; reports the threshold it used.
    """

    _threshold: int | None = field(default=None, init=False, repr=False)

    def apply(self, img: np.ndarray) -> np.ndarray:
        self._threshold = find_threshold(img)
        return apply_threshold(img, self._threshold)

    @property
    def name(self) -> str:
        return "binarize"

    def get_metadata(self) -> dict[str, Any]:
        return {
            "threshold": self._threshold,
            "step_metrics": {"threshold": self._threshold},
        }


@dataclass(frozen=True)
class FrameStep(PreprocessStep):
    """Paste the image in the middle of a white width x height canvas."""

    width: int
    height: int

    def apply(self, img: np.ndarray) -> np.ndarray:
        return add_frame(img, self.width, self.height)

    @property
    def name(self) -> str:
        return f"frame({self.width}x{self.height})"


@dataclass
class CenterStep(PreprocessStep):
    """Move the ink so its center lands on the canvas center.

    A canvas without ink is passed through unchanged and the step reports
    status "declined" with no offset.
    """

    _offset: CenterOffset | None = field(default=None, init=False, repr=False)

    def apply(self, img: np.ndarray) -> np.ndarray:
        try:
            self._offset = find_center_offset(img)
        except EmptyForegroundError as exc:
            logger.info("Centering declined: %s", exc)
            self._offset = None
            return img.copy()
        return shift_image(img, self._offset.dx, self._offset.dy)

    @property
    def name(self) -> str:
        return "center"

    def get_metadata(self) -> dict[str, Any]:
        if self._offset is None:
            return {"step_status": "declined", "center_offset": None}
        return {
            "step_status": "applied",
            "center_offset": self._offset,
            "step_metrics": {"dx": self._offset.dx, "dy": self._offset.dy},
        }


@dataclass
class StepResult:
    """Output of one stage: its image, metadata and saved artifact (if any)."""

    name: str
    image: np.ndarray
    metadata: dict[str, Any] = field(default_factory=dict)
    artifact_path: str | None = None


@dataclass
class PipelineStepResults:
    """Every intermediate image of a pipeline run, in order.

    Attributes:
        original: Copy of the input image.
        steps: One StepResult per stage.
        original_artifact_path: Where the input was saved, if artifacts were on.
        step_metadata: {step key: {"status": ..., "metrics": {...}}}.
    """

    original: np.ndarray
    steps: list[StepResult] = field(default_factory=list)
    original_artifact_path: str | None = None
    step_metadata: dict[str, dict[str, Any]] = field(default_factory=dict)

    @property
    def final(self) -> np.ndarray:
        return self.steps[-1].image if self.steps else self.original

    def get_intermediate(self, step_name: str) -> np.ndarray | None:
        """Image produced by the stage with this exact name, e.g. "scale(32)"."""
        return next((s.image for s in self.steps if s.name == step_name), None)

    def get_metadata(self, key: str) -> Any | None:
        """First value reported under key by any stage."""
        return next((s.metadata[key] for s in self.steps if key in s.metadata), None)

    @property
    def scale_factor(self) -> float:
        return self.get_metadata("scale_factor") or 1.0

    @property
    def threshold(self) -> int | None:
        return self.get_metadata("threshold")

    @property
    def center_offset(self) -> CenterOffset | None:
        return self.get_metadata("center_offset")

    @property
    def artifact_paths(self) -> dict[str, str]:
        """Saved images keyed by "original" and by step key."""
        paths = {}
        if self.original_artifact_path:
            paths["original"] = self.original_artifact_path
        paths.update(
            (step_key(s.name), s.artifact_path) for s in self.steps if s.artifact_path
        )
        return paths


def save_image(img: np.ndarray, path: str | Path) -> None:
    """Write an RGB(A) or grayscale image, creating parent directories.

    Raises:
        OSError: If OpenCV cannot write the file.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    if img.ndim == 3:
        conversion = {3: cv2.COLOR_RGB2BGR, 4: cv2.COLOR_RGBA2BGRA}.get(img.shape[2])
        if conversion is not None:
            img = cv2.cvtColor(img, conversion)
    if not cv2.imwrite(str(path), img):
        raise OSError(f"Could not write image to {path}")


@dataclass
class Pipeline:
    """Stages applied in order, each one fed the previous output."""

    steps: list[PreprocessStep]

    def run(
        self,
        img: np.ndarray,
        artifact_dir: str | Path | None = None,
    ) -> PipelineStepResults:
        """Run every stage on a copy of img.

        With artifact_dir set, writes original.png and <step key>.png for
        every stage into it.
        """
        result = PipelineStepResults(original=img.copy())
        if artifact_dir:
            result.original_artifact_path = self._save(img, artifact_dir, "original")

        current = result.original
        for step in self.steps:
            current = step.apply(current)
            metadata = step.get_metadata()
            key = step_key(step.name)
            result.step_metadata[key] = {
                "status": metadata.get("step_status", "applied"),
                "metrics": metadata.get("step_metrics", {}),
            }
            logger.debug("%s -> %s", step.name, current.shape)
            result.steps.append(
                StepResult(
                    name=step.name,
                    image=current,
                    metadata=metadata,
                    artifact_path=self._save(current, artifact_dir, key) if artifact_dir else None,
                )
            )

        return result

    @staticmethod
    def _save(img: np.ndarray, artifact_dir: str | Path, key: str) -> str:
        path = str(Path(artifact_dir) / f"{key}.png")
        save_image(img, path)
        return path

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self):
        return iter(self.steps)
