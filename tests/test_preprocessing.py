"""
Unit tests for the preprocessing module.

Covers grayscale, proportional scaling, rotation, config validation, the
step classes, and end-to-end behavior of run_pipeline.
"""

from pathlib import Path

import numpy as np
import pytest

import config as settings
from preprocessing import (
    PreprocessConfig,
    PreprocessResult,
    InvalidImageError,
    run_pipeline,
    to_grayscale,
    scale_to_max_length,
    rotate_clockwise,
    GrayscaleStep,
    ScaleStep,
    BinarizeStep,
    FrameStep,
    CenterStep,
    CenterOffset,
    Pipeline,
)


class TestToGrayscale:
    """Tests for the to_grayscale function."""

    def test_input_is_left_untouched(self):
        rgb = np.random.randint(0, 256, (12, 9, 3), dtype=np.uint8)
        before = rgb.copy()
        to_grayscale(rgb)
        assert np.array_equal(rgb, before)

    @pytest.mark.parametrize("level", [0, 255])
    def test_pure_black_and_white_survive(self, level):
        gray = to_grayscale(np.full((6, 7, 3), level, dtype=np.uint8))
        assert gray.shape == (6, 7)
        assert np.all(gray == level)

    def test_primary_colors_use_desaturation_weights(self):
        rgb = np.zeros((1, 3, 3), dtype=np.uint8)
        rgb[0, 0] = (255, 0, 0)
        rgb[0, 1] = (0, 255, 0)
        rgb[0, 2] = (0, 0, 255)
        gray = to_grayscale(rgb)
        assert gray.tolist() == [[54, 182, 18]]

    def test_equal_channels_keep_their_value(self):
        levels = np.random.randint(0, 256, (20, 30), dtype=np.uint8)
        rgb = np.stack([levels] * 3, axis=2)
        assert np.array_equal(to_grayscale(rgb), levels)

    def test_idempotent(self):
        rgb = np.random.randint(0, 256, (20, 30, 3), dtype=np.uint8)
        once = to_grayscale(rgb)
        twice = to_grayscale(once)
        assert np.array_equal(once, twice)
        assert twice is not once

    def test_rgba_drops_alpha(self):
        rgba = np.zeros((10, 10, 4), dtype=np.uint8)
        rgba[:, :, :3] = 200
        rgba[:, :, 3] = 7
        gray = to_grayscale(rgba)
        assert gray.shape == (10, 10)
        assert np.all(gray == 200)

    def test_invalid_type_raises(self):
        with pytest.raises(TypeError, match="Expected numpy.ndarray"):
            to_grayscale([[1, 2], [3, 4]])

    def test_empty_array_raises(self):
        with pytest.raises(InvalidImageError):
            to_grayscale(np.zeros((0, 10, 3), dtype=np.uint8))

    def test_invalid_image_is_value_error(self):
        with pytest.raises(ValueError):
            to_grayscale(np.array([]))

    def test_1d_array_raises(self):
        with pytest.raises(InvalidImageError, match="2D or 3D"):
            to_grayscale(np.array([1, 2, 3]))

    def test_unsupported_channels_raises(self):
        with pytest.raises(InvalidImageError, match="Unsupported number of channels"):
            to_grayscale(np.zeros((10, 10, 5), dtype=np.uint8))


class TestScaleToMaxLength:
    """Tests for the scale_to_max_length function."""

    def test_tall_image_longer_side_becomes_max_length(self):
        img = np.zeros((600, 200), dtype=np.uint8)
        resized, scale = scale_to_max_length(img, 32)
        assert resized.shape == (32, 10)
        assert scale == 18.75

    def test_wide_image_longer_side_becomes_max_length(self):
        img = np.zeros((200, 600, 3), dtype=np.uint8)
        resized, scale = scale_to_max_length(img, 100)
        # 200 / 6 = 33.33 is truncated, not rounded
        assert resized.shape == (33, 100, 3)
        assert scale == 6.0

    def test_shorter_side_is_truncated(self):
        img = np.zeros((100, 299), dtype=np.uint8)
        resized, _ = scale_to_max_length(img, 32)
        # 100 / (299 / 32) = 10.70
        assert resized.shape == (10, 32)

    def test_upscale(self):
        img = np.zeros((20, 10), dtype=np.uint8)
        resized, scale = scale_to_max_length(img, 32)
        assert resized.shape == (32, 16)
        assert scale == 0.625

    @pytest.mark.parametrize("shape", [(600, 200), (480, 640), (1000, 999), (37, 1200), (64, 64)])
    def test_aspect_ratio_preserved(self, shape):
        img = np.zeros(shape, dtype=np.uint8)
        resized, _ = scale_to_max_length(img, 32)
        height, width = resized.shape
        assert max(height, width) == 32
        expected = min(shape) * 32 / max(shape)
        assert abs(min(height, width) - expected) < 1

    def test_degenerate_side_keeps_one_pixel(self):
        img = np.zeros((1, 1000), dtype=np.uint8)
        resized, _ = scale_to_max_length(img, 32)
        assert resized.shape == (1, 32)

    def test_same_size_returns_copy(self):
        img = np.random.randint(0, 256, (32, 20), dtype=np.uint8)
        resized, scale = scale_to_max_length(img, 32)
        assert scale == 1.0
        assert np.array_equal(resized, img)
        assert resized is not img

    def test_without_antialiasing_keeps_pure_colors(self):
        img = np.random.choice([0, 255], size=(64, 64)).astype(np.uint8)
        resized, _ = scale_to_max_length(img, 32, antialiasing=False)
        assert set(np.unique(resized)) <= {0, 255}

    def test_with_antialiasing_blends_pixels(self):
        img = np.zeros((64, 64), dtype=np.uint8)
        img[:, ::2] = 255
        resized, _ = scale_to_max_length(img, 32, antialiasing=True)
        assert np.all(resized > 0)
        assert np.all(resized < 255)

    def test_pure_function_no_mutation(self):
        img = np.random.randint(0, 256, (100, 200, 3), dtype=np.uint8)
        original_data = img.copy()
        _ = scale_to_max_length(img, 32)
        assert np.array_equal(img, original_data)

    def test_zero_length_raises(self):
        with pytest.raises(ValueError, match="positive"):
            scale_to_max_length(np.zeros((100, 200)), 0)

    def test_float_length_raises(self):
        with pytest.raises(TypeError, match="max_length must be int"):
            scale_to_max_length(np.zeros((100, 200)), 32.5)

    def test_empty_array_raises(self):
        with pytest.raises(InvalidImageError):
            scale_to_max_length(np.zeros((0, 0), dtype=np.uint8), 32)


class TestRotateClockwise:
    """Tests for the rotate_clockwise function."""

    def test_quarter_turn_moves_top_left_to_top_right(self):
        img = np.zeros((2, 3), dtype=np.uint8)
        img[0, 0] = 255
        rotated = rotate_clockwise(img, 90)
        assert rotated.shape == (3, 2)
        assert rotated[0, 1] == 255

    def test_half_turn(self):
        img = np.zeros((2, 3), dtype=np.uint8)
        img[0, 0] = 255
        rotated = rotate_clockwise(img, 180)
        assert rotated[1, 2] == 255

    def test_three_quarter_turn(self):
        img = np.zeros((2, 3), dtype=np.uint8)
        img[0, 0] = 255
        rotated = rotate_clockwise(img, 270)
        assert rotated.shape == (3, 2)
        assert rotated[2, 0] == 255

    def test_zero_returns_copy(self):
        img = np.random.randint(0, 256, (4, 5), dtype=np.uint8)
        rotated = rotate_clockwise(img, 0)
        assert np.array_equal(rotated, img)
        assert rotated is not img

    def test_invalid_degrees_raises(self):
        with pytest.raises(ValueError, match="degrees"):
            rotate_clockwise(np.zeros((4, 4), dtype=np.uint8), 45)


class TestPreprocessConfig:
    """Tests for PreprocessConfig validation."""

    def test_defaults_are_valid(self):
        config = PreprocessConfig()
        config.validate()
        assert config.input_length == 1024

    def test_zero_width_raises(self):
        config = PreprocessConfig(canvas_width=0)
        with pytest.raises(ValueError, match="positive"):
            config.validate()

    def test_height_smaller_than_width_raises(self):
        config = PreprocessConfig(canvas_width=32, canvas_height=16)
        with pytest.raises(ValueError, match="smaller"):
            config.validate()

    def test_unknown_scan_order_raises(self):
        config = PreprocessConfig(scan_order="diagonal")
        with pytest.raises(ValueError, match="scan_order"):
            config.validate()

    def test_column_major_requires_square_canvas(self):
        config = PreprocessConfig(canvas_width=32, canvas_height=40, scan_order="column_major")
        with pytest.raises(ValueError, match="square"):
            config.validate()

    def test_default_scan_order_matches_the_bundled_model(self):
        assert settings.MODEL_SCAN_ORDER == "column_major"
        assert settings.PIXEL_SCAN_ORDER == settings.MODEL_SCAN_ORDER
        assert PreprocessConfig().scan_order == settings.MODEL_SCAN_ORDER


class TestPreprocessResult:
    """Tests for PreprocessResult model input helpers."""

    def _result(self, canvas, scan_order="row_major"):
        return PreprocessResult(
            original=np.zeros((64, 64, 3), dtype=np.uint8),
            processed=canvas,
            scale_factor=2.0,
            threshold=128,
            center_offset=CenterOffset(0, 0),
            config=PreprocessConfig(scan_order=scan_order),
        )

    def test_model_input_is_normalized_vector(self):
        canvas = np.full((32, 32), 255, dtype=np.uint8)
        canvas[0, 1] = 0
        vector = self._result(canvas).to_model_input()
        assert vector.shape == (1024,)
        assert vector.dtype == np.float32
        assert vector[1] == 0.0
        assert vector[0] == 1.0

    def test_model_input_follows_scan_order(self):
        canvas = np.full((32, 32), 255, dtype=np.uint8)
        canvas[0, 1] = 0
        vector = self._result(canvas, scan_order="column_major").to_model_input()
        assert vector[32] == 0.0
        assert vector[1] == 1.0

    def test_default_config_feeds_the_model_column_major(self):
        canvas = np.full((32, 32), 255, dtype=np.uint8)
        canvas[0, 1] = 0
        result = self._result(canvas)
        result.config = PreprocessConfig()
        vector = result.to_model_input()
        assert vector[32] == 0.0
        assert vector[1] == 1.0

    def test_centered_flag(self):
        result = self._result(np.full((32, 32), 255, dtype=np.uint8))
        assert result.centered is True
        result.center_offset = None
        assert result.centered is False


class TestRunPipeline:
    """Tests for the run_pipeline function."""

    def test_produces_canonical_canvas(self, square_photo):
        result = run_pipeline(square_photo)
        assert result.original.shape == (600, 200, 3)
        assert result.processed.shape == (32, 32)
        assert result.processed.dtype == np.uint8
        assert set(np.unique(result.processed)) <= {0, 255}
        assert result.scale_factor == 18.75

    def test_ink_ends_up_in_the_center(self, square_photo):
        result = run_pipeline(square_photo)
        ys, xs = np.nonzero(result.processed == 0)
        assert len(xs) > 0
        assert abs(xs.mean() - 16) <= 1
        assert abs(ys.mean() - 16) <= 1

    def test_reports_threshold_and_offset(self, square_photo):
        result = run_pipeline(square_photo)
        assert 0 <= result.threshold <= 255
        assert isinstance(result.center_offset, CenterOffset)
        assert result.metadata["center"]["status"] == "applied"

    def test_off_center_digit_is_moved(self):
        img = np.full((320, 320), 255, dtype=np.uint8)
        img[20:60, 20:60] = 0
        result = run_pipeline(img)
        assert result.center_offset.dx > 0
        assert result.center_offset.dy > 0
        ys, xs = np.nonzero(result.processed == 0)
        assert abs(xs.mean() - 16) <= 1
        assert abs(ys.mean() - 16) <= 1

    def test_blank_photo_skips_centering(self):
        img = np.full((100, 80, 3), 255, dtype=np.uint8)
        result = run_pipeline(img)
        assert result.center_offset is None
        assert result.metadata["center"]["status"] == "declined"
        assert np.all(result.processed == 255)

    def test_centering_can_be_disabled(self, square_photo):
        result = run_pipeline(square_photo, PreprocessConfig(center_enabled=False))
        assert result.center_offset is None
        assert "center" not in result.metadata

    def test_pipeline_preserves_original(self, square_photo):
        original_data = square_photo.copy()
        result = run_pipeline(square_photo)
        assert np.array_equal(result.original, original_data)
        assert np.array_equal(square_photo, original_data)
        assert result.original is not square_photo

    def test_saves_artifacts(self, square_photo, tmp_path):
        result = run_pipeline(square_photo, artifact_dir=tmp_path)
        expected = {"original", "grayscale", "scale", "binarize", "frame", "center"}
        assert set(result.artifact_paths) == expected
        for path in result.artifact_paths.values():
            assert Path(path).is_file()

    def test_pipeline_invalid_config_raises(self, square_photo):
        with pytest.raises(ValueError):
            run_pipeline(square_photo, PreprocessConfig(canvas_width=-1))

    def test_pipeline_invalid_input_raises(self):
        with pytest.raises(TypeError):
            run_pipeline("not an image")

    def test_pipeline_empty_input_raises(self):
        with pytest.raises(InvalidImageError):
            run_pipeline(np.zeros((0, 10, 3), dtype=np.uint8))


class TestSteps:
    """Tests for the step classes."""

    def test_grayscale_step(self):
        step = GrayscaleStep()
        result = step.apply(np.zeros((100, 200, 3), dtype=np.uint8))
        assert result.shape == (100, 200)
        assert step.name == "grayscale"

    def test_scale_step_metadata(self):
        step = ScaleStep(max_length=32)
        result = step.apply(np.zeros((64, 128), dtype=np.uint8))
        assert result.shape == (16, 32)
        assert step.get_metadata()["scale_factor"] == 4.0
        assert step.name == "scale(32)"

    def test_binarize_step_metadata(self):
        step = BinarizeStep()
        gray = np.full((4, 4), 100, dtype=np.uint8)
        gray[0, 0] = 0
        result = step.apply(gray)
        assert step.get_metadata()["threshold"] == 94
        assert result[0, 0] == 0
        assert np.count_nonzero(result == 255) == 15

    def test_binarize_step_requires_grayscale(self):
        with pytest.raises(InvalidImageError, match="grayscale input"):
            BinarizeStep().apply(np.zeros((4, 4, 3), dtype=np.uint8))

    def test_frame_step(self):
        step = FrameStep(width=32, height=32)
        result = step.apply(np.zeros((32, 10), dtype=np.uint8))
        assert result.shape == (32, 32)
        assert step.name == "frame(32x32)"

    def test_center_step_declines_blank_canvas(self):
        step = CenterStep()
        blank = np.full((32, 32), 255, dtype=np.uint8)
        result = step.apply(blank)
        assert np.array_equal(result, blank)
        assert step.get_metadata()["step_status"] == "declined"
        assert step.get_metadata()["center_offset"] is None

    def test_center_step_reports_offset(self):
        step = CenterStep()
        canvas = np.full((32, 32), 255, dtype=np.uint8)
        canvas[2, 3] = 0
        step.apply(canvas)
        metadata = step.get_metadata()
        assert metadata["step_status"] == "applied"
        assert metadata["center_offset"] == CenterOffset(dx=13, dy=14)
        assert metadata["step_metrics"] == {"dx": 13, "dy": 14}


class TestPipeline:
    """Tests for the Pipeline class."""

    def test_empty_pipeline_returns_original(self):
        pipeline = Pipeline(steps=[])
        img = np.random.randint(0, 256, (100, 100, 3), dtype=np.uint8)
        result = pipeline.run(img)
        assert np.array_equal(result.final, img)
        assert result.final is not img

    def test_tracks_intermediates(self):
        pipeline = Pipeline(steps=[
            GrayscaleStep(),
            ScaleStep(max_length=32),
            BinarizeStep(),
        ])
        rgb = np.zeros((100, 200, 3), dtype=np.uint8)
        result = pipeline.run(rgb)
        assert len(result.steps) == 3
        assert [s.name for s in result.steps] == ["grayscale", "scale(32)", "binarize"]
        assert result.get_intermediate("grayscale").shape == (100, 200)
        assert result.get_intermediate("scale(32)").shape == (16, 32)
        assert result.get_intermediate("unknown") is None

    def test_aggregates_metadata(self):
        pipeline = Pipeline(steps=[
            GrayscaleStep(),
            ScaleStep(max_length=50),
            BinarizeStep(),
        ])
        rgb = np.zeros((100, 200, 3), dtype=np.uint8)
        result = pipeline.run(rgb)
        assert result.scale_factor == 4.0
        assert result.threshold == 0
        assert result.center_offset is None
        assert result.step_metadata["binarize"]["metrics"] == {"threshold": 0}

    def test_preserves_original(self):
        pipeline = Pipeline(steps=[GrayscaleStep()])
        img = np.random.randint(0, 256, (100, 200, 3), dtype=np.uint8)
        result = pipeline.run(img)
        assert np.array_equal(result.original, img)
        assert result.original is not img
