#!/usr/bin/env python3
"""
Unit tests for the TransformPipeline facade.

Uses a MagicMock engine so every assertion is about the parameters the
facade computes and hands to the engine.
"""

from io import BytesIO
from pathlib import Path
from unittest.mock import call

import pytest

from imageflow.enums import CropMode
from imageflow.services.transform_pipeline import TransformPipeline
from imageflow.services.transform_pipeline.exceptions import (
    InvalidDimensionError,
    InvalidOperationError,
    OutputError,
)


def geometry_calls(engine):
    """Engine calls that change orientation, in order."""
    return [c for c in engine.method_calls if c[0] in ("flip", "flop", "rotate")]


@pytest.mark.unit
class TestTransformPipeline:
    """Test suite for the facade with a fake engine."""

    @pytest.fixture
    def pipeline(self, fake_engine):
        return TransformPipeline(fake_engine)

    # ============================================================================
    # RESIZE TESTS
    # ============================================================================

    def test_resize_width_only(self, pipeline, fake_engine):
        pipeline.resize(400)
        fake_engine.resize.assert_called_once_with(400, 300)

    def test_resize_percent(self, pipeline, fake_engine):
        pipeline.resize("50%")
        fake_engine.resize.assert_called_once_with(400, 300)

    def test_resize_contain_fit(self, pipeline, fake_engine):
        pipeline.resize(800, 300)
        fake_engine.resize.assert_called_once_with(400, 300)

    def test_resize_cover_fit(self, pipeline, fake_engine):
        pipeline.resize(400, 400, cover=True)
        fake_engine.resize.assert_called_once_with(533, 400)

    def test_resize_same_width_is_skipped(self, pipeline, fake_engine):
        pipeline.resize(800)
        fake_engine.resize.assert_not_called()

    def test_resize_larger_without_enlarge_is_skipped(self, pipeline, fake_engine):
        pipeline.resize(1600)
        fake_engine.resize.assert_not_called()

    def test_resize_larger_with_enlarge(self, pipeline, fake_engine):
        pipeline.resize(1600, enlarge=True)
        fake_engine.resize.assert_called_once_with(1600, 1200)

    def test_resize_guard_compares_width_only(self, pipeline, fake_engine):
        # Height-driven enlargement is caught through the derived width
        pipeline.resize(0, 1200)
        fake_engine.resize.assert_not_called()

    def test_resize_returns_pipeline_for_chaining(self, pipeline):
        assert pipeline.resize(400) is pipeline

    # ============================================================================
    # CROP TESTS
    # ============================================================================

    def test_crop_defaults_to_center_middle(self, pipeline, fake_engine):
        pipeline.crop(400, 300)
        fake_engine.crop.assert_called_once_with(400, 300, 200, 150)

    def test_crop_named_anchors(self, pipeline, fake_engine):
        pipeline.crop(400, 300, "right", "bottom")
        fake_engine.crop.assert_called_once_with(400, 300, 400, 300)

    def test_crop_percentages(self, pipeline, fake_engine):
        pipeline.crop("50%", "50%", "25%", "0")
        fake_engine.crop.assert_called_once_with(400, 300, 200, 0)

    def test_crop_zero_keeps_current_dimension(self, pipeline, fake_engine):
        pipeline.crop(0, 0, "left", "top")
        fake_engine.crop.assert_called_once_with(800, 600, 0, 0)

    def test_crop_larger_than_image_gives_negative_offsets(self, pipeline, fake_engine):
        pipeline.crop(1000, 600)
        fake_engine.crop.assert_called_once_with(1000, 600, -100, 0)

    def test_smart_crop_overwrites_y(self, pipeline, fake_engine):
        fake_engine.get_crop_offsets.return_value = (120, 45)

        pipeline.crop(400, 300, "Entropy", "top")

        fake_engine.get_crop_offsets.assert_called_once_with(400, 300, CropMode.ENTROPY)
        fake_engine.crop.assert_called_once_with(400, 300, 120, 45)

    def test_crop_invalid_position(self, pipeline, fake_engine):
        with pytest.raises(InvalidDimensionError):
            pipeline.crop(400, 300, "somewhere")
        fake_engine.crop.assert_not_called()

    # ============================================================================
    # RESIZE CROP TESTS
    # ============================================================================

    def test_resize_crop_covers_then_crops(self, pipeline, fake_engine):
        pipeline.resize_crop(400, 400)

        fake_engine.resize.assert_called_once_with(533, 400)
        fake_engine.crop.assert_called_once_with(400, 400, 66, 0)

    def test_resize_crop_percent_crop_resolves_against_resized_image(
        self, pipeline, fake_engine
    ):
        pipeline.resize_crop("50%", "50%")

        fake_engine.resize.assert_called_once_with(400, 300)
        fake_engine.crop.assert_called_once_with(200, 150, 100, 75)

    def test_resize_crop_zero_height_keeps_resized_height(self, pipeline, fake_engine):
        pipeline.resize_crop(400, 0)

        fake_engine.resize.assert_called_once_with(400, 300)
        fake_engine.crop.assert_called_once_with(400, 300, 0, 0)

    # ============================================================================
    # ROTATE / FLIP / SETTINGS TESTS
    # ============================================================================

    def test_rotate_zero_is_noop(self, pipeline, fake_engine):
        pipeline.rotate(0)
        pipeline.rotate("0")
        fake_engine.rotate.assert_not_called()

    def test_rotate_truncates_fraction(self, pipeline, fake_engine):
        pipeline.rotate("90.5")
        fake_engine.rotate.assert_called_once_with(90)

    def test_rotate_negative(self, pipeline, fake_engine):
        pipeline.rotate(-90)
        fake_engine.rotate.assert_called_once_with(-90)

    def test_flip_and_flop(self, pipeline, fake_engine):
        pipeline.flip().flop()
        assert [c[0] for c in geometry_calls(fake_engine)] == ["flip", "flop"]

    @pytest.mark.parametrize(
        "quality,expected", [(150, 100), (-5, 0), ("80", 80), (0, 0), (100, 100)]
    )
    def test_compression_quality_is_clamped(self, pipeline, fake_engine, quality, expected):
        pipeline.set_compression_quality(quality)
        fake_engine.set_compression_quality.assert_called_once_with(expected)

    def test_background_passthrough(self, pipeline, fake_engine):
        pipeline.set_background((0, 127, 34))
        fake_engine.set_background.assert_called_once_with((0, 127, 34))

    def test_format_passthrough(self, pipeline, fake_engine):
        pipeline.format("webp")
        fake_engine.format.assert_called_once_with("webp")

    # ============================================================================
    # TRANSFORM TESTS
    # ============================================================================

    def test_transform_executes_in_order(self, pipeline, fake_engine):
        pipeline.transform("resize,400|crop,200,200,left,top|format,png")

        applied = [
            c for c in fake_engine.method_calls if c[0] in ("resize", "crop", "format")
        ]
        assert applied == [
            call.resize(400, 300),
            call.crop(200, 200, 0, 0),
            call.format("png"),
        ]

    def test_transform_enlarge_flag(self, pipeline, fake_engine):
        pipeline.transform("resize,1600,0,1")
        fake_engine.resize.assert_called_once_with(1600, 1200)

    def test_transform_crop_entropy_token(self, pipeline, fake_engine):
        fake_engine.get_crop_offsets.return_value = (10, 20)

        pipeline.transform("resizeCrop,400,400,CROP_ENTROPY")

        fake_engine.get_crop_offsets.assert_called_once_with(400, 400, CropMode.ENTROPY)
        fake_engine.crop.assert_called_once_with(400, 400, 10, 20)

    def test_transform_crop_balanced_token(self, pipeline, fake_engine):
        pipeline.transform("crop,100,100,CROP_BALANCED")
        fake_engine.get_crop_offsets.assert_called_once_with(100, 100, CropMode.BALANCED)

    @pytest.mark.parametrize("operations", ["", None])
    def test_transform_empty_is_noop(self, pipeline, fake_engine, operations):
        fake_engine.reset_mock()
        assert pipeline.transform(operations) is pipeline
        assert fake_engine.method_calls == []

    def test_parse_error_aborts_before_any_change(self, pipeline, fake_engine):
        with pytest.raises(InvalidOperationError):
            pipeline.transform("resize,400|blur,3")

        fake_engine.resize.assert_not_called()

    # ============================================================================
    # AUTO ROTATE / EXIF TESTS
    # ============================================================================

    @pytest.mark.parametrize(
        "orientation,expected",
        [
            (1, []),
            (None, []),
            (2, [call.flop()]),
            (3, [call.rotate(180)]),
            (4, [call.flip()]),
            (5, [call.flip(), call.rotate(-90)]),
            (6, [call.rotate(90)]),
            (7, [call.flop(), call.rotate(-90)]),
            (8, [call.rotate(90)]),
        ],
    )
    def test_auto_rotate_orientation_table(
        self, pipeline, fake_engine, monkeypatch, orientation, expected
    ):
        monkeypatch.setattr(pipeline, "get_exif_data", lambda key=None: orientation)

        pipeline.auto_rotate()

        assert geometry_calls(fake_engine) == expected

    def test_exif_requires_file_source(self, pipeline):
        assert pipeline.get_exif_data() is None
        assert pipeline.get_exif_data("Orientation") is None

    def test_exif_requires_jpeg_source(self, fake_engine_factory):
        pipeline = TransformPipeline(
            fake_engine_factory(mime_type="image/png"), filename="image.png"
        )
        assert pipeline.get_exif_data() is None

    # ============================================================================
    # OUTPUT TESTS
    # ============================================================================

    def test_save_without_destination_fails(self, pipeline):
        with pytest.raises(OutputError):
            pipeline.save()

    def test_save_to_explicit_filename(self, pipeline, fake_engine):
        pipeline.save("out.jpg")
        fake_engine.save.assert_called_once_with("out.jpg")

    def test_save_defaults_to_source(self, fake_engine):
        pipeline = TransformPipeline(fake_engine, filename="source.jpg")
        pipeline.save()
        fake_engine.save.assert_called_once_with(Path("source.jpg"))

    def test_show_writes_header_and_exits(self, pipeline, fake_engine):
        fake_engine.get_bytes.return_value = b"\xff\xd8data"
        stream = BytesIO()

        with pytest.raises(SystemExit):
            pipeline.show(stream)

        assert stream.getvalue() == b"Content-Type: image/jpeg\r\n\r\n\xff\xd8data"
