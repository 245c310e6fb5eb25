#!/usr/bin/env python3
"""
Unit tests for dimension resolution.

Covers size/position parsing into Pixels | Percent | Anchor | CropMode and
the aspect-preserving resize calculation.
"""

import pytest

from imageflow.enums import Anchor, CropMode
from imageflow.services.transform_pipeline.exceptions import InvalidDimensionError
from imageflow.services.transform_pipeline.utils.dimensions import (
    Percent,
    Pixels,
    parse_position_spec,
    parse_size_spec,
    resolve_position,
    resolve_resize_dimensions,
    resolve_size,
    round_half_up,
)


@pytest.mark.unit
class TestParsing:
    """Parsing raw values into the dimension types."""

    def test_parse_size_pixels(self):
        assert parse_size_spec("400") == Pixels(400)
        assert parse_size_spec(400) == Pixels(400)

    def test_parse_size_percent(self):
        assert parse_size_spec("50%") == Percent(50.0)

    @pytest.mark.parametrize("raw", [None, "", "  ", 0, "0"])
    def test_parse_size_unconstrained(self, raw):
        assert parse_size_spec(raw) == Pixels(0)

    @pytest.mark.parametrize("raw", ["-5", "-10%", -1])
    def test_parse_size_negative_rejected(self, raw):
        with pytest.raises(InvalidDimensionError):
            parse_size_spec(raw)

    @pytest.mark.parametrize("raw", ["abc", "10px", "%", "1,5"])
    def test_parse_size_garbage_rejected(self, raw):
        with pytest.raises(InvalidDimensionError):
            parse_size_spec(raw)

    def test_parse_position_anchors_case_insensitive(self):
        assert parse_position_spec("left") is Anchor.LEFT
        assert parse_position_spec("CENTER") is Anchor.CENTER
        assert parse_position_spec("Bottom") is Anchor.BOTTOM

    def test_parse_position_crop_modes(self):
        assert parse_position_spec("Entropy") is CropMode.ENTROPY
        assert parse_position_spec("balanced") is CropMode.BALANCED

    def test_parse_position_allows_negative_pixels(self):
        assert parse_position_spec("-20") == Pixels(-20)

    def test_parse_position_empty_is_zero(self):
        assert parse_position_spec("") == Pixels(0)
        assert parse_position_spec(None) == Pixels(0)


@pytest.mark.unit
class TestResolveSize:
    """resolve_size against a reference dimension."""

    def test_pixels_pass_through(self):
        assert resolve_size("400", 800) == 400

    def test_percent_of_reference(self):
        assert resolve_size("50%", 800) == 400
        assert resolve_size("33%", 100) == 33

    def test_percent_rounds_to_nearest(self):
        assert resolve_size("10%", 333) == 33
        assert resolve_size("10%", 337) == 34

    def test_percent_halves_round_up(self):
        assert resolve_size("50%", 5) == 3
        assert resolve_size("50%", 7) == 4
        assert resolve_size("25%", 10) == 3

    def test_percent_of_zero_reference(self):
        assert resolve_size("25%", 0) == 0

    def test_fractional_pixels_truncate(self):
        assert resolve_size("12.7", 800) == 12

    def test_zero_and_empty_mean_unconstrained(self):
        assert resolve_size(0, 800) == 0
        assert resolve_size("", 800) == 0
        assert resolve_size(None, 800) == 0


@pytest.mark.unit
class TestResolvePosition:
    """resolve_position against target size and reference dimension."""

    @pytest.mark.parametrize(
        "spec,expected",
        [
            ("left", 0),
            ("top", 0),
            ("right", 700),
            ("bottom", 700),
            ("center", 350),
            ("middle", 350),
        ],
    )
    def test_anchors(self, spec, expected):
        assert resolve_position(spec, 100, 800) == expected

    def test_center_floors_odd_remainder(self):
        assert resolve_position("center", 100, 801) == 350

    def test_negative_when_target_exceeds_reference(self):
        assert resolve_position("right", 900, 800) == -100
        assert resolve_position("center", 901, 800) == -51

    def test_percent_and_pixels(self):
        assert resolve_position("10%", 100, 800) == 80
        assert resolve_position("-20", 100, 800) == -20
        assert resolve_position(15, 100, 800) == 15

    def test_percent_halves_round_away_from_zero(self):
        assert resolve_position("50%", 0, 5) == 3
        assert resolve_position("-50%", 0, 5) == -3

    def test_smart_crop_mode_cannot_be_resolved_here(self):
        with pytest.raises(InvalidDimensionError):
            resolve_position("Entropy", 100, 800)


@pytest.mark.unit
class TestResolveResizeDimensions:
    """Aspect-preserving resize calculation."""

    def test_both_zero_returns_source(self):
        assert resolve_resize_dimensions(800, 600, 0, 0) == (800, 600)

    def test_width_only(self):
        assert resolve_resize_dimensions(800, 600, 400, 0) == (400, 300)

    def test_height_only(self):
        assert resolve_resize_dimensions(800, 600, 0, 300) == (400, 300)

    def test_contain_fit(self):
        assert resolve_resize_dimensions(800, 600, 400, 400) == (400, 300)

    def test_cover_fit(self):
        assert resolve_resize_dimensions(800, 600, 400, 400, cover=True) == (533, 400)

    def test_portrait_contain_and_cover(self):
        assert resolve_resize_dimensions(600, 800, 300, 300) == (225, 300)
        assert resolve_resize_dimensions(600, 800, 300, 300, cover=True) == (300, 400)

    def test_derived_side_halves_round_up(self):
        assert resolve_resize_dimensions(4, 5, 2, 0) == (2, 3)
        assert resolve_resize_dimensions(5, 4, 0, 2) == (3, 2)
        assert resolve_resize_dimensions(4, 5, 2, 10) == (2, 3)

    def test_minimum_one_pixel(self):
        assert resolve_resize_dimensions(1000, 1, 10, 0) == (10, 1)

    def test_zero_source_returns_request(self):
        assert resolve_resize_dimensions(0, 0, 400, 300) == (400, 300)


@pytest.mark.unit
class TestRoundHalfUp:
    """Half-away-from-zero rounding used for pixel values."""

    @pytest.mark.parametrize(
        "value,expected",
        [(0.5, 1), (1.5, 2), (2.5, 3), (2.49, 2), (-0.5, -1), (-2.5, -3), (3.0, 3)],
    )
    def test_rounding(self, value, expected):
        assert round_half_up(value) == expected
