"""
Tests for the linear choropleth color scale.
"""

import pytest

from services.choropleth import hex_to_rgb, lerp, make_linear_rgb_scale, make_linear_scale


class TestHexToRgb:
    """Test cases for hex_to_rgb."""

    def test_six_digit_with_hash(self):
        assert hex_to_rgb("#ff8000") == (255, 128, 0)

    def test_six_digit_without_hash(self):
        assert hex_to_rgb("0000ff") == (0, 0, 255)

    def test_three_digit_shorthand(self):
        assert hex_to_rgb("#f0a") == (255, 0, 170)


class TestLinearScale:
    """Test cases for make_linear_scale / make_linear_rgb_scale."""

    def test_lerp(self):
        assert lerp(0, 10, 0.25) == 2.5

    def test_endpoints(self):
        scale = make_linear_scale(0, 10, ["#000000", "#ffffff"])
        assert scale(0) == "rgb(0,0,0)"
        assert scale(10) == "rgb(255,255,255)"

    def test_midpoint_rounds_half_up(self):
        scale = make_linear_scale(0, 10, ["#000000", "#ffffff"])
        assert scale(5) == "rgb(128,128,128)"

    def test_values_outside_domain_are_clamped(self):
        scale = make_linear_scale(0, 10, ["#000000", "#ffffff"])
        assert scale(-50) == "rgb(0,0,0)"
        assert scale(99) == "rgb(255,255,255)"

    def test_three_stops(self):
        scale = make_linear_scale(0, 10, ["#ff0000", "#00ff00", "#0000ff"])
        assert scale(5) == "rgb(0,255,0)"
        assert scale(2.5) == "rgb(128,128,0)"
        assert scale(7.5) == "rgb(0,128,128)"

    def test_channels_blend_monotonically_within_interval(self):
        scale = make_linear_rgb_scale(0, 10, ["#ff0000", "#00ff00", "#0000ff"])
        first_half = [scale(v / 2.0) for v in range(0, 11)]
        reds = [c[0] for c in first_half]
        greens = [c[1] for c in first_half]
        assert reds == sorted(reds, reverse=True)
        assert greens == sorted(greens)
        assert all(c[2] == 0 for c in first_half)

    def test_single_color(self):
        scale = make_linear_scale(0, 1, ["#123456"])
        assert scale(0) == scale(0.5) == scale(1) == "rgb(18,52,86)"

    def test_degenerate_domain(self):
        scale = make_linear_scale(5, 5, ["#000000", "#ffffff"])
        assert scale(5) == "rgb(0,0,0)"
        assert scale(6) == "rgb(255,255,255)"

    def test_nan_maps_to_first_stop(self):
        scale = make_linear_rgb_scale(0, 10, ["#000000", "#ffffff"])
        assert scale(float("nan")) == (0, 0, 0)

    def test_infinities_clamp_to_end_stops(self):
        scale = make_linear_rgb_scale(0, 10, ["#ff0000", "#00ff00", "#0000ff"])
        assert scale(float("inf")) == (0, 0, 255)
        assert scale(float("-inf")) == (255, 0, 0)

    def test_empty_colors_rejected(self):
        with pytest.raises(ValueError):
            make_linear_scale(0, 1, [])
