"""Tests for BMI calculation, classification and per-height weight ranges."""

from __future__ import annotations

import math

import pytest

from hmi.domains.health.domain_logic.bmi import (
    classify_bmi,
    compute_bmi,
    weight_range_for_height,
)


class TestComputeBMI:
    def test_imperial(self):
        assert compute_bmi(160, 70) == pytest.approx(22.957, abs=0.001)

    def test_metric(self):
        assert compute_bmi(70, 175, "kg", "cm") == pytest.approx(22.857, abs=0.001)

    @pytest.mark.parametrize("height", [None, 0, -5, math.nan, math.inf])
    def test_unusable_height_returns_none(self, height):
        assert compute_bmi(160, height) is None

    def test_non_finite_weight_returns_none(self):
        assert compute_bmi(math.nan, 70) is None

    @pytest.mark.parametrize("height", [1e-170, 1e-200])
    def test_height_that_underflows_when_squared(self, height):
        assert compute_bmi(160, height) is None
        assert compute_bmi(70, height, "kg", "cm") is None

    def test_height_that_overflows_when_squared(self):
        assert compute_bmi(160, 1e200) is None

    def test_increasing_in_weight(self):
        values = [compute_bmi(w, 68) for w in range(90, 320, 7)]
        assert values == sorted(values)
        assert len(set(values)) == len(values)

    def test_decreasing_in_height(self):
        values = [compute_bmi(170, h) for h in range(55, 85)]
        assert values == sorted(values, reverse=True)


class TestClassifyBMI:
    @pytest.mark.parametrize(
        "bmi, category",
        [
            (15.0, "Underweight"),
            (18.49, "Underweight"),
            (18.5, "Normal"),
            (24.99, "Normal"),
            (25.0, "Overweight"),
            (29.99, "Overweight"),
            (30.0, "Obese"),
            (45.0, "Obese"),
        ],
    )
    def test_bands(self, bmi, category):
        assert classify_bmi(bmi).category == category

    def test_band_bounds(self):
        assert classify_bmi(22).band == (18.5, 25.0)
        assert classify_bmi(35).to_dict() == {"category": "Obese", "band": [30.0, None]}


class TestWeightRangeForHeight:
    def test_normal_min_is_boundary_exact(self):
        weight_range = weight_range_for_height(70, "in", "lbs")
        at_min = compute_bmi(weight_range.normal_min, 70)
        below = compute_bmi(weight_range.normal_min - 0.1, 70)
        assert classify_bmi(at_min).category == "Normal"
        assert classify_bmi(below).category == "Underweight"

    def test_overweight_and_obese_minimums_are_boundary_exact(self):
        weight_range = weight_range_for_height(64, "in", "lbs")
        assert classify_bmi(compute_bmi(weight_range.overweight_min, 64)).category == "Overweight"
        assert classify_bmi(compute_bmi(weight_range.overweight_min - 0.1, 64)).category == "Normal"
        assert classify_bmi(compute_bmi(weight_range.obese_min, 64)).category == "Obese"
        assert classify_bmi(compute_bmi(weight_range.obese_min - 0.1, 64)).category == "Overweight"

    def test_values_in_pounds(self):
        weight_range = weight_range_for_height(70, "in", "lbs")
        assert weight_range.unit == "lbs"
        assert weight_range.normal_min == pytest.approx(128.9, abs=0.1)
        assert weight_range.normal_max == pytest.approx(173.5, abs=0.1)
        assert weight_range.obese_min == pytest.approx(209.1, abs=0.1)

    def test_values_in_kilograms(self):
        weight_range = weight_range_for_height(175, "cm", "kg")
        assert weight_range.unit == "kg"
        assert weight_range.normal_min == pytest.approx(56.66, abs=0.01)
        assert weight_range.overweight_min == pytest.approx(76.56, abs=0.01)

    def test_boundaries_are_ordered(self):
        r = weight_range_for_height(66)
        assert r.underweight_max < r.normal_min < r.normal_max < r.overweight_min
        assert r.overweight_min < r.overweight_max < r.obese_min

    @pytest.mark.parametrize("height", [None, 0, -1, math.nan])
    def test_unusable_height_returns_none(self, height):
        assert weight_range_for_height(height) is None

    @pytest.mark.parametrize("height", [1e-170, 1e-200, 1e200])
    def test_extreme_heights_return_none(self, height):
        assert weight_range_for_height(height) is None
        assert weight_range_for_height(height, "cm", "kg") is None

    def test_to_dict_rounds(self):
        data = weight_range_for_height(70).to_dict(ndigits=1)
        assert data["normal_min"] == round(data["normal_min"], 1)
        assert data["unit"] == "lbs"
