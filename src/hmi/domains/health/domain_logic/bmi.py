"""Body Mass Index calculation, classification, and per-height weight ranges.

BMI = weight (kg) / height (m)^2. Categories follow the WHO adult cut-offs:

    < 18.5          Underweight
    [18.5, 25)      Normal
    [25, 30)        Overweight
    >= 30           Obese
"""

from __future__ import annotations

import math

from hmi.domains.health.domain_logic.records import (
    BMIClassification,
    WeightRange,
    is_finite_number,
)
from hmi.domains.health.domain_logic.units import from_kilograms, to_kilograms, to_meters

BMI_BANDS: list[tuple[str, float, float | None]] = [
    ("Underweight", 0.0, 18.5),
    ("Normal", 18.5, 25.0),
    ("Overweight", 25.0, 30.0),
    ("Obese", 30.0, None),
]

# Boundaries shown to users as "your normal range is X-Y"
UNDERWEIGHT_MAX_BMI = 18.4
NORMAL_MIN_BMI = 18.5
NORMAL_MAX_BMI = 24.9
OVERWEIGHT_MIN_BMI = 25.0
OVERWEIGHT_MAX_BMI = 29.9
OBESE_MIN_BMI = 30.0

_MAX_NUDGES = 64


def _height_area(height: float | None, height_unit: str) -> float | None:
    """Height in metres squared, or None when it is not a positive finite number."""
    if not is_finite_number(height) or height <= 0:
        return None
    height_m = to_meters(height, height_unit)
    area = height_m * height_m
    # tiny heights underflow to 0.0 once squared
    if not math.isfinite(area) or area <= 0:
        return None
    return area


def compute_bmi(
    weight: float,
    height: float | None,
    weight_unit: str = "lbs",
    height_unit: str = "in",
) -> float | None:
    """Compute BMI, or None when height (or weight) cannot produce a finite value."""
    area = _height_area(height, height_unit)
    if area is None or not is_finite_number(weight):
        return None
    bmi = to_kilograms(weight, weight_unit) / area
    return bmi if math.isfinite(bmi) else None


def classify_bmi(bmi: float) -> BMIClassification:
    """Map a BMI value to its category and [lower, upper) band."""
    for category, lower, upper in BMI_BANDS:
        if upper is None or bmi < upper:
            return BMIClassification(category=category, band=(lower, upper))
    # unreachable: the last band is open-ended
    raise AssertionError("BMI bands must end with an open band")


def _lowest_weight_in_category(
    boundary_bmi: float,
    category: str,
    area: float,
    height: float,
    height_unit: str,
    weight_unit: str,
) -> float:
    """Smallest weight whose computed BMI falls in ``category``.

    The analytic inverse can land a rounding step either side of the
    boundary, so the result is nudged to the exact float edge.
    """
    weight = from_kilograms(boundary_bmi * area, weight_unit)

    def in_category(w: float) -> bool:
        bmi = compute_bmi(w, height, weight_unit, height_unit)
        return bmi is not None and classify_bmi(bmi).category == category

    for _ in range(_MAX_NUDGES):
        if in_category(weight):
            break
        weight = math.nextafter(weight, math.inf)
    for _ in range(_MAX_NUDGES):
        lower = math.nextafter(weight, -math.inf)
        if not in_category(lower):
            break
        weight = lower
    return weight


def weight_range_for_height(
    height: float | None,
    height_unit: str = "in",
    weight_unit: str = "lbs",
) -> WeightRange | None:
    """Express the BMI category boundaries as weights in ``weight_unit``.

    Returns None when the height is absent, not a positive finite number, or
    too extreme for the boundaries to be finite weights.
    """
    area = _height_area(height, height_unit)
    if area is None:
        return None

    def at(bmi: float) -> float:
        return from_kilograms(bmi * area, weight_unit)

    if not math.isfinite(at(OBESE_MIN_BMI)):
        return None

    return WeightRange(
        underweight_max=at(UNDERWEIGHT_MAX_BMI),
        normal_min=_lowest_weight_in_category(NORMAL_MIN_BMI, "Normal", area, height, height_unit, weight_unit),
        normal_max=at(NORMAL_MAX_BMI),
        overweight_min=_lowest_weight_in_category(
            OVERWEIGHT_MIN_BMI, "Overweight", area, height, height_unit, weight_unit
        ),
        overweight_max=at(OVERWEIGHT_MAX_BMI),
        obese_min=_lowest_weight_in_category(OBESE_MIN_BMI, "Obese", area, height, height_unit, weight_unit),
        unit=weight_unit,
    )
