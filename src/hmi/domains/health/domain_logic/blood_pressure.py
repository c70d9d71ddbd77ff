"""Blood pressure category classification.

Systolic and diastolic values are classified independently and the more
severe of the two categories wins. The cut-offs are the same ones applied
when a reading is first saved, so stored categories and reclassified ones
agree:

    category   systolic    diastolic
    normal     < 120       < 80
    elevated   120-129     -
    high       130-139     80-89
    crisis     >= 140      >= 90
"""

from __future__ import annotations

from dataclasses import replace

from hmi.domains.health.domain_logic.records import BP_CATEGORIES, BloodPressureReading

# (lower bound inclusive, category), most severe first
SYSTOLIC_THRESHOLDS: list[tuple[float, str]] = [
    (140, "crisis"),
    (130, "high"),
    (120, "elevated"),
]
DIASTOLIC_THRESHOLDS: list[tuple[float, str]] = [
    (90, "crisis"),
    (80, "high"),
]

SEVERITY = {name: rank for rank, name in enumerate(BP_CATEGORIES)}


def _classify_component(value: float, thresholds: list[tuple[float, str]]) -> str:
    for lower, category in thresholds:
        if value >= lower:
            return category
    return "normal"


def classify_blood_pressure(systolic: float, diastolic: float) -> str:
    """Return normal | elevated | high | crisis for a reading."""
    systolic_category = _classify_component(systolic, SYSTOLIC_THRESHOLDS)
    diastolic_category = _classify_component(diastolic, DIASTOLIC_THRESHOLDS)
    return max(systolic_category, diastolic_category, key=SEVERITY.__getitem__)


def severity(category: str | None) -> int | None:
    """Rank of a category (0 = normal), or None if unrecognised."""
    if category is None:
        return None
    return SEVERITY.get(category)


def reclassify(reading: BloodPressureReading) -> BloodPressureReading:
    """Return a copy of ``reading`` with its category recomputed."""
    category = classify_blood_pressure(reading.systolic, reading.diastolic)
    if category == reading.category:
        return reading
    return replace(reading, category=category)
