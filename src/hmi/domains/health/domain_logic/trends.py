"""Trend calculation between readings and across a series.

``trend`` is the single primitive: every weight, BMI, systolic and diastolic
comparison goes through it. Record helpers sort their input by date before
picking "latest" and "previous" so callers need not pre-sort.
"""

from __future__ import annotations

import logging
from typing import Sequence

from hmi.domains.health.domain_logic.bmi import compute_bmi
from hmi.domains.health.domain_logic.records import (
    BloodPressureReading,
    TrendResult,
    WeightRecord,
    is_finite_number,
    mean,
    newest_first,
    oldest_first,
)
from hmi.domains.health.domain_logic.units import convert_weight

logger = logging.getLogger(__name__)


def trend(current: float, previous: float | None) -> TrendResult | None:
    """Compare ``current`` with ``previous``.

    Returns None when there is no usable previous value. A previous value of
    exactly 0 is treated the same as a missing one, since the percentage
    change is undefined.
    """
    if not previous or not is_finite_number(previous) or not is_finite_number(current):
        return None
    diff = current - previous
    return TrendResult(
        diff=diff,
        percentage=f"{diff / previous * 100:.1f}",
        is_positive=diff > 0,
    )


def split_half_trend(values: Sequence[float]) -> TrendResult | None:
    """Trend from the first-half mean to the second-half mean.

    ``values`` must be in chronological order. With an odd count the extra
    value belongs to the second half.
    """
    if len(values) < 2:
        return None
    mid = len(values) // 2
    first_mean = mean(values[:mid])
    second_mean = mean(values[mid:])
    return trend(second_mean, first_mean)


# ---------------------------------------------------------------------------
# Latest vs previous record
# ---------------------------------------------------------------------------

def latest_and_previous(records):
    """Return (latest, previous) by date; either may be None."""
    ordered = newest_first(records)
    latest = ordered[0] if ordered else None
    previous = ordered[1] if len(ordered) > 1 else None
    return latest, previous


def weight_trend(records: Sequence[WeightRecord]) -> TrendResult | None:
    """Latest weight vs the previous one, in the latest record's unit."""
    latest, previous = latest_and_previous(records)
    if latest is None or previous is None:
        return None
    previous_weight = convert_weight(previous.weight, previous.unit, latest.unit)
    return trend(latest.weight, previous_weight)


def _record_bmi(record: WeightRecord) -> float | None:
    return compute_bmi(record.weight, record.height, record.unit, record.height_unit)


def bmi_trend(records: Sequence[WeightRecord]) -> TrendResult | None:
    """Latest BMI vs the previous one; None unless both records have height."""
    latest, previous = latest_and_previous(records)
    if latest is None or previous is None:
        return None
    current_bmi = _record_bmi(latest)
    previous_bmi = _record_bmi(previous)
    if current_bmi is None or previous_bmi is None:
        return None
    return trend(current_bmi, previous_bmi)


def blood_pressure_trend(
    readings: Sequence[BloodPressureReading],
) -> dict[str, TrendResult | None] | None:
    """Systolic and diastolic trends of the latest reading vs the previous one."""
    latest, previous = latest_and_previous(readings)
    if latest is None or previous is None:
        return None
    return {
        "systolic": trend(latest.systolic, previous.systolic),
        "diastolic": trend(latest.diastolic, previous.diastolic),
    }


# ---------------------------------------------------------------------------
# Split-half (long range)
# ---------------------------------------------------------------------------

def blood_pressure_split_trend(
    readings: Sequence[BloodPressureReading],
) -> dict[str, TrendResult | None] | None:
    if len(readings) < 2:
        return None
    ordered = oldest_first(readings)
    return {
        "systolic": split_half_trend([r.systolic for r in ordered]),
        "diastolic": split_half_trend([r.diastolic for r in ordered]),
    }


def weight_split_trend(
    records: Sequence[WeightRecord],
) -> dict[str, TrendResult | None] | None:
    """Split-half trends for weight and, where heights exist, BMI.

    Weights are expressed in the unit of the most recent record. The BMI
    series only uses records that carry a height.
    """
    if len(records) < 2:
        return None
    ordered = oldest_first(records)
    unit = ordered[-1].unit
    weights = [convert_weight(r.weight, r.unit, unit) for r in ordered]
    bmis = [b for b in (_record_bmi(r) for r in ordered) if b is not None]
    logger.debug("Split trend over %d weights, %d with BMI", len(weights), len(bmis))
    return {
        "weight": split_half_trend(weights),
        "bmi": split_half_trend(bmis) if len(bmis) >= 2 else None,
    }
