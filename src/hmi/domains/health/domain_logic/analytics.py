"""Range-filtered summaries for the trends and analytics views.

Summaries are returned as JSON-ready dicts. An empty range yields
``{"status": "no_data", ...}`` rather than zeros that look like readings.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Sequence, TypeVar

from hmi.domains.health.domain_logic.blood_pressure import classify_blood_pressure
from hmi.domains.health.domain_logic.bmi import classify_bmi, compute_bmi
from hmi.domains.health.domain_logic.records import (
    BP_CATEGORIES,
    BloodPressureReading,
    Insight,
    WeightRecord,
    as_utc,
    mean,
    oldest_first,
    resolve_now,
    round_half_up,
)
from hmi.domains.health.domain_logic.trends import (
    blood_pressure_split_trend,
    latest_and_previous,
    weight_split_trend,
)
from hmi.domains.health.domain_logic.units import convert_weight

R = TypeVar("R")

HIGH_PULSE_BPM = 100
GOOD_READINGS_PER_WEEK = 3


def filter_by_range(records: Sequence[R], days: int, now: datetime | None = None) -> list[R]:
    """Records dated within the last ``days`` days, oldest first."""
    now = resolve_now(now)
    cutoff = now - timedelta(days=days)
    return oldest_first(r for r in records if as_utc(r.date) >= cutoff)  # type: ignore[attr-defined]


def _trend_dicts(trends: dict | None) -> dict[str, Any] | None:
    if trends is None:
        return None
    return {k: (v.to_dict() if v is not None else None) for k, v in trends.items()}


# ---------------------------------------------------------------------------
# Blood pressure
# ---------------------------------------------------------------------------

def _category_of(reading: BloodPressureReading) -> str:
    if reading.category in BP_CATEGORIES:
        return reading.category
    return classify_blood_pressure(reading.systolic, reading.diastolic)


def summarize_blood_pressure(
    readings: Sequence[BloodPressureReading],
    days: int = 30,
    now: datetime | None = None,
) -> dict[str, Any]:
    """Averages, distribution, frequency and split-half trend for a time range."""
    in_range = filter_by_range(readings, days, now)
    if not in_range:
        return {"period_days": days, "total_readings": 0, "status": "no_data"}

    distribution = {name: 0 for name in BP_CATEGORIES}
    for reading in in_range:
        distribution[_category_of(reading)] += 1

    pulses = [r.pulse for r in in_range if r.pulse]
    avg_pulse = mean(pulses)
    systolics = [r.systolic for r in in_range]
    diastolics = [r.diastolic for r in in_range]

    return {
        "period_days": days,
        "total_readings": len(in_range),
        "readings_per_week": int(round_half_up(len(in_range) / days * 7)),
        "averages": {
            "systolic": int(round_half_up(mean(systolics))),
            "diastolic": int(round_half_up(mean(diastolics))),
            "pulse": int(round_half_up(avg_pulse)) if avg_pulse is not None else None,
        },
        "category_distribution": distribution,
        "systolic_range": {"min": min(systolics), "max": max(systolics)},
        "diastolic_range": {"min": min(diastolics), "max": max(diastolics)},
        "trend": _trend_dicts(blood_pressure_split_trend(in_range)),
    }


def blood_pressure_trend_insights(summary: dict[str, Any]) -> list[Insight]:
    """Observations for the blood pressure trends view."""
    if not summary.get("total_readings"):
        return []

    insights: list[Insight] = []
    per_week = summary["readings_per_week"]
    if per_week >= GOOD_READINGS_PER_WEEK:
        insights.append(Insight(
            title="Reading Pattern",
            description=(
                f"You're taking readings {per_week} times per week on average. "
                "This is a good frequency for monitoring."
            ),
            type="positive",
        ))
    else:
        insights.append(Insight(
            title="Reading Pattern",
            description=(
                f"You're taking readings {per_week} times per week on average. "
                "Consider increasing frequency for better tracking."
            ),
            type="reminder",
        ))

    systolic = (summary.get("trend") or {}).get("systolic")
    if systolic is not None:
        change = abs(systolic["diff"])
        if systolic["is_positive"]:
            insights.append(Insight(
                title="Trend Analysis",
                description=(
                    f"Your blood pressure has been trending upward by {change:.1f} mmHg "
                    "over this period. Consider lifestyle changes or consult your doctor."
                ),
                type="warning",
            ))
        else:
            insights.append(Insight(
                title="Trend Analysis",
                description=(
                    f"Your blood pressure has been trending downward by {change:.1f} mmHg "
                    "over this period. Keep up the good work!"
                ),
                type="positive",
            ))

    distribution = summary["category_distribution"]
    flagged = distribution["high"] + distribution["crisis"]
    if flagged:
        insights.append(Insight(
            title="Elevated Readings",
            description=(
                f"You have {flagged} high or crisis readings. Consider monitoring more "
                "frequently and consult your healthcare provider."
            ),
            type="warning",
        ))
    else:
        insights.append(Insight(
            title="Good Control",
            description=(
                "All your readings are in the normal or elevated range. "
                "Keep maintaining your current lifestyle!"
            ),
            type="positive",
        ))

    avg_pulse = summary["averages"]["pulse"]
    if avg_pulse:
        if avg_pulse > HIGH_PULSE_BPM:
            insights.append(Insight(
                title="Heart Rate",
                description=f"Your average heart rate is {avg_pulse} bpm. Consider stress management techniques.",
                type="warning",
            ))
        else:
            insights.append(Insight(
                title="Heart Rate",
                description=f"Your average heart rate is {avg_pulse} bpm. This is within normal range.",
                type="positive",
            ))
    return insights


# ---------------------------------------------------------------------------
# Weight
# ---------------------------------------------------------------------------

def _time_of_day(hour: int) -> str:
    if 6 <= hour < 12:
        return "morning"
    if 12 <= hour < 18:
        return "afternoon"
    return "evening"


def summarize_weight(
    records: Sequence[WeightRecord],
    days: int = 30,
    now: datetime | None = None,
) -> dict[str, Any]:
    """Averages, BMI distribution, recording habits and trends for a time range.

    Weights are reported in the unit of the most recent record in range.
    """
    now = resolve_now(now)
    in_range = filter_by_range(records, days, now)
    if not in_range:
        return {"period_days": days, "total_records": 0, "status": "no_data"}

    unit = in_range[-1].unit
    weights = [convert_weight(r.weight, r.unit, unit) for r in in_range]
    bmis = [
        b for b in (compute_bmi(r.weight, r.height, r.unit, r.height_unit) for r in in_range)
        if b is not None
    ]

    bmi_distribution = {"underweight": 0, "normal": 0, "overweight": 0, "obese": 0}
    for bmi in bmis:
        bmi_distribution[classify_bmi(bmi).category.lower()] += 1

    patterns = {"morning": 0, "afternoon": 0, "evening": 0}
    for record in in_range:
        local = as_utc(record.date).astimezone(now.tzinfo)
        patterns[_time_of_day(local.hour)] += 1

    avg_bmi = mean(bmis)
    return {
        "period_days": days,
        "unit": unit,
        "total_records": len(in_range),
        "records_with_height": len(bmis),
        "records_with_notes": sum(1 for r in in_range if r.notes and r.notes.strip()),
        "records_per_week": round_half_up(len(in_range) / (days / 7), 1),
        "average_weight": round_half_up(mean(weights), 1),
        "average_bmi": round_half_up(avg_bmi, 1) if avg_bmi is not None else None,
        "bmi_distribution": bmi_distribution,
        "time_patterns": patterns,
        "weight_range": {
            "min": min(weights),
            "max": max(weights),
            "range": max(weights) - min(weights),
        },
        "trend": _trend_dicts(weight_split_trend(in_range)),
    }


# ---------------------------------------------------------------------------
# Analytics metric cards
# ---------------------------------------------------------------------------

_BP_STATUS = {
    "normal": "normal",
    "elevated": "warning",
    "high": "warning",
    "crisis": "critical",
}


def _direction(current: float, previous: float) -> str:
    if current < previous:
        return "down"
    if current > previous:
        return "up"
    return "stable"


def metric_cards(
    blood_pressure: Sequence[BloodPressureReading],
    weights: Sequence[WeightRecord],
) -> list[dict[str, Any]]:
    """Current vs previous value, direction and status per tracked metric."""
    cards: list[dict[str, Any]] = []

    latest, previous = latest_and_previous(blood_pressure)
    if latest is not None:
        direction = "stable"
        if previous is not None:
            direction = _direction(
                (latest.systolic + latest.diastolic) / 2,
                (previous.systolic + previous.diastolic) / 2,
            )
        cards.append({
            "name": "Blood Pressure",
            "current": f"{latest.systolic}/{latest.diastolic}",
            "previous": f"{previous.systolic}/{previous.diastolic}" if previous else "N/A",
            "trend": direction,
            "status": _BP_STATUS.get(latest.category, "normal"),
        })

    latest_w, previous_w = latest_and_previous(weights)
    if latest_w is not None:
        direction, status = "stable", "normal"
        if previous_w is not None:
            direction = _direction(
                latest_w.weight, convert_weight(previous_w.weight, previous_w.unit, latest_w.unit)
            )
            status = {"down": "improving", "up": "warning"}.get(direction, "normal")
        cards.append({
            "name": "Weight",
            "current": f"{latest_w.weight:g} {latest_w.unit}",
            "previous": f"{previous_w.weight:g} {previous_w.unit}" if previous_w else "N/A",
            "trend": direction,
            "status": status,
        })

    if not cards:
        for name in ("Blood Pressure", "Weight"):
            cards.append({
                "name": name,
                "current": "No data",
                "previous": "N/A",
                "trend": "stable",
                "status": "normal",
            })
    return cards
