"""Deterministic 0-100 health score.

Five independent components, each with a fixed maximum:

    blood_pressure   30   latest reading's category
    weight           25   BMI band of the latest weight record
    activity         20   readings logged in the trailing 7 days
    goals            15   flat engagement baseline
    preventive_care  10   upcoming or recent doctor visit

Every branch resolves to an explicit fallback, so the total is always a
finite integer. With no data at all the score is 5 + 5 + 5 + 10 + 5 = 30.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Sequence

from hmi.domains.health.domain_logic.bmi import compute_bmi
from hmi.domains.health.domain_logic.records import (
    ACTIVITY_WINDOW_DAYS,
    PREVENTIVE_WINDOW_DAYS,
    SCORE_MAX,
    BloodPressureReading,
    DoctorVisit,
    HealthGoal,
    HealthScoreBreakdown,
    ScoreComponent,
    WeightRecord,
    as_utc,
    resolve_now,
)

logger = logging.getLogger(__name__)

BP_CATEGORY_POINTS = {
    "normal": 30,
    "elevated": 20,
    "high": 10,
    "crisis": 0,
}
BP_UNKNOWN_POINTS = 15
BP_ABSENT_POINTS = 5

GOALS_BASELINE_POINTS = 10


def _component(name: str, score: int, reason: str) -> ScoreComponent:
    max_score = SCORE_MAX[name]
    return ScoreComponent(score=max(0, min(max_score, score)), max_score=max_score, reason=reason)


def score_blood_pressure(reading: BloodPressureReading | None) -> ScoreComponent:
    if reading is None:
        return _component("blood_pressure", BP_ABSENT_POINTS, "No blood pressure readings recorded")
    category = reading.category
    if category in BP_CATEGORY_POINTS:
        return _component(
            "blood_pressure",
            BP_CATEGORY_POINTS[category],
            f"Latest reading {reading.systolic}/{reading.diastolic} is {category}",
        )
    return _component(
        "blood_pressure",
        BP_UNKNOWN_POINTS,
        f"Latest reading {reading.systolic}/{reading.diastolic} has no recognised category",
    )


def score_weight(record: WeightRecord | None) -> ScoreComponent:
    if record is None:
        return _component("weight", 5, "No weight records")
    bmi = compute_bmi(record.weight, record.height, record.unit, record.height_unit)
    if bmi is None:
        return _component("weight", 10, "Weight recorded without height; BMI unavailable")

    if 18.5 <= bmi < 25:
        points, band = 25, "in the healthy range"
    elif 17 <= bmi < 18.5 or 25 <= bmi < 30:
        points, band = 15, "slightly outside the healthy range"
    elif 16 <= bmi < 17 or bmi >= 30:
        points, band = 5, "outside the healthy range"
    else:
        points, band = 0, "far below the healthy range"
    return _component("weight", points, f"BMI {bmi:.1f} is {band}")


def score_activity(
    blood_pressure_history: Sequence[BloodPressureReading],
    weight_history: Sequence[WeightRecord],
    now: datetime,
) -> ScoreComponent:
    cutoff = now - timedelta(days=ACTIVITY_WINDOW_DAYS)
    history = [*blood_pressure_history, *weight_history]
    recent = sum(1 for r in history if cutoff <= as_utc(r.date) <= now)

    if recent >= 3:
        return _component("activity", 20, f"{recent} readings logged in the last {ACTIVITY_WINDOW_DAYS} days")
    if recent >= 1:
        return _component("activity", 15, f"{recent} reading(s) logged in the last {ACTIVITY_WINDOW_DAYS} days")
    if history:
        return _component("activity", 10, f"No readings in the last {ACTIVITY_WINDOW_DAYS} days")
    return _component("activity", 5, "No tracking history yet")


def score_goals(goals: Sequence[HealthGoal]) -> ScoreComponent:
    # Placeholder: per-goal progress does not affect the score yet.
    active = sum(1 for g in goals if g.status == "active")
    if goals:
        reason = f"{active} active of {len(goals)} goal(s)"
    else:
        reason = "No goals set"
    return _component("goals", GOALS_BASELINE_POINTS, reason)


def score_preventive_care(visits: Sequence[DoctorVisit], now: datetime) -> ScoreComponent:
    cutoff = now - timedelta(days=PREVENTIVE_WINDOW_DAYS)
    for visit in visits:
        if visit.status == "cancelled":
            continue
        visit_date = as_utc(visit.visit_date)
        if visit_date >= now:
            return _component("preventive_care", 10, f"Upcoming visit with {visit.doctor_name}")
        if visit_date >= cutoff:
            return _component(
                "preventive_care", 10, f"Visited {visit.doctor_name} in the last {PREVENTIVE_WINDOW_DAYS} days"
            )
    return _component("preventive_care", 5, "No upcoming or recent doctor visits")


def compute_health_score(
    blood_pressure: BloodPressureReading | None,
    blood_pressure_history: Sequence[BloodPressureReading],
    weight: WeightRecord | None,
    weight_history: Sequence[WeightRecord],
    goals: Sequence[HealthGoal],
    upcoming_visits: Sequence[DoctorVisit],
    *,
    now: datetime | None = None,
) -> HealthScoreBreakdown:
    """Combine the five component scores into a breakdown.

    Args:
        blood_pressure: Latest reading, or None.
        blood_pressure_history: Readings in any order.
        weight: Latest weight record, or None.
        weight_history: Weight records in any order.
        goals: Health goals.
        upcoming_visits: Doctor visits; upcoming and recently past visits
            both count toward preventive care.
        now: Reference time (defaults to current UTC time).
    """
    now = resolve_now(now)
    details = {
        "blood_pressure": score_blood_pressure(blood_pressure),
        "weight": score_weight(weight),
        "activity": score_activity(blood_pressure_history, weight_history, now),
        "goals": score_goals(goals),
        "preventive_care": score_preventive_care(upcoming_visits, now),
    }
    total = sum(c.score for c in details.values())
    logger.debug("Health score %d from %s", total, {k: c.score for k, c in details.items()})

    return HealthScoreBreakdown(
        total=max(0, min(100, total)),
        blood_pressure=details["blood_pressure"].score,
        weight=details["weight"].score,
        activity=details["activity"].score,
        goals=details["goals"].score,
        preventive_care=details["preventive_care"].score,
        details=details,
    )
