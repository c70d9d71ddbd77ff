"""Rule-based, plain-language health insights.

Each rule is evaluated on its own and every rule that matches contributes
an insight; rules never suppress one another. Only when no rule matches is
the "Start Tracking" reminder returned.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Sequence

from hmi.domains.health.domain_logic.labs import abnormal_results
from hmi.domains.health.domain_logic.records import (
    BloodPressureReading,
    BloodWorkRecord,
    DoctorVisit,
    Insight,
    WeightRecord,
    as_utc,
    newest_first,
    resolve_now,
)
from hmi.domains.health.domain_logic.trends import latest_and_previous
from hmi.domains.health.domain_logic.units import convert_weight

BP_IMPROVEMENT_POINTS = 5
_SECONDS_PER_DAY = 24 * 60 * 60


def _mean_pressure(reading: BloodPressureReading) -> float:
    return (reading.systolic + reading.diastolic) / 2


def blood_pressure_alert(readings: Sequence[BloodPressureReading]) -> Insight | None:
    latest, _ = latest_and_previous(readings)
    if latest is None or latest.category not in ("high", "crisis"):
        return None
    return Insight(
        title="Blood Pressure Alert",
        description=f"Your blood pressure is {latest.category}. Consider consulting your doctor.",
        type="warning",
    )


def blood_pressure_improvement(readings: Sequence[BloodPressureReading]) -> Insight | None:
    latest, previous = latest_and_previous(readings)
    if latest is None or previous is None:
        return None
    improvement = _mean_pressure(previous) - _mean_pressure(latest)
    if improvement <= BP_IMPROVEMENT_POINTS:
        return None
    return Insight(
        title="Blood Pressure Improving",
        description=f"Your blood pressure has improved by {improvement:.1f} points.",
        type="positive",
    )


def weight_change(records: Sequence[WeightRecord]) -> Insight | None:
    latest, previous = latest_and_previous(records)
    if latest is None or previous is None:
        return None
    change = convert_weight(previous.weight, previous.unit, latest.unit) - latest.weight
    if change > 0:
        return Insight(
            title="Weight Loss Progress",
            description=f"You've lost {change:.1f} {latest.unit} since your last measurement.",
            type="positive",
        )
    if change < 0:
        return Insight(
            title="Weight Gain Notice",
            description=f"You've gained {abs(change):.1f} {latest.unit} since your last measurement.",
            type="warning",
        )
    return None


def next_visit_reminder(visits: Sequence[DoctorVisit], now: datetime) -> Insight | None:
    upcoming = sorted(
        (v for v in visits if v.status == "scheduled" and as_utc(v.visit_date) > now),
        key=lambda v: as_utc(v.visit_date),
    )
    if not upcoming:
        return None
    visit = upcoming[0]
    days_until = math.ceil((as_utc(visit.visit_date) - now).total_seconds() / _SECONDS_PER_DAY)
    visit_type = visit.visit_type or "Appointment"
    return Insight(
        title="Upcoming Doctor Visit",
        description=f"{visit_type} with {visit.doctor_name} in {days_until} days.",
        type="reminder",
    )


def blood_work_summary(blood_work: Sequence[BloodWorkRecord]) -> Insight | None:
    ordered = newest_first(blood_work)
    if not ordered:
        return None
    latest = ordered[0]
    if not latest.results:
        return None
    abnormal = abnormal_results(latest)
    if abnormal:
        return Insight(
            title="Blood Work Results",
            description=f"{len(abnormal)} abnormal result(s) in your latest {latest.test_name}.",
            type="warning",
        )
    return Insight(
        title="Blood Work Results",
        description=f"All results from your {latest.test_name} are within normal range.",
        type="positive",
    )


START_TRACKING = Insight(
    title="Start Tracking",
    description="Begin recording your health data to see personalized insights here.",
    type="reminder",
)


def generate_insights(
    blood_pressure: Sequence[BloodPressureReading],
    weights: Sequence[WeightRecord],
    blood_work: Sequence[BloodWorkRecord],
    visits: Sequence[DoctorVisit],
    *,
    now: datetime | None = None,
) -> list[Insight]:
    """Evaluate every insight rule and collect the ones that fire."""
    now = resolve_now(now)
    candidates = [
        blood_pressure_alert(blood_pressure),
        blood_pressure_improvement(blood_pressure),
        weight_change(weights),
        next_visit_reminder(visits, now),
        blood_work_summary(blood_work),
    ]
    insights = [i for i in candidates if i is not None]
    return insights or [START_TRACKING]
