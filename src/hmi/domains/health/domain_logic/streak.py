"""Consecutive-day tracking streak."""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Any, Iterable, Sequence

from hmi.domains.health.domain_logic.records import (
    STREAK_MAX_DAYS,
    BloodPressureReading,
    DoctorVisit,
    StreakResult,
    WeightRecord,
    as_utc,
    calendar_date,
    resolve_now,
)

logger = logging.getLogger(__name__)


def _activity_day(activity: Any, now: datetime) -> date:
    if isinstance(activity, (datetime, date)):
        return calendar_date(activity, now)
    return calendar_date(activity.date, now)


def streak_message(days: int) -> str:
    if days == 0:
        return "Start tracking today"
    if days == 1:
        return "1 day streak"
    return f"{days} day streak"


def compute_streak(activities: Iterable[Any], now: datetime | None = None) -> StreakResult:
    """Count consecutive tracked days ending today.

    ``activities`` may be datetimes, dates, or records with a ``date``
    attribute. Days are calendar days in ``now``'s timezone.

    The walk starts at today: when the latest activity was yesterday and
    nothing is logged yet today, the streak is 0.
    """
    now = resolve_now(now)
    today = now.date()
    days_seen = {d for d in (_activity_day(a, now) for a in activities) if d <= today}

    if not days_seen:
        return StreakResult(days=0, message="No tracking data")

    yesterday = today - timedelta(days=1)
    if max(days_seen) < yesterday:
        return StreakResult(days=0, message="Start tracking today")

    days = 0
    current = today
    for _ in range(STREAK_MAX_DAYS):
        if current not in days_seen:
            break
        days += 1
        current -= timedelta(days=1)

    logger.debug("Streak of %d day(s) from %d tracked day(s)", days, len(days_seen))
    return StreakResult(days=days, message=streak_message(days))


def collect_activity_dates(
    blood_pressure: Sequence[BloodPressureReading],
    weights: Sequence[WeightRecord],
    visits: Sequence[DoctorVisit],
    now: datetime | None = None,
) -> list[datetime]:
    """Timestamps of every tracked activity.

    Doctor visits count once they are completed or already in the past,
    unless cancelled.
    """
    now = resolve_now(now)
    dates = [r.date for r in blood_pressure]
    dates.extend(r.date for r in weights)
    for visit in visits:
        if visit.status == "cancelled":
            continue
        if visit.status == "completed" or as_utc(visit.visit_date) <= now:
            dates.append(visit.visit_date)
    return dates


def compute_tracking_streak(
    blood_pressure: Sequence[BloodPressureReading],
    weights: Sequence[WeightRecord],
    visits: Sequence[DoctorVisit],
    now: datetime | None = None,
) -> StreakResult:
    now = resolve_now(now)
    return compute_streak(collect_activity_dates(blood_pressure, weights, visits, now), now)
