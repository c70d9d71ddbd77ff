"""Health goal progress and summary statistics."""

from __future__ import annotations

import math
from datetime import datetime
from typing import Any, Sequence

from hmi.domains.health.domain_logic.records import (
    HealthGoal,
    as_utc,
    is_finite_number,
    resolve_now,
    round_half_up,
)

_SECONDS_PER_DAY = 24 * 60 * 60


def goal_progress(goal: HealthGoal) -> float:
    """Percent of target reached, clamped to [0, 100].

    A zero, missing or non-finite target or current value yields 0.
    """
    if not is_finite_number(goal.target_value) or goal.target_value == 0:
        return 0.0
    if not is_finite_number(goal.current_value) or goal.current_value == 0:
        return 0.0
    progress = goal.current_value / goal.target_value * 100
    return min(max(progress, 0.0), 100.0)


def days_remaining(goal: HealthGoal, now: datetime | None = None) -> int:
    """Whole days until the target date, rounded up (negative when past)."""
    now = resolve_now(now)
    seconds = (as_utc(goal.target_date) - now).total_seconds()
    return math.ceil(seconds / _SECONDS_PER_DAY)


def summarize_goals(goals: Sequence[HealthGoal]) -> dict[str, Any]:
    total = len(goals)
    completed = sum(1 for g in goals if g.status == "completed")
    if total:
        success_rate = int(round_half_up(completed / total * 100))
        average_progress = int(round_half_up(sum(goal_progress(g) for g in goals) / total))
    else:
        success_rate = 0
        average_progress = 0
    return {
        "total": total,
        "active": sum(1 for g in goals if g.status == "active"),
        "completed": completed,
        "overdue": sum(1 for g in goals if g.status == "overdue"),
        "success_rate": success_rate,
        "average_progress": average_progress,
    }
