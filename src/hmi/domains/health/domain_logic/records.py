"""Health record models, derived result types, and domain constants."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Iterable, Sequence, TypeVar


# ---------------------------------------------------------------------------
# Domain constants
# ---------------------------------------------------------------------------

BP_CATEGORIES = ["normal", "elevated", "high", "crisis"]

WEIGHT_UNITS = ["lbs", "kg"]
HEIGHT_UNITS = ["in", "cm"]

VISIT_STATUSES = ["scheduled", "completed", "cancelled", "rescheduled"]
GOAL_STATUSES = ["active", "completed", "overdue"]
LAB_STATUSES = ["normal", "low", "high", "critical"]

INSIGHT_TYPES = ["positive", "warning", "reminder"]

# Health score component maxima (sum to 100)
SCORE_MAX = {
    "blood_pressure": 30,
    "weight": 25,
    "activity": 20,
    "goals": 15,
    "preventive_care": 10,
}

ACTIVITY_WINDOW_DAYS = 7        # trailing window for activity consistency
PREVENTIVE_WINDOW_DAYS = 30     # trailing window for "recent" doctor visits
STREAK_MAX_DAYS = 365           # longest streak walk

TIME_RANGES_DAYS = [7, 30, 90, 365]


# ---------------------------------------------------------------------------
# Input records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class BloodPressureReading:
    """A single blood pressure measurement."""

    systolic: int
    diastolic: int
    date: datetime
    category: str | None = None   # assigned at write time
    pulse: int | None = None
    notes: str | None = None


@dataclass(frozen=True)
class WeightRecord:
    """A weight measurement, optionally with height for BMI."""

    weight: float
    date: datetime
    unit: str = "lbs"
    height: float | None = None
    height_unit: str = "in"
    notes: str | None = None


@dataclass(frozen=True)
class DoctorVisit:
    doctor_name: str
    specialty: str
    visit_date: datetime
    status: str = "scheduled"
    visit_type: str | None = None

    @property
    def date(self) -> datetime:
        return self.visit_date


@dataclass(frozen=True)
class HealthGoal:
    target_value: float
    current_value: float
    start_date: datetime
    target_date: datetime
    status: str = "active"
    title: str | None = None
    category: str | None = None


@dataclass(frozen=True)
class LabResult:
    """One parameter of a lab panel with its reference range."""

    parameter: str
    value: float
    unit: str = ""
    reference_min: float | None = None
    reference_max: float | None = None
    status: str = "normal"


@dataclass(frozen=True)
class BloodWorkRecord:
    test_name: str
    test_date: datetime
    results: tuple[LabResult, ...] = ()
    lab_name: str = ""
    category: str = "other"

    @property
    def date(self) -> datetime:
        return self.test_date


# ---------------------------------------------------------------------------
# Derived results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TrendResult:
    """Change between a current and a previous value."""

    diff: float
    percentage: str   # one decimal, e.g. "25.0"
    is_positive: bool

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class BMIClassification:
    category: str                          # Underweight | Normal | Overweight | Obese
    band: tuple[float, float | None]       # [lower, upper), upper None = open

    def to_dict(self) -> dict[str, Any]:
        return {"category": self.category, "band": list(self.band)}


@dataclass(frozen=True)
class WeightRange:
    """BMI category boundaries expressed as weights for one height."""

    underweight_max: float
    normal_min: float
    normal_max: float
    overweight_min: float
    overweight_max: float
    obese_min: float
    unit: str

    def to_dict(self, ndigits: int | None = None) -> dict[str, Any]:
        data = asdict(self)
        if ndigits is not None:
            data = {k: round(v, ndigits) if isinstance(v, float) else v for k, v in data.items()}
        return data


@dataclass(frozen=True)
class ScoreComponent:
    score: int
    max_score: int
    reason: str


@dataclass(frozen=True)
class HealthScoreBreakdown:
    """Weighted 0-100 health score with per-component reasons."""

    total: int
    blood_pressure: int
    weight: int
    activity: int
    goals: int
    preventive_care: int
    details: dict[str, ScoreComponent] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class StreakResult:
    days: int
    message: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Insight:
    title: str
    description: str
    type: str   # positive | warning | reminder

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

R = TypeVar("R")


def as_utc(value: datetime) -> datetime:
    """Return an aware datetime; naive values are taken to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def resolve_now(now: datetime | None) -> datetime:
    """Default ``now`` to the current UTC time."""
    if now is None:
        return datetime.now(timezone.utc)
    return as_utc(now)


def calendar_date(value: datetime | date, now: datetime) -> date:
    """Calendar day of ``value`` as seen from ``now``'s timezone."""
    if isinstance(value, datetime):
        return as_utc(value).astimezone(now.tzinfo).date()
    return value


def newest_first(records: Iterable[R]) -> list[R]:
    """Sort records by ``date`` descending without touching the input."""
    return sorted(records, key=lambda r: as_utc(r.date), reverse=True)  # type: ignore[attr-defined]


def oldest_first(records: Iterable[R]) -> list[R]:
    return sorted(records, key=lambda r: as_utc(r.date))  # type: ignore[attr-defined]


def is_finite_number(value: Any) -> bool:
    """True for real numbers that are neither NaN nor infinite."""
    if value is None or isinstance(value, bool):
        return False
    try:
        return math.isfinite(value)
    except TypeError:
        return False


def mean(values: Sequence[float]) -> float | None:
    """Arithmetic mean, or None for an empty sequence."""
    if not values:
        return None
    return sum(values) / len(values)


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round halves up, as dashboards display them (``round`` rounds halves to even)."""
    factor = 10 ** ndigits
    return math.floor(value * factor + 0.5) / factor
