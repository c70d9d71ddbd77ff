"""Shared test fixtures for the health metrics tests."""

from __future__ import annotations

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# ---------------------------------------------------------------------------
# Test hermeticity
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _force_hermetic_test_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HMI_TIMEZONE", "UTC")
    monkeypatch.setenv("HMI_HOST", "127.0.0.1")
    monkeypatch.setenv("HMI_ALLOW_INSECURE_BIND", "false")
    monkeypatch.setenv("DEFAULT_TIME_RANGE_DAYS", "30")
    monkeypatch.delenv("HMI_PORT", raising=False)

# Allow running tests without `pip install -e .` by making `src/` importable.
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_SRC_DIR = _PROJECT_ROOT / "src"
if str(_SRC_DIR) not in sys.path:
    sys.path.insert(0, str(_SRC_DIR))

from hmi.domains.health.domain_logic.blood_pressure import classify_blood_pressure  # noqa: E402
from hmi.domains.health.domain_logic.records import (  # noqa: E402
    BloodPressureReading,
    BloodWorkRecord,
    DoctorVisit,
    HealthGoal,
    LabResult,
    WeightRecord,
)

# Fixed reference time for deterministic date arithmetic.
NOW = datetime(2026, 3, 15, 12, 0, tzinfo=timezone.utc)


def days_ago(days: float, now: datetime = NOW) -> datetime:
    return now - timedelta(days=days)


def make_bp(
    systolic: int = 118,
    diastolic: int = 76,
    date: datetime | None = None,
    category: str | None = "auto",
    pulse: int | None = None,
    notes: str | None = None,
) -> BloodPressureReading:
    """Create a blood pressure reading; the category defaults to the computed one."""
    if category == "auto":
        category = classify_blood_pressure(systolic, diastolic)
    return BloodPressureReading(
        systolic=systolic,
        diastolic=diastolic,
        date=date or NOW,
        category=category,
        pulse=pulse,
        notes=notes,
    )


def make_weight(
    weight: float = 160.0,
    date: datetime | None = None,
    unit: str = "lbs",
    height: float | None = 70.0,
    height_unit: str = "in",
    notes: str | None = None,
) -> WeightRecord:
    return WeightRecord(
        weight=weight,
        date=date or NOW,
        unit=unit,
        height=height,
        height_unit=height_unit,
        notes=notes,
    )


def make_visit(
    visit_date: datetime | None = None,
    status: str = "scheduled",
    doctor_name: str = "Dr. Rivera",
    specialty: str = "Primary Care",
    visit_type: str | None = "Checkup",
) -> DoctorVisit:
    return DoctorVisit(
        doctor_name=doctor_name,
        specialty=specialty,
        visit_date=visit_date or NOW + timedelta(days=10),
        status=status,
        visit_type=visit_type,
    )


def make_goal(
    target_value: float = 150.0,
    current_value: float = 75.0,
    status: str = "active",
    target_date: datetime | None = None,
    title: str | None = "Reach target weight",
) -> HealthGoal:
    return HealthGoal(
        target_value=target_value,
        current_value=current_value,
        start_date=days_ago(30),
        target_date=target_date or NOW + timedelta(days=30),
        status=status,
        title=title,
        category="weight",
    )


def make_blood_work(
    statuses: list[str] | None = None,
    test_date: datetime | None = None,
    test_name: str = "Lipid Panel",
) -> BloodWorkRecord:
    results = tuple(
        LabResult(parameter=f"param_{i}", value=1.0, unit="mg/dL", status=status)
        for i, status in enumerate(statuses or ["normal"])
    )
    return BloodWorkRecord(test_name=test_name, test_date=test_date or NOW, results=results)


@pytest.fixture
def now() -> datetime:
    return NOW
