"""Parse health record payloads into engine records.

Payloads arrive in the shape the records API serves them: camelCase keys
(``heightUnit``, ``visitDate``, ``referenceRange``) with ISO 8601 date
strings. snake_case keys are accepted too. Parsing applies the same
write-time defaults the API does: ``lbs``/``in`` units, a blood pressure
category computed from the values, and lab statuses derived from the
reference range.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Iterable

from hmi.domains.health.domain_logic.blood_pressure import classify_blood_pressure
from hmi.domains.health.domain_logic.labs import classify_lab_result
from hmi.domains.health.domain_logic.records import (
    GOAL_STATUSES,
    HEIGHT_UNITS,
    LAB_STATUSES,
    VISIT_STATUSES,
    WEIGHT_UNITS,
    BloodPressureReading,
    BloodWorkRecord,
    DoctorVisit,
    HealthGoal,
    LabResult,
    WeightRecord,
    is_finite_number,
    round_half_up,
)

logger = logging.getLogger(__name__)

_MISSING = object()


class RecordParseError(ValueError):
    """Raised when a payload cannot be turned into a health record."""

    def __init__(self, kind: str, message: str, index: int | None = None) -> None:
        self.kind = kind
        self.index = index
        self.detail = message
        where = f"{kind}[{index}]" if index is not None else kind
        super().__init__(f"Invalid {where}: {message}")


# ---------------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------------

def _field(payload: dict[str, Any], *names: str, default: Any = _MISSING) -> Any:
    """First present, non-None value among ``names``."""
    for name in names:
        value = payload.get(name)
        if value is not None:
            return value
    return default


def _required(kind: str, payload: dict[str, Any], *names: str) -> Any:
    value = _field(payload, *names)
    if value is _MISSING:
        raise RecordParseError(kind, f"missing required field '{names[0]}'")
    return value


def _number(kind: str, name: str, value: Any) -> float:
    if isinstance(value, bool):
        raise RecordParseError(kind, f"'{name}' must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise RecordParseError(kind, f"'{name}' must be a number, got {value!r}") from None
    if not is_finite_number(number):
        raise RecordParseError(kind, f"'{name}' must be finite")
    return number


def _positive(kind: str, name: str, value: Any) -> float:
    number = _number(kind, name, value)
    if number <= 0:
        raise RecordParseError(kind, f"'{name}' must be greater than 0")
    return number


def _whole(kind: str, name: str, value: Any) -> int:
    """Positive whole number; fractional input rounds half up before the check."""
    whole = int(round_half_up(_number(kind, name, value)))
    if whole <= 0:
        raise RecordParseError(kind, f"'{name}' must be greater than 0")
    return whole


def parse_timestamp(value: Any) -> datetime:
    """Parse an ISO 8601 string (``Z`` suffix allowed) or pass a datetime through.

    Naive values are taken to be UTC.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    else:
        raise ValueError(f"Unsupported timestamp: {value!r}")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _timestamp(kind: str, name: str, value: Any) -> datetime:
    try:
        return parse_timestamp(value)
    except ValueError as exc:
        raise RecordParseError(kind, f"'{name}' is not a valid date ({exc})") from exc


def _choice(kind: str, name: str, value: Any, allowed: list[str]) -> str:
    text = str(value).strip().lower()
    if text not in allowed:
        raise RecordParseError(kind, f"'{name}' must be one of {', '.join(allowed)}; got {value!r}")
    return text


def _text(payload: dict[str, Any], *names: str) -> str | None:
    value = _field(payload, *names, default=None)
    if value is None:
        return None
    return str(value)


# ---------------------------------------------------------------------------
# Record parsers
# ---------------------------------------------------------------------------

def parse_blood_pressure(payload: dict[str, Any]) -> BloodPressureReading:
    kind = "blood_pressure"
    systolic = _whole(kind, "systolic", _required(kind, payload, "systolic"))
    diastolic = _whole(kind, "diastolic", _required(kind, payload, "diastolic"))

    pulse_raw = _field(payload, "pulse", default=None)
    pulse = _whole(kind, "pulse", pulse_raw) if pulse_raw is not None else None

    category = _field(payload, "category", default=None)
    if category is None or not str(category).strip():
        category = classify_blood_pressure(systolic, diastolic)
    else:
        category = str(category).strip().lower()

    return BloodPressureReading(
        systolic=systolic,
        diastolic=diastolic,
        date=_timestamp(kind, "date", _required(kind, payload, "date")),
        category=category,
        pulse=pulse,
        notes=_text(payload, "notes"),
    )


def parse_weight(payload: dict[str, Any]) -> WeightRecord:
    kind = "weight"
    height_raw = _field(payload, "height", default=None)
    height = _number(kind, "height", height_raw) if height_raw is not None else None
    return WeightRecord(
        weight=_positive(kind, "weight", _required(kind, payload, "weight")),
        date=_timestamp(kind, "date", _required(kind, payload, "date")),
        unit=_choice(kind, "unit", _field(payload, "unit", default="lbs"), WEIGHT_UNITS),
        height=height,
        height_unit=_choice(
            kind, "heightUnit", _field(payload, "heightUnit", "height_unit", default="in"), HEIGHT_UNITS
        ),
        notes=_text(payload, "notes"),
    )


def parse_doctor_visit(payload: dict[str, Any]) -> DoctorVisit:
    kind = "doctor_visit"
    return DoctorVisit(
        doctor_name=str(_required(kind, payload, "doctorName", "doctor_name")),
        specialty=str(_field(payload, "specialty", default="")),
        visit_date=_timestamp(kind, "visitDate", _required(kind, payload, "visitDate", "visit_date")),
        status=_choice(kind, "status", _field(payload, "status", default="scheduled"), VISIT_STATUSES),
        visit_type=_text(payload, "visitType", "visit_type"),
    )


def parse_goal(payload: dict[str, Any]) -> HealthGoal:
    kind = "goal"
    return HealthGoal(
        target_value=_number(kind, "targetValue", _required(kind, payload, "targetValue", "target_value")),
        current_value=_number(
            kind, "currentValue", _field(payload, "currentValue", "current_value", default=0)
        ),
        start_date=_timestamp(kind, "startDate", _required(kind, payload, "startDate", "start_date")),
        target_date=_timestamp(kind, "targetDate", _required(kind, payload, "targetDate", "target_date")),
        status=_choice(kind, "status", _field(payload, "status", default="active"), GOAL_STATUSES),
        title=_text(payload, "title"),
        category=_text(payload, "category"),
    )


def _parse_lab_result(payload: dict[str, Any]) -> LabResult:
    kind = "lab_result"
    value = _number(kind, "value", _required(kind, payload, "value"))

    reference = _field(payload, "referenceRange", "reference_range", default={}) or {}
    if not isinstance(reference, dict):
        raise RecordParseError(kind, "'referenceRange' must be an object")
    ref_min = _field(reference, "min", default=None)
    ref_max = _field(reference, "max", default=None)
    ref_min = _number(kind, "referenceRange.min", ref_min) if ref_min is not None else None
    ref_max = _number(kind, "referenceRange.max", ref_max) if ref_max is not None else None

    if reference:
        status = classify_lab_result(value, ref_min, ref_max)
    else:
        status = _choice(kind, "status", _field(payload, "status", default="normal"), LAB_STATUSES)

    return LabResult(
        parameter=str(_required(kind, payload, "parameter")),
        value=value,
        unit=str(_field(payload, "unit", default="")),
        reference_min=ref_min,
        reference_max=ref_max,
        status=status,
    )


def parse_blood_work(payload: dict[str, Any]) -> BloodWorkRecord:
    kind = "blood_work"
    results = _field(payload, "results", default=[])
    if not isinstance(results, list):
        raise RecordParseError(kind, "'results' must be a list")
    return BloodWorkRecord(
        test_name=str(_required(kind, payload, "testName", "test_name")),
        test_date=_timestamp(kind, "testDate", _required(kind, payload, "testDate", "test_date")),
        results=tuple(_parse_lab_result(r) for r in results),
        lab_name=str(_field(payload, "labName", "lab_name", default="")),
        category=str(_field(payload, "category", default="other")),
    )


PARSERS: dict[str, Callable[[dict[str, Any]], Any]] = {
    "blood_pressure": parse_blood_pressure,
    "weight": parse_weight,
    "doctor_visit": parse_doctor_visit,
    "goal": parse_goal,
    "blood_work": parse_blood_work,
}


def parse_many(kind: str, payloads: Iterable[dict[str, Any]] | None) -> list[Any]:
    """Parse a list of payloads of one kind.

    Raises:
        RecordParseError: With the offending index when any payload is invalid.
    """
    if kind not in PARSERS:
        raise ValueError(f"Unknown record kind: {kind!r}")
    parser = PARSERS[kind]
    records = []
    for index, payload in enumerate(payloads or []):
        if not isinstance(payload, dict):
            raise RecordParseError(kind, "record must be an object", index)
        try:
            records.append(parser(payload))
        except RecordParseError as exc:
            raise RecordParseError(kind, exc.detail, index) from exc
    logger.debug("Parsed %d %s record(s)", len(records), kind)
    return records
