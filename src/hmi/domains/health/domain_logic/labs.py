"""Lab result status against a reference range."""

from __future__ import annotations

from hmi.domains.health.domain_logic.records import BloodWorkRecord, LabResult


def classify_lab_result(
    value: float,
    reference_min: float | None,
    reference_max: float | None,
) -> str:
    """Return low | high | normal; a missing bound never flags its side."""
    if reference_min is not None and value < reference_min:
        return "low"
    if reference_max is not None and value > reference_max:
        return "high"
    return "normal"


def abnormal_results(record: BloodWorkRecord) -> list[LabResult]:
    return [r for r in record.results if r.status != "normal"]
