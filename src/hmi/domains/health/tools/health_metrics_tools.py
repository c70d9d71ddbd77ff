"""MCP tools exposing the health metrics engine.

Every tool takes record arrays in the records API's JSON shape, parses them,
runs the deterministic engine and returns a JSON string. Nothing is stored:
each call is a pure function of its arguments and the clock.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import TYPE_CHECKING, Any
from zoneinfo import ZoneInfo

from fastmcp import Context, FastMCP

if TYPE_CHECKING:
    from hmi.core.config.settings import Settings

from hmi.domains.health.connectors.record_parser import RecordParseError, parse_many
from hmi.domains.health.domain_logic.analytics import (
    blood_pressure_trend_insights,
    metric_cards,
    summarize_blood_pressure,
    summarize_weight,
)
from hmi.domains.health.domain_logic.blood_pressure import classify_blood_pressure
from hmi.domains.health.domain_logic.bmi import (
    classify_bmi,
    compute_bmi,
    weight_range_for_height,
)
from hmi.domains.health.domain_logic.goals import (
    days_remaining,
    summarize_goals,
)
from hmi.domains.health.domain_logic.goals import goal_progress as percent_complete
from hmi.domains.health.domain_logic.health_score import compute_health_score
from hmi.domains.health.domain_logic.insights import generate_insights
from hmi.domains.health.domain_logic.records import (
    HEIGHT_UNITS,
    TIME_RANGES_DAYS,
    WEIGHT_UNITS,
    WeightRecord,
    as_utc,
    newest_first,
)
from hmi.domains.health.domain_logic.streak import compute_tracking_streak
from hmi.domains.health.domain_logic.trends import (
    blood_pressure_trend,
    bmi_trend,
    weight_trend,
)

logger = logging.getLogger(__name__)

Records = list[dict[str, Any]] | None


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------

def _validate_days(days: int | None, default: int) -> int:
    """Validate and default a time range in days."""
    if days is None:
        days = default
    if days not in TIME_RANGES_DAYS:
        raise ValueError(f"days must be one of: {' | '.join(str(d) for d in TIME_RANGES_DAYS)}")
    return days


def _validate_unit(name: str, value: str, allowed: list[str]) -> str:
    unit = value.strip().lower()
    if unit not in allowed:
        raise ValueError(f"{name} must be one of: {' | '.join(allowed)}")
    return unit


def _error(exc: RecordParseError) -> str:
    logger.info("Rejected %s payload: %s", exc.kind, exc.detail)
    return json.dumps({"status": "error", "message": str(exc)})


def _trend_dict(result) -> dict[str, Any] | None:
    return result.to_dict() if result is not None else None


def _bmi_block(record: WeightRecord | None) -> dict[str, Any] | None:
    if record is None:
        return None
    bmi = compute_bmi(record.weight, record.height, record.unit, record.height_unit)
    if bmi is None:
        return None
    weight_range = weight_range_for_height(record.height, record.height_unit, record.unit)
    return {
        "bmi": round(bmi, 2),
        "classification": classify_bmi(bmi).to_dict(),
        "weight_range": weight_range.to_dict(ndigits=1) if weight_range else None,
    }


def register_health_metrics_tools(mcp: FastMCP, settings: Settings) -> None:
    """Register the health metrics tools on the MCP server."""
    tz = ZoneInfo(settings.hmi_timezone)

    def _now() -> datetime:
        return datetime.now(tz)

    @mcp.tool
    async def classify_blood_pressure_reading(
        ctx: Context,
        systolic: int,
        diastolic: int,
    ) -> str:
        """Classify a blood pressure reading as normal, elevated, high or crisis.

        Args:
            systolic: Systolic pressure in mmHg (top number).
            diastolic: Diastolic pressure in mmHg (bottom number).
        """
        if systolic <= 0 or diastolic <= 0:
            raise ValueError("systolic and diastolic must be greater than 0")
        return json.dumps({
            "systolic": systolic,
            "diastolic": diastolic,
            "category": classify_blood_pressure(systolic, diastolic),
        })

    @mcp.tool
    async def body_mass_index(
        ctx: Context,
        weight: float,
        height: float | None = None,
        weight_unit: str = "lbs",
        height_unit: str = "in",
    ) -> str:
        """Compute BMI, its category, and the weight ranges for this height.

        Args:
            weight: Body weight.
            height: Height; BMI is unavailable without it.
            weight_unit: 'lbs' or 'kg'.
            height_unit: 'in' or 'cm'.
        """
        if not weight > 0:
            raise ValueError("weight must be greater than 0")
        weight_unit = _validate_unit("weight_unit", weight_unit, WEIGHT_UNITS)
        height_unit = _validate_unit("height_unit", height_unit, HEIGHT_UNITS)
        bmi = compute_bmi(weight, height, weight_unit, height_unit)
        weight_range = weight_range_for_height(height, height_unit, weight_unit)
        return json.dumps({
            "bmi": round(bmi, 2) if bmi is not None else None,
            "classification": classify_bmi(bmi).to_dict() if bmi is not None else None,
            "weight_range": weight_range.to_dict(ndigits=1) if weight_range else None,
        })

    @mcp.tool
    async def health_score(
        ctx: Context,
        blood_pressure_readings: Records = None,
        weight_records: Records = None,
        goals: Records = None,
        doctor_visits: Records = None,
    ) -> str:
        """Compute the 0-100 health score with a per-component breakdown.

        Args:
            blood_pressure_readings: Blood pressure records (any order).
            weight_records: Weight records (any order).
            goals: Health goals.
            doctor_visits: Doctor visits; upcoming or recent ones count.
        """
        try:
            readings = parse_many("blood_pressure", blood_pressure_readings)
            weights = parse_many("weight", weight_records)
            goal_records = parse_many("goal", goals)
            visits = parse_many("doctor_visit", doctor_visits)
        except RecordParseError as exc:
            return _error(exc)

        latest_bp = newest_first(readings)[0] if readings else None
        latest_weight = newest_first(weights)[0] if weights else None
        breakdown = compute_health_score(
            latest_bp, readings, latest_weight, weights, goal_records, visits, now=_now()
        )
        logger.info("Health score computed: %d", breakdown.total)
        return json.dumps(breakdown.to_dict())

    @mcp.tool
    async def tracking_streak(
        ctx: Context,
        blood_pressure_readings: Records = None,
        weight_records: Records = None,
        doctor_visits: Records = None,
    ) -> str:
        """Count consecutive days (ending today) with at least one tracked activity.

        Args:
            blood_pressure_readings: Blood pressure records.
            weight_records: Weight records.
            doctor_visits: Doctor visits; completed or past visits count.
        """
        try:
            readings = parse_many("blood_pressure", blood_pressure_readings)
            weights = parse_many("weight", weight_records)
            visits = parse_many("doctor_visit", doctor_visits)
        except RecordParseError as exc:
            return _error(exc)

        streak = compute_tracking_streak(readings, weights, visits, now=_now())
        return json.dumps(streak.to_dict())

    @mcp.tool
    async def health_insights(
        ctx: Context,
        blood_pressure_readings: Records = None,
        weight_records: Records = None,
        blood_work: Records = None,
        doctor_visits: Records = None,
    ) -> str:
        """Generate plain-language insights from recent health records.

        Args:
            blood_pressure_readings: Blood pressure records.
            weight_records: Weight records.
            blood_work: Lab panels with per-parameter results.
            doctor_visits: Doctor visits.
        """
        try:
            readings = parse_many("blood_pressure", blood_pressure_readings)
            weights = parse_many("weight", weight_records)
            panels = parse_many("blood_work", blood_work)
            visits = parse_many("doctor_visit", doctor_visits)
        except RecordParseError as exc:
            return _error(exc)

        insights = generate_insights(readings, weights, panels, visits, now=_now())
        return json.dumps({"insights": [i.to_dict() for i in insights]})

    @mcp.tool
    async def blood_pressure_trends(
        ctx: Context,
        readings: Records = None,
        days: int | None = None,
    ) -> str:
        """Summarize blood pressure over a time range with trend insights.

        Args:
            readings: Blood pressure records.
            days: Time range: 7, 30, 90 or 365 days.
        """
        days = _validate_days(days, settings.default_time_range_days)
        try:
            parsed = parse_many("blood_pressure", readings)
        except RecordParseError as exc:
            return _error(exc)

        summary = summarize_blood_pressure(parsed, days, now=_now())
        summary["insights"] = [i.to_dict() for i in blood_pressure_trend_insights(summary)]
        return json.dumps(summary)

    @mcp.tool
    async def weight_trends(
        ctx: Context,
        records: Records = None,
        days: int | None = None,
    ) -> str:
        """Summarize weight and BMI over a time range.

        Args:
            records: Weight records.
            days: Time range: 7, 30, 90 or 365 days.
        """
        days = _validate_days(days, settings.default_time_range_days)
        try:
            parsed = parse_many("weight", records)
        except RecordParseError as exc:
            return _error(exc)

        summary = summarize_weight(parsed, days, now=_now())
        summary["latest_bmi"] = _bmi_block(newest_first(parsed)[0] if parsed else None)
        return json.dumps(summary)

    @mcp.tool
    async def goal_progress(
        ctx: Context,
        goals: Records = None,
    ) -> str:
        """Report progress and days remaining for each goal, plus totals.

        Args:
            goals: Health goals.
        """
        try:
            parsed = parse_many("goal", goals)
        except RecordParseError as exc:
            return _error(exc)

        now = _now()
        return json.dumps({
            "goals": [
                {
                    "title": g.title,
                    "status": g.status,
                    "progress": round(percent_complete(g), 1),
                    "days_remaining": days_remaining(g, now),
                }
                for g in parsed
            ],
            "summary": summarize_goals(parsed),
        })

    @mcp.tool
    async def health_dashboard(
        ctx: Context,
        blood_pressure_readings: Records = None,
        weight_records: Records = None,
        blood_work: Records = None,
        doctor_visits: Records = None,
        goals: Records = None,
    ) -> str:
        """Everything the dashboard shows: latest readings, trends, score, streak, insights.

        Args:
            blood_pressure_readings: Blood pressure records.
            weight_records: Weight records.
            blood_work: Lab panels.
            doctor_visits: Doctor visits.
            goals: Health goals.
        """
        try:
            readings = parse_many("blood_pressure", blood_pressure_readings)
            weights = parse_many("weight", weight_records)
            panels = parse_many("blood_work", blood_work)
            visits = parse_many("doctor_visit", doctor_visits)
            goal_records = parse_many("goal", goals)
        except RecordParseError as exc:
            return _error(exc)

        now = _now()
        latest_bp = newest_first(readings)[0] if readings else None
        latest_weight = newest_first(weights)[0] if weights else None
        upcoming = sorted(
            (v for v in visits if v.status == "scheduled" and as_utc(v.visit_date) >= now),
            key=lambda v: as_utc(v.visit_date),
        )

        bp_trend = blood_pressure_trend(readings)
        dashboard = {
            "blood_pressure": None if latest_bp is None else {
                "systolic": latest_bp.systolic,
                "diastolic": latest_bp.diastolic,
                "pulse": latest_bp.pulse,
                "category": latest_bp.category,
                "date": latest_bp.date.isoformat(),
                "trend": None if bp_trend is None else {k: _trend_dict(v) for k, v in bp_trend.items()},
            },
            "weight": None if latest_weight is None else {
                "weight": latest_weight.weight,
                "unit": latest_weight.unit,
                "date": latest_weight.date.isoformat(),
                "trend": _trend_dict(weight_trend(weights)),
                "bmi": _bmi_block(latest_weight),
                "bmi_trend": _trend_dict(bmi_trend(weights)),
            },
            "next_visit": None if not upcoming else {
                "doctor_name": upcoming[0].doctor_name,
                "specialty": upcoming[0].specialty,
                "visit_type": upcoming[0].visit_type,
                "visit_date": upcoming[0].visit_date.isoformat(),
            },
            "health_score": compute_health_score(
                latest_bp, readings, latest_weight, weights, goal_records, visits, now=now
            ).to_dict(),
            "streak": compute_tracking_streak(readings, weights, visits, now=now).to_dict(),
            "metrics": metric_cards(readings, weights),
            "insights": [i.to_dict() for i in generate_insights(readings, weights, panels, visits, now=now)],
        }
        logger.info(
            "Dashboard built from %d BP, %d weight, %d lab, %d visit record(s)",
            len(readings), len(weights), len(panels), len(visits),
        )
        return json.dumps(dashboard)
