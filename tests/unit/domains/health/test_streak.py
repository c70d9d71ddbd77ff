"""Tests for the consecutive-day tracking streak."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from conftest import NOW, days_ago, make_bp, make_visit, make_weight
from hmi.domains.health.domain_logic.streak import (
    collect_activity_dates,
    compute_streak,
    compute_tracking_streak,
    streak_message,
)


class TestComputeStreak:
    def test_no_activities(self):
        result = compute_streak([], NOW)
        assert result.days == 0
        assert result.message == "No tracking data"

    def test_three_consecutive_days_then_gap(self):
        activities = [days_ago(0), days_ago(1), days_ago(2), days_ago(4)]
        result = compute_streak(activities, NOW)
        assert result.days == 3
        assert result.message == "3 day streak"

    def test_single_day(self):
        result = compute_streak([NOW - timedelta(hours=1)], NOW)
        assert result.days == 1
        assert result.message == "1 day streak"

    def test_multiple_activities_on_one_day_count_once(self):
        result = compute_streak([NOW, NOW - timedelta(hours=3), NOW - timedelta(hours=6)], NOW)
        assert result.days == 1

    def test_yesterday_only_resolves_to_zero(self):
        # The walk begins at today, so an unbroken run ending yesterday is
        # not counted until something is logged today.
        result = compute_streak([days_ago(1), days_ago(2), days_ago(3)], NOW)
        assert result.days == 0
        assert result.message == "Start tracking today"

    def test_stale_history_is_broken(self):
        result = compute_streak([days_ago(3), days_ago(4)], NOW)
        assert result.days == 0
        assert result.message == "Start tracking today"

    def test_future_activity_is_ignored(self):
        result = compute_streak([NOW + timedelta(days=2)], NOW)
        assert result.message == "No tracking data"

    def test_accepts_dates_and_records(self):
        activities = [NOW.date(), make_bp(date=days_ago(1))]
        assert compute_streak(activities, NOW).days == 2

    def test_walk_is_capped_at_a_year(self):
        activities = [days_ago(d) for d in range(400)]
        assert compute_streak(activities, NOW).days == 365

    def test_calendar_days_follow_reference_timezone(self):
        # 02:00 UTC on the 15th is still the 14th in New York.
        activity = datetime(2026, 3, 15, 2, 0, tzinfo=timezone.utc)
        assert compute_streak([activity], NOW).days == 1
        new_york_now = NOW.astimezone(ZoneInfo("America/New_York"))
        assert compute_streak([activity], new_york_now).days == 0


class TestStreakMessage:
    def test_messages(self):
        assert streak_message(0) == "Start tracking today"
        assert streak_message(1) == "1 day streak"
        assert streak_message(12) == "12 day streak"


class TestTrackingStreak:
    def test_visits_count_when_completed_or_past(self):
        visits = [
            make_visit(days_ago(1), status="completed"),
            make_visit(days_ago(2), status="scheduled"),
            make_visit(days_ago(3), status="cancelled"),
            make_visit(NOW + timedelta(days=3)),
        ]
        dates = collect_activity_dates([], [], visits, NOW)
        assert dates == [days_ago(1), days_ago(2)]

    def test_combines_categories(self):
        result = compute_tracking_streak(
            [make_bp(date=days_ago(0))],
            [make_weight(date=days_ago(1))],
            [make_visit(days_ago(2), status="completed")],
            NOW,
        )
        assert result.days == 3
        assert result.message == "3 day streak"

    def test_no_records(self):
        assert compute_tracking_streak([], [], [], NOW).message == "No tracking data"
