"""Tests for lab result status classification."""

from __future__ import annotations

import pytest

from conftest import make_blood_work
from hmi.domains.health.domain_logic.labs import abnormal_results, classify_lab_result


@pytest.mark.parametrize(
    "value, low, high, expected",
    [
        (90, 70, 100, "normal"),
        (70, 70, 100, "normal"),
        (100, 70, 100, "normal"),
        (65, 70, 100, "low"),
        (130, 70, 100, "high"),
        (250, None, 200, "high"),
        (10, None, 200, "normal"),
        (30, 40, None, "low"),
        (30, None, None, "normal"),
    ],
)
def test_classify_lab_result(value, low, high, expected):
    assert classify_lab_result(value, low, high) == expected


def test_abnormal_results_filters_non_normal():
    record = make_blood_work(["normal", "high", "critical", "normal"])
    assert [r.status for r in abnormal_results(record)] == ["high", "critical"]
