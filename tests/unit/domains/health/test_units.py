"""Tests for weight and height unit conversion."""

from __future__ import annotations

import pytest

from hmi.domains.health.domain_logic.units import (
    convert_weight,
    from_kilograms,
    to_kilograms,
    to_meters,
)


class TestToMeters:
    def test_inches(self):
        assert to_meters(70, "in") == pytest.approx(1.778)

    def test_centimeters(self):
        assert to_meters(175, "cm") == pytest.approx(1.75)

    def test_zero_and_negative_heights_do_not_raise(self):
        assert to_meters(0, "in") == 0
        assert to_meters(-10, "cm") == pytest.approx(-0.1)

    def test_unknown_unit_raises(self):
        with pytest.raises(ValueError, match="height unit"):
            to_meters(70, "ft")


class TestToKilograms:
    def test_pounds(self):
        assert to_kilograms(100, "lbs") == pytest.approx(45.3592)

    def test_kilograms_is_identity(self):
        assert to_kilograms(72.5, "kg") == 72.5

    def test_unknown_unit_raises(self):
        with pytest.raises(ValueError, match="weight unit"):
            to_kilograms(100, "stone")


class TestConvertWeight:
    def test_same_unit_is_identity(self):
        assert convert_weight(180, "lbs", "lbs") == 180

    def test_kg_to_lbs(self):
        assert convert_weight(45.3592, "kg", "lbs") == pytest.approx(100)

    def test_from_kilograms_inverts_to_kilograms(self):
        assert from_kilograms(to_kilograms(212.4, "lbs"), "lbs") == pytest.approx(212.4)
