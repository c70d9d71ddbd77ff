"""Weight and height unit conversion."""

from __future__ import annotations

INCHES_TO_METERS = 0.0254
POUNDS_TO_KILOGRAMS = 0.453592


def to_meters(height: float, unit: str) -> float:
    """Convert a height in ``in`` or ``cm`` to meters."""
    if unit == "in":
        return height * INCHES_TO_METERS
    if unit == "cm":
        return height / 100
    raise ValueError(f"Unknown height unit: {unit!r}")


def to_kilograms(weight: float, unit: str) -> float:
    """Convert a weight in ``lbs`` or ``kg`` to kilograms."""
    if unit == "lbs":
        return weight * POUNDS_TO_KILOGRAMS
    if unit == "kg":
        return weight
    raise ValueError(f"Unknown weight unit: {unit!r}")


def from_kilograms(weight_kg: float, unit: str) -> float:
    """Express a weight in kilograms in ``unit``."""
    if unit == "lbs":
        return weight_kg / POUNDS_TO_KILOGRAMS
    if unit == "kg":
        return weight_kg
    raise ValueError(f"Unknown weight unit: {unit!r}")


def convert_weight(weight: float, from_unit: str, to_unit: str) -> float:
    if from_unit == to_unit:
        return weight
    return from_kilograms(to_kilograms(weight, from_unit), to_unit)
