"""Unit normalization for tenths-of-a-unit quantities.

Unit tag 0 is metric (kg / cm), 1 is imperial (lb / in). Any other tag is
read as metric. Scale factors are exact integer ratios.
"""

from __future__ import annotations

from enum import IntEnum

from ruckcore.engine.fixed_point import tdiv

MM_PER_KM = 1_000_000
MM_PER_MILE = 1_609_344


class Unit(IntEnum):
    metric = 0
    imperial = 1


def mass_to_kg1000(value_tenths: int, unit: int) -> int:
    """Tenths of kg/lb → kilograms × 1000."""
    if unit == Unit.imperial:
        return tdiv(value_tenths * 453592, 10000)
    return value_tenths * 100


def length_to_mm(value_tenths: int, unit: int) -> int:
    """Stride length in tenths → millimeters (tenths of a cm are already mm)."""
    if unit == Unit.imperial:
        return tdiv(value_tenths * 254, 10)
    return value_tenths


def distance_unit(use_imperial: bool) -> tuple[int, str]:
    """Millimeters per display unit and its label."""
    if use_imperial:
        return MM_PER_MILE, "mi"
    return MM_PER_KM, "km"
