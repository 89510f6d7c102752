# src/floormap/units.py
"""Display units. All stored dimensions are millimetres."""
from __future__ import annotations

from enum import Enum


class Unit(str, Enum):
    MM = "mm"
    CM = "cm"
    M = "m"
    INCH = "inch"


UNIT_TO_MM: dict[Unit, float] = {
    Unit.MM: 1.0,
    Unit.CM: 10.0,
    Unit.M: 1000.0,
    Unit.INCH: 25.4,
}

UNIT_NAMES: dict[Unit, str] = {
    Unit.MM: "Millimeters",
    Unit.CM: "Centimeters",
    Unit.M: "Meters",
    Unit.INCH: "Inches",
}

# Grid spacing in mm: 10 cm for metric, 1 m for metres, 10 inches for imperial.
DEFAULT_GRID_SIZE_MM: dict[Unit, float] = {
    Unit.MM: 100.0,
    Unit.CM: 100.0,
    Unit.M: 1000.0,
    Unit.INCH: 254.0,
}


def convert_from_mm(value_mm: float, unit: Unit) -> float:
    return value_mm / UNIT_TO_MM[Unit(unit)]


def convert_to_mm(value: float, unit: Unit) -> float:
    return value * UNIT_TO_MM[Unit(unit)]


def format_with_unit(value_mm: float, unit: Unit, decimals: int = 1) -> str:
    unit = Unit(unit)
    return f"{convert_from_mm(value_mm, unit):.{decimals}f}{unit.value}"


def format_dimension(value_mm: float) -> str:
    """Human-readable length: metres from 1 m, centimetres from 1 cm, else millimetres."""
    if value_mm >= 1000:
        return f"{value_mm / 1000:.2f}m"
    if value_mm >= 10:
        return f"{value_mm / 10:.1f}cm"
    return f"{round(value_mm)}mm"


def get_unit_display_name(unit: Unit) -> str:
    return UNIT_NAMES[Unit(unit)]


def get_default_grid_size(unit: Unit) -> float:
    return DEFAULT_GRID_SIZE_MM[Unit(unit)]
