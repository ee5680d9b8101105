# -*- coding: utf-8 -*-
"""Angle, distance and area unit conversions."""

from __future__ import annotations

import math

from cogo_lib.constants import FEET_TO_METERS
from cogo_lib.enums import AngularUnit
from cogo_lib.enums import AreaUnit
from cogo_lib.enums import DistanceUnit
from cogo_lib.errors import ValidationError


def _angular_unit(unit: AngularUnit | str) -> AngularUnit:
    try:
        return AngularUnit(unit)
    except ValueError:
        raise ValidationError(f"Unknown angular unit: {unit}", "unit", unit) from None


def _distance_unit(unit: DistanceUnit | str) -> DistanceUnit:
    try:
        return DistanceUnit(unit)
    except ValueError:
        raise ValidationError(f"Unknown distance unit: {unit}", "unit", unit) from None


def area_unit(unit: AreaUnit | str) -> AreaUnit:
    """Resolve an area unit name.

    Raises:
        ValidationError: If the unit is not recognized
    """
    try:
        return AreaUnit(unit)
    except ValueError:
        raise ValidationError(f"Unknown area unit: {unit}", "unit", unit) from None


def to_degrees(angle: float, from_unit: AngularUnit | str = AngularUnit.DEGREES) -> float:
    """Convert an angle expressed in ``from_unit`` to degrees.

    Raises:
        ValidationError: If the unit is not recognized
    """
    match _angular_unit(from_unit):
        case AngularUnit.GRADIANS:
            return angle * 360 / 400
        case AngularUnit.RADIANS:
            return math.degrees(angle)
        case _:
            return angle


def from_degrees(degrees: float, to_unit: AngularUnit | str = AngularUnit.DEGREES) -> float:
    """Convert an angle in degrees to ``to_unit``.

    Raises:
        ValidationError: If the unit is not recognized
    """
    match _angular_unit(to_unit):
        case AngularUnit.GRADIANS:
            return degrees * 400 / 360
        case AngularUnit.RADIANS:
            return math.radians(degrees)
        case _:
            return degrees


def convert_distance(
    distance: float,
    from_unit: DistanceUnit | str,
    to_unit: DistanceUnit | str,
) -> float:
    """Convert a distance between meters and feet."""
    source = _distance_unit(from_unit)
    target = _distance_unit(to_unit)
    if source == target:
        return distance

    meters = distance * FEET_TO_METERS if source == DistanceUnit.FEET else distance
    if target == DistanceUnit.FEET:
        return meters / FEET_TO_METERS
    return meters


def convert_area(square_meters: float, to_unit: AreaUnit | str) -> float:
    """Convert an area in square meters to ``to_unit``."""
    return AreaUnit.convert(square_meters, area_unit(to_unit))


def normalize_bearing(bearing: float) -> float:
    """Wrap a bearing into ``[0, 360)`` degrees.

    The operation is idempotent: ``normalize_bearing(normalize_bearing(b))``
    equals ``normalize_bearing(b)``.
    """
    normalized = math.fmod(bearing, 360.0)
    if normalized < 0:
        normalized += 360.0
    # fmod of a tiny negative number can round up to exactly 360
    if normalized >= 360.0:
        normalized = 0.0
    return normalized
