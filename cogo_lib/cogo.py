# -*- coding: utf-8 -*-
"""Coordinate geometry (COGO) computations.

Traverse calculations, closure analysis, area computation and angle
checks, following the surveying conventions:

- bearings are whole-circle bearings in degrees, 0° = north (+Y),
  90° = east (+X), measured clockwise;
- coordinates are planar meters (UTM 35S unless stated otherwise);
- a traverse must close to 1:10,000 (ratio 0.0001) to be sealed.

All functions are pure and thread-safe.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

from cogo_lib.constants import ANGLE_SUM_TOLERANCE
from cogo_lib.constants import CLOSURE_TOLERANCE
from cogo_lib.constants import EXCELLENT_CLOSURE_RATIO
from cogo_lib.constants import POINT_MATCH_TOLERANCE
from cogo_lib.constants import UTM_PRECISION
from cogo_lib.enums import AccuracyQuality
from cogo_lib.enums import AreaUnit
from cogo_lib.enums import DistanceUnit
from cogo_lib.errors import ValidationError
from cogo_lib.models import AccuracyAssessment
from cogo_lib.models import AngleValidation
from cogo_lib.models import AreaResult
from cogo_lib.models import BearingDistance
from cogo_lib.models import Point2D
from cogo_lib.models import TraverseClosure
from cogo_lib.models import TraverseLeg
from cogo_lib.units import area_unit
from cogo_lib.units import convert_area
from cogo_lib.units import convert_distance
from cogo_lib.units import normalize_bearing

logger = logging.getLogger(__name__)


def _require_points(points: Sequence[Point2D], minimum: int, message: str) -> None:
    if len(points) < minimum:
        raise ValidationError(message, "points", len(points))


def _same_point(a: Point2D, b: Point2D) -> bool:
    return (
        abs(a.x - b.x) < POINT_MATCH_TOLERANCE
        and abs(a.y - b.y) < POINT_MATCH_TOLERANCE
    )


# -----------------------------------------------------------------------------
# Bearing / distance
# -----------------------------------------------------------------------------


def bearing_distance(
    from_: Point2D,
    to: Point2D,
    unit: DistanceUnit | str = DistanceUnit.METERS,
) -> BearingDistance:
    """Compute the bearing and distance from one point to another.

    Args:
        from_: Start point
        to: End point
        unit: Unit of the returned distance

    Returns:
        Bearing normalized to ``[0, 360)`` and the Euclidean distance
    """
    dx = to.x - from_.x
    dy = to.y - from_.y

    distance = math.hypot(dx, dy)
    bearing = normalize_bearing(math.degrees(math.atan2(dx, dy)))

    return BearingDistance(
        bearing=bearing,
        distance=convert_distance(distance, DistanceUnit.METERS, unit),
        unit=DistanceUnit(unit),
    )


def calculate_coordinates(
    from_: Point2D,
    bearing: float,
    distance: float,
    unit: DistanceUnit | str = DistanceUnit.METERS,
    point_id: str | None = None,
) -> Point2D:
    """Compute the point reached from ``from_`` along a bearing.

    ``x' = x + d·sin(bearing)`` and ``y' = y + d·cos(bearing)``; the result
    is rounded to 4 decimal places.  This is the inverse of
    :func:`bearing_distance`.
    """
    bearing_rad = math.radians(bearing)
    meters = convert_distance(distance, unit, DistanceUnit.METERS)

    return Point2D(
        x=round(from_.x + meters * math.sin(bearing_rad), UTM_PRECISION),
        y=round(from_.y + meters * math.cos(bearing_rad), UTM_PRECISION),
        id=point_id,
    )


def traverse_from_legs(start: Point2D, legs: Sequence[TraverseLeg]) -> list[Point2D]:
    """Run a traverse forward from ``start`` through bearing/distance legs.

    Returns:
        ``len(legs) + 1`` points, ``start`` first
    """
    points = [start]
    for leg in legs:
        points.append(calculate_coordinates(points[-1], leg.bearing, leg.distance, leg.unit))
    return points


# -----------------------------------------------------------------------------
# Closure
# -----------------------------------------------------------------------------


def compute_closure(
    points: Sequence[Point2D],
    tolerance: float = CLOSURE_TOLERANCE,
) -> TraverseClosure:
    """Compute the closure error of a traverse.

    If the first and last points coincide (within 1 mm) the traverse is
    closed and the misclose is the vector sum of latitudes (Δy) and
    departures (Δx) over all legs.  Otherwise the traverse is open and the
    misclose is the gap between the first and last points.

    Args:
        points: At least three traverse points in order
        tolerance: Maximum acceptable ``closure / total distance`` ratio

    Raises:
        ValidationError: If fewer than three points are given
    """
    _require_points(points, 3, "Traverse requires at least 3 points")

    first, last = points[0], points[-1]
    is_closed = _same_point(first, last)

    total_distance = 0.0
    sum_departures = 0.0
    sum_latitudes = 0.0
    for current, following in zip(points, points[1:]):
        leg = bearing_distance(current, following)
        total_distance += leg.distance
        bearing_rad = math.radians(leg.bearing)
        sum_departures += leg.distance * math.sin(bearing_rad)
        sum_latitudes += leg.distance * math.cos(bearing_rad)

    if is_closed:
        closure_distance = math.hypot(sum_departures, sum_latitudes)
        closure_bearing = normalize_bearing(
            math.degrees(math.atan2(sum_departures, sum_latitudes))
        )
    else:
        gap = bearing_distance(first, last)
        closure_distance = gap.distance
        closure_bearing = gap.bearing
        logger.debug(
            "Open traverse: %.4f m between first and last point", closure_distance
        )

    ratio = closure_distance / total_distance if total_distance > 0 else 0.0

    return TraverseClosure(
        closure_error=closure_distance,
        closure_error_ratio=ratio,
        closure_distance=closure_distance,
        closure_bearing=closure_bearing,
        is_within_tolerance=ratio <= tolerance,
        tolerance=tolerance,
        is_closed=is_closed,
        total_distance=total_distance,
    )


# -----------------------------------------------------------------------------
# Area
# -----------------------------------------------------------------------------


def compute_area(
    points: Sequence[Point2D],
    unit: AreaUnit | str = AreaUnit.SQUARE_METERS,
) -> AreaResult:
    """Compute area (shoelace / surveyor's formula) and perimeter.

    The ring is closed automatically if the last point differs from the
    first.  The perimeter is always in meters.

    Raises:
        ValidationError: If fewer than three points are given
    """
    _require_points(points, 3, "Area calculation requires at least 3 points")
    resolved_unit = area_unit(unit)

    ring = list(points)
    if ring[0].x != ring[-1].x or ring[0].y != ring[-1].y:
        ring.append(ring[0])

    # Shift to the first vertex so UTM-sized products keep their precision
    origin_x, origin_y = ring[0].x, ring[0].y
    twice_area = 0.0
    perimeter = 0.0
    for current, following in zip(ring, ring[1:]):
        x1, y1 = current.x - origin_x, current.y - origin_y
        x2, y2 = following.x - origin_x, following.y - origin_y
        twice_area += x1 * y2 - x2 * y1
        perimeter += bearing_distance(current, following).distance

    area = abs(twice_area) / 2

    return AreaResult(
        area=convert_area(area, resolved_unit),
        unit=resolved_unit,
        perimeter=perimeter,
    )


# -----------------------------------------------------------------------------
# Angles
# -----------------------------------------------------------------------------


def _open_ring(points: Sequence[Point2D]) -> list[Point2D]:
    ring = list(points)
    if len(ring) > 3 and _same_point(ring[0], ring[-1]):
        ring.pop()
    return ring


def calculate_interior_angles(points: Sequence[Point2D]) -> list[float]:
    """Compute the angle at each vertex of a polygon.

    The angle at a vertex is the difference between the bearings to its
    two neighbours, folded into ``(0, 180]``.  A repeated closing vertex is
    ignored.

    Raises:
        ValidationError: If fewer than three distinct vertices are given
    """
    ring = _open_ring(points)
    _require_points(ring, 3, "Interior angles require at least 3 points")

    angles: list[float] = []
    n = len(ring)
    for i, current in enumerate(ring):
        previous = ring[i - 1]
        following = ring[(i + 1) % n]

        back = bearing_distance(current, previous).bearing
        ahead = bearing_distance(current, following).bearing

        angle = normalize_bearing(ahead - back)
        if angle > 180:
            angle = 360 - angle
        angles.append(angle)

    return angles


def sum_interior_angles(n: int) -> float:
    """Theoretical interior angle sum of an ``n``-sided polygon."""
    return (n - 2) * 180.0


def validate_traverse_angles(
    points: Sequence[Point2D],
    expected_sum: float | None = None,
) -> AngleValidation:
    """Compare measured interior angles with the theoretical sum.

    Valid when the actual sum is within 0.01° of ``(n - 2)·180°`` (or of
    ``expected_sum`` when given).
    """
    angles = calculate_interior_angles(points)
    actual_sum = sum(angles)
    theoretical = (
        expected_sum if expected_sum is not None else sum_interior_angles(len(angles))
    )
    difference = actual_sum - theoretical

    return AngleValidation(
        actual_sum=actual_sum,
        expected_sum=theoretical,
        difference=difference,
        is_valid=abs(difference) < ANGLE_SUM_TOLERANCE,
    )


# -----------------------------------------------------------------------------
# Accuracy
# -----------------------------------------------------------------------------


def format_ratio(ratio: float) -> str:
    """Format a closure ratio as ``1:N`` (``0.0001`` -> ``"1:10,000"``)."""
    if ratio <= 0:
        return "1:∞"
    return f"1:{round(1 / ratio):,}"


def classify_accuracy(ratio: float, required_ratio: float = CLOSURE_TOLERANCE) -> AccuracyQuality:
    if ratio > required_ratio:
        return AccuracyQuality.POOR
    if ratio <= EXCELLENT_CLOSURE_RATIO:
        return AccuracyQuality.EXCELLENT
    if ratio <= CLOSURE_TOLERANCE:
        return AccuracyQuality.GOOD
    return AccuracyQuality.ACCEPTABLE


def assess_accuracy(
    closure: TraverseClosure,
    required_ratio: float = CLOSURE_TOLERANCE,
) -> AccuracyAssessment:
    """Check a traverse closure against the required accuracy standard.

    Args:
        closure: Result of :func:`compute_closure`
        required_ratio: Maximum acceptable ratio (1:10,000 = 0.0001)
    """
    actual = closure.closure_error_ratio
    meets_standard = actual <= required_ratio
    required_label = format_ratio(required_ratio)

    if meets_standard:
        message = f"Traverse meets accuracy standard ({required_label})"
    else:
        message = (
            "Traverse does not meet accuracy standard. "
            f"Actual: {format_ratio(actual)}, Required: {required_label}"
        )

    return AccuracyAssessment(
        meets_standard=meets_standard,
        actual_ratio=actual,
        required_ratio=required_ratio,
        quality=classify_accuracy(actual, required_ratio),
        message=message,
    )
