# -*- coding: utf-8 -*-
"""Tests for bearing/distance, closure, area, angles and accuracy."""

import math

import pytest

from cogo_lib.cogo import assess_accuracy
from cogo_lib.cogo import bearing_distance
from cogo_lib.cogo import calculate_coordinates
from cogo_lib.cogo import calculate_interior_angles
from cogo_lib.cogo import compute_area
from cogo_lib.cogo import compute_closure
from cogo_lib.cogo import format_ratio
from cogo_lib.cogo import sum_interior_angles
from cogo_lib.cogo import traverse_from_legs
from cogo_lib.cogo import validate_traverse_angles
from cogo_lib.enums import AccuracyQuality
from cogo_lib.enums import AreaUnit
from cogo_lib.errors import ValidationError
from cogo_lib.models import Point2D
from cogo_lib.models import TraverseClosure
from cogo_lib.models import TraverseLeg

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_closure(ratio: float) -> TraverseClosure:
    return TraverseClosure(
        closure_error=ratio * 1000,
        closure_error_ratio=ratio,
        closure_distance=ratio * 1000,
        closure_bearing=0.0,
        is_within_tolerance=ratio <= 0.0001,
        total_distance=1000.0,
    )


def _make_regular_polygon(n: int, radius: float = 100.0) -> list[Point2D]:
    return [
        Point2D(
            x=500000 + radius * math.sin(2 * math.pi * k / n),
            y=8000000 + radius * math.cos(2 * math.pi * k / n),
        )
        for k in range(n)
    ]


# ---------------------------------------------------------------------------
# Bearing / distance
# ---------------------------------------------------------------------------


class TestBearingDistance:
    """Tests for bearing_distance and calculate_coordinates."""

    @pytest.mark.parametrize(
        ("dx", "dy", "bearing"),
        [(0, 100, 0.0), (100, 0, 90.0), (0, -100, 180.0), (-100, 0, 270.0)],
    )
    def test_cardinal_directions(self, dx, dy, bearing):
        result = bearing_distance(Point2D(x=0, y=0), Point2D(x=dx, y=dy))
        assert result.bearing == pytest.approx(bearing)
        assert result.distance == pytest.approx(100.0)

    def test_bearing_in_range(self):
        result = bearing_distance(Point2D(x=0, y=0), Point2D(x=-1, y=1))
        assert result.bearing == pytest.approx(315.0)

    def test_distance_in_feet(self):
        result = bearing_distance(Point2D(x=0, y=0), Point2D(x=30.48, y=0), "feet")
        assert result.distance == pytest.approx(100.0)
        assert result.unit.value == "feet"

    def test_calculate_coordinates(self):
        point = calculate_coordinates(Point2D(x=0, y=0), 45.0, 100.0, point_id="P2")
        assert point.x == pytest.approx(70.7107)
        assert point.y == pytest.approx(70.7107)
        assert point.id == "P2"

    def test_calculate_coordinates_rounds(self):
        point = calculate_coordinates(Point2D(x=0, y=0), 33.3, 123.456789)
        assert point.x == round(point.x, 4)
        assert point.y == round(point.y, 4)

    @pytest.mark.parametrize("bearing", [0.0, 33.3, 90.0, 181.5, 271.25, 359.5])
    def test_inverse_of_bearing_distance(self, bearing):
        start = Point2D(x=300000, y=8000000)
        end = calculate_coordinates(start, bearing, 123.456)
        back = bearing_distance(start, end)
        assert back.bearing == pytest.approx(bearing, abs=1e-3)
        assert back.distance == pytest.approx(123.456, abs=1e-3)

    def test_traverse_from_legs(self):
        legs = [
            TraverseLeg(distance=100, bearing=90),
            TraverseLeg(distance=100, bearing=0),
            TraverseLeg(distance=100, bearing=270),
            TraverseLeg(distance=100, bearing=180),
        ]
        points = traverse_from_legs(Point2D(x=0, y=0), legs)
        assert len(points) == 5
        assert points[2].x == pytest.approx(100.0)
        assert points[2].y == pytest.approx(100.0)
        assert points[-1].x == pytest.approx(0.0, abs=1e-4)
        assert points[-1].y == pytest.approx(0.0, abs=1e-4)


# ---------------------------------------------------------------------------
# Closure
# ---------------------------------------------------------------------------


class TestClosure:
    """Tests for compute_closure."""

    def test_closed_square(self, square_points):
        closure = compute_closure(square_points)
        assert closure.is_closed
        assert closure.closure_error == pytest.approx(0.0, abs=1e-6)
        assert closure.closure_error_ratio == pytest.approx(0.0, abs=1e-9)
        assert closure.is_within_tolerance
        assert closure.total_distance == pytest.approx(4000.0)

    def test_open_traverse(self):
        points = [
            Point2D(x=0, y=0),
            Point2D(x=100, y=0),
            Point2D(x=100, y=100),
            Point2D(x=0, y=1),
        ]
        closure = compute_closure(points)
        expected_total = 200 + math.hypot(100, 99)

        assert not closure.is_closed
        assert closure.closure_error == pytest.approx(1.0)
        assert closure.closure_distance == closure.closure_error
        assert closure.closure_bearing == pytest.approx(0.0)
        assert closure.total_distance == pytest.approx(expected_total)
        assert closure.closure_error_ratio == pytest.approx(1.0 / expected_total)
        assert not closure.is_within_tolerance

    def test_custom_tolerance(self):
        points = [
            Point2D(x=0, y=0),
            Point2D(x=100, y=0),
            Point2D(x=100, y=100),
            Point2D(x=0, y=1),
        ]
        assert compute_closure(points, tolerance=0.01).is_within_tolerance

    def test_too_few_points(self):
        with pytest.raises(ValidationError) as exc_info:
            compute_closure([Point2D(x=0, y=0), Point2D(x=1, y=1)])
        assert exc_info.value.field == "points"
        assert "at least 3 points" in exc_info.value.message

    def test_precision_denominator(self):
        assert _make_closure(0.0001).precision_denominator == 10_000
        assert _make_closure(0.0).precision_denominator is None


# ---------------------------------------------------------------------------
# Area
# ---------------------------------------------------------------------------


class TestArea:
    """Tests for compute_area."""

    def test_square_in_square_meters(self, square_points):
        result = compute_area(square_points)
        assert result.area == pytest.approx(1_000_000.0)
        assert result.perimeter == pytest.approx(4000.0)
        assert result.unit == AreaUnit.SQUARE_METERS

    def test_square_in_hectares(self, square_points):
        result = compute_area(square_points, unit="hectares")
        assert result.area == pytest.approx(100.0)
        assert result.perimeter == pytest.approx(4000.0)

    def test_square_in_acres(self, square_points):
        result = compute_area(square_points, AreaUnit.ACRES)
        assert result.area == pytest.approx(1_000_000.0 / 4046.86)

    def test_auto_close(self, square_points, open_square_points):
        closed = compute_area(square_points)
        opened = compute_area(open_square_points)
        assert opened.area == pytest.approx(closed.area)
        assert opened.perimeter == pytest.approx(closed.perimeter)

    def test_orientation_independent(self, square_points):
        clockwise = compute_area(list(reversed(square_points)))
        assert clockwise.area == pytest.approx(1_000_000.0)

    def test_triangle(self):
        points = [Point2D(x=0, y=0), Point2D(x=4, y=0), Point2D(x=0, y=3)]
        result = compute_area(points)
        assert result.area == pytest.approx(6.0)
        assert result.perimeter == pytest.approx(12.0)

    def test_too_few_points(self):
        with pytest.raises(ValidationError):
            compute_area([Point2D(x=0, y=0), Point2D(x=1, y=0)])

    def test_unknown_unit(self, square_points):
        with pytest.raises(ValidationError) as exc_info:
            compute_area(square_points, "furlongs")
        assert exc_info.value.field == "unit"
        assert exc_info.value.message == "Unknown area unit: furlongs"


# ---------------------------------------------------------------------------
# Angles
# ---------------------------------------------------------------------------


class TestInteriorAngles:
    """Tests for interior angle computation and validation."""

    def test_square_angles(self, square_points):
        angles = calculate_interior_angles(square_points)
        assert len(angles) == 4
        assert angles == pytest.approx([90.0, 90.0, 90.0, 90.0])

    def test_right_triangle(self):
        points = [Point2D(x=0, y=0), Point2D(x=4, y=0), Point2D(x=0, y=3)]
        angles = calculate_interior_angles(points)
        assert angles[0] == pytest.approx(90.0)
        assert angles[1] == pytest.approx(math.degrees(math.atan2(3, 4)))
        assert angles[2] == pytest.approx(math.degrees(math.atan2(4, 3)))
        assert sum(angles) == pytest.approx(180.0)

    @pytest.mark.parametrize("n", [3, 5, 6, 8, 12])
    def test_regular_polygon_sum(self, n):
        points = _make_regular_polygon(n)
        angles = calculate_interior_angles(points)
        assert sum(angles) == pytest.approx(sum_interior_angles(n), abs=1e-6)
        assert angles[0] == pytest.approx((n - 2) * 180.0 / n, abs=1e-6)

    def test_sum_interior_angles(self):
        assert sum_interior_angles(3) == 180.0
        assert sum_interior_angles(4) == 360.0
        assert sum_interior_angles(6) == 720.0

    def test_validate_square(self, square_points):
        result = validate_traverse_angles(square_points)
        assert result.is_valid
        assert result.expected_sum == 360.0
        assert result.difference == pytest.approx(0.0, abs=1e-9)

    def test_validate_with_expected_sum(self, square_points):
        result = validate_traverse_angles(square_points, expected_sum=400.0)
        assert not result.is_valid
        assert result.difference == pytest.approx(-40.0)

    def test_too_few_distinct_points(self):
        with pytest.raises(ValidationError):
            calculate_interior_angles([Point2D(x=0, y=0), Point2D(x=1, y=0)])


# ---------------------------------------------------------------------------
# Accuracy
# ---------------------------------------------------------------------------


class TestAccuracy:
    """Tests for format_ratio and assess_accuracy."""

    def test_format_ratio(self):
        assert format_ratio(0.0001) == "1:10,000"
        assert format_ratio(0.0002) == "1:5,000"
        assert format_ratio(0.0) == "1:∞"

    def test_excellent(self):
        result = assess_accuracy(_make_closure(0.00002))
        assert result.meets_standard
        assert result.quality == AccuracyQuality.EXCELLENT
        assert result.message == "Traverse meets accuracy standard (1:10,000)"

    def test_good(self):
        result = assess_accuracy(_make_closure(0.00008))
        assert result.meets_standard
        assert result.quality == AccuracyQuality.GOOD

    def test_boundary_is_acceptable(self):
        result = assess_accuracy(_make_closure(0.0001))
        assert result.meets_standard

    def test_poor(self):
        result = assess_accuracy(_make_closure(0.0002))
        assert not result.meets_standard
        assert result.quality == AccuracyQuality.POOR
        assert result.message == (
            "Traverse does not meet accuracy standard. "
            "Actual: 1:5,000, Required: 1:10,000"
        )

    def test_relaxed_requirement(self):
        result = assess_accuracy(_make_closure(0.00015), required_ratio=0.0002)
        assert result.meets_standard
        assert result.quality == AccuracyQuality.ACCEPTABLE
        assert result.required_ratio == 0.0002
