# -*- coding: utf-8 -*-
"""Outside-figure computation with quality control.

Runs the full computation a surveyor submits for a parcel boundary:
closure, area, an optional traverse adjustment, accuracy grading and a
set of quality-control checks, then renders a plain-text report.

Example::

    from cogo_lib.computation import compute_outside_figure
    from cogo_lib.computation import generate_computation_report

    result = compute_outside_figure(points)
    print(generate_computation_report(result))
"""

from __future__ import annotations

import datetime
import itertools
import logging
import math
from collections.abc import Sequence

from pydantic import BaseModel
from pydantic import Field

from cogo_lib.cogo import assess_accuracy
from cogo_lib.cogo import bearing_distance
from cogo_lib.cogo import compute_area
from cogo_lib.cogo import compute_closure
from cogo_lib.cogo import format_ratio
from cogo_lib.constants import CLOSURE_TOLERANCE
from cogo_lib.constants import COLLINEAR_TOLERANCE
from cogo_lib.constants import DUPLICATE_POINT_TOLERANCE
from cogo_lib.constants import EXPECTED_MAX_EASTING
from cogo_lib.constants import EXPECTED_MAX_NORTHING
from cogo_lib.constants import EXPECTED_MIN_EASTING
from cogo_lib.constants import EXPECTED_MIN_NORTHING
from cogo_lib.constants import POINT_MATCH_TOLERANCE
from cogo_lib.constants import SQ_METERS_PER_HECTARE
from cogo_lib.enums import AccuracyQuality
from cogo_lib.enums import CheckSeverity
from cogo_lib.errors import ValidationError
from cogo_lib.models import AreaResult
from cogo_lib.models import Point2D
from cogo_lib.models import TraverseClosure
from cogo_lib.solver.base import TraverseAdjuster
from cogo_lib.solver.models import Observation
from cogo_lib.solver.relaxation import DampedRelaxationSolver

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Models
# -----------------------------------------------------------------------------


class MeasuredLeg(BaseModel):
    """A field measurement between two boundary points, by index.

    Missing ``distance`` or ``bearing`` values are taken from the
    coordinates themselves.
    """

    from_index: int = Field(ge=0)
    to_index: int = Field(ge=0)
    distance: float | None = None
    bearing: float | None = None


class QualityCheck(BaseModel):
    """Outcome of a single quality-control check."""

    name: str
    passed: bool
    message: str
    severity: CheckSeverity


class AccuracySummary(BaseModel):
    ratio: float
    is_acceptable: bool
    quality: AccuracyQuality


class QualityControl(BaseModel):
    passed: bool
    checks: list[QualityCheck] = Field(default_factory=list)


class ComputationResult(BaseModel):
    """Everything produced by :func:`compute_outside_figure`.

    Attributes:
        success: True when no error was recorded
        coordinates: The input boundary points
        closure: Closure analysis of the input
        area: Area and perimeter of the input
        adjusted_coordinates: Adjusted points, when an adjustment ran
        accuracy: Accuracy grade of the closure
        quality_control: All checks and the overall verdict
        errors: Blocking problems
        warnings: Non-blocking problems
    """

    success: bool
    coordinates: list[Point2D] = Field(default_factory=list)
    closure: TraverseClosure
    area: AreaResult
    adjusted_coordinates: list[Point2D] | None = None
    accuracy: AccuracySummary
    quality_control: QualityControl
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


def _failed_result(coordinates: Sequence[Point2D], message: str) -> ComputationResult:
    return ComputationResult(
        success=False,
        coordinates=list(coordinates),
        closure=TraverseClosure(
            closure_error=0.0,
            closure_error_ratio=0.0,
            closure_distance=0.0,
            closure_bearing=0.0,
            is_within_tolerance=False,
            tolerance=CLOSURE_TOLERANCE,
            is_closed=False,
        ),
        area=AreaResult(area=0.0, perimeter=0.0),
        accuracy=AccuracySummary(
            ratio=0.0, is_acceptable=False, quality=AccuracyQuality.POOR
        ),
        quality_control=QualityControl(passed=False),
        errors=[message],
    )


# -----------------------------------------------------------------------------
# Quality-control checks
# -----------------------------------------------------------------------------


def _distinct_vertices(coordinates: Sequence[Point2D]) -> list[Point2D]:
    # The repeated closing vertex of a closed figure is not a duplicate
    points = list(coordinates)
    if len(points) > 1:
        first, last = points[0], points[-1]
        if (
            abs(first.x - last.x) < POINT_MATCH_TOLERANCE
            and abs(first.y - last.y) < POINT_MATCH_TOLERANCE
        ):
            points.pop()
    return points


def check_duplicate_coordinates(
    coordinates: Sequence[Point2D],
    tolerance: float = DUPLICATE_POINT_TOLERANCE,
) -> QualityCheck:
    """Flag pairs of boundary points closer than ``tolerance`` meters."""
    duplicates = sum(
        1
        for a, b in itertools.combinations(_distinct_vertices(coordinates), 2)
        if math.hypot(a.x - b.x, a.y - b.y) < tolerance
    )

    return QualityCheck(
        name="Duplicate Coordinates",
        passed=duplicates == 0,
        message=(
            "No duplicate coordinates found"
            if duplicates == 0
            else f"Found {duplicates} duplicate coordinate pairs"
        ),
        severity=CheckSeverity.INFO if duplicates == 0 else CheckSeverity.WARNING,
    )


def check_collinear_points(
    coordinates: Sequence[Point2D],
    tolerance: float = COLLINEAR_TOLERANCE,
) -> QualityCheck:
    """Flag triples of boundary points lying on a straight line."""
    collinear = 0
    for p1, p2, p3 in itertools.combinations(_distinct_vertices(coordinates), 3):
        cross = (p2.x - p1.x) * (p3.y - p1.y) - (p2.y - p1.y) * (p3.x - p1.x)
        if abs(cross) < tolerance:
            collinear += 1

    return QualityCheck(
        name="Collinear Points",
        passed=collinear == 0,
        message=(
            "No collinear points detected"
            if collinear == 0
            else f"Found {collinear} sets of collinear points"
        ),
        severity=CheckSeverity.INFO if collinear == 0 else CheckSeverity.WARNING,
    )


def check_coordinate_consistency(coordinates: Sequence[Point2D]) -> QualityCheck:
    """Flag points outside the expected UTM zone 35S survey envelope."""
    outliers = [
        point
        for point in coordinates
        if not (
            EXPECTED_MIN_EASTING <= point.x <= EXPECTED_MAX_EASTING
            and EXPECTED_MIN_NORTHING <= point.y <= EXPECTED_MAX_NORTHING
        )
    ]

    return QualityCheck(
        name="Coordinate Consistency",
        passed=not outliers,
        message=(
            "All coordinates within expected UTM Zone 35S bounds"
            if not outliers
            else f"Found {len(outliers)} coordinates outside expected bounds"
        ),
        severity=CheckSeverity.INFO if not outliers else CheckSeverity.WARNING,
    )


# -----------------------------------------------------------------------------
# Computation
# -----------------------------------------------------------------------------


def _build_observations(
    coordinates: Sequence[Point2D],
    measured_legs: Sequence[MeasuredLeg],
) -> list[Observation]:
    observations: list[Observation] = []
    for leg in measured_legs:
        try:
            start = coordinates[leg.from_index]
            end = coordinates[leg.to_index]
        except IndexError:
            raise ValidationError(
                "Measured leg refers to an unknown point",
                "measured_legs",
                f"{leg.from_index}->{leg.to_index}",
            ) from None

        computed = bearing_distance(start, end)
        observations.append(
            Observation(
                from_=start,
                to=end,
                distance=leg.distance if leg.distance is not None else computed.distance,
                bearing=leg.bearing if leg.bearing is not None else computed.bearing,
            )
        )
    return observations


def _adjust(
    coordinates: Sequence[Point2D],
    closure: TraverseClosure,
    measured_legs: Sequence[MeasuredLeg],
    solver: TraverseAdjuster,
) -> tuple[list[Point2D], QualityCheck]:
    adjusted = solver.adjust(_build_observations(coordinates, measured_legs))

    ring = list(adjusted)
    if closure.is_closed and ring:
        ring.append(ring[0])

    improvement = closure.closure_error - compute_closure(ring).closure_error
    check = QualityCheck(
        name="Least Squares Adjustment",
        passed=improvement > 0,
        message=(
            f"Adjustment improved closure by {improvement:.6f} m"
            if improvement > 0
            else "Adjustment did not improve closure"
        ),
        severity=CheckSeverity.INFO if improvement > 0 else CheckSeverity.WARNING,
    )
    return adjusted, check


def compute_outside_figure(
    coordinates: Sequence[Point2D],
    measured_legs: Sequence[MeasuredLeg] | None = None,
    solver: TraverseAdjuster | None = None,
) -> ComputationResult:
    """Compute closure, area and accuracy of a parcel boundary.

    An adjustment runs only when the misclose exceeds 1 mm and measured
    legs are given.  Fewer than three coordinates yield an unsuccessful
    result rather than an exception.

    Args:
        coordinates: Boundary points in order (a closed figure repeats the
            first point at the end)
        measured_legs: Field measurements used for the adjustment
        solver: Adjustment algorithm, damped relaxation by default
    """
    if len(coordinates) < 3:
        logger.warning(
            "Outside figure computation skipped: %d coordinates", len(coordinates)
        )
        return _failed_result(coordinates, "At least 3 coordinates required")

    errors: list[str] = []
    warnings: list[str] = []
    checks: list[QualityCheck] = []

    closure = compute_closure(coordinates)
    ratio_label = format_ratio(closure.closure_error_ratio)
    closure_check = QualityCheck(
        name="Closure Tolerance",
        passed=closure.is_within_tolerance,
        message=(
            f"Closure error within tolerance ({ratio_label})"
            if closure.is_within_tolerance
            else f"Closure error exceeds tolerance ({ratio_label}). "
            f"Required: {format_ratio(closure.tolerance)}"
        ),
        severity=(
            CheckSeverity.INFO if closure.is_within_tolerance else CheckSeverity.ERROR
        ),
    )
    checks.append(closure_check)
    if not closure.is_within_tolerance:
        errors.append(closure_check.message)

    area = compute_area(coordinates)
    checks.append(
        QualityCheck(
            name="Minimum Area",
            passed=area.area > 0,
            message=(
                f"Area computed: {area.area:.2f} m²"
                if area.area > 0
                else "Invalid area computed"
            ),
            severity=CheckSeverity.INFO if area.area > 0 else CheckSeverity.ERROR,
        )
    )
    if area.area <= 0:
        errors.append("Invalid area computed")

    adjusted: list[Point2D] | None = None
    if closure.closure_error > POINT_MATCH_TOLERANCE and measured_legs:
        solver = solver or DampedRelaxationSolver()
        try:
            adjusted, adjustment_check = _adjust(
                coordinates, closure, measured_legs, solver
            )
        except ValidationError as exc:
            logger.warning("%s adjustment failed: %s", solver.name, exc)
            warnings.append(f"Least squares adjustment failed: {exc.message}")
        else:
            checks.append(adjustment_check)
            if not adjustment_check.passed:
                warnings.append("Least squares adjustment did not improve closure")

    assessment = assess_accuracy(closure)
    accuracy = AccuracySummary(
        ratio=closure.closure_error_ratio,
        is_acceptable=assessment.meets_standard,
        quality=assessment.quality,
    )
    checks.append(
        QualityCheck(
            name="Accuracy Assessment",
            passed=accuracy.is_acceptable,
            message=f"Accuracy ratio: {ratio_label} ({accuracy.quality.value})",
            severity=(
                CheckSeverity.INFO if accuracy.is_acceptable else CheckSeverity.WARNING
            ),
        )
    )
    if not accuracy.is_acceptable:
        warnings.append(f"Accuracy below acceptable standard: {accuracy.quality.value}")

    for check in (
        check_duplicate_coordinates(coordinates),
        check_collinear_points(coordinates),
        check_coordinate_consistency(coordinates),
    ):
        checks.append(check)
        if not check.passed:
            warnings.append(check.message)

    qc_passed = (
        all(check.passed for check in checks if check.severity == CheckSeverity.ERROR)
        and closure.is_within_tolerance
        and area.area > 0
    )

    logger.info(
        "Outside figure: closure %.4f m (%s), area %.2f m², QC %s",
        closure.closure_error,
        ratio_label,
        area.area,
        "passed" if qc_passed else "failed",
    )

    return ComputationResult(
        success=not errors,
        coordinates=list(coordinates),
        closure=closure,
        area=area,
        adjusted_coordinates=adjusted,
        accuracy=accuracy,
        quality_control=QualityControl(passed=qc_passed, checks=checks),
        errors=errors,
        warnings=warnings,
    )


# -----------------------------------------------------------------------------
# Report
# -----------------------------------------------------------------------------


def generate_computation_report(
    result: ComputationResult,
    generated_at: datetime.datetime | None = None,
) -> str:
    """Render a computation result as a plain-text report."""
    rule = "=" * 60
    sub_rule = "-" * 60
    generated_at = generated_at or datetime.datetime.now(tz=datetime.timezone.utc)
    closure = result.closure

    lines = [
        rule,
        "OUTSIDE FIGURE COMPUTATION REPORT",
        rule,
        "",
        "CLOSURE ANALYSIS",
        sub_rule,
        f"Closure Error: {closure.closure_error:.6f} m",
        f"Closure Error Ratio: {format_ratio(closure.closure_error_ratio)}",
        f"Closure Distance: {closure.closure_distance:.4f} m",
        f"Closure Bearing: {closure.closure_bearing:.4f}°",
        f"Within Tolerance: {'YES' if closure.is_within_tolerance else 'NO'} "
        f"(Required: {format_ratio(closure.tolerance)})",
        "",
        "AREA COMPUTATION",
        sub_rule,
        f"Area: {result.area.area:.2f} m²",
        f"Area: {result.area.area / SQ_METERS_PER_HECTARE:.4f} hectares",
        f"Perimeter: {result.area.perimeter:.2f} m",
        "",
        "ACCURACY ASSESSMENT",
        sub_rule,
        f"Accuracy Ratio: {format_ratio(result.accuracy.ratio)}",
        f"Quality: {result.accuracy.quality.value.upper()}",
        f"Acceptable: {'YES' if result.accuracy.is_acceptable else 'NO'}",
        "",
        "QUALITY CONTROL CHECKS",
        sub_rule,
    ]

    for check in result.quality_control.checks:
        status = "✓" if check.passed else "✗"
        lines.append(f"{status} {check.name}: {check.message}")
    lines.append("")
    lines.append(
        f"Overall Status: {'PASSED' if result.quality_control.passed else 'FAILED'}"
    )
    lines.append("")

    if result.errors:
        lines.extend(["ERRORS", sub_rule])
        lines.extend(f"✗ {error}" for error in result.errors)
        lines.append("")

    if result.warnings:
        lines.extend(["WARNINGS", sub_rule])
        lines.extend(f"⚠ {warning}" for warning in result.warnings)
        lines.append("")

    lines.extend([rule, f"Report Generated: {generated_at.isoformat()}", rule])
    return "\n".join(lines)
