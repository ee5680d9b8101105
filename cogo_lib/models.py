# -*- coding: utf-8 -*-
"""Core data models for survey computations.

These Pydantic models are value objects built per request from
caller-supplied coordinates.  None of them are persisted by the library.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel
from pydantic import Field

from cogo_lib.constants import CLOSURE_TOLERANCE
from cogo_lib.enums import AccuracyQuality
from cogo_lib.enums import AreaUnit
from cogo_lib.enums import DistanceUnit


class Point2D(BaseModel):
    """A planar coordinate in a projected system (UTM 35S by default).

    Attributes:
        x: Easting in meters
        y: Northing in meters
        id: Optional identifier used to correlate points across observations
    """

    x: float
    y: float
    id: str | None = None

    def as_tuple(self) -> tuple[float, float]:
        """Return the coordinate as an ``(x, y)`` tuple."""
        return (self.x, self.y)

    def __str__(self) -> str:
        """Format as human-readable string."""
        label = f"{self.id}: " if self.id else ""
        return f"{label}({self.x:.4f}, {self.y:.4f})"


class TraverseLeg(BaseModel):
    """A single traverse leg given as bearing and distance.

    Attributes:
        distance: Leg length
        bearing: Whole-circle bearing in degrees (0° = north, clockwise)
        unit: Length unit of ``distance``
    """

    distance: Annotated[float, Field(ge=0)]
    bearing: float
    unit: DistanceUnit = DistanceUnit.METERS


class BearingDistance(BaseModel):
    """Bearing and distance between two points."""

    bearing: float
    distance: float
    unit: DistanceUnit = DistanceUnit.METERS


class TraverseClosure(BaseModel):
    """Closure analysis of a traverse.

    Attributes:
        closure_error: Linear misclose in meters
        closure_error_ratio: ``closure_distance / total_distance``
        closure_distance: Same as ``closure_error``
        closure_bearing: Bearing of the misclose vector in degrees
        is_within_tolerance: ``closure_error_ratio <= tolerance``
        tolerance: Allowed ratio (1:10,000 = 0.0001)
        is_closed: Whether the first and last points coincide
        total_distance: Sum of all leg lengths in meters
    """

    closure_error: float
    closure_error_ratio: float
    closure_distance: float
    closure_bearing: float
    is_within_tolerance: bool
    tolerance: float = CLOSURE_TOLERANCE
    is_closed: bool = True
    total_distance: float = 0.0

    @property
    def precision_denominator(self) -> int | None:
        """Return ``N`` of the 1:N precision, or None for a perfect closure."""
        if self.closure_error_ratio <= 0:
            return None
        return round(1 / self.closure_error_ratio)


class AreaResult(BaseModel):
    """Area and perimeter of a closed figure."""

    area: float
    unit: AreaUnit = AreaUnit.SQUARE_METERS
    perimeter: float


class AngleValidation(BaseModel):
    """Comparison of measured interior angles against the n-gon sum."""

    actual_sum: float
    expected_sum: float
    difference: float
    is_valid: bool


class AccuracyAssessment(BaseModel):
    """Outcome of comparing a closure against a required ratio."""

    meets_standard: bool
    actual_ratio: float
    required_ratio: float
    quality: AccuracyQuality
    message: str
