# -*- coding: utf-8 -*-
"""Enumerations for survey computations and topology validation.

This module contains all enumerations used across the library,
including units for measurements, coordinate formats, UTM hemispheres
and the classification of topology findings.
"""

from enum import Enum

from cogo_lib.constants import SQ_METERS_PER_ACRE
from cogo_lib.constants import SQ_METERS_PER_HECTARE
from cogo_lib.constants import SQ_METERS_TO_SQ_FEET


class AngularUnit(str, Enum):
    """Unit for angle measurements.

    Attributes:
        DEGREES: Standard degrees (360 per circle)
        GRADIANS: Gradians (400 per circle)
        RADIANS: Radians (2π per circle)
    """

    DEGREES = "degrees"
    GRADIANS = "gradians"
    RADIANS = "radians"


class DistanceUnit(str, Enum):
    """Unit for distance measurements.

    Attributes:
        METERS: Metric meters
        FEET: International feet
    """

    METERS = "meters"
    FEET = "feet"


class AreaUnit(str, Enum):
    """Unit for area results.

    Attributes:
        SQUARE_METERS: Square meters
        SQUARE_FEET: Square feet
        HECTARES: Hectares (10,000 m²)
        ACRES: Acres (4046.86 m²)
    """

    SQUARE_METERS = "square_meters"
    SQUARE_FEET = "square_feet"
    HECTARES = "hectares"
    ACRES = "acres"

    @staticmethod
    def convert(square_meters: float, to_unit: "AreaUnit") -> float:
        """Convert square meters to the target unit.

        Args:
            square_meters: Area in square meters
            to_unit: Target unit to convert to

        Returns:
            Converted area
        """
        if to_unit == AreaUnit.SQUARE_FEET:
            return square_meters * SQ_METERS_TO_SQ_FEET
        if to_unit == AreaUnit.HECTARES:
            return square_meters / SQ_METERS_PER_HECTARE
        if to_unit == AreaUnit.ACRES:
            return square_meters / SQ_METERS_PER_ACRE
        return square_meters


class CoordinateFormat(str, Enum):
    """Input format of a coordinate pair.

    Attributes:
        DECIMAL: Decimal degrees (latitude, longitude)
        DMS: Degrees, minutes, seconds with hemisphere letters
        UTM: Easting, northing in meters
    """

    DECIMAL = "decimal"
    DMS = "dms"
    UTM = "utm"


class Hemisphere(str, Enum):
    """UTM hemisphere."""

    NORTH = "N"
    SOUTH = "S"


class TopologyErrorType(str, Enum):
    """Classification of a topology finding.

    Attributes:
        OVERLAP: Two geometries share interior area
        GAP: Part of the parent parcel is not covered by any section
        CONTAINMENT: A section extends outside the parent parcel
        INVALID_GEOMETRY: A geometry failed structural validation
        TOUCHING_BOUNDARY: A section only touches the parent boundary
        SELF_INTERSECTION: A geometry is invalid according to the engine
    """

    OVERLAP = "overlap"
    GAP = "gap"
    CONTAINMENT = "containment"
    INVALID_GEOMETRY = "invalid_geometry"
    TOUCHING_BOUNDARY = "touching_boundary"
    SELF_INTERSECTION = "self_intersection"


class Severity(str, Enum):
    """Severity level for validation findings.

    Attributes:
        ERROR: Blocks sealing of the scheme
        WARNING: Reported for review, non-blocking
    """

    ERROR = "error"
    WARNING = "warning"


class CheckSeverity(str, Enum):
    """Severity of a quality-control check outcome."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class AccuracyQuality(str, Enum):
    """Qualitative grade of a traverse closure.

    Attributes:
        EXCELLENT: Ratio of 1:20,000 or better
        GOOD: Ratio of 1:10,000 or better
        ACCEPTABLE: Meets the required ratio but not 1:10,000
        POOR: Fails the required ratio
    """

    EXCELLENT = "excellent"
    GOOD = "good"
    ACCEPTABLE = "acceptable"
    POOR = "poor"
