# -*- coding: utf-8 -*-
"""Survey computation and spatial validation library.

Coordinate geometry (COGO) computations for cadastral surveys: traverse
closure, area and perimeter, angle checks, accuracy assessment against
the 1:10,000 standard, CRS transformation, traverse adjustment and
topology validation of sectional schemes.

Usage:
    from cogo_lib import Point2D, compute_closure, compute_area

    points = [
        Point2D(x=300000, y=8000000),
        Point2D(x=301000, y=8000000),
        Point2D(x=301000, y=8001000),
        Point2D(x=300000, y=8001000),
        Point2D(x=300000, y=8000000),
    ]
    closure = compute_closure(points)
    area = compute_area(points, unit="hectares")

    # Topology of a scheme (coroutine)
    from cogo_lib.topology import TopologyValidator
    report = await TopologyValidator().validate_topology(sections, parent)
"""

__version__ = "0.1.0"

from cogo_lib.cogo import assess_accuracy
from cogo_lib.cogo import bearing_distance
from cogo_lib.cogo import calculate_coordinates
from cogo_lib.cogo import calculate_interior_angles
from cogo_lib.cogo import compute_area
from cogo_lib.cogo import compute_closure
from cogo_lib.cogo import sum_interior_angles
from cogo_lib.cogo import traverse_from_legs
from cogo_lib.cogo import validate_traverse_angles
from cogo_lib.computation import ComputationResult
from cogo_lib.computation import compute_outside_figure
from cogo_lib.computation import generate_computation_report

# Constants
from cogo_lib.constants import CLOSURE_TOLERANCE
from cogo_lib.constants import DEFAULT_SRID
from cogo_lib.constants import WGS84_SRID
from cogo_lib.crs import CRSRegistry
from cogo_lib.crs import init_crs_registry
from cogo_lib.crs import transform_geometry
from cogo_lib.crs import transform_point
from cogo_lib.crs import transform_projection

# Enums
from cogo_lib.enums import AccuracyQuality
from cogo_lib.enums import AngularUnit
from cogo_lib.enums import AreaUnit
from cogo_lib.enums import CoordinateFormat
from cogo_lib.enums import DistanceUnit
from cogo_lib.enums import Severity
from cogo_lib.enums import TopologyErrorType
from cogo_lib.errors import GeometryEngineError
from cogo_lib.errors import ValidationError
from cogo_lib.geometry import Geometry
from cogo_lib.geometry import LineString
from cogo_lib.geometry import MultiPolygon
from cogo_lib.geometry import Point
from cogo_lib.geometry import Polygon
from cogo_lib.geometry import create_point
from cogo_lib.geometry import create_polygon
from cogo_lib.geometry import validate_geometry_basic
from cogo_lib.models import AccuracyAssessment
from cogo_lib.models import AngleValidation
from cogo_lib.models import AreaResult
from cogo_lib.models import BearingDistance
from cogo_lib.models import Point2D
from cogo_lib.models import TraverseClosure
from cogo_lib.models import TraverseLeg
from cogo_lib.parsing import geometry_to_wkt
from cogo_lib.parsing import parse_coordinates_from_csv
from cogo_lib.parsing import parse_decimal_coordinates
from cogo_lib.parsing import parse_dms_coordinates
from cogo_lib.parsing import parse_utm_coordinates
from cogo_lib.parsing import parse_wkt_geometry
from cogo_lib.solver import Observation
from cogo_lib.solver import least_squares_adjustment
from cogo_lib.units import area_unit
from cogo_lib.units import convert_area
from cogo_lib.units import convert_distance
from cogo_lib.units import from_degrees
from cogo_lib.units import normalize_bearing
from cogo_lib.units import to_degrees

__all__ = [
    # Constants
    "CLOSURE_TOLERANCE",
    "DEFAULT_SRID",
    "WGS84_SRID",
    # Models
    "AccuracyAssessment",
    # Enums
    "AccuracyQuality",
    "AngleValidation",
    "AngularUnit",
    "AreaResult",
    "AreaUnit",
    "BearingDistance",
    # CRS
    "CRSRegistry",
    "ComputationResult",
    "CoordinateFormat",
    "DistanceUnit",
    # Geometry
    "Geometry",
    # Errors
    "GeometryEngineError",
    "LineString",
    "MultiPolygon",
    "Observation",
    "Point",
    "Point2D",
    "Polygon",
    "Severity",
    "TopologyErrorType",
    "TraverseClosure",
    "TraverseLeg",
    "ValidationError",
    # COGO
    "assess_accuracy",
    "bearing_distance",
    "calculate_coordinates",
    "calculate_interior_angles",
    "compute_area",
    "compute_closure",
    "compute_outside_figure",
    # Units
    "area_unit",
    "convert_area",
    "convert_distance",
    "create_point",
    "create_polygon",
    "from_degrees",
    "generate_computation_report",
    # Parsing
    "geometry_to_wkt",
    "init_crs_registry",
    # Adjustment
    "least_squares_adjustment",
    "normalize_bearing",
    "parse_coordinates_from_csv",
    "parse_decimal_coordinates",
    "parse_dms_coordinates",
    "parse_utm_coordinates",
    "parse_wkt_geometry",
    "sum_interior_angles",
    "to_degrees",
    "transform_geometry",
    "transform_point",
    "transform_projection",
    "traverse_from_legs",
    "validate_geometry_basic",
    "validate_traverse_angles",
]
