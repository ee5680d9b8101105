# -*- coding: utf-8 -*-
"""Constants used throughout the cogo_lib library.

This module centralizes all constant values to ensure consistency
and avoid magic numbers/strings scattered across the codebase.
"""

# -----------------------------------------------------------------------------
# Spatial Reference Systems
# -----------------------------------------------------------------------------

#: WGS84 geographic coordinates (longitude, latitude)
WGS84_SRID: int = 4326

#: UTM Zone 35S (WGS84), the default projected system for survey computations
UTM_35S_SRID: int = 32735

#: SRID assumed for every coordinate that does not declare one
DEFAULT_SRID: int = UTM_35S_SRID

#: Projection definitions registered on initialisation (SRID -> proj string)
DEFAULT_CRS_DEFINITIONS: dict[int, str] = {
    WGS84_SRID: "+proj=longlat +datum=WGS84 +no_defs",
    32734: "+proj=utm +zone=34 +south +datum=WGS84 +units=m +no_defs",
    UTM_35S_SRID: "+proj=utm +zone=35 +south +datum=WGS84 +units=m +no_defs",
    32736: "+proj=utm +zone=36 +south +datum=WGS84 +units=m +no_defs",
}

# -----------------------------------------------------------------------------
# Coordinate Precision
# -----------------------------------------------------------------------------

#: Decimal places kept on projected coordinates (~0.1 mm)
UTM_PRECISION: int = 4

#: Decimal places kept on geographic coordinates (~10 cm)
LAT_LON_PRECISION: int = 6

# -----------------------------------------------------------------------------
# Unit Conversions
# -----------------------------------------------------------------------------

#: Conversion factor from feet to meters
FEET_TO_METERS: float = 0.3048

#: Square feet in one square meter
SQ_METERS_TO_SQ_FEET: float = 10.7639

#: Square meters in one hectare
SQ_METERS_PER_HECTARE: float = 10_000.0

#: Square meters in one acre
SQ_METERS_PER_ACRE: float = 4046.86

# -----------------------------------------------------------------------------
# Geographic / UTM Envelopes
# -----------------------------------------------------------------------------

MIN_LATITUDE: float = -90.0
MAX_LATITUDE: float = 90.0
MIN_LONGITUDE: float = -180.0
MAX_LONGITUDE: float = 180.0

#: Valid UTM easting envelope for a single zone (meters)
UTM_MIN_EASTING: float = 166_000.0
UTM_MAX_EASTING: float = 834_000.0

#: Valid UTM northing envelope (meters, false northing included)
UTM_MIN_NORTHING: float = 0.0
UTM_MAX_NORTHING: float = 10_000_000.0

#: Default UTM zone / hemisphere for parsed coordinates
DEFAULT_UTM_ZONE: int = 35
DEFAULT_UTM_HEMISPHERE: str = "S"

#: Expected extent of survey coordinates inside UTM 35S (used for QC checks)
EXPECTED_MIN_EASTING: float = 200_000.0
EXPECTED_MAX_EASTING: float = 800_000.0
EXPECTED_MIN_NORTHING: float = 7_500_000.0
EXPECTED_MAX_NORTHING: float = 8_500_000.0

# -----------------------------------------------------------------------------
# Survey Tolerances
# -----------------------------------------------------------------------------

#: Closure ratio required for a sealed traverse (1:10,000)
CLOSURE_TOLERANCE: float = 0.0001

#: Closure ratio considered "excellent" (1:20,000)
EXCELLENT_CLOSURE_RATIO: float = 0.00005

#: Two points closer than this on both axes are the same station (meters)
POINT_MATCH_TOLERANCE: float = 0.001

#: Allowed difference between actual and theoretical angle sums (degrees)
ANGLE_SUM_TOLERANCE: float = 0.01

#: Two survey points closer than this are reported as duplicates (meters)
DUPLICATE_POINT_TOLERANCE: float = 0.01

#: Cross products below this value mark three points as collinear
COLLINEAR_TOLERANCE: float = 0.001

# -----------------------------------------------------------------------------
# Traverse Adjustment
# -----------------------------------------------------------------------------

#: Fraction of each discrepancy applied per relaxation pass
ADJUSTMENT_DAMPING: float = 0.1

#: Default number of relaxation passes
ADJUSTMENT_ITERATIONS: int = 5

#: Default maximum number of Gauss-Newton iterations for the rigorous solver
LSE_MAX_ITERATIONS: int = 20

#: Convergence threshold on the largest coordinate correction (meters)
LSE_CONVERGENCE: float = 1e-6

# -----------------------------------------------------------------------------
# Topology
# -----------------------------------------------------------------------------

#: Default overlap tolerance (square meters of intersection ignored)
OVERLAP_TOLERANCE: float = 0.01

#: Gaps smaller than this are not reported (square meters)
MIN_GAP_AREA: float = 1.0

#: Remote geometry engine request timeout (seconds)
ENGINE_TIMEOUT: float = 30.0
