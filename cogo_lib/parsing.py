# -*- coding: utf-8 -*-
"""Parsers for coordinate input formats.

Supported inputs:

- decimal degrees (latitude, longitude)
- DMS strings such as ``17°49'47.5"S 31°03'12.0"E``
- UTM easting / northing pairs
- CSV text holding one coordinate pair per line
- WKT geometries

Every parser validates ranges and fails with
:class:`~cogo_lib.errors.ValidationError` naming the offending field.
Parsed values are rounded (6 decimals for degrees, 4 for meters).
"""

from __future__ import annotations

import csv
import logging
import math
import re
from io import StringIO
from re import Pattern

import shapely.wkt
from shapely.errors import ShapelyError

from cogo_lib.constants import DEFAULT_SRID
from cogo_lib.constants import DEFAULT_UTM_HEMISPHERE
from cogo_lib.constants import DEFAULT_UTM_ZONE
from cogo_lib.constants import LAT_LON_PRECISION
from cogo_lib.constants import MAX_LATITUDE
from cogo_lib.constants import MAX_LONGITUDE
from cogo_lib.constants import MIN_LATITUDE
from cogo_lib.constants import MIN_LONGITUDE
from cogo_lib.constants import UTM_MAX_EASTING
from cogo_lib.constants import UTM_MAX_NORTHING
from cogo_lib.constants import UTM_MIN_EASTING
from cogo_lib.constants import UTM_MIN_NORTHING
from cogo_lib.constants import UTM_PRECISION
from cogo_lib.enums import CoordinateFormat
from cogo_lib.enums import Hemisphere
from cogo_lib.errors import ValidationError
from cogo_lib.geometry import Geometry
from cogo_lib.geometry import from_shapely
from cogo_lib.models import Point2D

logger = logging.getLogger(__name__)

# DD°MM'SS.SS"N/S [,] DD°MM'SS.SS"E/W
DMS_PATTERN: Pattern[str] = re.compile(
    r"""
    (?P<lat_deg>\d+)\s*[°d]\s*
    (?P<lat_min>\d+)\s*['′]\s*
    (?P<lat_sec>\d+(?:\.\d+)?)\s*(?:["″]|'')?\s*
    (?P<lat_dir>[NS])
    \s*,?\s*
    (?P<lon_deg>\d+)\s*[°d]\s*
    (?P<lon_min>\d+)\s*['′]\s*
    (?P<lon_sec>\d+(?:\.\d+)?)\s*(?:["″]|'')?\s*
    (?P<lon_dir>[EW])
    """,
    re.IGNORECASE | re.VERBOSE,
)

# Header cells that mark the first CSV row as column names
_HEADER_TOKENS = ("lat", "lon", "easting", "northing", "x", "y", "id", "point")


def _to_float(value: float | int | str, field: str, raw: object) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError("Invalid coordinate format", field, raw) from None
    if math.isnan(number):
        raise ValidationError("Invalid coordinate format", field, raw)
    return number


# -----------------------------------------------------------------------------
# Single coordinate pairs
# -----------------------------------------------------------------------------


def parse_decimal_coordinates(
    lat: float | str,
    lon: float | str,
    precision: int = LAT_LON_PRECISION,
) -> tuple[float, float]:
    """Parse and validate a decimal-degree pair.

    Args:
        lat: Latitude as a number or numeric string
        lon: Longitude as a number or numeric string
        precision: Decimal places kept

    Returns:
        ``(latitude, longitude)`` rounded to ``precision``

    Raises:
        ValidationError: ``coordinates`` for non-numeric input, ``latitude``
            or ``longitude`` for out-of-range values
    """
    raw = {"lat": lat, "lon": lon}
    lat_num = _to_float(lat, "coordinates", raw)
    lon_num = _to_float(lon, "coordinates", raw)

    if not MIN_LATITUDE <= lat_num <= MAX_LATITUDE:
        raise ValidationError(
            "Latitude must be between -90 and 90 degrees", "latitude", lat_num
        )
    if not MIN_LONGITUDE <= lon_num <= MAX_LONGITUDE:
        raise ValidationError(
            "Longitude must be between -180 and 180 degrees", "longitude", lon_num
        )

    return round(lat_num, precision), round(lon_num, precision)


def parse_dms_coordinates(dms_string: str) -> tuple[float, float]:
    """Parse a degrees/minutes/seconds string into decimal degrees.

    Example:
        >>> parse_dms_coordinates("17°49'47.52\\"S 31°03'12.00\\"E")
        (-17.829867, 31.053333)

    Raises:
        ValidationError: If the string does not match the expected format
            or minutes/seconds are out of range.  The raw input is included.
    """
    match = DMS_PATTERN.search(dms_string or "")
    if match is None:
        raise ValidationError(
            "Invalid DMS format. Expected: DD°MM'SS.SS\"N/S DD°MM'SS.SS\"E/W",
            "coordinates",
            dms_string,
        )

    parts = match.groupdict()
    for key in ("lat_min", "lon_min", "lat_sec", "lon_sec"):
        if float(parts[key]) >= 60:
            raise ValidationError(
                f"Minutes and seconds must be below 60 in DMS input: {dms_string}",
                "coordinates",
                dms_string,
            )

    lat = int(parts["lat_deg"]) + int(parts["lat_min"]) / 60 + float(parts["lat_sec"]) / 3600
    lon = int(parts["lon_deg"]) + int(parts["lon_min"]) / 60 + float(parts["lon_sec"]) / 3600

    if parts["lat_dir"].upper() == "S":
        lat = -lat
    if parts["lon_dir"].upper() == "W":
        lon = -lon

    return parse_decimal_coordinates(lat, lon)


def parse_utm_coordinates(
    easting: float | str,
    northing: float | str,
    zone: int = DEFAULT_UTM_ZONE,
    hemisphere: Hemisphere | str = DEFAULT_UTM_HEMISPHERE,
    precision: int = UTM_PRECISION,
) -> tuple[float, float]:
    """Parse and validate a UTM easting/northing pair.

    Raises:
        ValidationError: ``coordinates`` for non-numeric input, ``easting``
            or ``northing`` outside the valid envelope of the zone,
            ``zone`` / ``hemisphere`` for invalid zone descriptors
    """
    if not 1 <= zone <= 60:
        raise ValidationError("UTM zone must be between 1 and 60", "zone", zone)
    try:
        hemisphere = Hemisphere(str(hemisphere).upper())
    except ValueError:
        raise ValidationError(
            "UTM hemisphere must be 'N' or 'S'", "hemisphere", hemisphere
        ) from None

    raw = {"easting": easting, "northing": northing}
    easting_num = _to_float(easting, "coordinates", raw)
    northing_num = _to_float(northing, "coordinates", raw)

    label = f"Zone {zone}{hemisphere.value}"
    if not UTM_MIN_EASTING <= easting_num <= UTM_MAX_EASTING:
        raise ValidationError(
            f"UTM Easting out of valid range for {label}", "easting", easting_num
        )
    if not UTM_MIN_NORTHING <= northing_num <= UTM_MAX_NORTHING:
        raise ValidationError(
            f"UTM Northing out of valid range for {label}", "northing", northing_num
        )

    return round(easting_num, precision), round(northing_num, precision)


# -----------------------------------------------------------------------------
# CSV
# -----------------------------------------------------------------------------


def _is_numeric(cell: str) -> bool:
    try:
        float(cell)
    except ValueError:
        return False
    return True


def _is_header(cells: list[str]) -> bool:
    # A data row always holds at least one number, unless it is a DMS string
    if any(_is_numeric(cell) for cell in cells):
        return False
    return any(
        cell.lower().startswith(token) for cell in cells for token in _HEADER_TOKENS
    )


def _csv_rows(csv_string: str, delimiter: str) -> list[tuple[int, list[str]]]:
    rows: list[tuple[int, list[str]]] = []
    reader = csv.reader(StringIO(csv_string.strip()), delimiter=delimiter)
    for line_no, cells in enumerate(reader, start=1):
        cells = [cell.strip() for cell in cells]
        if not any(cells) or cells[0].startswith("#"):
            continue
        if not rows and line_no == 1 and _is_header(cells):
            continue
        rows.append((line_no, cells))
    return rows


def parse_coordinates_from_csv(
    csv_string: str,
    coordinate_format: CoordinateFormat | str = CoordinateFormat.DECIMAL,
    delimiter: str = ",",
    zone: int = DEFAULT_UTM_ZONE,
    hemisphere: Hemisphere | str = DEFAULT_UTM_HEMISPHERE,
) -> list[tuple[float, float]]:
    """Parse one coordinate pair per CSV line.

    Blank lines, ``#`` comments and a header on the first line are skipped.

    Args:
        csv_string: CSV text
        coordinate_format: ``decimal`` (lat, lon), ``utm`` (easting,
            northing) or ``dms`` (one DMS string per line)
        delimiter: Field separator
        zone: UTM zone used with ``utm``
        hemisphere: UTM hemisphere used with ``utm``

    Raises:
        ValidationError: ``csv`` if a line holds fewer than two values, or
            the field-level errors of the underlying parser
    """
    fmt = CoordinateFormat(coordinate_format)
    coordinates: list[tuple[float, float]] = []

    for line_no, cells in _csv_rows(csv_string, delimiter):
        if fmt == CoordinateFormat.DMS:
            coordinates.append(parse_dms_coordinates(delimiter.join(cells)))
            continue

        if len(cells) < 2:
            raise ValidationError(
                f"Invalid CSV format at line {line_no}: expected 2 values",
                "csv",
                delimiter.join(cells),
            )

        if fmt == CoordinateFormat.UTM:
            coordinates.append(
                parse_utm_coordinates(cells[0], cells[1], zone, hemisphere)
            )
        else:
            coordinates.append(parse_decimal_coordinates(cells[0], cells[1]))

    return coordinates


def parse_points_from_csv(csv_string: str, delimiter: str = ",") -> list[Point2D]:
    """Parse projected survey points from CSV.

    Accepts ``x,y`` rows or ``id,x,y`` rows (the id column is detected when
    the first cell is not numeric or three columns are present).

    Raises:
        ValidationError: ``csv`` for short rows, ``coordinates`` for
            non-numeric values
    """
    points: list[Point2D] = []
    for line_no, cells in _csv_rows(csv_string, delimiter):
        if len(cells) < 2:
            raise ValidationError(
                f"Invalid CSV format at line {line_no}: expected 2 values",
                "csv",
                delimiter.join(cells),
            )

        point_id: str | None = None
        if len(cells) >= 3:
            point_id, cells = cells[0], cells[1:]

        raw = delimiter.join(cells)
        points.append(
            Point2D(
                x=_to_float(cells[0], "coordinates", raw),
                y=_to_float(cells[1], "coordinates", raw),
                id=point_id or None,
            )
        )

    return points


# -----------------------------------------------------------------------------
# WKT
# -----------------------------------------------------------------------------


def parse_wkt_geometry(wkt_string: str, srid: int = DEFAULT_SRID) -> Geometry:
    """Parse a WKT string into a :data:`~cogo_lib.geometry.Geometry`.

    Raises:
        ValidationError: If the text is not valid WKT, is empty, or holds an
            unsupported geometry type.  The raw input is included.
    """
    try:
        geom = shapely.wkt.loads(wkt_string)
    except (ShapelyError, TypeError, AttributeError) as exc:
        logger.debug("WKT parsing failed for %r: %s", wkt_string, exc)
        raise ValidationError("Failed to parse WKT geometry", "wkt", wkt_string) from exc

    if geom.is_empty:
        raise ValidationError("Invalid WKT format: empty geometry", "wkt", wkt_string)

    try:
        return from_shapely(geom, srid=srid)
    except ValidationError as exc:
        raise ValidationError(
            f"Unsupported WKT geometry type: {geom.geom_type}", "wkt", wkt_string
        ) from exc


def geometry_to_wkt(geometry: Geometry) -> str:
    """Serialize a geometry to WKT (full coordinate precision).

    Raises:
        ValidationError: If the geometry cannot be converted
    """
    try:
        return shapely.wkt.dumps(geometry.to_shapely(), trim=True)
    except (ShapelyError, ValueError, TypeError, IndexError) as exc:
        logger.debug("WKT conversion failed for %s: %s", geometry, exc)
        raise ValidationError(
            "Failed to convert geometry to WKT", "geometry", geometry.type
        ) from exc
