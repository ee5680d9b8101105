# -*- coding: utf-8 -*-
"""Input helpers shared by the CLI commands."""

from __future__ import annotations

from pathlib import Path

from cogo_lib.constants import DEFAULT_SRID
from cogo_lib.constants import WGS84_SRID
from cogo_lib.crs import transform_projection
from cogo_lib.enums import CoordinateFormat
from cogo_lib.models import Point2D
from cogo_lib.parsing import parse_coordinates_from_csv
from cogo_lib.parsing import parse_points_from_csv
from cogo_lib.parsing import parse_utm_coordinates


def load_points(
    path: Path,
    coordinate_format: CoordinateFormat | str = CoordinateFormat.UTM,
    delimiter: str = ",",
    srid: int = DEFAULT_SRID,
) -> list[Point2D]:
    """Read survey points from a CSV file.

    UTM files hold ``x,y`` or ``id,x,y`` rows, each checked against the UTM
    easting/northing envelope.  Decimal and DMS files hold
    latitude/longitude and are projected to ``srid``.

    Raises:
        FileNotFoundError: If ``path`` does not exist
        ValidationError: If the content cannot be parsed
    """
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")

    content = path.read_text(encoding="utf-8")
    fmt = CoordinateFormat(coordinate_format)

    if fmt == CoordinateFormat.UTM:
        points = parse_points_from_csv(content, delimiter=delimiter)
        for point in points:
            parse_utm_coordinates(point.x, point.y)
        return points

    points = []
    for lat, lon in parse_coordinates_from_csv(content, fmt, delimiter=delimiter):
        x, y = transform_projection(lon, lat, WGS84_SRID, srid)
        points.append(Point2D(x=x, y=y))
    return points
