# -*- coding: utf-8 -*-
"""Geometry models and structural validation.

Geometries follow the GeoJSON layout (``type`` + nested ``coordinates``)
and carry an explicit SRID.  They are modelled as a Pydantic
discriminated union so that a plain dictionary can be validated into the
right class::

    from cogo_lib.geometry import GeometryAdapter

    polygon = GeometryAdapter.validate_python(
        {"type": "Polygon", "coordinates": [[[0, 0], [1, 0], [1, 1], [0, 0]]]}
    )

Structural checks here are deliberately local (shape, closure, finite
numbers).  Predicates such as overlap or self-intersection are answered by a
geometry engine, see :mod:`cogo_lib.topology`.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from typing import Annotated
from typing import Any
from typing import Literal
from typing import TYPE_CHECKING
from typing import Union

from pydantic import BaseModel
from pydantic import Field
from pydantic import TypeAdapter
from shapely.geometry import mapping
from shapely.geometry import shape
from shapely.geometry.base import BaseGeometry

from cogo_lib.constants import DEFAULT_SRID
from cogo_lib.constants import LAT_LON_PRECISION
from cogo_lib.constants import UTM_PRECISION
from cogo_lib.constants import WGS84_SRID
from cogo_lib.errors import ValidationError
from cogo_lib.models import Point2D

if TYPE_CHECKING:
    from cogo_lib.crs import CRSRegistry

Position = list[float]


# -----------------------------------------------------------------------------
# Models
# -----------------------------------------------------------------------------


class _BaseGeometry(BaseModel):
    srid: int = DEFAULT_SRID

    def to_geojson(self) -> dict[str, Any]:
        """Return the GeoJSON mapping (``type`` and ``coordinates``)."""
        return {"type": self.type, "coordinates": self.coordinates}  # type: ignore[attr-defined]

    def to_shapely(self) -> BaseGeometry:
        """Build the equivalent shapely geometry."""
        return shape(self.to_geojson())


class Point(_BaseGeometry):
    """A single position."""

    type: Literal["Point"] = "Point"
    coordinates: Position


class LineString(_BaseGeometry):
    """An ordered sequence of positions."""

    type: Literal["LineString"] = "LineString"
    coordinates: list[Position]


class Polygon(_BaseGeometry):
    """A polygon: an exterior ring followed by optional holes.

    Each ring must be closed (first position equals last position) and hold
    at least four positions.
    """

    type: Literal["Polygon"] = "Polygon"
    coordinates: list[list[Position]]


class MultiPolygon(_BaseGeometry):
    """A collection of polygons."""

    type: Literal["MultiPolygon"] = "MultiPolygon"
    coordinates: list[list[list[Position]]]


Geometry = Annotated[
    Union[Point, LineString, Polygon, MultiPolygon],
    Field(discriminator="type"),
]

GeometryAdapter: TypeAdapter[Geometry] = TypeAdapter(Geometry)


class BoundingBox(BaseModel):
    """Axis-aligned rectangle enclosing a geometry."""

    min_x: float
    min_y: float
    max_x: float
    max_y: float
    srid: int | None = None

    def intersects(self, other: BoundingBox) -> bool:
        """True if the two boxes share at least one point."""
        return not (
            self.max_x < other.min_x
            or self.min_x > other.max_x
            or self.max_y < other.min_y
            or self.min_y > other.max_y
        )

    def within(self, other: BoundingBox) -> bool:
        """True if this box lies inside ``other`` (edges may coincide)."""
        return (
            self.min_x >= other.min_x
            and self.max_x <= other.max_x
            and self.min_y >= other.min_y
            and self.max_y <= other.max_y
        )


# -----------------------------------------------------------------------------
# Conversions
# -----------------------------------------------------------------------------


def precision_for_srid(srid: int, registry: CRSRegistry | None = None) -> int:
    """Decimal places kept for coordinates in ``srid``.

    Geographic systems of ``registry`` (the process-wide one by default) keep
    six places, projected systems four.  SRIDs the registry does not know are
    treated as projected, except WGS84.
    """
    from cogo_lib.crs import get_crs_registry  # noqa: PLC0415

    if registry is None:
        registry = get_crs_registry()
    if srid in registry:
        geographic = registry.is_geographic(srid)
    else:
        geographic = srid == WGS84_SRID
    return LAT_LON_PRECISION if geographic else UTM_PRECISION


def from_shapely(geom: BaseGeometry, srid: int = DEFAULT_SRID) -> Geometry:
    """Convert a shapely geometry into a :data:`Geometry` model.

    Raises:
        ValidationError: If the shapely geometry type is not supported
    """
    data = _listify(mapping(geom))
    try:
        return GeometryAdapter.validate_python({**data, "srid": srid})
    except ValueError as exc:
        raise ValidationError(
            f"Unsupported geometry type: {geom.geom_type}", "geometry", geom.geom_type
        ) from exc


def _listify(value: Any) -> Any:
    # shapely's mapping() returns nested tuples
    if isinstance(value, dict):
        return {key: _listify(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_listify(item) for item in value]
    return value


# -----------------------------------------------------------------------------
# Structural validation
# -----------------------------------------------------------------------------


def _is_position(coord: Any) -> bool:
    if not isinstance(coord, (list, tuple)) or len(coord) < 2:
        return False
    return all(
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
        for value in coord[:2]
    )


def _is_closed_ring(ring: Any) -> bool:
    if not isinstance(ring, (list, tuple)) or len(ring) < 4:
        return False
    if not all(_is_position(coord) for coord in ring):
        return False
    first, last = ring[0], ring[-1]
    return first[0] == last[0] and first[1] == last[1]


def _is_polygon_rings(rings: Any) -> bool:
    return (
        isinstance(rings, (list, tuple))
        and len(rings) > 0
        and all(_is_closed_ring(ring) for ring in rings)
    )


def validate_geometry_basic(geometry: Geometry | dict[str, Any] | None) -> bool:
    """Check the structure of a geometry without a geometry engine.

    Checks non-empty coordinate arrays, numeric finite positions, minimum
    vertex counts and ring closure.  Self-intersection is NOT detected here.

    Args:
        geometry: A geometry model or a GeoJSON-like dictionary

    Returns:
        True if the geometry is structurally valid
    """
    if geometry is None:
        return False

    if isinstance(geometry, BaseModel):
        geom_type = getattr(geometry, "type", None)
        coordinates = getattr(geometry, "coordinates", None)
    elif isinstance(geometry, dict):
        geom_type = geometry.get("type")
        coordinates = geometry.get("coordinates")
    else:
        return False

    if not geom_type or not coordinates:
        return False

    match geom_type:
        case "Point":
            return _is_position(coordinates) and len(coordinates) == 2
        case "LineString":
            return (
                isinstance(coordinates, (list, tuple))
                and len(coordinates) >= 2
                and all(_is_position(coord) for coord in coordinates)
            )
        case "Polygon":
            return _is_polygon_rings(coordinates)
        case "MultiPolygon":
            return isinstance(coordinates, (list, tuple)) and all(
                _is_polygon_rings(polygon) for polygon in coordinates
            )
        case _:
            return False


def iter_positions(geometry: Geometry) -> Iterable[Position]:
    """Yield every position of a geometry, holes included."""
    match geometry:
        case Point():
            yield geometry.coordinates
        case LineString():
            yield from geometry.coordinates
        case Polygon():
            for ring in geometry.coordinates:
                yield from ring
        case MultiPolygon():
            for polygon in geometry.coordinates:
                for ring in polygon:
                    yield from ring


def bounding_box(geometry: Geometry) -> BoundingBox:
    """Compute the axis-aligned bounding box of a geometry.

    An empty geometry yields a degenerate box at the origin.
    """
    positions = list(iter_positions(geometry))
    if not positions:
        return BoundingBox(min_x=0, min_y=0, max_x=0, max_y=0, srid=geometry.srid)

    xs = [pos[0] for pos in positions]
    ys = [pos[1] for pos in positions]
    return BoundingBox(
        min_x=min(xs),
        min_y=min(ys),
        max_x=max(xs),
        max_y=max(ys),
        srid=geometry.srid,
    )


def exterior_points(geometry: Geometry) -> list[Point2D]:
    """Return the exterior ring(s) of a polygonal geometry as points."""
    match geometry:
        case Polygon():
            rings = geometry.coordinates[:1]
        case MultiPolygon():
            rings = [polygon[0] for polygon in geometry.coordinates if polygon]
        case LineString():
            rings = [geometry.coordinates]
        case _:
            rings = [[geometry.coordinates]]
    return [Point2D(x=pos[0], y=pos[1]) for ring in rings for pos in ring]


# -----------------------------------------------------------------------------
# Factories
# -----------------------------------------------------------------------------


def create_point(x: float, y: float, srid: int = DEFAULT_SRID) -> Point:
    """Create a Point rounded to the precision of its SRID."""
    precision = precision_for_srid(srid)
    return Point(coordinates=[round(x, precision), round(y, precision)], srid=srid)


def create_polygon(
    coordinates: Iterable[tuple[float, float] | Position | Point2D],
    srid: int = DEFAULT_SRID,
) -> Polygon:
    """Create a single-ring Polygon, closing the ring if needed.

    Args:
        coordinates: Ring vertices as ``(x, y)`` pairs or :class:`Point2D`
        srid: Spatial reference of the coordinates

    Raises:
        ValidationError: If fewer than three distinct vertices are given
    """
    ring: list[Position] = []
    for coord in coordinates:
        if isinstance(coord, Point2D):
            ring.append([coord.x, coord.y])
        else:
            ring.append([float(coord[0]), float(coord[1])])

    if ring and ring[0] != ring[-1]:
        ring.append(list(ring[0]))

    if len(ring) < 4:
        raise ValidationError(
            "Polygon requires at least 4 coordinates (closed ring)",
            "coordinates",
            len(ring),
        )

    precision = precision_for_srid(srid)
    rounded = [[round(x, precision), round(y, precision)] for x, y in ring]
    return Polygon(coordinates=[rounded], srid=srid)
