# -*- coding: utf-8 -*-
"""Coordinate reference system registry and reprojection.

The registry is an immutable SRID -> projection definition table.  The
host application calls :func:`init_crs_registry` once before first use
(further calls are no-ops); conversion functions take an optional
``registry`` argument and otherwise use that process-wide default::

    from cogo_lib.crs import init_crs_registry, transform_projection

    init_crs_registry()
    easting, northing = transform_projection(31.05, -17.83, 4326, 32735)

Projected outputs are rounded to 4 decimal places and geographic outputs
to 6, so that downstream equality comparisons are stable.
"""

from __future__ import annotations

import logging
import math
import threading
from collections.abc import Mapping
from types import MappingProxyType

from pyproj import CRS
from pyproj import Transformer
from pyproj.exceptions import CRSError
from pyproj.exceptions import ProjError

from cogo_lib.constants import DEFAULT_CRS_DEFINITIONS
from cogo_lib.constants import DEFAULT_SRID
from cogo_lib.constants import WGS84_SRID
from cogo_lib.errors import ValidationError
from cogo_lib.geometry import Geometry
from cogo_lib.geometry import GeometryAdapter
from cogo_lib.geometry import LineString
from cogo_lib.geometry import MultiPolygon
from cogo_lib.geometry import Point
from cogo_lib.geometry import Polygon
from cogo_lib.geometry import Position
from cogo_lib.geometry import precision_for_srid

logger = logging.getLogger(__name__)


class CRSRegistry:
    """Lookup table of known coordinate reference systems.

    The table itself never changes after construction.  pyproj
    transformers are built lazily and cached per SRID pair.
    """

    def __init__(self, definitions: Mapping[int, str]):
        self._definitions: Mapping[int, str] = MappingProxyType(dict(definitions))
        self._transformers: dict[tuple[int, int], Transformer] = {}
        self._lock = threading.Lock()

    def __contains__(self, srid: object) -> bool:
        return srid in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)

    @property
    def srids(self) -> tuple[int, ...]:
        """All registered SRIDs in ascending order."""
        return tuple(sorted(self._definitions))

    def definition(self, srid: int) -> str:
        """Return the projection definition string for ``srid``.

        Raises:
            ValidationError: If the SRID is not registered
        """
        try:
            return self._definitions[srid]
        except KeyError:
            raise ValidationError(f"Unknown SRID: {srid}", "srid", srid) from None

    def crs(self, srid: int) -> CRS:
        """Build the pyproj CRS of a registered SRID."""
        return CRS.from_proj4(self.definition(srid))

    def is_geographic(self, srid: int) -> bool:
        """True if ``srid`` is an angular (longitude, latitude) system."""
        return "+proj=longlat" in self.definition(srid)

    def transformer(self, from_srid: int, to_srid: int) -> Transformer:
        """Get or create a cached transformer between two registered SRIDs."""
        key = (from_srid, to_srid)
        with self._lock:
            if key not in self._transformers:
                self._transformers[key] = Transformer.from_crs(
                    self.crs(from_srid),
                    self.crs(to_srid),
                    always_xy=True,
                )
            return self._transformers[key]

    def with_definitions(self, extra: Mapping[int, str]) -> CRSRegistry:
        """Return a new registry holding these definitions plus ``extra``."""
        return CRSRegistry({**self._definitions, **extra})


# -----------------------------------------------------------------------------
# Process-wide default registry
# -----------------------------------------------------------------------------

_default_registry: CRSRegistry | None = None
_init_lock = threading.Lock()


def init_crs_registry(extra: Mapping[int, str] | None = None) -> CRSRegistry:
    """Initialise the process-wide registry (idempotent).

    The first call builds the registry from
    :data:`~cogo_lib.constants.DEFAULT_CRS_DEFINITIONS` plus ``extra``.
    Later calls return the existing registry unchanged.
    """
    global _default_registry  # noqa: PLW0603

    with _init_lock:
        if _default_registry is None:
            definitions = dict(DEFAULT_CRS_DEFINITIONS)
            if extra:
                definitions.update(extra)
            _default_registry = CRSRegistry(definitions)
            logger.debug(
                "Initialised CRS registry with SRIDs: %s",
                ", ".join(str(srid) for srid in _default_registry.srids),
            )
        elif extra:
            logger.warning(
                "CRS registry already initialised; ignoring %d extra definitions",
                len(extra),
            )
        return _default_registry


def get_crs_registry() -> CRSRegistry:
    """Return the process-wide registry, initialising it on first use."""
    if _default_registry is None:
        return init_crs_registry()
    return _default_registry


# -----------------------------------------------------------------------------
# Transformations
# -----------------------------------------------------------------------------


def transform_projection(
    x: float,
    y: float,
    from_srid: int = WGS84_SRID,
    to_srid: int = DEFAULT_SRID,
    registry: CRSRegistry | None = None,
) -> tuple[float, float]:
    """Reproject a single ``(x, y)`` pair.

    Geographic coordinates are given as ``(longitude, latitude)``.

    Returns:
        The transformed pair, rounded to 4 decimals for projected targets
        and 6 decimals for geographic targets.

    Raises:
        ValidationError: If either SRID is unknown or the transform fails
    """
    registry = registry or get_crs_registry()

    if from_srid not in registry:
        raise ValidationError(f"Unknown source SRID: {from_srid}", "from_srid", from_srid)
    if to_srid not in registry:
        raise ValidationError(f"Unknown target SRID: {to_srid}", "to_srid", to_srid)

    try:
        out_x, out_y = registry.transformer(from_srid, to_srid).transform(x, y)
    except (CRSError, ProjError) as exc:
        logger.exception(
            "Coordinate transformation failed: (%s, %s) EPSG:%s -> EPSG:%s",
            x,
            y,
            from_srid,
            to_srid,
        )
        raise ValidationError(
            f"Failed to transform coordinates from SRID {from_srid} to SRID {to_srid}",
            "transformation",
            {"x": x, "y": y, "from_srid": from_srid, "to_srid": to_srid},
        ) from exc

    if not (math.isfinite(out_x) and math.isfinite(out_y)):
        raise ValidationError(
            f"Coordinates ({x}, {y}) cannot be projected from SRID {from_srid} "
            f"to SRID {to_srid}",
            "transformation",
            {"x": x, "y": y, "from_srid": from_srid, "to_srid": to_srid},
        )

    precision = precision_for_srid(to_srid, registry)
    return round(out_x, precision), round(out_y, precision)


def _transform_positions(
    positions: list[Position],
    from_srid: int,
    to_srid: int,
    registry: CRSRegistry,
) -> list[Position]:
    return [
        list(transform_projection(pos[0], pos[1], from_srid, to_srid, registry))
        for pos in positions
    ]


def transform_point(
    point: Point,
    to_srid: int = DEFAULT_SRID,
    registry: CRSRegistry | None = None,
) -> Point:
    """Reproject a Point geometry; returns it unchanged if already in ``to_srid``."""
    if point.srid == to_srid:
        return point
    x, y = transform_projection(
        point.coordinates[0], point.coordinates[1], point.srid, to_srid, registry
    )
    return Point(coordinates=[x, y], srid=to_srid)


def transform_geometry(
    geometry: Geometry,
    to_srid: int = DEFAULT_SRID,
    registry: CRSRegistry | None = None,
) -> Geometry:
    """Reproject every position of a geometry to ``to_srid``."""
    if geometry.srid == to_srid:
        return geometry

    registry = registry or get_crs_registry()
    source = geometry.srid

    match geometry:
        case Point():
            return transform_point(geometry, to_srid, registry)
        case LineString():
            coordinates = _transform_positions(
                geometry.coordinates, source, to_srid, registry
            )
        case Polygon():
            coordinates = [
                _transform_positions(ring, source, to_srid, registry)
                for ring in geometry.coordinates
            ]
        case MultiPolygon():
            coordinates = [
                [_transform_positions(ring, source, to_srid, registry) for ring in polygon]
                for polygon in geometry.coordinates
            ]

    return GeometryAdapter.validate_python(
        {"type": geometry.type, "coordinates": coordinates, "srid": to_srid}
    )
