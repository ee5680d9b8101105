# -*- coding: utf-8 -*-
"""In-process geometry engines.

- :class:`ShapelyEngine` answers every predicate exactly with shapely.
- :class:`BoundingBoxFallbackEngine` is the degraded engine used when the
  primary engine fails.  Overlap and containment are answered from
  bounding boxes (conservative: may report overlaps that a polygon test
  would not), validity from the structural check only.  Gaps are still
  computed exactly by polygon difference.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import shapely.wkt
from shapely.errors import ShapelyError
from shapely.geometry.base import BaseGeometry
from shapely.ops import unary_union
from shapely.validation import explain_validity

from cogo_lib.errors import GeometryEngineError
from cogo_lib.errors import ValidationError
from cogo_lib.geometry import MultiPolygon
from cogo_lib.geometry import Polygon
from cogo_lib.geometry import bounding_box
from cogo_lib.geometry import validate_geometry_basic
from cogo_lib.models import Point2D
from cogo_lib.parsing import parse_wkt_geometry
from cogo_lib.topology.engine import GeometryEngine
from cogo_lib.topology.models import ContainmentResult
from cogo_lib.topology.models import GapRecord
from cogo_lib.topology.models import GapResult
from cogo_lib.topology.models import OverlapResult
from cogo_lib.topology.models import ValidityResult

logger = logging.getLogger(__name__)


def _load(operation: str, wkt: str) -> BaseGeometry:
    try:
        return shapely.wkt.loads(wkt)
    except (ShapelyError, TypeError, AttributeError) as exc:
        raise GeometryEngineError(operation, f"Cannot parse WKT: {exc}") from exc


def _outline(geom: BaseGeometry) -> list[Point2D]:
    """Exterior coordinates of every polygon part of ``geom``."""
    parts = getattr(geom, "geoms", [geom])
    points: list[Point2D] = []
    for part in parts:
        exterior = getattr(part, "exterior", None)
        if exterior is None:
            continue
        points.extend(Point2D(x=x, y=y) for x, y, *_ in exterior.coords)
    return points


def _difference_gaps(
    operation: str,
    section_wkts: Sequence[str],
    parent_wkt: str,
    min_area: float,
) -> GapResult:
    parent = _load(operation, parent_wkt)
    sections = [_load(operation, wkt) for wkt in section_wkts]

    try:
        uncovered = parent.difference(unary_union(sections))
    except ShapelyError as exc:
        raise GeometryEngineError(operation, str(exc)) from exc

    gaps = [
        GapRecord(
            geometry=shapely.wkt.dumps(part, trim=True),
            area=part.area,
            coordinates=_outline(part),
        )
        for part in getattr(uncovered, "geoms", [uncovered])
        if part.area > 0 and part.area >= min_area
    ]
    logger.debug(
        "%d uncovered region(s) of at least %.2f m² in parent", len(gaps), min_area
    )
    return GapResult(gaps=gaps)


# -----------------------------------------------------------------------------
# Exact engine
# -----------------------------------------------------------------------------


class ShapelyEngine(GeometryEngine):
    """Exact predicates computed in-process with shapely."""

    async def overlaps(self, wkt1: str, wkt2: str, tolerance: float) -> OverlapResult:
        geom1 = _load("overlaps", wkt1)
        geom2 = _load("overlaps", wkt2)
        try:
            intersection = geom1.intersection(geom2)
        except ShapelyError as exc:
            raise GeometryEngineError("overlaps", str(exc)) from exc

        if intersection.is_empty or intersection.area <= tolerance:
            return OverlapResult(overlaps=False)

        return OverlapResult(
            overlaps=True,
            overlap_area=intersection.area,
            overlap_coordinates=_outline(intersection),
        )

    async def contains(
        self, parent_wkt: str, child_wkt: str, allow_touching: bool
    ) -> ContainmentResult:
        parent = _load("contains", parent_wkt)
        child = _load("contains", child_wkt)
        try:
            return ContainmentResult(
                contains=parent.contains(child),
                touching=parent.touches(child),
            )
        except ShapelyError as exc:
            raise GeometryEngineError("contains", str(exc)) from exc

    async def find_gaps(
        self, section_wkts: Sequence[str], parent_wkt: str, min_area: float
    ) -> GapResult:
        return _difference_gaps("find_gaps", section_wkts, parent_wkt, min_area)

    async def is_valid(self, wkt: str, srid: int) -> ValidityResult:
        geom = _load("is_valid", wkt)
        if geom.is_valid:
            return ValidityResult(is_valid=True)
        return ValidityResult(is_valid=False, reason=explain_validity(geom))


# -----------------------------------------------------------------------------
# Degraded fallback engine
# -----------------------------------------------------------------------------


class BoundingBoxFallbackEngine(GeometryEngine):
    """Local heuristics used when the primary engine is unavailable."""

    async def overlaps(self, wkt1: str, wkt2: str, tolerance: float) -> OverlapResult:
        geom1 = parse_wkt_geometry(wkt1)
        geom2 = parse_wkt_geometry(wkt2)

        polygonal = (Polygon, MultiPolygon)
        if not isinstance(geom1, polygonal) or not isinstance(geom2, polygonal):
            return OverlapResult(overlaps=False)

        # Area is unknown without polygon clipping
        return OverlapResult(
            overlaps=bounding_box(geom1).intersects(bounding_box(geom2))
        )

    async def contains(
        self, parent_wkt: str, child_wkt: str, allow_touching: bool
    ) -> ContainmentResult:
        parent = parse_wkt_geometry(parent_wkt)
        child = parse_wkt_geometry(child_wkt)
        return ContainmentResult(
            contains=bounding_box(child).within(bounding_box(parent)),
            touching=False,
        )

    async def find_gaps(
        self, section_wkts: Sequence[str], parent_wkt: str, min_area: float
    ) -> GapResult:
        return _difference_gaps("find_gaps", section_wkts, parent_wkt, min_area)

    async def is_valid(self, wkt: str, srid: int) -> ValidityResult:
        try:
            geometry = parse_wkt_geometry(wkt, srid=srid)
        except ValidationError as exc:
            return ValidityResult(is_valid=False, reason=exc.message)

        if validate_geometry_basic(geometry):
            return ValidityResult(is_valid=True)
        return ValidityResult(is_valid=False, reason="Geometry structure is invalid")

