# -*- coding: utf-8 -*-
"""Topology validation of a sectional scheme.

The validator checks a parent parcel and its proposed sections for:

- overlaps between sections (pairwise, ``n(n-1)/2`` engine calls)
- sections extending outside the parent parcel
- regions of the parent not covered by any section
- invalid (e.g. self-intersecting) geometries

Exact predicates are delegated to a :class:`GeometryEngine`.  When the
engine raises :class:`~cogo_lib.errors.GeometryEngineError`, that single
call is answered by the fallback engine instead; the degradation is
logged and recorded in the report summary.  Engine calls are made one at
a time, without retries.

Usage::

    from cogo_lib.topology import RemoteEngine, TopologyValidator

    async with RemoteEngine() as engine:
        report = await TopologyValidator(engine).validate_topology(
            sections, parent
        )
    if not report.is_valid:
        ...
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from cogo_lib.constants import MIN_GAP_AREA
from cogo_lib.constants import OVERLAP_TOLERANCE
from cogo_lib.crs import CRSRegistry
from cogo_lib.crs import transform_geometry
from cogo_lib.enums import Severity
from cogo_lib.enums import TopologyErrorType
from cogo_lib.errors import GeometryEngineError
from cogo_lib.errors import ValidationError
from cogo_lib.geometry import Geometry
from cogo_lib.geometry import MultiPolygon
from cogo_lib.geometry import Polygon
from cogo_lib.geometry import validate_geometry_basic
from cogo_lib.parsing import geometry_to_wkt
from cogo_lib.parsing import parse_wkt_geometry
from cogo_lib.topology.engine import GeometryEngine
from cogo_lib.topology.local import BoundingBoxFallbackEngine
from cogo_lib.topology.local import ShapelyEngine
from cogo_lib.topology.models import ReportSummary
from cogo_lib.topology.models import TopologyError
from cogo_lib.topology.models import TopologyValidationOptions
from cogo_lib.topology.models import TopologyValidationReport

logger = logging.getLogger(__name__)


class TopologyValidator:
    """Run topology checks against a primary engine with a local fallback.

    Args:
        engine: Engine answering the exact predicates (in-process shapely
            by default)
        fallback: Engine used for any call the primary engine fails
        registry: CRS registry used to bring geometries to a common SRID

    ``degraded_checks`` lists the operations answered by the fallback since
    the last :meth:`validate_topology` call, so a validator instance should
    not be shared between concurrent validation runs.
    """

    def __init__(
        self,
        engine: GeometryEngine | None = None,
        fallback: GeometryEngine | None = None,
        registry: CRSRegistry | None = None,
    ):
        self.engine = engine or ShapelyEngine()
        self.fallback = fallback or BoundingBoxFallbackEngine()
        self.registry = registry
        self.degraded_checks: list[str] = []

    async def _call(self, operation: str, *args: Any) -> Any:
        try:
            return await getattr(self.engine, operation)(*args)
        except GeometryEngineError as exc:
            logger.warning(
                "%s could not answer %s, using %s: %s",
                self.engine.name,
                operation,
                self.fallback.name,
                exc.message,
            )
            if operation not in self.degraded_checks:
                self.degraded_checks.append(operation)
            return await getattr(self.fallback, operation)(*args)

    def _reproject(self, geometry: Geometry, srid: int) -> Geometry:
        if geometry.srid == srid:
            return geometry
        return transform_geometry(geometry, srid, self.registry)

    # -------------------------------------------------------------------------
    # Individual checks
    # -------------------------------------------------------------------------

    async def detect_overlaps(
        self,
        geometries: Sequence[Geometry],
        tolerance: float = OVERLAP_TOLERANCE,
    ) -> list[TopologyError]:
        """Compare every pair of geometries for shared area.

        Geometries are compared in the SRID of the first one.  A pair in
        which either geometry is structurally invalid is reported as
        ``invalid_geometry`` instead.
        """
        errors: list[TopologyError] = []
        if len(geometries) < 2:
            return errors

        srid = geometries[0].srid
        valid = [validate_geometry_basic(geom) for geom in geometries]
        wkts = [
            geometry_to_wkt(self._reproject(geom, srid)) if ok else None
            for geom, ok in zip(geometries, valid)
        ]

        for i in range(len(geometries)):
            for j in range(i + 1, len(geometries)):
                geom1, geom2 = geometries[i], geometries[j]

                if not (valid[i] and valid[j]):
                    errors.append(
                        TopologyError(
                            type=TopologyErrorType.INVALID_GEOMETRY,
                            geometry1=geom1,
                            geometry2=geom2,
                            description=f"Invalid geometry detected in pair {i + 1}-{j + 1}",
                            severity=Severity.ERROR,
                        )
                    )
                    continue

                result = await self._call("overlaps", wkts[i], wkts[j], tolerance)
                if not result.overlaps:
                    continue

                if result.overlap_area > 0:
                    description = (
                        f"Geometries {i + 1} and {j + 1} overlap by "
                        f"{result.overlap_area:.2f} m²"
                    )
                else:
                    description = f"Geometries {i + 1} and {j + 1} overlap"

                errors.append(
                    TopologyError(
                        type=TopologyErrorType.OVERLAP,
                        geometry1=geom1,
                        geometry2=geom2,
                        coordinates=result.overlap_coordinates or None,
                        area=result.overlap_area or None,
                        description=description,
                        severity=Severity.ERROR,
                    )
                )

        return errors

    async def validate_containment(
        self,
        sections: Sequence[Geometry],
        parent: Geometry,
        allow_touching: bool = True,
    ) -> list[TopologyError]:
        """Check that every section lies within the parent parcel.

        A section that only touches the parent boundary is a
        ``touching_boundary`` warning when ``allow_touching`` is set and a
        ``containment`` error otherwise.
        """
        if not validate_geometry_basic(parent):
            return [
                TopologyError(
                    type=TopologyErrorType.INVALID_GEOMETRY,
                    geometry1=parent,
                    description="Parent parcel geometry is invalid",
                    severity=Severity.ERROR,
                )
            ]

        errors: list[TopologyError] = []
        parent_wkt = geometry_to_wkt(parent)

        for i, section in enumerate(sections, start=1):
            if not validate_geometry_basic(section):
                errors.append(
                    TopologyError(
                        type=TopologyErrorType.INVALID_GEOMETRY,
                        geometry1=section,
                        description=f"Section {i} geometry is invalid",
                        severity=Severity.ERROR,
                    )
                )
                continue

            section_wkt = geometry_to_wkt(self._reproject(section, parent.srid))
            result = await self._call("contains", parent_wkt, section_wkt, allow_touching)
            if result.contains:
                continue

            if result.touching and allow_touching:
                errors.append(
                    TopologyError(
                        type=TopologyErrorType.TOUCHING_BOUNDARY,
                        geometry1=section,
                        geometry2=parent,
                        description=f"Section {i} touches parent parcel boundary",
                        severity=Severity.WARNING,
                    )
                )
            else:
                errors.append(
                    TopologyError(
                        type=TopologyErrorType.CONTAINMENT,
                        geometry1=section,
                        geometry2=parent,
                        description=f"Section {i} is not fully contained within parent parcel",
                        severity=Severity.ERROR,
                    )
                )

        return errors

    async def check_gaps(
        self,
        sections: Sequence[Geometry],
        parent: Geometry,
        min_gap_area: float = MIN_GAP_AREA,
    ) -> list[TopologyError]:
        """Report regions of the parent not covered by any section.

        Gaps smaller than ``min_gap_area`` square meters are ignored.
        Structurally invalid geometries are left to the other checks.
        """
        if not sections or not validate_geometry_basic(parent):
            return []

        section_wkts = [
            geometry_to_wkt(self._reproject(section, parent.srid))
            for section in sections
            if validate_geometry_basic(section)
        ]
        if not section_wkts:
            return []

        result = await self._call(
            "find_gaps", section_wkts, geometry_to_wkt(parent), min_gap_area
        )

        warnings: list[TopologyError] = []
        for n, gap in enumerate(result.gaps, start=1):
            gap_geometry: Geometry | None = None
            if gap.geometry:
                try:
                    gap_geometry = parse_wkt_geometry(gap.geometry, srid=parent.srid)
                except ValidationError as exc:
                    logger.warning("Gap %d geometry ignored: %s", n, exc)

            warnings.append(
                TopologyError(
                    type=TopologyErrorType.GAP,
                    geometry1=gap_geometry,
                    coordinates=gap.coordinates or None,
                    area=gap.area,
                    description=f"Gap {n} detected with area {gap.area:.2f} m²",
                    severity=Severity.WARNING,
                )
            )

        return warnings

    async def validate_geometry_topology(self, geometry: Geometry) -> list[TopologyError]:
        """Check one geometry for structural validity and self-intersection."""
        if not validate_geometry_basic(geometry):
            return [
                TopologyError(
                    type=TopologyErrorType.INVALID_GEOMETRY,
                    geometry1=geometry,
                    description="Geometry structure is invalid",
                    severity=Severity.ERROR,
                )
            ]

        result = await self._call("is_valid", geometry_to_wkt(geometry), geometry.srid)
        if result.is_valid:
            return []

        return [
            TopologyError(
                type=TopologyErrorType.SELF_INTERSECTION,
                geometry1=geometry,
                description=(
                    f"Geometry is invalid: {result.reason or 'Self-intersection detected'}"
                ),
                severity=Severity.ERROR,
            )
        ]

    # -------------------------------------------------------------------------
    # Full report
    # -------------------------------------------------------------------------

    async def validate_topology(
        self,
        sections: Sequence[Geometry],
        parent: Geometry,
        options: TopologyValidationOptions | None = None,
    ) -> TopologyValidationReport:
        """Run the selected checks and aggregate them into a report.

        All geometries are brought to the parent's SRID first.  The report
        is valid iff no ``error``-severity finding was produced.

        Raises:
            ValidationError: For invalid input, or wrapping any unexpected
                failure (``field="topology_validation"``)
        """
        options = options or TopologyValidationOptions()
        self.degraded_checks = []

        try:
            return await self._validate(list(sections), parent, options)
        except ValidationError:
            raise
        except Exception as exc:
            logger.exception("Topology validation failed")
            raise ValidationError(
                f"Topology validation failed: {exc}",
                "topology_validation",
                context={
                    "sections": len(sections),
                    "parent_srid": parent.srid,
                    "options": options.model_dump(),
                },
            ) from exc

    async def _validate(
        self,
        sections: list[Geometry],
        parent: Geometry,
        options: TopologyValidationOptions,
    ) -> TopologyValidationReport:
        srid = parent.srid
        sections = [
            self._reproject(section, srid) if validate_geometry_basic(section) else section
            for section in sections
        ]

        findings: list[TopologyError] = []

        if options.check_geometry:
            for section in sections:
                findings.extend(await self.validate_geometry_topology(section))
            findings.extend(await self.validate_geometry_topology(parent))

        if options.check_overlaps and len(sections) > 1:
            findings.extend(await self.detect_overlaps(sections, options.tolerance))

        if options.check_containment:
            findings.extend(
                await self.validate_containment(sections, parent, options.allow_touching)
            )

        if options.check_gaps:
            findings.extend(
                await self.check_gaps(sections, parent, options.min_gap_area)
            )

        errors = [f for f in findings if f.severity == Severity.ERROR]
        warnings = [f for f in findings if f.severity == Severity.WARNING]

        total_area = sum(
            section.to_shapely().area
            for section in sections
            if isinstance(section, (Polygon, MultiPolygon))
            and validate_geometry_basic(section)
        )

        if self.degraded_checks:
            logger.warning(
                "Topology report degraded, fallback used for: %s",
                ", ".join(self.degraded_checks),
            )

        return TopologyValidationReport(
            is_valid=not errors,
            errors=errors,
            warnings=warnings,
            summary=ReportSummary(
                total_errors=len(errors),
                total_warnings=len(warnings),
                total_geometries=len(sections) + 1,
                total_area=total_area,
                degraded_checks=list(self.degraded_checks),
            ),
        )


# -----------------------------------------------------------------------------
# Module-level helpers
# -----------------------------------------------------------------------------


async def detect_overlaps(
    geometries: Sequence[Geometry],
    engine: GeometryEngine | None = None,
    tolerance: float = OVERLAP_TOLERANCE,
) -> list[TopologyError]:
    """Pairwise overlap check, see :meth:`TopologyValidator.detect_overlaps`."""
    return await TopologyValidator(engine).detect_overlaps(geometries, tolerance)


async def validate_containment(
    sections: Sequence[Geometry],
    parent: Geometry,
    engine: GeometryEngine | None = None,
    allow_touching: bool = True,
) -> list[TopologyError]:
    """Containment check, see :meth:`TopologyValidator.validate_containment`."""
    return await TopologyValidator(engine).validate_containment(
        sections, parent, allow_touching
    )


async def check_gaps(
    sections: Sequence[Geometry],
    parent: Geometry,
    engine: GeometryEngine | None = None,
    min_gap_area: float = MIN_GAP_AREA,
) -> list[TopologyError]:
    """Gap check, see :meth:`TopologyValidator.check_gaps`."""
    return await TopologyValidator(engine).check_gaps(sections, parent, min_gap_area)


async def validate_geometry_topology(
    geometry: Geometry,
    engine: GeometryEngine | None = None,
) -> list[TopologyError]:
    """Single geometry check, see :meth:`TopologyValidator.validate_geometry_topology`."""
    return await TopologyValidator(engine).validate_geometry_topology(geometry)


async def validate_topology(
    sections: Sequence[Geometry],
    parent: Geometry,
    engine: GeometryEngine | None = None,
    options: TopologyValidationOptions | None = None,
) -> TopologyValidationReport:
    """Full report, see :meth:`TopologyValidator.validate_topology`."""
    return await TopologyValidator(engine).validate_topology(sections, parent, options)
