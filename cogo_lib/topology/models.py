# -*- coding: utf-8 -*-
"""Topology findings, validation reports and geometry engine results."""

from __future__ import annotations

from pydantic import BaseModel
from pydantic import Field

from cogo_lib.constants import MIN_GAP_AREA
from cogo_lib.constants import OVERLAP_TOLERANCE
from cogo_lib.enums import Severity
from cogo_lib.enums import TopologyErrorType
from cogo_lib.geometry import Geometry
from cogo_lib.models import Point2D

# -----------------------------------------------------------------------------
# Findings and report
# -----------------------------------------------------------------------------


class TopologyError(BaseModel):
    """A single topology finding.

    Attributes:
        type: Kind of finding
        geometry1: First geometry involved (the section, or the gap itself)
        geometry2: Second geometry involved, if any
        coordinates: Points describing the finding (e.g. overlap outline)
        area: Area of the finding in square meters, when known
        description: Human-readable description
        severity: ``error`` blocks sealing, ``warning`` does not
    """

    type: TopologyErrorType
    geometry1: Geometry | None = None
    geometry2: Geometry | None = None
    coordinates: list[Point2D] | None = None
    area: float | None = None
    description: str
    severity: Severity = Severity.ERROR


class ReportSummary(BaseModel):
    """Counts and totals of a validation run.

    ``total_area`` is the summed area of the sections in square meters.
    ``degraded_checks`` names the engine operations that were answered by
    the fallback engine.
    """

    total_errors: int = 0
    total_warnings: int = 0
    total_geometries: int = 0
    total_area: float = 0.0
    degraded_checks: list[str] = Field(default_factory=list)


class TopologyValidationReport(BaseModel):
    """Aggregated result of :meth:`TopologyValidator.validate_topology`."""

    is_valid: bool
    errors: list[TopologyError] = Field(default_factory=list)
    warnings: list[TopologyError] = Field(default_factory=list)
    summary: ReportSummary = Field(default_factory=ReportSummary)

    @property
    def is_degraded(self) -> bool:
        """True if any check fell back to the local heuristics."""
        return bool(self.summary.degraded_checks)


class TopologyValidationOptions(BaseModel):
    """Which checks to run and with which thresholds."""

    check_overlaps: bool = True
    check_containment: bool = True
    check_gaps: bool = True
    check_geometry: bool = True
    tolerance: float = Field(default=OVERLAP_TOLERANCE, ge=0)
    min_gap_area: float = Field(default=MIN_GAP_AREA, ge=0)
    allow_touching: bool = True


# -----------------------------------------------------------------------------
# Geometry engine results
# -----------------------------------------------------------------------------


class OverlapResult(BaseModel):
    overlaps: bool
    overlap_area: float = 0.0
    overlap_coordinates: list[Point2D] = Field(default_factory=list)


class ContainmentResult(BaseModel):
    contains: bool
    touching: bool = False


class GapRecord(BaseModel):
    """A region of the parent not covered by any section.

    Attributes:
        geometry: WKT of the uncovered region
        area: Area in square meters
        coordinates: Exterior outline of the region
    """

    geometry: str | None = None
    area: float = 0.0
    coordinates: list[Point2D] = Field(default_factory=list)


class GapResult(BaseModel):
    gaps: list[GapRecord] = Field(default_factory=list)


class ValidityResult(BaseModel):
    is_valid: bool
    reason: str | None = None
