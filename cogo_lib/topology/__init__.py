# -*- coding: utf-8 -*-
"""Topology validation of parent parcels and their sections.

Available engines:

- :class:`RemoteEngine` -- spatial database reached over HTTP RPC
- :class:`ShapelyEngine` -- exact in-process predicates (the default)
- :class:`BoundingBoxFallbackEngine` -- degraded local heuristics used
  when the primary engine fails

To plug in another engine, subclass :class:`GeometryEngine`.
"""

from cogo_lib.topology.engine import GeometryEngine
from cogo_lib.topology.local import BoundingBoxFallbackEngine
from cogo_lib.topology.local import ShapelyEngine
from cogo_lib.topology.models import ContainmentResult
from cogo_lib.topology.models import GapRecord
from cogo_lib.topology.models import GapResult
from cogo_lib.topology.models import OverlapResult
from cogo_lib.topology.models import ReportSummary
from cogo_lib.topology.models import TopologyError
from cogo_lib.topology.models import TopologyValidationOptions
from cogo_lib.topology.models import TopologyValidationReport
from cogo_lib.topology.models import ValidityResult
from cogo_lib.topology.remote import EngineSettings
from cogo_lib.topology.remote import RemoteEngine
from cogo_lib.topology.validator import TopologyValidator
from cogo_lib.topology.validator import check_gaps
from cogo_lib.topology.validator import detect_overlaps
from cogo_lib.topology.validator import validate_containment
from cogo_lib.topology.validator import validate_geometry_topology
from cogo_lib.topology.validator import validate_topology

__all__ = [
    "BoundingBoxFallbackEngine",
    "ContainmentResult",
    "EngineSettings",
    "GapRecord",
    "GapResult",
    "GeometryEngine",
    "OverlapResult",
    "RemoteEngine",
    "ReportSummary",
    "ShapelyEngine",
    "TopologyError",
    "TopologyValidationOptions",
    "TopologyValidationReport",
    "TopologyValidator",
    "ValidityResult",
    "check_gaps",
    "detect_overlaps",
    "validate_containment",
    "validate_geometry_topology",
    "validate_topology",
]
