# -*- coding: utf-8 -*-
"""Abstract geometry engine.

A geometry engine answers the exact boolean predicates the topology
validator needs.  Every operation takes WKT input and is a coroutine, so
that remote engines can perform I/O while local engines simply compute.

To implement a new engine:

1. Subclass ``GeometryEngine``.
2. Implement the four predicate coroutines.
3. Raise :class:`~cogo_lib.errors.GeometryEngineError` when a predicate
   cannot be answered.  The validator then falls back to its local
   engine for that single call.
"""

from __future__ import annotations

from abc import ABC
from abc import abstractmethod
from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cogo_lib.topology.models import ContainmentResult
    from cogo_lib.topology.models import GapResult
    from cogo_lib.topology.models import OverlapResult
    from cogo_lib.topology.models import ValidityResult


class GeometryEngine(ABC):
    """Abstract base class for geometry predicate engines."""

    @property
    def name(self) -> str:
        """Human-readable name of the engine (for logging / reports)."""
        return self.__class__.__name__

    @abstractmethod
    async def overlaps(self, wkt1: str, wkt2: str, tolerance: float) -> OverlapResult:
        """Test whether two geometries share more than ``tolerance`` m² of area."""
        ...

    @abstractmethod
    async def contains(
        self, parent_wkt: str, child_wkt: str, allow_touching: bool
    ) -> ContainmentResult:
        """Test whether ``child`` lies within ``parent``.

        ``touching`` reports whether the two only share boundary points.
        """
        ...

    @abstractmethod
    async def find_gaps(
        self, section_wkts: Sequence[str], parent_wkt: str, min_area: float
    ) -> GapResult:
        """Find regions of the parent not covered by the union of sections."""
        ...

    @abstractmethod
    async def is_valid(self, wkt: str, srid: int) -> ValidityResult:
        """Check a geometry for self-intersection and other invalidities."""
        ...

    async def aclose(self) -> None:
        """Release resources held by the engine."""
        return None
