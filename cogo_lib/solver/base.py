# -*- coding: utf-8 -*-
"""Abstract base class for traverse adjustment solvers.

To implement a new solver algorithm:

1. Subclass ``TraverseAdjuster``.
2. Implement the ``solve`` method.
3. Optionally override ``name`` for logging / reports.

The solver receives a :class:`TraverseNetwork` (unique stations and the
observations between them) and returns the adjusted station coordinates
in the network's station order.
"""

from __future__ import annotations

import logging
from abc import ABC
from abc import abstractmethod
from collections.abc import Sequence
from typing import TYPE_CHECKING

from cogo_lib.solver.models import TraverseNetwork

if TYPE_CHECKING:
    from cogo_lib.models import Point2D
    from cogo_lib.solver.models import Observation

logger = logging.getLogger(__name__)


class TraverseAdjuster(ABC):
    """Abstract base class for traverse adjustment algorithms.

    The contract is:

    * Input: a sequence of :class:`Observation` (at least one).
    * Output: one adjusted :class:`Point2D` per unique station, in the
      order stations first appear in the observations.  Station ids are
      preserved.
    """

    @property
    def name(self) -> str:
        """Human-readable name of the solver (for logging / reports)."""
        return self.__class__.__name__

    def adjust(self, observations: Sequence[Observation]) -> list[Point2D]:
        """Adjust the stations referenced by ``observations``.

        Raises:
            ValidationError: If no observations are given
        """
        network = TraverseNetwork.from_observations(observations)
        logger.debug(
            "%s: adjusting %d stations from %d observations",
            self.name,
            len(network.stations),
            len(network.links),
        )
        return self.solve(network)

    @abstractmethod
    def solve(self, network: TraverseNetwork) -> list[Point2D]:
        """Adjust station coordinates.

        Args:
            network: Stations and resolved observations.

        Returns:
            Adjusted points, one per station in ``network.stations`` order.
        """
        ...
