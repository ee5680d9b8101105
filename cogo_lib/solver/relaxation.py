# -*- coding: utf-8 -*-
"""Damped iterative relaxation of traverse observations.

A light-weight heuristic, not a rigorous least-squares solve: on each
pass every observation projects its ``from`` station along the measured
bearing and distance, and the (weighted) discrepancy to the ``to``
station is split between both ends with a damping factor of 0.1.  The
accumulated corrections of a station are divided by the total weight of
the observations touching it.

Use :class:`~cogo_lib.solver.lse.WeightedLeastSquaresSolver` when a
statistically rigorous adjustment is needed.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from cogo_lib.cogo import calculate_coordinates
from cogo_lib.constants import ADJUSTMENT_DAMPING
from cogo_lib.constants import ADJUSTMENT_ITERATIONS
from cogo_lib.models import Point2D
from cogo_lib.solver.base import TraverseAdjuster
from cogo_lib.solver.models import Observation
from cogo_lib.solver.models import TraverseNetwork

logger = logging.getLogger(__name__)


class DampedRelaxationSolver(TraverseAdjuster):
    """Distribute observation discrepancies with damped relaxation passes."""

    def __init__(
        self,
        iterations: int = ADJUSTMENT_ITERATIONS,
        damping: float = ADJUSTMENT_DAMPING,
    ):
        self.iterations = iterations
        self.damping = damping

    @property
    def name(self) -> str:
        return "Damped Relaxation"

    def solve(self, network: TraverseNetwork) -> list[Point2D]:
        positions = {
            key: [point.x, point.y] for key, point in network.stations.items()
        }

        for _ in range(self.iterations):
            corrections = {key: [0.0, 0.0, 0.0] for key in positions}

            for link in network.links:
                start = positions[link.from_key]
                end = positions[link.to_key]
                projected = calculate_coordinates(
                    Point2D(x=start[0], y=start[1]), link.bearing, link.distance
                )

                dx = (projected.x - end[0]) * link.weight
                dy = (projected.y - end[1]) * link.weight

                from_corr = corrections[link.from_key]
                from_corr[0] -= dx * self.damping
                from_corr[1] -= dy * self.damping
                from_corr[2] += link.weight

                to_corr = corrections[link.to_key]
                to_corr[0] += dx * self.damping
                to_corr[1] += dy * self.damping
                to_corr[2] += link.weight

            for key, (cx, cy, total_weight) in corrections.items():
                if total_weight > 0:
                    positions[key][0] += cx / total_weight
                    positions[key][1] += cy / total_weight

        return [
            Point2D(x=positions[key][0], y=positions[key][1], id=station.id)
            for key, station in network.stations.items()
        ]


def least_squares_adjustment(
    observations: Sequence[Observation],
    iterations: int = ADJUSTMENT_ITERATIONS,
) -> list[Point2D]:
    """Adjust traverse points with the damped relaxation heuristic.

    Args:
        observations: Measured bearing/distance pairs between points
        iterations: Number of relaxation passes

    Returns:
        One adjusted point per unique station, in first-seen order

    Raises:
        ValidationError: If ``observations`` is empty
    """
    return DampedRelaxationSolver(iterations=iterations).adjust(observations)
