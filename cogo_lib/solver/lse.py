# -*- coding: utf-8 -*-
"""Weighted least-squares traverse adjustment (Gauss-Newton).

Each observation contributes two condition equations:

* distance: ``sqrt(dx² + dy²) = d``
* bearing:  ``atan2(dx, dy) = b``

The equations are linearised around the current station estimates and
solved with ``numpy.linalg.lstsq`` until the largest correction drops
below :data:`~cogo_lib.constants.LSE_CONVERGENCE`.  Bearing rows are
scaled by the leg length so both kinds of residual are expressed in
metres.  The first station of the network is held fixed to remove the
datum defect.
"""

from __future__ import annotations

import logging
import math

import numpy as np

from cogo_lib.constants import LSE_CONVERGENCE
from cogo_lib.constants import LSE_MAX_ITERATIONS
from cogo_lib.constants import UTM_PRECISION
from cogo_lib.models import Point2D
from cogo_lib.solver.base import TraverseAdjuster
from cogo_lib.solver.models import TraverseNetwork

logger = logging.getLogger(__name__)


def _wrap_angle(angle: float) -> float:
    """Wrap an angle difference into ``(-pi, pi]`` radians."""
    wrapped = math.fmod(angle + math.pi, 2 * math.pi)
    if wrapped <= 0:
        wrapped += 2 * math.pi
    return wrapped - math.pi


class WeightedLeastSquaresSolver(TraverseAdjuster):
    """Rigorous weighted least-squares adjustment of distances and bearings.

    Args:
        max_iterations: Upper bound on Gauss-Newton iterations
        tolerance: Convergence threshold on the largest correction (meters)
    """

    def __init__(
        self,
        max_iterations: int = LSE_MAX_ITERATIONS,
        tolerance: float = LSE_CONVERGENCE,
    ):
        self.max_iterations = max_iterations
        self.tolerance = tolerance

    @property
    def name(self) -> str:
        return "Weighted Least Squares"

    def solve(self, network: TraverseNetwork) -> list[Point2D]:
        keys = network.keys
        fixed = keys[0]
        free = keys[1:]

        if not free:
            return [station.model_copy() for station in network.stations.values()]

        # -- Centre on the fixed station for numerical stability ------------
        origin = network.stations[fixed]
        coords = np.array(
            [[p.x - origin.x, p.y - origin.y] for p in network.stations.values()],
            dtype=np.float64,
        )
        key_to_row = {key: i for i, key in enumerate(keys)}
        # Column of each free coordinate in the design matrix
        unknown_idx = {key: 2 * i for i, key in enumerate(free)}
        n_unknowns = 2 * len(free)

        converged = False
        for iteration in range(1, self.max_iterations + 1):
            rows: list[np.ndarray] = []
            residuals: list[float] = []
            weights: list[float] = []

            for link in network.links:
                start = coords[key_to_row[link.from_key]]
                end = coords[key_to_row[link.to_key]]
                dx, dy = end - start
                length = math.hypot(dx, dy)
                if length < 1e-9:
                    continue

                # distance row
                row = np.zeros(n_unknowns, dtype=np.float64)
                self._fill(row, unknown_idx, link.from_key, link.to_key, dx / length, dy / length)
                rows.append(row)
                residuals.append(link.distance - length)
                weights.append(link.weight)

                # bearing row, scaled to metres of lateral offset
                row = np.zeros(n_unknowns, dtype=np.float64)
                self._fill(row, unknown_idx, link.from_key, link.to_key, dy / length, -dx / length)
                rows.append(row)
                computed = math.atan2(dx, dy)
                residuals.append(_wrap_angle(math.radians(link.bearing) - computed) * length)
                weights.append(link.weight)

            if not rows:
                logger.warning("%s: no usable observations, returning input", self.name)
                break

            W = np.sqrt(np.asarray(weights, dtype=np.float64))
            A = np.vstack(rows) * W[:, np.newaxis]
            b = np.asarray(residuals, dtype=np.float64) * W

            delta, _, _, _ = np.linalg.lstsq(A, b, rcond=None)

            for key, col in unknown_idx.items():
                coords[key_to_row[key]] += delta[col : col + 2]

            max_correction = float(np.max(np.abs(delta)))
            logger.debug(
                "%s: iteration %d, max correction %.6f m",
                self.name,
                iteration,
                max_correction,
            )
            if max_correction < self.tolerance:
                converged = True
                break

        if not converged:
            logger.warning(
                "%s did not converge within %d iterations",
                self.name,
                self.max_iterations,
            )

        return [
            Point2D(
                x=round(float(coords[key_to_row[key]][0]) + origin.x, UTM_PRECISION),
                y=round(float(coords[key_to_row[key]][1]) + origin.y, UTM_PRECISION),
                id=station.id,
            )
            for key, station in network.stations.items()
        ]

    @staticmethod
    def _fill(
        row: np.ndarray,
        unknown_idx: dict[str, int],
        from_key: str,
        to_key: str,
        ax: float,
        ay: float,
    ) -> None:
        """Write the partial derivatives of one equation into ``row``.

        ``(ax, ay)`` are the derivatives with respect to the ``to`` station;
        the ``from`` station receives their negation.  The fixed station has
        no column.
        """
        if to_key in unknown_idx:
            col = unknown_idx[to_key]
            row[col] += ax
            row[col + 1] += ay
        if from_key in unknown_idx:
            col = unknown_idx[from_key]
            row[col] -= ax
            row[col + 1] -= ay
