# -*- coding: utf-8 -*-
"""Traverse adjustment solvers.

Usage::

    from cogo_lib.solver import Observation, WeightedLeastSquaresSolver

    adjusted = WeightedLeastSquaresSolver().adjust(observations)

Available solvers:

- :class:`DampedRelaxationSolver` -- damped iterative relaxation (fast
  heuristic, the behaviour of :func:`least_squares_adjustment`)
- :class:`WeightedLeastSquaresSolver` -- rigorous Gauss-Newton
  adjustment of distances and bearings with numpy

To create a custom solver, subclass :class:`TraverseAdjuster` and
implement the :meth:`~TraverseAdjuster.solve` method.
"""

from cogo_lib.solver.base import TraverseAdjuster
from cogo_lib.solver.lse import WeightedLeastSquaresSolver
from cogo_lib.solver.models import Observation
from cogo_lib.solver.models import ObservationLink
from cogo_lib.solver.models import TraverseNetwork
from cogo_lib.solver.relaxation import DampedRelaxationSolver
from cogo_lib.solver.relaxation import least_squares_adjustment

__all__ = [
    "DampedRelaxationSolver",
    "Observation",
    "ObservationLink",
    "TraverseAdjuster",
    "TraverseNetwork",
    "WeightedLeastSquaresSolver",
    "least_squares_adjustment",
]
