# -*- coding: utf-8 -*-
"""Data structures for the traverse adjustment solvers.

Observations arrive as pairs of :class:`~cogo_lib.models.Point2D` with a
measured bearing and distance.  Before solving they are resolved into a
:class:`TraverseNetwork`: a table of unique stations plus links that refer
to stations by key, so that solvers never have to match moving
coordinates against each other.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from dataclasses import field
from typing import Annotated

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

from cogo_lib.constants import POINT_MATCH_TOLERANCE
from cogo_lib.errors import ValidationError
from cogo_lib.models import Point2D


class Observation(BaseModel):
    """A measured bearing and distance between two traverse points.

    Attributes:
        from_: Station the measurement was taken from (alias ``from``)
        to: Observed station
        distance: Measured horizontal distance in meters
        bearing: Measured whole-circle bearing in degrees
        weight: Relative confidence in the measurement
    """

    model_config = ConfigDict(populate_by_name=True)

    from_: Point2D = Field(alias="from")
    to: Point2D
    distance: Annotated[float, Field(ge=0)]
    bearing: float
    weight: Annotated[float, Field(gt=0)] = 1.0


@dataclass(frozen=True)
class ObservationLink:
    """An observation resolved to station keys."""

    from_key: str
    to_key: str
    distance: float
    bearing: float
    weight: float


@dataclass
class TraverseNetwork:
    """Unique stations and the observations linking them.

    ``stations`` keeps first-seen order, which is also the order of the
    adjusted points returned by every solver.
    """

    stations: dict[str, Point2D] = field(default_factory=dict)
    links: list[ObservationLink] = field(default_factory=list)

    @property
    def keys(self) -> list[str]:
        return list(self.stations)

    def _resolve(self, point: Point2D) -> str:
        # Stations are keyed by id; anonymous points by their position
        if point.id is not None:
            self.stations.setdefault(point.id, point.model_copy())
            return point.id

        for key, station in self.stations.items():
            if (
                abs(station.x - point.x) < POINT_MATCH_TOLERANCE
                and abs(station.y - point.y) < POINT_MATCH_TOLERANCE
            ):
                return key

        key = f"p{len(self.stations)}"
        self.stations[key] = point.model_copy()
        return key

    @classmethod
    def from_observations(cls, observations: Sequence[Observation]) -> TraverseNetwork:
        """Build a network from raw observations.

        Raises:
            ValidationError: If no observations are given
        """
        if not observations:
            raise ValidationError("No observations provided", "observations", 0)

        network = cls()
        for obs in observations:
            network.links.append(
                ObservationLink(
                    from_key=network._resolve(obs.from_),
                    to_key=network._resolve(obs.to),
                    distance=obs.distance,
                    bearing=obs.bearing,
                    weight=obs.weight,
                )
            )
        return network
