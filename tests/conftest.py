# -*- coding: utf-8 -*-
"""Shared fixtures for the cogo_lib test suite."""

from __future__ import annotations

import pytest

from cogo_lib.geometry import Polygon
from cogo_lib.geometry import create_polygon
from cogo_lib.models import Point2D

#: 1 km square in UTM 35S, closed (first point repeated)
SQUARE_COORDS = [
    (300000.0, 8000000.0),
    (301000.0, 8000000.0),
    (301000.0, 8001000.0),
    (300000.0, 8001000.0),
    (300000.0, 8000000.0),
]

ORIGIN_X = 300000.0
ORIGIN_Y = 8000000.0


def make_square(x: float, y: float, size: float = 1000.0) -> Polygon:
    """Square polygon in UTM 35S with offsets relative to the test origin."""
    x0 = ORIGIN_X + x
    y0 = ORIGIN_Y + y
    return create_polygon(
        [(x0, y0), (x0 + size, y0), (x0 + size, y0 + size), (x0, y0 + size)]
    )


@pytest.fixture
def square_points() -> list[Point2D]:
    return [Point2D(x=x, y=y) for x, y in SQUARE_COORDS]


@pytest.fixture
def open_square_points() -> list[Point2D]:
    """The square without its repeated closing point."""
    return [Point2D(x=x, y=y) for x, y in SQUARE_COORDS[:-1]]


@pytest.fixture
def parent_parcel() -> Polygon:
    """2 km square parent parcel."""
    return make_square(0, 0, 2000.0)


@pytest.fixture
def quadrant_sections() -> list[Polygon]:
    """Four 1 km squares tiling :func:`parent_parcel` exactly."""
    return [
        make_square(0, 0),
        make_square(1000, 0),
        make_square(1000, 1000),
        make_square(0, 1000),
    ]
