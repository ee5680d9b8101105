# -*- coding: utf-8 -*-
"""Tests for the CRS registry and coordinate transformations."""

import pytest

from cogo_lib.constants import DEFAULT_CRS_DEFINITIONS
from cogo_lib.crs import CRSRegistry
from cogo_lib.crs import get_crs_registry
from cogo_lib.crs import init_crs_registry
from cogo_lib.crs import transform_geometry
from cogo_lib.crs import transform_point
from cogo_lib.crs import transform_projection
from cogo_lib.errors import ValidationError
from cogo_lib.geometry import create_point
from cogo_lib.geometry import create_polygon
from cogo_lib.geometry import validate_geometry_basic


class TestRegistry:
    """Tests for CRSRegistry and the process-wide default."""

    def test_init_is_idempotent(self):
        first = init_crs_registry()
        assert init_crs_registry() is first
        assert get_crs_registry() is first

    def test_default_srids(self):
        registry = get_crs_registry()
        for srid in (4326, 32734, 32735, 32736):
            assert srid in registry

    def test_unknown_srid(self):
        registry = CRSRegistry(DEFAULT_CRS_DEFINITIONS)
        assert 2193 not in registry
        with pytest.raises(ValidationError) as exc_info:
            registry.definition(2193)
        assert exc_info.value.field == "srid"

    def test_with_definitions_returns_new_registry(self):
        registry = CRSRegistry({4326: DEFAULT_CRS_DEFINITIONS[4326]})
        extended = registry.with_definitions({32735: DEFAULT_CRS_DEFINITIONS[32735]})
        assert 32735 in extended
        assert 32735 not in registry
        assert len(extended) == 2

    def test_is_geographic(self):
        registry = get_crs_registry()
        assert registry.is_geographic(4326)
        assert not registry.is_geographic(32735)


class TestTransformProjection:
    """Tests for transform_projection."""

    def test_central_meridian_on_equator(self):
        easting, northing = transform_projection(27.0, 0.0, 4326, 32735)
        assert easting == pytest.approx(500000.0, abs=1e-3)
        assert northing == pytest.approx(10_000_000.0, abs=1e-3)

    def test_southern_hemisphere_northing(self):
        easting, northing = transform_projection(31.05, -17.83, 4326, 32735)
        assert 7_900_000 < northing < 8_100_000
        assert easting > 500000

    def test_roundtrip(self):
        easting, northing = transform_projection(31.05, -17.83, 4326, 32735)
        lon, lat = transform_projection(easting, northing, 32735, 4326)
        assert lon == pytest.approx(31.05, abs=1e-6)
        assert lat == pytest.approx(-17.83, abs=1e-6)

    def test_output_precision(self):
        easting, northing = transform_projection(31.123456789, -17.987654321)
        assert easting == round(easting, 4)
        assert northing == round(northing, 4)

    def test_unknown_source(self):
        with pytest.raises(ValidationError) as exc_info:
            transform_projection(1.0, 2.0, 9999, 32735)
        assert exc_info.value.field == "from_srid"

    def test_unknown_target(self):
        with pytest.raises(ValidationError) as exc_info:
            transform_projection(1.0, 2.0, 4326, 9999)
        assert exc_info.value.field == "to_srid"

    def test_unprojectable_input(self):
        with pytest.raises(ValidationError) as exc_info:
            transform_projection(31.0, 95.0, 4326, 32735)
        assert exc_info.value.field == "transformation"

    def test_explicit_registry(self):
        registry = CRSRegistry({4326: DEFAULT_CRS_DEFINITIONS[4326]})
        with pytest.raises(ValidationError):
            transform_projection(31.0, -17.0, 4326, 32735, registry=registry)


class TestTransformGeometry:
    """Tests for transform_point and transform_geometry."""

    def test_same_srid_returns_input(self):
        point = create_point(300000, 8000000)
        assert transform_point(point, 32735) is point

    def test_point(self):
        point = transform_point(create_point(27.0, 0.0, srid=4326), 32735)
        assert point.srid == 32735
        assert point.coordinates[0] == pytest.approx(500000.0, abs=1e-3)

    def test_polygon_keeps_ring_closed(self):
        polygon = create_polygon(
            [(31.0, -17.8), (31.01, -17.8), (31.01, -17.79), (31.0, -17.79)],
            srid=4326,
        )
        projected = transform_geometry(polygon, 32735)
        ring = projected.coordinates[0]
        assert projected.srid == 32735
        assert ring[0] == ring[-1]
        assert validate_geometry_basic(projected)
        # ~1.06 km x ~1.11 km at this latitude
        assert projected.to_shapely().area == pytest.approx(1.17e6, rel=0.05)
