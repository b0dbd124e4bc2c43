"""Tests for the WGS84 <-> OSGB36 Helmert shift."""

import math

import pytest

from osgrid.grid.datum import helmert_transform, osgb36_to_wgs84, wgs84_to_osgb36
from osgrid.grid.ellipsoid import (
    AIRY_1830,
    GRS80,
    OSGB36_TO_WGS84,
    WGS84_TO_OSGB36,
    HelmertParams,
)


class TestHelmertParams:
    def test_inverse_negates_everything(self):
        inv = OSGB36_TO_WGS84.inverse()
        assert inv.tx == -446.448
        assert inv.ty == 125.157
        assert inv.tz == -542.060
        assert inv.s == pytest.approx(20.4894e-6)
        assert inv.rz == -OSGB36_TO_WGS84.rz

    def test_wgs84_to_osgb36_is_inverse(self):
        assert WGS84_TO_OSGB36 == OSGB36_TO_WGS84.inverse()

    def test_rotation_in_radians(self):
        assert OSGB36_TO_WGS84.rz == pytest.approx(math.radians(0.8421 / 3600))


class TestHelmertTransform:
    def test_identity_params_same_ellipsoid(self):
        identity = HelmertParams(0, 0, 0, 0, 0, 0, 0)
        lat, lon = helmert_transform(math.radians(54.0), math.radians(-2.0), AIRY_1830, AIRY_1830, identity)
        assert math.degrees(lat) == pytest.approx(54.0, abs=1e-10)
        assert math.degrees(lon) == pytest.approx(-2.0, abs=1e-10)

    def test_ellipsoid_change_alone_moves_latitude(self):
        identity = HelmertParams(0, 0, 0, 0, 0, 0, 0)
        lat, lon = helmert_transform(math.radians(54.0), math.radians(-2.0), GRS80, AIRY_1830, identity)
        assert math.degrees(lat) != pytest.approx(54.0, abs=1e-6)
        assert math.degrees(lon) == pytest.approx(-2.0, abs=1e-12)


class TestDatumConversion:
    @pytest.mark.parametrize("lat, lon", [
        (50.0657, -5.7132),
        (51.5080, -0.1281),
        (55.9533, -3.1883),
        (60.1546, -1.1494),
    ])
    def test_round_trip(self, lat, lon):
        o_lat, o_lon = wgs84_to_osgb36(lat, lon)
        w_lat, w_lon = osgb36_to_wgs84(o_lat, o_lon)
        assert w_lat == pytest.approx(lat, abs=1e-6)
        assert w_lon == pytest.approx(lon, abs=1e-6)

    def test_shift_is_tens_of_metres(self):
        lat, lon = 51.5080, -0.1281
        o_lat, o_lon = wgs84_to_osgb36(lat, lon)
        assert 0 < abs(o_lat - lat) + abs(o_lon - lon)
        # Under ~200 m either way
        assert abs(o_lat - lat) < 0.002
        assert abs(o_lon - lon) < 0.003
