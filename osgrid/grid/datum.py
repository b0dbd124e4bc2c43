"""Helmert 7-parameter datum shift between WGS84 and OSGB36.

Geodetic coordinates are taken to geocentric cartesian on the source
ellipsoid (height 0), shifted, and brought back to geodetic on the target
ellipsoid.  Accuracy is a few metres, the limit of a single Helmert set
across Great Britain.
"""

import math

from .ellipsoid import (
    AIRY_1830,
    GRS80,
    OSGB36_TO_WGS84,
    WGS84_TO_OSGB36,
    Ellipsoid,
    HelmertParams,
)

_LAT_TOLERANCE = 1e-12  # radians
_MAX_LAT_ITERATIONS = 10


def _to_cartesian(lat, lon, ellipsoid: Ellipsoid):
    sin_lat = math.sin(lat)
    e2 = ellipsoid.e2
    nu = ellipsoid.a / math.sqrt(1 - e2 * sin_lat ** 2)

    x = nu * math.cos(lat) * math.cos(lon)
    y = nu * math.cos(lat) * math.sin(lon)
    z = nu * (1 - e2) * sin_lat
    return x, y, z


def _apply_helmert(x, y, z, p: HelmertParams):
    x2 = p.tx + (1 + p.s) * x + (-p.rz) * y + p.ry * z
    y2 = p.ty + p.rz * x + (1 + p.s) * y + (-p.rx) * z
    z2 = p.tz + (-p.ry) * x + p.rx * y + (1 + p.s) * z
    return x2, y2, z2


def _to_geodetic(x, y, z, ellipsoid: Ellipsoid):
    e2 = ellipsoid.e2
    p = math.sqrt(x ** 2 + y ** 2)
    lat = math.atan2(z, p * (1 - e2))

    for _ in range(_MAX_LAT_ITERATIONS):
        nu = ellipsoid.a / math.sqrt(1 - e2 * math.sin(lat) ** 2)
        new_lat = math.atan2(z + e2 * nu * math.sin(lat), p)
        if abs(new_lat - lat) < _LAT_TOLERANCE:
            lat = new_lat
            break
        lat = new_lat

    lon = math.atan2(y, x)
    return lat, lon


def helmert_transform(lat_rad, lon_rad, source: Ellipsoid, target: Ellipsoid,
                      params: HelmertParams):
    """Shift a geodetic position (radians) from one datum to another."""
    x, y, z = _to_cartesian(lat_rad, lon_rad, source)
    x2, y2, z2 = _apply_helmert(x, y, z, params)
    return _to_geodetic(x2, y2, z2, target)


def wgs84_to_osgb36(lat, lon):
    """Convert WGS84 (lat, lon) in degrees to OSGB36 (lat, lon) in degrees."""
    lat_r, lon_r = helmert_transform(
        math.radians(lat), math.radians(lon), GRS80, AIRY_1830, WGS84_TO_OSGB36,
    )
    return math.degrees(lat_r), math.degrees(lon_r)


def osgb36_to_wgs84(lat, lon):
    """Convert OSGB36 (lat, lon) in degrees to WGS84 (lat, lon) in degrees."""
    lat_r, lon_r = helmert_transform(
        math.radians(lat), math.radians(lon), AIRY_1830, GRS80, OSGB36_TO_WGS84,
    )
    return math.degrees(lat_r), math.degrees(lon_r)
