"""Transverse Mercator projection onto the OS National Grid.

Forward: WGS84 lat/lon -> (Helmert) -> OSGB36 lat/lon -> easting/northing.
Inverse: easting/northing -> OSGB36 lat/lon -> (Helmert) -> WGS84 lat/lon.

Series follow the Ordnance Survey formulation (terms I..VI forward and
VII..XIIA inverse), accurate to well under a millimetre within the grid.
"""

import logging
import math
from dataclasses import dataclass

from .datum import osgb36_to_wgs84, wgs84_to_osgb36
from .ellipsoid import (
    ARC_TOLERANCE,
    DEFAULT_MAX_ITERATIONS,
    MAX_EASTING,
    MAX_NORTHING,
    NATIONAL_GRID,
    ProjectionParams,
)
from .errors import ConvergenceError, OutOfDomainError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeodeticCoordinate:
    latitude: float  # decimal degrees
    longitude: float


@dataclass(frozen=True)
class ProjectedCoordinate:
    easting: float  # metres
    northing: float


def is_on_grid(easting: float, northing: float) -> bool:
    """True if the point falls inside the lettered National Grid extent."""
    return 0 <= easting <= MAX_EASTING and 0 <= northing <= MAX_NORTHING


def _check_geodetic(lat: float, lon: float) -> None:
    if not (math.isfinite(lat) and math.isfinite(lon)):
        raise OutOfDomainError(f"non-finite coordinate: {lat}, {lon}")
    if not (-90 <= lat <= 90 and -180 <= lon <= 180):
        raise OutOfDomainError(f"latitude/longitude out of range: {lat}, {lon}")


def meridional_arc(phi: float, params: ProjectionParams = NATIONAL_GRID) -> float:
    """Meridional arc distance (scaled by F0) from the true origin latitude to phi."""
    b = params.ellipsoid.b
    n = params.ellipsoid.n
    n2 = n * n
    n3 = n2 * n

    dphi = phi - params.lat0
    sphi = phi + params.lat0

    ma = (1 + n + (5.0 / 4.0) * n2 + (5.0 / 4.0) * n3) * dphi
    mb = (3 * n + 3 * n2 + (21.0 / 8.0) * n3) * math.sin(dphi) * math.cos(sphi)
    mc = ((15.0 / 8.0) * n2 + (15.0 / 8.0) * n3) * math.sin(2 * dphi) * math.cos(2 * sphi)
    md = (35.0 / 24.0) * n3 * math.sin(3 * dphi) * math.cos(3 * sphi)

    return b * params.f0 * (ma - mb + mc - md)


def _radii(phi: float, params: ProjectionParams):
    """Transverse (nu) and meridional (rho) radii of curvature, and eta squared."""
    a = params.ellipsoid.a
    e2 = params.ellipsoid.e2
    sin2 = math.sin(phi) ** 2

    nu = a * params.f0 / math.sqrt(1 - e2 * sin2)
    rho = a * params.f0 * (1 - e2) / (1 - e2 * sin2) ** 1.5
    eta2 = nu / rho - 1
    return nu, rho, eta2


def transverse_mercator(lat: float, lon: float,
                        params: ProjectionParams = NATIONAL_GRID) -> ProjectedCoordinate:
    """Project OSGB36 lat/lon (degrees) to easting/northing with no bounds check."""
    phi = math.radians(lat)
    lam = math.radians(lon)

    sin_phi = math.sin(phi)
    cos_phi = math.cos(phi)
    tan2 = math.tan(phi) ** 2
    tan4 = tan2 * tan2
    cos3 = cos_phi ** 3
    cos5 = cos_phi ** 5

    nu, rho, eta2 = _radii(phi, params)
    m = meridional_arc(phi, params)

    I = m + params.n0
    II = (nu / 2) * sin_phi * cos_phi
    III = (nu / 24) * sin_phi * cos3 * (5 - tan2 + 9 * eta2)
    IIIA = (nu / 720) * sin_phi * cos5 * (61 - 58 * tan2 + tan4)
    IV = nu * cos_phi
    V = (nu / 6) * cos3 * (nu / rho - tan2)
    VI = (nu / 120) * cos5 * (5 - 18 * tan2 + tan4 + 14 * eta2 - 58 * tan2 * eta2)

    dl = lam - params.lon0

    northing = I + II * dl ** 2 + III * dl ** 4 + IIIA * dl ** 6
    easting = params.e0 + IV * dl + V * dl ** 3 + VI * dl ** 5
    return ProjectedCoordinate(easting=easting, northing=northing)


def footpoint_latitude(northing: float, params: ProjectionParams = NATIONAL_GRID,
                       max_iterations: int = DEFAULT_MAX_ITERATIONS) -> float:
    """Solve iteratively for the latitude whose meridional arc matches the northing."""
    a = params.ellipsoid.a
    phi = params.lat0
    m = 0.0

    for iteration in range(1, max_iterations + 1):
        phi = (northing - params.n0 - m) / (a * params.f0) + phi
        m = meridional_arc(phi, params)
        if abs(northing - params.n0 - m) < ARC_TOLERANCE:
            break
    else:
        raise ConvergenceError(
            f"footpoint latitude for northing {northing} did not converge "
            f"in {max_iterations} iterations"
        )

    logger.debug("Footpoint latitude converged in %d iterations", iteration)
    return phi


def inverse_transverse_mercator(easting: float, northing: float,
                                params: ProjectionParams = NATIONAL_GRID,
                                max_iterations: int = DEFAULT_MAX_ITERATIONS) -> GeodeticCoordinate:
    """Convert easting/northing to OSGB36 lat/lon (degrees) on the projection's ellipsoid."""
    phi = footpoint_latitude(northing, params, max_iterations)

    tan_phi = math.tan(phi)
    tan2 = tan_phi ** 2
    tan4 = tan2 * tan2
    tan6 = tan4 * tan2
    sec_phi = 1 / math.cos(phi)

    nu, rho, eta2 = _radii(phi, params)

    VII = tan_phi / (2 * rho * nu)
    VIII = tan_phi / (24 * rho * nu ** 3) * (5 + 3 * tan2 + eta2 - 9 * tan2 * eta2)
    IX = tan_phi / (720 * rho * nu ** 5) * (61 + 90 * tan2 + 45 * tan4)
    X = sec_phi / nu
    XI = sec_phi / (6 * nu ** 3) * (nu / rho + 2 * tan2)
    XII = sec_phi / (120 * nu ** 5) * (5 + 28 * tan2 + 24 * tan4)
    XIIA = sec_phi / (5040 * nu ** 7) * (61 + 662 * tan2 + 1320 * tan4 + 720 * tan6)

    de = easting - params.e0

    lat = phi - VII * de ** 2 + VIII * de ** 4 - IX * de ** 6
    lon = params.lon0 + X * de - XI * de ** 3 + XII * de ** 5 - XIIA * de ** 7
    return GeodeticCoordinate(latitude=math.degrees(lat), longitude=math.degrees(lon))


def project(coord: GeodeticCoordinate, datum_shift: bool = True) -> ProjectedCoordinate:
    """Project a WGS84 coordinate onto the National Grid.

    With ``datum_shift`` off the input is treated as OSGB36 already, which
    reproduces direct WGS84 projection (tens of metres off).

    Raises:
        OutOfDomainError: invalid lat/lon, or the result falls off the grid.
    """
    lat, lon = coord.latitude, coord.longitude
    _check_geodetic(lat, lon)

    if datum_shift:
        lat, lon = wgs84_to_osgb36(lat, lon)

    point = transverse_mercator(lat, lon)
    if not is_on_grid(point.easting, point.northing):
        raise OutOfDomainError(
            f"{coord.latitude}, {coord.longitude} projects off the National Grid "
            f"({point.easting:.0f}, {point.northing:.0f})"
        )
    return point


def unproject(point: ProjectedCoordinate, datum_shift: bool = True,
              max_iterations: int = DEFAULT_MAX_ITERATIONS) -> GeodeticCoordinate:
    """Convert a National Grid easting/northing back to WGS84 lat/lon.

    Raises:
        OutOfDomainError: non-finite easting or northing.
        ConvergenceError: footpoint latitude iteration exceeded ``max_iterations``.
    """
    if not (math.isfinite(point.easting) and math.isfinite(point.northing)):
        raise OutOfDomainError(f"non-finite easting/northing: {point.easting}, {point.northing}")

    osgb = inverse_transverse_mercator(point.easting, point.northing,
                                       max_iterations=max_iterations)
    if not datum_shift:
        return osgb

    lat, lon = osgb36_to_wgs84(osgb.latitude, osgb.longitude)
    return GeodeticCoordinate(latitude=lat, longitude=lon)
