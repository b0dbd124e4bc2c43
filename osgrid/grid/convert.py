"""Lat/lon <-> grid reference entry points used by the rest of the application.

These never raise for bad input: anything that cannot be converted comes
back as None, so callers can decide how to prompt the user.
"""

import logging
from typing import Optional

from .. import config
from .codec import decode, encode
from .errors import ConvergenceError, GridError
from .projection import GeodeticCoordinate, ProjectedCoordinate, is_on_grid, project, unproject

logger = logging.getLogger(__name__)


def _datum_shift(datum_shift: Optional[bool]) -> bool:
    return config.GRID_DATUM_SHIFT if datum_shift is None else datum_shift


def _rounded(coord: GeodeticCoordinate) -> GeodeticCoordinate:
    return GeodeticCoordinate(round(coord.latitude, 6), round(coord.longitude, 6))


def to_easting_northing(lat, lon, datum_shift: Optional[bool] = None) -> Optional[ProjectedCoordinate]:
    """Project WGS84 lat/lon to a National Grid easting/northing, or None if off-grid."""
    try:
        coord = GeodeticCoordinate(float(lat), float(lon))
    except (TypeError, ValueError):
        return None

    try:
        return project(coord, datum_shift=_datum_shift(datum_shift))
    except GridError as e:
        logger.debug("Cannot project %s, %s: %s", lat, lon, e)
        return None


def to_grid_reference(lat, lon, digits: Optional[int] = None,
                      datum_shift: Optional[bool] = None) -> Optional[str]:
    """Convert WGS84 lat/lon to a grid reference like 'SK334367'.

    Args:
        lat: latitude in decimal degrees
        lon: longitude in decimal degrees
        digits: total digits, one of 2, 4, 6, 8, 10 (default GRID_DEFAULT_DIGITS)
        datum_shift: apply the WGS84 -> OSGB36 shift (default GRID_DATUM_SHIFT)

    Returns:
        The grid reference, or None if the point is outside the National Grid.
    """
    if digits is None:
        digits = config.GRID_DEFAULT_DIGITS

    point = to_easting_northing(lat, lon, datum_shift)
    if point is None:
        return None

    try:
        return str(encode(point, digits))
    except GridError as e:
        logger.debug("Cannot encode %s: %s", point, e)
        return None


def from_easting_northing(easting, northing,
                          datum_shift: Optional[bool] = None) -> Optional[GeodeticCoordinate]:
    """Convert a National Grid easting/northing to WGS84 lat/lon in degrees.

    Returns None for non-numeric or off-grid input.
    """
    try:
        easting = float(easting)
        northing = float(northing)
    except (TypeError, ValueError):
        return None

    if not is_on_grid(easting, northing):
        return None

    return _unproject(ProjectedCoordinate(easting, northing), datum_shift)


def from_grid_reference(ref: str, datum_shift: Optional[bool] = None) -> Optional[GeodeticCoordinate]:
    """Convert a grid reference to WGS84 lat/lon at the centre of its square.

    Input is case-insensitive and may contain spaces ('sk 123 456').
    Returns None for malformed references or unknown letter pairs.
    """
    try:
        point = decode(ref)
    except GridError as e:
        logger.debug("Rejected grid reference %r: %s", ref, e)
        return None

    # Lettered squares east of 700 km still decode; encode never produces them
    if not is_on_grid(point.easting, point.northing):
        logger.debug("Grid reference %r decodes off the grid at %s", ref, point)

    return _unproject(point, datum_shift)


def _unproject(point: ProjectedCoordinate, datum_shift: Optional[bool]) -> Optional[GeodeticCoordinate]:
    try:
        coord = unproject(point, datum_shift=_datum_shift(datum_shift),
                          max_iterations=config.GRID_MAX_ITERATIONS)
    except ConvergenceError:
        logger.error("Inverse projection failed to converge for %s", point)
        return None
    except GridError as e:
        logger.debug("Cannot unproject %s: %s", point, e)
        return None
    return _rounded(coord)
