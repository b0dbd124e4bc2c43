"""Turn user-supplied location text into a point on the map.

Accepts a grid reference ('SK 123 456'), plain coordinates ('53.2, -1.5')
or a Google Maps style link.
"""

import math
import re
from dataclasses import dataclass
from typing import Optional

from .grid.codec import parse
from .grid.convert import from_grid_reference, to_grid_reference
from .grid.errors import GridReferenceParseError

_COORDS_RE = re.compile(r"^\s*(-?\d+(?:\.\d+)?)\s*[,\s]\s*(-?\d+(?:\.\d+)?)\s*$", re.ASCII)

# Link formats:
#   https://www.google.com/maps/@51.5074,-0.1278,15z
#   https://www.google.com/maps/place/.../@51.5074,-0.1278,15z
#   https://maps.google.com/?q=51.5074,-0.1278
#   https://maps.google.com/?ll=51.5074,-0.1278
_LINK_PATTERNS = [
    re.compile(r"@(-?\d+\.?\d*),(-?\d+\.?\d*)", re.ASCII),
    re.compile(r"[?&]q=(-?\d+\.?\d*),(-?\d+\.?\d*)", re.ASCII),
    re.compile(r"[?&]ll=(-?\d+\.?\d*),(-?\d+\.?\d*)", re.ASCII),
]

SOURCE_GRID_REFERENCE = "grid_reference"
SOURCE_COORDINATES = "coordinates"
SOURCE_MAP_LINK = "map_link"


@dataclass
class ResolvedLocation:
    latitude: float
    longitude: float
    grid_reference: Optional[str]
    source: str


def _in_range(lat: float, lon: float) -> bool:
    return (
        math.isfinite(lat) and math.isfinite(lon)
        and -90 <= lat <= 90 and -180 <= lon <= 180
    )


def parse_coordinates(text: str) -> Optional[tuple]:
    """Parse '53.2, -1.5' or '53.2 -1.5' into (lat, lon).

    Returns None if the text is not a pair of numbers or is out of range.
    """
    if not text:
        return None
    match = _COORDS_RE.match(text)
    if not match:
        return None
    lat, lon = float(match.group(1)), float(match.group(2))
    if not _in_range(lat, lon):
        return None
    return lat, lon


def parse_map_link(url: str) -> Optional[tuple]:
    """Extract (lat, lon) from a Google Maps link, or None."""
    if not url:
        return None
    for pattern in _LINK_PATTERNS:
        match = pattern.search(url)
        if match:
            lat, lon = float(match.group(1)), float(match.group(2))
            if _in_range(lat, lon):
                return lat, lon
    return None


def resolve_location(text: str, digits: Optional[int] = None) -> Optional[ResolvedLocation]:
    """Resolve free text to a location, trying grid reference, coordinates, then link.

    The grid reference is filled in whenever the point lies on the National
    Grid; it is None for points elsewhere.
    """
    if not text or not text.strip():
        return None

    try:
        ref = parse(text)
    except GridReferenceParseError:
        ref = None

    if ref is not None:
        coord = from_grid_reference(str(ref))
        if coord is None:
            return None
        # Keep the user's own reference unless a different precision was asked for
        if digits is None or digits == ref.digits:
            grid_reference = str(ref)
        else:
            grid_reference = to_grid_reference(coord.latitude, coord.longitude, digits)
        return ResolvedLocation(
            latitude=coord.latitude,
            longitude=coord.longitude,
            grid_reference=grid_reference,
            source=SOURCE_GRID_REFERENCE,
        )

    coords = parse_coordinates(text)
    source = SOURCE_COORDINATES
    if coords is None:
        coords = parse_map_link(text)
        source = SOURCE_MAP_LINK
    if coords is None:
        return None

    lat, lon = coords
    return ResolvedLocation(
        latitude=lat,
        longitude=lon,
        grid_reference=to_grid_reference(lat, lon, digits),
        source=source,
    )
