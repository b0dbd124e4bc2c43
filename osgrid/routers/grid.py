"""Grid reference endpoints: lat/lon -> grid ref, grid ref -> lat/lon, validation."""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from .. import config
from ..grid.codec import VALID_DIGITS, decode, encode, normalise, parse
from ..grid.errors import GridReferenceParseError, OutOfDomainError
from ..grid.projection import GeodeticCoordinate, project, unproject
from ..location_input import resolve_location
from ..schemas import (
    GridLocationOut,
    GridReferenceOut,
    ResolvedLocationOut,
    ResolveLocationRequest,
    ValidationOut,
)

logger = logging.getLogger(__name__)
router = APIRouter(tags=["grid"])


def _digits_or_default(digits: Optional[int]) -> int:
    if digits is None:
        return config.GRID_DEFAULT_DIGITS
    if digits not in VALID_DIGITS:
        raise HTTPException(
            status_code=422,
            detail=f"digits must be one of {', '.join(map(str, VALID_DIGITS))}",
        )
    return digits


def _shift(datum_shift: Optional[bool]) -> bool:
    return config.GRID_DATUM_SHIFT if datum_shift is None else datum_shift


@router.get("/grid-reference", response_model=GridReferenceOut)
def lat_lon_to_grid_reference(
    lat: float = Query(..., ge=-90, le=90, description="WGS84 latitude"),
    lon: float = Query(..., ge=-180, le=180, description="WGS84 longitude"),
    digits: Optional[int] = Query(default=None, description="Total digits: 2, 4, 6, 8 or 10"),
    datum_shift: Optional[bool] = Query(default=None, description="Apply WGS84 -> OSGB36 shift"),
):
    """Convert a WGS84 point to an OS grid reference."""
    digits = _digits_or_default(digits)
    try:
        point = project(GeodeticCoordinate(lat, lon), datum_shift=_shift(datum_shift))
        ref = encode(point, digits)
    except OutOfDomainError as e:
        logger.info("Off-grid request %s, %s: %s", lat, lon, e)
        raise HTTPException(
            status_code=422,
            detail=f"{lat}, {lon} is outside the British National Grid",
        )

    return GridReferenceOut(
        grid_reference=str(ref),
        formatted=ref.format(),
        digits=ref.digits,
        easting=round(point.easting, 3),
        northing=round(point.northing, 3),
        latitude=lat,
        longitude=lon,
    )


@router.get("/grid-reference/validate", response_model=ValidationOut)
def validate_grid_reference(ref: str = Query(..., max_length=64, description="Grid reference")):
    """Check a grid reference's format without converting it."""
    try:
        parse(ref)
        valid = True
    except GridReferenceParseError:
        valid = False
    return ValidationOut(grid_reference=normalise(ref), valid=valid)


@router.get("/grid-reference/{ref}", response_model=GridLocationOut)
def grid_reference_to_lat_lon(
    ref: str,
    datum_shift: Optional[bool] = Query(default=None, description="Apply OSGB36 -> WGS84 shift"),
):
    """Convert a grid reference to the WGS84 point at the centre of its square."""
    try:
        parsed = parse(ref)
    except GridReferenceParseError as e:
        raise HTTPException(status_code=400, detail=str(e))

    point = decode(parsed)
    # ConvergenceError is left to the app-level handler
    coord = unproject(point, datum_shift=_shift(datum_shift),
                      max_iterations=config.GRID_MAX_ITERATIONS)

    return GridLocationOut(
        grid_reference=str(parsed),
        digits=parsed.digits,
        resolution_m=parsed.resolution,
        easting=point.easting,
        northing=point.northing,
        latitude=round(coord.latitude, 6),
        longitude=round(coord.longitude, 6),
    )


@router.post("/locations/resolve", response_model=ResolvedLocationOut)
def resolve(body: ResolveLocationRequest):
    """Resolve a grid reference, 'lat, lon' pair or map link to a location."""
    digits = _digits_or_default(body.digits) if body.digits is not None else None
    location = resolve_location(body.text, digits)
    if location is None:
        raise HTTPException(
            status_code=400,
            detail="Could not understand location. Use a grid reference (e.g. SK123456), "
                   "'latitude, longitude', or a Google Maps link.",
        )
    return ResolvedLocationOut.model_validate(location)
