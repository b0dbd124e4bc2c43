"""Ellipsoid, projection and datum constants for the British National Grid."""

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class Ellipsoid:
    name: str
    a: float  # semi-major axis (m)
    b: float  # semi-minor axis (m)

    @property
    def e2(self) -> float:
        """Eccentricity squared."""
        return (self.a ** 2 - self.b ** 2) / self.a ** 2

    @property
    def n(self) -> float:
        """Third flattening."""
        return (self.a - self.b) / (self.a + self.b)


@dataclass(frozen=True)
class ProjectionParams:
    ellipsoid: Ellipsoid
    f0: float  # scale factor on central meridian
    lat0: float  # latitude of true origin (radians)
    lon0: float  # longitude of true origin (radians)
    n0: float  # northing of true origin (m)
    e0: float  # easting of true origin (m)


@dataclass(frozen=True)
class HelmertParams:
    tx: float  # translations (m)
    ty: float
    tz: float
    s: float  # scale minus one (unitless, ppm * 1e-6)
    rx: float  # rotations (radians)
    ry: float
    rz: float

    def inverse(self) -> "HelmertParams":
        """Approximate reverse transform: every parameter negated."""
        return HelmertParams(
            tx=-self.tx, ty=-self.ty, tz=-self.tz,
            s=-self.s,
            rx=-self.rx, ry=-self.ry, rz=-self.rz,
        )


def _arcsec(seconds: float) -> float:
    return math.radians(seconds / 3600)


# Airy 1830 ellipsoid (OSGB36)
AIRY_1830 = Ellipsoid("Airy 1830", a=6377563.396, b=6356256.909)

# GRS80 ellipsoid (WGS84)
GRS80 = Ellipsoid("GRS80", a=6378137.0, b=6356752.3141)

NATIONAL_GRID = ProjectionParams(
    ellipsoid=AIRY_1830,
    f0=0.9996012717,
    lat0=math.radians(49.0),
    lon0=math.radians(-2.0),
    n0=-100000.0,
    e0=400000.0,
)

# Helmert parameters: OSGB36 -> WGS84
OSGB36_TO_WGS84 = HelmertParams(
    tx=446.448,
    ty=-125.157,
    tz=542.060,
    s=-20.4894e-6,
    rx=_arcsec(0.1502),
    ry=_arcsec(0.2470),
    rz=_arcsec(0.8421),
)

WGS84_TO_OSGB36 = OSGB36_TO_WGS84.inverse()

# Representable extent of a lettered grid reference (m)
MAX_EASTING = 700000.0
MAX_NORTHING = 1300000.0

# Footpoint latitude convergence threshold (0.01 mm)
ARC_TOLERANCE = 0.00001
DEFAULT_MAX_ITERATIONS = 100
