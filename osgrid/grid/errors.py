"""Failure types raised by the grid conversion core."""


class GridError(Exception):
    """Base class for all grid conversion failures."""


class OutOfDomainError(GridError):
    """Coordinate or grid square lies outside the representable National Grid."""


class GridReferenceParseError(GridError, ValueError):
    """Grid reference string is malformed or uses an unknown letter pair."""


class ConvergenceError(GridError):
    """Footpoint latitude iteration did not converge within its cap."""
