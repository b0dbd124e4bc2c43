"""Encode and decode OS grid references such as 'SK 123 456'.

A reference is two letters naming a 100 km square followed by an equal
number of easting and northing digits.  The first letter picks a 500 km
square, the second a 100 km square inside it, from a 5x5 table with no 'I'.
"""

import math
import re
from dataclasses import dataclass
from typing import Union

from .ellipsoid import MAX_EASTING, MAX_NORTHING
from .errors import GridReferenceParseError, OutOfDomainError
from .projection import ProjectedCoordinate, is_on_grid

_100KM = 100000

VALID_DIGITS = (2, 4, 6, 8, 10)

# (e500, n500) -> first letter, for the 500 km squares covering Great Britain
FIRST_LETTERS = {
    (0, 0): "S",
    (1, 0): "T",
    (0, 1): "N",
    (1, 1): "O",
    (0, 2): "H",
    (1, 2): "J",
}
_FIRST_LETTER_SQUARES = {letter: square for square, letter in FIRST_LETTERS.items()}

# Second letter index runs west-east, north-south across the 500 km square
SECOND_LETTERS = "ABCDEFGHJKLMNOPQRSTUVWXYZ"

_REF_RE = re.compile(r"^([A-Z]{2})([0-9]*)$", re.ASCII)
_WHITESPACE_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class GridReference:
    letters: str
    easting_digits: str
    northing_digits: str

    def __str__(self) -> str:
        return f"{self.letters}{self.easting_digits}{self.northing_digits}"

    @property
    def digits(self) -> int:
        return len(self.easting_digits) + len(self.northing_digits)

    @property
    def resolution(self) -> int:
        """Side of the square this reference denotes, in metres."""
        return 10 ** (5 - len(self.easting_digits))

    def format(self, spaced: bool = True) -> str:
        if not spaced:
            return str(self)
        return f"{self.letters} {self.easting_digits} {self.northing_digits}"


def _check_digits(digits: int) -> None:
    if digits not in VALID_DIGITS:
        raise ValueError(f"digits must be one of {VALID_DIGITS}, got {digits!r}")


def square_letters(e100: int, n100: int) -> str:
    """Letter pair for the 100 km square with the given indices."""
    first = FIRST_LETTERS.get((e100 // 5, n100 // 5))
    if first is None:
        raise OutOfDomainError(f"100 km square ({e100}, {n100}) has no grid letters")
    index = (4 - n100 % 5) * 5 + e100 % 5
    return first + SECOND_LETTERS[index]


def square_origin(letters: str) -> tuple:
    """South-west corner (easting, northing) of a lettered 100 km square."""
    square = _FIRST_LETTER_SQUARES.get(letters[:1])
    if square is None or len(letters) != 2 or letters[1] not in SECOND_LETTERS:
        raise GridReferenceParseError(f"unrecognised grid letters {letters!r}")

    e500, n500 = square
    index = SECOND_LETTERS.index(letters[1])
    e100 = e500 * 5 + index % 5
    n100 = n500 * 5 + 4 - index // 5
    return e100 * _100KM, n100 * _100KM


def encode(point: ProjectedCoordinate, digits: int = 6) -> GridReference:
    """Encode an easting/northing as a grid reference truncated to ``digits``.

    Raises:
        ValueError: ``digits`` is not one of 2, 4, 6, 8, 10.
        OutOfDomainError: the point is off the National Grid.
    """
    _check_digits(digits)
    easting, northing = point.easting, point.northing
    if not is_on_grid(easting, northing):
        raise OutOfDomainError(
            f"({easting}, {northing}) outside grid bounds "
            f"[0, {MAX_EASTING:.0f}] x [0, {MAX_NORTHING:.0f}]"
        )

    letters = square_letters(math.floor(easting / _100KM), math.floor(northing / _100KM))

    half = digits // 2
    divisor = 10 ** (5 - half)
    e = math.floor((easting % _100KM) / divisor)
    n = math.floor((northing % _100KM) / divisor)

    return GridReference(letters, f"{e:0{half}d}", f"{n:0{half}d}")


def normalise(text: str) -> str:
    """Uppercase a grid reference and strip all whitespace."""
    return _WHITESPACE_RE.sub("", text).upper()


def parse(text: str) -> GridReference:
    """Parse and validate a grid reference string.

    Case-insensitive; embedded whitespace is ignored ('sk 123 456').

    Raises:
        GridReferenceParseError: bad letters, or digit count odd or outside 2..10.
    """
    if not isinstance(text, str):
        raise GridReferenceParseError(f"grid reference must be a string, got {type(text).__name__}")

    # Checked before uppercasing, which maps some non-ASCII letters to ASCII
    if not _WHITESPACE_RE.sub("", text).isascii():
        raise GridReferenceParseError(f"grid reference {text!r} contains non-ASCII characters")

    ref = normalise(text)
    match = _REF_RE.match(ref)
    if not match:
        raise GridReferenceParseError(f"malformed grid reference {text!r}")

    letters, numbers = match.groups()
    if len(numbers) % 2 or not 2 <= len(numbers) <= 10:
        raise GridReferenceParseError(
            f"grid reference {text!r} needs an even number of 2-10 digits, got {len(numbers)}"
        )

    # Raises for letters outside the table
    square_origin(letters)

    half = len(numbers) // 2
    return GridReference(letters, numbers[:half], numbers[half:])


def decode(ref: Union[str, GridReference]) -> ProjectedCoordinate:
    """Decode a grid reference to the easting/northing at the centre of its square.

    Raises:
        GridReferenceParseError: ``ref`` is a malformed string.
    """
    if not isinstance(ref, GridReference):
        ref = parse(ref)

    origin_e, origin_n = square_origin(ref.letters)
    resolution = ref.resolution
    offset = resolution / 2

    easting = origin_e + int(ref.easting_digits) * resolution + offset
    northing = origin_n + int(ref.northing_digits) * resolution + offset
    return ProjectedCoordinate(easting=easting, northing=northing)


def is_valid_grid_reference(text: str) -> bool:
    """Check a grid reference's format without converting it."""
    try:
        parse(text)
    except GridReferenceParseError:
        return False
    return True
