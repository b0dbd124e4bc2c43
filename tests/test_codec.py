"""Tests for grid reference encoding, decoding and validation."""

import pytest

from osgrid.grid.codec import (
    FIRST_LETTERS,
    SECOND_LETTERS,
    VALID_DIGITS,
    GridReference,
    decode,
    encode,
    is_valid_grid_reference,
    normalise,
    parse,
    square_letters,
    square_origin,
)
from osgrid.grid.errors import GridReferenceParseError, OutOfDomainError
from osgrid.grid.projection import ProjectedCoordinate

SAMPLE_POINTS = [
    ProjectedCoordinate(0.0, 0.0),
    ProjectedCoordinate(412345.6, 345678.9),
    ProjectedCoordinate(216654.0, 771252.0),
    ProjectedCoordinate(529990.2, 180450.7),
    ProjectedCoordinate(699999.9, 1299999.9),
    ProjectedCoordinate(99999.99, 100000.0),
]


class TestLetterTables:
    def test_second_letters_skip_i(self):
        assert len(SECOND_LETTERS) == 25
        assert "I" not in SECOND_LETTERS
        assert len(set(SECOND_LETTERS)) == 25

    def test_second_letter_matches_char_offset(self):
        for idx, letter in enumerate(SECOND_LETTERS):
            expected = chr(ord("A") + idx + (1 if idx >= 8 else 0))
            assert letter == expected

    def test_first_letters_cover_six_squares(self):
        assert set(FIRST_LETTERS.values()) == {"S", "T", "N", "O", "H", "J"}

    @pytest.mark.parametrize("square, first", sorted(FIRST_LETTERS.items()))
    def test_bijection(self, square, first):
        e500, n500 = square
        seen = set()
        for idx in range(25):
            e100 = e500 * 5 + idx % 5
            n100 = n500 * 5 + 4 - idx // 5
            letters = square_letters(e100, n100)
            assert letters[0] == first
            assert letters[1] != "I"
            assert square_origin(letters) == (e100 * 100000, n100 * 100000)
            seen.add(letters)
        assert len(seen) == 25

    @pytest.mark.parametrize("e100, n100, letters", [
        (0, 0, "SV"),
        (4, 3, "SK"),
        (5, 1, "TQ"),
        (2, 7, "NN"),
        (4, 12, "HP"),
        (1, 0, "SW"),
    ])
    def test_known_squares(self, e100, n100, letters):
        assert square_letters(e100, n100) == letters

    def test_square_outside_table(self):
        with pytest.raises(OutOfDomainError):
            square_letters(10, 0)
        with pytest.raises(OutOfDomainError):
            square_letters(0, 15)

    @pytest.mark.parametrize("letters", ["IA", "ZZ", "SI", "AA", "S", ""])
    def test_unknown_letters(self, letters):
        with pytest.raises(GridReferenceParseError):
            square_origin(letters)


class TestEncode:
    @pytest.mark.parametrize("digits, expected", [
        (2, "SK14"),
        (4, "SK1245"),
        (6, "SK123456"),
        (8, "SK12344567"),
        (10, "SK1234545678"),
    ])
    def test_precisions(self, digits, expected):
        ref = encode(ProjectedCoordinate(412345.6, 345678.9), digits)
        assert str(ref) == expected
        assert ref.digits == digits

    def test_default_is_six_digits(self):
        assert str(encode(ProjectedCoordinate(412345.6, 345678.9))) == "SK123456"

    def test_origin(self):
        assert str(encode(ProjectedCoordinate(0, 0), 2)) == "SV00"

    def test_zero_padding(self):
        assert str(encode(ProjectedCoordinate(400050, 300007), 10)) == "SK0005000007"

    def test_ben_nevis(self):
        assert str(encode(ProjectedCoordinate(216654, 771252), 10)) == "NN1665471252"

    def test_grid_corner(self):
        assert str(encode(ProjectedCoordinate(700000, 1300000), 6)) == "JH000000"

    @pytest.mark.parametrize("digits", [0, 1, 3, 12, -2])
    def test_invalid_digits(self, digits):
        with pytest.raises(ValueError):
            encode(ProjectedCoordinate(412345, 345678), digits)

    @pytest.mark.parametrize("easting, northing", [
        (-1, 500000),
        (700001, 500000),
        (300000, -0.5),
        (300000, 1300001),
        (float("nan"), 500000),
    ])
    def test_off_grid(self, easting, northing):
        with pytest.raises(OutOfDomainError):
            encode(ProjectedCoordinate(easting, northing))


class TestParse:
    def test_splits_digits(self):
        ref = parse("SK123456")
        assert ref == GridReference("SK", "123", "456")

    def test_case_and_whitespace(self):
        assert parse(" sk 123\t456 ") == GridReference("SK", "123", "456")

    def test_properties(self):
        ref = parse("NN1665471252")
        assert ref.digits == 10
        assert ref.resolution == 1

    def test_format(self):
        ref = parse("SK123456")
        assert ref.format() == "SK 123 456"
        assert ref.format(spaced=False) == "SK123456"

    @pytest.mark.parametrize("text", [
        "IJ1234",       # no first letter I
        "ZZ1234",       # not one of the six squares
        "SI1234",       # second letter I
        "SK12345",      # odd digit count
        "SK1",
        "SK",           # no digits
        "SK123456789012",  # 12 digits
        "S1234",
        "SK12A4",
        "1234",
        "",
        "SK١٢٣٤٥٦",  # Arabic-Indic digits
        "SK１２３４",  # fullwidth digits
        "ß1234",   # uppercases to 'SS'
        "ſK1234",  # long s uppercases to 'S'
    ])
    def test_rejects_malformed(self, text):
        with pytest.raises(GridReferenceParseError):
            parse(text)

    def test_rejects_non_string(self):
        with pytest.raises(GridReferenceParseError):
            parse(None)

    def test_parse_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse("ZZ1234")

    def test_non_breaking_space_ignored(self):
        assert str(parse("SK 123 456")) == "SK123456"

    def test_normalise(self):
        assert normalise(" tq 30 80 ") == "TQ3080"


class TestDecode:
    def test_centre_of_square(self):
        p = decode("SK123456")
        assert p == ProjectedCoordinate(412350.0, 345650.0)

    def test_one_metre(self):
        p = decode("NN1665471252")
        assert p == ProjectedCoordinate(216654.5, 771252.5)

    def test_ten_km(self):
        assert decode("SV00") == ProjectedCoordinate(5000.0, 5000.0)

    def test_accepts_parsed_reference(self):
        assert decode(parse("sk 123 456")) == decode("SK123456")

    def test_rejects_odd_digits(self):
        with pytest.raises(GridReferenceParseError):
            decode("SK12345")

    @pytest.mark.parametrize("digits", VALID_DIGITS)
    @pytest.mark.parametrize("point", SAMPLE_POINTS)
    def test_round_trip_within_resolution(self, point, digits):
        ref = encode(point, digits)
        back = decode(ref)
        half = ref.resolution / 2
        assert abs(back.easting - point.easting) <= half + 1e-6
        assert abs(back.northing - point.northing) <= half + 1e-6

    @pytest.mark.parametrize("point", SAMPLE_POINTS)
    def test_ten_digit_round_trip_within_a_metre(self, point):
        back = decode(str(encode(point, 10)))
        assert abs(back.easting - point.easting) <= 1
        assert abs(back.northing - point.northing) <= 1


class TestIsValid:
    def test_valid(self):
        assert is_valid_grid_reference("SK123456")
        assert is_valid_grid_reference("tq 30 80")
        assert is_valid_grid_reference("HP40")

    def test_invalid(self):
        assert not is_valid_grid_reference("SK12345")
        assert not is_valid_grid_reference("ZZ1234")
        assert not is_valid_grid_reference("hello")
        assert not is_valid_grid_reference("SK١٢٣٤٥٦")
        assert not is_valid_grid_reference("ß1234")
