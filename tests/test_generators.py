"""
test_generators.py - Tests for Primitive Value Generators

Tests cover:
- Bounds of doubles and integers for every distribution
- Argument validation
- Native ranges of the sized integer helpers and numpy scalars
- Text, temporal, identifier and composite generators
"""

import math
import uuid
from datetime import date, datetime, time, timedelta
from decimal import Decimal

import pytest
import numpy as np

from specificity import Distribution, ObjectFactory
from specificity.generators import (
    BYTE_MAX,
    DIGITS,
    FLOAT_MAX,
    FLOAT_MIN,
    LETTERS,
    LONG_MAX,
    LONG_MIN,
    SBYTE_MIN,
    ULONG_MAX,
)

from model_types import Widget


RUNS = 1000

class AlwaysZero(Distribution):
    """Every draw lands on the lower bound."""

    name = "always_zero"

    def sample(self, rng):
        return 0.0


DISTRIBUTIONS = [
    None,
    "uniform",
    Distribution.POSITIVE_NORMAL,
    Distribution.NEGATIVE_NORMAL,
    Distribution.INVERTED_NORMAL,
]


class TestAnyDouble:
    """Tests for the canonical bounded draw."""

    @pytest.mark.parametrize("distribution", DISTRIBUTIONS, ids=repr)
    def test_within_bounds(self, factory, distribution):
        values = [factory.any_double(-2.5, 7.5, distribution) for _ in range(RUNS)]

        assert min(values) >= -2.5
        assert max(values) < 7.5

    def test_full_range_is_finite(self, factory):
        for _ in range(RUNS):
            assert math.isfinite(factory.any_double())

    def test_tiny_interval(self, factory):
        value = factory.any_double(1.0, float(np.nextafter(1.0, 2.0)))
        assert value == 1.0

    @pytest.mark.parametrize("minimum,maximum", [(5.0, 5.0), (6.0, 5.0)])
    def test_invalid_bounds_raise(self, factory, minimum, maximum):
        with pytest.raises(ValueError, match="must be less than"):
            factory.any_double(minimum, maximum)

    def test_unknown_distribution_name_raises(self, factory):
        with pytest.raises(KeyError):
            factory.any_double(0.0, 1.0, "triangular")


class TestIntegers:
    """Tests for integer helpers derived from any_double."""

    def test_small_range_covers_every_value(self, factory):
        values = [factory.any_int(0, 10) for _ in range(RUNS)]

        assert all(isinstance(v, int) for v in values)
        assert set(values) == set(range(10))

    def test_negative_range(self, factory):
        values = [factory.any_int(-10, 0) for _ in range(RUNS)]

        assert min(values) >= -10
        assert max(values) <= -1

    def test_single_value_range(self, factory):
        assert factory.any_int(3, 4) == 3

    def test_empty_range_raises(self, factory):
        with pytest.raises(ValueError):
            factory.any_int(4, 4)

    def test_long_range_stays_inside(self, factory):
        for _ in range(RUNS):
            value = factory.any_long()
            assert LONG_MIN <= value < LONG_MAX

    def test_ulong_range_stays_inside(self, factory):
        for _ in range(RUNS):
            value = factory.any_ulong(distribution=Distribution.NEGATIVE_NORMAL)
            assert 0 <= value < ULONG_MAX

    def test_byte_and_sbyte(self, factory):
        for _ in range(RUNS):
            assert 0 <= factory.any_byte() < BYTE_MAX
            assert SBYTE_MIN <= factory.any_sbyte() < 127

    @pytest.mark.parametrize("dtype", [np.int8, np.int16, np.uint32, np.int64, np.uint64])
    def test_numpy_dtype(self, factory, dtype):
        info = np.iinfo(dtype)
        for _ in range(100):
            value = factory.any_integer(dtype)
            assert isinstance(value, dtype)
            assert info.min <= value < info.max

    def test_numpy_dtype_with_bounds(self, factory):
        value = factory.any_integer("uint8", 10, 20)

        assert isinstance(value, np.uint8)
        assert 10 <= value < 20

    def test_any_float_is_single_precision(self, factory):
        for _ in range(100):
            value = factory.any_float()
            assert isinstance(value, np.float32)
            assert FLOAT_MIN <= value < FLOAT_MAX

    def test_any_bool_produces_both(self, factory):
        values = {factory.any_bool() for _ in range(100)}
        assert values == {True, False}

    def test_any_decimal(self, factory):
        for _ in range(100):
            value = factory.any_decimal(Decimal("-5"), Decimal("5"))
            assert isinstance(value, Decimal)
            assert Decimal("-5") <= value < Decimal("5")
            assert value.as_tuple().exponent == -2


    def test_any_float_rounding_stays_inside(self, factory):
        """Single precision rounding must not leave a narrow interval."""
        for _ in range(2000):
            value = factory.any_float(0.7, 0.7000001)
            assert 0.7 <= float(value) < 0.7000001

    def test_any_float_lower_bound_draw(self, factory):
        value = factory.any_float(0.7, 0.8, AlwaysZero())

        assert 0.7 <= float(value) < 0.8

    def test_any_decimal_minimum_finer_than_places(self, factory):
        value = factory.any_decimal(Decimal("0.005"), 1, places=2, distribution=AlwaysZero())

        assert value == Decimal("0.01")

    def test_any_decimal_bounds_finer_than_places(self, factory):
        for _ in range(RUNS):
            value = factory.any_decimal(Decimal("0.005"), Decimal("0.995"))
            assert Decimal("0.005") <= value < Decimal("0.995")


class TestText:
    """Tests for characters and strings."""

    def test_any_char_bounds(self, factory):
        for _ in range(RUNS):
            value = factory.any_char("a", "e")
            assert value in "abcd"

    def test_default_char_in_basic_plane(self, factory):
        for _ in range(100):
            assert 0 <= ord(factory.any_char()) < 0xFFFF

    def test_letters_and_digits(self, factory):
        for _ in range(100):
            assert factory.any_letter() in LETTERS
            assert factory.any_digit().isdecimal()
            assert factory.any_letter_or_digit() in LETTERS + DIGITS

    def test_character_tables(self):
        assert "a" in LETTERS and "Z" in LETTERS
        assert "0" in DIGITS and "9" in DIGITS
        assert all(c.isalpha() for c in LETTERS)

    def test_string_length_bounds(self, factory):
        for _ in range(100):
            value = factory.any_string(3, 8)
            assert 3 <= len(value) < 8
            assert value.isalnum()

    def test_string_custom_characters(self, factory):
        value = factory.any_string(5, 6, character_factory=lambda: "x")
        assert value == "xxxxx"

    def test_any_bytes(self, factory):
        value = factory.any_bytes(4, 5)

        assert isinstance(value, bytes)
        assert len(value) == 4


class TestTemporal:
    """Tests for dates, times and durations."""

    def test_datetime_bounds(self, factory):
        low = datetime(2020, 1, 1)
        high = datetime(2020, 1, 2)
        for _ in range(100):
            assert low <= factory.any_datetime(low, high) < high

    def test_default_datetime_is_valid(self, factory):
        for _ in range(100):
            assert isinstance(factory.any_datetime(), datetime)

    def test_date_bounds(self, factory):
        low = date(1999, 12, 1)
        high = date(2000, 1, 1)
        for _ in range(100):
            assert low <= factory.any_date(low, high) < high

    def test_time_bounds(self, factory):
        low = time(9, 0)
        high = time(17, 30)
        for _ in range(100):
            assert low <= factory.any_time(low, high) < high

    def test_default_timedelta_is_valid(self, factory):
        for _ in range(100):
            assert isinstance(factory.any_timedelta(), timedelta)

    def test_timedelta_bounds(self, factory):
        value = factory.any_timedelta(timedelta(seconds=1), timedelta(seconds=2))
        assert timedelta(seconds=1) <= value < timedelta(seconds=2)


class TestIdentifiersAndComposites:

    def test_uuid_version_4(self, factory):
        value = factory.any_uuid()

        assert isinstance(value, uuid.UUID)
        assert value.version == 4

    def test_uuid_follows_seed(self, registry):
        first = ObjectFactory(seed=99, registry=registry).any_uuid()
        second = ObjectFactory(seed=99, registry=registry).any_uuid()

        assert first == second

    def test_any_choice(self, factory):
        options = ["red", "green", "blue"]
        values = {factory.any_choice(options) for _ in range(100)}

        assert values == set(options)

    def test_any_choice_empty_raises(self, factory):
        with pytest.raises(ValueError, match="must not be empty"):
            factory.any_choice([])

    def test_any_sequence_of_type(self, factory):
        values = factory.any_sequence(int, 1, 5)

        assert 1 <= len(values) < 5
        assert all(isinstance(v, int) for v in values)

    def test_any_sequence_of_synthesized_type(self, factory):
        values = factory.any_sequence(Widget, 2, 3)

        assert len(values) == 2
        assert all(isinstance(v, Widget) for v in values)

    def test_any_sequence_item_factory(self, factory):
        values = factory.any_sequence(int, 3, 4, item_factory=lambda f: f.any_int(0, 2))

        assert len(values) == 3
        assert set(values) <= {0, 1}
