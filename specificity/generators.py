"""
generators.py - Bounded Primitive and Composite Value Generators

Every bounded value produced by specificity flows through one operation,
`any_double`, which rescales a single distribution draw into [minimum, maximum).
The generators here derive all other primitive values from it:

- Fixed-width integers (native ranges taken from numpy's `iinfo`)
- Floats (float64 and float32 ranges)
- Characters, dates, times, durations, UUIDs and decimals
- Composite values: letters, digits, strings, bytes, sequences, choices

`PrimitiveGenerators` is a mixin. The host class supplies the random
source as `self._rng` and the type resolution entry point as `self.any`.

Example Usage:
-------------
    >>> from specificity import ObjectFactory, Distribution
    >>>
    >>> factory = ObjectFactory()
    >>> factory.any_int(0, 10)                       # in [0, 10)
    >>> factory.any_double(0.0, 1.0, Distribution.NEGATIVE_NORMAL)
    >>> factory.any_string(maximum_length=8)
"""

from __future__ import annotations

import math
import sys
import uuid
from datetime import date, datetime, time, timedelta
from decimal import ROUND_CEILING, Decimal
from typing import Any, Callable, List, Optional, Sequence, TYPE_CHECKING

import numpy as np

from .distributions import DistributionLike, resolve_distribution

if TYPE_CHECKING:
    from .factory import ObjectFactory


# =============================================================================
# NATIVE RANGES
# =============================================================================

DOUBLE_MIN = -sys.float_info.max
DOUBLE_MAX = sys.float_info.max
FLOAT_MIN = float(np.finfo(np.float32).min)
FLOAT_MAX = float(np.finfo(np.float32).max)

INT_MIN, INT_MAX = int(np.iinfo(np.int32).min), int(np.iinfo(np.int32).max)
UINT_MIN, UINT_MAX = int(np.iinfo(np.uint32).min), int(np.iinfo(np.uint32).max)
LONG_MIN, LONG_MAX = int(np.iinfo(np.int64).min), int(np.iinfo(np.int64).max)
ULONG_MIN, ULONG_MAX = int(np.iinfo(np.uint64).min), int(np.iinfo(np.uint64).max)
SHORT_MIN, SHORT_MAX = int(np.iinfo(np.int16).min), int(np.iinfo(np.int16).max)
USHORT_MIN, USHORT_MAX = int(np.iinfo(np.uint16).min), int(np.iinfo(np.uint16).max)
BYTE_MIN, BYTE_MAX = int(np.iinfo(np.uint8).min), int(np.iinfo(np.uint8).max)
SBYTE_MIN, SBYTE_MAX = int(np.iinfo(np.int8).min), int(np.iinfo(np.int8).max)

CHAR_MIN = "\x00"
CHAR_MAX = "\uffff"

DEFAULT_MAXIMUM_LENGTH = 20

_MICROSECOND = timedelta(microseconds=1)

# Digits are every decimal digit in the Basic Multilingual Plane; letters are
# restricted to Latin-1 so generated text stays mostly readable.
DIGITS = tuple(chr(c) for c in range(0x10000) if chr(c).isdecimal())
LETTERS = tuple(chr(c) for c in range(0x00, 0xFF) if chr(c).isalpha())


def _time_to_microseconds(value: time) -> int:
    return ((value.hour * 60 + value.minute) * 60 + value.second) * 1_000_000 + value.microsecond


def _microseconds_to_time(value: int) -> time:
    seconds, micro = divmod(value, 1_000_000)
    minutes, second = divmod(seconds, 60)
    hour, minute = divmod(minutes, 60)
    return time(hour, minute, second, micro)


# =============================================================================
# GENERATORS MIXIN
# =============================================================================

class PrimitiveGenerators:
    """
    Bounded generators layered on a single `any_double` operation.

    All ranges are half-open: `minimum` is inclusive, `maximum` exclusive.
    Every method accepts an optional `distribution` (a Distribution, a
    registered distribution name, or None for uniform).
    """

    _rng: np.random.Generator

    # -------------------------------------------------------------------------
    # Canonical operation
    # -------------------------------------------------------------------------

    def any_double(
        self,
        minimum: float = DOUBLE_MIN,
        maximum: float = DOUBLE_MAX,
        distribution: DistributionLike = None
    ) -> float:
        """
        Generate a pseudo-random float in [minimum, maximum).

        Parameters
        ----------
        minimum : float, default=-sys.float_info.max
            Inclusive lower bound.
        maximum : float, default=sys.float_info.max
            Exclusive upper bound.
        distribution : Distribution or str, optional
            Shape of the draw before rescaling. Uniform when omitted.

        Returns
        -------
        float
            The generated value.

        Raises
        ------
        ValueError
            If `minimum` is not strictly less than `maximum`.

        Notes
        -----
        The rescale is computed as ``minimum * (1 - s) + maximum * s`` so the
        full double range does not overflow to infinity.
        """
        minimum = float(minimum)
        maximum = float(maximum)
        if not minimum < maximum:
            raise ValueError(
                f"minimum ({minimum!r}) must be less than maximum ({maximum!r})"
            )

        sample = resolve_distribution(distribution).sample(self._rng)
        value = minimum * (1.0 - sample) + maximum * sample

        if value >= maximum:
            value = float(np.nextafter(maximum, minimum))
        return max(value, minimum)

    def _any_integral(
        self,
        minimum: int,
        maximum: int,
        distribution: DistributionLike = None
    ) -> int:
        """Integer in [minimum, maximum) derived from `any_double`."""
        minimum = int(minimum)
        maximum = int(maximum)
        if minimum >= maximum:
            raise ValueError(
                f"minimum ({minimum}) must be less than maximum ({maximum})"
            )

        value = math.floor(self.any_double(minimum, maximum, distribution))
        # Doubles cannot represent every 64-bit integer; clamp after rounding.
        return min(max(value, minimum), maximum - 1)

    # -------------------------------------------------------------------------
    # Numbers
    # -------------------------------------------------------------------------

    def any_float(
        self,
        minimum: float = FLOAT_MIN,
        maximum: float = FLOAT_MAX,
        distribution: DistributionLike = None
    ) -> np.float32:
        """Single precision float in [minimum, maximum)."""
        minimum = float(minimum)
        maximum = float(maximum)
        value = np.float32(self.any_double(minimum, maximum, distribution))

        # Rounding to single precision can leave the interval on either side,
        # by at most one step. Compare in double precision.
        if float(value) < minimum:
            value = np.nextafter(value, np.float32(maximum))
        if float(value) >= maximum:
            value = np.nextafter(value, np.float32(minimum))
        return value

    def any_integer(
        self,
        dtype: Any,
        minimum: Optional[int] = None,
        maximum: Optional[int] = None,
        distribution: DistributionLike = None
    ) -> np.integer:
        """
        Integer of a numpy integer dtype, bounded by the dtype's range.

        Parameters
        ----------
        dtype : numpy integer dtype or scalar type
            e.g. ``np.int16`` or ``"uint8"``.
        minimum, maximum : int, optional
            Bounds; default to the dtype's native range.
        """
        info = np.iinfo(dtype)
        minimum = int(info.min) if minimum is None else minimum
        maximum = int(info.max) if maximum is None else maximum
        return np.dtype(dtype).type(self._any_integral(minimum, maximum, distribution))

    def any_int(
        self,
        minimum: int = INT_MIN,
        maximum: int = INT_MAX,
        distribution: DistributionLike = None
    ) -> int:
        """Integer in [minimum, maximum), 32-bit signed range by default."""
        return self._any_integral(minimum, maximum, distribution)

    def any_uint(
        self,
        minimum: int = UINT_MIN,
        maximum: int = UINT_MAX,
        distribution: DistributionLike = None
    ) -> int:
        return self._any_integral(minimum, maximum, distribution)

    def any_long(
        self,
        minimum: int = LONG_MIN,
        maximum: int = LONG_MAX,
        distribution: DistributionLike = None
    ) -> int:
        return self._any_integral(minimum, maximum, distribution)

    def any_ulong(
        self,
        minimum: int = ULONG_MIN,
        maximum: int = ULONG_MAX,
        distribution: DistributionLike = None
    ) -> int:
        return self._any_integral(minimum, maximum, distribution)

    def any_short(
        self,
        minimum: int = SHORT_MIN,
        maximum: int = SHORT_MAX,
        distribution: DistributionLike = None
    ) -> int:
        return self._any_integral(minimum, maximum, distribution)

    def any_ushort(
        self,
        minimum: int = USHORT_MIN,
        maximum: int = USHORT_MAX,
        distribution: DistributionLike = None
    ) -> int:
        return self._any_integral(minimum, maximum, distribution)

    def any_byte(
        self,
        minimum: int = BYTE_MIN,
        maximum: int = BYTE_MAX,
        distribution: DistributionLike = None
    ) -> int:
        return self._any_integral(minimum, maximum, distribution)

    def any_sbyte(
        self,
        minimum: int = SBYTE_MIN,
        maximum: int = SBYTE_MAX,
        distribution: DistributionLike = None
    ) -> int:
        return self._any_integral(minimum, maximum, distribution)

    def any_bool(self) -> bool:
        return self.any_int() % 2 == 0

    def any_decimal(
        self,
        minimum: Any = -1_000_000,
        maximum: Any = 1_000_000,
        places: int = 2,
        distribution: DistributionLike = None
    ) -> Decimal:
        """Decimal with `places` fractional digits in [minimum, maximum)."""
        # Ceiling keeps the inclusive low and the exclusive high inside the range.
        low = Decimal(str(minimum)).scaleb(places).to_integral_value(rounding=ROUND_CEILING)
        high = Decimal(str(maximum)).scaleb(places).to_integral_value(rounding=ROUND_CEILING)
        return Decimal(self._any_integral(int(low), int(high), distribution)).scaleb(-places)

    # -------------------------------------------------------------------------
    # Characters and text
    # -------------------------------------------------------------------------

    def any_char(
        self,
        minimum: str = CHAR_MIN,
        maximum: str = CHAR_MAX,
        distribution: DistributionLike = None
    ) -> str:
        """Single character whose code point lies in [minimum, maximum)."""
        return chr(self._any_integral(ord(minimum), ord(maximum), distribution))

    def any_letter(self, distribution: DistributionLike = None) -> str:
        return LETTERS[self.any_int(0, len(LETTERS), distribution)]

    def any_digit(self, distribution: DistributionLike = None) -> str:
        return DIGITS[self.any_int(0, len(DIGITS), distribution)]

    def any_letter_or_digit(self, distribution: DistributionLike = None) -> str:
        index = self.any_int(0, len(LETTERS) + len(DIGITS), distribution)
        if index < len(LETTERS):
            return LETTERS[index]
        return DIGITS[index - len(LETTERS)]

    def any_string(
        self,
        minimum_length: int = 0,
        maximum_length: int = DEFAULT_MAXIMUM_LENGTH,
        character_factory: Optional[Callable[[], str]] = None
    ) -> str:
        """
        String whose length lies in [minimum_length, maximum_length).

        Parameters
        ----------
        minimum_length : int, default=0
        maximum_length : int, default=20
        character_factory : Callable[[], str], optional
            Produces each character. Letters and digits by default.
        """
        character_factory = character_factory or self.any_letter_or_digit
        length = self.any_int(minimum_length, maximum_length)
        return "".join(character_factory() for _ in range(length))

    def any_bytes(
        self,
        minimum_length: int = 0,
        maximum_length: int = DEFAULT_MAXIMUM_LENGTH
    ) -> bytes:
        length = self.any_int(minimum_length, maximum_length)
        return bytes(self._any_integral(0, 256) for _ in range(length))

    # -------------------------------------------------------------------------
    # Dates and times
    # -------------------------------------------------------------------------

    def any_datetime(
        self,
        minimum: Optional[datetime] = None,
        maximum: Optional[datetime] = None,
        distribution: DistributionLike = None
    ) -> datetime:
        """
        Datetime in [minimum, maximum) with microsecond resolution.

        Both bounds must be naive or both aware; they default to
        ``datetime.min`` and ``datetime.max``.
        """
        minimum = datetime.min if minimum is None else minimum
        maximum = datetime.max if maximum is None else maximum
        span = (maximum - minimum) // _MICROSECOND
        offset = self._any_integral(0, span, distribution)
        return minimum + timedelta(microseconds=offset)

    def any_date(
        self,
        minimum: Optional[date] = None,
        maximum: Optional[date] = None,
        distribution: DistributionLike = None
    ) -> date:
        minimum = date.min if minimum is None else minimum
        maximum = date.max if maximum is None else maximum
        ordinal = self._any_integral(minimum.toordinal(), maximum.toordinal(), distribution)
        return date.fromordinal(ordinal)

    def any_time(
        self,
        minimum: Optional[time] = None,
        maximum: Optional[time] = None,
        distribution: DistributionLike = None
    ) -> time:
        minimum = time.min if minimum is None else minimum
        maximum = time.max if maximum is None else maximum
        value = self._any_integral(
            _time_to_microseconds(minimum),
            _time_to_microseconds(maximum),
            distribution,
        )
        return _microseconds_to_time(value)

    def any_timedelta(
        self,
        minimum: Optional[timedelta] = None,
        maximum: Optional[timedelta] = None,
        distribution: DistributionLike = None
    ) -> timedelta:
        minimum = timedelta.min if minimum is None else minimum
        maximum = timedelta.max if maximum is None else maximum
        value = self._any_integral(
            minimum // _MICROSECOND,
            maximum // _MICROSECOND,
            distribution,
        )
        return timedelta(microseconds=value)

    # -------------------------------------------------------------------------
    # Identifiers and composites
    # -------------------------------------------------------------------------

    def any_uuid(self) -> uuid.UUID:
        """Version 4 UUID built from generated bytes, so it follows the seed."""
        raw = bytes(self._any_integral(0, 256) for _ in range(16))
        return uuid.UUID(bytes=raw, version=4)

    def any_choice(
        self,
        options: Sequence[Any],
        distribution: DistributionLike = None
    ) -> Any:
        """One element of `options`."""
        options = list(options)
        if not options:
            raise ValueError("options must not be empty")
        return options[self.any_int(0, len(options), distribution)]

    def any_sequence(
        self,
        item_type: Any,
        minimum_length: int = 0,
        maximum_length: int = DEFAULT_MAXIMUM_LENGTH,
        item_factory: Optional[Callable[["ObjectFactory"], Any]] = None
    ) -> List[Any]:
        """
        List of generated items.

        Parameters
        ----------
        item_type : type
            Type requested for each item via `any`.
        minimum_length : int, default=0
        maximum_length : int, default=20
            Length bounds, half-open.
        item_factory : Callable[[ObjectFactory], Any], optional
            Produces each item instead of `any(item_type)`.
        """
        if item_factory is None:
            item_factory = lambda factory: factory.any(item_type)  # noqa: E731
        length = self.any_int(minimum_length, maximum_length)
        return [item_factory(self) for _ in range(length)]
