"""
app/converters/scale_converter.py

Conversion between major currency units (reais) and minor units (centavos),
plus the magnitude heuristic that guesses which of the two a bare number is in.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

MINOR_UNITS_PER_MAJOR = 100
DEFAULT_MINOR_UNIT_THRESHOLD = 10_000

# Below this a minor->major conversion assumes the value is already major.
_ALREADY_MAJOR_CEILING = 100


class Scale(str, Enum):
    MAJOR_UNIT = "major_unit"
    MINOR_UNIT = "minor_unit"


@dataclass(frozen=True)
class ScaleConversion:
    """
    Outcome of a heuristic conversion.

    ``low_confidence`` marks conversions where the heuristic overrode the
    requested direction.
    """

    value: int
    detected_scale: Scale
    low_confidence: bool = False


class ScaleConverter:
    """
    Converts monetary magnitudes between major and minor units.
    """

    def __init__(self, *, minor_unit_threshold: int = DEFAULT_MINOR_UNIT_THRESHOLD) -> None:
        self._threshold = max(1, minor_unit_threshold)

    @property
    def minor_unit_threshold(self) -> int:
        return self._threshold

    def detect_scale(self, value: Decimal | int | float) -> Scale:
        """
        Guess the scale of a bare number: a whole number written without
        decimal places and above the threshold is presumed to be minor units.

        A number written with decimal places (``15000,00``, ``12345,67``) is
        never a centavo count, so it is always major units.
        """

        number = _to_decimal(value)
        if number > self._threshold and _is_bare_integer(number):
            return Scale.MINOR_UNIT
        return Scale.MAJOR_UNIT

    def to_minor_units(self, value: Decimal | int | float) -> int:
        """
        Major -> minor, rounded half-up to the nearest integer.
        """

        number = _to_decimal(value) * MINOR_UNITS_PER_MAJOR
        return int(number.quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    def to_major_units(self, value: Decimal | int | float) -> int:
        """
        Minor -> major, rounded half-up to the nearest integer.

        This is the lossy display conversion; use :meth:`to_major_exact`
        wherever sub-unit precision must survive.
        """

        number = _to_decimal(value) / MINOR_UNITS_PER_MAJOR
        return int(number.quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    def to_major_exact(self, value: int) -> Decimal:
        """
        Minor -> major without rounding.
        """

        return Decimal(value) / MINOR_UNITS_PER_MAJOR

    def to_major_units_checked(self, value: Decimal | int | float) -> ScaleConversion:
        """
        Minor -> major, treating values under 100 as already in major units.

        The exporter uses ``low_confidence`` to log stored amounts under one
        real; the returned value is for callers converting numbers of unknown
        origin.
        """

        number = _to_decimal(value)
        if 0 < number < _ALREADY_MAJOR_CEILING:
            return ScaleConversion(
                value=int(number.quantize(Decimal("1"), rounding=ROUND_HALF_UP)),
                detected_scale=Scale.MAJOR_UNIT,
                low_confidence=True,
            )
        return ScaleConversion(
            value=self.to_major_units(number),
            detected_scale=Scale.MINOR_UNIT,
        )

    def normalize_to_minor(self, value: Decimal | int | float) -> ScaleConversion:
        """
        Interpret an imported number as minor units whatever scale it was
        entered in.

        Numbers above the threshold are taken as already being minor units,
        but only when the implied major amount drops back under the threshold;
        otherwise the magnitude is implausible either way and the number is
        kept as major units.
        """

        number = _to_decimal(value)
        if self.detect_scale(number) is Scale.MINOR_UNIT:
            implied_major = number / MINOR_UNITS_PER_MAJOR
            if implied_major <= self._threshold:
                return ScaleConversion(
                    value=int(number),
                    detected_scale=Scale.MINOR_UNIT,
                )
            return ScaleConversion(
                value=self.to_minor_units(number),
                detected_scale=Scale.MAJOR_UNIT,
                low_confidence=True,
            )
        return ScaleConversion(
            value=self.to_minor_units(number),
            detected_scale=Scale.MAJOR_UNIT,
        )


def _is_bare_integer(number: Decimal) -> bool:
    # Decimal keeps the written exponent: Decimal("15000.00") has exponent -2.
    return number.as_tuple().exponent >= 0


def _to_decimal(value: Decimal | int | float) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))
