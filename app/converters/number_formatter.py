"""
app/converters/number_formatter.py

Locale-tolerant parsing and formatting of decimal numbers found in CSV cells.

Both the Brazilian (``1.234,56``) and the international (``1,234.56``)
conventions are accepted. When both separators appear, the rightmost one is
the decimal point. A lone separator followed by more than two digits (commas)
or by exactly three digits (dots) is read as a thousands separator.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

_CURRENCY_PATTERN = re.compile(r"(R\$|US\$|\$|€|£)", re.IGNORECASE)
_PLAIN_NUMBER = re.compile(r"^[+-]?\d+(\.\d+)?$")
_WHITESPACE = re.compile(r"\s+")

# Integer digits accepted in a cell. Keeps centavo amounts inside BIGINT and
# conversions inside the default 28-digit Decimal context.
MAX_INTEGER_DIGITS = 15

ZERO = Decimal("0")


@dataclass(frozen=True)
class ParsedNumber:
    """
    Result of parsing one text cell.

    ``error`` is set when the text was empty or not numeric; ``value`` is then 0.
    """

    value: Decimal
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def is_integral(self) -> bool:
        return self.value == self.value.to_integral_value()


class NumberFormatter:
    """
    Parses and formats decimal numbers.
    """

    def parse(self, text: str | None) -> ParsedNumber:
        """
        Parse one cell into a Decimal, flagging empty or non-numeric input.
        """

        if text is None or not str(text).strip():
            return ParsedNumber(value=ZERO, error="Value is empty.")

        cleaned = _CURRENCY_PATTERN.sub("", str(text))
        cleaned = _WHITESPACE.sub("", cleaned)
        normalized = self._normalize_separators(cleaned)

        if not _PLAIN_NUMBER.match(normalized):
            return ParsedNumber(value=ZERO, error="Value is not a valid number.")

        integer_digits = normalized.lstrip("+-").split(".", 1)[0].lstrip("0")
        if len(integer_digits) > MAX_INTEGER_DIGITS:
            return ParsedNumber(value=ZERO, error="Value is too large.")

        try:
            return ParsedNumber(value=Decimal(normalized))
        except InvalidOperation:
            return ParsedNumber(value=ZERO, error="Value is not a valid number.")

    def format(
        self,
        value: Decimal | int | float,
        *,
        force_integer: bool = False,
        keep_decimals: bool = False,
        decimal_places: int = 2,
        decimal_separator: str = ",",
    ) -> str:
        """
        Render a number without thousands separators.

        ``force_integer`` rounds half-up and never emits a decimal separator.
        Otherwise integral values are written without decimals, unless
        ``keep_decimals`` is set, and the rest with exactly ``decimal_places``
        digits.
        """

        number = value if isinstance(value, Decimal) else Decimal(str(value))

        if force_integer:
            return str(number.quantize(Decimal("1"), rounding=ROUND_HALF_UP))

        if not keep_decimals and number == number.to_integral_value():
            return str(number.quantize(Decimal("1")))

        exponent = Decimal(1).scaleb(-max(0, decimal_places))
        rendered = str(number.quantize(exponent, rounding=ROUND_HALF_UP))
        return rendered.replace(".", decimal_separator)

    @staticmethod
    def _normalize_separators(text: str) -> str:
        last_comma = text.rfind(",")
        last_dot = text.rfind(".")

        if last_comma >= 0 and last_dot >= 0:
            if last_comma > last_dot:
                return text.replace(".", "").replace(",", ".")
            return text.replace(",", "")

        if last_comma >= 0:
            digits_after = len(text) - last_comma - 1
            if digits_after > 2:
                return text.replace(",", "")
            head = text[:last_comma].replace(",", "")
            return f"{head}.{text[last_comma + 1:]}"

        if last_dot >= 0:
            digits_after = len(text) - last_dot - 1
            if text.count(".") > 1 or digits_after == 3:
                return text.replace(".", "")

        return text
