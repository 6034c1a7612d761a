"""Locale-aware money parsing and formatting.

Amounts arrive from forms and spreadsheets in the local notation: comma as
decimal separator, dot (or spaces) as thousands separator, sometimes with a
currency code attached. This module turns them into exact Decimals and
renders Decimals back for display.

Rendering uses babel in the configured locale; the locale's group and
decimal symbols are then replaced with the configured separators so that
``normalize(format(x)) == x``.

Example:
    >>> money = MoneyFormat()
    >>> money.normalize("15.000,00")
    Decimal('15000.00')
    >>> money.format(Decimal("15000"))
    '15.000,00 AOA'
    >>> money.normalize("abc")
    Decimal('0')
"""

import logging
import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from babel.numbers import (
    format_decimal as babel_format_decimal,
)
from babel.numbers import (
    get_currency_symbol as babel_get_currency_symbol,
)
from babel.numbers import (
    get_decimal_symbol,
    get_group_symbol,
    get_minus_sign_symbol,
)

from condoledger.services.config import Settings
from condoledger.services.errors import InvalidAmountError

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")

MoneyInput = str | int | float | Decimal | None

# Total digits of the Numeric(14, 2) money columns
AMOUNT_PRECISION = 14


@dataclass(frozen=True)
class MoneyFormat:
    """Parse and render monetary amounts for one locale/currency."""

    decimal_separator: str = ","
    thousands_separator: str = "."
    currency_code: str = "AOA"
    fraction_digits: int = 2
    locale: str = "pt_PT"

    @classmethod
    def from_settings(cls, settings: Settings) -> "MoneyFormat":
        """Build the formatter from application settings."""
        return cls(
            decimal_separator=settings.decimal_separator,
            thousands_separator=settings.thousands_separator,
            currency_code=settings.currency_code,
            fraction_digits=settings.fraction_digits,
            locale=settings.locale,
        )

    def normalize(self, value: MoneyInput) -> Decimal:
        """
        Parse a monetary value, falling back to zero.

        Numbers are coerced to Decimal unchanged in value. Strings are
        cleaned of whitespace, thousands separators and currency markers
        before parsing.

        Args:
            value: Raw amount (e.g., "15 000,00", "1.250,5 AOA", 300, 12.5)

        Returns:
            Decimal amount, or Decimal('0') when the input is empty or
            cannot be parsed
        """
        parsed = self._parse(value)
        if parsed is None:
            if value not in (None, ""):
                logger.warning(f"Could not parse amount {value!r}; using 0")
            return Decimal("0")
        return parsed

    def parse_strict(self, value: MoneyInput) -> Decimal:
        """Parse a monetary value, rejecting empty or malformed input.

        Raises:
            InvalidAmountError: If the value is empty or cannot be parsed
        """
        parsed = self._parse(value)
        if parsed is None:
            raise InvalidAmountError(f"Cannot parse amount {value!r}")
        return parsed

    def parse_positive(self, value: MoneyInput, what: str = "Amount") -> Decimal:
        """Parse strictly, round to the configured digits and require > 0.

        Raises:
            InvalidAmountError: If the value is malformed, zero, negative
                or too large to store
        """
        amount = self.quantize(self.parse_strict(value))
        if amount <= 0:
            raise InvalidAmountError(f"{what} must be positive, got {value!r}")
        return amount

    @property
    def max_amount(self) -> Decimal:
        """Largest magnitude a money column can hold."""
        step = Decimal(1).scaleb(-self.fraction_digits)
        return Decimal(10) ** (AMOUNT_PRECISION - self.fraction_digits) - step

    def quantize(self, amount: Decimal) -> Decimal:
        """Round half-up to the configured number of fractional digits.

        Raises:
            InvalidAmountError: If the rounded amount does not fit a money column
        """
        try:
            rounded = amount.quantize(
                Decimal(1).scaleb(-self.fraction_digits), rounding=ROUND_HALF_UP
            )
        except InvalidOperation as e:
            raise InvalidAmountError(f"Amount {amount} cannot be rounded") from e
        if abs(rounded) > self.max_amount:
            raise InvalidAmountError(f"Amount {amount} exceeds {self.max_amount}")
        return rounded

    def format(self, amount: MoneyInput) -> str:
        """Render an amount for display.

        Args:
            amount: Decimal (or anything ``normalize`` accepts)

        Returns:
            Amount with exactly ``fraction_digits`` decimals and the currency
            code suffix, e.g. '15.000,00 AOA'

        Raises:
            InvalidAmountError: If the amount does not fit a money column
        """
        value = amount if isinstance(amount, Decimal) else self.normalize(amount)
        value = self.quantize(value)
        pattern = "#,##0" + ("." + "0" * self.fraction_digits if self.fraction_digits else "")
        rendered = babel_format_decimal(
            value, format=pattern, locale=self.locale, decimal_quantization=True
        )
        return f"{self._swap_symbols(rendered)} {self.currency_code}"

    def _parse(self, value: MoneyInput) -> Decimal | None:
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, Decimal):
            return value if value.is_finite() else None
        if isinstance(value, int):
            return Decimal(value)
        if isinstance(value, float):
            parsed = Decimal(str(value))
            return parsed if parsed.is_finite() else None
        if not isinstance(value, str):
            return None

        cleaned = self._strip_currency(value)
        cleaned = _WHITESPACE.sub("", cleaned)
        if not cleaned:
            return None
        cleaned = cleaned.replace(self.thousands_separator, "")
        cleaned = cleaned.replace(self.decimal_separator, ".").replace("−", "-")
        if "e" in cleaned.lower():
            return None
        try:
            parsed = Decimal(cleaned)
        except (ValueError, InvalidOperation):
            return None
        return parsed if parsed.is_finite() else None

    def _strip_currency(self, value: str) -> str:
        text = value.strip()
        markers = {self.currency_code, self.currency_code.lower(), self._currency_symbol()}
        for marker in sorted(markers, key=len, reverse=True):
            if marker and text.endswith(marker):
                text = text[: -len(marker)]
            elif marker and text.startswith(marker):
                text = text[len(marker):]
        return text

    def _currency_symbol(self) -> str:
        return babel_get_currency_symbol(self.currency_code, locale=self.locale)

    def _swap_symbols(self, rendered: str) -> str:
        replacements = {
            get_group_symbol(self.locale): self.thousands_separator,
            get_decimal_symbol(self.locale): self.decimal_separator,
            get_minus_sign_symbol(self.locale): "-",
        }
        pattern = re.compile("|".join(re.escape(symbol) for symbol in replacements))
        return pattern.sub(lambda match: replacements[match.group(0)], rendered)


__all__ = ["AMOUNT_PRECISION", "MoneyFormat", "MoneyInput"]
