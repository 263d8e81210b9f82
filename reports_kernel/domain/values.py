"""
Values -- Immutable, self-validating value objects for report figures.

Responsibility:
    Currency codes and exchange rates, plus the Decimal coercion used by
    every engine that accepts amounts from callers.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Failure modes:
    - InvalidCurrencyError on an unknown ISO 4217 code.
    - ValueError on amounts or rates that are not numbers, or on a
      non-positive exchange rate.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from reports_kernel.domain.currency import CurrencyRegistry
from reports_kernel.exceptions import InvalidCurrencyError

ZERO = Decimal("0")
ONE = Decimal("1")


def to_decimal(value: Decimal | int | float | str, field: str = "amount") -> Decimal:
    """
    Coerce a numeric input to Decimal.

    Floats go through ``str`` so that ``0.1`` becomes ``Decimal("0.1")``
    rather than its binary expansion.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Invalid {field}: {value!r}")
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise ValueError(f"Invalid {field}: {value!r}") from e


def round_amount(amount: Decimal, decimals: int) -> Decimal:
    """Round half-up to ``decimals`` places, for display only."""
    return amount.quantize(Decimal(1).scaleb(-decimals), rounding=ROUND_HALF_UP)


@dataclass(frozen=True, slots=True)
class Currency:
    """
    ISO 4217 currency code value object.

    The code is uppercased and stripped on construction and must be known
    to CurrencyRegistry.
    """

    code: str

    def __post_init__(self) -> None:
        normalized = self.code.upper().strip() if self.code else ""
        if not CurrencyRegistry.is_valid(normalized):
            raise InvalidCurrencyError(self.code)
        object.__setattr__(self, "code", normalized)

    def __str__(self) -> str:
        return self.code


@dataclass(frozen=True, slots=True)
class ExchangeRate:
    """
    Exchange rate between two currencies.

    Represents: 1 unit of from_currency = rate units of to_currency.
    The rate is always a positive Decimal.
    """

    from_currency: Currency
    to_currency: Currency
    rate: Decimal

    def __post_init__(self) -> None:
        if isinstance(self.from_currency, str):
            object.__setattr__(self, "from_currency", Currency(self.from_currency))
        if isinstance(self.to_currency, str):
            object.__setattr__(self, "to_currency", Currency(self.to_currency))
        object.__setattr__(self, "rate", to_decimal(self.rate, "exchange rate"))
        if self.rate <= ZERO:
            raise ValueError(f"Exchange rate must be positive: {self.rate}")

    @classmethod
    def identity(cls, currency: str | Currency) -> ExchangeRate:
        """Rate of 1 from a currency to itself."""
        return cls(from_currency=currency, to_currency=currency, rate=ONE)

    def __str__(self) -> str:
        return f"{self.from_currency}/{self.to_currency} = {self.rate}"
