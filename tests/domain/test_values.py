"""Tests for value objects, the currency registry and the clock."""

from datetime import date
from decimal import Decimal

import pytest

from reports_kernel.domain.clock import DeterministicClock, SystemClock
from reports_kernel.domain.currency import CurrencyRegistry
from reports_kernel.domain.values import (
    Currency,
    ExchangeRate,
    round_amount,
    to_decimal,
)
from reports_kernel.exceptions import InvalidCurrencyError


class TestToDecimal:

    def test_float_goes_through_str(self):
        assert to_decimal(0.1) == Decimal("0.1")

    def test_int_and_str(self):
        assert to_decimal(5) == Decimal("5")
        assert to_decimal("2.50") == Decimal("2.50")

    def test_bool_rejected(self):
        with pytest.raises(ValueError):
            to_decimal(True)

    def test_garbage_rejected_with_field_name(self):
        with pytest.raises(ValueError, match="rate"):
            to_decimal("x", "rate")


class TestRoundAmount:

    def test_half_up(self):
        assert round_amount(Decimal("2.345"), 2) == Decimal("2.35")

    def test_zero_places(self):
        assert round_amount(Decimal("2.5"), 0) == Decimal("3")

    def test_negative_half_up_away_from_zero(self):
        assert round_amount(Decimal("-2.345"), 2) == Decimal("-2.35")


class TestCurrency:

    def test_normalized(self):
        assert Currency(" usd ").code == "USD"

    def test_unknown_rejected(self):
        with pytest.raises(InvalidCurrencyError) as exc_info:
            Currency("XXX")
        assert exc_info.value.code == "INVALID_CURRENCY"

    def test_registry(self):
        assert CurrencyRegistry.is_valid("EUR")
        assert CurrencyRegistry.is_valid("JPY")
        assert not CurrencyRegistry.is_valid("eur")
        assert not CurrencyRegistry.is_valid("XXX")


class TestExchangeRate:

    def test_codes_coerced_to_currency(self):
        rate = ExchangeRate(from_currency="eur", to_currency="USD", rate="1.1")
        assert rate.from_currency == Currency("EUR")
        assert rate.rate == Decimal("1.1")

    def test_identity(self):
        rate = ExchangeRate.identity("USD")
        assert rate.rate == Decimal("1")
        assert rate.from_currency == rate.to_currency

    def test_non_positive_rejected(self):
        with pytest.raises(ValueError):
            ExchangeRate(from_currency="EUR", to_currency="USD", rate=Decimal("0"))

    def test_str(self):
        rate = ExchangeRate(from_currency="EUR", to_currency="USD", rate=Decimal("1.1"))
        assert str(rate) == "EUR/USD = 1.1"


class TestClock:

    def test_deterministic_today(self):
        clock = DeterministicClock(date(2024, 3, 1))
        assert clock.today() == date(2024, 3, 1)
        assert clock.now() == clock.now()

    def test_advance_and_set(self):
        clock = DeterministicClock(date(2024, 3, 1))
        clock.advance(2)
        assert clock.today() == date(2024, 3, 3)
        clock.set_date(date(2025, 1, 1))
        assert clock.today() == date(2025, 1, 1)

    def test_system_clock_is_aware(self):
        assert SystemClock().now().tzinfo is not None
