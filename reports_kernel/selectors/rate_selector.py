"""
Module: reports_kernel.selectors.rate_selector
Responsibility: Resolve the multiplier that converts an account's currency
    into the home currency for a report date.
Architecture position: Kernel > Selectors.  This is the only place rates are
    read; the aging engine receives the resolved Decimal.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy import select

from reports_kernel.domain.values import Currency, ExchangeRate
from reports_kernel.exceptions import ExchangeRateNotFoundError
from reports_kernel.logging_config import get_logger
from reports_kernel.models.exchange_rate import ExchangeRateRecord
from reports_kernel.selectors.base import BaseSelector

logger = get_logger("selectors.rates")


class RateSelector(BaseSelector):
    """Looks up stored home-currency exchange rates."""

    def exchange_rate(self, currency: str, as_of: date, home_currency: str) -> ExchangeRate:
        """
        Rate from ``currency`` into ``home_currency`` effective on ``as_of``.

        The home currency converts at 1.  Otherwise the most recent rate
        dated on or before ``as_of`` is used.

        Raises:
            InvalidCurrencyError: unknown currency code.
            ExchangeRateNotFoundError: no stored rate on or before ``as_of``.
        """
        source = Currency(currency)
        home = Currency(home_currency)
        if source == home:
            return ExchangeRate.identity(home)

        stmt = (
            select(ExchangeRateRecord)
            .where(
                ExchangeRateRecord.currency == source.code,
                ExchangeRateRecord.rate_date <= as_of,
            )
            .order_by(ExchangeRateRecord.rate_date.desc())
            .limit(1)
        )
        record = self.session.scalars(stmt).first()
        if record is None:
            logger.warning(
                "exchange_rate_not_found",
                extra={"currency": source.code, "as_of": as_of.isoformat()},
            )
            raise ExchangeRateNotFoundError(source.code, as_of)

        logger.debug(
            "exchange_rate_resolved",
            extra={
                "currency": source.code,
                "as_of": as_of.isoformat(),
                "rate_date": record.rate_date.isoformat(),
                "rate": str(record.rate),
            },
        )
        return ExchangeRate(from_currency=source, to_currency=home, rate=record.rate)

    def rate_from_home(self, currency: str, as_of: date, home_currency: str) -> Decimal:
        """The bare multiplier applied to amounts in ``currency``."""
        return self.exchange_rate(currency, as_of, home_currency).rate
