"""
Module: reports_kernel.models.exchange_rate
Responsibility: Dated conversion factors from a foreign currency into the
    company's home currency.  Reports look up the most recent rate dated on
    or before the report date.

Invariants enforced:
    - One rate per (currency, rate_date).
    - rate is a Decimal: 1 unit of ``currency`` = ``rate`` units of home
      currency.
"""

from datetime import date
from decimal import Decimal

from sqlalchemy import Index, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from reports_kernel.db.base import Base


class ExchangeRateRecord(Base):
    """Stored home-currency rate for one currency on one date."""

    __tablename__ = "exchange_rates"

    __table_args__ = (
        UniqueConstraint("currency", "rate_date", name="uq_exchange_rates_currency_date"),
        Index("idx_exchange_rates_lookup", "currency", "rate_date"),
    )

    currency: Mapped[str] = mapped_column(String(3), nullable=False)
    rate_date: Mapped[date] = mapped_column(nullable=False)
    rate: Mapped[Decimal] = mapped_column(Numeric(38, 18), nullable=False)

    def __repr__(self) -> str:
        return f"<ExchangeRateRecord {self.currency} {self.rate_date}: {self.rate}>"
