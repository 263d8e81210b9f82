"""
Pytest fixtures for the reports test suite.

Provides:
- Structured logging configured once per session, with LogContext cleared
  between tests
- ``captured_logs`` for asserting on emitted JSON log records
- An in-memory SQLite session built through the kernel engine helpers
- Seed helpers for counterparties, transactions and exchange rates
"""

import json
import logging
from datetime import date
from decimal import Decimal
from io import StringIO

import pytest

from reports_config import CompanyPreferences
from reports_kernel.db.engine import (
    create_tables,
    drop_tables,
    get_session,
    init_engine_from_url,
    reset_engine,
)
from reports_kernel.domain.clock import DeterministicClock
from reports_kernel.domain.transactions import Ledger, TransactionKind
from reports_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from reports_kernel.models import Counterparty, ExchangeRateRecord, LedgerTransaction


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture reports_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            ...
            logs = captured_logs()
            assert any(r["message"] == "report_generated" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("reports_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Database fixtures
# =============================================================================


@pytest.fixture
def session():
    """Fresh in-memory SQLite database with every report table created."""
    init_engine_from_url("sqlite://")
    create_tables()
    db_session = get_session()
    yield db_session
    db_session.close()
    drop_tables()
    reset_engine()


@pytest.fixture
def clock():
    return DeterministicClock(date(2024, 3, 1))


@pytest.fixture
def preferences():
    return CompanyPreferences(company_name="Test Co", home_currency="USD", past_due_days=30)


# =============================================================================
# Seed helpers
# =============================================================================


@pytest.fixture
def make_counterparty(session):
    """Factory that persists a counterparty and returns it."""

    def _make(
        code: str = "C001",
        name: str = "Acme Ltd",
        ledger: Ledger = Ledger.CUSTOMER,
        currency: str = "USD",
        inactive: bool = False,
    ) -> Counterparty:
        cp = Counterparty(
            ledger=ledger.value,
            code=code,
            name=name,
            currency=currency,
            inactive=inactive,
        )
        session.add(cp)
        session.flush()
        return cp

    return _make


@pytest.fixture
def post_transaction(session):
    """Factory that persists a ledger transaction against a counterparty."""

    def _post(
        counterparty: Counterparty,
        kind: TransactionKind,
        transaction_date: date,
        amount: Decimal | str,
        due_date: date | None = None,
        allocated: Decimal | str = "0",
        reference: str = "",
        tax: Decimal | str = "0",
        voided: bool = False,
        prepayment: Decimal | str | None = None,
    ) -> LedgerTransaction:
        row = LedgerTransaction(
            counterparty_id=counterparty.id,
            kind=kind.value,
            reference=reference or f"{kind.value}-{transaction_date.isoformat()}",
            transaction_date=transaction_date,
            due_date=due_date,
            amount=Decimal(amount),
            tax_amount=Decimal(tax),
            allocated_amount=Decimal(allocated),
            prepayment_amount=Decimal(prepayment) if prepayment is not None else None,
            voided=voided,
        )
        session.add(row)
        session.flush()
        return row

    return _post


@pytest.fixture
def add_rate(session):
    """Factory that persists a home-currency exchange rate."""

    def _add(currency: str, rate_date: date, rate: Decimal | str) -> ExchangeRateRecord:
        record = ExchangeRateRecord(currency=currency, rate_date=rate_date, rate=Decimal(rate))
        session.add(record)
        session.flush()
        return record

    return _add
