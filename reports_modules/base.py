"""
Report Service Template (``reports_modules.base``).

Responsibility
--------------
Defines ``ReportConfig`` -- the parameters every report accepts -- and
``AbstractReportService``, the template every report follows:
validate -> fetch -> process -> format.

Architecture position
---------------------
**Modules layer** -- thin glue between kernel selectors, the pure engines
and the caller.  Subclasses implement ``fetch`` (selectors only),
``process`` (engines only) and ``format`` (rounding and layout only).

Invariants enforced
-------------------
* Read-only -- no report writes to the database.
* Validation runs before any query; a rejected config never reaches
  ``fetch``.
* Every run is logged with the report code bound into ``LogContext``.
* The report date defaults to the injected clock's today, never
  ``date.today()``.

Failure modes
-------------
* Invalid parameters  -> ``ReportValidationError`` with one message per
  field.
* Any failure inside fetch / process / format  -> logged and re-raised as
  ``ReportGenerationError`` naming the stage, chained to the cause.
"""

from __future__ import annotations

import dataclasses
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from reports_config import CompanyPreferences
from reports_engines import Ledger, Transaction, TransactionKind
from reports_kernel.domain.clock import Clock, SystemClock
from reports_kernel.domain.currency import CurrencyRegistry
from reports_kernel.domain.values import ONE
from reports_kernel.exceptions import ReportError, ReportGenerationError, ReportValidationError
from reports_kernel.logging_config import LogContext, get_logger
from reports_kernel.selectors import RateSelector, TransactionSelector
from reports_modules.models import CounterpartySnapshot

logger = get_logger("modules.reports")


@dataclass(frozen=True)
class ReportConfig:
    """
    Parameters common to every report.

    ``currency`` of None reports every counterparty converted to the home
    currency; a code restricts the report to counterparties billed in it,
    unconverted.  ``decimals`` of None uses the company price decimals.
    ``show_balance`` selects a running balance column on balances reports;
    when off the column shows each line's outstanding amount.
    """

    to_date: date | None = None
    from_date: date | None = None
    currency: str | None = None
    suppress_zeros: bool = False
    show_all: bool = False
    summary_only: bool = False
    show_balance: bool = True
    decimals: int | None = None
    counterparty_id: UUID | None = None
    comments: str = ""

    @property
    def converts_currency(self) -> bool:
        return self.currency is None


class AbstractReportService(ABC):
    """
    Base class for report services.

    Contract
    --------
    * ``generate`` is the only public entry point.
    * Subclasses set ``report_code`` / ``report_name`` and implement
      ``fetch``, ``process`` and ``format``.
    """

    report_code: str = "report"
    report_name: str = "Report"

    def __init__(
        self,
        session: Session,
        preferences: CompanyPreferences | None = None,
        clock: Clock | None = None,
    ):
        self._session = session
        self._preferences = preferences or CompanyPreferences()
        self._clock = clock or SystemClock()

    @property
    def preferences(self) -> CompanyPreferences:
        return self._preferences

    def generate(self, config: ReportConfig) -> Any:
        """Run validate -> fetch -> process -> format and return the formatted report."""
        config = self._resolve(config)

        with LogContext.bind(report_code=self.report_code):
            logger.info("report_started", extra={
                "report_name": self.report_name,
                "from_date": config.from_date,
                "to_date": config.to_date,
                "currency": config.currency,
            })

            errors = self.validate(config)
            if errors:
                logger.warning("report_validation_failed", extra={
                    "field_errors": errors,
                })
                raise ReportValidationError(self.report_code, errors)

            raw = self._run_stage("fetch", self.fetch, config)
            processed = self._run_stage("process", self.process, raw, config)
            result = self._run_stage("format", self.format, processed, config)

            logger.info("report_generated", extra={
                "report_name": self.report_name,
                "to_date": config.to_date,
            })
            return result

    def _resolve(self, config: ReportConfig) -> ReportConfig:
        changes: dict[str, Any] = {}
        if config.to_date is None:
            changes["to_date"] = self._clock.today()
        if config.decimals is None:
            changes["decimals"] = self._preferences.price_decimals
        if config.currency is not None:
            changes["currency"] = config.currency.upper().strip()
        return dataclasses.replace(config, **changes) if changes else config

    def _run_stage(self, stage: str, func: Callable[..., Any], *args: Any) -> Any:
        try:
            return func(*args)
        except ReportError:
            raise
        except Exception as exc:
            logger.exception("report_stage_failed", extra={
                "stage": stage,
                "report_name": self.report_name,
            })
            raise ReportGenerationError(self.report_code, stage, str(exc)) from exc

    def validate(self, config: ReportConfig) -> dict[str, str]:
        """
        Field errors for ``config``; empty when valid.

        Subclasses extend the returned dict with their own checks.
        """
        errors: dict[str, str] = {}
        if config.from_date is not None and config.from_date > config.to_date:
            errors["from_date"] = "must not be after to_date"
        if config.currency is not None and not CurrencyRegistry.is_valid(config.currency):
            errors["currency"] = f"unknown currency {config.currency}"
        if isinstance(config.decimals, bool) or not isinstance(config.decimals, int):
            errors["decimals"] = "must be an integer"
        elif not 0 <= config.decimals <= 6:
            errors["decimals"] = "must be between 0 and 6"
        return errors

    def report_currency(self, config: ReportConfig) -> str:
        """Currency the report's figures are expressed in."""
        return config.currency or self._preferences.home_currency

    @abstractmethod
    def fetch(self, config: ReportConfig) -> Any:
        """Query the data the report needs."""

    @abstractmethod
    def process(self, raw: Any, config: ReportConfig) -> Any:
        """Calculate report figures from fetched data."""

    @abstractmethod
    def format(self, processed: Any, config: ReportConfig) -> Any:
        """Round and lay out the calculated figures."""


class CounterpartyReportService(AbstractReportService):
    """
    Report over the counterparties of one ledger.

    Resolves which counterparties take part and the rate each one's
    amounts are multiplied by.
    """

    def __init__(
        self,
        session: Session,
        ledger: Ledger,
        preferences: CompanyPreferences | None = None,
        clock: Clock | None = None,
    ):
        super().__init__(session, preferences=preferences, clock=clock)
        self.ledger = ledger
        self._transactions = TransactionSelector(session)
        self._rates = RateSelector(session)

    def counterparty_rates(
        self, config: ReportConfig
    ) -> list[tuple[CounterpartySnapshot, Decimal]]:
        """
        Participating counterparties with their conversion rates.

        Without a currency filter every counterparty is converted to the
        home currency at the rate on ``to_date``; with one, counterparties
        billed in other currencies are skipped and the rest use rate 1.
        """
        accounts: list[tuple[CounterpartySnapshot, Decimal]] = []
        for cp in self._transactions.counterparties(self.ledger, config.counterparty_id):
            if not config.converts_currency and cp.currency != config.currency:
                continue
            if config.converts_currency:
                rate = self._rates.rate_from_home(
                    cp.currency, config.to_date, self._preferences.home_currency
                )
            else:
                rate = ONE
            snapshot = CounterpartySnapshot(
                counterparty_id=cp.id,
                code=cp.code,
                name=cp.display_name,
                currency=cp.currency,
            )
            accounts.append((snapshot, rate))
        return accounts


def invoice_due_date(transaction: Transaction) -> date | None:
    """Due date shown on printed lines; only invoices carry one."""
    if transaction.kind is TransactionKind.INVOICE:
        return transaction.due_date
    return None
