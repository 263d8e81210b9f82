"""
Counterparty Statements (``reports_modules.statements``).

Responsibility
--------------
One statement per counterparty as of the report date: a line for each
open item with its charges, credits, allocated and outstanding amounts,
and an aging footer splitting the balance into current and overdue
buckets.

Architecture position
---------------------
**Modules layer**.  Fetch uses ``TransactionSelector`` / ``RateSelector``;
process reuses ``running_balance`` for the lines and ``AgingCalculator``
for the footer, so a statement footer always matches the aged analysis
row of the same counterparty.

Invariants enforced
-------------------
* Counterparties with nothing to print are left out.
* Fully allocated items appear only with ``show_all``.
* Footer buckets come from the company preferences.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.orm import Session

from reports_config import CompanyPreferences
from reports_engines import (
    AgingCalculator,
    AgingResult,
    Ledger,
    RunningBalanceLine,
    running_balance,
)
from reports_kernel.domain.clock import Clock
from reports_kernel.domain.values import ZERO, round_amount
from reports_kernel.logging_config import LogContext, get_logger
from reports_modules.aged_analysis import rounded_buckets
from reports_modules.base import CounterpartyReportService, ReportConfig, invoice_due_date
from reports_modules.models import (
    CounterpartyStatement,
    FetchedAccount,
    StatementBatch,
    StatementLineRow,
)

logger = get_logger("modules.statements")

HEADERS = (
    "Trans Type", "#", "Date", "Due Date", "Charges", "Credits", "Allocated", "Outstanding",
)


@dataclass(frozen=True)
class StatementData:
    account: FetchedAccount
    lines: tuple[RunningBalanceLine, ...]
    aging: AgingResult


class StatementReport(CounterpartyReportService):
    """
    Open-item statements for one ledger's counterparties.

    Usage::

        report = StatementReport(session, Ledger.CUSTOMER, preferences)
        batch = report.generate(ReportConfig(to_date=date(2024, 3, 1)))
        for statement in batch.statements:
            ...
    """

    def __init__(
        self,
        session: Session,
        ledger: Ledger,
        preferences: CompanyPreferences | None = None,
        clock: Clock | None = None,
    ):
        super().__init__(session, ledger, preferences=preferences, clock=clock)
        self.report_code = f"{ledger.value}_statements"
        self.report_name = f"{ledger.value.title()} Statements"
        self._calculator = AgingCalculator(self._preferences.thresholds)

    def fetch(self, config: ReportConfig) -> list[FetchedAccount]:
        accounts: list[FetchedAccount] = []
        for counterparty, rate in self.counterparty_rates(config):
            transactions = self._transactions.transactions_as_of(
                counterparty.counterparty_id,
                config.to_date,
                show_all=config.show_all,
                float_comp_delta=self._preferences.float_comp_delta,
            )
            if not transactions:
                continue
            accounts.append(FetchedAccount(
                counterparty=counterparty,
                rate=rate,
                transactions=tuple(transactions),
            ))

        logger.info("statements_fetched", extra={
            "ledger": self.ledger.value,
            "counterparty_count": len(accounts),
            "as_of_date": config.to_date,
        })
        return accounts

    def process(self, raw: list[FetchedAccount], config: ReportConfig) -> list[StatementData]:
        statements: list[StatementData] = []
        for account in raw:
            with LogContext.bind(counterparty_id=account.counterparty.counterparty_id):
                lines = running_balance(account.transactions, rate=account.rate, show_all=True)
                if not lines:
                    continue
                aging = self._calculator.aggregate(
                    transactions=account.transactions,
                    as_of_date=config.to_date,
                    show_all=config.show_all,
                    rate=account.rate,
                )
            statements.append(StatementData(account=account, lines=lines, aging=aging))
        return statements

    def format(self, processed: list[StatementData], config: ReportConfig) -> StatementBatch:
        decimals = config.decimals

        statements = []
        for data in processed:
            lines = tuple(
                StatementLineRow(
                    kind=line.transaction.kind.value,
                    reference=line.transaction.reference,
                    transaction_date=line.transaction.transaction_date,
                    due_date=invoice_due_date(line.transaction),
                    charges=round_amount(line.debit, decimals),
                    credits=round_amount(line.credit, decimals),
                    allocated=round_amount(line.allocated, decimals),
                    outstanding=round_amount(line.outstanding, decimals),
                )
                for line in data.lines
            )
            statements.append(CounterpartyStatement(
                counterparty=data.account.counterparty,
                rate=data.account.rate,
                lines=lines,
                aging=rounded_buckets(data.aging, decimals),
                outstanding=sum((line.outstanding for line in lines), ZERO),
            ))

        batch = StatementBatch(
            report_code=self.report_code,
            ledger=self.ledger,
            as_of_date=config.to_date,
            currency=self.report_currency(config),
            converted=config.converts_currency,
            show_all=config.show_all,
            headers=HEADERS,
            aging_headers=self._calculator.thresholds.labels() + ("Total Balance",),
            statements=tuple(statements),
            comments=config.comments,
        )

        logger.info("statements_formatted", extra={
            "ledger": self.ledger.value,
            "statement_count": len(statements),
        })
        return batch
