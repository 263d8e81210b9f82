"""
Aged Analysis Report (``reports_modules.aged_analysis``).

Responsibility
--------------
Customer and supplier aged analysis: each counterparty's open balance as
of the report date split into current and three overdue buckets, with
optional per-transaction detail, zero-balance suppression and conversion
to the home currency.

Architecture position
---------------------
**Modules layer**.  Fetch uses ``TransactionSelector`` / ``RateSelector``;
process delegates every figure to ``AgingCalculator``; format only rounds.

Invariants enforced
-------------------
* Bucket boundaries come from the company preferences, never from
  module constants.
* The grand total is the sum of the unrounded account results; rounding
  happens once, in ``format``.
* Counterparties with no open items are left out unless ``show_all``.
* Accounts are hidden by ``suppress_zeros`` only when their unrounded
  total is within the company zero-balance tolerance.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.orm import Session

from reports_config import CompanyPreferences
from reports_engines import (
    AgedTransaction,
    AgingCalculator,
    AgingResult,
    Ledger,
)
from reports_kernel.domain.clock import Clock
from reports_kernel.domain.values import round_amount
from reports_kernel.logging_config import LogContext, get_logger
from reports_modules.base import CounterpartyReportService, ReportConfig
from reports_modules.models import (
    AgedAccountRow,
    AgedAnalysisStatement,
    AgedBuckets,
    AgedDetailRow,
    FetchedAccount,
)

logger = get_logger("modules.aged_analysis")


@dataclass(frozen=True)
class AgedAccount:
    """Unrounded aging figures for one counterparty."""

    account: FetchedAccount
    result: AgingResult
    details: tuple[AgedTransaction, ...] = ()


@dataclass(frozen=True)
class AgedAnalysisData:
    accounts: tuple[AgedAccount, ...]
    grand_total: AgingResult


class AgedAnalysisReport(CounterpartyReportService):
    """
    Aged analysis of one ledger's counterparties.

    Usage::

        report = AgedAnalysisReport(session, Ledger.CUSTOMER, preferences)
        statement = report.generate(ReportConfig(to_date=date(2024, 3, 1)))
    """

    def __init__(
        self,
        session: Session,
        ledger: Ledger,
        preferences: CompanyPreferences | None = None,
        clock: Clock | None = None,
    ):
        super().__init__(session, ledger, preferences=preferences, clock=clock)
        self.report_code = f"aged_{ledger.value}_analysis"
        self.report_name = f"Aged {ledger.value.title()} Analysis"
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
            if not transactions and not config.show_all:
                continue
            accounts.append(FetchedAccount(
                counterparty=counterparty,
                rate=rate,
                transactions=tuple(transactions),
            ))

        logger.info("aged_analysis_fetched", extra={
            "ledger": self.ledger.value,
            "counterparty_count": len(accounts),
            "as_of_date": config.to_date,
        })
        return accounts

    def process(self, raw: list[FetchedAccount], config: ReportConfig) -> AgedAnalysisData:
        results: dict[int, AgingResult] = {}
        details: dict[int, tuple[AgedTransaction, ...]] = {}

        for index, account in enumerate(raw):
            with LogContext.bind(counterparty_id=account.counterparty.counterparty_id):
                results[index] = self._calculator.aggregate(
                    transactions=account.transactions,
                    as_of_date=config.to_date,
                    show_all=config.show_all,
                    rate=account.rate,
                )
                if not config.summary_only:
                    details[index] = self._calculator.age_all(
                        account.transactions,
                        config.to_date,
                        show_all=config.show_all,
                        rate=account.rate,
                    )

        if config.suppress_zeros:
            results = self._calculator.suppress_zero_balances(
                results, self._preferences.zero_balance_tolerance
            )

        grand_total = AgingResult.zero()
        for result in results.values():
            grand_total = grand_total + result

        return AgedAnalysisData(
            accounts=tuple(
                AgedAccount(
                    account=raw[index],
                    result=result,
                    details=details.get(index, ()),
                )
                for index, result in results.items()
            ),
            grand_total=grand_total,
        )

    def format(self, processed: AgedAnalysisData, config: ReportConfig) -> AgedAnalysisStatement:
        decimals = config.decimals

        rows = []
        for aged in processed.accounts:
            rows.append(AgedAccountRow(
                counterparty=aged.account.counterparty,
                rate=aged.account.rate,
                buckets=rounded_buckets(aged.result, decimals),
                details=tuple(
                    AgedDetailRow(
                        kind=item.transaction.kind.value,
                        reference=item.transaction.reference,
                        transaction_date=item.transaction.transaction_date,
                        due_date=item.transaction.effective_due_date,
                        days_overdue=item.days_overdue,
                        buckets=rounded_buckets(item.result, decimals),
                    )
                    for item in aged.details
                ),
            ))

        statement = AgedAnalysisStatement(
            report_code=self.report_code,
            ledger=self.ledger,
            as_of_date=config.to_date,
            currency=self.report_currency(config),
            converted=config.converts_currency,
            summary_only=config.summary_only,
            headers=self._calculator.thresholds.labels() + ("Total Balance",),
            rows=tuple(rows),
            grand_total=rounded_buckets(processed.grand_total, decimals),
            comments=config.comments,
        )

        logger.info("aged_analysis_formatted", extra={
            "ledger": self.ledger.value,
            "row_count": len(rows),
            "grand_total": statement.grand_total.total,
        })
        return statement


def rounded_buckets(result: AgingResult, decimals: int) -> AgedBuckets:
    """
    Round each bucket for display, deriving the total from the rounded buckets.

    Keeps ``total == current + bucket_1 + bucket_2 + bucket_3`` on the
    printed figures.
    """
    current, b1, b2, b3 = (
        round_amount(value, decimals)
        for value in (result.current, result.bucket_1, result.bucket_2, result.bucket_3)
    )
    return AgedBuckets(
        current=current,
        bucket_1=b1,
        bucket_2=b2,
        bucket_3=b3,
        total=current + b1 + b2 + b3,
    )
