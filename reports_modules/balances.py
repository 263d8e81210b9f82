"""
Balances Report (``reports_modules.balances``).

Responsibility
--------------
Customer and supplier balances for a period: each counterparty's opening
balance before ``from_date``, every transaction in the period with its
allocated amount and either its running balance or its outstanding
amount, and debit / credit / allocated / closing totals.

Architecture position
---------------------
**Modules layer**.  Fetch uses ``TransactionSelector`` / ``RateSelector``;
process delegates to ``running_balance`` and ``summarize_period``.

Invariants enforced
-------------------
* Period movements use gross amounts; allocations do not change a
  statement of what was posted.
* ``closing == opening + debits - credits`` per counterparty and in the
  grand total.
* ``suppress_zeros`` hides a counterparty only when it has no movement
  in the period and its opening balance is within the zero-balance
  tolerance.  Within a shown counterparty it drops zero lines: lines with
  a zero amount in balance mode, fully allocated lines in outstanding
  mode.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.orm import Session

from reports_config import CompanyPreferences
from reports_engines import (
    Ledger,
    PeriodSummary,
    RunningBalanceLine,
    drop_zero_lines,
    running_balance,
    summarize_period,
)
from reports_kernel.domain.clock import Clock
from reports_kernel.domain.values import ZERO, round_amount
from reports_kernel.logging_config import get_logger
from reports_modules.base import CounterpartyReportService, ReportConfig, invoice_due_date
from reports_modules.models import (
    BalanceAccountRow,
    BalanceLineRow,
    BalancesStatement,
    FetchedAccount,
)

logger = get_logger("modules.balances")

HEADERS = ("Trans Type", "#", "Date", "Due Date", "Debits", "Credits", "Allocated")


@dataclass(frozen=True)
class AccountMovement:
    account: FetchedAccount
    lines: tuple[RunningBalanceLine, ...]
    summary: PeriodSummary


@dataclass(frozen=True)
class BalancesData:
    accounts: tuple[AccountMovement, ...]
    grand_total: PeriodSummary


class BalancesReport(CounterpartyReportService):
    """Period balances statement of one ledger's counterparties."""

    def __init__(
        self,
        session: Session,
        ledger: Ledger,
        preferences: CompanyPreferences | None = None,
        clock: Clock | None = None,
    ):
        super().__init__(session, ledger, preferences=preferences, clock=clock)
        self.report_code = f"{ledger.value}_balances"
        self.report_name = f"{ledger.value.title()} Balances"

    def validate(self, config: ReportConfig) -> dict[str, str]:
        errors = super().validate(config)
        if config.from_date is None:
            errors["from_date"] = "is required"
        return errors

    def fetch(self, config: ReportConfig) -> list[FetchedAccount]:
        tolerance = self._preferences.zero_balance_tolerance
        accounts: list[FetchedAccount] = []
        for counterparty, rate in self.counterparty_rates(config):
            opening = self._transactions.opening_balance(
                counterparty.counterparty_id, config.from_date
            )
            transactions = self._transactions.transactions_between(
                counterparty.counterparty_id, config.from_date, config.to_date
            )
            if config.suppress_zeros and not transactions and abs(opening) <= tolerance:
                continue
            accounts.append(FetchedAccount(
                counterparty=counterparty,
                rate=rate,
                transactions=tuple(transactions),
                opening_balance=opening,
                opening_allocated=self._transactions.opening_allocated(
                    counterparty.counterparty_id, config.from_date
                ),
            ))

        logger.info("balances_fetched", extra={
            "ledger": self.ledger.value,
            "counterparty_count": len(accounts),
            "from_date": config.from_date,
            "to_date": config.to_date,
        })
        return accounts

    def process(self, raw: list[FetchedAccount], config: ReportConfig) -> BalancesData:
        movements: list[AccountMovement] = []
        grand_total = PeriodSummary(opening=ZERO, debits=ZERO, credits=ZERO)

        for account in raw:
            transactions = account.transactions
            if config.suppress_zeros:
                transactions = drop_zero_lines(
                    transactions,
                    show_balance=config.show_balance,
                    float_comp_delta=self._preferences.float_comp_delta,
                )
            lines = running_balance(
                transactions,
                opening_balance=account.opening_balance,
                rate=account.rate,
                show_all=True,
            )
            summary = summarize_period(
                lines,
                opening_balance=account.opening_balance * account.rate,
                opening_allocated=account.opening_allocated * account.rate,
                opening_outstanding=(account.opening_balance - account.opening_allocated)
                * account.rate,
            )
            movements.append(AccountMovement(account=account, lines=lines, summary=summary))
            grand_total = grand_total + summary

        return BalancesData(accounts=tuple(movements), grand_total=grand_total)

    def format(self, processed: BalancesData, config: ReportConfig) -> BalancesStatement:
        decimals = config.decimals

        def r(value):
            return round_amount(value, decimals)

        rows = []
        for movement in processed.accounts:
            summary = movement.summary
            rows.append(BalanceAccountRow(
                counterparty=movement.account.counterparty,
                rate=movement.account.rate,
                opening=r(summary.opening),
                opening_outstanding=r(summary.opening_outstanding),
                debits=r(summary.debits),
                credits=r(summary.credits),
                allocated=r(summary.allocated),
                outstanding=r(summary.outstanding),
                closing=r(summary.closing),
                lines=tuple(
                    BalanceLineRow(
                        kind=line.transaction.kind.value,
                        reference=line.transaction.reference,
                        transaction_date=line.transaction.transaction_date,
                        due_date=invoice_due_date(line.transaction),
                        debit=r(line.debit),
                        credit=r(line.credit),
                        allocated=r(line.allocated),
                        outstanding=r(line.outstanding),
                        balance=r(line.balance_after),
                    )
                    for line in movement.lines
                ),
            ))

        grand = processed.grand_total
        return BalancesStatement(
            report_code=self.report_code,
            ledger=self.ledger,
            from_date=config.from_date,
            to_date=config.to_date,
            currency=self.report_currency(config),
            converted=config.converts_currency,
            show_balance=config.show_balance,
            headers=HEADERS + ("Balance" if config.show_balance else "Outstanding",),
            rows=tuple(rows),
            opening=r(grand.opening),
            opening_outstanding=r(grand.opening_outstanding),
            debits=r(grand.debits),
            credits=r(grand.credits),
            allocated=r(grand.allocated),
            outstanding=r(grand.outstanding),
            closing=r(grand.closing),
            comments=config.comments,
        )
