"""
Module: reports_engines.running_balance
Responsibility:
    Cumulative balance after each transaction for statement and
    trial-balance style reports, the allocated / outstanding split of each
    line, and the debit / credit summary of a period.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Each line's amount is the same signed balance the aging engine ages,
      multiplied by the rate.
    - ``balance_after`` of line n equals the opening balance (converted)
      plus the amounts of lines 0..n.
    - ``allocated + outstanding`` of a line equals its gross signed amount
      after rate.
    - ``closing == opening + debits - credits``.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Sequence

from reports_engines.aging import validate_rate
from reports_kernel.domain.transactions import Transaction, order_transactions
from reports_kernel.domain.values import ONE, ZERO, to_decimal
from reports_kernel.logging_config import get_logger

logger = get_logger("engines.running_balance")


@dataclass(frozen=True)
class RunningBalanceLine:
    """
    One statement row: the transaction, its converted amount and the balance after it.

    ``allocated`` carries the transaction's sign; ``outstanding`` is the
    unallocated remainder, also signed.
    """

    transaction: Transaction
    amount: Decimal
    balance_after: Decimal
    allocated: Decimal = ZERO
    outstanding: Decimal = ZERO

    @property
    def debit(self) -> Decimal:
        return self.amount if self.amount > ZERO else ZERO

    @property
    def credit(self) -> Decimal:
        return -self.amount if self.amount < ZERO else ZERO


def running_balance(
    transactions: Iterable[Transaction],
    opening_balance: Decimal | int | str = ZERO,
    rate: Decimal | int | str = ONE,
    show_all: bool = True,
) -> tuple[RunningBalanceLine, ...]:
    """
    Running balance over transactions in stable date order.

    ``opening_balance`` is in the account currency and is converted with
    the same ``rate`` as the lines.  Deliveries are skipped.
    """
    rate = validate_rate(rate)
    balance = to_decimal(opening_balance, "opening_balance") * rate

    lines: list[RunningBalanceLine] = []
    for txn in order_transactions(transactions):
        amount = txn.signed_balance(show_all=show_all) * rate
        balance += amount
        lines.append(RunningBalanceLine(
            transaction=txn,
            amount=amount,
            balance_after=balance,
            allocated=txn.sign * txn.allocated_amount * rate,
            outstanding=txn.signed_balance(show_all=False) * rate,
        ))

    logger.debug("running_balance_computed", extra={
        "line_count": len(lines),
        "rate": str(rate),
        "closing_balance": str(balance),
    })
    return tuple(lines)


def drop_zero_lines(
    transactions: Iterable[Transaction],
    show_balance: bool = True,
    float_comp_delta: Decimal = Decimal("0.004"),
) -> list[Transaction]:
    """
    Transactions worth printing on a zero-suppressed statement.

    In balance mode a line is dropped when its gross amount is zero; in
    outstanding mode when it is fully allocated (within ``float_comp_delta``).
    """
    kept: list[Transaction] = []
    for txn in transactions:
        if show_balance:
            remainder = txn.gross_amount
        else:
            remainder = abs(txn.gross_amount) - txn.allocated_amount
        if abs(remainder) > (ZERO if show_balance else float_comp_delta):
            kept.append(txn)
    return kept


@dataclass(frozen=True)
class PeriodSummary:
    """
    Opening, debit, credit and closing figures for a period.

    ``allocated`` and ``outstanding`` are closing figures: the opening
    amounts plus those of every line in the period.  ``opening_outstanding``
    is the unallocated part of the opening balance.
    """

    opening: Decimal
    debits: Decimal
    credits: Decimal
    allocated: Decimal = ZERO
    outstanding: Decimal = ZERO
    opening_outstanding: Decimal = ZERO

    @property
    def closing(self) -> Decimal:
        return self.opening + self.debits - self.credits

    @property
    def movement(self) -> Decimal:
        return self.debits - self.credits

    def __add__(self, other: PeriodSummary) -> PeriodSummary:
        if not isinstance(other, PeriodSummary):
            return NotImplemented
        return PeriodSummary(
            opening=self.opening + other.opening,
            debits=self.debits + other.debits,
            credits=self.credits + other.credits,
            allocated=self.allocated + other.allocated,
            outstanding=self.outstanding + other.outstanding,
            opening_outstanding=self.opening_outstanding + other.opening_outstanding,
        )


def summarize_period(
    lines: Sequence[RunningBalanceLine],
    opening_balance: Decimal | int | str = ZERO,
    opening_allocated: Decimal | int | str = ZERO,
    opening_outstanding: Decimal | int | str = ZERO,
) -> PeriodSummary:
    """
    Debit and credit totals of ``lines``.

    Opening figures must already be in the report currency.
    """
    return PeriodSummary(
        opening=to_decimal(opening_balance, "opening_balance"),
        debits=sum((line.debit for line in lines), ZERO),
        credits=sum((line.credit for line in lines), ZERO),
        allocated=to_decimal(opening_allocated, "opening_allocated")
        + sum((line.allocated for line in lines), ZERO),
        outstanding=to_decimal(opening_outstanding, "opening_outstanding")
        + sum((line.outstanding for line in lines), ZERO),
        opening_outstanding=to_decimal(opening_outstanding, "opening_outstanding"),
    )
