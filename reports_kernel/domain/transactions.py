"""
Transactions -- Open ledger entries as seen by the aging and balance engines.

Responsibility:
    The closed set of transaction kinds, the sign each kind contributes to a
    counterparty balance, and the immutable Transaction record that data
    access produces and engines consume.

Architecture position:
    Kernel > Domain -- pure, zero I/O.  Selectors build Transactions from ORM
    rows; engines never see ORM objects.

Invariants enforced:
    - sign is a pure function of kind: credit notes, payments and deposits
      reduce the balance, every other kind increases it.
    - Amounts are Decimal; floats are coerced through ``str``.
    - Deliveries never contribute to aging or running balances.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Iterable

from reports_kernel.domain.values import ZERO, to_decimal


class Ledger(Enum):
    """Which sub-ledger a counterparty belongs to."""

    CUSTOMER = "customer"
    SUPPLIER = "supplier"


class TransactionKind(Enum):
    """Kinds of entries posted against a counterparty."""

    INVOICE = "invoice"
    CREDIT_NOTE = "credit_note"
    PAYMENT = "payment"
    DEPOSIT = "deposit"
    JOURNAL = "journal"
    DELIVERY = "delivery"

    @property
    def sign(self) -> int:
        return -1 if self in _NEGATIVE_KINDS else 1

    @property
    def is_ageable(self) -> bool:
        return self is not TransactionKind.DELIVERY


_NEGATIVE_KINDS = frozenset(
    {TransactionKind.CREDIT_NOTE, TransactionKind.PAYMENT, TransactionKind.DEPOSIT}
)


def gross_amount_from_components(
    amount: Decimal | int | str = ZERO,
    tax: Decimal | int | str = ZERO,
    freight: Decimal | int | str = ZERO,
    freight_tax: Decimal | int | str = ZERO,
    discount: Decimal | int | str = ZERO,
    prepayment: Decimal | int | str | None = None,
) -> Decimal:
    """
    Gross magnitude of a posted document.

    A non-zero prepayment override wins; otherwise the absolute value of
    the summed amount, tax, freight, freight tax and discount components.
    """
    if prepayment is not None:
        override = to_decimal(prepayment, "prepayment")
        if override != ZERO:
            return override
    total = sum(
        (to_decimal(v) for v in (amount, tax, freight, freight_tax, discount)),
        ZERO,
    )
    return abs(total)


@dataclass(frozen=True)
class Transaction:
    """One open accounting entry for a counterparty."""

    kind: TransactionKind
    reference: str
    transaction_date: date
    gross_amount: Decimal
    allocated_amount: Decimal = ZERO
    due_date: date | None = None

    def __post_init__(self) -> None:
        if isinstance(self.kind, str):
            object.__setattr__(self, "kind", TransactionKind(self.kind))
        object.__setattr__(self, "gross_amount", to_decimal(self.gross_amount, "gross_amount"))
        object.__setattr__(
            self, "allocated_amount", to_decimal(self.allocated_amount, "allocated_amount")
        )
        if self.due_date is None:
            object.__setattr__(self, "due_date", self.transaction_date)

    @property
    def sign(self) -> int:
        return self.kind.sign

    @property
    def effective_due_date(self) -> date:
        """Invoices age from their due date, everything else from posting."""
        if self.kind is TransactionKind.INVOICE:
            return self.due_date
        return self.transaction_date

    def signed_balance(self, show_all: bool = False) -> Decimal:
        """Signed amount this entry contributes, net of allocations unless show_all."""
        allocated = ZERO if show_all else self.allocated_amount
        return self.sign * (self.gross_amount - allocated)

    def days_overdue(self, as_of_date: date) -> int:
        """Days past the effective due date; negative when not yet due."""
        return (as_of_date - self.effective_due_date).days


def order_transactions(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Ageable transactions in stable transaction-date order."""
    return sorted(
        (t for t in transactions if t.kind.is_ageable),
        key=lambda t: t.transaction_date,
    )
