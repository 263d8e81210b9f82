"""
Module: reports_kernel.selectors.transaction_selector
Responsibility: Read counterparties and their posted transactions, yielding
    the engine-facing ``Transaction`` records the aging and running-balance
    engines consume.
Architecture position: Kernel > Selectors.

Filtering rules shared by every query:
    - Voided rows are excluded.
    - Deliveries are excluded (they never affect a balance).
    - Results are ordered by transaction date, then insertion order.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import select

from reports_kernel.domain.transactions import Ledger, Transaction, TransactionKind
from reports_kernel.logging_config import get_logger
from reports_kernel.models.counterparty import Counterparty
from reports_kernel.models.ledger_transaction import LedgerTransaction
from reports_kernel.selectors.base import BaseSelector

logger = get_logger("selectors.transactions")

DEFAULT_FLOAT_COMP_DELTA = Decimal("0.004")


class TransactionSelector(BaseSelector):
    """Read-only access to counterparties and their ledger transactions."""

    def counterparties(
        self,
        ledger: Ledger,
        counterparty_id: UUID | None = None,
    ) -> list[Counterparty]:
        """Counterparties on one ledger ordered by name, optionally just one."""
        stmt = select(Counterparty).where(Counterparty.ledger == ledger.value)
        if counterparty_id is not None:
            stmt = stmt.where(Counterparty.id == counterparty_id)
        stmt = stmt.order_by(Counterparty.name, Counterparty.code)
        return list(self.session.scalars(stmt))

    def _rows(
        self,
        counterparty_id: UUID,
        from_date: date | None = None,
        to_date: date | None = None,
        before: date | None = None,
    ) -> list[LedgerTransaction]:
        stmt = select(LedgerTransaction).where(
            LedgerTransaction.counterparty_id == counterparty_id,
            LedgerTransaction.voided.is_(False),
            LedgerTransaction.kind != TransactionKind.DELIVERY.value,
        )
        if from_date is not None:
            stmt = stmt.where(LedgerTransaction.transaction_date >= from_date)
        if to_date is not None:
            stmt = stmt.where(LedgerTransaction.transaction_date <= to_date)
        if before is not None:
            stmt = stmt.where(LedgerTransaction.transaction_date < before)
        stmt = stmt.order_by(LedgerTransaction.transaction_date)
        return list(self.session.scalars(stmt))

    def transactions_as_of(
        self,
        counterparty_id: UUID,
        as_of: date,
        show_all: bool = False,
        float_comp_delta: Decimal = DEFAULT_FLOAT_COMP_DELTA,
    ) -> list[Transaction]:
        """
        Transactions posted on or before ``as_of``.

        Unless ``show_all``, entries whose unsettled remainder is within
        ``float_comp_delta`` of zero are skipped as fully allocated.
        """
        result: list[Transaction] = []
        for row in self._rows(counterparty_id, to_date=as_of):
            txn = row.to_transaction()
            if not show_all and abs(txn.gross_amount - txn.allocated_amount) <= float_comp_delta:
                continue
            result.append(txn)

        logger.debug(
            "transactions_as_of_selected",
            extra={
                "counterparty_id": str(counterparty_id),
                "as_of": as_of.isoformat(),
                "show_all": show_all,
                "count": len(result),
            },
        )
        return result

    def transactions_between(
        self,
        counterparty_id: UUID,
        from_date: date,
        to_date: date,
    ) -> list[Transaction]:
        """Transactions posted within [from_date, to_date]."""
        return [
            row.to_transaction()
            for row in self._rows(counterparty_id, from_date=from_date, to_date=to_date)
        ]

    def opening_balance(
        self,
        counterparty_id: UUID,
        before: date,
        show_all: bool = True,
    ) -> Decimal:
        """Signed balance of every transaction posted before ``before``."""
        total = Decimal("0")
        for row in self._rows(counterparty_id, before=before):
            total += row.to_transaction().signed_balance(show_all=show_all)
        return total

    def opening_allocated(self, counterparty_id: UUID, before: date) -> Decimal:
        """Signed allocations of every transaction posted before ``before``."""
        total = Decimal("0")
        for row in self._rows(counterparty_id, before=before):
            txn = row.to_transaction()
            total += txn.sign * txn.allocated_amount
        return total
