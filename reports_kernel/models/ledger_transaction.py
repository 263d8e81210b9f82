"""
ORM model for posted counterparty transactions
(``reports_kernel.models.ledger_transaction``).

Amounts are stored as their posted components (amount, tax, freight,
freight tax, discount) plus an optional prepayment override; the gross
figure the engines age is derived by ``to_transaction``.
"""

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Boolean, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from reports_kernel.db.base import Base
from reports_kernel.domain.transactions import (
    Transaction,
    TransactionKind,
    gross_amount_from_components,
)


class LedgerTransaction(Base):
    """
    One posted document against a counterparty.

    Guarantees:
        - kind is a TransactionKind value.
        - Voided rows stay in the table and are filtered by selectors.
    """

    __tablename__ = "ledger_transactions"

    __table_args__ = (
        Index("idx_ledger_transactions_counterparty_date", "counterparty_id", "transaction_date"),
        Index("idx_ledger_transactions_kind", "kind"),
    )

    counterparty_id: Mapped[UUID] = mapped_column(
        ForeignKey("counterparties.id"), nullable=False
    )
    kind: Mapped[str] = mapped_column(String(20), nullable=False)
    reference: Mapped[str] = mapped_column(String(60), nullable=False, default="")
    transaction_date: Mapped[date] = mapped_column(nullable=False)
    due_date: Mapped[date | None] = mapped_column(nullable=True)

    amount: Mapped[Decimal] = mapped_column(default=Decimal("0"))
    tax_amount: Mapped[Decimal] = mapped_column(default=Decimal("0"))
    freight_amount: Mapped[Decimal] = mapped_column(default=Decimal("0"))
    freight_tax_amount: Mapped[Decimal] = mapped_column(default=Decimal("0"))
    discount_amount: Mapped[Decimal] = mapped_column(default=Decimal("0"))
    prepayment_amount: Mapped[Decimal | None] = mapped_column(nullable=True)
    allocated_amount: Mapped[Decimal] = mapped_column(default=Decimal("0"))

    voided: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    counterparty = relationship("Counterparty", back_populates="transactions")

    @property
    def transaction_kind(self) -> TransactionKind:
        return TransactionKind(self.kind)

    @property
    def gross_amount(self) -> Decimal:
        return gross_amount_from_components(
            amount=self.amount or Decimal("0"),
            tax=self.tax_amount or Decimal("0"),
            freight=self.freight_amount or Decimal("0"),
            freight_tax=self.freight_tax_amount or Decimal("0"),
            discount=self.discount_amount or Decimal("0"),
            prepayment=self.prepayment_amount,
        )

    def to_transaction(self) -> Transaction:
        """Convert the ORM row to the engine-facing Transaction."""
        return Transaction(
            kind=self.transaction_kind,
            reference=self.reference,
            transaction_date=self.transaction_date,
            due_date=self.due_date,
            gross_amount=self.gross_amount,
            allocated_amount=self.allocated_amount or Decimal("0"),
        )

    def __repr__(self) -> str:
        return f"<LedgerTransaction {self.kind} {self.reference} {self.transaction_date}>"
