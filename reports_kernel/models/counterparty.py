"""
ORM model for customers and suppliers (``reports_kernel.models.counterparty``).

A single table holds both sides of the business; ``ledger`` tells them apart
so that aged analysis and balances run identically for either.
"""

from sqlalchemy import Boolean, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from reports_kernel.db.base import Base
from reports_kernel.domain.transactions import Ledger


class Counterparty(Base):
    """
    A customer or supplier that transactions are posted against.

    Guarantees:
        - (ledger, code) is unique.
        - currency is the 3-letter ISO 4217 code the account trades in.
    """

    __tablename__ = "counterparties"

    __table_args__ = (
        UniqueConstraint("ledger", "code", name="uq_counterparties_ledger_code"),
        Index("idx_counterparties_ledger_name", "ledger", "name"),
    )

    ledger: Mapped[str] = mapped_column(String(20), nullable=False)
    code: Mapped[str] = mapped_column(String(50), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False)
    inactive: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    transactions = relationship(
        "LedgerTransaction",
        back_populates="counterparty",
        order_by="LedgerTransaction.transaction_date",
    )

    @property
    def ledger_type(self) -> Ledger:
        return Ledger(self.ledger)

    @property
    def display_name(self) -> str:
        return f"{self.name} (Inactive)" if self.inactive else self.name

    def __repr__(self) -> str:
        return f"<Counterparty {self.ledger}:{self.code} {self.name}>"
