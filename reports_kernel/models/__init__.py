"""ORM models for counterparties, their transactions and exchange rates."""

from reports_kernel.models.counterparty import Counterparty
from reports_kernel.models.exchange_rate import ExchangeRateRecord
from reports_kernel.models.ledger_transaction import LedgerTransaction

__all__ = [
    "Counterparty",
    "ExchangeRateRecord",
    "LedgerTransaction",
]
