"""Read-only selectors over counterparties, transactions and rates."""

from reports_kernel.selectors.base import BaseSelector
from reports_kernel.selectors.rate_selector import RateSelector
from reports_kernel.selectors.transaction_selector import TransactionSelector

__all__ = [
    "BaseSelector",
    "RateSelector",
    "TransactionSelector",
]
