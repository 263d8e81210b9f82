"""
Module: reports_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    calculation engines.  This is the canonical import surface for
    reports_modules.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import reports_kernel domain types, exceptions and logging.
    MUST NOT import reports_config or reports_modules.

Invariants enforced:
    - Purity: engines NEVER call ``date.today()``; as-of dates are passed in.
    - Decimal-only arithmetic for all monetary amounts.
    - Determinism: identical inputs always produce identical outputs.

Usage:
    from reports_engines import AgingCalculator, AgingThresholds, running_balance
"""

from reports_engines.aging import (
    AgedTransaction,
    AgingCalculator,
    AgingResult,
    AgingThresholds,
    age_transaction,
    age_transactions,
    aggregate,
    suppress_zero_balances,
    validate_rate,
)
from reports_engines.running_balance import (
    PeriodSummary,
    RunningBalanceLine,
    drop_zero_lines,
    running_balance,
    summarize_period,
)
from reports_engines.tracer import compute_input_fingerprint, traced_engine
from reports_kernel.domain.transactions import (
    Ledger,
    Transaction,
    TransactionKind,
    gross_amount_from_components,
    order_transactions,
)

__all__ = [
    # Transactions
    "Ledger",
    "Transaction",
    "TransactionKind",
    "gross_amount_from_components",
    "order_transactions",
    # Aging
    "AgedTransaction",
    "AgingCalculator",
    "AgingResult",
    "AgingThresholds",
    "age_transaction",
    "age_transactions",
    "aggregate",
    "suppress_zero_balances",
    "validate_rate",
    # Running balance
    "PeriodSummary",
    "RunningBalanceLine",
    "drop_zero_lines",
    "running_balance",
    "summarize_period",
    # Tracer
    "compute_input_fingerprint",
    "traced_engine",
]
