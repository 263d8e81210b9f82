"""
Module: reports_engines.aging
Responsibility:
    Partition counterparty balances into the current / overdue buckets used
    by the customer and supplier aged-analysis reports, and sum them per
    account with an optional conversion rate.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import reports_kernel domain types, exceptions and logging.

Invariants enforced:
    - Purity: no clock access, no I/O.  The as-of date is always passed in.
    - Decimal-only arithmetic; nothing is rounded before display.
    - ``total == current + bucket_1 + bucket_2 + bucket_3`` for every
      per-transaction and aggregated result.
    - Boundaries are inclusive on the overdue side: a transaction exactly
      ``t1`` days overdue lands in ``bucket_2``, exactly ``t2`` in ``bucket_3``.
    - Transactions are processed in stable transaction-date order and
      deliveries never contribute.

Failure modes:
    - InvalidThresholdsError when thresholds are not positive integers with
      ``t1 < t2``.
    - InvalidConversionRateError when a negative rate is supplied.  A zero
      rate is valid and yields an all-zero result.

Usage:
    from datetime import date
    from reports_engines.aging import AgingCalculator, AgingThresholds

    calculator = AgingCalculator(AgingThresholds(30, 60))
    result = calculator.aggregate(
        transactions=transactions,
        as_of_date=date(2024, 3, 1),
    )
    result.bucket_2  # balances 30-59 days past due
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable, Mapping, TypeVar

from reports_engines.tracer import traced_engine
from reports_kernel.domain.transactions import Transaction, order_transactions
from reports_kernel.domain.values import ONE, ZERO, to_decimal
from reports_kernel.exceptions import InvalidConversionRateError, InvalidThresholdsError
from reports_kernel.logging_config import get_logger

logger = get_logger("engines.aging")

K = TypeVar("K")

DEFAULT_ZERO_TOLERANCE = Decimal("0.01")


def validate_rate(rate: Decimal | int | str) -> Decimal:
    """Coerce a conversion rate to Decimal, rejecting negative values."""
    value = to_decimal(rate, "rate")
    if value < ZERO:
        raise InvalidConversionRateError(value)
    return value


@dataclass(frozen=True)
class AgingThresholds:
    """
    Day counts separating the overdue buckets.

    Contract:
        ``bucket_1`` holds balances overdue by fewer than ``t1`` days,
        ``bucket_2`` fewer than ``t2`` and ``bucket_3`` everything older.
    Guarantees:
        - 0 < t1 < t2.
    """

    t1: int
    t2: int

    def __post_init__(self) -> None:
        for value in (self.t1, self.t2):
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidThresholdsError(self.t1, self.t2, "thresholds must be integers")
        if self.t1 <= 0 or self.t2 <= 0:
            raise InvalidThresholdsError(self.t1, self.t2, "thresholds must be positive")
        if self.t1 >= self.t2:
            raise InvalidThresholdsError(self.t1, self.t2, "t1 must be less than t2")

    @classmethod
    def from_past_due_days(cls, past_due_days: int) -> AgingThresholds:
        """Company convention: the second threshold is twice the first."""
        return cls(past_due_days, 2 * past_due_days)

    def labels(self) -> tuple[str, str, str, str]:
        """
        Column headings for the four buckets.

        Ranges are the days overdue each bucket holds: ``bucket_1`` is
        ``0 .. t1-1``, ``bucket_2`` is ``t1 .. t2-1`` and ``bucket_3`` is
        ``t2`` and above.
        """
        return (
            "Current",
            f"0-{self.t1 - 1} Days",
            f"{self.t1}-{self.t2 - 1} Days",
            f"{self.t2}+ Days",
        )


@dataclass(frozen=True)
class AgingResult:
    """
    Bucketed balance for one transaction or one account.

    All figures are unrounded Decimals in the report currency.
    """

    current: Decimal = ZERO
    bucket_1: Decimal = ZERO
    bucket_2: Decimal = ZERO
    bucket_3: Decimal = ZERO
    total: Decimal = ZERO

    @classmethod
    def zero(cls) -> AgingResult:
        return cls()

    def __add__(self, other: AgingResult) -> AgingResult:
        if not isinstance(other, AgingResult):
            return NotImplemented
        return AgingResult(
            current=self.current + other.current,
            bucket_1=self.bucket_1 + other.bucket_1,
            bucket_2=self.bucket_2 + other.bucket_2,
            bucket_3=self.bucket_3 + other.bucket_3,
            total=self.total + other.total,
        )

    def scaled(self, rate: Decimal) -> AgingResult:
        """Every figure multiplied by ``rate``."""
        return AgingResult(
            current=self.current * rate,
            bucket_1=self.bucket_1 * rate,
            bucket_2=self.bucket_2 * rate,
            bucket_3=self.bucket_3 * rate,
            total=self.total * rate,
        )

    def is_zero(self, tolerance: Decimal = DEFAULT_ZERO_TOLERANCE) -> bool:
        """True when the unrounded total is within ``tolerance`` of zero."""
        return abs(self.total) <= tolerance

    def as_tuple(self) -> tuple[Decimal, Decimal, Decimal, Decimal, Decimal]:
        return (self.current, self.bucket_1, self.bucket_2, self.bucket_3, self.total)


@dataclass(frozen=True)
class AgedTransaction:
    """A transaction with its days overdue and converted bucket split."""

    transaction: Transaction
    days_overdue: int
    result: AgingResult

    @property
    def balance(self) -> Decimal:
        return self.result.total


def age_transaction(
    transaction: Transaction,
    as_of_date: date,
    thresholds: AgingThresholds,
    show_all: bool = False,
    rate: Decimal | int | str = ONE,
) -> AgedTransaction:
    """
    Split one transaction's balance across the aging buckets.

    The overdue amounts are cumulative (``due`` includes ``overdue1``, which
    includes ``overdue2``); the exclusive buckets are their successive
    differences.  Deliveries age to an all-zero result.
    """
    rate = validate_rate(rate)
    days = transaction.days_overdue(as_of_date)

    if not transaction.kind.is_ageable:
        return AgedTransaction(transaction=transaction, days_overdue=days, result=AgingResult.zero())

    balance = transaction.signed_balance(show_all=show_all)
    due = balance if days >= 0 else ZERO
    overdue1 = balance if days >= thresholds.t1 else ZERO
    overdue2 = balance if days >= thresholds.t2 else ZERO

    result = AgingResult(
        current=balance - due,
        bucket_1=due - overdue1,
        bucket_2=overdue1 - overdue2,
        bucket_3=overdue2,
        total=balance,
    ).scaled(rate)

    return AgedTransaction(transaction=transaction, days_overdue=days, result=result)


def age_transactions(
    transactions: Iterable[Transaction],
    as_of_date: date,
    thresholds: AgingThresholds,
    show_all: bool = False,
    rate: Decimal | int | str = ONE,
) -> tuple[AgedTransaction, ...]:
    """Detail rows in stable date order, deliveries dropped."""
    rate = validate_rate(rate)
    return tuple(
        age_transaction(txn, as_of_date, thresholds, show_all=show_all, rate=rate)
        for txn in order_transactions(transactions)
    )


def aggregate(
    transactions: Iterable[Transaction],
    as_of_date: date,
    thresholds: AgingThresholds,
    show_all: bool = False,
    rate: Decimal | int | str = ONE,
) -> AgingResult:
    """
    Sum of the aged buckets for one account.

    Empty input returns an all-zero result.
    """
    aged = age_transactions(transactions, as_of_date, thresholds, show_all=show_all, rate=rate)
    result = AgingResult.zero()
    for item in aged:
        result = result + item.result

    logger.debug("aging_aggregated", extra={
        "as_of_date": as_of_date.isoformat(),
        "transaction_count": len(aged),
        "t1": thresholds.t1,
        "t2": thresholds.t2,
        "show_all": show_all,
        "total": str(result.total),
    })
    return result


def suppress_zero_balances(
    results: Mapping[K, AgingResult],
    tolerance: Decimal = DEFAULT_ZERO_TOLERANCE,
) -> dict[K, AgingResult]:
    """Drop accounts whose total is within ``tolerance`` of zero, keeping order."""
    kept = {key: result for key, result in results.items() if not result.is_zero(tolerance)}
    if len(kept) != len(results):
        logger.debug("zero_balances_suppressed", extra={
            "suppressed_count": len(results) - len(kept),
            "tolerance": str(tolerance),
        })
    return kept


class AgingCalculator:
    """
    Aging operations bound to one set of thresholds.

    Contract:
        Pure -- no I/O, no database access.  All dates and data passed as
        parameters.
    Guarantees:
        - ``aggregate`` emits one REPORTS_ENGINE_TRACE record per call.
    """

    DEFAULT_THRESHOLDS = AgingThresholds(30, 60)

    def __init__(self, thresholds: AgingThresholds | None = None):
        self.thresholds = thresholds or self.DEFAULT_THRESHOLDS

    def age(
        self,
        transaction: Transaction,
        as_of_date: date,
        show_all: bool = False,
        rate: Decimal | int | str = ONE,
    ) -> AgedTransaction:
        return age_transaction(transaction, as_of_date, self.thresholds, show_all=show_all, rate=rate)

    def age_all(
        self,
        transactions: Iterable[Transaction],
        as_of_date: date,
        show_all: bool = False,
        rate: Decimal | int | str = ONE,
    ) -> tuple[AgedTransaction, ...]:
        return age_transactions(
            transactions, as_of_date, self.thresholds, show_all=show_all, rate=rate
        )

    def aggregate(
        self,
        transactions: Iterable[Transaction],
        as_of_date: date,
        show_all: bool = False,
        rate: Decimal | int | str = ONE,
    ) -> AgingResult:
        """
        Aggregate one account's transactions into an AgingResult.

        Args:
            transactions: Open transactions for the account.  Materialized
                before tracing so one-shot iterables fingerprint by content.
            as_of_date: Report date days overdue are measured against.
            show_all: Age gross amounts, ignoring allocations.
            rate: Multiplier into the report currency.
        """
        return self._aggregate(
            transactions=tuple(transactions),
            as_of_date=as_of_date,
            show_all=show_all,
            rate=rate,
        )

    @traced_engine(
        "aging", "1.0",
        fingerprint_fields=("transactions", "as_of_date", "show_all", "rate"),
    )
    def _aggregate(
        self,
        transactions: tuple[Transaction, ...],
        as_of_date: date,
        show_all: bool,
        rate: Decimal | int | str,
    ) -> AgingResult:
        result = aggregate(
            transactions, as_of_date, self.thresholds, show_all=show_all, rate=rate
        )
        logger.info("aging_calculated", extra={
            "as_of_date": as_of_date.isoformat(),
            "transaction_count": len(transactions),
            "rate": str(rate),
            "total": str(result.total),
        })
        return result

    def suppress_zero_balances(
        self,
        results: Mapping[K, AgingResult],
        tolerance: Decimal = DEFAULT_ZERO_TOLERANCE,
    ) -> dict[K, AgingResult]:
        return suppress_zero_balances(results, tolerance)
