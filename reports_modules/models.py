"""
Report Output Models (``reports_modules.models``).

Responsibility
--------------
Frozen dataclass value objects produced by the report services: the
counterparty snapshot carried between stages, and the formatted aged
analysis, balances and counterparty statements returned to callers.

Architecture position
---------------------
**Modules layer** -- pure data definitions with ZERO I/O.  Consumed by the
report services and returned to callers; ``render_to_dict`` turns any of
them into JSON-ready primitives for an export layer.

Invariants enforced
-------------------
* All models are ``frozen=True``.
* All monetary fields use ``Decimal``, rounded to the report's decimals.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from uuid import UUID

from reports_engines import Ledger, Transaction


@dataclass(frozen=True)
class CounterpartySnapshot:
    """The counterparty fields a report needs, detached from the session."""

    counterparty_id: UUID
    code: str
    name: str
    currency: str


@dataclass(frozen=True)
class FetchedAccount:
    """One counterparty's inputs gathered during the fetch stage."""

    counterparty: CounterpartySnapshot
    rate: Decimal
    transactions: tuple[Transaction, ...]
    opening_balance: Decimal = Decimal("0")
    opening_allocated: Decimal = Decimal("0")


# =========================================================================
# Aged analysis
# =========================================================================


@dataclass(frozen=True)
class AgedBuckets:
    """Rounded bucket figures for one row."""

    current: Decimal
    bucket_1: Decimal
    bucket_2: Decimal
    bucket_3: Decimal
    total: Decimal


@dataclass(frozen=True)
class AgedDetailRow:
    """One open transaction beneath a counterparty."""

    kind: str
    reference: str
    transaction_date: date
    due_date: date
    days_overdue: int
    buckets: AgedBuckets


@dataclass(frozen=True)
class AgedAccountRow:
    """Aged balance for one counterparty."""

    counterparty: CounterpartySnapshot
    rate: Decimal
    buckets: AgedBuckets
    details: tuple[AgedDetailRow, ...] = ()


@dataclass(frozen=True)
class AgedAnalysisStatement:
    """Formatted aged analysis for a ledger."""

    report_code: str
    ledger: Ledger
    as_of_date: date
    currency: str
    converted: bool
    summary_only: bool
    headers: tuple[str, ...]
    rows: tuple[AgedAccountRow, ...]
    grand_total: AgedBuckets
    comments: str = ""


# =========================================================================
# Balances
# =========================================================================


@dataclass(frozen=True)
class BalanceLineRow:
    """
    One transaction on a balances statement.

    ``balance`` is the running balance; ``outstanding`` the unallocated
    remainder of this line alone.  ``due_date`` is set for invoices only.
    """

    kind: str
    reference: str
    transaction_date: date
    due_date: date | None
    debit: Decimal
    credit: Decimal
    allocated: Decimal
    outstanding: Decimal
    balance: Decimal


@dataclass(frozen=True)
class BalanceAccountRow:
    """Opening, movement and closing figures for one counterparty."""

    counterparty: CounterpartySnapshot
    rate: Decimal
    opening: Decimal
    opening_outstanding: Decimal
    debits: Decimal
    credits: Decimal
    allocated: Decimal
    outstanding: Decimal
    closing: Decimal
    lines: tuple[BalanceLineRow, ...] = ()


@dataclass(frozen=True)
class BalancesStatement:
    """Formatted balances statement for a ledger and period."""

    report_code: str
    ledger: Ledger
    from_date: date
    to_date: date
    currency: str
    converted: bool
    show_balance: bool
    headers: tuple[str, ...]
    rows: tuple[BalanceAccountRow, ...]
    opening: Decimal
    opening_outstanding: Decimal
    debits: Decimal
    credits: Decimal
    allocated: Decimal
    outstanding: Decimal
    closing: Decimal
    comments: str = ""


# =========================================================================
# Statements
# =========================================================================


@dataclass(frozen=True)
class StatementLineRow:
    """One open item on a counterparty statement."""

    kind: str
    reference: str
    transaction_date: date
    due_date: date | None
    charges: Decimal
    credits: Decimal
    allocated: Decimal
    outstanding: Decimal


@dataclass(frozen=True)
class CounterpartyStatement:
    """Open items of one counterparty with the aging footer."""

    counterparty: CounterpartySnapshot
    rate: Decimal
    lines: tuple[StatementLineRow, ...]
    aging: AgedBuckets
    outstanding: Decimal


@dataclass(frozen=True)
class StatementBatch:
    """Statements of every selected counterparty as of one date."""

    report_code: str
    ledger: Ledger
    as_of_date: date
    currency: str
    converted: bool
    show_all: bool
    headers: tuple[str, ...]
    aging_headers: tuple[str, ...]
    statements: tuple[CounterpartyStatement, ...]
    comments: str = ""


def render_to_dict(obj: object) -> dict | list | str | int | float | bool | None:
    """
    Convert any report dataclass to plain values for JSON serialization.

    Decimals become strings (preserving precision), UUIDs strings, dates
    ISO strings, enums their value and tuples lists.
    """
    if obj is None:
        return None
    if isinstance(obj, Decimal):
        return str(obj)
    if isinstance(obj, UUID):
        return str(obj)
    if isinstance(obj, date):
        return obj.isoformat()
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (list, tuple)):
        return [render_to_dict(item) for item in obj]
    if isinstance(obj, dict):
        return {str(k): render_to_dict(v) for k, v in obj.items()}
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {
            f.name: render_to_dict(getattr(obj, f.name))
            for f in dataclasses.fields(obj)
        }
    return obj
