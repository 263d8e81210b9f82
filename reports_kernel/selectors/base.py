"""
Module: reports_kernel.selectors.base
Responsibility: Abstract base class for read-only query selectors.
Architecture position: Kernel > Selectors.  May import from db/, models/
    and domain/.  Selectors NEVER create, modify or delete data.

Invariants enforced:
    - Read-only: selectors MUST NOT call session.add/delete/commit/flush.
    - DTO return convention: selectors return domain objects (Transaction,
      Decimal rates), not ORM rows, except for counterparty listings.
    - Session ownership: the caller owns the session and its transaction.
"""

from abc import ABC

from sqlalchemy.orm import Session


class BaseSelector(ABC):
    """Holds the caller's session for subclass queries."""

    def __init__(self, session: Session):
        self.session = session
