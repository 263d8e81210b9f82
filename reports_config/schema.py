"""
Company preferences schema.

The typed, frozen form of the company-wide settings that every report
reads: home currency, aging thresholds, balance tolerances and display
precision.  YAML documents are parsed into this type by the loader.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from reports_engines.aging import AgingThresholds
from reports_kernel.domain.currency import CurrencyRegistry
from reports_kernel.exceptions import InvalidPreferencesError


@dataclass(frozen=True)
class CompanyPreferences:
    """
    Company settings consumed by the report services.

    ``second_past_due_days`` defaults to twice ``past_due_days``.
    ``zero_balance_tolerance`` decides which accounts the suppress-zeros
    option hides; ``float_comp_delta`` decides when an allocated document
    counts as fully settled.
    """

    company_name: str = ""
    home_currency: str = "USD"
    past_due_days: int = 30
    second_past_due_days: int | None = None
    zero_balance_tolerance: Decimal = Decimal("0.01")
    float_comp_delta: Decimal = Decimal("0.004")
    price_decimals: int = 2
    checksum: str = ""

    def __post_init__(self) -> None:
        code = (self.home_currency or "").upper().strip()
        if not CurrencyRegistry.is_valid(code):
            raise InvalidPreferencesError("home_currency", f"unknown currency {self.home_currency!r}")
        object.__setattr__(self, "home_currency", code)

        if self.second_past_due_days is None:
            object.__setattr__(self, "second_past_due_days", 2 * self.past_due_days)

        for name in ("past_due_days", "second_past_due_days"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise InvalidPreferencesError(name, f"must be a positive integer, got {value!r}")
        if self.second_past_due_days <= self.past_due_days:
            raise InvalidPreferencesError(
                "second_past_due_days",
                f"must exceed past_due_days ({self.past_due_days}), got {self.second_past_due_days}",
            )

        for name in ("zero_balance_tolerance", "float_comp_delta"):
            value = getattr(self, name)
            if not isinstance(value, Decimal) or value < 0:
                raise InvalidPreferencesError(name, f"must be a non-negative Decimal, got {value!r}")

        if isinstance(self.price_decimals, bool) or not isinstance(self.price_decimals, int):
            raise InvalidPreferencesError("price_decimals", "must be an integer")
        if not 0 <= self.price_decimals <= 6:
            raise InvalidPreferencesError("price_decimals", "must be between 0 and 6")

    @property
    def thresholds(self) -> AgingThresholds:
        return AgingThresholds(self.past_due_days, self.second_past_due_days)
