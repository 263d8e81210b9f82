"""
Typed exception hierarchy for the reports kernel.

Every error carries a class-level machine-readable ``code`` and keeps its
context as attributes, so callers catch by type and log or serialize the
structured fields instead of parsing messages.

    ReportsError (base)
    |
    +-- AgingError
    |   +-- InvalidThresholdsError
    |   +-- InvalidConversionRateError
    |
    +-- CurrencyError
    |   +-- InvalidCurrencyError
    |   +-- ExchangeRateNotFoundError
    |
    +-- ConfigError
    |   +-- InvalidPreferencesError
    |
    +-- ReportError
        +-- ReportValidationError
        +-- ReportGenerationError

Code              | When raised
------------------|----------------------------------------------------------
INVALID_THRESHOLDS| Aging thresholds not positive or not strictly ascending
INVALID_RATE      | Conversion rate passed to an engine is negative
INVALID_CURRENCY  | Not an ISO 4217 code known to the registry
EXCHANGE_RATE_NOT_FOUND | No stored rate for currency on or before the date
INVALID_PREFERENCES | Company preference file has an unusable value
REPORT_VALIDATION | Report parameters rejected before any data is fetched
REPORT_GENERATION | A report stage failed while fetching or processing
"""

from datetime import date
from typing import Any


class ReportsError(Exception):
    """Base exception for all reports kernel errors."""

    code: str = "REPORTS_ERROR"


# Aging engine


class AgingError(ReportsError):
    """Base exception for aging calculation errors."""

    code: str = "AGING_ERROR"


class InvalidThresholdsError(AgingError):
    """Aging thresholds must be positive and strictly ascending."""

    code: str = "INVALID_THRESHOLDS"

    def __init__(self, t1: Any, t2: Any, reason: str):
        self.t1 = t1
        self.t2 = t2
        self.reason = reason
        super().__init__(f"Invalid aging thresholds ({t1}, {t2}): {reason}")


class InvalidConversionRateError(AgingError):
    """Conversion rate applied to aged amounts cannot be negative."""

    code: str = "INVALID_RATE"

    def __init__(self, rate: Any):
        self.rate = str(rate)
        super().__init__(f"Conversion rate cannot be negative: {rate}")


# Currency


class CurrencyError(ReportsError):
    """Base exception for currency-related errors."""

    code: str = "CURRENCY_ERROR"


class InvalidCurrencyError(CurrencyError):
    """Currency code is not a known ISO 4217 code."""

    code: str = "INVALID_CURRENCY"

    def __init__(self, currency: str):
        self.currency = currency
        super().__init__(f"Invalid ISO 4217 currency code: {currency}")


class ExchangeRateNotFoundError(CurrencyError):
    """No exchange rate stored for the currency on or before the date."""

    code: str = "EXCHANGE_RATE_NOT_FOUND"

    def __init__(self, currency: str, as_of: date):
        self.currency = currency
        self.as_of = as_of.isoformat()
        super().__init__(
            f"No exchange rate for {currency} on or before {as_of.isoformat()}"
        )


# Configuration


class ConfigError(ReportsError):
    """Base exception for configuration errors."""

    code: str = "CONFIG_ERROR"


class InvalidPreferencesError(ConfigError):
    """A company preference value is missing or unusable."""

    code: str = "INVALID_PREFERENCES"

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid preference '{field}': {reason}")


# Report services


class ReportError(ReportsError):
    """Base exception for report service errors."""

    code: str = "REPORT_ERROR"

    def __init__(self, report_code: str, message: str):
        self.report_code = report_code
        super().__init__(message)


class ReportValidationError(ReportError):
    """Report parameters failed validation."""

    code: str = "REPORT_VALIDATION"

    def __init__(self, report_code: str, field_errors: dict[str, str]):
        self.field_errors = dict(field_errors)
        super().__init__(
            report_code,
            f"Validation failed for report {report_code}: "
            + "; ".join(f"{k}: {v}" for k, v in sorted(self.field_errors.items())),
        )

    def error_for(self, field: str) -> str | None:
        """Return the validation message for one field, if any."""
        return self.field_errors.get(field)


class ReportGenerationError(ReportError):
    """A report stage failed after validation."""

    code: str = "REPORT_GENERATION"

    def __init__(self, report_code: str, stage: str, reason: str):
        self.stage = stage
        self.reason = reason
        super().__init__(
            report_code, f"Report {report_code} failed during {stage}: {reason}"
        )
