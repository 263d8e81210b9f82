"""Currency -- registry of the ISO 4217 codes the ledgers trade in."""

from typing import ClassVar


class CurrencyRegistry:
    """Registry of the ISO 4217 currencies the ledgers trade in."""

    _CODES: ClassVar[frozenset[str]] = frozenset({
        "USD", "EUR", "GBP", "CHF", "CAD", "AUD", "NZD", "SEK", "NOK", "DKK",
        "ZAR", "INR", "CNY", "HKD", "SGD", "MXN", "BRL", "AED", "SAR", "JPY",
        "KRW", "ISK", "BHD", "KWD", "JOD", "OMR",
    })

    @classmethod
    def is_valid(cls, code: str) -> bool:
        return code in cls._CODES
