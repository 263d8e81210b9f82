"""Pure domain value objects: currencies, exchange rates and the clock."""

from reports_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from reports_kernel.domain.values import Currency, ExchangeRate, round_amount, to_decimal

__all__ = [
    "Clock",
    "Currency",
    "DeterministicClock",
    "ExchangeRate",
    "SystemClock",
    "round_amount",
    "to_decimal",
]
