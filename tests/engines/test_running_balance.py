"""Tests for the running-balance engine and period summaries."""

from datetime import date
from decimal import Decimal

import pytest

from reports_engines.running_balance import (
    PeriodSummary,
    RunningBalanceLine,
    drop_zero_lines,
    running_balance,
    summarize_period,
)
from reports_kernel.domain.transactions import Transaction, TransactionKind
from reports_kernel.exceptions import InvalidConversionRateError


def txn(kind, day, amount, allocated="0", reference=None):
    return Transaction(
        kind=kind,
        reference=reference or f"{kind.value}-{day}",
        transaction_date=date(2024, 1, day),
        gross_amount=Decimal(amount),
        allocated_amount=Decimal(allocated),
    )


class TestRunningBalance:
    """Tests for running_balance."""

    def test_alternating_invoices_and_payments_are_prefix_sums(self):
        transactions = [
            txn(TransactionKind.INVOICE, 1, "100"),
            txn(TransactionKind.PAYMENT, 2, "40"),
            txn(TransactionKind.INVOICE, 3, "250"),
            txn(TransactionKind.PAYMENT, 4, "300"),
        ]

        lines = running_balance(transactions, Decimal("0"), Decimal("1"))

        assert [line.amount for line in lines] == [
            Decimal("100"), Decimal("-40"), Decimal("250"), Decimal("-300"),
        ]
        assert [line.balance_after for line in lines] == [
            Decimal("100"), Decimal("60"), Decimal("310"), Decimal("10"),
        ]

    def test_opening_balance_seeds_accumulator(self):
        lines = running_balance([txn(TransactionKind.INVOICE, 1, "10")], Decimal("90"))
        assert lines[0].balance_after == Decimal("100")

    def test_rate_applies_to_opening_and_lines(self):
        lines = running_balance(
            [txn(TransactionKind.INVOICE, 1, "10")], Decimal("90"), Decimal("2")
        )
        assert lines[0].amount == Decimal("20")
        assert lines[0].balance_after == Decimal("200")

    def test_sorted_by_date(self):
        transactions = [
            txn(TransactionKind.INVOICE, 9, "1", reference="second"),
            txn(TransactionKind.INVOICE, 2, "1", reference="first"),
        ]
        lines = running_balance(transactions)
        assert [line.transaction.reference for line in lines] == ["first", "second"]

    def test_deliveries_skipped(self):
        transactions = [
            txn(TransactionKind.INVOICE, 1, "10"),
            txn(TransactionKind.DELIVERY, 2, "500"),
        ]
        lines = running_balance(transactions)
        assert len(lines) == 1

    def test_gross_amounts_by_default(self):
        lines = running_balance([txn(TransactionKind.INVOICE, 1, "100", allocated="100")])
        assert lines[0].amount == Decimal("100")

    def test_allocation_netted_when_not_show_all(self):
        lines = running_balance(
            [txn(TransactionKind.INVOICE, 1, "100", allocated="30")], show_all=False
        )
        assert lines[0].amount == Decimal("70")

    def test_empty(self):
        assert running_balance([], Decimal("50")) == ()

    def test_negative_rate_rejected(self):
        with pytest.raises(InvalidConversionRateError):
            running_balance([], Decimal("0"), Decimal("-2"))

    def test_debit_and_credit_split(self):
        line = RunningBalanceLine(
            transaction=txn(TransactionKind.PAYMENT, 1, "5"),
            amount=Decimal("-5"),
            balance_after=Decimal("-5"),
        )
        assert line.debit == Decimal("0")
        assert line.credit == Decimal("5")


class TestSummarizePeriod:
    """Tests for period summaries."""

    def test_debits_credits_and_closing(self):
        lines = running_balance(
            [
                txn(TransactionKind.INVOICE, 1, "100"),
                txn(TransactionKind.CREDIT_NOTE, 2, "30"),
                txn(TransactionKind.PAYMENT, 3, "50"),
            ],
            Decimal("20"),
        )

        summary = summarize_period(lines, Decimal("20"))

        assert summary.opening == Decimal("20")
        assert summary.debits == Decimal("100")
        assert summary.credits == Decimal("80")
        assert summary.closing == Decimal("40")
        assert summary.closing == lines[-1].balance_after
        assert summary.movement == Decimal("20")

    def test_empty_period(self):
        summary = summarize_period((), Decimal("12.50"))
        assert summary.closing == Decimal("12.50")

    def test_addition(self):
        a = PeriodSummary(Decimal("1"), Decimal("2"), Decimal("3"))
        b = PeriodSummary(Decimal("10"), Decimal("20"), Decimal("30"))
        total = a + b
        assert (total.opening, total.debits, total.credits) == (
            Decimal("11"), Decimal("22"), Decimal("33"),
        )

    def test_allocated_and_outstanding_totals(self):
        lines = running_balance([
            txn(TransactionKind.INVOICE, 1, "100", allocated="60"),
            txn(TransactionKind.PAYMENT, 2, "60", allocated="60"),
            txn(TransactionKind.CREDIT_NOTE, 3, "10"),
        ])

        summary = summarize_period(
            lines,
            opening_balance=Decimal("50"),
            opening_allocated=Decimal("5"),
            opening_outstanding=Decimal("45"),
        )

        assert summary.allocated == Decimal("5")
        assert summary.outstanding == Decimal("75")
        assert summary.opening_outstanding == Decimal("45")
        assert summary.closing == Decimal("80")

    def test_addition_carries_allocation_figures(self):
        zero = Decimal("0")
        a = PeriodSummary(zero, zero, zero, Decimal("2"), Decimal("3"), Decimal("4"))
        b = PeriodSummary(zero, zero, zero, Decimal("20"), Decimal("30"), Decimal("40"))
        total = a + b
        assert (total.allocated, total.outstanding, total.opening_outstanding) == (
            Decimal("22"), Decimal("33"), Decimal("44"),
        )


class TestLineAllocation:
    """Allocated and outstanding split of each running-balance line."""

    def test_invoice_split(self):
        line = running_balance([txn(TransactionKind.INVOICE, 1, "100", allocated="30")])[0]
        assert line.amount == Decimal("100")
        assert line.allocated == Decimal("30")
        assert line.outstanding == Decimal("70")

    def test_payment_split_is_negative(self):
        line = running_balance([txn(TransactionKind.PAYMENT, 1, "80", allocated="50")])[0]
        assert line.allocated == Decimal("-50")
        assert line.outstanding == Decimal("-30")

    def test_split_sums_to_gross_after_rate(self):
        line = running_balance(
            [txn(TransactionKind.INVOICE, 1, "100", allocated="25")], rate=Decimal("2")
        )[0]
        assert line.allocated == Decimal("50")
        assert line.outstanding == Decimal("150")
        assert line.allocated + line.outstanding == line.amount


class TestDropZeroLines:
    """Per-line zero suppression."""

    def test_balance_mode_drops_zero_gross_only(self):
        transactions = [
            txn(TransactionKind.INVOICE, 1, "0", reference="zero"),
            txn(TransactionKind.INVOICE, 2, "100", allocated="100", reference="settled"),
            txn(TransactionKind.INVOICE, 3, "5", reference="open"),
        ]

        kept = drop_zero_lines(transactions, show_balance=True)

        assert [t.reference for t in kept] == ["settled", "open"]

    def test_outstanding_mode_drops_fully_allocated(self):
        transactions = [
            txn(TransactionKind.INVOICE, 1, "0", reference="zero"),
            txn(TransactionKind.INVOICE, 2, "100", allocated="100", reference="settled"),
            txn(TransactionKind.PAYMENT, 3, "40", allocated="10", reference="part"),
        ]

        kept = drop_zero_lines(transactions, show_balance=False)

        assert [t.reference for t in kept] == ["part"]

    @pytest.mark.parametrize("remainder,kept", [("0.004", False), ("0.005", True)])
    def test_outstanding_mode_uses_float_comp_delta(self, remainder, kept):
        transaction = txn(
            TransactionKind.INVOICE, 1, str(Decimal("10") + Decimal(remainder)), allocated="10"
        )

        result = drop_zero_lines(
            [transaction], show_balance=False, float_comp_delta=Decimal("0.004")
        )

        assert (result == [transaction]) is kept
