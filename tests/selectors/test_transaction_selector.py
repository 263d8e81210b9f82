"""Tests for TransactionSelector against an in-memory database."""

from datetime import date
from decimal import Decimal

from reports_kernel.domain.transactions import Ledger, Transaction, TransactionKind
from reports_kernel.selectors import TransactionSelector


class TestCounterparties:

    def test_filtered_by_ledger_and_ordered_by_name(self, session, make_counterparty):
        make_counterparty(code="C2", name="Zeta")
        make_counterparty(code="C1", name="Alpha")
        make_counterparty(code="S1", name="Beta", ledger=Ledger.SUPPLIER)

        names = [cp.name for cp in TransactionSelector(session).counterparties(Ledger.CUSTOMER)]

        assert names == ["Alpha", "Zeta"]

    def test_single_counterparty(self, session, make_counterparty):
        target = make_counterparty(code="C1", name="Alpha")
        make_counterparty(code="C2", name="Beta")

        found = TransactionSelector(session).counterparties(Ledger.CUSTOMER, target.id)

        assert [cp.id for cp in found] == [target.id]

    def test_inactive_display_name(self, session, make_counterparty):
        cp = make_counterparty(name="Old Co", inactive=True)
        assert cp.display_name == "Old Co (Inactive)"
        assert cp.ledger_type is Ledger.CUSTOMER


class TestTransactionsAsOf:

    def test_returns_transaction_dtos(self, session, make_counterparty, post_transaction):
        cp = make_counterparty()
        post_transaction(
            cp, TransactionKind.INVOICE, date(2024, 1, 1), "100",
            due_date=date(2024, 1, 31), tax="10",
        )

        result = TransactionSelector(session).transactions_as_of(cp.id, date(2024, 3, 1))

        assert len(result) == 1
        assert isinstance(result[0], Transaction)
        assert result[0].gross_amount == Decimal("110")
        assert result[0].due_date == date(2024, 1, 31)

    def test_excludes_future_voided_and_deliveries(
        self, session, make_counterparty, post_transaction
    ):
        cp = make_counterparty()
        post_transaction(cp, TransactionKind.INVOICE, date(2024, 1, 1), "100", reference="keep")
        post_transaction(cp, TransactionKind.INVOICE, date(2024, 4, 1), "100", reference="future")
        post_transaction(cp, TransactionKind.INVOICE, date(2024, 1, 2), "100", voided=True)
        post_transaction(cp, TransactionKind.DELIVERY, date(2024, 1, 3), "100")

        result = TransactionSelector(session).transactions_as_of(cp.id, date(2024, 3, 1))

        assert [t.reference for t in result] == ["keep"]

    def test_skips_settled_unless_show_all(self, session, make_counterparty, post_transaction):
        cp = make_counterparty()
        post_transaction(cp, TransactionKind.INVOICE, date(2024, 1, 1), "100", allocated="99.997")
        post_transaction(cp, TransactionKind.INVOICE, date(2024, 1, 2), "100", allocated="50")
        selector = TransactionSelector(session)

        open_items = selector.transactions_as_of(cp.id, date(2024, 3, 1))
        everything = selector.transactions_as_of(cp.id, date(2024, 3, 1), show_all=True)

        assert len(open_items) == 1
        assert open_items[0].allocated_amount == Decimal("50")
        assert len(everything) == 2

    def test_custom_comparison_delta(self, session, make_counterparty, post_transaction):
        cp = make_counterparty()
        post_transaction(cp, TransactionKind.INVOICE, date(2024, 1, 1), "100", allocated="99.5")

        result = TransactionSelector(session).transactions_as_of(
            cp.id, date(2024, 3, 1), float_comp_delta=Decimal("1")
        )

        assert result == []

    def test_prepayment_override(self, session, make_counterparty, post_transaction):
        cp = make_counterparty()
        post_transaction(cp, TransactionKind.INVOICE, date(2024, 1, 1), "100", prepayment="25")

        result = TransactionSelector(session).transactions_as_of(cp.id, date(2024, 3, 1))

        assert result[0].gross_amount == Decimal("25")

    def test_ordered_by_date(self, session, make_counterparty, post_transaction):
        cp = make_counterparty()
        post_transaction(cp, TransactionKind.PAYMENT, date(2024, 2, 1), "5", reference="b")
        post_transaction(cp, TransactionKind.INVOICE, date(2024, 1, 1), "5", reference="a")

        result = TransactionSelector(session).transactions_as_of(cp.id, date(2024, 3, 1))

        assert [t.reference for t in result] == ["a", "b"]


class TestPeriodQueries:

    def test_transactions_between_inclusive(self, session, make_counterparty, post_transaction):
        cp = make_counterparty()
        for day, ref in ((1, "before"), (10, "start"), (20, "end"), (21, "after")):
            post_transaction(cp, TransactionKind.INVOICE, date(2024, 1, day), "1", reference=ref)

        result = TransactionSelector(session).transactions_between(
            cp.id, date(2024, 1, 10), date(2024, 1, 20)
        )

        assert [t.reference for t in result] == ["start", "end"]

    def test_opening_balance_signed_gross(self, session, make_counterparty, post_transaction):
        cp = make_counterparty()
        post_transaction(cp, TransactionKind.INVOICE, date(2023, 12, 1), "500", allocated="200")
        post_transaction(cp, TransactionKind.PAYMENT, date(2023, 12, 15), "200", allocated="200")
        post_transaction(cp, TransactionKind.INVOICE, date(2024, 1, 1), "999")
        post_transaction(cp, TransactionKind.DELIVERY, date(2023, 12, 2), "50")

        selector = TransactionSelector(session)

        assert selector.opening_balance(cp.id, date(2024, 1, 1)) == Decimal("300")
        assert selector.opening_balance(cp.id, date(2024, 1, 1), show_all=False) == Decimal("300")

    def test_opening_balance_without_history(self, session, make_counterparty):
        cp = make_counterparty()
        assert TransactionSelector(session).opening_balance(cp.id, date(2024, 1, 1)) == 0

    def test_opening_allocated_signed(self, session, make_counterparty, post_transaction):
        cp = make_counterparty()
        post_transaction(cp, TransactionKind.INVOICE, date(2023, 12, 1), "500", allocated="200")
        post_transaction(cp, TransactionKind.PAYMENT, date(2023, 12, 15), "250", allocated="200")
        post_transaction(cp, TransactionKind.INVOICE, date(2024, 1, 1), "999", allocated="999")

        selector = TransactionSelector(session)

        assert selector.opening_allocated(cp.id, date(2024, 1, 1)) == Decimal("0")
        assert selector.opening_balance(cp.id, date(2024, 1, 1), show_all=False) == Decimal("250")
