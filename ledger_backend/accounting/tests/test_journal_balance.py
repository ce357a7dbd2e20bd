# accounting/tests/test_journal_balance.py

from __future__ import annotations

from datetime import date
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db.models import Sum
from django.test import TestCase
from hypothesis import given, settings, strategies as st
from hypothesis.extra.django import TestCase as HypothesisTestCase

from accounting.models.entry import AccountingEntry
from accounting.models.journal import JournalHeader, JournalLine, StructuralAccount
from accounting.services.entry_service import get_entry, post_entry, post_offsetting_entry
from accounting.services.exceptions import (
    LedgerValidationError,
    NotFoundError,
    UnbalancedJournalError,
)
from accounting.services.journal_service import (
    HeaderSpec,
    LineSpec,
    credit,
    debit,
    post_balanced,
    validate_balanced,
)
from accounting.services.posting import (
    OBLIGATION_PAYABLE,
    OBLIGATION_RECEIVABLE,
    post_invoice_recognition,
    post_settlement_movement,
)


def _entry(amount=Decimal("100.00")) -> AccountingEntry:
    return post_entry(
        document_date=date(2024, 3, 1),
        document_type=AccountingEntry.DOC_INTERNAL,
        direction=AccountingEntry.INFLOW,
        financial_status=AccountingEntry.COLLECTED,
        net_amount=amount,
    )


def _assert_balanced(testcase, journal: JournalHeader):
    totals = journal.lines.aggregate(d=Sum("debit_amount"), c=Sum("credit_amount"))
    testcase.assertEqual(totals["d"], totals["c"])
    testcase.assertEqual(totals["d"], journal.amount)


class ValidateBalancedTests(TestCase):
    def test_balanced_lines_pass(self):
        lines = validate_balanced(
            amount="50.00",
            lines=[
                debit(StructuralAccount.BANK, "50.00"),
                credit(StructuralAccount.RECEIVABLES, "50.00"),
            ],
        )
        self.assertEqual(len(lines), 2)

    def test_single_line_rejected(self):
        with self.assertRaises(UnbalancedJournalError):
            validate_balanced(amount="50.00", lines=[debit(StructuralAccount.BANK, "50.00")])

    def test_debits_not_equal_credits_rejected(self):
        with self.assertRaises(UnbalancedJournalError):
            validate_balanced(
                amount="50.00",
                lines=[
                    debit(StructuralAccount.BANK, "50.00"),
                    credit(StructuralAccount.RECEIVABLES, "49.99"),
                ],
            )

    def test_header_amount_mismatch_rejected(self):
        with self.assertRaises(UnbalancedJournalError):
            validate_balanced(
                amount="60.00",
                lines=[
                    debit(StructuralAccount.BANK, "50.00"),
                    credit(StructuralAccount.RECEIVABLES, "50.00"),
                ],
            )

    def test_line_with_both_sides_rejected(self):
        with self.assertRaises(UnbalancedJournalError):
            validate_balanced(
                amount="50.00",
                lines=[
                    LineSpec(StructuralAccount.BANK, Decimal("50.00"), Decimal("50.00")),
                    credit(StructuralAccount.RECEIVABLES, "50.00"),
                ],
            )

    def test_line_with_no_side_rejected(self):
        with self.assertRaises(UnbalancedJournalError):
            validate_balanced(
                amount="0.00",
                lines=[
                    LineSpec(StructuralAccount.BANK),
                    LineSpec(StructuralAccount.RECEIVABLES),
                ],
            )

    def test_negative_amount_rejected(self):
        with self.assertRaises(UnbalancedJournalError):
            validate_balanced(
                amount="-5.00",
                lines=[
                    debit(StructuralAccount.BANK, "-5.00"),
                    credit(StructuralAccount.RECEIVABLES, "-5.00"),
                ],
            )

    def test_unknown_account_rejected(self):
        with self.assertRaises(UnbalancedJournalError):
            validate_balanced(
                amount="10.00",
                lines=[
                    LineSpec("REVENUE", debit=Decimal("10.00")),
                    credit(StructuralAccount.BANK, "10.00"),
                ],
            )


class PostBalancedTests(TestCase):
    def test_writes_header_and_ordered_lines(self):
        entry = _entry()
        journal = post_balanced(
            HeaderSpec(
                accounting_entry=entry,
                competence_date=entry.document_date,
                amount=Decimal("100.00"),
                description="Collection - Acme",
                lines=[
                    debit(StructuralAccount.BANK, "100.00", "Collection"),
                    credit(StructuralAccount.RECEIVABLES, "100.00", "Receivable settled"),
                ],
            )
        )

        lines = list(journal.lines.order_by("line_order"))
        self.assertEqual([line.line_order for line in lines], [1, 2])
        self.assertEqual(lines[0].account_key, StructuralAccount.BANK)
        self.assertTrue(lines[0].is_debit)
        _assert_balanced(self, journal)

    def test_unbalanced_journal_writes_nothing(self):
        entry = _entry()
        with self.assertRaises(UnbalancedJournalError):
            post_balanced(
                HeaderSpec(
                    accounting_entry=entry,
                    competence_date=entry.document_date,
                    amount=Decimal("100.00"),
                    description="Broken",
                    lines=[
                        debit(StructuralAccount.BANK, "100.00"),
                        credit(StructuralAccount.RECEIVABLES, "90.00"),
                    ],
                )
            )

        self.assertFalse(JournalHeader.objects.exists())
        self.assertFalse(JournalLine.objects.exists())

    def test_missing_description_rejected(self):
        entry = _entry()
        with self.assertRaises(LedgerValidationError):
            post_balanced(
                HeaderSpec(
                    accounting_entry=entry,
                    competence_date=entry.document_date,
                    amount=Decimal("100.00"),
                    description="   ",
                    lines=[
                        debit(StructuralAccount.BANK, "100.00"),
                        credit(StructuralAccount.RECEIVABLES, "100.00"),
                    ],
                )
            )


class AppendOnlyRecordTests(TestCase):
    def test_entry_cannot_be_updated_or_deleted(self):
        entry = _entry()

        entry.description = "edited"
        with self.assertRaises(ValidationError):
            entry.save()

        with self.assertRaises(ValidationError):
            entry.delete()

    def test_journal_cannot_be_updated_or_deleted(self):
        posting = post_settlement_movement(
            obligation_type=OBLIGATION_RECEIVABLE,
            counterparty_name="Acme",
            amount="10.00",
            movement_date=date(2024, 3, 1),
        )

        with self.assertRaises(ValidationError):
            posting.journal.save()
        with self.assertRaises(ValidationError):
            posting.journal.delete()
        with self.assertRaises(ValidationError):
            posting.journal.lines.first().delete()

    def test_total_must_equal_net_plus_tax(self):
        with self.assertRaises(ValidationError):
            AccountingEntry.objects.create(
                document_type=AccountingEntry.DOC_INVOICE,
                direction=AccountingEntry.INFLOW,
                financial_status=AccountingEntry.TO_COLLECT,
                net_amount=Decimal("100.00"),
                tax_amount=Decimal("22.00"),
                total_amount=Decimal("100.00"),
            )


class EntryStoreTests(TestCase):
    def test_get_missing_entry(self):
        with self.assertRaises(NotFoundError):
            get_entry(987654)

    def test_offsetting_entry_reverses_direction(self):
        original = post_entry(
            document_date=date(2024, 3, 1),
            document_type=AccountingEntry.DOC_INVOICE,
            direction=AccountingEntry.INFLOW,
            financial_status=AccountingEntry.TO_COLLECT,
            net_amount="100.00",
            tax_amount="22.00",
            tax_rate="22.00",
        )

        offset = post_offsetting_entry(entry=original, document_date=date(2024, 3, 5))

        self.assertEqual(offset.direction, AccountingEntry.OUTFLOW)
        self.assertEqual(offset.financial_status, AccountingEntry.PAID)
        self.assertEqual(offset.total_amount, Decimal("122.00"))
        original.refresh_from_db()
        self.assertEqual(original.direction, AccountingEntry.INFLOW)

    def test_entries_with_cent_tax_amounts_are_accepted(self):
        for net, tax in (("0.10", "0.02"), ("2.30", "0.51"), ("1234.57", "271.61")):
            with self.subTest(net=net, tax=tax):
                entry = post_entry(
                    document_date=date(2024, 3, 1),
                    document_type=AccountingEntry.DOC_INVOICE,
                    direction=AccountingEntry.INFLOW,
                    financial_status=AccountingEntry.TO_COLLECT,
                    net_amount=net,
                    tax_amount=tax,
                    tax_rate="22.00",
                )
                entry.refresh_from_db()
                self.assertEqual(entry.total_amount, Decimal(net) + Decimal(tax))

    def test_negative_net_rejected(self):
        with self.assertRaises(LedgerValidationError):
            post_entry(
                document_date=date(2024, 3, 1),
                document_type=AccountingEntry.DOC_INVOICE,
                direction=AccountingEntry.INFLOW,
                financial_status=AccountingEntry.TO_COLLECT,
                net_amount="-1.00",
            )


class PostingAdapterTests(TestCase):
    def test_open_invoice_recognition_is_pending(self):
        posting = post_invoice_recognition(
            invoice_number="F-1",
            counterparty_name="Acme",
            invoice_date=date(2024, 3, 1),
            direction=AccountingEntry.INFLOW,
            financial_status=AccountingEntry.TO_COLLECT,
            net_amount=Decimal("1000.00"),
            tax_amount=Decimal("220.00"),
            tax_rate=Decimal("22.00"),
        )

        self.assertEqual(posting.journal.status, JournalHeader.STATUS_PENDING)
        self.assertEqual(posting.journal.amount, Decimal("1220.00"))
        self.assertEqual(posting.entry.description, "Invoice F-1 - Acme")
        _assert_balanced(self, posting.journal)

    def test_paid_purchase_recognition_is_confirmed(self):
        posting = post_invoice_recognition(
            invoice_number="P-7",
            counterparty_name="Supplies Ltd",
            invoice_date=date(2024, 3, 1),
            direction=AccountingEntry.OUTFLOW,
            financial_status=AccountingEntry.PAID,
            net_amount=Decimal("100.00"),
            tax_amount=Decimal("0.00"),
            tax_rate=Decimal("0.00"),
            payment_date=date(2024, 3, 1),
        )

        self.assertEqual(posting.journal.status, JournalHeader.STATUS_CONFIRMED)
        credit_line = posting.journal.lines.get(credit_amount__gt=0)
        self.assertEqual(credit_line.account_key, StructuralAccount.PAYABLES)

    def test_payable_movement_debits_payables_credits_bank(self):
        posting = post_settlement_movement(
            obligation_type=OBLIGATION_PAYABLE,
            counterparty_name="Supplies Ltd",
            amount="75.50",
            movement_date=date(2024, 3, 2),
            payment_method="bank_transfer",
        )

        self.assertEqual(posting.entry.direction, AccountingEntry.OUTFLOW)
        self.assertEqual(posting.entry.financial_status, AccountingEntry.PAID)
        self.assertEqual(posting.entry.tax_amount, Decimal("0.00"))
        self.assertEqual(posting.journal.status, JournalHeader.STATUS_REGISTERED)
        self.assertEqual(posting.journal.description, "Payment - Supplies Ltd")

        d = posting.journal.lines.get(debit_amount__gt=0)
        c = posting.journal.lines.get(credit_amount__gt=0)
        self.assertEqual((d.account_key, c.account_key), ("PAYABLES", "BANK"))


amounts = st.decimals(
    min_value=Decimal("0.01"),
    max_value=Decimal("999999.99"),
    places=2,
    allow_nan=False,
    allow_infinity=False,
)


class BalanceInvariantPropertyTests(HypothesisTestCase):
    @settings(max_examples=40, deadline=None)
    @given(
        net=amounts,
        rate=st.sampled_from([Decimal("0"), Decimal("4"), Decimal("10"), Decimal("22")]),
        direction=st.sampled_from([AccountingEntry.INFLOW, AccountingEntry.OUTFLOW]),
    )
    def test_invoice_recognition_always_balances(self, net, rate, direction):
        tax = (net * rate / Decimal("100")).quantize(Decimal("0.01"))
        posting = post_invoice_recognition(
            invoice_number="H-1",
            counterparty_name="Prop",
            invoice_date=date(2024, 1, 1),
            direction=direction,
            financial_status=AccountingEntry.TO_COLLECT,
            net_amount=net,
            tax_amount=tax,
            tax_rate=rate,
        )
        _assert_balanced(self, posting.journal)

    @settings(max_examples=40, deadline=None)
    @given(
        amount=amounts,
        obligation=st.sampled_from([OBLIGATION_RECEIVABLE, OBLIGATION_PAYABLE]),
    )
    def test_settlement_movement_always_balances(self, amount, obligation):
        posting = post_settlement_movement(
            obligation_type=obligation,
            counterparty_name="Prop",
            amount=amount,
            movement_date=date(2024, 1, 1),
        )
        _assert_balanced(self, posting.journal)
        self.assertEqual(posting.journal.amount, posting.entry.total_amount)
