# invoices/tests/test_registry.py

from __future__ import annotations

from datetime import date
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.test import TestCase

from accounting.models.entry import AccountingEntry
from accounting.models.journal import JournalHeader
from accounting.services.exceptions import (
    InvalidStateError,
    LedgerValidationError,
    NotFoundError,
)
from invoices.models import Invoice
from invoices.services.registry_service import (
    create_draft,
    invoice_stats,
    register,
)
from invoices.signals import invoice_registered
from settlements.models import Settlement, SettlementMovement
from settlements.services.settlement_service import apply_movement


def _sale(number="F-2024-001", net="1000.00", rate="22.00", **extra):
    return create_draft(
        invoice_number=number,
        invoice_type=Invoice.TYPE_SALE,
        counterparty_name="Acme",
        net_amount=net,
        tax_rate=rate,
        invoice_date=date(2024, 3, 1),
        **extra,
    )


class CreateDraftTests(TestCase):
    def test_tax_and_total_are_computed(self):
        invoice = _sale()

        self.assertEqual(invoice.status, Invoice.STATUS_DRAFT)
        self.assertEqual(invoice.tax_amount, Decimal("220.00"))
        self.assertEqual(invoice.total_amount, Decimal("1220.00"))

    def test_defaults_follow_invoice_type(self):
        sale = _sale()
        purchase = create_draft(
            invoice_number="P-1",
            invoice_type=Invoice.TYPE_PURCHASE,
            counterparty_name="Supplies Ltd",
            net_amount="10.00",
        )

        self.assertEqual(sale.counterparty_type, Invoice.CUSTOMER)
        self.assertEqual(sale.financial_status, AccountingEntry.TO_COLLECT)
        self.assertEqual(purchase.counterparty_type, Invoice.SUPPLIER)
        self.assertEqual(purchase.financial_status, AccountingEntry.TO_PAY)

    def test_rounding_is_half_up(self):
        invoice = _sale(net="0.05", rate="10.00")
        self.assertEqual(invoice.tax_amount, Decimal("0.01"))

    def test_negative_net_rejected(self):
        with self.assertRaises(LedgerValidationError):
            _sale(net="-1.00")

    def test_missing_net_rejected(self):
        for net in (None, "", "   "):
            with self.subTest(net=net):
                with self.assertRaises(LedgerValidationError):
                    _sale(net=net)
        self.assertFalse(Invoice.objects.exists())

    def test_missing_rate_rejected(self):
        with self.assertRaises(LedgerValidationError):
            _sale(rate=None)

    def test_negative_rate_rejected(self):
        with self.assertRaises(LedgerValidationError):
            _sale(rate="-1")

    def test_blank_number_rejected(self):
        with self.assertRaises(LedgerValidationError):
            _sale(number="   ")
        self.assertFalse(Invoice.objects.exists())

    def test_duplicate_number_for_same_counterparty_rejected(self):
        _sale()
        with self.assertRaises(LedgerValidationError):
            _sale()

    def test_same_number_for_other_counterparty_allowed(self):
        _sale()
        other = create_draft(
            invoice_number="F-2024-001",
            invoice_type=Invoice.TYPE_SALE,
            counterparty_name="Globex",
            net_amount="1.00",
        )
        self.assertEqual(other.invoice_number, "F-2024-001")


class RegisterTests(TestCase):
    def test_sale_registration_end_to_end(self):
        invoice = _sale()

        result = register(invoice.id)

        invoice.refresh_from_db()
        self.assertEqual(invoice.status, Invoice.STATUS_REGISTERED)
        self.assertIsNotNone(invoice.registered_at)
        self.assertEqual(invoice.accounting_entry_id, result.accounting_entry_id)
        self.assertEqual(invoice.journal_id, result.journal_id)
        self.assertEqual(invoice.settlement_id, result.settlement_id)

        entry = invoice.accounting_entry
        self.assertEqual(entry.direction, AccountingEntry.INFLOW)
        self.assertEqual(entry.document_type, AccountingEntry.DOC_INVOICE)
        self.assertEqual(entry.net_amount, Decimal("1000.00"))
        self.assertEqual(entry.tax_amount, Decimal("220.00"))
        self.assertEqual(entry.total_amount, Decimal("1220.00"))
        self.assertEqual(invoice.journal.status, JournalHeader.STATUS_PENDING)

        settlement = invoice.settlement
        self.assertEqual(settlement.total_amount, Decimal("1220.00"))
        self.assertEqual(settlement.residual_amount, Decimal("1220.00"))
        self.assertEqual(settlement.status, Settlement.STATUS_OPEN)
        self.assertEqual(settlement.obligation_type, Settlement.RECEIVABLE)
        self.assertEqual(settlement.notes, "Invoice F-2024-001")
        # no due date given: the invoice date is used
        self.assertEqual(settlement.due_date, date(2024, 3, 1))

        movement = apply_movement(
            settlement_id=settlement.id,
            amount="1220.00",
            movement_date=date(2024, 3, 20),
        )

        self.assertEqual(movement.settlement.status, Settlement.STATUS_CLOSED)
        self.assertEqual(movement.settlement.residual_amount, Decimal("0.00"))
        self.assertEqual(SettlementMovement.objects.count(), 1)
        self.assertEqual(AccountingEntry.objects.count(), 2)

        mv_entry = movement.movement.accounting_entry
        self.assertEqual(mv_entry.direction, AccountingEntry.INFLOW)
        self.assertEqual(mv_entry.financial_status, AccountingEntry.COLLECTED)

        lines = movement.movement.journal_header.lines
        self.assertEqual(lines.get(account_key="BANK").debit_amount, Decimal("1220.00"))
        self.assertEqual(
            lines.get(account_key="RECEIVABLES").credit_amount, Decimal("1220.00")
        )

        invoice.refresh_from_db()
        self.assertEqual(invoice.financial_status, AccountingEntry.COLLECTED)
        self.assertEqual(invoice.payment_date, date(2024, 3, 20))

    def test_partial_payments_close_at_total(self):
        invoice = _sale()
        settlement_id = register(invoice.id).settlement_id

        first = apply_movement(settlement_id=settlement_id, amount="500.00")
        self.assertEqual(first.settlement.residual_amount, Decimal("720.00"))
        self.assertEqual(first.settlement.status, Settlement.STATUS_PARTIAL)

        invoice.refresh_from_db()
        self.assertEqual(invoice.financial_status, AccountingEntry.TO_COLLECT)

        second = apply_movement(settlement_id=settlement_id, amount="720.00")
        self.assertEqual(second.settlement.residual_amount, Decimal("0.00"))
        self.assertEqual(second.settlement.status, Settlement.STATUS_CLOSED)

        total = sum(m.amount for m in second.settlement.movements.all())
        self.assertEqual(total, Decimal("1220.00"))

    def test_purchase_creates_payable(self):
        invoice = create_draft(
            invoice_number="P-9",
            invoice_type=Invoice.TYPE_PURCHASE,
            counterparty_name="Supplies Ltd",
            net_amount="100.00",
            tax_rate="22.00",
            due_date=date(2024, 5, 1),
        )

        result = register(invoice.id)
        settlement = Settlement.objects.get(id=result.settlement_id)

        self.assertEqual(settlement.obligation_type, Settlement.PAYABLE)
        self.assertEqual(settlement.counterparty_type, Settlement.SUPPLIER)
        self.assertEqual(settlement.due_date, date(2024, 5, 1))
        self.assertEqual(
            AccountingEntry.objects.get(id=result.accounting_entry_id).direction,
            AccountingEntry.OUTFLOW,
        )

    def test_already_settled_invoice_has_no_settlement(self):
        invoice = create_draft(
            invoice_number="NC-1",
            invoice_type=Invoice.TYPE_CREDIT_NOTE,
            counterparty_name="Acme",
            net_amount="50.00",
            financial_status=AccountingEntry.COLLECTED,
            payment_date=date(2024, 3, 1),
        )

        result = register(invoice.id)

        self.assertIsNone(result.settlement_id)
        self.assertIsNone(result.as_dict()["settlementId"])
        self.assertFalse(Settlement.objects.exists())
        self.assertEqual(
            JournalHeader.objects.get(id=result.journal_id).status,
            JournalHeader.STATUS_CONFIRMED,
        )

    def test_registration_with_fractional_tax_cents(self):
        cases = [
            ("0.10", "22.00"),
            ("1.10", "4.00"),
            ("1.10", "10.00"),
            ("2.30", "22.00"),
            ("1000.10", "22.00"),
            ("1234.57", "22.00"),
        ]
        for index, (net, rate) in enumerate(cases):
            with self.subTest(net=net, rate=rate):
                invoice = _sale(number=f"F-CENTS-{index}", net=net, rate=rate)
                result = register(invoice.id)

                entry = AccountingEntry.objects.get(id=result.accounting_entry_id)
                self.assertEqual(entry.total_amount, invoice.total_amount)
                self.assertEqual(entry.net_amount + entry.tax_amount, entry.total_amount)

                settlement = Settlement.objects.get(id=result.settlement_id)
                self.assertEqual(settlement.residual_amount, invoice.total_amount)

        self.assertEqual(
            Invoice.objects.filter(status=Invoice.STATUS_REGISTERED).count(),
            len(cases),
        )

    def test_double_registration_fails(self):
        invoice = _sale()
        register(invoice.id)

        with self.assertRaises(InvalidStateError):
            register(invoice.id)

        self.assertEqual(AccountingEntry.objects.count(), 1)
        self.assertEqual(JournalHeader.objects.count(), 1)
        self.assertEqual(Settlement.objects.count(), 1)

    def test_flip_is_rechecked_inside_transaction(self):
        """
        A concurrent registration that wins after our fast-path check must
        still be caught, and our writes must roll back.
        """
        from unittest import mock

        from invoices.services import registry_service

        invoice = _sale()
        real_precheck = registry_service._precheck_registration
        calls = {"n": 0}

        def precheck(inv):
            calls["n"] += 1
            real_precheck(inv)
            if calls["n"] == 2:
                Invoice.objects.filter(id=inv.id).update(status=Invoice.STATUS_REGISTERED)

        with mock.patch.object(registry_service, "_precheck_registration", precheck):
            with self.assertRaises(InvalidStateError):
                register(invoice.id)

        self.assertFalse(AccountingEntry.objects.exists())
        self.assertFalse(Settlement.objects.exists())

    def test_missing_invoice(self):
        with self.assertRaises(NotFoundError):
            register("00000000-0000-0000-0000-000000000000")

    def test_zero_total_cannot_be_registered(self):
        invoice = _sale(net="0.00")
        with self.assertRaises(LedgerValidationError):
            register(invoice.id)

    def test_registered_invoice_is_immutable(self):
        invoice = _sale()
        register(invoice.id)
        invoice.refresh_from_db()

        invoice.net_amount = Decimal("1.00")
        with self.assertRaises(ValidationError):
            invoice.save()

    def test_signal_sent_on_commit(self):
        received = []

        def receiver(sender, invoice, settlement_id, **kwargs):
            received.append((invoice.invoice_number, settlement_id))

        invoice_registered.connect(receiver)
        self.addCleanup(invoice_registered.disconnect, receiver)

        invoice = _sale()
        with self.captureOnCommitCallbacks(execute=True):
            result = register(invoice.id)

        self.assertEqual(received, [("F-2024-001", result.settlement_id)])


class InvoiceStatsTests(TestCase):
    def test_counts_and_open_totals(self):
        registered = _sale(number="A-1")
        register(registered.id)
        _sale(number="A-2")
        purchase = create_draft(
            invoice_number="P-1",
            invoice_type=Invoice.TYPE_PURCHASE,
            counterparty_name="Supplies Ltd",
            net_amount="100.00",
        )
        register(purchase.id)

        stats = invoice_stats()

        self.assertEqual(stats["draftCount"], 1)
        self.assertEqual(stats["registeredCount"], 2)
        self.assertEqual(stats["toCollectTotal"], "1220.00")
        self.assertEqual(stats["toPayTotal"], "100.00")
