# invoices/services/registry_service.py

"""
======================================================
PATH: invoices/services/registry_service.py
======================================================
INVOICE REGISTRY SERVICE

Operations:
- create_draft(): persist a draft invoice with computed tax / total
- register():     draft -> registered, exactly once
- get_invoice(), invoice_stats()

register() canonical flow (ONE transaction):
  1) Lock the invoice row, re-check status == draft
  2) Post AccountingEntry + balanced recognition journal
  3) Open a Settlement when the invoice carries a future cash obligation
  4) Conditional flip: UPDATE ... WHERE status = 'draft'
  5) invoice_registered is sent on commit (never on rollback)

The pre-transaction status check is a fast path only; the flip in step 4
is the authoritative guard against double registration.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.db.models import Count, Q, Sum
from django.utils import timezone

from accounting.models.entry import AccountingEntry
from accounting.services.exceptions import (
    InvalidStateError,
    LedgerValidationError,
    NotFoundError,
)
from accounting.services.money import ZERO, money
from accounting.services.posting import OPEN_FINANCIAL_STATUSES, post_invoice_recognition
from accounting.services.transactions import run_atomic
from invoices.models import Invoice
from invoices.signals import invoice_registered
from settlements.services.settlement_service import Counterparty, create_settlement

logger = logging.getLogger("ledger.invoices")


@dataclass(frozen=True)
class RegistrationResult:
    accounting_entry_id: int
    journal_id: int
    settlement_id: uuid.UUID | None

    def as_dict(self) -> dict:
        return {
            "accountingEntryId": self.accounting_entry_id,
            "journalId": self.journal_id,
            "settlementId": str(self.settlement_id) if self.settlement_id else None,
        }


# =====================================================
# DEFAULTS
# =====================================================

def default_counterparty_type(invoice_type: str) -> str:
    if invoice_type == Invoice.TYPE_PURCHASE:
        return Invoice.SUPPLIER
    return Invoice.CUSTOMER


def default_financial_status(invoice_type: str) -> str:
    if invoice_type == Invoice.TYPE_PURCHASE:
        return AccountingEntry.TO_PAY
    return AccountingEntry.TO_COLLECT


def _validate_draft_input(*, invoice_number, invoice_type, net_amount, tax_rate):
    if not (invoice_number or "").strip():
        raise LedgerValidationError("invoice_number is required")

    if invoice_type not in dict(Invoice.INVOICE_TYPES):
        raise LedgerValidationError(f"Invalid invoice_type: {invoice_type!r}")

    # money() reads blanks as 0.00; a draft needs explicit amounts
    for field, value in (("net_amount", net_amount), ("tax_rate", tax_rate)):
        if value is None or not str(value).strip():
            raise LedgerValidationError(f"{field} is required")

    net = money(net_amount, field="net_amount")
    if net < ZERO:
        raise LedgerValidationError("net_amount cannot be negative")

    rate = money(tax_rate, field="tax_rate")
    if rate < ZERO:
        raise LedgerValidationError("tax_rate cannot be negative")

    return net, rate


# =====================================================
# DRAFTS
# =====================================================

def create_draft(
    *,
    invoice_number: str,
    invoice_type: str,
    counterparty_name: str,
    net_amount,
    tax_rate=ZERO,
    invoice_date=None,
    counterparty_type: str | None = None,
    counterparty_id: str = "",
    vat_regime: str | None = None,
    financial_status: str | None = None,
    due_date=None,
    payment_date=None,
    notes: str = "",
    user=None,
) -> Invoice:
    net, rate = _validate_draft_input(
        invoice_number=invoice_number,
        invoice_type=invoice_type,
        net_amount=net_amount,
        tax_rate=tax_rate,
    )

    cp_type = counterparty_type or default_counterparty_type(invoice_type)
    cp_name = (counterparty_name or "").strip()
    number = invoice_number.strip()

    if Invoice.objects.filter(
        counterparty_type=cp_type,
        counterparty_name=cp_name,
        invoice_number=number,
    ).exists():
        raise LedgerValidationError(
            f"Invoice number {number} already exists for {cp_name}"
        )

    invoice = Invoice(
        invoice_number=number,
        invoice_type=invoice_type,
        invoice_date=invoice_date or timezone.localdate(),
        counterparty_type=cp_type,
        counterparty_name=cp_name,
        counterparty_id=(counterparty_id or "").strip(),
        vat_regime=vat_regime or Invoice.VAT_DOMESTIC_TAXABLE,
        net_amount=net,
        tax_rate=rate,
        financial_status=financial_status or default_financial_status(invoice_type),
        due_date=due_date,
        payment_date=payment_date,
        notes=notes or "",
        created_by=user if getattr(user, "is_authenticated", False) else None,
    )

    try:
        with transaction.atomic():
            invoice.save()
    except ValidationError as exc:
        raise LedgerValidationError(f"Invalid invoice: {exc}") from exc
    except IntegrityError as exc:
        raise LedgerValidationError(
            f"Invoice number {number} already exists for {cp_name}"
        ) from exc

    logger.info(
        "Invoice draft created",
        extra={
            "invoice_id": str(invoice.id),
            "invoice_number": invoice.invoice_number,
            "total_amount": str(invoice.total_amount),
        },
    )
    return invoice


def get_invoice(invoice_id) -> Invoice:
    try:
        return Invoice.objects.get(id=invoice_id)
    except (Invoice.DoesNotExist, ValidationError, ValueError) as exc:
        raise NotFoundError(f"Invoice {invoice_id} not found") from exc


# =====================================================
# REGISTRATION
# =====================================================

def _precheck_registration(invoice: Invoice):
    if invoice.status != Invoice.STATUS_DRAFT:
        raise InvalidStateError(
            f"Invoice {invoice.invoice_number} is already {invoice.status}"
        )

    if invoice.total_amount <= ZERO:
        raise LedgerValidationError("Cannot register an invoice with a zero total")


def _register_once(*, invoice_id, user) -> tuple[Invoice, RegistrationResult]:
    try:
        invoice = Invoice.objects.select_for_update().get(id=invoice_id)
    except Invoice.DoesNotExist as exc:
        raise NotFoundError(f"Invoice {invoice_id} not found") from exc

    _precheck_registration(invoice)

    posting = post_invoice_recognition(
        invoice_number=invoice.invoice_number,
        counterparty_name=invoice.counterparty_name,
        invoice_date=invoice.invoice_date,
        direction=invoice.direction,
        financial_status=invoice.financial_status,
        net_amount=invoice.net_amount,
        tax_amount=invoice.tax_amount,
        tax_rate=invoice.tax_rate,
        payment_date=invoice.payment_date,
    )

    settlement = None
    if invoice.financial_status in OPEN_FINANCIAL_STATUSES:
        settlement = create_settlement(
            total_amount=invoice.total_amount,
            due_date=invoice.due_date or invoice.invoice_date,
            obligation_type=invoice.obligation_type,
            counterparty=Counterparty(
                name=invoice.counterparty_name,
                type=invoice.counterparty_type,
                id=invoice.counterparty_id,
            ),
            originating_entry=posting.entry,
            originating_journal=posting.journal,
            document_date=invoice.invoice_date,
            notes=f"Invoice {invoice.invoice_number}",
        )

    flipped = Invoice.objects.filter(
        id=invoice.id,
        status=Invoice.STATUS_DRAFT,
    ).update(
        status=Invoice.STATUS_REGISTERED,
        registered_at=timezone.now(),
        registered_by=user if getattr(user, "is_authenticated", False) else None,
        accounting_entry=posting.entry,
        journal=posting.journal,
        settlement=settlement,
    )
    if flipped != 1:
        raise InvalidStateError(
            f"Invoice {invoice.invoice_number} was registered concurrently"
        )

    invoice.refresh_from_db()

    transaction.on_commit(
        lambda: invoice_registered.send(
            sender=Invoice,
            invoice=invoice,
            settlement_id=settlement.id if settlement else None,
        )
    )

    return invoice, RegistrationResult(
        accounting_entry_id=posting.entry.id,
        journal_id=posting.journal.id,
        settlement_id=settlement.id if settlement else None,
    )


def register(invoice_id, *, user=None) -> RegistrationResult:
    _precheck_registration(get_invoice(invoice_id))

    invoice, result = run_atomic(
        lambda: _register_once(invoice_id=invoice_id, user=user),
        operation="register_invoice",
    )

    logger.info(
        "Invoice registered",
        extra={
            "invoice_id": str(invoice.id),
            "invoice_number": invoice.invoice_number,
            "accounting_entry_id": result.accounting_entry_id,
            "journal_id": result.journal_id,
            "settlement_id": str(result.settlement_id) if result.settlement_id else None,
        },
    )
    return result


# =====================================================
# STATS
# =====================================================

def invoice_stats(queryset=None) -> dict:
    """
    Counts per lifecycle status and open totals of registered invoices.
    """
    qs = queryset if queryset is not None else Invoice.objects.all()
    registered = Q(status=Invoice.STATUS_REGISTERED)

    agg = qs.aggregate(
        draft_count=Count("id", filter=Q(status=Invoice.STATUS_DRAFT)),
        registered_count=Count("id", filter=registered),
        to_collect=Sum(
            "total_amount",
            filter=registered & Q(financial_status=AccountingEntry.TO_COLLECT),
        ),
        to_pay=Sum(
            "total_amount",
            filter=registered & Q(financial_status=AccountingEntry.TO_PAY),
        ),
    )

    return {
        "draftCount": agg["draft_count"] or 0,
        "registeredCount": agg["registered_count"] or 0,
        "toCollectTotal": str(money(agg["to_collect"] or Decimal("0"))),
        "toPayTotal": str(money(agg["to_pay"] or Decimal("0"))),
    }
