# accounting/services/posting.py

"""
======================================================
PATH: accounting/services/posting.py
======================================================
POSTING ADAPTER

Map business events -> AccountingEntry + balanced journal.

This module should remain a thin adapter:
- It DOES NOT do workflows (invoice registry / settlement services do).
- It DOES map business events -> accounting postings.
- It ALWAYS calls post_balanced (the engine) for the balance guarantee.

Events:
1) Invoice recognition (registration)
   inflow  (sale / credit note): D RECEIVABLES / C PAYABLES
   outflow (purchase):           C PAYABLES    / D RECEIVABLES
   The offset leg is a placeholder: revenue/expense accounts belong to the
   external general ledger. Only balance is guaranteed here.

2) Settlement movement (cash)
   receivable collected: D BANK        / C RECEIVABLES
   payable paid:         D PAYABLES    / C BANK
"""

from __future__ import annotations

from dataclasses import dataclass

from django.db import transaction

from accounting.models.entry import AccountingEntry
from accounting.models.journal import JournalHeader, StructuralAccount
from accounting.services.entry_service import post_entry
from accounting.services.journal_service import HeaderSpec, credit, debit, post_balanced
from accounting.services.money import money

OBLIGATION_RECEIVABLE = "receivable"
OBLIGATION_PAYABLE = "payable"

OPEN_FINANCIAL_STATUSES = {AccountingEntry.TO_COLLECT, AccountingEntry.TO_PAY}


@dataclass(frozen=True)
class Posting:
    entry: AccountingEntry
    journal: JournalHeader


def recognition_lines(*, direction: str, amount):
    if direction == AccountingEntry.OUTFLOW:
        return [
            credit(StructuralAccount.PAYABLES, amount, "Supplier payable"),
            debit(StructuralAccount.RECEIVABLES, amount, "Cost recognition (external GL)"),
        ]

    return [
        debit(StructuralAccount.RECEIVABLES, amount, "Customer receivable"),
        credit(StructuralAccount.PAYABLES, amount, "Revenue recognition (external GL)"),
    ]


def movement_lines(*, obligation_type: str, amount):
    if obligation_type == OBLIGATION_PAYABLE:
        return [
            debit(StructuralAccount.PAYABLES, amount, "Payable settled"),
            credit(StructuralAccount.BANK, amount, "Payment to supplier"),
        ]

    return [
        debit(StructuralAccount.BANK, amount, "Collection from customer"),
        credit(StructuralAccount.RECEIVABLES, amount, "Receivable settled"),
    ]


@transaction.atomic
def post_invoice_recognition(
    *,
    invoice_number: str,
    counterparty_name: str,
    invoice_date,
    direction: str,
    financial_status: str,
    net_amount,
    tax_amount,
    tax_rate,
    payment_date=None,
) -> Posting:
    entry = post_entry(
        document_date=invoice_date,
        document_type=AccountingEntry.DOC_INVOICE,
        direction=direction,
        financial_status=financial_status,
        net_amount=net_amount,
        tax_amount=tax_amount,
        tax_rate=tax_rate,
        payment_date=payment_date,
        description=f"Invoice {invoice_number} - {counterparty_name}",
    )

    journal_status = (
        JournalHeader.STATUS_PENDING
        if financial_status in OPEN_FINANCIAL_STATUSES
        else JournalHeader.STATUS_CONFIRMED
    )

    journal = post_balanced(
        HeaderSpec(
            accounting_entry=entry,
            competence_date=invoice_date,
            amount=entry.total_amount,
            description=f"Invoice {invoice_number} - {counterparty_name}",
            status=journal_status,
            lines=recognition_lines(direction=direction, amount=entry.total_amount),
        )
    )
    return Posting(entry=entry, journal=journal)


@transaction.atomic
def post_settlement_movement(
    *,
    obligation_type: str,
    counterparty_name: str,
    amount,
    movement_date,
    payment_method: str = "",
    notes: str = "",
) -> Posting:
    amt = money(amount)
    is_receivable = obligation_type == OBLIGATION_RECEIVABLE
    label = "Collection" if is_receivable else "Payment"

    entry = post_entry(
        document_date=movement_date,
        document_type=AccountingEntry.DOC_INTERNAL,
        direction=AccountingEntry.INFLOW if is_receivable else AccountingEntry.OUTFLOW,
        financial_status=AccountingEntry.COLLECTED if is_receivable else AccountingEntry.PAID,
        net_amount=amt,
        payment_method=payment_method,
        payment_date=movement_date,
        description=(notes or f"{label} for settlement")[:255],
    )

    journal = post_balanced(
        HeaderSpec(
            accounting_entry=entry,
            competence_date=movement_date,
            amount=amt,
            description=f"{label} - {counterparty_name or 'N/A'}",
            status=JournalHeader.STATUS_REGISTERED,
            payment_method=payment_method,
            lines=movement_lines(obligation_type=obligation_type, amount=amt),
        )
    )
    return Posting(entry=entry, journal=journal)
