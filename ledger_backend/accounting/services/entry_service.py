# accounting/services/entry_service.py

"""
======================================================
PATH: accounting/services/entry_service.py
======================================================
ACCOUNTING ENTRY STORE

Append-only store of financial events.

- post_entry(): pure insert
- get_entry(): lookup
- post_offsetting_entry(): the ONLY way to correct an entry
  (new entry, opposite direction, same amounts)

There is deliberately no update or delete operation here.
"""

from __future__ import annotations

import logging

from django.core.exceptions import ValidationError
from django.db import transaction

from accounting.models.entry import AccountingEntry
from accounting.services.exceptions import LedgerValidationError, NotFoundError
from accounting.services.money import ZERO, money

logger = logging.getLogger("ledger.entries")

_SETTLED_STATUS = {
    AccountingEntry.INFLOW: AccountingEntry.COLLECTED,
    AccountingEntry.OUTFLOW: AccountingEntry.PAID,
}

_OPPOSITE = {
    AccountingEntry.INFLOW: AccountingEntry.OUTFLOW,
    AccountingEntry.OUTFLOW: AccountingEntry.INFLOW,
}


def post_entry(
    *,
    document_date,
    document_type: str,
    direction: str,
    financial_status: str,
    net_amount,
    tax_amount=ZERO,
    tax_rate=ZERO,
    payment_method: str = "",
    payment_date=None,
    description: str = "",
) -> AccountingEntry:
    net = money(net_amount, field="net_amount")
    tax = money(tax_amount, field="tax_amount")

    try:
        return AccountingEntry.objects.create(
            document_date=document_date,
            document_type=document_type,
            direction=direction,
            financial_status=financial_status,
            net_amount=net,
            tax_amount=tax,
            tax_rate=money(tax_rate, field="tax_rate"),
            total_amount=net + tax,
            payment_method=payment_method or "",
            payment_date=payment_date,
            description=description or "",
        )
    except ValidationError as exc:
        raise LedgerValidationError(f"Invalid accounting entry: {exc}") from exc


def get_entry(entry_id) -> AccountingEntry:
    try:
        return AccountingEntry.objects.get(id=entry_id)
    except AccountingEntry.DoesNotExist as exc:
        raise NotFoundError(f"Accounting entry {entry_id} not found") from exc


@transaction.atomic
def post_offsetting_entry(*, entry: AccountingEntry, document_date, description: str = ""):
    """
    Correct an entry by posting its mirror image.
    The original row is never touched.
    """
    direction = _OPPOSITE[entry.direction]

    corrected = post_entry(
        document_date=document_date,
        document_type=AccountingEntry.DOC_INTERNAL,
        direction=direction,
        financial_status=_SETTLED_STATUS[direction],
        net_amount=entry.net_amount,
        tax_amount=entry.tax_amount,
        tax_rate=entry.tax_rate,
        description=description or f"Offset of accounting entry #{entry.id}",
    )

    logger.info(
        "Offsetting accounting entry posted",
        extra={"original_entry_id": entry.id, "offset_entry_id": corrected.id},
    )
    return corrected
