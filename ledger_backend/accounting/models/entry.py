# accounting/models/entry.py

"""
======================================================
PATH: accounting/models/entry.py
======================================================
ACCOUNTING ENTRY MODEL

A single financial event: invoice recognition or a cash movement
against a settlement.

Guarantees:
- Immutable once created (no updates, no deletes)
- total_amount == net_amount + tax_amount, checked in clean() on exact Decimals
  (sqlite stores decimals as REAL, so the sum is not a DB constraint)
- Corrections are new entries with the opposite direction, never edits
"""

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q
from django.utils import timezone


class AccountingEntry(models.Model):
    DOC_INVOICE = "invoice"
    DOC_INTERNAL = "internal_document"

    DOCUMENT_TYPES = [
        (DOC_INVOICE, "Invoice"),
        (DOC_INTERNAL, "Internal document"),
    ]

    INFLOW = "inflow"
    OUTFLOW = "outflow"

    DIRECTIONS = [
        (INFLOW, "Inflow"),
        (OUTFLOW, "Outflow"),
    ]

    TO_COLLECT = "to_collect"
    TO_PAY = "to_pay"
    COLLECTED = "collected"
    PAID = "paid"

    FINANCIAL_STATUSES = [
        (TO_COLLECT, "To collect"),
        (TO_PAY, "To pay"),
        (COLLECTED, "Collected"),
        (PAID, "Paid"),
    ]

    document_date = models.DateField(default=timezone.localdate)
    document_type = models.CharField(max_length=20, choices=DOCUMENT_TYPES)
    direction = models.CharField(max_length=8, choices=DIRECTIONS)

    net_amount = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )
    tax_amount = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )
    tax_rate = models.DecimalField(
        max_digits=5, decimal_places=2, default=Decimal("0.00")
    )
    total_amount = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )

    financial_status = models.CharField(max_length=12, choices=FINANCIAL_STATUSES)

    payment_method = models.CharField(max_length=30, blank=True, default="")
    payment_date = models.DateField(null=True, blank=True)

    description = models.CharField(max_length=255, blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "accounting_entries"
        ordering = ["-document_date", "-created_at"]
        verbose_name = "Accounting Entry"
        verbose_name_plural = "Accounting Entries"
        indexes = [
            models.Index(fields=["document_date"], name="acct_entry_doc_date_idx"),
            models.Index(
                fields=["direction", "financial_status"],
                name="acct_entry_dir_fin_idx",
            ),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(net_amount__gte=Decimal("0.00"))
                & Q(tax_amount__gte=Decimal("0.00")),
                name="chk_entry_amounts_nonnegative",
            ),
        ]

    def __str__(self):
        return f"AccountingEntry #{self.id} {self.direction} {self.total_amount}"

    @property
    def is_cash_movement(self) -> bool:
        return self.document_type == self.DOC_INTERNAL

    def clean(self):
        if self.direction not in (self.INFLOW, self.OUTFLOW):
            raise ValidationError({"direction": "Invalid direction"})

        if self.net_amount is not None and self.net_amount < 0:
            raise ValidationError({"net_amount": "net_amount cannot be negative"})

        if self.tax_amount is not None and self.tax_amount < 0:
            raise ValidationError({"tax_amount": "tax_amount cannot be negative"})

        if (self.net_amount or 0) + (self.tax_amount or 0) != (self.total_amount or 0):
            raise ValidationError(
                {"total_amount": "total_amount must equal net_amount + tax_amount"}
            )

        self.description = (self.description or "").strip()
        self.payment_method = (self.payment_method or "").strip()

    def save(self, *args, **kwargs):
        if self.pk:
            raise ValidationError("AccountingEntry records are immutable once created")

        self.full_clean()
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("AccountingEntry records are immutable and cannot be deleted")
