# accounting/models/journal.py

"""
======================================================
PATH: accounting/models/journal.py
======================================================
JOURNAL MODELS (DOUBLE ENTRY)

JournalHeader: one per AccountingEntry.
JournalLine:   debit OR credit against a structural account.

Guarantees:
- Immutable once created (no updates, no deletes)
- Exactly one side of a line is non-zero (model + DB constraint)
- Balance (sum debit == sum credit == header.amount) is enforced by
  accounting/services/journal_service.py before anything is written
"""

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q
from django.utils import timezone

from accounting.models.entry import AccountingEntry


class StructuralAccount(models.TextChoices):
    BANK = "BANK", "Bank"
    RECEIVABLES = "RECEIVABLES", "Customer receivables"
    PAYABLES = "PAYABLES", "Supplier payables"


class JournalHeader(models.Model):
    STATUS_PENDING = "pending"
    STATUS_CONFIRMED = "confirmed"
    STATUS_REGISTERED = "registered"

    STATUSES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_CONFIRMED, "Confirmed"),
        (STATUS_REGISTERED, "Registered"),
    ]

    accounting_entry = models.OneToOneField(
        AccountingEntry,
        on_delete=models.PROTECT,
        related_name="journal",
    )

    competence_date = models.DateField(default=timezone.localdate)

    amount = models.DecimalField(max_digits=14, decimal_places=2)

    description = models.TextField(help_text="Narrative description of the journal")

    status = models.CharField(max_length=12, choices=STATUSES, default=STATUS_REGISTERED)

    payment_method = models.CharField(max_length=30, blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "journal_headers"
        ordering = ["-competence_date", "-created_at"]
        verbose_name = "Journal Header"
        verbose_name_plural = "Journal Headers"
        indexes = [
            models.Index(fields=["competence_date"], name="journal_competence_idx"),
            models.Index(fields=["status"], name="journal_status_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(amount__gt=Decimal("0.00")),
                name="chk_journal_amount_positive",
            ),
        ]

    def __str__(self):
        return f"Journal #{self.id} - {self.competence_date} - {self.amount}"

    def clean(self):
        self.description = (self.description or "").strip()
        if not self.description:
            raise ValidationError("Journal description is required")

        if self.amount is None or self.amount <= 0:
            raise ValidationError({"amount": "Journal amount must be > 0"})

    def save(self, *args, **kwargs):
        if self.pk:
            raise ValidationError("JournalHeader records are immutable once created")

        self.full_clean()
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("JournalHeader records are immutable and cannot be deleted")


class JournalLine(models.Model):
    journal_header = models.ForeignKey(
        JournalHeader,
        on_delete=models.PROTECT,
        related_name="lines",
    )

    line_order = models.PositiveSmallIntegerField()

    account_key = models.CharField(max_length=16, choices=StructuralAccount.choices)

    debit_amount = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )
    credit_amount = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )

    description = models.CharField(max_length=255, blank=True, default="")

    class Meta:
        db_table = "journal_lines"
        ordering = ["journal_header", "line_order"]
        verbose_name = "Journal Line"
        verbose_name_plural = "Journal Lines"
        indexes = [
            models.Index(fields=["account_key"], name="journal_line_account_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["journal_header", "line_order"],
                name="uniq_journal_line_order",
            ),
            models.CheckConstraint(
                condition=(
                    Q(debit_amount__gt=Decimal("0.00"), credit_amount=Decimal("0.00"))
                    | Q(debit_amount=Decimal("0.00"), credit_amount__gt=Decimal("0.00"))
                ),
                name="chk_journal_line_one_side",
            ),
        ]

    def __str__(self):
        side = "D" if self.debit_amount else "C"
        return f"{side} {self.account_key} {self.debit_amount or self.credit_amount}"

    @property
    def is_debit(self) -> bool:
        return bool(self.debit_amount and self.debit_amount > 0)

    def clean(self):
        if self.account_key not in StructuralAccount.values:
            raise ValidationError({"account_key": "Invalid structural account"})

        debit = self.debit_amount or Decimal("0.00")
        credit = self.credit_amount or Decimal("0.00")

        if debit < 0 or credit < 0:
            raise ValidationError("Debit or credit cannot be negative")

        if (debit > 0) == (credit > 0):
            raise ValidationError("A journal line must have exactly one non-zero side")

    def save(self, *args, **kwargs):
        if self.pk:
            raise ValidationError("JournalLine records are immutable once created")

        self.full_clean()
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("JournalLine records are immutable and cannot be deleted")
