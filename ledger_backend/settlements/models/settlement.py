# settlements/models/settlement.py

"""
======================================================
PATH: settlements/models/settlement.py
======================================================
SETTLEMENT (OBLIGATION) MODEL

One open receivable or payable balance, tracked until fully
collected / paid.

Guarantees:
- total_amount is fixed at creation
- residual_amount only ever decreases, 0 <= residual <= total
- status is written from settlements.lifecycle.derive_status() on every save,
  it is never set independently
- counterparty_name is a snapshot (renames in the directory do not rewrite history)
- version increments on every residual change (optimistic lock)
"""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import F, Q
from django.utils import timezone

from accounting.models.entry import AccountingEntry
from accounting.models.journal import JournalHeader
from settlements import lifecycle

User = settings.AUTH_USER_MODEL


class Settlement(models.Model):
    RECEIVABLE = "receivable"
    PAYABLE = "payable"

    OBLIGATION_TYPES = [
        (RECEIVABLE, "Receivable"),
        (PAYABLE, "Payable"),
    ]

    CUSTOMER = "customer"
    SUPPLIER = "supplier"

    COUNTERPARTY_TYPES = [
        (CUSTOMER, "Customer"),
        (SUPPLIER, "Supplier"),
    ]

    STATUS_OPEN = lifecycle.STATUS_OPEN
    STATUS_PARTIAL = lifecycle.STATUS_PARTIAL
    STATUS_CLOSED = lifecycle.STATUS_CLOSED
    STATUS_VOIDED = lifecycle.STATUS_VOIDED

    STATUSES = [
        (STATUS_OPEN, "Open"),
        (STATUS_PARTIAL, "Partial"),
        (STATUS_CLOSED, "Closed"),
        (STATUS_VOIDED, "Voided"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    accounting_entry = models.ForeignKey(
        AccountingEntry,
        on_delete=models.PROTECT,
        related_name="settlements",
        null=True,
        blank=True,
        help_text="Originating accounting entry (invoice recognition)",
    )
    journal_header = models.ForeignKey(
        JournalHeader,
        on_delete=models.PROTECT,
        related_name="settlements",
        null=True,
        blank=True,
        help_text="Originating journal",
    )

    obligation_type = models.CharField(max_length=12, choices=OBLIGATION_TYPES)

    counterparty_type = models.CharField(max_length=10, choices=COUNTERPARTY_TYPES)
    counterparty_name = models.CharField(max_length=200)
    counterparty_id = models.CharField(max_length=64, blank=True, default="")

    total_amount = models.DecimalField(max_digits=14, decimal_places=2)
    residual_amount = models.DecimalField(max_digits=14, decimal_places=2)

    document_date = models.DateField(default=timezone.localdate)
    due_date = models.DateField()

    status = models.CharField(
        max_length=10,
        choices=STATUSES,
        default=STATUS_OPEN,
        editable=False,
    )

    voided_at = models.DateTimeField(null=True, blank=True)
    void_reason = models.CharField(max_length=255, blank=True, default="")
    voided_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="settlements_voided",
    )

    notes = models.CharField(max_length=255, blank=True, default="")

    version = models.PositiveIntegerField(default=0, editable=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "settlements"
        ordering = ["due_date", "created_at"]
        permissions = [
            ("void_settlement", "Can void settlements"),
        ]
        indexes = [
            models.Index(
                fields=["obligation_type", "status"],
                name="settlement_type_status_idx",
            ),
            models.Index(
                fields=["counterparty_name", "obligation_type"],
                name="settlement_cp_type_idx",
            ),
            models.Index(fields=["due_date"], name="settlement_due_date_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(total_amount__gt=Decimal("0.00")),
                name="chk_settlement_total_positive",
            ),
            models.CheckConstraint(
                condition=Q(residual_amount__gte=Decimal("0.00"))
                & Q(residual_amount__lte=F("total_amount")),
                name="chk_settlement_residual_in_range",
            ),
        ]

    _IMMUTABLE_FIELDS = (
        "obligation_type",
        "counterparty_type",
        "counterparty_name",
        "total_amount",
        "document_date",
        "accounting_entry_id",
        "journal_header_id",
    )

    def __str__(self):
        return f"{self.obligation_type} {self.counterparty_name} {self.residual_amount}/{self.total_amount}"

    @property
    def is_voided(self) -> bool:
        return self.voided_at is not None

    @property
    def settled_amount(self) -> Decimal:
        return self.total_amount - self.residual_amount

    def clean(self):
        self.counterparty_name = (self.counterparty_name or "").strip()
        if not self.counterparty_name:
            raise ValidationError({"counterparty_name": "counterparty_name is required"})

        if self.total_amount is None or self.total_amount <= 0:
            raise ValidationError({"total_amount": "total_amount must be > 0"})

        if self.residual_amount is None:
            self.residual_amount = self.total_amount

        if self.residual_amount < 0 or self.residual_amount > self.total_amount:
            raise ValidationError(
                {"residual_amount": "residual_amount must be between 0 and total_amount"}
            )

    def _validate_immutable(self, previous: "Settlement"):
        for field in self._IMMUTABLE_FIELDS:
            if getattr(self, field) != getattr(previous, field):
                raise ValidationError(
                    f"Settlement field '{field}' cannot be changed after creation."
                )

        if self.residual_amount > previous.residual_amount:
            raise ValidationError("Settlement residual_amount can never increase.")

        if previous.is_voided and not self.is_voided:
            raise ValidationError("A voided settlement cannot be reopened.")

    def save(self, *args, **kwargs):
        if self.pk and not self._state.adding:
            previous = Settlement.objects.filter(pk=self.pk).first()
            if previous is not None:
                self._validate_immutable(previous)

        self.full_clean()
        self.status = lifecycle.derive_status(
            total_amount=self.total_amount,
            residual_amount=self.residual_amount,
            voided=self.is_voided,
        )

        update_fields = kwargs.get("update_fields")
        if update_fields is not None and "status" not in update_fields:
            kwargs["update_fields"] = [*update_fields, "status"]

        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("Settlements cannot be deleted; void them instead.")
