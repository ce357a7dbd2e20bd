# settlements/models/movement.py

"""
======================================================
PATH: settlements/models/movement.py
======================================================
SETTLEMENT MOVEMENT MODEL

One partial or full payment/collection applied to a settlement.

Guarantees:
- Immutable once created (no updates, no deletes)
- amount > 0 (model + DB constraint)
- Linked to the AccountingEntry and JournalHeader it produced
- sum(movements.amount) + settlement.residual_amount == settlement.total_amount
  (maintained by settlements/services/settlement_service.py)
"""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q
from django.utils import timezone

from accounting.models.entry import AccountingEntry
from accounting.models.journal import JournalHeader
from settlements.models.settlement import Settlement

User = settings.AUTH_USER_MODEL


class SettlementMovement(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    settlement = models.ForeignKey(
        Settlement,
        on_delete=models.PROTECT,
        related_name="movements",
    )
    accounting_entry = models.OneToOneField(
        AccountingEntry,
        on_delete=models.PROTECT,
        related_name="settlement_movement",
    )
    journal_header = models.OneToOneField(
        JournalHeader,
        on_delete=models.PROTECT,
        related_name="settlement_movement",
    )

    amount = models.DecimalField(max_digits=14, decimal_places=2)
    movement_date = models.DateField(default=timezone.localdate)
    payment_method = models.CharField(max_length=30, blank=True, default="")
    notes = models.TextField(blank=True, default="")

    created_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="settlement_movements_created",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "settlement_movements"
        ordering = ["-movement_date", "-created_at"]
        indexes = [
            models.Index(
                fields=["settlement", "movement_date"],
                name="movement_settlement_date_idx",
            ),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(amount__gt=Decimal("0.00")),
                name="chk_settlement_movement_amount_positive",
            ),
        ]

    def __str__(self):
        return f"{self.settlement_id} - {self.amount} on {self.movement_date}"

    def clean(self):
        if self.amount is None or self.amount <= 0:
            raise ValidationError({"amount": "amount must be > 0"})

        self.payment_method = (self.payment_method or "").strip()
        self.notes = (self.notes or "").strip()

    def save(self, *args, **kwargs):
        if self.pk and not self._state.adding:
            raise ValidationError("SettlementMovement records are immutable once created")

        self.full_clean()
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("SettlementMovement records are immutable and cannot be deleted")
