# invoices/models/invoice.py

"""
======================================================
PATH: invoices/models/invoice.py
======================================================
INVOICE REGISTRY MODEL

Sales, purchase and credit-note invoices.

GUARANTEES:
- tax_amount / total_amount are recomputed from net_amount + tax_rate on
  every save (never stored independently of the rate)
- draft -> registered happens exactly once (invoices/services/registry_service.py)
- once registered, only the display mirror fields may change
  (financial_status, payment_date)
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
from accounting.services.money import compute_tax, money
from settlements.models.settlement import Settlement

User = settings.AUTH_USER_MODEL


class Invoice(models.Model):
    TYPE_SALE = "sale"
    TYPE_PURCHASE = "purchase"
    TYPE_CREDIT_NOTE = "credit_note"

    INVOICE_TYPES = [
        (TYPE_SALE, "Sale"),
        (TYPE_PURCHASE, "Purchase"),
        (TYPE_CREDIT_NOTE, "Credit note"),
    ]

    CUSTOMER = Settlement.CUSTOMER
    SUPPLIER = Settlement.SUPPLIER

    COUNTERPARTY_TYPES = Settlement.COUNTERPARTY_TYPES

    VAT_DOMESTIC_TAXABLE = "domestic_taxable"
    VAT_EU_EXEMPT = "eu_exempt"
    VAT_EXTRA_EU = "extra_eu"
    VAT_REVERSE_CHARGE = "reverse_charge"

    VAT_REGIMES = [
        (VAT_DOMESTIC_TAXABLE, "Domestic taxable"),
        (VAT_EU_EXEMPT, "EU non-taxable"),
        (VAT_EXTRA_EU, "Extra-EU"),
        (VAT_REVERSE_CHARGE, "Reverse charge"),
    ]

    STATUS_DRAFT = "draft"
    STATUS_REGISTERED = "registered"

    STATUSES = [
        (STATUS_DRAFT, "Draft"),
        (STATUS_REGISTERED, "Registered"),
    ]

    FINANCIAL_STATUSES = AccountingEntry.FINANCIAL_STATUSES

    _MIRROR_FIELDS = ("financial_status", "payment_date")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    invoice_number = models.CharField(max_length=64)
    invoice_date = models.DateField(default=timezone.localdate)

    invoice_type = models.CharField(max_length=12, choices=INVOICE_TYPES)

    counterparty_type = models.CharField(max_length=10, choices=COUNTERPARTY_TYPES)
    counterparty_name = models.CharField(max_length=200)
    counterparty_id = models.CharField(
        max_length=64,
        blank=True,
        default="",
        help_text="Id in the external customer/supplier directory (optional)",
    )

    vat_regime = models.CharField(
        max_length=20, choices=VAT_REGIMES, default=VAT_DOMESTIC_TAXABLE
    )

    net_amount = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )
    tax_rate = models.DecimalField(
        max_digits=5, decimal_places=2, default=Decimal("0.00")
    )
    tax_amount = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00"), editable=False
    )
    total_amount = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00"), editable=False
    )

    status = models.CharField(max_length=12, choices=STATUSES, default=STATUS_DRAFT)
    financial_status = models.CharField(max_length=12, choices=FINANCIAL_STATUSES)

    due_date = models.DateField(null=True, blank=True)
    payment_date = models.DateField(null=True, blank=True)

    notes = models.TextField(blank=True, default="")

    accounting_entry = models.OneToOneField(
        AccountingEntry,
        on_delete=models.PROTECT,
        related_name="invoice",
        null=True,
        blank=True,
    )
    journal = models.OneToOneField(
        JournalHeader,
        on_delete=models.PROTECT,
        related_name="invoice",
        null=True,
        blank=True,
    )
    settlement = models.OneToOneField(
        Settlement,
        on_delete=models.PROTECT,
        related_name="invoice",
        null=True,
        blank=True,
    )

    created_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="invoices_created",
    )
    registered_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="invoices_registered",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    registered_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "invoices"
        ordering = ["-invoice_date", "-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["counterparty_type", "counterparty_name", "invoice_number"],
                name="uniq_counterparty_invoice_number",
            ),
            models.CheckConstraint(
                condition=Q(net_amount__gte=Decimal("0.00")),
                name="invoice_net_nonnegative",
            ),
            models.CheckConstraint(
                condition=Q(tax_rate__gte=Decimal("0.00")),
                name="invoice_tax_rate_nonnegative",
            ),
        ]
        indexes = [
            models.Index(
                fields=["invoice_type", "status"],
                name="invoice_type_status_idx",
            ),
            models.Index(fields=["financial_status"], name="invoice_fin_status_idx"),
            models.Index(fields=["counterparty_name"], name="invoice_cp_name_idx"),
        ]

    def __str__(self):
        return f"{self.invoice_number} ({self.counterparty_name})"

    @property
    def is_registered(self) -> bool:
        return self.status == self.STATUS_REGISTERED

    @property
    def direction(self) -> str:
        if self.invoice_type == self.TYPE_PURCHASE:
            return AccountingEntry.OUTFLOW
        return AccountingEntry.INFLOW

    @property
    def obligation_type(self) -> str:
        if self.invoice_type == self.TYPE_PURCHASE:
            return Settlement.PAYABLE
        return Settlement.RECEIVABLE

    @property
    def has_open_obligation(self) -> bool:
        return self.financial_status in (AccountingEntry.TO_COLLECT, AccountingEntry.TO_PAY)

    def recompute_amounts(self):
        self.net_amount = money(self.net_amount, field="net_amount")
        self.tax_rate = money(self.tax_rate, field="tax_rate")
        self.tax_amount, self.total_amount = compute_tax(self.net_amount, self.tax_rate)

    def clean(self):
        self.invoice_number = (self.invoice_number or "").strip()
        self.counterparty_name = (self.counterparty_name or "").strip()

        if not self.invoice_number:
            raise ValidationError({"invoice_number": "invoice_number is required"})

        if not self.counterparty_name:
            raise ValidationError({"counterparty_name": "counterparty_name is required"})

        if self.net_amount is not None and self.net_amount < Decimal("0.00"):
            raise ValidationError({"net_amount": "net_amount cannot be negative"})

        if self.tax_rate is not None and self.tax_rate < Decimal("0.00"):
            raise ValidationError({"tax_rate": "tax_rate cannot be negative"})

        if self.status == self.STATUS_REGISTERED and not self.registered_at:
            raise ValidationError(
                {"registered_at": "registered_at is required when status is registered"}
            )

    def _validate_immutable(self, previous: "Invoice", update_fields):
        if previous.status != self.STATUS_REGISTERED:
            return

        if update_fields is not None and set(update_fields) <= set(self._MIRROR_FIELDS):
            return

        raise ValidationError(
            "Registered invoices are immutable; only financial_status and "
            "payment_date can be updated."
        )

    def save(self, *args, **kwargs):
        if self.pk and not self._state.adding:
            previous = Invoice.objects.filter(pk=self.pk).first()
            if previous is not None:
                self._validate_immutable(previous, kwargs.get("update_fields"))

        self.recompute_amounts()
        self.full_clean()
        return super().save(*args, **kwargs)

    def mark_settled(self, *, financial_status: str, payment_date):
        self.financial_status = financial_status
        self.payment_date = payment_date
        self.save(update_fields=["financial_status", "payment_date"])
