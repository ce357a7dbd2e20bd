# settlements/api/serializers.py

"""
SETTLEMENT API SERIALIZERS

Outbound keys are camelCase (the settlement screens consume them as-is).
Due fields are computed against `today` from the serializer context.
"""

from django.utils import timezone
from rest_framework import serializers

from settlements import lifecycle
from settlements.models import Settlement, SettlementMovement


class SettlementSerializer(serializers.ModelSerializer):
    obligationType = serializers.CharField(source="obligation_type")
    counterpartyType = serializers.CharField(source="counterparty_type")
    counterpartyName = serializers.CharField(source="counterparty_name")
    counterpartyId = serializers.CharField(source="counterparty_id")
    totalAmount = serializers.DecimalField(
        source="total_amount", max_digits=14, decimal_places=2
    )
    residualAmount = serializers.DecimalField(
        source="residual_amount", max_digits=14, decimal_places=2
    )
    settledAmount = serializers.DecimalField(
        source="settled_amount", max_digits=14, decimal_places=2
    )
    documentDate = serializers.DateField(source="document_date")
    dueDate = serializers.DateField(source="due_date")
    invoiceNumber = serializers.SerializerMethodField()
    daysUntilDue = serializers.SerializerMethodField()
    overdue = serializers.SerializerMethodField()
    dueClass = serializers.SerializerMethodField()
    voidedAt = serializers.DateTimeField(source="voided_at")
    voidReason = serializers.CharField(source="void_reason")

    class Meta:
        model = Settlement
        fields = (
            "id",
            "obligationType",
            "counterpartyType",
            "counterpartyName",
            "counterpartyId",
            "totalAmount",
            "residualAmount",
            "settledAmount",
            "status",
            "documentDate",
            "dueDate",
            "invoiceNumber",
            "daysUntilDue",
            "overdue",
            "dueClass",
            "notes",
            "voidedAt",
            "voidReason",
            "version",
        )
        read_only_fields = fields

    def _today(self):
        return self.context.get("today") or timezone.localdate()

    def get_invoiceNumber(self, obj):
        invoice = getattr(obj, "invoice", None)
        return invoice.invoice_number if invoice else None

    def get_daysUntilDue(self, obj):
        return lifecycle.days_until_due(obj, self._today())

    def get_overdue(self, obj):
        return lifecycle.is_overdue(obj, self._today())

    def get_dueClass(self, obj):
        if not lifecycle.is_active(obj.status):
            return None
        return lifecycle.classify_due(lifecycle.days_until_due(obj, self._today()))


class SettlementMovementSerializer(serializers.ModelSerializer):
    settlementId = serializers.UUIDField(source="settlement_id")
    movementDate = serializers.DateField(source="movement_date")
    paymentMethod = serializers.CharField(source="payment_method")
    accountingEntryId = serializers.IntegerField(source="accounting_entry_id")
    journalId = serializers.IntegerField(source="journal_header_id")
    createdAt = serializers.DateTimeField(source="created_at")

    class Meta:
        model = SettlementMovement
        fields = (
            "id",
            "settlementId",
            "amount",
            "movementDate",
            "paymentMethod",
            "notes",
            "accountingEntryId",
            "journalId",
            "createdAt",
        )
        read_only_fields = fields


class ApplyMovementSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    date = serializers.DateField(required=False)
    paymentMethod = serializers.CharField(
        max_length=30, required=False, allow_blank=True, default=""
    )
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class VoidSettlementSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")


class SettlementSummarySerializer(serializers.Serializer):
    receivableResidual = serializers.DecimalField(max_digits=14, decimal_places=2)
    payableResidual = serializers.DecimalField(max_digits=14, decimal_places=2)
    openCount = serializers.IntegerField()
    overdueCount = serializers.IntegerField()
    overdueResidual = serializers.DecimalField(max_digits=14, decimal_places=2)


class CounterpartyGroupSerializer(serializers.Serializer):
    counterpartyName = serializers.CharField()
    obligationType = serializers.CharField()
    totalAmount = serializers.DecimalField(max_digits=14, decimal_places=2)
    totalResidual = serializers.DecimalField(max_digits=14, decimal_places=2)
    openCount = serializers.IntegerField()
    overdueCount = serializers.IntegerField()
    settlementCount = serializers.IntegerField()
    nextDueDate = serializers.DateField(allow_null=True)
