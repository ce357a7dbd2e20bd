# invoices/api/serializers.py

from rest_framework import serializers

from accounting.models.entry import AccountingEntry
from invoices.models import Invoice


class InvoiceSerializer(serializers.ModelSerializer):
    settlement_status = serializers.SerializerMethodField()

    class Meta:
        model = Invoice
        fields = (
            "id",
            "invoice_number",
            "invoice_date",
            "invoice_type",
            "counterparty_type",
            "counterparty_name",
            "counterparty_id",
            "vat_regime",
            "net_amount",
            "tax_rate",
            "tax_amount",
            "total_amount",
            "status",
            "financial_status",
            "due_date",
            "payment_date",
            "notes",
            "accounting_entry",
            "journal",
            "settlement",
            "settlement_status",
            "registered_at",
            "created_at",
        )
        read_only_fields = fields

    def get_settlement_status(self, obj):
        settlement = obj.settlement
        return settlement.status if settlement else None


class InvoiceCreateSerializer(serializers.Serializer):
    invoice_number = serializers.CharField(max_length=64)
    invoice_type = serializers.ChoiceField(choices=Invoice.INVOICE_TYPES)
    invoice_date = serializers.DateField(required=False)

    counterparty_name = serializers.CharField(max_length=200)
    counterparty_type = serializers.ChoiceField(
        choices=Invoice.COUNTERPARTY_TYPES, required=False
    )
    counterparty_id = serializers.CharField(
        max_length=64, required=False, allow_blank=True
    )

    vat_regime = serializers.ChoiceField(choices=Invoice.VAT_REGIMES, required=False)

    net_amount = serializers.DecimalField(
        max_digits=14, decimal_places=2, min_value=0
    )
    tax_rate = serializers.DecimalField(
        max_digits=5, decimal_places=2, min_value=0, required=False
    )

    financial_status = serializers.ChoiceField(
        choices=AccountingEntry.FINANCIAL_STATUSES, required=False
    )
    due_date = serializers.DateField(required=False, allow_null=True)
    payment_date = serializers.DateField(required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True)

    def validate_invoice_number(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("invoice_number is required")
        return value

    def validate(self, attrs):
        due = attrs.get("due_date")
        issued = attrs.get("invoice_date")
        if due and issued and due < issued:
            raise serializers.ValidationError(
                {"due_date": "due_date cannot be before invoice_date"}
            )
        return attrs


class RegistrationResultSerializer(serializers.Serializer):
    accountingEntryId = serializers.IntegerField()
    journalId = serializers.IntegerField()
    settlementId = serializers.UUIDField(allow_null=True)


class InvoiceStatsSerializer(serializers.Serializer):
    draftCount = serializers.IntegerField()
    registeredCount = serializers.IntegerField()
    toCollectTotal = serializers.DecimalField(max_digits=14, decimal_places=2)
    toPayTotal = serializers.DecimalField(max_digits=14, decimal_places=2)
