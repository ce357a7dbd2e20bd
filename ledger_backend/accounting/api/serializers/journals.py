# accounting/api/serializers/journals.py

from decimal import Decimal

from rest_framework import serializers

from accounting.models.journal import JournalHeader, JournalLine


class JournalLineSerializer(serializers.ModelSerializer):
    class Meta:
        model = JournalLine
        fields = (
            "line_order",
            "account_key",
            "debit_amount",
            "credit_amount",
            "description",
        )
        read_only_fields = fields


class JournalHeaderSerializer(serializers.ModelSerializer):
    lines = JournalLineSerializer(many=True, read_only=True)
    total_debit = serializers.SerializerMethodField()
    total_credit = serializers.SerializerMethodField()

    class Meta:
        model = JournalHeader
        fields = (
            "id",
            "accounting_entry",
            "competence_date",
            "amount",
            "description",
            "status",
            "payment_method",
            "created_at",
            "total_debit",
            "total_credit",
            "lines",
        )
        read_only_fields = fields

    def get_total_debit(self, obj):
        return str(sum((line.debit_amount for line in obj.lines.all()), start=Decimal("0.00")))

    def get_total_credit(self, obj):
        return str(sum((line.credit_amount for line in obj.lines.all()), start=Decimal("0.00")))
