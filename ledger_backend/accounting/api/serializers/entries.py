# accounting/api/serializers/entries.py

from rest_framework import serializers

from accounting.models.entry import AccountingEntry


class AccountingEntrySerializer(serializers.ModelSerializer):
    journal_id = serializers.SerializerMethodField()

    class Meta:
        model = AccountingEntry
        fields = "__all__"
        read_only_fields = [f.name for f in AccountingEntry._meta.fields]

    def get_journal_id(self, obj):
        journal = getattr(obj, "journal", None)
        return journal.id if journal else None
