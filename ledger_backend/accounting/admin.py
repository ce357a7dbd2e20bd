# accounting/admin.py

from django.contrib import admin

from accounting.models.entry import AccountingEntry
from accounting.models.journal import JournalHeader, JournalLine


class _ReadOnlyAdmin(admin.ModelAdmin):
    """Append-only records: view in admin, never add / change / delete."""

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# ============================================================
# ACCOUNTING ENTRY
# ============================================================


@admin.register(AccountingEntry)
class AccountingEntryAdmin(_ReadOnlyAdmin):
    list_display = (
        "id",
        "document_date",
        "document_type",
        "direction",
        "total_amount",
        "financial_status",
        "description",
    )
    list_filter = ("document_type", "direction", "financial_status")
    search_fields = ("description",)
    ordering = ("-document_date", "-id")


# ============================================================
# JOURNAL
# ============================================================


class JournalLineInline(admin.TabularInline):
    model = JournalLine
    extra = 0
    can_delete = False
    fields = ("line_order", "account_key", "debit_amount", "credit_amount", "description")
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(JournalHeader)
class JournalHeaderAdmin(_ReadOnlyAdmin):
    list_display = (
        "id",
        "competence_date",
        "amount",
        "status",
        "description",
        "accounting_entry",
    )
    list_filter = ("status", "competence_date")
    search_fields = ("description",)
    ordering = ("-competence_date", "-id")
    inlines = [JournalLineInline]
