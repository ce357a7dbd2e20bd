# invoices/admin.py

from django.contrib import admin

from invoices.models import Invoice


@admin.register(Invoice)
class InvoiceAdmin(admin.ModelAdmin):
    list_display = (
        "invoice_number",
        "invoice_date",
        "invoice_type",
        "counterparty_name",
        "total_amount",
        "status",
        "financial_status",
    )
    list_filter = ("invoice_type", "status", "financial_status", "vat_regime")
    search_fields = ("invoice_number", "counterparty_name")
    ordering = ("-invoice_date",)

    readonly_fields = (
        "tax_amount",
        "total_amount",
        "status",
        "accounting_entry",
        "journal",
        "settlement",
        "registered_at",
        "registered_by",
        "created_by",
        "created_at",
    )

    def has_change_permission(self, request, obj=None):
        if obj is not None and obj.is_registered:
            return False
        return super().has_change_permission(request, obj)

    def has_delete_permission(self, request, obj=None):
        if obj is not None and obj.is_registered:
            return False
        return super().has_delete_permission(request, obj)
