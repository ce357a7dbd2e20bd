# settlements/admin.py

from django.contrib import admin

from settlements.models import Settlement, SettlementMovement


class SettlementMovementInline(admin.TabularInline):
    model = SettlementMovement
    extra = 0
    can_delete = False
    fields = ("movement_date", "amount", "payment_method", "notes", "created_by")
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Settlement)
class SettlementAdmin(admin.ModelAdmin):
    """
    Read-only: movements and voids go through the settlement service so the
    journal stays balanced and the version check holds.
    """

    list_display = (
        "counterparty_name",
        "obligation_type",
        "total_amount",
        "residual_amount",
        "status",
        "due_date",
    )
    list_filter = ("obligation_type", "status", "counterparty_type")
    search_fields = ("counterparty_name", "notes")
    ordering = ("due_date",)
    inlines = [SettlementMovementInline]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
