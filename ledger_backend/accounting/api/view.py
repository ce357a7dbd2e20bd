# accounting/api/view.py

"""
ACCOUNTING API VIEWSETS (READ-ONLY / AUDIT SAFE)

Append-only records, so there is nothing to write here:
    /api/accounting/entries/?document_type=invoice&direction=inflow
    /api/accounting/journals/?status=pending

Security rules:
- AccountingEntry list requires accounting.view_accountingentry
- JournalHeader list requires accounting.view_journalheader
"""

from drf_spectacular.utils import extend_schema
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.viewsets import ReadOnlyModelViewSet

from accounting.api.serializers import AccountingEntrySerializer, JournalHeaderSerializer
from accounting.models import AccountingEntry, JournalHeader


class _PermissionGatedViewSet(ReadOnlyModelViewSet):
    permission_classes = [IsAuthenticated]
    http_method_names = ["get", "head", "options"]
    required_perm = ""
    denied_message = "You do not have permission to view accounting records."

    def get_queryset(self):
        if not self.request.user.has_perm(self.required_perm):
            raise PermissionDenied(self.denied_message)
        return super().get_queryset()


@extend_schema(tags=["accounting"])
class AccountingEntryViewSet(_PermissionGatedViewSet):
    serializer_class = AccountingEntrySerializer
    queryset = AccountingEntry.objects.select_related("journal").order_by(
        "-document_date", "-id"
    )
    filterset_fields = ["document_type", "direction", "financial_status"]
    required_perm = "accounting.view_accountingentry"
    denied_message = "You do not have permission to view accounting entries."


@extend_schema(tags=["accounting"])
class JournalHeaderViewSet(_PermissionGatedViewSet):
    serializer_class = JournalHeaderSerializer
    queryset = JournalHeader.objects.prefetch_related("lines").order_by(
        "-competence_date", "-id"
    )
    filterset_fields = ["status", "accounting_entry"]
    required_perm = "accounting.view_journalheader"
    denied_message = "You do not have permission to view journals."
