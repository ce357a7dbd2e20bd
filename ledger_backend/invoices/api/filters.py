# invoices/api/filters.py

import django_filters
from django.db.models import Q

from accounting.models.entry import AccountingEntry
from invoices.models import Invoice


class InvoiceFilter(django_filters.FilterSet):
    """
    /api/invoices/?invoice_type=sale&status=registered&search=acme
    """

    invoice_type = django_filters.ChoiceFilter(choices=Invoice.INVOICE_TYPES)
    status = django_filters.ChoiceFilter(choices=Invoice.STATUSES)
    financial_status = django_filters.ChoiceFilter(
        choices=AccountingEntry.FINANCIAL_STATUSES
    )
    date_from = django_filters.DateFilter(field_name="invoice_date", lookup_expr="gte")
    date_to = django_filters.DateFilter(field_name="invoice_date", lookup_expr="lte")
    search = django_filters.CharFilter(method="filter_search")

    class Meta:
        model = Invoice
        fields = ["invoice_type", "status", "financial_status"]

    def filter_search(self, queryset, name, value):
        value = (value or "").strip()
        if not value:
            return queryset
        return queryset.filter(
            Q(invoice_number__icontains=value) | Q(counterparty_name__icontains=value)
        )
