# settlements/api/filters.py

import django_filters
from django.db.models import Q

from settlements.models import Settlement

ALL = "all"


class SettlementFilter(django_filters.FilterSet):
    """
    /api/settlements/?type=receivable&status=open&search=acme

    type / status accept "all" (no filtering). search matches the
    counterparty name, the originating invoice number, or the notes.
    """

    type = django_filters.ChoiceFilter(
        field_name="obligation_type",
        choices=[*Settlement.OBLIGATION_TYPES, (ALL, "All")],
        method="filter_unless_all",
    )
    status = django_filters.ChoiceFilter(
        choices=[*Settlement.STATUSES, (ALL, "All")],
        method="filter_unless_all",
    )
    due_before = django_filters.DateFilter(field_name="due_date", lookup_expr="lte")
    search = django_filters.CharFilter(method="filter_search")

    class Meta:
        model = Settlement
        fields = ["type", "status"]

    def filter_unless_all(self, queryset, name, value):
        if not value or value == ALL:
            return queryset
        return queryset.filter(**{name: value})

    def filter_search(self, queryset, name, value):
        value = (value or "").strip()
        if not value:
            return queryset
        return queryset.filter(
            Q(counterparty_name__icontains=value)
            | Q(invoice__invoice_number__icontains=value)
            | Q(notes__icontains=value)
        )
