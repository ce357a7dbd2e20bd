# invoices/api/urls.py

from django.urls import path

from invoices.api.views import (
    InvoiceDetailView,
    InvoiceListCreateView,
    InvoiceRegisterView,
    InvoiceStatsView,
)

urlpatterns = [
    path("", InvoiceListCreateView.as_view(), name="invoices"),
    path("stats/", InvoiceStatsView.as_view(), name="invoice-stats"),
    path("<uuid:invoice_id>/", InvoiceDetailView.as_view(), name="invoice-detail"),
    path(
        "<uuid:invoice_id>/register/",
        InvoiceRegisterView.as_view(),
        name="invoice-register",
    ),
]
