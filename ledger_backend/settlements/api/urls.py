# settlements/api/urls.py

from django.urls import path

from settlements.api.views import (
    SettlementDetailView,
    SettlementListView,
    SettlementMovementsView,
    SettlementSummaryView,
    SettlementVoidView,
)

urlpatterns = [
    path("", SettlementListView.as_view(), name="settlements"),
    path("summary/", SettlementSummaryView.as_view(), name="settlement-summary"),
    path(
        "<uuid:settlement_id>/",
        SettlementDetailView.as_view(),
        name="settlement-detail",
    ),
    path(
        "<uuid:settlement_id>/movements/",
        SettlementMovementsView.as_view(),
        name="settlement-movements",
    ),
    path(
        "<uuid:settlement_id>/void/",
        SettlementVoidView.as_view(),
        name="settlement-void",
    ),
]
