# settlements/api/counterparty_urls.py

from django.urls import path

from settlements.api.views import CounterpartyRollupView

urlpatterns = [
    path("rollup/", CounterpartyRollupView.as_view(), name="counterparty-rollup"),
]
