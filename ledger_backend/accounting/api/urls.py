# accounting/api/urls.py

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from accounting.api.view import AccountingEntryViewSet, JournalHeaderViewSet

router = DefaultRouter()
router.register("entries", AccountingEntryViewSet, basename="accounting-entry")
router.register("journals", JournalHeaderViewSet, basename="journal")

urlpatterns = [
    path("", include(router.urls)),
]
