# accounting/api/serializers/__init__.py

from accounting.api.serializers.entries import AccountingEntrySerializer
from accounting.api.serializers.journals import (
    JournalHeaderSerializer,
    JournalLineSerializer,
)

__all__ = [
    "AccountingEntrySerializer",
    "JournalHeaderSerializer",
    "JournalLineSerializer",
]
