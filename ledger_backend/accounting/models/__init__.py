# accounting/models/__init__.py

"""
ACCOUNTING MODELS PACKAGE EXPORTS

Note:
- Keep this file *imports-only* (no business logic).
- Models may use the pure money helpers, never workflow services.
"""

from accounting.models.entry import AccountingEntry
from accounting.models.journal import JournalHeader, JournalLine, StructuralAccount

__all__ = [
    "AccountingEntry",
    "JournalHeader",
    "JournalLine",
    "StructuralAccount",
]
