# accounting/apps.py

"""
ACCOUNTING APP CONFIG

Owns the append-only financial records:
- AccountingEntry (accounting_entries)
- JournalHeader / JournalLine (journal_headers / journal_lines)
"""

from django.apps import AppConfig


class AccountingConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "accounting"
    verbose_name = "Accounting"
