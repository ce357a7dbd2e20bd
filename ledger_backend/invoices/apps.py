# invoices/apps.py

"""
INVOICES APP CONFIG

Invoice registry: drafts, registration, and the invoice_registered
notification for downstream mirror records.
"""

from django.apps import AppConfig


class InvoicesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "invoices"
    verbose_name = "Invoice Registry"
