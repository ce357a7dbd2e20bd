# settlements/apps.py

"""
SETTLEMENTS APP CONFIG

Settlement ledger (receivables / payables), movement log and
counterparty rollup.
"""

from django.apps import AppConfig


class SettlementsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "settlements"
    verbose_name = "Settlement Ledger"
