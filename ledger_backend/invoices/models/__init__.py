# invoices/models/__init__.py

"""
INVOICE MODELS PACKAGE EXPORTS
"""

from invoices.models.invoice import Invoice

__all__ = ["Invoice"]
