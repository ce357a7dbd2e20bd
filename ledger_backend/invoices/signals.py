# invoices/signals.py

"""
INVOICE REGISTRY SIGNALS

invoice_registered is sent once per invoice, after the registration
transaction commits. Receivers get:
- sender:   Invoice (class)
- invoice:  the registered Invoice instance
- settlement_id: UUID | None

Customer / supplier invoice summaries live with the receivers.
"""

from django.dispatch import Signal

invoice_registered = Signal()
