# accounting/services/exceptions.py

"""
LEDGER SERVICE ERRORS

Centralized domain errors for the invoice registry, journal and settlement
services. Views translate them to HTTP via accounting/api/errors.py.
"""

from __future__ import annotations

from decimal import Decimal


class LedgerServiceError(Exception):
    """Base exception for all ledger service failures."""


class LedgerValidationError(LedgerServiceError):
    """Malformed or out-of-range input. Raised before any write."""


class NotFoundError(LedgerServiceError):
    """Referenced record does not exist."""


class InvalidStateError(LedgerServiceError):
    """Operation not allowed in the record's current lifecycle state."""


class ClosedObligationError(InvalidStateError):
    """Movement attempted against a closed or voided settlement."""


class InvalidAmountError(LedgerValidationError):
    """Movement amount is not positive or exceeds the settlement residual."""

    def __init__(self, message: str, *, residual_amount: Decimal | None = None):
        super().__init__(message)
        self.residual_amount = residual_amount


class UnbalancedJournalError(LedgerServiceError):
    """Journal lines do not balance. Internal invariant violation."""


class ConcurrencyConflictError(LedgerServiceError):
    """Optimistic lock lost to a concurrent writer."""


class StoreUnavailableError(LedgerServiceError):
    """The durable store failed mid-transaction. Nothing was committed."""
