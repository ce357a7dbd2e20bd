# accounting/api/errors.py

"""
LEDGER ERROR -> HTTP MAPPING

Views catch LedgerServiceError and return error_response(exc).
Response shape follows DRF: {"detail": "..."} plus extra keys where the
caller needs them (residualAmount on rejected movements).
"""

import logging

from rest_framework import status
from rest_framework.response import Response

from accounting.services.exceptions import (
    ConcurrencyConflictError,
    InvalidAmountError,
    InvalidStateError,
    LedgerServiceError,
    LedgerValidationError,
    NotFoundError,
    StoreUnavailableError,
    UnbalancedJournalError,
)

logger = logging.getLogger("ledger.api")

# Order matters: subclasses before their bases.
_STATUS_MAP = (
    (InvalidAmountError, status.HTTP_400_BAD_REQUEST),
    (LedgerValidationError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (InvalidStateError, status.HTTP_409_CONFLICT),
    (ConcurrencyConflictError, status.HTTP_409_CONFLICT),
    (StoreUnavailableError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (UnbalancedJournalError, status.HTTP_500_INTERNAL_SERVER_ERROR),
)


def status_for(exc: LedgerServiceError) -> int:
    for klass, code in _STATUS_MAP:
        if isinstance(exc, klass):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_response(exc: LedgerServiceError) -> Response:
    code = status_for(exc)
    body = {"detail": str(exc), "code": type(exc).__name__}

    if isinstance(exc, InvalidAmountError) and exc.residual_amount is not None:
        body["residualAmount"] = str(exc.residual_amount)

    if code >= 500:
        logger.error(
            "Ledger operation failed",
            extra={"error": type(exc).__name__, "detail": str(exc)},
        )
        if isinstance(exc, UnbalancedJournalError):
            body["detail"] = "Internal ledger error"

    return Response(body, status=code)
