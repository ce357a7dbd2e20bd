# accounting/services/transactions.py

"""
======================================================
PATH: accounting/services/transactions.py
======================================================
UNIT-OF-WORK RUNNER

run_atomic(): one transaction.atomic block per attempt.

- ConcurrencyConflictError inside the block rolls the whole attempt back
  and the SAME logical inputs are replayed, up to max_retries attempts.
- Store failures (OperationalError / InterfaceError) roll back and surface
  as StoreUnavailableError. Nothing partial is ever committed.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TypeVar

from django.conf import settings
from django.db import InterfaceError, OperationalError, transaction

from accounting.services.exceptions import (
    ConcurrencyConflictError,
    StoreUnavailableError,
)

logger = logging.getLogger("ledger.transactions")

T = TypeVar("T")


def default_max_retries() -> int:
    return int(getattr(settings, "SETTLEMENT_MAX_RETRIES", 3) or 1)


def run_atomic(
    work: Callable[[], T],
    *,
    operation: str,
    max_retries: int | None = None,
) -> T:
    attempts = max_retries if max_retries is not None else default_max_retries()
    attempts = max(1, attempts)

    for attempt in range(1, attempts + 1):
        try:
            with transaction.atomic():
                return work()
        except ConcurrencyConflictError:
            if attempt >= attempts:
                logger.warning(
                    "Concurrency conflict: retries exhausted",
                    extra={"operation": operation, "attempts": attempt},
                )
                raise
            logger.warning(
                "Concurrency conflict: retrying",
                extra={"operation": operation, "attempt": attempt},
            )
        except (OperationalError, InterfaceError) as exc:
            logger.error(
                "Store failure, transaction rolled back",
                extra={"operation": operation, "attempt": attempt},
            )
            raise StoreUnavailableError(
                f"Store unavailable during {operation}; no changes were committed"
            ) from exc

    raise ConcurrencyConflictError(f"{operation}: no attempt was made")
