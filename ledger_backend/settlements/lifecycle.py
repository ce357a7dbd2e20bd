# settlements/lifecycle.py

"""
SETTLEMENT LIFECYCLE DOMAIN RULES

Pure functions. No database access, no side effects.
Imported by models and services alike (models stay free of service imports).

Status is DERIVED, never set independently:
    voided                 -> VOIDED (administrative escape hatch)
    residual == 0          -> CLOSED
    residual == total      -> OPEN
    0 < residual < total   -> PARTIAL

Due classification (display only):
    days < 0               -> OVERDUE
    0 <= days <= due_soon  -> DUE_SOON
    otherwise              -> HEALTHY
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

STATUS_OPEN = "open"
STATUS_PARTIAL = "partial"
STATUS_CLOSED = "closed"
STATUS_VOIDED = "voided"

ACTIVE_STATUSES = frozenset({STATUS_OPEN, STATUS_PARTIAL})
TERMINAL_STATUSES = frozenset({STATUS_CLOSED, STATUS_VOIDED})

DUE_OVERDUE = "overdue"
DUE_SOON = "due_soon"
DUE_HEALTHY = "healthy"

ZERO = Decimal("0.00")
MAX_RESIDUAL_EPSILON = Decimal("0.01")


def _checked_epsilon(eps: Decimal) -> Decimal:
    # at or above one cent a real residual would be written off
    if not (Decimal("0") <= eps < MAX_RESIDUAL_EPSILON):
        raise ImproperlyConfigured(
            f"SETTLEMENT_RESIDUAL_EPSILON must be >= 0 and below {MAX_RESIDUAL_EPSILON}, got {eps}"
        )
    return eps


def residual_epsilon() -> Decimal:
    return _checked_epsilon(
        Decimal(str(getattr(settings, "SETTLEMENT_RESIDUAL_EPSILON", "0.005")))
    )


def absorb_residue(residual: Decimal, *, epsilon: Decimal | None = None) -> Decimal:
    """
    Floor a residual at 0, absorbing floating residue below epsilon.
    """
    eps = residual_epsilon() if epsilon is None else _checked_epsilon(Decimal(str(epsilon)))
    if residual <= eps:
        return ZERO
    return residual


def derive_status(*, total_amount: Decimal, residual_amount: Decimal, voided: bool = False) -> str:
    if voided:
        return STATUS_VOIDED
    if residual_amount <= ZERO:
        return STATUS_CLOSED
    if residual_amount >= total_amount:
        return STATUS_OPEN
    return STATUS_PARTIAL


def is_active(status: str) -> bool:
    return status in ACTIVE_STATUSES


def days_until_due(settlement, today: date) -> int:
    return (settlement.due_date - today).days


def is_overdue(settlement, today: date) -> bool:
    return is_active(settlement.status) and days_until_due(settlement, today) < 0


def classify_due(days: int, *, due_soon_days: int | None = None) -> str:
    threshold = (
        due_soon_days
        if due_soon_days is not None
        else int(getattr(settings, "SETTLEMENT_DUE_SOON_DAYS", 7))
    )
    if days < 0:
        return DUE_OVERDUE
    if days <= threshold:
        return DUE_SOON
    return DUE_HEALTHY
