# settlements/services/settlement_service.py

"""
======================================================
PATH: settlements/services/settlement_service.py
======================================================
SETTLEMENT LEDGER SERVICE (APPLICATION SERVICE)

Operations:
- create_settlement(): open a new obligation (residual = total, status = open)
- apply_movement():    apply a collection / payment against an obligation
- void_settlement():   administrative cancellation (open/partial -> voided)
- get_settlement(), list_movements()

apply_movement() canonical flow (ONE transaction per attempt):
  1) Lock settlement row, re-read residual + version
  2) Validate state (closed / voided -> ClosedObligationError)
  3) Validate amount (<= 0 or > residual -> InvalidAmountError)
  4) Post AccountingEntry + balanced journal (posting adapter)
  5) Create SettlementMovement
  6) Residual/status update guarded by version (lost race -> retry)
  7) Mirror the invoice financial status when the settlement closes

No overpayment: an excess must be modelled by the caller as a separate obligation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db.models import F
from django.utils import timezone

from accounting.models.entry import AccountingEntry
from accounting.models.journal import JournalHeader
from accounting.services.exceptions import (
    ClosedObligationError,
    ConcurrencyConflictError,
    InvalidAmountError,
    InvalidStateError,
    LedgerValidationError,
    NotFoundError,
)
from accounting.services.money import ZERO, money
from accounting.services.posting import post_settlement_movement
from accounting.services.transactions import run_atomic
from settlements import lifecycle
from settlements.models import Settlement, SettlementMovement

logger = logging.getLogger("ledger.settlements")


@dataclass(frozen=True)
class Counterparty:
    name: str
    type: str
    id: str = ""


@dataclass(frozen=True)
class MovementResult:
    settlement: Settlement
    movement: SettlementMovement


def create_settlement(
    *,
    total_amount,
    due_date,
    obligation_type: str,
    counterparty: Counterparty,
    originating_entry: AccountingEntry | None = None,
    originating_journal: JournalHeader | None = None,
    document_date=None,
    notes: str = "",
) -> Settlement:
    total = money(total_amount, field="total_amount")
    if total <= ZERO:
        raise LedgerValidationError("Settlement total_amount must be > 0")

    if obligation_type not in (Settlement.RECEIVABLE, Settlement.PAYABLE):
        raise LedgerValidationError(f"Invalid obligation_type: {obligation_type!r}")

    if due_date is None:
        raise LedgerValidationError("Settlement due_date is required")

    try:
        settlement = Settlement.objects.create(
            accounting_entry=originating_entry,
            journal_header=originating_journal,
            obligation_type=obligation_type,
            counterparty_type=counterparty.type,
            counterparty_name=counterparty.name,
            counterparty_id=counterparty.id or "",
            total_amount=total,
            residual_amount=total,
            document_date=document_date or timezone.localdate(),
            due_date=due_date,
            notes=notes or "",
        )
    except ValidationError as exc:
        raise LedgerValidationError(f"Invalid settlement: {exc}") from exc

    logger.info(
        "Settlement opened",
        extra={
            "settlement_id": str(settlement.id),
            "obligation_type": obligation_type,
            "total_amount": str(total),
        },
    )
    return settlement


def get_settlement(settlement_id) -> Settlement:
    try:
        return Settlement.objects.get(id=settlement_id)
    except (Settlement.DoesNotExist, ValidationError, ValueError) as exc:
        raise NotFoundError(f"Settlement {settlement_id} not found") from exc


def list_movements(settlement_id):
    settlement = get_settlement(settlement_id)
    return settlement.movements.order_by("-movement_date", "-created_at")


def _validate_amount_shape(amount) -> Decimal:
    amt = money(amount)
    if amt <= ZERO:
        raise InvalidAmountError("Movement amount must be > 0")
    return amt


def _lock_settlement(settlement_id) -> Settlement:
    try:
        return Settlement.objects.select_for_update().get(id=settlement_id)
    except (Settlement.DoesNotExist, ValidationError, ValueError) as exc:
        raise NotFoundError(f"Settlement {settlement_id} not found") from exc


def _mirror_invoice_settled(*, settlement: Settlement, movement_date):
    """
    Display mirror: the originating invoice follows its settlement to
    collected / paid. Same transaction as the movement.
    """
    invoice = getattr(settlement, "invoice", None)
    if invoice is None:
        return

    invoice.mark_settled(
        financial_status=(
            AccountingEntry.COLLECTED
            if settlement.obligation_type == Settlement.RECEIVABLE
            else AccountingEntry.PAID
        ),
        payment_date=movement_date,
    )


def _apply_movement_once(
    *,
    settlement_id,
    amount: Decimal,
    movement_date,
    payment_method: str,
    notes: str,
    user,
) -> MovementResult:
    settlement = _lock_settlement(settlement_id)

    if settlement.status in lifecycle.TERMINAL_STATUSES:
        raise ClosedObligationError(
            f"Settlement {settlement.id} is {settlement.status}; no further movements allowed"
        )

    if amount > settlement.residual_amount:
        raise InvalidAmountError(
            f"Movement amount {amount} exceeds residual {settlement.residual_amount}",
            residual_amount=settlement.residual_amount,
        )

    observed_version = settlement.version
    epsilon = lifecycle.residual_epsilon()

    posting = post_settlement_movement(
        obligation_type=settlement.obligation_type,
        counterparty_name=settlement.counterparty_name,
        amount=amount,
        movement_date=movement_date,
        payment_method=payment_method,
        notes=notes,
    )

    movement = SettlementMovement.objects.create(
        settlement=settlement,
        accounting_entry=posting.entry,
        journal_header=posting.journal,
        amount=amount,
        movement_date=movement_date,
        payment_method=payment_method,
        notes=notes,
        created_by=user if getattr(user, "is_authenticated", False) else None,
    )

    new_residual = lifecycle.absorb_residue(
        settlement.residual_amount - amount, epsilon=epsilon
    )
    new_status = lifecycle.derive_status(
        total_amount=settlement.total_amount,
        residual_amount=new_residual,
    )

    updated = Settlement.objects.filter(
        id=settlement.id,
        version=observed_version,
    ).update(
        residual_amount=new_residual,
        status=new_status,
        version=F("version") + 1,
        updated_at=timezone.now(),
    )
    if updated != 1:
        raise ConcurrencyConflictError(
            f"Settlement {settlement.id} changed concurrently (version {observed_version})"
        )

    settlement.refresh_from_db()

    if settlement.status == Settlement.STATUS_CLOSED:
        _mirror_invoice_settled(settlement=settlement, movement_date=movement_date)

    return MovementResult(settlement=settlement, movement=movement)


def apply_movement(
    *,
    settlement_id,
    amount,
    movement_date=None,
    payment_method: str = "",
    notes: str = "",
    user=None,
) -> MovementResult:
    amt = _validate_amount_shape(amount)
    when = movement_date or timezone.localdate()
    method = (payment_method or "").strip()
    note = (notes or "").strip()

    logger.info(
        "Applying settlement movement",
        extra={
            "settlement_id": str(settlement_id),
            "amount": str(amt),
            "payment_method": method,
        },
    )

    result = run_atomic(
        lambda: _apply_movement_once(
            settlement_id=settlement_id,
            amount=amt,
            movement_date=when,
            payment_method=method,
            notes=note,
            user=user,
        ),
        operation="apply_movement",
    )

    logger.info(
        "Settlement movement applied",
        extra={
            "settlement_id": str(result.settlement.id),
            "movement_id": str(result.movement.id),
            "residual_amount": str(result.settlement.residual_amount),
            "status": result.settlement.status,
        },
    )
    return result


def _void_once(*, settlement_id, reason: str, user) -> Settlement:
    settlement = _lock_settlement(settlement_id)

    if not lifecycle.is_active(settlement.status):
        raise InvalidStateError(
            f"Only open or partial settlements can be voided (status={settlement.status})"
        )

    settlement.voided_at = timezone.now()
    settlement.void_reason = reason
    settlement.voided_by = user if getattr(user, "is_authenticated", False) else None
    settlement.version = settlement.version + 1
    settlement.save(
        update_fields=["voided_at", "void_reason", "voided_by", "version", "updated_at"]
    )
    return settlement


def void_settlement(*, settlement_id, reason: str = "", user=None) -> Settlement:
    """
    Administrative escape hatch. Residual is left as-is (no payment math).
    """
    settlement = run_atomic(
        lambda: _void_once(
            settlement_id=settlement_id,
            reason=(reason or "").strip()[:255],
            user=user,
        ),
        operation="void_settlement",
    )

    logger.info(
        "Settlement voided",
        extra={"settlement_id": str(settlement.id), "reason": settlement.void_reason},
    )
    return settlement
