# accounting/services/journal_service.py

"""
======================================================
PATH: accounting/services/journal_service.py
======================================================
JOURNAL SERVICE (DOUBLE-ENTRY ENGINE)

This module is the ONLY place allowed to:
- Create JournalHeader
- Create JournalLine
- Enforce debit == credit == header amount

Everything else (invoice registration, settlement movements) must pass
through post_balanced().

Validation order:
1) normalize + validate every line (closed account set, one side only)
2) check totals
3) only then write header + lines (atomic)

An unbalanced journal is a programming defect, not user input: it is
logged at ERROR and raised, never corrected.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from django.db import transaction

from accounting.models.entry import AccountingEntry
from accounting.models.journal import JournalHeader, JournalLine, StructuralAccount
from accounting.services.exceptions import (
    LedgerValidationError,
    UnbalancedJournalError,
)
from accounting.services.money import ZERO, money

logger = logging.getLogger("ledger.journal")

MIN_LINES = 2


@dataclass(frozen=True)
class LineSpec:
    account_key: StructuralAccount
    debit: Decimal = ZERO
    credit: Decimal = ZERO
    description: str = ""


@dataclass(frozen=True)
class HeaderSpec:
    accounting_entry: AccountingEntry
    competence_date: date
    amount: Decimal
    description: str
    status: str = JournalHeader.STATUS_REGISTERED
    payment_method: str = ""
    lines: list[LineSpec] = field(default_factory=list)


def debit(account_key, amount, description: str = "") -> LineSpec:
    return LineSpec(account_key=account_key, debit=money(amount), description=description)


def credit(account_key, amount, description: str = "") -> LineSpec:
    return LineSpec(account_key=account_key, credit=money(amount), description=description)


def _unbalanced(message: str, **extra) -> UnbalancedJournalError:
    logger.error("Journal rejected: %s", message, extra=extra)
    return UnbalancedJournalError(message)


def _normalize_lines(lines) -> list[LineSpec]:
    if not lines or len(lines) < MIN_LINES:
        raise _unbalanced(
            f"A journal needs at least {MIN_LINES} lines",
            line_count=len(lines or []),
        )

    normalized: list[LineSpec] = []
    for line in lines:
        try:
            account_key = StructuralAccount(line.account_key)
        except ValueError as exc:
            raise _unbalanced(
                f"Unknown structural account: {line.account_key!r}"
            ) from exc

        d = money(line.debit, field="debit")
        c = money(line.credit, field="credit")

        if d < 0 or c < 0:
            raise _unbalanced("Debit or credit cannot be negative")

        if d > 0 and c > 0:
            raise _unbalanced(
                "A journal line cannot have both debit and credit",
                account_key=account_key.value,
            )

        if d == 0 and c == 0:
            raise _unbalanced(
                "A journal line must have either debit or credit",
                account_key=account_key.value,
            )

        normalized.append(
            LineSpec(
                account_key=account_key,
                debit=d,
                credit=c,
                description=(line.description or "").strip(),
            )
        )

    return normalized


def validate_balanced(*, amount, lines) -> list[LineSpec]:
    """
    Pure validation (no writes). Returns the normalized lines.
    """
    normalized = _normalize_lines(lines)
    header_amount = money(amount)

    total_debits = sum((line.debit for line in normalized), ZERO)
    total_credits = sum((line.credit for line in normalized), ZERO)

    if total_debits != total_credits:
        raise _unbalanced(
            f"Journal not balanced: debits={total_debits} credits={total_credits}",
            debits=str(total_debits),
            credits=str(total_credits),
        )

    if total_debits != header_amount:
        raise _unbalanced(
            f"Journal lines ({total_debits}) do not match header amount ({header_amount})",
            debits=str(total_debits),
            header_amount=str(header_amount),
        )

    return normalized


@transaction.atomic
def post_balanced(header: HeaderSpec, lines=None) -> JournalHeader:
    line_specs = validate_balanced(
        amount=header.amount,
        lines=lines if lines is not None else header.lines,
    )

    description = (header.description or "").strip()
    if not description:
        raise LedgerValidationError("Journal description is required")

    journal = JournalHeader.objects.create(
        accounting_entry=header.accounting_entry,
        competence_date=header.competence_date,
        amount=money(header.amount),
        description=description,
        status=header.status,
        payment_method=header.payment_method or "",
    )

    JournalLine.objects.bulk_create(
        [
            JournalLine(
                journal_header=journal,
                line_order=index,
                account_key=spec.account_key.value,
                debit_amount=spec.debit,
                credit_amount=spec.credit,
                description=spec.description,
            )
            for index, spec in enumerate(line_specs, start=1)
        ]
    )

    return journal
