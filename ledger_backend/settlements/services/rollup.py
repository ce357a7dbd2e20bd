# settlements/services/rollup.py

"""
COUNTERPARTY ROLLUP (READ-ONLY)

Group settlements by (counterparty_name, obligation_type).

Rules:
- A counterparty that is owed money AND owes money yields TWO groups,
  never one (receivable and payable are tracked separately).
- open_count / overdue_count only look at active settlements (open, partial).
- Ordering is a display policy: pass your own `order` key to change it.

Also exposes settlement_totals(), the open-residual summary per
obligation type.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from django.utils import timezone

from settlements import lifecycle

ZERO = Decimal("0.00")


@dataclass
class CounterpartyGroup:
    counterparty_name: str
    obligation_type: str
    total_amount: Decimal = ZERO
    total_residual: Decimal = ZERO
    open_count: int = 0
    overdue_count: int = 0
    settlement_count: int = 0
    next_due_date: date | None = None
    settlement_ids: list = field(default_factory=list)

    @property
    def key(self) -> tuple[str, str]:
        return (self.counterparty_name, self.obligation_type)

    def as_dict(self) -> dict:
        return {
            "counterpartyName": self.counterparty_name,
            "obligationType": self.obligation_type,
            "totalAmount": str(self.total_amount),
            "totalResidual": str(self.total_residual),
            "openCount": self.open_count,
            "overdueCount": self.overdue_count,
            "settlementCount": self.settlement_count,
            "nextDueDate": self.next_due_date.isoformat() if self.next_due_date else None,
        }


def default_rollup_order(group: CounterpartyGroup):
    """
    Overdue groups first, then largest residual, then name A-Z.
    """
    return (
        0 if group.overdue_count > 0 else 1,
        -group.total_residual,
        group.counterparty_name.lower(),
        group.counterparty_name,
    )


def _matches(settlement, *, obligation_type, statuses) -> bool:
    if obligation_type and settlement.obligation_type != obligation_type:
        return False
    if statuses and settlement.status not in statuses:
        return False
    return True


def group_by_counterparty(
    settlements: Iterable,
    *,
    obligation_type: str | None = None,
    statuses: Iterable[str] | None = None,
    today: date | None = None,
    order: Callable[[CounterpartyGroup], object] | None = default_rollup_order,
) -> list[CounterpartyGroup]:
    today = today or timezone.localdate()
    status_filter = set(statuses) if statuses else None

    groups: dict[tuple[str, str], CounterpartyGroup] = {}

    for s in settlements:
        if not _matches(s, obligation_type=obligation_type, statuses=status_filter):
            continue

        key = (s.counterparty_name, s.obligation_type)
        group = groups.get(key)
        if group is None:
            group = CounterpartyGroup(
                counterparty_name=s.counterparty_name,
                obligation_type=s.obligation_type,
            )
            groups[key] = group

        group.total_amount += s.total_amount
        group.total_residual += s.residual_amount
        group.settlement_count += 1
        group.settlement_ids.append(s.id)

        if lifecycle.is_active(s.status):
            group.open_count += 1
            if group.next_due_date is None or s.due_date < group.next_due_date:
                group.next_due_date = s.due_date
            if lifecycle.days_until_due(s, today) < 0:
                group.overdue_count += 1

    result = list(groups.values())
    if order is not None:
        result.sort(key=order)
    return result


def settlement_totals(settlements: Iterable, *, today: date | None = None) -> dict:
    """
    Open residual per obligation type. Closed and voided settlements are excluded.
    """
    today = today or timezone.localdate()

    totals = {
        "receivableResidual": ZERO,
        "payableResidual": ZERO,
        "openCount": 0,
        "overdueCount": 0,
        "overdueResidual": ZERO,
    }

    for s in settlements:
        if not lifecycle.is_active(s.status):
            continue

        if s.obligation_type == "receivable":
            totals["receivableResidual"] += s.residual_amount
        else:
            totals["payableResidual"] += s.residual_amount

        totals["openCount"] += 1
        if lifecycle.days_until_due(s, today) < 0:
            totals["overdueCount"] += 1
            totals["overdueResidual"] += s.residual_amount

    return {
        k: (str(v) if isinstance(v, Decimal) else v)
        for k, v in totals.items()
    }
