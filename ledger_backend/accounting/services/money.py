# accounting/services/money.py

"""
MONEY HELPERS

All ledger amounts are Decimal quantized to 2 places (ROUND_HALF_UP).
Floats never reach the models.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from accounting.services.exceptions import LedgerValidationError

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")


def money(value, *, field: str = "amount") -> Decimal:
    if value is None or value == "":
        return ZERO

    if isinstance(value, Decimal):
        amt = value
    else:
        try:
            amt = Decimal(str(value))
        except (InvalidOperation, ValueError, TypeError) as exc:
            raise LedgerValidationError(f"Invalid {field}: {value!r}") from exc

    if not amt.is_finite():
        raise LedgerValidationError(f"Invalid {field}: {value!r}")

    return amt.quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def compute_tax(net_amount, tax_rate) -> tuple[Decimal, Decimal]:
    """
    Returns (tax_amount, total_amount) for a net amount and a percentage rate.
    """
    net = money(net_amount, field="net_amount")
    rate = Decimal(str(tax_rate if tax_rate not in (None, "") else "0"))
    tax = money(net * rate / Decimal("100"), field="tax_amount")
    return tax, net + tax
