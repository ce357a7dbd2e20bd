# settlements/models/__init__.py

"""
SETTLEMENT MODELS PACKAGE EXPORTS

Keep this file *imports-only* (no business logic).
"""

from settlements.models.movement import SettlementMovement
from settlements.models.settlement import Settlement

__all__ = [
    "Settlement",
    "SettlementMovement",
]
