"""Money and date helpers shared by the services."""

from finance_ledger.utils.money import to_money, signed_amount
from finance_ledger.utils.dates import (
    add_months,
    advance,
    rollback,
    reset_boundary,
)

__all__ = [
    "to_money",
    "signed_amount",
    "add_months",
    "advance",
    "rollback",
    "reset_boundary",
]
