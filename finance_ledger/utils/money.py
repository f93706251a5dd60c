"""
Decimal-safe money helpers.

Amounts are never floats. Anything coming from outside
(JSON numbers, strings, ints) is converted through str so
that 0.1 stays 0.1 instead of 0.1000000000000000055...
"""

from decimal import Decimal, ROUND_HALF_UP

from finance_ledger.models.enums import TransactionType

CENT = Decimal("0.01")


def to_money(value) -> Decimal:
    """Convert a number to a Decimal rounded to whole cents."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def signed_amount(amount, transaction_type: TransactionType) -> Decimal:
    """Balance effect of a transaction: income adds, expense subtracts."""
    amount = to_money(amount)
    if transaction_type == TransactionType.INCOME:
        return amount
    return -amount
