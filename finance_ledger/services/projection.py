"""
Projection calculator.

Estimates what an account will hold at the end of its current
budgeting period (its next reset): the current balance plus every
recurring income and minus every recurring expense on that account
that falls due before the reset.

Pure functions only. Nothing here reads from or writes to the
store; callers pass in the account and the recurring payments and
get a fresh answer every time.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Iterable

from finance_ledger.models.enums import TransactionType
from finance_ledger.utils.dates import reset_boundary
from finance_ledger.utils.money import to_money


@dataclass(frozen=True)
class Projection:
    account_id: str
    balance: Decimal
    boundary: datetime | None
    income_total: Decimal
    expense_total: Decimal

    @property
    def projected_balance(self) -> Decimal:
        return to_money(self.balance + self.income_total - self.expense_total)


def calculate_projection(account, recurring_payments: Iterable, now: datetime) -> Projection:
    """
    Break down the projected balance of one account.

    Accounts without a reset frequency have no projection window:
    the projection is just the balance. Otherwise a payment counts
    when it belongs to the account and its next due date (taken as
    midnight) is on or before the boundary. Overdue payments count.
    """
    balance = to_money(account.balance)
    zero = Decimal("0.00")

    if not account.reset_frequency:
        return Projection(account.id, balance, None, zero, zero)

    boundary = reset_boundary(now, account.reset_frequency, account.reset_day)
    income_total = zero
    expense_total = zero

    for payment in recurring_payments:
        if payment.account_id != account.id:
            continue
        due = datetime.combine(payment.next_payment_date, datetime.min.time())
        if due > boundary:
            continue
        if payment.payment_type == TransactionType.INCOME:
            income_total += to_money(payment.amount)
        else:
            expense_total += to_money(payment.amount)

    return Projection(account.id, balance, boundary, income_total, expense_total)


def project_balance(account, recurring_payments: Iterable, now: datetime) -> Decimal:
    """Projected balance of an account at its next reset boundary."""
    return calculate_projection(account, recurring_payments, now).projected_balance
