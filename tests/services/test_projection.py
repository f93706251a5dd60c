"""
Tests for the projection calculator. No database: accounts and
payments are plain unsaved model instances.
"""

from datetime import date, datetime
from decimal import Decimal

from finance_ledger.models.account import Account
from finance_ledger.models.enums import (
    AccountType,
    PaymentFrequency,
    ResetFrequency,
    TransactionType,
)
from finance_ledger.models.recurring_payment import RecurringPayment
from finance_ledger.services.projection import calculate_projection, project_balance

NOW = datetime(2024, 1, 15, 10, 30)


def account(reset_frequency=None, reset_day=None, balance="1000.00"):
    return Account(
        id="acc-1",
        name="Current",
        account_type=AccountType.CURRENT,
        balance=Decimal(balance),
        reset_frequency=reset_frequency,
        reset_day=reset_day,
    )


def payment(amount, due, payment_type=TransactionType.EXPENSE, account_id="acc-1"):
    return RecurringPayment(
        name="Payment",
        amount=Decimal(amount),
        frequency=PaymentFrequency.MONTHLY,
        category="Bills",
        payment_type=payment_type,
        next_payment_date=due,
        anchor_day=due.day,
        account_id=account_id,
    )


class TestProjection:

    def test_no_reset_frequency_is_just_the_balance(self):
        payments = [payment("50.00", date(2024, 1, 16))]
        projection = calculate_projection(account(), payments, NOW)

        assert projection.boundary is None
        assert projection.projected_balance == Decimal("1000.00")

    def test_weekly_window(self):
        payments = [
            payment("14.99", date(2024, 1, 21)),
            payment("500.00", date(2024, 1, 22), TransactionType.INCOME),
        ]
        projection = calculate_projection(
            account(ResetFrequency.WEEKLY), payments, NOW
        )

        assert projection.boundary == datetime(2024, 1, 21, 23, 59, 59)
        assert projection.expense_total == Decimal("14.99")
        assert projection.income_total == Decimal("0.00")
        assert projection.projected_balance == Decimal("985.01")

    def test_daily_window_counts_overdue(self):
        payments = [
            payment("10.00", date(2024, 1, 1)),
            payment("20.00", date(2024, 1, 15)),
            payment("30.00", date(2024, 1, 16)),
        ]
        total = project_balance(account(ResetFrequency.DAILY), payments, NOW)
        assert total == Decimal("970.00")

    def test_monthly_window_with_reset_day(self):
        payments = [
            payment("2500.00", date(2024, 1, 25), TransactionType.INCOME),
            payment("800.00", date(2024, 1, 26)),
            payment("100.00", date(2024, 1, 20)),
        ]
        projection = calculate_projection(
            account(ResetFrequency.MONTHLY, reset_day=25), payments, NOW
        )

        # The boundary is midnight on the 25th, so payments due that day count
        assert projection.boundary == datetime(2024, 1, 25)
        assert projection.income_total == Decimal("2500.00")
        assert projection.expense_total == Decimal("100.00")
        assert projection.projected_balance == Decimal("3400.00")

    def test_other_accounts_payments_ignored(self):
        payments = [payment("99.00", date(2024, 1, 16), account_id="acc-2")]
        assert project_balance(
            account(ResetFrequency.MONTHLY), payments, NOW
        ) == Decimal("1000.00")

    def test_same_inputs_same_answer(self):
        acc = account(ResetFrequency.WEEKLY)
        payments = [payment("14.99", date(2024, 1, 20))]
        assert calculate_projection(acc, payments, NOW) == calculate_projection(
            acc, payments, NOW
        )
