"""
Builders for test data.
"""

from datetime import date
from decimal import Decimal

from finance_ledger.models.enums import PaymentFrequency, TransactionType
from finance_ledger.schemas.account import CurrentAccountCreate
from finance_ledger.schemas.debt import CreditCardDebtCreate
from finance_ledger.schemas.recurring_payment import RecurringPaymentCreate
from finance_ledger.services.ledger_service import LedgerService
from finance_ledger.services.scheduler_service import SchedulerService


def make_account(db_session, balance="100.00", name="Current", **fields):
    """Create a current account and return it."""
    return LedgerService(db_session).create_account(CurrentAccountCreate(
        name=name,
        balance=Decimal(balance),
        **fields,
    ))


def make_credit_card(db_session, balance="500.00", credit_limit="1000.00"):
    return LedgerService(db_session).create_debt(CreditCardDebtCreate(
        name="Visa",
        balance=Decimal(balance),
        apr=Decimal("22.90"),
        minimum_payment=Decimal("25.00"),
        credit_limit=Decimal(credit_limit) if credit_limit else None,
    ))


def make_payment(
    db_session,
    account,
    amount="14.99",
    frequency=PaymentFrequency.MONTHLY,
    next_payment_date=date(2024, 1, 31),
    payment_type=TransactionType.EXPENSE,
    clock=None,
):
    return SchedulerService(db_session, clock).create_recurring_payment(
        RecurringPaymentCreate(
            name="Streaming",
            amount=Decimal(amount),
            frequency=frequency,
            category="Subscriptions",
            payment_type=payment_type,
            next_payment_date=next_payment_date,
            account_id=account.id,
        )
    )
