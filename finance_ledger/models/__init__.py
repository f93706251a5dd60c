"""
Database models package.

All models must be imported here so that Alembic can discover
them through Base.metadata when generating migrations.
"""

from finance_ledger.models.base import Base
from finance_ledger.models.enums import (
    AccountType,
    DebtType,
    TransactionType,
    PaymentFrequency,
    ResetFrequency,
)
from finance_ledger.models.audit_log import AuditLog
from finance_ledger.models.account import Account
from finance_ledger.models.debt import Debt
from finance_ledger.models.recurring_payment import RecurringPayment
from finance_ledger.models.transaction import Transaction

__all__ = [
    "Base",
    "AccountType",
    "DebtType",
    "TransactionType",
    "PaymentFrequency",
    "ResetFrequency",
    "AuditLog",
    "Account",
    "Debt",
    "RecurringPayment",
    "Transaction",
]
