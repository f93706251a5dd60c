"""
Shared enumerations for database models.

Using Python enums mapped to database enums ensures that
only valid values can be stored. An invalid account_type
or frequency is caught at the database level, not just
in Python validation.
"""

import enum


class AccountType(str, enum.Enum):
    """Kinds of asset account a user can hold."""
    CURRENT = "current"
    SAVINGS = "savings"
    INVESTMENT = "investment"
    RETIREMENT = "retirement"
    CRYPTO = "crypto"


class DebtType(str, enum.Enum):
    CREDIT_CARD = "credit_card"
    LOAN = "loan"
    CAR_PAYMENT = "car_payment"
    MORTGAGE = "mortgage"


class TransactionType(str, enum.Enum):
    """Direction of a transaction's effect on its account."""
    INCOME = "income"
    EXPENSE = "expense"


class PaymentFrequency(str, enum.Enum):
    """How often a recurring payment falls due."""
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class ResetFrequency(str, enum.Enum):
    """Length of an account's budgeting period, used for projections."""
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
