"""
Pydantic schemas for debts and debt payments.
"""

from datetime import datetime
from decimal import Decimal
from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from finance_ledger.models.enums import DebtType
from finance_ledger.schemas.transaction import TransactionResponse


# --- Request Schemas ---

class DebtFields(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str | None = Field(default=None, min_length=1, max_length=50)
    name: str = Field(min_length=1, max_length=255)
    balance: Decimal = Field(ge=0, decimal_places=2)
    apr: Decimal = Field(ge=0, decimal_places=2)
    minimum_payment: Decimal = Field(ge=0, decimal_places=2)


class CreditCardDebtCreate(DebtFields):
    debt_type: Literal["credit_card"] = "credit_card"
    credit_limit: Decimal | None = Field(default=None, ge=0, decimal_places=2)

    @model_validator(mode="after")
    def balance_within_limit(self):
        if self.credit_limit is not None and self.balance > self.credit_limit:
            raise ValueError("balance exceeds credit limit")
        return self


class InstalmentDebtCreate(DebtFields):
    """Loans, car finance and mortgages. No credit limit."""
    debt_type: Literal["loan", "car_payment", "mortgage"]


DebtCreate = Union[CreditCardDebtCreate, InstalmentDebtCreate]


class DebtUpdate(BaseModel):
    """Partial update, checked against the credit limit by the service."""
    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, min_length=1, max_length=255)
    debt_type: DebtType | None = None
    balance: Decimal | None = Field(default=None, decimal_places=2)
    apr: Decimal | None = Field(default=None, ge=0, decimal_places=2)
    minimum_payment: Decimal | None = Field(default=None, ge=0, decimal_places=2)
    credit_limit: Decimal | None = Field(default=None, ge=0, decimal_places=2)


class DebtPaymentRequest(BaseModel):
    """
    Pay part of a debt from an account.

    transaction_id makes retries safe: a second request with the
    same id returns the first payment instead of paying twice.
    """
    account_id: str
    amount: Decimal
    transaction_id: str | None = Field(default=None, min_length=1, max_length=50)


# --- Response Schemas ---

class DebtResponse(BaseModel):
    id: str
    name: str
    debt_type: DebtType
    balance: Decimal
    apr: Decimal
    minimum_payment: Decimal
    credit_limit: Decimal | None
    available_credit: Decimal | None
    created_at: datetime

    model_config = {"from_attributes": True}


class DebtPaymentResponse(BaseModel):
    transaction: TransactionResponse
    debt: DebtResponse

    model_config = {"from_attributes": True}
