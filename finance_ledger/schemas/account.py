"""
Pydantic schemas for account operations.

Account creation is a tagged union on account_type. Each kind
of account only accepts the fields that belong to it, so an
interest rate on a crypto wallet or brokerage credentials on a
savings account are rejected before they reach the ledger.
"""

from datetime import datetime
from decimal import Decimal
from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from finance_ledger.models.enums import AccountType, ResetFrequency


# --- Request Schemas ---

class AccountFields(BaseModel):
    """Fields every kind of account shares."""
    model_config = ConfigDict(extra="forbid")

    id: str | None = Field(default=None, min_length=1, max_length=50)
    name: str = Field(min_length=1, max_length=255)
    balance: Decimal = Field(default=Decimal("0.00"), decimal_places=2)
    reset_frequency: ResetFrequency | None = None
    reset_day: int | None = Field(default=None, ge=1, le=31)
    display_order: int = 0

    @model_validator(mode="after")
    def reset_day_needs_monthly_reset(self):
        if (
            self.reset_day is not None
            and self.reset_frequency != ResetFrequency.MONTHLY
        ):
            raise ValueError("reset_day only applies to a monthly reset")
        return self


class CurrentAccountCreate(AccountFields):
    account_type: Literal["current"] = "current"


class SavingsAccountCreate(AccountFields):
    account_type: Literal["savings"] = "savings"
    interest_rate: Decimal | None = Field(default=None, ge=0, decimal_places=2)


class InvestmentAccountCreate(AccountFields):
    account_type: Literal["investment"] = "investment"
    api_key: str | None = None
    pie_id: str | None = Field(default=None, max_length=255)
    external_result: Decimal | None = Field(default=None, decimal_places=2)


class RetirementAccountCreate(AccountFields):
    account_type: Literal["retirement"] = "retirement"


class CryptoAccountCreate(AccountFields):
    account_type: Literal["crypto"] = "crypto"


AccountCreate = Union[
    CurrentAccountCreate,
    SavingsAccountCreate,
    InvestmentAccountCreate,
    RetirementAccountCreate,
    CryptoAccountCreate,
]


class AccountUpdate(BaseModel):
    """
    Partial update. Only fields that are explicitly set are written.

    Writing balance here is a manual override; it does not create
    a transaction. Type-specific fields are checked against the
    account's resulting type by the service.
    """
    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, min_length=1, max_length=255)
    account_type: AccountType | None = None
    balance: Decimal | None = Field(default=None, decimal_places=2)
    interest_rate: Decimal | None = Field(default=None, ge=0, decimal_places=2)
    api_key: str | None = None
    pie_id: str | None = Field(default=None, max_length=255)
    external_result: Decimal | None = Field(default=None, decimal_places=2)
    reset_frequency: ResetFrequency | None = None
    reset_day: int | None = Field(default=None, ge=1, le=31)
    display_order: int | None = None


# --- Response Schemas ---

class AccountResponse(BaseModel):
    id: str
    name: str
    account_type: AccountType
    balance: Decimal
    interest_rate: Decimal | None
    pie_id: str | None
    external_result: Decimal | None
    reset_frequency: ResetFrequency | None
    reset_day: int | None
    display_order: int
    created_at: datetime

    model_config = {"from_attributes": True}


class ProjectionResponse(BaseModel):
    """Balance an account is expected to hold at its next reset."""
    account_id: str
    balance: Decimal
    boundary: datetime | None
    income_total: Decimal
    expense_total: Decimal
    projected_balance: Decimal
