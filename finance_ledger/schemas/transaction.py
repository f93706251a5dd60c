"""
Pydantic schemas for transaction operations.

Amounts are deliberately not constrained here: a non-positive
amount is rejected by the ledger itself with a ValidationError,
so in-process callers and HTTP callers see the same failure.
"""

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, Field

from finance_ledger.models.enums import TransactionType


class TransactionCreate(BaseModel):
    id: str | None = Field(default=None, min_length=1, max_length=50)
    account_id: str
    amount: Decimal
    transaction_type: TransactionType
    description: str = Field(min_length=1)
    category: str = Field(min_length=1, max_length=100)
    date: dt.date | None = None
    recurring_payment_id: str | None = None


class TransferRequest(BaseModel):
    from_account_id: str
    to_account_id: str
    amount: Decimal
    description: str = Field(default="Transfer", max_length=255)
    transfer_id: str | None = Field(default=None, min_length=1, max_length=50)


class TransactionResponse(BaseModel):
    id: str
    account_id: str
    amount: Decimal
    description: str
    category: str
    date: dt.date
    transaction_type: TransactionType
    recurring_payment_id: str | None
    transfer_id: str | None
    is_transfer_leg: bool
    created_at: dt.datetime

    model_config = {"from_attributes": True}
