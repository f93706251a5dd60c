"""
Pydantic schemas for recurring payments.
"""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from finance_ledger.models.enums import PaymentFrequency, TransactionType


class RecurringPaymentCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str | None = Field(default=None, min_length=1, max_length=50)
    name: str = Field(min_length=1, max_length=255)
    amount: Decimal
    frequency: PaymentFrequency
    category: str = Field(min_length=1, max_length=100)
    payment_type: TransactionType
    next_payment_date: date
    account_id: str


class RecurringPaymentUpdate(BaseModel):
    """
    Partial update.

    Setting next_payment_date here re-anchors the schedule on
    the new date's day of month.
    """
    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, min_length=1, max_length=255)
    amount: Decimal | None = None
    frequency: PaymentFrequency | None = None
    category: str | None = Field(default=None, min_length=1, max_length=100)
    payment_type: TransactionType | None = None
    next_payment_date: date | None = None
    account_id: str | None = None


class RecurringPaymentResponse(BaseModel):
    id: str
    name: str
    amount: Decimal
    frequency: PaymentFrequency
    category: str
    payment_type: TransactionType
    next_payment_date: date
    anchor_day: int
    account_id: str
    created_at: datetime

    model_config = {"from_attributes": True}
