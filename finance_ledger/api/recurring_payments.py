"""
Recurring payment API endpoints.
"""

from typing import Callable

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from finance_ledger.api.deps import get_clock
from finance_ledger.models.base import get_db
from finance_ledger.schemas.recurring_payment import (
    RecurringPaymentCreate,
    RecurringPaymentResponse,
    RecurringPaymentUpdate,
)
from finance_ledger.schemas.transaction import TransactionResponse
from finance_ledger.services.scheduler_service import SchedulerService

router = APIRouter(prefix="/recurring-payments", tags=["Recurring Payments"])


@router.post("", response_model=RecurringPaymentResponse, status_code=201)
def create_recurring_payment(
    request: RecurringPaymentCreate,
    db: Session = Depends(get_db),
):
    return SchedulerService(db).create_recurring_payment(request)


@router.get("", response_model=list[RecurringPaymentResponse])
def list_recurring_payments(
    account_id: str | None = None,
    db: Session = Depends(get_db),
):
    """Recurring payments ordered by next due date."""
    return SchedulerService(db).list_recurring_payments(account_id)


@router.get("/upcoming", response_model=list[RecurringPaymentResponse])
def upcoming_payments(
    days: int = 7,
    account_id: str | None = None,
    db: Session = Depends(get_db),
    clock: Callable = Depends(get_clock),
):
    """Payments due in the next `days` days, including overdue ones."""
    return SchedulerService(db, clock).upcoming(days, account_id)


@router.get("/{payment_id}", response_model=RecurringPaymentResponse)
def get_recurring_payment(payment_id: str, db: Session = Depends(get_db)):
    return SchedulerService(db).get_recurring_payment(payment_id)


@router.patch("/{payment_id}", response_model=RecurringPaymentResponse)
def update_recurring_payment(
    payment_id: str,
    request: RecurringPaymentUpdate,
    db: Session = Depends(get_db),
):
    return SchedulerService(db).update_recurring_payment(payment_id, request)


@router.delete("/{payment_id}", status_code=204)
def delete_recurring_payment(payment_id: str, db: Session = Depends(get_db)):
    SchedulerService(db).delete_recurring_payment(payment_id)
    return Response(status_code=204)


@router.post(
    "/{payment_id}/settle",
    response_model=TransactionResponse,
    status_code=201,
)
def settle(
    payment_id: str,
    db: Session = Depends(get_db),
    clock: Callable = Depends(get_clock),
):
    """Mark the current occurrence as paid and move to the next one."""
    return SchedulerService(db, clock).settle(payment_id)


@router.post("/{payment_id}/skip", response_model=RecurringPaymentResponse)
def skip(
    payment_id: str,
    db: Session = Depends(get_db),
    clock: Callable = Depends(get_clock),
):
    """Move to the next occurrence without paying this one."""
    return SchedulerService(db, clock).skip(payment_id)
