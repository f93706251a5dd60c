"""
Account API endpoints.

The API layer is thin: it turns HTTP into service calls and
service results into responses. Errors raised by the services
are mapped to status codes in main.py.
"""

from typing import Callable

from fastapi import APIRouter, Body, Depends, Response
from sqlalchemy.orm import Session

from finance_ledger.api.deps import get_clock
from finance_ledger.models.base import get_db
from finance_ledger.schemas.account import (
    AccountCreate,
    AccountResponse,
    AccountUpdate,
    ProjectionResponse,
)
from finance_ledger.services.ledger_service import LedgerService
from finance_ledger.services.projection import calculate_projection
from finance_ledger.services.scheduler_service import SchedulerService

router = APIRouter(prefix="/accounts", tags=["Accounts"])


@router.post("", response_model=AccountResponse, status_code=201)
def create_account(
    request: AccountCreate = Body(discriminator="account_type"),
    db: Session = Depends(get_db),
):
    """Open a new account with its opening balance."""
    return LedgerService(db).create_account(request)


@router.get("", response_model=list[AccountResponse])
def list_accounts(db: Session = Depends(get_db)):
    """All accounts in display order."""
    return LedgerService(db).list_accounts()


@router.get("/{account_id}", response_model=AccountResponse)
def get_account(account_id: str, db: Session = Depends(get_db)):
    return LedgerService(db).get_account(account_id)


@router.patch("/{account_id}", response_model=AccountResponse)
def update_account(
    account_id: str,
    request: AccountUpdate,
    db: Session = Depends(get_db),
):
    """Change account fields. A balance here is a manual override."""
    return LedgerService(db).update_account(account_id, request)


@router.delete("/{account_id}", status_code=204)
def delete_account(account_id: str, db: Session = Depends(get_db)):
    """Delete an account together with its transactions and schedules."""
    LedgerService(db).delete_account(account_id)
    return Response(status_code=204)


@router.get("/{account_id}/projection", response_model=ProjectionResponse)
def get_projection(
    account_id: str,
    db: Session = Depends(get_db),
    clock: Callable = Depends(get_clock),
):
    """
    Projected balance at the account's next reset.

    Recomputed on every request from the current balance and the
    account's recurring payments; nothing is stored.
    """
    account = LedgerService(db, clock).get_account(account_id)
    payments = SchedulerService(db, clock).list_recurring_payments(account_id)
    projection = calculate_projection(account, payments, clock())
    return ProjectionResponse(
        account_id=projection.account_id,
        balance=projection.balance,
        boundary=projection.boundary,
        income_total=projection.income_total,
        expense_total=projection.expense_total,
        projected_balance=projection.projected_balance,
    )
