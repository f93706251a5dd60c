"""
Transaction API endpoints.
"""

from typing import Callable

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from finance_ledger.api.deps import get_clock
from finance_ledger.models.base import get_db
from finance_ledger.schemas.transaction import (
    TransactionCreate,
    TransactionResponse,
    TransferRequest,
)
from finance_ledger.services.ledger_service import LedgerService
from finance_ledger.services.operations_service import OperationsService

router = APIRouter(prefix="/transactions", tags=["Transactions"])


@router.post("", response_model=TransactionResponse, status_code=201)
def create_transaction(
    request: TransactionCreate,
    db: Session = Depends(get_db),
    clock: Callable = Depends(get_clock),
):
    """Record income or an expense against an account."""
    return LedgerService(db, clock).create_transaction(request)


@router.post(
    "/transfer",
    response_model=list[TransactionResponse],
    status_code=201,
)
def transfer(
    request: TransferRequest,
    db: Session = Depends(get_db),
    clock: Callable = Depends(get_clock),
):
    """Transfer money between two accounts. Returns [debit, credit]."""
    return OperationsService(db, clock).transfer_funds(
        request.from_account_id,
        request.to_account_id,
        request.amount,
        request.description,
        transfer_id=request.transfer_id,
    )


@router.get("", response_model=list[TransactionResponse])
def list_transactions(
    account_id: str | None = None,
    db: Session = Depends(get_db),
):
    """Transactions, newest first."""
    return LedgerService(db).list_transactions(account_id)


@router.get("/{transaction_id}", response_model=TransactionResponse)
def get_transaction(transaction_id: str, db: Session = Depends(get_db)):
    """Get transaction details."""
    return LedgerService(db).get_transaction(transaction_id)


@router.delete("/{transaction_id}", status_code=204)
def undo_transaction(
    transaction_id: str,
    db: Session = Depends(get_db),
    clock: Callable = Depends(get_clock),
):
    """
    Undo a transaction.

    The account balance is restored and, for a settled recurring
    payment, the schedule moves back one period.
    """
    LedgerService(db, clock).delete_transaction(transaction_id)
    return Response(status_code=204)
