"""
Debt API endpoints.
"""

from typing import Callable

from fastapi import APIRouter, Body, Depends, Response
from sqlalchemy.orm import Session

from finance_ledger.api.deps import get_clock
from finance_ledger.models.base import get_db
from finance_ledger.schemas.debt import (
    DebtCreate,
    DebtPaymentRequest,
    DebtPaymentResponse,
    DebtResponse,
    DebtUpdate,
)
from finance_ledger.services.ledger_service import LedgerService
from finance_ledger.services.operations_service import OperationsService

router = APIRouter(prefix="/debts", tags=["Debts"])


@router.post("", response_model=DebtResponse, status_code=201)
def create_debt(
    request: DebtCreate = Body(discriminator="debt_type"),
    db: Session = Depends(get_db),
):
    return LedgerService(db).create_debt(request)


@router.get("", response_model=list[DebtResponse])
def list_debts(db: Session = Depends(get_db)):
    return LedgerService(db).list_debts()


@router.get("/{debt_id}", response_model=DebtResponse)
def get_debt(debt_id: str, db: Session = Depends(get_db)):
    return LedgerService(db).get_debt(debt_id)


@router.patch("/{debt_id}", response_model=DebtResponse)
def update_debt(
    debt_id: str,
    request: DebtUpdate,
    db: Session = Depends(get_db),
):
    return LedgerService(db).update_debt(debt_id, request)


@router.delete("/{debt_id}", status_code=204)
def delete_debt(debt_id: str, db: Session = Depends(get_db)):
    LedgerService(db).delete_debt(debt_id)
    return Response(status_code=204)


@router.post("/{debt_id}/pay", response_model=DebtPaymentResponse, status_code=201)
def pay_debt(
    debt_id: str,
    request: DebtPaymentRequest,
    db: Session = Depends(get_db),
    clock: Callable = Depends(get_clock),
):
    """Pay part of a debt from an account."""
    payment = OperationsService(db, clock).pay_debt(
        debt_id,
        request.account_id,
        request.amount,
        transaction_id=request.transaction_id,
    )
    return DebtPaymentResponse.model_validate(payment)
