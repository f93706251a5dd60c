"""
Portfolio summary endpoint.
"""

from typing import Callable

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from finance_ledger.api.deps import get_clock
from finance_ledger.models.base import get_db
from finance_ledger.schemas.summary import SummaryResponse
from finance_ledger.services.summary_service import SummaryService

router = APIRouter(tags=["Summary"])


@router.get("/summary", response_model=SummaryResponse)
def get_summary(
    db: Session = Depends(get_db),
    clock: Callable = Depends(get_clock),
):
    """Wealth, debt and net worth across all accounts."""
    service = SummaryService(db, clock)
    return SummaryResponse(
        total_wealth=service.total_wealth(),
        total_retirement=service.total_retirement(),
        total_debt=service.total_debt(),
        total_available_credit=service.total_available_credit(),
        net_worth=service.net_worth(),
        savings_interest_this_financial_year=(
            service.savings_interest_for_financial_year()
        ),
    )
