"""
Pydantic schemas for the portfolio summary.
"""

from decimal import Decimal

from pydantic import BaseModel


class SummaryResponse(BaseModel):
    total_wealth: Decimal
    total_retirement: Decimal
    total_debt: Decimal
    total_available_credit: Decimal
    net_worth: Decimal
    savings_interest_this_financial_year: Decimal
