"""
Tests for the read-only summary totals.
"""

from datetime import date, datetime
from decimal import Decimal

import pytest

from finance_ledger.schemas.account import RetirementAccountCreate, SavingsAccountCreate
from finance_ledger.schemas.debt import InstalmentDebtCreate
from finance_ledger.services.ledger_service import LedgerService
from finance_ledger.services.summary_service import SummaryService, financial_year_start

from helpers import make_account, make_credit_card


@pytest.fixture
def portfolio(db_session):
    """A current account, savings, a pension, a credit card and a paid-off loan."""
    ledger = LedgerService(db_session)
    current = make_account(db_session, balance="100.00")
    savings = ledger.create_account(SavingsAccountCreate(
        name="Savings",
        balance=Decimal("10000.00"),
        interest_rate=Decimal("3.65"),
    ))
    ledger.create_account(RetirementAccountCreate(
        name="Pension",
        balance=Decimal("5000.00"),
    ))
    make_credit_card(db_session, balance="500.00", credit_limit="1000.00")
    ledger.create_debt(InstalmentDebtCreate(
        name="Old loan",
        debt_type="loan",
        balance=Decimal("0.00"),
        apr=Decimal("5.00"),
        minimum_payment=Decimal("0.00"),
    ))
    return {"current": current, "savings": savings}


class TestFinancialYear:

    def test_before_april_belongs_to_previous_year(self):
        assert financial_year_start(date(2024, 1, 15)) == date(2023, 4, 1)

    def test_from_april(self):
        assert financial_year_start(date(2024, 4, 1)) == date(2024, 4, 1)


class TestSummary:

    def test_totals(self, db_session, clock, portfolio):
        summary = SummaryService(db_session, clock)

        assert summary.total_wealth() == Decimal("10100.00")
        assert summary.total_retirement() == Decimal("5000.00")
        assert summary.total_debt() == Decimal("500.00")
        assert summary.total_available_credit() == Decimal("500.00")
        assert summary.net_worth() == Decimal("14600.00")

    def test_savings_interest_this_financial_year(self, db_session, clock, portfolio):
        # 10000 at 3.65% earns 1.00 a day; 289 days since 1 April 2023
        assert SummaryService(db_session, clock).savings_interest_for_financial_year() == Decimal("289.00")

    def test_projected_monthly_interest(self, db_session, clock, portfolio):
        summary = SummaryService(db_session, clock)

        assert summary.projected_monthly_interest(portfolio["savings"].id) == Decimal("16.00")
        assert summary.projected_monthly_interest(portfolio["current"].id) == Decimal("0.00")

    def test_empty_store(self, db_session):
        summary = SummaryService(db_session, lambda: datetime(2024, 6, 1))
        assert summary.net_worth() == Decimal("0.00")
        assert summary.total_available_credit() == Decimal("0.00")
        assert summary.savings_interest_for_financial_year() == Decimal("0.00")
