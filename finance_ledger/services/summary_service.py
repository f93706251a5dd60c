"""
Summary service — read-only totals across accounts and debts.

Nothing here writes. Interest figures are simple estimates
(daily rate times days), not what a bank would actually pay.
"""

import calendar
from datetime import date, datetime
from decimal import Decimal
from typing import Callable

from sqlalchemy.orm import Session

from finance_ledger.models.account import Account
from finance_ledger.models.enums import AccountType, DebtType
from finance_ledger.services.ledger_service import LedgerService
from finance_ledger.utils.money import to_money

DAYS_PER_YEAR = Decimal("365")

# UK financial year: 1 April to 31 March
FINANCIAL_YEAR_START_MONTH = 4


def financial_year_start(today: date) -> date:
    year = today.year if today.month >= FINANCIAL_YEAR_START_MONTH else today.year - 1
    return date(year, FINANCIAL_YEAR_START_MONTH, 1)


def _daily_interest(account: Account) -> Decimal:
    return account.balance * (account.interest_rate / 100) / DAYS_PER_YEAR


class SummaryService:

    def __init__(self, db: Session, clock: Callable[[], datetime] | None = None):
        self.db = db
        self.clock = clock or datetime.now
        self.ledger_service = LedgerService(db, self.clock)

    def total_wealth(self) -> Decimal:
        """Everything held outside retirement accounts."""
        return to_money(sum(
            (a.balance for a in self.ledger_service.list_accounts()
             if a.account_type != AccountType.RETIREMENT),
            Decimal("0"),
        ))

    def total_retirement(self) -> Decimal:
        return to_money(sum(
            (a.balance for a in self.ledger_service.list_accounts()
             if a.account_type == AccountType.RETIREMENT),
            Decimal("0"),
        ))

    def total_debt(self) -> Decimal:
        return to_money(sum(
            (d.balance for d in self.ledger_service.list_debts() if d.balance > 0),
            Decimal("0"),
        ))

    def total_available_credit(self) -> Decimal:
        """Unused limit on credit cards that carry a balance."""
        return to_money(sum(
            (d.credit_limit - d.balance for d in self.ledger_service.list_debts()
             if d.debt_type == DebtType.CREDIT_CARD
             and d.credit_limit
             and d.balance > 0),
            Decimal("0"),
        ))

    def net_worth(self) -> Decimal:
        assets = sum(
            (a.balance for a in self.ledger_service.list_accounts()),
            Decimal("0"),
        )
        return to_money(assets - self.total_debt())

    def savings_interest_for_financial_year(self) -> Decimal:
        """Interest accrued so far this financial year on savings accounts."""
        today = self.clock().date()
        days = max(0, (today - financial_year_start(today)).days)
        return to_money(sum(
            (_daily_interest(a) * days for a in self.ledger_service.list_accounts()
             if a.account_type == AccountType.SAVINGS and a.interest_rate),
            Decimal("0"),
        ))

    def projected_monthly_interest(self, account_id: str) -> Decimal:
        """Interest a savings account should still earn before month end."""
        account = self.ledger_service.get_account(account_id)
        if account.account_type != AccountType.SAVINGS or not account.interest_rate:
            return Decimal("0.00")
        today = self.clock().date()
        days_in_month = calendar.monthrange(today.year, today.month)[1]
        return to_money(_daily_interest(account) * (days_in_month - today.day))
