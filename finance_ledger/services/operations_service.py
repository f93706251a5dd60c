"""
Compound operations — transfers and debt payments.

Each operation touches more than one record and runs as a
single atomic unit:

transfer_funds
    expense leg on the source account
    income leg on the destination account
    (both carry the same transfer_id)

pay_debt
    expense on the paying account, category "Debt Payment"
    debt balance reduced by the amount, never below zero

Every check happens after the rows involved are locked, so the
balance that is checked is the balance that is debited.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Callable

from sqlalchemy import select
from sqlalchemy.orm import Session

from finance_ledger.errors import ValidationError
from finance_ledger.models.base import new_id
from finance_ledger.models.debt import Debt
from finance_ledger.models.enums import TransactionType
from finance_ledger.models.transaction import Transaction
from finance_ledger.services import audit
from finance_ledger.services.ledger_service import LedgerService, require_positive
from finance_ledger.services.unit_of_work import atomic
from finance_ledger.utils.money import to_money

logger = logging.getLogger(__name__)

TRANSFER_CATEGORY = "Transfer"
DEBT_PAYMENT_CATEGORY = "Debt Payment"


@dataclass
class DebtPayment:
    """The expense posted for a debt payment and the debt it reduced."""
    transaction: Transaction
    debt: Debt


class OperationsService:

    def __init__(self, db: Session, clock: Callable[[], datetime] | None = None):
        self.db = db
        self.clock = clock or datetime.now
        self.ledger_service = LedgerService(db, self.clock)

    def _transfer_legs(self, transfer_id: str) -> list[Transaction]:
        """Existing legs of a transfer, debit leg first."""
        legs = self.db.execute(
            select(Transaction).where(Transaction.transfer_id == transfer_id)
        ).scalars().all()
        return sorted(
            legs, key=lambda t: t.transaction_type != TransactionType.EXPENSE
        )

    @atomic
    def transfer_funds(
        self,
        from_account_id: str,
        to_account_id: str,
        amount: Decimal,
        description: str = "Transfer",
        transfer_id: str | None = None,
    ) -> list[Transaction]:
        """
        Move money between two accounts.

        Returns [debit leg, credit leg]. Replaying a transfer_id
        that has already been used returns the legs it created.
        """
        if transfer_id:
            existing = self._transfer_legs(transfer_id)
            if existing:
                return existing

        amount = require_positive(amount)
        if from_account_id == to_account_id:
            raise ValidationError("Cannot transfer to the same account")

        accounts = self.ledger_service.lock_accounts(from_account_id, to_account_id)
        if transfer_id:
            # A concurrent request with the same id may have committed
            # while this one waited for the locks
            existing = self._transfer_legs(transfer_id)
            if existing:
                return existing
        source = accounts[from_account_id]
        destination = accounts[to_account_id]

        if source.balance < amount:
            raise ValidationError(
                f"Insufficient balance: available={source.balance}, "
                f"requested={amount}"
            )

        transfer_id = transfer_id or new_id()
        today = self.clock().date()

        debit = self.ledger_service.apply_transaction(
            source,
            amount,
            TransactionType.EXPENSE,
            f"Transfer to account: {description}",
            TRANSFER_CATEGORY,
            today,
            transfer_id=transfer_id,
        )
        credit = self.ledger_service.apply_transaction(
            destination,
            amount,
            TransactionType.INCOME,
            f"Transfer from account: {description}",
            TRANSFER_CATEGORY,
            today,
            transfer_id=transfer_id,
        )

        logger.info(
            "Transferred %s from %s to %s (transfer %s)",
            amount, source.id, destination.id, transfer_id,
        )
        return [debit, credit]

    @atomic
    def pay_debt(
        self,
        debt_id: str,
        account_id: str,
        amount: Decimal,
        transaction_id: str | None = None,
    ) -> DebtPayment:
        """
        Pay down a debt from an account.

        The payment may not exceed what the account holds or what
        is still owed. Replaying a transaction_id that has already
        been used returns the original payment.
        """
        if transaction_id:
            existing = self.db.get(Transaction, transaction_id)
            if existing:
                if existing.category != DEBT_PAYMENT_CATEGORY:
                    raise ValidationError(
                        f"Transaction {transaction_id} exists and is not a debt payment"
                    )
                return DebtPayment(existing, self.ledger_service.get_debt(debt_id))

        amount = require_positive(amount)
        account = self.ledger_service.lock_account(account_id)
        debt = self.ledger_service.lock_debt(debt_id)

        if amount > account.balance:
            raise ValidationError(
                f"Insufficient balance: available={account.balance}, "
                f"requested={amount}"
            )
        if amount > debt.balance:
            raise ValidationError(
                f"Payment {amount} exceeds outstanding debt {debt.balance}"
            )

        txn = self.ledger_service.apply_transaction(
            account,
            amount,
            TransactionType.EXPENSE,
            f"Debt payment: {debt.name}",
            DEBT_PAYMENT_CATEGORY,
            self.clock().date(),
            transaction_id=transaction_id,
        )

        previous = debt.balance
        debt.balance = max(Decimal("0.00"), to_money(debt.balance - amount))
        self.db.flush()

        audit.record(
            self.db, "debt.paid", debt.id,
            account_id=account.id,
            transaction_id=txn.id,
            amount=amount,
            previous_balance=previous,
            balance=debt.balance,
        )
        logger.info(
            "Paid %s towards debt %s from account %s (remaining %s)",
            amount, debt.id, account.id, debt.balance,
        )
        return DebtPayment(txn, debt)
