"""
Ledger service — the single source of truth for balances.

This service enforces the fundamental rule:

    account.balance == opening balance
                       + sum(income) - sum(expense)
                       over the account's transactions

Every balance change is written in the same atomic unit as the
transaction that explains it, and undoing a transaction applies
the exact inverse. No other service writes Account.balance or
Debt.balance except through the methods here.

Rows are locked before they are read for a check-then-write
(SELECT ... FOR UPDATE on PostgreSQL, populate_existing so the
session never trusts a stale copy), and every locked row carries
a version counter, so two concurrent debits of one account
cannot both see the old balance.
"""

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Callable

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from finance_ledger.errors import NotFoundError, ValidationError
from finance_ledger.models.account import Account, TYPE_SPECIFIC_FIELDS
from finance_ledger.models.base import new_id
from finance_ledger.models.debt import Debt
from finance_ledger.models.enums import (
    AccountType,
    DebtType,
    ResetFrequency,
    TransactionType,
)
from finance_ledger.models.recurring_payment import RecurringPayment
from finance_ledger.models.transaction import Transaction
from finance_ledger.schemas.account import AccountFields, AccountUpdate
from finance_ledger.schemas.debt import DebtFields, DebtUpdate
from finance_ledger.schemas.transaction import TransactionCreate
from finance_ledger.services import audit
from finance_ledger.services.unit_of_work import atomic
from finance_ledger.utils.money import to_money, signed_amount

logger = logging.getLogger(__name__)

# Which account type owns each type-specific field
FIELD_OWNERS: dict[str, AccountType] = {
    field: account_type
    for account_type, fields in TYPE_SPECIFIC_FIELDS.items()
    for field in fields
}


def require_positive(amount) -> Decimal:
    """Normalize an amount to cents, rejecting zero and negatives."""
    amount = to_money(amount)
    if amount <= 0:
        raise ValidationError(f"amount must be positive, got {amount}")
    return amount


class LedgerService:
    """
    Accounts, debts and transactions.

    The service takes a database session and a clock. Public
    mutators are atomic units: they commit on success and roll
    back on failure. When called from another service's unit on
    the same session they join that unit instead.
    """

    def __init__(self, db: Session, clock: Callable[[], datetime] | None = None):
        self.db = db
        self.clock = clock or datetime.now

    # --- Locking ---

    def lock_account(self, account_id: str) -> Account:
        """Load an account for update, with fresh column values."""
        account = self.db.execute(
            select(Account)
            .where(Account.id == account_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()
        if not account:
            raise NotFoundError("Account", account_id)
        return account

    def lock_accounts(self, *account_ids: str) -> dict[str, Account]:
        """
        Lock several accounts.

        Locks are always taken in id order so that two transfers
        between the same pair of accounts, in opposite directions,
        cannot deadlock each other.
        """
        return {
            account_id: self.lock_account(account_id)
            for account_id in sorted(set(account_ids))
        }

    def lock_transaction(self, transaction_id: str) -> Transaction:
        """
        Re-read a transaction under lock.

        Raises NotFoundError when another unit has already removed
        it, even if this session still holds an earlier copy.
        """
        txn = self.db.execute(
            select(Transaction)
            .where(Transaction.id == transaction_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()
        if not txn:
            raise NotFoundError("Transaction", transaction_id)
        return txn

    def lock_debt(self, debt_id: str) -> Debt:
        debt = self.db.execute(
            select(Debt)
            .where(Debt.id == debt_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()
        if not debt:
            raise NotFoundError("Debt", debt_id)
        return debt

    # --- Balance adjustment ---

    def apply_transaction(
        self,
        account: Account,
        amount: Decimal,
        transaction_type: TransactionType,
        description: str,
        category: str,
        on_date: date,
        recurring_payment_id: str | None = None,
        transfer_id: str | None = None,
        transaction_id: str | None = None,
    ) -> Transaction:
        """
        Write a transaction and move the account balance with it.

        This is the only path that adds money to or removes money
        from an account. The caller must hold the account lock and
        be inside an atomic unit.
        """
        transaction_type = TransactionType(transaction_type)
        amount = require_positive(amount)

        txn = Transaction(
            id=transaction_id or new_id(),
            account_id=account.id,
            amount=amount,
            transaction_type=transaction_type,
            description=description,
            category=category,
            date=on_date,
            recurring_payment_id=recurring_payment_id,
            transfer_id=transfer_id,
        )
        self.db.add(txn)

        account.balance = to_money(
            account.balance + signed_amount(amount, transaction_type)
        )
        self.db.flush()

        audit.record(
            self.db, "transaction.created", txn.id,
            account_id=account.id,
            transaction_type=transaction_type.value,
            amount=amount,
            balance=account.balance,
        )
        return txn

    # --- Transactions ---

    @atomic
    def create_transaction(self, request: TransactionCreate) -> Transaction:
        """
        Record income or an expense against an account.

        If request.id names a transaction that already exists, it
        is returned as-is: a retried request never moves money twice.
        """
        if request.id:
            existing = self.db.get(Transaction, request.id)
            if existing:
                return existing

        amount = require_positive(request.amount)
        account = self.lock_account(request.account_id)

        if request.recurring_payment_id and not self.db.get(
            RecurringPayment, request.recurring_payment_id
        ):
            raise NotFoundError(
                "RecurringPayment", request.recurring_payment_id
            )

        txn = self.apply_transaction(
            account,
            amount,
            request.transaction_type,
            request.description,
            request.category,
            request.date or self.clock().date(),
            recurring_payment_id=request.recurring_payment_id,
            transaction_id=request.id,
        )
        logger.info(
            "Created %s %s on account %s (balance %s)",
            txn.transaction_type.value, txn.amount, account.id, account.balance,
        )
        return txn

    @atomic
    def delete_transaction(self, transaction_id: str) -> None:
        """
        Undo a transaction.

        Reverses its balance effect and, if it settled a recurring
        payment, moves that payment's next date back one period.
        A transfer leg is never undone alone: both legs go together.
        """
        txn = self.db.get(Transaction, transaction_id)
        if not txn:
            raise NotFoundError("Transaction", transaction_id)

        legs = [txn]
        if txn.transfer_id:
            legs = list(self.db.execute(
                select(Transaction)
                .where(Transaction.transfer_id == txn.transfer_id)
                .order_by(Transaction.account_id)
            ).scalars().all())

        for leg in legs:
            self._reverse(leg)

        self.db.flush()
        logger.info("Undid transaction %s (%d leg(s))", transaction_id, len(legs))

    def _reverse(self, txn: Transaction) -> None:
        # Local import: the scheduler itself posts transactions
        # through this service.
        from finance_ledger.services.scheduler_service import SchedulerService

        account = self.lock_account(txn.account_id)
        txn = self.lock_transaction(txn.id)
        account.balance = to_money(
            account.balance - signed_amount(txn.amount, txn.transaction_type)
        )

        if txn.recurring_payment_id and self.db.get(
            RecurringPayment, txn.recurring_payment_id
        ):
            SchedulerService(self.db, self.clock).rollback(
                txn.recurring_payment_id
            )

        audit.record(
            self.db, "transaction.deleted", txn.id,
            account_id=account.id,
            transaction_type=txn.transaction_type.value,
            amount=txn.amount,
            balance=account.balance,
        )
        self.db.delete(txn)

    def get_transaction(self, transaction_id: str) -> Transaction:
        """Get a transaction by ID."""
        txn = self.db.get(Transaction, transaction_id)
        if not txn:
            raise NotFoundError("Transaction", transaction_id)
        return txn

    def list_transactions(self, account_id: str | None = None) -> list[Transaction]:
        """Return transactions, newest first, optionally for one account."""
        query = select(Transaction).order_by(
            Transaction.date.desc(), Transaction.created_at.desc()
        )
        if account_id is not None:
            query = query.where(Transaction.account_id == account_id)
        return list(self.db.execute(query).scalars().all())

    # --- Accounts ---

    @atomic
    def create_account(self, request: AccountFields) -> Account:
        """Open an account with its opening balance."""
        if request.id:
            existing = self.db.get(Account, request.id)
            if existing:
                return existing

        fields = request.model_dump(exclude={"id", "account_type"})
        fields["balance"] = to_money(fields["balance"])

        account = Account(
            id=request.id or new_id(),
            account_type=AccountType(request.account_type),
            **fields,
        )
        self.db.add(account)
        self.db.flush()

        audit.record(
            self.db, "account.created", account.id,
            account_type=account.account_type.value,
            opening_balance=account.balance,
        )
        logger.info("Created %s account %s", account.account_type.value, account.id)
        return account

    @atomic
    def update_account(self, account_id: str, request: AccountUpdate) -> Account:
        """
        Apply a partial update.

        A balance written here is a manual override (for example an
        investment valuation refreshed from the broker). It goes
        through the same locked, versioned write as any other
        balance change and is recorded in the audit log.
        """
        changes = request.model_dump(exclude_unset=True)
        account = self.lock_account(account_id)

        new_type = AccountType(changes.get("account_type") or account.account_type)
        for field, value in changes.items():
            owner = FIELD_OWNERS.get(field)
            if owner and value is not None and owner != new_type:
                raise ValidationError(
                    f"{field} does not apply to a {new_type.value} account"
                )

        # Fields owned by the old type go away when the type changes
        if new_type != account.account_type:
            for field in TYPE_SPECIFIC_FIELDS.get(account.account_type, ()):
                if FIELD_OWNERS[field] != new_type:
                    setattr(account, field, None)

        if "reset_frequency" in changes and "reset_day" not in changes:
            if changes["reset_frequency"] != ResetFrequency.MONTHLY:
                changes["reset_day"] = None
        reset_frequency = changes.get("reset_frequency", account.reset_frequency)
        reset_day = changes.get("reset_day", account.reset_day)
        if reset_day is not None and reset_frequency != ResetFrequency.MONTHLY:
            raise ValidationError("reset_day only applies to a monthly reset")

        if changes.get("balance") is not None:
            changes["balance"] = to_money(changes["balance"])
            audit.record(
                self.db, "account.balance_override", account.id,
                old_balance=account.balance,
                new_balance=changes["balance"],
            )
        elif "balance" in changes:
            raise ValidationError("balance cannot be null")

        if "name" in changes and changes["name"] is None:
            raise ValidationError("name cannot be null")
        if "display_order" in changes and changes["display_order"] is None:
            del changes["display_order"]

        for field, value in changes.items():
            setattr(account, field, value)
        account.account_type = new_type

        self.db.flush()
        logger.info("Updated account %s: %s", account.id, sorted(changes))
        return account

    @atomic
    def delete_account(self, account_id: str) -> None:
        """
        Delete an account with its transactions and recurring payments.

        Transactions elsewhere that point at one of this account's
        recurring payments lose the back-reference; they stay.
        """
        account = self.lock_account(account_id)

        self.db.execute(
            update(Transaction)
            .where(
                Transaction.recurring_payment_id.in_(
                    select(RecurringPayment.id).where(
                        RecurringPayment.account_id == account_id
                    )
                ),
                Transaction.account_id != account_id,
            )
            .values(recurring_payment_id=None)
            .execution_options(synchronize_session="fetch")
        )

        audit.record(
            self.db, "account.deleted", account.id,
            balance=account.balance,
        )
        self.db.delete(account)
        self.db.flush()
        logger.info("Deleted account %s", account_id)

    def get_account(self, account_id: str) -> Account:
        """Get an account by ID."""
        account = self.db.get(Account, account_id)
        if not account:
            raise NotFoundError("Account", account_id)
        return account

    def list_accounts(self) -> list[Account]:
        """All accounts in display order."""
        accounts = self.db.execute(
            select(Account).order_by(Account.display_order, Account.created_at)
        ).scalars().all()
        return list(accounts)

    # --- Debts ---

    @atomic
    def create_debt(self, request: DebtFields) -> Debt:
        if request.id:
            existing = self.db.get(Debt, request.id)
            if existing:
                return existing

        debt_type = DebtType(request.debt_type)
        credit_limit = getattr(request, "credit_limit", None)
        debt = Debt(
            id=request.id or new_id(),
            name=request.name,
            debt_type=debt_type,
            balance=to_money(request.balance),
            apr=request.apr,
            minimum_payment=to_money(request.minimum_payment),
            credit_limit=to_money(credit_limit) if credit_limit is not None else None,
        )
        self._check_debt(debt)
        self.db.add(debt)
        self.db.flush()

        audit.record(
            self.db, "debt.created", debt.id,
            debt_type=debt_type.value,
            balance=debt.balance,
        )
        logger.info("Created %s debt %s", debt_type.value, debt.id)
        return debt

    @atomic
    def update_debt(self, debt_id: str, request: DebtUpdate) -> Debt:
        """Apply a partial update, keeping credit cards within their limit."""
        changes = request.model_dump(exclude_unset=True)
        debt = self.lock_debt(debt_id)

        new_type = DebtType(changes.get("debt_type") or debt.debt_type)
        if new_type != DebtType.CREDIT_CARD:
            if changes.get("credit_limit") is not None:
                raise ValidationError(
                    f"credit_limit does not apply to a {new_type.value}"
                )
            changes["credit_limit"] = None

        for field in ("name", "balance", "apr", "minimum_payment"):
            if field in changes and changes[field] is None:
                raise ValidationError(f"{field} cannot be null")
        for field in ("balance", "minimum_payment", "credit_limit"):
            if changes.get(field) is not None:
                changes[field] = to_money(changes[field])

        for field, value in changes.items():
            setattr(debt, field, value)
        debt.debt_type = new_type
        self._check_debt(debt)

        self.db.flush()
        logger.info("Updated debt %s: %s", debt.id, sorted(changes))
        return debt

    @staticmethod
    def _check_debt(debt: Debt) -> None:
        if debt.balance < 0:
            raise ValidationError("debt balance cannot be negative")
        if (
            debt.debt_type == DebtType.CREDIT_CARD
            and debt.credit_limit is not None
            and debt.balance > debt.credit_limit
        ):
            raise ValidationError(
                f"balance {debt.balance} exceeds credit limit {debt.credit_limit}"
            )

    @atomic
    def delete_debt(self, debt_id: str) -> None:
        debt = self.lock_debt(debt_id)
        audit.record(self.db, "debt.deleted", debt.id, balance=debt.balance)
        self.db.delete(debt)
        self.db.flush()
        logger.info("Deleted debt %s", debt_id)

    def get_debt(self, debt_id: str) -> Debt:
        """Get a debt by ID."""
        debt = self.db.get(Debt, debt_id)
        if not debt:
            raise NotFoundError("Debt", debt_id)
        return debt

    def list_debts(self) -> list[Debt]:
        debts = self.db.execute(
            select(Debt).order_by(Debt.created_at)
        ).scalars().all()
        return list(debts)
