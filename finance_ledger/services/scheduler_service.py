"""
Scheduler service — recurring payments and their due dates.

A recurring payment has one state, "scheduled", and moves
through time in exactly one way: next_payment_date steps one
period forward (settle, skip) or one period back (undo of a
settled occurrence). The step is a pure function of the date,
the frequency and the anchor day, so the same call on the same
row always gives the same answer.

Nothing here runs on a timer. A schedule only moves when a
caller asks it to.
"""

import logging
from datetime import datetime, timedelta
from typing import Callable

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from finance_ledger.errors import NotFoundError, ValidationError
from finance_ledger.models.base import new_id
from finance_ledger.models.enums import PaymentFrequency, TransactionType
from finance_ledger.models.recurring_payment import RecurringPayment
from finance_ledger.models.transaction import Transaction
from finance_ledger.schemas.recurring_payment import (
    RecurringPaymentCreate,
    RecurringPaymentUpdate,
)
from finance_ledger.services import audit
from finance_ledger.services.ledger_service import LedgerService, require_positive
from finance_ledger.services.unit_of_work import atomic
from finance_ledger.utils.dates import advance, rollback

logger = logging.getLogger(__name__)

UPCOMING_WINDOW_DAYS = 7


class SchedulerService:

    def __init__(self, db: Session, clock: Callable[[], datetime] | None = None):
        self.db = db
        self.clock = clock or datetime.now
        self.ledger_service = LedgerService(db, self.clock)

    def _lock_payment(self, payment_id: str) -> RecurringPayment:
        payment = self.db.execute(
            select(RecurringPayment)
            .where(RecurringPayment.id == payment_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()
        if not payment:
            raise NotFoundError("RecurringPayment", payment_id)
        return payment

    # --- Schedule transitions ---

    @atomic
    def settle(self, payment_id: str) -> Transaction:
        """
        Mark the current occurrence as paid.

        Posts the payment's transaction (linked back to it) to its
        account, then moves the schedule on by one period.
        """
        payment = self._lock_payment(payment_id)
        account = self.ledger_service.lock_account(payment.account_id)
        due = payment.next_payment_date

        txn = self.ledger_service.apply_transaction(
            account,
            payment.amount,
            payment.payment_type,
            payment.name,
            payment.category,
            self.clock().date(),
            recurring_payment_id=payment.id,
        )
        self._move(payment, advance, "recurring_payment.settled")

        logger.info(
            "Settled %s due %s; next due %s",
            payment.id, due, payment.next_payment_date,
        )
        return txn

    @atomic
    def skip(self, payment_id: str) -> RecurringPayment:
        """Move past the current occurrence without paying it."""
        payment = self._lock_payment(payment_id)
        due = payment.next_payment_date
        self._move(payment, advance, "recurring_payment.skipped")
        logger.info(
            "Skipped %s due %s; next due %s",
            payment.id, due, payment.next_payment_date,
        )
        return payment

    @atomic
    def rollback(self, payment_id: str) -> RecurringPayment:
        """
        Step the schedule back one period.

        Used when a settled occurrence is undone, so the payment
        falls due again on the date it was settled for.
        """
        payment = self._lock_payment(payment_id)
        self._move(payment, rollback, "recurring_payment.rolled_back")
        logger.info(
            "Rolled back %s; next due %s", payment.id, payment.next_payment_date
        )
        return payment

    def _move(self, payment: RecurringPayment, step, event_type: str) -> None:
        previous = payment.next_payment_date
        payment.next_payment_date = step(
            previous, payment.frequency, payment.anchor_day
        )
        self.db.flush()
        audit.record(
            self.db, event_type, payment.id,
            previous_date=previous,
            next_payment_date=payment.next_payment_date,
        )

    # --- CRUD ---

    @atomic
    def create_recurring_payment(
        self, request: RecurringPaymentCreate
    ) -> RecurringPayment:
        if request.id:
            existing = self.db.get(RecurringPayment, request.id)
            if existing:
                return existing

        amount = require_positive(request.amount)
        self.ledger_service.get_account(request.account_id)

        payment = RecurringPayment(
            id=request.id or new_id(),
            name=request.name,
            amount=amount,
            frequency=PaymentFrequency(request.frequency),
            category=request.category,
            payment_type=TransactionType(request.payment_type),
            next_payment_date=request.next_payment_date,
            anchor_day=request.next_payment_date.day,
            account_id=request.account_id,
        )
        self.db.add(payment)
        self.db.flush()

        audit.record(
            self.db, "recurring_payment.created", payment.id,
            account_id=payment.account_id,
            amount=payment.amount,
            frequency=payment.frequency.value,
            next_payment_date=payment.next_payment_date,
        )
        logger.info("Created recurring payment %s", payment.id)
        return payment

    @atomic
    def update_recurring_payment(
        self, payment_id: str, request: RecurringPaymentUpdate
    ) -> RecurringPayment:
        """
        Apply a partial update.

        An explicit next_payment_date re-anchors the schedule on that
        date's day of month.
        """
        changes = request.model_dump(exclude_unset=True)
        payment = self._lock_payment(payment_id)

        for field, value in changes.items():
            if value is None:
                raise ValidationError(f"{field} cannot be null")
        if "amount" in changes:
            changes["amount"] = require_positive(changes["amount"])
        if "account_id" in changes:
            self.ledger_service.get_account(changes["account_id"])
        if "next_payment_date" in changes:
            changes["anchor_day"] = changes["next_payment_date"].day

        for field, value in changes.items():
            setattr(payment, field, value)

        self.db.flush()
        logger.info("Updated recurring payment %s: %s", payment.id, sorted(changes))
        return payment

    @atomic
    def delete_recurring_payment(self, payment_id: str) -> None:
        """
        Delete a recurring payment.

        Transactions it generated stay on their accounts; they just
        stop pointing at it, and undoing them later only reverses
        the balance.
        """
        payment = self._lock_payment(payment_id)
        self.db.execute(
            update(Transaction)
            .where(Transaction.recurring_payment_id == payment_id)
            .values(recurring_payment_id=None)
            .execution_options(synchronize_session="fetch")
        )
        audit.record(self.db, "recurring_payment.deleted", payment.id)
        self.db.delete(payment)
        self.db.flush()
        logger.info("Deleted recurring payment %s", payment_id)

    def get_recurring_payment(self, payment_id: str) -> RecurringPayment:
        payment = self.db.get(RecurringPayment, payment_id)
        if not payment:
            raise NotFoundError("RecurringPayment", payment_id)
        return payment

    def list_recurring_payments(
        self, account_id: str | None = None
    ) -> list[RecurringPayment]:
        """Recurring payments ordered by when they next fall due."""
        query = select(RecurringPayment).order_by(
            RecurringPayment.next_payment_date, RecurringPayment.name
        )
        if account_id is not None:
            query = query.where(RecurringPayment.account_id == account_id)
        return list(self.db.execute(query).scalars().all())

    def upcoming(
        self,
        days: int = UPCOMING_WINDOW_DAYS,
        account_id: str | None = None,
    ) -> list[RecurringPayment]:
        """Payments due within the next `days` days, overdue ones included."""
        horizon = self.clock().date() + timedelta(days=days)
        return [
            payment
            for payment in self.list_recurring_payments(account_id)
            if payment.next_payment_date <= horizon
        ]
