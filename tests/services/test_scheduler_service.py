"""
Tests for the SchedulerService: settle, skip, undo and CRUD of
recurring payments.
"""

from datetime import date
from decimal import Decimal

import pytest

from finance_ledger.errors import NotFoundError, ValidationError
from finance_ledger.models.enums import PaymentFrequency, TransactionType
from finance_ledger.schemas.recurring_payment import (
    RecurringPaymentCreate,
    RecurringPaymentUpdate,
)
from finance_ledger.services.ledger_service import LedgerService
from finance_ledger.services.scheduler_service import SchedulerService

from helpers import make_account, make_payment


class TestSettle:

    def test_settle_posts_linked_transaction(self, db_session, clock):
        account = make_account(db_session)
        payment = make_payment(db_session, account)
        service = SchedulerService(db_session, clock)

        txn = service.settle(payment.id)

        assert txn.amount == Decimal("14.99")
        assert txn.transaction_type == TransactionType.EXPENSE
        assert txn.description == "Streaming"
        assert txn.category == "Subscriptions"
        assert txn.recurring_payment_id == payment.id
        assert txn.date == date(2024, 1, 15)
        assert LedgerService(db_session).get_account(account.id).balance == Decimal("85.01")

    def test_settle_advances_with_leap_year_clamp(self, db_session, clock):
        account = make_account(db_session)
        payment = make_payment(db_session, account)
        service = SchedulerService(db_session, clock)

        service.settle(payment.id)
        assert service.get_recurring_payment(payment.id).next_payment_date == date(2024, 2, 29)

        service.settle(payment.id)
        assert service.get_recurring_payment(payment.id).next_payment_date == date(2024, 3, 31)

    def test_settle_income_payment(self, db_session, clock):
        account = make_account(db_session)
        payment = make_payment(
            db_session, account,
            amount="2000.00",
            next_payment_date=date(2024, 1, 25),
            payment_type=TransactionType.INCOME,
        )
        SchedulerService(db_session, clock).settle(payment.id)

        assert LedgerService(db_session).get_account(account.id).balance == Decimal("2100.00")

    def test_settle_weekly(self, db_session, clock):
        account = make_account(db_session)
        payment = make_payment(
            db_session, account,
            frequency=PaymentFrequency.WEEKLY,
            next_payment_date=date(2024, 1, 29),
        )
        service = SchedulerService(db_session, clock)
        service.settle(payment.id)

        assert service.get_recurring_payment(payment.id).next_payment_date == date(2024, 2, 5)

    def test_settle_missing_raises(self, db_session, clock):
        with pytest.raises(NotFoundError, match="RecurringPayment"):
            SchedulerService(db_session, clock).settle("missing")

    def test_undo_settle_restores_date_and_balance(self, db_session, clock):
        account = make_account(db_session)
        payment = make_payment(db_session, account)
        service = SchedulerService(db_session, clock)

        txn = service.settle(payment.id)
        LedgerService(db_session, clock).delete_transaction(txn.id)

        assert service.get_recurring_payment(payment.id).next_payment_date == date(2024, 1, 31)
        assert LedgerService(db_session).get_account(account.id).balance == Decimal("100.00")


class TestSkip:

    def test_skip_moves_date_only(self, db_session, clock):
        account = make_account(db_session)
        payment = make_payment(db_session, account)
        service = SchedulerService(db_session, clock)

        skipped = service.skip(payment.id)

        assert skipped.next_payment_date == date(2024, 2, 29)
        assert LedgerService(db_session).get_account(account.id).balance == Decimal("100.00")
        assert LedgerService(db_session).list_transactions(account.id) == []

    def test_skip_yearly(self, db_session, clock):
        account = make_account(db_session)
        payment = make_payment(
            db_session, account,
            frequency=PaymentFrequency.YEARLY,
            next_payment_date=date(2024, 2, 29),
        )
        assert SchedulerService(db_session, clock).skip(payment.id).next_payment_date == date(2025, 2, 28)


class TestRecurringPaymentCrud:

    def test_create_sets_anchor_day(self, db_session):
        account = make_account(db_session)
        payment = make_payment(db_session, account)

        assert payment.anchor_day == 31
        assert payment.frequency == PaymentFrequency.MONTHLY

    def test_create_for_missing_account_raises(self, db_session):
        with pytest.raises(NotFoundError, match="Account"):
            SchedulerService(db_session).create_recurring_payment(RecurringPaymentCreate(
                name="Gym",
                amount=Decimal("30.00"),
                frequency=PaymentFrequency.MONTHLY,
                category="Health",
                payment_type=TransactionType.EXPENSE,
                next_payment_date=date(2024, 2, 1),
                account_id="missing",
            ))

    def test_create_rejects_non_positive_amount(self, db_session):
        account = make_account(db_session)
        with pytest.raises(ValidationError, match="positive"):
            make_payment(db_session, account, amount="0")

    def test_create_with_caller_id_is_idempotent(self, db_session):
        account = make_account(db_session)
        request = RecurringPaymentCreate(
            id="rp-1",
            name="Gym",
            amount=Decimal("30.00"),
            frequency=PaymentFrequency.MONTHLY,
            category="Health",
            payment_type=TransactionType.EXPENSE,
            next_payment_date=date(2024, 2, 1),
            account_id=account.id,
        )
        service = SchedulerService(db_session)
        service.create_recurring_payment(request)
        service.create_recurring_payment(request)

        assert len(service.list_recurring_payments()) == 1

    def test_update_date_re_anchors(self, db_session, clock):
        account = make_account(db_session)
        payment = make_payment(db_session, account)
        service = SchedulerService(db_session, clock)

        updated = service.update_recurring_payment(
            payment.id, RecurringPaymentUpdate(next_payment_date=date(2024, 2, 10))
        )
        assert updated.anchor_day == 10

        service.skip(payment.id)
        assert service.get_recurring_payment(payment.id).next_payment_date == date(2024, 3, 10)

    def test_update_rejects_null(self, db_session):
        account = make_account(db_session)
        payment = make_payment(db_session, account)
        with pytest.raises(ValidationError, match="amount cannot be null"):
            SchedulerService(db_session).update_recurring_payment(
                payment.id, RecurringPaymentUpdate(amount=None)
            )

    def test_delete_keeps_transactions_unlinked(self, db_session, clock):
        account = make_account(db_session)
        payment = make_payment(db_session, account)
        service = SchedulerService(db_session, clock)
        txn = service.settle(payment.id)

        service.delete_recurring_payment(payment.id)

        with pytest.raises(NotFoundError):
            service.get_recurring_payment(payment.id)
        kept = LedgerService(db_session).get_transaction(txn.id)
        assert kept.recurring_payment_id is None
        assert LedgerService(db_session).get_account(account.id).balance == Decimal("85.01")

    def test_list_by_account_in_due_order(self, db_session):
        first = make_account(db_session, name="First")
        second = make_account(db_session, name="Second")
        make_payment(db_session, first, next_payment_date=date(2024, 3, 1))
        make_payment(db_session, first, next_payment_date=date(2024, 2, 1))
        make_payment(db_session, second)

        service = SchedulerService(db_session)
        dates = [p.next_payment_date for p in service.list_recurring_payments(first.id)]
        assert dates == [date(2024, 2, 1), date(2024, 3, 1)]
        assert len(service.list_recurring_payments()) == 3


class TestUpcoming:

    def test_window_includes_overdue(self, db_session, clock):
        account = make_account(db_session)
        make_payment(db_session, account, next_payment_date=date(2024, 1, 1))
        make_payment(db_session, account, next_payment_date=date(2024, 1, 22))
        make_payment(db_session, account, next_payment_date=date(2024, 1, 23))

        due = SchedulerService(db_session, clock).upcoming()

        assert [p.next_payment_date for p in due] == [date(2024, 1, 1), date(2024, 1, 22)]

    def test_custom_window(self, db_session, clock):
        account = make_account(db_session)
        make_payment(db_session, account, next_payment_date=date(2024, 1, 31))

        service = SchedulerService(db_session, clock)
        assert service.upcoming(days=7) == []
        assert len(service.upcoming(days=30)) == 1
