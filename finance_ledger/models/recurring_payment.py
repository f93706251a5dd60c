"""
Recurring payment model.

A standing order, subscription or salary: something that
happens every week, month or year. The row is never replaced
when it falls due; next_payment_date moves forward in place so
that transactions can keep pointing at it.

anchor_day remembers which day of the month the schedule aims
for. A payment due on the 31st moves to the 29th of February
and back to the 31st of March instead of drifting to the 29th.
"""

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    String, Integer, Date, DateTime, Numeric, ForeignKey,
    Enum as SAEnum,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from finance_ledger.models.base import Base, new_id
from finance_ledger.models.enums import PaymentFrequency, TransactionType


class RecurringPayment(Base):
    __tablename__ = "recurring_payments"

    id: Mapped[str] = mapped_column(
        String(50), primary_key=True, default=new_id
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False
    )
    frequency: Mapped[PaymentFrequency] = mapped_column(
        SAEnum(
            PaymentFrequency,
            name="payment_frequency_enum",
            create_constraint=True,
        ),
        nullable=False,
    )
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    payment_type: Mapped[TransactionType] = mapped_column(
        SAEnum(
            TransactionType,
            name="payment_type_enum",
            create_constraint=True,
        ),
        nullable=False,
    )
    next_payment_date: Mapped[date] = mapped_column(
        Date, nullable=False, index=True
    )
    anchor_day: Mapped[int] = mapped_column(Integer, nullable=False)
    account_id: Mapped[str] = mapped_column(
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )
    version_id: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version_id}

    account: Mapped["Account"] = relationship(
        back_populates="recurring_payments"
    )

    def __repr__(self) -> str:
        return (
            f"<RecurringPayment {self.name} {self.amount} "
            f"{self.frequency.value} next={self.next_payment_date}>"
        )
