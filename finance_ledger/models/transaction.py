"""
Transaction model.

A transaction is one movement of money into or out of one
account. The account balance already includes it; deleting
the row through LedgerService.delete_transaction takes it
back out again.

Two optional back-references explain where a transaction came
from:
- recurring_payment_id: the recurring payment it settled
- transfer_id: shared by the two legs of one transfer; a transfer
  has at most one leg of each type

version_id makes a delete of a row that another session already
deleted fail with StaleDataError instead of passing silently.
"""

import datetime as dt
from decimal import Decimal

from sqlalchemy import (
    String, Integer, Date, DateTime, Numeric, Text, ForeignKey,
    UniqueConstraint,
    Enum as SAEnum,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from finance_ledger.models.base import Base, new_id
from finance_ledger.models.enums import TransactionType


class Transaction(Base):
    __tablename__ = "transactions"
    __table_args__ = (
        UniqueConstraint(
            "transfer_id", "transaction_type", name="uq_transactions_transfer_leg"
        ),
    )

    id: Mapped[str] = mapped_column(
        String(50), primary_key=True, default=new_id
    )
    account_id: Mapped[str] = mapped_column(
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False
    )
    description: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    transaction_type: Mapped[TransactionType] = mapped_column(
        SAEnum(
            TransactionType,
            name="transaction_type_enum",
            create_constraint=True,
        ),
        nullable=False,
    )
    recurring_payment_id: Mapped[str | None] = mapped_column(
        ForeignKey("recurring_payments.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    transfer_id: Mapped[str | None] = mapped_column(
        String(50), nullable=True, index=True
    )
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime, nullable=False, default=dt.datetime.utcnow
    )
    version_id: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version_id}

    # Relationships
    account: Mapped["Account"] = relationship(back_populates="transactions")

    @property
    def is_transfer_leg(self) -> bool:
        return self.transfer_id is not None

    def __repr__(self) -> str:
        return (
            f"<Transaction {self.transaction_type.value} "
            f"{self.amount} on {self.account_id}>"
        )
