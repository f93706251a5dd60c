"""
Account model.

An account holds money: a current account, savings, an
investment pie, a pension, a crypto wallet. Its balance is
stored, not derived, and only the LedgerService changes it,
always together with the transaction that explains the change.

version_id is bumped on every UPDATE. Two sessions that read
the same version and both write will not both succeed; the
loser gets a StaleDataError and its unit of work is re-run.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    String, Integer, DateTime, Numeric, Text,
    Enum as SAEnum,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from finance_ledger.models.base import Base, new_id
from finance_ledger.models.enums import AccountType, ResetFrequency


# Fields that only make sense for one kind of account.
# Anything listed here is cleared when an account changes type.
TYPE_SPECIFIC_FIELDS: dict[AccountType, set[str]] = {
    AccountType.SAVINGS: {"interest_rate"},
    AccountType.INVESTMENT: {"api_key", "pie_id", "external_result"},
}


class Account(Base):
    __tablename__ = "accounts"

    id: Mapped[str] = mapped_column(
        String(50), primary_key=True, default=new_id
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    account_type: Mapped[AccountType] = mapped_column(
        SAEnum(
            AccountType,
            name="account_type_enum",
            create_constraint=True,
        ),
        nullable=False,
    )
    balance: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0.00")
    )
    interest_rate: Mapped[Decimal | None] = mapped_column(
        Numeric(5, 2), nullable=True
    )
    api_key: Mapped[str | None] = mapped_column(Text, nullable=True)
    pie_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    external_result: Mapped[Decimal | None] = mapped_column(
        Numeric(12, 2), nullable=True
    )
    reset_frequency: Mapped[ResetFrequency | None] = mapped_column(
        SAEnum(
            ResetFrequency,
            name="reset_frequency_enum",
            create_constraint=True,
        ),
        nullable=True,
    )
    reset_day: Mapped[int | None] = mapped_column(Integer, nullable=True)
    display_order: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )
    version_id: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version_id}

    # Deleting an account deletes everything that hangs off it.
    # No reversal bookkeeping: the balance goes with the account.
    transactions: Mapped[list["Transaction"]] = relationship(
        back_populates="account",
        cascade="all, delete-orphan",
    )
    recurring_payments: Mapped[list["RecurringPayment"]] = relationship(
        back_populates="account",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return (
            f"<Account {self.id} {self.account_type.value} "
            f"{self.balance}>"
        )
