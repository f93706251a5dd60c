"""
Debt model.

A debt is money owed: a credit card, a loan, a car finance
agreement, a mortgage. Its balance only goes down through a
debt payment (or an explicit edit) and never below zero.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import String, Integer, DateTime, Numeric, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from finance_ledger.models.base import Base, new_id
from finance_ledger.models.enums import DebtType


class Debt(Base):
    __tablename__ = "debts"

    id: Mapped[str] = mapped_column(
        String(50), primary_key=True, default=new_id
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    debt_type: Mapped[DebtType] = mapped_column(
        SAEnum(DebtType, name="debt_type_enum", create_constraint=True),
        nullable=False,
    )
    balance: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False
    )
    apr: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)
    minimum_payment: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False
    )
    # Only meaningful for credit cards
    credit_limit: Mapped[Decimal | None] = mapped_column(
        Numeric(12, 2), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )
    version_id: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version_id}

    @property
    def available_credit(self) -> Decimal | None:
        if self.debt_type != DebtType.CREDIT_CARD or self.credit_limit is None:
            return None
        return self.credit_limit - self.balance

    def __repr__(self) -> str:
        return f"<Debt {self.id} {self.debt_type.value} {self.balance}>"
