"""
Audit log model.

One row per committed change to money, accounts or schedules.
The row is written in the same atomic unit as the change, so a
rolled-back operation leaves no trace here either.
"""

import json
from datetime import datetime

from sqlalchemy import String, DateTime, Text
from sqlalchemy.orm import Mapped, mapped_column

from finance_ledger.models.base import Base


class AuditLog(Base):
    """
    Append-only ledger event.

    entity_id is not a foreign key: the trail of a
    deleted account or transaction outlives the record itself.
    """

    __tablename__ = "audit_log"

    id: Mapped[int] = mapped_column(primary_key=True)
    event_type: Mapped[str] = mapped_column(String(100), nullable=False)
    entity_id: Mapped[str] = mapped_column(
        String(50), nullable=False, index=True
    )
    # JSON object, written by services.audit.record()
    details: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )

    @property
    def payload(self) -> dict:
        return json.loads(self.details)

    def __repr__(self) -> str:
        return f"<AuditLog {self.event_type} {self.entity_id}>"
