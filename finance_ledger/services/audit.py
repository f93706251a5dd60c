"""
Audit trail helper.

record() adds an AuditLog row to the current session. It never
commits: the row becomes durable together with the change it
describes, or not at all.
"""

import json
import logging

from sqlalchemy.orm import Session

from finance_ledger.models.audit_log import AuditLog

logger = logging.getLogger(__name__)


def record(db: Session, event_type: str, entity_id: str, **details) -> AuditLog:
    """Append an audit event for entity_id to the open unit of work."""
    entry = AuditLog(
        event_type=event_type,
        entity_id=entity_id,
        details=json.dumps(details, default=str, sort_keys=True),
    )
    db.add(entry)
    logger.debug("%s %s %s", event_type, entity_id, entry.details)
    return entry
