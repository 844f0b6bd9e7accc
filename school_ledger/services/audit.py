"""
Audit trail helpers.

Events are added to the caller's session, so they commit or
roll back together with the change they describe.
"""

import json

from sqlalchemy import select
from sqlalchemy.orm import Session

from school_ledger.models.audit_log import AuditLog
from school_ledger.models.enums import AuditEvent


def record_event(db: Session, event: AuditEvent, **details) -> AuditLog:
    """Append one event to the audit log."""
    entry = AuditLog(
        event_type=event.value,
        details=json.dumps(details, default=str, sort_keys=True),
    )
    db.add(entry)
    return entry


def get_events(db: Session, event: AuditEvent | None = None) -> list[AuditLog]:
    """Return audit events, oldest first, optionally of one type."""
    query = select(AuditLog).order_by(AuditLog.id)
    if event is not None:
        query = query.where(AuditLog.event_type == event.value)
    return list(db.execute(query).scalars().all())
