"""Audit trail for billing and master-data mutations."""

from datetime import date
from decimal import Decimal
from enum import Enum

from sqlalchemy.orm import Session

from utility_billing.models.audit_log import AuditLog
from utility_billing.services.pagination import Page, paginate


def _jsonable(value):
    if isinstance(value, dict):
        return {key: _jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (Decimal, date)):
        return str(value)
    return value


class AuditService:
    """Writes and reads audit entries.

    Entries join the caller's session and commit with the change they
    describe, so a rolled-back mutation leaves no trace.
    """

    @staticmethod
    def log(
        db: Session,
        entity_type: str,
        entity_id: int,
        action: str,
        actor_id: int | None = None,
        changes: dict | None = None,
    ) -> AuditLog:
        """Record one mutation.

        Args:
            db: Database session
            entity_type: Type of entity ("bill", "house", "charge", etc.)
            entity_id: Primary key of the entity
            action: Action performed ("create", "generate", "payment", etc.)
            actor_id: Operator who performed the action (optional)
            changes: Changed fields; Decimal, date and enum values become strings

        Returns:
            Created AuditLog object
        """
        audit = AuditLog(
            entity_type=entity_type,
            entity_id=entity_id,
            action=action,
            actor_id=actor_id,
            changes=_jsonable(changes) if changes is not None else None,
        )
        db.add(audit)
        return audit

    @staticmethod
    def list_entries(
        db: Session,
        entity_type: str | None = None,
        entity_id: int | None = None,
        page: int = 1,
        limit: int = 50,
    ) -> Page:
        """List audit entries, newest first."""
        query = db.query(AuditLog)
        if entity_type:
            query = query.filter(AuditLog.entity_type == entity_type)
        if entity_id is not None:
            query = query.filter(AuditLog.entity_id == entity_id)
        query = query.order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
        return paginate(query, page, limit)


__all__ = ["AuditService"]
