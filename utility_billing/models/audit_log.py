"""Audit trail rows for bills, payments, tariffs and master data."""

from typing import Any

from sqlalchemy import JSON, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from utility_billing.models import Base, BaseModel


class AuditLog(Base, BaseModel):
    """One recorded mutation.

    Records who (actor_id) did what (action) to which entity (entity_type,
    entity_id) and an optional snapshot of changed fields (changes).
    """

    __tablename__ = "audit_logs"
    __table_args__ = (Index("ix_audit_logs_entity", "entity_type", "entity_id"),)

    entity_type: Mapped[str] = mapped_column(String(50))
    """Entity type being audited: "bill", "house", "charge", etc."""

    entity_id: Mapped[int] = mapped_column(index=False)
    """Primary key of the entity being audited."""

    action: Mapped[str] = mapped_column(String(50), index=False)
    """Action performed: "generate", "payment", "update", etc."""

    actor_id: Mapped[int | None] = mapped_column(nullable=True, index=False)
    """Operator who performed the action. None for system actions."""

    changes: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True, index=False)
    """Optional JSON snapshot of changed fields: {"status": "PAID", "paid_amount": "500.00"}."""

    def __repr__(self) -> str:
        return (
            f"<AuditLog(id={self.id}, entity_type={self.entity_type}, entity_id={self.entity_id}, "
            f"action={self.action}, actor_id={self.actor_id}, created_at={self.created_at})>"
        )


__all__ = ["AuditLog"]
