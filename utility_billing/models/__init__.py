"""Declarative base, shared id/timestamp columns and the billing tables."""

from datetime import datetime, timezone

from sqlalchemy import DateTime
from sqlalchemy.orm import Mapped, declarative_base, mapped_column

Base = declarative_base()


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class BaseModel:
    """Mixin giving every table a surrogate key and UTC audit timestamps."""

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        onupdate=utc_now,
        nullable=False,
    )


# Table modules import Base from here, so they register last
from utility_billing.models.audit_log import AuditLog  # noqa: E402
from utility_billing.models.charge import Charge  # noqa: E402
from utility_billing.models.house import House  # noqa: E402
from utility_billing.models.mohalla import Mohalla  # noqa: E402
from utility_billing.models.reading import Reading  # noqa: E402

__all__ = [
    "Base",
    "BaseModel",
    "AuditLog",
    "Charge",
    "House",
    "Mohalla",
    "Reading",
]
