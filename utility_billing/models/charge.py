"""Charge ORM model: a named per-unit tariff rate."""

from decimal import Decimal

from sqlalchemy import Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from utility_billing.models import Base, BaseModel


class Charge(Base, BaseModel):
    """Named tariff rate, e.g. ``electricity_charge_rate``."""

    __tablename__ = "charges"

    name: Mapped[str] = mapped_column(String(50), unique=True, nullable=False, index=True)
    amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 4),
        default=Decimal("0"),
        nullable=False,
        comment="Rate per unit (non-negative)",
    )

    def __repr__(self) -> str:
        return f"<Charge(id={self.id}, name={self.name}, amount={self.amount})>"


__all__ = ["Charge"]
