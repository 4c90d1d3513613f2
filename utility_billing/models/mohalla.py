"""Mohalla (neighborhood) ORM model."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from utility_billing.models import Base, BaseModel


class Mohalla(Base, BaseModel):
    """A neighborhood grouping houses for billing and reporting."""

    __tablename__ = "mohallas"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    number: Mapped[str] = mapped_column(
        String(20),
        unique=True,
        nullable=False,
        index=True,
        comment="External mohalla number used by bulk uploads",
    )

    houses: Mapped[list["House"]] = relationship(  # noqa: F821
        "House",
        back_populates="mohalla",
    )

    def __repr__(self) -> str:
        return f"<Mohalla(id={self.id}, number={self.number}, name={self.name})>"


__all__ = ["Mohalla"]
