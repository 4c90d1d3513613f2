"""House ORM model."""

from decimal import Decimal

from sqlalchemy import Boolean, ForeignKey, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from utility_billing.models import Base, BaseModel


class House(Base, BaseModel):
    """
    A billable residential unit inside a mohalla.

    License and residence fees are flat monthly amounts that feed the
    water/other side of each bill.
    """

    __tablename__ = "houses"
    __table_args__ = (
        UniqueConstraint("mohalla_id", "house_number", name="uq_house_mohalla_number"),
    )

    mohalla_id: Mapped[int] = mapped_column(
        ForeignKey("mohallas.id"),
        nullable=False,
        index=True,
    )
    house_number: Mapped[str] = mapped_column(String(50), nullable=False)
    consumer_code: Mapped[str] = mapped_column(String(50), unique=True, nullable=False, index=True)
    department: Mapped[str | None] = mapped_column(String(100), nullable=True)
    licensee_name: Mapped[str] = mapped_column(String(200), nullable=False)
    electricity_meter_number: Mapped[str | None] = mapped_column(
        String(50), unique=True, nullable=True
    )
    water_meter_number: Mapped[str | None] = mapped_column(String(50), unique=True, nullable=True)
    mobile_number: Mapped[str | None] = mapped_column(String(20), nullable=True)
    email: Mapped[str | None] = mapped_column(String(200), nullable=True)

    license_fee: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        default=Decimal("0"),
        nullable=False,
        comment="Monthly license fee (bill 2)",
    )
    residence_fee: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        default=Decimal("0"),
        nullable=False,
        comment="Monthly residence fee (bill 2)",
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
        index=True,
        comment="False once soft-deleted",
    )

    mohalla: Mapped["Mohalla"] = relationship(  # noqa: F821
        "Mohalla",
        back_populates="houses",
    )
    readings: Mapped[list["Reading"]] = relationship(  # noqa: F821
        "Reading",
        back_populates="house",
        order_by="Reading.month",
    )

    def __repr__(self) -> str:
        return (
            f"<House(id={self.id}, mohalla_id={self.mohalla_id}, "
            f"house_number={self.house_number}, consumer_code={self.consumer_code})>"
        )


__all__ = ["House"]
