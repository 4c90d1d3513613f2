"""Reading ORM model: one house's meter readings, charges and bill for one month."""

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import Date, DateTime, ForeignKey, Numeric, UniqueConstraint
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from utility_billing.billing.types import BillStatus
from utility_billing.models import Base, BaseModel


def _amount(nullable: bool = False, comment: str | None = None):
    if nullable:
        return mapped_column(Numeric(12, 2), nullable=True, comment=comment)
    return mapped_column(Numeric(12, 2), default=Decimal("0"), nullable=False, comment=comment)


class Reading(Base, BaseModel):
    """
    Monthly record for one house.

    A row is created by whichever upload (electricity or water) arrives
    first for the month; the other fields stay zero until entered. A zero
    import or water reading means "not entered yet".

    Bill 1 is the electricity side, bill 2 the water/fees side. ``*_standard``
    amounts apply up to the due day, ``*_penalty`` amounts after it.
    """

    __tablename__ = "readings"
    __table_args__ = (UniqueConstraint("house_id", "month", name="uq_reading_house_month"),)

    house_id: Mapped[int] = mapped_column(ForeignKey("houses.id"), nullable=False, index=True)
    month: Mapped[date] = mapped_column(
        Date, nullable=False, index=True, comment="First day of the billing month"
    )

    # Electricity meter
    electricity_import_reading: Mapped[Decimal] = _amount()
    electricity_export_reading: Mapped[Decimal] = _amount()
    electricity_consumption: Mapped[Decimal] = _amount(comment="Net consumption, may be negative")
    electricity_billed_energy: Mapped[Decimal] = _amount()
    electricity_export_carry_forward: Mapped[Decimal] = _amount(
        comment="Cumulative export surplus carried into the next month"
    )
    max_demand: Mapped[Decimal] = _amount()
    electricity_reading_upload_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    # Water meter
    water_reading: Mapped[Decimal] = _amount()
    water_consumption: Mapped[Decimal] = _amount()
    water_reading_upload_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    # Itemized charges
    fixed_charge: Mapped[Decimal] = _amount()
    electricity_charge: Mapped[Decimal] = _amount()
    electricity_duty: Mapped[Decimal] = _amount()
    maintenance_charge: Mapped[Decimal] = _amount()
    water_charge: Mapped[Decimal] = _amount()
    other_charges: Mapped[Decimal | None] = _amount(nullable=True)
    license_fee: Mapped[Decimal | None] = _amount(
        nullable=True, comment="House license fee at bill generation"
    )
    residence_fee: Mapped[Decimal | None] = _amount(
        nullable=True, comment="House residence fee at bill generation"
    )

    # Bill
    bill1_standard: Mapped[Decimal] = _amount()
    bill1_penalty: Mapped[Decimal] = _amount()
    bill2_standard: Mapped[Decimal] = _amount()
    bill2_penalty: Mapped[Decimal] = _amount()
    total_standard: Mapped[Decimal] = _amount()
    total_penalty: Mapped[Decimal] = _amount()
    bill_status: Mapped[BillStatus] = mapped_column(
        SQLEnum(BillStatus, name="bill_status"),
        default=BillStatus.PENDING,
        nullable=False,
        index=True,
    )
    bill_generated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    # Payment
    paid_amount: Mapped[Decimal | None] = _amount(
        nullable=True, comment="Cumulative amount paid against this bill"
    )
    paid_on: Mapped[date | None] = mapped_column(Date, nullable=True)
    bill1_arrear: Mapped[Decimal | None] = _amount(nullable=True)
    bill2_arrear: Mapped[Decimal | None] = _amount(nullable=True)

    # Chain link
    bill_version: Mapped[int] = mapped_column(
        default=0,
        nullable=False,
        comment="Bumped on every bill assembly or payment",
    )
    previous_bill_version: Mapped[int | None] = mapped_column(
        nullable=True,
        comment="Predecessor's bill_version this bill was assembled against",
    )

    house: Mapped["House"] = relationship(  # noqa: F821
        "House",
        back_populates="readings",
    )

    def __repr__(self) -> str:
        return (
            f"<Reading(id={self.id}, house_id={self.house_id}, month={self.month}, "
            f"bill_status={self.bill_status})>"
        )


__all__ = ["Reading"]
