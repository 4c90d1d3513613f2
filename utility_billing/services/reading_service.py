"""Shared reading lookups and conversions between Reading rows and engine values."""

import logging
from datetime import date

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, Session

from utility_billing.api.errors import ConflictError, NotFoundError
from utility_billing.billing.periods import normalize_month
from utility_billing.billing.types import (
    BillRecord,
    BillStatus,
    ChargeComponents,
    MeterSnapshot,
    PreviousBillState,
)
from utility_billing.models.house import House
from utility_billing.models.mohalla import Mohalla
from utility_billing.models.reading import Reading

logger = logging.getLogger(__name__)


def meter_snapshot(reading: Reading) -> MeterSnapshot:
    return MeterSnapshot(
        import_reading=reading.electricity_import_reading,
        export_reading=reading.electricity_export_reading,
        export_carry_forward=reading.electricity_export_carry_forward,
    )


def charge_components(reading: Reading, house: House | None = None) -> ChargeComponents:
    """Itemized charges of a reading.

    Fees come from ``house`` when given, otherwise from the values recorded
    on the reading at its last bill generation.
    """
    if house is not None:
        license_fee, residence_fee = house.license_fee, house.residence_fee
    else:
        license_fee, residence_fee = reading.license_fee, reading.residence_fee
    return ChargeComponents(
        fixed_charge=reading.fixed_charge,
        electricity_charge=reading.electricity_charge,
        electricity_duty=reading.electricity_duty,
        maintenance_charge=reading.maintenance_charge,
        water_charge=reading.water_charge,
        other_charges=reading.other_charges,
        license_fee=license_fee,
        residence_fee=residence_fee,
    )


def bill_record(reading: Reading) -> BillRecord:
    return BillRecord(
        bill1_standard=reading.bill1_standard,
        bill1_penalty=reading.bill1_penalty,
        bill2_standard=reading.bill2_standard,
        bill2_penalty=reading.bill2_penalty,
        total_standard=reading.total_standard,
        total_penalty=reading.total_penalty,
        status=reading.bill_status,
    )


def previous_state(reading: Reading | None) -> PreviousBillState | None:
    """What the following period needs to know about ``reading``."""
    if reading is None:
        return None
    return PreviousBillState(
        status=BillStatus(reading.bill_status),
        bill1_penalty=reading.bill1_penalty,
        bill2_penalty=reading.bill2_penalty,
        paid_amount=reading.paid_amount,
        bill1_arrear=reading.bill1_arrear,
        bill2_arrear=reading.bill2_arrear,
        bill_version=reading.bill_version,
    )


class ReadingLookups:
    """Reading queries shared by the electricity, water and bill services."""

    def __init__(self, db_session: Session):
        """Initialize with database session."""
        self.db = db_session

    def get(self, reading_id: int) -> Reading:
        """Get reading by ID.

        Raises:
            NotFoundError: If no reading has this ID
        """
        reading = self.db.query(Reading).filter(Reading.id == reading_id).first()
        if reading is None:
            raise NotFoundError("Reading not found")
        return reading

    def get_house(self, house_id: int) -> House:
        house = self.db.query(House).filter(House.id == house_id).first()
        if house is None:
            raise NotFoundError("House not found")
        return house

    def get_house_by_numbers(self, mohalla_number: str, house_number: str) -> House:
        house = (
            self.db.query(House)
            .join(Mohalla)
            .filter(Mohalla.number == mohalla_number, House.house_number == house_number)
            .first()
        )
        if house is None:
            raise NotFoundError(f"House {house_number} not found in mohalla {mohalla_number}")
        return house

    def find_for_month(self, house_id: int, month: date) -> Reading | None:
        return (
            self.db.query(Reading)
            .filter(Reading.house_id == house_id, Reading.month == normalize_month(month))
            .first()
        )

    def get_for_month(self, house_id: int, month: date) -> Reading:
        """Get the reading of a house for a month.

        Raises:
            NotFoundError: If the house has no reading for that month
        """
        reading = self.find_for_month(house_id, month)
        if reading is None:
            raise NotFoundError("Reading not found for this month")
        return reading

    def get_or_create_for_month(self, house_id: int, month: date) -> tuple[Reading, bool]:
        """Return the (house, month) row, creating an empty one if absent.

        Raises:
            ConflictError: If a concurrent writer created the row first
        """
        month = normalize_month(month)
        reading = self.find_for_month(house_id, month)
        if reading is not None:
            return reading, False

        reading = Reading(house_id=house_id, month=month, bill_status=BillStatus.PENDING)
        self.db.add(reading)
        try:
            self.db.flush()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"Reading for house {house_id} month {month} created concurrently")
            raise ConflictError("Reading already exists for this month") from e
        return reading, True

    def filtered(
        self,
        house_id: int | None = None,
        mohalla_id: int | None = None,
        month: date | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> Query:
        """Readings query with the common list filters, newest month first."""
        query = self.db.query(Reading)
        if house_id is not None:
            query = query.filter(Reading.house_id == house_id)
        if mohalla_id is not None:
            query = query.join(House).filter(House.mohalla_id == mohalla_id)
        if month is not None:
            query = query.filter(Reading.month == normalize_month(month))
        if start_date is not None:
            query = query.filter(Reading.month >= normalize_month(start_date))
        if end_date is not None:
            query = query.filter(Reading.month <= end_date)
        return query.order_by(Reading.month.desc(), Reading.house_id.asc())


__all__ = [
    "meter_snapshot",
    "charge_components",
    "bill_record",
    "previous_state",
    "ReadingLookups",
]
