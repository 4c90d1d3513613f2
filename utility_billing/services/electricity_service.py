"""Electricity reading service: uploads, consumption and electricity charges."""

import logging
from datetime import date, datetime, timezone

from sqlalchemy.orm import Session

from utility_billing.api.errors import AppError, ConflictError, ValidationError
from utility_billing.billing.consumption import FISCAL_YEAR_START_MONTH, compute_consumption
from utility_billing.billing.errors import BillingError
from utility_billing.billing.money import ZERO, to_decimal
from utility_billing.billing.rates import apply_rates
from utility_billing.billing.types import BILLED_STATUSES, MeterSnapshot, TariffRates
from utility_billing.models.reading import Reading
from utility_billing.services.charges_service import ChargesService
from utility_billing.services.pagination import Page, paginate
from utility_billing.services.reading_service import ReadingLookups, meter_snapshot

logger = logging.getLogger(__name__)

_ELECTRICITY_FIELDS = (
    "electricity_import_reading",
    "electricity_export_reading",
    "electricity_consumption",
    "electricity_billed_energy",
    "electricity_export_carry_forward",
    "max_demand",
    "fixed_charge",
    "electricity_charge",
    "electricity_duty",
    "maintenance_charge",
)


def ensure_not_billed(reading: Reading) -> None:
    """Refuse to change the inputs of a period whose bill already exists."""
    if reading.bill_status in BILLED_STATUSES:
        raise ValidationError(
            f"Bill for {reading.month:%Y-%m} is already {reading.bill_status.value.lower()}; "
            f"readings can no longer change"
        )


def ensure_later_not_billed(later: list[Reading]) -> None:
    """Refuse a change that would alter the consumption behind an existing bill.

    ``later`` are the following months measured from the changed reading.
    """
    for reading in later:
        if reading.bill_status in BILLED_STATUSES:
            raise ValidationError(
                f"Bill for {reading.month:%Y-%m} is already "
                f"{reading.bill_status.value.lower()} and depends on this reading"
            )


class ElectricityReadingService(ReadingLookups):
    """Service for electricity meter readings.

    Consumption is measured against the latest earlier month with an
    entered import reading; charges use the current tariff rates.
    """

    def __init__(
        self, db_session: Session, fiscal_year_start_month: int = FISCAL_YEAR_START_MONTH
    ):
        super().__init__(db_session)
        self.fiscal_year_start_month = fiscal_year_start_month

    def list_readings(
        self,
        house_id: int | None = None,
        mohalla_id: int | None = None,
        month: date | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        page: int = 1,
        limit: int = 50,
    ) -> Page:
        query = self.filtered(house_id, mohalla_id, month, start_date, end_date).filter(
            Reading.electricity_import_reading != 0
        )
        return paginate(query, page, limit)

    def previous_reading(self, house_id: int, month: date) -> Reading | None:
        """Latest earlier month of the house with an entered import reading."""
        return (
            self.db.query(Reading)
            .filter(
                Reading.house_id == house_id,
                Reading.month < month,
                Reading.electricity_import_reading != 0,
            )
            .order_by(Reading.month.desc())
            .first()
        )

    def later_readings(self, reading: Reading) -> list[Reading]:
        """Following months of the house with an entered import reading, oldest first."""
        return (
            self.db.query(Reading)
            .filter(
                Reading.house_id == reading.house_id,
                Reading.month > reading.month,
                Reading.electricity_import_reading != 0,
            )
            .order_by(Reading.month.asc())
            .all()
        )

    def _recompute_later(self, later: list[Reading], rates: TariffRates) -> None:
        """Recompute consumption, carry-forward and charges of following months in order."""
        for reading in later:
            # Each month compares against the one before it
            self.db.flush()
            self._apply(
                reading,
                reading.electricity_import_reading,
                reading.electricity_export_reading,
                rates=rates,
            )
        if later:
            logger.info(
                f"Recomputed {len(later)} later electricity readings from "
                f"{later[0].month:%Y-%m} for house {later[0].house_id}"
            )

    def _apply(
        self,
        reading: Reading,
        import_reading,
        export_reading,
        max_demand=None,
        rates: TariffRates | None = None,
    ) -> None:
        """Store meter values and recompute consumption and charges."""
        reading.electricity_import_reading = to_decimal(import_reading)
        reading.electricity_export_reading = to_decimal(export_reading)
        if max_demand is not None:
            reading.max_demand = to_decimal(max_demand)

        previous = self.previous_reading(reading.house_id, reading.month)
        result = compute_consumption(
            MeterSnapshot(reading.electricity_import_reading, reading.electricity_export_reading),
            meter_snapshot(previous) if previous is not None else None,
            reading.month.month,
            self.fiscal_year_start_month,
        )
        reading.electricity_consumption = result.consumption
        reading.electricity_billed_energy = result.billed_energy
        reading.electricity_export_carry_forward = result.carry_forward

        if rates is None:
            rates = ChargesService(self.db).get_tariff_rates()
        charges = apply_rates(result.billed_energy, rates)
        reading.fixed_charge = charges.fixed_charge
        reading.electricity_charge = charges.electricity_charge
        reading.electricity_duty = charges.electricity_duty
        reading.maintenance_charge = charges.maintenance_charge
        reading.electricity_reading_upload_date = datetime.now(timezone.utc)

    def upload(
        self,
        house_id: int,
        month: date,
        import_reading,
        export_reading,
        max_demand=None,
    ) -> tuple[Reading, bool]:
        """Record a month's electricity reading.

        Creates the (house, month) row or fills in an existing row created by
        a water upload. Later months already entered are recomputed against
        the new reading.

        Returns:
            (reading, created)

        Raises:
            NotFoundError: If the house does not exist
            ConflictError: If an import reading is already entered for the month
            ValidationError: If a later month's bill depends on this month
        """
        self.get_house(house_id)
        reading, created = self.get_or_create_for_month(house_id, month)
        if reading.electricity_import_reading != 0:
            self.db.rollback()
            raise ConflictError("Electricity reading already exists for this month")
        later = self.later_readings(reading)
        try:
            ensure_later_not_billed(later)
        except ValidationError:
            self.db.rollback()
            raise

        rates = ChargesService(self.db).get_tariff_rates()
        self._apply(reading, import_reading, export_reading, max_demand or ZERO, rates)
        self._recompute_later(later, rates)
        self.db.commit()
        self.db.refresh(reading)
        logger.info(
            f"Electricity reading for house {house_id} {reading.month:%Y-%m}: "
            f"consumption={reading.electricity_consumption} "
            f"billed={reading.electricity_billed_energy} "
            f"carry={reading.electricity_export_carry_forward}"
        )
        return reading, created

    def bulk_upload(self, items: list[dict]) -> dict:
        """Upload readings keyed by mohalla number and house number.

        Rows with no values at all are skipped; every other failure is
        reported per row and the rest continue.
        """
        results = {"success": 0, "failed": 0, "skipped": 0, "errors": []}
        for item in items:
            values = [item.get(key) for key in ("import_reading", "export_reading", "max_demand")]
            if all(value is None for value in values):
                results["skipped"] += 1
                continue
            try:
                if item.get("import_reading") is None or item.get("export_reading") is None:
                    raise ValidationError("Import and export readings are required")
                house = self.get_house_by_numbers(item["mohalla_number"], item["house_number"])
                self.upload(
                    house.id,
                    item["month"],
                    item["import_reading"],
                    item["export_reading"],
                    item.get("max_demand"),
                )
                results["success"] += 1
            except (AppError, BillingError, ValueError) as e:
                self.db.rollback()
                results["failed"] += 1
                results["errors"].append(
                    {
                        "mohalla_number": item.get("mohalla_number"),
                        "house_number": item.get("house_number"),
                        "error": str(e),
                    }
                )
                logger.warning(
                    f"Skipped electricity row {item.get('mohalla_number')}/"
                    f"{item.get('house_number')}: {e}"
                )
        logger.info(
            f"Bulk electricity upload: {results['success']} uploaded, "
            f"{results['failed']} failed, {results['skipped']} skipped"
        )
        return results

    def update(
        self, reading_id: int, import_reading=None, export_reading=None, max_demand=None
    ) -> Reading:
        """Change meter values and recompute consumption and charges.

        Following months are recomputed in order, since their consumption
        and carry-forward are measured from this reading.

        Raises:
            ValidationError: If this month or a later month is already billed
        """
        reading = self.get(reading_id)
        ensure_not_billed(reading)
        later = self.later_readings(reading)
        ensure_later_not_billed(later)

        rates = ChargesService(self.db).get_tariff_rates()
        self._apply(
            reading,
            import_reading if import_reading is not None else reading.electricity_import_reading,
            export_reading if export_reading is not None else reading.electricity_export_reading,
            max_demand,
            rates,
        )
        self._recompute_later(later, rates)
        self.db.commit()
        self.db.refresh(reading)
        logger.info(f"Updated electricity reading {reading_id}")
        return reading

    def recalculate(self, reading_id: int) -> Reading:
        """Recompute consumption and charges from stored values and current rates."""
        reading = self.get(reading_id)
        ensure_not_billed(reading)
        if reading.electricity_import_reading == 0:
            raise ValidationError("Electricity reading has not been entered")
        self._apply(reading, reading.electricity_import_reading, reading.electricity_export_reading)
        self.db.commit()
        self.db.refresh(reading)
        return reading

    def delete(self, reading_id: int) -> None:
        """Remove a month's electricity data.

        The row itself is deleted unless it still holds a water reading.

        Raises:
            ValidationError: If a later month has an electricity reading or the
                bill is already generated
        """
        reading = self.get(reading_id)
        ensure_not_billed(reading)
        if self.later_readings(reading):
            raise ValidationError(
                "Cannot delete reading: later electricity readings exist for this house"
            )

        if reading.water_reading != 0:
            for name in _ELECTRICITY_FIELDS:
                setattr(reading, name, ZERO)
            reading.electricity_reading_upload_date = None
        else:
            self.db.delete(reading)
        self.db.commit()
        logger.info(f"Deleted electricity reading {reading_id}")


__all__ = ["ElectricityReadingService", "ensure_later_not_billed", "ensure_not_billed"]
