"""Water reading service: uploads, consumption and water charge."""

import logging
from datetime import date, datetime, timezone

from utility_billing.api.errors import AppError, ConflictError, ValidationError
from utility_billing.billing.consumption import compute_water_consumption
from utility_billing.billing.errors import BillingError
from utility_billing.billing.money import ZERO, to_decimal
from utility_billing.billing.rates import compute_water_charge
from utility_billing.billing.types import BILLED_STATUSES, TariffRates
from utility_billing.models.reading import Reading
from utility_billing.services.charges_service import ChargesService
from utility_billing.services.electricity_service import (
    ensure_later_not_billed,
    ensure_not_billed,
)
from utility_billing.services.pagination import Page, paginate
from utility_billing.services.reading_service import ReadingLookups

logger = logging.getLogger(__name__)


class WaterReadingService(ReadingLookups):
    """Service for water meter readings.

    Consumption is measured against the latest earlier month with a
    non-zero water reading; a meter reset (negative difference) bills as 0.
    """

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
            Reading.water_reading != 0
        )
        return paginate(query, page, limit)

    def previous_water_reading(self, house_id: int, month: date) -> Reading | None:
        return (
            self.db.query(Reading)
            .filter(
                Reading.house_id == house_id,
                Reading.month < month,
                Reading.water_reading > 0,
            )
            .order_by(Reading.month.desc())
            .first()
        )

    def later_readings(self, reading: Reading) -> list[Reading]:
        """Following months of the house with an entered water reading, oldest first."""
        return (
            self.db.query(Reading)
            .filter(
                Reading.house_id == reading.house_id,
                Reading.month > reading.month,
                Reading.water_reading != 0,
            )
            .order_by(Reading.month.asc())
            .all()
        )

    def _recompute_later(self, later: list[Reading], rates: TariffRates) -> None:
        for reading in later:
            # Each month compares against the one before it
            self.db.flush()
            self._apply(reading, reading.water_reading, rates)
        if later:
            logger.info(
                f"Recomputed {len(later)} later water readings from "
                f"{later[0].month:%Y-%m} for house {later[0].house_id}"
            )

    def _apply(self, reading: Reading, water_reading, rates: TariffRates | None = None) -> None:
        reading.water_reading = to_decimal(water_reading)
        previous = self.previous_water_reading(reading.house_id, reading.month)
        consumption = compute_water_consumption(
            reading.water_reading, previous.water_reading if previous is not None else None
        )
        if rates is None:
            rates = ChargesService(self.db).get_tariff_rates()
        reading.water_consumption = consumption
        reading.water_charge = compute_water_charge(consumption, rates)
        reading.water_reading_upload_date = datetime.now(timezone.utc)

    def upload(self, house_id: int, month: date, water_reading) -> tuple[Reading, bool]:
        """Record a month's water reading.

        Later months already entered are recomputed against the new reading.

        Returns:
            (reading, created)

        Raises:
            NotFoundError: If the house does not exist
            ConflictError: If a water reading is already entered for the month
            ValidationError: If a later month's bill depends on this month
        """
        self.get_house(house_id)
        reading, created = self.get_or_create_for_month(house_id, month)
        if reading.water_reading != 0:
            self.db.rollback()
            raise ConflictError("Water reading already exists for this month")
        later = self.later_readings(reading)
        try:
            ensure_later_not_billed(later)
        except ValidationError:
            self.db.rollback()
            raise

        rates = ChargesService(self.db).get_tariff_rates()
        self._apply(reading, water_reading, rates)
        self._recompute_later(later, rates)
        self.db.commit()
        self.db.refresh(reading)
        logger.info(
            f"Water reading for house {house_id} {reading.month:%Y-%m}: "
            f"consumption={reading.water_consumption} charge={reading.water_charge}"
        )
        return reading, created

    def bulk_upload(self, items: list[dict]) -> dict:
        """Upload water readings keyed by mohalla number and house number."""
        results = {"success": 0, "failed": 0, "skipped": 0, "errors": []}
        for item in items:
            if item.get("water_reading") is None:
                results["skipped"] += 1
                continue
            try:
                house = self.get_house_by_numbers(item["mohalla_number"], item["house_number"])
                self.upload(house.id, item["month"], item["water_reading"])
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
                    f"Skipped water row {item.get('mohalla_number')}/"
                    f"{item.get('house_number')}: {e}"
                )
        logger.info(
            f"Bulk water upload: {results['success']} uploaded, "
            f"{results['failed']} failed, {results['skipped']} skipped"
        )
        return results

    def update(self, reading_id: int, water_reading) -> Reading:
        """Change the meter value and recompute this and every following month.

        Raises:
            ValidationError: If this month or a later month is already billed
        """
        reading = self.get(reading_id)
        ensure_not_billed(reading)
        later = self.later_readings(reading)
        ensure_later_not_billed(later)

        rates = ChargesService(self.db).get_tariff_rates()
        self._apply(reading, water_reading, rates)
        self._recompute_later(later, rates)
        self.db.commit()
        self.db.refresh(reading)
        logger.info(f"Updated water reading {reading_id}")
        return reading

    def recalculate(self, reading_id: int) -> Reading:
        """Recompute consumption and charge from the stored reading and current rate."""
        reading = self.get(reading_id)
        ensure_not_billed(reading)
        if reading.water_reading == 0:
            raise ValidationError("Water reading has not been entered")
        self._apply(reading, reading.water_reading)
        self.db.commit()
        self.db.refresh(reading)
        return reading

    def recalculate_house(self, house_id: int) -> int:
        """Recompute every unbilled water reading of a house in month order.

        Returns:
            Number of readings recomputed
        """
        self.get_house(house_id)
        rates = ChargesService(self.db).get_tariff_rates()
        readings = (
            self.db.query(Reading)
            .filter(Reading.house_id == house_id, Reading.water_reading != 0)
            .order_by(Reading.month.asc())
            .all()
        )
        count = 0
        for reading in readings:
            if reading.bill_status in BILLED_STATUSES:
                continue
            self._apply(reading, reading.water_reading, rates)
            # Later months compare against this value
            self.db.flush()
            count += 1
        self.db.commit()
        logger.info(f"Recalculated {count} water readings for house {house_id}")
        return count

    def delete(self, reading_id: int) -> Reading:
        """Clear a month's water data; the row itself is kept.

        Raises:
            ValidationError: If a later month has a water reading or the bill
                is already generated
        """
        reading = self.get(reading_id)
        ensure_not_billed(reading)
        if self.later_readings(reading):
            raise ValidationError(
                "Cannot delete reading: later water readings exist for this house"
            )

        reading.water_reading = ZERO
        reading.water_consumption = ZERO
        reading.water_charge = ZERO
        reading.water_reading_upload_date = None
        self.db.commit()
        self.db.refresh(reading)
        logger.info(f"Cleared water reading {reading_id}")
        return reading


__all__ = ["WaterReadingService"]
