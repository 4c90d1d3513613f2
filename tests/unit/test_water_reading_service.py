"""Unit tests for water reading uploads."""

from datetime import date
from decimal import Decimal

import pytest

from utility_billing.api.errors import ConflictError, ValidationError
from utility_billing.services.bill_service import BillService
from utility_billing.services.charges_service import ChargesService
from utility_billing.services.water_service import WaterReadingService

APRIL, MAY, JUNE = date(2025, 4, 1), date(2025, 5, 1), date(2025, 6, 1)


@pytest.fixture
def service(test_db_session) -> WaterReadingService:
    return WaterReadingService(test_db_session)


class TestWaterUpload:
    def test_first_reading_has_no_consumption(self, service, house, rates):
        reading, created = service.upload(house.id, APRIL, Decimal("100"))

        assert created is True
        assert reading.water_consumption == Decimal("0")
        assert reading.water_charge == Decimal("0")

    def test_charge_from_consumption(self, service, house, rates):
        service.upload(house.id, APRIL, Decimal("100"))

        reading, _ = service.upload(house.id, MAY, Decimal("150"))

        assert reading.water_consumption == Decimal("50")
        assert reading.water_charge == Decimal("100.00")

    def test_meter_reset_bills_nothing(self, service, house, rates):
        service.upload(house.id, APRIL, Decimal("100"))

        reading, _ = service.upload(house.id, MAY, Decimal("40"))

        assert reading.water_consumption == Decimal("0")
        assert reading.water_charge == Decimal("0")

    def test_duplicate_month_conflicts(self, service, house, rates):
        service.upload(house.id, APRIL, Decimal("100"))

        with pytest.raises(ConflictError):
            service.upload(house.id, APRIL, Decimal("120"))


class TestWaterRecalculation:
    def test_recalculate_house_uses_current_rate(self, service, house, rates, test_db_session):
        service.upload(house.id, APRIL, Decimal("100"))
        may, _ = service.upload(house.id, MAY, Decimal("150"))
        ChargesService(test_db_session).upsert("water_charge_rate", Decimal("3"))

        count = service.recalculate_house(house.id)

        assert count == 2
        assert service.get(may.id).water_charge == Decimal("150.00")

    def test_update_recomputes_charge(self, service, house, rates):
        service.upload(house.id, APRIL, Decimal("100"))
        may, _ = service.upload(house.id, MAY, Decimal("150"))

        updated = service.update(may.id, Decimal("175"))

        assert updated.water_consumption == Decimal("75")
        assert updated.water_charge == Decimal("150.00")

    def test_update_recomputes_following_months(self, service, house, rates):
        service.upload(house.id, APRIL, Decimal("100"))
        may, _ = service.upload(house.id, MAY, Decimal("150"))
        june, _ = service.upload(house.id, JUNE, Decimal("200"))

        service.update(may.id, Decimal("180"))

        june = service.get(june.id)
        assert june.water_consumption == Decimal("20")
        assert june.water_charge == Decimal("40.00")

    def test_upload_into_earlier_month_recomputes_following(self, service, house, rates):
        service.upload(house.id, APRIL, Decimal("100"))
        june, _ = service.upload(house.id, JUNE, Decimal("200"))

        service.upload(house.id, MAY, Decimal("170"))

        assert service.get(june.id).water_consumption == Decimal("30")

    def test_update_refused_when_later_month_billed(
        self, service, house, record_month, test_db_session
    ):
        record_month(APRIL, "1000", "100")
        may = record_month(MAY, "1100", "150")
        record_month(JUNE, "1300", "200")
        BillService(test_db_session).generate(house.id, JUNE)

        with pytest.raises(ValidationError, match="2025-06"):
            service.update(may.id, Decimal("180"))

        assert service.get(may.id).water_reading == Decimal("150")


class TestWaterDelete:
    def test_delete_clears_fields(self, service, house, rates):
        reading, _ = service.upload(house.id, APRIL, Decimal("100"))

        cleared = service.delete(reading.id)

        assert cleared.water_reading == Decimal("0")
        assert cleared.water_reading_upload_date is None

    def test_delete_refused_with_later_reading(self, service, house, rates):
        april, _ = service.upload(house.id, APRIL, Decimal("100"))
        service.upload(house.id, MAY, Decimal("150"))

        with pytest.raises(ValidationError, match="later"):
            service.delete(april.id)
