"""Unit tests for electricity reading uploads and recalculation."""

from datetime import date
from decimal import Decimal

import pytest

from utility_billing.api.errors import ConflictError, NotFoundError, ValidationError
from utility_billing.models.reading import Reading
from utility_billing.services.bill_service import BillService
from utility_billing.services.charges_service import ChargesService
from utility_billing.services.electricity_service import ElectricityReadingService
from utility_billing.services.water_service import WaterReadingService

APRIL, MAY, JUNE = date(2025, 4, 1), date(2025, 5, 1), date(2025, 6, 1)


@pytest.fixture
def service(test_db_session) -> ElectricityReadingService:
    return ElectricityReadingService(test_db_session)


class TestUpload:
    """Consumption and charges computed at upload."""

    def test_first_reading_is_bootstrap(self, service, house, rates):
        reading, created = service.upload(house.id, APRIL, Decimal("1000"), Decimal("0"))

        assert created is True
        assert reading.electricity_consumption == Decimal("0")
        assert reading.electricity_billed_energy == Decimal("0")
        assert reading.fixed_charge == Decimal("0")
        assert reading.electricity_reading_upload_date is not None

    def test_charges_from_billed_energy(self, service, house, rates):
        service.upload(house.id, APRIL, Decimal("1000"), Decimal("0"))

        reading, _ = service.upload(house.id, MAY, Decimal("1100"), Decimal("0"), Decimal("4.2"))

        assert reading.electricity_consumption == Decimal("100")
        assert reading.electricity_billed_energy == Decimal("100")
        assert reading.fixed_charge == Decimal("150.00")
        assert reading.electricity_charge == Decimal("750.00")
        assert reading.electricity_duty == Decimal("75.00")
        assert reading.maintenance_charge == Decimal("50.00")
        assert reading.max_demand == Decimal("4.20")

    def test_export_surplus_carries_forward(self, service, house, rates):
        service.upload(house.id, APRIL, Decimal("1000"), Decimal("0"))
        may, _ = service.upload(house.id, MAY, Decimal("1050"), Decimal("150"))

        june, _ = service.upload(house.id, JUNE, Decimal("1200"), Decimal("150"))

        assert may.electricity_billed_energy == Decimal("0")
        assert may.electricity_export_carry_forward == Decimal("100")
        assert june.electricity_billed_energy == Decimal("50")
        assert june.electricity_charge == Decimal("375.00")

    def test_previous_skips_months_without_electricity(
        self, service, house, rates, test_db_session
    ):
        service.upload(house.id, APRIL, Decimal("1000"), Decimal("0"))
        WaterReadingService(test_db_session).upload(house.id, MAY, Decimal("100"))

        june, _ = service.upload(house.id, JUNE, Decimal("1200"), Decimal("0"))

        assert june.electricity_consumption == Decimal("200")

    def test_fills_row_created_by_water_upload(self, service, house, rates, test_db_session):
        water, _ = WaterReadingService(test_db_session).upload(house.id, APRIL, Decimal("100"))

        reading, created = service.upload(house.id, APRIL, Decimal("1000"), Decimal("0"))

        assert created is False
        assert reading.id == water.id

    def test_duplicate_month_conflicts(self, service, house, rates):
        service.upload(house.id, APRIL, Decimal("1000"), Decimal("0"))

        with pytest.raises(ConflictError):
            service.upload(house.id, APRIL, Decimal("1001"), Decimal("0"))

    def test_unknown_house(self, service, rates):
        with pytest.raises(NotFoundError):
            service.upload(999, APRIL, Decimal("1000"), Decimal("0"))


class TestUpdateAndDelete:
    def test_update_recomputes(self, service, house, rates):
        service.upload(house.id, APRIL, Decimal("1000"), Decimal("0"))
        may, _ = service.upload(house.id, MAY, Decimal("1100"), Decimal("0"))

        updated = service.update(may.id, import_reading=Decimal("1200"))

        assert updated.electricity_billed_energy == Decimal("200")
        assert updated.fixed_charge == Decimal("300.00")

    def test_update_recomputes_following_months(self, service, house, rates):
        service.upload(house.id, APRIL, Decimal("1000"), Decimal("0"))
        may, _ = service.upload(house.id, MAY, Decimal("1100"), Decimal("0"))
        june, _ = service.upload(house.id, JUNE, Decimal("1300"), Decimal("0"))

        service.update(may.id, import_reading=Decimal("1250"))

        june = service.get(june.id)
        assert june.electricity_consumption == Decimal("50")
        assert june.electricity_billed_energy == Decimal("50")
        assert june.electricity_charge == Decimal("375.00")

    def test_update_moves_carry_forward_into_following_months(self, service, house, rates):
        service.upload(house.id, APRIL, Decimal("1000"), Decimal("0"))
        may, _ = service.upload(house.id, MAY, Decimal("1100"), Decimal("0"))
        june, _ = service.upload(house.id, JUNE, Decimal("1300"), Decimal("150"))

        service.update(may.id, export_reading=Decimal("150"))

        may, june = service.get(may.id), service.get(june.id)
        assert may.electricity_export_carry_forward == Decimal("50")
        assert june.electricity_consumption == Decimal("200")
        assert june.electricity_billed_energy == Decimal("150")

    def test_upload_into_earlier_month_recomputes_following(self, service, house, rates):
        service.upload(house.id, APRIL, Decimal("1000"), Decimal("0"))
        june, _ = service.upload(house.id, JUNE, Decimal("1300"), Decimal("0"))
        assert june.electricity_consumption == Decimal("300")

        service.upload(house.id, MAY, Decimal("1250"), Decimal("0"))

        assert service.get(june.id).electricity_consumption == Decimal("50")

    def test_update_refused_when_later_month_billed(
        self, service, house, record_month, test_db_session
    ):
        record_month(APRIL, "1000", "100")
        may = record_month(MAY, "1100", "150")
        record_month(JUNE, "1300", "200")
        BillService(test_db_session).generate(house.id, JUNE)

        with pytest.raises(ValidationError, match="2025-06"):
            service.update(may.id, import_reading=Decimal("1050"))

    def test_upload_refused_when_later_month_billed(
        self, service, house, record_month, test_db_session
    ):
        record_month(APRIL, "1000", "100")
        WaterReadingService(test_db_session).upload(house.id, MAY, Decimal("150"))
        record_month(JUNE, "1300", "200")
        BillService(test_db_session).generate(house.id, JUNE)

        with pytest.raises(ValidationError, match="2025-06"):
            service.upload(house.id, MAY, Decimal("1250"), Decimal("0"))

        may = BillService(test_db_session).get_for_month(house.id, MAY)
        assert may.electricity_import_reading == Decimal("0")
        june = BillService(test_db_session).get_for_month(house.id, JUNE)
        assert june.electricity_consumption == Decimal("300")

    def test_recalculate_picks_up_new_rates(self, service, house, rates, test_db_session):
        service.upload(house.id, APRIL, Decimal("1000"), Decimal("0"))
        may, _ = service.upload(house.id, MAY, Decimal("1100"), Decimal("0"))
        ChargesService(test_db_session).upsert("electricity_charge_rate", Decimal("8"))

        recalculated = service.recalculate(may.id)

        assert recalculated.electricity_charge == Decimal("800.00")

    def test_billed_reading_is_frozen(self, service, house, record_month, test_db_session):
        record_month(APRIL, "1000", "100")
        may = record_month(MAY, "1100", "150")
        BillService(test_db_session).generate(house.id, MAY)

        with pytest.raises(ValidationError, match="already generated"):
            service.update(may.id, import_reading=Decimal("1150"))

    def test_delete_removes_row_without_water(self, service, house, rates, test_db_session):
        reading, _ = service.upload(house.id, APRIL, Decimal("1000"), Decimal("0"))

        service.delete(reading.id)

        assert test_db_session.query(Reading).count() == 0

    def test_delete_keeps_row_with_water(self, service, house, record_month):
        reading = record_month(APRIL, "1000", "100")

        service.delete(reading.id)

        kept = service.get(reading.id)
        assert kept.electricity_import_reading == Decimal("0")
        assert kept.water_reading == Decimal("100")

    def test_delete_refused_with_later_reading(self, service, house, rates):
        april, _ = service.upload(house.id, APRIL, Decimal("1000"), Decimal("0"))
        service.upload(house.id, MAY, Decimal("1100"), Decimal("0"))

        with pytest.raises(ValidationError, match="later"):
            service.delete(april.id)


class TestBulkUpload:
    def test_reports_each_row(self, service, house, mohalla, rates):
        rows = [
            {
                "mohalla_number": mohalla.number,
                "house_number": house.house_number,
                "month": APRIL,
                "import_reading": Decimal("1000"),
                "export_reading": Decimal("0"),
            },
            {
                "mohalla_number": mohalla.number,
                "house_number": "NOPE",
                "month": APRIL,
                "import_reading": Decimal("10"),
                "export_reading": Decimal("0"),
            },
            {"mohalla_number": mohalla.number, "house_number": house.house_number, "month": MAY},
        ]

        result = service.bulk_upload(rows)

        assert result["success"] == 1
        assert result["failed"] == 1
        assert result["skipped"] == 1
        assert result["errors"][0]["house_number"] == "NOPE"
