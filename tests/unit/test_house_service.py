"""Unit tests for house and mohalla management."""

from datetime import date
from decimal import Decimal

import pytest

from utility_billing.api.errors import ConflictError, NotFoundError, ValidationError
from utility_billing.services.bill_service import BillService
from utility_billing.services.house_service import HouseService
from utility_billing.services.mohalla_service import MohallaService


@pytest.fixture
def houses(test_db_session) -> HouseService:
    return HouseService(test_db_session)


@pytest.fixture
def mohallas(test_db_session) -> MohallaService:
    return MohallaService(test_db_session)


def house_fields(mohalla_id, **overrides) -> dict:
    fields = {
        "mohalla_id": mohalla_id,
        "house_number": "H-202",
        "consumer_code": "C-0002",
        "licensee_name": "Second Licensee",
        "electricity_meter_number": "",
    }
    fields.update(overrides)
    return fields


class TestHouseService:
    def test_create_blank_meter_number_becomes_null(self, houses, mohalla):
        house = houses.create(house_fields(mohalla.id))

        assert house.electricity_meter_number is None
        assert house.is_active is True

    def test_create_in_unknown_mohalla(self, houses):
        with pytest.raises(NotFoundError, match="Mohalla"):
            houses.create(house_fields(999))

    def test_duplicate_consumer_code(self, houses, house, mohalla):
        with pytest.raises(ConflictError, match="Consumer code"):
            houses.create(house_fields(mohalla.id, consumer_code=house.consumer_code))

    def test_duplicate_house_number_in_mohalla(self, houses, house, mohalla):
        with pytest.raises(ConflictError, match="House number"):
            houses.create(house_fields(mohalla.id, house_number=house.house_number))

    def test_update_excludes_self_from_uniqueness(self, houses, house):
        updated = houses.update(house.id, {"consumer_code": house.consumer_code, "email": "a@b.c"})

        assert updated.email == "a@b.c"

    def test_set_license_fee(self, houses, house, mohalla):
        updated = houses.set_license_fee(mohalla.number, house.house_number, Decimal("125.50"))

        assert updated.license_fee == Decimal("125.50")

    def test_negative_fee_refused(self, houses, house, mohalla):
        with pytest.raises(ValidationError, match="negative"):
            houses.set_residence_fee(mohalla.number, house.house_number, Decimal("-1"))

    def test_soft_delete_and_restore(self, houses, house):
        assert houses.deactivate(house.id).is_active is False
        assert houses.restore(house.id).is_active is True

        with pytest.raises(ConflictError, match="already active"):
            houses.restore(house.id)

    def test_permanent_delete_refused_with_readings(self, houses, house, record_month):
        record_month(date(2025, 4, 1), "1000", "100")

        with pytest.raises(ValidationError, match="1 readings"):
            houses.delete_permanently(house.id)

    def test_list_filters(self, houses, house, mohalla):
        houses.create(house_fields(mohalla.id))

        page = houses.list_houses(house_number="202")

        assert page.total == 1
        assert page.items[0].house_number == "H-202"


class TestMohallaService:
    def test_duplicate_number(self, mohallas, mohalla):
        with pytest.raises(ConflictError):
            mohallas.create("Other", mohalla.number)

    def test_delete_refused_with_houses(self, mohallas, mohalla, house):
        with pytest.raises(ValidationError, match="existing houses"):
            mohallas.delete(mohalla.id)

    def test_bulk_create_reports_duplicates(self, mohallas, mohalla):
        result = mohallas.bulk_create(
            [{"name": "North", "number": "M2"}, {"name": "Again", "number": mohalla.number}]
        )

        assert result["success"] == 1
        assert result["failed"] == 1
        assert result["errors"][0]["number"] == mohalla.number

    def test_statistics(self, mohallas, mohalla, house, record_month, test_db_session):
        record_month(date(2025, 4, 1), "1000", "100")
        record_month(date(2025, 5, 1), "1100", "150")
        bills = BillService(test_db_session)
        may = bills.generate(house.id, date(2025, 5, 1))
        bills.record_payment(may.id, Decimal("1294.13"), date(2025, 5, 10))

        stats = mohallas.statistics(mohalla.id)

        assert stats["houses"] == {"total": 1, "active": 1, "inactive": 0}
        assert stats["readings"]["total"] == 2
        assert stats["bills"]["PAID"] == 1
        assert stats["bills"]["PENDING"] == 1
        assert stats["revenue"]["total"] == Decimal("1294.13")
