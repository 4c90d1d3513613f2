"""Unit tests for tariff rate management."""

from decimal import Decimal

import pytest

from utility_billing.api.errors import NotFoundError, ValidationError
from utility_billing.billing.types import TARIFF_RATE_NAMES
from utility_billing.services.charges_service import ChargesService


@pytest.fixture
def service(test_db_session) -> ChargesService:
    return ChargesService(test_db_session)


class TestChargesService:
    def test_upsert_creates_then_updates(self, service):
        charge, created = service.upsert("water_charge_rate", Decimal("2"))
        assert created is True

        charge, created = service.upsert("water_charge_rate", Decimal("2.5"))

        assert created is False
        assert charge.amount == Decimal("2.5")

    def test_negative_amount_refused(self, service):
        with pytest.raises(ValidationError):
            service.upsert("water_charge_rate", Decimal("-0.01"))

    def test_tariff_rates_default_to_zero(self, service):
        service.upsert("electricity_charge_rate", Decimal("7.5"))

        rates = service.get_tariff_rates()

        assert rates.electricity_charge_rate == Decimal("7.5")
        assert rates.water_charge_rate == Decimal("0")

    def test_initialize_defaults_keeps_existing(self, service):
        service.upsert("water_charge_rate", Decimal("2"))

        created = service.initialize_defaults()

        assert len(created) == len(TARIFF_RATE_NAMES) - 1
        assert service.get_by_name("water_charge_rate").amount == Decimal("2")

    def test_bulk_upsert(self, service):
        service.upsert("water_charge_rate", Decimal("2"))

        results = service.bulk_upsert(
            [
                {"name": "water_charge_rate", "amount": Decimal("3")},
                {"name": "fixed_charge_rate", "amount": Decimal("1.5")},
            ]
        )

        assert [r["action"] for r in results] == ["updated", "created"]

    def test_delete(self, service):
        charge, _ = service.upsert("water_charge_rate", Decimal("2"))

        service.delete(charge.id)

        with pytest.raises(NotFoundError):
            service.get(charge.id)
