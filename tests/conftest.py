"""Pytest configuration and shared fixtures."""

from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from utility_billing.config import Settings
from utility_billing.main import create_app
from utility_billing.models import Base
from utility_billing.models.house import House
from utility_billing.models.mohalla import Mohalla
from utility_billing.services.charges_service import ChargesService
from utility_billing.services.db import create_db_engine, create_session_factory
from utility_billing.services.electricity_service import ElectricityReadingService
from utility_billing.services.water_service import WaterReadingService

TEST_RATES = {
    "fixed_charge_rate": Decimal("1.50"),
    "electricity_charge_rate": Decimal("7.50"),
    "electricity_duty_rate": Decimal("0.75"),
    "maintenance_charge_rate": Decimal("0.50"),
    "water_charge_rate": Decimal("2.00"),
}


@pytest.fixture
def test_settings() -> Settings:
    """Settings for an in-memory database, ignoring any .env file."""
    return Settings(_env_file=None, database_url="sqlite:///:memory:", log_file="logs/test.log")


@pytest.fixture
def session_factory(test_settings) -> sessionmaker:
    """Session factory over a fresh in-memory database with all tables created."""
    engine = create_db_engine(test_settings.database_url)
    Base.metadata.create_all(bind=engine)
    yield create_session_factory(engine)
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def test_db_session(session_factory):
    """Provide a test database session with all tables created."""
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(test_settings, session_factory):
    """Provide a FastAPI test client bound to the test database."""
    app = create_app(test_settings, session_factory)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def mohalla(test_db_session) -> Mohalla:
    mohalla = Mohalla(name="Green Park", number="M1")
    test_db_session.add(mohalla)
    test_db_session.commit()
    return mohalla


@pytest.fixture
def house(test_db_session, mohalla) -> House:
    """Active house with a license fee so the water side of a bill is never empty."""
    house = House(
        mohalla_id=mohalla.id,
        house_number="H-101",
        consumer_code="C-0001",
        licensee_name="Test Licensee",
        license_fee=Decimal("100.00"),
        residence_fee=Decimal("50.00"),
    )
    test_db_session.add(house)
    test_db_session.commit()
    return house


@pytest.fixture
def rates(test_db_session):
    """Configure the standard tariff rates."""
    service = ChargesService(test_db_session)
    for name, amount in TEST_RATES.items():
        service.upsert(name, amount)
    return service.get_tariff_rates()


@pytest.fixture
def bootstrap_month() -> date:
    return date(2025, 4, 1)


@pytest.fixture
def record_month(test_db_session, house, rates):
    """Enter electricity and water readings for a month of the test house."""

    def _record(month: date, import_reading, water_reading, export_reading=Decimal("0")):
        ElectricityReadingService(test_db_session).upload(
            house.id, month, Decimal(import_reading), Decimal(export_reading)
        )
        reading, _ = WaterReadingService(test_db_session).upload(
            house.id, month, Decimal(water_reading)
        )
        return reading

    return _record
