"""Unit tests for configuration loading."""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from utility_billing.config import Settings


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("PENALTY_RATE", raising=False)
        monkeypatch.delenv("BILL_DUE_DAY", raising=False)

        settings = Settings(_env_file=None)

        assert settings.penalty_rate == Decimal("0.015")
        assert settings.bill_due_day == 15
        assert settings.fiscal_year_start_month == 4
        assert settings.api_title == "Utility Billing API"

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "sqlite:///./other.db")
        monkeypatch.setenv("PENALTY_RATE", "0.02")
        monkeypatch.setenv("BILL_DUE_DAY", "10")

        settings = Settings(_env_file=None)

        assert settings.database_url == "sqlite:///./other.db"
        assert settings.penalty_rate == Decimal("0.02")
        assert settings.bill_due_day == 10

    def test_env_file(self, monkeypatch, tmp_path):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        env_file = tmp_path / ".env"
        env_file.write_text("LOG_LEVEL=DEBUG\nUNRELATED_SETTING=1\n")

        settings = Settings(_env_file=str(env_file))

        assert settings.log_level == "DEBUG"

    def test_due_day_must_exist_in_every_month(self, monkeypatch):
        monkeypatch.setenv("BILL_DUE_DAY", "31")

        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_negative_penalty_rate_refused(self, monkeypatch):
        monkeypatch.setenv("PENALTY_RATE", "-0.01")

        with pytest.raises(ValidationError):
            Settings(_env_file=None)
