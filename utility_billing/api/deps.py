"""FastAPI dependencies shared by the routers."""

from dataclasses import dataclass
from datetime import date

from fastapi import Depends, Header, Query, Request
from sqlalchemy.orm import Session

from utility_billing.api.errors import ValidationError
from utility_billing.billing.periods import normalize_month
from utility_billing.config import Settings
from utility_billing.services.bill_service import BillService
from utility_billing.services.db import get_db
from utility_billing.services.electricity_service import ElectricityReadingService
from utility_billing.services.report_service import ReportService
from utility_billing.services.water_service import WaterReadingService


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_actor_id(x_actor_id: int | None = Header(None)) -> int | None:
    """Operator recorded on audit entries (``X-Actor-Id`` header)."""
    return x_actor_id


@dataclass
class PageParams:
    page: int
    limit: int


def get_page_params(
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
    settings: Settings = Depends(get_app_settings),
) -> PageParams:
    """Page number and size; the size is capped at ``max_page_size``."""
    size = limit or settings.default_page_size
    return PageParams(page=page, limit=min(size, settings.max_page_size))


def parse_month(value: str | None) -> date | None:
    """Parse an optional month query parameter.

    Raises:
        ValidationError: If the value is not a recognizable month
    """
    if value is None or value == "":
        return None
    try:
        return normalize_month(value)
    except ValueError as e:
        raise ValidationError(str(e)) from e


def parse_date(value: str | None) -> date | None:
    if value is None or value == "":
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError as e:
        raise ValidationError(f"Invalid date value: {value!r}") from e


def get_bill_service(
    db: Session = Depends(get_db), settings: Settings = Depends(get_app_settings)
) -> BillService:
    return BillService(db, penalty_rate=settings.penalty_rate, due_day=settings.bill_due_day)


def get_electricity_service(
    db: Session = Depends(get_db), settings: Settings = Depends(get_app_settings)
) -> ElectricityReadingService:
    return ElectricityReadingService(db, settings.fiscal_year_start_month)


def get_water_service(db: Session = Depends(get_db)) -> WaterReadingService:
    return WaterReadingService(db)


def get_report_service(
    db: Session = Depends(get_db), settings: Settings = Depends(get_app_settings)
) -> ReportService:
    return ReportService(db, due_day=settings.bill_due_day)


__all__ = [
    "get_app_settings",
    "get_actor_id",
    "PageParams",
    "get_page_params",
    "parse_month",
    "parse_date",
    "get_bill_service",
    "get_electricity_service",
    "get_water_service",
    "get_report_service",
]
