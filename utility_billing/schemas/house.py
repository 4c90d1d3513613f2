"""Pydantic schemas for houses."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from utility_billing.schemas.reading import ReadingResponse


class HouseCreate(BaseModel):
    """Request payload for POST /api/houses."""

    mohalla_id: int = Field(..., gt=0)
    house_number: str = Field(..., min_length=1)
    consumer_code: str = Field(..., min_length=1)
    department: str | None = None
    licensee_name: str = Field(..., min_length=1)
    electricity_meter_number: str | None = None
    water_meter_number: str | None = None
    mobile_number: str | None = None
    email: str | None = None
    license_fee: Decimal = Field(default=Decimal("0"), ge=0)
    residence_fee: Decimal = Field(default=Decimal("0"), ge=0)


class HouseUpdate(BaseModel):
    """Partial update; only fields present in the request change."""

    mohalla_id: int | None = Field(None, gt=0)
    house_number: str | None = Field(None, min_length=1)
    consumer_code: str | None = Field(None, min_length=1)
    department: str | None = None
    licensee_name: str | None = Field(None, min_length=1)
    electricity_meter_number: str | None = None
    water_meter_number: str | None = None
    mobile_number: str | None = None
    email: str | None = None
    license_fee: Decimal | None = Field(None, ge=0)
    residence_fee: Decimal | None = Field(None, ge=0)
    is_active: bool | None = None


class FeeUpdate(BaseModel):
    """Set a flat monthly fee by mohalla number and house number."""

    mohalla_number: str = Field(..., min_length=1)
    house_number: str = Field(..., min_length=1)
    amount: Decimal = Field(..., ge=0)


class HouseResponse(BaseModel):
    """Response schema for a house."""

    id: int
    mohalla_id: int
    house_number: str
    consumer_code: str
    department: str | None = None
    licensee_name: str
    electricity_meter_number: str | None = None
    water_meter_number: str | None = None
    mobile_number: str | None = None
    email: str | None = None
    license_fee: Decimal
    residence_fee: Decimal
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class HouseDetailResponse(HouseResponse):
    """House with its most recent readings."""

    recent_readings: list[ReadingResponse] = Field(default_factory=list)
