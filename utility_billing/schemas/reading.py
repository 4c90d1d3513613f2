"""Pydantic schemas for electricity and water readings."""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from utility_billing.billing.types import BillStatus
from utility_billing.schemas.common import Month


class ElectricityUpload(BaseModel):
    """Request payload for POST /api/electricity."""

    house_id: int = Field(..., gt=0)
    month: Month
    import_reading: Decimal = Field(..., ge=0)
    export_reading: Decimal = Field(..., ge=0)
    max_demand: Decimal | None = Field(None, ge=0)


class ElectricityBulkRow(BaseModel):
    """One bulk row; a row with no values at all is skipped."""

    mohalla_number: str
    house_number: str
    month: Month
    import_reading: Decimal | None = Field(None, ge=0)
    export_reading: Decimal | None = Field(None, ge=0)
    max_demand: Decimal | None = Field(None, ge=0)


class ElectricityBulkUpload(BaseModel):
    readings: list[ElectricityBulkRow] = Field(..., min_length=1)


class ElectricityUpdate(BaseModel):
    import_reading: Decimal | None = Field(None, ge=0)
    export_reading: Decimal | None = Field(None, ge=0)
    max_demand: Decimal | None = Field(None, ge=0)


class WaterUpload(BaseModel):
    """Request payload for POST /api/water."""

    house_id: int = Field(..., gt=0)
    month: Month
    water_reading: Decimal = Field(..., ge=0)


class WaterBulkRow(BaseModel):
    mohalla_number: str
    house_number: str
    month: Month
    water_reading: Decimal | None = Field(None, ge=0)


class WaterBulkUpload(BaseModel):
    readings: list[WaterBulkRow] = Field(..., min_length=1)


class WaterUpdate(BaseModel):
    water_reading: Decimal = Field(..., ge=0)


class ReadingResponse(BaseModel):
    """A house's monthly record: readings, charges, bill and payment."""

    id: int
    house_id: int
    month: date

    electricity_import_reading: Decimal
    electricity_export_reading: Decimal
    electricity_consumption: Decimal
    electricity_billed_energy: Decimal
    electricity_export_carry_forward: Decimal
    max_demand: Decimal
    electricity_reading_upload_date: datetime | None = None

    water_reading: Decimal
    water_consumption: Decimal
    water_reading_upload_date: datetime | None = None

    fixed_charge: Decimal
    electricity_charge: Decimal
    electricity_duty: Decimal
    maintenance_charge: Decimal
    water_charge: Decimal
    other_charges: Decimal | None = None
    license_fee: Decimal | None = None
    residence_fee: Decimal | None = None

    bill1_standard: Decimal
    bill1_penalty: Decimal
    bill2_standard: Decimal
    bill2_penalty: Decimal
    total_standard: Decimal
    total_penalty: Decimal
    bill_status: BillStatus
    bill_generated_at: datetime | None = None

    paid_amount: Decimal | None = None
    paid_on: date | None = None
    bill1_arrear: Decimal | None = None
    bill2_arrear: Decimal | None = None

    bill_version: int
    previous_bill_version: int | None = None

    model_config = ConfigDict(from_attributes=True)
