"""Pydantic schemas for bills and payments."""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from utility_billing.schemas.common import BulkItemError, Month
from utility_billing.schemas.reading import ReadingResponse


class OtherChargesUpdate(BaseModel):
    house_id: int = Field(..., gt=0)
    month: Month
    other_charges: Decimal = Field(..., ge=0)


class GenerateBillRequest(BaseModel):
    """Request payload for POST /api/bills/generate."""

    house_id: int = Field(..., gt=0)
    month: Month


class BulkGenerateRequest(BaseModel):
    mohalla_id: int = Field(..., gt=0)
    month: Month


class GeneratedBill(BaseModel):
    house_number: str
    reading_id: int
    total_penalty: Decimal


class BulkGenerateResult(BaseModel):
    success: int
    failed: int
    skipped: int
    errors: list[BulkItemError]
    generated: list[GeneratedBill]


class PaymentRequest(BaseModel):
    """Request payload for POST /api/bills/payment.

    ``amount`` is checked by the payment allocator, not here, so a
    non-positive amount reports ``invalid_payment_amount``.
    """

    reading_id: int = Field(..., gt=0)
    amount: Decimal
    paid_on: date


class BillSummaryResponse(BaseModel):
    house_id: int
    total_bills: int
    total_paid: Decimal
    total_pending: Decimal
    total_overdue: Decimal
    recent_bills: list[ReadingResponse]

    model_config = ConfigDict(from_attributes=True)


class MarkOverdueRequest(BaseModel):
    today: date | None = Field(None, description="Reference date (defaults to today)")


class MarkOverdueResponse(BaseModel):
    marked: int


class StaleBillResponse(BaseModel):
    reading: ReadingResponse
    predecessor_version: int

    model_config = ConfigDict(from_attributes=True)


class RegenerateChainRequest(BaseModel):
    """Recompute a house's bills from ``from_month`` forward."""

    house_id: int = Field(..., gt=0)
    from_month: Month
