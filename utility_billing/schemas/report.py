"""Pydantic schemas for reports."""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict

from utility_billing.billing.types import BillStatus
from utility_billing.schemas.house import HouseResponse
from utility_billing.schemas.reading import ReadingResponse


class MetricsResponse(BaseModel):
    total_mohallas: int
    active_houses: int
    total_bills: int
    total_billed: Decimal
    total_collected: Decimal
    collection_rate: Decimal
    pending_amount: Decimal
    overdue_amount: Decimal
    overdue_count: int


class CollectionResponse(BaseModel):
    items: list[ReadingResponse]
    count: int
    total_collected: Decimal

    model_config = ConfigDict(from_attributes=True)


class PendingItem(BaseModel):
    reading: ReadingResponse
    outstanding: Decimal

    model_config = ConfigDict(from_attributes=True)


class PendingResponse(BaseModel):
    items: list[PendingItem]
    count: int
    total_pending: Decimal

    model_config = ConfigDict(from_attributes=True)


class ArrearsItem(BaseModel):
    house: HouseResponse
    month: date
    bill_status: BillStatus
    bill1_arrear: Decimal
    bill2_arrear: Decimal
    total_arrear: Decimal

    model_config = ConfigDict(from_attributes=True)


class ArrearsResponse(BaseModel):
    items: list[ArrearsItem]
    count: int
    total_arrears: Decimal

    model_config = ConfigDict(from_attributes=True)
