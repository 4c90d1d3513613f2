"""Pydantic schemas for tariff rates."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class ChargeUpsert(BaseModel):
    """Request payload for POST /api/charges (create or update by name)."""

    name: str = Field(..., min_length=1, max_length=50)
    amount: Decimal = Field(..., ge=0)


class ChargeBulkUpsert(BaseModel):
    charges: list[ChargeUpsert] = Field(..., min_length=1)


class ChargeResponse(BaseModel):
    id: int
    name: str
    amount: Decimal
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ChargeUpsertResult(BaseModel):
    name: str
    amount: Decimal
    action: str
