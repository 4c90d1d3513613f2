"""Pydantic schemas for mohallas."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class MohallaCreate(BaseModel):
    """Request payload for POST /api/mohallas."""

    name: str = Field(..., min_length=1, max_length=100)
    number: str = Field(..., min_length=1, max_length=20)


class MohallaUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    number: str | None = Field(None, min_length=1, max_length=20)


class MohallaBulkCreate(BaseModel):
    mohallas: list[MohallaCreate] = Field(..., min_length=1)


class MohallaResponse(BaseModel):
    """Response schema for a mohalla."""

    id: int
    name: str
    number: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class HouseCounts(BaseModel):
    total: int
    active: int
    inactive: int


class ReadingCounts(BaseModel):
    total: int


class Revenue(BaseModel):
    total: Decimal


class MohallaStatistics(BaseModel):
    """Counts by house state and bill status, plus revenue from paid bills."""

    mohalla: MohallaResponse
    houses: HouseCounts
    readings: ReadingCounts
    bills: dict[str, int]
    revenue: Revenue

    model_config = ConfigDict(from_attributes=True)
