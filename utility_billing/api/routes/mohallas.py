"""Mohalla API routes."""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from utility_billing.api.deps import PageParams, get_actor_id, get_page_params
from utility_billing.schemas.common import BulkResult, MessageResponse, PageResponse
from utility_billing.schemas.house import HouseResponse
from utility_billing.schemas.mohalla import (
    MohallaBulkCreate,
    MohallaCreate,
    MohallaResponse,
    MohallaStatistics,
    MohallaUpdate,
)
from utility_billing.services.db import get_db
from utility_billing.services.mohalla_service import MohallaService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/mohallas", tags=["mohallas"])


@router.get("", response_model=PageResponse[MohallaResponse])
def list_mohallas(
    search: str | None = None,
    paging: PageParams = Depends(get_page_params),
    db: Session = Depends(get_db),
):
    """List mohallas, optionally filtered by name or number."""
    page = MohallaService(db).list_mohallas(search, paging.page, paging.limit)
    return PageResponse[MohallaResponse].from_page(page)


@router.get("/all", response_model=list[MohallaResponse])
def list_all_mohallas(db: Session = Depends(get_db)):
    return MohallaService(db).list_all()


@router.get("/number/{number}", response_model=MohallaResponse)
def get_mohalla_by_number(number: str, db: Session = Depends(get_db)):
    return MohallaService(db).get_by_number(number)


@router.post("/bulk", response_model=BulkResult)
def bulk_create_mohallas(
    payload: MohallaBulkCreate,
    db: Session = Depends(get_db),
    actor_id: int | None = Depends(get_actor_id),
):
    """Create many mohallas; duplicates are reported per row."""
    items = [item.model_dump() for item in payload.mohallas]
    return MohallaService(db).bulk_create(items, actor_id)


@router.get("/{mohalla_id}", response_model=MohallaResponse)
def get_mohalla(mohalla_id: int, db: Session = Depends(get_db)):
    return MohallaService(db).get(mohalla_id)


@router.get("/{mohalla_id}/houses", response_model=list[HouseResponse])
def list_mohalla_houses(
    mohalla_id: int, is_active: bool | None = None, db: Session = Depends(get_db)
):
    return MohallaService(db).houses_in(mohalla_id, is_active)


@router.get("/{mohalla_id}/statistics", response_model=MohallaStatistics)
def get_mohalla_statistics(mohalla_id: int, db: Session = Depends(get_db)):
    """House, reading and bill counts plus revenue from paid bills."""
    return MohallaStatistics.model_validate(
        MohallaService(db).statistics(mohalla_id), from_attributes=True
    )


@router.post("", response_model=MohallaResponse, status_code=status.HTTP_201_CREATED)
def create_mohalla(
    payload: MohallaCreate,
    db: Session = Depends(get_db),
    actor_id: int | None = Depends(get_actor_id),
):
    """
    Create a mohalla.

    Returns:
        201: Created mohalla
        409: Number already exists
    """
    return MohallaService(db).create(payload.name, payload.number, actor_id)


@router.put("/{mohalla_id}", response_model=MohallaResponse)
def update_mohalla(
    mohalla_id: int,
    payload: MohallaUpdate,
    db: Session = Depends(get_db),
    actor_id: int | None = Depends(get_actor_id),
):
    return MohallaService(db).update(mohalla_id, payload.name, payload.number, actor_id)


@router.delete("/{mohalla_id}", response_model=MessageResponse)
def delete_mohalla(
    mohalla_id: int,
    db: Session = Depends(get_db),
    actor_id: int | None = Depends(get_actor_id),
):
    """
    Delete a mohalla.

    Returns:
        200: Deleted
        400: Mohalla still has houses
        404: Mohalla not found
    """
    MohallaService(db).delete(mohalla_id, actor_id)
    return {"message": "Mohalla deleted successfully"}
