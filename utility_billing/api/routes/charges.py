"""Tariff rate API routes."""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from utility_billing.api.deps import get_actor_id
from utility_billing.schemas.charge import (
    ChargeBulkUpsert,
    ChargeResponse,
    ChargeUpsert,
    ChargeUpsertResult,
)
from utility_billing.schemas.common import MessageResponse
from utility_billing.services.charges_service import ChargesService
from utility_billing.services.db import get_db

router = APIRouter(prefix="/api/charges", tags=["charges"])


@router.get("", response_model=list[ChargeResponse])
def list_charges(db: Session = Depends(get_db)):
    return ChargesService(db).list_charges()


@router.post("/initialize", response_model=list[ChargeResponse])
def initialize_charges(
    db: Session = Depends(get_db), actor_id: int | None = Depends(get_actor_id)
):
    """Create the standard rates at 0; existing rates keep their values."""
    return ChargesService(db).initialize_defaults(actor_id)


@router.post("/bulk", response_model=list[ChargeUpsertResult])
def bulk_upsert_charges(
    payload: ChargeBulkUpsert,
    db: Session = Depends(get_db),
    actor_id: int | None = Depends(get_actor_id),
):
    items = [item.model_dump() for item in payload.charges]
    return ChargesService(db).bulk_upsert(items, actor_id)


@router.get("/name/{name}", response_model=ChargeResponse)
def get_charge_by_name(name: str, db: Session = Depends(get_db)):
    return ChargesService(db).get_by_name(name)


@router.get("/{charge_id}", response_model=ChargeResponse)
def get_charge(charge_id: int, db: Session = Depends(get_db)):
    return ChargesService(db).get(charge_id)


@router.post("", response_model=ChargeResponse)
def upsert_charge(
    payload: ChargeUpsert,
    response: Response,
    db: Session = Depends(get_db),
    actor_id: int | None = Depends(get_actor_id),
):
    """
    Create or update a rate by name.

    Returns:
        201: Rate created
        200: Existing rate updated
    """
    charge, created = ChargesService(db).upsert(payload.name, payload.amount, actor_id)
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return charge


@router.delete("/{charge_id}", response_model=MessageResponse)
def delete_charge(
    charge_id: int,
    db: Session = Depends(get_db),
    actor_id: int | None = Depends(get_actor_id),
):
    ChargesService(db).delete(charge_id, actor_id)
    return {"message": "Charge deleted successfully"}
