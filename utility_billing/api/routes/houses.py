"""House API routes."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from utility_billing.api.deps import PageParams, get_actor_id, get_page_params
from utility_billing.schemas.common import MessageResponse, PageResponse
from utility_billing.schemas.house import (
    FeeUpdate,
    HouseCreate,
    HouseDetailResponse,
    HouseResponse,
    HouseUpdate,
)
from utility_billing.schemas.reading import ReadingResponse
from utility_billing.services.db import get_db
from utility_billing.services.house_service import HouseService

router = APIRouter(prefix="/api/houses", tags=["houses"])


@router.get("", response_model=PageResponse[HouseResponse])
def list_houses(
    mohalla_id: int | None = None,
    mohalla_number: str | None = None,
    house_number: str | None = None,
    consumer_code: str | None = None,
    is_active: bool | None = None,
    paging: PageParams = Depends(get_page_params),
    db: Session = Depends(get_db),
):
    """List houses; house_number and consumer_code match as substrings."""
    page = HouseService(db).list_houses(
        mohalla_id=mohalla_id,
        mohalla_number=mohalla_number,
        house_number=house_number,
        consumer_code=consumer_code,
        is_active=is_active,
        page=paging.page,
        limit=paging.limit,
    )
    return PageResponse[HouseResponse].from_page(page)


@router.get("/lookup/{mohalla_number}/{house_number}", response_model=HouseResponse)
def get_house_by_numbers(mohalla_number: str, house_number: str, db: Session = Depends(get_db)):
    return HouseService(db).get_by_numbers(mohalla_number, house_number)


@router.put("/license-fee", response_model=HouseResponse)
def set_license_fee(
    payload: FeeUpdate,
    db: Session = Depends(get_db),
    actor_id: int | None = Depends(get_actor_id),
):
    return HouseService(db).set_license_fee(
        payload.mohalla_number, payload.house_number, payload.amount, actor_id
    )


@router.put("/residence-fee", response_model=HouseResponse)
def set_residence_fee(
    payload: FeeUpdate,
    db: Session = Depends(get_db),
    actor_id: int | None = Depends(get_actor_id),
):
    return HouseService(db).set_residence_fee(
        payload.mohalla_number, payload.house_number, payload.amount, actor_id
    )


@router.get("/{house_id}", response_model=HouseDetailResponse)
def get_house(house_id: int, db: Session = Depends(get_db)):
    """House with its 5 most recent readings."""
    service = HouseService(db)
    house = service.get(house_id)
    detail = HouseDetailResponse.model_validate(house)
    detail.recent_readings = [
        ReadingResponse.model_validate(reading) for reading in service.recent_readings(house_id)
    ]
    return detail


@router.post("", response_model=HouseResponse, status_code=status.HTTP_201_CREATED)
def create_house(
    payload: HouseCreate,
    db: Session = Depends(get_db),
    actor_id: int | None = Depends(get_actor_id),
):
    """
    Create a house.

    Returns:
        201: Created house
        404: Mohalla not found
        409: Consumer code, meter number or house number already used
    """
    return HouseService(db).create(payload.model_dump(), actor_id)


@router.put("/{house_id}", response_model=HouseResponse)
def update_house(
    house_id: int,
    payload: HouseUpdate,
    db: Session = Depends(get_db),
    actor_id: int | None = Depends(get_actor_id),
):
    return HouseService(db).update(house_id, payload.model_dump(exclude_unset=True), actor_id)


@router.delete("/{house_id}", response_model=HouseResponse)
def deactivate_house(
    house_id: int,
    db: Session = Depends(get_db),
    actor_id: int | None = Depends(get_actor_id),
):
    """Soft delete: the house is kept with is_active=false."""
    return HouseService(db).deactivate(house_id, actor_id)


@router.delete("/{house_id}/permanent", response_model=MessageResponse)
def delete_house_permanently(
    house_id: int,
    db: Session = Depends(get_db),
    actor_id: int | None = Depends(get_actor_id),
):
    """
    Permanently delete a house.

    Returns:
        200: Deleted
        400: House has readings
    """
    HouseService(db).delete_permanently(house_id, actor_id)
    return {"message": "House permanently deleted"}


@router.post("/{house_id}/restore", response_model=HouseResponse)
def restore_house(
    house_id: int,
    db: Session = Depends(get_db),
    actor_id: int | None = Depends(get_actor_id),
):
    return HouseService(db).restore(house_id, actor_id)
