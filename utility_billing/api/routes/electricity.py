"""Electricity reading API routes."""

from fastapi import APIRouter, Depends, Response, status

from utility_billing.api.deps import (
    PageParams,
    get_electricity_service,
    get_page_params,
    parse_date,
    parse_month,
)
from utility_billing.schemas.common import BulkResult, MessageResponse, PageResponse
from utility_billing.schemas.reading import (
    ElectricityBulkUpload,
    ElectricityUpdate,
    ElectricityUpload,
    ReadingResponse,
)
from utility_billing.services.electricity_service import ElectricityReadingService

router = APIRouter(prefix="/api/electricity", tags=["electricity"])


@router.get("", response_model=PageResponse[ReadingResponse])
def list_electricity_readings(
    house_id: int | None = None,
    mohalla_id: int | None = None,
    month: str | None = None,
    start_date: str | None = None,
    end_date: str | None = None,
    paging: PageParams = Depends(get_page_params),
    service: ElectricityReadingService = Depends(get_electricity_service),
):
    """List readings with an entered import value, newest month first."""
    page = service.list_readings(
        house_id=house_id,
        mohalla_id=mohalla_id,
        month=parse_month(month),
        start_date=parse_date(start_date),
        end_date=parse_date(end_date),
        page=paging.page,
        limit=paging.limit,
    )
    return PageResponse[ReadingResponse].from_page(page)


@router.get("/house/{house_id}/month/{month}", response_model=ReadingResponse)
def get_electricity_reading_for_month(
    house_id: int,
    month: str,
    service: ElectricityReadingService = Depends(get_electricity_service),
):
    return service.get_for_month(house_id, parse_month(month))


@router.get("/{reading_id}", response_model=ReadingResponse)
def get_electricity_reading(
    reading_id: int, service: ElectricityReadingService = Depends(get_electricity_service)
):
    return service.get(reading_id)


@router.post("", response_model=ReadingResponse)
def upload_electricity_reading(
    payload: ElectricityUpload,
    response: Response,
    service: ElectricityReadingService = Depends(get_electricity_service),
):
    """
    Upload a month's electricity reading.

    Returns:
        201: New (house, month) record
        200: Existing record (created by a water upload) filled in
        404: House not found
        409: Electricity reading already entered for the month
    """
    reading, created = service.upload(
        payload.house_id,
        payload.month,
        payload.import_reading,
        payload.export_reading,
        payload.max_demand,
    )
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return reading


@router.post("/bulk", response_model=BulkResult)
def bulk_upload_electricity_readings(
    payload: ElectricityBulkUpload,
    service: ElectricityReadingService = Depends(get_electricity_service),
):
    return service.bulk_upload([row.model_dump() for row in payload.readings])


@router.put("/{reading_id}", response_model=ReadingResponse)
def update_electricity_reading(
    reading_id: int,
    payload: ElectricityUpdate,
    service: ElectricityReadingService = Depends(get_electricity_service),
):
    return service.update(
        reading_id, payload.import_reading, payload.export_reading, payload.max_demand
    )


@router.post("/{reading_id}/recalculate", response_model=ReadingResponse)
def recalculate_electricity_reading(
    reading_id: int, service: ElectricityReadingService = Depends(get_electricity_service)
):
    """Recompute consumption and charges with the current rates."""
    return service.recalculate(reading_id)


@router.delete("/{reading_id}", response_model=MessageResponse)
def delete_electricity_reading(
    reading_id: int, service: ElectricityReadingService = Depends(get_electricity_service)
):
    service.delete(reading_id)
    return {"message": "Electricity reading deleted successfully"}
