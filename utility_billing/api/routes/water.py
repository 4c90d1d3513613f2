"""Water reading API routes."""

from fastapi import APIRouter, Depends, Response, status

from utility_billing.api.deps import (
    PageParams,
    get_page_params,
    get_water_service,
    parse_date,
    parse_month,
)
from utility_billing.schemas.common import BulkResult, PageResponse
from utility_billing.schemas.reading import (
    ReadingResponse,
    WaterBulkUpload,
    WaterUpdate,
    WaterUpload,
)
from utility_billing.services.water_service import WaterReadingService

router = APIRouter(prefix="/api/water", tags=["water"])


@router.get("", response_model=PageResponse[ReadingResponse])
def list_water_readings(
    house_id: int | None = None,
    mohalla_id: int | None = None,
    month: str | None = None,
    start_date: str | None = None,
    end_date: str | None = None,
    paging: PageParams = Depends(get_page_params),
    service: WaterReadingService = Depends(get_water_service),
):
    """List readings that carry water data, newest month first."""
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
def get_water_reading_for_month(
    house_id: int, month: str, service: WaterReadingService = Depends(get_water_service)
):
    return service.get_for_month(house_id, parse_month(month))


@router.post("/house/{house_id}/recalculate")
def recalculate_house_water_readings(
    house_id: int, service: WaterReadingService = Depends(get_water_service)
):
    """Recompute every unbilled water reading of a house in month order."""
    return {"house_id": house_id, "recalculated": service.recalculate_house(house_id)}


@router.get("/{reading_id}", response_model=ReadingResponse)
def get_water_reading(reading_id: int, service: WaterReadingService = Depends(get_water_service)):
    return service.get(reading_id)


@router.post("", response_model=ReadingResponse)
def upload_water_reading(
    payload: WaterUpload,
    response: Response,
    service: WaterReadingService = Depends(get_water_service),
):
    """
    Upload a month's water reading.

    Returns:
        201: New (house, month) record
        200: Existing record (created by an electricity upload) filled in
        404: House not found
        409: Water reading already entered for the month
    """
    reading, created = service.upload(payload.house_id, payload.month, payload.water_reading)
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return reading


@router.post("/bulk", response_model=BulkResult)
def bulk_upload_water_readings(
    payload: WaterBulkUpload, service: WaterReadingService = Depends(get_water_service)
):
    return service.bulk_upload([row.model_dump() for row in payload.readings])


@router.put("/{reading_id}", response_model=ReadingResponse)
def update_water_reading(
    reading_id: int,
    payload: WaterUpdate,
    service: WaterReadingService = Depends(get_water_service),
):
    return service.update(reading_id, payload.water_reading)


@router.post("/{reading_id}/recalculate", response_model=ReadingResponse)
def recalculate_water_reading(
    reading_id: int, service: WaterReadingService = Depends(get_water_service)
):
    return service.recalculate(reading_id)


@router.delete("/{reading_id}", response_model=ReadingResponse)
def delete_water_reading(
    reading_id: int, service: WaterReadingService = Depends(get_water_service)
):
    """Clear the month's water data; the record itself is kept."""
    return service.delete(reading_id)
