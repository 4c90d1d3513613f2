"""Report API routes."""

from decimal import Decimal

from fastapi import APIRouter, Depends, Query

from utility_billing.api.deps import get_report_service, parse_date
from utility_billing.schemas.report import (
    ArrearsResponse,
    CollectionResponse,
    MetricsResponse,
    PendingResponse,
)
from utility_billing.services.report_service import ReportService

router = APIRouter(prefix="/api/reports", tags=["reports"])


@router.get("/metrics", response_model=MetricsResponse)
def get_metrics(today: str | None = None, service: ReportService = Depends(get_report_service)):
    """Revenue, collection rate, pending and overdue totals."""
    return service.metrics(parse_date(today))


@router.get("/collection", response_model=CollectionResponse)
def get_collection_report(
    start_date: str | None = None,
    end_date: str | None = None,
    mohalla_id: int | None = None,
    service: ReportService = Depends(get_report_service),
):
    return CollectionResponse.model_validate(
        service.collection(parse_date(start_date), parse_date(end_date), mohalla_id),
        from_attributes=True,
    )


@router.get("/pending", response_model=PendingResponse)
def get_pending_report(
    mohalla_id: int | None = None,
    min_amount: Decimal | None = Query(None, ge=0),
    service: ReportService = Depends(get_report_service),
):
    return PendingResponse.model_validate(
        service.pending(mohalla_id, min_amount), from_attributes=True
    )


@router.get("/arrears", response_model=ArrearsResponse)
def get_arrears_report(
    mohalla_id: int | None = None, service: ReportService = Depends(get_report_service)
):
    return ArrearsResponse.model_validate(service.arrears(mohalla_id), from_attributes=True)
