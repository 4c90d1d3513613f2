"""Bill API routes: generation, payments, overdue marking and chain repair."""

from fastapi import APIRouter, Depends

from utility_billing.api.deps import (
    PageParams,
    get_actor_id,
    get_bill_service,
    get_page_params,
    parse_date,
    parse_month,
)
from utility_billing.billing.types import BillStatus
from utility_billing.schemas.bill import (
    BillSummaryResponse,
    BulkGenerateRequest,
    BulkGenerateResult,
    GenerateBillRequest,
    MarkOverdueRequest,
    MarkOverdueResponse,
    OtherChargesUpdate,
    PaymentRequest,
    RegenerateChainRequest,
    StaleBillResponse,
)
from utility_billing.schemas.common import PageResponse
from utility_billing.schemas.reading import ReadingResponse
from utility_billing.services.bill_service import BillService

router = APIRouter(prefix="/api/bills", tags=["bills"])


@router.get("", response_model=PageResponse[ReadingResponse])
def list_bills(
    house_id: int | None = None,
    mohalla_id: int | None = None,
    month: str | None = None,
    start_date: str | None = None,
    end_date: str | None = None,
    bill_status: BillStatus | None = None,
    paging: PageParams = Depends(get_page_params),
    service: BillService = Depends(get_bill_service),
):
    page = service.list_bills(
        house_id=house_id,
        mohalla_id=mohalla_id,
        month=parse_month(month),
        start_date=parse_date(start_date),
        end_date=parse_date(end_date),
        status=bill_status,
        page=paging.page,
        limit=paging.limit,
    )
    return PageResponse[ReadingResponse].from_page(page)


@router.get("/stale", response_model=list[StaleBillResponse])
def list_stale_bills(house_id: int | None = None, service: BillService = Depends(get_bill_service)):
    """Bills assembled against an older version of the previous month's bill."""
    return service.stale_bills(house_id)


@router.get("/summary/{house_id}", response_model=BillSummaryResponse)
def get_bill_summary(
    house_id: int, today: str | None = None, service: BillService = Depends(get_bill_service)
):
    """Paid, pending and overdue totals for a house plus its latest bills."""
    return service.summary(house_id, parse_date(today))


@router.get("/{reading_id}", response_model=ReadingResponse)
def get_bill(reading_id: int, service: BillService = Depends(get_bill_service)):
    return service.get(reading_id)


@router.put("/other-charges", response_model=ReadingResponse)
def update_other_charges(
    payload: OtherChargesUpdate,
    service: BillService = Depends(get_bill_service),
    actor_id: int | None = Depends(get_actor_id),
):
    return service.update_other_charges(
        payload.house_id, payload.month, payload.other_charges, actor_id
    )


@router.post("/generate", response_model=ReadingResponse)
def generate_bill(
    payload: GenerateBillRequest,
    service: BillService = Depends(get_bill_service),
    actor_id: int | None = Depends(get_actor_id),
):
    """
    Generate the bill of a house for a month.

    Returns:
        200: Reading with the assembled bill
        400: Reading not entered, previous month missing, or rates unconfigured
        404: House or reading not found
        409: Following month already billed (regenerate the chain instead)
    """
    return service.generate(payload.house_id, payload.month, actor_id)


@router.post("/bulk-generate", response_model=BulkGenerateResult)
def bulk_generate_bills(
    payload: BulkGenerateRequest,
    service: BillService = Depends(get_bill_service),
    actor_id: int | None = Depends(get_actor_id),
):
    return service.bulk_generate(payload.mohalla_id, payload.month, actor_id)


@router.post("/payment", response_model=ReadingResponse)
def record_payment(
    payload: PaymentRequest,
    service: BillService = Depends(get_bill_service),
    actor_id: int | None = Depends(get_actor_id),
):
    """
    Record a payment against a generated bill.

    Returns:
        200: Reading with updated status and arrears
        400: Bill not generated, or amount not positive
        404: Reading not found
    """
    return service.record_payment(payload.reading_id, payload.amount, payload.paid_on, actor_id)


@router.post("/mark-overdue", response_model=MarkOverdueResponse)
def mark_overdue_bills(
    payload: MarkOverdueRequest,
    service: BillService = Depends(get_bill_service),
    actor_id: int | None = Depends(get_actor_id),
):
    return {"marked": service.mark_overdue_bills(payload.today, actor_id)}


@router.post("/regenerate-chain", response_model=list[ReadingResponse])
def regenerate_chain(
    payload: RegenerateChainRequest,
    service: BillService = Depends(get_bill_service),
    actor_id: int | None = Depends(get_actor_id),
):
    """Recompute a house's bills from from_month forward, re-applying payments."""
    return service.regenerate_chain(payload.house_id, payload.from_month, actor_id)
