"""Audit log API routes."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from utility_billing.api.deps import PageParams, get_page_params
from utility_billing.schemas.audit import AuditLogResponse
from utility_billing.schemas.common import PageResponse
from utility_billing.services.audit_service import AuditService
from utility_billing.services.db import get_db

router = APIRouter(prefix="/api/audit-logs", tags=["audit"])


@router.get("", response_model=PageResponse[AuditLogResponse])
def list_audit_logs(
    entity_type: str | None = None,
    entity_id: int | None = None,
    paging: PageParams = Depends(get_page_params),
    db: Session = Depends(get_db),
):
    """Audit entries, newest first."""
    page = AuditService.list_entries(db, entity_type, entity_id, paging.page, paging.limit)
    return PageResponse[AuditLogResponse].from_page(page)
