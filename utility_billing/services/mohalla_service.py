"""Mohalla management service for database operations."""

import logging

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from utility_billing.api.errors import ConflictError, NotFoundError, ValidationError
from utility_billing.billing.money import ZERO
from utility_billing.billing.types import BillStatus
from utility_billing.models.house import House
from utility_billing.models.mohalla import Mohalla
from utility_billing.models.reading import Reading
from utility_billing.services.audit_service import AuditService
from utility_billing.services.pagination import Page, paginate

logger = logging.getLogger(__name__)


class MohallaService:
    """Service for mohalla CRUD, statistics and bulk creation."""

    def __init__(self, db_session: Session):
        """Initialize with database session."""
        self.db = db_session

    def list_mohallas(self, search: str | None = None, page: int = 1, limit: int = 50) -> Page:
        """List mohallas ordered by number, optionally filtered by name or number."""
        query = self.db.query(Mohalla)
        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(Mohalla.name.ilike(pattern), Mohalla.number.ilike(pattern)))
        return paginate(query.order_by(Mohalla.number.asc()), page, limit)

    def list_all(self) -> list[Mohalla]:
        return self.db.query(Mohalla).order_by(Mohalla.number.asc()).all()

    def get(self, mohalla_id: int) -> Mohalla:
        """Get mohalla by ID.

        Raises:
            NotFoundError: If no mohalla has this ID
        """
        mohalla = self.db.query(Mohalla).filter(Mohalla.id == mohalla_id).first()
        if mohalla is None:
            raise NotFoundError("Mohalla not found")
        return mohalla

    def get_by_number(self, number: str) -> Mohalla:
        mohalla = self.db.query(Mohalla).filter(Mohalla.number == number).first()
        if mohalla is None:
            raise NotFoundError("Mohalla not found")
        return mohalla

    def houses_in(self, mohalla_id: int, is_active: bool | None = None) -> list[House]:
        """Houses in a mohalla ordered by house number."""
        self.get(mohalla_id)
        query = self.db.query(House).filter(House.mohalla_id == mohalla_id)
        if is_active is not None:
            query = query.filter(House.is_active == is_active)
        return query.order_by(House.house_number.asc()).all()

    def create(self, name: str, number: str, actor_id: int | None = None) -> Mohalla:
        """Create a mohalla.

        Raises:
            ConflictError: If the number is already taken
        """
        if self.db.query(Mohalla).filter(Mohalla.number == number).first():
            raise ConflictError("Mohalla with this number already exists")

        mohalla = Mohalla(name=name, number=number)
        self.db.add(mohalla)
        self.db.flush()
        AuditService.log(
            self.db, "mohalla", mohalla.id, "create", actor_id, {"name": name, "number": number}
        )
        self.db.commit()
        self.db.refresh(mohalla)
        logger.info(f"Created mohalla {number} ({name})")
        return mohalla

    def update(
        self,
        mohalla_id: int,
        name: str | None = None,
        number: str | None = None,
        actor_id: int | None = None,
    ) -> Mohalla:
        """Update name and/or number.

        Raises:
            NotFoundError: If the mohalla does not exist
            ConflictError: If the new number belongs to another mohalla
        """
        mohalla = self.get(mohalla_id)
        changes = {}
        if number is not None and number != mohalla.number:
            clash = (
                self.db.query(Mohalla)
                .filter(Mohalla.number == number, Mohalla.id != mohalla_id)
                .first()
            )
            if clash:
                raise ConflictError("Mohalla with this number already exists")
            mohalla.number = number
            changes["number"] = number
        if name is not None and name != mohalla.name:
            mohalla.name = name
            changes["name"] = name

        if changes:
            AuditService.log(self.db, "mohalla", mohalla.id, "update", actor_id, changes)
        self.db.commit()
        self.db.refresh(mohalla)
        return mohalla

    def delete(self, mohalla_id: int, actor_id: int | None = None) -> None:
        """Delete an empty mohalla.

        Raises:
            NotFoundError: If the mohalla does not exist
            ValidationError: If any house still belongs to it
        """
        mohalla = self.get(mohalla_id)
        house_count = self.db.query(House).filter(House.mohalla_id == mohalla_id).count()
        if house_count:
            raise ValidationError(
                f"Cannot delete mohalla with existing houses ({house_count} houses found)"
            )
        AuditService.log(
            self.db, "mohalla", mohalla.id, "delete", actor_id, {"number": mohalla.number}
        )
        self.db.delete(mohalla)
        self.db.commit()
        logger.info(f"Deleted mohalla {mohalla.number}")

    def statistics(self, mohalla_id: int) -> dict:
        """House, reading and bill counts plus revenue collected from paid bills."""
        mohalla = self.get(mohalla_id)

        total_houses = self.db.query(House).filter(House.mohalla_id == mohalla_id).count()
        active_houses = (
            self.db.query(House)
            .filter(House.mohalla_id == mohalla_id, House.is_active.is_(True))
            .count()
        )

        readings = self.db.query(Reading).join(House).filter(House.mohalla_id == mohalla_id)
        status_rows = (
            readings.with_entities(Reading.bill_status, func.count(Reading.id))
            .group_by(Reading.bill_status)
            .all()
        )
        bills = {status.value: 0 for status in BillStatus}
        for status, count in status_rows:
            bills[BillStatus(status).value] = count

        revenue = ZERO
        for reading in readings.filter(Reading.bill_status == BillStatus.PAID).all():
            revenue += reading.paid_amount or ZERO

        return {
            "mohalla": mohalla,
            "houses": {
                "total": total_houses,
                "active": active_houses,
                "inactive": total_houses - active_houses,
            },
            "readings": {"total": readings.count()},
            "bills": bills,
            "revenue": {"total": revenue},
        }

    def bulk_create(self, items: list[dict], actor_id: int | None = None) -> dict:
        """Create many mohallas; each failure is reported and the rest continue."""
        results = {"success": 0, "failed": 0, "errors": []}
        for item in items:
            try:
                self.create(item["name"], item["number"], actor_id)
                results["success"] += 1
            except ConflictError as e:
                self.db.rollback()
                results["failed"] += 1
                results["errors"].append({"number": item["number"], "error": e.message})
        logger.info(
            f"Bulk mohalla create: {results['success']} created, {results['failed']} failed"
        )
        return results


__all__ = ["MohallaService"]
