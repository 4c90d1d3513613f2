"""House management service for database operations."""

import logging
from decimal import Decimal

from sqlalchemy.orm import Session

from utility_billing.api.errors import ConflictError, NotFoundError, ValidationError
from utility_billing.billing.money import to_decimal
from utility_billing.models.house import House
from utility_billing.models.mohalla import Mohalla
from utility_billing.models.reading import Reading
from utility_billing.services.audit_service import AuditService
from utility_billing.services.pagination import Page, paginate

logger = logging.getLogger(__name__)

# Optional text fields where an empty string means "not set"
_OPTIONAL_TEXT_FIELDS = (
    "department",
    "electricity_meter_number",
    "water_meter_number",
    "mobile_number",
    "email",
)


def _clean(fields: dict) -> dict:
    cleaned = dict(fields)
    for name in _OPTIONAL_TEXT_FIELDS:
        if cleaned.get(name) == "":
            cleaned[name] = None
    return cleaned


class HouseService:
    """Service for house CRUD, fee updates and soft deletion.

    Houses are soft-deleted (``is_active=False``) so their billing history
    survives; permanent deletion is only possible while no readings exist.
    """

    def __init__(self, db_session: Session):
        """Initialize with database session."""
        self.db = db_session

    def list_houses(
        self,
        mohalla_id: int | None = None,
        mohalla_number: str | None = None,
        house_number: str | None = None,
        consumer_code: str | None = None,
        is_active: bool | None = None,
        page: int = 1,
        limit: int = 50,
    ) -> Page:
        """List houses with optional filters.

        ``house_number`` and ``consumer_code`` match as substrings.
        """
        query = self.db.query(House)
        if mohalla_id is not None:
            query = query.filter(House.mohalla_id == mohalla_id)
        if mohalla_number:
            query = query.join(Mohalla).filter(Mohalla.number == mohalla_number)
        if house_number:
            query = query.filter(House.house_number.contains(house_number))
        if consumer_code:
            query = query.filter(House.consumer_code.contains(consumer_code))
        if is_active is not None:
            query = query.filter(House.is_active == is_active)
        query = query.order_by(House.mohalla_id.asc(), House.house_number.asc())
        return paginate(query, page, limit)

    def get(self, house_id: int) -> House:
        """Get house by ID.

        Raises:
            NotFoundError: If no house has this ID
        """
        house = self.db.query(House).filter(House.id == house_id).first()
        if house is None:
            raise NotFoundError("House not found")
        return house

    def get_by_numbers(self, mohalla_number: str, house_number: str) -> House:
        """Get house by its mohalla number and house number."""
        house = (
            self.db.query(House)
            .join(Mohalla)
            .filter(Mohalla.number == mohalla_number, House.house_number == house_number)
            .first()
        )
        if house is None:
            raise NotFoundError(
                f"House {house_number} not found in mohalla {mohalla_number}"
            )
        return house

    def recent_readings(self, house_id: int, limit: int = 5) -> list[Reading]:
        return (
            self.db.query(Reading)
            .filter(Reading.house_id == house_id)
            .order_by(Reading.month.desc())
            .limit(limit)
            .all()
        )

    def _ensure_unique(self, fields: dict, exclude_id: int | None = None) -> None:
        """Raise ConflictError when a unique field is already used by another house."""
        checks = (
            ("consumer_code", "Consumer code already exists"),
            ("electricity_meter_number", "Electricity meter number already exists"),
            ("water_meter_number", "Water meter number already exists"),
        )
        for name, message in checks:
            value = fields.get(name)
            if not value:
                continue
            query = self.db.query(House).filter(getattr(House, name) == value)
            if exclude_id is not None:
                query = query.filter(House.id != exclude_id)
            if query.first():
                raise ConflictError(message)

        mohalla_id = fields.get("mohalla_id")
        house_number = fields.get("house_number")
        if mohalla_id is not None and house_number:
            query = self.db.query(House).filter(
                House.mohalla_id == mohalla_id, House.house_number == house_number
            )
            if exclude_id is not None:
                query = query.filter(House.id != exclude_id)
            if query.first():
                raise ConflictError("House number already exists in this mohalla")

    def create(self, fields: dict, actor_id: int | None = None) -> House:
        """Create a house in an existing mohalla.

        Raises:
            NotFoundError: If the mohalla does not exist
            ConflictError: If consumer code, meter number or house number is taken
        """
        fields = _clean(fields)
        if not self.db.query(Mohalla).filter(Mohalla.id == fields["mohalla_id"]).first():
            raise NotFoundError("Mohalla not found")
        self._ensure_unique(fields)

        house = House(**fields)
        self.db.add(house)
        self.db.flush()
        AuditService.log(
            self.db,
            "house",
            house.id,
            "create",
            actor_id,
            {"consumer_code": house.consumer_code, "house_number": house.house_number},
        )
        self.db.commit()
        self.db.refresh(house)
        logger.info(f"Created house {house.house_number} (consumer {house.consumer_code})")
        return house

    def update(self, house_id: int, fields: dict, actor_id: int | None = None) -> House:
        """Update the given fields of a house."""
        house = self.get(house_id)
        fields = _clean(fields)
        if "mohalla_id" in fields and fields["mohalla_id"] != house.mohalla_id:
            if not self.db.query(Mohalla).filter(Mohalla.id == fields["mohalla_id"]).first():
                raise NotFoundError("Mohalla not found")

        self._ensure_unique(
            {
                **fields,
                "mohalla_id": fields.get("mohalla_id", house.mohalla_id),
                "house_number": fields.get("house_number", house.house_number),
            },
            exclude_id=house.id,
        )

        changes = {}
        for name, value in fields.items():
            if getattr(house, name) != value:
                setattr(house, name, value)
                changes[name] = value

        if changes:
            AuditService.log(self.db, "house", house.id, "update", actor_id, changes)
        self.db.commit()
        self.db.refresh(house)
        return house

    def _set_fee(
        self, mohalla_number: str, house_number: str, field_name: str, amount, actor_id: int | None
    ) -> House:
        amount = to_decimal(amount)
        if amount < 0:
            raise ValidationError(f"{field_name.replace('_', ' ').capitalize()} cannot be negative")
        house = self.get_by_numbers(mohalla_number, house_number)
        setattr(house, field_name, amount)
        AuditService.log(self.db, "house", house.id, "update", actor_id, {field_name: amount})
        self.db.commit()
        self.db.refresh(house)
        logger.info(f"Set {field_name} of house {house_number}/{mohalla_number} to {amount}")
        return house

    def set_license_fee(
        self, mohalla_number: str, house_number: str, amount: Decimal, actor_id: int | None = None
    ) -> House:
        return self._set_fee(mohalla_number, house_number, "license_fee", amount, actor_id)

    def set_residence_fee(
        self, mohalla_number: str, house_number: str, amount: Decimal, actor_id: int | None = None
    ) -> House:
        return self._set_fee(mohalla_number, house_number, "residence_fee", amount, actor_id)

    def deactivate(self, house_id: int, actor_id: int | None = None) -> House:
        """Soft delete: mark the house inactive."""
        house = self.get(house_id)
        house.is_active = False
        AuditService.log(self.db, "house", house.id, "deactivate", actor_id)
        self.db.commit()
        self.db.refresh(house)
        logger.info(f"Deactivated house {house.id}")
        return house

    def delete_permanently(self, house_id: int, actor_id: int | None = None) -> None:
        """Remove a house row.

        Raises:
            ValidationError: If the house has any readings
        """
        house = self.get(house_id)
        reading_count = self.db.query(Reading).filter(Reading.house_id == house_id).count()
        if reading_count:
            raise ValidationError(
                f"Cannot permanently delete house with existing readings "
                f"({reading_count} readings found)"
            )
        AuditService.log(
            self.db, "house", house.id, "delete", actor_id, {"consumer_code": house.consumer_code}
        )
        self.db.delete(house)
        self.db.commit()
        logger.info(f"Permanently deleted house {house_id}")

    def restore(self, house_id: int, actor_id: int | None = None) -> House:
        """Reactivate a soft-deleted house.

        Raises:
            ConflictError: If the house is already active
        """
        house = self.get(house_id)
        if house.is_active:
            raise ConflictError("House is already active")
        house.is_active = True
        AuditService.log(self.db, "house", house.id, "restore", actor_id)
        self.db.commit()
        self.db.refresh(house)
        return house


__all__ = ["HouseService"]
