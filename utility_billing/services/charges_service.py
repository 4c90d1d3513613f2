"""Tariff rate management service."""

import logging

from sqlalchemy.orm import Session

from utility_billing.api.errors import NotFoundError, ValidationError
from utility_billing.billing.money import to_decimal
from utility_billing.billing.types import TARIFF_RATE_NAMES, TariffRates
from utility_billing.models.charge import Charge
from utility_billing.services.audit_service import AuditService

logger = logging.getLogger(__name__)


class ChargesService:
    """Service for named tariff rates (``charges`` table)."""

    def __init__(self, db_session: Session):
        """Initialize with database session."""
        self.db = db_session

    def list_charges(self) -> list[Charge]:
        return self.db.query(Charge).order_by(Charge.name.asc()).all()

    def get(self, charge_id: int) -> Charge:
        charge = self.db.query(Charge).filter(Charge.id == charge_id).first()
        if charge is None:
            raise NotFoundError("Charge not found")
        return charge

    def get_by_name(self, name: str) -> Charge:
        charge = self.db.query(Charge).filter(Charge.name == name).first()
        if charge is None:
            raise NotFoundError(f"Charge '{name}' not found")
        return charge

    def get_tariff_rates(self) -> TariffRates:
        """Current rates as engine input; unset rates read as zero."""
        rates = {charge.name: charge.amount for charge in self.list_charges()}
        return TariffRates.from_mapping(rates)

    def _upsert(self, name: str, amount, actor_id: int | None) -> tuple[Charge, bool]:
        amount = to_decimal(amount)
        if amount < 0:
            raise ValidationError("Charge amount cannot be negative")

        charge = self.db.query(Charge).filter(Charge.name == name).first()
        created = charge is None
        if created:
            charge = Charge(name=name, amount=amount)
            self.db.add(charge)
            self.db.flush()
            changes = {"amount": amount}
        else:
            changes = {"amount": amount, "previous_amount": charge.amount}
            charge.amount = amount

        AuditService.log(
            self.db, "charge", charge.id, "create" if created else "update", actor_id, changes
        )
        return charge, created

    def upsert(self, name: str, amount, actor_id: int | None = None) -> tuple[Charge, bool]:
        """Create or update a rate by name.

        Returns:
            (charge, created) where created is True for a new row
        """
        charge, created = self._upsert(name, amount, actor_id)
        self.db.commit()
        self.db.refresh(charge)
        logger.info(f"{'Created' if created else 'Updated'} charge {name} = {charge.amount}")
        return charge, created

    def bulk_upsert(self, items: list[dict], actor_id: int | None = None) -> list[dict]:
        """Upsert several rates in one transaction.

        Returns:
            Per-item results: {"name", "amount", "action"} with action "created"
            or "updated"
        """
        results = []
        for item in items:
            charge, created = self._upsert(item["name"], item["amount"], actor_id)
            results.append(
                {
                    "name": charge.name,
                    "amount": charge.amount,
                    "action": "created" if created else "updated",
                }
            )
        self.db.commit()
        logger.info(f"Bulk upserted {len(results)} charges")
        return results

    def delete(self, charge_id: int, actor_id: int | None = None) -> None:
        charge = self.get(charge_id)
        AuditService.log(self.db, "charge", charge.id, "delete", actor_id, {"name": charge.name})
        self.db.delete(charge)
        self.db.commit()
        logger.info(f"Deleted charge {charge.name}")

    def initialize_defaults(self, actor_id: int | None = None) -> list[Charge]:
        """Create any missing standard rate at 0; existing values are kept.

        Returns:
            The charges that were created
        """
        existing = {name for (name,) in self.db.query(Charge.name).all()}
        created = []
        for name in TARIFF_RATE_NAMES:
            if name in existing:
                continue
            charge, _ = self._upsert(name, 0, actor_id)
            created.append(charge)
        self.db.commit()
        logger.info(f"Initialized {len(created)} default charges")
        return created


__all__ = ["ChargesService"]
