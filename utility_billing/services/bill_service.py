"""Bill service: generation, payments, overdue marking and chain regeneration."""

import logging
from datetime import date, datetime, timezone
from decimal import Decimal

from sqlalchemy.orm import Query, Session

from utility_billing.api.errors import AppError, ConflictError, NotFoundError, ValidationError
from utility_billing.billing.assembler import (
    PENALTY_RATE,
    assemble_bill,
    carried_arrears,
    ensure_readings_entered,
)
from utility_billing.billing.chain import (
    ChainPeriod,
    ensure_regeneration_allowed,
    is_stale,
    pass_through,
    rebuild_chain,
)
from utility_billing.billing.errors import BillingError
from utility_billing.billing.money import ZERO, quantize_money, to_decimal
from utility_billing.billing.payments import apply_payment
from utility_billing.billing.periods import (
    DEFAULT_DUE_DAY,
    due_date,
    next_month,
    normalize_month,
    previous_month,
)
from utility_billing.billing.types import (
    BILLED_STATUSES,
    BillRecord,
    BillStatus,
    PreviousBillState,
)
from utility_billing.models.house import House
from utility_billing.models.reading import Reading
from utility_billing.services.audit_service import AuditService
from utility_billing.services.pagination import Page, paginate
from utility_billing.services.reading_service import (
    ReadingLookups,
    bill_record,
    charge_components,
    previous_state,
)

logger = logging.getLogger(__name__)

# Outstanding bills: generated and not fully paid
UNPAID_STATUSES = (BillStatus.GENERATED, BillStatus.PARTIALLY_PAID, BillStatus.OVERDUE)


def _store_bill(reading: Reading, bill: BillRecord) -> None:
    reading.bill1_standard = bill.bill1_standard
    reading.bill1_penalty = bill.bill1_penalty
    reading.bill2_standard = bill.bill2_standard
    reading.bill2_penalty = bill.bill2_penalty
    reading.total_standard = bill.total_standard
    reading.total_penalty = bill.total_penalty


def outstanding_amount(reading: Reading) -> Decimal:
    """Unpaid part of a bill's post-penalty total."""
    if reading.bill_status not in UNPAID_STATUSES:
        return ZERO
    return max(to_decimal(reading.total_penalty) - to_decimal(reading.paid_amount), ZERO)


class BillService(ReadingLookups):
    """Service for bills.

    Wraps the billing engine: loads history for a (house, month), calls the
    engine with plain values and persists its output verbatim.
    """

    def __init__(
        self,
        db_session: Session,
        penalty_rate: Decimal = PENALTY_RATE,
        due_day: int = DEFAULT_DUE_DAY,
    ):
        super().__init__(db_session)
        self.penalty_rate = penalty_rate
        self.due_day = due_day

    def list_bills(
        self,
        house_id: int | None = None,
        mohalla_id: int | None = None,
        month: date | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        status: BillStatus | None = None,
        page: int = 1,
        limit: int = 50,
    ) -> Page:
        query = self.filtered(house_id, mohalla_id, month, start_date, end_date)
        if status is not None:
            query = query.filter(Reading.bill_status == status)
        return paginate(query, page, limit)

    def update_other_charges(
        self, house_id: int, month: date, other_charges, actor_id: int | None = None
    ) -> Reading:
        """Set the miscellaneous bill-2 amount of a period before its bill exists.

        Raises:
            NotFoundError: If the house or its reading for the month is missing
            ValidationError: If the amount is negative or the bill is generated
        """
        amount = to_decimal(other_charges)
        if amount < 0:
            raise ValidationError("Other charges cannot be negative")
        self.get_house(house_id)
        reading = self.get_for_month(house_id, month)
        if reading.bill_status in BILLED_STATUSES:
            raise ValidationError(
                "Bill is already generated; regenerate the chain after correcting charges"
            )
        reading.other_charges = amount
        AuditService.log(
            self.db, "bill", reading.id, "update_other_charges", actor_id, {"other_charges": amount}
        )
        self.db.commit()
        self.db.refresh(reading)
        return reading

    def _billed(self, house_id: int) -> Query:
        return self.db.query(Reading).filter(
            Reading.house_id == house_id, Reading.bill_status.in_(list(BILLED_STATUSES))
        )

    def next_billed(self, house_id: int, month: date) -> Reading | None:
        """Earliest bill of the house after ``month``."""
        return (
            self._billed(house_id)
            .filter(Reading.month > month)
            .order_by(Reading.month.asc())
            .first()
        )

    def chain_state(self, house_id: int, month: date) -> PreviousBillState | None:
        """State that the bill of ``month`` is assembled against.

        A billed previous month is used as is. An unbilled one passes on the
        arrears of the latest earlier bill, so a month that could not be
        billed (such as a net-export month) never drops unpaid balances.

        Returns:
            None when the previous month has no reading
        """
        predecessor = self.find_for_month(house_id, previous_month(month))
        if predecessor is None:
            return None
        if predecessor.bill_status in BILLED_STATUSES:
            return previous_state(predecessor)
        earlier = (
            self._billed(house_id)
            .filter(Reading.month < predecessor.month)
            .order_by(Reading.month.desc())
            .first()
        )
        return pass_through(previous_state(earlier), predecessor.bill_version)

    def _assemble(self, house: House, reading: Reading) -> None:
        """Assemble and store the bill of one period (no commit)."""
        ensure_readings_entered(reading.electricity_import_reading, reading.water_reading)

        successor = self.next_billed(house.id, reading.month)
        if successor is not None:
            ensure_regeneration_allowed(reading.month, successor.bill_status, successor.month)
        if reading.bill_status in (BillStatus.PAID, BillStatus.PARTIALLY_PAID):
            raise ConflictError(
                "Bill already has a payment recorded; regenerate the chain instead"
            )

        state = self.chain_state(house.id, reading.month)
        bill1_arrear, bill2_arrear = carried_arrears(state)
        bill = assemble_bill(
            charge_components(reading, house), bill1_arrear, bill2_arrear, self.penalty_rate
        )

        _store_bill(reading, bill)
        reading.license_fee = house.license_fee
        reading.residence_fee = house.residence_fee
        reading.bill_status = BillStatus.GENERATED
        reading.bill_generated_at = datetime.now(timezone.utc)
        reading.bill_version += 1
        reading.previous_bill_version = state.bill_version

    def generate(self, house_id: int, month: date, actor_id: int | None = None) -> Reading:
        """Generate the bill of a house for a month.

        Raises:
            NotFoundError: If the house or its reading for the month is missing
            ReadingNotEnteredError: If the electricity or water reading is zero
            StaleChainError: If a later month is already billed
            MissingPreviousPeriodError: If the previous month has no reading
            UnconfiguredTariffError: If a whole bill side is zero
        """
        house = self.get_house(house_id)
        reading = self.get_for_month(house_id, month)
        self._assemble(house, reading)
        AuditService.log(
            self.db,
            "bill",
            reading.id,
            "generate",
            actor_id,
            {
                "month": reading.month,
                "total_standard": reading.total_standard,
                "total_penalty": reading.total_penalty,
                "bill_version": reading.bill_version,
            },
        )
        self.db.commit()
        self.db.refresh(reading)
        logger.info(
            f"Generated bill for house {house_id} {reading.month:%Y-%m}: "
            f"{reading.total_standard} / {reading.total_penalty}"
        )
        return reading

    def bulk_generate(self, mohalla_id: int, month: date, actor_id: int | None = None) -> dict:
        """Generate bills for every active house of a mohalla.

        Houses whose bill already exists are skipped; failures are reported
        per house and the rest continue.

        Raises:
            NotFoundError: If the mohalla has no active house
        """
        month = normalize_month(month)
        houses = (
            self.db.query(House)
            .filter(House.mohalla_id == mohalla_id, House.is_active.is_(True))
            .order_by(House.house_number.asc())
            .all()
        )
        if not houses:
            raise NotFoundError("No active houses found in this mohalla")

        results = {"success": 0, "failed": 0, "skipped": 0, "errors": [], "generated": []}
        for house in houses:
            reading = self.find_for_month(house.id, month)
            if reading is None:
                results["failed"] += 1
                results["errors"].append(
                    {
                        "house_number": house.house_number,
                        "error": "Reading not found for this month",
                    }
                )
                continue
            if reading.bill_status in BILLED_STATUSES:
                results["skipped"] += 1
                results["errors"].append(
                    {
                        "house_number": house.house_number,
                        "error": f"Bill already {reading.bill_status.value.lower()}",
                    }
                )
                continue
            try:
                reading = self.generate(house.id, month, actor_id)
            except (AppError, BillingError) as e:
                self.db.rollback()
                results["failed"] += 1
                results["errors"].append({"house_number": house.house_number, "error": str(e)})
                logger.warning(f"Bill not generated for house {house.house_number}: {e}")
                continue
            results["success"] += 1
            results["generated"].append(
                {
                    "house_number": house.house_number,
                    "reading_id": reading.id,
                    "total_penalty": reading.total_penalty,
                }
            )

        logger.info(
            f"Bulk bill generation for mohalla {mohalla_id} {month:%Y-%m}: "
            f"{results['success']} generated, {results['failed']} failed, "
            f"{results['skipped']} skipped"
        )
        return results

    def record_payment(
        self, reading_id: int, amount, paid_on: date, actor_id: int | None = None
    ) -> Reading:
        """Record a payment against a generated bill.

        Payments accumulate; the running total is compared with the
        post-penalty amount.

        Raises:
            NotFoundError: If the reading does not exist
            InvalidPaymentStateError: If the bill is not generated
            InvalidPaymentAmountError: If amount is not positive
        """
        reading = self.get(reading_id)
        outcome = apply_payment(bill_record(reading), amount, reading.paid_amount)

        reading.paid_amount = quantize_money(to_decimal(reading.paid_amount) + to_decimal(amount))
        reading.paid_on = paid_on
        reading.bill_status = outcome.status
        reading.bill1_arrear = outcome.bill1_arrear
        reading.bill2_arrear = outcome.bill2_arrear
        reading.bill_version += 1

        AuditService.log(
            self.db,
            "bill",
            reading.id,
            "payment",
            actor_id,
            {
                "amount": to_decimal(amount),
                "paid_amount": reading.paid_amount,
                "paid_on": paid_on,
                "status": outcome.status,
            },
        )
        self.db.commit()
        self.db.refresh(reading)
        logger.info(
            f"Payment of {amount} on reading {reading_id}: {outcome.status.value} "
            f"(arrears {outcome.bill1_arrear} / {outcome.bill2_arrear})"
        )

        successor = self.next_billed(reading.house_id, reading.month)
        if successor is not None:
            logger.warning(
                f"Bill {successor.id} for {successor.month:%Y-%m} is now stale; "
                f"regenerate the chain from {reading.month:%Y-%m}"
            )
        return reading

    def summary(self, house_id: int, today: date | None = None) -> dict:
        """Totals paid, pending and overdue for a house plus its 5 latest bills.

        Months whose bill was never generated are not counted.
        """
        self.get_house(house_id)
        today = today or date.today()
        readings = self._billed(house_id).order_by(Reading.month.desc()).all()

        total_paid = ZERO
        total_pending = ZERO
        total_overdue = ZERO
        for reading in readings:
            if reading.bill_status == BillStatus.PAID:
                total_paid += to_decimal(reading.paid_amount)
            elif reading.bill_status == BillStatus.OVERDUE:
                total_overdue += to_decimal(reading.total_penalty)
            elif reading.bill_status == BillStatus.GENERATED:
                if today > due_date(reading.month, self.due_day):
                    total_overdue += to_decimal(reading.total_penalty)
                else:
                    total_pending += to_decimal(reading.total_standard)
            elif reading.bill_status == BillStatus.PARTIALLY_PAID:
                total_pending += outstanding_amount(reading)

        return {
            "house_id": house_id,
            "total_bills": len(readings),
            "total_paid": total_paid,
            "total_pending": total_pending,
            "total_overdue": total_overdue,
            "recent_bills": readings[:5],
        }

    def mark_overdue_bills(self, today: date | None = None, actor_id: int | None = None) -> int:
        """Move GENERATED bills past their due date to OVERDUE.

        Returns:
            Number of bills marked
        """
        today = today or date.today()
        marked = 0
        generated = self.db.query(Reading).filter(Reading.bill_status == BillStatus.GENERATED).all()
        for reading in generated:
            if today > due_date(reading.month, self.due_day):
                reading.bill_status = BillStatus.OVERDUE
                AuditService.log(self.db, "bill", reading.id, "mark_overdue", actor_id)
                marked += 1
        self.db.commit()
        logger.info(f"Marked {marked} bills overdue as of {today}")
        return marked

    def stale_bills(self, house_id: int | None = None) -> list[dict]:
        """Bills assembled against an older version of the bill they carry from."""
        query = self.db.query(Reading).filter(
            Reading.bill_status.in_(list(BILLED_STATUSES)),
            Reading.previous_bill_version.isnot(None),
        )
        if house_id is not None:
            query = query.filter(Reading.house_id == house_id)

        stale = []
        for reading in query.order_by(Reading.house_id.asc(), Reading.month.asc()).all():
            state = self.chain_state(reading.house_id, reading.month)
            if state is None:
                continue
            if is_stale(reading.previous_bill_version, state.bill_version):
                stale.append({"reading": reading, "predecessor_version": state.bill_version})
        return stale

    def regenerate_chain(
        self, house_id: int, from_month: date, actor_id: int | None = None
    ) -> list[Reading]:
        """Recompute a house's bills from ``from_month`` forward.

        Covers the consecutive run of months starting at ``from_month``.
        Recorded payments are re-applied to the recomputed amounts.

        Raises:
            NotFoundError: If the house or its reading for from_month is missing
            MissingPreviousPeriodError: If the month before from_month has no reading
        """
        house = self.get_house(house_id)
        from_month = normalize_month(from_month)
        first = self.get_for_month(house_id, from_month)

        run = [first]
        for reading in (
            self.db.query(Reading)
            .filter(Reading.house_id == house_id, Reading.month > from_month)
            .order_by(Reading.month.asc())
        ):
            if reading.month != next_month(run[-1].month):
                break
            run.append(reading)

        opening = self.chain_state(house_id, from_month)
        periods = [
            ChainPeriod(
                month=reading.month,
                charges=charge_components(reading, house if reading.license_fee is None else None),
                status=reading.bill_status,
                paid_amount=reading.paid_amount,
                bill_version=reading.bill_version,
            )
            for reading in run
        ]
        results = rebuild_chain(opening, periods, self.penalty_rate)

        regenerated = []
        for reading, result in zip(run, results):
            if result.bill is None:
                continue
            _store_bill(reading, result.bill)
            reading.bill_status = result.status
            reading.bill_version = result.bill_version
            reading.previous_bill_version = result.previous_bill_version
            if result.outcome is not None:
                reading.bill1_arrear = result.outcome.bill1_arrear
                reading.bill2_arrear = result.outcome.bill2_arrear
            regenerated.append(reading.month)

        AuditService.log(
            self.db,
            "house",
            house_id,
            "regenerate_chain",
            actor_id,
            {"from_month": from_month, "months": regenerated},
        )
        self.db.commit()
        for reading in run:
            self.db.refresh(reading)
        logger.info(
            f"Regenerated {len(regenerated)} bills for house {house_id} from {from_month:%Y-%m}"
        )
        return run


__all__ = ["BillService", "UNPAID_STATUSES", "outstanding_amount"]
