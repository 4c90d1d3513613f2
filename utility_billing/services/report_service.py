"""Collection, pending and arrears reports over generated bills."""

import logging
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy.orm import Query, Session

from utility_billing.billing.money import ZERO, to_decimal
from utility_billing.billing.periods import DEFAULT_DUE_DAY, due_date
from utility_billing.billing.types import BILLED_STATUSES, BillStatus
from utility_billing.models.house import House
from utility_billing.models.mohalla import Mohalla
from utility_billing.models.reading import Reading
from utility_billing.services.bill_service import UNPAID_STATUSES, outstanding_amount

logger = logging.getLogger(__name__)


class ReportService:
    """Read-only aggregates for the admin dashboard and reports."""

    def __init__(self, db_session: Session, due_day: int = DEFAULT_DUE_DAY):
        """Initialize with database session."""
        self.db = db_session
        self.due_day = due_day

    def _bills(self, mohalla_id: int | None = None) -> Query:
        query = self.db.query(Reading).filter(Reading.bill_status.in_(list(BILLED_STATUSES)))
        if mohalla_id is not None:
            query = query.join(House).filter(House.mohalla_id == mohalla_id)
        return query

    def _is_overdue(self, reading: Reading, today: date) -> bool:
        if reading.bill_status == BillStatus.OVERDUE:
            return True
        return reading.bill_status == BillStatus.GENERATED and today > due_date(
            reading.month, self.due_day
        )

    def metrics(self, today: date | None = None) -> dict:
        """Dashboard totals.

        The collection rate is collected / billed as a percentage, where
        billed is the sum of post-penalty totals.
        """
        today = today or date.today()
        bills = self._bills().all()

        total_billed = sum((to_decimal(b.total_penalty) for b in bills), ZERO)
        total_collected = sum((to_decimal(b.paid_amount) for b in bills), ZERO)
        pending_amount = ZERO
        overdue_amount = ZERO
        overdue_count = 0
        for bill in bills:
            outstanding = outstanding_amount(bill)
            if self._is_overdue(bill, today):
                overdue_amount += outstanding
                overdue_count += 1
            else:
                pending_amount += outstanding

        collection_rate = ZERO
        if total_billed > 0:
            collection_rate = (total_collected * 100 / total_billed).quantize(
                Decimal("0.01"), rounding=ROUND_HALF_UP
            )

        return {
            "total_mohallas": self.db.query(Mohalla).count(),
            "active_houses": self.db.query(House).filter(House.is_active.is_(True)).count(),
            "total_bills": len(bills),
            "total_billed": total_billed,
            "total_collected": total_collected,
            "collection_rate": collection_rate,
            "pending_amount": pending_amount,
            "overdue_amount": overdue_amount,
            "overdue_count": overdue_count,
        }

    def collection(
        self,
        start_date: date | None = None,
        end_date: date | None = None,
        mohalla_id: int | None = None,
    ) -> dict:
        """Payments received between two dates (inclusive)."""
        query = self._bills(mohalla_id).filter(Reading.paid_amount.isnot(None))
        if start_date is not None:
            query = query.filter(Reading.paid_on >= start_date)
        if end_date is not None:
            query = query.filter(Reading.paid_on <= end_date)
        payments = query.order_by(Reading.paid_on.desc(), Reading.id.desc()).all()
        return {
            "items": payments,
            "count": len(payments),
            "total_collected": sum((to_decimal(p.paid_amount) for p in payments), ZERO),
        }

    def pending(self, mohalla_id: int | None = None, min_amount=None) -> dict:
        """Bills with an unpaid balance of at least ``min_amount``, largest first."""
        threshold = to_decimal(min_amount)
        rows = []
        for bill in self._bills(mohalla_id).filter(Reading.bill_status.in_(UNPAID_STATUSES)).all():
            outstanding = outstanding_amount(bill)
            if outstanding > 0 and outstanding >= threshold:
                rows.append({"reading": bill, "outstanding": outstanding})
        rows.sort(key=lambda row: row["outstanding"], reverse=True)
        return {
            "items": rows,
            "count": len(rows),
            "total_pending": sum((row["outstanding"] for row in rows), ZERO),
        }

    def arrears(self, mohalla_id: int | None = None) -> dict:
        """Houses whose latest bill still carries an unpaid balance.

        A partially paid bill carries its recorded arrears; an unpaid bill
        carries its full post-penalty amounts.
        """
        query = self.db.query(House).filter(House.is_active.is_(True))
        if mohalla_id is not None:
            query = query.filter(House.mohalla_id == mohalla_id)

        rows = []
        for house in query.order_by(House.mohalla_id.asc(), House.house_number.asc()).all():
            latest = (
                self._bills()
                .filter(Reading.house_id == house.id)
                .order_by(Reading.month.desc())
                .first()
            )
            if latest is None or latest.bill_status == BillStatus.PAID:
                continue
            if latest.bill_status == BillStatus.PARTIALLY_PAID:
                bill1, bill2 = to_decimal(latest.bill1_arrear), to_decimal(latest.bill2_arrear)
            else:
                bill1, bill2 = to_decimal(latest.bill1_penalty), to_decimal(latest.bill2_penalty)
            if bill1 + bill2 <= 0:
                continue
            rows.append(
                {
                    "house": house,
                    "month": latest.month,
                    "bill_status": latest.bill_status,
                    "bill1_arrear": bill1,
                    "bill2_arrear": bill2,
                    "total_arrear": bill1 + bill2,
                }
            )
        logger.debug(f"Arrears report: {len(rows)} houses")
        return {
            "items": rows,
            "count": len(rows),
            "total_arrears": sum((row["total_arrear"] for row in rows), ZERO),
        }


__all__ = ["ReportService"]
