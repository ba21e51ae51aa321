import logging
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import COMMISSION_RATE
from ..fares import round_half_up
from ..models import Booking, Transaction
from ..repository import Repository

logger = logging.getLogger(__name__)


def split_amount(amount: float) -> tuple[float, float]:
    """Return (commission, driver_earning) for a fare amount."""
    commission = round_half_up(Decimal(str(amount)) * Decimal(str(COMMISSION_RATE)))
    return commission, amount - commission


def build_transaction(booking: Booking) -> Transaction:
    commission, driver_earning = split_amount(booking.fare)
    return Transaction(
        booking_id=booking.id,
        rider_id=booking.rider_id,
        driver_id=booking.driver_id,
        amount=booking.fare,
        commission=commission,
        driver_earning=driver_earning,
        payment_method=booking.payment_method,
    )


def _criteria(payment_method=None, search=None, driver_id=None):
    criteria = []
    if payment_method:
        criteria.append(Transaction.payment_method == payment_method.lower())
    if search:
        criteria.append(Transaction.booking_id.ilike(f"%{search.strip()}%"))
    if driver_id:
        criteria.append(Transaction.driver_id == driver_id)
    return criteria


async def list_transactions(
    db: AsyncSession,
    payment_method: str | None = None,
    search: str | None = None,
    driver_id: str | None = None,
    page: int = 1,
    size: int = 20,
) -> dict:
    criteria = _criteria(payment_method, search, driver_id)

    items, total = await Repository(db, Transaction).page(
        *criteria, order_by=Transaction.created_at.desc(), page=page, size=size
    )

    res = await db.execute(
        select(
            func.coalesce(func.sum(Transaction.amount), 0),
            func.coalesce(func.sum(Transaction.commission), 0),
            func.coalesce(func.sum(Transaction.driver_earning), 0),
        ).where(*criteria)
    )
    total_amount, total_commission, total_earning = res.one()

    return {
        "items": items,
        "page": max(page, 1),
        "size": size,
        "total": total,
        "total_amount": float(total_amount),
        "total_commission": float(total_commission),
        "total_driver_earning": float(total_earning),
    }
