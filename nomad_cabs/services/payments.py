"""
Settlement of completed bookings.

A booking starts ``pending`` payment. Only a completed trip can be paid,
and a paid booking stays paid: neither a second payment nor a failure
report can change it.
"""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from .. import booking_status as bs
from ..errors import BookingNotFound, Conflict, Forbidden
from ..events import PAYMENT_UPDATED, emit
from ..models import Booking, Transaction, User, utcnow
from ..repository import Repository, transaction

logger = logging.getLogger(__name__)

PAYMENT_PENDING = "pending"
PAYMENT_COMPLETED = "completed"
PAYMENT_FAILED = "failed"


def _check_party(booking: Booking, user: User):
    if user.role == "admin":
        return
    if user.id in (booking.rider_id, booking.driver_id):
        return
    raise Forbidden("You do not have access to this booking")


def _check_payable(booking: Booking):
    if booking.status != bs.COMPLETED:
        raise Conflict(f"Payment can only be made for completed bookings. Current status: {booking.status}")
    if booking.payment_status == PAYMENT_COMPLETED:
        raise Conflict("Payment already completed for this booking")


def payment_details(booking: Booking, message: str | None = None) -> dict:
    return {
        "booking_id": booking.id,
        "payment_id": booking.payment_id,
        "amount": booking.fare,
        "payment_method": booking.payment_method,
        "payment_status": booking.payment_status,
        "paid_at": booking.paid_at,
        "failure_reason": booking.payment_failure_reason,
        "message": message,
    }


async def _locked_booking(db: AsyncSession, booking_id: str) -> Booking:
    booking = await Repository(db, Booking).get(booking_id, for_update=True)
    if not booking:
        raise BookingNotFound(booking_id)
    return booking


async def _settle(db: AsyncSession, booking: Booking, payment_method: str | None):
    if payment_method and payment_method != booking.payment_method:
        booking.payment_method = payment_method
        recorded = await Repository(db, Transaction).get_by(booking_id=booking.id)
        if recorded:
            recorded.payment_method = payment_method

    booking.payment_status = PAYMENT_COMPLETED
    booking.payment_failure_reason = None
    booking.paid_at = utcnow()
    booking.updated_at = booking.paid_at


async def _emit(booking: Booking):
    await emit(PAYMENT_UPDATED, {
        "booking_id": booking.id,
        "payment_status": booking.payment_status,
        "payment_method": booking.payment_method,
        "amount": booking.fare,
    })


async def get_payment(db: AsyncSession, booking_id: str, viewer: User) -> dict:
    booking = await Repository(db, Booking).get(booking_id)
    if not booking:
        raise BookingNotFound(booking_id)
    _check_party(booking, viewer)
    return payment_details(booking)


async def record_payment(
    db: AsyncSession,
    booking_id: str,
    payer: User,
    payment_id: str | None = None,
    payment_method: str | None = None,
) -> dict:
    """Confirm a payment made through the rider's payment provider."""
    async with transaction(db):
        booking = await _locked_booking(db, booking_id)
        _check_party(booking, payer)
        _check_payable(booking)

        booking.payment_id = payment_id
        await _settle(db, booking, payment_method)

    logger.info("payment %s completed for booking %s via %s", payment_id, booking.id, booking.payment_method)
    await _emit(booking)
    return payment_details(booking, "Payment completed successfully")


async def mark_cash_collected(db: AsyncSession, booking_id: str, driver: User) -> dict:
    async with transaction(db):
        booking = await _locked_booking(db, booking_id)
        if booking.driver_id != driver.id:
            raise Forbidden("This booking is not assigned to you")
        _check_payable(booking)

        await _settle(db, booking, "cash")

    logger.info("driver %s collected cash for booking %s", driver.id, booking.id)
    await _emit(booking)
    return payment_details(booking, "Cash payment recorded")


async def mark_payment_failed(db: AsyncSession, booking_id: str, user: User, reason: str | None = None) -> dict:
    async with transaction(db):
        booking = await _locked_booking(db, booking_id)
        _check_party(booking, user)
        if booking.payment_status == PAYMENT_COMPLETED:
            raise Conflict("Payment already completed for this booking")

        booking.payment_status = PAYMENT_FAILED
        booking.payment_failure_reason = (reason or "").strip() or "Unknown error"
        booking.updated_at = utcnow()

    logger.warning("payment failed for booking %s: %s", booking.id, booking.payment_failure_reason)
    await _emit(booking)
    return payment_details(booking, "Payment marked as failed")
