"""
Booking lifecycle.

    pending -> accepted -> in_progress -> completed
    (any non-terminal state) -> cancelled

Every mutation runs as one read-modify-write inside ``transaction``; the
row's version counter turns a concurrent overwrite into a 409.
"""
import logging

from sqlalchemy import or_
from sqlalchemy.ext.asyncio import AsyncSession

from .. import booking_status as bs
from ..errors import (
    BookingNotFound,
    Conflict,
    Forbidden,
    InvalidStatusTransition,
    NotFound,
    ValidationFailed,
)
from ..events import BOOKING_CREATED, BOOKING_STATUS_CHANGED, TRANSACTION_RECORDED, emit
from ..fares import DEFAULT_DISTANCE_KM, calculate_fare, estimate_duration_minutes, haversine_km
from ..models import Booking, Driver, User, Vehicle, utcnow
from ..repository import Repository, transaction
from ..schemas import CreateBooking
from .payments import PAYMENT_PENDING
from .transactions import build_transaction

logger = logging.getLogger(__name__)

RIDER_CANCELLABLE = (bs.PENDING, bs.ACCEPTED)


def _trip_distance(data: CreateBooking) -> float | None:
    if data.distance_km is not None:
        return data.distance_km

    coords = (data.pickup_latitude, data.pickup_longitude, data.dropoff_latitude, data.dropoff_longitude)
    if all(c is not None for c in coords):
        return round(haversine_km(*coords), 2)

    return None


def apply_fare(booking: Booking, vehicle_type: str, distance_km: float | None):
    fare = calculate_fare(distance_km, vehicle_type)

    booking.vehicle_type = vehicle_type
    booking.distance_km = distance_km or DEFAULT_DISTANCE_KM
    booking.duration_minutes = estimate_duration_minutes(distance_km)
    booking.base_fare = fare.base_fare
    booking.distance_fare = fare.distance_fare
    booking.platform_fee = fare.platform_fee
    booking.subtotal = fare.subtotal
    booking.fare = fare.total


def _booking_event(booking: Booking) -> dict:
    return {
        "booking_id": booking.id,
        "rider_id": booking.rider_id,
        "driver_id": booking.driver_id,
        "status": booking.status,
        "vehicle_type": booking.vehicle_type,
        "fare": booking.fare,
    }


async def create_booking(db: AsyncSession, rider: User, data: CreateBooking) -> Booking:
    distance = _trip_distance(data)

    booking = Booking(
        rider_id=rider.id,
        driver_id=None,
        vehicle_id=None,
        pickup_address=data.pickup_address,
        dropoff_address=data.dropoff_address,
        pickup_latitude=data.pickup_latitude,
        pickup_longitude=data.pickup_longitude,
        dropoff_latitude=data.dropoff_latitude,
        dropoff_longitude=data.dropoff_longitude,
        scheduled_date=data.scheduled_date,
        scheduled_time=data.scheduled_time,
        payment_method=data.payment_method,
        distance_km=distance,
        status=bs.PENDING,
        payment_status=PAYMENT_PENDING,
        created_at=utcnow(),
    )

    # fare stays unset until a vehicle type is known
    if data.vehicle_type:
        apply_fare(booking, data.vehicle_type, distance)

    async with transaction(db):
        await Repository(db, Booking).upsert(booking)

    logger.info("booking %s created by rider %s fare=%s", booking.id, rider.id, booking.fare)
    await emit(BOOKING_CREATED, _booking_event(booking))
    return booking


async def get_booking(db: AsyncSession, booking_id: str, viewer: User | None = None) -> Booking:
    booking = await Repository(db, Booking).get(booking_id)
    if not booking:
        raise BookingNotFound(booking_id)

    if viewer:
        _check_can_view(booking, viewer)
    return booking


def _check_can_view(booking: Booking, viewer: User):
    if viewer.role == "admin":
        return
    if viewer.role == "rider" and booking.rider_id == viewer.id:
        return
    if viewer.role == "driver" and (
        booking.driver_id == viewer.id or (booking.status == bs.PENDING and booking.driver_id is None)
    ):
        return
    raise Forbidden("You do not have access to this booking")


def _check_can_update(booking: Booking, actor: User, target: str, driver_id: str | None):
    if actor.role == "admin":
        return

    if actor.role == "rider":
        if booking.rider_id != actor.id:
            raise Forbidden("You do not have access to this booking")
        if target != bs.CANCELLED:
            raise Forbidden("Riders can only cancel bookings")
        if booking.status not in RIDER_CANCELLABLE:
            raise InvalidStatusTransition(booking.status, target)
        return

    if actor.role == "driver":
        if target == bs.ACCEPTED and booking.status == bs.PENDING:
            if driver_id and driver_id != actor.id:
                raise Forbidden("Drivers can only accept bookings for themselves")
            return
        if booking.driver_id != actor.id:
            raise Forbidden("This booking is not assigned to you")
        return

    raise Forbidden("Access forbidden for this role")


async def _check_driver_available(db: AsyncSession, driver_id: str, booking_id: str):
    driver_user = await Repository(db, User).get(driver_id)
    if not driver_user or driver_user.role != "driver":
        raise NotFound("Driver not found")
    if driver_user.status != "active":
        raise Forbidden("Driver account is not active")

    busy = await Repository(db, Booking).count(
        Booking.driver_id == driver_id,
        Booking.status.in_(sorted(bs.ACTIVE)),
        Booking.id != booking_id,
    )
    if busy:
        raise Conflict("Driver already has an active booking")


async def _driver_vehicle(db: AsyncSession, driver_id: str, vehicle_id: str) -> Vehicle:
    vehicle = await Repository(db, Vehicle).get(vehicle_id)
    driver = await Repository(db, Driver).get_by(user_id=driver_id)
    if not vehicle or not driver or vehicle.driver_id != driver.id:
        raise NotFound("Vehicle not found for this driver")
    if not vehicle.is_active:
        raise ValidationFailed("Vehicle is not active")
    return vehicle


async def update_booking_status(
    db: AsyncSession,
    booking_id: str,
    status: str,
    actor: User | None = None,
    driver_id: str | None = None,
    vehicle_id: str | None = None,
    distance_km: float | None = None,
    cancellation_reason: str | None = None,
) -> Booking:
    """
    Move a booking to ``status`` and apply the extra fields that go with it.

    ``driver_id``/``vehicle_id`` are only accepted together with the
    ``accepted`` status. A final ``distance_km`` on completion re-prices
    the trip before the transaction is recorded.
    """
    target = bs.norm(status)
    if not bs.is_valid(target):
        raise ValidationFailed(f"Invalid status: {status}")

    if target != bs.ACCEPTED and (driver_id or vehicle_id):
        raise ValidationFailed("driverId and vehicleId can only be set when accepting a booking")

    if actor and actor.role == "driver" and target == bs.ACCEPTED and not driver_id:
        driver_id = actor.id

    recorded = None

    async with transaction(db):
        booking = await Repository(db, Booking).get(booking_id, for_update=True)
        if not booking:
            raise BookingNotFound(booking_id)

        if actor:
            _check_can_update(booking, actor, target, driver_id)

        if not bs.can_transition(booking.status, target):
            raise InvalidStatusTransition(booking.status, target)

        previous = booking.status

        if target == bs.ACCEPTED:
            if not driver_id:
                raise ValidationFailed("driverId is required to accept a booking")
            await _check_driver_available(db, driver_id, booking.id)

            if vehicle_id:
                vehicle = await _driver_vehicle(db, driver_id, vehicle_id)
                booking.vehicle_id = vehicle.id
                if booking.vehicle_type is None:
                    apply_fare(booking, vehicle.vehicle_type, booking.distance_km)
            elif booking.vehicle_type is None:
                raise ValidationFailed("vehicleId is required when the booking has no vehicle type")

            booking.driver_id = driver_id

        elif target == bs.IN_PROGRESS:
            booking.pickup_time = utcnow()

        elif target == bs.COMPLETED:
            booking.dropoff_time = utcnow()
            if distance_km:
                apply_fare(booking, booking.vehicle_type, distance_km)
            recorded = build_transaction(booking)
            db.add(recorded)

        elif target == bs.CANCELLED:
            booking.cancellation_reason = cancellation_reason

        booking.status = target
        booking.updated_at = utcnow()

    logger.info("booking %s %s -> %s", booking.id, previous, target)
    await emit(BOOKING_STATUS_CHANGED, {**_booking_event(booking), "previous_status": previous})
    if recorded is not None:
        logger.info("transaction %s recorded for booking %s amount=%s", recorded.id, booking.id, recorded.amount)
        await emit(TRANSACTION_RECORDED, {
            "transaction_id": recorded.id,
            "booking_id": booking.id,
            "amount": recorded.amount,
            "commission": recorded.commission,
            "driver_earning": recorded.driver_earning,
            "payment_method": recorded.payment_method,
        })
    return booking


async def accept_booking(
    db: AsyncSession,
    booking_id: str,
    driver_id: str,
    vehicle_id: str | None = None,
    actor: User | None = None,
) -> Booking:
    return await update_booking_status(
        db, booking_id, bs.ACCEPTED, actor=actor, driver_id=driver_id, vehicle_id=vehicle_id
    )


def _list_criteria(status: str | None, search: str | None) -> list:
    criteria = []
    if status:
        s = bs.norm(status)
        if not bs.is_valid(s):
            raise ValidationFailed(f"Invalid status: {status}")
        criteria.append(Booking.status == s)
    if search:
        like = f"%{search.strip()}%"
        criteria.append(or_(Booking.pickup_address.ilike(like), Booking.dropoff_address.ilike(like)))
    return criteria


async def list_bookings_for_user(
    db: AsyncSession,
    user: User,
    status: str | None = None,
    search: str | None = None,
    page: int = 1,
    size: int = 20,
):
    """Riders see what they booked, drivers what they were assigned, admins everything."""
    criteria = _list_criteria(status, search)
    if user.role == "rider":
        criteria.append(Booking.rider_id == user.id)
    elif user.role == "driver":
        criteria.append(Booking.driver_id == user.id)

    return await Repository(db, Booking).page(
        *criteria, order_by=Booking.created_at.desc(), page=page, size=size
    )


async def list_available_bookings(db: AsyncSession, vehicle_type: str | None = None) -> list[Booking]:
    criteria = [Booking.status == bs.PENDING, Booking.driver_id.is_(None)]
    if vehicle_type:
        criteria.append(or_(Booking.vehicle_type == vehicle_type.lower(), Booking.vehicle_type.is_(None)))

    return await Repository(db, Booking).list(*criteria, order_by=Booking.created_at.asc())


async def get_active_booking(db: AsyncSession, driver_id: str) -> Booking:
    """The accepted or in-progress trip a driver is currently on."""
    found = await Repository(db, Booking).list(
        Booking.driver_id == driver_id,
        Booking.status.in_(sorted(bs.ACTIVE)),
        order_by=Booking.updated_at.desc(),
        limit=1,
    )
    if not found:
        raise NotFound("No active booking")
    return found[0]
