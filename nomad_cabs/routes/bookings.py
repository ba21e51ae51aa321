from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..db import get_db
from ..models import User
from ..rbac import require_role
from ..schemas import AcceptBooking, BookingOut, CreateBooking, Page, UpdateBookingStatus
from ..security import get_current_user
from ..services import bookings

router = APIRouter(tags=["Bookings"])


@router.post("/bookings", status_code=201, response_model=BookingOut)
async def create_booking(
    data: CreateBooking,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    require_role(user, ["rider"])
    return await bookings.create_booking(db, user, data)


@router.get("/bookings", response_model=Page[BookingOut])
async def list_bookings(
    status: Optional[str] = None,
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=100),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    items, total = await bookings.list_bookings_for_user(db, user, status, search, page, size)
    return {"items": items, "page": page, "size": size, "total": total}


@router.get("/bookings/available", response_model=List[BookingOut])
async def available_bookings(
    vehicle_type: Optional[str] = Query(None, alias="vehicleType"),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    require_role(user, ["driver"])
    return await bookings.list_available_bookings(db, vehicle_type)


@router.get("/bookings/active", response_model=BookingOut)
async def active_booking(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    require_role(user, ["driver"])
    return await bookings.get_active_booking(db, user.id)


@router.get("/bookings/{booking_id}", response_model=BookingOut)
async def get_booking(
    booking_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await bookings.get_booking(db, booking_id, viewer=user)


@router.put("/bookings/{booking_id}/status", response_model=BookingOut)
async def update_status(
    booking_id: str,
    data: UpdateBookingStatus,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await bookings.update_booking_status(
        db,
        booking_id,
        data.status,
        actor=user,
        driver_id=data.driver_id,
        vehicle_id=data.vehicle_id,
        distance_km=data.distance_km,
        cancellation_reason=data.cancellation_reason,
    )


@router.post("/bookings/{booking_id}/accept", response_model=BookingOut)
async def accept_booking(
    booking_id: str,
    data: Optional[AcceptBooking] = Body(None),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    require_role(user, ["driver"])
    vehicle_id = data.vehicle_id if data else None
    return await bookings.accept_booking(db, booking_id, user.id, vehicle_id=vehicle_id, actor=user)
