from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .. import booking_status
from ..db import get_db
from ..models import Booking, Transaction, User
from ..rbac import ROLES, require_role
from ..schemas import (
    BookingOut,
    DriverOut,
    Page,
    ReviewDocument,
    StatsOut,
    TransactionPage,
    UpdateUserStatus,
    UserOut,
    VehicleOut,
)
from ..security import get_current_user
from ..services import bookings, fleet, users
from ..services.transactions import list_transactions

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get("/users", response_model=Page[UserOut])
async def list_users(
    role: Optional[str] = None,
    status: Optional[str] = None,
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=100),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    require_role(user, ["admin"])
    items, total = await users.list_users(db, role, status, search, page, size)
    return {"items": items, "page": page, "size": size, "total": total}


@router.put("/users/{user_id}/status", response_model=UserOut)
async def update_user_status(
    user_id: str,
    data: UpdateUserStatus,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    require_role(user, ["admin"])
    return await users.set_user_status(db, user_id, data.status)


@router.get("/bookings", response_model=Page[BookingOut])
async def list_bookings(
    status: Optional[str] = None,
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=100),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    require_role(user, ["admin"])
    items, total = await bookings.list_bookings_for_user(db, user, status, search, page, size)
    return {"items": items, "page": page, "size": size, "total": total}


@router.get("/transactions", response_model=TransactionPage)
async def transactions(
    payment_method: Optional[str] = Query(None, alias="paymentMethod"),
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=100),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    require_role(user, ["admin"])
    return await list_transactions(db, payment_method=payment_method, search=search, page=page, size=size)


@router.get("/stats", response_model=StatsOut)
async def stats(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    require_role(user, ["admin"])

    by_role = dict.fromkeys(ROLES, 0)
    res = await db.execute(select(User.role, func.count()).group_by(User.role))
    by_role.update({role: count for role, count in res.all()})

    by_status = dict.fromkeys(booking_status.STATUSES, 0)
    res = await db.execute(select(Booking.status, func.count()).group_by(Booking.status))
    by_status.update({status: count for status, count in res.all()})

    res = await db.execute(
        select(
            func.count(Transaction.id),
            func.coalesce(func.sum(Transaction.amount), 0),
            func.coalesce(func.sum(Transaction.commission), 0),
        )
    )
    count, revenue, commission = res.one()

    return {
        "users_by_role": by_role,
        "bookings_by_status": by_status,
        "transaction_count": count,
        "total_revenue": float(revenue),
        "total_commission": float(commission),
    }


# ================= VERIFICATION =================

@router.put("/drivers/{driver_id}/documents/{document}", response_model=DriverOut)
async def review_driver_document(
    driver_id: str,
    document: str,
    data: ReviewDocument,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    require_role(user, ["admin"])
    return await fleet.review_driver_document(db, driver_id, document.lower(), data.action, data.remarks)


@router.put("/vehicles/{vehicle_id}/documents/{document}", response_model=VehicleOut)
async def review_vehicle_document(
    vehicle_id: str,
    document: str,
    data: ReviewDocument,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    require_role(user, ["admin"])
    return await fleet.review_vehicle_document(db, vehicle_id, document.lower(), data.action, data.remarks)
