from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..db import get_db
from ..models import User
from ..rbac import require_role
from ..schemas import PaymentDetails, RecordPayment
from ..security import get_current_user
from ..services import payments

router = APIRouter(prefix="/payments", tags=["Payments"])


@router.post("", response_model=PaymentDetails)
async def record_payment(
    data: RecordPayment,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await payments.record_payment(
        db, data.booking_id, user, payment_id=data.payment_id, payment_method=data.payment_method
    )


@router.post("/driver/{booking_id}/complete", response_model=PaymentDetails)
async def cash_collected(
    booking_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    require_role(user, ["driver"])
    return await payments.mark_cash_collected(db, booking_id, user)


@router.post("/{booking_id}/failed", response_model=PaymentDetails)
async def payment_failed(
    booking_id: str,
    reason: Optional[str] = None,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await payments.mark_payment_failed(db, booking_id, user, reason)


@router.get("/{booking_id}", response_model=PaymentDetails)
async def payment_details(
    booking_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await payments.get_payment(db, booking_id, user)
