from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..db import get_db
from ..models import User
from ..rbac import require_role
from ..schemas import TransactionPage
from ..security import get_current_user
from ..services.transactions import list_transactions

router = APIRouter(tags=["Transactions"])


@router.get("/transactions/me", response_model=TransactionPage)
async def my_transactions(
    payment_method: Optional[str] = Query(None, alias="paymentMethod"),
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=100),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    require_role(user, ["driver"])
    return await list_transactions(db, payment_method=payment_method, driver_id=user.id, page=page, size=size)
