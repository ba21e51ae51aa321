from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..db import get_db
from ..models import User
from ..schemas import AuthResponse, Login, Register, UpdateProfile, UserOut
from ..security import get_current_user
from ..services import users

router = APIRouter(tags=["Auth"])


@router.post("/auth/register", status_code=201, response_model=UserOut)
@router.post("/api/auth/signup", status_code=201, response_model=UserOut, include_in_schema=False)
async def register(data: Register, db: AsyncSession = Depends(get_db)):
    return await users.register_user(db, data)


@router.post("/auth/login", response_model=AuthResponse)
@router.post("/api/auth/login", response_model=AuthResponse, include_in_schema=False)
async def login(data: Login, db: AsyncSession = Depends(get_db)):
    token, user = await users.authenticate(db, data.email, data.password)
    return {"token": token, "user": user}


@router.get("/auth/profile", response_model=UserOut)
@router.get("/api/auth/me", response_model=UserOut, include_in_schema=False)
async def profile(user: User = Depends(get_current_user)):
    return user


@router.put("/auth/profile", response_model=UserOut)
async def update_profile(
    data: UpdateProfile,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await users.update_profile(db, user, data)
