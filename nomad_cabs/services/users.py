import logging

from sqlalchemy import or_
from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import DuplicateEmail, Forbidden, NotAuthenticated, NotFound
from ..events import USER_REGISTERED, USER_STATUS_CHANGED, emit
from ..models import User, utcnow
from ..repository import Repository, transaction
from ..schemas import Register, UpdateProfile
from ..security import INACTIVE_STATUSES, create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)


async def register_user(db: AsyncSession, data: Register) -> User:
    repo = Repository(db, User)

    if await repo.get_by(email=data.email):
        raise DuplicateEmail(data.email)

    user = User(
        email=data.email,
        password_hash=hash_password(data.password),
        first_name=data.first_name,
        last_name=data.last_name,
        phone_number=data.phone_number,
        city=data.city,
        state=data.state,
        role=data.role,
        # drivers operate only after their documents are verified
        status="pending_verification" if data.role == "driver" else "active",
        is_email_verified=False,
        is_phone_verified=False,
    )

    async with transaction(db):
        await repo.upsert(user)

    logger.info("registered %s user %s", user.role, user.id)
    await emit(USER_REGISTERED, {"user_id": user.id, "email": user.email, "role": user.role})
    return user


async def authenticate(db: AsyncSession, email: str, password: str) -> tuple[str, User]:
    user = await Repository(db, User).get_by(email=email)

    if not user or not verify_password(password, user.password_hash):
        raise NotAuthenticated("Invalid credentials")

    if user.status in INACTIVE_STATUSES:
        raise Forbidden(f"Account is {user.status}")

    return create_access_token(user), user


async def update_profile(db: AsyncSession, user: User, data: UpdateProfile) -> User:
    changes = data.model_dump(exclude_unset=True)

    async with transaction(db):
        for field, value in changes.items():
            setattr(user, field, value)
        user.updated_at = utcnow()

    return user


async def set_user_status(db: AsyncSession, user_id: str, status: str) -> User:
    repo = Repository(db, User)

    async with transaction(db):
        user = await repo.get(user_id, for_update=True)
        if not user:
            raise NotFound("User not found")
        previous = user.status
        user.status = status
        user.updated_at = utcnow()

    logger.info("user %s status %s -> %s", user.id, previous, status)
    await emit(USER_STATUS_CHANGED, {"user_id": user.id, "from": previous, "to": status})
    return user


async def list_users(
    db: AsyncSession,
    role: str | None = None,
    status: str | None = None,
    search: str | None = None,
    page: int = 1,
    size: int = 20,
):
    criteria = []
    if role:
        criteria.append(User.role == role.lower())
    if status:
        criteria.append(User.status == status.lower())
    if search:
        like = f"%{search.strip()}%"
        criteria.append(or_(
            User.email.ilike(like),
            User.first_name.ilike(like),
            User.last_name.ilike(like),
        ))

    return await Repository(db, User).page(
        *criteria, order_by=User.created_at.desc(), page=page, size=size
    )
