import logging
from datetime import datetime, timedelta, timezone

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.ext.asyncio import AsyncSession

from .config import ACCESS_TOKEN_EXPIRE_MINUTES, BCRYPT_ROUNDS, JWT_ALGORITHM, JWT_SECRET
from .db import get_db
from .errors import Forbidden, NotAuthenticated, NotFound
from .models import User
from .repository import Repository

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)

bearer_scheme = HTTPBearer(auto_error=False)

INACTIVE_STATUSES = ("suspended", "deleted")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    return pwd_context.verify(password, hashed)


def create_access_token(user: User) -> str:
    expire = datetime.now(timezone.utc) + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    return jwt.encode(
        {"sub": user.id, "email": user.email, "role": user.role, "exp": expire},
        JWT_SECRET,
        algorithm=JWT_ALGORITHM,
    )


def decode_token(token: str) -> dict:
    try:
        return jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except JWTError:
        raise NotAuthenticated("Invalid or expired token")


async def get_current_user(
    request: Request,
    creds: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Resolve the caller from the bearer token.

    The token only names the user; role and status always come from the
    current database row so a suspended account or a role change takes
    effect immediately.
    """
    token = None
    if creds and creds.scheme.lower() == "bearer":
        token = creds.credentials

    if not token:
        raise NotAuthenticated("Access token required")

    payload = decode_token(token)
    user_id = payload.get("sub")
    if not user_id:
        raise NotAuthenticated("Invalid or expired token")

    user = await Repository(db, User).get(user_id)
    if not user:
        raise NotFound("User not found")

    if user.status in INACTIVE_STATUSES:
        raise Forbidden(f"Account is {user.status}")

    if payload.get("role") != user.role:
        logger.info("token role %s is stale for user %s, using %s", payload.get("role"), user.id, user.role)

    request.state.user_sub = user.id
    request.state.user_role = user.role
    return user
