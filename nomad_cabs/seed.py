import logging

from sqlalchemy.ext.asyncio import AsyncSession

from .models import User
from .repository import Repository, transaction
from .security import hash_password

logger = logging.getLogger(__name__)

DEMO_USERS = [
    {"email": "admin@nomadcabs.com", "password": "admin123", "first_name": "Admin", "last_name": "User", "role": "admin"},
    {"email": "rider@test.com", "password": "rider123", "first_name": "Test", "last_name": "Rider", "role": "rider"},
    {"email": "driver@test.com", "password": "driver123", "first_name": "Test", "last_name": "Driver", "role": "driver"},
]


async def seed_demo_users(db: AsyncSession) -> int:
    repo = Repository(db, User)
    created = 0

    async with transaction(db):
        for demo in DEMO_USERS:
            if await repo.get_by(email=demo["email"]):
                continue
            await repo.upsert(User(
                email=demo["email"],
                password_hash=hash_password(demo["password"]),
                first_name=demo["first_name"],
                last_name=demo["last_name"],
                role=demo["role"],
                city="Mumbai",
                state="Maharashtra",
                status="active",
                is_email_verified=True,
                is_phone_verified=False,
            ))
            created += 1

    if created:
        logger.info("seeded %d demo users", created)
    return created
