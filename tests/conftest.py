import asyncio
import os
import tempfile

_tmp = tempfile.mkdtemp(prefix="nomad_cabs_test_")
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + os.path.join(_tmp, "test.db")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["SEED_DEMO_USERS"] = "false"
os.environ.pop("RABBIT_URL", None)
os.environ.pop("REDIS_URL", None)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from nomad_cabs.db import Base, engine  # noqa: E402
from nomad_cabs.main import app  # noqa: E402

PASSWORD = "secret123"


async def _reset_db():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)


@pytest.fixture
def client():
    asyncio.run(_reset_db())
    with TestClient(app) as c:
        yield c


@pytest.fixture
def signup(client):
    def _signup(email, role, password=PASSWORD, **extra):
        payload = {"email": email, "password": password, "role": role, "firstName": "Test", **extra}
        res = client.post("/auth/register", json=payload)
        assert res.status_code == 201, res.text

        res = client.post("/auth/login", json={"email": email, "password": password})
        assert res.status_code == 200, res.text
        body = res.json()
        return {
            "id": body["user"]["id"],
            "email": email,
            "headers": {"Authorization": f"Bearer {body['token']}"},
        }

    return _signup


@pytest.fixture
def admin(signup):
    return signup("admin@nomadcabs.com", "admin")


@pytest.fixture
def rider(signup):
    return signup("rider@test.com", "rider")


@pytest.fixture
def pending_driver(signup):
    return signup("driver@test.com", "driver")


@pytest.fixture
def activate(client, admin):
    def _activate(user):
        res = client.put(
            f"/admin/users/{user['id']}/status",
            json={"status": "active"},
            headers=admin["headers"],
        )
        assert res.status_code == 200, res.text
        return user

    return _activate


@pytest.fixture
def driver(pending_driver, activate):
    return activate(pending_driver)


@pytest.fixture
def book(client, rider):
    def _book(headers=None, **fields):
        payload = {
            "pickupAddress": "Andheri West, Mumbai",
            "dropoffAddress": "Bandra Kurla Complex, Mumbai",
            "vehicleType": "sedan",
            "distanceKm": 5,
            "paymentMethod": "upi",
            **fields,
        }
        res = client.post("/bookings", json=payload, headers=headers or rider["headers"])
        assert res.status_code == 201, res.text
        return res.json()

    return _book
