import asyncio

import pytest

from nomad_cabs.db import SessionLocal
from nomad_cabs.errors import ConcurrentUpdate, Conflict, ValidationFailed
from nomad_cabs.models import Booking, User
from nomad_cabs.repository import Repository, transaction


def test_stale_booking_write_is_rejected(client, rider, book):
    booking = book()

    async def race():
        async with SessionLocal() as first, SessionLocal() as second:
            mine = await Repository(first, Booking).get(booking["id"])
            theirs = await Repository(second, Booking).get(booking["id"])

            async with transaction(first):
                mine.status = "cancelled"

            with pytest.raises(ConcurrentUpdate) as exc:
                async with transaction(second):
                    theirs.cancellation_reason = "Driver is late"
            return exc.value

    err = asyncio.run(race())
    assert err.status_code == 409

    res = client.get(f"/bookings/{booking['id']}", headers=rider["headers"])
    assert res.json()["status"] == "cancelled"
    assert res.json()["cancellationReason"] is None


def test_unique_violation_is_a_conflict(client, rider):
    async def insert_duplicate():
        async with SessionLocal() as db:
            with pytest.raises(Conflict) as exc:
                async with transaction(db):
                    await Repository(db, User).upsert(User(
                        email=rider["email"], password_hash="x", first_name="Copy", role="rider", status="active",
                    ))
            return exc.value

    err = asyncio.run(insert_duplicate())
    assert err.message == "Record already exists"


def test_other_constraint_failures_are_validation_errors(client):
    async def insert_incomplete():
        async with SessionLocal() as db:
            with pytest.raises(ValidationFailed) as exc:
                async with transaction(db):
                    await Repository(db, User).upsert(User(
                        email="nameless@test.com", password_hash="x", first_name=None, role="rider", status="active",
                    ))
            return exc.value

    err = asyncio.run(insert_incomplete())
    assert err.status_code == 400

    async def count():
        async with SessionLocal() as db:
            return await Repository(db, User).count(User.email == "nameless@test.com")

    assert asyncio.run(count()) == 0
