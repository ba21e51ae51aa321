from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Generic, TypeVar

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from .errors import Conflict, ConcurrentUpdate, ValidationFailed

logger = logging.getLogger(__name__)

T = TypeVar("T")

MAX_PAGE_SIZE = 100


class Repository(Generic[T]):
    """
    Thin data access over one ORM model.

    Reads are plain selects. Writes go through ``upsert`` and only become
    durable when the surrounding ``transaction`` block commits.
    """

    def __init__(self, db: AsyncSession, model: type[T]):
        self.db = db
        self.model = model

    async def get(self, entity_id: str, for_update: bool = False) -> T | None:
        stmt = select(self.model).where(self.model.id == entity_id)
        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        res = await self.db.execute(stmt)
        return res.scalar_one_or_none()

    async def get_by(self, **filters) -> T | None:
        res = await self.db.execute(select(self.model).filter_by(**filters))
        return res.scalars().first()

    async def list(self, *criteria, order_by=None, offset: int = 0, limit: int | None = None) -> list[T]:
        stmt = select(self.model).where(*criteria)
        if order_by is not None:
            stmt = stmt.order_by(order_by)
        if offset:
            stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        res = await self.db.execute(stmt)
        return list(res.scalars().all())

    async def count(self, *criteria) -> int:
        stmt = select(func.count()).select_from(self.model).where(*criteria)
        res = await self.db.execute(stmt)
        return int(res.scalar_one())

    async def page(self, *criteria, order_by=None, page: int = 1, size: int = 20) -> tuple[list[T], int]:
        page = max(page, 1)
        size = min(max(size, 1), MAX_PAGE_SIZE)
        total = await self.count(*criteria)
        items = await self.list(*criteria, order_by=order_by, offset=(page - 1) * size, limit=size)
        return items, total

    async def upsert(self, obj: T) -> T:
        self.db.add(obj)
        await self.db.flush()
        return obj


def is_unique_violation(e: IntegrityError) -> bool:
    # sqlite: "UNIQUE constraint failed", postgres: "duplicate key value violates unique constraint"
    text = str(e.orig).lower()
    return "unique" in text or "duplicate" in text


@asynccontextmanager
async def transaction(db: AsyncSession):
    """Commit on success, roll back on any error."""
    try:
        yield db
        await db.commit()
    except StaleDataError:
        await db.rollback()
        logger.warning("stale write rejected")
        raise ConcurrentUpdate()
    except IntegrityError as e:
        await db.rollback()
        logger.warning("integrity error: %s", e.orig)
        if is_unique_violation(e):
            raise Conflict("Record already exists")
        raise ValidationFailed("Record violates a data constraint")
    except Exception:
        await db.rollback()
        raise
