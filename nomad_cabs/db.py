from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool

from .config import DATABASE_URL, DB_ECHO


def get_engine(database_url: str):
    # aiosqlite connections are not shared across event loops
    if database_url.startswith("sqlite"):
        return create_async_engine(database_url, echo=DB_ECHO, poolclass=NullPool)
    return create_async_engine(database_url, echo=DB_ECHO, pool_pre_ping=True)


engine = get_engine(DATABASE_URL)

SessionLocal = async_sessionmaker(
    bind=engine,
    expire_on_commit=False,
)

Base = declarative_base()


async def get_db():
    async with SessionLocal() as session:
        yield session


async def init_models():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
