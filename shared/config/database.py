from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool

from .settings import DATABASE_URL, SQL_ECHO


def _engine_kwargs(url: str) -> dict:
    # A single shared connection keeps an in-memory sqlite database alive
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}, "poolclass": StaticPool}
    return {}


engine = create_async_engine(DATABASE_URL, echo=SQL_ECHO, **_engine_kwargs(DATABASE_URL))

AsyncSessionLocal = async_sessionmaker(engine, expire_on_commit=False)

Base = declarative_base()


async def get_db():
    async with AsyncSessionLocal() as session:
        yield session
