from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool


class Base(DeclarativeBase):
    pass


def create_engine(database_url: str) -> tuple[AsyncEngine, async_sessionmaker]:
    kwargs = {}
    if database_url.startswith("sqlite") and ":memory:" in database_url:
        # every new connection would otherwise open an empty database
        kwargs = {"connect_args": {"check_same_thread": False}, "poolclass": StaticPool}
    engine = create_async_engine(database_url, echo=False, **kwargs)
    return engine, async_sessionmaker(engine, expire_on_commit=False)
