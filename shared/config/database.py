from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from .settings import Settings

Base = declarative_base()


def create_engine(settings: Settings) -> AsyncEngine:
    url = settings.database_url
    connect_args = {}
    if url.get_backend_name() == "postgresql":
        # asyncpg takes libpq-style sslmode strings ("disable", "require", ...)
        connect_args["ssl"] = settings.db_sslmode
    return create_async_engine(
        url,
        echo=settings.db_echo,
        pool_pre_ping=True,
        connect_args=connect_args,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)


async def get_db(request: Request):
    async with request.app.state.session_factory() as session:
        yield session
