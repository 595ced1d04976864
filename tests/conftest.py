import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from shared.config.database import Base
from shared.config.settings import Settings
from services.payment_service.main import create_app
from services.payment_service.models import Payment  # noqa: F401 registers model with Base


def make_engine():
    """In-memory SQLite engine; the payment_schema schema is translated away."""
    return create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
        execution_options={"schema_translate_map": {"payment_schema": None}},
    )


@pytest.fixture
def settings():
    return Settings(
        app_env="test",
        log_level="warning",
        internal_api_key="test-internal-key",
        tracing_enabled=False,
        metrics_enabled=False,
    )


@pytest_asyncio.fixture
async def db_session():
    engine = make_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    await engine.dispose()


@pytest.fixture
def app(settings):
    return create_app(settings, engine=make_engine())


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client


@pytest.fixture
def headers(settings):
    return {"X-Internal-API-Key": settings.internal_api_key, "X-Merchant-ID": "merchant-1"}
