from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import InterfaceError, OperationalError, SQLAlchemyError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import AsyncEngine

from shared.config.database import Base, create_engine, create_session_factory
from shared.config.settings import Settings
from shared.observability.setup import setup_observability

from .exceptions import PaymentError
from .models import Payment  # noqa: F401 registers model with SQLAlchemy Base
from .router import router, public_router

logger = structlog.get_logger(__name__)

_STATUS_BY_CODE = {
    "invalid_argument": 400,
    "not_found": 404,
    "already_exists": 409,
    "internal": 500,
}


async def payment_error_handler(request: Request, exc: PaymentError) -> JSONResponse:
    return JSONResponse(
        status_code=_STATUS_BY_CODE.get(exc.code, 500),
        content={"code": exc.code, "detail": exc.message},
    )


async def storage_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    # Driver message only, without the SQL statement
    detail = str(getattr(exc, "orig", None) or exc)
    if isinstance(exc, (OperationalError, InterfaceError, PoolTimeoutError)):
        logger.error("storage_unavailable", path=request.url.path, error=detail)
        return JSONResponse(status_code=503, content={"code": "unavailable", "detail": detail})
    logger.error("storage_error", path=request.url.path, error=detail)
    return JSONResponse(status_code=500, content={"code": "internal", "detail": detail})


def create_app(settings: Settings, engine: Optional[AsyncEngine] = None) -> FastAPI:
    """Build the payment app. Pass `engine` to use a pre-built database engine."""
    payment_app = FastAPI(title="Payment Service", version="2.0.0")

    payment_app.state.settings = settings
    payment_app.state.engine = engine or create_engine(settings)
    payment_app.state.session_factory = create_session_factory(payment_app.state.engine)

    # Structured logs, OTLP traces to Jaeger, and /metrics
    setup_observability(payment_app, settings)

    payment_app.add_exception_handler(PaymentError, payment_error_handler)
    payment_app.add_exception_handler(SQLAlchemyError, storage_error_handler)

    payment_app.include_router(public_router, prefix="/payments")
    payment_app.include_router(router, prefix="/payments")

    @payment_app.on_event("startup")
    async def startup_event():
        async with payment_app.state.engine.begin() as conn:
            if conn.dialect.name == "postgresql":
                await conn.execute(text("CREATE SCHEMA IF NOT EXISTS payment_schema"))
            await conn.run_sync(Base.metadata.create_all)
        logger.info("payment_service_started", env=settings.app_env, port=settings.app_port)

    @payment_app.on_event("shutdown")
    async def shutdown_event():
        await payment_app.state.engine.dispose()
        logger.info("payment_service_stopped")

    return payment_app
