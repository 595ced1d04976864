"""
Process configuration, read from the environment once at startup.

Nothing else in the service touches os.environ: main.py calls load_settings()
and hands the result to create_app(), which keeps it on app.state.
"""
import os
import warnings
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv
from sqlalchemy.engine import URL, make_url

_INSECURE_API_KEY = "insecure-default-change-me"


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    app_env: str = "development"
    app_host: str = "0.0.0.0"
    app_port: int = 50054
    log_level: str = "debug"

    db_host: str = "localhost"
    db_port: int = 5432
    db_user: str = "postgres"
    db_password: str = "postgres"
    db_name: str = "omnipos_payment_db"
    db_sslmode: str = "disable"
    db_echo: bool = False
    database_url_override: Optional[str] = None

    internal_api_key: str = _INSECURE_API_KEY

    service_name: str = "payment_service"
    otlp_endpoint: str = "http://localhost:4317"
    tracing_enabled: bool = True
    metrics_enabled: bool = True

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"

    @property
    def database_url(self) -> URL:
        if self.database_url_override:
            return make_url(self.database_url_override)
        return URL.create(
            "postgresql+asyncpg",
            username=self.db_user,
            password=self.db_password,
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
        )


def load_settings() -> Settings:
    """Build Settings from the environment (and a .env file, if present)."""
    load_dotenv()

    api_key = os.getenv("INTERNAL_API_KEY", "")
    if not api_key:
        warnings.warn(
            "INTERNAL_API_KEY is not set. Using an insecure default. "
            "Set this env var in production!",
            stacklevel=2,
        )
        api_key = _INSECURE_API_KEY

    return Settings(
        app_env=os.getenv("APP_ENV", "development"),
        app_host=os.getenv("APP_HOST", "0.0.0.0"),
        app_port=int(os.getenv("APP_PORT", "50054")),
        log_level=os.getenv("LOG_LEVEL", "debug"),
        db_host=os.getenv("POSTGRES_HOST", "localhost"),
        db_port=int(os.getenv("POSTGRES_PORT", "5432")),
        db_user=os.getenv("POSTGRES_USER", "postgres"),
        db_password=os.getenv("POSTGRES_PASSWORD", "postgres"),
        db_name=os.getenv("POSTGRES_DB", "omnipos_payment_db"),
        db_sslmode=os.getenv("POSTGRES_SSLMODE", "disable"),
        db_echo=_env_bool("DB_ECHO", False),
        database_url_override=os.getenv("DATABASE_URL") or None,
        internal_api_key=api_key,
        otlp_endpoint=os.getenv("OTLP_ENDPOINT", "http://localhost:4317"),
        tracing_enabled=_env_bool("TRACING_ENABLED", True),
        metrics_enabled=_env_bool("METRICS_ENABLED", True),
    )
