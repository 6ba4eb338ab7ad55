import os
from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import BaseModel

DUMMY_STRIPE_KEY = "sk_test_dummy_key_for_development"


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _default_database_url() -> str:
    db_user = os.getenv("POSTGRES_USER", "postgres")
    db_password = os.getenv("POSTGRES_PASSWORD", "postgres")
    db_host = os.getenv("POSTGRES_HOST", "localhost")  # In Docker, this will be 'postgres'
    db_port = os.getenv("POSTGRES_PORT", "5433")
    db_name = os.getenv("POSTGRES_DB", "ecommerce")
    return f"postgresql+asyncpg://{db_user}:{db_password}@{db_host}:{db_port}/{db_name}"


class Settings(BaseModel):
    database_url: str
    store_backend: Literal["database", "memory"] = "database"
    mock_fallback: bool = True
    sql_echo: bool = False

    stripe_secret_key: str = DUMMY_STRIPE_KEY
    stripe_webhook_secret: Optional[str] = None
    razorpay_key_id: str = "rzp_test_dummy_key"

    metrics_enabled: bool = True
    tracing_enabled: bool = False
    otlp_endpoint: str = "http://localhost:4317"

    rate_limit_enabled: bool = True

    @property
    def stripe_dev_mode(self) -> bool:
        """True when no real Stripe key is configured."""
        return not self.stripe_secret_key or self.stripe_secret_key == DUMMY_STRIPE_KEY


def get_settings() -> Settings:
    load_dotenv()
    return Settings(
        database_url=os.getenv("DATABASE_URL") or _default_database_url(),
        store_backend=os.getenv("STORE_BACKEND", "database"),
        mock_fallback=_flag("MOCK_FALLBACK", "true"),
        sql_echo=_flag("SQL_ECHO", "false"),
        stripe_secret_key=os.getenv("STRIPE_SECRET_KEY") or DUMMY_STRIPE_KEY,
        stripe_webhook_secret=os.getenv("STRIPE_WEBHOOK_SECRET") or None,
        razorpay_key_id=os.getenv("RAZORPAY_KEY_ID", "rzp_test_dummy_key"),
        metrics_enabled=_flag("METRICS_ENABLED", "true"),
        tracing_enabled=_flag("TRACING_ENABLED", "false"),
        otlp_endpoint=os.getenv("OTLP_ENDPOINT", "http://localhost:4317"),
        rate_limit_enabled=_flag("RATE_LIMIT_ENABLED", "true"),
    )
