"""
Service configuration loaded from environment variables.

Environment:
- DATABASE_URL: SQLAlchemy URL (postgres:// is rewritten to postgresql://)
- SUPABASE_JWT_SECRET: HS256 secret used to verify caller access tokens
- JWT_AUDIENCE: expected token audience (default "authenticated")
- STRIPE_WEBHOOK_SECRET: Stripe endpoint signing secret
- STRIPE_WEBHOOK_TOLERANCE_SECONDS: max signature age (default 300)
- LOG_LEVEL: root log level (default INFO)
- AUTO_CREATE_TABLES: create tables at startup when "true" (local runs)
"""

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_DATABASE_URL = "sqlite:///./asset_hub.db"
DEFAULT_JWT_AUDIENCE = "authenticated"
DEFAULT_WEBHOOK_TOLERANCE_SECONDS = 300


def normalize_database_url(url: str) -> str:
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql://", 1)
    return url


@dataclass(frozen=True)
class Settings:
    """Runtime settings."""
    database_url: str = DEFAULT_DATABASE_URL
    jwt_secret: Optional[str] = None
    jwt_audience: str = DEFAULT_JWT_AUDIENCE
    stripe_webhook_secret: Optional[str] = None
    stripe_webhook_tolerance_seconds: int = DEFAULT_WEBHOOK_TOLERANCE_SECONDS
    log_level: str = "INFO"
    auto_create_tables: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables."""
        return cls(
            database_url=normalize_database_url(
                os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)
            ),
            jwt_secret=os.getenv("SUPABASE_JWT_SECRET") or None,
            jwt_audience=os.getenv("JWT_AUDIENCE", DEFAULT_JWT_AUDIENCE),
            stripe_webhook_secret=os.getenv("STRIPE_WEBHOOK_SECRET") or None,
            stripe_webhook_tolerance_seconds=int(
                os.getenv(
                    "STRIPE_WEBHOOK_TOLERANCE_SECONDS",
                    str(DEFAULT_WEBHOOK_TOLERANCE_SECONDS),
                )
            ),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            auto_create_tables=os.getenv("AUTO_CREATE_TABLES", "false").lower() == "true",
        )


def get_settings() -> Settings:
    """
    Return settings read from the current environment.

    Not cached, so tests can patch os.environ per test.
    """
    return Settings.from_env()
