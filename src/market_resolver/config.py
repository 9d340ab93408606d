"""Resolver configuration, read from the environment."""
import os

from pydantic import BaseModel, Field

from market_resolver.db.sessions import DATABASE_URL

DEFAULT_PLATFORM_FEE_RATE = 0.02


class ResolverSettings(BaseModel):
    """Tunables for a resolution pass and its surrounding service.

    platform_fee_rate is stored as configured; the settlement calculator
    clamps it to [0, 0.2] at use time.
    """

    platform_fee_rate: float = DEFAULT_PLATFORM_FEE_RATE
    batch_size: int = Field(default=50, ge=1)
    poll_interval_seconds: float = Field(default=300.0, gt=0)
    http_timeout_seconds: float = Field(default=10.0, gt=0)
    database_url: str = DATABASE_URL
    cron_secret: str | None = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "ResolverSettings":
        """Build settings from environment variables; unset ones keep defaults."""
        env = {
            "platform_fee_rate": os.getenv("PLATFORM_FEE_RATE"),
            "batch_size": os.getenv("RESOLVER_BATCH_SIZE"),
            "poll_interval_seconds": os.getenv("RESOLVER_INTERVAL_SECONDS"),
            "http_timeout_seconds": os.getenv("PRICE_HTTP_TIMEOUT"),
            "database_url": os.getenv("DATABASE_URL"),
            "cron_secret": os.getenv("CRON_SECRET") or None,
            "log_level": os.getenv("LOG_LEVEL"),
        }
        return cls.model_validate({k: v for k, v in env.items() if v is not None})
