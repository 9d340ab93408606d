"""Settings loading and HTTP error mapping."""
import pytest
from pydantic import ValidationError

from market_resolver.config import ResolverSettings
from market_resolver.db import MarketNotFoundError
from market_resolver.providers import ErrorMapper, PriceUnavailableError


def test_defaults():
    settings = ResolverSettings()
    assert settings.platform_fee_rate == 0.02
    assert settings.batch_size == 50
    assert settings.cron_secret is None


def test_from_env(monkeypatch):
    monkeypatch.setenv("PLATFORM_FEE_RATE", "0.05")
    monkeypatch.setenv("RESOLVER_BATCH_SIZE", "5")
    monkeypatch.setenv("RESOLVER_INTERVAL_SECONDS", "60")
    monkeypatch.setenv("DATABASE_URL", "sqlite://")
    monkeypatch.setenv("CRON_SECRET", "")
    monkeypatch.delenv("LOG_LEVEL", raising=False)

    settings = ResolverSettings.from_env()
    assert settings.platform_fee_rate == 0.05
    assert settings.batch_size == 5
    assert settings.poll_interval_seconds == 60
    assert settings.database_url == "sqlite://"
    assert settings.cron_secret is None
    assert settings.log_level == "INFO"


def test_invalid_batch_size(monkeypatch):
    monkeypatch.setenv("RESOLVER_BATCH_SIZE", "0")
    with pytest.raises(ValidationError):
        ResolverSettings.from_env()


def test_error_mapper():
    errors = ErrorMapper(resource_name="Market", api_name="Price oracle")

    assert errors.to_http(MarketNotFoundError("gone"), 3) == (404, "Market '3' not found")
    assert errors.to_http(MarketNotFoundError("gone")) == (404, "Market not found")
    assert errors.to_http(PriceUnavailableError("BTC"), "BTC") == (
        503,
        "No price available for 'BTC'",
    )
    assert errors.to_http(PriceUnavailableError()) == (503, "Price oracle unavailable")
    assert errors.to_http(RuntimeError()) == (500, "Internal server error")
