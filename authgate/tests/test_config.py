from __future__ import annotations

import pytest
from pydantic import ValidationError

from authgate.shared.config import AppConfig, DatabaseConfig, SecurityConfig, load_config

from conftest import TEST_SECRET, make_security_config


@pytest.fixture(autouse=True)
def _fresh_config_cache():
    load_config.cache_clear()
    yield
    load_config.cache_clear()


def test_load_config_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("JWT_SECRET", TEST_SECRET)
    monkeypatch.setenv("TOKEN_TTL_SECONDS", "3600")
    monkeypatch.setenv("PASSWORD_MIN_LENGTH", "12")
    monkeypatch.setenv("DATABASE_URL", "sqlite:///elsewhere.db")
    monkeypatch.setenv("ENABLE_RATE_LIMIT", "no")

    config = load_config()

    assert config.security.jwt_secret == TEST_SECRET
    assert config.security.token_ttl_seconds == 3600
    assert config.security.password_min_length == 12
    assert config.security.enable_rate_limit is False
    assert config.database.url == "sqlite:///elsewhere.db"
    assert load_config() is config


def test_defaults() -> None:
    security = make_security_config()
    database = DatabaseConfig()  # type: ignore[call-arg]

    assert security.jwt_algorithm == "HS256"
    assert SecurityConfig.model_fields["token_ttl_seconds"].default == 24 * 60 * 60
    assert security.auth_header == "Authorization"
    assert DatabaseConfig.model_fields["url"].default == "sqlite:///authgate.db"
    assert database.timeout > 0


def test_missing_secret_aborts(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("JWT_SECRET", raising=False)

    with pytest.raises(ValidationError):
        load_config()


def test_short_secret_is_rejected() -> None:
    with pytest.raises(ValidationError):
        make_security_config(JWT_SECRET="too-short")


def test_secret_length_counts_bytes() -> None:
    # 24 characters, 33 bytes in UTF-8
    assert make_security_config(JWT_SECRET="ключ-ключ-й" + "x" * 13).jwt_secret


def test_unsupported_algorithm_is_rejected() -> None:
    with pytest.raises(ValidationError):
        make_security_config(JWT_ALGORITHM="RS256")


def test_negative_ttl_is_rejected() -> None:
    with pytest.raises(ValidationError):
        make_security_config(TOKEN_TTL_SECONDS=-1)


def test_production_rejects_placeholder_secret() -> None:
    with pytest.raises(ValidationError):
        AppConfig(
            APP_ENV="production",  # type: ignore[call-arg]
            security=make_security_config(JWT_SECRET="changeme" + "x" * 40),
        )


def test_production_accepts_strong_secret() -> None:
    config = AppConfig(
        APP_ENV="prod",  # type: ignore[call-arg]
        security=make_security_config(JWT_SECRET="Zq8vR2mW7kP4tY9bN3cX6hJ1sD5fG0lA8eU2iO7pQ4wE"),
    )

    assert config.is_production()
