from __future__ import annotations

from pathlib import Path

import pytest
from flask import Flask
from flask.testing import FlaskClient

from authgate.app import create_app
from authgate.shared.config import AppConfig, DatabaseConfig, SecurityConfig

TEST_SECRET = "test-signing-secret-0123456789abcdef0123456789abcdef0123456789abcdef"
# Cheap enough for tests, still salted.
FAST_HASH_METHOD = "pbkdf2:sha256:1000"


def make_security_config(**overrides: object) -> SecurityConfig:
    values: dict[str, object] = {
        "JWT_SECRET": TEST_SECRET,
        "ENABLE_RATE_LIMIT": False,
        "PASSWORD_HASH_METHOD": FAST_HASH_METHOD,
    }
    values.update(overrides)
    return SecurityConfig(**values)  # type: ignore[arg-type]


def make_app_config(db_path: Path, **security_overrides: object) -> AppConfig:
    return AppConfig(
        database=DatabaseConfig(DATABASE_URL=f"sqlite:///{db_path}"),  # type: ignore[call-arg]
        security=make_security_config(**security_overrides),
    )


@pytest.fixture()
def app_config(tmp_path: Path) -> AppConfig:
    return make_app_config(tmp_path / "authgate.db")


@pytest.fixture()
def app(app_config: AppConfig) -> Flask:
    return create_app(app_config)


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    return app.test_client()
