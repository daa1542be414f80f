from __future__ import annotations

from pathlib import Path

from flask import Flask

from authgate.app import create_app
from authgate.shared.middleware.rate_limit import InMemoryRateLimiter, rate_limit

from conftest import make_app_config


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def _limited_app() -> Flask:
    app = Flask(__name__)

    @app.get("/limited")
    @rate_limit(1, 60)
    def limited():
        return {"ok": True}

    return app


def test_forwarded_for_header_does_not_create_new_buckets() -> None:
    client = _limited_app().test_client()

    statuses = [
        client.get("/limited", headers={"X-Forwarded-For": f"10.0.0.{i}"}).status_code
        for i in range(20)
    ]

    assert statuses[0] == 200
    assert set(statuses[1:]) == {429}


def test_clients_are_told_apart_by_remote_address() -> None:
    client = _limited_app().test_client()

    first = client.get("/limited", environ_base={"REMOTE_ADDR": "192.0.2.1"})
    second = client.get("/limited", environ_base={"REMOTE_ADDR": "192.0.2.2"})
    again = client.get("/limited", environ_base={"REMOTE_ADDR": "192.0.2.1"})

    assert (first.status_code, second.status_code, again.status_code) == (200, 200, 429)


def test_expired_buckets_are_dropped() -> None:
    clock = FakeClock()
    limiter = InMemoryRateLimiter(2, 60, clock=clock)
    for i in range(100):
        assert limiter.allow(f"client-{i}")
    assert len(limiter) == 100

    clock.now += 61
    assert limiter.allow("late-client")

    assert len(limiter) == 1


def test_window_still_applies_to_active_clients() -> None:
    clock = FakeClock()
    limiter = InMemoryRateLimiter(2, 60, clock=clock)

    assert limiter.allow("alice")
    assert limiter.allow("alice")
    assert not limiter.allow("alice")

    clock.now += 61
    assert limiter.allow("alice")


def _signup(client, username: str, forwarded_for: str) -> int:
    return client.post(
        "/api/auth/signup",
        json={"username": username, "password": "Sup3rSecret!"},
        headers={"X-Forwarded-For": forwarded_for},
    ).status_code


def test_forwarded_for_is_ignored_without_trusted_proxy(tmp_path: Path) -> None:
    app = create_app(
        make_app_config(tmp_path / "rl.db", ENABLE_RATE_LIMIT=True, RL_LIMIT=2, RL_WINDOW=60)
    )
    client = app.test_client()

    assert _signup(client, "alice", "203.0.113.1") == 200
    assert _signup(client, "bob", "203.0.113.2") == 429


def test_forwarded_for_is_used_behind_trusted_proxy(tmp_path: Path) -> None:
    app = create_app(
        make_app_config(
            tmp_path / "rl.db",
            ENABLE_RATE_LIMIT=True,
            RL_LIMIT=2,
            RL_WINDOW=60,
            TRUSTED_PROXY_COUNT=1,
        )
    )
    client = app.test_client()

    assert _signup(client, "alice", "203.0.113.1") == 200
    assert _signup(client, "bob", "203.0.113.2") == 200
    assert _signup(client, "carol", "203.0.113.1") == 429
