from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta

import jwt
import pytest

from authgate.application.services.token_service import JwtTokenService
from authgate.domain.users.entities import TokenErrorKind
from authgate.shared.errors import InvalidInputError

from conftest import TEST_SECRET, make_security_config


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def tokens(clock: FakeClock) -> JwtTokenService:
    return JwtTokenService(TEST_SECRET, clock=clock)


def _tamper_signature(token: str) -> str:
    header, payload, signature = token.split(".")
    index = len(signature) // 2
    replacement = "A" if signature[index] != "A" else "B"
    signature = signature[:index] + replacement + signature[index + 1 :]
    return ".".join((header, payload, signature))


def test_issue_then_verify_returns_subject(tokens: JwtTokenService) -> None:
    token = tokens.issue("alice")

    result = tokens.verify(token)

    assert result.ok
    assert result.subject == "alice"
    assert result.error is None


def test_issued_claims_carry_subject_issued_at_and_expiry(
    tokens: JwtTokenService, clock: FakeClock
) -> None:
    token = tokens.issue("alice", timedelta(minutes=5))

    claims = jwt.decode(token, options={"verify_signature": False})

    assert claims["sub"] == "alice"
    assert claims["iat"] == int(clock.now)
    assert claims["exp"] == int(clock.now) + 300


def test_default_ttl_is_24_hours(tokens: JwtTokenService) -> None:
    claims = jwt.decode(tokens.issue("alice"), options={"verify_signature": False})

    assert tokens.default_ttl_seconds == 24 * 60 * 60
    assert claims["exp"] - claims["iat"] == 24 * 60 * 60


def test_zero_ttl_is_immediately_expired() -> None:
    tokens = JwtTokenService(TEST_SECRET)

    result = tokens.verify(tokens.issue("alice", 0))

    assert not result.ok
    assert result.error is TokenErrorKind.EXPIRED


def test_token_expires_once_clock_passes_expiry(tokens: JwtTokenService, clock: FakeClock) -> None:
    token = tokens.issue("alice", 60)

    clock.now += 59
    assert tokens.verify(token).ok

    clock.now += 1
    assert tokens.verify(token).error is TokenErrorKind.EXPIRED


def test_token_issued_mid_second_lives_for_its_full_ttl(clock: FakeClock) -> None:
    clock.now = 1_700_000_000.75
    tokens = JwtTokenService(TEST_SECRET, clock=clock)
    token = tokens.issue("alice", 1)

    clock.now = 1_700_000_001.74
    assert tokens.verify(token).ok

    clock.now = 1_700_000_002.0
    assert tokens.verify(token).error is TokenErrorKind.EXPIRED


def test_zero_ttl_issued_mid_second_is_expired(clock: FakeClock) -> None:
    clock.now = 1_700_000_000.5
    tokens = JwtTokenService(TEST_SECRET, clock=clock)

    assert tokens.verify(tokens.issue("alice", 0)).error is TokenErrorKind.EXPIRED


def test_tampered_signature_is_bad_signature(tokens: JwtTokenService) -> None:
    token = tokens.issue("alice")

    result = tokens.verify(_tamper_signature(token))

    assert result.error is TokenErrorKind.BAD_SIGNATURE
    assert result.subject is None


def test_token_signed_with_other_key_is_bad_signature(
    tokens: JwtTokenService, clock: FakeClock
) -> None:
    other = JwtTokenService(
        "another-signing-secret-fedcba9876543210fedcba9876543210fedcba9876543210", clock=clock
    )

    assert tokens.verify(other.issue("alice")).error is TokenErrorKind.BAD_SIGNATURE


@pytest.mark.parametrize(
    "token",
    ["", "not-a-token", "a.b", "a.b.c", "....", "eyJhbGciOiJIUzI1NiJ9.e30"],
)
def test_unparseable_tokens_are_malformed(tokens: JwtTokenService, token: str) -> None:
    assert tokens.verify(token).error is TokenErrorKind.MALFORMED


def test_unsigned_token_is_malformed(tokens: JwtTokenService, clock: FakeClock) -> None:
    token = jwt.encode(
        {"sub": "alice", "iat": int(clock.now), "exp": int(clock.now) + 60},
        key=None,
        algorithm="none",
    )

    assert tokens.verify(token).error is TokenErrorKind.MALFORMED


def test_token_without_subject_is_malformed(tokens: JwtTokenService, clock: FakeClock) -> None:
    token = jwt.encode(
        {"iat": int(clock.now), "exp": int(clock.now) + 60}, TEST_SECRET, algorithm="HS256"
    )

    assert tokens.verify(token).error is TokenErrorKind.MALFORMED


def test_issue_rejects_negative_ttl_and_empty_subject(tokens: JwtTokenService) -> None:
    with pytest.raises(InvalidInputError):
        tokens.issue("alice", -1)
    with pytest.raises(InvalidInputError):
        tokens.issue("")


def test_from_config_uses_configured_algorithm_and_ttl() -> None:
    security = make_security_config(JWT_ALGORITHM="hs512", TOKEN_TTL_SECONDS=120)
    tokens = JwtTokenService.from_config(security)

    token = tokens.issue("alice")

    assert jwt.get_unverified_header(token)["alg"] == "HS512"
    assert tokens.default_ttl_seconds == 120
    assert tokens.verify(token).subject == "alice"


def test_concurrent_verification(tokens: JwtTokenService) -> None:
    issued = {f"user{i}": tokens.issue(f"user{i}") for i in range(20)}

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = dict(
            zip(issued, pool.map(lambda token: tokens.verify(token).subject, issued.values()))
        )

    assert results == {name: name for name in issued}
