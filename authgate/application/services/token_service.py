# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Signed, time-bound bearer tokens (JWT)."""

from __future__ import annotations

import math
import time
from collections.abc import Callable
from datetime import timedelta

import jwt

from authgate.domain.users.entities import TokenErrorKind, TokenVerification
from authgate.domain.users.repositories import TokenService
from authgate.shared.config import SecurityConfig
from authgate.shared.errors import InvalidInputError
from authgate.shared.logging import logger

DEFAULT_TTL = timedelta(hours=24)
_REQUIRED_CLAIMS = ["sub", "iat", "exp"]


def _ttl_seconds(ttl: timedelta | int | float) -> int:
    seconds = ttl.total_seconds() if isinstance(ttl, timedelta) else float(ttl)
    if seconds < 0:
        raise InvalidInputError(context={"fields": ["ttl"], "reason": "negative"})
    return int(seconds)


class JwtTokenService(TokenService):
    """Issues and verifies HMAC-signed JWTs carrying a ``sub`` claim.

    The signing key is handed in once and never changes afterwards, so a
    single instance can be shared by every request thread. Verification
    never raises for a bad token; it returns a :class:`TokenVerification`
    whose ``error`` says why the token was refused.
    """

    def __init__(
        self,
        secret: str,
        *,
        algorithm: str = "HS256",
        default_ttl: timedelta | int = DEFAULT_TTL,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if not secret:
            raise ValueError("token signing secret must not be empty")
        self._secret = secret
        self._algorithm = algorithm
        self._default_ttl = _ttl_seconds(default_ttl)
        self._clock = clock

    @classmethod
    def from_config(cls, security: SecurityConfig) -> JwtTokenService:
        return cls(
            security.jwt_secret,
            algorithm=security.jwt_algorithm,
            default_ttl=security.token_ttl_seconds,
        )

    @property
    def default_ttl_seconds(self) -> int:
        return self._default_ttl

    def issue(self, subject: str, ttl: timedelta | int | None = None) -> str:
        if not subject:
            raise InvalidInputError(context={"fields": ["subject"], "reason": "empty"})
        lifetime = self._default_ttl if ttl is None else _ttl_seconds(ttl)
        now = self._clock()
        issued_at = int(now)
        # Rounded up so a token never lives shorter than its ttl; ttl=0 is expired on issue.
        expires_at = math.ceil(now + lifetime) if lifetime else issued_at
        payload = {
            "sub": subject,
            "iat": issued_at,
            "exp": expires_at,
        }
        token = jwt.encode(payload, self._secret, algorithm=self._algorithm)
        logger.debug(f"token.issue: subject={subject} ttl={lifetime}s")
        return token

    def verify(self, token: str) -> TokenVerification:
        if not token or not isinstance(token, str):
            return TokenVerification.failure(TokenErrorKind.MALFORMED)

        try:
            # Expiry is checked below against our own clock.
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={
                    "require": _REQUIRED_CLAIMS,
                    "verify_exp": False,
                    "verify_iat": False,
                },
            )
        except jwt.InvalidSignatureError:
            return TokenVerification.failure(TokenErrorKind.BAD_SIGNATURE)
        except jwt.InvalidTokenError as exc:
            logger.debug(f"token.verify: malformed ({type(exc).__name__})")
            return TokenVerification.failure(TokenErrorKind.MALFORMED)

        subject = payload.get("sub")
        expires_at = payload.get("exp")
        if not isinstance(subject, str) or not subject or not isinstance(expires_at, int):
            return TokenVerification.failure(TokenErrorKind.MALFORMED)

        if self._clock() >= expires_at:
            return TokenVerification.failure(TokenErrorKind.EXPIRED)

        return TokenVerification.success(subject)
