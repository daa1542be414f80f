# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

USERNAME_MAX_LENGTH = 64


def normalize_username(username: str | None) -> str:
    return (username or "").strip()


@dataclass(slots=True, frozen=True)
class Credential:

    id: int
    username: str
    password_hash: str = field(repr=False)
    created_at: datetime

    def public(self) -> CredentialInfo:
        return CredentialInfo(id=self.id, username=self.username)


@dataclass(slots=True, frozen=True)
class CredentialInfo:
    """What callers outside the auth service get to see of a credential."""

    id: int
    username: str


@dataclass(slots=True, frozen=True)
class IssuedToken:

    token: str = field(repr=False)
    expires_in: int
    token_type: str = "bearer"


class TokenErrorKind(str, Enum):
    EXPIRED = "Expired"
    BAD_SIGNATURE = "BadSignature"
    MALFORMED = "Malformed"


@dataclass(slots=True, frozen=True)
class TokenVerification:
    """Outcome of verifying a bearer token: either a subject or an error kind."""

    subject: str | None = None
    error: TokenErrorKind | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.subject is not None

    @classmethod
    def success(cls, subject: str) -> TokenVerification:
        return cls(subject=subject)

    @classmethod
    def failure(cls, error: TokenErrorKind) -> TokenVerification:
        return cls(error=error)
