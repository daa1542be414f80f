# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import timedelta
from typing import Protocol

from .entities import Credential, TokenVerification


class CredentialStore(Protocol):
    def find_by_username(self, username: str) -> Credential | None: ...

    def create(self, username: str, password_hash: str) -> Credential:
        """Insert a credential atomically; raises CredentialConflictError on a taken username."""
        ...


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...
    def verify(self, password: str, hashed: str) -> bool: ...


class TokenService(Protocol):
    @property
    def default_ttl_seconds(self) -> int: ...

    def issue(self, subject: str, ttl: timedelta | int | None = None) -> str: ...
    def verify(self, token: str) -> TokenVerification: ...
