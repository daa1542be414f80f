# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from authgate.domain.users.entities import (
    USERNAME_MAX_LENGTH,
    CredentialInfo,
    normalize_username,
)
from authgate.domain.users.exceptions import CredentialConflictError, UserAlreadyExistsError
from authgate.domain.users.repositories import CredentialStore, PasswordHasher
from authgate.shared.errors import InvalidInputError
from authgate.shared.logging import logger


class SignupUserUseCase:
    def __init__(
        self,
        *,
        credentials: CredentialStore,
        password_hasher: PasswordHasher,
        password_min_length: int = 5,
    ) -> None:
        self._credentials = credentials
        self._password_hasher = password_hasher
        self._password_min_length = password_min_length

    def _validate(self, username: str, password: str) -> str:
        username = normalize_username(username)
        invalid: dict[str, str] = {}
        if not username:
            invalid["username"] = "empty"
        elif len(username) > USERNAME_MAX_LENGTH:
            invalid["username"] = "too_long"
        if len(password or "") < self._password_min_length:
            invalid["password"] = "too_short"
        if invalid:
            raise InvalidInputError(
                context={
                    "fields": sorted(invalid),
                    "reasons": invalid,
                    "password_min_length": self._password_min_length,
                }
            )
        return username

    def execute(self, username: str, password: str) -> CredentialInfo:
        username = self._validate(username, password)
        hashed = self._password_hasher.hash(password)
        try:
            credential = self._credentials.create(username, hashed)
        except CredentialConflictError as exc:
            logger.info(f"auth.signup: username taken username={username}")
            raise UserAlreadyExistsError() from exc
        logger.info(f"auth.signup: ok id={credential.id}")
        return credential.public()
