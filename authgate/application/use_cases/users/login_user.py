# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import secrets

from authgate.domain.users.entities import IssuedToken, normalize_username
from authgate.domain.users.exceptions import InvalidCredentialsError
from authgate.domain.users.repositories import CredentialStore, PasswordHasher, TokenService
from authgate.shared.logging import logger


class LoginUserUseCase:
    def __init__(
        self,
        *,
        credentials: CredentialStore,
        password_hasher: PasswordHasher,
        tokens: TokenService,
    ) -> None:
        self._credentials = credentials
        self._password_hasher = password_hasher
        self._tokens = tokens
        # Unknown usernames are checked against this so both failure paths pay for one hash.
        self._dummy_hash = password_hasher.hash(secrets.token_urlsafe(32))

    def execute(self, username: str, password: str) -> IssuedToken:
        credential = self._credentials.find_by_username(normalize_username(username))

        if credential is None:
            self._password_hasher.verify(password, self._dummy_hash)
            logger.info("auth.login: rejected")
            raise InvalidCredentialsError()

        if not self._password_hasher.verify(password, credential.password_hash):
            logger.info("auth.login: rejected")
            raise InvalidCredentialsError()

        token = self._tokens.issue(credential.username)
        logger.info(f"auth.login: ok id={credential.id}")
        return IssuedToken(token=token, expires_in=self._tokens.default_ttl_seconds)
