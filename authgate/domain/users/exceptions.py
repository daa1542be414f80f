# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from authgate.shared.errors.base import DomainError, ErrorKind


class UserAlreadyExistsError(DomainError):
    code = ErrorKind.ALREADY_EXISTS.value
    status = HTTPStatus.CONFLICT


class InvalidCredentialsError(DomainError):
    code = ErrorKind.INVALID_CREDENTIALS.value
    status = HTTPStatus.UNAUTHORIZED


class CredentialConflictError(Exception):
    """Raised by a credential store when the username is already taken."""

    def __init__(self, username: str) -> None:
        super().__init__(f"credential already exists: {username}")
        self.username = username
