# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .users.entities import (
    Credential,
    CredentialInfo,
    IssuedToken,
    TokenErrorKind,
    TokenVerification,
    normalize_username,
)
from .users.exceptions import (
    CredentialConflictError,
    InvalidCredentialsError,
    UserAlreadyExistsError,
)

__all__ = [
    "Credential",
    "CredentialConflictError",
    "CredentialInfo",
    "InvalidCredentialsError",
    "IssuedToken",
    "TokenErrorKind",
    "TokenVerification",
    "UserAlreadyExistsError",
    "normalize_username",
]
