# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from http import HTTPStatus
from typing import Any, cast


class ErrorKind(str, Enum):
    INVALID_INPUT = "InvalidInput"
    ALREADY_EXISTS = "AlreadyExists"
    INVALID_CREDENTIALS = "InvalidCredentials"
    UNAUTHENTICATED = "Unauthenticated"
    STORE_UNAVAILABLE = "StoreUnavailable"


@dataclass(slots=True)
class AppError(Exception):
    code: str
    status: HTTPStatus
    context: Mapping[str, Any] | None = None

    def __post_init__(self) -> None:
        Exception.__init__(self, self.code)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.code}
        if self.context:
            payload["context"] = dict(self.context)
        return payload


class DomainError(AppError):
    def __init__(
        self,
        *,
        code: str | None = None,
        status: HTTPStatus | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        resolved_code = code or cast(str, getattr(self, "code", "domain_error"))
        resolved_status = status or cast(
            HTTPStatus, getattr(self, "status", HTTPStatus.BAD_REQUEST)
        )
        super().__init__(code=resolved_code, status=resolved_status, context=context)


class InfrastructureError(AppError):
    def __init__(
        self,
        code: str = "infrastructure_error",
        *,
        status: HTTPStatus | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        resolved_status = status or HTTPStatus.INTERNAL_SERVER_ERROR
        super().__init__(code=code, status=resolved_status, context=context)


class InvalidInputError(AppError):
    def __init__(self, *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(
            code=ErrorKind.INVALID_INPUT.value,
            status=HTTPStatus.BAD_REQUEST,
            context=context,
        )


class UnauthenticatedError(AppError):
    """Raised by the request gate; the reason never reaches the client."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorKind.UNAUTHENTICATED.value,
            status=HTTPStatus.UNAUTHORIZED,
        )


class StoreUnavailableError(InfrastructureError):
    def __init__(self) -> None:
        super().__init__(
            ErrorKind.STORE_UNAVAILABLE.value,
            status=HTTPStatus.SERVICE_UNAVAILABLE,
        )
