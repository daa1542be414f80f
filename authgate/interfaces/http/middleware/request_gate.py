# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Bearer-token gate for protected routes.

A route opts in by wrapping its view with :meth:`RequestGate.protect`. The
gate reads the ``Authorization: Bearer <token>`` header, verifies the token
and stores the subject on ``flask.g`` before the view runs. Every failure
produces the same 401 response; the specific reason is only logged.
"""

from __future__ import annotations

from collections.abc import Callable
from functools import wraps
from typing import Any, TypeVar, cast

from flask import g, has_request_context, request

from authgate.domain.users.repositories import TokenService
from authgate.infrastructure.audit import AuditAction, audit_log
from authgate.shared.errors import UnauthenticatedError
from authgate.shared.logging import logger

F = TypeVar("F", bound=Callable[..., Any])

_BEARER = "bearer"


def _client_ip() -> str:
    return request.remote_addr or "unknown"


def extract_bearer_token(header_value: str | None) -> str | None:
    if not header_value:
        return None
    scheme, _, token = header_value.strip().partition(" ")
    if scheme.lower() != _BEARER:
        return None
    token = token.strip()
    return token or None


def current_subject() -> str | None:
    if not has_request_context():
        return None
    return getattr(g, "subject", None)


class RequestGate:
    def __init__(self, tokens: TokenService, *, header: str = "Authorization") -> None:
        self._tokens = tokens
        self._header = header

    def _reject(self, reason: str) -> UnauthenticatedError:
        logger.warning(f"request_gate: rejected {request.method} {request.path} reason={reason}")
        audit_log(
            AuditAction.ACCESS_DENIED,
            ip_address=_client_ip(),
            details={"path": request.path, "reason": reason},
            success=False,
        )
        return UnauthenticatedError()

    def authenticate(self) -> str:
        token = extract_bearer_token(request.headers.get(self._header))
        if token is None:
            raise self._reject("missing_token")

        result = self._tokens.verify(token)
        if not result.ok:
            reason = result.error.value if result.error else "unknown"
            raise self._reject(reason)

        subject = cast(str, result.subject)
        g.subject = subject
        logger.debug(f"request_gate: ok subject={subject} {request.method} {request.path}")
        return subject

    def protect(self, view: F) -> F:
        @wraps(view)
        def inner(*args: Any, **kwargs: Any) -> Any:
            self.authenticate()
            return view(*args, **kwargs)

        return cast(F, inner)


__all__ = ["RequestGate", "current_subject", "extract_bearer_token"]
