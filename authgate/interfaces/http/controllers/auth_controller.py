# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, jsonify, request
from pydantic import ValidationError

from authgate.application.use_cases.users.login_user import LoginUserUseCase
from authgate.application.use_cases.users.signup_user import SignupUserUseCase
from authgate.domain.users.exceptions import InvalidCredentialsError, UserAlreadyExistsError
from authgate.infrastructure.audit import AuditAction, audit_log
from authgate.interfaces.http.dto.auth import (
    CredentialResponseDTO,
    LoginRequestDTO,
    SignupRequestDTO,
    SubjectResponseDTO,
    TokenResponseDTO,
)
from authgate.interfaces.http.middleware.request_gate import RequestGate, current_subject
from authgate.shared.config import SecurityConfig
from authgate.shared.errors.validation import raise_validation_error
from authgate.shared.logging import logger
from authgate.shared.middleware.rate_limit import rate_limit


def _get_client_ip() -> str | None:
    return request.remote_addr


class AuthController:
    def __init__(
        self,
        *,
        signup_use_case: SignupUserUseCase,
        login_use_case: LoginUserUseCase,
        gate: RequestGate,
        security: SecurityConfig | None = None,
    ) -> None:
        self._signup_use_case = signup_use_case
        self._login_use_case = login_use_case
        self._gate = gate
        self._security = security

    def signup(self) -> tuple[Response, int]:
        try:
            dto = SignupRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        try:
            info = self._signup_use_case.execute(dto.username, dto.password)
        except UserAlreadyExistsError:
            audit_log(
                AuditAction.SIGNUP_FAILED,
                ip_address=_get_client_ip(),
                details={"username": dto.username, "reason": "already_exists"},
                success=False,
            )
            raise

        audit_log(
            AuditAction.SIGNUP,
            subject=info.username,
            ip_address=_get_client_ip(),
            success=True,
        )
        payload = CredentialResponseDTO(id=info.id, username=info.username).model_dump()
        return jsonify(payload), 200

    def login(self) -> tuple[Response, int]:
        try:
            dto = LoginRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        ip_address = _get_client_ip()
        try:
            issued = self._login_use_case.execute(dto.username, dto.password)
        except InvalidCredentialsError:
            audit_log(
                AuditAction.LOGIN_FAILED,
                ip_address=ip_address,
                details={"username": dto.username},
                success=False,
            )
            raise

        audit_log(
            AuditAction.LOGIN_SUCCESS,
            subject=dto.username,
            ip_address=ip_address,
            success=True,
        )
        payload = TokenResponseDTO(
            token=issued.token,
            token_type=issued.token_type,
            expires_in=issued.expires_in,
        ).model_dump()
        logger.info(f"auth.login: token issued username={dto.username}")
        return jsonify(payload), 200

    def me(self) -> tuple[Response, int]:
        payload = SubjectResponseDTO(subject=current_subject() or "").model_dump()
        return jsonify(payload), 200

    def as_blueprint(self) -> Blueprint:
        signup_view = self.signup
        login_view = self.login
        if self._security is not None:
            limit = self._security.rate_limit_requests
            window = self._security.rate_limit_window
            enabled = self._security.enable_rate_limit
            signup_view = rate_limit(max(1, limit // 2), window, enabled=enabled)(signup_view)
            login_view = rate_limit(limit, window, enabled=enabled)(login_view)

        bp = Blueprint("auth", __name__, url_prefix="/api/auth")
        bp.add_url_rule("/signup", view_func=signup_view, methods=["POST"])
        bp.add_url_rule("/login", view_func=login_view, methods=["POST"])
        bp.add_url_rule("/me", view_func=self._gate.protect(self.me), methods=["GET"])
        return bp
