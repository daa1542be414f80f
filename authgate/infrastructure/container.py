# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from functools import cached_property

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from authgate.application.services.password_hashing import WerkzeugPasswordHasher
from authgate.application.services.token_service import JwtTokenService
from authgate.application.use_cases.users.login_user import LoginUserUseCase
from authgate.application.use_cases.users.signup_user import SignupUserUseCase
from authgate.infrastructure.db import build_engine, build_session_factory
from authgate.infrastructure.repositories.users.sqlalchemy_credential_store import (
    SqlAlchemyCredentialStore,
)
from authgate.interfaces.http.controllers.auth_controller import AuthController
from authgate.interfaces.http.controllers.misc_controller import MiscController
from authgate.interfaces.http.middleware.request_gate import RequestGate
from authgate.shared.config import AppConfig


class Container:
    def __init__(self, config: AppConfig) -> None:
        self.config = config

    @cached_property
    def engine(self) -> Engine:
        return build_engine(self.config.database)

    @cached_property
    def session_factory(self) -> sessionmaker[Session]:
        return build_session_factory(self.engine)

    @cached_property
    def password_hasher(self) -> WerkzeugPasswordHasher:
        return WerkzeugPasswordHasher(method=self.config.security.password_hash_method)

    @cached_property
    def token_service(self) -> JwtTokenService:
        return JwtTokenService.from_config(self.config.security)

    @cached_property
    def credential_store(self) -> SqlAlchemyCredentialStore:
        return SqlAlchemyCredentialStore(self.session_factory)

    @cached_property
    def signup_user_use_case(self) -> SignupUserUseCase:
        return SignupUserUseCase(
            credentials=self.credential_store,
            password_hasher=self.password_hasher,
            password_min_length=self.config.security.password_min_length,
        )

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(
            credentials=self.credential_store,
            password_hasher=self.password_hasher,
            tokens=self.token_service,
        )

    @cached_property
    def request_gate(self) -> RequestGate:
        return RequestGate(self.token_service, header=self.config.security.auth_header)

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(
            signup_use_case=self.signup_user_use_case,
            login_use_case=self.login_user_use_case,
            gate=self.request_gate,
            security=self.config.security,
        )

    @cached_property
    def misc_controller(self) -> MiscController:
        return MiscController(engine=self.engine)
