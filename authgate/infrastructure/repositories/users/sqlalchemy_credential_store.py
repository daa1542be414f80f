# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session, sessionmaker

from authgate.domain.users.entities import Credential
from authgate.domain.users.exceptions import CredentialConflictError
from authgate.domain.users.repositories import CredentialStore
from authgate.infrastructure.db.models import CredentialRow
from authgate.infrastructure.db.session import session_scope
from authgate.shared.errors import StoreUnavailableError
from authgate.shared.logging import logger


def _to_domain(row: CredentialRow) -> Credential:
    created_at = row.created_at
    # SQLite drops the offset; values are always written in UTC.
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=UTC)
    return Credential(
        id=row.id,
        username=row.username,
        password_hash=row.password_hash,
        created_at=created_at,
    )


def _is_username_conflict(exc: IntegrityError) -> bool:
    # SQLite: "UNIQUE constraint failed: credentials.username"
    # PostgreSQL/MySQL: duplicate key on "ix_credentials_username"
    message = str(exc.orig).lower()
    return ("unique" in message or "duplicate" in message) and "username" in message


class SqlAlchemyCredentialStore(CredentialStore):
    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    @contextmanager
    def _session(self) -> Iterator[Session]:
        try:
            with session_scope(self._session_factory) as session:
                yield session
        except (OperationalError, InterfaceError, PoolTimeoutError) as exc:
            logger.error(f"credential_store: unavailable ({type(exc).__name__})")
            raise StoreUnavailableError() from exc

    def find_by_username(self, username: str) -> Credential | None:
        with self._session() as session:
            row = session.scalars(
                select(CredentialRow).where(CredentialRow.username == username)
            ).first()
            if row is None:
                return None
            return _to_domain(row)

    def create(self, username: str, password_hash: str) -> Credential:
        try:
            with self._session() as session:
                row = CredentialRow(username=username, password_hash=password_hash)
                session.add(row)
                session.flush()
                session.refresh(row)
                return _to_domain(row)
        except IntegrityError as exc:
            if not _is_username_conflict(exc):
                raise
            raise CredentialConflictError(username) from exc
