"""Password hashing strategies."""

from __future__ import annotations

from werkzeug.security import check_password_hash, generate_password_hash

from authgate.domain.users.repositories import PasswordHasher
from authgate.shared.errors import InvalidInputError


def _require_password(password: str) -> None:
    if not password:
        raise InvalidInputError(context={"fields": ["password"], "reason": "empty"})


class WerkzeugPasswordHasher(PasswordHasher):
    """Salted slow hashing backed by werkzeug (scrypt unless told otherwise).

    Every call to :meth:`hash` draws a fresh salt, so equal passwords never
    produce equal hashes. :meth:`verify` compares digests in constant time.
    """

    def __init__(self, method: str = "scrypt", salt_length: int = 16) -> None:
        self._method = method
        self._salt_length = salt_length

    def hash(self, password: str) -> str:
        _require_password(password)
        return str(
            generate_password_hash(password, method=self._method, salt_length=self._salt_length)
        )

    def verify(self, password: str, hashed: str) -> bool:
        _require_password(password)
        try:
            return bool(check_password_hash(hashed, password))
        except (ValueError, TypeError):
            # Unknown method or a truncated hash string is a mismatch, not a fault.
            return False
