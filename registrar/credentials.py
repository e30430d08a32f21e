"""One-way password hashing for registration credentials."""
from __future__ import annotations

import logging

import anyio
from passlib.context import CryptContext
from passlib.exc import PasswordTruncateError

from .config import BCRYPT_ROUNDS, PASSWORD_MIN_LENGTH
from .errors import CredentialError, ErrorKind

logger = logging.getLogger("registrar.credentials")

# bcrypt only reads this many bytes of a secret.
BCRYPT_MAX_BYTES = 72


class CredentialManager:
    """Hash and verify passwords with salted bcrypt digests."""

    def __init__(
        self,
        *,
        rounds: int = BCRYPT_ROUNDS,
        min_length: int = PASSWORD_MIN_LENGTH,
    ) -> None:
        self._min_length = min_length
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
            bcrypt__truncate_error=True,
        )

    @property
    def min_length(self) -> int:
        return self._min_length

    def check_policy(self, password: str) -> None:
        """Reject passwords that are too short to be hashed."""

        if len(password.encode("utf-8")) < self._min_length:
            raise CredentialError("password is too short", ErrorKind.PASSWORD_TOO_SHORT)

    def hash(self, password: str) -> bytes:
        self.check_policy(password)
        try:
            hashed = self._context.hash(password)
        except PasswordTruncateError as exc:
            raise CredentialError("password is too long", ErrorKind.HASH_FAILED) from exc
        except (TypeError, ValueError) as exc:
            logger.error("Password hashing failed: %s", exc.__class__.__name__)
            raise CredentialError("password could not be hashed", ErrorKind.HASH_FAILED) from exc
        return hashed.encode("ascii")

    def verify(self, hashed: bytes, password: str) -> None:
        """Raise :class:`CredentialError` unless *password* matches *hashed*.

        A wrong password and a malformed hash are reported identically. Secrets
        longer than bcrypt reads can never have been hashed, so they never match.
        """

        if len(password.encode("utf-8")) > BCRYPT_MAX_BYTES:
            raise CredentialError("password does not match", ErrorKind.VERIFICATION_FAILED)
        try:
            matches = self._context.verify(password, hashed)
        except (TypeError, ValueError):
            matches = False
        if not matches:
            raise CredentialError("password does not match", ErrorKind.VERIFICATION_FAILED)

    async def hash_async(self, password: str) -> bytes:
        """Hash *password* on a worker thread so the event loop stays responsive."""

        self.check_policy(password)
        return await anyio.to_thread.run_sync(self.hash, password)


_default_manager = CredentialManager()


def hash_password(password: str) -> bytes:
    return _default_manager.hash(password)


def verify_password(hashed: bytes, password: str) -> None:
    _default_manager.verify(hashed, password)


async def hash_password_async(password: str) -> bytes:
    return await _default_manager.hash_async(password)


__all__ = [
    "BCRYPT_MAX_BYTES",
    "CredentialManager",
    "hash_password",
    "hash_password_async",
    "verify_password",
]
