"""Registration pipeline composing validation, hashing and enrichment."""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Container, Optional

from .config import RegistrationSettings
from .credentials import CredentialManager
from .errors import ErrorKind, RegistrationError
from .extensions import generate_extension
from .identifiers import generate_id
from .models import RegistrationRequest, User
from .validation import ValidationRules, check_user

logger = logging.getLogger("registrar.registration")


@dataclass(frozen=True)
class RegistrationOutcome:
    """Result handed back to a transport for a single attempt."""

    ok: bool
    callsign: str
    message: str = ""
    kind: Optional[ErrorKind] = None
    user: Optional[User] = None

    @classmethod
    def success(cls, user: User) -> "RegistrationOutcome":
        return cls(ok=True, callsign=user.callsign, user=user)

    @classmethod
    def failure(cls, callsign: str, error: RegistrationError) -> "RegistrationOutcome":
        return cls(ok=False, callsign=callsign, message=error.message, kind=error.kind)


def build_user(request: RegistrationRequest, *, now: Optional[int] = None) -> User:
    """Create the unvalidated candidate record with registration defaults."""

    user = User(
        callsign=request.callsign,
        first=request.first,
        last=request.last,
        registration_email=request.email,
    )
    if now is not None:
        user = replace(user, registration_date=now)
    return user


class Registrar:
    """Run registration attempts through the configured pipeline stages."""

    def __init__(
        self,
        settings: RegistrationSettings | None = None,
        *,
        credentials: CredentialManager | None = None,
        taken_ids: Optional[Container[int]] = None,
    ) -> None:
        self._settings = settings or RegistrationSettings()
        self._rules = ValidationRules.from_settings(self._settings)
        self._credentials = credentials or CredentialManager(
            rounds=self._settings.bcrypt_rounds,
            min_length=self._settings.password_min_length,
        )
        self._taken_ids = taken_ids

    @property
    def settings(self) -> RegistrationSettings:
        return self._settings

    @property
    def credentials(self) -> CredentialManager:
        return self._credentials

    def _prepare(self, request: RegistrationRequest, now: Optional[int]) -> User:
        user = build_user(request, now=now)
        if self._settings.hash_credentials:
            self._credentials.check_policy(request.password)
        check_user(user, self._rules)
        return user

    def _enrich(self, user: User, request: RegistrationRequest) -> User:
        if request.telephony_requested and self._settings.telephony_enabled:
            user = replace(user, extension_number=generate_extension(user.callsign))
        if self._settings.assign_identifiers:
            user = replace(user, id=generate_id(self._taken_ids))
        return user

    def register(self, request: RegistrationRequest, *, now: Optional[int] = None) -> User:
        """Validate and enrich a registration, raising :class:`RegistrationError`."""

        user = self._prepare(request, now)
        if self._settings.hash_credentials:
            user = replace(user, credential_hash=self._credentials.hash(request.password))
        return self._enrich(user, request)

    async def register_async(
        self, request: RegistrationRequest, *, now: Optional[int] = None
    ) -> User:
        """Like :meth:`register` but hashes on a worker thread."""

        user = self._prepare(request, now)
        if self._settings.hash_credentials:
            hashed = await self._credentials.hash_async(request.password)
            user = replace(user, credential_hash=hashed)
        return self._enrich(user, request)

    def submit(self, request: RegistrationRequest) -> RegistrationOutcome:
        try:
            user = self.register(request)
        except RegistrationError as exc:
            return self._rejected(request, exc)
        return self._accepted(user)

    async def submit_async(self, request: RegistrationRequest) -> RegistrationOutcome:
        try:
            user = await self.register_async(request)
        except RegistrationError as exc:
            return self._rejected(request, exc)
        return self._accepted(user)

    @staticmethod
    def _accepted(user: User) -> RegistrationOutcome:
        logger.info(
            "Registered callsign %s (extension=%s, id=%s)",
            user.callsign,
            user.extension_number,
            user.id,
        )
        return RegistrationOutcome.success(user)

    @staticmethod
    def _rejected(request: RegistrationRequest, exc: RegistrationError) -> RegistrationOutcome:
        logger.info("Rejected registration for %r: %s", request.callsign, exc.kind.value)
        return RegistrationOutcome.failure(request.callsign, exc)


__all__ = ["Registrar", "RegistrationOutcome", "build_user"]
