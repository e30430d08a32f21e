"""Exception hierarchy for registration failures."""
from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Stable identifiers for every way a registration can be rejected."""

    CALLSIGN_ILLEGAL_CHARACTERS = "callsign_illegal_characters"
    EMAIL_INVALID = "email_invalid"
    EMAIL_DOMAIN_HYPHEN = "email_domain_hyphen"
    EMAIL_DOMAIN_ILLEGAL_CHARACTERS = "email_domain_illegal_characters"
    FIRST_NAME_ILLEGAL_CHARACTERS = "first_name_illegal_characters"
    LAST_NAME_ILLEGAL_CHARACTERS = "last_name_illegal_characters"
    PASSWORD_TOO_SHORT = "password_too_short"
    HASH_FAILED = "hash_failed"
    VERIFICATION_FAILED = "verification_failed"


class RegistrationError(Exception):
    """Base class for per-request registration failures."""

    def __init__(self, message: str, kind: ErrorKind) -> None:
        super().__init__(message)
        self.message = message
        self.kind = kind

    def __str__(self) -> str:
        return self.message


class ValidationError(RegistrationError):
    """Raised when a field fails its acceptance rule."""


class CredentialError(RegistrationError):
    """Raised when a password cannot be hashed or does not verify."""


class ConfigurationError(RuntimeError):
    """Raised when the registration settings are malformed."""


__all__ = [
    "ConfigurationError",
    "CredentialError",
    "ErrorKind",
    "RegistrationError",
    "ValidationError",
]
