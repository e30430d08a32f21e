"""Field acceptance rules for registration records."""
from __future__ import annotations

from dataclasses import dataclass

from .config import DOMAIN_ILLEGAL_CHARACTERS, NAME_ILLEGAL_CHARACTERS, RegistrationSettings
from .errors import ErrorKind, ValidationError
from .models import User

_HYPHEN = "-"


@dataclass(frozen=True)
class ValidationRules:
    """Character sets applied by :func:`check_user`."""

    name_illegal: str = NAME_ILLEGAL_CHARACTERS
    domain_illegal: str = DOMAIN_ILLEGAL_CHARACTERS

    @classmethod
    def from_settings(cls, settings: RegistrationSettings) -> "ValidationRules":
        return cls(name_illegal=settings.name_illegal, domain_illegal=settings.domain_illegal)


DEFAULT_RULES = ValidationRules()


def _contains_any(value: str, characters: str) -> bool:
    return any(char in characters for char in value)


def _split_email(address: str) -> tuple[str, str]:
    parts = address.split("@")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise ValidationError("email is not valid", ErrorKind.EMAIL_INVALID)
    return parts[0], parts[1]


def check_user(user: User, rules: ValidationRules = DEFAULT_RULES) -> None:
    """Validate *user*, raising on the first rule that fails.

    Checks run in a fixed order: callsign, email shape, domain edge hyphens,
    domain characters, first name, last name. Only the first failure is
    reported.
    """

    if _contains_any(user.callsign, rules.name_illegal):
        raise ValidationError(
            "callsign contains illegal characters", ErrorKind.CALLSIGN_ILLEGAL_CHARACTERS
        )

    _, domain = _split_email(user.registration_email)

    if domain.startswith(_HYPHEN) or domain.endswith(_HYPHEN):
        raise ValidationError(
            "email domain (-) at start or end", ErrorKind.EMAIL_DOMAIN_HYPHEN
        )

    if _contains_any(domain, rules.domain_illegal):
        raise ValidationError(
            "email domain contains illegal characters",
            ErrorKind.EMAIL_DOMAIN_ILLEGAL_CHARACTERS,
        )

    if _contains_any(user.first, rules.name_illegal):
        raise ValidationError(
            "first name contains illegal characters", ErrorKind.FIRST_NAME_ILLEGAL_CHARACTERS
        )
    if _contains_any(user.last, rules.name_illegal):
        raise ValidationError(
            "last name contains illegal characters", ErrorKind.LAST_NAME_ILLEGAL_CHARACTERS
        )


__all__ = ["DEFAULT_RULES", "ValidationRules", "check_user"]
