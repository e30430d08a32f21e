"""Callsign registration: validation, credential hashing and extensions."""

from __future__ import annotations

from typing import Any

from .config import RegistrationSettings, load_settings
from .credentials import CredentialManager, hash_password, verify_password
from .errors import CredentialError, ErrorKind, RegistrationError, ValidationError
from .extensions import generate_extension
from .identifiers import generate_id
from .models import RegistrationRequest, User
from .registration import Registrar, RegistrationOutcome
from .validation import check_user


def create_app(*args: Any, **kwargs: Any):
    """Factory function that returns the registration web application."""

    from .service import create_app as _create_app

    return _create_app(*args, **kwargs)


__all__ = [
    "CredentialError",
    "CredentialManager",
    "ErrorKind",
    "RegistrationError",
    "RegistrationOutcome",
    "RegistrationRequest",
    "RegistrationSettings",
    "Registrar",
    "User",
    "ValidationError",
    "check_user",
    "create_app",
    "generate_extension",
    "generate_id",
    "hash_password",
    "load_settings",
    "verify_password",
]
