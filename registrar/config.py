"""Configuration management for the registration service."""
from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Dict, Mapping, Optional

import yaml

from .errors import ConfigurationError

# Characters rejected in callsigns and in first/last names.
NAME_ILLEGAL_CHARACTERS = "![];#$%&'*+/=?^_`{|}~-:<>,\\"

# Characters rejected in the domain part of an email address. Hyphens are
# allowed inside the domain; only a leading or trailing hyphen is rejected.
DOMAIN_ILLEGAL_CHARACTERS = "!#$%&'*+/=?^_`{|}~\\"

PASSWORD_MIN_LENGTH = 9
BCRYPT_ROUNDS = 12

_ENV_PREFIX = "REGISTRAR_"


@dataclass(frozen=True)
class RegistrationSettings:
    """Tunable behaviour of the registration pipeline."""

    name_illegal: str = NAME_ILLEGAL_CHARACTERS
    domain_illegal: str = DOMAIN_ILLEGAL_CHARACTERS
    password_min_length: int = PASSWORD_MIN_LENGTH
    bcrypt_rounds: int = BCRYPT_ROUNDS
    hash_credentials: bool = True
    telephony_enabled: bool = True
    assign_identifiers: bool = False
    strict_status_codes: bool = False

    def __post_init__(self) -> None:
        if self.password_min_length < 1:
            raise ConfigurationError("password_min_length must be at least 1")
        if not 4 <= self.bcrypt_rounds <= 31:
            raise ConfigurationError("bcrypt_rounds must be between 4 and 31")

    @staticmethod
    def from_dict(data: Mapping[str, object]) -> "RegistrationSettings":
        """Create settings from raw mapping data such as a parsed YAML file."""

        known = {item.name for item in fields(RegistrationSettings)}
        unknown = set(data) - known
        if unknown:
            raise ConfigurationError(
                f"Unknown registration settings: {', '.join(sorted(unknown))}"
            )

        values: Dict[str, object] = {}
        for key, raw in data.items():
            default = getattr(RegistrationSettings, key)
            values[key] = _coerce(key, raw, default)
        return RegistrationSettings(**values)


def _env_bool(value: str, name: str) -> bool:
    lowered = value.strip().lower()
    if lowered in {"1", "true", "yes", "on"}:
        return True
    if lowered in {"0", "false", "no", "off"}:
        return False
    raise ConfigurationError(f"Invalid boolean value {value!r} for {name}")


def _coerce(name: str, raw: object, default: object) -> object:
    if raw is None:
        raise ConfigurationError(f"Missing value for {name}")
    if isinstance(default, bool):
        if isinstance(raw, bool):
            return raw
        return _env_bool(str(raw), name)
    if isinstance(default, int):
        try:
            return int(raw)  # type: ignore[arg-type]
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"Invalid integer value {raw!r} for {name}") from exc
    return str(raw)


def _load_yaml(config_path: Path) -> Dict[str, object]:
    try:
        with config_path.open("r", encoding="utf-8") as handle:
            raw = yaml.safe_load(handle) or {}
    except FileNotFoundError as exc:
        raise ConfigurationError(f"Configuration file not found: {config_path}") from exc
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Failed to parse {config_path}: {exc}") from exc

    section = raw.get("registration", raw) if isinstance(raw, dict) else None
    if not isinstance(section, dict):
        raise ConfigurationError(f"{config_path} must contain a mapping of settings")
    return dict(section)


def resolve_config_path(env_value: Optional[str]) -> Optional[Path]:
    """Resolve the optional YAML configuration file path."""
    if not env_value:
        return None
    return Path(env_value).expanduser().resolve(strict=False)


def load_settings(
    config_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> RegistrationSettings:
    """Load settings from an optional YAML file, then ``REGISTRAR_*`` variables.

    Environment variables take precedence over values read from the file.
    """
    env = os.environ if environ is None else environ
    if config_path is None:
        config_path = resolve_config_path(env.get(f"{_ENV_PREFIX}CONFIG"))

    settings = RegistrationSettings()
    if config_path is not None:
        settings = RegistrationSettings.from_dict(_load_yaml(config_path))

    overrides: Dict[str, object] = {}
    for item in fields(RegistrationSettings):
        value = env.get(_ENV_PREFIX + item.name.upper())
        if value is None:
            continue
        overrides[item.name] = _coerce(item.name, value, getattr(RegistrationSettings, item.name))

    return replace(settings, **overrides) if overrides else settings


__all__ = [
    "BCRYPT_ROUNDS",
    "DOMAIN_ILLEGAL_CHARACTERS",
    "NAME_ILLEGAL_CHARACTERS",
    "PASSWORD_MIN_LENGTH",
    "RegistrationSettings",
    "load_settings",
    "resolve_config_path",
]
