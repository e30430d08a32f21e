"""Domain models for callsign registration."""

from __future__ import annotations

import time
from dataclasses import dataclass, field


def _now() -> int:
    return int(time.time())


@dataclass(frozen=True)
class User:
    """A registration snapshot.

    Instances are never mutated; enrichment stages return copies built with
    :func:`dataclasses.replace`.
    """

    callsign: str
    first: str
    last: str
    registration_email: str
    id: int = 0
    credential_hash: bytes = field(default=b"", repr=False)
    extension_number: int = 0
    description: str = "New User"
    approved_by: int = 0
    blocked_by: int = 1
    blocked: bool = True
    registration_date: int = field(default_factory=_now)


@dataclass(frozen=True)
class RegistrationRequest:
    """Raw fields supplied by a transport for a single registration attempt."""

    callsign: str
    first: str
    last: str
    email: str
    password: str = field(repr=False)
    telephony_requested: bool = False


__all__ = ["RegistrationRequest", "User"]
