"""Random identifiers for registered users."""
from __future__ import annotations

import secrets
from typing import Container, Optional

ID_BITS = 64
_MAX_ATTEMPTS = 16


def generate_id(taken: Optional[Container[int]] = None) -> int:
    """Return a non-zero, cryptographically random unsigned 64-bit identifier.

    Zero is reserved for "not yet assigned". When *taken* is supplied, values
    it already contains are drawn again.
    """

    for _ in range(_MAX_ATTEMPTS):
        candidate = secrets.randbits(ID_BITS)
        if candidate == 0:
            continue
        if taken is not None and candidate in taken:
            continue
        return candidate
    raise RuntimeError("Unable to allocate a unique identifier")


__all__ = ["ID_BITS", "generate_id"]
