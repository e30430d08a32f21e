"""Telephony extension numbers derived from callsigns."""
from __future__ import annotations

from typing import Iterator, List, Tuple

_INT64_MASK = (1 << 64) - 1
_INT64_SIGN = 1 << 63

_REPLACEMENT = 0xFFFD
_REPLACEMENT_WIDTH = 3
_ESCAPED_BYTES = range(0xDC80, 0xDD00)
_SURROGATES = range(0xD800, 0xE000)


def _wrap_int64(value: int) -> int:
    value &= _INT64_MASK
    return value - (1 << 64) if value & _INT64_SIGN else value


def _simple_upper(char: str) -> str:
    upper = char.upper()
    # one-to-many mappings such as "ß" -> "SS" leave the character unchanged
    return upper if len(upper) == 1 else char


def _scan(callsign: str) -> Iterator[Tuple[int, int, int]]:
    """Yield ``(code_point, raw_width, upper_width)`` for each decoded unit.

    ``raw_width`` is the unit's byte length in the callsign as received and
    ``upper_width`` its byte length once uppercased. Undecodable bytes
    (surrogate escapes) and lone surrogates become U+FFFD per raw byte.
    """

    for char in callsign:
        point = ord(char)
        if point in _ESCAPED_BYTES:
            yield _REPLACEMENT, 1, _REPLACEMENT_WIDTH
        elif point in _SURROGATES:
            for _ in char.encode("utf-8", "surrogatepass"):
                yield _REPLACEMENT, 1, _REPLACEMENT_WIDTH
        else:
            upper = _simple_upper(char)
            yield ord(upper), len(char.encode("utf-8")), len(upper.encode("utf-8"))


def extension_digits(callsign: str) -> List[int]:
    """Return the per-character terms folded into the extension.

    Each term is ``(code_point - 48) + (len(callsign) - offset**2)`` where the
    length is counted in bytes of the callsign and offsets in bytes of its
    uppercased form. Terms are not bounded to a single decimal digit.
    """

    units = list(_scan(callsign))
    length = sum(raw for _, raw, _ in units)
    digits: List[int] = []
    offset = 0
    for point, _, width in units:
        digits.append((point - 48) + length - offset * offset)
        offset += width
    return digits


def generate_extension(callsign: str) -> int:
    """Derive the extension number for *callsign*.

    The terms from :func:`extension_digits` are folded positionally
    (``extension * 10 + term``) with signed 64-bit wraparound. Uppercasing
    maps one character to one character, so long and non-ASCII callsigns
    keep the numbers already issued for them.
    ``generate_extension("AB") == 209``.
    """

    extension = 0
    for digit in extension_digits(callsign):
        extension = _wrap_int64(extension * 10 + digit)
    return extension


__all__ = ["extension_digits", "generate_extension"]
