from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from registrar.extensions import extension_digits, generate_extension


def test_two_letter_callsign() -> None:
    assert extension_digits("AB") == [19, 19]
    assert generate_extension("AB") == 209


def test_callsign_is_uppercased_before_folding() -> None:
    assert generate_extension("ab") == generate_extension("AB")
    assert generate_extension("m1mik") == generate_extension("M1MIK")


def test_terms_are_not_bounded_to_single_digits() -> None:
    # M=77, 1=49, M=77, I=73, K=75 with length 5 and offsets 0..4
    assert extension_digits("M1MIK") == [34, 5, 30, 21, 16]
    assert generate_extension("M1MIK") == 348226


def test_terms_can_be_negative() -> None:
    # offset 9 subtracts 81 from a ten-character callsign
    digits = extension_digits("AAAAAAAAAA")
    assert digits[-1] == (65 - 48) + 10 - 81
    assert digits[-1] < 0


def test_empty_callsign_yields_zero() -> None:
    assert generate_extension("") == 0


@pytest.mark.parametrize("callsign", ["M1MIK", "G4ABC", "2E0XYZ"])
def test_extension_is_deterministic(callsign: str) -> None:
    assert generate_extension(callsign) == generate_extension(callsign)


def test_long_callsigns_wrap_as_signed_64_bit() -> None:
    callsign = "Z" * 30
    result = generate_extension(callsign)
    assert -(2**63) <= result < 2**63

    unbounded = 0
    for digit in extension_digits(callsign):
        unbounded = unbounded * 10 + digit
    assert result == (unbounded + 2**63) % 2**64 - 2**63


def test_offsets_count_utf8_bytes() -> None:
    # "É" occupies two bytes, so the following character sits at offset 2
    assert extension_digits("ÉA") == [(0xC9 - 48) + 3, (65 - 48) + 3 - 4]


@pytest.mark.parametrize(
    "callsign, expected",
    [
        # "ß" has no single-character uppercase form and stays as U+00DF
        ("ß", (0xDF - 48) + 2),
        # U+FB01 would expand to "FI"; it keeps its own code point
        ("ﬁ", (0xFB01 - 48) + 3),
    ],
)
def test_uppercasing_never_expands_a_character(callsign: str, expected: int) -> None:
    assert extension_digits(callsign) == [expected]
    assert generate_extension(callsign) == expected


def test_expanding_character_keeps_following_offsets() -> None:
    # "ß" is two bytes, so "A" sits at offset 2 in a three-byte callsign
    assert extension_digits("ßA") == [(0xDF - 48) + 3, (65 - 48) + 3 - 4]


def test_undecodable_bytes_become_replacement_characters() -> None:
    # b"\xff" arrives from argv as a surrogate escape: one raw byte that
    # uppercases to the three-byte U+FFFD
    assert extension_digits("\udcff") == [(0xFFFD - 48) + 1]
    assert extension_digits("\udcffA") == [(0xFFFD - 48) + 2, (65 - 48) + 2 - 9]
    assert generate_extension("\udcffA") == 654880


def test_lone_surrogate_does_not_raise() -> None:
    digits = extension_digits("\ud800")
    assert digits == [(0xFFFD - 48) + 3, (0xFFFD - 48) + 3 - 9, (0xFFFD - 48) + 3 - 36]
