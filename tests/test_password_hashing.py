"""Tests for bcrypt credential hashing and verification."""

from __future__ import annotations

import sys
import unittest
from pathlib import Path

import anyio

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from registrar.credentials import CredentialManager, hash_password, verify_password
from registrar.errors import CredentialError, ErrorKind


class PasswordHashingTests(unittest.TestCase):
    def setUp(self) -> None:
        self.manager = CredentialManager(rounds=4)

    def test_eight_character_password_is_too_short(self) -> None:
        with self.assertRaises(CredentialError) as ctx:
            self.manager.hash("abcdefgh")
        self.assertIs(ctx.exception.kind, ErrorKind.PASSWORD_TOO_SHORT)
        self.assertEqual(str(ctx.exception), "password is too short")

    def test_nine_character_password_is_accepted(self) -> None:
        hashed = self.manager.hash("abcdefghi")
        self.assertIsInstance(hashed, bytes)
        self.assertNotEqual(hashed, b"abcdefghi")
        self.manager.verify(hashed, "abcdefghi")

    def test_length_is_measured_in_bytes(self) -> None:
        # four two-byte characters plus one ASCII byte is nine bytes
        self.manager.hash("éééé1")
        with self.assertRaises(CredentialError):
            self.manager.hash("éééé")

    def test_wrong_password_fails_verification(self) -> None:
        hashed = self.manager.hash("longenoughpassword")
        with self.assertRaises(CredentialError) as ctx:
            self.manager.verify(hashed, "longenoughpassworD")
        self.assertIs(ctx.exception.kind, ErrorKind.VERIFICATION_FAILED)

    def test_malformed_hash_fails_like_a_mismatch(self) -> None:
        with self.assertRaises(CredentialError) as ctx:
            self.manager.verify(b"not-a-bcrypt-hash", "longenoughpassword")
        self.assertEqual(str(ctx.exception), "password does not match")

    def test_password_longer_than_bcrypt_limit_is_rejected(self) -> None:
        self.manager.hash("a" * 72)
        with self.assertRaises(CredentialError) as ctx:
            self.manager.hash("a" * 73)
        self.assertIs(ctx.exception.kind, ErrorKind.HASH_FAILED)
        self.assertEqual(str(ctx.exception), "password is too long")

    def test_long_password_sharing_prefix_does_not_verify(self) -> None:
        with self.assertRaises(CredentialError):
            self.manager.hash("a" * 72 + "correct-suffix")

        hashed = self.manager.hash("a" * 72)
        with self.assertRaises(CredentialError) as ctx:
            self.manager.verify(hashed, "a" * 72 + "totally-different")
        self.assertIs(ctx.exception.kind, ErrorKind.VERIFICATION_FAILED)

    def test_hashes_are_salted(self) -> None:
        first = self.manager.hash("longenoughpassword")
        second = self.manager.hash("longenoughpassword")
        self.assertNotEqual(first, second)

    def test_async_hash_verifies(self) -> None:
        hashed = anyio.run(self.manager.hash_async, "longenoughpassword")
        self.manager.verify(hashed, "longenoughpassword")

    def test_async_hash_checks_policy_before_offloading(self) -> None:
        with self.assertRaises(CredentialError):
            anyio.run(self.manager.hash_async, "short")


class DefaultCostTests(unittest.TestCase):
    def test_default_cost_is_twelve(self) -> None:
        hashed = hash_password("longenoughpassword")
        self.assertTrue(hashed.startswith(b"$2b$12$"))
        verify_password(hashed, "longenoughpassword")
        with self.assertRaises(CredentialError):
            verify_password(hashed, "anotherpassword")


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
