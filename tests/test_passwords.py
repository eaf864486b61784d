"""Tests for kill/access password derivation and the RES field."""

import asyncio
import hashlib

import pytest
from librarytag.crypto.passwords import (
    ZERO_PASSWORD, Credential, compute_result, derive_password,
    derive_passwords, derive_passwords_async,
)

DATA = bytes.fromhex("19E9F87100000000075BCD1500000001")


def reference_password(data: bytes, secret: str, prefix_len: int) -> bytes:
    return hashlib.sha512(data[:prefix_len] + secret.encode("utf-8")).digest()[:4]


class TestDerivePassword:
    def test_matches_sha512_prefix(self):
        """Kill password is SHA-512(first 12 data bytes || "kill1")[:4]."""
        expected = hashlib.sha512(
            bytes.fromhex("19E9F87100000000075BCD15") + b"kill1"
        ).digest()[:4]
        password = derive_password(DATA, "kill1", 12)
        assert password == expected
        assert len(password) == 4

    def test_rendered_as_uppercase_hex(self):
        credential = derive_passwords(DATA, kill_secret="kill1", prefix_len=12)
        assert credential.kill_hex == reference_password(DATA, "kill1", 12).hex().upper()
        assert len(credential.kill_hex) == 8
        assert credential.kill_hex == credential.kill_hex.upper()

    def test_deterministic(self):
        assert derive_password(DATA, "secret", 12) == derive_password(DATA, "secret", 12)

    @pytest.mark.parametrize("index", range(12))
    def test_prefix_bytes_affect_output(self, index):
        changed = bytearray(DATA)
        changed[index] ^= 0x01
        assert derive_password(bytes(changed), "secret", 12) != derive_password(DATA, "secret", 12)

    def test_bytes_after_prefix_are_ignored(self):
        changed = bytearray(DATA)
        changed[15] ^= 0xFF
        assert derive_password(bytes(changed), "secret", 12) == derive_password(DATA, "secret", 12)

    def test_prefix_length_matters(self):
        assert derive_password(DATA, "secret", 12) != derive_password(DATA, "secret", 14)
        assert derive_password(DATA, "secret", 14) == reference_password(DATA, "secret", 14)

    def test_secret_is_utf8_encoded(self):
        assert derive_password(DATA, "schlüssel", 12) == reference_password(DATA, "schlüssel", 12)

    @pytest.mark.parametrize("secret", [None, ""])
    def test_missing_secret_is_zero(self, secret):
        assert derive_password(DATA, secret, 12) == ZERO_PASSWORD == bytes(4)

    def test_accepts_bytearray(self):
        assert derive_password(bytearray(DATA), "secret", 12) == derive_password(DATA, "secret", 12)


class TestDerivePasswords:
    def test_no_secrets_sentinel(self):
        for data in (DATA, bytes(16), bytes(range(16))):
            credential = derive_passwords(data)
            assert credential.to_dict() == {"kill": "00000000", "access": "00000000"}

    def test_independent_secrets(self):
        credential = derive_passwords(DATA, "kill1", "access1", 12)
        assert credential.kill == reference_password(DATA, "kill1", 12)
        assert credential.access == reference_password(DATA, "access1", 12)

    def test_order_insensitive(self):
        a = derive_passwords(DATA, "one", "two", 12)
        b = derive_passwords(DATA, "two", "one", 12)
        assert a.kill == b.access
        assert a.access == b.kill

    def test_only_access_secret(self):
        credential = derive_passwords(DATA, access_secret="access1", prefix_len=12)
        assert credential.kill == ZERO_PASSWORD
        assert credential.access != ZERO_PASSWORD

    def test_async_matches_sync(self):
        result = asyncio.run(derive_passwords_async(DATA, "kill1", "access1", 14))
        assert result == derive_passwords(DATA, "kill1", "access1", 14)


class TestComputeResult:
    def test_result_is_kill_then_access_without_secrets(self):
        assert compute_result(DATA, 12) == bytes(8)
        assert compute_result(bytes(range(16)), 14) == bytes(8)

    def test_credential_to_bytes(self):
        credential = Credential(kill=b"\x01\x02\x03\x04", access=b"\x05\x06\x07\x08")
        assert credential.to_bytes() == bytes(range(1, 9))
