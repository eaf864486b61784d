"""
Kill/access password derivation for library EPC tags.

Each password is the first 4 bytes of

    SHA-512(data[:prefix_len] || utf8(secret))

where data is the tag's EPC data block and prefix_len is format specific
(12 bytes for UB Dortmund, 14 for BookWaves). A missing or empty secret is
not hashed: it yields the all-zero password.

The RES block is kill || access computed with no secrets, so it is always
the all-zero sentinel regardless of the secrets a caller holds.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

try:
    from Cryptodome.Hash import SHA512
except ImportError:
    from Crypto.Hash import SHA512

logger = logging.getLogger(__name__)

# Each password is 4 bytes (32 bits)
PASSWORD_LENGTH = 4

# Returned when no secret is configured
ZERO_PASSWORD = bytes(PASSWORD_LENGTH)

# Leading data bytes hashed when the caller does not say otherwise
DEFAULT_PREFIX_LEN = 12


@dataclass(frozen=True)
class Credential:
    """Kill and access passwords for one data block / secret combination."""
    kill: bytes = ZERO_PASSWORD
    access: bytes = ZERO_PASSWORD

    @property
    def kill_hex(self) -> str:
        return self.kill.hex().upper()

    @property
    def access_hex(self) -> str:
        return self.access.hex().upper()

    def to_bytes(self) -> bytes:
        """Return kill || access (8 bytes)."""
        return self.kill + self.access

    def to_dict(self) -> dict:
        return {"kill": self.kill_hex, "access": self.access_hex}


def derive_password(data: bytes, secret: Optional[str], prefix_len: int = DEFAULT_PREFIX_LEN) -> bytes:
    """
    Derive one 4-byte password from the data block and a secret.

    Args:
        data: EPC data block bytes.
        secret: Secret text; None or "" means no secret is configured.
        prefix_len: How many leading data bytes are hashed.

    Returns:
        The first 4 bytes of the SHA-512 digest, or 00000000 without a secret.
    """
    if not secret:
        return ZERO_PASSWORD
    h = SHA512.new()
    h.update(bytes(data[:prefix_len]))
    h.update(secret.encode("utf-8"))
    return h.digest()[:PASSWORD_LENGTH]


def derive_passwords(
    data: bytes,
    kill_secret: Optional[str] = None,
    access_secret: Optional[str] = None,
    prefix_len: int = DEFAULT_PREFIX_LEN,
) -> Credential:
    """Derive the kill and access passwords independently."""
    logger.debug(
        "Deriving passwords over %d data bytes (kill key: %s, access key: %s)",
        prefix_len, bool(kill_secret), bool(access_secret),
    )
    return Credential(
        kill=derive_password(data, kill_secret, prefix_len),
        access=derive_password(data, access_secret, prefix_len),
    )


async def derive_passwords_async(
    data: bytes,
    kill_secret: Optional[str] = None,
    access_secret: Optional[str] = None,
    prefix_len: int = DEFAULT_PREFIX_LEN,
) -> Credential:
    """Like derive_passwords, hashing both secrets concurrently off the event loop."""
    snapshot = bytes(data[:prefix_len])
    kill, access = await asyncio.gather(
        asyncio.to_thread(derive_password, snapshot, kill_secret, prefix_len),
        asyncio.to_thread(derive_password, snapshot, access_secret, prefix_len),
    )
    return Credential(kill=kill, access=access)


def compute_result(data: bytes, prefix_len: int = DEFAULT_PREFIX_LEN) -> bytes:
    """
    Compute the 8-byte RES value: kill || access with no secrets supplied.

    Secrets a caller holds are deliberately not used here.
    """
    return derive_passwords(data, prefix_len=prefix_len).to_bytes()
