"""
Unity Ledger Hash Functions

SHA-256 over the canonical encoding, and reduction into a field.
"""

from __future__ import annotations
from typing import Any

from Crypto.Hash import SHA256

from unity.constants import HASH_ZERO_SENTINEL
from unity.core.codec import encode_bytes


def sha256(data: bytes) -> bytes:
    """SHA-256 of raw bytes."""
    return SHA256.new(data).digest()


def sha256_hex(value: Any) -> str:
    """SHA-256 hex digest of the canonical encoding of `value`."""
    return SHA256.new(encode_bytes(value)).hexdigest()


def sha256_int(value: Any) -> int:
    """SHA-256 of the canonical encoding, read as a big-endian integer."""
    return int(sha256_hex(value), 16)


def hash_to_field(value: Any, modulus: int) -> int:
    """
    Hash `value` into [1, modulus).

    Deterministic. A zero residue is remapped to HASH_ZERO_SENTINEL so the
    result is always usable as a divisor or exponent base.

    Args:
        value: Any value the canonical codec accepts
        modulus: Target modulus (> 1)

    Returns:
        Non-zero field element
    """
    return (sha256_int(value) % modulus) or HASH_ZERO_SENTINEL
