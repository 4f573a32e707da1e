"""
Unity Ledger Serialization Utilities

Integer, text and base64 conversions.

All integer encodings are LITTLE-ENDIAN with minimal width: 0 <-> b"".
"""

from __future__ import annotations
import base64
import binascii

from unity.constants import LITTLE_ENDIAN
from unity.errors import CodecError, ErrorCode, InvalidParameterError


# ==============================================================================
# Integer Serialization (Little-Endian)
# ==============================================================================

def int_to_bytes(n: int) -> bytes:
    """Minimal little-endian encoding of a non-negative integer."""
    if n < 0:
        raise InvalidParameterError("n", f"must be non-negative: {n}")
    return n.to_bytes((n.bit_length() + 7) // 8, LITTLE_ENDIAN)


def bytes_to_int(data: bytes) -> int:
    """Little-endian bytes to integer."""
    return int.from_bytes(data, LITTLE_ENDIAN)


def str_to_int(text: str) -> int:
    """UTF-8 text read as a little-endian integer."""
    return bytes_to_int(text.encode("utf-8"))


def int_to_str(n: int) -> str:
    return int_to_bytes(n).decode("utf-8")


# ==============================================================================
# Base64
# ==============================================================================

def bytes_to_base64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def base64_to_bytes(text: str) -> bytes:
    """Strict base64 decode; raises CodecError on bad input."""
    try:
        return base64.b64decode(text.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as e:
        raise CodecError(ErrorCode.INVALID_BASE64, f"Invalid base64: {e}") from e


def int_to_base64(n: int) -> str:
    return bytes_to_base64(int_to_bytes(n))


def base64_to_int(text: str) -> int:
    return bytes_to_int(base64_to_bytes(text))
