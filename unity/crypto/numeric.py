"""
Unity Ledger Numeric Toolkit

Big-integer modular arithmetic. Integer/byte conversions live in
unity.core.serialization and are re-exported here.
"""

from __future__ import annotations
import secrets

from unity.core.serialization import (
    int_to_bytes,
    bytes_to_int,
    str_to_int,
    int_to_str,
    int_to_base64,
    base64_to_int,
)
from unity.errors import ArithmeticIndeterminateError, InvalidParameterError

__all__ = [
    "mod_inverse",
    "mod_pow",
    "msb",
    "mask",
    "random_bits",
    "random_below",
    "int_to_bytes",
    "bytes_to_int",
    "str_to_int",
    "int_to_str",
    "int_to_base64",
    "base64_to_int",
]


def mod_inverse(a: int, m: int) -> int:
    """
    Modular inverse via the extended Euclidean algorithm.

    Args:
        a: Value to invert
        m: Modulus (>= 1)

    Returns:
        x in [0, m) with a * x = 1 (mod m); 0 when m == 1

    Raises:
        ArithmeticIndeterminateError: If gcd(a, m) != 1
    """
    if m < 1:
        raise InvalidParameterError("m", f"modulus must be positive: {m}")
    if m == 1:
        return 0

    old_r, r = a % m, m
    old_s, s = 1, 0
    while r:
        quotient = old_r // r
        old_r, r = r, old_r - quotient * r
        old_s, s = s, old_s - quotient * s

    if old_r != 1:
        raise ArithmeticIndeterminateError(a, m, old_r)

    return old_s % m


def mod_pow(base: int, exponent: int, modulus: int) -> int:
    """
    Square-and-multiply modular exponentiation.

    mod_pow(x, 0, m) == 1 for every m > 1 and 0 for m == 1.
    """
    if exponent < 0:
        raise InvalidParameterError("exponent", f"must be non-negative: {exponent}")
    if modulus < 1:
        raise InvalidParameterError("modulus", f"must be positive: {modulus}")

    result = 1 % modulus
    base %= modulus
    while exponent > 0:
        if exponent & 1:
            result = (result * base) % modulus
        base = (base * base) % modulus
        exponent >>= 1
    return result


def msb(n: int) -> int:
    """Bit length of a non-negative integer (0 for 0)."""
    return n.bit_length()


def mask(bits: int) -> int:
    """Integer with the low `bits` bits set."""
    return (1 << bits) - 1


def random_bits(bits: int) -> int:
    """Uniform random integer below 2**bits."""
    return secrets.randbits(bits) if bits > 0 else 0


def random_below(n: int) -> int:
    """Uniform random integer in [1, n)."""
    if n < 2:
        raise InvalidParameterError("n", f"must be at least 2: {n}")
    return 1 + secrets.randbelow(n - 1)
