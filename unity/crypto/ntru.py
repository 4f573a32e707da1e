"""
Unity Ledger Asymmetric Primitive

Simplified NTRU-style scheme over two moduli p (signing/decryption) and
q >> p (masking). Not audited NTRU: no security claim is made.

Key pair:
    f  private scalar, masked to the bit length of p and reduced mod p
    h  = H(f) * f^-1 mod q

Encrypt:  e  = (seed * p * h + m) mod q
Decrypt:  m  = ((e * f) mod q) * f^-1 mod p
Sign:     s  = H(msg) * f * H(f)^-1 (mod p inverse, product left unreduced)
Verify:   (s * h) mod q mod p == H(msg)

The signature is left unreduced: s * h mod q equals H(msg) * (1 + k*p)
as an integer below q, and only that identity survives the final mod p.
"""

from __future__ import annotations
import logging
from typing import Any, Optional

from unity.constants import ENVELOPE_SEPARATOR, KEYSTREAM_BYTE_MASK
from unity.core import codec
from unity.core.serialization import (
    bytes_to_base64,
    base64_to_bytes,
    int_to_base64,
    base64_to_int,
    str_to_int,
)
from unity.core.types import KeyPair
from unity.crypto.hash import hash_to_field
from unity.crypto.numeric import mask, mod_inverse, msb, random_bits
from unity.errors import (
    ArithmeticIndeterminateError,
    CodecError,
    InvalidParameterError,
)

logger = logging.getLogger(__name__)


class NTRU:
    """
    Key generation, encryption and signatures for one pair of field
    parameters.
    """

    def __init__(self, p: int, q: int):
        if p < 3 or q <= p:
            raise InvalidParameterError("p, q", f"need 3 <= p < q (p={p}, q={q})")
        self.p = p
        self.q = q
        self.bits = msb(p)

    def __repr__(self) -> str:
        return f"NTRU(p_bits={self.bits}, q_bits={msb(self.q)})"

    def hash(self, value: Any) -> int:
        """Hash-to-field into p."""
        return hash_to_field(value, self.p)

    # ==========================================================================
    # Keys
    # ==========================================================================

    def random_scalar(self) -> int:
        """Fresh non-zero scalar below p."""
        while True:
            f = random_bits(self.bits) % self.p
            if f:
                return f

    def normalize_private(self, f: int) -> int:
        """Mask to the bit length of p and reduce mod p."""
        f = (f & mask(self.bits)) % self.p
        if f == 0:
            raise InvalidParameterError("f", "private scalar is zero modulo p")
        return f

    def public_key(self, f: int) -> int:
        """h = H(f) * f^-1 mod q."""
        f = self.normalize_private(f)
        return (self.hash(f) * mod_inverse(f, self.q)) % self.q

    def generate_keys(self, f: Optional[int] = None) -> KeyPair:
        """
        Generate a key pair, from `f` when given.

        Args:
            f: Optional private scalar (any non-negative int; masked and
               reduced)

        Returns:
            KeyPair(private=f, public=h)
        """
        f = self.random_scalar() if f is None else self.normalize_private(f)
        return KeyPair(private=f, public=self.public_key(f))

    def keys_from_password(self, password: Any) -> KeyPair:
        """Deterministic key pair from a canonically encoded password."""
        return self.generate_keys(str_to_int(codec.encode(password)))

    # ==========================================================================
    # Integer encryption
    # ==========================================================================

    def encrypt_int(self, m: int, h: int, seed: Optional[int] = None) -> int:
        """Encrypt an integer m < p under public value h."""
        if seed is None:
            seed = random_bits(self.bits)
        seed &= mask(self.bits)
        return (seed * self.p * (h % self.q) + m) % self.q

    def decrypt_int(self, e: int, f: int) -> int:
        f = self.normalize_private(f)
        return (((e * f) % self.q) * mod_inverse(f, self.p)) % self.p

    # ==========================================================================
    # Signatures
    # ==========================================================================

    def sign(self, message: Any, f: int) -> int:
        """Sign any codec-encodable message with private scalar f."""
        f = self.normalize_private(f)
        m = self.hash(message)
        fh_inv = mod_inverse(self.hash(f), self.p)
        return m * f * fh_inv

    def verify(self, message: Any, signature: int, h: int) -> bool:
        """
        Verify a signature against public value h.

        Also rejects signatures of the degenerate form H(msg) * h^-1 mod q,
        which satisfy the equation without knowledge of f.

        Returns:
            True if the signature is valid. Never raises.
        """
        if not isinstance(signature, int) or isinstance(signature, bool) or signature <= 0:
            logger.debug("Signature is not a positive integer")
            return False
        if not isinstance(h, int) or isinstance(h, bool):
            logger.debug("Public value is not an integer")
            return False

        try:
            m = self.hash(message)
            if (signature * h) % self.q % self.p != m:
                logger.debug("Signature equation does not hold")
                return False
            if (m * mod_inverse(h, self.q)) % self.q == signature:
                logger.debug("Degenerate signature rejected")
                return False
        except (ArithmeticIndeterminateError, CodecError, TypeError) as e:
            logger.debug(f"Signature verification error: {e}")
            return False

        return True

    # ==========================================================================
    # Envelope
    # ==========================================================================

    def _keystream(self, data: bytes, iv: int) -> bytes:
        return bytes(
            b ^ (hash_to_field(iv + i, self.p) & KEYSTREAM_BYTE_MASK)
            for i, b in enumerate(data)
        )

    def encrypt_envelope(self, data: Any, h: int, seed: Optional[int] = None) -> str:
        """
        Encrypt any codec-encodable value for holder of h.

        A session seed is encrypted under h; the canonical payload is XORed
        with a keystream derived from H(seed).

        Format: base64(base64(e) + ":" + base64(masked payload))
        """
        if seed is None:
            seed = self.random_scalar()
        seed = (seed & mask(self.bits)) % self.p
        iv = self.hash(seed)
        e = self.encrypt_int(seed, h, iv)
        masked = self._keystream(codec.encode_bytes(data), iv)
        inner = int_to_base64(e) + ENVELOPE_SEPARATOR + bytes_to_base64(masked)
        return bytes_to_base64(inner.encode("ascii"))

    def decrypt_envelope(self, envelope: str, f: int) -> Any:
        """
        Decrypt an envelope with private scalar f.

        Raises:
            CodecError: On malformed envelopes, or when the key is wrong and
                the unmasked payload does not decode
        """
        try:
            inner = base64_to_bytes(envelope).decode("ascii")
        except UnicodeDecodeError as e:
            raise CodecError.malformed("envelope is not ASCII") from e

        e_part, sep, payload_part = inner.partition(ENVELOPE_SEPARATOR)
        if not sep:
            raise CodecError.malformed("envelope separator missing")

        seed = self.decrypt_int(base64_to_int(e_part), f) & mask(self.bits)
        iv = self.hash(seed)
        payload = self._keystream(base64_to_bytes(payload_part), iv)
        return codec.decode(payload)

    def encrypt_with_password(self, data: Any, password: Any, seed: Optional[int] = None) -> str:
        keys = self.keys_from_password(password)
        return self.encrypt_envelope(data, keys.public, seed)

    def decrypt_with_password(self, envelope: str, password: Any) -> Any:
        keys = self.keys_from_password(password)
        return self.decrypt_envelope(envelope, keys.private)
