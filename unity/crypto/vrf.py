"""
Unity Ledger VRF

Verifiable random function built from hash-to-field and the NTRU-style
signature:

    output = H(message) mod p
    proof  = sign(output, f)

Anyone holding h can check that `output` was derived from `message` and
signed by the owner of f.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any

from unity.crypto.ntru import NTRU
from unity.errors import CodecError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class VRFOutput:
    """VRF output container."""
    output: int
    proof: int

    def to_dict(self) -> dict:
        return {"output": self.output, "proof": self.proof}


class VRF:
    """VRF over the field parameters of an NTRU instance."""

    def __init__(self, ntru: NTRU):
        self.ntru = ntru

    def evaluate(self, message: Any, private_key: int) -> VRFOutput:
        output = self.ntru.hash(message)
        return VRFOutput(output=output, proof=self.ntru.sign(output, private_key))

    def verify(self, message: Any, output: int, proof: int, public_key: int) -> bool:
        """
        Check that `output` belongs to `message` and `proof` signs it.

        Returns:
            True if valid. Never raises.
        """
        try:
            expected = self.ntru.hash(message)
        except CodecError as e:
            logger.debug(f"VRF message not encodable: {e}")
            return False

        if expected != output:
            logger.debug("VRF output does not match message")
            return False
        return self.ntru.verify(output, proof, public_key)
