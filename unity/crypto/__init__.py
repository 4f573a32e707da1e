"""
Unity Ledger Cryptographic Primitives
"""

from unity.crypto.numeric import mod_inverse, mod_pow
from unity.crypto.hash import sha256, sha256_hex, hash_to_field
from unity.crypto.ntru import NTRU
from unity.crypto.vdf import PietrzakVDF
from unity.crypto.vrf import VRF, VRFOutput

__all__ = [
    # Numeric toolkit
    "mod_inverse",
    "mod_pow",
    # Hash functions
    "sha256",
    "sha256_hex",
    "hash_to_field",
    # Asymmetric primitive
    "NTRU",
    # VDF / VRF
    "PietrzakVDF",
    "VRF",
    "VRFOutput",
]
