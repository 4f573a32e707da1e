"""
Unity Ledger Constants

All protocol constants defined here for single source of truth.
"""

from typing import Final, Dict

# ==============================================================================
# FIELD PARAMETERS
# ==============================================================================

DEFAULT_P: Final[int] = 2**256 - 587            # Signature / encryption modulus
DEFAULT_Q: Final[int] = 2**1279 - 1             # Masking modulus (Mersenne prime)

# Small parameters for fast tests. Both prime, q >> p**3.
TEST_P: Final[int] = 2**61 - 1
TEST_Q: Final[int] = 2**521 - 1

# hash_to_field never returns zero; a zero residue maps here
HASH_ZERO_SENTINEL: Final[int] = 1

LITTLE_ENDIAN: Final[str] = "little"

LOGGER_NAME: Final[str] = "unity"

# ==============================================================================
# ENVELOPE
# ==============================================================================

ENVELOPE_SEPARATOR: Final[str] = ":"
KEYSTREAM_BYTE_MASK: Final[int] = 0xFF

# ==============================================================================
# VDF
# ==============================================================================

VDF_MIN_STEPS: Final[int] = 1
VDF_MAX_STEPS: Final[int] = 1 << 32
VDF_PROGRESS_INTERVAL: Final[int] = 100_000     # Squarings between progress callbacks
VDF_CANCEL_CHECK_INTERVAL: Final[int] = 1024    # Squarings between cancel checks

# ==============================================================================
# LEDGER
# ==============================================================================

TX_TYPE_SPEND: Final[str] = "spend"

EVENT_TOKEN_MINTED: Final[str] = "token_minted"
EVENT_TRANSACTION_CREATED: Final[str] = "transaction_created"
EVENT_TRANSACTION_APPENDED: Final[str] = "transaction_appended"

# ==============================================================================
# CODEC TAGS
# ==============================================================================

TAG_KEY: Final[str] = "type"
VALUE_KEY: Final[str] = "value"

TAG_BIGINT: Final[str] = "BigInt"
TAG_NAN: Final[str] = "NaN"
TAG_INFINITY: Final[str] = "Infinity"
TAG_NEG_INFINITY: Final[str] = "-Infinity"
TAG_DATE: Final[str] = "Date"
TAG_REGEXP: Final[str] = "RegExp"
TAG_BYTES: Final[str] = "Bytes"
TAG_BYTEARRAY: Final[str] = "ByteArray"
TAG_MAP: Final[str] = "Map"
TAG_SET: Final[str] = "Set"
TAG_FROZENSET: Final[str] = "FrozenSet"
TAG_TUPLE: Final[str] = "Tuple"
TAG_OBJECT: Final[str] = "Object"

# array.array typecode -> fixed-width buffer tag
TYPED_ARRAY_TAGS: Final[Dict[str, str]] = {
    "b": "Int8Array",
    "B": "Uint8Array",
    "h": "Int16Array",
    "H": "Uint16Array",
    "i": "Int32Array",
    "I": "Uint32Array",
    "q": "BigInt64Array",
    "Q": "BigUint64Array",
    "f": "Float32Array",
    "d": "Float64Array",
}

TYPED_ARRAY_TYPECODES: Final[Dict[str, str]] = {
    tag: code for code, tag in TYPED_ARRAY_TAGS.items()
}
