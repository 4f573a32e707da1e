"""
Unity Ledger Error Handling

All error codes and exception classes.

Verification failures (signature, VDF, VRF) are never raised: they are
reported as ``False`` by the verify functions. Exceptions are reserved for
malformed input.
"""

from enum import IntEnum
from typing import Optional, Any


class ErrorCode(IntEnum):
    """Ledger error codes."""

    # 1xxx - General errors
    UNKNOWN_ERROR = 1000
    INVALID_PARAMETER = 1001
    INVALID_CONFIG = 1002

    # 2xxx - Validation errors
    INVALID_AMOUNT = 2001
    MISSING_PREV_TX = 2002
    INVALID_PREV_TX = 2003
    TOKEN_MISMATCH = 2004
    UNKNOWN_PREV_TX = 2005
    CHAIN_FORK = 2006
    INVALID_TX_SIGNATURE = 2007
    INSUFFICIENT_SPENDABLE = 2008

    # 3xxx - Codec errors
    UNSUPPORTED_TYPE = 3001
    UNKNOWN_TAG = 3002
    MALFORMED_PAYLOAD = 3003
    INVALID_BASE64 = 3004
    INVALID_JSON = 3005

    # 4xxx - Arithmetic errors
    NO_MODULAR_INVERSE = 4001

    # 5xxx - VDF errors
    INVALID_VDF_STEPS = 5001
    VDF_CANCELLED = 5002


class UnityError(Exception):
    """Base exception for all ledger errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        details: Optional[Any] = None
    ):
        self.code = code
        self.message = message
        self.details = details
        super().__init__(f"[{code.value}] {message}")

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        result = {
            "code": self.code.value,
            "name": self.code.name,
            "message": self.message,
        }
        if self.details is not None:
            result["details"] = self.details
        return result


# ==============================================================================
# General Errors (1xxx)
# ==============================================================================

class InvalidParameterError(UnityError):
    def __init__(self, param: str, message: str = ""):
        msg = f"Invalid parameter: {param}"
        if message:
            msg += f" - {message}"
        super().__init__(ErrorCode.INVALID_PARAMETER, msg, {"parameter": param})


class ConfigError(UnityError):
    def __init__(self, errors: list):
        super().__init__(
            ErrorCode.INVALID_CONFIG,
            "Invalid configuration: " + "; ".join(errors),
            {"errors": list(errors)}
        )


# ==============================================================================
# Validation Errors (2xxx)
# ==============================================================================

class ValidationError(UnityError):
    """Malformed transaction or rejected append."""


class InvalidAmountError(ValidationError):
    def __init__(self, value: Any):
        super().__init__(
            ErrorCode.INVALID_AMOUNT,
            f"Missing or invalid 'value' in config.data: {value!r}",
            {"value": repr(value)}
        )


class MissingPrevTxError(ValidationError):
    def __init__(self):
        super().__init__(
            ErrorCode.MISSING_PREV_TX,
            "Missing prevTxId for spend transaction"
        )


class InvalidPrevTxError(ValidationError):
    def __init__(self, prev_tx_id: Any):
        super().__init__(
            ErrorCode.INVALID_PREV_TX,
            f"prevTxId must be a positive integer or None: {prev_tx_id!r}",
            {"prev_tx_id": repr(prev_tx_id)}
        )


class TokenMismatchError(ValidationError):
    def __init__(self, expected: int, got: int):
        super().__init__(
            ErrorCode.TOKEN_MISMATCH,
            "Transaction belongs to another token",
            {"expected": expected, "got": got}
        )


class UnknownPrevTxError(ValidationError):
    def __init__(self, prev_tx_id: int):
        super().__init__(
            ErrorCode.UNKNOWN_PREV_TX,
            f"prevTxId not found in token: {prev_tx_id:x}",
            {"prev_tx_id": prev_tx_id}
        )


class ChainForkError(ValidationError):
    def __init__(self, prev_tx_id: Optional[int]):
        where = "root" if prev_tx_id is None else f"{prev_tx_id:x}"
        super().__init__(
            ErrorCode.CHAIN_FORK,
            f"Transaction would fork the chain at {where}",
            {"prev_tx_id": prev_tx_id}
        )


class InvalidTransactionSignatureError(ValidationError):
    def __init__(self):
        super().__init__(
            ErrorCode.INVALID_TX_SIGNATURE,
            "Transaction signature verification failed"
        )


class InsufficientSpendableError(ValidationError):
    def __init__(self, spendable: int, amount: int):
        super().__init__(
            ErrorCode.INSUFFICIENT_SPENDABLE,
            f"Insufficient spendable value: {spendable} < {amount}",
            {"spendable": spendable, "amount": amount}
        )


# ==============================================================================
# Codec Errors (3xxx)
# ==============================================================================

class CodecError(UnityError):
    def __init__(self, code: ErrorCode, message: str, details: Any = None):
        super().__init__(code, message, details)

    @classmethod
    def unsupported(cls, value: Any) -> "CodecError":
        return cls(
            ErrorCode.UNSUPPORTED_TYPE,
            f"Unsupported value type: {type(value).__name__}",
            {"type": type(value).__name__}
        )

    @classmethod
    def unknown_tag(cls, tag: Any) -> "CodecError":
        return cls(ErrorCode.UNKNOWN_TAG, f"Unknown type tag: {tag!r}", {"tag": repr(tag)})

    @classmethod
    def malformed(cls, reason: str) -> "CodecError":
        return cls(ErrorCode.MALFORMED_PAYLOAD, f"Malformed payload: {reason}")


# ==============================================================================
# Arithmetic Errors (4xxx)
# ==============================================================================

class ArithmeticIndeterminateError(UnityError):
    def __init__(self, a: int, m: int, gcd: int):
        super().__init__(
            ErrorCode.NO_MODULAR_INVERSE,
            f"No modular inverse: gcd(a, m) = {gcd}",
            {"gcd": gcd}
        )


# ==============================================================================
# VDF Errors (5xxx)
# ==============================================================================

class VDFError(UnityError):
    """VDF computation error."""


class InvalidStepsError(VDFError):
    def __init__(self, steps: Any, maximum: int):
        super().__init__(
            ErrorCode.INVALID_VDF_STEPS,
            f"VDF steps must be an integer in [1, {maximum}]: {steps!r}",
            {"steps": repr(steps), "maximum": maximum}
        )


class VDFCancelledError(VDFError):
    def __init__(self, steps: int, done: int):
        super().__init__(
            ErrorCode.VDF_CANCELLED,
            f"VDF computation cancelled after {done} of {steps} squarings",
            {"steps": steps, "done": done}
        )
