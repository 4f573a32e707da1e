"""
Unity Ledger Core Types
"""

from unity.core.types import (
    KeyPair,
    VDFRound,
    VDFOutput,
    TransactionConfig,
    TransactionData,
    Transaction,
    Token,
)

__all__ = [
    "KeyPair",
    "VDFRound",
    "VDFOutput",
    "TransactionConfig",
    "TransactionData",
    "Transaction",
    "Token",
]
