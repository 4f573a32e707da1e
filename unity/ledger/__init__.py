"""
Unity Ledger Token/Transaction Engine
"""

from unity.ledger.transaction import (
    create_transaction,
    verify_transaction,
    validate_transaction_basic,
)
from unity.ledger.wallet import Ledger

__all__ = [
    "Ledger",
    "create_transaction",
    "verify_transaction",
    "validate_transaction_basic",
]
