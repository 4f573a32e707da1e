"""
Unity Ledger

Value tokens backed by a Pietrzak VDF, moved through hash-linked chains of
NTRU-style signed transactions.
"""

__version__ = "0.3.0"
__author__ = "Unity Ledger Team"

from unity.constants import DEFAULT_P, DEFAULT_Q

__all__ = [
    "DEFAULT_P",
    "DEFAULT_Q",
    "__version__",
]
