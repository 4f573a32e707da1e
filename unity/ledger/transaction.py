"""
Unity Ledger Transaction Protocol

Transaction creation and validation.

Structural checks run before any cryptography: a malformed config raises
ValidationError; a bad signature is reported as False.
"""

from __future__ import annotations
import logging
from typing import Any, Mapping, Optional, Union

from unity.core.types import Transaction, TransactionConfig, TransactionData
from unity.crypto.ntru import NTRU
from unity.errors import InvalidAmountError, InvalidPrevTxError

logger = logging.getLogger(__name__)

ConfigLike = Union[TransactionConfig, Mapping[str, Any]]


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def build_config(config: ConfigLike, sender: int) -> TransactionConfig:
    """
    Normalize a config mapping into a TransactionConfig.

    `from` defaults to the sender's public value.
    """
    if not isinstance(config, TransactionConfig):
        config = TransactionConfig.from_dict(config)
    if config.from_key is None:
        config = TransactionConfig(
            type=config.type,
            from_key=sender,
            to_key=config.to_key,
            data=config.data,
        )
    return config


def validate_transaction_basic(prev_tx_id: Optional[int], config: TransactionConfig) -> None:
    """
    Structural validation (no token or keys required).

    Raises:
        InvalidPrevTxError: If prev_tx_id is neither None nor a positive int
        InvalidAmountError: If a spend lacks a positive integer amount
    """
    if prev_tx_id is not None and (not _is_int(prev_tx_id) or prev_tx_id <= 0):
        raise InvalidPrevTxError(prev_tx_id)

    if config.is_spend:
        amount = config.amount
        if not _is_int(amount) or amount <= 0:
            raise InvalidAmountError(amount)


def create_transaction(
    ntru: NTRU,
    token_id: int,
    prev_tx_id: Optional[int],
    private_key: int,
    config: ConfigLike,
    timestamp: int,
) -> Transaction:
    """
    Create a signed transaction.

    Args:
        ntru: Primitive for the ledger's field parameters
        token_id: Id of the token being spent
        prev_tx_id: Id of the previous transaction, None for the root
        private_key: Sender's private scalar f
        config: {type, from, to, data: {value}}
        timestamp: Creation time (ms)

    Returns:
        Signed Transaction

    Raises:
        ValidationError: If the config or prev_tx_id is malformed
    """
    config = build_config(config, ntru.public_key(private_key))
    validate_transaction_basic(prev_tx_id, config)

    unsigned = Transaction(
        token_id=token_id,
        prev_tx_id=prev_tx_id,
        data=TransactionData(config=config, timestamp=timestamp),
        signature=0,
    )
    signature = ntru.sign(unsigned.signed_message(), private_key)
    return unsigned.with_signature(signature)


def verify_transaction(ntru: NTRU, tx: Transaction, public_key: Optional[int] = None) -> bool:
    """
    Verify a transaction signature.

    Args:
        tx: Transaction to check
        public_key: Key to check against; defaults to data.config.from

    Returns:
        True if the signature is valid
    """
    if public_key is None:
        public_key = tx.config.from_key
    if not _is_int(public_key):
        logger.debug("Transaction has no sender key")
        return False

    if not ntru.verify(tx.signed_message(), tx.signature, public_key):
        logger.debug("Transaction signature invalid")
        return False
    return True
