"""
Unity Ledger Token/Transaction Engine

Mints tokens backed by a VDF proof of their value, builds and appends
hash-linked chains of signed transactions, and answers balance and
ownership queries.

Queries fold over a token's transaction list and never touch the signature
primitive. Appends to one token are serialized by the token's lock; a
transaction that would fork the chain is rejected.
"""

from __future__ import annotations
import logging
import threading
import time
from typing import Any, Callable, Dict, Optional, Set

from unity.config import UnityConfig
from unity.constants import (
    EVENT_TOKEN_MINTED,
    EVENT_TRANSACTION_CREATED,
    EVENT_TRANSACTION_APPENDED,
)
from unity.core.types import Token, Transaction
from unity.crypto.hash import hash_to_field
from unity.crypto.ntru import NTRU
from unity.crypto.vdf import PietrzakVDF, ProgressCallback
from unity.crypto.vrf import VRF
from unity.events import EventBus
from unity.errors import (
    ChainForkError,
    InsufficientSpendableError,
    InvalidParameterError,
    InvalidTransactionSignatureError,
    MissingPrevTxError,
    TokenMismatchError,
    UnknownPrevTxError,
)
from unity.ledger.transaction import (
    ConfigLike,
    create_transaction,
    validate_transaction_basic,
    verify_transaction,
)

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


class Ledger:
    """
    Token ledger for one set of field parameters.

    Args:
        config: Field parameters, VDF limits and ledger policy
        events: Notification bus; handler failures are logged, never raised
        clock: Millisecond clock used for mint and transaction timestamps
    """

    def __init__(
        self,
        config: Optional[UnityConfig] = None,
        events: Optional[EventBus] = None,
        clock: Optional[Callable[[], int]] = None,
    ):
        self.config = (config or UnityConfig.default()).check()
        self.p = self.config.params.p
        self.q = self.config.params.q

        self.ntru = NTRU(self.p, self.q)
        self.vdf = PietrzakVDF(self.p, self.config.vdf)
        self.vrf = VRF(self.ntru)

        self.events = events if events is not None else EventBus()
        self._clock = clock or _now_ms

    def _publish(self, event: str, data: Any) -> None:
        try:
            self.events.publish(event, data)
        except Exception as e:
            logger.warning(f"Event handler for {event} failed: {e}")

    # ==========================================================================
    # Tokens
    # ==========================================================================

    @staticmethod
    def mint_input(pub_key: int, value: int, timestamp: int) -> str:
        """Deterministic VDF input for a token."""
        return f"{pub_key:x}{value:x}{timestamp:x}"

    def mint_token(
        self,
        pub_key: int,
        value: int,
        progress_callback: Optional[ProgressCallback] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> Token:
        """
        Mint a token, proving its value with `value` VDF steps.

        Raises:
            InvalidParameterError: If pub_key or value is not a non-negative int
            InvalidStepsError: If value is outside the VDF step range
            VDFCancelledError: If cancel_event was set
        """
        for name, arg in (("pub_key", pub_key), ("value", value)):
            if not isinstance(arg, int) or isinstance(arg, bool) or arg < 0:
                raise InvalidParameterError(name, f"must be a non-negative integer: {arg!r}")

        timestamp = self._clock()
        proof = self.vdf.prove(
            self.mint_input(pub_key, value, timestamp),
            value,
            progress_callback=progress_callback,
            cancel_event=cancel_event,
        )
        token = Token(pub_key=pub_key, value=value, timestamp=timestamp, proof=proof)

        logger.info(f"Minted token value={value} rounds={proof.rounds}")
        self._publish(EVENT_TOKEN_MINTED, token)
        return token

    def verify_token(self, token: Token) -> bool:
        """Check the token's VDF proof against its minting fields."""
        try:
            message = self.mint_input(token.pub_key, token.value, token.timestamp)
        except (TypeError, ValueError) as e:
            logger.debug(f"Token fields malformed: {e}")
            return False

        if not self.vdf.verify(message, token.value, token.proof):
            logger.debug("Token proof invalid")
            return False
        return True

    def token_id(self, token: Token) -> int:
        return hash_to_field(token.minting_fields(), self.p)

    def transaction_id(self, tx: Transaction) -> int:
        return hash_to_field(tx.signed_message(), self.p)

    # ==========================================================================
    # Transactions
    # ==========================================================================

    def create_transaction(
        self,
        token_id: int,
        prev_tx_id: Optional[int],
        private_key: int,
        config: ConfigLike,
    ) -> Transaction:
        """
        Create and sign a transaction.

        prev_tx_id is None for a token's first transaction. A spend that
        omits it on a non-empty chain is rejected by append_transaction.

        Raises:
            ValidationError: If the config or prev_tx_id is malformed
        """
        tx = create_transaction(
            self.ntru,
            token_id,
            prev_tx_id,
            private_key,
            config,
            self._clock(),
        )
        self._publish(EVENT_TRANSACTION_CREATED, tx)
        return tx

    def verify_transaction(self, tx: Transaction, public_key: Optional[int] = None) -> bool:
        return verify_transaction(self.ntru, tx, public_key)

    def append_transaction(self, token: Token, tx: Transaction) -> int:
        """
        Append a transaction to a token's chain.

        Rejects, in order: malformed transactions, another token's
        transaction, a second root, an unknown predecessor, a fork, a bad
        signature and, when enforce_spendable is set, an overspend.

        Returns:
            Id of the appended transaction

        Raises:
            ValidationError: If the transaction is rejected
        """
        validate_transaction_basic(tx.prev_tx_id, tx.config)

        with token.lock:
            token_id = self.token_id(token)
            if tx.token_id != token_id:
                raise TokenMismatchError(token_id, tx.token_id)

            if tx.prev_tx_id is None:
                if token.transactions:
                    if tx.config.is_spend:
                        raise MissingPrevTxError()
                    raise ChainForkError(None)
            else:
                if tx.prev_tx_id not in self._index(token):
                    raise UnknownPrevTxError(tx.prev_tx_id)
                if any(t.prev_tx_id == tx.prev_tx_id for t in token.transactions):
                    raise ChainForkError(tx.prev_tx_id)

            if not self.verify_transaction(tx):
                raise InvalidTransactionSignatureError()

            if self.config.ledger.enforce_spendable and tx.config.is_spend:
                spendable = self.spendable_value(token, tx.config.from_key)
                if spendable < tx.config.amount:
                    raise InsufficientSpendableError(spendable, tx.config.amount)

            token.transactions.append(tx)

        tx_id = self.transaction_id(tx)
        logger.debug(f"Appended transaction {tx_id:x} ({len(token.transactions)} in chain)")
        self._publish(EVENT_TRANSACTION_APPENDED, tx)
        return tx_id

    def _index(self, token: Token) -> Dict[int, Transaction]:
        return {self.transaction_id(tx): tx for tx in token.transactions}

    def find_transaction(self, token: Token, tx_id: int) -> Optional[Transaction]:
        for tx in token.transactions:
            if self.transaction_id(tx) == tx_id:
                return tx
        return None

    def chain_depth(self, token: Token, tx_id: int) -> int:
        """
        Number of prev links from `tx_id` towards the root.

        Stops at a root, or when a referenced id is not in the token.
        """
        index = self._index(token)
        depth = 0
        seen = set()
        current = tx_id

        while current not in seen:
            seen.add(current)
            tx = index.get(current)
            if tx is None or tx.prev_tx_id is None:
                break
            current = tx.prev_tx_id
            depth += 1

        return depth

    # ==========================================================================
    # Balances
    # ==========================================================================

    def received_value(self, token: Token, pub_key: int) -> int:
        return sum(
            tx.config.amount
            for tx in token.transactions
            if tx.config.is_spend and tx.config.to_key == pub_key
        )

    def spent_value(self, token: Token, pub_key: int) -> int:
        return sum(
            tx.config.amount
            for tx in token.transactions
            if tx.config.is_spend and tx.config.from_key == pub_key
        )

    def spendable_value(self, token: Token, pub_key: int) -> int:
        """
        Received minus spent value.

        The minter, until it receives anything, starts from the face value.
        May be negative if an overspend was appended.
        """
        received = self.received_value(token, pub_key)
        if pub_key == token.pub_key and received == 0:
            received = token.value
        return received - self.spent_value(token, pub_key)

    def current_owners(self, token: Token) -> Set[int]:
        """Receivers that never sent, or the minter if there are none."""
        senders = {tx.config.from_key for tx in token.transactions}
        receivers = {
            tx.config.to_key for tx in token.transactions if tx.config.to_key is not None
        }
        return (receivers - senders) or {token.pub_key}
