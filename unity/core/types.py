"""
Unity Ledger Types

Keys, VDF proofs, tokens and transactions.

Every type converts to and from a plain dict (`to_dict` / `from_dict`) whose
keys match the canonical wire names, so that hashing the dict through the
canonical codec yields stable identifiers.
"""

from __future__ import annotations
import threading
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Optional, Tuple

from unity.constants import TX_TYPE_SPEND


@dataclass(frozen=True, slots=True)
class KeyPair:
    """
    Private scalar f and public value h.

    NOTE: f is never derivable from h under the scheme's assumption.
    """
    private: int
    public: int

    def __repr__(self) -> str:
        # Never expose the private scalar
        return f"KeyPair(public={self.public:x}, private=<redacted>)"


# ==============================================================================
# VDF
# ==============================================================================

@dataclass(frozen=True, slots=True)
class VDFRound:
    """One halving round: intermediate value x_k and challenge r."""
    x_k: int
    r: int

    def to_dict(self) -> dict:
        return {"x_k": self.x_k, "r": self.r}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> VDFRound:
        return cls(x_k=data["x_k"], r=data["r"])


@dataclass(frozen=True, slots=True)
class VDFOutput:
    """
    VDF result y with its recursive proof.

    The proof holds one round per halving, outermost first.
    """
    y: int
    proof: Tuple[VDFRound, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "proof", tuple(self.proof))

    @property
    def rounds(self) -> int:
        return len(self.proof)

    def to_dict(self) -> dict:
        return {"y": self.y, "proof": [r.to_dict() for r in self.proof]}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> VDFOutput:
        return cls(
            y=data["y"],
            proof=tuple(VDFRound.from_dict(r) for r in data["proof"]),
        )


# ==============================================================================
# Transactions
# ==============================================================================

@dataclass(frozen=True)
class TransactionConfig:
    """
    What a transaction does: {type, from, to, data: {value}}.

    `from_key` and `to_key` are public values h.
    """
    type: str = TX_TYPE_SPEND
    from_key: Optional[int] = None
    to_key: Optional[int] = None
    data: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_spend(self) -> bool:
        return self.type == TX_TYPE_SPEND

    @property
    def amount(self) -> Any:
        return self.data.get("value")

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "from": self.from_key,
            "to": self.to_key,
            "data": dict(self.data),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TransactionConfig:
        return cls(
            type=data.get("type", TX_TYPE_SPEND),
            from_key=data.get("from"),
            to_key=data.get("to"),
            data=dict(data.get("data") or {}),
        )


@dataclass(frozen=True)
class TransactionData:
    """Signed payload: config plus creation timestamp (ms)."""
    config: TransactionConfig
    timestamp: int

    def to_dict(self) -> dict:
        return {"config": self.config.to_dict(), "timestamp": self.timestamp}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TransactionData:
        return cls(
            config=TransactionConfig.from_dict(data["config"]),
            timestamp=data["timestamp"],
        )


@dataclass(frozen=True)
class Transaction:
    """
    Signed transfer record.

    prev_tx_id is None for the root of a token's chain, otherwise the id of
    exactly one earlier transaction of the same token.
    """
    token_id: int
    prev_tx_id: Optional[int]
    data: TransactionData
    signature: int

    @property
    def config(self) -> TransactionConfig:
        return self.data.config

    def signed_message(self) -> dict:
        """The message that is signed and hashed into the transaction id."""
        return {
            "tokenId": self.token_id,
            "prevTxId": self.prev_tx_id,
            "data": self.data.to_dict(),
        }

    def with_signature(self, signature: int) -> Transaction:
        return replace(self, signature=signature)

    def to_dict(self) -> dict:
        result = self.signed_message()
        result["signature"] = self.signature
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Transaction:
        return cls(
            token_id=data["tokenId"],
            prev_tx_id=data.get("prevTxId"),
            data=TransactionData.from_dict(data["data"]),
            signature=data["signature"],
        )


# ==============================================================================
# Tokens
# ==============================================================================

@dataclass
class Token:
    """
    Minted unit of value.

    `value` is fixed at mint time. `transactions` is append-only; appends go
    through Ledger.append_transaction, which holds `lock`.
    """
    pub_key: int
    value: int
    timestamp: int
    proof: VDFOutput
    transactions: List[Transaction] = field(default_factory=list)
    lock: threading.Lock = field(
        default_factory=threading.Lock, repr=False, compare=False
    )

    def minting_fields(self) -> dict:
        """Fields hashed into the token id."""
        return {
            "pubKey": self.pub_key,
            "value": self.value,
            "timestamp": self.timestamp,
            "proof": self.proof.to_dict(),
        }

    def to_dict(self) -> dict:
        result = self.minting_fields()
        result["transactions"] = [tx.to_dict() for tx in self.transactions]
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Token:
        return cls(
            pub_key=data["pubKey"],
            value=data["value"],
            timestamp=data["timestamp"],
            proof=VDFOutput.from_dict(data["proof"]),
            transactions=[Transaction.from_dict(tx) for tx in data.get("transactions", [])],
        )
