"""
Unity Ledger Full Cycle Integration Tests

Tests the complete flow: configuration -> keys -> mint -> transfer chain ->
encrypted hand-over -> independent verification.
"""

import itertools

import pytest

from unity.config import UnityConfig
from unity.constants import EVENT_TRANSACTION_APPENDED
from unity.core.types import Token
from unity.events import EventBus
from unity.ledger import Ledger


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def saved_config(tmp_path):
    """Small-parameter configuration written to disk."""
    path = tmp_path / "unity.json"
    UnityConfig.small_test().save(str(path))
    return str(path)


@pytest.fixture
def cycle_ledger(saved_config):
    counter = itertools.count(1_700_000_000_000, 1000)
    return Ledger(UnityConfig.load(saved_config), clock=lambda: next(counter))


# =============================================================================
# Full Cycle
# =============================================================================

class TestFullCycle:
    """End-to-end token lifecycle."""

    def test_mint_transfer_verify(self, cycle_ledger):
        ledger = cycle_ledger
        alice, bob, carol = (ledger.ntru.keys_from_password(name) for name in ("alice", "bob", "carol"))

        appended = []
        ledger.events.subscribe(EVENT_TRANSACTION_APPENDED, appended.append)

        # Mint
        token = ledger.mint_token(alice.public, 10)
        assert ledger.verify_token(token)
        token_id = ledger.token_id(token)

        # alice -> bob -> carol
        tx1 = ledger.create_transaction(
            token_id, None, alice.private,
            {"type": "spend", "to": bob.public, "data": {"value": 4}},
        )
        tx1_id = ledger.append_transaction(token, tx1)

        tx2 = ledger.create_transaction(
            token_id, tx1_id, bob.private,
            {"type": "spend", "to": carol.public, "data": {"value": 4}},
        )
        tx2_id = ledger.append_transaction(token, tx2)

        assert appended == [tx1, tx2]
        assert ledger.chain_depth(token, tx2_id) == 1
        assert ledger.spendable_value(token, alice.public) == 6
        assert ledger.spendable_value(token, bob.public) == 0
        assert ledger.spendable_value(token, carol.public) == 4
        assert ledger.current_owners(token) == {carol.public}

        # Hand the token to carol inside an envelope
        envelope = ledger.ntru.encrypt_envelope(token.to_dict(), carol.public)
        received = Token.from_dict(ledger.ntru.decrypt_envelope(envelope, carol.private))

        # A fresh ledger with the same parameters verifies everything
        verifier = Ledger(ledger.config, events=EventBus())
        assert verifier.verify_token(received)
        assert verifier.token_id(received) == token_id
        assert all(verifier.verify_transaction(tx) for tx in received.transactions)
        assert verifier.current_owners(received) == {carol.public}

    def test_vrf_lottery(self, cycle_ledger):
        """Owners draw verifiable randomness bound to a token."""
        ledger = cycle_ledger
        keys = ledger.ntru.keys_from_password("dave")
        token = ledger.mint_token(keys.public, 2)

        vrf = ledger.vrf
        draw = vrf.evaluate({"token": ledger.token_id(token), "round": 1}, keys.private)
        assert vrf.verify(
            {"token": ledger.token_id(token), "round": 1}, draw.output, draw.proof, keys.public
        )
        assert 1 <= draw.output < ledger.p

    def test_ledgers_are_independent(self, cycle_ledger):
        """Different field parameters yield unrelated identifiers."""
        production = Ledger(UnityConfig.default())
        keys = production.ntru.generate_keys(0xC0FFEE)
        token = production.mint_token(keys.public, 1)

        assert production.verify_token(token)
        assert not cycle_ledger.verify_token(token)
        assert production.p != cycle_ledger.p
