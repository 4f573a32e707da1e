"""
Unity Ledger Test Fixtures
"""

import itertools

import pytest

from unity.config import UnityConfig
from unity.core.types import KeyPair
from unity.crypto.ntru import NTRU
from unity.events import EventBus
from unity.ledger import Ledger


@pytest.fixture
def config() -> UnityConfig:
    """Small-parameter configuration for fast tests."""
    return UnityConfig.small_test()


@pytest.fixture
def ntru(config) -> NTRU:
    return NTRU(config.params.p, config.params.q)


@pytest.fixture
def keypair(ntru) -> KeyPair:
    """Deterministic key pair K1."""
    return ntru.generate_keys(0x1234_5678_9ABC)


@pytest.fixture
def keypair_2(ntru) -> KeyPair:
    """Deterministic key pair K2."""
    return ntru.generate_keys(0x0FED_CBA9_8765)


@pytest.fixture
def keypair_3(ntru) -> KeyPair:
    """Deterministic key pair K3."""
    return ntru.generate_keys(0x0BAD_F00D_CAFE)


@pytest.fixture
def clock():
    """Monotonic millisecond clock starting at a fixed instant."""
    counter = itertools.count(1_700_000_000_000)
    return lambda: next(counter)


@pytest.fixture
def event_bus() -> EventBus:
    return EventBus()


@pytest.fixture
def ledger(config, event_bus, clock) -> Ledger:
    return Ledger(config, events=event_bus, clock=clock)


@pytest.fixture
def minted_token(ledger, keypair):
    """Token of value 3 minted by K1."""
    return ledger.mint_token(keypair.public, 3)
