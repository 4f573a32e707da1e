"""
Unity Ledger VDF Engine

Pietrzak-style recursive halving VDF over Z_N.

Properties:
- Sequential: each round's challenge depends on the previous round's value
- Cost: exactly T modular squarings to prove
- Verifiable: O(log T) rounds of cheap recomputation

Round for input message and T steps:
    x   = H(message) mod N
    x_k = x^(2^ceil(T/2)) mod N
    r   = H("x:x_k:T") mod N
    x1  = x_k * x^r mod N        -> recurse with floor(T/2) steps
At T = 1 the result is y = x^2 mod N.

For T a power of two this is the plain halving protocol. For other T the
ceil/floor split keeps the total number of squarings equal to T.
"""

from __future__ import annotations
import logging
import threading
from typing import Any, Callable, List, Optional, Sequence

from unity.config import VDFConfig
from unity.constants import VDF_MIN_STEPS
from unity.core.types import VDFOutput, VDFRound
from unity.crypto.hash import hash_to_field
from unity.crypto.numeric import mod_pow
from unity.errors import InvalidStepsError, UnityError, VDFCancelledError

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


def challenge(x: int, x_k: int, steps: int, modulus: int) -> int:
    """Fiat-Shamir challenge for one round."""
    return hash_to_field(f"{x}:{x_k}:{steps}", modulus)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _check_steps(steps: Any, max_steps: int) -> bool:
    return _is_int(steps) and VDF_MIN_STEPS <= steps <= max_steps


class _Squarer:
    """Sequential squaring with progress reporting and cancellation."""

    def __init__(
        self,
        total: int,
        config: VDFConfig,
        progress_callback: Optional[ProgressCallback],
        cancel_event: Optional[threading.Event],
    ):
        self.total = total
        self.done = 0
        self.config = config
        self.progress_callback = progress_callback
        self.cancel_event = cancel_event

    def square(self, x: int, times: int, modulus: int) -> int:
        for _ in range(times):
            x = (x * x) % modulus
            self.done += 1

            if self.cancel_event is not None \
                    and self.done % self.config.cancel_check_interval == 0 \
                    and self.cancel_event.is_set():
                raise VDFCancelledError(self.total, self.done)

            if self.progress_callback and self.done % self.config.progress_interval == 0:
                self.progress_callback(self.done, self.total)
        return x


def prove(
    message: Any,
    steps: int,
    modulus: int,
    config: Optional[VDFConfig] = None,
    progress_callback: Optional[ProgressCallback] = None,
    cancel_event: Optional[threading.Event] = None,
) -> VDFOutput:
    """
    Compute the VDF output and its proof.

    Args:
        message: Any codec-encodable input
        steps: Number of sequential squarings T (>= 1)
        modulus: Group modulus N
        config: Limits and callback intervals
        progress_callback: Optional callback(done, total)
        cancel_event: Optional event; when set the computation stops

    Returns:
        VDFOutput(y, proof)

    Raises:
        InvalidStepsError: If T is not an integer in [1, max_steps]
        VDFCancelledError: If cancel_event was set

    Time complexity: O(T) sequential squarings
    """
    config = config or VDFConfig()
    if not _check_steps(steps, config.max_steps):
        raise InvalidStepsError(steps, config.max_steps)

    squarer = _Squarer(steps, config, progress_callback, cancel_event)
    rounds: List[VDFRound] = []

    # Each round's input depends on the previous round's output
    while True:
        x = hash_to_field(message, modulus)
        if steps == 1:
            y = squarer.square(x, 1, modulus)
            break

        x_k = squarer.square(x, (steps + 1) // 2, modulus)
        r = challenge(x, x_k, steps, modulus)
        rounds.append(VDFRound(x_k=x_k, r=r))

        message = (x_k * mod_pow(x, r, modulus)) % modulus
        steps //= 2

    logger.debug(f"VDF computed: {squarer.done} squarings, {len(rounds)} rounds")
    return VDFOutput(y=y, proof=tuple(rounds))


def verify(
    message: Any,
    steps: int,
    y: int,
    proof: Sequence[VDFRound],
    modulus: int,
    config: Optional[VDFConfig] = None,
) -> bool:
    """
    Verify a VDF proof in O(log T) rounds.

    Rejects a challenge mismatch, a wrong final value, and a proof with
    too few or too many rounds.

    Returns:
        True if the proof is valid. Never raises on bad input.
    """
    config = config or VDFConfig()
    if not _check_steps(steps, config.max_steps):
        logger.debug(f"Invalid VDF steps: {steps!r}")
        return False
    if not _is_int(y):
        logger.debug("VDF output is not an integer")
        return False

    try:
        rounds = list(proof)
        for index in range(len(rounds) + 1):
            x = hash_to_field(message, modulus)

            if steps == 1:
                if index != len(rounds):
                    logger.debug(f"VDF proof has {len(rounds) - index} extra rounds")
                    return False
                if mod_pow(x, 2, modulus) != y:
                    logger.debug("VDF output mismatch")
                    return False
                return True

            if index == len(rounds):
                logger.debug("VDF proof truncated")
                return False

            x_k, r = rounds[index].x_k, rounds[index].r
            if not (_is_int(x_k) and _is_int(r)):
                logger.debug(f"VDF round {index} is not integral")
                return False
            if r != challenge(x, x_k, steps, modulus):
                logger.debug(f"VDF challenge mismatch in round {index}")
                return False

            message = (x_k * mod_pow(x, r, modulus)) % modulus
            steps //= 2

    except (UnityError, AttributeError, TypeError, ValueError) as e:
        logger.debug(f"VDF verification error: {e}")
        return False

    return False


class PietrzakVDF:
    """
    VDF bound to one modulus and configuration.
    """

    def __init__(self, modulus: int, config: Optional[VDFConfig] = None):
        self.modulus = modulus
        self.config = config or VDFConfig()

    def prove(
        self,
        message: Any,
        steps: int,
        progress_callback: Optional[ProgressCallback] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> VDFOutput:
        return prove(
            message,
            steps,
            self.modulus,
            self.config,
            progress_callback,
            cancel_event,
        )

    def verify(self, message: Any, steps: int, output: VDFOutput) -> bool:
        if not isinstance(output, VDFOutput):
            logger.debug(f"Not a VDF output: {type(output).__name__}")
            return False
        return verify(message, steps, output.y, output.proof, self.modulus, self.config)
