"""One-way hash chain for delayed key disclosure.

The chain is built backwards from a secret seed:

    K0 = H^n(seed)          commitment, published before any key is used
    Ki = H^i(seed)          key held at chain index i (n >= i >= 0)

The index starts at n and goes down by one per elapsed timeslot, so keys are
disclosed in the reverse order of their computation. Anyone holding a
disclosed Ki can check it against K0 with H^(n-i)(Ki) == K0 but cannot
compute a key with a higher index than the ones already disclosed.
"""
from dataclasses import dataclass
import logging

import crypto

log = logging.getLogger(__name__)


class KeyChainIntegrityFailure(Exception):
    """Raised when a chain key does not lead back to its commitment."""
    pass


@dataclass(frozen=True)
class Commitment:
    """Terminal chain value plus the chain length it was computed with."""
    value: bytes
    chain_length: int


def apply(value: bytes, times: int = 1) -> bytes:
    """Apply the one-way function `times` times."""
    if times < 0:
        raise ValueError(f"cannot apply the one-way function {times} times")
    for _ in range(times):
        value = crypto.one_way(value)
    return value


def derive_commitment(seed: bytes, n: int) -> bytes:
    """Compute K0 = H^n(seed)."""
    if n <= 0:
        raise ValueError(f"chain length must be positive, got {n}")
    return apply(seed, n)


def derive_key(seed: bytes, n: int, i: int) -> bytes:
    """Compute the key at chain index i, i.e. H^i(seed).

    derive_key(seed, n, i + 1) == apply(derive_key(seed, n, i)) for every
    0 <= i < n, and derive_key(seed, n, n) is the commitment.
    """
    if not 0 <= i <= n:
        raise ValueError(f"chain index {i} outside [0, {n}]")
    return apply(seed, i)


def verify(key: bytes, steps_elapsed: int, expected_commitment: bytes) -> bool:
    """Check that `steps_elapsed` applications of H lead from key to the commitment.

    Returns False on mismatch, never raises for a wrong key.
    """
    if steps_elapsed < 0:
        return False
    return crypto.constant_time_equal(apply(key, steps_elapsed), expected_commitment)


class KeyChain:
    """Key chain state for one session.

    Tracks the current index, which moves from chain_length down to 0 as
    timeslots elapse.
    """

    def __init__(self, seed: bytes, chain_length: int):
        self._seed = seed
        self.chain_length = chain_length
        self.commitment = Commitment(derive_commitment(seed, chain_length), chain_length)
        self.current_index = chain_length
        log.debug(f"keychain.init: n={chain_length} K0={self.commitment.value.hex()}")

    @property
    def elapsed(self) -> int:
        """Number of timeslots consumed since the commitment."""
        return self.chain_length - self.current_index

    def advance(self) -> int:
        """Consume one timeslot. Returns the new current index."""
        if self.current_index == 0:
            raise KeyChainIntegrityFailure(
                f"key chain exhausted after {self.chain_length} timeslots"
            )
        self.current_index -= 1
        return self.current_index

    def current_key(self) -> bytes:
        """Derive Ki for the current index."""
        return derive_key(self._seed, self.chain_length, self.current_index)

    def verify_current(self, key: bytes) -> bool:
        """Check a key claimed for the current index against the commitment."""
        return verify(key, self.elapsed, self.commitment.value)

    def __repr__(self) -> str:
        return f"KeyChain(n={self.chain_length}, index={self.current_index})"
