"""Bloom filter over the carrier frames sent in a session.

Sized from a byte budget:
- z bytes -> L = 8z bits
- k = floor(ln(2) * z / m) hash functions for m expected items, at least 1
- Bits are only ever set, never cleared
- Serialized as exactly L '0'/'1' characters so it drops into a fixed-width field
"""
import hashlib
import math


class BloomAccumulator:
    """Fixed-size Bloom filter.

    An empty budget or zero expected items gives a degenerate filter:
    k = 0, adds are no-ops and the bit array stays all zero.
    """

    def __init__(self, byte_budget: int, expected_items: int, salt: bytes = b''):
        if byte_budget < 0:
            raise ValueError(f"byte budget must be >= 0, got {byte_budget}")
        if expected_items < 0:
            raise ValueError(f"expected items must be >= 0, got {expected_items}")

        self.byte_budget = byte_budget
        self.bit_length = byte_budget * 8
        self.salt = salt
        self.inserted_count = 0

        if byte_budget == 0 or expected_items == 0:
            self.hash_count = 0
        else:
            self.hash_count = max(1, math.floor(math.log(2) * byte_budget / expected_items))

        self._bits = bytearray(byte_budget)

    def add(self, item: bytes) -> None:
        """Set the k bits for item."""
        for bit_index in self._positions(item):
            self._bits[bit_index // 8] |= (1 << (7 - bit_index % 8))
        self.inserted_count += 1

    def contains(self, item: bytes) -> bool:
        """Check if item is in the filter.

        Returns:
            True if item is PROBABLY in the filter
            False if item is DEFINITELY NOT in the filter

        A degenerate filter (k = 0) checks no positions and reports every
        item as possibly present.
        """
        for bit_index in self._positions(item):
            if not self._bits[bit_index // 8] & (1 << (7 - bit_index % 8)):
                return False
        return True

    def __contains__(self, item: bytes) -> bool:
        return self.contains(item)

    def false_positive_rate(self) -> float:
        """Estimated FPR for the current fill: (1 - e^(-k*n/L))^k."""
        if self.hash_count == 0:
            return 1.0
        exponent = -self.hash_count * self.inserted_count / self.bit_length
        return (1 - math.exp(exponent)) ** self.hash_count

    def serialize(self) -> str:
        """Bit string of exactly bit_length characters, bit 0 first."""
        return ''.join(format(byte, '08b') for byte in self._bits)

    def to_bytes(self) -> bytes:
        """Raw bit array, byte_budget bytes."""
        return bytes(self._bits)

    def _positions(self, item: bytes) -> list[int]:
        return [self._hash_to_bit_index(item, k) for k in range(self.hash_count)]

    def _hash_to_bit_index(self, item: bytes, k: int) -> int:
        """Hash item with salt and k index to get a bit index in [0, L).

        Uses BLAKE2b with personalization for k.
        """
        h = hashlib.blake2b(
            item + self.salt,
            digest_size=8,
            person=f"bloom-k{k}".encode()[:16]
        )
        hash_val = int.from_bytes(h.digest(), byteorder='little')
        return hash_val % self.bit_length

    def __repr__(self) -> str:
        return (
            f"BloomAccumulator(bits={self.bit_length}, k={self.hash_count}, "
            f"inserted={self.inserted_count})"
        )
