"""Payload assembly for the authenticated frames.

Payloads are bit strings ('0'/'1' characters). Every payload starts with an
8-bit header: 3 bits of security level followed by 5 bits of application meta.
"""
from typing import Optional

from tesla import constants
from tesla.bloom import BloomAccumulator
from tesla.policy import Packing, SlotBudget


def hex_to_bits(hex_string: str) -> str:
    """Convert a hex string to a bit string, 4 bits per digit."""
    return ''.join(format(int(digit, 16), '04b') for digit in hex_string)


def bytes_to_bits(data: bytes) -> str:
    return hex_to_bits(data.hex())


def header_bits(level: int, meta: int = constants.META_TESLA) -> str:
    return format(level, f'0{constants.LEVEL_BITS}b') + format(meta, f'0{constants.META_BITS}b')


def build_payloads(
    budget: SlotBudget,
    key: bytes,
    tag: bytes,
    bloom: Optional[BloomAccumulator] = None
) -> list[str]:
    """Lay out key, tag and filter for the budget's packing.

    Returns one payload, or two for split levels (TESLA frame first, then
    the filter frame marked with META_FILTER).
    """
    level = int(budget.level)
    packing = budget.profile.packing
    header = header_bits(level)

    if packing is Packing.HEADER_ONLY:
        return [header]

    tesla = header + bytes_to_bits(key) + bytes_to_bits(tag)
    if packing is Packing.TESLA:
        return [tesla]

    if bloom is None:
        raise ValueError(f"level {level} packs a Bloom filter but none was given")
    if bloom.byte_budget != budget.bloom_byte_budget:
        raise ValueError(
            f"filter is {bloom.byte_budget}B, level {level} budget is {budget.bloom_byte_budget}B"
        )

    if packing is Packing.TESLA_WITH_FILTER:
        return [tesla + bloom.serialize()]

    return [tesla, header_bits(level, constants.META_FILTER) + bloom.serialize()]
