"""Security levels and the slot budget each one gets.

Every level fixes the MAC digest sizes, how many carrier frames are sent
before the authenticated frame, and how the authentication material is
packed. The Bloom filter gets whatever is left of the slot capacity.
"""
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Union

from tesla import constants


class ConfigurationError(ValueError):
    """Raised for settings the protocol cannot run with."""
    pass


class Packing(Enum):
    """How authentication material is laid out in the authenticated frame(s)."""
    HEADER_ONLY = 'header_only'  # level id + meta, nothing else
    TESLA = 'tesla'  # key + tag
    TESLA_WITH_FILTER = 'tesla_with_filter'  # key + tag + filter in one frame
    SPLIT = 'split'  # key + tag in one frame, filter in a second frame


@dataclass(frozen=True)
class SecurityLevelProfile:
    input_digest_size: int  # full MAC digest, bytes
    output_digest_size: int  # transmitted tag, bytes
    carrier_message_count: int
    packing: Packing

    @property
    def uses_filter(self) -> bool:
        return self.packing in (Packing.TESLA_WITH_FILTER, Packing.SPLIT)


class SecurityLevel(IntEnum):
    LEVEL_0 = 0
    LEVEL_1 = 1
    LEVEL_2 = 2
    LEVEL_3 = 3
    LEVEL_4 = 4
    LEVEL_5 = 5
    LEVEL_6 = 6

    @property
    def profile(self) -> SecurityLevelProfile:
        return PROFILES[self]


PROFILES: dict[SecurityLevel, SecurityLevelProfile] = {
    SecurityLevel.LEVEL_0: SecurityLevelProfile(64, 49, 1, Packing.HEADER_ONLY),
    SecurityLevel.LEVEL_1: SecurityLevelProfile(64, 49, 1, Packing.TESLA),
    SecurityLevel.LEVEL_2: SecurityLevelProfile(64, 21, 1, Packing.TESLA),
    SecurityLevel.LEVEL_3: SecurityLevelProfile(64, 32, 2, Packing.TESLA_WITH_FILTER),
    SecurityLevel.LEVEL_4: SecurityLevelProfile(64, 20, 4, Packing.TESLA_WITH_FILTER),
    SecurityLevel.LEVEL_5: SecurityLevelProfile(64, 20, 9, Packing.SPLIT),
    SecurityLevel.LEVEL_6: SecurityLevelProfile(64, 49, 9, Packing.SPLIT),
}

_missing = set(SecurityLevel) - set(PROFILES)
if _missing:
    raise ConfigurationError(f"security levels without a profile: {sorted(_missing)}")


@dataclass(frozen=True)
class SlotBudget:
    """Byte budget for one security level, checked against the slot capacity."""
    level: SecurityLevel
    profile: SecurityLevelProfile
    slot_capacity: int = constants.SLOT_CAPACITY
    key_size: int = constants.KEY_SIZE
    meta_size: int = constants.META_SIZE

    def __post_init__(self):
        if self.bloom_byte_budget < 0:
            raise ConfigurationError(
                f"level {int(self.level)}: negative filter budget {self.bloom_byte_budget}B"
            )
        for bits in self.frame_bits():
            if bits > self.slot_capacity * 8:
                raise ConfigurationError(
                    f"level {int(self.level)}: payload of {bits} bits exceeds "
                    f"slot capacity of {self.slot_capacity * 8} bits"
                )

    @property
    def bloom_byte_budget(self) -> int:
        if self.profile.packing is Packing.SPLIT:
            # Filter travels in its own frame
            return self.slot_capacity - self.meta_size
        return self.slot_capacity - (self.profile.output_digest_size + self.key_size + self.meta_size)

    def frame_bits(self) -> list[int]:
        """Payload length in bits of each authenticated frame."""
        header = self.meta_size * 8
        tesla = header + (self.key_size + self.profile.output_digest_size) * 8
        packing = self.profile.packing
        if packing is Packing.HEADER_ONLY:
            return [header]
        if packing is Packing.TESLA:
            return [tesla]
        if packing is Packing.TESLA_WITH_FILTER:
            return [tesla + self.bloom_byte_budget * 8]
        return [tesla, header + self.bloom_byte_budget * 8]


def parse_level(level: Union[int, SecurityLevel]) -> SecurityLevel:
    """Convert an int to a SecurityLevel, rejecting anything outside 0-6."""
    if isinstance(level, bool) or not isinstance(level, int):
        raise ConfigurationError(f"security level must be an integer, got {level!r}")
    try:
        return SecurityLevel(level)
    except ValueError:
        raise ConfigurationError(f"security level {level} not supported") from None


def resolve(level: Union[int, SecurityLevel]) -> SlotBudget:
    """Look up the profile and budget for a level."""
    parsed = parse_level(level)
    return SlotBudget(parsed, parsed.profile)
