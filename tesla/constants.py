"""Constants for the AIS-CAESAR authentication protocol.

Sizes are in bytes unless the name says otherwise.
"""
import crypto

# Frame budget: three consecutive AIS slots carry at most 66 bytes of payload
SLOT_CAPACITY = 66
SLOT_CAPACITY_BITS = SLOT_CAPACITY * 8

# Fixed fields carried next to the filter
KEY_SIZE = crypto.KEY_SIZE  # disclosed chain key
META_SIZE = 1  # level id (3 bits) + application meta (5 bits)

LEVEL_BITS = 3
META_BITS = 5

# Application meta values, distinguish the two frames of a split level
META_TESLA = 0
META_FILTER = 1

# Chain length is picked per session as CHAIN_LENGTH_MIN + rng.randrange(CHAIN_LENGTH_SPAN)
CHAIN_LENGTH_MIN = 10
CHAIN_LENGTH_SPAN = 4500
