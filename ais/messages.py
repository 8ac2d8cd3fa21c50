"""AIS message encoders.

Messages are built as bit strings, most significant bit first:
- Message 4 (base station report) is the carrier frame, 168 bits
- Message 8 (binary broadcast) wraps an authentication payload behind a 56-bit header
"""
import math

from tesla import constants

DEFAULT_MMSI = 247320162
DEFAULT_LONGITUDE = 9.72357833333333
DEFAULT_LATITUDE = 45.6910166666667

# Positions are sent in 1/10000 minute
POSITION_SCALE = 600000

MESSAGE_4_BITS = 168
MESSAGE_8_HEADER_BITS = 56
MMSI_BITS = 30

# Application id for the authentication payload
DAC = 0
FI = 51

DEVICE_GPS = 1

# Timestamp values meaning "not available"
YEAR_NA = 0
MONTH_NA = 0
DAY_NA = 0
HOUR_NA = 24
MINUTE_NA = 60
SECOND_NA = 60


def uint(value: int, width: int) -> str:
    """Encode an unsigned field, rejecting values that don't fit."""
    if not 0 <= value < (1 << width):
        raise ValueError(f"value {value} does not fit in {width} unsigned bits")
    return format(value, f'0{width}b')


def twos_complement(value: int, width: int) -> str:
    """Encode a signed value as a width-bit two's complement field (truncated)."""
    return format(value & ((1 << width) - 1), f'0{width}b')


def encode_position(degrees: float, width: int) -> str:
    return twos_complement(round(degrees * POSITION_SCALE), width)


def encode_message_4(
    mmsi: int = DEFAULT_MMSI,
    longitude: float = DEFAULT_LONGITUDE,
    latitude: float = DEFAULT_LATITUDE,
    accurate: bool = True,
    radio_status: int = 0
) -> str:
    """Encode a base station report used as the carrier frame."""
    bits = (
        uint(4, 6)  # message type
        + uint(0, 2)  # repeat indicator
        + uint(mmsi, MMSI_BITS)
        + uint(YEAR_NA, 14)
        + uint(MONTH_NA, 4)
        + uint(DAY_NA, 5)
        + uint(HOUR_NA, 5)
        + uint(MINUTE_NA, 6)
        + uint(SECOND_NA, 6)
        + uint(int(accurate), 1)
        + encode_position(longitude, 28)
        + encode_position(latitude, 27)
        + uint(DEVICE_GPS, 4)
        + uint(0, 10)  # spare
        + uint(0, 1)  # RAIM
        + uint(radio_status, 19)
    )
    return bits


def encode_message_8(payload: str, mmsi: int = DEFAULT_MMSI) -> str:
    """Wrap a payload bit string in a binary broadcast message."""
    if payload.strip('01'):
        raise ValueError("payload must be a string of '0' and '1'")
    return (
        uint(8, 6)  # message type
        + uint(0, 2)  # repeat indicator
        + uint(mmsi, MMSI_BITS)
        + uint(0, 2)  # spare
        + uint(DAC, 10)
        + uint(FI, 6)
        + payload
    )


def split_payload(payload: str, capacity: int = constants.SLOT_CAPACITY) -> list[str]:
    """Cut a payload into chunks of at most `capacity` bytes.

    An empty payload still yields one (empty) chunk.
    """
    chunk_bits = capacity * 8
    count = max(1, math.ceil(len(payload) / chunk_bits))
    return [payload[i * chunk_bits:(i + 1) * chunk_bits] for i in range(count)]


def encode_binary_broadcast(payload: str, mmsi: int = DEFAULT_MMSI,
                            capacity: int = constants.SLOT_CAPACITY) -> list[str]:
    """Encode a payload as one message 8 per slot-capacity chunk."""
    return [encode_message_8(chunk, mmsi) for chunk in split_payload(payload, capacity)]
