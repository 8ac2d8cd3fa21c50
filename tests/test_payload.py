"""Tests for authenticated payload packing."""
import pytest

from tesla import payload, policy
from tesla.bloom import BloomAccumulator

KEY = bytes(range(16))


def _tag(level):
    return bytes([0xAB]) * policy.resolve(level).profile.output_digest_size


def test_hex_bits_conversion():
    assert payload.hex_to_bits("a5") == "10100101"
    assert payload.hex_to_bits("0F") == "00001111"
    assert payload.bytes_to_bits(b"\x01\x80") == "0000000110000000"


def test_header_bits():
    assert payload.header_bits(0) == "00000000"
    assert payload.header_bits(3) == "01100000"
    assert payload.header_bits(5, 1) == "10100001"


def test_level_0_header_only():
    assert payload.build_payloads(policy.resolve(0), KEY, _tag(0)) == ["00000000"]


@pytest.mark.parametrize("level", [1, 2])
def test_tesla_only_levels(level):
    tag = _tag(level)
    [bits] = payload.build_payloads(policy.resolve(level), KEY, tag)
    assert bits == payload.header_bits(level) + payload.bytes_to_bits(KEY) + payload.bytes_to_bits(tag)


def test_level_3_packs_filter_in_same_frame():
    budget = policy.resolve(3)
    bloom = BloomAccumulator(budget.bloom_byte_budget, 2)
    bloom.add(b"frame")
    [bits] = payload.build_payloads(budget, KEY, _tag(3), bloom)

    assert len(bits) == budget.frame_bits()[0]
    assert bits.endswith(bloom.serialize())
    assert bits[8:136] == payload.bytes_to_bits(KEY)


def test_split_levels_send_filter_separately():
    budget = policy.resolve(6)
    bloom = BloomAccumulator(budget.bloom_byte_budget, 9)
    tesla, filter_frame = payload.build_payloads(budget, KEY, _tag(6), bloom)

    assert tesla[:8] == "11000000"
    assert filter_frame[:8] == "11000001"
    assert filter_frame[8:] == bloom.serialize()
    assert [len(tesla), len(filter_frame)] == budget.frame_bits()


def test_filter_levels_require_matching_filter():
    budget = policy.resolve(4)
    with pytest.raises(ValueError):
        payload.build_payloads(budget, KEY, _tag(4))
    with pytest.raises(ValueError):
        payload.build_payloads(budget, KEY, _tag(4), BloomAccumulator(3, 4))
