"""Tests for security level profiles and slot budgets."""
import pytest

from tesla import constants, policy
from tesla.policy import ConfigurationError, Packing, SecurityLevel, SlotBudget


EXPECTED = {
    # level: (input, output, carriers, bloom budget)
    0: (64, 49, 1, 0),
    1: (64, 49, 1, 0),
    2: (64, 21, 1, 28),
    3: (64, 32, 2, 17),
    4: (64, 20, 4, 29),
    5: (64, 20, 9, 65),
    6: (64, 49, 9, 65),
}


@pytest.mark.parametrize("level", sorted(EXPECTED))
def test_level_table(level):
    budget = policy.resolve(level)
    profile = budget.profile
    assert (
        profile.input_digest_size,
        profile.output_digest_size,
        profile.carrier_message_count,
        budget.bloom_byte_budget,
    ) == EXPECTED[level]


@pytest.mark.parametrize("level", sorted(EXPECTED))
def test_resolve_is_deterministic(level):
    assert policy.resolve(level) == policy.resolve(level)
    assert policy.resolve(level) == policy.resolve(SecurityLevel(level))


def test_budget_formula():
    """Split levels only reserve the meta byte; the others also reserve tag and key."""
    for level in SecurityLevel:
        budget = policy.resolve(level)
        if level >= 5:
            assert budget.bloom_byte_budget == constants.SLOT_CAPACITY - constants.META_SIZE
        else:
            assert budget.bloom_byte_budget == constants.SLOT_CAPACITY - (
                level.profile.output_digest_size + constants.KEY_SIZE + constants.META_SIZE
            )


def test_packing_per_level():
    assert SecurityLevel.LEVEL_0.profile.packing is Packing.HEADER_ONLY
    assert SecurityLevel.LEVEL_1.profile.packing is Packing.TESLA
    assert SecurityLevel.LEVEL_2.profile.packing is Packing.TESLA
    assert SecurityLevel.LEVEL_3.profile.packing is Packing.TESLA_WITH_FILTER
    assert SecurityLevel.LEVEL_4.profile.packing is Packing.TESLA_WITH_FILTER
    assert SecurityLevel.LEVEL_5.profile.packing is Packing.SPLIT
    assert SecurityLevel.LEVEL_6.profile.packing is Packing.SPLIT

    assert [lvl for lvl in SecurityLevel if lvl.profile.uses_filter] == [3, 4, 5, 6]


def test_every_level_has_a_profile():
    assert set(policy.PROFILES) == set(SecurityLevel)


def test_frames_fit_slot_capacity():
    for level in SecurityLevel:
        for bits in policy.resolve(level).frame_bits():
            assert bits <= constants.SLOT_CAPACITY_BITS


def test_frame_bits():
    assert policy.resolve(0).frame_bits() == [8]
    assert policy.resolve(2).frame_bits() == [8 + (16 + 21) * 8]
    assert policy.resolve(3).frame_bits() == [528]
    assert policy.resolve(5).frame_bits() == [8 + (16 + 20) * 8, 528]


@pytest.mark.parametrize("level", [9, 7, -1, 100])
def test_unknown_level_is_configuration_error(level):
    with pytest.raises(ConfigurationError):
        policy.resolve(level)


@pytest.mark.parametrize("level", ["3", 3.0, None, True])
def test_non_integer_level_is_configuration_error(level):
    with pytest.raises(ConfigurationError):
        policy.parse_level(level)


def test_overflowing_budget_rejected():
    """A slot too small for tag and key cannot be configured."""
    with pytest.raises(ConfigurationError):
        SlotBudget(SecurityLevel.LEVEL_1, SecurityLevel.LEVEL_1.profile, slot_capacity=40)


def test_configuration_error_is_value_error():
    assert issubclass(ConfigurationError, ValueError)
