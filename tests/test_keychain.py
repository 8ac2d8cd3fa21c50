"""Tests for the one-way key chain."""
import pytest

import crypto
from tesla import keychain
from tesla.keychain import KeyChain, KeyChainIntegrityFailure

SEED = bytes(range(32))


def test_commitment_is_n_applications():
    """K0 is the seed hashed n times."""
    value = SEED
    for _ in range(25):
        value = crypto.one_way(value)
    assert keychain.derive_commitment(SEED, 25) == value
    assert len(value) == crypto.KEY_SIZE


def test_derive_key_top_of_chain_is_commitment():
    assert keychain.derive_key(SEED, 40, 40) == keychain.derive_commitment(SEED, 40)


@pytest.mark.parametrize("n", [1, 10, 57])
def test_composition_law(n):
    """derive_key(i + j) == apply^j(derive_key(i)) for every i + j <= n."""
    for i in range(0, n + 1, max(1, n // 7)):
        for j in range(0, n - i + 1, max(1, n // 5)):
            assert keychain.derive_key(SEED, n, i + j) == keychain.apply(keychain.derive_key(SEED, n, i), j)


def test_one_step_composition():
    for i in range(20):
        assert keychain.derive_key(SEED, 20, i + 1) == keychain.apply(keychain.derive_key(SEED, 20, i))


@pytest.mark.parametrize("n", [10, 33, 100])
def test_self_verification(n):
    """A key disclosed after e steps always verifies against K0."""
    commitment = keychain.derive_commitment(SEED, n)
    for e in range(0, n + 1, 3):
        key = keychain.derive_key(SEED, n, n - e)
        assert keychain.verify(key, e, commitment) is True


def test_verify_wrong_steps_or_key_returns_false():
    commitment = keychain.derive_commitment(SEED, 30)
    key = keychain.derive_key(SEED, 30, 27)

    assert keychain.verify(key, 2, commitment) is False
    assert keychain.verify(key, 4, commitment) is False
    assert keychain.verify(b"\x00" * 16, 3, commitment) is False
    assert keychain.verify(key, -1, commitment) is False


def test_derive_key_rejects_out_of_range_index():
    with pytest.raises(ValueError):
        keychain.derive_key(SEED, 10, 11)
    with pytest.raises(ValueError):
        keychain.derive_key(SEED, 10, -1)


def test_derive_commitment_rejects_empty_chain():
    with pytest.raises(ValueError):
        keychain.derive_commitment(SEED, 0)


def test_keychain_advance_and_verify():
    """Each advance consumes a timeslot; the current key stays verifiable."""
    chain = KeyChain(SEED, 12)
    assert chain.current_index == 12
    assert chain.elapsed == 0
    assert chain.current_key() == chain.commitment.value

    for expected in range(11, 8, -1):
        assert chain.advance() == expected

    assert chain.elapsed == 3
    key = chain.current_key()
    assert key == keychain.derive_key(SEED, 12, 9)
    assert chain.verify_current(key) is True
    assert chain.verify_current(keychain.derive_key(SEED, 12, 10)) is False


def test_keychain_exhaustion():
    """The chain is finite: advancing past index 0 fails."""
    chain = KeyChain(SEED, 2)
    chain.advance()
    chain.advance()
    with pytest.raises(KeyChainIntegrityFailure):
        chain.advance()


def test_commitment_record():
    chain = KeyChain(SEED, 15)
    assert chain.commitment.chain_length == 15
    assert chain.commitment.value == keychain.derive_commitment(SEED, 15)
