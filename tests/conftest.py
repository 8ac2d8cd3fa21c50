"""Pytest configuration and fixtures for all tests."""
import random

import pytest

import caesar_config
from core.transport import RecordingTransport
from tesla.seeds import FixedSeedProvider


@pytest.fixture(autouse=True)
def reset_global_state():
    """Reset global configuration before each test to ensure test isolation."""
    caesar_config.reset_config()
    yield
    caesar_config.reset_config()


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def seed_provider():
    return FixedSeedProvider()


@pytest.fixture
def rng():
    """Seeded RNG so chain lengths are reproducible."""
    return random.Random(1234)
