"""Seed providers for the key chain.

A provider hands out the secret seed a session builds its chain from.
"""
from typing import Any
import logging

import crypto
from tesla.policy import ConfigurationError

log = logging.getLogger(__name__)

# Pre-generated lab seed, shared with the test receiver out of band
DEFAULT_FIXED_SEED = bytes.fromhex(
    "f468065c522a3edcb7d17a063c8baa497d5222ef20aac565d25fa9e79ee6f0f6"
)
DEFAULT_SALT = bytes(range(1, crypto.SALT_SIZE + 1))


class FixedSeedProvider:
    """Returns the same seed every time."""

    def __init__(self, seed: bytes = DEFAULT_FIXED_SEED):
        if not seed:
            raise ValueError("fixed seed must not be empty")
        self._seed = seed

    def seed(self) -> bytes:
        return self._seed


class PassphraseSeedProvider:
    """Derives the seed from a passphrase with Argon2id.

    The derivation runs once, on first use.
    """

    def __init__(
        self,
        passphrase: str,
        salt: bytes = DEFAULT_SALT,
        opslimit: int = crypto.OPSLIMIT,
        memlimit: int = crypto.MEMLIMIT
    ):
        if not passphrase:
            raise ValueError("passphrase must not be empty")
        self._passphrase = passphrase.encode('utf-8')
        self._salt = salt
        self._opslimit = opslimit
        self._memlimit = memlimit
        self._seed = None

    def seed(self) -> bytes:
        if self._seed is None:
            log.debug("seeds.PassphraseSeedProvider.seed() deriving seed with argon2id")
            self._seed = crypto.derive_from_passphrase(
                self._passphrase,
                self._salt,
                opslimit=self._opslimit,
                memlimit=self._memlimit
            )
        return self._seed


def seed_provider_from_config(config: Any):
    """Build the seed provider named by config.seed_source."""
    if config.seed_source == 'fixed':
        return FixedSeedProvider()
    if config.seed_source == 'passphrase':
        if not config.passphrase:
            raise ConfigurationError("seed source 'passphrase' needs a non-empty passphrase")
        return PassphraseSeedProvider(config.passphrase)
    raise ConfigurationError(f"unknown seed source: {config.seed_source!r}")
