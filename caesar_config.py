"""Transmitter configuration.

Controls the security level, where the chain seed comes from, where frames
are sent, and whether timings are recorded.
"""
from dataclasses import dataclass

from ais import messages
from core import transport


@dataclass
class CaesarConfig:
    """Configuration for one transmitter run."""
    security_level: int = 1       # 0-6, see tesla.policy
    seed_source: str = 'fixed'    # 'fixed' or 'passphrase'
    passphrase: str = 'M0ng00se'  # only used with seed_source='passphrase'
    host: str = transport.DEFAULT_HOST
    port: int = transport.DEFAULT_PORT
    connect_timeout: float = transport.DEFAULT_TIMEOUT
    mmsi: int = messages.DEFAULT_MMSI
    write_timings: bool = False   # append per-session timings to a CSV
    timings_dir: str = '.'


# Global transmitter configuration
_config = CaesarConfig()


def set_config(config: CaesarConfig) -> None:
    """Set the global transmitter configuration."""
    global _config
    _config = config


def get_config() -> CaesarConfig:
    """Get the current transmitter configuration."""
    return _config


def reset_config() -> None:
    """Reset to default configuration (for testing)."""
    global _config
    _config = CaesarConfig()
