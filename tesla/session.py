"""One AIS-CAESAR transmission session.

Flow:
1. Init: resolve the level budget, pick chain length n, build key chain and filter
2. Send carrier frames (message 4); each one consumes a timeslot, levels >= 3
   also fold the frame into the Bloom filter
3. Derive the chain key for the current index
4. MAC the concatenated carrier frames with that key
5. Pack key, tag and filter into one or two payloads
6. Transmit the payloads as message 8 frames
7. Self-verify the disclosed key against the commitment

Transport and key chain failures end the session in FAILED; run() reports
them in the returned SessionResult rather than raising.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union
import logging
import random
import time

import caesar_config
import crypto
from ais import messages
from core.transport import SocketTransport, TransportFailure
from tesla import constants, payload, policy
from tesla.bloom import BloomAccumulator
from tesla.keychain import Commitment, KeyChain, KeyChainIntegrityFailure
from tesla.policy import ConfigurationError, SecurityLevel
from tesla.seeds import seed_provider_from_config
from timings import TimingLog

log = logging.getLogger(__name__)


class SessionState(Enum):
    INIT = 'init'
    SEND_CARRIER = 'send_carrier'
    DERIVE_KEY = 'derive_key'
    COMPUTE_TAG = 'compute_tag'
    ENCODE_PAYLOAD = 'encode_payload'
    TRANSMIT = 'transmit'
    SELF_VERIFY = 'self_verify'
    DONE = 'done'
    FAILED = 'failed'


@dataclass
class SessionResult:
    """Outcome of a session. ok is True only when the session reached DONE."""
    level: int
    state: SessionState
    commitment: Optional[Commitment] = None
    carrier_frames: list[str] = field(default_factory=list)
    auth_frames: list[str] = field(default_factory=list)
    key: Optional[bytes] = None
    tag: Optional[bytes] = None
    elapsed_steps: int = 0
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.state is SessionState.DONE

    @property
    def frames(self) -> list[str]:
        """All frames in transmission order."""
        return self.carrier_frames + self.auth_frames


class ProtocolSession:
    """Sender side of one authenticated transmission.

    Args:
        level: security level 0-6 (ConfigurationError otherwise)
        seed_provider: object with a seed() method returning the chain seed
        transport: object with a send(frame: str) method
        rng: random source for the chain length (SystemRandom by default)
        mmsi: station id written into every frame
        timing_log: optional TimingLog for Bloom and session timings
    """

    def __init__(
        self,
        level: Union[int, SecurityLevel],
        seed_provider: Any,
        transport: Any,
        rng: Optional[random.Random] = None,
        mmsi: int = messages.DEFAULT_MMSI,
        timing_log: Optional[TimingLog] = None
    ):
        self.budget = policy.resolve(level)
        if not 0 <= mmsi < (1 << messages.MMSI_BITS):
            raise ConfigurationError(f"mmsi {mmsi} does not fit in {messages.MMSI_BITS} bits")
        self.level = self.budget.level
        self.profile = self.budget.profile
        self.transport = transport
        self.rng = rng if rng is not None else random.SystemRandom()
        self.mmsi = mmsi
        self.timing_log = timing_log
        self.state = SessionState.INIT

        chain_length = constants.CHAIN_LENGTH_MIN + self.rng.randrange(constants.CHAIN_LENGTH_SPAN)
        self.keychain = KeyChain(seed_provider.seed(), chain_length)

        self.bloom: Optional[BloomAccumulator] = None
        if self.profile.uses_filter:
            self.bloom = BloomAccumulator(
                self.budget.bloom_byte_budget,
                self.profile.carrier_message_count
            )

        self.carrier_frames: list[str] = []
        self.auth_frames: list[str] = []
        self.key: Optional[bytes] = None
        self.tag: Optional[bytes] = None
        self._mac_input = bytearray()
        self._ran = False

        log.info(
            f"session.init: level={int(self.level)} packing={self.profile.packing.value} "
            f"carriers={self.profile.carrier_message_count} n={chain_length} "
            f"filter={self.bloom!r}"
        )

    @property
    def commitment(self) -> Commitment:
        """K0 and n; must reach verifiers before the first key is disclosed."""
        return self.keychain.commitment

    def run(self) -> SessionResult:
        """Run the session once. Returns the result, never raises for protocol failures."""
        if self._ran:
            raise RuntimeError("session already ran")
        self._ran = True

        start = time.perf_counter_ns()
        error = None
        try:
            self._send_carriers()
            self._derive_key()
            self._compute_tag()
            payloads = self._encode_payloads()
            self._transmit(payloads)
            self._self_verify()
        except (TransportFailure, KeyChainIntegrityFailure) as e:
            log.error(f"session.run: level={int(self.level)} failed in {self.state.value}: {e}")
            error = e
            self._enter(SessionState.FAILED)
        else:
            self._enter(SessionState.DONE)
        finally:
            if self.timing_log is not None:
                self.timing_log.record('session', (time.perf_counter_ns() - start) // 1000, 'us')
                self.timing_log.flush()

        return SessionResult(
            level=int(self.level),
            state=self.state,
            commitment=self.commitment,
            carrier_frames=list(self.carrier_frames),
            auth_frames=list(self.auth_frames),
            key=self.key,
            tag=self.tag,
            elapsed_steps=self.keychain.elapsed,
            error=error
        )

    def _enter(self, state: SessionState) -> None:
        log.debug(f"session: {self.state.value} -> {state.value}")
        self.state = state

    def _send_carriers(self) -> None:
        self._enter(SessionState.SEND_CARRIER)
        for _ in range(self.profile.carrier_message_count):
            frame = messages.encode_message_4(mmsi=self.mmsi)
            self.transport.send(frame)
            self.carrier_frames.append(frame)

            data = frame.encode('ascii')
            self._mac_input += data
            # One AIS timeslot per carrier frame
            self.keychain.advance()

            if self.bloom is not None:
                if self.timing_log is not None:
                    self.timing_log.timed('bloom_add', self.bloom.add, data)
                    self.timing_log.timed('bloom_contains', self.bloom.contains, data)
                else:
                    self.bloom.add(data)

        log.info(
            f"session.send_carriers: sent {len(self.carrier_frames)} carriers, "
            f"chain index now {self.keychain.current_index}"
        )

    def _derive_key(self) -> None:
        self._enter(SessionState.DERIVE_KEY)
        self.key = self.keychain.current_key()
        log.debug(f"session.derive_key: i={self.keychain.current_index} Ki={self.key.hex()}")

    def _compute_tag(self) -> None:
        self._enter(SessionState.COMPUTE_TAG)
        self.tag = crypto.mac(
            self.key,
            bytes(self._mac_input),
            self.profile.input_digest_size,
            self.profile.output_digest_size
        )
        log.debug(f"session.compute_tag: tag={self.tag.hex()} over {len(self._mac_input)}B")

    def _encode_payloads(self) -> list[str]:
        self._enter(SessionState.ENCODE_PAYLOAD)
        return payload.build_payloads(self.budget, self.key, self.tag, self.bloom)

    def _transmit(self, payloads: list[str]) -> None:
        self._enter(SessionState.TRANSMIT)
        for bits in payloads:
            for frame in messages.encode_binary_broadcast(bits, mmsi=self.mmsi):
                self.transport.send(frame)
                self.auth_frames.append(frame)
        log.info(f"session.transmit: sent {len(self.auth_frames)} authenticated frames")

    def _self_verify(self) -> None:
        self._enter(SessionState.SELF_VERIFY)
        if not self.keychain.verify_current(self.key):
            raise KeyChainIntegrityFailure(
                f"key at index {self.keychain.current_index} does not lead to the commitment "
                f"in {self.keychain.elapsed} steps"
            )
        log.info(f"session.self_verify: key verified against K0 after {self.keychain.elapsed} steps")


def run_session(
    config: Optional[caesar_config.CaesarConfig] = None,
    transport: Any = None,
    rng: Optional[random.Random] = None,
    seed_provider: Any = None
) -> SessionResult:
    """Build a session from configuration and run it.

    Configuration errors are reported as a FAILED result before anything is sent.
    """
    if config is None:
        config = caesar_config.get_config()

    try:
        if seed_provider is None:
            seed_provider = seed_provider_from_config(config)
        if transport is None:
            transport = SocketTransport(config.host, config.port, config.connect_timeout)
        timing_log = None
        if config.write_timings:
            timing_log = TimingLog(config.timings_dir, config.security_level)
        session = ProtocolSession(
            config.security_level,
            seed_provider,
            transport,
            rng=rng,
            mmsi=config.mmsi,
            timing_log=timing_log
        )
    except ConfigurationError as e:
        log.error(f"session.run_session: configuration error: {e}")
        return SessionResult(level=config.security_level, state=SessionState.FAILED, error=e)

    return session.run()
