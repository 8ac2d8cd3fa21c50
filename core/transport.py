"""Frame transport to the radio modem.

Provides:
- SocketTransport: one TCP connection per frame, NUL-terminated bit string, no ack
- RecordingTransport: in-memory transport for tests and dry runs, with failure injection
"""
from typing import Optional
import logging
import socket

log = logging.getLogger(__name__)

DEFAULT_HOST = '127.0.0.1'
DEFAULT_PORT = 52001
DEFAULT_TIMEOUT = 5.0


class TransportFailure(Exception):
    """Raised when a frame could not be handed to the modem."""
    pass


def render(frame: str) -> bytes:
    """Wire form of a frame: its bit characters followed by a NUL byte."""
    return frame.encode('ascii') + b'\0'


class SocketTransport:
    """Sends each frame over its own TCP connection."""

    def __init__(self, host: str = DEFAULT_HOST, port: int = DEFAULT_PORT,
                 timeout: Optional[float] = DEFAULT_TIMEOUT):
        self.host = host
        self.port = port
        self.timeout = timeout

    def send(self, frame: str) -> None:
        data = render(frame)
        try:
            with socket.create_connection((self.host, self.port), timeout=self.timeout) as sock:
                sock.sendall(data)
        except OSError as e:
            log.error(f"transport.send: {self.host}:{self.port} failed: {e}")
            raise TransportFailure(f"could not send frame to {self.host}:{self.port}: {e}") from e
        log.info(f"transport.send: sent {len(frame)} bits to {self.host}:{self.port}")


class RecordingTransport:
    """Keeps sent frames in memory.

    Args:
        fail_on: 1-based index of the send that should fail (None = never)
        max_frame_bits: frames longer than this are rejected
    """

    def __init__(self, fail_on: Optional[int] = None, max_frame_bits: Optional[int] = None):
        self.frames: list[str] = []
        self.attempts = 0
        self.fail_on = fail_on
        self.max_frame_bits = max_frame_bits

    def send(self, frame: str) -> None:
        self.attempts += 1
        if self.fail_on is not None and self.attempts == self.fail_on:
            log.debug(f"transport.RecordingTransport.send: injected failure on send #{self.attempts}")
            raise TransportFailure(f"injected failure on send #{self.attempts}")
        if self.max_frame_bits is not None and len(frame) > self.max_frame_bits:
            raise TransportFailure(
                f"frame of {len(frame)} bits exceeds limit of {self.max_frame_bits} bits"
            )
        self.frames.append(frame)
        log.debug(f"transport.RecordingTransport.send: recorded frame #{len(self.frames)} ({len(frame)} bits)")

    @property
    def wire(self) -> list[bytes]:
        """Frames as they would have been written to a socket."""
        return [render(frame) for frame in self.frames]
