"""Socket transport to the daemon: dial, write, read one framed reply."""

import logging
import socket
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from types import TracebackType
from typing import NoReturn, Self

from rrdcached_client.daemon.framing import Framer
from rrdcached_client.errors import ConnectionFailedError, MalformedResponseError

logger = logging.getLogger(__name__)

# Read buffer size
_BUFSIZE = 4096


class TransportProtocol(StrEnum):
    """Socket family used to reach the daemon."""

    UNIX = "unix"
    TCP = "tcp"


@dataclass(frozen=True)
class Target:
    """Daemon address: a unix socket path or a host/port pair."""

    protocol: TransportProtocol
    socket_path: Path | None = None
    host: str | None = None
    port: int | None = None

    @classmethod
    def unix(cls, path: Path | str) -> Self:
        """Target a unix-domain socket."""
        return cls(TransportProtocol.UNIX, socket_path=Path(path))

    @classmethod
    def tcp(cls, host: str, port: int) -> Self:
        """Target a TCP endpoint."""
        return cls(TransportProtocol.TCP, host=host, port=port)

    def __str__(self) -> str:
        if self.protocol is TransportProtocol.UNIX:
            return f"unix:{self.socket_path}"
        return f"{self.host}:{self.port}"


def _dial(target: Target, timeout: float | None) -> socket.socket:
    """Open a connected socket to the target. Raises OSError on failure."""
    if target.protocol is TransportProtocol.TCP:
        if target.host is None or target.port is None:
            msg = f"TCP target needs host and port: {target!r}"
            raise ValueError(msg)
        return socket.create_connection((target.host, target.port), timeout=timeout)

    if target.socket_path is None:
        msg = f"Unix target needs a socket path: {target!r}"
        raise ValueError(msg)
    sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    try:
        sock.settimeout(timeout)
        sock.connect(str(target.socket_path))
    except BaseException:
        sock.close()
        raise
    return sock


class Transport:
    """Owns the single stream socket to the daemon.

    Every OSError (refused, broken pipe, reset, timeout) surfaces as
    ConnectionFailedError so callers can tell transport trouble from daemon errors.
    """

    def __init__(self, target: Target, *, timeout: float | None = None) -> None:
        """Initialize an unconnected transport.

        Args:
            target: Daemon address.
            timeout: Seconds to wait on connect and on each read; None blocks forever.

        """
        self.target = target
        self.timeout = timeout
        self._sock: socket.socket | None = None
        self._framer = Framer()

    @property
    def connected(self) -> bool:
        """True while the socket is open."""
        return self._sock is not None

    def connect(self) -> None:
        """Dial the target.

        Raises:
            ConnectionFailedError: The daemon is unreachable.

        """
        if self._sock is not None:
            return
        try:
            self._sock = _dial(self.target, self.timeout)
        except OSError as e:
            logger.warning("Cannot connect to rrdcached at %s: %s", self.target, e)
            msg = f"Cannot connect to rrdcached at {self.target}: {e}"
            raise ConnectionFailedError(msg) from e
        self._framer.reset()
        logger.debug("Connected to rrdcached at %s", self.target)

    def send(self, data: bytes) -> None:
        """Write all bytes to the socket.

        Raises:
            ConnectionFailedError: Not connected or the write failed.

        """
        sock = self._require_socket()
        try:
            sock.sendall(data)
        except OSError as e:
            self._fail(f"Write to rrdcached at {self.target} failed: {e}", e)

    def receive(self) -> str:
        """Read until the framer reports one complete reply and return it as text.

        Raises:
            ConnectionFailedError: Not connected, read failed or timed out, or the
                daemon closed the connection before the reply was complete.
            MalformedResponseError: The daemon sent bytes past the end of the reply;
                the stream is out of step with the commands, so the connection is closed.

        """
        sock = self._require_socket()
        while not self._framer.complete:
            try:
                chunk = sock.recv(_BUFSIZE)
            except OSError as e:
                self._fail(f"Read from rrdcached at {self.target} failed: {e}", e)
            if not chunk:
                pending = self._framer.buffered
                self._fail(f"rrdcached at {self.target} closed the connection ({pending} bytes of incomplete reply)")
            self._framer.feed(chunk)
        reply = self._framer.take()
        if self._framer.buffered:
            message = f"rrdcached at {self.target} sent {self._framer.buffered} bytes past the end of the reply"
            logger.warning(message)
            self.close()
            raise MalformedResponseError(message)
        return reply

    def close(self) -> None:
        """Release the socket. Safe to call more than once."""
        sock, self._sock = self._sock, None
        self._framer.reset()
        if sock is not None:
            sock.close()
            logger.debug("Closed connection to rrdcached at %s", self.target)

    def __enter__(self) -> Self:
        self.connect()
        return self

    def __exit__(
        self, exc_type: type[BaseException] | None, exc: BaseException | None, tb: TracebackType | None
    ) -> None:
        self.close()

    def _require_socket(self) -> socket.socket:
        if self._sock is None:
            msg = f"Not connected to rrdcached at {self.target}."
            raise ConnectionFailedError(msg)
        return self._sock

    def _fail(self, message: str, cause: OSError | None = None) -> NoReturn:
        """Close the unusable socket and raise ConnectionFailedError."""
        logger.warning(message)
        self.close()
        raise ConnectionFailedError(message) from cause


def is_connectable(target: Target, timeout: float = 1.0) -> bool:
    """Check if the daemon is accepting connections at the target."""
    try:
        sock = _dial(target, timeout)
    except OSError:
        return False
    sock.close()
    return True
