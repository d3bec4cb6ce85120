"""Synchronous rrdcached client: one connection, one request at a time."""

import logging
import threading
from collections.abc import Iterable
from pathlib import Path
from types import TracebackType
from typing import Self

from rrdcached_client.config import Config
from rrdcached_client.daemon.protocol import (
    Command,
    Response,
    check_response,
    create_command,
    first_command,
    flush_command,
    flushall_command,
    forget_command,
    last_command,
    parse_response,
    pending_command,
    quit_command,
    stats_command,
    update_command,
)
from rrdcached_client.daemon.stats import Stats, decode_stats
from rrdcached_client.daemon.transport import Target, Transport
from rrdcached_client.errors import ConnectionFailedError, MalformedResponseError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


class RrdcachedClient:
    """Client bound to a single daemon connection.

    The protocol has no request identifiers, so send and receive run as one
    unit under a lock. Share an instance between threads freely, but expect
    calls to be serialized; open more clients for parallelism.
    """

    def __init__(self, transport: Transport) -> None:
        """Initialize with a transport. Connects it if it is not connected yet.

        Args:
            transport: Transport to the daemon; the client takes ownership of it.

        Raises:
            ConnectionFailedError: The daemon is unreachable.

        """
        self._transport = transport
        self._lock = threading.Lock()
        self._transport.connect()

    @classmethod
    def connect(cls, target: Target, *, timeout: float | None = DEFAULT_TIMEOUT) -> Self:
        """Open a client to the given target."""
        return cls(Transport(target, timeout=timeout))

    @classmethod
    def connect_unix(cls, path: Path | str, *, timeout: float | None = DEFAULT_TIMEOUT) -> Self:
        """Open a client over a unix-domain socket."""
        return cls.connect(Target.unix(path), timeout=timeout)

    @classmethod
    def connect_tcp(cls, host: str, port: int, *, timeout: float | None = DEFAULT_TIMEOUT) -> Self:
        """Open a client over TCP."""
        return cls.connect(Target.tcp(host, port), timeout=timeout)

    @classmethod
    def from_config(cls, cfg: Config) -> Self:
        """Open a client to the target described by the configuration."""
        return cls.connect(cfg.target, timeout=cfg.timeout)

    @property
    def target(self) -> Target:
        """Daemon address this client talks to."""
        return self._transport.target

    def execute(self, command: Command) -> Response:
        """Send one command and return its checked response.

        Raises:
            ConnectionFailedError: Transport failure; the connection is closed.
            MalformedResponseError: Reply cannot be framed or its status is not an
                integer; the connection is closed.
            ProtocolError: Daemon reported an error (see subclasses).

        """
        with self._lock:
            logger.debug("> %s", command.line)
            self._transport.send(command.encode())
            raw = self._transport.receive()
            logger.debug("< %s", raw.rstrip("\n"))
            try:
                response = parse_response(raw)
            except MalformedResponseError as e:
                logger.warning("Closing connection to %s: %s", self.target, e)
                self._transport.close()
                raise
        return check_response(response)

    # --- Commands ---

    def create(
        self,
        filename: str,
        data_sources: Iterable[str],
        archives: Iterable[str],
        *,
        start: int | None = None,
        step: int | None = None,
        overwrite: bool = True,
    ) -> Response:
        """Create an RRD file.

        ``overwrite=False`` sends ``-O``, which asks the daemon not to replace an
        existing file. Daemons that predate ``-O`` reject it with
        UnrecognizedArgumentError; retrying without it is up to the caller.
        """
        return self.execute(
            create_command(filename, data_sources, archives, start=start, step=step, overwrite=overwrite)
        )

    def update(self, filename: str, *values: str) -> Response:
        """Enqueue ``timestamp:value[:value...]`` updates for a file."""
        return self.execute(update_command(filename, values))

    def pending(self, filename: str) -> Response:
        """List updates queued for a file. Status is the number of pending updates."""
        return self.execute(pending_command(filename))

    def forget(self, filename: str) -> Response:
        """Drop queued updates for a file without writing them."""
        return self.execute(forget_command(filename))

    def flush(self, filename: str) -> Response:
        """Write queued updates for a file to disk."""
        return self.execute(flush_command(filename))

    def flush_all(self) -> Response:
        """Start writing all queued updates to disk."""
        return self.execute(flushall_command())

    def first(self, filename: str, rra_index: int) -> Response:
        """Return the first timestamp of an archive. Message holds the timestamp."""
        return self.execute(first_command(filename, rra_index))

    def last(self, filename: str) -> Response:
        """Return the last update timestamp. Message holds the timestamp."""
        return self.execute(last_command(filename))

    def stats(self) -> Stats:
        """Fetch the daemon counters."""
        return decode_stats(self.execute(stats_command()).raw)

    def quit(self) -> None:
        """Say goodbye and close the connection.

        The daemon closes without replying, so nothing is read back.
        """
        try:
            with self._lock:
                if self._transport.connected:
                    self._transport.send(quit_command().encode())
        except ConnectionFailedError as e:
            logger.debug("QUIT not delivered, connection already gone: %s", e)
        finally:
            self.close()

    def close(self) -> None:
        """Release the connection without sending QUIT. Safe to call more than once."""
        self._transport.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self, exc_type: type[BaseException] | None, exc: BaseException | None, tb: TracebackType | None
    ) -> None:
        self.quit()
