"""Error taxonomy for rrdcached client operations."""

import re

_BAD_ARGUMENT_RE = re.compile(r"argument '([^']+)'")


class RrdcachedError(Exception):
    """Base class for every error raised by the client."""

    code = "error"


class ConnectionFailedError(RrdcachedError):
    """Transport is unusable: dial refused, broken pipe, peer closed or read timeout.

    The client cannot recover from this on its own; open a new connection.
    """

    code = "connection_failed"


class MalformedResponseError(RrdcachedError):
    """Daemon reply does not follow the protocol (status token is not an integer)."""

    code = "malformed_response"


class ProtocolError(RrdcachedError):
    """Daemon answered with a negative status."""

    code = "protocol_error"

    def __init__(self, message: str, *, status: int = -1, raw: str = "") -> None:
        """Initialize with the daemon's error text.

        Args:
            message: Error message from the status line, without the status token.
            status: Negative status code returned by the daemon.
            raw: Full response text, for diagnostics.

        """
        super().__init__(message)
        self.message = message
        self.status = status
        self.raw = raw or f"{status} {message}"


class UnknownCommandError(ProtocolError):
    """Daemon does not implement the verb (older daemon version)."""

    code = "unknown_command"


class RrdFileNotFoundError(ProtocolError):
    """Target RRD file does not exist on the daemon's filesystem."""

    code = "file_not_found"


class UnrecognizedArgumentError(ProtocolError):
    """Daemon's argument parser rejected a flag or argument."""

    code = "unrecognized_argument"

    @property
    def bad_argument(self) -> str:
        """The rejected token, e.g. ``-O``, or an empty string if the message does not name it."""
        match = _BAD_ARGUMENT_RE.search(self.message)
        return match.group(1) if match else ""
