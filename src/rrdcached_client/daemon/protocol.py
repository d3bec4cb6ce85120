"""Line-oriented text protocol spoken by rrdcached.

Request:  <VERB> [filename] [args...]\\n
Response: <status> <message>\\n                      (status <= 0)
          <N> <message>\\n followed by N data lines   (status N > 0)

Status 0 is success, -1 is an error whose message is classified into the
error taxonomy, and a positive N is success with N additional lines.
"""

import time
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import StrEnum

from rrdcached_client.daemon.framing import split_header
from rrdcached_client.errors import (
    MalformedResponseError,
    ProtocolError,
    RrdFileNotFoundError,
    UnknownCommandError,
    UnrecognizedArgumentError,
)


class Verb(StrEnum):
    """Protocol command keywords supported by the client."""

    CREATE = "CREATE"
    UPDATE = "UPDATE"
    PENDING = "PENDING"
    FORGET = "FORGET"
    FLUSH = "FLUSH"
    FLUSHALL = "FLUSHALL"
    FIRST = "FIRST"
    LAST = "LAST"
    STATS = "STATS"
    QUIT = "QUIT"


@dataclass(frozen=True)
class Command:
    """A single request line: verb, optional target file, positional arguments."""

    verb: Verb
    filename: str | None = None
    args: tuple[str, ...] = field(default_factory=tuple)

    @property
    def line(self) -> str:
        """Command text without the trailing newline."""
        parts = [str(self.verb)]
        if self.filename is not None:
            parts.append(self.filename)
        parts.extend(self.args)
        return " ".join(parts)

    def encode(self) -> bytes:
        """Serialize to a newline-terminated bytes line. Values are not escaped."""
        return self.line.encode() + b"\n"


@dataclass(frozen=True)
class Response:
    """Parsed daemon reply."""

    status: int
    message: str
    raw: str

    @property
    def ok(self) -> bool:
        """True for status 0 and for positive (N lines follow) statuses."""
        return self.status >= 0

    @property
    def lines(self) -> list[str]:
        """Data lines following the header line."""
        return self.raw.split("\n")[1:]


# --- Command encoder ---


def _is_set(value: int | None) -> bool:
    return value is not None and value >= 0


def create_command(
    filename: str,
    data_sources: Iterable[str],
    archives: Iterable[str],
    *,
    start: int | None = None,
    step: int | None = None,
    overwrite: bool = True,
) -> Command:
    """Build a CREATE command.

    Args:
        filename: RRD file to create, relative to the daemon's base directory.
        data_sources: ``DS:...`` definitions, in order.
        archives: ``RRA:...`` definitions, in order.
        start: Start timestamp (``-b``). ``None`` or negative leaves it to the daemon.
        step: Base interval in seconds (``-s``). ``None`` or negative leaves it to the daemon.
        overwrite: When False, send ``-O`` so the daemon refuses to replace an existing file.

    """
    args: list[str] = []
    if _is_set(start):
        args.extend(["-b", str(start)])
    if _is_set(step):
        args.extend(["-s", str(step)])
    if not overwrite:
        args.append("-O")
    args.extend(data_sources)
    args.extend(archives)
    return Command(Verb.CREATE, filename, tuple(args))


def update_command(filename: str, values: Iterable[str]) -> Command:
    """Build an UPDATE command from ``timestamp:value[:value...]`` strings."""
    return Command(Verb.UPDATE, filename, tuple(values))


def pending_command(filename: str) -> Command:
    """Build a PENDING command."""
    return Command(Verb.PENDING, filename)


def forget_command(filename: str) -> Command:
    """Build a FORGET command."""
    return Command(Verb.FORGET, filename)


def flush_command(filename: str) -> Command:
    """Build a FLUSH command."""
    return Command(Verb.FLUSH, filename)


def flushall_command() -> Command:
    """Build a FLUSHALL command."""
    return Command(Verb.FLUSHALL)


def first_command(filename: str, rra_index: int) -> Command:
    """Build a FIRST command for the given archive index."""
    return Command(Verb.FIRST, filename, (str(rra_index),))


def last_command(filename: str) -> Command:
    """Build a LAST command."""
    return Command(Verb.LAST, filename)


def stats_command() -> Command:
    """Build a STATS command."""
    return Command(Verb.STATS)


def quit_command() -> Command:
    """Build a QUIT command."""
    return Command(Verb.QUIT)


def timestamp_now(precision: int = 0) -> str:
    """Current Unix time as a string suitable for UPDATE values.

    Daemons before 1.4.5 do not accept fractional seconds, hence precision 0 by default.
    """
    return f"{time.time():.{precision}f}"


# --- Response classifier ---


def parse_response(raw: str) -> Response:
    """Split a complete reply into status, header message and raw text.

    Raises:
        MalformedResponseError: Status token is not a base-10 integer.

    """
    data = raw.rstrip()
    header = data.split("\n", 1)[0]
    status, message = split_header(header)
    if status is None:
        msg = f"Unparseable status in daemon response: {header!r}"
        raise MalformedResponseError(msg)
    return Response(status=status, message=message, raw=data)


def classify_error(message: str, *, status: int = -1, raw: str = "") -> ProtocolError:
    """Map a daemon error message to the matching exception.

    This is the only place that depends on the daemon's message wording.
    """
    if message.startswith("Unknown command"):
        return UnknownCommandError(message, status=status, raw=raw)
    if message.startswith("No such file"):
        return RrdFileNotFoundError(message, status=status, raw=raw)
    if "can't parse argument" in message:
        return UnrecognizedArgumentError(message, status=status, raw=raw)
    return ProtocolError(message, status=status, raw=raw)


def check_response(response: Response) -> Response:
    """Return the response unchanged on success.

    Raises:
        ProtocolError: Negative status; the subclass is picked by ``classify_error``.

    """
    if response.status == -1:
        raise classify_error(response.message, status=response.status, raw=response.raw)
    if response.status < 0:
        raise ProtocolError(response.message, status=response.status, raw=response.raw)
    return response
