"""Response framing: decide when a daemon reply is complete.

The header line starts with a status token. When it is a positive integer N,
N more lines follow; anything else (zero, negative, non-numeric) means the
header line is the whole reply. Chunk boundaries do not line up with line
boundaries, so the check runs again after every chunk.
"""

import re

# Status token: optional minus sign, ASCII digits, nothing else
STATUS_RE = re.compile(r"-?[0-9]+")


def split_header(header: str) -> tuple[int | None, str]:
    """Split a header line into its status and message.

    Status is None unless the first token is a plain decimal integer.
    """
    token, _, message = header.rstrip().partition(" ")
    if STATUS_RE.fullmatch(token) is None:
        return None, message
    return int(token), message


class Framer:
    """Accumulates raw bytes for one reply at a time."""

    def __init__(self) -> None:
        """Initialize with an empty buffer."""
        self._buffer = bytearray()

    def feed(self, chunk: bytes) -> None:
        """Append bytes received from the socket."""
        self._buffer.extend(chunk)

    @property
    def buffered(self) -> int:
        """Number of bytes currently held."""
        return len(self._buffer)

    @property
    def complete(self) -> bool:
        """True once a full reply is buffered."""
        return self._reply_end() is not None

    def take(self) -> str:
        """Remove and return the completed reply as text.

        Bytes past the end of the reply stay buffered; check ``buffered``
        afterwards to tell whether the daemon sent more than was asked for.

        Raises:
            ValueError: No complete reply is buffered yet.

        """
        end = self._reply_end()
        if end is None:
            msg = "Reply is not complete yet."
            raise ValueError(msg)
        reply = bytes(self._buffer[:end])
        del self._buffer[:end]
        return reply.decode(errors="replace")

    def reset(self) -> None:
        """Drop everything buffered."""
        self._buffer.clear()

    def _reply_end(self) -> int | None:
        """Offset just past the last byte of the reply, or None if incomplete."""
        header_end = self._buffer.find(b"\n")
        if header_end < 0:
            return None
        expected = _following_lines(bytes(self._buffer[:header_end]))
        end = header_end + 1
        for _ in range(expected):
            newline = self._buffer.find(b"\n", end)
            if newline < 0:
                return None
            end = newline + 1
        return end


def _following_lines(header: bytes) -> int:
    """Number of lines announced by the header; 0 unless its first token is a positive integer."""
    status, _ = split_header(header.decode(errors="replace"))
    if status is None or status < 0:
        return 0
    return status
