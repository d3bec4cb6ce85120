"""Shared fixtures: an in-process fake rrdcached speaking the line protocol."""

import shutil
import socketserver
import tempfile
import threading
import time
from collections.abc import Iterator
from pathlib import Path

import pytest

from rrdcached_client.daemon.transport import Target


class _Handler(socketserver.StreamRequestHandler):
    """Serve one client connection: read command lines, write scripted replies."""

    def handle(self) -> None:
        daemon = self.server.fake
        for raw in self.rfile:
            line = raw.decode().rstrip("\n")
            verb = line.split(" ", 1)[0]
            if verb == "QUIT":
                return
            daemon.received.append(line)
            reply = daemon.replies.get(line, daemon.replies.get(verb))
            if reply is None:
                reply = f"-1 Unknown command: {verb}\n".encode()
            if daemon.chunk_size:
                for start in range(0, len(reply), daemon.chunk_size):
                    self.wfile.write(reply[start : start + daemon.chunk_size])
                    time.sleep(0.005)
            else:
                self.wfile.write(reply)
            if verb in daemon.hang_up_on:
                return


class _UnixServer(socketserver.ThreadingUnixStreamServer):
    daemon_threads = True
    block_on_close = False


class _TcpServer(socketserver.ThreadingTCPServer):
    daemon_threads = True
    block_on_close = False
    allow_reuse_address = True


class FakeDaemon:
    """Scripted daemon.

    ``replies`` maps a full command line, or just its verb, to raw reply bytes.
    ``chunk_size`` splits every reply into small writes. Verbs in ``hang_up_on``
    make the daemon close the connection right after replying.
    """

    def __init__(self, server: socketserver.BaseServer, target: Target) -> None:
        self.server = server
        self.target = target
        self.replies: dict[str, bytes] = {}
        self.received: list[str] = []
        self.chunk_size: int | None = None
        self.hang_up_on: set[str] = set()
        server.fake = self
        self._thread = threading.Thread(target=server.serve_forever, daemon=True)

    def start(self) -> None:
        self._thread.start()

    def stop(self) -> None:
        self.server.shutdown()
        self.server.server_close()
        self._thread.join(timeout=5)


@pytest.fixture
def socket_dir() -> Iterator[Path]:
    """Short temporary directory for unix sockets (sun_path is limited to ~100 bytes)."""
    path = Path(tempfile.mkdtemp(prefix="rrdc-"))
    yield path
    shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def fake_daemon(socket_dir: Path) -> Iterator[FakeDaemon]:
    """Fake daemon listening on a unix socket."""
    sock_path = socket_dir / "daemon.sock"
    daemon = FakeDaemon(_UnixServer(str(sock_path), _Handler), Target.unix(sock_path))
    daemon.start()
    yield daemon
    daemon.stop()


@pytest.fixture
def fake_tcp_daemon() -> Iterator[FakeDaemon]:
    """Fake daemon listening on a free localhost TCP port."""
    server = _TcpServer(("127.0.0.1", 0), _Handler)
    host, port = server.server_address[:2]
    daemon = FakeDaemon(server, Target.tcp(str(host), int(port)))
    daemon.start()
    yield daemon
    daemon.stop()
