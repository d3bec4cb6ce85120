"""Tests for the socket transport against an in-process fake daemon."""

import socket
import threading
import time
from pathlib import Path

import pytest

from rrdcached_client.daemon.client import RrdcachedClient
from rrdcached_client.daemon.stats import Stats
from rrdcached_client.daemon.transport import Target, Transport, TransportProtocol, is_connectable
from rrdcached_client.errors import ConnectionFailedError, MalformedResponseError, RrdFileNotFoundError

PENDING_REPLY = b"4 updates pending\n1:10:20:30:40\n2:90:80:70:60\n3:25:35:45:55\n4:55:65:75:85\n"


class TestTarget:
    """Address rendering and selection."""

    def test_unix(self):
        """Unix target renders with a scheme prefix."""
        target = Target.unix("/a/b.sock")
        assert target.protocol is TransportProtocol.UNIX
        assert str(target) == "unix:/a/b.sock"

    def test_tcp(self):
        """TCP target renders as host:port."""
        target = Target.tcp("localhost", 42217)
        assert target.protocol is TransportProtocol.TCP
        assert str(target) == "localhost:42217"


class TestConnect:
    """Dialing the daemon."""

    def test_unix_roundtrip(self, fake_daemon):
        """Send a command and read one reply over a unix socket."""
        fake_daemon.replies["FLUSHALL"] = b"0 Started flush.\n"
        with Transport(fake_daemon.target, timeout=5) as transport:
            transport.send(b"FLUSHALL\n")
            assert transport.receive() == "0 Started flush.\n"
        assert fake_daemon.received == ["FLUSHALL"]

    def test_tcp_roundtrip(self, fake_tcp_daemon):
        """Same over TCP."""
        fake_tcp_daemon.replies["STATS"] = b"1 Statistics follow\nQueueLength: 3\n"
        with RrdcachedClient.connect(fake_tcp_daemon.target, timeout=5) as client:
            assert client.stats() == Stats(queue_length=3)

    def test_missing_socket(self, socket_dir: Path):
        """Dialing a socket that does not exist is a connection failure."""
        with pytest.raises(ConnectionFailedError, match="Cannot connect"):
            RrdcachedClient.connect_unix(socket_dir / "nope.sock", timeout=1)

    def test_refused_tcp(self):
        """A closed TCP port is a connection failure."""
        with socket.socket() as s:
            s.bind(("127.0.0.1", 0))
            port = s.getsockname()[1]
        with pytest.raises(ConnectionFailedError):
            RrdcachedClient.connect_tcp("127.0.0.1", port, timeout=1)

    def test_is_connectable(self, fake_daemon, socket_dir: Path):
        """Probe reports reachability without raising."""
        assert is_connectable(fake_daemon.target)
        assert not is_connectable(Target.unix(socket_dir / "nope.sock"))

    def test_send_before_connect(self, fake_daemon):
        """An unconnected transport refuses to send."""
        transport = Transport(fake_daemon.target)
        assert not transport.connected
        with pytest.raises(ConnectionFailedError, match="Not connected"):
            transport.send(b"STATS\n")

    def test_close_is_idempotent(self, fake_daemon):
        """Closing twice is fine."""
        transport = Transport(fake_daemon.target, timeout=5)
        transport.connect()
        transport.close()
        transport.close()
        assert not transport.connected


class TestReceive:
    """Reading framed replies from a real socket."""

    def test_chunked_multiline(self, fake_daemon):
        """Replies dribbled out in small chunks are reassembled."""
        fake_daemon.replies["PENDING foo.rrd"] = PENDING_REPLY
        fake_daemon.chunk_size = 7
        with RrdcachedClient.connect(fake_daemon.target, timeout=5) as client:
            resp = client.pending("foo.rrd")
        assert resp.status == 4
        assert resp.raw.count("\n") == 4
        assert resp.lines[-1] == "4:55:65:75:85"

    def test_sequential_commands(self, fake_daemon):
        """Several commands share one connection."""
        fake_daemon.replies["UPDATE"] = b"0 errors, enqueued 1 value(s).\n"
        fake_daemon.replies["PENDING"] = b"1 updates pending\n1:1\n"
        fake_daemon.replies["FLUSH"] = b"-1 No such file: /tmp/foo.rrd\n"
        with RrdcachedClient.connect(fake_daemon.target, timeout=5) as client:
            assert "enqueued 1" in client.update("foo.rrd", "1:1").message
            assert client.pending("foo.rrd").lines == ["1:1"]
            with pytest.raises(RrdFileNotFoundError):
                client.flush("foo.rrd")
            assert client.pending("foo.rrd").status == 1
        assert fake_daemon.received[:4] == ["UPDATE foo.rrd 1:1", "PENDING foo.rrd", "FLUSH foo.rrd", "PENDING foo.rrd"]

    def test_peer_closes_mid_reply(self, fake_daemon):
        """A truncated multi-line reply is a connection failure, not a short response."""
        fake_daemon.replies["PENDING"] = b"4 updates pending\n1:1\n"
        fake_daemon.hang_up_on.add("PENDING")
        client = RrdcachedClient.connect(fake_daemon.target, timeout=5)
        with pytest.raises(ConnectionFailedError, match="closed the connection"):
            client.pending("foo.rrd")
        with pytest.raises(ConnectionFailedError):
            client.flush_all()

    def test_malformed_reply_is_not_reused(self, fake_daemon):
        """A garbage reply closes the connection; the next command never sees its leftovers."""
        fake_daemon.replies["FLUSHALL"] = b"garbage\n0 Started flush.\n"
        fake_daemon.replies["LAST foo.rrd"] = b"0 1438354680\n"
        client = RrdcachedClient.connect(fake_daemon.target, timeout=5)
        with pytest.raises(MalformedResponseError):
            client.flush_all()
        with pytest.raises(ConnectionFailedError):
            client.last("foo.rrd")
        assert fake_daemon.received == ["FLUSHALL"]

    def test_surplus_after_reply(self, fake_daemon):
        """Bytes past a complete reply mean the stream is out of step; the connection is dropped."""
        fake_daemon.replies["FLUSHALL"] = b"0 Started flush.\n0 1438354680\n"
        with Transport(fake_daemon.target, timeout=5) as transport:
            transport.send(b"FLUSHALL\n")
            with pytest.raises(MalformedResponseError, match="past the end of the reply"):
                transport.receive()
            assert not transport.connected

    def test_signed_status_is_malformed(self, fake_daemon):
        """A '+N' status is neither framed nor parsed as N data lines."""
        fake_daemon.replies["PENDING"] = b"+2 updates pending\n1:1\n2:2\n"
        fake_daemon.replies["LAST foo.rrd"] = b"0 1438354680\n"
        client = RrdcachedClient.connect(fake_daemon.target, timeout=5)
        with pytest.raises(MalformedResponseError):
            client.pending("foo.rrd")
        with pytest.raises(ConnectionFailedError):
            client.last("foo.rrd")
        assert fake_daemon.received == ["PENDING foo.rrd"]

    def test_read_timeout(self, fake_daemon):
        """A silent daemon trips the read timeout."""
        fake_daemon.replies["FLUSHALL"] = b""
        client = RrdcachedClient.connect(fake_daemon.target, timeout=0.2)
        started = time.monotonic()
        with pytest.raises(ConnectionFailedError, match="failed"):
            client.flush_all()
        assert time.monotonic() - started < 5
        client.close()

    def test_write_after_peer_gone(self, fake_daemon):
        """Writing to a connection the daemon dropped eventually fails as a connection error."""
        fake_daemon.replies["FLUSHALL"] = b"0 Started flush.\n"
        fake_daemon.hang_up_on.add("FLUSHALL")
        client = RrdcachedClient.connect(fake_daemon.target, timeout=2)
        client.flush_all()
        time.sleep(0.1)
        with pytest.raises(ConnectionFailedError):
            for _ in range(5):
                client.flush_all()

    def test_independent_clients_in_parallel(self, fake_daemon):
        """Each client has its own connection; replies are not mixed up."""
        fake_daemon.replies["LAST a.rrd"] = b"0 100\n"
        fake_daemon.replies["LAST b.rrd"] = b"0 200\n"
        results: dict[str, list[str]] = {"a.rrd": [], "b.rrd": []}

        def worker(filename: str) -> None:
            with RrdcachedClient.connect(fake_daemon.target, timeout=5) as client:
                for _ in range(20):
                    results[filename].append(client.last(filename).message)

        threads = [threading.Thread(target=worker, args=(name,)) for name in results]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert results == {"a.rrd": ["100"] * 20, "b.rrd": ["200"] * 20}
