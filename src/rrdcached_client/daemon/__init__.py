"""Daemon subsystem: wire protocol, framing, stats decoding and socket transport."""

from rrdcached_client.daemon.protocol import Command as Command
from rrdcached_client.daemon.protocol import Response as Response
from rrdcached_client.daemon.protocol import Verb as Verb
from rrdcached_client.daemon.stats import Stats as Stats
from rrdcached_client.daemon.transport import Target as Target
from rrdcached_client.daemon.transport import Transport as Transport
