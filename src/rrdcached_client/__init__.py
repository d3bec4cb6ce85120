"""Client driver for the rrdcached round-robin database caching daemon."""

import logging

from rrdcached_client.config import Config as Config
from rrdcached_client.daemon.client import RrdcachedClient as RrdcachedClient
from rrdcached_client.daemon.protocol import Response as Response
from rrdcached_client.daemon.protocol import timestamp_now as timestamp_now
from rrdcached_client.daemon.stats import Stats as Stats
from rrdcached_client.daemon.transport import Target as Target
from rrdcached_client.errors import ConnectionFailedError as ConnectionFailedError
from rrdcached_client.errors import MalformedResponseError as MalformedResponseError
from rrdcached_client.errors import ProtocolError as ProtocolError
from rrdcached_client.errors import RrdcachedError as RrdcachedError
from rrdcached_client.errors import RrdFileNotFoundError as RrdFileNotFoundError
from rrdcached_client.errors import UnknownCommandError as UnknownCommandError
from rrdcached_client.errors import UnrecognizedArgumentError as UnrecognizedArgumentError

logging.getLogger(__name__).addHandler(logging.NullHandler())
