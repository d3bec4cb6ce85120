"""Application context shared across CLI commands."""

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

import typer

from rrdcached_client.config import Config
from rrdcached_client.daemon.client import RrdcachedClient
from rrdcached_client.errors import RrdcachedError
from rrdcached_client.output import Output


@dataclass(frozen=True, slots=True)
class AppContext:
    """Shared application state passed through Typer context."""

    out: Output
    cfg: Config

    @contextmanager
    def client(self) -> Iterator[RrdcachedClient]:
        """Open a client for one command; client errors become a CLI error exit."""
        try:
            with RrdcachedClient.from_config(self.cfg) as client:
                yield client
        except RrdcachedError as e:
            self.out.print_error_and_exit(e.code, str(e))


def use_context(ctx: typer.Context) -> AppContext:
    """Extract application context from Typer context."""
    result: AppContext = ctx.obj
    return result
