"""Enqueue updates for an RRD file."""

from typing import Annotated

import typer

from rrdcached_client.app_context import use_context
from rrdcached_client.daemon.protocol import timestamp_now


def update(
    ctx: typer.Context,
    filename: str,
    values: Annotated[list[str], typer.Argument(help="timestamp:value[:value...] entries")],
    *,
    now: Annotated[bool, typer.Option("--now", help="Prefix each value with the current timestamp")] = False,
) -> None:
    """Enqueue updates (the daemon writes them on its own schedule)."""
    app = use_context(ctx)
    if now:
        stamp = timestamp_now()
        values = [f"{stamp}:{value}" for value in values]
    with app.client() as client:
        resp = client.update(filename, *values)
    app.out.print_response(resp)
