"""First and last timestamps of an RRD file."""

from typing import Annotated

import typer

from rrdcached_client.app_context import use_context


def first(
    ctx: typer.Context,
    filename: str,
    rra_index: Annotated[int, typer.Argument(help="Archive index")],
) -> None:
    """Show the first timestamp stored in an archive."""
    app = use_context(ctx)
    with app.client() as client:
        resp = client.first(filename, rra_index)
    app.out.print_timestamp(filename, resp)


def last(ctx: typer.Context, filename: str) -> None:
    """Show the last update timestamp of a file."""
    app = use_context(ctx)
    with app.client() as client:
        resp = client.last(filename)
    app.out.print_timestamp(filename, resp)
