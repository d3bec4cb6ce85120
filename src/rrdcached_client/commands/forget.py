"""Drop queued updates for an RRD file."""

import typer

from rrdcached_client.app_context import use_context


def forget(ctx: typer.Context, filename: str) -> None:
    """Discard queued updates for a file without writing them."""
    app = use_context(ctx)
    with app.client() as client:
        resp = client.forget(filename)
    app.out.print_response(resp)
