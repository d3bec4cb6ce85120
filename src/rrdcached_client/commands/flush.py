"""Write queued updates to disk."""

import typer

from rrdcached_client.app_context import use_context


def flush(ctx: typer.Context, filename: str) -> None:
    """Write queued updates for one file to disk."""
    app = use_context(ctx)
    with app.client() as client:
        resp = client.flush(filename)
    app.out.print_response(resp)


def flush_all(ctx: typer.Context) -> None:
    """Start writing all queued updates to disk."""
    app = use_context(ctx)
    with app.client() as client:
        resp = client.flush_all()
    app.out.print_response(resp)
