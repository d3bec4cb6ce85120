"""List updates queued for an RRD file."""

import typer

from rrdcached_client.app_context import use_context


def pending(ctx: typer.Context, filename: str) -> None:
    """List queued, not yet written updates for a file."""
    app = use_context(ctx)
    with app.client() as client:
        resp = client.pending(filename)
    app.out.print_response(resp)
