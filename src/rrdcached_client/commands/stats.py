"""Show daemon counters."""

import typer

from rrdcached_client.app_context import use_context


def stats(ctx: typer.Context) -> None:
    """Show daemon statistics (queue length, updates received/written, ...)."""
    app = use_context(ctx)
    with app.client() as client:
        counters = client.stats()
    app.out.print_stats(counters)
