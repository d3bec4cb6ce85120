"""Show whether the daemon is reachable."""

import typer

from rrdcached_client.app_context import use_context
from rrdcached_client.daemon.transport import is_connectable


def health(ctx: typer.Context) -> None:
    """Check whether the daemon accepts connections."""
    app = use_context(ctx)
    target = app.cfg.target
    running = is_connectable(target, timeout=app.cfg.timeout or 1.0)
    app.out.print_health(running=running, target=str(target))
    if not running:
        raise typer.Exit(code=1)
