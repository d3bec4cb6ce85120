"""Create an RRD file through the daemon."""

from typing import Annotated

import typer

from rrdcached_client.app_context import use_context
from rrdcached_client.errors import UnrecognizedArgumentError


def create(
    ctx: typer.Context,
    filename: str,
    definitions: Annotated[list[str], typer.Argument(help="DS:... and RRA:... definitions")],
    *,
    start: Annotated[int | None, typer.Option("--start", "-b", help="Start timestamp")] = None,
    step: Annotated[int | None, typer.Option("--step", "-s", help="Base interval in seconds")] = None,
    overwrite: Annotated[bool, typer.Option("--overwrite/--no-overwrite", help="Replace an existing file")] = True,
    fallback: Annotated[
        bool, typer.Option("--fallback", help="Retry without --no-overwrite if the daemon does not support it")
    ] = False,
) -> None:
    """Create an RRD file."""
    app = use_context(ctx)
    data_sources = [d for d in definitions if d.startswith("DS:")]
    archives = [d for d in definitions if not d.startswith("DS:")]
    with app.client() as client:
        try:
            resp = client.create(filename, data_sources, archives, start=start, step=step, overwrite=overwrite)
        except UnrecognizedArgumentError as e:
            if not (fallback and e.bad_argument == "-O"):
                raise
            app.out.print_warning("Daemon does not support -O; retrying CREATE without it.")
            resp = client.create(filename, data_sources, archives, start=start, step=step, overwrite=True)
    app.out.print_response(resp)
