"""CLI entry point for rrdcached-client."""

from pathlib import Path
from typing import Annotated

import typer
from mm_clikit import TyperPlus

from rrdcached_client.app_context import AppContext
from rrdcached_client.commands.create import create
from rrdcached_client.commands.flush import flush, flush_all
from rrdcached_client.commands.forget import forget
from rrdcached_client.commands.health import health
from rrdcached_client.commands.pending import pending
from rrdcached_client.commands.stats import stats
from rrdcached_client.commands.timestamps import first, last
from rrdcached_client.commands.update import update
from rrdcached_client.config import Config
from rrdcached_client.log import setup_logging
from rrdcached_client.output import Output

app = TyperPlus(package_name="rrdcached-client")


@app.callback()
def callback(
    ctx: typer.Context,
    *,
    json_output: Annotated[bool, typer.Option("--json", help="Output results as JSON.")] = False,
    config_path: Annotated[Path | None, typer.Option("--config", help="Config file path.")] = None,
    socket_path: Annotated[Path | None, typer.Option("--socket", help="Daemon unix socket path.")] = None,
    host: Annotated[str | None, typer.Option("--host", help="Daemon TCP host (selects TCP).")] = None,
    port: Annotated[int | None, typer.Option("--port", help="Daemon TCP port.")] = None,
    timeout: Annotated[float | None, typer.Option("--timeout", help="Connect/read timeout in seconds.")] = None,
) -> None:
    """Talk to an rrdcached daemon from the terminal."""
    out = Output(json_mode=json_output)
    try:
        cfg = Config.build(config_path, socket_path=socket_path, host=host, port=port, timeout=timeout)
    except ValueError as e:
        out.print_error_and_exit("invalid_config", str(e))
    if cfg.log_path is not None:
        setup_logging(cfg.log_path)
    ctx.obj = AppContext(out=out, cfg=cfg)


# Daemon
app.command(aliases=["h"])(health)
app.command(aliases=["s"])(stats)
app.command("flush-all")(flush_all)

# Files
app.command()(create)
app.command()(update)
app.command()(pending)
app.command()(forget)
app.command()(flush)
app.command()(first)
app.command()(last)
