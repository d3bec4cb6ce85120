"""Structured output for CLI and JSON modes."""

# ruff: noqa: T201 - output layer; print() is how results reach the terminal.

import json
import sys
from typing import NoReturn

import typer

from rrdcached_client.daemon.protocol import Response
from rrdcached_client.daemon.stats import Stats


class Output:
    """Handles all CLI output in JSON or human-readable format."""

    def __init__(self, *, json_mode: bool) -> None:
        """Initialize output handler.

        Args:
            json_mode: If True, output JSON envelopes; otherwise human-readable text.

        """
        self._json_mode = json_mode

    def _success(self, data: dict[str, object], message: str) -> None:
        """Print a success result in JSON or human-readable format."""
        if self._json_mode:
            print(json.dumps({"ok": True, "data": data}))
        else:
            print(message)

    def print_error_and_exit(self, code: str, message: str) -> NoReturn:
        """Print an error in JSON or human-readable format and exit with code 1.

        Raises:
            typer.Exit: Always, with code 1.

        """
        if self._json_mode:
            print(json.dumps({"ok": False, "error": code, "message": message}))
        else:
            print(f"Error: {message}", file=sys.stderr)
        raise typer.Exit(code=1)

    def print_warning(self, message: str) -> None:
        """Print a non-fatal warning to stderr (both modes)."""
        print(f"Warning: {message}", file=sys.stderr)

    # --- Daemon ---

    def print_health(self, *, running: bool, target: str) -> None:
        """Print daemon reachability."""
        self._success(
            {"running": running, "target": target},
            f"Daemon at {target}: {'running' if running else 'not reachable'}.",
        )

    def print_stats(self, stats: Stats) -> None:
        """Print daemon counters."""
        counters = stats.as_labels()
        if self._json_mode:
            print(json.dumps({"ok": True, "data": counters}))
        else:
            width = max(len(label) for label in counters)
            for label, value in counters.items():
                print(f"{label:<{width}}  {value}")

    # --- Files ---

    def print_response(self, resp: Response) -> None:
        """Print a daemon reply: its message, then any data lines."""
        if self._json_mode:
            print(json.dumps({"ok": True, "data": {"status": resp.status, "message": resp.message, "lines": resp.lines}}))
        else:
            print(resp.message)
            for line in resp.lines:
                print(line)

    def print_timestamp(self, filename: str, resp: Response) -> None:
        """Print a timestamp reply (FIRST, LAST)."""
        self._success({"filename": filename, "timestamp": resp.message}, resp.message)
