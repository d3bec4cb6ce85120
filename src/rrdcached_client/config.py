"""Centralized client configuration."""

import tomllib
from pathlib import Path
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, computed_field

from rrdcached_client.daemon.transport import Target

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "rrdcached-client" / "config.toml"
DEFAULT_SOCKET_PATH = Path("/tmp/rrdcached.sock")  # nosec B108 - rrdcached's own default listen address
DEFAULT_PORT = 42217

# Keys accepted from config.toml, with the types they must have
_TOML_KEYS: dict[str, tuple[type, ...]] = {
    "socket_path": (str,),
    "host": (str,),
    "port": (int,),
    "timeout": (int, float),
    "log_path": (str,),
}


class Config(BaseModel):
    """Where the daemon lives and how long to wait for it."""

    model_config = ConfigDict(frozen=True)

    socket_path: Path = Field(default=DEFAULT_SOCKET_PATH, description="Daemon unix socket, used when host is unset")
    host: str | None = Field(default=None, description="Daemon TCP host; selects TCP when set")
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535, description="Daemon TCP port")
    timeout: float | None = Field(default=10.0, gt=0, description="Connect/read timeout in seconds (None = wait forever)")
    log_path: Path | None = Field(default=None, description="Log file; logging is off when unset")

    @computed_field(description="Daemon address")
    @property
    def target(self) -> Target:
        """Daemon address: TCP when host is set, unix socket otherwise."""
        if self.host:
            return Target.tcp(self.host, self.port)
        return Target.unix(self.socket_path)

    @classmethod
    def build(cls, config_path: Path | None = None, **overrides: Any) -> Self:  # noqa: ANN401
        """Build a Config from defaults, an optional config.toml and explicit overrides.

        Overrides that are None are ignored, so CLI options left unset fall back
        to the file and then to defaults.
        """
        path = config_path if config_path is not None else DEFAULT_CONFIG_PATH

        kwargs: dict[str, Any] = {}
        if path.is_file():
            with path.open("rb") as f:
                toml_data = tomllib.load(f)
            for key, types in _TOML_KEYS.items():
                value = toml_data.get(key)
                if isinstance(value, types) and not isinstance(value, bool):
                    kwargs[key] = value

        kwargs.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**kwargs)
