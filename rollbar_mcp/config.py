from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from . import __version__
from .errors import ConfigError

DEFAULT_BASE_URL = "https://api.rollbar.com/api/1"
DEFAULT_USER_AGENT = f"rollbar-mcp-server/{__version__}"
DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config" / "server.yaml"
TRANSPORTS = ("stdio", "streamable-http")


def load_config(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Rollbar MCP config not found at {path}")
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ConfigError("Config root must be a mapping")
    return data


@dataclass(frozen=True)
class HttpLimits:
    connect_timeout: float = 5.0
    read_timeout: float = 30.0
    write_timeout: float = 10.0
    pool_timeout: float = 5.0
    max_connections: int = 20
    max_keepalive_connections: int = 10


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration, built once at startup and never mutated."""

    access_token: str
    base_url: str = DEFAULT_BASE_URL
    user_agent: str = DEFAULT_USER_AGENT
    server_name: str = "rollbar-mcp-server"
    log_level: str = "INFO"
    transport: str = "stdio"
    host: str = "127.0.0.1"
    port: int = 9000
    http_limits: HttpLimits = field(default_factory=HttpLimits)


def _http_limits(raw: Mapping[str, Any]) -> HttpLimits:
    return HttpLimits(
        connect_timeout=float(raw.get("connect_timeout", 5.0)),
        read_timeout=float(raw.get("read_timeout", 30.0)),
        write_timeout=float(raw.get("write_timeout", 10.0)),
        pool_timeout=float(raw.get("pool_timeout", 5.0)),
        max_connections=int(raw.get("max_connections", 20)),
        max_keepalive_connections=int(raw.get("max_keepalive_connections", 10)),
    )


def settings_from_config(
    config: Mapping[str, Any],
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """
    Merge the YAML mapping with environment overrides into a Settings object.

    Environment wins over YAML. ROLLBAR_ACCESS_TOKEN is required: a server
    without a credential cannot serve any tool, so this is a startup failure.
    """
    env = os.environ if environ is None else environ
    server_cfg = config.get("server", {}) or {}
    rollbar_cfg = config.get("rollbar", {}) or {}

    token = (env.get("ROLLBAR_ACCESS_TOKEN") or "").strip()
    if not token:
        raise ConfigError(
            "ROLLBAR_ACCESS_TOKEN is required. "
            "Create a project access token with read scope in Rollbar and export it."
        )

    transport = str(env.get("ROLLBAR_MCP_TRANSPORT") or server_cfg.get("transport", "stdio")).strip().lower()
    if transport not in TRANSPORTS:
        raise ConfigError(f"Unsupported transport '{transport}', expected one of {', '.join(TRANSPORTS)}")

    base_url = env.get("ROLLBAR_API_BASE") or rollbar_cfg.get("base_url") or DEFAULT_BASE_URL
    return Settings(
        access_token=token,
        base_url=str(base_url).rstrip("/"),
        user_agent=str(rollbar_cfg.get("user_agent") or DEFAULT_USER_AGENT),
        server_name=str(server_cfg.get("name", "rollbar-mcp-server")),
        log_level=str(env.get("ROLLBAR_MCP_LOG_LEVEL") or server_cfg.get("log_level", "INFO")).upper(),
        transport=transport,
        host=str(env.get("ROLLBAR_MCP_HOST") or server_cfg.get("host", "127.0.0.1")),
        port=int(env.get("ROLLBAR_MCP_PORT") or server_cfg.get("port", 9000)),
        http_limits=_http_limits(server_cfg.get("http_limits", {}) or {}),
    )


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    env = os.environ if environ is None else environ
    explicit = env.get("ROLLBAR_MCP_CONFIG")
    if explicit:
        config = load_config(Path(explicit))
    elif DEFAULT_CONFIG_PATH.exists():
        config = load_config(DEFAULT_CONFIG_PATH)
    else:
        config = {}
    return settings_from_config(config, env)
