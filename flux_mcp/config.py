"""Flux MCP configuration loader - reads flux-mcp.toml with ENV overrides."""  # noqa: I001

from __future__ import annotations

from dataclasses import dataclass, field
import os
from pathlib import Path
import tomllib
from typing import Any, cast

LOG_LEVELS = ("debug", "info", "warning", "error")


@dataclass
class FluxServerConfig:
    """Server identity and transport settings."""

    name: str = "flux-server"
    version: str = "0.1.0"
    transport: str = "stdio"
    log_level: str = "info"

    def validate(self) -> None:
        if self.transport != "stdio":
            raise ValueError(f"Invalid transport: {self.transport}")
        if self.log_level.lower() not in LOG_LEVELS:
            raise ValueError(f"Invalid log_level: {self.log_level}")


@dataclass
class FluxToolConfig:
    """Where the Flux CLI lives and how to run it."""

    flux_path: str = "."
    python_path: str = "python3"
    script: str = "fluxcli.py"
    api_key_env: str = "BFL_API_KEY"

    def validate(self) -> None:
        if not self.script:
            raise ValueError("script must not be empty")
        if not self.python_path:
            raise ValueError("python_path must not be empty")

    def has_api_key(self) -> bool:
        return bool(os.getenv(self.api_key_env))


@dataclass
class FluxObservabilityConfig:
    """Structured logging and in-memory metrics."""

    enabled: bool = False
    log_format: str = "json"  # "json" | "text"
    log_level: str = "info"
    include_correlation_id: bool = True

    def validate(self) -> None:
        if self.log_format not in ("json", "text"):
            raise ValueError(f"Invalid log_format: {self.log_format}")


@dataclass
class FluxMcpConfig:
    """Root configuration, loaded once at startup."""

    server: FluxServerConfig = field(default_factory=FluxServerConfig)
    flux: FluxToolConfig = field(default_factory=FluxToolConfig)
    observability: FluxObservabilityConfig = field(default_factory=FluxObservabilityConfig)

    def validate(self) -> None:
        self.server.validate()
        self.flux.validate()
        self.observability.validate()


def _truthy(value: str) -> bool:
    return value.lower() in ("1", "true", "yes")


def _apply_env_overrides(cfg: FluxMcpConfig) -> FluxMcpConfig:
    """Apply environment variable overrides. ENV beats TOML."""
    if os.getenv("FLUX_PATH"):
        cfg.flux.flux_path = cast(str, os.getenv("FLUX_PATH"))

    # FLUX_PYTHON wins over an active virtualenv
    if os.getenv("FLUX_PYTHON"):
        cfg.flux.python_path = cast(str, os.getenv("FLUX_PYTHON"))
    elif os.getenv("VIRTUAL_ENV"):
        cfg.flux.python_path = str(Path(cast(str, os.getenv("VIRTUAL_ENV"))) / "bin" / "python")

    if os.getenv("FLUX_MCP_LOG_LEVEL"):
        cfg.server.log_level = os.getenv("FLUX_MCP_LOG_LEVEL", cfg.server.log_level)
        cfg.observability.log_level = cfg.server.log_level

    if os.getenv("FLUX_MCP_OBS_ENABLED"):
        cfg.observability.enabled = _truthy(os.getenv("FLUX_MCP_OBS_ENABLED", ""))
    if os.getenv("FLUX_MCP_OBS_LOG_FORMAT"):
        cfg.observability.log_format = os.getenv(
            "FLUX_MCP_OBS_LOG_FORMAT", cfg.observability.log_format
        )

    return cfg


def _apply_toml(cfg: FluxMcpConfig, data: dict[str, Any]) -> None:
    srv = data.get("server", {})
    cfg.server.name = srv.get("name", cfg.server.name)
    cfg.server.version = srv.get("version", cfg.server.version)
    cfg.server.transport = srv.get("transport", cfg.server.transport)
    cfg.server.log_level = srv.get("log_level", cfg.server.log_level)

    flux = data.get("flux", {})
    cfg.flux.flux_path = flux.get("flux_path", cfg.flux.flux_path)
    cfg.flux.python_path = flux.get("python_path", cfg.flux.python_path)
    cfg.flux.script = flux.get("script", cfg.flux.script)
    cfg.flux.api_key_env = flux.get("api_key_env", cfg.flux.api_key_env)

    obs = data.get("observability", {})
    cfg.observability.enabled = obs.get("enabled", cfg.observability.enabled)
    cfg.observability.log_format = obs.get("log_format", cfg.observability.log_format)
    cfg.observability.log_level = obs.get("log_level", cfg.observability.log_level)
    cfg.observability.include_correlation_id = obs.get(
        "include_correlation_id", cfg.observability.include_correlation_id
    )


def load_config(config_path: str | Path | None = None) -> FluxMcpConfig:
    """
    Load Flux MCP config from flux-mcp.toml with ENV overrides.

    Precedence: ENV → TOML → defaults

    Args:
        config_path: Path to the TOML file. If None, searches:
            1. FLUX_MCP_CONFIG env var
            2. ./flux-mcp.toml

    Returns:
        FluxMcpConfig with merged settings.

    Raises:
        ValueError: a setting has an invalid value
    """
    if config_path is None:
        if os.getenv("FLUX_MCP_CONFIG"):
            config_path = Path(cast(str, os.getenv("FLUX_MCP_CONFIG")))
        else:
            config_path = Path("flux-mcp.toml")
    else:
        config_path = Path(config_path)

    cfg = FluxMcpConfig()

    if config_path.exists():
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
        _apply_toml(cfg, data)

    cfg = _apply_env_overrides(cfg)

    # Resolve once; the install dir does not move while the server runs
    cfg.flux.flux_path = str(Path(cfg.flux.flux_path).expanduser().resolve())

    cfg.validate()

    return cfg
