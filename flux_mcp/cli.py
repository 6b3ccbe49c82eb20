"""CLI for running and inspecting the Flux MCP server."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.table import Table
import typer

from flux_mcp.config import FluxMcpConfig, load_config
from flux_mcp.errors import FluxToolError

app = typer.Typer(
    name="flux-mcp",
    help="Flux MCP Server CLI",
    add_completion=False,
)
console = Console()


def _load(config_path: Path | None) -> FluxMcpConfig:
    try:
        return load_config(config_path)
    except (ValueError, OSError) as e:
        console.print(f"[red]✗[/] Invalid configuration: {e}")
        raise typer.Exit(1) from None


def _parse_arg(item: str) -> tuple[str, Any]:
    """Parse key=value; the value is JSON when it parses, a plain string otherwise."""
    key, sep, raw = item.partition("=")
    if not sep or not key:
        raise typer.BadParameter(f"expected key=value, got {item!r}")
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        value = raw
    return key, value


@app.command()
def serve(
    config_path: Path | None = typer.Option(
        None, "--config", "-c", help="Path to flux-mcp.toml"
    ),
    log_level: str | None = typer.Option(None, "--log-level", "-l", help="Override log level"),
) -> None:
    """Run the MCP server on stdio."""
    from flux_mcp.server import configure_logging, serve as run_server

    config = _load(config_path)
    if log_level:
        config.server.log_level = log_level
        config.observability.log_level = log_level
        try:
            config.validate()
        except ValueError as e:
            console.print(f"[red]✗[/] {e}")
            raise typer.Exit(1) from None

    configure_logging(config)
    run_server(config)


@app.command()
def tools() -> None:
    """List the tools the server advertises."""
    from flux_mcp.operations import OPERATIONS

    table = Table(title="Flux MCP Tools")
    table.add_column("Tool", style="cyan")
    table.add_column("Required")
    table.add_column("Optional")
    table.add_column("Description")

    for schema in OPERATIONS.values():
        table.add_row(
            schema.name,
            ", ".join(schema.required),
            ", ".join(schema.optional),
            schema.description,
        )

    console.print(table)


@app.command()
def plan(
    operation: str = typer.Argument(..., help="Tool name (generate, img2img, inpaint, control)"),
    arg: list[str] = typer.Option(
        [], "--arg", "-a", help="Tool argument as key=value (repeatable)"
    ),
    config_path: Path | None = typer.Option(
        None, "--config", "-c", help="Path to flux-mcp.toml"
    ),
) -> None:
    """Validate a tool call and print the command it would run."""
    from flux_mcp.dispatcher import FluxDispatcher

    config = _load(config_path)
    arguments = dict(_parse_arg(item) for item in arg)

    try:
        command = FluxDispatcher(config).build_call(operation, arguments)
    except FluxToolError as e:
        console.print(f"[red]✗[/] {e.message}")
        raise typer.Exit(2) from None

    argv = [config.flux.python_path, config.flux.script, *command]
    console.print(f"[dim]cwd: {config.flux.flux_path}[/]")
    typer.echo(json.dumps(argv))


@app.command()
def doctor(
    config_path: Path | None = typer.Option(
        None, "--config", "-c", help="Path to flux-mcp.toml"
    ),
) -> None:
    """Check the Flux install and environment."""
    config = _load(config_path)
    flux = config.flux
    flux_dir = Path(flux.flux_path)
    script = flux_dir / flux.script

    checks = [
        ("Flux path", str(flux_dir), flux_dir.is_dir()),
        ("CLI script", str(script), script.is_file()),
        ("Python", flux.python_path, True),
        (flux.api_key_env, "set" if flux.has_api_key() else "not set", flux.has_api_key()),
    ]

    table = Table(title="Flux MCP Doctor")
    table.add_column("Check", style="cyan")
    table.add_column("Value")
    table.add_column("Status")
    for name, value, ok in checks:
        table.add_row(name, value, "[green]✓[/]" if ok else "[yellow]![/]")
    console.print(table)

    if not flux_dir.is_dir() or not script.is_file():
        raise typer.Exit(1)


def main():
    """Entry point for the flux-mcp CLI."""
    app()


if __name__ == "__main__":
    main()
