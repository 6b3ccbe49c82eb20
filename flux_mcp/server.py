#!/usr/bin/env python3
"""
Flux MCP Server - Model Context Protocol interface for the Flux image CLI.

Supports stdio transport for Claude Desktop integration.
Run with: python -m flux_mcp.server

Tools:
- generate: text-to-image
- img2img: image-to-image with a reference image
- inpaint: mask inpainting
- control: structural control (canny, depth, pose)
"""  # noqa: I001

from __future__ import annotations

import asyncio
import logging
import sys
import time
from typing import Any

from flux_mcp.catalog import build_tools
from flux_mcp.config import FluxMcpConfig, load_config
from flux_mcp.dispatcher import FluxDispatcher
from flux_mcp.errors import FluxToolError
from flux_mcp.executor import ProcessExecutor
from flux_mcp.observability import ObservabilityContext, setup_logging
from mcp import types
from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import CallToolResult, TextContent, Tool

# Configure logging to stderr (Claude Desktop captures it)
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger("flux-mcp")


class FluxMcpServer:
    """Flux MCP Server implementation."""

    def __init__(self, config: FluxMcpConfig, executor: ProcessExecutor | None = None):
        self.config = config
        self.server = Server(config.server.name, version=config.server.version)
        self.dispatcher = FluxDispatcher(config, executor)
        self.obs = ObservabilityContext(config.observability)
        self.tools: list[Tool] = build_tools()

        if not config.flux.has_api_key():
            logger.warning(f"{config.flux.api_key_env} environment variable not set")

        self._register_handlers()
        logger.info(
            f"Flux MCP Server initialized ({len(self.tools)} tools, flux_path={config.flux.flux_path})"
        )

    def _register_handlers(self):
        """Register MCP protocol handlers."""

        @self.server.list_tools()
        async def list_tools() -> list[Tool]:
            """Return available tools."""
            logger.debug("list_tools called")
            return self.tools

        # Registered directly so McpError reaches the session as a JSON-RPC error
        self.server.request_handlers[types.CallToolRequest] = self._handle_call_tool_request

    async def _handle_call_tool_request(self, req: types.CallToolRequest) -> types.ServerResult:
        result = await self.call_tool(req.params.name, req.params.arguments)
        return types.ServerResult(result)

    async def call_tool(self, name: str, arguments: dict[str, Any] | None) -> CallToolResult:
        """Handle tool invocation with observability.

        Raises:
            UnknownOperationError: name is not a Flux tool
            InvalidArgumentError: arguments failed validation
        """
        cid = self.obs.correlation_id()
        start_time = time.time()
        success = False
        error_msg = None

        logger.info(f"call_tool: {name}", extra={"correlation_id": cid, "tool": name})

        try:
            response = await self.dispatcher.handle_call(name, arguments)
            success = not response.is_error
            if response.is_error:
                error_msg = response.text
            return CallToolResult(
                content=[TextContent(type="text", text=response.text)],
                isError=response.is_error,
            )
        except FluxToolError as e:
            error_msg = e.message
            raise
        finally:
            latency_ms = (time.time() - start_time) * 1000
            self.obs.record(tool=name, latency_ms=latency_ms, success=success)
            logger.info(
                f"call_tool done: {name}",
                extra={
                    "correlation_id": cid,
                    "tool": name,
                    "latency_ms": latency_ms,
                    "status": "ok" if success else "error",
                    "error": error_msg,
                },
            )

    async def run(self):
        """Run the server with stdio transport."""
        async with stdio_server() as (read_stream, write_stream):
            logger.info("Flux MCP server running on stdio")
            await self.server.run(
                read_stream,
                write_stream,
                self.server.create_initialization_options(),
            )


def configure_logging(config: FluxMcpConfig) -> logging.Logger:
    """Set up the flux-mcp logger from config and return it."""
    if config.observability.enabled:
        return setup_logging(config.observability, "flux-mcp")
    log_level = getattr(logging, config.server.log_level.upper(), logging.INFO)
    logging.getLogger().setLevel(log_level)
    flux_logger = logging.getLogger("flux-mcp")
    flux_logger.setLevel(log_level)
    return flux_logger


def serve(config: FluxMcpConfig) -> None:
    """Run the stdio server until the client disconnects or Ctrl+C."""
    server = FluxMcpServer(config)
    try:
        asyncio.run(server.run())
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    finally:
        if server.obs.enabled:
            logger.info(f"Session stats: {server.obs.get_stats()}")


def main():
    """Entry point for Flux MCP server."""
    import argparse

    parser = argparse.ArgumentParser(description="Flux MCP Server")
    parser.add_argument(
        "--config",
        "-c",
        help="Path to flux-mcp.toml config file",
        default=None,
    )
    parser.add_argument(
        "--log-level",
        "-l",
        choices=["debug", "info", "warning", "error"],
        default=None,
        help="Override log level",
    )
    args = parser.parse_args()

    config = load_config(args.config)

    if args.log_level:
        config.server.log_level = args.log_level
        config.observability.log_level = args.log_level

    global logger  # noqa: PLW0603
    logger = configure_logging(config)

    logger.info(
        f"Config loaded: flux_path={config.flux.flux_path}, python={config.flux.python_path}"
    )
    logger.info(
        f"Observability: enabled={config.observability.enabled}, log_format={config.observability.log_format}"
    )

    serve(config)


if __name__ == "__main__":
    main()
