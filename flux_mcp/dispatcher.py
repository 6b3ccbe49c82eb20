"""
Tool-call dispatcher for the Flux MCP server.

A call flows one way: schema lookup → field validation → command vector →
process execution → response. Lookup and validation failures raise
protocol errors (UnknownOperationError, InvalidArgumentError) before any
process runs. Everything after validation ends in a ToolResponse.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any

from flux_mcp.config import FluxMcpConfig
from flux_mcp.errors import FluxToolError
from flux_mcp.executor import (
    ExecutionOutcome,
    ProcessExecutor,
    ProcessFailure,
    SpawnFailure,
    SubprocessExecutor,
    Success,
)
from flux_mcp.operations import get_operation, validate_arguments
from flux_mcp.translate import build_command

logger = logging.getLogger("flux-mcp.dispatcher")


@dataclass(frozen=True)
class SuccessResponse:
    text: str
    is_error = False


@dataclass(frozen=True)
class ErrorResponse:
    text: str
    is_error = True


ToolResponse = SuccessResponse | ErrorResponse


def outcome_to_response(outcome: ExecutionOutcome) -> ToolResponse:
    """Map a process outcome onto the two caller-visible response shapes."""
    if isinstance(outcome, Success):
        return SuccessResponse(outcome.stdout)
    if isinstance(outcome, ProcessFailure):
        return ErrorResponse(
            f"Error: Flux command failed (exit code {outcome.exit_code}): {outcome.stderr}"
        )
    if isinstance(outcome, SpawnFailure):
        return ErrorResponse(f"Error: Failed to spawn Python process: {outcome.reason}")
    raise TypeError(f"Unknown execution outcome: {outcome!r}")


class FluxDispatcher:
    """Validates tool calls and runs them through fluxcli.

    The dispatcher holds only read-only configuration, so concurrent calls
    need no locking.
    """

    def __init__(self, config: FluxMcpConfig, executor: ProcessExecutor | None = None):
        self.config = config
        self.executor: ProcessExecutor = executor or SubprocessExecutor()

    def build_call(self, name: str, arguments: Any) -> tuple[str, ...]:
        """
        Validate a call and return its command vector without running it.

        Raises:
            UnknownOperationError: name is not a known operation
            InvalidArgumentError: an argument fails its field rule
        """
        schema = get_operation(name)
        args = validate_arguments(schema, arguments)
        return build_command(schema, args)

    async def handle_call(self, name: str, arguments: Any) -> ToolResponse:
        """Dispatch one tool call and return its response."""
        flux = self.config.flux

        try:
            command = self.build_call(name, arguments)
            outcome = await self.executor.execute(
                flux.python_path, [flux.script, *command], flux.flux_path
            )
            return outcome_to_response(outcome)
        except FluxToolError:
            raise
        except Exception as e:
            logger.exception(f"Tool execution error in {name}")
            return ErrorResponse(f"Error: {e}")
