"""Protocol-level errors for the Flux MCP server.

These are raised before any external process runs and travel to the caller
as JSON-RPC errors, never as tool results.
"""

from __future__ import annotations

from mcp.shared.exceptions import McpError
from mcp.types import INVALID_PARAMS, METHOD_NOT_FOUND, ErrorData


class FluxToolError(McpError):
    """Base class for errors reported at the protocol level."""

    code: int = INVALID_PARAMS

    def __init__(self, message: str):
        super().__init__(ErrorData(code=self.code, message=message))
        self.message = message


class UnknownOperationError(FluxToolError):
    """Raised when a call names a tool outside the operation catalog."""

    code = METHOD_NOT_FOUND

    def __init__(self, name: str):
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class InvalidArgumentError(FluxToolError):
    """Raised when a tool argument fails its field rule."""

    code = INVALID_PARAMS

    def __init__(self, field_name: str, message: str):
        super().__init__(message)
        self.field_name = field_name
