"""Custom error types for MCP tooling."""

from __future__ import annotations

from typing import NoReturn, TypedDict

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603
TOOL_EXECUTION_ERROR = -32000


class MCPErrorPayload(TypedDict):
    """Structured JSON payload for MCP errors."""

    error: dict[str, object | None]


class MCPError(Exception):
    """Structured MCP error carrying a JSON-RPC error code."""

    def __init__(
        self,
        error_type: str,
        message: str,
        details: object | None = None,
        *,
        code: int = INTERNAL_ERROR,
    ) -> None:
        """Create a structured MCP error payload."""
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details
        self.error: MCPErrorPayload = {
            "error": {
                "type": error_type,
                "message": message,
                "details": details,
            }
        }

    @property
    def error_type(self) -> str:
        """Short machine-readable category of the error."""
        return str(self.error["error"]["type"])

    def to_dict(self) -> MCPErrorPayload:
        """Return the structured error payload."""
        return self.error


def raise_mcp_error(
    error_type: str,
    message: str,
    details: object | None = None,
    *,
    code: int = INTERNAL_ERROR,
) -> NoReturn:
    """Raise an :class:`MCPError` with a structured payload."""
    raise MCPError(error_type=error_type, message=message, details=details, code=code)
