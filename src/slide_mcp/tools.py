"""Tool definitions and the immutable tool registry."""

from __future__ import annotations

from collections.abc import Awaitable, Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

from pydantic import BaseModel, ConfigDict, ValidationError

from slide_mcp.errors import INVALID_PARAMS, raise_mcp_error


class ToolParameters(BaseModel):
    """Base parameters schema for MCP tools.

    Validation is strict: JSON strings are never coerced into numbers or
    booleans, and unknown argument names are rejected.
    """

    model_config = ConfigDict(extra="forbid", strict=True)


class ToolAccess(str, Enum):
    """How much a tool is allowed to change on the remote side.

    ``RESTORE`` also covers the routine management calls (device, agent,
    client and account updates, backup start) that restore work needs.
    ``DANGEROUS`` marks calls that interrupt a running appliance.
    """

    READ = "read"
    RESTORE = "restore"
    WRITE = "write"
    DANGEROUS = "dangerous"


@dataclass(frozen=True)
class ToolFailure:
    """A handled tool failure that should be reported to the caller.

    Attributes:
        message: Human-readable failure description.
    """

    message: str

    def error_data(self) -> dict[str, Any]:
        """Return extra structured data attached to the error envelope."""
        return {}


ToolHandler = Callable[[Any, Any], Awaitable[Any]]


def _clean_schema(node: Any) -> Any:
    """Strip pydantic-only noise from a JSON schema.

    Titles and ``null`` defaults are dropped and ``Optional[X]`` unions are
    collapsed to ``X`` so hosts see plain JSON-Schema types.
    """
    if isinstance(node, list):
        return [_clean_schema(item) for item in node]
    if not isinstance(node, dict):
        return node

    cleaned: dict[str, Any] = {}
    for key, value in node.items():
        if key == "title" and isinstance(value, str):
            continue
        if key == "default" and value is None:
            continue
        if key == "properties" and isinstance(value, dict):
            cleaned[key] = {name: _clean_schema(prop) for name, prop in value.items()}
            continue
        cleaned[key] = _clean_schema(value)

    any_of = cleaned.get("anyOf")
    if isinstance(any_of, list):
        non_null = [option for option in any_of if option != {"type": "null"}]
        if len(non_null) == 1 and len(non_null) < len(any_of):
            del cleaned["anyOf"]
            cleaned = {**non_null[0], **cleaned}
    return cleaned


def _violations(error: ValidationError) -> list[dict[str, str]]:
    return [
        {
            "field": ".".join(str(part) for part in issue["loc"]) or "arguments",
            "message": issue["msg"],
            "type": issue["type"],
        }
        for issue in error.errors()
    ]


@dataclass(frozen=True)
class ToolDefinition:
    """Description of a tool that can be registered with the server.

    Attributes:
        name: Unique name of the tool.
        description: Human-readable description of the tool purpose.
        parameters_model: Pydantic model used to validate input arguments.
        handler: Coroutine function receiving the validated parameters and the
            backend client. It returns a JSON-compatible payload or a
            :class:`ToolFailure`.
        access: Access class used by tool-mode filtering.
    """

    name: str
    description: str
    parameters_model: type[ToolParameters]
    handler: ToolHandler = field(repr=False)
    access: ToolAccess = ToolAccess.READ

    def violations(self, arguments: Mapping[str, Any]) -> list[dict[str, str]]:
        """List every reason the arguments fail validation (empty if valid)."""
        try:
            self.parameters_model.model_validate(dict(arguments))
        except ValidationError as error:
            return _violations(error)
        return []

    def accepts(self, arguments: Mapping[str, Any]) -> bool:
        """Return True when the arguments satisfy the tool schema."""
        return not self.violations(arguments)

    def validate(self, arguments: Mapping[str, Any]) -> ToolParameters:
        """Validate incoming tool arguments.

        Args:
            arguments: Input arguments provided for the tool.

        Raises:
            MCPError: If argument validation fails. The violation list is
                attached as error details.

        Returns:
            Validated parameter model instance.
        """
        try:
            return self.parameters_model.model_validate(dict(arguments))
        except ValidationError as error:
            raise_mcp_error(
                "InvalidArguments",
                f"Invalid arguments for tool {self.name}",
                _violations(error),
                code=INVALID_PARAMS,
            )

    def input_schema(self) -> dict[str, Any]:
        """Return the JSON schema advertised for the tool arguments."""
        schema = _clean_schema(self.parameters_model.model_json_schema())
        schema.setdefault("properties", {})
        return schema

    def metadata(self) -> dict[str, Any]:
        """Return a discovery-friendly description of the tool."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema(),
        }


class ToolRegistry(Mapping[str, ToolDefinition]):
    """Read-only mapping from tool name to definition.

    The registry is populated once at construction time and keeps the
    insertion order of the definitions.
    """

    def __init__(self, tools: Iterable[ToolDefinition]) -> None:
        """Build the registry.

        Args:
            tools: Tool definitions to register.

        Raises:
            ValueError: If two tools share the same name.
        """
        registered: dict[str, ToolDefinition] = {}
        for tool in tools:
            if tool.name in registered:
                raise ValueError(f"Tool '{tool.name}' is already registered")
            registered[tool.name] = tool
        self._tools = registered

    def __getitem__(self, name: str) -> ToolDefinition:
        return self._tools[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._tools)

    def __len__(self) -> int:
        return len(self._tools)

    def __repr__(self) -> str:
        return f"ToolRegistry({list(self._tools)!r})"
