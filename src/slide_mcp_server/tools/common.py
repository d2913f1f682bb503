"""Shared helpers for building Slide API tools from declarative tables."""

from __future__ import annotations

from collections.abc import Mapping
from string import Formatter
from typing import Any, Callable, Union
from urllib.parse import quote

from pydantic import Field

from slide_mcp.errors import TOOL_EXECUTION_ERROR, MCPError, raise_mcp_error
from slide_mcp.tools import ToolAccess, ToolDefinition, ToolParameters
from slide_mcp_server.backend import BackendClient, BackendFailure
from slide_mcp_server.presentation import with_metadata

Reshape = Callable[[Any, Any], Any]
Metadata = Union[Mapping[str, Any], Callable[[Any], Mapping[str, Any]]]


class ListParams(ToolParameters):
    """Pagination and sorting arguments shared by every list tool."""

    limit: int | None = Field(default=None, description="Results per page (max 50)")
    offset: int | None = Field(default=None, description="Pagination offset")
    sort_asc: bool | None = Field(default=None, description="Sort in ascending order")
    sort_by: str | None = Field(default=None, description="Field to sort by")


class PageParams(ToolParameters):
    """Pagination arguments without sorting, used by browse tools."""

    limit: int | None = Field(default=None, description="Results per page (max 50)")
    offset: int | None = Field(default=None, description="Pagination offset")


def path_fields(template: str) -> tuple[str, ...]:
    """Return the placeholder names used in a path template."""
    return tuple(
        field_name
        for _, field_name, _, _ in Formatter().parse(template)
        if field_name
    )


def render_path(template: str, params: ToolParameters) -> str:
    """Fill a path template with URL-quoted parameter values."""
    values = {
        name: quote(str(getattr(params, name)), safe="")
        for name in path_fields(template)
    }
    return template.format(**values)


def build_query(
    params: ToolParameters,
    *,
    exclude: tuple[str, ...] = (),
    default_sort: str | None = None,
) -> dict[str, str]:
    """Convert validated arguments into query-string values.

    ``None`` and falsy non-boolean values are omitted, booleans become
    ``"true"``/``"false"`` and the default sort field is used when the caller
    did not pick one.
    """
    query: dict[str, str] = {}
    for name, value in params.model_dump().items():
        if name in exclude or value is None:
            continue
        if isinstance(value, bool):
            query[name] = "true" if value else "false"
        elif value:
            query[name] = str(value)
    if default_sort and "sort_by" not in query:
        query["sort_by"] = default_sort
    return query


def build_body(
    params: ToolParameters, *, exclude: tuple[str, ...] = ()
) -> dict[str, Any]:
    """Convert validated arguments into a JSON body, dropping unset fields."""
    return params.model_dump(exclude=set(exclude), exclude_none=True)


def deleted_message(label: str, id_field: str) -> Reshape:
    """Reshape a delete response into a confirmation message."""

    def reshape(_: Any, params: Any) -> dict[str, Any]:
        return {
            "success": True,
            "message": f"{label} {getattr(params, id_field)} deleted successfully",
        }

    return reshape


def api_tool(
    name: str,
    description: str,
    parameters_model: type[ToolParameters],
    *,
    path: str,
    method: str = "GET",
    access: ToolAccess = ToolAccess.READ,
    default_sort: str | None = None,
    metadata: Metadata | None = None,
    reshape: Reshape | None = None,
) -> ToolDefinition:
    """Create a tool that maps its arguments onto one API call.

    Args:
        name: Tool name.
        description: Tool description shown to hosts.
        parameters_model: Argument schema.
        path: Path template; ``{field}`` placeholders are taken from the
            arguments and never sent in the query or body.
        method: HTTP verb. ``GET`` sends the remaining arguments as query
            parameters, other verbs send them as a JSON body (omitted when
            empty).
        access: Access class for tool-mode filtering.
        default_sort: ``sort_by`` value used when the caller gives none.
        metadata: Guidance attached as ``_metadata``, or a callable deriving it
            from the reshaped payload.
        reshape: Callable ``(payload, params)`` transforming the API body.

    Returns:
        ToolDefinition wired to the generated handler.
    """
    placeholders = path_fields(path)

    async def handler(params: Any, backend: BackendClient) -> Any:
        url = render_path(path, params)
        if method == "GET":
            query = build_query(
                params, exclude=placeholders, default_sort=default_sort
            )
            result = await backend.get(url, query)
        elif method == "DELETE":
            result = await backend.delete(url)
        else:
            body = build_body(params, exclude=placeholders) or None
            result = await backend.request(method, url, body=body)
        if isinstance(result, BackendFailure):
            return result
        return _present(name, result.body, params, reshape, metadata)

    return ToolDefinition(
        name=name,
        description=description,
        parameters_model=parameters_model,
        handler=handler,
        access=access,
    )


def _present(
    name: str,
    payload: Any,
    params: Any,
    reshape: Reshape | None,
    metadata: Metadata | None,
) -> Any:
    try:
        if reshape is not None:
            payload = reshape(payload, params)
        if metadata is None:
            return payload
        guidance = metadata(payload) if callable(metadata) else metadata
        return with_metadata(payload, guidance)
    except MCPError:
        raise
    except Exception as exc:
        raise_mcp_error(
            "ResponseError",
            f"Unexpected response for {name}",
            str(exc),
            code=TOOL_EXECUTION_ERROR,
        )


def identifier_guidance(
    primary_identifier: str, presentation_guidance: str, **extra: str
) -> dict[str, str]:
    """Build the common ``_metadata`` block."""
    return {
        "primary_identifier": primary_identifier,
        "presentation_guidance": presentation_guidance,
        **extra,
    }
