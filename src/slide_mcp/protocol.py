"""Line-delimited JSON-RPC 2.0 front end for :class:`MCPServer`.

Each input line is parsed and routed on its own asyncio task, so a slow
backend call never blocks the lines that follow it. Responses carry the id
of their request and may therefore be written out of order.
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from collections.abc import Awaitable
from typing import Any, Callable

from slide_mcp.errors import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    TOOL_EXECUTION_ERROR,
    MCPError,
    raise_mcp_error,
)
from slide_mcp.server import MCPServer
from slide_mcp.tools import ToolFailure

_LOGGER = logging.getLogger(__name__)

JSONRPC_VERSION = "2.0"
DEFAULT_PROTOCOL_VERSION = "2024-11-05"
SUPPORTED_PROTOCOL_VERSIONS = ("2024-11-05", "2025-03-26", "2025-06-18")

# Tool results can be large; allow long request lines as well.
STREAM_LIMIT = 16 * 1024 * 1024

Envelope = dict[str, Any]
Route = Callable[[dict[str, Any]], Awaitable[Any]]


def success_envelope(request_id: Any, result: Any) -> Envelope:
    """Build a JSON-RPC success response."""
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "result": result}


def error_envelope(
    request_id: Any, code: int, message: str, data: Any = None
) -> Envelope:
    """Build a JSON-RPC error response."""
    error: dict[str, Any] = {"code": code, "message": message}
    if data is not None:
        error["data"] = data
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "error": error}


class JSONRPCServer:
    """Route JSON-RPC messages to an :class:`MCPServer`."""

    def __init__(
        self,
        server: MCPServer,
        *,
        name: str,
        version: str,
        logger: logging.Logger | None = None,
    ) -> None:
        """Create the protocol front end.

        Args:
            server: Dispatcher executing the tools.
            name: Server name reported by ``initialize``.
            version: Server version reported by ``initialize``.
            logger: Diagnostics sink; defaults to the module logger.
        """
        self._server = server
        self._server_info = {"name": name, "version": version}
        self._logger = logger or _LOGGER
        self._routes: dict[str, Route] = {
            "initialize": self._initialize,
            "ping": self._ping,
            "tools/list": self._list_tools,
            "tools/call": self._call_tool,
            # legacy aliases
            "run": self._call_tool,
            "listFunctions": self._list_functions,
        }

    async def handle_line(self, line: str) -> Envelope | None:
        """Turn one input line into at most one response envelope."""
        text = line.strip()
        if not text:
            return None
        try:
            message = json.loads(text)
        except json.JSONDecodeError as exc:
            self._logger.warning("Discarding malformed line: %s", exc)
            return error_envelope(None, PARSE_ERROR, f"Parse error: {exc.msg}")
        except (ValueError, RecursionError) as exc:
            # oversized integers or nesting deeper than the decoder allows
            self._logger.warning("Discarding undecodable line: %s", exc)
            return error_envelope(None, PARSE_ERROR, f"Parse error: {exc}")
        return await self.handle_message(message)

    async def handle_message(self, message: Any) -> Envelope | None:
        """Route a decoded message and build its response, if any."""
        if not isinstance(message, dict):
            return error_envelope(
                None, INVALID_REQUEST, "Invalid Request: expected a JSON object"
            )
        if message.get("jsonrpc") != JSONRPC_VERSION:
            return await self._handle_legacy(message)

        request_id = message.get("id")
        method = message.get("method")
        if method is None:
            if "result" in message or "error" in message:
                self._logger.debug("Ignoring response message with id %r", request_id)
                return None
            return error_envelope(
                request_id, INVALID_REQUEST, "Invalid Request: missing method"
            )
        if not isinstance(method, str):
            return error_envelope(
                request_id,
                INVALID_REQUEST,
                "Invalid Request: method must be a string",
            )

        if request_id is None or method.startswith("notifications/"):
            self._logger.info("Received notification %s", method)
            return None

        route = self._routes.get(method)
        if route is None:
            self._logger.warning("Unknown method %s", method)
            return error_envelope(
                request_id, METHOD_NOT_FOUND, f"Method not found: {method}"
            )

        params = message.get("params")
        if params is None:
            params = {}
        if not isinstance(params, dict):
            return error_envelope(
                request_id, INVALID_PARAMS, "Invalid params: expected an object"
            )
        return await self._dispatch(request_id, method, route, params)

    async def _dispatch(
        self, request_id: Any, method: str, route: Route, params: dict[str, Any]
    ) -> Envelope:
        try:
            result = await route(params)
        except MCPError as error:
            self._logger.info("%s failed: %s", method, error.message)
            return error_envelope(request_id, error.code, error.message, error.details)
        except Exception as exc:
            self._logger.exception("Unexpected error while handling %s", method)
            return error_envelope(request_id, INTERNAL_ERROR, f"Internal error: {exc}")
        return success_envelope(request_id, result)

    async def _handle_legacy(self, message: dict[str, Any]) -> Envelope:
        """Serve the pre-JSON-RPC ``{"name", "arguments"}`` message format."""
        request_id = message.get("id")
        if request_id is None:
            request_id = 0
        name = message.get("name")
        arguments = message.get("arguments")
        if not isinstance(name, str) or not isinstance(arguments, dict):
            return error_envelope(request_id, INVALID_REQUEST, "Invalid message format")

        self._logger.info("Handling legacy tool call %s", name)
        try:
            result = await self._call_tool({"name": name, "arguments": arguments})
        except MCPError as error:
            return error_envelope(
                request_id, TOOL_EXECUTION_ERROR, error.message, error.details
            )
        except Exception as exc:
            self._logger.exception("Unexpected error in legacy call %s", name)
            return error_envelope(request_id, TOOL_EXECUTION_ERROR, str(exc))
        return success_envelope(request_id, result)

    async def _initialize(self, params: dict[str, Any]) -> dict[str, Any]:
        requested = params.get("protocolVersion")
        if requested in SUPPORTED_PROTOCOL_VERSIONS:
            protocol_version = requested
        else:
            protocol_version = DEFAULT_PROTOCOL_VERSION
        client = params.get("clientInfo") or {}
        if isinstance(client, dict):
            self._logger.info(
                "Initializing for client %s %s",
                client.get("name", "unknown"),
                client.get("version", ""),
            )
        return {
            "protocolVersion": protocol_version,
            "capabilities": {"tools": {}},
            "serverInfo": dict(self._server_info),
            "tools": self._server.catalog(),
        }

    async def _ping(self, _: dict[str, Any]) -> dict[str, Any]:
        return {}

    async def _list_tools(self, _: dict[str, Any]) -> dict[str, Any]:
        return {"tools": self._server.catalog()}

    async def _list_functions(self, _: dict[str, Any]) -> list[str]:
        return self._server.available_tools()

    async def _call_tool(self, params: dict[str, Any]) -> dict[str, Any]:
        name = params.get("name")
        if not isinstance(name, str) or not name:
            raise_mcp_error(
                "InvalidParams", "Tool name required", code=INVALID_PARAMS
            )
        arguments = params.get("arguments")
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, dict):
            raise_mcp_error(
                "InvalidParams",
                "Tool arguments must be an object",
                code=INVALID_PARAMS,
            )

        self._logger.info("Calling tool %s", name)
        outcome = await self._server.run_tool(name, arguments=arguments)
        if isinstance(outcome, ToolFailure):
            self._logger.warning("Tool %s failed: %s", name, outcome.message)
            raise_mcp_error(
                "ToolExecutionError",
                outcome.message,
                outcome.error_data() or None,
                code=TOOL_EXECUTION_ERROR,
            )
        return outcome.to_content()

    async def serve(
        self, reader: asyncio.StreamReader, write: Callable[[str], None]
    ) -> None:
        """Read lines until EOF, answering each one on its own task.

        Args:
            reader: Source of newline-delimited messages.
            write: Callable that writes one complete output line and flushes.
        """
        pending: set[asyncio.Task[None]] = set()
        while True:
            try:
                raw = await reader.readuntil(b"\n")
            except asyncio.IncompleteReadError as exc:
                # EOF; a final line may lack its newline
                raw = exc.partial
                if not raw:
                    break
            except asyncio.LimitOverrunError as exc:
                self._logger.warning("Discarding oversized line: %s", exc)
                overflow = error_envelope(
                    None, PARSE_ERROR, "Parse error: line too long"
                )
                write(_encode(overflow))
                await _skip_line(reader)
                continue
            task = asyncio.create_task(
                self._respond(raw.decode("utf-8", errors="replace"), write)
            )
            pending.add(task)
            task.add_done_callback(pending.discard)

        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        self._logger.info("Input closed, server loop finished")

    async def _respond(self, line: str, write: Callable[[str], None]) -> None:
        try:
            envelope = await self.handle_line(line)
        except Exception as exc:
            self._logger.exception("Unhandled error while answering a line")
            envelope = error_envelope(None, INTERNAL_ERROR, f"Internal error: {exc}")
        if envelope is not None:
            write(_encode(envelope))


async def _skip_line(reader: asyncio.StreamReader) -> None:
    """Drop input up to and including the next newline (or EOF)."""
    while True:
        try:
            await reader.readuntil(b"\n")
            return
        except asyncio.LimitOverrunError as exc:
            await reader.readexactly(exc.consumed)
        except asyncio.IncompleteReadError:
            return


def _encode(envelope: Envelope) -> str:
    return json.dumps(envelope) + "\n"


def _write_stdout(text: str) -> None:
    sys.stdout.write(text)
    sys.stdout.flush()


async def serve_stdio(server: JSONRPCServer) -> None:
    """Serve JSON-RPC over this process's stdin and stdout."""
    loop = asyncio.get_running_loop()
    reader = asyncio.StreamReader(limit=STREAM_LIMIT)
    protocol = asyncio.StreamReaderProtocol(reader)
    await loop.connect_read_pipe(lambda: protocol, sys.stdin)
    await server.serve(reader, _write_stdout)
