"""
Tool dispatcher for the Godot ClassDB tools.

Maps each tool name to the plugin RPC of the same name, then formats the reply
as text. Every failure (unknown tool, connectivity, timeout, remote error) is
turned into an error-flagged tool result; nothing propagates to the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Protocol

from .formatting import (
    format_class_doc,
    format_class_list,
    format_hierarchy,
    format_member_list,
    format_search_results,
    reply_error,
    reply_list,
)

logger = logging.getLogger(__name__)


class RPCClient(Protocol):
    async def send_rpc_request(self, method: str, params: dict | None = None) -> Any: ...


@dataclass(frozen=True)
class ToolSpec:
    """Static description of one tool as advertised to MCP clients."""

    name: str
    description: str
    input_schema: dict = field(default_factory=dict)

    def to_descriptor(self) -> dict:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }


def _class_name_schema(description: str = "Name of the Godot class") -> dict:
    return {
        "type": "object",
        "properties": {
            "class_name": {"type": "string", "description": description},
        },
        "required": ["class_name"],
    }


TOOLS: list[ToolSpec] = [
    ToolSpec(
        "get_class_doc",
        "Get full documentation for a Godot class from the running Godot Editor",
        _class_name_schema("Name of the Godot class (e.g., 'Node', 'Control', 'Area2D')"),
    ),
    ToolSpec(
        "search_classes",
        "Search for Godot classes by name pattern",
        {
            "type": "object",
            "properties": {
                "pattern": {"type": "string", "description": "Search pattern (e.g., 'Area', 'Node')"},
            },
            "required": ["pattern"],
        },
    ),
    ToolSpec("get_class_methods", "Get list of methods for a Godot class", _class_name_schema()),
    ToolSpec("get_class_properties", "Get list of properties for a Godot class", _class_name_schema()),
    ToolSpec("get_class_signals", "Get list of signals for a Godot class", _class_name_schema()),
    ToolSpec(
        "get_class_hierarchy",
        "Get the inheritance hierarchy for a Godot class",
        _class_name_schema(),
    ),
    ToolSpec(
        "list_all_classes",
        "List all available Godot classes in the running Godot Editor",
        {
            "type": "object",
            "properties": {
                "filter": {
                    "type": "string",
                    "description": "Optional filter pattern to narrow results",
                },
            },
        },
    ),
]

TOOLS_BY_NAME: dict[str, ToolSpec] = {spec.name: spec for spec in TOOLS}

# Member list tools: tool name -> reply field
_MEMBER_TOOLS = {
    "get_class_methods": "methods",
    "get_class_properties": "properties",
    "get_class_signals": "signals",
}


def text_result(text: str, is_error: bool = False) -> dict:
    """Build an MCP tool result carrying a single text block."""
    result: dict[str, Any] = {"content": [{"type": "text", "text": text}]}
    if is_error:
        result["isError"] = True
    return result


def error_result(message: Any) -> dict:
    return text_result(f"Error: {message}", is_error=True)


def _coerce_str(arguments: dict, key: str) -> str:
    # Absent arguments are forwarded as the literal "undefined", JSON null as "null"
    if key not in arguments:
        return "undefined"
    value = arguments[key]
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class ToolDispatcher:
    """Routes tool invocations to the Godot plugin and formats the replies."""

    def __init__(self, client: RPCClient):
        self.client = client

    def list_tools(self) -> list[dict]:
        return [spec.to_descriptor() for spec in TOOLS]

    async def call_tool(self, name: str, arguments: dict | None = None) -> dict:
        """
        Invoke a tool by name.

        Args:
            name: Tool name.
            arguments: Tool arguments.

        Returns:
            A tool result ``{"content": [{"type": "text", "text": ...}]}``,
            with ``"isError": True`` added on any failure.
        """
        arguments = arguments or {}
        logger.info("Tool call: %s", name)
        try:
            return await self._dispatch(name, arguments)
        except Exception as e:
            logger.error("Tool %s failed: %s", name, e)
            return error_result(e)

    async def _dispatch(self, name: str, arguments: dict) -> dict:
        if name == "get_class_doc":
            class_name = _coerce_str(arguments, "class_name")
            reply = await self._request(name, {"class_name": class_name})
            return self._format(reply, format_class_doc)

        if name == "search_classes":
            pattern = _coerce_str(arguments, "pattern")
            reply = await self._request(name, {"pattern": pattern})
            return self._format(
                reply, lambda r: format_search_results(pattern, reply_list(r, "results"))
            )

        if name in _MEMBER_TOOLS:
            key = _MEMBER_TOOLS[name]
            class_name = _coerce_str(arguments, "class_name")
            reply = await self._request(name, {"class_name": class_name})
            return self._format(reply, lambda r: format_member_list(reply_list(r, key), key))

        if name == "get_class_hierarchy":
            class_name = _coerce_str(arguments, "class_name")
            reply = await self._request(name, {"class_name": class_name})
            return self._format(
                reply, lambda r: format_hierarchy(class_name, reply_list(r, "hierarchy"))
            )

        if name == "list_all_classes":
            # The filter is applied by the plugin, never locally
            filter = arguments.get("filter")
            reply = await self._request(name, {"filter": filter} if filter else {})
            return self._format(reply, lambda r: format_class_list(reply_list(r, "classes"), filter))

        raise ValueError(f"Unknown tool: {name}")

    async def _request(self, method: str, params: dict) -> dict:
        reply = await self.client.send_rpc_request(method, params)
        if not isinstance(reply, dict):
            raise ValueError(f"Unexpected reply from Godot for {method}: {reply!r}")
        return reply

    @staticmethod
    def _format(reply: dict, formatter) -> dict:
        error = reply_error(reply)
        if error:
            return error_result(error)
        return text_result(formatter(reply))
