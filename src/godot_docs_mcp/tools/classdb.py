"""
Godot ClassDB tools as exposed through FastMCP.

Note on FastMCP exposure:
- Tools are registered with an explicit `description=`, so the docstrings here
  are for maintainers only.
- Error-flagged dispatcher results are raised as `ToolError`; FastMCP then
  returns an `isError` result carrying the same text.
"""

from __future__ import annotations

from typing import Annotated

from fastmcp.exceptions import ToolError

from ..godot_client import get_client
from .dispatcher import ToolDispatcher

# Global dispatcher instance
_dispatcher: ToolDispatcher | None = None


def get_dispatcher() -> ToolDispatcher:
    """Get the global dispatcher, bound to the global Godot client."""
    global _dispatcher
    if _dispatcher is None:
        _dispatcher = ToolDispatcher(get_client())
    return _dispatcher


def set_dispatcher(dispatcher: ToolDispatcher | None) -> None:
    """Set the global dispatcher instance."""
    global _dispatcher
    _dispatcher = dispatcher


async def _run(name: str, arguments: dict) -> str:
    result = await get_dispatcher().call_tool(name, arguments)
    text = result["content"][0]["text"]
    if result.get("isError"):
        raise ToolError(text)
    return text


async def get_class_doc(
    class_name: Annotated[str, "Name of the Godot class (e.g., 'Node', 'Control', 'Area2D')"],
) -> str:
    """Summarize a class: parent class plus property/method/signal counts."""
    return await _run("get_class_doc", {"class_name": class_name})


async def search_classes(
    pattern: Annotated[str, "Search pattern (e.g., 'Area', 'Node')"],
) -> str:
    return await _run("search_classes", {"pattern": pattern})


async def get_class_methods(
    class_name: Annotated[str, "Name of the Godot class"],
) -> str:
    return await _run("get_class_methods", {"class_name": class_name})


async def get_class_properties(
    class_name: Annotated[str, "Name of the Godot class"],
) -> str:
    return await _run("get_class_properties", {"class_name": class_name})


async def get_class_signals(
    class_name: Annotated[str, "Name of the Godot class"],
) -> str:
    return await _run("get_class_signals", {"class_name": class_name})


async def get_class_hierarchy(
    class_name: Annotated[str, "Name of the Godot class"],
) -> str:
    """Inheritance chain, e.g. `Area2D -> CollisionObject2D -> Node2D -> ...`."""
    return await _run("get_class_hierarchy", {"class_name": class_name})


async def list_all_classes(
    filter: Annotated[str | None, "Optional filter pattern to narrow results"] = None,
) -> str:
    """List every class known to the editor; the filter is applied by the plugin."""
    arguments = {"filter": filter} if filter else {}
    return await _run("list_all_classes", arguments)
