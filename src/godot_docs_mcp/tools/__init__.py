"""
MCP Tools for the Godot Docs bridge.

Modules:
- dispatcher: Tool table, RPC routing and error conversion
- formatting: Text rendering of ClassDB replies
- classdb: FastMCP-facing tool functions
"""

from . import classdb
from . import dispatcher
from . import formatting

__all__ = ["classdb", "dispatcher", "formatting"]
