"""
Godot Docs MCP - MCP Server for live Godot documentation lookup.

Connects to a documentation plugin running in the Godot Editor over WebSocket
and provides tools for:
- Class documentation summaries
- Class search and listing
- Methods, properties and signals of a class
- Inheritance hierarchies
"""

__version__ = "0.2.0"
