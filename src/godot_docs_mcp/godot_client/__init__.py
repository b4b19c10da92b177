"""
Godot Editor Plugin WebSocket Client.

Provides communication with the documentation plugin running in the Godot Editor.
"""

from .ws_client import (
    ConnectionState,
    GodotClient,
    GodotClientError,
    GodotConnectionError,
    GodotNotConnectedError,
    GodotRPCError,
    GodotTimeoutError,
    get_client,
    set_client,
)

__all__ = [
    "ConnectionState",
    "GodotClient",
    "GodotClientError",
    "GodotConnectionError",
    "GodotNotConnectedError",
    "GodotRPCError",
    "GodotTimeoutError",
    "get_client",
    "set_client",
]
