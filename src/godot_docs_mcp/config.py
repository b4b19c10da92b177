"""
Configuration management for the Godot Docs MCP bridge.

Configuration via environment variables:

Godot Editor Plugin Communication:
- GODOT_WS_URL: WebSocket endpoint of the Godot documentation plugin
  (default: ws://localhost:9081)

The reconnect delay and per-request timeout are fixed constants. They live on
the config object so tests can shorten them, but are not read from the
environment.
"""

import os
from dataclasses import dataclass, field

DEFAULT_GODOT_WS_URL = "ws://localhost:9081"

# Seconds between reconnect attempts (constant interval, no backoff)
RECONNECT_DELAY = 5.0

# Seconds to wait for a reply to a single RPC request
REQUEST_TIMEOUT = 10.0


@dataclass
class Config:
    """Server configuration loaded from environment variables."""

    # Godot Editor plugin WebSocket
    godot_ws_url: str = field(
        default_factory=lambda: os.getenv("GODOT_WS_URL") or DEFAULT_GODOT_WS_URL
    )

    reconnect_delay: float = RECONNECT_DELAY
    request_timeout: float = REQUEST_TIMEOUT

    def describe(self) -> dict:
        """Return the effective configuration as a plain dict (for --print-config)."""
        return {
            "GODOT_WS_URL": self.godot_ws_url,
            "RECONNECT_DELAY": self.reconnect_delay,
            "REQUEST_TIMEOUT": self.request_timeout,
        }


# Global config instance
_config: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def set_config(config: Config) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config


def reset_config() -> None:
    """Reset configuration (useful for testing)."""
    global _config
    _config = None
