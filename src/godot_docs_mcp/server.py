"""
MCP Server entry point - Godot Docs (live).

Forwards documentation lookups to the Godot Editor plugin over a persistent
WebSocket and returns the replies as readable text.

Environment variables:
- GODOT_WS_URL: Godot Editor plugin WebSocket endpoint (default: ws://localhost:9081)
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from contextlib import asynccontextmanager

from fastmcp import FastMCP

from .config import get_config
from .godot_client import GodotClientError, get_client
from .tools import classdb
from .tools.dispatcher import TOOLS_BY_NAME
from . import prompts

logger = logging.getLogger(__name__)


# Number of MCP sessions currently inside the lifespan
_active_sessions = 0


async def _start_client() -> None:
    client = get_client()
    try:
        await client.connect()
    except GodotClientError as e:
        logger.error("Failed to connect to Godot: %s", e)
        logger.error("Will continue attempting to reconnect...")
        client.schedule_reconnect()


@asynccontextmanager
async def godot_lifespan(server: FastMCP):
    """Share one Godot connection across MCP sessions.

    The first session to start opens the client (falling back to reconnect
    attempts); the last one to finish closes it. A later session opens it again.
    """
    global _active_sessions
    _active_sessions += 1
    if _active_sessions == 1:
        await _start_client()

    try:
        yield
    finally:
        _active_sessions -= 1
        if _active_sessions == 0:
            await get_client().close()


# Initialize MCP server
mcp = FastMCP(
    name="godot-docs-server-live",
    version="0.2.0",
    lifespan=godot_lifespan,
)


def register_tools():
    """
    Register MCP tools.

    Toolset (7 total), each forwarded to the plugin RPC of the same name:
    - get_class_doc, search_classes, list_all_classes
    - get_class_methods, get_class_properties, get_class_signals
    - get_class_hierarchy
    """
    for fn in (
        classdb.get_class_doc,
        classdb.search_classes,
        classdb.get_class_methods,
        classdb.get_class_properties,
        classdb.get_class_signals,
        classdb.get_class_hierarchy,
        classdb.list_all_classes,
    ):
        spec = TOOLS_BY_NAME[fn.__name__]
        mcp.tool(name=spec.name, description=spec.description)(fn)

    logger.info("Registered %d tools.", len(TOOLS_BY_NAME))


def register_prompts():
    """Register the explain/compare prompt templates."""
    for fn in (prompts.explain_class, prompts.compare_classes):
        mcp.prompt(name=fn.__name__, description=prompts.PROMPTS[fn.__name__])(fn)


def _configure_logging(debug: bool) -> None:
    # stdout carries the MCP stdio transport; logs go to stderr only
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="godot-docs-mcp",
        description="Godot Documentation MCP Server (live, via Godot Editor plugin)",
    )

    parser.add_argument(
        "--godot-ws-url",
        help="Godot Editor plugin WebSocket URL (default: ws://localhost:9081)",
        default=None,
    )
    parser.add_argument(
        "--print-config",
        action="store_true",
        help="Print effective config and exit",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    # Transport options
    parser.add_argument(
        "--transport",
        choices=["stdio", "http", "sse"],
        default="stdio",
        help="MCP transport (default: stdio)",
    )
    parser.add_argument(
        "--mcp-host",
        default="127.0.0.1",
        help="Host for http/sse transport (default: 127.0.0.1)",
    )
    parser.add_argument(
        "--mcp-port",
        type=int,
        default=8000,
        help="Port for http/sse transport (default: 8000)",
    )
    parser.add_argument(
        "--mcp-path",
        default="/mcp",
        help="Path prefix for http transport (default: /mcp)",
    )

    return parser


def _apply_cli_overrides(args: argparse.Namespace) -> None:
    """Apply CLI overrides to env vars (single-run convenience)."""
    if args.godot_ws_url:
        os.environ["GODOT_WS_URL"] = args.godot_ws_url


def main(argv: list[str] | None = None) -> None:
    """Run the MCP server."""
    parser = _build_arg_parser()
    args = parser.parse_args(sys.argv[1:] if argv is None else argv)
    _apply_cli_overrides(args)
    _configure_logging(args.debug)

    if args.print_config:
        print(json.dumps(get_config().describe(), indent=2), file=sys.stderr)
        return

    try:
        register_tools()
        register_prompts()

        if args.transport == "stdio":
            logger.info("Godot Documentation MCP Server (Live) running on stdio")
            mcp.run()
        elif args.transport == "http":
            mcp.run(transport="http", host=args.mcp_host, port=args.mcp_port, path=args.mcp_path)
        else:
            mcp.run(transport="sse", host=args.mcp_host, port=args.mcp_port)
    except Exception:
        logger.exception("Server error")
        sys.exit(1)


if __name__ == "__main__":
    main()
