"""Tests for the tool dispatcher."""

import pytest

from conftest import ScriptedClient
from godot_docs_mcp.godot_client import GodotClient, GodotRPCError, GodotTimeoutError
from godot_docs_mcp.tools.dispatcher import TOOLS, ToolDispatcher


def text_of(result: dict) -> str:
    return result["content"][0]["text"]


class TestToolListing:
    """Test the static tool table."""

    def test_seven_tools(self):
        names = [t["name"] for t in ToolDispatcher(ScriptedClient()).list_tools()]
        assert names == [
            "get_class_doc",
            "search_classes",
            "get_class_methods",
            "get_class_properties",
            "get_class_signals",
            "get_class_hierarchy",
            "list_all_classes",
        ]

    def test_schemas(self):
        by_name = {t.name: t for t in TOOLS}
        assert by_name["search_classes"].input_schema["required"] == ["pattern"]
        assert by_name["get_class_doc"].input_schema["required"] == ["class_name"]
        assert "required" not in by_name["list_all_classes"].input_schema


class TestDispatch:
    """Test RPC routing and reply formatting."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("tool", [t.name for t in TOOLS])
    async def test_one_rpc_named_after_tool(self, tool):
        client = ScriptedClient()
        dispatcher = ToolDispatcher(client)

        result = await dispatcher.call_tool(tool, {"class_name": "Node", "pattern": "Node"})

        assert len(client.calls) == 1
        assert client.calls[0][0] == tool
        assert not result.get("isError")

    @pytest.mark.asyncio
    async def test_class_doc(self):
        client = ScriptedClient(
            {
                "get_class_doc": {
                    "name": "Node",
                    "inherits": "Object",
                    "properties": [1, 2],
                    "methods": [1],
                    "signals": [],
                }
            }
        )

        result = await ToolDispatcher(client).call_tool("get_class_doc", {"class_name": "Node"})
        text = text_of(result)

        assert client.calls == [("get_class_doc", {"class_name": "Node"})]
        assert "# Node" in text
        assert "**Inherits:** Object" in text
        assert "## Properties\n\nThis class has 2 properties." in text
        assert "## Methods\n\nThis class has 1 methods." in text
        assert "Signals" not in text

    @pytest.mark.asyncio
    async def test_search_classes(self):
        client = ScriptedClient({"search_classes": {"results": ["Area2D", "Area3D"]}})

        result = await ToolDispatcher(client).call_tool("search_classes", {"pattern": "Area"})

        assert text_of(result) == "Found 2 classes matching 'Area':\n\nArea2D\nArea3D"

    @pytest.mark.asyncio
    async def test_get_class_methods(self):
        client = ScriptedClient({"get_class_methods": {"methods": [{"name": "ready"}, "process"]}})

        result = await ToolDispatcher(client).call_tool("get_class_methods", {"class_name": "Node"})

        assert text_of(result) == "1. ready\n2. process\n"

    @pytest.mark.asyncio
    async def test_empty_signals(self):
        client = ScriptedClient({"get_class_signals": {"signals": []}})

        result = await ToolDispatcher(client).call_tool("get_class_signals", {"class_name": "Object"})

        assert text_of(result) == "No signals found."

    @pytest.mark.asyncio
    async def test_hierarchy(self):
        client = ScriptedClient(
            {"get_class_hierarchy": {"hierarchy": ["Area2D", "CollisionObject2D", "Node2D"]}}
        )

        result = await ToolDispatcher(client).call_tool(
            "get_class_hierarchy", {"class_name": "Area2D"}
        )

        assert text_of(result) == (
            "Inheritance hierarchy for Area2D:\n\nArea2D -> CollisionObject2D -> Node2D"
        )

    @pytest.mark.asyncio
    async def test_list_all_classes_forwards_filter(self):
        client = ScriptedClient({"list_all_classes": {"classes": ["Button", "Label"]}})
        dispatcher = ToolDispatcher(client)

        result = await dispatcher.call_tool("list_all_classes", {"filter": "Butt"})

        # The reply is shown as-is; filtering happens on the Godot side
        assert client.calls == [("list_all_classes", {"filter": "Butt"})]
        assert text_of(result) == (
            "Available Godot classes matching 'Butt' (2 total):\n\nButton\nLabel"
        )

    @pytest.mark.asyncio
    async def test_list_all_classes_without_filter(self):
        client = ScriptedClient({"list_all_classes": {"classes": ["Node"]}})

        result = await ToolDispatcher(client).call_tool("list_all_classes", {})

        assert client.calls == [("list_all_classes", {})]
        assert text_of(result) == "Available Godot classes (1 total):\n\nNode"

    @pytest.mark.asyncio
    async def test_missing_argument_becomes_undefined(self):
        client = ScriptedClient()

        await ToolDispatcher(client).call_tool("get_class_methods", {})

        assert client.calls == [("get_class_methods", {"class_name": "undefined"})]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "value, forwarded", [(None, "null"), (True, "true"), (False, "false"), (42, "42")]
    )
    async def test_present_argument_stringified(self, value, forwarded):
        client = ScriptedClient()

        await ToolDispatcher(client).call_tool("search_classes", {"pattern": value})

        assert client.calls == [("search_classes", {"pattern": forwarded})]


class TestErrors:
    """Test conversion of failures into error results."""

    @pytest.mark.asyncio
    async def test_unknown_tool(self):
        client = ScriptedClient()

        result = await ToolDispatcher(client).call_tool("get_class_secrets", {})

        assert result["isError"] is True
        assert "Unknown tool: get_class_secrets" in text_of(result)
        assert client.calls == []

    @pytest.mark.asyncio
    async def test_reply_error_field(self):
        client = ScriptedClient({"get_class_properties": {"error": "Class 'Nope' not found"}})

        result = await ToolDispatcher(client).call_tool(
            "get_class_properties", {"class_name": "Nope"}
        )

        assert result == {
            "content": [{"type": "text", "text": "Error: Class 'Nope' not found"}],
            "isError": True,
        }

    @pytest.mark.asyncio
    async def test_class_doc_error_field_is_flagged(self):
        client = ScriptedClient({"get_class_doc": {"error": "Class 'Nope' not found"}})

        result = await ToolDispatcher(client).call_tool("get_class_doc", {"class_name": "Nope"})

        assert result["isError"] is True
        assert text_of(result) == "Error: Class 'Nope' not found"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error", [GodotRPCError("boom"), GodotTimeoutError("Request timeout"), RuntimeError("x")]
    )
    async def test_client_exceptions_caught(self, error):
        result = await ToolDispatcher(ScriptedClient(error=error)).call_tool(
            "search_classes", {"pattern": "Area"}
        )

        assert result["isError"] is True
        assert text_of(result) == f"Error: {error}"

    @pytest.mark.asyncio
    async def test_non_object_reply(self):
        client = ScriptedClient({"get_class_doc": None})

        result = await ToolDispatcher(client).call_tool("get_class_doc", {"class_name": "Node"})

        assert result["isError"] is True
        assert "Unexpected reply" in text_of(result)

    @pytest.mark.asyncio
    async def test_not_connected(self):
        sent = []

        async def connector(url):
            sent.append(url)

        client = GodotClient(url="ws://test:9081", connector=connector)

        result = await ToolDispatcher(client).call_tool("get_class_doc", {"class_name": "Node"})

        assert result["isError"] is True
        assert "Not connected to Godot" in text_of(result)
        assert sent == []
        assert client.pending_count == 0
