"""
Text formatting for Godot ClassDB replies.

The plugin replies with loosely shaped JSON. These helpers are total over it:
missing or null list fields count as empty, and list items are rendered by
their ``name`` when they carry one and as-is otherwise.
"""

from __future__ import annotations

from typing import Any


def reply_error(reply: Any) -> Any:
    """Return the ``error`` field of a reply, or None if there is none."""
    if isinstance(reply, dict):
        return reply.get("error") or None
    return None


def reply_list(reply: Any, key: str) -> list:
    """Return ``reply[key]`` as a list, treating a missing or null field as empty."""
    if not isinstance(reply, dict):
        return []
    value = reply.get(key)
    if value is None:
        return []
    return list(value)


def _item_name(item: Any) -> Any:
    if isinstance(item, dict) and item.get("name"):
        return item["name"]
    return item


def format_class_doc(doc: dict) -> str:
    """
    Summarize a class documentation reply.

    Args:
        doc: Reply with name, inherits, properties, methods and signals.

    Returns:
        Markdown with a title, the parent class and one counted section per
        non-empty member list.
    """
    output = f"# {doc.get('name')}\n\n"

    inherits = doc.get("inherits")
    if inherits:
        output += f"**Inherits:** {inherits}\n\n"

    for key, title in (("properties", "Properties"), ("methods", "Methods"), ("signals", "Signals")):
        items = reply_list(doc, key)
        if items:
            output += f"## {title}\n\nThis class has {len(items)} {key}.\n\n"

    return output


def format_member_list(items: list, kind: str) -> str:
    """Render methods, properties or signals as a 1-based numbered list."""
    if not items:
        return f"No {kind} found."
    return "".join(f"{index}. {_item_name(item)}\n" for index, item in enumerate(items, start=1))


def format_search_results(pattern: str, results: list) -> str:
    header = f"Found {len(results)} classes matching '{pattern}':"
    return header + "\n\n" + "\n".join(str(r) for r in results)


def format_hierarchy(class_name: str, hierarchy: list) -> str:
    header = f"Inheritance hierarchy for {class_name}:"
    return header + "\n\n" + " -> ".join(str(c) for c in hierarchy)


def format_class_list(classes: list, filter: str | None = None) -> str:
    matching = f" matching '{filter}'" if filter else ""
    header = f"Available Godot classes{matching} ({len(classes)} total):"
    return header + "\n\n" + "\n".join(str(c) for c in classes)
