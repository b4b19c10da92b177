"""
Prompt templates for explaining and comparing Godot classes.

Static and stateless: no call to the editor is involved. Unlike tools, a
prompt failure is not converted into a result; FastMCP reports it as an error
(including an unknown prompt name).
"""

from __future__ import annotations

from typing import Annotated

# Prompt name -> description shown to MCP clients
PROMPTS: dict[str, str] = {
    "explain_class": "Get a detailed explanation of a Godot class",
    "compare_classes": "Compare two Godot classes",
}


def explain_class(
    class_name: Annotated[str, "Godot class to explain"] = "Node",
) -> str:
    # Empty strings fall back to the default too
    class_name = class_name or "Node"
    return (
        f"Please provide a comprehensive explanation of the Godot class '{class_name}', "
        "including its purpose, key methods, properties, and common use cases."
    )


def compare_classes(
    class1: Annotated[str, "First Godot class"] = "Node",
    class2: Annotated[str, "Second Godot class"] = "Control",
) -> str:
    class1 = class1 or "Node"
    class2 = class2 or "Control"
    return (
        f"Please compare the Godot classes '{class1}' and '{class2}', "
        "highlighting their differences, when to use each, and their relationship."
    )
