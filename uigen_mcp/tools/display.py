"""Human-readable labels for tool calls, as shown next to each call in the chat."""

from typing import Any

from uigen_mcp.utils.path_utils import file_name

_EDITOR_LABELS = {
    "create": "Creating {name}",
    "str_replace": "Editing {name}",
    "insert": "Adding code to {name}",
    "view": "Reading {name}",
}


def describe_tool_call(tool_name: str, args: dict[str, Any] | None) -> str:
    """
    Derives the progress label for a tool call from its name and arguments.

    Partial arguments are fine: missing paths fall back to "file".
    """
    if args is None:
        return tool_name

    command = args.get("command")
    path = args.get("path")
    name = file_name(path if isinstance(path, str) else None)

    if tool_name == "str_replace_editor":
        template = _EDITOR_LABELS.get(command if isinstance(command, str) else "", "Modifying {name}")
        return template.format(name=name)

    if tool_name == "file_manager":
        if command == "rename":
            new_path = args.get("new_path")
            new_name = file_name(new_path, default="") if isinstance(new_path, str) else ""
            return f"Renaming {name} to {new_name}"
        if command == "delete":
            return f"Deleting {name}"
        return f"Managing {name}"

    return tool_name
