import json

from uigen_mcp.tools.utils.constants import MAX_RESPONSE_LEN, TRUNCATED_MESSAGE
from uigen_mcp.vfs.file_tree import FileNode


def maybe_truncate(content: str, truncate_after: int | None = MAX_RESPONSE_LEN) -> str:
    """Truncate content and append a notice if content exceeds the specified length."""
    if not truncate_after or len(content) <= truncate_after:
        return content
    return content[:truncate_after] + TRUNCATED_MESSAGE


def make_numbered_output(
    file_content: str,
    file_descriptor: str,
    init_line: int = 1,
    truncate_after: int | None = MAX_RESPONSE_LEN,
) -> str:
    """Generate `cat -n` style output for the content of a file."""
    file_content = maybe_truncate(file_content, truncate_after)
    numbered = "\n".join(
        [f"{i + init_line:6}\t{line}" for i, line in enumerate(file_content.split("\n"))]
    )
    return f"Here's the result of running `cat -n` on {file_descriptor}:\n" + numbered + "\n"


def format_directory_listing(entries: list[FileNode], root_name: str) -> str:
    """
    Format the children of a directory as structured JSON for LLM consumption.

    Returns a JSON string the model can parse, instead of hard-to-parse plain text.
    """
    if not entries:
        return json.dumps({
            "status": "empty",
            "root": root_name,
            "message": "Directory is empty",
            "files": []
        }, indent=2)

    file_list = []
    for entry in entries:
        file_entry = {
            "name": entry.name,
            "type": entry.kind,
            "path": entry.path,
        }
        if entry.content is not None:
            file_entry["lines"] = entry.content.count("\n") + 1
        file_list.append(file_entry)

    return json.dumps({
        "status": "success",
        "root": root_name,
        "count": len(file_list),
        "files": file_list
    }, indent=2)
