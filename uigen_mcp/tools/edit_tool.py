# Copyright (c) 2023 Anthropic
# Copyright (c) 2025 ByteDance Ltd. and/or its affiliates.
# SPDX-License-Identifier: MIT
#
# This file has been modified by ByteDance Ltd. and/or its affiliates. on 13 June 2025
#
# Original file was released under MIT License, with the full license text
# available at https://github.com/anthropics/anthropic-quickstarts/blob/main/LICENSE
#
# This modified file is released under the same license.

import logging
from typing import override

from uigen_mcp.tools.base import (
    AmbiguousMatchError,
    InvalidArgumentsError,
    NoMatchError,
    OutOfRangeError,
    ToolCallArguments,
    ToolExecResult,
    ToolParameter,
    UnknownCommandError,
)
from uigen_mcp.tools.base_file_editor import BaseFileEditorTool
from uigen_mcp.tools.utils.constants import MAX_RESPONSE_LEN, SNIPPET_LINES
from uigen_mcp.tools.utils.formatting_utils import format_directory_listing, make_numbered_output
from uigen_mcp.vfs.file_tree import FileTree

logger = logging.getLogger(__name__)

EditToolSubCommands = [
    "view",
    "create",
    "str_replace",
    "insert",
]


class TextEditorTool(BaseFileEditorTool):
    """Tool to view, create and edit files of the virtual project."""

    def __init__(
        self,
        max_response_len: int = MAX_RESPONSE_LEN,
        snippet_lines: int = SNIPPET_LINES,
    ) -> None:
        super().__init__()
        self._max_response_len = max_response_len
        self._snippet_lines = snippet_lines

    @override
    def get_name(self) -> str:
        return "str_replace_editor"

    @override
    def get_description(self) -> str:
        return """Custom editing tool for viewing, creating and editing files of the project
* The project lives in a virtual file system rooted at `/`. All paths are absolute, e.g. `/App.jsx`
* If `path` is a file, `view` displays the result of applying `cat -n`. If `path` is a directory, `view` lists its immediate children
* The `create` command creates the file, or overwrites it if it already exists
* If a `command` generates a long output, it will be truncated and marked with `<response clipped>`

Notes for using the `str_replace` command:
* The `old_str` parameter should match EXACTLY one or more consecutive lines from the original file. Be mindful of whitespaces!
* If the `old_str` parameter is not unique in the file, the replacement will not be performed. Make sure to include enough context in `old_str` to make it unique
* The `new_str` parameter should contain the edited lines that should replace the `old_str`
"""

    @override
    def get_parameters(self) -> list[ToolParameter]:
        """Get the parameters for the str_replace_editor."""
        return [
            ToolParameter(
                name="command",
                type="string",
                description=f"The commands to run. Allowed options are: {', '.join(EditToolSubCommands)}.",
                required=True,
                enum=EditToolSubCommands,
            ),
            ToolParameter(
                name="file_text",
                type="string",
                description="Required parameter of `create` command, with the content of the file to be created.",
            ),
            ToolParameter(
                name="insert_line",
                type="integer",
                description="Required parameter of `insert` command. The `new_str` will be inserted AFTER the line `insert_line` of `path`. Use 0 to insert before the first line.",
            ),
            ToolParameter(
                name="new_str",
                type="string",
                description="Optional parameter of `str_replace` command containing the new string (if not given, no string will be added). Required parameter of `insert` command containing the string to insert.",
            ),
            ToolParameter(
                name="old_str",
                type="string",
                description="Required parameter of `str_replace` command containing the string in `path` to replace.",
            ),
            ToolParameter(
                name="path",
                type="string",
                description="Absolute path to file or directory, e.g. `/components/Button.jsx`.",
                required=True,
            ),
            ToolParameter(
                name="view_range",
                type="array",
                description="Optional parameter of `view` command when `path` points to a file. If none is given, the full file is shown. If provided, the file will be shown in the indicated line number range, e.g. [11, 12] will show lines 11 and 12. Indexing at 1 to start. Setting `[start_line, -1]` shows all lines from `start_line` to the end of the file.",
                items={"type": "integer"},
            ),
        ]

    @override
    def _execute_operation(self, arguments: ToolCallArguments, file_tree: FileTree) -> ToolExecResult:
        """Execute the text editor operation."""
        command = arguments.get("command")
        path_arg = arguments.get("path")
        logger.debug(f"Processing command '{command}' for path '{path_arg}'")

        match command:
            case "view":
                path = self._resolve_and_validate_path(path_arg, file_tree, must_exist=True, allow_directories=True)
                return self._view_handler(arguments, path, file_tree)
            case "create":
                # A directory path reaches the tree, which reports it as a conflict
                path = self._resolve_and_validate_path(path_arg, file_tree, must_exist=False, allow_directories=True)
                return self._create_handler(arguments, path, file_tree)
            case "str_replace":
                path = self._resolve_and_validate_path(path_arg, file_tree, must_exist=True)
                return self._str_replace_handler(arguments, path, file_tree)
            case "insert":
                path = self._resolve_and_validate_path(path_arg, file_tree, must_exist=True)
                return self._insert_handler(arguments, path, file_tree)
            case _:
                logger.error(f"Unrecognized command: {command}")
                raise UnknownCommandError(
                    f"Unrecognized command {command}. The allowed commands for the {self.get_name()} tool are: {', '.join(EditToolSubCommands)}"
                )

    def view(self, path: str, file_tree: FileTree, view_range: list[int] | None = None) -> ToolExecResult:
        """Implement the view command"""
        if not file_tree.is_file(path):
            if view_range:
                raise InvalidArgumentsError(
                    "The `view_range` parameter is not allowed when `path` points to a directory."
                )
            entries = file_tree.list_directory(path)
            return ToolExecResult(output=format_directory_listing(entries, path))

        file_content = self.read_file(path, file_tree)
        init_line = 1
        if view_range:
            if len(view_range) != 2 or not all(isinstance(i, int) for i in view_range):
                raise InvalidArgumentsError("Invalid `view_range`. It should be a list of two integers.")
            file_lines = file_content.split("\n")
            n_lines_file = len(file_lines)
            init_line, final_line = view_range
            if init_line < 1 or init_line > n_lines_file:
                raise OutOfRangeError(
                    f"Invalid `view_range`: {view_range}. Its first element `{init_line}` should be within the range of lines of the file: {[1, n_lines_file]}"
                )
            if final_line > n_lines_file:
                raise OutOfRangeError(
                    f"Invalid `view_range`: {view_range}. Its second element `{final_line}` should be smaller than the number of lines in the file: `{n_lines_file}`"
                )
            if final_line != -1 and final_line < init_line:
                raise OutOfRangeError(
                    f"Invalid `view_range`: {view_range}. Its second element `{final_line}` should be larger or equal than its first `{init_line}`"
                )

            if final_line == -1:
                file_content = "\n".join(file_lines[init_line - 1 :])
            else:
                file_content = "\n".join(file_lines[init_line - 1 : final_line])

        return ToolExecResult(
            output=make_numbered_output(file_content, path, init_line, self._max_response_len)
        )

    def create(self, path: str, file_text: str, file_tree: FileTree) -> ToolExecResult:
        """Implement the create command; an existing file is overwritten."""
        existed = file_tree.is_file(path)
        self.write_file(path, file_text, file_tree)
        logger.debug(f"File {'overwritten' if existed else 'created'} at {path}")
        verb = "overwritten" if existed else "created"
        return ToolExecResult(output=f"File {verb} successfully at: {path}")

    def str_replace(self, path: str, old_str: str, new_str: str | None, file_tree: FileTree) -> ToolExecResult:
        """Implement the str_replace command, which replaces old_str with new_str in the file content"""
        logger.debug(f"str_replace called with path={path}, old_str length={len(old_str)}, new_str length={len(new_str) if new_str else 0}")

        file_content = self.read_file(path, file_tree)
        new_str = new_str or ""

        starts = _occurrence_starts(file_content, old_str)
        logger.debug(f"Found {len(starts)} occurrences of old_str in file")

        if not starts:
            raise NoMatchError(
                f"No replacement was performed, old_str `{old_str}` did not appear verbatim in {path}."
            )
        if len(starts) > 1:
            lines = [file_content.count("\n", 0, start) + 1 for start in starts]
            raise AmbiguousMatchError(
                f"No replacement was performed. Multiple occurrences of old_str `{old_str}` in lines {lines} in {path}. Please ensure it is unique"
            )

        new_file_content = file_content.replace(old_str, new_str, 1)
        self.write_file(path, new_file_content, file_tree)

        # Create a snippet of the edited section
        replacement_line = file_content.count("\n", 0, starts[0])
        start_line = max(0, replacement_line - self._snippet_lines)
        end_line = replacement_line + self._snippet_lines + new_str.count("\n")
        snippet = "\n".join(new_file_content.split("\n")[start_line : end_line + 1])

        success_msg = f"The file {path} has been edited. "
        success_msg += make_numbered_output(snippet, f"a snippet of {path}", start_line + 1, self._max_response_len)
        success_msg += "Review the changes and make sure they are as expected. Edit the file again if necessary."
        return ToolExecResult(output=success_msg)

    def insert(self, path: str, insert_line: int, new_str: str, file_tree: FileTree) -> ToolExecResult:
        """Implement the insert command, which inserts new_str at the specified line in the file content."""
        logger.debug(f"insert called with path={path}, insert_line={insert_line}, new_str length={len(new_str)}")

        file_text = self.read_file(path, file_tree)
        file_text_lines = file_text.split("\n")
        n_lines_file = len(file_text_lines)

        if insert_line < 0 or insert_line > n_lines_file:
            raise OutOfRangeError(
                f"Invalid `insert_line` parameter: {insert_line}. It should be within the range of lines of the file: {[0, n_lines_file]}"
            )

        new_str_lines = new_str.split("\n")
        new_file_text_lines = (
            file_text_lines[:insert_line] + new_str_lines + file_text_lines[insert_line:]
        )
        snippet_lines = (
            file_text_lines[max(0, insert_line - self._snippet_lines) : insert_line]
            + new_str_lines
            + file_text_lines[insert_line : insert_line + self._snippet_lines]
        )

        self.write_file(path, "\n".join(new_file_text_lines), file_tree)

        success_msg = f"The file {path} has been edited. "
        success_msg += make_numbered_output(
            "\n".join(snippet_lines),
            "a snippet of the edited file",
            max(1, insert_line - self._snippet_lines + 1),
            self._max_response_len,
        )
        success_msg += "Review the changes and make sure they are as expected (correct indentation, no duplicate lines, etc). Edit the file again if necessary."
        return ToolExecResult(output=success_msg)

    def _view_handler(self, arguments: ToolCallArguments, path: str, file_tree: FileTree) -> ToolExecResult:
        view_range = arguments.get("view_range", None)
        if view_range is None:
            return self.view(path, file_tree)
        if not (isinstance(view_range, list) and all(isinstance(i, int) for i in view_range)):
            raise InvalidArgumentsError("Parameter `view_range` should be a list of integers.")
        return self.view(path, file_tree, view_range)

    def _create_handler(self, arguments: ToolCallArguments, path: str, file_tree: FileTree) -> ToolExecResult:
        file_text = arguments.get("file_text", "")
        if file_text is None:
            file_text = ""
        if not isinstance(file_text, str):
            raise InvalidArgumentsError("Parameter `file_text` must be a string for command: create")
        return self.create(path, file_text, file_tree)

    def _str_replace_handler(self, arguments: ToolCallArguments, path: str, file_tree: FileTree) -> ToolExecResult:
        old_str = arguments.get("old_str")
        if not isinstance(old_str, str) or old_str == "":
            logger.error(f"old_str parameter is missing or empty: {type(old_str)}")
            raise InvalidArgumentsError(
                "Parameter `old_str` is required and should be a non-empty string for command: str_replace"
            )
        new_str = arguments.get("new_str")
        if not (new_str is None or isinstance(new_str, str)):
            logger.error(f"new_str parameter is not a string or None: {type(new_str)}")
            raise InvalidArgumentsError("Parameter `new_str` should be a string or null for command: str_replace")
        return self.str_replace(path, old_str, new_str, file_tree)

    def _insert_handler(self, arguments: ToolCallArguments, path: str, file_tree: FileTree) -> ToolExecResult:
        insert_line = arguments.get("insert_line")
        if insert_line is None:
            raise InvalidArgumentsError("Parameter `insert_line` is required for command: insert")

        # Models sometimes send numbers as strings
        if isinstance(insert_line, str):
            try:
                insert_line = int(insert_line)
            except ValueError:
                raise InvalidArgumentsError(
                    f"Parameter `insert_line` must be a valid integer, got: {insert_line}"
                ) from None
        elif isinstance(insert_line, bool) or not isinstance(insert_line, int):
            raise InvalidArgumentsError(
                f"Parameter `insert_line` must be an integer, got: {type(insert_line).__name__}"
            )

        new_str = arguments.get("new_str")
        if not isinstance(new_str, str):
            raise InvalidArgumentsError("Parameter `new_str` is required for command: insert")
        return self.insert(path, insert_line, new_str, file_tree)


def _occurrence_starts(content: str, needle: str) -> list[int]:
    """Returns the offset of every occurrence of needle, overlapping ones included."""
    starts = []
    start = content.find(needle)
    while start != -1:
        starts.append(start)
        start = content.find(needle, start + 1)
    return starts
