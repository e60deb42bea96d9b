import logging
from typing import override

from uigen_mcp.tools.base import (
    InvalidArgumentsError,
    ToolCallArguments,
    ToolExecResult,
    ToolParameter,
    UnknownCommandError,
)
from uigen_mcp.tools.base_file_editor import BaseFileEditorTool, translate_tree_error
from uigen_mcp.vfs.errors import FileTreeError
from uigen_mcp.vfs.file_tree import FileTree

logger = logging.getLogger(__name__)

FileManagerSubCommands = ["rename", "delete"]


class FileManagerTool(BaseFileEditorTool):
    """
    Tool for restructuring the project: moving and removing files.
    Both commands accept a file or a directory. A directory is moved or
    removed together with every file below it.
    """

    @override
    def get_name(self) -> str:
        return "file_manager"

    @override
    def get_description(self) -> str:
        return """A tool for renaming and deleting files and directories of the project.
Use `rename` to move a file or directory to `new_path`; the destination must not exist yet.
Use `delete` to remove a file, or a directory together with everything inside it.
Paths are absolute, e.g. `/components/Button.jsx`."""

    @override
    def get_parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter(
                name="command",
                type="string",
                description=f"The command to run. Allowed options are: {', '.join(FileManagerSubCommands)}.",
                required=True,
                enum=FileManagerSubCommands,
            ),
            ToolParameter(
                name="path",
                type="string",
                description="Path of the file or directory to operate on.",
                required=True,
            ),
            ToolParameter(
                name="new_path",
                type="string",
                description="Required parameter of `rename` command: the destination path.",
            ),
        ]

    @override
    def _execute_operation(self, arguments: ToolCallArguments, file_tree: FileTree) -> ToolExecResult:
        command = arguments.get("command")
        match command:
            case "rename":
                return self._rename_handler(arguments, file_tree)
            case "delete":
                return self._delete_handler(arguments, file_tree)
            case _:
                raise UnknownCommandError(
                    f"Unrecognized command {command}. The allowed commands for the {self.get_name()} tool are: {', '.join(FileManagerSubCommands)}"
                )

    def _rename_handler(self, arguments: ToolCallArguments, file_tree: FileTree) -> ToolExecResult:
        path = self._resolve_and_validate_path(
            arguments.get("path"), file_tree, must_exist=True, allow_directories=True
        )
        new_path_arg = arguments.get("new_path")
        if not isinstance(new_path_arg, str) or not new_path_arg.strip():
            raise InvalidArgumentsError("Parameter `new_path` is required for command: rename")
        new_path = self._resolve_and_validate_path(
            new_path_arg, file_tree, must_exist=False, allow_directories=True
        )

        try:
            moved = file_tree.rename(path, new_path)
        except FileTreeError as e:
            raise translate_tree_error(e) from None

        logger.info(f"Renamed {path} to {new_path} ({len(moved)} files)")
        if len(moved) > 1:
            output = f"Successfully renamed {path} to {new_path} ({len(moved)} files moved)"
        else:
            output = f"Successfully renamed {path} to {new_path}"
        return ToolExecResult(output=output, path=path, new_path=new_path)

    def _delete_handler(self, arguments: ToolCallArguments, file_tree: FileTree) -> ToolExecResult:
        path = self._resolve_and_validate_path(
            arguments.get("path"), file_tree, must_exist=True, allow_directories=True
        )
        if path == "/":
            raise InvalidArgumentsError("The root directory cannot be deleted.")

        try:
            removed = file_tree.remove(path)
        except FileTreeError as e:
            raise translate_tree_error(e) from None

        logger.info(f"Deleted {path} ({len(removed)} files)")
        if len(removed) > 1:
            return ToolExecResult(output=f"Successfully deleted {path} ({len(removed)} files removed)", path=path)
        return ToolExecResult(output=f"Successfully deleted {path}", path=path)
