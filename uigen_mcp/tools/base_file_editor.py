# Copyright (c) 2025 ByteDance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""Base class for file editing tools with common functionality."""

import logging
from abc import ABC, abstractmethod
from typing import override

from uigen_mcp.tools.base import (
    ConflictError,
    InvalidArgumentsError,
    NotFoundError,
    Tool,
    ToolCallArguments,
    ToolError,
    ToolExecResult,
)
from uigen_mcp.utils.path_utils import normalize_path
from uigen_mcp.vfs.errors import (
    FileTreeError,
    InvalidPathError,
    PathConflictError,
    PathNotFoundError,
)
from uigen_mcp.vfs.file_tree import FileTree

logger = logging.getLogger(__name__)

FILE_TREE_ARG = "_file_tree"


def translate_tree_error(error: FileTreeError) -> ToolError:
    """Maps a file tree condition onto the tool error reported to the model."""
    if isinstance(error, PathNotFoundError):
        return NotFoundError(str(error))
    if isinstance(error, PathConflictError):
        return ConflictError(str(error))
    return InvalidArgumentsError(str(error))


class BaseFileEditorTool(Tool, ABC):
    """Base class for file editing tools with common functionality."""

    def _resolve_and_validate_path(
        self,
        path_str: object,
        file_tree: FileTree,
        must_exist: bool = True,
        allow_directories: bool = False,
    ) -> str:
        """
        Normalize and validate a path argument.

        Args:
            path_str: The path argument provided by the model
            file_tree: The session file tree
            must_exist: Whether the path must exist
            allow_directories: Whether directories are allowed

        Returns:
            The normalized path

        Raises:
            ToolError: If validation fails
        """
        if not isinstance(path_str, str):
            raise InvalidArgumentsError("Parameter `path` is required and must be a string.")
        try:
            path = normalize_path(path_str)
        except InvalidPathError as e:
            raise InvalidArgumentsError(f"Error resolving path: {e}") from e
        logger.debug(f"Resolved path: {path}")

        if must_exist and not file_tree.exists(path):
            raise NotFoundError(f"The path {path} does not exist.")

        if not allow_directories and file_tree.is_directory(path):
            raise InvalidArgumentsError(
                f"The path {path} is a directory and this operation is not allowed on directories."
            )

        return path

    def _validate_file_tree(self, arguments: ToolCallArguments) -> FileTree:
        """
        Extract the session FileTree from the arguments.

        Raises:
            ToolError: If no FileTree was supplied
        """
        tree = arguments.get(FILE_TREE_ARG)
        if not isinstance(tree, FileTree):
            logger.error("FileTree not found in arguments")
            raise ToolError("FileTree not found in arguments.")
        return tree

    def read_file(self, path: str, file_tree: FileTree) -> str:
        logger.debug(f"Reading file: {path}")
        try:
            return file_tree.get(path)
        except FileTreeError as e:
            raise translate_tree_error(e) from None

    def write_file(self, path: str, content: str, file_tree: FileTree) -> None:
        logger.debug(f"Writing file: {path}, content length: {len(content)}")
        try:
            file_tree.set(path, content)
        except FileTreeError as e:
            raise translate_tree_error(e) from None

    @abstractmethod
    def _execute_operation(self, arguments: ToolCallArguments, file_tree: FileTree) -> ToolExecResult:
        """
        Execute the specific operation for this tool.

        Implementations check every precondition before touching the tree
        and never await, so a call applies completely or not at all.
        """
        pass

    @override
    async def execute(self, arguments: ToolCallArguments) -> ToolExecResult:
        """
        Execute the tool with common validation and error handling.

        Tool failures are returned as results so the model can retry with
        corrected arguments; they never escape as exceptions.
        """
        command = arguments.get("command")
        path = arguments.get("path")
        new_path = arguments.get("new_path")
        describe = {
            "command": command if isinstance(command, str) else None,
            "path": path if isinstance(path, str) else None,
            "new_path": new_path if isinstance(new_path, str) else None,
        }
        try:
            file_tree = self._validate_file_tree(arguments)
            result = self._execute_operation(arguments, file_tree)
        except ToolError as e:
            logger.error(f"Tool error in {self.get_name()}: {e}")
            return ToolExecResult(error=str(e), error_code=-1, error_kind=e.kind, **describe)
        except Exception as e:
            logger.error(f"Unexpected error in {self.get_name()}: {e}", exc_info=True)
            return ToolExecResult(
                error=f"Unexpected error: {str(e)}", error_code=-1, error_kind="internal", **describe
            )

        result.command = result.command or describe["command"]
        result.path = result.path or describe["path"]
        result.new_path = result.new_path or describe["new_path"]
        return result
