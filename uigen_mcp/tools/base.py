# Copyright (c) 2025 ByteDance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""Base classes shared by every tool exposed to the model."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

ToolCallArguments = dict[str, Any]


class ToolError(Exception):
    """A recoverable tool failure that is reported back to the model."""

    kind: str = "tool_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message: str = message


class NotFoundError(ToolError):
    kind = "not_found"


class ConflictError(ToolError):
    kind = "conflict"


class NoMatchError(ToolError):
    kind = "no_match"


class AmbiguousMatchError(ToolError):
    kind = "ambiguous_match"


class OutOfRangeError(ToolError):
    kind = "out_of_range"


class InvalidArgumentsError(ToolError):
    kind = "invalid_arguments"


class UnknownCommandError(ToolError):
    kind = "unknown_command"


@dataclass
class ToolExecResult:
    """Result of a tool execution."""

    output: str | None = None
    error: str | None = None
    error_code: int = 0
    error_kind: str | None = None
    command: str | None = None
    path: str | None = None
    new_path: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.error_code == 0

    def to_dict(self) -> dict[str, Any]:
        """The shape returned to the model through the server."""
        if not self.ok:
            return {
                "status": "error",
                "error": self.error,
                "error_kind": self.error_kind,
                "exit_code": self.error_code,
            }
        return {"status": "success", "result": self.output, "exit_code": self.error_code}


@dataclass
class ToolParameter:
    """Tool parameter definition."""

    name: str
    type: str | list[str]
    description: str
    enum: list[str] | None = None
    items: dict[str, object] | None = None
    required: bool = False


class Tool(ABC):
    """Base class for all tools."""

    @abstractmethod
    def get_name(self) -> str:
        pass

    @abstractmethod
    def get_description(self) -> str:
        pass

    @abstractmethod
    def get_parameters(self) -> list[ToolParameter]:
        pass

    @abstractmethod
    async def execute(self, arguments: ToolCallArguments) -> ToolExecResult:
        """Execute the tool with the given arguments."""
        pass
