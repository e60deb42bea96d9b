"""
Sequencing of streamed tool calls.

Fragments of a tool call arrive over the chat stream. Each call is tracked as
a small state machine (partial-call -> call -> result | error). Only the
transition to `call` applies the call to the file tree, and calls are applied
one at a time in the order they complete.
"""

import asyncio
import json
import logging
import uuid
from typing import Any, Callable

from uigen_mcp.models.tool_call import ToolCall, ToolCallState, ToolCallStatus
from uigen_mcp.tools.base import Tool, ToolExecResult
from uigen_mcp.tools.base_file_editor import FILE_TREE_ARG
from uigen_mcp.tools.display import describe_tool_call
from uigen_mcp.tools.edit_tool import TextEditorTool
from uigen_mcp.tools.file_manager_tool import FileManagerTool
from uigen_mcp.vfs.file_tree import FileTree

logger = logging.getLogger(__name__)

CallListener = Callable[[ToolCall], None]


class InvalidTransitionError(Exception):
    """A tool call event does not fit the current state of the call."""

    def __init__(self, tool_call_id: str, current: ToolCallState | None, target: ToolCallState) -> None:
        super().__init__(
            f"Tool call {tool_call_id} cannot move from {current.value if current else 'unknown'} to {target.value}"
        )
        self.tool_call_id = tool_call_id
        self.current = current
        self.target = target


def default_tools() -> list[Tool]:
    return [TextEditorTool(), FileManagerTool()]


class ToolCallSequencer:
    """Applies the tool calls of one session to its file tree, strictly in order."""

    def __init__(self, file_tree: FileTree, tools: list[Tool] | None = None) -> None:
        self.file_tree = file_tree
        self.tools: dict[str, Tool] = {tool.get_name(): tool for tool in (tools or default_tools())}
        self._calls: dict[str, ToolCall] = {}
        self._lock = asyncio.Lock()
        self._listeners: list[CallListener] = []

    def add_listener(self, listener: CallListener) -> None:
        """Registers a callback invoked after every call reaches `result` or `error`."""
        self._listeners.append(listener)

    def get(self, tool_call_id: str) -> ToolCall | None:
        return self._calls.get(tool_call_id)

    def calls(self) -> list[ToolCall]:
        """All known calls, in arrival order."""
        return list(self._calls.values())

    def pending(self) -> list[ToolCall]:
        """Calls that never received their complete arguments."""
        return [call for call in self._calls.values() if call.state == ToolCallState.PARTIAL_CALL]

    def _transition(self, call: ToolCall, target: ToolCallState) -> None:
        if not call.can_transition(target):
            raise InvalidTransitionError(call.tool_call_id, call.state, target)
        call.state = target

    def on_partial(
        self,
        tool_call_id: str,
        tool_name: str,
        args_text_delta: str = "",
        args: dict[str, Any] | None = None,
    ) -> ToolCall:
        """
        Records a fragment of a streamed call. Never touches the file tree.

        Args:
            tool_call_id: Correlates fragments of the same call.
            tool_name: Name of the tool being called.
            args_text_delta: Next chunk of the JSON-encoded arguments.
            args: Best-effort parse of the arguments so far, if the transport provides one.
        """
        call = self._calls.get(tool_call_id)
        if call is None:
            call = ToolCall(tool_call_id=tool_call_id, tool_name=tool_name)
            self._calls[tool_call_id] = call
            logger.debug(f"Tool call {tool_call_id} ({tool_name}) started")
        else:
            self._transition(call, ToolCallState.PARTIAL_CALL)

        call.args_text += args_text_delta
        if args is not None:
            call.args = dict(args)
        return call

    async def on_call(
        self,
        tool_call_id: str,
        tool_name: str | None = None,
        args: dict[str, Any] | None = None,
    ) -> ToolCall:
        """
        Completes a call and applies it to the file tree.

        Arguments come from `args` when given, otherwise from the JSON text
        accumulated by `on_partial`. A call that cannot be parsed ends in the
        `error` state without touching the tree.

        Raises:
            InvalidTransitionError: If the call was already completed.
        """
        call = self._calls.get(tool_call_id)
        if call is None:
            if tool_name is None:
                raise ValueError(f"Tool call {tool_call_id} has no tool name")
            call = ToolCall(tool_call_id=tool_call_id, tool_name=tool_name)
            self._calls[tool_call_id] = call
        self._transition(call, ToolCallState.CALL)

        if args is not None:
            call.args = dict(args)
        elif call.args_text:
            try:
                parsed = json.loads(call.args_text)
            except json.JSONDecodeError as e:
                logger.error(f"Tool call {tool_call_id} has malformed arguments: {e}")
                return self._finish(call, ToolExecResult(
                    error=f"Could not parse tool call arguments: {e}",
                    error_code=-1,
                    error_kind="invalid_arguments",
                ))
            if not isinstance(parsed, dict):
                return self._finish(call, ToolExecResult(
                    error="Tool call arguments must be a JSON object.",
                    error_code=-1,
                    error_kind="invalid_arguments",
                ))
            call.args = parsed

        async with self._lock:
            result = await self._apply(call)
        return self._finish(call, result)

    async def run(self, tool_name: str, args: dict[str, Any], tool_call_id: str | None = None) -> ToolCall:
        """Applies a call that arrives complete, without any partial fragments."""
        return await self.on_call(tool_call_id or uuid.uuid4().hex, tool_name, args)

    async def _apply(self, call: ToolCall) -> ToolExecResult:
        tool = self.tools.get(call.tool_name)
        if tool is None:
            logger.error(f"Unknown tool requested: {call.tool_name}")
            return ToolExecResult(
                error=f"Unknown tool {call.tool_name}. Available tools: {', '.join(self.tools)}",
                error_code=-1,
                error_kind="unknown_tool",
            )
        logger.debug(f"Applying tool call {call.tool_call_id}: {call.tool_name} {call.args.get('command')}")
        arguments = {**call.args, FILE_TREE_ARG: self.file_tree}
        return await tool.execute(arguments)

    def _finish(self, call: ToolCall, result: ToolExecResult) -> ToolCall:
        call.result = result
        self._transition(call, ToolCallState.RESULT if result.ok else ToolCallState.ERROR)
        logger.info(f"Tool call {call.tool_call_id} finished with state {call.state.value}")
        for listener in self._listeners:
            listener(call)
        return call

    def status(self, tool_call_id: str) -> ToolCallStatus:
        """
        Describes a call for display.

        Raises:
            KeyError: If the call id is unknown.
        """
        call = self._calls[tool_call_id]
        return ToolCallStatus(
            tool_call_id=call.tool_call_id,
            tool_name=call.tool_name,
            state=call.state,
            label=describe_tool_call(call.tool_name, call.args),
            loading=not call.is_terminal,
            error=call.result.error if call.result else None,
        )
