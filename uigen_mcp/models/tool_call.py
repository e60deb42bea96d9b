from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field

from uigen_mcp.tools.base import ToolExecResult


class ToolCallState(StrEnum):
    """Lifecycle of a streamed tool call."""

    PARTIAL_CALL = "partial-call"
    CALL = "call"
    RESULT = "result"
    ERROR = "error"


# Allowed transitions; terminal states have none.
TOOL_CALL_TRANSITIONS: dict[ToolCallState, frozenset[ToolCallState]] = {
    ToolCallState.PARTIAL_CALL: frozenset({ToolCallState.PARTIAL_CALL, ToolCallState.CALL}),
    ToolCallState.CALL: frozenset({ToolCallState.RESULT, ToolCallState.ERROR}),
    ToolCallState.RESULT: frozenset(),
    ToolCallState.ERROR: frozenset(),
}


class ToolCall(BaseModel):
    """A single model-issued tool call, tracked from its first fragment to its result."""

    tool_call_id: str
    tool_name: str
    state: ToolCallState = ToolCallState.PARTIAL_CALL
    args: dict[str, Any] = Field(default_factory=dict)
    args_text: str = ""  # raw JSON fragments received so far
    result: ToolExecResult | None = None

    def can_transition(self, target: ToolCallState) -> bool:
        return target in TOOL_CALL_TRANSITIONS[self.state]

    @property
    def is_terminal(self) -> bool:
        return not TOOL_CALL_TRANSITIONS[self.state]


class ToolCallStatus(BaseModel):
    """What the chat UI needs to render a tool call."""

    tool_call_id: str
    tool_name: str
    state: ToolCallState
    label: str
    loading: bool
    error: str | None = None
