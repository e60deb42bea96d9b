#!/usr/bin/env python3
"""
Unit тесты для sequencer.py
"""

import asyncio
import json
from unittest.mock import MagicMock

import pytest

from uigen_mcp.engine.sequencer import InvalidTransitionError, ToolCallSequencer
from uigen_mcp.models.tool_call import ToolCallState
from uigen_mcp.tools.base import Tool, ToolExecResult
from uigen_mcp.vfs.file_tree import FileTree


class YieldingTool(Tool):
    """Records when each call starts and ends, yielding to the loop in between."""

    def __init__(self, log):
        self.log = log

    def get_name(self):
        return "yielding"

    def get_description(self):
        return "test tool"

    def get_parameters(self):
        return []

    async def execute(self, arguments):
        self.log.append(("start", arguments["name"]))
        await asyncio.sleep(0)
        self.log.append(("end", arguments["name"]))
        return ToolExecResult(output=arguments["name"])


class TestToolCallSequencer:
    """Тесты для ToolCallSequencer"""

    @pytest.fixture
    def file_tree(self):
        return FileTree()

    @pytest.fixture
    def sequencer(self, file_tree):
        return ToolCallSequencer(file_tree)

    @pytest.mark.asyncio
    async def test_partial_fragments_do_not_mutate_tree(self, sequencer, file_tree):
        """Частичные фрагменты не применяются к дереву"""
        args = json.dumps({"command": "create", "path": "/App.jsx", "file_text": "hello"})

        sequencer.on_partial("call-1", "str_replace_editor", args[:20])
        sequencer.on_partial("call-1", "str_replace_editor", args[20:])

        assert len(file_tree) == 0
        assert sequencer.get("call-1").state == ToolCallState.PARTIAL_CALL

        call = await sequencer.on_call("call-1")

        assert call.state == ToolCallState.RESULT
        assert call.args["path"] == "/App.jsx"
        assert file_tree.get("/App.jsx") == "hello"

    @pytest.mark.asyncio
    async def test_later_calls_see_earlier_effects(self, sequencer, file_tree):
        """Сценарий: create -> str_replace -> view в одном ходе"""
        await sequencer.run("str_replace_editor", {"command": "create", "path": "/App.jsx", "file_text": "a"})
        await sequencer.run("str_replace_editor", {"command": "str_replace", "path": "/App.jsx", "old_str": "a", "new_str": "b"})
        view = await sequencer.run("str_replace_editor", {"command": "view", "path": "/App.jsx"})

        assert view.state == ToolCallState.RESULT
        assert "     1\tb" in view.result.output
        assert [call.args["command"] for call in sequencer.calls()] == ["create", "str_replace", "view"]

    @pytest.mark.asyncio
    async def test_tool_failure_ends_in_error_state(self, sequencer, file_tree):
        call = await sequencer.run("file_manager", {"command": "delete", "path": "/ghost.jsx"})

        assert call.state == ToolCallState.ERROR
        assert call.result.error_kind == "not_found"
        assert len(file_tree) == 0

    @pytest.mark.asyncio
    async def test_completed_call_cannot_be_reprocessed(self, sequencer, file_tree):
        await sequencer.run("str_replace_editor", {"command": "create", "path": "/a.js", "file_text": "1"}, tool_call_id="c1")

        with pytest.raises(InvalidTransitionError):
            await sequencer.on_call("c1", "str_replace_editor", {"command": "create", "path": "/a.js", "file_text": "2"})
        with pytest.raises(InvalidTransitionError):
            sequencer.on_partial("c1", "str_replace_editor", "{}")

        assert file_tree.get("/a.js") == "1"
        assert sequencer.get("c1").state == ToolCallState.RESULT

    @pytest.mark.asyncio
    async def test_malformed_arguments(self, sequencer, file_tree):
        sequencer.on_partial("c1", "str_replace_editor", '{"command": "create", "path": "/a.js"')

        call = await sequencer.on_call("c1")

        assert call.state == ToolCallState.ERROR
        assert call.result.error_kind == "invalid_arguments"
        assert len(file_tree) == 0

    @pytest.mark.asyncio
    async def test_unknown_tool(self, sequencer):
        call = await sequencer.run("bash", {"command": "ls"})

        assert call.state == ToolCallState.ERROR
        assert call.result.error_kind == "unknown_tool"

    @pytest.mark.asyncio
    async def test_explicit_args_override_fragments(self, sequencer, file_tree):
        sequencer.on_partial("c1", "str_replace_editor", '{"comm', args={"command": "create"})

        await sequencer.on_call("c1", args={"command": "create", "path": "/b.js", "file_text": "b"})

        assert file_tree.get("/b.js") == "b"

    def test_truncated_stream_is_never_applied(self, sequencer, file_tree):
        sequencer.on_partial("c1", "str_replace_editor", '{"command": "create", "path": "/a.js"', args={"command": "create", "path": "/a.js"})

        assert [call.tool_call_id for call in sequencer.pending()] == ["c1"]
        assert len(file_tree) == 0

    @pytest.mark.asyncio
    async def test_status(self, sequencer):
        sequencer.on_partial("c1", "file_manager", args={"command": "rename", "path": "/old.jsx", "new_path": "/new.jsx"})

        pending = sequencer.status("c1")
        assert pending.loading
        assert pending.label == "Renaming old.jsx to new.jsx"

        await sequencer.on_call("c1")

        done = sequencer.status("c1")
        assert not done.loading
        assert done.state == ToolCallState.ERROR
        assert "does not exist" in done.error

    @pytest.mark.asyncio
    async def test_listener_is_notified(self, sequencer):
        listener = MagicMock()
        sequencer.add_listener(listener)

        call = await sequencer.run("str_replace_editor", {"command": "create", "path": "/a.js", "file_text": ""})

        listener.assert_called_once_with(call)

    @pytest.mark.asyncio
    async def test_concurrent_calls_apply_in_arrival_order(self, sequencer, file_tree):
        """Одновременно завершенные вызовы применяются по очереди"""
        create, replace = await asyncio.gather(
            sequencer.on_call("c1", "str_replace_editor", {"command": "create", "path": "/App.jsx", "file_text": "hello"}),
            sequencer.on_call("c2", "str_replace_editor", {"command": "str_replace", "path": "/App.jsx", "old_str": "hello", "new_str": "bye"}),
        )

        assert create.state == ToolCallState.RESULT
        assert replace.state == ToolCallState.RESULT
        assert file_tree.get("/App.jsx") == "bye"
        assert [call.tool_call_id for call in sequencer.calls()] == ["c1", "c2"]

    @pytest.mark.asyncio
    async def test_calls_do_not_interleave(self, file_tree):
        log = []
        sequencer = ToolCallSequencer(file_tree, [YieldingTool(log)])

        await asyncio.gather(
            sequencer.on_call("c1", "yielding", {"name": "first"}),
            sequencer.on_call("c2", "yielding", {"name": "second"}),
        )

        assert log == [("start", "first"), ("end", "first"), ("start", "second"), ("end", "second")]
