"""
End-to-end tests for CommandRunner: request file in, response file out.
"""

import json

import pytest

from cmdserver.core.buffer_editor import BufferEditor
from cmdserver.core.editor import Position
from cmdserver.core.exceptions import (
    InvalidCommunicationDirectoryError,
    RequestMissingError,
    RequestParseError,
    ResponseSlotTakenError,
    StaleRequestError,
)
from cmdserver.io.comm_dir import communication_dir_path
from cmdserver.runner import CommandRunner

from conftest import make_request, write_request_file


def read_response(comm_dir):
    raw = comm_dir.response_path.read_text(encoding="utf-8")
    assert raw.endswith("\n")
    return json.loads(raw)


class TestInitialize:
    def test_initialize(self, settings):
        runner = CommandRunner(settings)
        assert not runner.initialized

        comm_dir = runner.initialize()

        assert runner.initialized
        assert comm_dir.path.is_dir()

    def test_unsafe_directory_leaves_runner_disabled(self, settings):
        communication_dir_path(settings).write_text("squatter")
        runner = CommandRunner(settings)

        with pytest.raises(InvalidCommunicationDirectoryError):
            runner.initialize()
        assert not runner.initialized

    @pytest.mark.asyncio
    async def test_run_before_initialize(self, settings, ten_lines):
        with pytest.raises(RuntimeError, match="not initialized"):
            await CommandRunner(settings).run_command(ten_lines)


class TestRunCommand:
    """Request/response handshake through the filesystem."""

    @pytest.mark.asyncio
    async def test_jump_to_line_scenario(self, runner, comm_dir, ten_lines):
        write_request_file(comm_dir, {
            "uuid": "abc",
            "commandId": "jumpToLine",
            "args": [5],
            "returnCommandOutput": False,
            "waitForFinish": True,
        })

        await runner.run_command(ten_lines)

        assert read_response(comm_dir) == {"uuid": "abc", "error": None, "returnValue": None, "warnings": []}
        assert ten_lines.get_cursor() == Position(4, 0)

    @pytest.mark.asyncio
    async def test_jump_to_line_zero(self, runner, comm_dir, ten_lines):
        write_request_file(comm_dir, make_request("jumpToLine", [0]))

        await runner.run_command(ten_lines)

        assert "Line number must be greater than 0" in read_response(comm_dir)["error"]

    @pytest.mark.asyncio
    async def test_return_value_roundtrip(self, runner, comm_dir, ten_lines):
        write_request_file(comm_dir, make_request("getFilename", uuid="f-1", output=True))

        response = await runner.run_command(ten_lines)

        doc = read_response(comm_dir)
        assert doc["returnValue"] == "/notes/ten.md"
        assert doc["uuid"] == "f-1"
        assert response.return_value == doc["returnValue"]

    @pytest.mark.asyncio
    async def test_unknown_command(self, runner, comm_dir, ten_lines):
        write_request_file(comm_dir, make_request("frobnicate", output=True))

        await runner.run_command(ten_lines)

        doc = read_response(comm_dir)
        assert "frobnicate" in doc["error"]
        assert doc["returnValue"] is None

    @pytest.mark.asyncio
    async def test_inactive_editor_warning(self, runner, comm_dir):
        editor = BufferEditor("x\ny", has_focus=False)
        write_request_file(comm_dir, make_request("jumpToLine", [2]))

        await runner.run_command(editor)

        assert read_response(comm_dir)["warnings"] == ["This editor is not active"]

    @pytest.mark.asyncio
    async def test_select_for_editing_scenario(self, runner, comm_dir):
        editor = BufferEditor("first\nsecond\nhello world!\nlast")
        write_request_file(comm_dir, make_request("selectLineRangeForEditing", [3, 3]))

        await runner.run_command(editor)

        assert read_response(comm_dir)["error"] is None
        assert editor.get_cursor("from") == Position(2, 0)
        assert editor.get_cursor("to") == Position(2, 12)

    @pytest.mark.asyncio
    async def test_fire_and_forget_response_first(self, runner, comm_dir, ten_lines):
        write_request_file(comm_dir, make_request("jumpToLine", [7], wait=False))

        await runner.run_command(ten_lines)
        assert read_response(comm_dir)["error"] is None

        await runner.dispatcher.drain()
        assert ten_lines.get_cursor() == Position(6, 0)


class TestPreDispatchFailures:
    """Failures before dispatch raise and write no response."""

    @pytest.mark.asyncio
    async def test_missing_request(self, runner, comm_dir, ten_lines):
        with pytest.raises(RequestMissingError):
            await runner.run_command(ten_lines)
        assert not comm_dir.response_path.exists()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("age_s", [10, -10])
    async def test_stale_request(self, runner, comm_dir, ten_lines, age_s):
        write_request_file(comm_dir, make_request("jumpToLine", [5]), age_s=age_s)

        with pytest.raises(StaleRequestError):
            await runner.run_command(ten_lines)

        assert not comm_dir.response_path.exists()
        assert ten_lines.get_cursor() == Position(0, 0)

    @pytest.mark.asyncio
    async def test_slot_taken(self, runner, comm_dir, ten_lines):
        original = b'{"returnValue": null, "uuid": "previous", "error": null, "warnings": []}\n'
        comm_dir.response_path.write_bytes(original)
        write_request_file(comm_dir, make_request("jumpToLine", [5]))

        with pytest.raises(ResponseSlotTakenError):
            await runner.run_command(ten_lines)

        assert comm_dir.response_path.read_bytes() == original
        assert ten_lines.get_cursor() == Position(0, 0)

    @pytest.mark.asyncio
    async def test_malformed_request_releases_slot(self, runner, comm_dir, ten_lines):
        write_request_file(comm_dir, "{ this is not json")

        with pytest.raises(RequestParseError):
            await runner.run_command(ten_lines)

        assert not comm_dir.response_path.exists()

        # The next well-formed request goes through
        write_request_file(comm_dir, make_request("jumpToLine", [2]))
        await runner.run_command(ten_lines)
        assert read_response(comm_dir)["error"] is None
