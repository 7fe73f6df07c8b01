"""
Unit tests for command id and argument decoding.
"""

import pytest

from cmdserver.core.exceptions import CommandArgumentError
from cmdserver.handlers.commands import (
    CommandId,
    LineArgs,
    LineRangeArgs,
    NoArgs,
    OffsetRangeArgs,
    decode_args,
)


class TestCommandId:
    def test_parse_known(self):
        assert CommandId.parse("jumpToLine") is CommandId.JUMP_TO_LINE

    def test_parse_unknown(self):
        assert CommandId.parse("selectLineRange") is None

    def test_wire_values(self):
        assert {c.value for c in CommandId} == {
            "jumpToLine",
            "selectLineRangeIncludingLineBreak",
            "selectLineRangeForEditing",
            "copyLinesToCursor",
            "setSelection",
            "getTextFlowContext",
            "getFilename",
            "getSelectedText",
            "selectWord",
            "insertNewLineAbove",
            "insertNewLineBelow",
        }


class TestDecodeArgs:
    def test_line(self):
        assert decode_args(CommandId.JUMP_TO_LINE, [7]) == LineArgs(7)

    def test_integral_float(self):
        assert decode_args(CommandId.JUMP_TO_LINE, [7.0]) == LineArgs(7)

    def test_line_range_single(self):
        assert decode_args(CommandId.SELECT_LINE_RANGE_FOR_EDITING, [4]) == LineRangeArgs(4, 4)

    def test_line_range_null_end(self):
        assert decode_args(CommandId.COPY_LINES_TO_CURSOR, [4, None]) == LineRangeArgs(4, 4)

    def test_line_range(self):
        assert decode_args(CommandId.SELECT_LINE_RANGE_INCLUDING_LINE_BREAK, [2, 6]) == LineRangeArgs(2, 6)

    def test_offsets(self):
        assert decode_args(CommandId.SET_SELECTION, [0, 12]) == OffsetRangeArgs(0, 12)

    def test_no_args(self):
        assert decode_args(CommandId.GET_FILENAME, []) == NoArgs()

    @pytest.mark.parametrize("command_id,args", [
        (CommandId.JUMP_TO_LINE, []),
        (CommandId.JUMP_TO_LINE, [1, 2]),
        (CommandId.JUMP_TO_LINE, ["1"]),
        (CommandId.JUMP_TO_LINE, [True]),
        (CommandId.JUMP_TO_LINE, [1.5]),
        (CommandId.SET_SELECTION, [1]),
        (CommandId.SELECT_LINE_RANGE_FOR_EDITING, [1, 2, 3]),
    ])
    def test_rejects(self, command_id, args):
        with pytest.raises(CommandArgumentError):
            decode_args(command_id, args)
