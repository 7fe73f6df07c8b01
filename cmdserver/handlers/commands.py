"""
Command identifiers and typed argument payloads.

The wire format carries ``commandId`` as free text and ``args`` as an
untyped list. Both are decoded here, at the boundary, into a CommandId
member and one of the argument dataclasses below; handlers only ever
see the typed form.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Type, Union

from ..core.exceptions import CommandArgumentError


class CommandId(str, Enum):
    JUMP_TO_LINE = "jumpToLine"
    SELECT_LINE_RANGE_INCLUDING_LINE_BREAK = "selectLineRangeIncludingLineBreak"
    SELECT_LINE_RANGE_FOR_EDITING = "selectLineRangeForEditing"
    COPY_LINES_TO_CURSOR = "copyLinesToCursor"
    SET_SELECTION = "setSelection"
    GET_TEXT_FLOW_CONTEXT = "getTextFlowContext"
    GET_FILENAME = "getFilename"
    GET_SELECTED_TEXT = "getSelectedText"
    SELECT_WORD = "selectWord"
    INSERT_NEW_LINE_ABOVE = "insertNewLineAbove"
    INSERT_NEW_LINE_BELOW = "insertNewLineBelow"

    @classmethod
    def parse(cls, text: str) -> Optional["CommandId"]:
        """Return the member for a wire id, or None if unknown."""
        try:
            return cls(text)
        except ValueError:
            return None


@dataclass(frozen=True)
class NoArgs:
    @classmethod
    def decode(cls, args: List[Any]) -> "NoArgs":
        # extra arguments are ignored
        return cls()


@dataclass(frozen=True)
class LineArgs:
    line: int

    @classmethod
    def decode(cls, args: List[Any]) -> "LineArgs":
        _require_count(args, 1, 1)
        return cls(line=_int_arg(args, 0, "line"))


@dataclass(frozen=True)
class LineRangeArgs:
    line_from: int
    line_to: int

    @classmethod
    def decode(cls, args: List[Any]) -> "LineRangeArgs":
        _require_count(args, 1, 2)
        line_from = _int_arg(args, 0, "lineFrom")
        # A missing, null or zero lineTo means a single line
        if len(args) < 2 or args[1] is None or args[1] == 0:
            return cls(line_from=line_from, line_to=line_from)
        return cls(line_from=line_from, line_to=_int_arg(args, 1, "lineTo"))


@dataclass(frozen=True)
class OffsetRangeArgs:
    offset_from: int
    offset_to: int

    @classmethod
    def decode(cls, args: List[Any]) -> "OffsetRangeArgs":
        _require_count(args, 2, 2)
        return cls(
            offset_from=_int_arg(args, 0, "offsetFrom"),
            offset_to=_int_arg(args, 1, "offsetTo"),
        )


CommandArgs = Union[NoArgs, LineArgs, LineRangeArgs, OffsetRangeArgs]

ARG_TYPES: Dict[CommandId, Type] = {
    CommandId.JUMP_TO_LINE: LineArgs,
    CommandId.SELECT_LINE_RANGE_INCLUDING_LINE_BREAK: LineRangeArgs,
    CommandId.SELECT_LINE_RANGE_FOR_EDITING: LineRangeArgs,
    CommandId.COPY_LINES_TO_CURSOR: LineRangeArgs,
    CommandId.SET_SELECTION: OffsetRangeArgs,
    CommandId.GET_TEXT_FLOW_CONTEXT: NoArgs,
    CommandId.GET_FILENAME: NoArgs,
    CommandId.GET_SELECTED_TEXT: NoArgs,
    CommandId.SELECT_WORD: NoArgs,
    CommandId.INSERT_NEW_LINE_ABOVE: LineArgs,
    CommandId.INSERT_NEW_LINE_BELOW: LineArgs,
}


def decode_args(command_id: CommandId, args: List[Any]) -> CommandArgs:
    """
    Decode the wire argument list for a command.

    Raises:
        CommandArgumentError: If the arity or types do not match
    """
    return ARG_TYPES[command_id].decode(list(args or []))


def _require_count(args: List[Any], lo: int, hi: int) -> None:
    if not lo <= len(args) <= hi:
        expected = str(lo) if lo == hi else f"{lo} to {hi}"
        raise CommandArgumentError(f"expected {expected} argument(s), got {len(args)}")


def _int_arg(args: List[Any], index: int, name: str) -> int:
    value = args[index]
    # bool is an int subclass but never a valid line/offset
    if isinstance(value, bool):
        raise CommandArgumentError(f"'{name}' must be an integer, got {value!r}")
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if not isinstance(value, int):
        raise CommandArgumentError(f"'{name}' must be an integer, got {value!r}")
    return value
