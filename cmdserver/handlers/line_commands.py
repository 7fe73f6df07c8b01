"""
Line command handlers.

Handles commands addressing whole lines: selecting line ranges, copying
lines to the cursor, and inserting empty lines. Line numbers arrive
1-based from the client and are translated to the editor's 0-based
positions here.
"""

from typing import Tuple

from ..core.editor import Editor, Position
from .commands import LineArgs, LineRangeArgs
from .cursor_commands import check_line


def check_line_range(args: LineRangeArgs, editor: Editor) -> None:
    check_line(args.line_from, editor)
    if args.line_to < args.line_from:
        raise ValueError(f"End line {args.line_to} is before start line {args.line_from}")
    check_line(args.line_to, editor)


def range_including_line_break(args: LineRangeArgs, editor: Editor) -> Tuple[Position, Position]:
    """From the start of line_from to the start of the line after line_to."""
    check_line_range(args, editor)
    start = Position(args.line_from - 1, 0)
    end = Position(args.line_to, 0)
    # The last line has no following line break
    if args.line_to >= editor.line_count():
        end = editor.last_line_end()
    return start, end


def range_for_editing(args: LineRangeArgs, editor: Editor) -> Tuple[Position, Position]:
    """From the start of line_from to the end of line_to, line break excluded."""
    check_line_range(args, editor)
    last = args.line_to - 1
    return Position(args.line_from - 1, 0), Position(last, len(editor.get_line(last)))


class LineCommandHandler:
    """Handler for line-oriented commands."""

    async def select_line_range_including_line_break(self, args: LineRangeArgs, editor: Editor) -> None:
        start, end = range_including_line_break(args, editor)
        editor.set_selection(start, end)

    async def select_line_range_for_editing(self, args: LineRangeArgs, editor: Editor) -> None:
        start, end = range_for_editing(args, editor)
        editor.set_selection(start, end)

    async def copy_lines_to_cursor(self, args: LineRangeArgs, editor: Editor) -> None:
        """Copy a line range (with line breaks) over the current selection."""
        start, end = range_including_line_break(args, editor)
        text = editor.get_range(start, end)
        editor.replace_selection(text)

    async def insert_new_line_above(self, args: LineArgs, editor: Editor) -> None:
        """Insert an empty line before the given line and put the cursor on it."""
        check_line(args.line, editor)
        pos = Position(args.line - 1, 0)
        editor.replace_range("\n", pos)
        editor.set_cursor(pos)

    async def insert_new_line_below(self, args: LineArgs, editor: Editor) -> None:
        """Insert an empty line after the given line and put the cursor on it."""
        check_line(args.line, editor)
        line = args.line - 1
        editor.replace_range("\n", Position(line, len(editor.get_line(line))))
        editor.set_cursor(Position(line + 1, 0))
