"""
Cursor and selection command handlers.

Handles commands that move the cursor or change the selection without
modifying the document: jumpToLine, setSelection and selectWord.
"""

import logging

from ..core.editor import Editor, Position
from .commands import LineArgs, NoArgs, OffsetRangeArgs

log = logging.getLogger(__name__)


def check_line(line: int, editor: Editor) -> None:
    """Validate a 1-based line number against the document."""
    if line < 1:
        raise ValueError(f"Line number must be greater than 0, but got: {line}")
    if line > editor.line_count():
        raise ValueError(f"Line number {line} is past the end of the document ({editor.line_count()} lines)")


class CursorCommandHandler:
    """Handler for cursor/selection commands."""

    async def jump_to_line(self, args: LineArgs, editor: Editor) -> None:
        """
        Move the cursor to the start of a line.

        Args:
            args: 1-based line number

        Raises:
            ValueError: If the line is < 1 or past the end of the document
        """
        check_line(args.line, editor)
        # Input lines are 1-based, editor lines are 0-based
        editor.set_cursor(Position(args.line - 1, 0))

    async def set_selection(self, args: OffsetRangeArgs, editor: Editor) -> None:
        """
        Select between two character offsets into the document.

        Raises:
            ValueError: If an offset is negative
        """
        if args.offset_from < 0 or args.offset_to < 0:
            raise ValueError(f"Offsets must not be negative, but got: {args.offset_from}, {args.offset_to}")
        editor.set_selection(editor.offset_to_pos(args.offset_from), editor.offset_to_pos(args.offset_to))

    async def select_word(self, args: NoArgs, editor: Editor) -> None:
        """Select the word under the cursor. Does nothing if there is none."""
        cursor = editor.get_cursor()
        word = editor.word_at(cursor)
        if word is None:
            log.debug("selectWord: no word at %s", cursor)
            return
        editor.set_selection(word[0], word[1])
