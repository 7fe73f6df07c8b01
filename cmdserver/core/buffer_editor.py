"""In-memory editor implementation.

Provides the Editor API over a plain string buffer. Used by the file
host (``cmdserver serve``), by tests, and by embedders that have no
richer editor to plug in.
"""

import re
from typing import List, Optional, Tuple

from .editor import Editor, Position

_WORD_RE = re.compile(r"\w+")


class BufferEditor(Editor):
    """
    Editor over a text buffer with one selection.

    Positions outside the document are clipped to the nearest valid
    position, the way editor components usually behave.
    """

    def __init__(self, text: str = "", *, file_path: Optional[str] = None, has_focus: bool = True):
        self._lines: List[str] = text.split("\n")
        self.file_path = file_path
        self.has_focus = has_focus
        self._anchor = Position(0, 0)
        self._head = Position(0, 0)
        self.dirty = False

    def __repr__(self):
        return f"BufferEditor(lines={len(self._lines)}, file={self.file_path!r})"

    # ----- document -----
    def line_count(self) -> int:
        return len(self._lines)

    def get_line(self, line: int) -> str:
        if line < 0 or line >= len(self._lines):
            raise IndexError(f"line {line} out of range (0..{len(self._lines) - 1})")
        return self._lines[line]

    def get_value(self) -> str:
        return "\n".join(self._lines)

    def set_value(self, text: str) -> None:
        self._lines = text.split("\n")
        self._anchor = self._head = Position(0, 0)
        self.dirty = True

    def get_range(self, start: Position, end: Position) -> str:
        a, b = sorted((self.pos_to_offset(start), self.pos_to_offset(end)))
        return self.get_value()[a:b]

    def replace_range(self, text: str, start: Position, end: Optional[Position] = None) -> None:
        a = self.pos_to_offset(start)
        b = self.pos_to_offset(end) if end is not None else a
        a, b = sorted((a, b))
        value = self.get_value()
        self._lines = (value[:a] + text + value[b:]).split("\n")
        self.dirty = True
        # keep the selection inside the document
        self._anchor = self.clip_pos(self._anchor)
        self._head = self.clip_pos(self._head)

    # ----- offsets -----
    def clip_pos(self, pos: Position) -> Position:
        line = min(max(int(pos[0]), 0), len(self._lines) - 1)
        ch = min(max(int(pos[1]), 0), len(self._lines[line]))
        return Position(line, ch)

    def pos_to_offset(self, pos: Position) -> int:
        pos = self.clip_pos(pos)
        offset = sum(len(l) + 1 for l in self._lines[:pos.line])
        return offset + pos.ch

    def offset_to_pos(self, offset: int) -> Position:
        offset = max(0, int(offset))
        for i, l in enumerate(self._lines):
            if offset <= len(l):
                return Position(i, offset)
            offset -= len(l) + 1
        return self.last_line_end()

    # ----- cursor/selection -----
    def get_cursor(self, which: str = "head") -> Position:
        if which == "head":
            return self._head
        if which == "anchor":
            return self._anchor
        lo, hi = sorted((self._anchor, self._head))
        if which == "from":
            return lo
        if which == "to":
            return hi
        raise ValueError(f"unknown cursor kind: {which}")

    def set_cursor(self, pos: Position) -> None:
        self._anchor = self._head = self.clip_pos(pos)

    def set_selection(self, anchor: Position, head: Optional[Position] = None) -> None:
        self._anchor = self.clip_pos(anchor)
        self._head = self.clip_pos(head if head is not None else anchor)

    def get_selection(self) -> str:
        return self.get_range(self._anchor, self._head)

    def replace_selection(self, text: str) -> None:
        start = self.get_cursor("from")
        start_offset = self.pos_to_offset(start)
        self.replace_range(text, start, self.get_cursor("to"))
        self.set_cursor(self.offset_to_pos(start_offset + len(text)))

    def word_at(self, pos: Position) -> Optional[Tuple[Position, Position]]:
        pos = self.clip_pos(pos)
        line = self._lines[pos.line]
        for m in _WORD_RE.finditer(line):
            if m.start() <= pos.ch <= m.end():
                return Position(pos.line, m.start()), Position(pos.line, m.end())
        return None
