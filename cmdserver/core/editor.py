"""Editor interface used by command handlers.

The host application owns the real editor; command handlers only talk to
it through this interface. Positions are zero-based ``(line, ch)`` pairs,
mirroring the editor API of the host.
"""

from abc import ABC, abstractmethod
from typing import NamedTuple, Optional, Tuple


class Position(NamedTuple):
    line: int
    ch: int


class Editor(ABC):
    """
    Editing context handed to each command invocation.

    ``has_focus`` tells the dispatcher whether this editor is the active
    one; ``file_path`` is the absolute path of the open file, if any.
    """

    has_focus: bool = True
    file_path: Optional[str] = None

    # ----- document -----
    @abstractmethod
    def line_count(self) -> int: ...

    @abstractmethod
    def get_line(self, line: int) -> str: ...

    @abstractmethod
    def get_value(self) -> str: ...

    @abstractmethod
    def get_range(self, start: Position, end: Position) -> str: ...

    @abstractmethod
    def replace_range(self, text: str, start: Position, end: Optional[Position] = None) -> None: ...

    # ----- offsets -----
    @abstractmethod
    def pos_to_offset(self, pos: Position) -> int: ...

    @abstractmethod
    def offset_to_pos(self, offset: int) -> Position: ...

    # ----- cursor/selection -----
    @abstractmethod
    def get_cursor(self, which: str = "head") -> Position:
        """which: 'from' | 'to' | 'head' | 'anchor'"""

    @abstractmethod
    def set_cursor(self, pos: Position) -> None: ...

    @abstractmethod
    def set_selection(self, anchor: Position, head: Optional[Position] = None) -> None: ...

    @abstractmethod
    def get_selection(self) -> str: ...

    @abstractmethod
    def replace_selection(self, text: str) -> None: ...

    @abstractmethod
    def word_at(self, pos: Position) -> Optional[Tuple[Position, Position]]: ...

    # ----- helpers shared by all implementations -----
    def last_line_end(self) -> Position:
        last = self.line_count() - 1
        return Position(last, len(self.get_line(last)))
