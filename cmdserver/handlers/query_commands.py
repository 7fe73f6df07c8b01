"""
Query command handlers.

Read-only commands whose return value is the point: the TextFlow
context, the open file's path and the selected text.
"""

import os
from typing import Any, Dict

from ..core.editor import Editor, Position
from .commands import NoArgs

# Text returned around the selection; the selection itself does not count
MAX_TEXT_LENGTH = 20000


class QueryCommandHandler:
    """Handler for commands that read editor state."""

    def __init__(self, max_text_length: int = MAX_TEXT_LENGTH):
        self.max_text_length = max_text_length

    async def get_text_flow_context(self, args: NoArgs, editor: Editor) -> Dict[str, Any]:
        """
        Get the text surrounding the selection, for TextFlow.

        Returns:
            Dictionary containing:
                - text: document text from textStartOffset, up to
                  max_text_length / 2 characters either side of the selection
                - selectionFromOffset: selection start as a document offset
                - selectionToOffset: selection end as a document offset
                - textStartOffset: document offset of the first char of text
        """
        selection_from = editor.pos_to_offset(editor.get_cursor("from"))
        selection_to = editor.pos_to_offset(editor.get_cursor("to"))
        end_offset = editor.pos_to_offset(editor.last_line_end())

        half = self.max_text_length // 2
        text_start = max(0, selection_from - half)
        text_end = min(end_offset, selection_to + half)
        text = editor.get_range(editor.offset_to_pos(text_start), editor.offset_to_pos(text_end))

        return {
            "text": text,
            "selectionFromOffset": selection_from,
            "selectionToOffset": selection_to,
            "textStartOffset": text_start,
        }

    async def get_filename(self, args: NoArgs, editor: Editor) -> str:
        """
        Absolute path of the file open in the editor.

        Raises:
            RuntimeError: If no file is open
        """
        if not editor.file_path:
            raise RuntimeError("No file is open in this editor")
        return os.path.abspath(editor.file_path)

    async def get_selected_text(self, args: NoArgs, editor: Editor) -> str:
        return editor.get_selection()
