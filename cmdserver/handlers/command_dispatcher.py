"""
Command dispatcher for the command server.

Routes a parsed request to the handler registered for its CommandId and
turns the outcome into a Response. Nothing raised by a handler escapes
``dispatch``: errors become ``response.error``, advisory conditions
become ``response.warnings``.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Set

from ..core.editor import Editor
from ..core.exceptions import CommandArgumentError
from ..io.request_file import Request
from ..io.response_file import Response
from .commands import CommandArgs, CommandId, decode_args
from .cursor_commands import CursorCommandHandler
from .line_commands import LineCommandHandler
from .query_commands import QueryCommandHandler

log = logging.getLogger(__name__)

NOT_ACTIVE_WARNING = "This editor is not active"

Handler = Callable[[CommandArgs, Editor], Awaitable[Any]]


class CommandDispatcher:
    """
    Central command dispatcher.

    Every CommandId has exactly one handler; construction fails if the
    table is incomplete, so an unknown command can only come from the
    wire, never from a missing registration.
    """

    def __init__(self):
        self.cursor_handler = CursorCommandHandler()
        self.line_handler = LineCommandHandler()
        self.query_handler = QueryCommandHandler()

        self._handlers: Dict[CommandId, Handler] = {
            CommandId.JUMP_TO_LINE: self.cursor_handler.jump_to_line,
            CommandId.SET_SELECTION: self.cursor_handler.set_selection,
            CommandId.SELECT_WORD: self.cursor_handler.select_word,
            CommandId.SELECT_LINE_RANGE_INCLUDING_LINE_BREAK: self.line_handler.select_line_range_including_line_break,
            CommandId.SELECT_LINE_RANGE_FOR_EDITING: self.line_handler.select_line_range_for_editing,
            CommandId.COPY_LINES_TO_CURSOR: self.line_handler.copy_lines_to_cursor,
            CommandId.INSERT_NEW_LINE_ABOVE: self.line_handler.insert_new_line_above,
            CommandId.INSERT_NEW_LINE_BELOW: self.line_handler.insert_new_line_below,
            CommandId.GET_TEXT_FLOW_CONTEXT: self.query_handler.get_text_flow_context,
            CommandId.GET_FILENAME: self.query_handler.get_filename,
            CommandId.GET_SELECTED_TEXT: self.query_handler.get_selected_text,
        }
        missing = [c.value for c in CommandId if c not in self._handlers]
        if missing:
            raise RuntimeError(f"no handler registered for: {', '.join(missing)}")

        # Strong references to fire-and-forget tasks until they finish
        self._detached: Set[asyncio.Task] = set()

    def handler_for(self, command_id: CommandId) -> Handler:
        return self._handlers[command_id]

    async def dispatch(self, request: Request, editor: Editor) -> Response:
        """
        Execute a request against an editor.

        Args:
            request: Parsed request
            editor: Editing context the command applies to

        Returns:
            Response with uuid copied from the request. ``return_value`` is
            set only if the request asked for it and the command succeeded.
        """
        response = Response(uuid=request.uuid)

        # Advisory only; the command still runs
        if not editor.has_focus:
            response.warnings.append(NOT_ACTIVE_WARNING)

        try:
            command_id = CommandId.parse(request.command_id)
            if command_id is None:
                raise RuntimeError(f"Unknown command ID: {request.command_id}")
            args = decode_args(command_id, request.args)
            handler = self._handlers[command_id]

            if request.return_command_output:
                response.return_value = await handler(args, editor)
            elif request.wait_for_finish:
                await handler(args, editor)
            else:
                self._detach(command_id, handler(args, editor))
        except CommandArgumentError as e:
            log.warning("Bad arguments for cmd=%s: %s", request.command_id, e)
            response.error = f"Invalid arguments for {request.command_id}: {e}"
        except Exception as e:
            log.warning("Command %s failed: %s", request.command_id, e)
            response.error = str(e) or type(e).__name__

        return response

    def _detach(self, command_id: CommandId, coro: Awaitable[Any]) -> None:
        """
        Run a handler without waiting for it.

        The response is written before the handler runs. Failures are
        logged and otherwise dropped; the client asked for neither the
        result nor completion.
        """
        task = asyncio.ensure_future(coro)
        self._detached.add(task)

        def _done(t: asyncio.Task) -> None:
            self._detached.discard(t)
            if t.cancelled():
                return
            exc = t.exception()
            if exc is not None:
                log.error("Detached command %s failed: %s", command_id.value, exc)

        task.add_done_callback(_done)

    async def drain(self) -> None:
        """Wait for all detached commands to finish."""
        if self._detached:
            await asyncio.gather(*list(self._detached), return_exceptions=True)
