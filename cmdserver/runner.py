"""
Command runner: the entry points the host application calls.

``initialize()`` runs once at startup and validates the communication
directory. ``run_command(editor)`` runs once per external trigger: it
checks the request is fresh, reserves the response slot, parses the
request, dispatches it and writes the response.

Anything that fails before the slot is reserved (missing or stale
request, slot already taken) raises out of ``run_command`` and no
response is written. A request that cannot be parsed also raises, after
the reservation has been released. Everything after that is reported in
the response document.
"""

from __future__ import annotations

import logging
from typing import Optional

from .core.editor import Editor
from .handlers.command_dispatcher import CommandDispatcher
from .io.comm_dir import CommunicationDirectory, ensure_communication_directory
from .io.request_file import check_request_fresh, read_request
from .io.response_file import Response, ResponseSlot
from .utils.config import SETTINGS, Settings

log = logging.getLogger(__name__)


class CommandRunner:
    def __init__(self, settings: Optional[Settings] = None, comm_dir: Optional[CommunicationDirectory] = None):
        self.settings = settings or SETTINGS
        self.comm_dir = comm_dir
        self._dispatcher = CommandDispatcher()

    @property
    def initialized(self) -> bool:
        return self.comm_dir is not None

    @property
    def dispatcher(self) -> CommandDispatcher:
        return self._dispatcher

    def initialize(self) -> CommunicationDirectory:
        """
        Prepare the runner for reading and writing the request and response files.

        Raises:
            InvalidCommunicationDirectoryError: If the directory is unsafe.
                The runner stays uninitialized and initialize() may be retried.
        """
        log.info("Initializing command runner.")
        self.comm_dir = None
        comm_dir = ensure_communication_directory(self.settings)
        self.comm_dir = comm_dir
        log.info("Initialized command runner.")
        return comm_dir

    async def run_command(self, editor: Editor) -> Response:
        """
        Read the pending request, execute it and write the response file.

        If the request asks for neither the command output nor completion,
        the response is written before the command finishes executing.

        Returns:
            The response that was written

        Raises:
            RuntimeError: If initialize() has not succeeded
            RequestMissingError: If there is no request file
            StaleRequestError: If the request is outside the timeout window
            ResponseSlotTakenError: If response.json already exists
            RequestParseError: If the request cannot be parsed
        """
        if self.comm_dir is None:
            raise RuntimeError("Command runner is not initialized")

        request_path = self.comm_dir.request_path
        check_request_fresh(request_path, self.settings.request_timeout_ms)

        # Reserve the slot before reading, so competing instances fail fast
        slot = ResponseSlot.open(self.comm_dir.response_path, mode=self.settings.response_mode)
        try:
            request = read_request(request_path)
        except Exception as e:
            slot.release()
            log.warning("Cannot read request %s: %s", request_path, e)
            raise

        log.info("Running cmd=%s uuid=%s", request.command_id, request.uuid)
        try:
            response = await self._dispatcher.dispatch(request, editor)
        except BaseException:
            # dispatch() reports command errors itself; this is cancellation
            slot.release()
            raise

        slot.write(response)
        if response.error:
            log.info("cmd=%s uuid=%s finished with error: %s", request.command_id, request.uuid, response.error)
        else:
            log.debug("cmd=%s uuid=%s finished", request.command_id, request.uuid)
        return response
