"""
File-backed host for the command runner.

Stands in for the editor application: serves one text file through a
BufferEditor and triggers ``run_command`` whenever a new request file
appears. The core itself never polls; this loop plays the role of the
keyboard shortcut in a real editor.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional, Tuple

from .core.buffer_editor import BufferEditor
from .core.exceptions import CommandServerError
from .io.response_file import Response
from .runner import CommandRunner
from .utils.config import SETTINGS, Settings

log = logging.getLogger(__name__)


class FileHost:
    def __init__(self, path, settings: Optional[Settings] = None, runner: Optional[CommandRunner] = None):
        self.settings = settings or SETTINGS
        self.path = Path(path).resolve()
        self.runner = runner or CommandRunner(self.settings)
        text = self.path.read_text(encoding="utf-8") if self.path.exists() else ""
        self.editor = BufferEditor(text, file_path=str(self.path))
        self._last_request: Optional[Tuple[int, bytes]] = None

    def _request_key(self) -> Optional[Tuple[int, bytes]]:
        # Coarse mtimes can repeat across requests; the content carries the uuid
        path = self.runner.comm_dir.request_path
        try:
            return path.stat().st_mtime_ns, path.read_bytes()
        except FileNotFoundError:
            return None

    def save(self) -> None:
        if self.editor.dirty:
            self.path.write_text(self.editor.get_value(), encoding="utf-8")
            self.editor.dirty = False
            log.debug("Saved %s", self.path)

    async def handle_once(self) -> Optional[Response]:
        """Run the pending request if it has not been seen yet."""
        key = self._request_key()
        if key is None or key == self._last_request:
            return None
        self._last_request = key
        try:
            response = await self.runner.run_command(self.editor)
        except CommandServerError as e:
            log.warning("Request rejected: %s", e)
            return None
        # Let fire-and-forget commands finish before saving
        await self.runner.dispatcher.drain()
        self.save()
        return response

    async def serve(self, stop_event: Optional[asyncio.Event] = None) -> None:
        if not self.runner.initialized:
            self.runner.initialize()
        # A request already on disk at startup belongs to an earlier session
        self._last_request = self._request_key()
        log.info("Serving %s via %s", self.path, self.runner.comm_dir.path)

        stop_event = stop_event or asyncio.Event()
        while not stop_event.is_set():
            try:
                await self.handle_once()
            except Exception:
                log.exception("Command handling crashed; continuing.")
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=self.settings.poll_interval_s)
            except asyncio.TimeoutError:
                pass
        log.info("Host stopped.")
