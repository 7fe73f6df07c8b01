"""
cmdserver - drive editor commands through a shared-filesystem handshake.

An external client writes ``request.json`` into a per-user communication
directory; the host calls ``CommandRunner.run_command`` which executes the
command and writes ``response.json``.
"""

from .runner import CommandRunner
from .core.editor import Editor, Position
from .core.buffer_editor import BufferEditor
from .io.comm_dir import CommunicationDirectory, ensure_communication_directory
from .io.request_file import Request
from .io.response_file import Response

__all__ = [
    "CommandRunner",
    "Editor",
    "Position",
    "BufferEditor",
    "CommunicationDirectory",
    "ensure_communication_directory",
    "Request",
    "Response",
]
