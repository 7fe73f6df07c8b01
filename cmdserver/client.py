"""
External client side of the file protocol.

Writes ``request.json``, optionally triggers the host, then polls
``response.json`` until it ends with the completion newline.
"""

import asyncio
import json
import logging
import os
import time
import uuid as uuidlib
from contextlib import suppress
from typing import Any, Callable, List, Optional

from .core.exceptions import ClientTimeoutError, CommandFailedError, ResponseMismatchError, ResponseParseError
from .io.comm_dir import CommunicationDirectory
from .io.request_file import Request
from .io.response_file import Response
from .utils.config import SETTINGS

log = logging.getLogger(__name__)


def write_request(comm_dir: CommunicationDirectory, request: Request) -> None:
    """Write the request atomically so the host never reads a partial file."""
    tmp = comm_dir.path / f".request.{os.getpid()}.tmp"
    tmp.write_text(json.dumps(request.to_json()), encoding="utf-8")
    os.replace(tmp, comm_dir.request_path)


def clear_response(comm_dir: CommunicationDirectory) -> None:
    """Remove a leftover response so the host can reserve the slot."""
    with suppress(FileNotFoundError):
        comm_dir.response_path.unlink()


def _decode_response(comm_dir: CommunicationDirectory, raw: str) -> Response:
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ResponseParseError(f"Response is not valid JSON: {comm_dir.response_path} ({e})") from e
    if not isinstance(data, dict):
        raise ResponseParseError(f"Response is not a JSON object: {comm_dir.response_path}")
    return Response.from_json(data)


async def wait_for_response(comm_dir: CommunicationDirectory, timeout: float, poll_interval: float) -> Response:
    """
    Poll until a complete response document is present.

    Raises:
        ClientTimeoutError: If no complete response appears within timeout
        ResponseParseError: If the completed response cannot be decoded
    """
    deadline = time.monotonic() + timeout
    while True:
        try:
            raw = comm_dir.response_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raw = ""
        # Content without the trailing newline is still being written
        if raw.endswith("\n"):
            return _decode_response(comm_dir, raw)
        if time.monotonic() >= deadline:
            raise ClientTimeoutError(f"No response within {timeout:.1f}s: {comm_dir.response_path}")
        await asyncio.sleep(poll_interval)


async def send_command(
    comm_dir: CommunicationDirectory,
    command_id: str,
    args: Optional[List[Any]] = None,
    *,
    return_output: bool = False,
    wait_for_finish: bool = True,
    trigger: Optional[Callable[[], Any]] = None,
    timeout: Optional[float] = None,
    poll_interval: Optional[float] = None,
) -> Any:
    """
    Send a command to the host and wait for its response.

    Args:
        comm_dir: Communication directory shared with the host
        command_id: Wire command id, e.g. "jumpToLine"
        args: Positional arguments (1-based line numbers)
        return_output: Ask the host to return the command's value
        wait_for_finish: Ask the host to finish the command before responding
        trigger: Called after the request is written, to wake the host.
            May be a coroutine function.
        timeout: Seconds to wait for the response

    Returns:
        The command's return value (None unless return_output is set)

    Raises:
        ClientTimeoutError: If the host does not respond in time
        ResponseMismatchError: If the response belongs to another request
        ResponseParseError: If the response file holds no valid document
        CommandFailedError: If the host reports an error
    """
    timeout = SETTINGS.client_timeout_s if timeout is None else timeout
    poll_interval = SETTINGS.poll_interval_s if poll_interval is None else poll_interval

    request = Request(
        uuid=str(uuidlib.uuid4()),
        command_id=command_id,
        args=list(args or []),
        return_command_output=return_output,
        wait_for_finish=wait_for_finish,
    )

    clear_response(comm_dir)
    write_request(comm_dir, request)
    log.debug("Wrote request cmd=%s uuid=%s", command_id, request.uuid)

    if trigger is not None:
        result = trigger()
        if asyncio.iscoroutine(result):
            await result

    response = await wait_for_response(comm_dir, timeout, poll_interval)
    clear_response(comm_dir)

    if response.uuid != request.uuid:
        raise ResponseMismatchError(f"Response uuid {response.uuid!r} does not match request {request.uuid!r}")
    for w in response.warnings:
        log.warning("Server warning: %s", w)
    if response.error:
        raise CommandFailedError(response.error, response.warnings)
    return response.return_value
