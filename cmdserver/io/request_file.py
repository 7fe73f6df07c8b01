"""
Request file reading and validation.

The external client writes ``request.json`` and then triggers the host.
A request is only honoured if its modification time is within the
timeout window of the current time, in either direction, so a leftover
request from an earlier unconsumed invocation is never replayed.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..core.exceptions import RequestMissingError, RequestParseError, StaleRequestError

log = logging.getLogger(__name__)


@dataclass
class Request:
    uuid: str
    command_id: str
    args: List[Any] = field(default_factory=list)
    return_command_output: bool = False
    wait_for_finish: bool = False

    @classmethod
    def from_json(cls, data: Any) -> "Request":
        """Decode the camelCase wire object. Raises RequestParseError on bad shape."""
        if not isinstance(data, dict):
            raise RequestParseError("request must be a JSON object")

        uuid = data.get("uuid")
        if not isinstance(uuid, str):
            raise RequestParseError("'uuid' must be a string")

        command_id = data.get("commandId")
        if not isinstance(command_id, str):
            raise RequestParseError("'commandId' must be a string")

        args = data.get("args", [])
        if args is None:
            args = []
        if not isinstance(args, list):
            raise RequestParseError("'args' must be a list")

        return cls(
            uuid=uuid,
            command_id=command_id,
            args=args,
            return_command_output=_bool_flag(data, "returnCommandOutput"),
            wait_for_finish=_bool_flag(data, "waitForFinish"),
        )

    def to_json(self) -> Dict[str, Any]:
        return {
            "uuid": self.uuid,
            "commandId": self.command_id,
            "args": list(self.args),
            "returnCommandOutput": self.return_command_output,
            "waitForFinish": self.wait_for_finish,
        }


def _bool_flag(data: Dict[str, Any], key: str) -> bool:
    # A missing flag is False; anything else must be a real JSON boolean
    value = data.get(key, False)
    if not isinstance(value, bool):
        raise RequestParseError(f"'{key}' must be a boolean")
    return value


def request_age_ms(path: Union[str, Path], now: Optional[float] = None) -> float:
    """Signed age of the request file in milliseconds (negative if from the future)."""
    try:
        st = Path(path).stat()
    except FileNotFoundError:
        raise RequestMissingError(f"Request file not found: {path}")
    if now is None:
        now = time.time()
    return now * 1000.0 - st.st_mtime_ns / 1_000_000.0


def check_request_fresh(path: Union[str, Path], timeout_ms: int) -> None:
    """
    Verify the request file exists and was written within the timeout window.

    Raises:
        RequestMissingError: If the request file does not exist
        StaleRequestError: If |mtime - now| exceeds timeout_ms
    """
    age = request_age_ms(path)
    if abs(age) > timeout_ms:
        log.warning("Command request file is too old: %s (age=%.0f ms)", path, age)
        raise StaleRequestError(age, timeout_ms)


def read_request(path: Union[str, Path]) -> Request:
    """
    Read and decode the request file.

    Raises:
        RequestMissingError: If the file vanished since the freshness check
        RequestParseError: If the content is not a valid request document
    """
    p = Path(path)
    try:
        raw = p.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise RequestMissingError(f"Request file not found: {p}")
    except UnicodeDecodeError as e:
        raise RequestParseError(f"request is not valid UTF-8: {e}") from e

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise RequestParseError(f"request is not valid JSON: {e}") from e

    return Request.from_json(data)
