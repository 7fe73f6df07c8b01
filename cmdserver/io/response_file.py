"""
Response file writing.

``response.json`` is created with exclusive-create semantics at the start
of every invocation. That create is the only mutual exclusion in the
whole system: while the file exists, no other invocation can reserve the
slot, and the client must delete it before issuing a new request.

The document is written once, followed by a single newline. A client
polling the file treats content ending in ``\\n`` as complete.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..core.exceptions import ResponseSlotTakenError

log = logging.getLogger(__name__)


@dataclass
class Response:
    uuid: str
    return_value: Any = None
    error: Optional[str] = None
    warnings: List[str] = field(default_factory=list)

    def to_json(self) -> Dict[str, Any]:
        return {
            "returnValue": self.return_value,
            "uuid": self.uuid,
            "error": self.error,
            "warnings": list(self.warnings),
        }

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "Response":
        return cls(
            uuid=data.get("uuid"),
            return_value=data.get("returnValue"),
            error=data.get("error"),
            warnings=list(data.get("warnings") or []),
        )


def encode_response(response: Response) -> str:
    """Serialize a response, terminated by the completion newline."""
    try:
        body = json.dumps(response.to_json())
    except (TypeError, ValueError) as e:
        # The return value is the only field that can hold arbitrary objects
        log.warning("Return value is not JSON serializable: %s", e)
        response.return_value = None
        response.error = f"Return value is not JSON serializable: {e}"
        body = json.dumps(response.to_json())
    return body + "\n"


class ResponseSlot:
    """
    Exclusive handle on ``response.json`` for one invocation.

    Use ``ResponseSlot.open(path)`` to reserve, then either ``write`` the
    response or ``release`` the reservation. Used as a context manager,
    leaving the block without writing releases the slot.
    """

    def __init__(self, path: Path, fd: int):
        self.path = path
        self._fd: Optional[int] = fd
        self.written = False

    @classmethod
    def open(cls, path: Union[str, Path], mode: int = 0o600) -> "ResponseSlot":
        """
        Create the response file exclusively.

        Raises:
            ResponseSlotTakenError: If the response file already exists
        """
        p = Path(path)
        try:
            fd = os.open(p, os.O_WRONLY | os.O_CREAT | os.O_EXCL, mode)
        except FileExistsError:
            raise ResponseSlotTakenError(f"Response file already exists: {p}")
        log.debug("Reserved response slot %s", p)
        return cls(p, fd)

    @property
    def closed(self) -> bool:
        return self._fd is None

    def write(self, response: Response) -> None:
        """Write the response document plus trailing newline, then close."""
        if self._fd is None:
            raise RuntimeError("response slot is already closed")
        data = encode_response(response).encode("utf-8")
        try:
            view = memoryview(data)
            while view:
                n = os.write(self._fd, view)
                view = view[n:]
            self.written = True
        finally:
            self._close()

    def release(self) -> None:
        """Close the handle and remove the empty reservation."""
        if self._fd is None:
            return
        self._close()
        if not self.written:
            try:
                self.path.unlink()
            except FileNotFoundError:
                pass
            log.debug("Released response slot %s", self.path)

    def _close(self) -> None:
        fd, self._fd = self._fd, None
        if fd is not None:
            os.close(fd)

    def __enter__(self) -> "ResponseSlot":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()
