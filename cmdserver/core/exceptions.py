"""
Exception hierarchy for the command server.

Errors raised before the response slot is reserved propagate out of
``CommandRunner.run_command``; errors raised by command handlers are
caught by the dispatcher and reported in the response document.
"""

from typing import List, Optional


class CommandServerError(Exception):
    """Base class for all command server errors."""


class SecurityError(CommandServerError):
    """The communication channel cannot be trusted."""


class InvalidCommunicationDirectoryError(SecurityError):
    """The communication directory is a symlink, shared, or owned by someone else."""

    def __init__(self, path, reason: str = ""):
        self.path = path
        self.reason = reason
        msg = f"Invalid communication directory: {path}"
        if reason:
            msg = f"{msg} ({reason})"
        super().__init__(msg)


class RequestError(CommandServerError):
    """The request file could not be used."""


class RequestMissingError(RequestError):
    """No request file exists."""


class StaleRequestError(RequestError):
    """The request file is outside the freshness window."""

    def __init__(self, age_ms: float, timeout_ms: int):
        self.age_ms = age_ms
        self.timeout_ms = timeout_ms
        super().__init__(f"Request file is too old ({age_ms:.0f} ms, limit {timeout_ms} ms)")


class RequestParseError(RequestError):
    """The request file is not a valid request document."""


class ResponseSlotTakenError(CommandServerError):
    """A response file already exists; another invocation owns the slot."""


class CommandArgumentError(ValueError):
    """The wire arguments do not match the command's argument shape."""


# ---------- client side ----------

class ClientError(CommandServerError):
    """Base class for errors seen by the external client."""


class ClientTimeoutError(ClientError):
    """No complete response appeared in time."""


class ResponseMismatchError(ClientError):
    """The response belongs to a different request."""


class ResponseParseError(ClientError):
    """The completed response file is not a valid response document."""


class CommandFailedError(ClientError):
    """The server executed the request and reported an error."""

    def __init__(self, message: str, warnings: Optional[List[str]] = None):
        self.warnings = list(warnings or [])
        super().__init__(message)
