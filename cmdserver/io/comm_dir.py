"""
Communication directory provisioning.

The directory holding ``request.json`` and ``response.json`` lives in the
system temp root, which is shared between users on most Unix systems.
Before the channel is used, the directory is created owner-only and then
re-inspected without following symlinks, so a pre-planted symlink or a
directory created by another user is refused.
"""

from __future__ import annotations

import logging
import os
import stat
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..core.exceptions import InvalidCommunicationDirectoryError
from ..utils.config import SETTINGS, Settings

log = logging.getLogger(__name__)

REQUEST_FILENAME = "request.json"
RESPONSE_FILENAME = "response.json"


@dataclass(frozen=True)
class CommunicationDirectory:
    path: Path

    @property
    def request_path(self) -> Path:
        return self.path / REQUEST_FILENAME

    @property
    def response_path(self) -> Path:
        return self.path / RESPONSE_FILENAME


def current_uid() -> int:
    """Numeric user id, or -1 where the platform has none (Windows)."""
    getuid = getattr(os, "getuid", None)
    if getuid is None:
        return -1
    return getuid()


def communication_dir_path(settings: Optional[Settings] = None, uid: Optional[int] = None) -> Path:
    """
    Compute the communication directory path without touching the filesystem.

    On Windows the temp root is already user-specific and there is no
    numeric uid, so no suffix is added. Clients use the same rule.
    """
    settings = settings or SETTINGS
    if uid is None:
        uid = current_uid()
    root = settings.temp_root or tempfile.gettempdir()
    suffix = f"-{uid}" if uid >= 0 else ""
    return Path(root) / f"{settings.dir_name}{suffix}"


def ensure_communication_directory(settings: Optional[Settings] = None) -> CommunicationDirectory:
    """
    Create the communication directory if needed and verify it is safe.

    Returns:
        The validated CommunicationDirectory

    Raises:
        InvalidCommunicationDirectoryError: If the path is not a real
            directory, is a symlink, is writable by others, or is owned
            by another user
    """
    settings = settings or SETTINGS
    uid = current_uid()
    path = communication_dir_path(settings, uid)

    log.info("Creating communication directory: %s", path)
    try:
        path.mkdir(parents=True, exist_ok=True, mode=settings.dir_mode)
    except FileExistsError:
        raise InvalidCommunicationDirectoryError(path, "path exists and is not a directory")

    st = os.lstat(path)
    if stat.S_ISLNK(st.st_mode):
        raise InvalidCommunicationDirectoryError(path, "is a symlink")
    if not stat.S_ISDIR(st.st_mode):
        raise InvalidCommunicationDirectoryError(path, "not a directory")
    if st.st_mode & stat.S_IWOTH:
        raise InvalidCommunicationDirectoryError(path, "writable by other users")
    # uid < 0 on Windows; ownership is not checked there
    if uid >= 0 and st.st_uid != uid:
        raise InvalidCommunicationDirectoryError(path, f"owned by uid {st.st_uid}")

    log.info("Communication directory ready: %s", path)
    return CommunicationDirectory(path)
