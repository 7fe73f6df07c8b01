import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_DIR_NAME = "obsidian-command-server"

# Override the system temp root (mostly useful for tests and sandboxes)
DEFAULT_TEMP_ROOT = os.environ.get("CMDSERVER_TMPDIR") or None

# Requests older (or newer) than this are rejected
DEFAULT_TIMEOUT_MS = int(os.environ.get("CMDSERVER_TIMEOUT_MS", "3000"))

DEFAULT_LOG_LEVEL = os.environ.get("CMDSERVER_LOGLEVEL", "INFO")

# Client/host polling
DEFAULT_POLL_INTERVAL_S = float(os.environ.get("CMDSERVER_POLL_INTERVAL_S", "0.05"))
DEFAULT_CLIENT_TIMEOUT_S = float(os.environ.get("CMDSERVER_CLIENT_TIMEOUT_S", "5.0"))

@dataclass
class Settings:
    dir_name: str = DEFAULT_DIR_NAME
    temp_root: Optional[str] = DEFAULT_TEMP_ROOT
    dir_mode: int = 0o770
    response_mode: int = 0o600
    request_timeout_ms: int = DEFAULT_TIMEOUT_MS
    log_level: str = DEFAULT_LOG_LEVEL
    poll_interval_s: float = DEFAULT_POLL_INTERVAL_S
    client_timeout_s: float = DEFAULT_CLIENT_TIMEOUT_S

SETTINGS = Settings()
