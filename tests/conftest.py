"""Shared fixtures for command server tests."""

import json
import os
import time

import pytest

from cmdserver.core.buffer_editor import BufferEditor
from cmdserver.io.comm_dir import ensure_communication_directory
from cmdserver.runner import CommandRunner
from cmdserver.utils.config import Settings


@pytest.fixture
def settings(tmp_path):
    """Settings rooted in a per-test temp directory."""
    return Settings(temp_root=str(tmp_path), poll_interval_s=0.01, client_timeout_s=2.0)


@pytest.fixture
def comm_dir(settings):
    return ensure_communication_directory(settings)


@pytest.fixture
def runner(settings, comm_dir):
    return CommandRunner(settings, comm_dir=comm_dir)


@pytest.fixture
def ten_lines():
    """Editor over a ten line document: 'line 1' .. 'line 10'."""
    return BufferEditor("\n".join(f"line {i}" for i in range(1, 11)), file_path="/notes/ten.md")


def write_request_file(comm_dir, payload, *, age_s: float = 0.0):
    """Write request.json as a client would, optionally backdated."""
    path = comm_dir.request_path
    if isinstance(payload, str):
        path.write_text(payload, encoding="utf-8")
    else:
        path.write_text(json.dumps(payload), encoding="utf-8")
    if age_s:
        t = time.time() - age_s
        os.utime(path, (t, t))
    return path


def make_request(command_id, args=None, *, uuid="abc", output=False, wait=True):
    return {
        "uuid": uuid,
        "commandId": command_id,
        "args": list(args or []),
        "returnCommandOutput": output,
        "waitForFinish": wait,
    }
