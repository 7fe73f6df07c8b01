"""Logging configuration for the command server.

The CLI calls ``setup_logger`` once at startup. Library code only ever
does ``logging.getLogger(__name__)``, so an editor embedding the runner
keeps control of its own handlers.
"""
import logging
import os
from ..utils.config import SETTINGS


def setup_logger() -> logging.Logger:
    """
    Attach a stderr handler to the root logger and apply the level.

    The level comes from ``SETTINGS.log_level``, then ``CMDSERVER_LOGLEVEL``,
    then INFO. An existing root handler is left alone.

    Returns:
        The ``cmdserver`` package logger
    """
    lvl_name = (getattr(SETTINGS, "log_level", None) or os.environ.get("CMDSERVER_LOGLEVEL", "INFO")).upper()
    level = getattr(logging, lvl_name, logging.INFO)

    # Root level so cmdserver.io.*, cmdserver.handlers.* and the host all follow it
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        handler = logging.StreamHandler()
        fmt = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
        handler.setFormatter(logging.Formatter(fmt=fmt, datefmt="%Y-%m-%d %H:%M:%S"))
        root_logger.addHandler(handler)
    root_logger.setLevel(level)

    package_logger = logging.getLogger("cmdserver")
    package_logger.setLevel(level)
    return package_logger
