from __future__ import annotations

"""
Diagnostic Logging Setup.

Diagnostics go to stderr and, on request, to a rotating log file. Records
are queued by a QueueHandler on the root logger and written by a
QueueListener thread, so disk writes stay off the traversal path. Library
modules only call `logging.getLogger(__name__)`; the CLI owns this setup.
"""

import atexit
import logging
import os
import queue
import sys
from logging.handlers import QueueHandler, QueueListener, RotatingFileHandler
from typing import List, Optional

CONSOLE_FORMAT = "%(levelname)s | %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOG_FILE_MAX_BYTES = 2 * 1024 * 1024
LOG_FILE_BACKUPS = 3

_queue_handler: Optional[QueueHandler] = None
_listener: Optional[QueueListener] = None


def configure_logging(
        verbose: bool = False,
        log_file: Optional[str] = None,
        *,
        max_bytes: int = LOG_FILE_MAX_BYTES,
        backup_count: int = LOG_FILE_BACKUPS,
) -> None:
    """
    Route root logger records to stderr and an optional log file.

    Calling again replaces the previous setup, so the CLI can raise the
    level once a config file turns verbose mode on. Handlers installed by
    anyone else are left in place.

    Args:
        verbose: DEBUG when set, WARNING otherwise.
        log_file: Optional path of a rotating log file.
        max_bytes: Size at which the log file rolls over.
        backup_count: Rolled-over log files to keep.
    """
    global _queue_handler, _listener
    shutdown_logging()

    level = logging.DEBUG if verbose else logging.WARNING

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    sinks: List[logging.Handler] = [console]

    if log_file:
        file_sink = _open_log_file(log_file, max_bytes, backup_count)
        if file_sink is not None:
            sinks.append(file_sink)

    for sink in sinks:
        sink.setLevel(level)

    _queue_handler = QueueHandler(queue.Queue(-1))
    _listener = QueueListener(_queue_handler.queue, *sinks, respect_handler_level=True)
    _listener.start()

    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(_queue_handler)


def shutdown_logging() -> None:
    """Flush queued records, close the sinks and detach our queue handler."""
    global _queue_handler, _listener

    if _queue_handler is not None:
        logging.getLogger().removeHandler(_queue_handler)
        _queue_handler.close()
        _queue_handler = None

    if _listener is not None:
        _listener.stop()
        for sink in _listener.handlers:
            sink.close()
        _listener = None


atexit.register(shutdown_logging)


def _open_log_file(path: str, max_bytes: int, backup_count: int) -> Optional[RotatingFileHandler]:
    """Open the rotating log file; an unusable path only costs the file sink."""
    try:
        os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
        handler = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
            errors="backslashreplace",
        )
    except OSError as e:
        sys.stderr.write(f"WARNING: Could not open log file '{path}': {e}\n")
        return None

    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=FILE_DATE_FORMAT))
    return handler
