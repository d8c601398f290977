"""Logging utilities with timing and frame tracking.

Lines look like ``[  1.234s F000042] [DRAW] Commit ...``. Messages start
with an area tag in brackets; recent() can filter the history by it.
Loader worker threads log too, so writes are serialized with a lock.
"""

from __future__ import annotations
import re
import sys
import time
from collections import deque
from threading import Lock
from typing import Deque, List, Optional, TextIO

_AREA_RE = re.compile(r"^\[([A-Z_]+)\]")


def area_of(msg: str) -> Optional[str]:
    """Leading area tag of a message, e.g. "DRAW" for "[DRAW] Begin"."""
    m = _AREA_RE.match(msg)
    return m.group(1) if m else None


class Logger:
    """Application logger with timestamps, frame counts and a short history."""

    def __init__(self, log_file: Optional[str] = None, quiet: bool = False,
                 history: int = 500):
        self._start_time: float = time.perf_counter()
        self._frame: int = 0
        self._lock = Lock()
        self._history: Deque[str] = deque(maxlen=history)
        self.quiet = quiet
        self._file: Optional[TextIO] = None
        if log_file:
            try:
                self._file = open(log_file, "a", encoding="utf-8")
            except OSError as e:
                sys.stderr.write(f"[LOG][ERR] cannot open {log_file}: {e}\n")

    @property
    def frame(self) -> int:
        return self._frame

    def increment_frame(self) -> None:
        self._frame += 1

    @property
    def elapsed(self) -> float:
        """Seconds since logger was created."""
        return time.perf_counter() - self._start_time

    def log(self, msg: str) -> None:
        """Log a message with timestamp and frame number."""
        line = f"[{self.elapsed:7.3f}s F{self._frame:06d}] {msg}"
        with self._lock:
            self._history.append(msg)
            if self._file is not None:
                try:
                    self._file.write(line + "\n")
                    self._file.flush()
                except (OSError, ValueError):
                    self._file = None
            if not self.quiet:
                self._write(line + "\n")

    @staticmethod
    def _write(line: str) -> None:
        try:
            sys.stdout.write(line)
            sys.stdout.flush()
        except (OSError, ValueError):
            try:
                sys.stderr.write(line)
                sys.stderr.flush()
            except (OSError, ValueError):
                pass

    def recent(self, area: Optional[str] = None) -> List[str]:
        """Messages still in the history, optionally only one area's."""
        with self._lock:
            lines = list(self._history)
        if area is None:
            return lines
        return [m for m in lines if area_of(m) == area]

    def close(self) -> None:
        with self._lock:
            if self._file is not None:
                self._file.close()
                self._file = None

    def __call__(self, msg: str) -> None:
        self.log(msg)


_logger: Optional[Logger] = None


def configure(log_file: Optional[str] = None, quiet: bool = False) -> Logger:
    """Replace the global logger. Called once from main()."""
    global _logger
    if _logger is not None:
        _logger.close()
    _logger = Logger(log_file=log_file, quiet=quiet)
    return _logger


def get_logger() -> Logger:
    """Get or create the global logger instance."""
    global _logger
    if _logger is None:
        _logger = Logger()
    return _logger


def log(msg: str) -> None:
    get_logger().log(msg)


def increment_frame() -> None:
    get_logger().increment_frame()


def now() -> float:
    """Get current time in seconds (high precision)."""
    return time.perf_counter()
