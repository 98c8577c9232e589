"""Info pane fed by the standard ``logging`` tree.

The interactive session owns the terminal, so records are buffered here and
painted by the screen renderer instead of being written to a stream.
"""

from __future__ import annotations

import logging
import threading
from collections import deque

DEFAULT_CAPACITY = 500
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"


class LogPane:
    """Bounded, thread-safe line buffer with a follow-tail scroll position."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        self._lines: deque[tuple[int, str]] = deque(maxlen=max(1, capacity))
        self._lock = threading.Lock()
        self.scroll_start = 0
        self.follow_tail = True
        self.version = 0

    def append(self, levelno: int, text: str) -> None:
        with self._lock:
            for line in text.splitlines() or [""]:
                self._lines.append((levelno, line))
            self.version += 1

    def clear(self) -> None:
        with self._lock:
            self._lines.clear()
            self.scroll_start = 0
            self.follow_tail = True
            self.version += 1

    def lines(self) -> list[tuple[int, str]]:
        with self._lock:
            return list(self._lines)

    def scroll(self, delta: int, height: int) -> bool:
        """Move the window by ``delta`` rows; reaching the end resumes following."""
        total = len(self.lines())
        max_start = max(0, total - max(1, height))
        current = max_start if self.follow_tail else self.scroll_start
        target = max(0, min(max_start, current + delta))
        self.follow_tail = target >= max_start
        changed = target != self.scroll_start
        self.scroll_start = target
        return changed

    def window(self, height: int) -> list[tuple[int, str]]:
        """Return the ``height`` lines currently in view."""
        lines = self.lines()
        height = max(0, height)
        max_start = max(0, len(lines) - height)
        start = max_start if self.follow_tail else min(self.scroll_start, max_start)
        return lines[start : start + height]


class LogPaneHandler(logging.Handler):
    """Route formatted records into a ``LogPane``."""

    def __init__(self, pane: LogPane, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self.pane = pane

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)
        except Exception:
            self.handleError(record)
            return
        self.pane.append(record.levelno, message)


def configure_logging(pane: LogPane, level: int | str = logging.INFO) -> LogPaneHandler:
    """Attach a pane handler to the package logger and return it.

    Records stop at the package logger so nothing reaches the terminal while
    it is in raw mode.
    """
    handler = LogPaneHandler(pane)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    package_logger = logging.getLogger("nodecommander")
    package_logger.setLevel(level)
    package_logger.addHandler(handler)
    package_logger.propagate = False
    return handler


def remove_logging(handler: LogPaneHandler) -> None:
    """Detach ``handler`` and restore propagation on the package logger."""
    package_logger = logging.getLogger("nodecommander")
    package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True


__all__ = [
    "LogPane",
    "LogPaneHandler",
    "configure_logging",
    "remove_logging",
]
