"""Attribute list panel: value formatting and background attribute reads.

Selection changes hand the newly selected node id to ``AttributeReadScheduler``
and return immediately; the control loop drains finished reads and repaints.
"""

from __future__ import annotations

import enum
import logging
import threading
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from queue import Empty, Queue

logger = logging.getLogger(__name__)

ATTRIBUTE_NAME_COLUMNS = 25
CONTINUATION_NAME = "   |    "


def _fill(text: str, columns: int, filler: str = " ") -> str:
    """Pad ``text`` with ``filler`` and cut it to exactly ``columns`` characters."""
    if columns <= 0:
        return ""
    return (text + filler * columns)[:columns]


def format_attribute_value(name: str, value: object) -> str:
    """Render one attribute value for display."""
    if value is None:
        return "<null>"
    if isinstance(value, enum.Enum):
        return str(value.value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return f"{value:.3f}" if name == "Value" else f"{value:.6g}"
    if isinstance(value, (list, tuple)):
        if not value:
            return "l= 0 [ ]"
        return f"l= {len(value)} [ {value[0]}... ]"
    return str(value)


def attribute_rows(pairs: Sequence[tuple[str, object]], width: int) -> list[str]:
    """Format ``(name, value)`` pairs as dotted ``name....: value`` rows.

    Multi-line values continue on extra rows under a ``|`` marker.
    """
    value_columns = max(1, width - ATTRIBUTE_NAME_COLUMNS - 3)
    rows: list[str] = []
    for name, value in pairs:
        lines = format_attribute_value(name, value).split("\n")
        rows.append(f"{_fill(name, ATTRIBUTE_NAME_COLUMNS, '.')}: {_fill(lines[0], value_columns)}")
        for extra in lines[1:]:
            rows.append(f"{_fill(CONTINUATION_NAME, ATTRIBUTE_NAME_COLUMNS)}: {_fill(extra, value_columns)}")
    return rows


@dataclass(frozen=True)
class AttributeReadResult:
    """Completed attribute read; ``error`` is set when the read failed."""

    request_id: int
    node_id: str
    pairs: list[tuple[str, object]]
    error: Exception | None = None


class AttributeReadScheduler:
    """Single-threaded latest-request-wins attribute reader."""

    def __init__(self, read_attributes: Callable[[str], list[tuple[str, object]]]) -> None:
        self._read_attributes = read_attributes
        self._lock = threading.Lock()
        self._pending: tuple[int, str] | None = None
        self._running = False
        self._next_request_id = 1
        self._latest_request_id = 0
        self._results: Queue[AttributeReadResult] = Queue()

    def _worker(self) -> None:
        while True:
            with self._lock:
                request = self._pending
                self._pending = None
                if request is None:
                    self._running = False
                    return

            request_id, node_id = request
            try:
                pairs = self._read_attributes(node_id)
            except Exception as exc:
                self._results.put(AttributeReadResult(request_id, node_id, [], error=exc))
                continue
            self._results.put(AttributeReadResult(request_id, node_id, pairs))

    def schedule(self, node_id: str) -> int:
        """Queue or replace the pending read and return its request id."""
        with self._lock:
            request_id = self._next_request_id
            self._next_request_id += 1
            self._latest_request_id = request_id
            self._pending = (request_id, node_id)
            if self._running:
                return request_id
            self._running = True

        worker = threading.Thread(
            target=self._worker,
            name="nodecommander-attribute-read",
            daemon=True,
        )
        worker.start()
        return request_id

    def drain_latest(self) -> AttributeReadResult | None:
        """Drain finished reads, returning only the newest requested one.

        Failed reads are logged; stale results for earlier requests are dropped.
        """
        latest: AttributeReadResult | None = None
        while True:
            try:
                result = self._results.get_nowait()
            except Empty:
                break
            if result.request_id != self._latest_request_id:
                continue
            if result.error is not None:
                logger.error("#readAllAttributes returned %s", result.error)
                continue
            latest = result
        return latest


__all__ = [
    "AttributeReadResult",
    "AttributeReadScheduler",
    "attribute_rows",
    "format_attribute_value",
]
