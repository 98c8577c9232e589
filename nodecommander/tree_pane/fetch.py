"""Background execution of lazy child producers.

Producers run off the control thread; every outcome is queued and only
applied when the control thread drains the queue, so tree nodes are never
mutated from a worker.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from queue import Empty, Queue

from ..tree_model import ChildProducer, Node

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChildFetchResult:
    """Completed producer call for ``node``; exactly one of the payloads is set."""

    node: Node
    children: object | None
    error: BaseException | None = None


async def _await_result(awaitable):
    return await awaitable


def _spawn_daemon_thread(work: Callable[[], None]) -> None:
    worker = threading.Thread(
        target=work,
        name="nodecommander-child-fetch",
        daemon=True,
    )
    worker.start()


class ChildFetchScheduler:
    """Run producers concurrently, one worker per request.

    ``spawn`` decides where work runs; tests pass a callable that runs it
    inline to make completion ordering deterministic.
    """

    def __init__(self, spawn: Callable[[Callable[[], None]], None] | None = None) -> None:
        self._spawn = spawn if spawn is not None else _spawn_daemon_thread
        self._results: Queue[ChildFetchResult] = Queue()

    def _run(self, node: Node, producer: ChildProducer) -> None:
        try:
            children = producer(node)
            if inspect.isawaitable(children):
                children = asyncio.run(_await_result(children))
        except (Exception, asyncio.CancelledError) as exc:
            logger.debug("child producer for %s raised %r", node.label, exc)
            self._results.put(ChildFetchResult(node=node, children=None, error=exc))
            return
        self._results.put(ChildFetchResult(node=node, children=children))

    def submit(self, node: Node, producer: ChildProducer) -> None:
        """Start ``producer(node)`` and queue its outcome."""
        self._spawn(lambda: self._run(node, producer))

    def next_result(self) -> ChildFetchResult | None:
        """Pop one completed fetch, or ``None``; call from the control thread."""
        try:
            return self._results.get_nowait()
        except Empty:
            return None

    def drain_results(self) -> list[ChildFetchResult]:
        """Drain all completed fetches; call from the control thread."""
        out: list[ChildFetchResult] = []
        while True:
            result = self.next_result()
            if result is None:
                return out
            out.append(result)


__all__ = [
    "ChildFetchResult",
    "ChildFetchScheduler",
]
