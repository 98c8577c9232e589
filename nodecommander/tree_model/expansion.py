"""Expand/collapse state transitions for lazily populated trees.

All mutation happens on the caller's control thread. Fetching is delegated to
``submit_fetch``; its completion must come back through ``complete_fetch`` on
that same thread, which is the only point where fetched children are installed.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable, Sequence

from ..errors import FetchFailure, InvariantViolation
from .types import ChildProducer, Concrete, Node, NodeDescriptor, Pending

logger = logging.getLogger(__name__)

SubmitFetch = Callable[[Node, ChildProducer], None]


class ExpandOutcome(enum.Enum):
    """Result of an ``expand`` request."""

    EXPANDED = "expanded"
    FETCHING = "fetching"
    IGNORED = "ignored"


def validate_fetched_children(node: Node, result: object) -> Sequence[NodeDescriptor]:
    """Return ``result`` when it is an ordered sequence of descriptors."""
    if not isinstance(result, (list, tuple)):
        raise InvariantViolation(
            f"child producer for {node.label!r} returned {type(result).__name__}, expected a list or tuple"
        )
    for child in result:
        if not isinstance(child, NodeDescriptor):
            raise InvariantViolation(
                f"child producer for {node.label!r} yielded {type(child).__name__}, expected NodeDescriptor"
            )
    return result


class TreeModel:
    """Own expansion state and the fetch-once contract for one tree.

    ``generation`` increases on every structural change so callers can cache
    flattened rows and know when to recompute them.
    """

    def __init__(self, root: Node, submit_fetch: SubmitFetch) -> None:
        if root.depth != 0:
            raise InvariantViolation(f"root depth must be 0, got {root.depth}")
        self.root = root
        self._submit_fetch = submit_fetch
        self._in_flight: dict[int, Node] = {}
        self.generation = 0

    @property
    def pending_count(self) -> int:
        return len(self._in_flight)

    def is_fetching(self, node: Node) -> bool:
        return id(node) in self._in_flight

    def _bump(self) -> None:
        self.generation += 1

    def expand(self, node: Node) -> ExpandOutcome:
        """Expand ``node``, fetching its children first when still pending."""
        if node.expanded:
            return ExpandOutcome.IGNORED
        children = node.children
        if isinstance(children, Concrete):
            node.expanded = True
            self._bump()
            return ExpandOutcome.EXPANDED
        if isinstance(children, Pending):
            if self.is_fetching(node):
                logger.debug("fetch already in flight for %s", node.label)
                return ExpandOutcome.IGNORED
            self._in_flight[id(node)] = node
            logger.debug("fetching children of %s", node.label)
            try:
                self._submit_fetch(node, children.producer)
            except BaseException:
                self._in_flight.pop(id(node), None)
                raise
            self._bump()
            return ExpandOutcome.FETCHING
        raise InvariantViolation(f"unexpected children variant {type(children).__name__} on {node.label!r}")

    def complete_fetch(
        self,
        node: Node,
        result: object | None,
        error: BaseException | None = None,
    ) -> None:
        """Install fetched children, or raise ``FetchFailure`` for ``error``."""
        if self._in_flight.pop(id(node), None) is None:
            raise InvariantViolation(f"fetch completion for {node.label!r} without a request in flight")
        self._bump()
        if error is not None:
            raise FetchFailure(node, error) from error
        if not isinstance(node.children, Pending):
            raise InvariantViolation(f"children of {node.label!r} were installed twice")
        descriptors = validate_fetched_children(node, result)
        nodes = tuple(Node.from_descriptor(child, node.depth + 1) for child in descriptors)
        node.children = Concrete(nodes)
        node.expanded = True
        logger.debug("expanded %s with %d children", node.label, len(nodes))

    def collapse(self, node: Node) -> bool:
        """Collapse ``node``; fetched children stay cached for re-expansion."""
        if not node.expanded:
            return False
        node.expanded = False
        self._bump()
        return True
