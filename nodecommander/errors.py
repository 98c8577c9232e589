"""Exception types raised by the tree core and its collaborators.

``FetchFailure`` is local and recoverable: the widget reports it and the user
may retry. ``InvariantViolation`` marks a broken producer or a malformed graph
and is never swallowed by the tree core.
"""

from __future__ import annotations


class TreeError(Exception):
    """Base class for tree-widget errors."""


class FetchFailure(TreeError):
    """A lazy child producer reported failure for ``node``."""

    def __init__(self, node: object, cause: BaseException) -> None:
        label = getattr(node, "label", node)
        super().__init__(f"cannot expand {label}: {cause}")
        self.node = node
        self.cause = cause


class InvariantViolation(TreeError):
    """Tree bookkeeping reached a state that a correct producer cannot cause."""


class AddressSpaceError(Exception):
    """Address-space lookup, browse, or document-loading failure."""
