"""Flatten the expanded part of a tree into visible rows with connectors.

Rows are recomputed from scratch on every structural change; the traversal
only reads ``expanded``, ``children`` and ``depth`` and never mutates nodes.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from ..errors import InvariantViolation
from .types import Node, check_depth, concrete_children

CONNECTOR_MID = "├"
CONNECTOR_LAST = "└"
CONTINUATION = "│"
BLANK_COLUMN = " "


class RowMarker(enum.Enum):
    """State glyph shown between the connector and the label."""

    COLLAPSED = "collapsed"
    EXPANDED_WITH_CHILDREN = "expanded"
    EXPANDED_LEAF = "leaf"

    @property
    def glyph(self) -> str:
        return "► " if self is RowMarker.COLLAPSED else "▼ "


@dataclass(frozen=True)
class VisibleRow:
    """One rendered tree row; valid until the next structural change."""

    node: Node
    prefix: str
    connector: str
    is_last_child: bool
    marker: RowMarker

    @property
    def depth(self) -> int:
        return self.node.depth

    @property
    def text(self) -> str:
        return f"{self.prefix}{self.connector}{self.marker.glyph}{self.node.label}"


def marker_for(node: Node) -> RowMarker:
    """Return the state marker for ``node``."""
    if not node.expanded:
        return RowMarker.COLLAPSED
    nodes = concrete_children(node)
    if nodes:
        return RowMarker.EXPANDED_WITH_CHILDREN
    return RowMarker.EXPANDED_LEAF


def flatten_visible_rows(root: Node) -> list[VisibleRow]:
    """Return root plus every descendant reachable through expanded nodes."""
    if root.depth != 0:
        raise InvariantViolation(f"root depth must be 0, got {root.depth}")
    rows: list[VisibleRow] = [VisibleRow(root, "", "", True, marker_for(root))]

    def walk(parent: Node, child_prefix: str) -> None:
        """Append rows for the fetched children of an expanded ``parent``."""
        nodes = concrete_children(parent)
        if not parent.expanded or nodes is None:
            return
        last_idx = len(nodes) - 1
        for idx, child in enumerate(nodes):
            if child.depth != parent.depth + 1:
                raise InvariantViolation(
                    f"{child.label!r} has depth {child.depth} under parent depth {parent.depth}"
                )
            check_depth(child.depth)
            is_last = idx == last_idx
            rows.append(
                VisibleRow(
                    child,
                    child_prefix,
                    CONNECTOR_LAST if is_last else CONNECTOR_MID,
                    is_last,
                    marker_for(child),
                )
            )
            if child.expanded:
                walk(child, child_prefix + (BLANK_COLUMN if is_last else CONTINUATION))

    walk(root, "")
    return rows
