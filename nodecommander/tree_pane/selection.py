"""Selection tracking keyed by node identity across row rebuilds.

The row index is only a view of the selection. Before a structural change the
caller captures the selected node; after re-flattening, ``resolve`` relocates
it, falling back to the root row when the node is no longer visible.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from ..errors import InvariantViolation
from ..tree_model import Node, VisibleRow


@dataclass
class SelectionTracker:
    """Selected row index over the current visible rows."""

    index: int = 0

    def selected_row(self, rows: Sequence[VisibleRow]) -> VisibleRow | None:
        if not rows:
            return None
        if not (0 <= self.index < len(rows)):
            raise InvariantViolation(f"selection index {self.index} outside {len(rows)} visible rows")
        return rows[self.index]

    def capture(self, rows: Sequence[VisibleRow]) -> Node | None:
        """Return the selected node ahead of a structural change."""
        row = self.selected_row(rows)
        return row.node if row is not None else None

    def resolve(self, rows: Sequence[VisibleRow], captured: Node | None) -> int:
        """Point the selection at ``captured`` within freshly built ``rows``.

        The same node object wins over another row sharing its identity; when
        neither is visible the selection resets to row 0.
        """
        self.index = 0
        if captured is None or not rows:
            return self.index
        identity_match: int | None = None
        for idx, row in enumerate(rows):
            if row.node is captured:
                self.index = idx
                return self.index
            if identity_match is None and row.node.identity == captured.identity:
                identity_match = idx
        if identity_match is not None:
            self.index = identity_match
        return self.index

    def move(self, rows: Sequence[VisibleRow], delta: int) -> bool:
        """Move by ``delta`` rows clamped to ``[0, len(rows) - 1]``."""
        if not rows:
            return False
        return self.select(rows, self.index + delta)

    def select(self, rows: Sequence[VisibleRow], index: int) -> bool:
        """Select ``index`` (clamped) and report whether the selection moved."""
        if not rows:
            return False
        target = max(0, min(index, len(rows) - 1))
        if target == self.index:
            return False
        self.index = target
        return True
