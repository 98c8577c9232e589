"""Stateful lazy tree widget.

Couples the tree model, the flattening engine, and the selection tracker.
Every structural change follows the same cycle: capture the selected node,
mutate the model, re-flatten from scratch, resolve the selection again.
The widget never draws; hosts paint ``visible_lines`` into their own layout.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from ..ansi import selected_with_ansi
from ..errors import FetchFailure
from ..tree_model import (
    ExpandOutcome,
    Node,
    NodeDescriptor,
    TreeModel,
    VisibleRow,
    flatten_visible_rows,
    format_visible_row,
)
from ..ui_theme import DEFAULT_THEME, UITheme
from .fetch import ChildFetchScheduler
from .selection import SelectionTracker

logger = logging.getLogger(__name__)

SelectionChanged = Callable[[Node], None]
FetchFailed = Callable[[FetchFailure], None]
LabelFor = Callable[[Node], str]


class TreeWidget:
    """Lazy tree with identity-preserving selection.

    Args:
        root: Descriptor of the root node; the root is expanded on creation
            (after its first fetch when its children are lazy).
        scheduler: Runs child producers; defaults to background threads.
        on_selection_changed: Called with the selected node after navigation
            and after each successful expansion. Must not block.
        on_fetch_failure: Receives each ``FetchFailure`` exactly once.
        label_for: Optional label decorator applied at render time.
    """

    def __init__(
        self,
        root: NodeDescriptor,
        *,
        scheduler: ChildFetchScheduler | None = None,
        on_selection_changed: SelectionChanged | None = None,
        on_fetch_failure: FetchFailed | None = None,
        label_for: LabelFor | None = None,
    ) -> None:
        self.root = Node.from_descriptor(root, 0)
        self.scheduler = scheduler if scheduler is not None else ChildFetchScheduler()
        self.model = TreeModel(self.root, self.scheduler.submit)
        self.selection = SelectionTracker()
        self.scroll_start = 0
        self._on_selection_changed = on_selection_changed
        self._on_fetch_failure = on_fetch_failure
        self._label_for = label_for
        self._rows: list[VisibleRow] = []
        self._rows_generation = -1
        self.expand(self.root)

    @property
    def rows(self) -> list[VisibleRow]:
        """Visible rows, rebuilt whenever the model generation moved."""
        if self._rows_generation != self.model.generation:
            self._rows = flatten_visible_rows(self.root)
            self._rows_generation = self.model.generation
        return self._rows

    @property
    def selected_index(self) -> int:
        return self.selection.index

    @property
    def selected_node(self) -> Node | None:
        row = self.selection.selected_row(self.rows)
        return row.node if row is not None else None

    def is_fetching(self, node: Node) -> bool:
        return self.model.is_fetching(node)

    @property
    def fetching(self) -> bool:
        return self.model.pending_count > 0

    def _notify_selection(self) -> None:
        node = self.selected_node
        if node is not None and self._on_selection_changed is not None:
            self._on_selection_changed(node)

    def _restructure(self, change: Callable[[], object]) -> object:
        """Run ``change`` with the selected node captured and relocated."""
        captured = self.selection.capture(self.rows)
        result = change()
        self.selection.resolve(self.rows, captured)
        if captured is not None and self.selected_node is not captured:
            self._notify_selection()
        return result

    def expand(self, node: Node) -> ExpandOutcome:
        """Expand ``node``; lazy children finish later through ``pump``."""
        outcome = self._restructure(lambda: self.model.expand(node))
        if outcome is ExpandOutcome.EXPANDED:
            self._notify_selection()
        return outcome

    def collapse(self, node: Node) -> bool:
        """Collapse ``node`` keeping its fetched children cached."""
        return bool(self._restructure(lambda: self.model.collapse(node)))

    def expand_selected(self) -> ExpandOutcome:
        node = self.selected_node
        if node is None:
            return ExpandOutcome.IGNORED
        return self.expand(node)

    def collapse_selected(self) -> bool:
        node = self.selected_node
        if node is None:
            return False
        return self.collapse(node)

    def toggle_selected(self) -> bool:
        """Expand a collapsed selection or collapse an expanded one."""
        node = self.selected_node
        if node is None:
            return False
        if node.expanded:
            return self.collapse(node)
        return self.expand(node) is not ExpandOutcome.IGNORED

    def toggle_row(self, index: int) -> bool:
        """Pointer activation: select row ``index`` then toggle it."""
        if not (0 <= index < len(self.rows)):
            return False
        self.select_index(index)
        self.toggle_selected()
        return True

    def move_selection(self, delta: int) -> bool:
        if not self.selection.move(self.rows, delta):
            return False
        self._notify_selection()
        return True

    def select_index(self, index: int) -> bool:
        if not self.selection.select(self.rows, index):
            return False
        self._notify_selection()
        return True

    def pump(self) -> bool:
        """Apply completed fetches on the calling thread.

        Returns ``True`` when anything changed. ``FetchFailure`` is routed to
        the failure hook; ``InvariantViolation`` propagates. Completions are
        taken one at a time, so anything raised here leaves the rest queued
        for the next call.
        """
        changed = False
        while True:
            result = self.scheduler.next_result()
            if result is None:
                break
            captured = self.selection.capture(self.rows)
            try:
                self.model.complete_fetch(result.node, result.children, result.error)
            except FetchFailure as failure:
                self.selection.resolve(self.rows, captured)
                changed = True
                if self._on_fetch_failure is None:
                    logger.warning("%s", failure)
                else:
                    self._on_fetch_failure(failure)
                continue
            self.selection.resolve(self.rows, captured)
            changed = True
            self._notify_selection()
        return changed

    def refresh(self) -> None:
        """Rebuild rows after an external change, keeping the selected node."""
        captured = self.selection.capture(self.rows)
        self._rows_generation = -1
        self.selection.resolve(self.rows, captured)

    def label_of(self, node: Node) -> str:
        if self._label_for is None:
            return node.label
        return self._label_for(node)

    def scroll_to_selection(self, height: int) -> int:
        """Adjust ``scroll_start`` so the selected row is inside ``height`` rows."""
        height = max(1, height)
        idx = self.selection.index
        if idx < self.scroll_start:
            self.scroll_start = idx
        elif idx >= self.scroll_start + height:
            self.scroll_start = idx - height + 1
        self.scroll_start = max(0, min(self.scroll_start, max(0, len(self.rows) - height)))
        return self.scroll_start

    def row_at(self, visible_line: int) -> int | None:
        """Map a 0-based line inside the painted window to a row index."""
        idx = self.scroll_start + visible_line
        if 0 <= idx < len(self.rows):
            return idx
        return None

    def visible_lines(self, height: int, theme: UITheme | None = None) -> list[str]:
        """Formatted rows for a ``height``-line window around the selection."""
        active_theme = theme or DEFAULT_THEME
        start = self.scroll_to_selection(height)
        rows = self.rows
        out: list[str] = []
        for idx in range(start, min(len(rows), start + max(1, height))):
            row = rows[idx]
            text = format_visible_row(
                row,
                active_theme,
                label=self.label_of(row.node),
                fetching=self.model.is_fetching(row.node),
            )
            selected = idx == self.selection.index
            if not active_theme.reverse:
                text = ("> " if selected else "  ") + text
            elif selected:
                text = selected_with_ansi(text)
            out.append(text)
        return out
