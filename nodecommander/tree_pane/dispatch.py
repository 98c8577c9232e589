"""Keyboard and pointer dispatch for the tree pane.

Every gesture acts on the selected row: keys expand, collapse, or move the
selection; a left click first selects the clicked row and then toggles it.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from ..input import KeyComboBinding, KeyComboRegistry, parse_mouse_col_row
from .widget import TreeWidget

EXPAND_KEYS = ("+", "RIGHT", "l")
COLLAPSE_KEYS = ("-", "LEFT", "h")
TOGGLE_KEYS = ("ENTER", " ")
UP_KEYS = ("UP", "k")
DOWN_KEYS = ("DOWN", "j")


@dataclass(frozen=True)
class TreePaneGeometry:
    """Screen placement of the painted tree rows (1-based, inclusive)."""

    first_row: int
    last_row: int
    first_col: int
    last_col: int

    def contains(self, col: int, row: int) -> bool:
        return self.first_row <= row <= self.last_row and self.first_col <= col <= self.last_col


class TreeInputDispatcher:
    """Translate key tokens into tree-widget operations."""

    def __init__(
        self,
        widget: TreeWidget,
        geometry: Callable[[], TreePaneGeometry],
    ) -> None:
        self.widget = widget
        self._geometry = geometry
        self._registry = KeyComboRegistry().register_bindings(
            KeyComboBinding(UP_KEYS, lambda: self._move(-1)),
            KeyComboBinding(DOWN_KEYS, lambda: self._move(1)),
            KeyComboBinding(("PAGE_UP",), lambda: self._move(-self._page_rows())),
            KeyComboBinding(("PAGE_DOWN",), lambda: self._move(self._page_rows())),
            KeyComboBinding(("HOME", "g"), lambda: self._move(-len(self.widget.rows))),
            KeyComboBinding(("END", "G"), lambda: self._move(len(self.widget.rows))),
            KeyComboBinding(EXPAND_KEYS, self._expand),
            KeyComboBinding(COLLAPSE_KEYS, self._collapse),
            KeyComboBinding(TOGGLE_KEYS, self._toggle),
        )

    def _page_rows(self) -> int:
        geometry = self._geometry()
        return max(1, geometry.last_row - geometry.first_row)

    def _move(self, delta: int) -> bool:
        self.widget.move_selection(delta)
        return True

    def _expand(self) -> bool:
        self.widget.expand_selected()
        return True

    def _collapse(self) -> bool:
        self.widget.collapse_selected()
        return True

    def _toggle(self) -> bool:
        self.widget.toggle_selected()
        return True

    def handle_mouse(self, mouse_key: str) -> bool:
        """Handle a mouse token inside the tree pane; ``False`` when outside."""
        col, row = parse_mouse_col_row(mouse_key)
        if col is None or row is None:
            return False
        geometry = self._geometry()
        if not geometry.contains(col, row):
            return False
        if mouse_key.startswith("MOUSE_WHEEL_UP:"):
            self.widget.move_selection(-1)
            return True
        if mouse_key.startswith("MOUSE_WHEEL_DOWN:"):
            self.widget.move_selection(1)
            return True
        if mouse_key.startswith("MOUSE_LEFT_DOWN:"):
            idx = self.widget.row_at(row - geometry.first_row)
            if idx is not None:
                self.widget.toggle_row(idx)
            return True
        return True

    def handle_key(self, key: str) -> bool:
        """Handle one key token and return whether it was consumed."""
        if key.startswith("MOUSE"):
            return self.handle_mouse(key)
        return bool(self._registry.dispatch(key))
