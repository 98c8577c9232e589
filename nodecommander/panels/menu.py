"""Bottom menu bar: global commands and their keys."""

from __future__ import annotations

from dataclasses import dataclass

from ..ansi import fit_ansi_line
from ..ui_theme import UITheme


@dataclass(frozen=True)
class MenuItem:
    label: str
    keys: tuple[str, ...]
    action: str
    hint: str


MENU_ITEMS: tuple[MenuItem, ...] = (
    MenuItem("Monitor", ("m",), "monitor", "m"),
    MenuItem("Unmonitor", ("u",), "unmonitor", "u"),
    MenuItem("Tree", ("t",), "focus_tree", "t"),
    MenuItem("Attributes", ("a",), "focus_attributes", "a"),
    MenuItem("Info", ("i",), "focus_info", "i"),
    MenuItem("Next", ("TAB",), "focus_next", "Tab"),
    MenuItem("Clear", ("c",), "clear_log", "c"),
    MenuItem("Exit", ("q", "ESC", "CTRL_C"), "exit", "q"),
)

_ACTION_BY_KEY = {key: item.action for item in MENU_ITEMS for key in item.keys}


def menu_action_for_key(key: str) -> str | None:
    """Return the menu action bound to ``key``, if any."""
    return _ACTION_BY_KEY.get(key)


def menu_bar_line(width: int, theme: UITheme, status: str = "") -> str:
    """Render the menu bar, with ``status`` right-aligned when it fits."""
    parts = [
        f"{theme.menu_key}{item.hint}{theme.reset}{theme.menu_bar} {item.label}"
        for item in MENU_ITEMS
    ]
    left = f"{theme.menu_bar} " + "  ".join(parts)
    plain_left = " " + "  ".join(f"{item.hint} {item.label}" for item in MENU_ITEMS)
    if status and len(plain_left) + len(status) + 2 <= width:
        gap = " " * (width - len(plain_left) - len(status) - 1)
        left = f"{left}{gap}{status} "
    return fit_ansi_line(left, width, theme.reset) + theme.reset


__all__ = [
    "MENU_ITEMS",
    "MenuItem",
    "menu_action_for_key",
    "menu_bar_line",
]
