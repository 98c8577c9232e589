"""Screen geometry and frame rendering.

``ScreenLayout`` is pure arithmetic over the terminal size; ``render_frame``
turns already-formatted pane contents into one string of terminal output.
Neither touches application state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..ansi import fit_ansi_line
from ..panels.log_pane import LogPane
from ..panels.menu import menu_bar_line
from ..tree_pane import TreePaneGeometry
from ..ui_theme import UITheme

DEFAULT_LEFT_PERCENT = 40.0
MIN_LOG_ROWS = 4


@dataclass(frozen=True)
class PaneRect:
    """Outer box of a pane in 0-based screen cells, borders included."""

    top: int
    left: int
    width: int
    height: int

    @property
    def inner_width(self) -> int:
        return max(0, self.width - 2)

    @property
    def inner_height(self) -> int:
        return max(0, self.height - 2)


def clamp_left_width(total_width: int, desired_left: int) -> int:
    """Clamp the tree-pane width so both columns keep a usable size."""
    max_possible = max(1, total_width - 2)
    min_left = max(12, min(20, total_width - 12))
    max_left = max(min_left, total_width - 12)
    max_left = min(max_left, max_possible)
    min_left = min(min_left, max_left)
    return max(min_left, min(desired_left, max_left))


@dataclass(frozen=True)
class ScreenLayout:
    columns: int
    lines: int
    tree: PaneRect
    attributes: PaneRect
    monitored: PaneRect
    log: PaneRect
    menu_row: int

    @classmethod
    def compute(cls, columns: int, lines: int, left_percent: float = DEFAULT_LEFT_PERCENT) -> ScreenLayout:
        """Split the screen: tree left, attributes over monitored items on the
        right, the info log below both, and the menu bar on the last row."""
        columns = max(24, columns)
        lines = max(12, lines)
        log_rows = max(MIN_LOG_ROWS, (lines - 1) // 4)
        upper_rows = lines - 1 - log_rows
        left_width = clamp_left_width(columns, int(round(columns * left_percent / 100.0)))
        right_width = columns - left_width
        attribute_rows = upper_rows // 2
        return cls(
            columns=columns,
            lines=lines,
            tree=PaneRect(0, 0, left_width, upper_rows),
            attributes=PaneRect(0, left_width, right_width, attribute_rows),
            monitored=PaneRect(attribute_rows, left_width, right_width, upper_rows - attribute_rows),
            log=PaneRect(upper_rows, 0, columns, log_rows),
            menu_row=lines - 1,
        )

    def tree_geometry(self) -> TreePaneGeometry:
        """1-based terminal cells of the tree pane interior, for mouse hits."""
        return TreePaneGeometry(
            first_row=self.tree.top + 2,
            last_row=self.tree.top + self.tree.height - 1,
            first_col=self.tree.left + 2,
            last_col=self.tree.left + self.tree.width - 1,
        )


def boxed_lines(
    rect: PaneRect,
    title: str,
    body: list[str],
    theme: UITheme,
    *,
    focused: bool = False,
) -> list[str]:
    """Draw ``body`` inside a single-line border with ``title`` on the top edge."""
    if rect.width < 2 or rect.height < 2:
        return [" " * max(0, rect.width)] * max(0, rect.height)
    inner = rect.inner_width
    border = theme.panel_title if focused else theme.border
    label = f" {title} "[:inner]
    top = f"{border}┌{theme.reset}{theme.panel_title}{label}{theme.reset}{border}{'─' * (inner - len(label))}┐{theme.reset}"
    out = [top]
    for row in range(rect.inner_height):
        text = body[row] if row < len(body) else ""
        out.append(f"{border}│{theme.reset}{fit_ansi_line(text, inner, theme.reset)}{border}│{theme.reset}")
    out.append(f"{border}└{'─' * inner}┘{theme.reset}")
    return out


def log_lines(pane: LogPane, height: int, theme: UITheme) -> list[str]:
    out: list[str] = []
    for levelno, text in pane.window(height):
        if levelno >= logging.ERROR:
            color = theme.log_error
        elif levelno >= logging.WARNING:
            color = theme.log_warning
        else:
            color = theme.log_info
        out.append(f"{color}{text}{theme.reset}" if color else text)
    return out


def render_frame(
    layout: ScreenLayout,
    theme: UITheme,
    *,
    tree_lines: list[str],
    attribute_lines: list[str],
    monitored_lines: list[str],
    info_lines: list[str],
    focus: str = "tree",
    status: str = "",
) -> str:
    """Compose one full-screen frame, starting from the home position."""
    tree_box = boxed_lines(layout.tree, "Address Space", tree_lines, theme, focused=focus == "tree")
    attribute_box = boxed_lines(
        layout.attributes, "Attribute List", attribute_lines, theme, focused=focus == "attributes"
    )
    monitored_box = boxed_lines(layout.monitored, "Monitored Items", monitored_lines, theme)
    log_box = boxed_lines(layout.log, "Info", info_lines, theme, focused=focus == "info")
    right_box = attribute_box + monitored_box

    out: list[str] = ["\033[H"]
    for row in range(layout.tree.height):
        out.append(tree_box[row] + right_box[row])
        out.append("\r\n")
    for line in log_box:
        out.append(line)
        out.append("\r\n")
    out.append(menu_bar_line(layout.columns, theme, status))
    return "".join(out)


__all__ = [
    "DEFAULT_LEFT_PERCENT",
    "PaneRect",
    "ScreenLayout",
    "boxed_lines",
    "clamp_left_width",
    "log_lines",
    "render_frame",
]
