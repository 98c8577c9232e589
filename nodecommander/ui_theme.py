"""ANSI palette used by renderers.

There is one colored palette plus a colorless fallback selected by
``--no-color``; the tree marker colors follow the expansion state.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by renderers."""

    name: str
    reverse: str
    reset: str
    border: str
    panel_title: str
    tree_connector: str
    tree_marker: str
    tree_marker_expanded: str
    tree_marker_leaf: str
    tree_label: str
    tree_fetching: str
    attribute_name: str
    monitored_value: str
    log_info: str
    log_warning: str
    log_error: str
    menu_bar: str
    menu_key: str


DEFAULT_THEME = UITheme(
    name="default",
    reverse="\033[7m",
    reset="\033[0m",
    border="\033[38;5;44m",
    panel_title="\033[1;36m",
    tree_connector="\033[2;37m",
    tree_marker="\033[38;5;250m",
    tree_marker_expanded="\033[32m",
    tree_marker_leaf="\033[34m",
    tree_label="\033[32m",
    tree_fetching="\033[2;33m",
    attribute_name="\033[38;5;110m",
    monitored_value="\033[1;38;5;229m",
    log_info="\033[38;5;252m",
    log_warning="\033[33m",
    log_error="\033[31m",
    menu_bar="\033[30;46m",
    menu_key="\033[1;37;46m",
)

PLAIN_THEME = UITheme(
    name="plain",
    reverse="",
    reset="",
    border="",
    panel_title="",
    tree_connector="",
    tree_marker="",
    tree_marker_expanded="",
    tree_marker_leaf="",
    tree_label="",
    tree_fetching="",
    attribute_name="",
    monitored_value="",
    log_info="",
    log_warning="",
    log_error="",
    menu_bar="",
    menu_key="",
)


def resolve_theme(*, no_color: bool = False) -> UITheme:
    """Return the palette for the requested color mode."""
    return PLAIN_THEME if no_color else DEFAULT_THEME
