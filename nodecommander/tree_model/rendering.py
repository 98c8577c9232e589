"""ANSI formatting for flattened tree rows."""

from __future__ import annotations

from ..ui_theme import DEFAULT_THEME, UITheme
from .flatten import RowMarker, VisibleRow


def marker_color_for(marker: RowMarker, theme: UITheme) -> str:
    if marker is RowMarker.EXPANDED_WITH_CHILDREN:
        return theme.tree_marker_expanded
    if marker is RowMarker.EXPANDED_LEAF:
        return theme.tree_marker_leaf
    return theme.tree_marker


def format_visible_row(
    row: VisibleRow,
    theme: UITheme | None = None,
    label: str | None = None,
    fetching: bool = False,
) -> str:
    """Render one visible row as ANSI-styled display text.

    ``label`` replaces ``row.node.label`` for host-decorated labels. Rows whose
    children are being fetched get a trailing ellipsis hint.
    """
    active_theme = theme or DEFAULT_THEME
    reset = active_theme.reset
    text = row.node.label if label is None else label
    guides = f"{row.prefix}{row.connector}"
    out = []
    if guides:
        out.append(f"{active_theme.tree_connector}{guides}{reset}")
    out.append(f"{marker_color_for(row.marker, active_theme)}{row.marker.glyph}{reset}")
    out.append(f"{active_theme.tree_label}{text}{reset}")
    if fetching:
        out.append(f"{active_theme.tree_fetching} …{reset}")
    return "".join(out)
