"""ANSI-aware text measurement and cell-fitting utilities.

Panels compose frames out of styled strings; these helpers keep box borders
aligned when labels carry color codes or wide characters.
"""

from __future__ import annotations

import re
import unicodedata

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
_ANSI_SPLIT_RE = re.compile(f"({ANSI_ESCAPE_RE.pattern})")


def char_display_width(ch: str) -> int:
    """Return terminal column width for one character.

    Combining marks consume no columns, East Asian wide/fullwidth characters
    consume two, everything else one.
    """
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def display_width(text: str) -> int:
    """Return terminal column width for ANSI-styled text."""
    plain = ANSI_ESCAPE_RE.sub("", text)
    return sum(char_display_width(ch) for ch in plain)


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Trim a styled line to at most ``max_cols`` display columns.

    Escape sequences are kept verbatim and do not count toward width.
    """
    if max_cols <= 0:
        return ""
    out: list[str] = []
    col = 0
    for index, chunk in enumerate(_ANSI_SPLIT_RE.split(text)):
        if index % 2:
            out.append(chunk)
            continue
        for ch in chunk:
            width = char_display_width(ch)
            if col + width > max_cols:
                return "".join(out)
            out.append(ch)
            col += width
    return "".join(out)


def fit_ansi_line(text: str, width: int, reset: str = "") -> str:
    """Clip ``text`` to ``width`` columns and right-pad it with spaces."""
    clipped = clip_ansi_line(text, width)
    padding = max(0, width - display_width(clipped))
    if reset and "\x1b" in clipped:
        clipped += reset
    return clipped + (" " * padding)


def selected_with_ansi(text: str) -> str:
    """Apply selection styling without discarding existing ANSI colors."""
    if not text:
        return text

    # Keep reverse video active even when the text contains internal resets.
    return "\033[7m" + text.replace("\033[0m", "\033[0;7m") + "\033[0m"
