"""Low-level terminal input decoding.

Reads raw bytes from stdin and translates them into normalized key tokens.
Handles ESC-sequence timing, navigation keys, and SGR mouse events.
"""

from __future__ import annotations

import os
import select

ESC_SEQUENCE_TIMEOUT_MS = 25
_PENDING_BYTES: list[bytes] = []

_CONTROL_KEYS: dict[bytes, str] = {
    b"\x03": "CTRL_C",
    b"\x04": "CTRL_D",
    b"\x0c": "CTRL_L",
    b"\t": "TAB",
    b"\x08": "BACKSPACE",
    b"\x7f": "BACKSPACE",
    b"\r": "ENTER",
    b"\n": "ENTER",
}

_CSI_FINAL_KEYS: dict[bytes, str] = {
    b"A": "UP",
    b"B": "DOWN",
    b"C": "RIGHT",
    b"D": "LEFT",
    b"H": "HOME",
    b"F": "END",
}

_CSI_TILDE_KEYS: dict[bytes, str] = {
    b"1": "HOME",
    b"4": "END",
    b"5": "PAGE_UP",
    b"6": "PAGE_DOWN",
    b"7": "HOME",
    b"8": "END",
}


def _read_ready_byte(fd: int, timeout_ms: int) -> bytes | None:
    ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
    if not ready:
        return None
    ch = os.read(fd, 1)
    if not ch:
        return None
    return ch


def decode_sgr_mouse(payload: bytes, final: bytes) -> str:
    """Translate an SGR mouse report (``btn;col;row`` + ``M``/``m``) into a token."""
    try:
        btn_s, col_s, row_s = payload.decode("ascii").split(";")
        btn = int(btn_s)
        col = int(col_s)
        row = int(row_s)
    except ValueError:
        return "ESC"
    button = btn & 0b11
    is_wheel = (btn & 0b0100_0000) != 0
    if is_wheel:
        if button == 0:
            return f"MOUSE_WHEEL_UP:{col}:{row}"
        if button == 1:
            return f"MOUSE_WHEEL_DOWN:{col}:{row}"
        return "MOUSE"
    if button == 0:
        suffix = "DOWN" if final == b"M" else "UP"
        return f"MOUSE_LEFT_{suffix}:{col}:{row}"
    return "MOUSE"


def parse_mouse_col_row(mouse_key: str) -> tuple[int | None, int | None]:
    """Return the 1-based ``(col, row)`` carried by a mouse token."""
    parts = mouse_key.split(":")
    if len(parts) < 3:
        return None, None
    try:
        return int(parts[1]), int(parts[2])
    except ValueError:
        return None, None


def _utf8_continuation_count(lead: int) -> int:
    if lead >= 0xF0:
        return 3
    if lead >= 0xE0:
        return 2
    return 1


def _read_utf8_char(fd: int, first: bytes) -> str:
    """Complete a multi-byte character whose lead byte is ``first``."""
    data = first
    for _ in range(_utf8_continuation_count(first[0])):
        more = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if more is None:
            break
        data += more
    return data.decode("utf-8", errors="replace")


def _read_sgr_mouse(fd: int) -> str:
    payload = bytearray()
    while len(payload) <= 64:
        part = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if part is None:
            return "ESC"
        if part in {b"M", b"m"}:
            return decode_sgr_mouse(bytes(payload), part)
        payload += part
    return "ESC"


def _read_escape_sequence(fd: int) -> str:
    """Decode what follows a lone ESC byte; unknown sequences yield ``ESC``."""
    introducer = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if introducer is None:
        return "ESC"
    if introducer not in {b"[", b"O"}:
        # Plain ESC followed by an ordinary key: replay that key next call.
        _PENDING_BYTES.append(introducer)
        return "ESC"
    code = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if code is None:
        return "ESC"
    if code in _CSI_FINAL_KEYS:
        return _CSI_FINAL_KEYS[code]
    if introducer != b"[":
        return "ESC"
    if code == b"<":
        return _read_sgr_mouse(fd)
    if code in _CSI_TILDE_KEYS and _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS) == b"~":
        return _CSI_TILDE_KEYS[code]
    return "ESC"


def read_key(fd: int, timeout_ms: int | None = None) -> str:
    """Read one key token from ``fd``; ``""`` means no input before the timeout."""
    if _PENDING_BYTES:
        first = _PENDING_BYTES.pop(0)
    else:
        if timeout_ms is None:
            first = os.read(fd, 1)
        else:
            first = _read_ready_byte(fd, timeout_ms) or b""
        if not first:
            return ""

    if first in _CONTROL_KEYS:
        return _CONTROL_KEYS[first]
    if first == b"\x1b":
        return _read_escape_sequence(fd)
    if first[0] >= 0x80:
        return _read_utf8_char(fd, first)
    return first.decode("ascii", errors="replace")
