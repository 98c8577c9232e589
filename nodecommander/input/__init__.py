"""Input-layer public API: terminal key decoding and key-combo dispatch."""

from .key_registry import KeyComboBinding, KeyComboRegistry
from .reader import ESC_SEQUENCE_TIMEOUT_MS, decode_sgr_mouse, parse_mouse_col_row, read_key

__all__ = [
    "read_key",
    "decode_sgr_mouse",
    "parse_mouse_col_row",
    "ESC_SEQUENCE_TIMEOUT_MS",
    "KeyComboBinding",
    "KeyComboRegistry",
]
