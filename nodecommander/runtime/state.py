from __future__ import annotations

from dataclasses import dataclass, field

FOCUS_ORDER: tuple[str, ...] = ("tree", "attributes", "info")


@dataclass
class AppState:
    left_percent: float
    focus: str = "tree"
    dirty: bool = True
    running: bool = True
    columns: int = 80
    lines: int = 24
    attribute_node_id: str | None = None
    attribute_pairs: list[tuple[str, object]] = field(default_factory=list)
    attribute_start: int = 0
    status_message: str = ""
    status_message_until: float = 0.0
    last_tree_generation: int = -1
    last_log_version: int = -1

    def focus_next(self) -> None:
        index = FOCUS_ORDER.index(self.focus) if self.focus in FOCUS_ORDER else -1
        self.focus = FOCUS_ORDER[(index + 1) % len(FOCUS_ORDER)]
        self.dirty = True
