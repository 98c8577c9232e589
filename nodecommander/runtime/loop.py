"""Main interactive event loop.

Each iteration runs background-work hand-offs on the control thread, repaints
when something changed, then waits briefly for one key and dispatches it.
Feature logic lives in the injected callbacks.
"""

from __future__ import annotations

import os
import shutil
import time
from collections.abc import Callable
from dataclasses import dataclass

from ..input import read_key
from ..panels.menu import menu_action_for_key
from .state import AppState
from .terminal import TerminalController

KEY_TIMEOUT_MS = 120


@dataclass(frozen=True)
class RuntimeLoopCallbacks:
    """Injected operations used by ``run_main_loop``."""

    tick: Callable[[float], bool]
    render: Callable[[], str]
    run_menu_action: Callable[[str], None]
    handle_key: Callable[[str], bool]


def run_main_loop(
    state: AppState,
    terminal: TerminalController,
    stdin_fd: int,
    callbacks: RuntimeLoopCallbacks,
    *,
    get_terminal_size: Callable[[tuple[int, int]], os.terminal_size] = shutil.get_terminal_size,
    monotonic: Callable[[], float] = time.monotonic,
    key_timeout_ms: int = KEY_TIMEOUT_MS,
) -> None:
    """Run until a callback clears ``state.running``.

    Menu keys are dispatched before the focused pane sees the key.
    """
    with terminal.raw_mode():
        while state.running:
            term = get_terminal_size((80, 24))
            if (term.columns, term.lines) != (state.columns, state.lines):
                state.columns = term.columns
                state.lines = term.lines
                state.dirty = True

            now = monotonic()
            if state.status_message and now >= state.status_message_until:
                state.status_message = ""
                state.status_message_until = 0.0
                state.dirty = True
            if callbacks.tick(now):
                state.dirty = True

            if state.dirty:
                terminal.write_frame(callbacks.render())
                state.dirty = False

            try:
                key = read_key(stdin_fd, timeout_ms=key_timeout_ms)
            except KeyboardInterrupt:
                key = "CTRL_C"
            if key == "":
                continue

            action = menu_action_for_key(key)
            if action is not None:
                callbacks.run_menu_action(action)
                state.dirty = True
                continue
            if callbacks.handle_key(key):
                state.dirty = True


__all__ = [
    "KEY_TIMEOUT_MS",
    "RuntimeLoopCallbacks",
    "run_main_loop",
]
