"""Application wiring for the interactive address-space browser.

``CommanderApp`` owns every panel and supplies the callbacks that the event
loop drives; it never touches the terminal itself, so it can be exercised
headless in tests.
"""

from __future__ import annotations

import logging
import os
import sys
import time

from ..address_space import AddressSpace, BrowseItem, NodeClass, decorate_label, root_descriptor
from ..errors import FetchFailure
from ..input import parse_mouse_col_row
from ..panels import (
    AttributeReadScheduler,
    LogPane,
    MonitoredItems,
    attribute_rows,
    configure_logging,
    remove_logging,
)
from ..tree_model import Node
from ..tree_pane import ChildFetchScheduler, TreeInputDispatcher, TreeWidget
from ..ui_theme import UITheme, resolve_theme
from .config import load_left_pane_percent, load_sampling_interval_ms, save_left_pane_percent
from .loop import RuntimeLoopCallbacks, run_main_loop
from .screen import DEFAULT_LEFT_PERCENT, ScreenLayout, log_lines, render_frame
from .state import AppState
from .terminal import TerminalController

logger = logging.getLogger(__name__)

STATUS_MESSAGE_SECONDS = 3.0
RESIZE_STEP_COLUMNS = 2


class CommanderApp:
    """Tree, attribute list, monitored items, and info log for one space."""

    def __init__(
        self,
        space: AddressSpace,
        *,
        theme: UITheme,
        root_node_id: str | None = None,
        left_percent: float = DEFAULT_LEFT_PERCENT,
        sampling_interval: float = 1.0,
        scheduler: ChildFetchScheduler | None = None,
        attribute_scheduler: AttributeReadScheduler | None = None,
        log_pane: LogPane | None = None,
    ) -> None:
        self.space = space
        self.theme = theme
        self.state = AppState(left_percent=left_percent)
        self.log_pane = log_pane if log_pane is not None else LogPane()
        self.monitored = MonitoredItems.for_space(space, sampling_interval)
        self.attributes = (
            attribute_scheduler
            if attribute_scheduler is not None
            else AttributeReadScheduler(space.read_attributes)
        )
        self.widget = TreeWidget(
            root_descriptor(space, root_node_id),
            scheduler=scheduler,
            on_selection_changed=self._on_selection_changed,
            on_fetch_failure=self._on_fetch_failure,
            label_for=lambda node: decorate_label(node, self.monitored.values()),
        )
        self.dispatcher = TreeInputDispatcher(self.widget, lambda: self.layout().tree_geometry())

    def layout(self) -> ScreenLayout:
        return ScreenLayout.compute(self.state.columns, self.state.lines, self.state.left_percent)

    def _on_selection_changed(self, node: Node) -> None:
        item = node.payload
        if not isinstance(item, BrowseItem) or item.node_id == self.state.attribute_node_id:
            return
        self.state.attribute_node_id = item.node_id
        self.state.attribute_start = 0
        self.attributes.schedule(item.node_id)

    def _on_fetch_failure(self, failure: FetchFailure) -> None:
        logger.error("%s", failure)
        self.set_status(str(failure))

    def set_status(self, message: str, now: float | None = None) -> None:
        self.state.status_message = message
        self.state.status_message_until = (time.monotonic() if now is None else now) + STATUS_MESSAGE_SECONDS
        self.state.dirty = True

    def selected_item(self) -> BrowseItem | None:
        node = self.widget.selected_node
        if node is None or not isinstance(node.payload, BrowseItem):
            return None
        return node.payload

    # Loop callbacks

    def tick(self, now: float) -> bool:
        changed = self.widget.pump()
        result = self.attributes.drain_latest()
        if result is not None and result.node_id == self.state.attribute_node_id:
            self.state.attribute_pairs = result.pairs
            changed = True
        if self.monitored.sample(now):
            changed = True
        if self.log_pane.version != self.state.last_log_version:
            self.state.last_log_version = self.log_pane.version
            changed = True
        return changed

    def render(self) -> str:
        layout = self.layout()
        tree_lines = self.widget.visible_lines(layout.tree.inner_height, self.theme)
        attribute_lines = attribute_rows(self.state.attribute_pairs, layout.attributes.inner_width)
        start = self.state.attribute_start
        return render_frame(
            layout,
            self.theme,
            tree_lines=tree_lines,
            attribute_lines=attribute_lines[start : start + layout.attributes.inner_height],
            monitored_lines=self.monitored.rows(layout.monitored.inner_width),
            info_lines=log_lines(self.log_pane, layout.log.inner_height, self.theme),
            focus=self.state.focus,
            status=self.state.status_message,
        )

    def run_menu_action(self, action: str) -> None:
        state = self.state
        if action == "exit":
            state.running = False
        elif action == "monitor":
            self.monitor_selected()
        elif action == "unmonitor":
            self.unmonitor_selected()
        elif action == "focus_tree":
            state.focus = "tree"
        elif action == "focus_attributes":
            state.focus = "attributes"
        elif action == "focus_info":
            state.focus = "info"
        elif action == "focus_next":
            state.focus_next()
        elif action == "clear_log":
            self.log_pane.clear()
        else:
            raise ValueError(f"unknown menu action {action!r}")

    def monitor_selected(self) -> bool:
        item = self.selected_item()
        if item is None:
            return False
        if item.node_class is not NodeClass.VARIABLE:
            logger.warning("%s is a %s and has no value to monitor", item.node_id, item.node_class.value)
            return False
        return self.monitored.monitor(item.node_id, item.browse_name)

    def unmonitor_selected(self) -> bool:
        item = self.selected_item()
        if item is None:
            return False
        return self.monitored.unmonitor(item.node_id)

    def resize_tree_pane(self, delta_columns: int) -> bool:
        columns = self.state.columns
        layout = self.layout()
        target = layout.tree.width + delta_columns
        resized = ScreenLayout.compute(columns, self.state.lines, target * 100.0 / max(1, columns))
        if resized.tree.width == layout.tree.width:
            return False
        self.state.left_percent = resized.tree.width * 100.0 / max(1, columns)
        save_left_pane_percent(columns, resized.tree.width)
        return True

    def handle_key(self, key: str) -> bool:
        if key == "<":
            return self.resize_tree_pane(-RESIZE_STEP_COLUMNS)
        if key == ">":
            return self.resize_tree_pane(RESIZE_STEP_COLUMNS)
        if key.startswith("MOUSE"):
            return self._handle_mouse(key)
        if self.state.focus == "tree":
            return self.dispatcher.handle_key(key)
        if self.state.focus == "attributes":
            return self._scroll_attributes(key)
        return self._scroll_log(key)

    def _handle_mouse(self, key: str) -> bool:
        if self.dispatcher.handle_mouse(key):
            self.state.focus = "tree"
            return True
        col, row = parse_mouse_col_row(key)
        if col is None or row is None:
            return False
        log_rect = self.layout().log
        if row - 1 >= log_rect.top and key.startswith("MOUSE_WHEEL_"):
            delta = -1 if key.startswith("MOUSE_WHEEL_UP") else 1
            return self.log_pane.scroll(delta, log_rect.inner_height)
        return False

    def _scroll_attributes(self, key: str) -> bool:
        delta = {"UP": -1, "k": -1, "DOWN": 1, "j": 1}.get(key)
        if delta is None:
            return False
        total = len(attribute_rows(self.state.attribute_pairs, self.layout().attributes.inner_width))
        visible = self.layout().attributes.inner_height
        target = max(0, min(max(0, total - visible), self.state.attribute_start + delta))
        if target == self.state.attribute_start:
            return False
        self.state.attribute_start = target
        return True

    def _scroll_log(self, key: str) -> bool:
        delta = {"UP": -1, "k": -1, "DOWN": 1, "j": 1, "PAGE_UP": -10, "PAGE_DOWN": 10}.get(key)
        if delta is None:
            return False
        return self.log_pane.scroll(delta, self.layout().log.inner_height)

    def callbacks(self) -> RuntimeLoopCallbacks:
        return RuntimeLoopCallbacks(
            tick=self.tick,
            render=self.render,
            run_menu_action=self.run_menu_action,
            handle_key=self.handle_key,
        )


def run_commander(
    space: AddressSpace,
    *,
    no_color: bool = False,
    monitor_node_id: str | None = None,
    log_level: int | str = logging.INFO,
) -> None:
    """Run the interactive browser on ``space`` until the user exits."""
    if not os.isatty(sys.stdin.fileno()) or not os.isatty(sys.stdout.fileno()):
        raise SystemExit("nodecommander needs an interactive terminal (use --dump otherwise)")

    log_pane = LogPane()
    handler = configure_logging(log_pane, log_level)
    try:
        app = CommanderApp(
            space,
            theme=resolve_theme(no_color=no_color),
            left_percent=load_left_pane_percent() or DEFAULT_LEFT_PERCENT,
            sampling_interval=load_sampling_interval_ms() / 1000.0,
            log_pane=log_pane,
        )
        if monitor_node_id is not None:
            target = space.node(monitor_node_id)
            if target.node_class is NodeClass.VARIABLE:
                app.monitored.monitor(target.node_id, target.browse_name)
            else:
                logger.warning("%s is not a variable; not monitoring it", monitor_node_id)
        logger.info("browsing %s", space.root.browse_name)
        stdin_fd = sys.stdin.fileno()
        terminal = TerminalController(stdin_fd, sys.stdout.fileno())
        run_main_loop(app.state, terminal, stdin_fd, app.callbacks())
    finally:
        remove_logging(handler)


__all__ = [
    "CommanderApp",
    "run_commander",
]
