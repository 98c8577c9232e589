"""Headless tests for application wiring and the main loop."""

from __future__ import annotations

import contextlib
import os
import unittest
from unittest import mock

from nodecommander.address_space import demo_address_space
from nodecommander.panels import AttributeReadResult, LogPane
from nodecommander.runtime.app import CommanderApp
from nodecommander.runtime.loop import run_main_loop
from nodecommander.tree_pane import ChildFetchScheduler
from nodecommander.ui_theme import PLAIN_THEME


class _InlineAttributeReads:
    """Attribute reader double that completes reads synchronously."""

    def __init__(self, read_attributes) -> None:
        self._read_attributes = read_attributes
        self._latest: AttributeReadResult | None = None
        self.requested: list[str] = []

    def schedule(self, node_id: str) -> int:
        self.requested.append(node_id)
        self._latest = AttributeReadResult(len(self.requested), node_id, self._read_attributes(node_id))
        return len(self.requested)

    def drain_latest(self) -> AttributeReadResult | None:
        latest, self._latest = self._latest, None
        return latest


def _app(space=None) -> CommanderApp:
    space = space if space is not None else demo_address_space()
    app = CommanderApp(
        space,
        theme=PLAIN_THEME,
        scheduler=ChildFetchScheduler(spawn=lambda work: work()),
        attribute_scheduler=_InlineAttributeReads(space.read_attributes),
        log_pane=LogPane(),
    )
    app.state.columns = 120
    app.state.lines = 40
    return app


def _select_label(app: CommanderApp, label: str) -> None:
    for idx, row in enumerate(app.widget.rows):
        if row.node.label == label:
            app.widget.select_index(idx)
            return
    raise AssertionError(f"{label!r} not visible")


def _open(app: CommanderApp, *labels: str) -> None:
    for label in labels:
        _select_label(app, label)
        app.widget.expand_selected()
        app.widget.pump()


class CommanderAppTests(unittest.TestCase):
    def test_first_tick_expands_root_and_reads_its_attributes(self) -> None:
        app = _app()

        self.assertTrue(app.tick(0.0))
        app.tick(0.0)

        self.assertTrue(app.widget.root.expanded)
        self.assertEqual(app.attributes.requested, ["i=84"])
        self.assertIn(("BrowseName", "Root"), app.state.attribute_pairs)

    def test_selection_change_schedules_attribute_read(self) -> None:
        app = _app()
        app.tick(0.0)

        app.handle_key("j")
        app.tick(0.0)

        self.assertEqual(app.attributes.requested, ["i=84", "i=85"])
        self.assertEqual(app.state.attribute_node_id, "i=85")
        self.assertIn(("BrowseName", "Objects"), app.state.attribute_pairs)

    def test_monitor_variable_decorates_tree_label(self) -> None:
        app = _app()
        app.tick(0.0)
        _open(app, "o-> Objects", "o-> Simulation")
        _select_label(app, "o-> Setpoint")

        app.run_menu_action("monitor")
        app.tick(5.0)

        self.assertIn("ns=1;s=Setpoint", app.monitored)
        frame = app.render()
        self.assertIn("o-> Setpoint = 21.500", frame)
        self.assertIn("Monitored Items", frame)

        app.run_menu_action("unmonitor")
        self.assertNotIn("ns=1;s=Setpoint", app.monitored)

    def test_monitoring_non_variable_is_refused(self) -> None:
        app = _app()
        app.tick(0.0)
        _select_label(app, "o-> Objects")

        with self.assertLogs("nodecommander.runtime.app", level="WARNING"):
            self.assertFalse(app.monitor_selected())
        self.assertEqual(len(app.monitored), 0)

    def test_fetch_failure_sets_status_and_logs(self) -> None:
        space = demo_address_space()
        app = _app(space)
        app.tick(0.0)
        _select_label(app, "o-> Objects")
        app.tick(0.0)
        space.connected = False

        app.handle_key("ENTER")
        with self.assertLogs("nodecommander.runtime.app", level="ERROR") as logs:
            app.tick(1.0)

        self.assertIn("No Connection", logs.output[0])
        self.assertIn("No Connection", app.state.status_message)
        self.assertFalse(app.widget.selected_node.expanded)

    def test_focus_routes_keys(self) -> None:
        app = _app()
        app.tick(0.0)

        app.run_menu_action("focus_next")
        self.assertEqual(app.state.focus, "attributes")
        self.assertFalse(app.handle_key("j"))
        self.assertEqual(app.widget.selected_index, 0)

        app.run_menu_action("focus_tree")
        self.assertTrue(app.handle_key("j"))
        self.assertEqual(app.widget.selected_index, 1)

        app.run_menu_action("focus_info")
        self.assertEqual(app.state.focus, "info")
        app.run_menu_action("focus_next")
        self.assertEqual(app.state.focus, "tree")

    def test_exit_and_unknown_actions(self) -> None:
        app = _app()
        app.run_menu_action("exit")
        self.assertFalse(app.state.running)
        with self.assertRaises(ValueError):
            app.run_menu_action("explode")

    def test_clear_empties_log_pane(self) -> None:
        app = _app()
        app.log_pane.append(20, "something")

        app.run_menu_action("clear_log")

        self.assertEqual(app.log_pane.lines(), [])

    def test_resize_persists_pane_width(self) -> None:
        app = _app()
        with mock.patch("nodecommander.runtime.app.save_left_pane_percent") as save:
            self.assertTrue(app.handle_key(">"))

        save.assert_called_once_with(120, app.layout().tree.width)
        self.assertEqual(app.layout().tree.width, 50)

    def test_click_in_tree_focuses_tree_and_toggles(self) -> None:
        app = _app()
        app.tick(0.0)
        app.state.focus = "info"
        geometry = app.layout().tree_geometry()

        app.handle_key(f"MOUSE_LEFT_DOWN:{geometry.first_col}:{geometry.first_row + 1}")
        app.tick(0.0)

        self.assertEqual(app.state.focus, "tree")
        self.assertEqual(app.widget.selected_node.label, "o-> Objects")
        self.assertTrue(app.widget.selected_node.expanded)


class _FakeTerminal:
    def __init__(self) -> None:
        self.frames: list[str] = []
        self.raw_mode_entered = 0

    @contextlib.contextmanager
    def raw_mode(self):
        self.raw_mode_entered += 1
        yield

    def write_frame(self, frame: str) -> None:
        self.frames.append(frame)


class RunMainLoopTests(unittest.TestCase):
    def test_loop_renders_dispatches_and_exits(self) -> None:
        app = _app()
        terminal = _FakeTerminal()
        keys = iter(["", "j", "m", "q"])

        with mock.patch("nodecommander.runtime.loop.read_key", side_effect=lambda _fd, timeout_ms: next(keys)):
            run_main_loop(
                app.state,
                terminal,
                0,
                app.callbacks(),
                get_terminal_size=lambda _fallback: os.terminal_size((100, 30)),
                monotonic=lambda: 0.0,
            )

        self.assertEqual(terminal.raw_mode_entered, 1)
        self.assertFalse(app.state.running)
        self.assertEqual((app.state.columns, app.state.lines), (100, 30))
        self.assertGreaterEqual(len(terminal.frames), 2)
        self.assertTrue(all(frame.startswith("\033[H") for frame in terminal.frames))
        self.assertEqual(app.widget.selected_node.label, "o-> Objects")

    def test_keyboard_interrupt_exits(self) -> None:
        app = _app()

        def interrupt(_fd, timeout_ms):
            raise KeyboardInterrupt

        with mock.patch("nodecommander.runtime.loop.read_key", side_effect=interrupt):
            run_main_loop(
                app.state,
                _FakeTerminal(),
                0,
                app.callbacks(),
                get_terminal_size=lambda _fallback: os.terminal_size((100, 30)),
                monotonic=lambda: 0.0,
            )

        self.assertFalse(app.state.running)


if __name__ == "__main__":
    unittest.main()
