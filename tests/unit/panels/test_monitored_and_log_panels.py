"""Tests for monitored items, the info log pane, and the menu bar."""

from __future__ import annotations

import logging
import unittest

from nodecommander.address_space import demo_address_space
from nodecommander.panels import (
    LogPane,
    LogPaneHandler,
    MonitoredItems,
    configure_logging,
    menu_action_for_key,
    menu_bar_line,
    remove_logging,
)
from nodecommander.ui_theme import PLAIN_THEME


class MonitoredItemsTests(unittest.TestCase):
    def test_monitor_rejects_duplicates_and_unmonitor_unknown(self) -> None:
        items = MonitoredItems(lambda _node_id: 1.0)

        self.assertTrue(items.monitor("v", "Var"))
        with self.assertLogs("nodecommander.panels.monitored", level="INFO") as logs:
            self.assertFalse(items.monitor("v", "Var"))
            self.assertFalse(items.unmonitor("other"))

        self.assertIn("Already monitoring v", logs.output[0])
        self.assertIn("other was not being monitored", logs.output[1])
        self.assertEqual(len(items), 1)
        self.assertTrue(items.unmonitor("v"))
        self.assertNotIn("v", items)

    def test_sample_respects_interval_and_reports_changes(self) -> None:
        readings = iter([1.0, 1.0, 2.0])
        items = MonitoredItems(lambda _node_id: next(readings), sampling_interval=1.0)
        items.monitor("v", "Var")

        self.assertIsNone(items.value_for("v"))
        self.assertEqual(items.sample(10.0), ["v"])
        self.assertEqual(items.value_for("v"), "1.000")
        self.assertEqual(items.sample(10.5), [])
        self.assertEqual(items.sample(11.0), [])
        self.assertEqual(items.sample(12.0), ["v"])
        self.assertEqual(items.values(), {"v": "2.000"})

    def test_read_errors_are_shown_and_logged(self) -> None:
        def read_value(_node_id: str) -> object:
            raise ConnectionError("gone")

        items = MonitoredItems(read_value)
        items.monitor("v", "Var")
        with self.assertLogs("nodecommander.panels.monitored", level="WARNING"):
            items.sample(0.0)

        self.assertEqual(items.value_for("v"), "<gone>")

    def test_rows_show_name_node_id_and_value(self) -> None:
        space = demo_address_space()
        items = MonitoredItems.for_space(space)
        items.monitor("ns=1;s=Setpoint", "Setpoint")
        items.sample(0.0)

        rows = items.rows(80)

        self.assertEqual(len(rows), 1)
        self.assertTrue(rows[0].startswith("Setpoint"))
        self.assertIn("ns=1;s=Setpoint", rows[0])
        self.assertTrue(rows[0].endswith("21.500"))
        self.assertEqual(len(items.rows(10)[0]), 10)


class LogPaneTests(unittest.TestCase):
    def test_window_follows_tail_until_scrolled(self) -> None:
        pane = LogPane()
        for idx in range(10):
            pane.append(logging.INFO, f"line {idx}")

        self.assertEqual([text for _level, text in pane.window(3)], ["line 7", "line 8", "line 9"])
        self.assertTrue(pane.scroll(-2, 3))
        self.assertFalse(pane.follow_tail)
        self.assertEqual([text for _level, text in pane.window(3)], ["line 5", "line 6", "line 7"])

        pane.scroll(10, 3)
        self.assertTrue(pane.follow_tail)

    def test_capacity_and_clear(self) -> None:
        pane = LogPane(capacity=2)
        pane.append(logging.INFO, "a\nb\nc")

        self.assertEqual([text for _level, text in pane.lines()], ["b", "c"])
        version = pane.version
        pane.clear()
        self.assertEqual(pane.lines(), [])
        self.assertGreater(pane.version, version)

    def test_handler_routes_package_records_into_pane(self) -> None:
        pane = LogPane()
        handler = configure_logging(pane, logging.INFO)
        try:
            logging.getLogger("nodecommander.some.module").warning("browse failed: %s", "No Connection")
            logging.getLogger("nodecommander.some.module").debug("hidden")
        finally:
            remove_logging(handler)

        lines = pane.lines()
        self.assertEqual(len(lines), 1)
        self.assertEqual(lines[0][0], logging.WARNING)
        self.assertIn("WARNING - browse failed: No Connection", lines[0][1])
        self.assertIsInstance(handler, LogPaneHandler)
        self.assertTrue(logging.getLogger("nodecommander").propagate)


class MenuBarTests(unittest.TestCase):
    def test_menu_keys_map_to_actions(self) -> None:
        self.assertEqual(menu_action_for_key("m"), "monitor")
        self.assertEqual(menu_action_for_key("u"), "unmonitor")
        self.assertEqual(menu_action_for_key("ESC"), "exit")
        self.assertEqual(menu_action_for_key("CTRL_C"), "exit")
        self.assertEqual(menu_action_for_key("TAB"), "focus_next")
        self.assertIsNone(menu_action_for_key("j"))

    def test_menu_bar_fits_width_and_shows_status(self) -> None:
        line = menu_bar_line(120, PLAIN_THEME, status="cannot expand X")

        self.assertEqual(len(line), 120)
        self.assertIn("m Monitor", line)
        self.assertIn("q Exit", line)
        self.assertTrue(line.rstrip().endswith("cannot expand X"))
        self.assertEqual(len(menu_bar_line(20, PLAIN_THEME)), 20)


if __name__ == "__main__":
    unittest.main()
