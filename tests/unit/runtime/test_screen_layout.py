"""Tests for pane geometry and frame composition."""

from __future__ import annotations

import logging
import unittest

from nodecommander.ansi import ANSI_ESCAPE_RE, display_width
from nodecommander.panels import LogPane
from nodecommander.runtime.screen import ScreenLayout, boxed_lines, clamp_left_width, log_lines, render_frame
from nodecommander.ui_theme import DEFAULT_THEME, PLAIN_THEME


class ScreenLayoutTests(unittest.TestCase):
    def test_panes_tile_the_screen(self) -> None:
        layout = ScreenLayout.compute(100, 40, 40.0)

        self.assertEqual(layout.tree.width, 40)
        self.assertEqual(layout.attributes.left, 40)
        self.assertEqual(layout.attributes.width, 60)
        self.assertEqual(layout.attributes.height + layout.monitored.height, layout.tree.height)
        self.assertEqual(layout.monitored.top, layout.attributes.height)
        self.assertEqual(layout.log.top, layout.tree.height)
        self.assertEqual(layout.log.top + layout.log.height, layout.menu_row)
        self.assertEqual(layout.menu_row, 39)

    def test_tree_geometry_is_one_based_interior(self) -> None:
        layout = ScreenLayout.compute(100, 40, 40.0)
        geometry = layout.tree_geometry()

        self.assertEqual(geometry.first_row, 2)
        self.assertEqual(geometry.first_col, 2)
        self.assertEqual(geometry.last_row - geometry.first_row + 1, layout.tree.inner_height)
        self.assertEqual(geometry.last_col - geometry.first_col + 1, layout.tree.inner_width)

    def test_left_width_is_clamped(self) -> None:
        self.assertEqual(clamp_left_width(100, 5), 20)
        self.assertEqual(clamp_left_width(100, 95), 88)

    def test_tiny_terminal_still_produces_layout(self) -> None:
        layout = ScreenLayout.compute(10, 5)

        self.assertGreaterEqual(layout.tree.inner_height, 1)
        self.assertGreaterEqual(layout.log.inner_height, 1)


class RenderFrameTests(unittest.TestCase):
    def test_boxed_lines_have_exact_width(self) -> None:
        layout = ScreenLayout.compute(80, 24)
        lines = boxed_lines(layout.tree, "Address Space", ["▼ Root", "x" * 200], DEFAULT_THEME)

        self.assertEqual(len(lines), layout.tree.height)
        for line in lines:
            self.assertEqual(display_width(line), layout.tree.width)

    def test_frame_rows_span_full_width(self) -> None:
        layout = ScreenLayout.compute(120, 24)

        frame = render_frame(
            layout,
            PLAIN_THEME,
            tree_lines=["▼ Root"],
            attribute_lines=["NodeId...: i=84"],
            monitored_lines=[],
            info_lines=["12:00:00 - INFO - hello"],
            status="ready",
        )

        rows = frame.removeprefix("\033[H").split("\r\n")
        self.assertEqual(len(rows), 24)
        for row in rows:
            self.assertEqual(display_width(ANSI_ESCAPE_RE.sub("", row)), 120)
        self.assertIn("Address Space", rows[0])
        self.assertIn("Attribute List", rows[0])
        self.assertIn("Monitored Items", rows[layout.monitored.top])
        self.assertIn("Info", rows[layout.log.top])
        self.assertIn("hello", frame)
        self.assertTrue(rows[-1].rstrip().endswith("ready"))

    def test_log_lines_color_by_level(self) -> None:
        pane = LogPane()
        pane.append(logging.INFO, "info")
        pane.append(logging.ERROR, "boom")

        lines = log_lines(pane, 5, DEFAULT_THEME)

        self.assertTrue(lines[0].startswith(DEFAULT_THEME.log_info))
        self.assertTrue(lines[1].startswith(DEFAULT_THEME.log_error))
        self.assertEqual(log_lines(pane, 5, PLAIN_THEME), ["info", "boom"])


if __name__ == "__main__":
    unittest.main()
