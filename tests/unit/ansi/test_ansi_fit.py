"""Tests for ANSI-aware width measurement and cell fitting."""

from __future__ import annotations

import unittest

from nodecommander.ansi import clip_ansi_line, display_width, fit_ansi_line, selected_with_ansi


class AnsiFitTests(unittest.TestCase):
    def test_display_width_ignores_escapes_and_counts_wide_chars(self) -> None:
        self.assertEqual(display_width("\033[32mab\033[0m"), 2)
        self.assertEqual(display_width("表x"), 3)
        self.assertEqual(display_width("é"), 1)

    def test_clip_keeps_escapes_and_stops_before_split_wide_char(self) -> None:
        self.assertEqual(clip_ansi_line("\033[32mabcdef\033[0m", 3), "\033[32mabc")
        self.assertEqual(clip_ansi_line("a表b", 2), "a")
        self.assertEqual(clip_ansi_line("abc", 0), "")

    def test_fit_pads_and_resets_styled_text(self) -> None:
        self.assertEqual(fit_ansi_line("ab", 4), "ab  ")
        self.assertEqual(fit_ansi_line("\033[31mabcdef", 3, "\033[0m"), "\033[31mabc\033[0m")

    def test_selection_survives_inner_resets(self) -> None:
        self.assertEqual(
            selected_with_ansi("\033[32ma\033[0mb"),
            "\033[7m\033[32ma\033[0;7mb\033[0m",
        )
        self.assertEqual(selected_with_ansi(""), "")


if __name__ == "__main__":
    unittest.main()
