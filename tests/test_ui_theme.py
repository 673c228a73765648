from __future__ import annotations

import dataclasses
import unittest

from trydir.ui_theme import (
    DEFAULT_THEME,
    OCEAN_THEME,
    PLAIN_THEME,
    available_theme_names,
    colors_enabled,
    normalize_theme_name,
    resolve_theme,
)


class ThemeResolutionTests(unittest.TestCase):
    def test_available_names_exclude_plain(self) -> None:
        self.assertEqual(available_theme_names(), ("default", "ocean"))

    def test_normalize_falls_back_to_default(self) -> None:
        self.assertEqual(normalize_theme_name(" Ocean "), "ocean")
        self.assertEqual(normalize_theme_name("nope"), "default")
        self.assertEqual(normalize_theme_name(None), "default")

    def test_resolve_theme(self) -> None:
        self.assertIs(resolve_theme("ocean"), OCEAN_THEME)
        self.assertIs(resolve_theme("unknown"), DEFAULT_THEME)
        self.assertIs(resolve_theme("ocean", no_color=True), PLAIN_THEME)


    def test_plain_theme_has_no_escape_codes(self) -> None:
        styles = [getattr(PLAIN_THEME, field.name) for field in dataclasses.fields(PLAIN_THEME) if field.name != "name"]
        self.assertEqual(set(styles), {""})


class ColorsEnabledTests(unittest.TestCase):
    def test_not_a_tty_disables_colors(self) -> None:
        self.assertFalse(colors_enabled(False, {"CLICOLOR_FORCE": "1"}))

    def test_no_color_wins_over_force(self) -> None:
        self.assertFalse(colors_enabled(True, {"NO_COLOR": "", "CLICOLOR_FORCE": "1"}))

    def test_clicolor_conventions(self) -> None:
        self.assertTrue(colors_enabled(True, {}))
        self.assertFalse(colors_enabled(True, {"CLICOLOR": "0"}))
        self.assertTrue(colors_enabled(True, {"CLICOLOR": "0", "CLICOLOR_FORCE": "1"}))


if __name__ == "__main__":
    unittest.main()
