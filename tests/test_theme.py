"""Tests for theme roles, color parsing and the ``Colors`` table loader."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from lazyfm.theme import DEFAULT_COLORS, Color, Theme, load_theme, parse_colors_table


class ColorTests(unittest.TestCase):
    def test_standard_names_are_case_and_underscore_insensitive(self) -> None:
        self.assertEqual(Color.parse("Dark_Gray"), Color(name="darkgray"))
        self.assertEqual(Color.parse("RED").fg(), "\033[91m")
        self.assertEqual(Color.parse("red").bg(), "\033[101m")

    def test_hex_colors_use_truecolor_sequences(self) -> None:
        color = Color.parse("#FF8000")

        self.assertEqual(color.rgb, (255, 128, 0))
        self.assertEqual(color.fg(), "\033[38;2;255;128;0m")
        self.assertEqual(color.bg(), "\033[48;2;255;128;0m")

    def test_invalid_values_raise(self) -> None:
        for value in ("#12345", "#GGGGGG", "chartreuse"):
            with self.assertRaises(ValueError):
                Color.parse(value)


class ThemeTests(unittest.TestCase):
    def test_defaults_and_unknown_role_fallback(self) -> None:
        theme = Theme()

        self.assertEqual(theme.get_color("ListDirectory"), DEFAULT_COLORS["ListDirectory"])
        self.assertEqual(theme.get_color("NoSuchRole"), Color(name="white"))

    def test_no_color_theme_emits_nothing(self) -> None:
        theme = Theme(no_color=True)

        self.assertEqual(theme.fg("ErrorFg"), "")
        self.assertEqual(theme.bg("ErrorBg"), "")
        self.assertEqual(theme.reset, "")


class ColorsTableTests(unittest.TestCase):
    def test_table_overrides_known_roles_only(self) -> None:
        script = """
        -- user palette
        local accent = "ignored"
        Colors = {
            ListDirectory = "#00FF00",  -- bright green
            ["ErrorBg"] = 'DarkRed';
            Bogus = "Blue",
            Footer = "not-a-color",
        }
        """

        overrides = parse_colors_table(script)

        self.assertEqual(overrides, {"ListDirectory": Color(rgb=(0, 255, 0)), "ErrorBg": Color(name="darkred")})

    def test_script_without_table_has_no_overrides(self) -> None:
        self.assertEqual(parse_colors_table("print('hi')"), {})

    def test_load_theme_applies_overrides_and_keeps_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            script = Path(tmp) / "colors.lua"
            script.write_text('Colors = { Border = "Cyan" }\n', encoding="utf-8")

            theme = load_theme(script)

        self.assertEqual(theme.get_color("Border"), Color(name="cyan"))
        self.assertEqual(theme.get_color("Footer"), DEFAULT_COLORS["Footer"])

    def test_missing_script_keeps_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            theme = load_theme(Path(tmp) / "absent.lua")

        self.assertEqual(theme.get_color("Border"), DEFAULT_COLORS["Border"])

    def test_no_color_ignores_script(self) -> None:
        self.assertTrue(load_theme(None, no_color=True).no_color)


if __name__ == "__main__":
    unittest.main()
