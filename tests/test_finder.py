"""Tests for fzf detection and launch."""

from __future__ import annotations

import contextlib
import unittest
from pathlib import Path
from unittest import mock

from lazyfm import finder


class FinderTests(unittest.TestCase):
    def test_installed_checks_which_exit_status(self) -> None:
        with mock.patch("lazyfm.finder.exit_status", return_value=0) as status_mock:
            self.assertTrue(finder.finder_installed())
        status_mock.assert_called_once_with(["which", "fzf"])

        with mock.patch("lazyfm.finder.exit_status", return_value=1):
            self.assertFalse(finder.finder_installed())
        with mock.patch("lazyfm.finder.exit_status", return_value=None):
            self.assertFalse(finder.finder_installed())

    def test_choice_is_joined_to_root_inside_suspend(self) -> None:
        events: list[str] = []

        @contextlib.contextmanager
        def suspend():
            events.append("suspend")
            yield
            events.append("resume")

        with mock.patch("lazyfm.finder.run_interactive", return_value=(0, "src/main.py\n")) as run_mock:
            chosen = finder.run_finder(Path("/proj"), suspend)

        self.assertEqual(chosen, Path("/proj/src/main.py"))
        self.assertEqual(events, ["suspend", "resume"])
        run_mock.assert_called_once_with(["fzf"], cwd=Path("/proj"), capture_stdout=True)

    def test_cancelled_or_failed_finder_returns_none(self) -> None:
        with mock.patch("lazyfm.finder.run_interactive", return_value=(130, "")):
            self.assertIsNone(finder.run_finder(Path("/proj"), contextlib.nullcontext))
        with mock.patch("lazyfm.finder.run_interactive", side_effect=OSError("gone")):
            self.assertIsNone(finder.run_finder(Path("/proj"), contextlib.nullcontext))


if __name__ == "__main__":
    unittest.main()
