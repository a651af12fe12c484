"""Tests for archive command construction and tool failure handling."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path
from unittest import mock

from lazyfm.archiver import ArchiveError, archive_stem, compress, compress_command, extract, extract_command, is_archive


class CommandTests(unittest.TestCase):
    def test_extract_tool_follows_suffix(self) -> None:
        dest = Path("/out")

        self.assertEqual(extract_command(Path("a.zip"), dest), ["unzip", "a.zip", "-d", "/out"])
        self.assertEqual(extract_command(Path("a.7z"), dest), ["7z", "x", "a.7z", "-o/out"])
        self.assertEqual(extract_command(Path("a.RAR"), dest), ["7z", "x", "a.RAR", "-o/out"])
        self.assertEqual(extract_command(Path("a.tar.gz"), dest), ["tar", "-xf", "a.tar.gz", "-C", "/out"])
        self.assertEqual(extract_command(Path("a.tgz"), dest), ["tar", "-xf", "a.tgz", "-C", "/out"])
        self.assertEqual(extract_command(Path("a.gz"), dest), ["7z", "x", "a.gz", "-o/out"])

    def test_compress_tool_follows_destination_suffix(self) -> None:
        sources = ["a", "b"]

        self.assertEqual(compress_command(sources, Path("o.tar.gz")), ["tar", "-czf", "o.tar.gz", "a", "b"])
        self.assertEqual(compress_command(sources, Path("o.txz")), ["tar", "-cJf", "o.txz", "a", "b"])
        self.assertEqual(compress_command(sources, Path("o.tar")), ["tar", "-cf", "o.tar", "a", "b"])
        self.assertEqual(compress_command(sources, Path("o.7z")), ["7z", "a", "o.7z", "a", "b"])
        self.assertEqual(compress_command(sources, Path("o.zip")), ["zip", "-r", "o.zip", "a", "b"])
        self.assertEqual(compress_command(sources, Path("o.backup")), ["zip", "-r", "o.backup", "a", "b"])

    def test_archive_names(self) -> None:
        self.assertTrue(is_archive("Photos.TAR.GZ"))
        self.assertFalse(is_archive("notes.txt"))
        self.assertEqual(archive_stem("photos.tar.gz"), "photos")
        self.assertEqual(archive_stem("bundle.zip"), "bundle")
        self.assertEqual(archive_stem("log.gz"), "log")


class RunTests(unittest.TestCase):
    def test_extract_creates_destination_and_runs_tool(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            archive = Path(tmp) / "a.zip"
            dest = Path(tmp) / "a"

            with mock.patch("lazyfm.archiver.run_interactive", return_value=(0, "")) as run_mock:
                extract(archive, dest)

            self.assertTrue(dest.is_dir())
            run_mock.assert_called_once_with(["unzip", str(archive), "-d", str(dest)], cwd=None)

    def test_missing_tool_raises_archive_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with mock.patch("lazyfm.archiver.run_interactive", side_effect=FileNotFoundError(2, "No such file")):
                with self.assertRaisesRegex(ArchiveError, "'unzip' is not available"):
                    extract(Path(tmp) / "a.zip", Path(tmp) / "a")

    def test_non_zero_exit_raises_archive_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with mock.patch("lazyfm.archiver.run_interactive", return_value=(2, "")):
                with self.assertRaisesRegex(ArchiveError, "tar exited with status 2"):
                    extract(Path(tmp) / "a.tar", Path(tmp) / "a")

    def test_compress_passes_relative_sources(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            dest = root / "out.tar.gz"

            with mock.patch("lazyfm.archiver.run_interactive", return_value=(0, "")) as run_mock:
                compress([root / "a", root / "sub" / "b"], dest)

            run_mock.assert_called_once_with(["tar", "-czf", str(dest), "a", "sub/b"], cwd=root)

    def test_compress_requires_sources(self) -> None:
        with self.assertRaises(ArchiveError):
            compress([], Path("/tmp/out.zip"))


if __name__ == "__main__":
    unittest.main()
